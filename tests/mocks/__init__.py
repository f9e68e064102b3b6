"""Test mocks and factories"""

from .text_provider import ScriptedTextProvider

__all__ = ["ScriptedTextProvider"]
