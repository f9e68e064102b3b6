"""Provider interfaces for external capabilities (vision, text, media)"""

from .base import (
    ProviderType,
    ProviderConfig,
    VisionProvider,
    TextProvider,
    MediaProvider,
)
from .mock import MockVisionProvider, MockTextProvider, MockMediaProvider
from .claude import ClaudeTextProvider

__all__ = [
    "ProviderType",
    "ProviderConfig",
    "VisionProvider",
    "TextProvider",
    "MediaProvider",
    "MockVisionProvider",
    "MockTextProvider",
    "MockMediaProvider",
    "ClaudeTextProvider",
]
