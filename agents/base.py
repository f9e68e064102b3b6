"""
Base Agent Classes for ClipFlow Studio

Provides a base class that extends the Strands SDK Agent so workflow
agents can be orchestrated by Strands or called directly.
"""

from typing import Optional

from strands import Agent

from core.providers.base import TextProvider


class StudioAgent(Agent):
    """
    Base class for all ClipFlow Studio agents.

    Extends strands.Agent to provide:
    - A shared text-generation provider
    - Formatting helpers for prompts and logs

    Agents expose their orchestration entry points with @tool decorators.
    """

    def __init__(self, text_provider: Optional[TextProvider] = None, **kwargs):
        """
        Initialize studio agent.

        Args:
            text_provider: Text generation capability (None for agents that need none)
            **kwargs: Additional arguments passed to strands.Agent
        """
        super().__init__(**kwargs)
        self.text_provider = text_provider

    def _format_duration(self, seconds: float) -> str:
        """Format duration in seconds to readable string"""
        if seconds < 60:
            return f"{seconds:.1f}s"
        minutes = int(seconds // 60)
        secs = seconds % 60
        return f"{minutes}m {secs:.1f}s"
