"""
Claude Client Wrapper - thin async layer over the Anthropic SDK
"""

import logging
from typing import Optional

from anthropic import AsyncAnthropic

from core.secrets import get_api_key

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class ClaudeClient:
    """
    Wrapper around the Anthropic messages API that returns plain text.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 2048,
        debug: bool = False
    ):
        self.model = model
        self.max_tokens = max_tokens
        self.debug = debug
        api_key = api_key or get_api_key("ANTHROPIC_API_KEY")
        if not api_key:
            raise ValueError(
                "ANTHROPIC_API_KEY not set. Store it with `clipflow secrets set ANTHROPIC_API_KEY` "
                "or run with --mock"
            )
        self._client = AsyncAnthropic(api_key=api_key)

    async def query(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        model: Optional[str] = None
    ) -> str:
        """
        Send a query to Claude and get back clean text response

        Args:
            prompt: The user prompt
            system_prompt: Optional system prompt
            model: Model id overriding the client default

        Returns:
            Response text with surrounding whitespace removed
        """
        if self.debug:
            logger.debug(f"Sending prompt ({len(prompt)} chars)")

        kwargs = {}
        if system_prompt:
            kwargs["system"] = system_prompt

        response = await self._client.messages.create(
            model=model or self.model,
            max_tokens=self.max_tokens,
            messages=[{"role": "user", "content": prompt}],
            **kwargs,
        )
        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )

        if self.debug:
            logger.debug(f"Received response ({len(text)} chars)")

        return text.strip()
