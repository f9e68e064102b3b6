"""Claude-backed text generation"""

import logging
from typing import Optional

from core.claude_client import ClaudeClient
from core.models.script import AIModelRef
from .base import ProviderConfig, ProviderType, TextProvider

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You write narration for edited videos. Reply with the narration text only, "
    "with no headings, labels or commentary."
)


class ClaudeTextProvider(TextProvider):
    """Text provider on the Anthropic messages API"""

    def __init__(self, config: Optional[ProviderConfig] = None, client: Optional[ClaudeClient] = None):
        self.config = config or ProviderConfig(provider_type=ProviderType.ANTHROPIC)
        self.client = client or ClaudeClient(api_key=self.config.api_key)

    async def generate_text(self, model: AIModelRef, prompt: str) -> str:
        logger.debug(f"Generating text with {model.id}")
        return await self.client.query(prompt, system_prompt=SYSTEM_PROMPT, model=model.id)
