"""Unit tests for the live text provider wrapper"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from core.models.script import AIModelRef
from core.providers.base import ProviderConfig, ProviderType
from core.providers.claude import ClaudeTextProvider, SYSTEM_PROMPT


def test_config_repr_masks_key():
    config = ProviderConfig(provider_type=ProviderType.ANTHROPIC, api_key="sk-ant-1234567890")
    assert "sk-ant-1234567890" not in repr(config)
    assert "sk-a...7890" in repr(config)


@pytest.mark.asyncio
async def test_generate_text_uses_model_and_system_prompt():
    client = MagicMock()
    client.query = AsyncMock(return_value="Narration.")
    provider = ClaudeTextProvider(client=client)

    text = await provider.generate_text(AIModelRef(id="claude-test"), "Write the hook")

    assert text == "Narration."
    client.query.assert_awaited_once_with(
        "Write the hook", system_prompt=SYSTEM_PROMPT, model="claude-test"
    )
    assert provider.config.provider_type == ProviderType.ANTHROPIC
