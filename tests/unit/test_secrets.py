"""Unit tests for API key lookup"""

import pytest
from unittest.mock import patch

from keyring.errors import KeyringError

from core.secrets import get_api_key, list_api_keys, mask_key


@pytest.fixture
def empty_keychain(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("CLIPFLOW_ANTHROPIC_API_KEY", raising=False)
    with patch("core.secrets.keyring.get_password", return_value=None):
        yield


class TestGetApiKey:

    def test_keychain_wins(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "from-env")
        with patch("core.secrets.keyring.get_password", return_value="from-keychain"):
            assert get_api_key("ANTHROPIC_API_KEY") == "from-keychain"

    def test_plain_env_var(self, empty_keychain, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "plain")
        assert get_api_key("ANTHROPIC_API_KEY") == "plain"

    def test_prefixed_env_var(self, empty_keychain, monkeypatch):
        monkeypatch.setenv("CLIPFLOW_ANTHROPIC_API_KEY", "prefixed")
        assert get_api_key("ANTHROPIC_API_KEY") == "prefixed"

    def test_env_fallback_disabled(self, empty_keychain, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "plain")
        assert get_api_key("ANTHROPIC_API_KEY", fallback_to_env=False) is None

    def test_keychain_error_falls_back(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "plain")
        with patch("core.secrets.keyring.get_password", side_effect=KeyringError("locked")):
            assert get_api_key("ANTHROPIC_API_KEY") == "plain"


class TestListApiKeys:

    def test_not_set(self, empty_keychain):
        assert list_api_keys()["ANTHROPIC_API_KEY"] == {"source": "not_set", "preview": "-"}

    def test_env_preview_masked(self, empty_keychain, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-1234567890")
        entry = list_api_keys()["ANTHROPIC_API_KEY"]
        assert entry == {"source": "env", "preview": "sk-a...7890"}


def test_mask_key():
    assert mask_key(None) == "-"
    assert mask_key("short") == "***"
    assert mask_key("sk-ant-abcdefgh") == "sk-a...efgh"
