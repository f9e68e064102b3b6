"""
API keys for live providers.

Keys are looked up in the OS keychain first, then in the environment under
either their plain name or the CLIPFLOW_ prefixed name used by the rest of
the settings (ANTHROPIC_API_KEY or CLIPFLOW_ANTHROPIC_API_KEY).

Usage:
    from core.secrets import get_api_key, set_api_key

    key = get_api_key("ANTHROPIC_API_KEY")
    set_api_key("ANTHROPIC_API_KEY", "sk-ant-...")
"""

import logging
import os
from typing import Dict, List, Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

logger = logging.getLogger(__name__)

SERVICE_NAME = "clipflow-studio"
ENV_PREFIX = "CLIPFLOW_"

# Known API key names and what they are used for
KNOWN_KEYS = {
    "ANTHROPIC_API_KEY": "Anthropic API key (script generation)",
}


def env_names(key_name: str) -> List[str]:
    return [key_name, f"{ENV_PREFIX}{key_name}"]


def mask_key(value: Optional[str]) -> str:
    """Short preview of a key that is safe to print"""
    if not value:
        return "-"
    if len(value) <= 8:
        return "***"
    return f"{value[:4]}...{value[-4:]}"


def _from_keychain(key_name: str) -> Optional[str]:
    try:
        return keyring.get_password(SERVICE_NAME, key_name)
    except KeyringError as e:
        logger.debug(f"Keychain access failed for {key_name}: {e}")
        return None


def _from_env(key_name: str) -> Optional[str]:
    for name in env_names(key_name):
        value = os.environ.get(name)
        if value:
            return value
    return None


def get_api_key(key_name: str, fallback_to_env: bool = True) -> Optional[str]:
    """
    Get an API key from the keychain, or from the environment.

    Args:
        key_name: Name of the API key (e.g., "ANTHROPIC_API_KEY")
        fallback_to_env: Also check the plain and CLIPFLOW_ prefixed env vars

    Returns:
        The API key value, or None if not found
    """
    value = _from_keychain(key_name)
    if value:
        logger.debug(f"Using {key_name} from keychain")
        return value
    if fallback_to_env:
        value = _from_env(key_name)
        if value:
            logger.debug(f"Using {key_name} from environment")
            return value
    return None


def set_api_key(key_name: str, value: str) -> bool:
    try:
        keyring.set_password(SERVICE_NAME, key_name, value)
    except KeyringError as e:
        logger.error(f"Failed to store {key_name} in keychain: {e}")
        return False
    logger.info(f"Stored {key_name} in keychain")
    return True


def delete_api_key(key_name: str) -> bool:
    try:
        keyring.delete_password(SERVICE_NAME, key_name)
    except PasswordDeleteError:
        logger.warning(f"{key_name} not found in keychain")
        return False
    except KeyringError as e:
        logger.error(f"Failed to delete {key_name} from keychain: {e}")
        return False
    logger.info(f"Deleted {key_name} from keychain")
    return True


def list_api_keys() -> Dict[str, Dict[str, str]]:
    """
    Source and masked preview of every known key.

    Returns:
        {key_name: {"source": "keychain" | "env" | "not_set", "preview": str}}
    """
    status = {}
    for key_name in KNOWN_KEYS:
        value = _from_keychain(key_name)
        source = "keychain"
        if not value:
            value = _from_env(key_name)
            source = "env" if value else "not_set"
        status[key_name] = {"source": source, "preview": mask_key(value)}
    return status
