"""Storage backends"""

from core.storage.base import StorageBackend
from core.storage.memory import InMemoryStorage
from core.storage.local import LocalStorage

__all__ = [
    "StorageBackend",
    "InMemoryStorage",
    "LocalStorage",
]
