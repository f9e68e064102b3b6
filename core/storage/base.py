"""
Abstract base class for key-value storage backends.

Values are JSON-compatible (dicts, lists, strings, numbers). Collections
are lists stored under a key and only ever appended to via add().
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional


class StorageBackend(ABC):
    """Async key-value store used for projects, subtitles and export history"""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the value stored under key, or None"""
        pass

    @abstractmethod
    async def save(self, key: str, value: Any):
        """Store value under key, replacing any previous value"""
        pass

    @abstractmethod
    async def add(self, key: str, item: Any):
        """Append item to the collection stored under key"""
        pass

    @abstractmethod
    async def list(self, key: str) -> List[Any]:
        """Items of the collection stored under key (empty if missing)"""
        pass

    @abstractmethod
    async def keys(self, prefix: str = "") -> List[str]:
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove key; returns False if it did not exist"""
        pass
