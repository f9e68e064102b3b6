"""In-process storage backend for tests and mock runs"""

import asyncio
import copy
from typing import Any, Dict, List, Optional

from core.storage.base import StorageBackend


class InMemoryStorage(StorageBackend):
    """
    Dict-backed storage.

    Values are deep-copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(self):
        self._data: Dict[str, Any] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self._data.get(key))

    async def save(self, key: str, value: Any):
        async with self._lock:
            self._data[key] = copy.deepcopy(value)

    async def add(self, key: str, item: Any):
        async with self._lock:
            items = self._data.setdefault(key, [])
            if not isinstance(items, list):
                raise TypeError(f"Key {key} does not hold a collection")
            items.append(copy.deepcopy(item))

    async def list(self, key: str) -> List[Any]:
        items = self._data.get(key)
        return copy.deepcopy(items) if isinstance(items, list) else []

    async def keys(self, prefix: str = "") -> List[str]:
        return sorted(k for k in self._data if k.startswith(prefix))

    async def delete(self, key: str) -> bool:
        async with self._lock:
            if key not in self._data:
                return False
            del self._data[key]
            return True
