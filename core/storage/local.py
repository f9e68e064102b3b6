"""
Local JSON file storage backend.

Each key is stored as one JSON file under the base path:
    artifacts/storage/project-proj_1.json
    artifacts/storage/export-history.json
    artifacts/storage/srt-proj_1.json

Writes are serialized per key with asyncio locks. Files carry the original
key so keys() can list them without reversing the filename mapping.
"""

import asyncio
import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class LocalStorage(StorageBackend):
    """
    Local file-based storage using one JSON file per key.

    Safe for concurrent coroutines via per-key asyncio locks.
    """

    def __init__(self, base_path: str = "artifacts/storage"):
        """
        Initialize local storage.

        Args:
            base_path: Directory holding the JSON files
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._locks: Dict[str, asyncio.Lock] = {}

    def _get_lock(self, key: str) -> asyncio.Lock:
        """Get or create a lock for a key"""
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    def _key_to_path(self, key: str) -> Path:
        safe = re.sub(r"[^A-Za-z0-9._-]", "_", key.strip("/"))
        return self.base_path / f"{safe}.json"

    async def _load(self, key: str) -> Optional[Any]:
        file_path = self._key_to_path(key)
        if not file_path.exists():
            return None

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Error loading {file_path}: {e}")
            return None
        return data.get("value") if isinstance(data, dict) else None

    async def _store(self, key: str, value: Any):
        file_path = self._key_to_path(key)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "key": key,
            "updated_at": datetime.utcnow().isoformat(),
            "value": value,
        }
        # write-then-rename
        tmp_path = file_path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False, default=str)
        tmp_path.replace(file_path)

    async def get(self, key: str) -> Optional[Any]:
        return await self._load(key)

    async def save(self, key: str, value: Any):
        async with self._get_lock(key):
            await self._store(key, value)

    async def add(self, key: str, item: Any):
        async with self._get_lock(key):
            items = await self._load(key)
            if items is None:
                items = []
            if not isinstance(items, list):
                raise TypeError(f"Key {key} does not hold a collection")
            items.append(item)
            await self._store(key, items)

    async def list(self, key: str) -> List[Any]:
        items = await self._load(key)
        return items if isinstance(items, list) else []

    async def keys(self, prefix: str = "") -> List[str]:
        found = []
        for file_path in self.base_path.glob("*.json"):
            try:
                with open(file_path, "r", encoding="utf-8") as f:
                    key = json.load(f).get("key")
            except (json.JSONDecodeError, AttributeError) as e:
                logger.warning(f"Skipping unreadable storage file {file_path}: {e}")
                continue
            if key and key.startswith(prefix):
                found.append(key)
        return sorted(found)

    async def delete(self, key: str) -> bool:
        async with self._get_lock(key):
            file_path = self._key_to_path(key)
            if not file_path.exists():
                return False
            file_path.unlink()
            return True
