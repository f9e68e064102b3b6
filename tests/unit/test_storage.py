"""Unit tests for storage backends"""

import asyncio
import json

import pytest

from core.storage import InMemoryStorage, LocalStorage


@pytest.fixture(params=["memory", "local"])
def backend(request, tmp_path):
    if request.param == "memory":
        return InMemoryStorage()
    return LocalStorage(str(tmp_path / "storage"))


class TestBackendContract:

    @pytest.mark.asyncio
    async def test_get_missing(self, backend):
        assert await backend.get("nope") is None

    @pytest.mark.asyncio
    async def test_save_and_get(self, backend):
        await backend.save("project-a", {"id": "a", "scripts": []})
        assert await backend.get("project-a") == {"id": "a", "scripts": []}

    @pytest.mark.asyncio
    async def test_save_replaces(self, backend):
        await backend.save("k", {"v": 1})
        await backend.save("k", {"v": 2})
        assert await backend.get("k") == {"v": 2}

    @pytest.mark.asyncio
    async def test_add_and_list(self, backend):
        await backend.add("export-history", {"id": 1})
        await backend.add("export-history", {"id": 2})
        assert await backend.list("export-history") == [{"id": 1}, {"id": 2}]

    @pytest.mark.asyncio
    async def test_list_missing_is_empty(self, backend):
        assert await backend.list("nothing") == []

    @pytest.mark.asyncio
    async def test_add_to_non_collection(self, backend):
        await backend.save("k", {"v": 1})
        with pytest.raises(TypeError):
            await backend.add("k", {"v": 2})

    @pytest.mark.asyncio
    async def test_keys_with_prefix(self, backend):
        await backend.save("project-b", {})
        await backend.save("project-a", {})
        await backend.save("srt-a", "1\n")
        assert await backend.keys("project-") == ["project-a", "project-b"]

    @pytest.mark.asyncio
    async def test_delete(self, backend):
        await backend.save("k", "value")
        assert await backend.delete("k") is True
        assert await backend.delete("k") is False
        assert await backend.get("k") is None

    @pytest.mark.asyncio
    async def test_concurrent_adds_not_lost(self, backend):
        await asyncio.gather(*(backend.add("items", i) for i in range(20)))
        assert sorted(await backend.list("items")) == list(range(20))


class TestInMemoryStorage:

    @pytest.mark.asyncio
    async def test_values_are_copied(self):
        storage = InMemoryStorage()
        value = {"scripts": []}
        await storage.save("k", value)
        value["scripts"].append("mutated")

        loaded = await storage.get("k")
        assert loaded == {"scripts": []}
        loaded["scripts"].append("mutated again")
        assert await storage.get("k") == {"scripts": []}


class TestLocalStorage:

    @pytest.mark.asyncio
    async def test_file_layout(self, tmp_path):
        storage = LocalStorage(str(tmp_path))
        await storage.save("project-demo", {"id": "demo"})

        data = json.loads((tmp_path / "project-demo.json").read_text(encoding="utf-8"))
        assert data["key"] == "project-demo"
        assert data["value"] == {"id": "demo"}
        assert "updated_at" in data
        assert not list(tmp_path.glob("*.tmp"))

    @pytest.mark.asyncio
    async def test_unsafe_key_sanitized(self, tmp_path):
        storage = LocalStorage(str(tmp_path))
        await storage.save("../escape/key", "x")
        assert (tmp_path / ".._escape_key.json").exists()
        assert await storage.keys() == ["../escape/key"]

    @pytest.mark.asyncio
    async def test_corrupt_file_reads_as_missing(self, tmp_path):
        storage = LocalStorage(str(tmp_path))
        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
        assert await storage.get("broken") is None
        assert await storage.keys() == []

    @pytest.mark.asyncio
    async def test_unicode_round_trip(self, tmp_path):
        storage = LocalStorage(str(tmp_path))
        await storage.save("srt-zh", "1\n00:00:00,000 --> 00:00:05,000\n你好\n")
        assert "你好" in await storage.get("srt-zh")
