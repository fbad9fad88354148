"""
API Scaffold — In-Memory Store Tests
=====================================

What:  Tests for MemoryStore CRUD, filtering and timestamp handling.
Why:   The example modules rely on these guarantees: server-owned fields
       cannot be overwritten and updated_at always moves forward.
"""

from datetime import datetime, timezone
from uuid import UUID, uuid4

import pytest

from apiscaffold.storage import MemoryStore, Store


@pytest.fixture
def store():
    return MemoryStore("todos")


class TestStoreInterface:
    def test_store_is_abstract(self):
        """Store only defines the interface."""
        with pytest.raises(TypeError):
            Store()

    def test_memory_store_is_a_store(self, store):
        assert isinstance(store, Store)


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, store):
        record = await store.create({"title": "a"})
        assert UUID(record["id"]).version == 4
        assert record["created_at"] == record["updated_at"]
        assert record["created_at"].tzinfo is not None
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_create_ignores_client_id(self, store):
        record = await store.create({"id": "chosen-by-client", "title": "a"})
        assert record["id"] != "chosen-by-client"

    @pytest.mark.asyncio
    async def test_returned_record_is_a_copy(self, store):
        record = await store.create({"title": "a"})
        record["title"] = "mutated"
        assert (await store.get(record["id"]))["title"] == "a"


class TestGet:
    @pytest.mark.asyncio
    async def test_get_by_string_or_uuid(self, store):
        record = await store.create({"title": "a"})
        assert (await store.get(record["id"]))["title"] == "a"
        assert (await store.get(UUID(record["id"])))["title"] == "a"

    @pytest.mark.asyncio
    async def test_get_unknown_returns_none(self, store):
        assert await store.get(uuid4()) is None


class TestUpdate:
    @pytest.mark.asyncio
    async def test_update_merges_fields(self, store):
        record = await store.create({"title": "a", "completed": False})
        updated = await store.update(record["id"], {"completed": True})
        assert updated["completed"] is True
        assert updated["title"] == "a"
        assert updated["created_at"] == record["created_at"]

    @pytest.mark.asyncio
    async def test_update_cannot_touch_server_fields(self, store):
        record = await store.create({"title": "a"})
        epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
        updated = await store.update(
            record["id"], {"id": "other", "created_at": epoch, "updated_at": epoch}
        )
        assert updated["id"] == record["id"]
        assert updated["created_at"] == record["created_at"]
        assert updated["updated_at"] > record["updated_at"]

    @pytest.mark.asyncio
    async def test_updated_at_strictly_increases_within_one_tick(self, store, monkeypatch):
        """A frozen clock still yields a later updated_at."""
        frozen = datetime(2026, 1, 1, tzinfo=timezone.utc)
        monkeypatch.setattr("apiscaffold.storage.memory.utcnow", lambda: frozen)

        record = await store.create({"title": "a"})
        first = await store.update(record["id"], {"title": "b"})
        second = await store.update(record["id"], {"title": "c"})
        assert record["updated_at"] < first["updated_at"] < second["updated_at"]

    @pytest.mark.asyncio
    async def test_update_unknown_returns_none(self, store):
        assert await store.update(uuid4(), {"title": "x"}) is None


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_removes_record(self, store):
        record = await store.create({"title": "a"})
        assert await store.delete(record["id"]) is True
        assert await store.get(record["id"]) is None
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_delete_unknown_returns_false(self, store):
        assert await store.delete(uuid4()) is False


class TestList:
    @pytest.mark.asyncio
    async def test_list_all(self, store):
        await store.create({"title": "a"})
        await store.create({"title": "b"})
        assert sorted(r["title"] for r in await store.list()) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_list_filters(self, store):
        owner = uuid4()
        await store.create({"title": "a", "completed": True, "user_id": owner})
        await store.create({"title": "b", "completed": False, "user_id": owner})
        await store.create({"title": "c", "completed": True, "user_id": uuid4()})

        done = await store.list(completed=True)
        assert sorted(r["title"] for r in done) == ["a", "c"]

        mine = await store.list(completed=True, user_id=str(owner))
        assert [r["title"] for r in mine] == ["a"]

    @pytest.mark.asyncio
    async def test_none_filters_are_ignored(self, store):
        await store.create({"title": "a", "completed": True})
        assert len(await store.list(completed=None)) == 1

    @pytest.mark.asyncio
    async def test_bool_filter_does_not_match_text(self, store):
        await store.create({"title": "a", "completed": "True"})
        assert await store.list(completed=True) == []

    @pytest.mark.asyncio
    async def test_clear(self, store):
        await store.create({"title": "a"})
        store.clear()
        assert await store.list() == []
