"""
Tests for storage backends

Covers the synchronous in-memory and SQLite backends and the async adapter
used by the repositories.
"""

import pytest
import pytest_asyncio

from account_service.storage import InMemoryStorage, SQLiteStorage
from account_service.async_storage import (
    AsyncInMemoryStorage, ThreadedAsyncStorage, create_async_storage
)


@pytest.fixture(params=["memory", "sqlite"])
def storage(request):
    """Each sync backend in turn"""
    if request.param == "memory":
        backend = InMemoryStorage()
    else:
        backend = SQLiteStorage(":memory:")
    yield backend
    backend.close()


class TestSyncStorage:
    """Behaviour shared by all sync backends"""

    def test_save_and_load(self, storage):
        """Test saving and loading a record"""
        data = {"id": "acc-1", "customer_id": "cust-1", "balance": "100.00"}
        storage.save("accounts", "acc-1", data)

        assert storage.load("accounts", "acc-1") == data
        assert storage.load("accounts", "missing") is None

    def test_save_overwrites(self, storage):
        """Test saving the same id twice replaces the record"""
        storage.save("accounts", "acc-1", {"id": "acc-1", "balance": "100.00"})
        storage.save("accounts", "acc-1", {"id": "acc-1", "balance": "50.00"})

        assert storage.load("accounts", "acc-1")["balance"] == "50.00"
        assert storage.count("accounts") == 1

    def test_loaded_records_are_copies(self, storage):
        """Test mutating a loaded record does not touch storage"""
        storage.save("accounts", "acc-1", {"id": "acc-1", "holders": ["a"]})

        loaded = storage.load("accounts", "acc-1")
        loaded["holders"].append("b")

        assert storage.load("accounts", "acc-1")["holders"] == ["a"]

    def test_find_keeps_insertion_order(self, storage):
        """Test find returns matches oldest first, even after updates"""
        storage.save("accounts", "b", {"id": "b", "customer_id": "cust-1"})
        storage.save("accounts", "a", {"id": "a", "customer_id": "cust-1"})
        storage.save("accounts", "c", {"id": "c", "customer_id": "cust-2"})
        storage.save("accounts", "b", {"id": "b", "customer_id": "cust-1", "balance": "1"})

        found = storage.find("accounts", {"customer_id": "cust-1"})

        assert [r["id"] for r in found] == ["b", "a"]
        assert [r["id"] for r in storage.load_all("accounts")] == ["b", "a", "c"]

    def test_find_with_multiple_filters(self, storage):
        """Test all filters must match"""
        storage.save("accounts", "a", {"id": "a", "customer_id": "c1", "account_type": "AHORRO"})
        storage.save("accounts", "b", {"id": "b", "customer_id": "c1", "account_type": "CORRIENTE"})

        found = storage.find("accounts", {"customer_id": "c1", "account_type": "CORRIENTE"})

        assert [r["id"] for r in found] == ["b"]
        assert storage.find("accounts", {"customer_id": "nobody"}) == []

    def test_delete(self, storage):
        """Test deleting a record"""
        storage.save("accounts", "acc-1", {"id": "acc-1"})

        assert storage.delete("accounts", "acc-1") is True
        assert storage.delete("accounts", "acc-1") is False
        assert storage.load("accounts", "acc-1") is None

    def test_clear_table(self, storage):
        """Test clearing a table leaves other tables alone"""
        storage.save("accounts", "a", {"id": "a"})
        storage.save("transactions", "t", {"id": "t"})

        storage.clear_table("accounts")

        assert storage.count("accounts") == 0
        assert storage.count("transactions") == 1


class TestSQLiteStorage:
    """SQLite specific behaviour"""

    def test_persists_across_connections(self, tmp_path):
        """Test records survive reopening the database file"""
        db_path = tmp_path / "accounts.db"
        first = SQLiteStorage(db_path)
        first.save("accounts", "acc-1", {"id": "acc-1", "balance": "10.00"})
        first.close()

        second = SQLiteStorage(db_path)
        try:
            assert second.load("accounts", "acc-1") == {"id": "acc-1", "balance": "10.00"}
        finally:
            second.close()


class TestAsyncStorage:
    """Test the async adapter"""

    @pytest_asyncio.fixture
    async def async_storage(self):
        return AsyncInMemoryStorage()

    @pytest.mark.asyncio
    async def test_basic_crud_operations(self, async_storage):
        """Test CRUD through the async interface"""
        data = {"id": "acc-1", "customer_id": "cust-1"}

        await async_storage.save("accounts", "acc-1", data)
        assert await async_storage.load("accounts", "acc-1") == data
        assert await async_storage.count("accounts") == 1
        assert await async_storage.find("accounts", {"customer_id": "cust-1"}) == [data]
        assert await async_storage.load_all("accounts") == [data]

        assert await async_storage.delete("accounts", "acc-1") is True
        assert await async_storage.load("accounts", "acc-1") is None

    @pytest.mark.asyncio
    async def test_wraps_any_backend(self):
        """Test the adapter drives a SQLite backend too"""
        async_storage = ThreadedAsyncStorage(SQLiteStorage(":memory:"))

        await async_storage.save("accounts", "acc-1", {"id": "acc-1"})
        assert await async_storage.load("accounts", "acc-1") == {"id": "acc-1"}

        await async_storage.clear_table("accounts")
        assert await async_storage.count("accounts") == 0
        await async_storage.close()

    def test_factory(self, tmp_path):
        """Test the factory picks the configured backend"""
        assert isinstance(create_async_storage("memory").backend, InMemoryStorage)

        sqlite_storage = create_async_storage("sqlite", str(tmp_path / "x.db"))
        assert isinstance(sqlite_storage.backend, SQLiteStorage)
        sqlite_storage.backend.close()

        with pytest.raises(ValueError):
            create_async_storage("mongo")
