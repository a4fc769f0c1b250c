"""
Async Storage Backend Module

Provides the async storage interface used by the repositories, and an
adapter that runs any synchronous storage backend in a worker thread so
the event loop is never blocked.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Any
import asyncio

from .storage import StorageInterface, InMemoryStorage, SQLiteStorage


class AsyncStorageInterface(ABC):
    """Abstract interface for async storage backends"""

    @abstractmethod
    async def save(self, table: str, record_id: str, data: Dict[str, Any]) -> None:
        """Save a record to storage"""
        pass

    @abstractmethod
    async def load(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        """Load a record from storage"""
        pass

    @abstractmethod
    async def load_all(self, table: str) -> List[Dict[str, Any]]:
        """Load all records from a table"""
        pass

    @abstractmethod
    async def delete(self, table: str, record_id: str) -> bool:
        """Delete a record from storage"""
        pass

    @abstractmethod
    async def find(self, table: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Find records matching filters"""
        pass

    @abstractmethod
    async def count(self, table: str) -> int:
        """Count records in table"""
        pass

    @abstractmethod
    async def clear_table(self, table: str) -> None:
        """Clear all records from a table"""
        pass

    async def close(self) -> None:
        """Close storage connection (default no-op)"""
        pass


class ThreadedAsyncStorage(AsyncStorageInterface):
    """Async wrapper that runs a synchronous backend in a worker thread"""

    def __init__(self, sync_storage: StorageInterface):
        self._sync_storage = sync_storage

    @property
    def backend(self) -> StorageInterface:
        return self._sync_storage

    async def save(self, table: str, record_id: str, data: Dict[str, Any]) -> None:
        await asyncio.to_thread(self._sync_storage.save, table, record_id, data)

    async def load(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        return await asyncio.to_thread(self._sync_storage.load, table, record_id)

    async def load_all(self, table: str) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._sync_storage.load_all, table)

    async def delete(self, table: str, record_id: str) -> bool:
        return await asyncio.to_thread(self._sync_storage.delete, table, record_id)

    async def find(self, table: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._sync_storage.find, table, filters)

    async def count(self, table: str) -> int:
        return await asyncio.to_thread(self._sync_storage.count, table)

    async def clear_table(self, table: str) -> None:
        await asyncio.to_thread(self._sync_storage.clear_table, table)

    async def close(self) -> None:
        await asyncio.to_thread(self._sync_storage.close)


class AsyncInMemoryStorage(ThreadedAsyncStorage):
    """Async in-memory storage for tests and local runs"""

    def __init__(self):
        super().__init__(InMemoryStorage())


def create_async_storage(
    storage_backend: str = "memory",
    database_path: str = ":memory:"
) -> AsyncStorageInterface:
    """Factory function to create async storage instances"""
    if storage_backend.lower() == "sqlite":
        return ThreadedAsyncStorage(SQLiteStorage(database_path))
    if storage_backend.lower() == "memory":
        return AsyncInMemoryStorage()
    raise ValueError(f"Unknown storage backend: {storage_backend}")
