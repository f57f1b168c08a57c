"""Tests for the persistence backends."""
import pytest
from sqlmodel import SQLModel

from cronos import storage
from cronos.errors import PersistenceError
from cronos.storage import MemoryPersistence, SqlPersistence, build_persistence


@pytest.fixture(params=["memory", "sql"])
def backend(request):
    if request.param == "memory":
        return MemoryPersistence()
    return SqlPersistence.from_url("sqlite://")


class TestCollections:

    def test_empty_collection_loads_empty(self, backend):
        assert backend.load(storage.CLIENTS) == []
        assert backend.is_empty(storage.CLIENTS)

    def test_store_all_keeps_order(self, backend):
        records = [{"id": "b"}, {"id": "a"}, {"id": "c"}]

        backend.store_all(storage.CLIENTS, records)

        assert backend.load(storage.CLIENTS) == records

    def test_store_all_replaces_collection(self, backend):
        backend.store_all(storage.CLIENTS, [{"id": "a"}, {"id": "b"}])
        backend.store_all(storage.CLIENTS, [{"id": "c"}])

        assert backend.load(storage.CLIENTS) == [{"id": "c"}]

    def test_collections_are_independent(self, backend):
        backend.store_all(storage.CLIENTS, [{"id": "a"}])
        backend.store_all(storage.SERVICES, [{"id": "s"}])
        backend.store_all(storage.CLIENTS, [])

        assert backend.load(storage.SERVICES) == [{"id": "s"}]

    def test_loaded_records_are_copies(self, backend):
        backend.store_all(storage.CLIENTS, [{"id": "a", "tags": ["x"]}])

        loaded = backend.load(storage.CLIENTS)
        loaded[0]["tags"].append("y")

        assert backend.load(storage.CLIENTS) == [{"id": "a", "tags": ["x"]}]


def test_sql_errors_become_persistence_errors():
    backend = SqlPersistence.from_url("sqlite://")
    SQLModel.metadata.drop_all(backend.engine)

    with pytest.raises(PersistenceError):
        backend.load(storage.CLIENTS)
    with pytest.raises(PersistenceError):
        backend.store_all(storage.CLIENTS, [{"id": "a"}])


def test_build_persistence_memory_url():
    assert isinstance(build_persistence("memory://"), MemoryPersistence)
