"""Shared fixtures for storage tests.

Provides in-memory fakes for every host capability. Each fake can be told
to fail so tests can drive the degradation and fallback paths.
"""

from copy import deepcopy
from datetime import date
from typing import Any

import pytest

from booklib.core.models import FileType, Language, Level, Record
from booklib.storage.exceptions import StoreOpenError, TransactionError
from booklib.storage.hosts import MemoryFlatStore


class FakePreferences:
    """Structured key/value capability backed by a dict."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.fail_get = False
        self.fail_set = False
        self.set_calls = 0

    async def get(self, key: str) -> str | None:
        if self.fail_get:
            raise OSError("preferences read failed")
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_set:
            raise OSError("preferences write failed")
        self.set_calls += 1
        self.data[key] = value


class FakeFileArea:
    """File-area capability backed by a dict of path -> content."""

    def __init__(self, return_bytes: bool = False):
        self.files: dict[str, str] = {}
        self.directories: set[str] = set()
        self.return_bytes = return_bytes
        self.fail_write = False
        self.fail_delete = False
        self.writes: list[tuple[str, str, str | None]] = []

    async def ensure_directory(self, path: str) -> None:
        if path in self.directories:
            raise FileExistsError(path)
        self.directories.add(path)

    async def write_file(
        self, path: str, content: str, encoding: str | None = None
    ) -> None:
        if self.fail_write:
            raise OSError("disk full")
        self.writes.append((path, content, encoding))
        self.files[path] = content

    async def read_file(self, path: str) -> str | bytes:
        if path not in self.files:
            raise FileNotFoundError(path)
        content = self.files[path]
        if self.return_bytes:
            import base64

            return base64.b64decode(content)
        return content

    async def delete_file(self, path: str) -> None:
        if self.fail_delete:
            raise OSError("delete failed")
        if path not in self.files:
            raise FileNotFoundError(path)
        del self.files[path]


class FakeSchema:
    def __init__(self, store: "FakeObjectStore", old: int, new: int):
        self.store = store
        self.old_version = old
        self.new_version = new

    def has_collection(self, name: str) -> bool:
        return name in self.store.collections

    def create_collection(self, name: str) -> None:
        self.store.collections[name] = {}


class FakeObjectStore:
    """Transactional store backed by dicts of dicts."""

    def __init__(self):
        self.collections: dict[str, dict[str, dict[str, Any]]] = {}
        self.version = 0
        self.fail_open = False
        self.failing: set[tuple[str, str]] = set()
        self.upgrades = 0
        self.closed = False

    def fail(self, collection: str, operation: str) -> None:
        """Make an operation on a collection raise TransactionError."""
        self.failing.add((collection, operation))

    def _check(self, collection: str, operation: str) -> None:
        if (collection, operation) in self.failing:
            raise TransactionError(collection, operation, "forced failure")

    async def open(self, version, on_upgrade) -> None:
        if self.fail_open:
            raise StoreOpenError("fake", "blocked")
        if version > self.version:
            self.upgrades += 1
            on_upgrade(FakeSchema(self, self.version, version))
            self.version = version

    async def get_all(self, collection: str) -> list[dict[str, Any]]:
        self._check(collection, "getAll")
        return [deepcopy(v) for v in self.collections[collection].values()]

    async def get(self, collection: str, key: str) -> dict[str, Any] | None:
        self._check(collection, "get")
        value = self.collections[collection].get(key)
        return deepcopy(value) if value is not None else None

    async def put(self, collection: str, value: dict[str, Any]) -> None:
        self._check(collection, "put")
        self.collections[collection][value["id"]] = deepcopy(value)

    async def delete(self, collection: str, key: str) -> None:
        self._check(collection, "delete")
        self.collections[collection].pop(key, None)

    def close(self) -> None:
        self.closed = True


class FakeHost:
    """Host environment handing out the fakes above."""

    def __init__(
        self,
        native: bool,
        preferences: FakePreferences | None = None,
        file_area: FakeFileArea | None = None,
        store: FakeObjectStore | None = None,
        flat: MemoryFlatStore | None = None,
    ):
        self.native = native
        self.preferences = preferences
        self.file_area = file_area
        self.store = store or FakeObjectStore()
        self.flat = flat or MemoryFlatStore()

    def is_native_host(self) -> bool:
        return self.native

    async def acquire_preferences(self) -> FakePreferences:
        if self.preferences is None:
            raise ImportError("preferences plugin missing")
        return self.preferences

    async def acquire_file_area(self) -> FakeFileArea:
        if self.file_area is None:
            raise ImportError("filesystem plugin missing")
        return self.file_area

    def transactional_store(self) -> FakeObjectStore:
        return self.store

    def flat_store(self) -> MemoryFlatStore:
        return self.flat


@pytest.fixture
def preferences():
    return FakePreferences()


@pytest.fixture
def file_area():
    return FakeFileArea()


@pytest.fixture
def object_store():
    return FakeObjectStore()


@pytest.fixture
def flat_store():
    return MemoryFlatStore()


@pytest.fixture
def native_host(preferences, file_area, flat_store):
    """Native host with every capability available."""
    return FakeHost(True, preferences, file_area, flat=flat_store)


@pytest.fixture
def web_host(object_store, flat_store):
    """Non-native host with a working object store."""
    return FakeHost(False, store=object_store, flat=flat_store)


@pytest.fixture(params=["native", "transactional"])
def any_host(request, preferences, file_area, object_store, flat_store):
    """Each fully capable host in turn."""
    if request.param == "native":
        return FakeHost(True, preferences, file_area, flat=flat_store)
    return FakeHost(False, store=object_store, flat=flat_store)


def make_record(record_id: str, added: date, **fields) -> Record:
    """Build a record with sensible defaults."""
    values = {
        "title": f"Title {record_id}",
        "level": Level.N4,
        "category": "reading",
        "file_type": FileType.PDF,
        "language": Language.EN,
    }
    values.update(fields)
    return Record(id=record_id, added_date=added, **values)


@pytest.fixture
def sample_records():
    """Records on three dates, two sharing a date, in insertion order."""
    return [
        make_record("a", date(2024, 1, 1)),
        make_record("b", date(2024, 3, 1)),
        make_record("c", date(2024, 2, 1)),
        make_record("d", date(2024, 3, 1)),
    ]


@pytest.fixture
def record_factory():
    """Factory for records with defaults."""
    return make_record


@pytest.fixture
def host_factory(flat_store):
    """Factory for hosts with chosen capabilities; shares the flat store."""

    def factory(native: bool, **kwargs) -> FakeHost:
        kwargs.setdefault("flat", flat_store)
        return FakeHost(native, **kwargs)

    return factory
