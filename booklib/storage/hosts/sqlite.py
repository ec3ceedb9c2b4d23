"""Transactional object store on SQLite.

Each collection is a table of ``(id, value)`` rows where ``value`` is the
object serialized as JSON. The schema version lives in
``PRAGMA user_version``; collections are created only from the upgrade
callback, which runs when the requested version is newer than the stored one.
"""

import asyncio
import sqlite3
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

import msgspec

from booklib.storage.exceptions import StoreOpenError, TransactionError

_encoder = msgspec.json.Encoder()
_decoder = msgspec.json.Decoder(dict[str, Any])


def _table(name: str) -> str:
    if not name.isidentifier():
        raise ValueError(f"Invalid collection name: {name!r}")
    return f'"{name}"'


class _Upgrade:
    """Schema handle handed to the upgrade callback."""

    def __init__(self, conn: sqlite3.Connection, old_version: int, new_version: int):
        self._conn = conn
        self.old_version = old_version
        self.new_version = new_version

    def has_collection(self, name: str) -> bool:
        cursor = self._conn.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (name,)
        )
        return cursor.fetchone() is not None

    def create_collection(self, name: str) -> None:
        self._conn.execute(
            f"CREATE TABLE IF NOT EXISTS {_table(name)} "
            "(id TEXT PRIMARY KEY, value TEXT NOT NULL)"
        )


class SQLiteObjectStore:
    """Object store with one table per collection."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._lock = threading.RLock()
        self.conn: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Get the connection, ensuring it exists."""
        if self.conn is None:
            raise RuntimeError("Store not opened")
        return self.conn

    async def open(
        self, version: int, on_upgrade: Callable[[_Upgrade], None]
    ) -> None:
        """Open the database and run ``on_upgrade`` for a newer version.

        Raises:
            StoreOpenError: If the database cannot be opened or upgraded.
        """
        try:
            await asyncio.to_thread(self._open, version, on_upgrade)
        except (sqlite3.Error, OSError) as e:
            raise StoreOpenError(str(self.db_path), str(e)) from e

    def _open(self, version: int, on_upgrade: Callable[[_Upgrade], None]) -> None:
        with self._lock:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            try:
                current = conn.execute("PRAGMA user_version").fetchone()[0]
                if current > version:
                    raise sqlite3.DatabaseError(
                        f"Stored version {current} is newer than {version}"
                    )
                if current < version:
                    with conn:
                        on_upgrade(_Upgrade(conn, current, version))
                        conn.execute(f"PRAGMA user_version = {int(version)}")
            except Exception:
                conn.close()
                raise
            self.conn = conn

    async def get_all(self, collection: str) -> list[dict[str, Any]]:
        """Read every object in a collection, in insertion order."""
        return await self._run(collection, "getAll", self._get_all, collection)

    async def get(self, collection: str, key: str) -> dict[str, Any] | None:
        """Read one object by id."""
        return await self._run(collection, "get", self._get, collection, key)

    async def put(self, collection: str, value: dict[str, Any]) -> None:
        """Insert or replace an object keyed by its ``id``."""
        await self._run(collection, "put", self._put, collection, value)

    async def delete(self, collection: str, key: str) -> None:
        """Delete an object by id."""
        await self._run(collection, "delete", self._delete, collection, key)

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            if self.conn:
                self.conn.close()
                self.conn = None

    async def _run(self, collection: str, operation: str, func, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except (sqlite3.Error, RuntimeError, msgspec.DecodeError) as e:
            raise TransactionError(collection, operation, str(e)) from e

    def _get_all(self, collection: str) -> list[dict[str, Any]]:
        with self._lock:
            cursor = self.connection.execute(
                f"SELECT value FROM {_table(collection)} ORDER BY rowid"
            )
            return [_decoder.decode(row[0]) for row in cursor]

    def _get(self, collection: str, key: str) -> dict[str, Any] | None:
        with self._lock:
            cursor = self.connection.execute(
                f"SELECT value FROM {_table(collection)} WHERE id = ?", (key,)
            )
            row = cursor.fetchone()
            if row:
                return _decoder.decode(row[0])
            return None

    def _put(self, collection: str, value: dict[str, Any]) -> None:
        with self._lock, self.connection:
            self.connection.execute(
                f"""
                INSERT INTO {_table(collection)} (id, value) VALUES (?, ?)
                ON CONFLICT(id) DO UPDATE SET value = excluded.value
                """,
                (value["id"], _encoder.encode(value).decode("utf-8")),
            )

    def _delete(self, collection: str, key: str) -> None:
        with self._lock, self.connection:
            self.connection.execute(
                f"DELETE FROM {_table(collection)} WHERE id = ?", (key,)
            )
