"""Durable weight storage and the in-process cache layered over it."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Protocol, runtime_checkable

from .config import DEFAULT_DATABASE_PATH, DEFAULT_TABLE, validate_table_name
from .types import WeightKey

LOGGER = logging.getLogger(__name__)
MEMORY_DATABASE = ":memory:"


class StorageError(RuntimeError):
    """Raised when the persistence layer fails to open, read or write."""


@runtime_checkable
class WeightStore(Protocol):
    """Durable mapping from encoded key to a double-precision value."""

    def open(self) -> None:
        """Acquire the storage handle; calling it again is a no-op."""

    def get(self, key: bytes) -> float | None:
        """Return the persisted value for ``key`` or None when never written."""

    def set(self, key: bytes, value: float) -> None:
        """Create or replace the value stored for ``key``."""


class SqliteWeightStore:
    """SQLite-backed store: one ``(k BLOB PRIMARY KEY, v DOUBLE)`` table per model."""

    def __init__(
        self,
        path: Path | str = DEFAULT_DATABASE_PATH,
        *,
        table: str = DEFAULT_TABLE,
    ) -> None:
        self.path = path if str(path) == MEMORY_DATABASE else Path(path).expanduser()
        self.table = validate_table_name(table)
        self._conn: sqlite3.Connection | None = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> None:
        if self._conn is not None:
            return
        target = str(self.path)
        if isinstance(self.path, Path):
            if not self.path.exists():
                LOGGER.info("Creating weight database at %s", self.path)
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise StorageError(f"Cannot create directory for {self.path}: {exc}") from exc
        try:
            conn = sqlite3.connect(target, isolation_level=None, check_same_thread=False)
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open weight database {target}: {exc}") from exc
        try:
            conn.execute(
                f"CREATE TABLE IF NOT EXISTS {self.table} "
                "(k BLOB NOT NULL PRIMARY KEY, v DOUBLE NOT NULL)"
            )
        except sqlite3.Error as exc:
            conn.close()
            raise StorageError(f"Cannot prepare table '{self.table}' in {target}: {exc}") from exc
        self._conn = conn
        LOGGER.debug("Opened weight table '%s' in %s", self.table, target)

    def close(self) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        try:
            conn.close()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot close weight database {self.path}: {exc}") from exc

    def get(self, key: bytes) -> float | None:
        conn = self._connection()
        try:
            row = conn.execute(
                f"SELECT v FROM {self.table} WHERE k = ?", (sqlite3.Binary(key),)
            ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to read key {key!r} from '{self.table}': {exc}") from exc
        if row is None:
            return None
        return float(row[0])

    def set(self, key: bytes, value: float) -> None:
        conn = self._connection()
        try:
            conn.execute(
                f"INSERT OR REPLACE INTO {self.table} (k, v) VALUES (?, ?)",
                (sqlite3.Binary(key), float(value)),
            )
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to write key {key!r} to '{self.table}': {exc}") from exc

    def count(self) -> int:
        """Return the number of persisted entries in the model table."""

        conn = self._connection()
        try:
            (total,) = conn.execute(f"SELECT COUNT(*) FROM {self.table}").fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to count entries in '{self.table}': {exc}") from exc
        return int(total)

    def __enter__(self) -> SqliteWeightStore:
        self.open()
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:
        self.close()

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageError(f"Weight store {self.path} is not open.")
        return self._conn


class MemoryWeightStore:
    """Dict-backed store for ephemeral models."""

    def __init__(self) -> None:
        self._data: dict[bytes, float] | None = None

    def open(self) -> None:
        if self._data is None:
            self._data = {}

    def get(self, key: bytes) -> float | None:
        return self._mapping().get(bytes(key))

    def set(self, key: bytes, value: float) -> None:
        self._mapping()[bytes(key)] = float(value)

    def count(self) -> int:
        return len(self._mapping())

    def _mapping(self) -> dict[bytes, float]:
        if self._data is None:
            raise StorageError("Memory weight store is not open.")
        return self._data


class WeightTable:
    """Read-through, write-through cache of model values over a WeightStore.

    The first read of a key performs one store lookup and caches either the
    stored value or ``default``; later reads never reach the store. Writes
    reach the store before the cache so a failed write leaves the cached value
    untouched.
    """

    def __init__(
        self,
        store: WeightStore,
        *,
        default: float = 0.0,
    ) -> None:
        self._store = store
        self._default = float(default)
        self._cache: dict[WeightKey, float] = {}

    @property
    def store(self) -> WeightStore:
        return self._store

    def get(self, key: WeightKey) -> float:
        try:
            return self._cache[key]
        except KeyError:
            pass
        stored = self._store.get(key.encode())
        value = self._default if stored is None else float(stored)
        self._cache[key] = value
        return value

    def set(self, key: WeightKey, value: float) -> None:
        value = float(value)
        self._store.set(key.encode(), value)
        self._cache[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._cache

    def __len__(self) -> int:
        return len(self._cache)


__all__ = [
    "MemoryWeightStore",
    "SqliteWeightStore",
    "StorageError",
    "WeightStore",
    "WeightTable",
]
