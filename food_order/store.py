"""Order store: append, snapshot subscription, partial update and remove."""

from __future__ import annotations

import itertools
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterator, Mapping
from uuid import uuid4

import structlog

from food_order.config import ORDERS_COLLECTION
from food_order.errors import RemoteReadError, RemoteWriteError
from food_order.models import EDITABLE_ORDER_FIELDS, ORDER_RECORD_FIELDS

logger = structlog.get_logger(__name__)

Snapshot = dict[str, dict[str, Any]]
SnapshotCallback = Callable[[Snapshot], None]
ErrorCallback = Callable[[RemoteReadError], None]


@dataclass
class _Listener:
    on_snapshot: SnapshotCallback
    on_error: ErrorCallback | None


class Subscription:
    """Live handle returned by OrderStore.subscribe; close() detaches it."""

    def __init__(self, store: "OrderStore", listener_id: int) -> None:
        self._store = store
        self._listener_id = listener_id
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def close(self) -> None:
        if not self._active:
            return
        self._active = False
        self._store._detach(self._listener_id)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class OrderStore:
    """Shared order collection.

    Subclasses provide the four storage primitives; this class owns key
    generation and fans a full snapshot out to every listener after each
    successful write.
    """

    collection = ORDERS_COLLECTION

    def __init__(self) -> None:
        self._listeners: dict[int, _Listener] = {}
        self._listener_ids = itertools.count(1)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, on_snapshot: SnapshotCallback, on_error: ErrorCallback | None = None) -> Subscription:
        """Register a listener; the current snapshot is delivered right away."""
        listener_id = next(self._listener_ids)
        listener = _Listener(on_snapshot=on_snapshot, on_error=on_error)
        self._listeners[listener_id] = listener
        logger.debug("Listener attached", collection=self.collection, listener_id=listener_id)

        try:
            snapshot = self.snapshot()
        except RemoteReadError as exc:
            self._notify_error(listener, exc)
        else:
            self._notify(listener, snapshot)
        return Subscription(self, listener_id)

    def snapshot(self) -> Snapshot:
        return self._read_all()

    def poll(self) -> bool:
        """Publish if another writer changed the collection; returns True when it did."""
        return False

    def close(self) -> None:
        """Release resources held between operations."""

    async def append(self, record: Mapping[str, Any]) -> str:
        """Insert a record under a freshly generated key and return the key."""
        missing = [name for name in ORDER_RECORD_FIELDS if name not in record]
        if missing:
            raise ValueError(f"order record is missing fields: {', '.join(missing)}")

        key = uuid4().hex
        self._insert(key, {name: record[name] for name in ORDER_RECORD_FIELDS})
        logger.debug("Record appended", collection=self.collection, key=key)
        self._publish()
        return key

    async def update(self, key: str, fields: Mapping[str, Any]) -> None:
        """Overwrite only the given fields of the record at key."""
        unknown = set(fields) - EDITABLE_ORDER_FIELDS
        if unknown:
            raise ValueError(f"fields cannot be updated: {', '.join(sorted(unknown))}")
        if not fields:
            return

        if not self._update(key, dict(fields)):
            raise RemoteWriteError(f"no record {key} in {self.collection}")
        logger.debug("Record updated", collection=self.collection, key=key, fields=sorted(fields))
        self._publish()

    async def remove(self, key: str) -> None:
        """Delete the record at key; removing a missing key is a no-op."""
        self._delete(key)
        logger.debug("Record removed", collection=self.collection, key=key)
        self._publish()

    def _detach(self, listener_id: int) -> None:
        if self._listeners.pop(listener_id, None) is not None:
            logger.debug("Listener detached", collection=self.collection, listener_id=listener_id)

    def _publish(self) -> None:
        if not self._listeners:
            return
        try:
            snapshot = self.snapshot()
        except RemoteReadError as exc:
            for listener in list(self._listeners.values()):
                self._notify_error(listener, exc)
            return
        for listener in list(self._listeners.values()):
            self._notify(listener, snapshot)

    def _notify(self, listener: _Listener, snapshot: Snapshot) -> None:
        # Each listener gets its own copy so views cannot alias store state.
        delivered = {key: dict(record) for key, record in snapshot.items()}
        try:
            listener.on_snapshot(delivered)
        except Exception:
            logger.exception("Order listener failed", collection=self.collection)

    def _notify_error(self, listener: _Listener, exc: RemoteReadError) -> None:
        logger.error("Snapshot read failed", collection=self.collection, error=exc.message)
        if listener.on_error is None:
            return
        try:
            listener.on_error(exc)
        except Exception:
            logger.exception("Order error listener failed", collection=self.collection)

    def _insert(self, key: str, record: dict[str, Any]) -> None:
        raise NotImplementedError

    def _update(self, key: str, fields: dict[str, Any]) -> bool:
        raise NotImplementedError

    def _delete(self, key: str) -> None:
        raise NotImplementedError

    def _read_all(self) -> Snapshot:
        raise NotImplementedError


class MemoryOrderStore(OrderStore):
    """Process-local store; insertion order is preserved."""

    def __init__(self) -> None:
        super().__init__()
        self._records: Snapshot = {}

    def _insert(self, key: str, record: dict[str, Any]) -> None:
        self._records[key] = dict(record)

    def _update(self, key: str, fields: dict[str, Any]) -> bool:
        if key not in self._records:
            return False
        self._records[key].update(fields)
        return True

    def _delete(self, key: str) -> None:
        self._records.pop(key, None)

    def _read_all(self) -> Snapshot:
        return {key: dict(record) for key, record in self._records.items()}


_COLUMN_BY_FIELD: dict[str, str] = {
    "foodId": "food_id",
    "foodName": "food_name",
    "quantity": "quantity",
    "totalAmount": "total_amount",
    "customerName": "customer_name",
    "phone": "phone",
    "timestamp": "created_at",
}


class SqliteOrderStore(OrderStore):
    """SQLite-backed store; one short-lived connection per operation.

    Several processes may share one database file. A long-lived watch
    connection reads ``PRAGMA data_version``, which changes whenever any
    other connection commits, so poll() can republish writes made elsewhere.
    """

    def __init__(self, db_path: str | Path) -> None:
        super().__init__()
        self.db_path = Path(db_path)
        self._watch_conn: sqlite3.Connection | None = None
        self._seen_version: int | None = None

    def snapshot(self) -> Snapshot:
        # Version first: a commit landing between the two reads shows up on the next poll.
        version = self._data_version()
        snapshot = self._read_all()
        self._seen_version = version
        return snapshot

    def poll(self) -> bool:
        if not self._listeners:
            return False
        try:
            version = self._data_version()
        except RemoteReadError as exc:
            for listener in list(self._listeners.values()):
                self._notify_error(listener, exc)
            return False
        if version == self._seen_version:
            return False

        logger.debug("External change detected", collection=self.collection, data_version=version)
        self._publish()
        return True

    def close(self) -> None:
        if self._watch_conn is None:
            return
        self._watch_conn.close()
        self._watch_conn = None
        self._seen_version = None

    def _data_version(self) -> int:
        try:
            if self._watch_conn is None:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                self._watch_conn = sqlite3.connect(self.db_path)
            return self._watch_conn.execute("PRAGMA data_version").fetchone()[0]
        except (OSError, sqlite3.Error) as exc:
            raise RemoteReadError(f"could not watch {self.collection}: {exc}") from exc

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def bootstrap_schema(self) -> None:
        """Create persistence schema if it does not already exist."""
        try:
            with self._connect() as conn:
                conn.executescript(
                    """
                    CREATE TABLE IF NOT EXISTS orders (
                        seq INTEGER PRIMARY KEY AUTOINCREMENT,
                        id TEXT NOT NULL UNIQUE,
                        food_id INTEGER NOT NULL,
                        food_name TEXT NOT NULL,
                        quantity INTEGER NOT NULL,
                        total_amount REAL NOT NULL,
                        customer_name TEXT NOT NULL,
                        phone TEXT NOT NULL,
                        created_at TEXT NOT NULL
                    );

                    CREATE INDEX IF NOT EXISTS idx_orders_created_at
                        ON orders(created_at);
                    """
                )
        except sqlite3.Error as exc:
            raise RemoteWriteError(f"could not create order schema: {exc}") from exc

    def _insert(self, key: str, record: dict[str, Any]) -> None:
        columns = ["id", *(_COLUMN_BY_FIELD[name] for name in ORDER_RECORD_FIELDS)]
        placeholders = ", ".join("?" for _ in columns)
        values = [key, *(record[name] for name in ORDER_RECORD_FIELDS)]
        try:
            with self._connect() as conn:
                conn.execute(
                    f"INSERT INTO orders ({', '.join(columns)}) VALUES ({placeholders})",
                    values,
                )
        except sqlite3.Error as exc:
            raise RemoteWriteError(f"append to {self.collection} failed: {exc}") from exc

    def _update(self, key: str, fields: dict[str, Any]) -> bool:
        names = sorted(fields)
        assignments = ", ".join(f"{_COLUMN_BY_FIELD[name]} = ?" for name in names)
        try:
            with self._connect() as conn:
                cur = conn.execute(
                    f"UPDATE orders SET {assignments} WHERE id = ?",
                    [*(fields[name] for name in names), key],
                )
                return cur.rowcount > 0
        except sqlite3.Error as exc:
            raise RemoteWriteError(f"update of {key} failed: {exc}") from exc

    def _delete(self, key: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM orders WHERE id = ?", (key,))
        except sqlite3.Error as exc:
            raise RemoteWriteError(f"remove of {key} failed: {exc}") from exc

    def _read_all(self) -> Snapshot:
        columns = ", ".join(_COLUMN_BY_FIELD[name] for name in ORDER_RECORD_FIELDS)
        try:
            with self._connect() as conn:
                rows = conn.execute(f"SELECT id, {columns} FROM orders ORDER BY seq").fetchall()
        except sqlite3.Error as exc:
            raise RemoteReadError(f"read of {self.collection} failed: {exc}") from exc

        snapshot: Snapshot = {}
        for row in rows:
            key, *values = row
            snapshot[key] = dict(zip(ORDER_RECORD_FIELDS, values))
        return snapshot
