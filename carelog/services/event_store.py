"""
SQLite-backed event store for feeding and diaper logs.

The store owns two independent append-only tables. Records are inserted
with an id and a local timestamp assigned here, read back newest first,
and only ever removed by id or by wiping both tables. There is no
in-memory cache: every read goes to the database.

sqlite3 is blocking, so each call runs in a worker thread. A single
connection is opened lazily and reused; an asyncio.Lock keeps calls on
it sequential.
"""

import asyncio
import sqlite3
from collections.abc import AsyncIterator, Callable, Sequence
from contextlib import asynccontextmanager
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Protocol, TypeVar

from carelog.domain.models import DiaperEvent, DiaperType, FeedingEvent, FeedingType, RecordKind
from carelog.domain.timestamps import Clock, day_bounds, format_timestamp, local_now
from carelog.errors import StorageError, ValidationError
from carelog.services.observability import logger

T = TypeVar("T")
EnumT = TypeVar("EnumT", bound=Enum)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS feedings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp TEXT,
    amount INTEGER,
    type TEXT,
    notes TEXT
);
CREATE TABLE IF NOT EXISTS diapers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp TEXT,
    type TEXT,
    notes TEXT
);
"""

_TABLES = {
    RecordKind.FEEDING: "feedings",
    RecordKind.DIAPER: "diapers",
}

_FEEDING_COLUMNS = "id, timestamp, amount, type, notes"
_DIAPER_COLUMNS = "id, timestamp, type, notes"

# Largest value an SQLite INTEGER column holds
_SQLITE_MAX_INTEGER = 2**63 - 1


class EventLog(Protocol):
    """Read side of the event store, as consumed by the aggregator."""

    async def get_recent_feedings(self, limit: int) -> list[FeedingEvent]: ...

    async def get_recent_diapers(self, limit: int) -> list[DiaperEvent]: ...

    async def get_last_feeding(self) -> FeedingEvent | None: ...

    async def get_feedings_on(self, day: date) -> list[FeedingEvent]: ...

    async def get_diapers_on(self, day: date) -> list[DiaperEvent]: ...


def _validate_amount(amount: Any) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValidationError(f"Feeding amount must be a positive integer, got {amount!r}")
    if amount > _SQLITE_MAX_INTEGER:
        raise ValidationError(f"Feeding amount is too large to store, got {amount!r}")
    return amount


def _validate_limit(limit: Any) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise ValidationError(f"Limit must be a non-negative integer, got {limit!r}")
    return limit


def _coerce_enum(enum_type: type[EnumT], value: Any) -> EnumT:
    try:
        return enum_type(value)
    except ValueError as e:
        raise ValidationError(f"Unknown {enum_type.__name__}: {value!r}") from e


def _feeding_from_row(row: sqlite3.Row) -> FeedingEvent:
    try:
        return FeedingEvent(
            id=row["id"],
            timestamp=row["timestamp"],
            amount=row["amount"],
            type=FeedingType(row["type"]),
            notes=row["notes"],
        )
    except (TypeError, ValueError) as e:
        raise StorageError(f"Unreadable feeding row {row['id']}: {e}") from e


def _diaper_from_row(row: sqlite3.Row) -> DiaperEvent:
    try:
        return DiaperEvent(
            id=row["id"],
            timestamp=row["timestamp"],
            type=DiaperType(row["type"]),
            notes=row["notes"],
        )
    except (TypeError, ValueError) as e:
        raise StorageError(f"Unreadable diaper row {row['id']}: {e}") from e


class SQLiteEventStore:
    """
    Durable append-only persistence of feeding and diaper events.

    Construct one per database file and pass it to whoever needs it.
    ``initialize()`` may be called explicitly; every other operation
    performs it lazily on first use.
    """

    def __init__(self, db_path: Path | str, clock: Clock = local_now) -> None:
        """Create a store for ``db_path``.

        Args:
            db_path: SQLite file holding both tables (``":memory:"`` works too)
            clock: Source of local wall-clock time for new records
        """
        self.db_path = Path(db_path)
        self._clock = clock
        self._conn: sqlite3.Connection | None = None
        self._lock = asyncio.Lock()
        self.logger = logger.bind(component="event_store", db_path=str(self.db_path))

    # Lifecycle

    def _open(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open event store at {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        conn.isolation_level = None
        try:
            self._create_schema(conn)
        except StorageError:
            conn.close()
            raise
        return conn

    @staticmethod
    def _create_schema(conn: sqlite3.Connection) -> None:
        try:
            conn.executescript(_SCHEMA)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot create event tables: {e}") from e

    async def _connection(self) -> sqlite3.Connection:
        # Caller holds self._lock
        if self._conn is None:
            self._conn = await asyncio.to_thread(self._open)
            self.logger.info("event_store_opened")
        return self._conn

    async def initialize(self) -> None:
        """Open the database if needed and make sure both tables exist.

        Raises:
            StorageError: the file cannot be opened or the schema cannot be created
        """
        async with self._lock:
            if self._conn is None:
                await self._connection()
            else:
                await asyncio.to_thread(self._create_schema, self._conn)
        self.logger.debug("event_store_initialized")

    async def close(self) -> None:
        async with self._lock:
            if self._conn is None:
                return
            conn, self._conn = self._conn, None
            await asyncio.to_thread(conn.close)
        self.logger.info("event_store_closed")

    @asynccontextmanager
    async def session(self) -> AsyncIterator["SQLiteEventStore"]:
        """Initialize on entry and release the connection on exit."""
        await self.initialize()
        try:
            yield self
        finally:
            await self.close()

    async def _run(self, operation: Callable[[sqlite3.Connection], T]) -> T:
        async with self._lock:
            conn = await self._connection()
            return await asyncio.to_thread(operation, conn)

    async def _query(self, sql: str, params: Sequence[Any] = ()) -> list[sqlite3.Row]:
        try:
            return await self._run(lambda conn: conn.execute(sql, params).fetchall())
        except sqlite3.Error as e:
            raise StorageError(f"Query failed: {e}") from e

    # Writes

    async def insert_feeding(
        self, amount: int, milk_type: FeedingType | str, notes: str | None = None
    ) -> int:
        """Record a feeding stamped with the current local time.

        Returns:
            The id assigned to the new row.

        Raises:
            ValidationError: amount is not a positive integer or milk_type is unknown
            StorageError: the row could not be written
        """
        amount = _validate_amount(amount)
        feeding_type = _coerce_enum(FeedingType, milk_type)
        timestamp = format_timestamp(self._clock())

        def _insert(conn: sqlite3.Connection) -> int:
            cursor = conn.execute(
                "INSERT INTO feedings (timestamp, amount, type, notes) VALUES (?, ?, ?, ?)",
                (timestamp, amount, feeding_type.value, notes),
            )
            return int(cursor.lastrowid)

        try:
            record_id = await self._run(_insert)
        except sqlite3.Error as e:
            self.logger.error("feeding_save_failed", error=str(e), amount=amount)
            raise StorageError(f"Failed to save feeding: {e}") from e

        self.logger.info(
            "feeding_saved",
            record_id=record_id,
            timestamp=timestamp,
            amount=amount,
            type=feeding_type.value,
        )
        return record_id

    async def insert_diaper(self, diaper_type: DiaperType | str, notes: str | None = None) -> int:
        """Record a diaper change stamped with the current local time."""
        kind = _coerce_enum(DiaperType, diaper_type)
        timestamp = format_timestamp(self._clock())

        def _insert(conn: sqlite3.Connection) -> int:
            cursor = conn.execute(
                "INSERT INTO diapers (timestamp, type, notes) VALUES (?, ?, ?)",
                (timestamp, kind.value, notes),
            )
            return int(cursor.lastrowid)

        try:
            record_id = await self._run(_insert)
        except sqlite3.Error as e:
            self.logger.error("diaper_save_failed", error=str(e), type=kind.value)
            raise StorageError(f"Failed to save diaper change: {e}") from e

        self.logger.info("diaper_saved", record_id=record_id, timestamp=timestamp, type=kind.value)
        return record_id

    async def delete_by_id(self, kind: RecordKind | str, record_id: int) -> bool:
        """Remove one row.

        Returns False, without raising, when the row does not exist or the
        database reports a failure. The cause is logged.
        """
        table = _TABLES[_coerce_enum(RecordKind, kind)]

        try:
            deleted = await self._run(
                lambda conn: conn.execute(
                    f"DELETE FROM {table} WHERE id = ?", (record_id,)
                ).rowcount
            )
        except (sqlite3.Error, StorageError) as e:
            self.logger.error(
                "record_delete_failed", table=table, record_id=record_id, error=str(e)
            )
            return False

        if deleted == 0:
            self.logger.warning("record_delete_missing", table=table, record_id=record_id)
            return False

        self.logger.info("record_deleted", table=table, record_id=record_id)
        return True

    async def clear_all(self) -> None:
        """Delete every row of both tables. Ids keep increasing afterwards."""

        def _clear(conn: sqlite3.Connection) -> None:
            conn.execute("BEGIN")
            try:
                conn.execute("DELETE FROM feedings")
                conn.execute("DELETE FROM diapers")
                conn.execute("COMMIT")
            except sqlite3.Error:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise

        try:
            await self._run(_clear)
        except sqlite3.Error as e:
            self.logger.error("clear_all_failed", error=str(e))
            raise StorageError(f"Failed to clear event logs: {e}") from e

        self.logger.warning("all_records_cleared")

    # Reads

    async def get_recent_feedings(self, limit: int) -> list[FeedingEvent]:
        """Newest ``limit`` feedings, newest first."""
        rows = await self._query(
            f"SELECT {_FEEDING_COLUMNS} FROM feedings ORDER BY timestamp DESC, id DESC LIMIT ?",
            (_validate_limit(limit),),
        )
        return [_feeding_from_row(row) for row in rows]

    async def get_recent_diapers(self, limit: int) -> list[DiaperEvent]:
        """Newest ``limit`` diaper changes, newest first."""
        rows = await self._query(
            f"SELECT {_DIAPER_COLUMNS} FROM diapers ORDER BY timestamp DESC, id DESC LIMIT ?",
            (_validate_limit(limit),),
        )
        return [_diaper_from_row(row) for row in rows]

    async def get_last_feeding(self) -> FeedingEvent | None:
        feedings = await self.get_recent_feedings(1)
        return feedings[0] if feedings else None

    async def get_feedings_on(self, day: date) -> list[FeedingEvent]:
        """Feedings stamped on the given calendar day, newest first."""
        start, end = day_bounds(day)
        rows = await self._query(
            f"SELECT {_FEEDING_COLUMNS} FROM feedings "
            "WHERE timestamp >= ? AND timestamp < ? ORDER BY timestamp DESC, id DESC",
            (start, end),
        )
        return [_feeding_from_row(row) for row in rows]

    async def get_diapers_on(self, day: date) -> list[DiaperEvent]:
        """Diaper changes stamped on the given calendar day, newest first."""
        start, end = day_bounds(day)
        rows = await self._query(
            f"SELECT {_DIAPER_COLUMNS} FROM diapers "
            "WHERE timestamp >= ? AND timestamp < ? ORDER BY timestamp DESC, id DESC",
            (start, end),
        )
        return [_diaper_from_row(row) for row in rows]
