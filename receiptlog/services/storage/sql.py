"""
SQL Record Storage (SQLite by default)

DESIGN DECISION: Receipts live in an embedded SQLite database because:
1. No server to run for a personal app
2. Durable across restarts
3. Binary photo payloads fit naturally in a BLOB column
4. Any other SQLAlchemy URL works without code changes

TRADEOFFS:
- Single writer; we never contemplate concurrent devices
- No transactional grouping: each commit/delete is its own transaction

Amounts are stored as exact decimal text, and timestamps as ISO strings,
so a record reads back exactly as it was written.

Writes are retried with exponential backoff before a PersistenceError
is raised. The caller decides what the user sees; nothing here aborts.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional, TypeVar
from uuid import UUID

import structlog
from sqlalchemy import Column, Integer, LargeBinary, String, create_engine, select
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from receiptlog.config import StoreSettings, get_settings
from receiptlog.models.receipt import ReceiptRecord
from receiptlog.services.storage.interface import (
    Clock,
    PersistenceError,
    RecordStoreInterface,
    StorageError,
    ensure_committable,
    sort_by_timestamp,
)


T = TypeVar("T")

Base = declarative_base()


class ReceiptRow(Base):
    """One committed receipt."""
    __tablename__ = "receipts"

    # Commit order, used to keep equal timestamps stable
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False, index=True)
    timestamp = Column(String(40), nullable=False)
    amount = Column(String(40), nullable=False)
    image = Column(LargeBinary, nullable=True)


def build_engine(settings: StoreSettings) -> Engine:
    """Create an engine for the configured URL."""
    url = make_url(settings.database_url)
    kwargs = {"echo": settings.echo_sql}

    if url.get_backend_name() == "sqlite":
        # Streamlit reruns scripts on worker threads
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise every session sees an empty database
            kwargs["poolclass"] = StaticPool

    return create_engine(url, **kwargs)


class SqlRecordStore(RecordStoreInterface):
    """
    SQLAlchemy implementation of record storage.

    Records are stored one per row. The table is created on first use.
    """

    def __init__(
        self,
        settings: Optional[StoreSettings] = None,
        engine: Optional[Engine] = None,
        clock: Optional[Clock] = None,
    ):
        super().__init__(clock)
        self._settings = settings or get_settings().store
        self._engine = engine or build_engine(self._settings)
        self._session_factory = sessionmaker(
            bind=self._engine,
            autoflush=False,
            expire_on_commit=False,
        )
        self._schema_ready = False
        self._logger = structlog.get_logger(__name__)

    @property
    def engine(self) -> Engine:
        return self._engine

    def ensure_schema(self) -> None:
        """Create the receipts table if needed; runs once per store."""
        if not self._schema_ready:
            Base.metadata.create_all(self._engine)
            self._schema_ready = True

    def _retrying(self) -> Retrying:
        return Retrying(
            retry=retry_if_exception_type(SQLAlchemyError),
            stop=stop_after_attempt(self._settings.write_attempts),
            wait=wait_exponential(
                multiplier=self._settings.retry_wait_multiplier,
                min=self._settings.retry_wait_min,
                max=self._settings.retry_wait_max,
            ),
            reraise=True,
        )

    def _write(self, operation: str, fn: Callable[[Session], T]) -> T:
        """Run a write in its own transaction, retrying transient failures."""

        def attempt() -> T:
            self.ensure_schema()
            with self._session_factory() as session:
                result = fn(session)
                session.commit()
                return result

        try:
            return self._retrying()(attempt)
        except SQLAlchemyError as e:
            self._logger.error(
                "storage_write_failed",
                operation=operation,
                attempts=self._settings.write_attempts,
                error=str(e),
            )
            raise PersistenceError(f"Failed to {operation}: {e}") from e

    def _read(self, operation: str, fn: Callable[[Session], T]) -> T:
        try:
            self.ensure_schema()
            with self._session_factory() as session:
                return fn(session)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to {operation}: {e}") from e

    def _record_to_row(self, record: ReceiptRecord) -> ReceiptRow:
        """Convert a ReceiptRecord to a table row."""
        return ReceiptRow(
            id=str(record.id),
            timestamp=record.timestamp.isoformat(timespec="microseconds"),
            amount=str(record.amount),
            image=record.image,
        )

    def _row_to_record(self, row: ReceiptRow) -> ReceiptRecord:
        """Convert a table row to a ReceiptRecord."""
        return ReceiptRecord(
            id=UUID(row.id),
            timestamp=datetime.fromisoformat(row.timestamp),
            amount=Decimal(row.amount),
            image=row.image,
        )

    async def commit_record(self, record: ReceiptRecord) -> bool:
        """Insert or replace a committed record."""
        ensure_committable(record)

        def upsert(session: Session) -> bool:
            existing = session.execute(
                select(ReceiptRow).where(ReceiptRow.id == str(record.id))
            ).scalar_one_or_none()

            if existing is None:
                session.add(self._record_to_row(record))
            else:
                replacement = self._record_to_row(record)
                existing.timestamp = replacement.timestamp
                existing.amount = replacement.amount
                existing.image = replacement.image
            return True

        return self._write("commit record", upsert)

    async def list_records(self) -> list[ReceiptRecord]:
        """List all records, oldest first."""

        def fetch(session: Session) -> list[ReceiptRow]:
            return list(
                session.execute(select(ReceiptRow).order_by(ReceiptRow.seq)).scalars()
            )

        records = []
        for row in self._read("list records", fetch):
            try:
                records.append(self._row_to_record(row))
            except (ValueError, InvalidOperation) as e:
                self._logger.warning(
                    "malformed_receipt_row_skipped",
                    row_id=row.id,
                    error=str(e),
                )

        # Python's sort is stable, so commit order breaks timestamp ties
        return sort_by_timestamp(records)

    async def get_record(self, record_id: UUID) -> Optional[ReceiptRecord]:
        """Retrieve a record by its ID."""

        def fetch(session: Session) -> Optional[ReceiptRow]:
            return session.execute(
                select(ReceiptRow).where(ReceiptRow.id == str(record_id))
            ).scalar_one_or_none()

        row = self._read("get record", fetch)
        return self._row_to_record(row) if row is not None else None

    async def delete_record(self, record_id: UUID) -> bool:
        """Delete a record by ID."""

        def remove(session: Session) -> bool:
            row = session.execute(
                select(ReceiptRow).where(ReceiptRow.id == str(record_id))
            ).scalar_one_or_none()

            if row is None:
                return False
            session.delete(row)
            return True

        return self._write("delete record", remove)
