"""
Main Orchestrator for Receipt Log

This module ties together all the components and defines the flows for:
1. Receipt entry (add → amount + optional photo → submit or cancel)
2. Receipt list (list, total, delete, show photo)

DESIGN DECISION: All state of an in-progress entry lives in a single
EntryDraft owned by the EntryWorkflow. The view reads the draft and calls
transitions; it never keeps its own copy of the pending record, the
entered text or the captured photo.

Entry state machine:

    IDLE --start--> PENDING_AMOUNT --submit (valid)--> IDLE  (record committed)
                    PENDING_AMOUNT --submit (invalid)--> PENDING_AMOUNT
                    PENDING_AMOUNT --cancel--> IDLE  (record discarded)
                    PENDING_AMOUNT --begin_photo_capture--> CAPTURING_PHOTO
                    CAPTURING_PHOTO --complete/dismiss--> PENDING_AMOUNT

Error boundaries:
- Invalid amounts, photo encode failures and image decode failures stop here
- PersistenceError propagates to the caller; the draft is kept for a retry
"""

from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from PIL import Image
from pydantic import BaseModel, ConfigDict
from sqlalchemy.exc import SQLAlchemyError

from receiptlog.audit import AuditLogger, configure_logging, create_correlation_id
from receiptlog.config import AppSettings, Settings, get_settings
from receiptlog.models.receipt import ReceiptRecord
from receiptlog.parsing import AmountParser, InvalidAmountError
from receiptlog.queries import TotalAggregator
from receiptlog.services.image import ImageAttachmentCodec, ImageDecodeError, RawPhoto
from receiptlog.services.storage import (
    InMemoryRecordStore,
    PersistenceError,
    RecordStoreInterface,
    SqlRecordStore,
)


class EntryState(str, Enum):
    """States of the receipt entry workflow."""
    IDLE = "idle"
    PENDING_AMOUNT = "pending_amount"    # Prompt open, waiting for amount/photo
    CAPTURING_PHOTO = "capturing_photo"  # Camera open; submit/cancel not accepted


class EntryDraft(BaseModel):
    """Everything the workflow knows about the entry in progress."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    state: EntryState = EntryState.IDLE
    record: Optional[ReceiptRecord] = None
    amount_text: str = ""
    photo: Optional[RawPhoto] = None
    correlation_id: Optional[UUID] = None

    @property
    def has_photo(self) -> bool:
        return self.photo is not None


class WorkflowError(Exception):
    """Base exception for entry workflow errors."""
    pass


class InvalidTransitionError(WorkflowError):
    """An action was requested in a state that does not accept it."""

    def __init__(self, action: str, state: EntryState):
        self.action = action
        self.state = state
        super().__init__(f"Cannot {action} while {state.value}")


class EntryWorkflow:
    """
    Orchestrates adding one receipt at a time.

    Flow:
    1. start → pending record created, timestamp fixed
    2. set_amount_text / photo capture (any order, any number of times)
    3. submit → amount parsed, photo encoded, record committed
       or cancel → record discarded

    A record reaches the store only through submit, and only with an amount.
    """

    def __init__(
        self,
        store: RecordStoreInterface,
        parser: Optional[AmountParser] = None,
        codec: Optional[ImageAttachmentCodec] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[AppSettings] = None,
    ):
        self._settings = settings or get_settings().app
        self._store = store
        self._parser = parser or AmountParser(self._settings)
        self._codec = codec or ImageAttachmentCodec()
        self._audit_logger = audit_logger or AuditLogger()
        self._draft = EntryDraft()

    @property
    def draft(self) -> EntryDraft:
        """Read-only view of the entry in progress."""
        return self._draft.model_copy()

    @property
    def state(self) -> EntryState:
        return self._draft.state

    def _require(self, action: str, *states: EntryState) -> None:
        if self._draft.state not in states:
            raise InvalidTransitionError(action, self._draft.state)

    def _reset(self) -> None:
        self._draft = EntryDraft()

    def start(self) -> ReceiptRecord:
        """
        Begin a new entry.

        Returns:
            The pending record (not yet persisted)
        """
        self._require("start an entry", EntryState.IDLE)

        record = self._store.create_record()
        self._draft = EntryDraft(
            state=EntryState.PENDING_AMOUNT,
            record=record,
            correlation_id=create_correlation_id(),
        )
        self._audit_logger.log_entry_started(record.id, self._draft.correlation_id)
        return record

    def set_amount_text(self, text: str) -> None:
        """Store the text currently in the amount field."""
        self._require(
            "enter an amount",
            EntryState.PENDING_AMOUNT,
            EntryState.CAPTURING_PHOTO,
        )
        self._draft.amount_text = text

    def begin_photo_capture(self) -> None:
        """Open the camera; submit and cancel wait until it closes."""
        self._require("take a photo", EntryState.PENDING_AMOUNT)
        self._draft.state = EntryState.CAPTURING_PHOTO
        self._audit_logger.log_photo_capture_started(
            self._draft.record.id, self._draft.correlation_id
        )

    async def complete_photo_capture(self, photo: RawPhoto) -> Optional[ReceiptRecord]:
        """
        Keep the captured photo and return to the amount prompt.

        The photo is held raw; it is encoded only on submit.

        Returns:
            The committed record if submit_on_photo_capture is enabled and
            the submit succeeded, None otherwise
        """
        self._require("finish taking a photo", EntryState.CAPTURING_PHOTO)
        self._draft.photo = photo
        self._draft.state = EntryState.PENDING_AMOUNT
        self._audit_logger.log_photo_captured(
            self._draft.record.id, self._draft.correlation_id
        )

        if self._settings.submit_on_photo_capture:
            return await self.submit()
        return None

    def dismiss_photo_capture(self) -> None:
        """Close the camera without a new photo; any earlier photo is kept."""
        self._require("dismiss the camera", EntryState.CAPTURING_PHOTO)
        self._draft.state = EntryState.PENDING_AMOUNT
        self._audit_logger.log_photo_capture_dismissed(
            self._draft.record.id, self._draft.correlation_id
        )

    def _encode_photo(self) -> Optional[bytes]:
        if self._draft.photo is None:
            return None

        image = self._codec.encode(self._draft.photo)
        if image is None:
            self._audit_logger.log_photo_encode_failed(
                self._draft.record.id, self._draft.correlation_id
            )
        return image

    async def submit(self) -> Optional[ReceiptRecord]:
        """
        Commit the pending record.

        Returns:
            The committed record, or None if the amount text was invalid.
            On None nothing changes: the prompt stays open with its text.

        Raises:
            PersistenceError: If the store could not save the record.
                The draft is kept so the user can submit again.
        """
        self._require("submit", EntryState.PENDING_AMOUNT)
        draft = self._draft

        try:
            amount = self._parser.parse(draft.amount_text)
        except InvalidAmountError as e:
            self._audit_logger.log_amount_rejected(
                record_id=draft.record.id,
                text=draft.amount_text,
                reason=e.reason,
                correlation_id=draft.correlation_id,
            )
            return None

        record = draft.record.with_fields(amount=amount, image=self._encode_photo())

        try:
            await self._store.commit_record(record)
        except PersistenceError as e:
            self._audit_logger.log_persistence_failed(
                operation="commit",
                error_message=str(e),
                record_id=record.id,
                correlation_id=draft.correlation_id,
            )
            raise

        self._audit_logger.log_record_committed(
            record_id=record.id,
            amount=str(amount),
            has_image=record.has_image,
            correlation_id=draft.correlation_id,
        )
        self._reset()
        return record

    def cancel(self) -> None:
        """Discard the pending record and everything entered for it."""
        self._require("cancel", EntryState.PENDING_AMOUNT)
        self._audit_logger.log_entry_cancelled(
            self._draft.record.id, self._draft.correlation_id
        )
        self._reset()


class ReceiptListFlow:
    """
    Orchestrates the receipt list screen.

    Reads always come straight from the store, so the list and the
    total reflect every commit and delete immediately.
    """

    def __init__(
        self,
        store: RecordStoreInterface,
        codec: Optional[ImageAttachmentCodec] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._codec = codec or ImageAttachmentCodec()
        self._audit_logger = audit_logger or AuditLogger()
        self._aggregator = TotalAggregator(store)

    async def list_receipts(self) -> list[ReceiptRecord]:
        """All committed receipts, oldest first."""
        return await self._store.list_records()

    async def total(self) -> Decimal:
        return await self._aggregator.current_total()

    async def delete_receipt(self, record_id: UUID) -> bool:
        """
        Permanently delete a receipt.

        Returns:
            True if deleted, False if no receipt has that id

        Raises:
            PersistenceError: If the store could not persist the removal
        """
        try:
            deleted = await self._store.delete_record(record_id)
        except PersistenceError as e:
            self._audit_logger.log_persistence_failed(
                operation="delete",
                error_message=str(e),
                record_id=record_id,
            )
            raise

        if deleted:
            self._audit_logger.log_record_deleted(record_id)
        else:
            self._audit_logger.log_record_not_found(record_id)
        return deleted

    def image_for_display(self, record: ReceiptRecord) -> Optional[Image.Image]:
        """
        Decode a record's photo for display.

        Returns None when there is no photo or it cannot be decoded;
        the caller shows the placeholder either way.
        """
        if record.image is None:
            return None

        try:
            return self._codec.decode(record.image)
        except ImageDecodeError as e:
            self._audit_logger.log_image_decode_failed(record.id, str(e))
            return None


def create_store(settings: Settings, audit_logger: AuditLogger) -> RecordStoreInterface:
    """
    Build the configured record store.

    Falls back to in-memory storage if the database cannot be set up,
    so the app still opens (entries then last only for the session).
    """
    store_settings = settings.store

    if store_settings.backend == "memory":
        return InMemoryRecordStore()

    try:
        store = SqlRecordStore(store_settings)
        store.ensure_schema()
    except (SQLAlchemyError, ImportError) as e:
        audit_logger.log_error(
            error_type="storage_unavailable",
            error_message=str(e),
            details={"database_url": store_settings.database_url},
        )
        return InMemoryRecordStore()

    return store


def create_app_components(
    settings: Optional[Settings] = None,
) -> tuple[RecordStoreInterface, ReceiptListFlow, AuditLogger]:
    """
    Factory function to create the shared application components.

    EntryWorkflow instances are per user session; build them with
    create_entry_workflow on top of the returned store.

    Returns:
        (store, receipt_list_flow, audit_logger)
    """
    settings = settings or get_settings()
    configure_logging(settings.app.effective_log_level)

    audit_logger = AuditLogger()
    store = create_store(settings, audit_logger)
    codec = ImageAttachmentCodec(settings.image)

    list_flow = ReceiptListFlow(
        store=store,
        codec=codec,
        audit_logger=audit_logger,
    )

    return store, list_flow, audit_logger


def create_entry_workflow(
    store: RecordStoreInterface,
    audit_logger: Optional[AuditLogger] = None,
    settings: Optional[Settings] = None,
) -> EntryWorkflow:
    """Build an entry workflow wired to the shared store."""
    settings = settings or get_settings()
    app_settings = settings.app

    return EntryWorkflow(
        store=store,
        parser=AmountParser(app_settings),
        codec=ImageAttachmentCodec(settings.image),
        audit_logger=audit_logger,
        settings=app_settings,
    )
