"""Shared fixtures for the Receipt Log tests."""

from datetime import datetime, timedelta, timezone
from io import BytesIO

import pytest
from PIL import Image, ImageDraw

from receiptlog.audit import AuditLogger
from receiptlog.config import AppSettings, ImageSettings, StoreSettings
from receiptlog.services.storage import InMemoryRecordStore, SqlRecordStore


class TickingClock:
    """Deterministic clock: every call is one second after the previous one."""

    def __init__(self, start: datetime = datetime(2026, 7, 15, 9, 30, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


class RecordingAuditLogger(AuditLogger):
    """Audit logger that keeps events in memory instead of logging them."""

    def __init__(self):
        super().__init__()
        self.events = []

    def log(self, event):
        self.events.append(event)

    @property
    def event_types(self) -> list[str]:
        return [event.event_type.value for event in self.events]


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def audit_logger() -> RecordingAuditLogger:
    return RecordingAuditLogger()


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(
        currency_symbol="£",
        reject_negative_amounts=False,
        submit_on_photo_capture=False,
    )


@pytest.fixture
def image_settings() -> ImageSettings:
    return ImageSettings(jpeg_quality=0.8, max_dimension=None)


@pytest.fixture
def store_settings(tmp_path) -> StoreSettings:
    return StoreSettings(
        backend="sqlite",
        database_url=f"sqlite:///{tmp_path / 'receipts.db'}",
        write_attempts=2,
        retry_wait_multiplier=0,
        retry_wait_min=0,
        retry_wait_max=0,
    )


@pytest.fixture
def memory_store(clock) -> InMemoryRecordStore:
    return InMemoryRecordStore(clock=clock)


@pytest.fixture
def sql_store(store_settings, clock) -> SqlRecordStore:
    return SqlRecordStore(store_settings, clock=clock)


@pytest.fixture(params=["memory", "sqlite"])
def store(request, memory_store, sql_store):
    """Each storage test runs against both backends."""
    return memory_store if request.param == "memory" else sql_store


@pytest.fixture
def photo() -> Image.Image:
    """A small receipt-like picture: light paper with dark lines of 'text'."""
    image = Image.new("RGB", (120, 200), color=(245, 242, 235))
    draw = ImageDraw.Draw(image)
    for y in range(20, 180, 20):
        draw.line((10, y, 110, y), fill=(30, 30, 30), width=3)
    return image


@pytest.fixture
def photo_bytes(photo) -> bytes:
    """The same picture as PNG bytes, the way a camera widget delivers it."""
    buffer = BytesIO()
    photo.save(buffer, format="PNG")
    return buffer.getvalue()
