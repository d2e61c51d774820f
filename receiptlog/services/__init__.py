"""Services package."""

from receiptlog.services.image import (
    ImageAttachmentCodec,
    ImageCodecError,
    ImageDecodeError,
    ImageEncodeError,
)
from receiptlog.services.storage import (
    IncompleteRecordError,
    InMemoryRecordStore,
    PersistenceError,
    RecordStoreInterface,
    SqlRecordStore,
    StorageError,
)

__all__ = [
    # Image services
    "ImageAttachmentCodec",
    "ImageCodecError",
    "ImageDecodeError",
    "ImageEncodeError",
    # Storage services
    "IncompleteRecordError",
    "InMemoryRecordStore",
    "PersistenceError",
    "RecordStoreInterface",
    "SqlRecordStore",
    "StorageError",
]
