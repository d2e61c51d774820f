"""Receipt photo services package."""

from receiptlog.services.image.codec import (
    ImageAttachmentCodec,
    ImageCodecError,
    ImageDecodeError,
    ImageEncodeError,
    RawPhoto,
)

__all__ = [
    "ImageAttachmentCodec",
    "ImageCodecError",
    "ImageDecodeError",
    "ImageEncodeError",
    "RawPhoto",
]
