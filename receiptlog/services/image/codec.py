"""
Receipt Photo Codec using Pillow

Converts a captured photo into the byte payload stored on a receipt record,
and turns a stored payload back into a displayable image.

DESIGN DECISION: Photos are stored as JPEG at a fixed quality factor
(0.8 on a 0-1 scale by default). Receipts are text on paper; lossy
compression at that level keeps them readable at a fraction of the size.

Failure policy:
- Encoding failure means "no attachment", never an error for the caller
- Decoding failure means "show the placeholder", never an error for the caller
The strict variants (compress, decode) raise for callers that want to know why.
"""

from io import BytesIO
from typing import Optional, Union

from PIL import Image, ImageOps

from receiptlog.config import ImageSettings, get_settings


RawPhoto = Union[bytes, Image.Image]

# Pillow's JPEG quality scale; values above 95 disable useful compression
_PILLOW_MIN_QUALITY = 1
_PILLOW_MAX_QUALITY = 95

_PILLOW_ERRORS = (OSError, ValueError, Image.DecompressionBombError)


class ImageCodecError(Exception):
    """Base exception for receipt photo encoding/decoding."""
    pass


class ImageEncodeError(ImageCodecError):
    """A photo could not be compressed for storage."""
    pass


class ImageDecodeError(ImageCodecError):
    """A stored payload is not a valid image."""
    pass


class ImageAttachmentCodec:
    """
    Photo <-> stored payload conversion.

    Flow (encode):
    1. Open raw bytes (camera widgets hand over PNG/JPEG bytes)
    2. Apply EXIF orientation so phone photos are upright
    3. Convert to RGB (JPEG has no alpha channel)
    4. Optionally bound the longest side
    5. Save as JPEG at the configured quality
    """

    format = "JPEG"

    def __init__(self, settings: Optional[ImageSettings] = None):
        self._settings = settings or get_settings().image

    @property
    def pillow_quality(self) -> int:
        """Configured 0-1 quality mapped onto Pillow's scale."""
        quality = round(self._settings.jpeg_quality * 100)
        return max(_PILLOW_MIN_QUALITY, min(_PILLOW_MAX_QUALITY, quality))

    def _open(self, photo: RawPhoto) -> Image.Image:
        if isinstance(photo, Image.Image):
            return photo
        image = Image.open(BytesIO(photo))
        image.load()
        return image

    def compress(self, photo: RawPhoto) -> bytes:
        """
        Compress a photo into a JPEG payload.

        Raises:
            ImageEncodeError: If the photo cannot be read or compressed
        """
        try:
            image = ImageOps.exif_transpose(self._open(photo))

            if image.mode != "RGB":
                image = image.convert("RGB")

            max_dimension = self._settings.max_dimension
            if max_dimension and max(image.size) > max_dimension:
                image = image.copy()
                image.thumbnail((max_dimension, max_dimension))

            buffer = BytesIO()
            image.save(buffer, format=self.format, quality=self.pillow_quality)
        except _PILLOW_ERRORS as e:
            raise ImageEncodeError(f"Failed to encode photo: {e}") from e

        return buffer.getvalue()

    def encode(self, photo: RawPhoto) -> Optional[bytes]:
        """
        Compress a photo for storage.

        Returns None if the photo cannot be encoded; callers treat that
        as "no attachment".
        """
        try:
            return self.compress(photo)
        except ImageEncodeError:
            return None

    def decode(self, payload: bytes) -> Image.Image:
        """
        Reconstruct a displayable image from a stored payload.

        Raises:
            ImageDecodeError: If the payload is not a valid image encoding
        """
        try:
            image = Image.open(BytesIO(payload))
            image.load()
        except _PILLOW_ERRORS as e:
            raise ImageDecodeError(f"Stored image could not be decoded: {e}") from e
        return image
