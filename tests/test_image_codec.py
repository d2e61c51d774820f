"""Tests for the receipt photo codec."""

from io import BytesIO

import pytest
from PIL import Image

from receiptlog.config import ImageSettings
from receiptlog.services.image import (
    ImageAttachmentCodec,
    ImageDecodeError,
    ImageEncodeError,
)


JPEG_MAGIC = b"\xff\xd8"


@pytest.fixture
def codec(image_settings) -> ImageAttachmentCodec:
    return ImageAttachmentCodec(image_settings)


class TestEncode:
    """Tests for compressing captured photos."""

    def test_encodes_pil_image_as_jpeg(self, codec, photo):
        payload = codec.encode(photo)
        assert payload is not None
        assert payload.startswith(JPEG_MAGIC)

    def test_encodes_camera_bytes(self, codec, photo_bytes):
        """Camera widgets hand over PNG bytes; they are stored as JPEG."""
        payload = codec.encode(photo_bytes)
        assert payload.startswith(JPEG_MAGIC)

    def test_alpha_channel_is_dropped(self, codec):
        photo = Image.new("RGBA", (40, 40), color=(10, 20, 30, 128))
        payload = codec.encode(photo)
        assert codec.decode(payload).mode == "RGB"

    def test_garbage_bytes_yield_none(self, codec):
        """A photo that can't be read means no attachment, not an error."""
        assert codec.encode(b"definitely not a picture") is None

    def test_empty_bytes_yield_none(self, codec):
        assert codec.encode(b"") is None

    def test_compress_raises_on_garbage(self, codec):
        with pytest.raises(ImageEncodeError):
            codec.compress(b"definitely not a picture")

    def test_max_dimension_bounds_longest_side(self, photo):
        codec = ImageAttachmentCodec(ImageSettings(max_dimension=50))
        image = codec.decode(codec.encode(photo))
        assert max(image.size) == 50
        # aspect ratio kept: source is 120x200
        assert image.size[0] < image.size[1]

    def test_small_photo_not_enlarged(self, photo):
        codec = ImageAttachmentCodec(ImageSettings(max_dimension=1000))
        assert codec.decode(codec.encode(photo)).size == photo.size


class TestQuality:
    """Tests for the quality factor mapping."""

    @pytest.mark.parametrize("quality,expected", [
        (0.8, 80),
        (0.5, 50),
        (1.0, 95),
        (0.0, 1),
    ])
    def test_pillow_quality(self, quality, expected):
        codec = ImageAttachmentCodec(ImageSettings(jpeg_quality=quality))
        assert codec.pillow_quality == expected

    def test_default_quality_is_point_eight(self):
        assert ImageSettings().jpeg_quality == 0.8

    def test_lower_quality_is_smaller(self):
        """Noise compresses badly, so quality shows clearly in the size."""
        noisy = Image.effect_noise((128, 128), 64).convert("RGB")
        low = ImageAttachmentCodec(ImageSettings(jpeg_quality=0.2)).encode(noisy)
        high = ImageAttachmentCodec(ImageSettings(jpeg_quality=0.95)).encode(noisy)
        assert len(low) < len(high)


class TestDecode:
    """Tests for turning stored payloads back into images."""

    def test_round_trip_keeps_dimensions(self, codec, photo):
        image = codec.decode(codec.encode(photo))
        assert image.size == photo.size
        assert image.format == "JPEG"

    def test_round_trip_is_close_to_original(self, codec, photo):
        """Lossy, but the paper stays light."""
        image = codec.decode(codec.encode(photo))
        r, g, b = image.getpixel((5, 5))
        assert min(r, g, b) > 200

    def test_decodes_other_formats(self, codec, photo_bytes):
        assert codec.decode(photo_bytes).size == (120, 200)

    def test_garbage_raises(self, codec):
        with pytest.raises(ImageDecodeError):
            codec.decode(b"\x00\x01\x02 not jpeg")

    def test_empty_raises(self, codec):
        with pytest.raises(ImageDecodeError):
            codec.decode(b"")

    def test_truncated_payload_raises(self, codec, photo):
        payload = codec.encode(photo)
        with pytest.raises(ImageDecodeError):
            codec.decode(payload[: len(payload) // 2])

    def test_decoded_image_is_loaded(self, codec, photo):
        """Decoding reads the whole payload, not just the header."""
        image = codec.decode(codec.encode(photo))
        buffer = BytesIO()
        image.save(buffer, format="PNG")
        assert buffer.getvalue()
