"""Tests for configuration."""

import pytest
from pydantic import ValidationError

from receiptlog.config import (
    AppSettings,
    ImageSettings,
    Settings,
    StoreSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestDefaults:

    def test_store_defaults(self):
        settings = StoreSettings()
        assert settings.backend == "sqlite"
        assert settings.database_url.startswith("sqlite:///")
        assert settings.write_attempts == 3

    def test_image_defaults(self):
        settings = ImageSettings()
        assert settings.jpeg_quality == 0.8
        assert settings.max_dimension is None

    def test_app_defaults(self):
        settings = AppSettings()
        assert settings.currency_symbol == "£"
        assert settings.reject_negative_amounts is False
        assert settings.submit_on_photo_capture is False


class TestEnvironment:
    """Settings come from RECEIPTLOG_* environment variables."""

    def test_app_override(self, monkeypatch):
        monkeypatch.setenv("RECEIPTLOG_CURRENCY_SYMBOL", "$")
        monkeypatch.setenv("RECEIPTLOG_SUBMIT_ON_PHOTO_CAPTURE", "true")

        settings = Settings().app
        assert settings.currency_symbol == "$"
        assert settings.submit_on_photo_capture is True

    def test_store_override(self, monkeypatch):
        monkeypatch.setenv("RECEIPTLOG_STORE_BACKEND", "memory")
        assert Settings().store.backend == "memory"

    def test_image_override(self, monkeypatch):
        monkeypatch.setenv("RECEIPTLOG_IMAGE_JPEG_QUALITY", "0.5")
        monkeypatch.setenv("RECEIPTLOG_IMAGE_MAX_DIMENSION", "1024")

        settings = Settings().image
        assert settings.jpeg_quality == 0.5
        assert settings.max_dimension == 1024


class TestValidation:

    def test_quality_out_of_range(self):
        with pytest.raises(ValidationError):
            ImageSettings(jpeg_quality=1.5)

    def test_unknown_backend(self):
        with pytest.raises(ValidationError):
            StoreSettings(backend="postgres-cluster")

    def test_write_attempts_at_least_one(self):
        with pytest.raises(ValidationError):
            StoreSettings(write_attempts=0)

    def test_log_level_normalized(self):
        assert AppSettings(log_level="debug").log_level == "DEBUG"

    def test_debug_mode_overrides_log_level(self):
        assert AppSettings(log_level="warning").effective_log_level == "WARNING"
        assert AppSettings(log_level="warning", debug_mode=True).effective_log_level == "DEBUG"

    def test_log_level_unknown(self):
        with pytest.raises(ValidationError):
            AppSettings(log_level="chatty")

    def test_validate_all_settings(self):
        assert validate_all_settings() == {"store": True, "image": True, "app": True}

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        monkeypatch.setenv("RECEIPTLOG_IMAGE_JPEG_QUALITY", "7")

        results = validate_all_settings()
        assert results["image"] is False
        assert "image_error" in results
        assert results["app"] is True
