"""Unit tests for custom exception hierarchy"""
import logging
from datetime import datetime

from monocollector.exceptions import (
    ConfigurationError,
    ImageDecodeError,
    MonoCollectorError,
    RecordNotFoundError,
    ValidationError,
)


class TestMonoCollectorError:
    """Test base exception class"""

    def test_basic_exception(self):
        """Test basic exception creation"""
        error = MonoCollectorError("Test error")
        assert error.message == "Test error"
        assert error.user_message == "An error occurred. Please try again."
        assert error.request_id is not None
        assert isinstance(error.timestamp, datetime)

    def test_exception_with_context(self):
        """Test exception with full context"""
        error = MonoCollectorError(
            message="Store write failed",
            user_id="guest-42",
            operation="create_item",
            context={"item_id": "abc-123"},
            user_message="Could not save your item"
        )
        assert error.user_id == "guest-42"
        assert error.operation == "create_item"
        assert error.context["item_id"] == "abc-123"
        assert error.user_message == "Could not save your item"

    def test_to_dict(self):
        """Test serialization for API responses"""
        error = MonoCollectorError("boom", user_message="Try again later")
        data = error.to_dict()
        assert data["error"] == "MonoCollectorError"
        assert data["message"] == "boom"
        assert data["user_message"] == "Try again later"
        assert data["request_id"] == error.request_id


class TestSubclasses:
    """Test specialized errors"""

    def test_validation_error(self):
        """Validation errors carry field and value"""
        error = ValidationError("must not be blank", field="name", value="")
        assert isinstance(error, MonoCollectorError)
        assert error.field == "name"
        assert error.user_message == "Invalid name: must not be blank"
        assert error.context == {"field": "name", "value": ""}

    def test_record_not_found(self):
        """Not-found errors name the record"""
        error = RecordNotFoundError("missing", record_type="Item", record_id="x1")
        assert error.record_id == "x1"
        assert error.user_message == "Item not found."

    def test_image_decode_error_default_message(self):
        """Image decode errors have a default message"""
        error = ImageDecodeError()
        assert error.message == "Image could not be decoded"

    def test_configuration_error(self):
        """Configuration errors carry the key"""
        error = ConfigurationError("bad", config_key="MAX_LEVEL")
        assert error.config_key == "MAX_LEVEL"
        assert error.context == {"config_key": "MAX_LEVEL"}


class TestLogLevels:
    """Test auto-logging severity"""

    def test_errors_log_at_error_level(self, caplog):
        """Regular errors are logged as ERROR"""
        with caplog.at_level(logging.DEBUG, logger="monocollector.exceptions"):
            RecordNotFoundError("missing", record_type="Item", record_id="x1")
        assert [r.levelno for r in caplog.records] == [logging.ERROR]

    def test_image_decode_error_logs_warning(self, caplog):
        """Undecodable photos are an expected fallback, logged as WARNING"""
        with caplog.at_level(logging.DEBUG, logger="monocollector.exceptions"):
            ImageDecodeError()
        assert [r.levelno for r in caplog.records] == [logging.WARNING]

    def test_photo_fallback_logs_no_errors(self, caplog):
        """A broken photo produces warnings only"""
        from monocollector.icons.photo_icon import generate_icon_from_photo

        with caplog.at_level(logging.DEBUG):
            generate_icon_from_photo(b"broken")
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
