"""
Tests for structured logging helpers and error tracking
"""

import json
import logging
import logging.handlers
import sys
from unittest.mock import Mock

import pytest

from config.app_config import AppConfig
from utils.logging_config import (
    REDACTED,
    ErrorTracker,
    StructuredFormatter,
    redact,
    setup_logging,
    log_execution_time,
    log_registry_event,
    log_user_interaction,
)


def make_record(message="hello", **extra):
    record = logging.LogRecord("registry", logging.INFO, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Test JSON log lines"""

    def test_basic_fields(self):
        data = json.loads(StructuredFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "registry"
        assert data["message"] == "hello"
        assert "extra" not in data

    def test_extra_fields(self):
        data = json.loads(StructuredFormatter().format(make_record(record_id="permit-1")))

        assert data["extra"] == {"record_id": "permit-1"}

    def test_exception(self):
        try:
            raise ValueError("broken")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()

        data = json.loads(StructuredFormatter().format(record))

        assert data["exception"]["type"] == "ValueError"
        assert data["exception"]["message"] == "broken"


class TestLogHelpers:
    """Test audit and timing helpers"""

    def test_log_registry_event(self):
        logger = Mock()

        log_registry_event(logger, "permit_registered", "permit-1", actor="admin")

        extra = logger.info.call_args.kwargs["extra"]
        assert extra["registry_event_type"] == "permit_registered"
        assert extra["record_id"] == "permit-1"
        assert extra["actor"] == "admin"

    def test_log_user_interaction(self):
        logger = Mock()

        log_user_interaction(logger, "export", username="viewer", records=3)

        extra = logger.info.call_args.kwargs["extra"]
        assert extra["interaction_type"] == "export"
        assert extra["records"] == 3

    def test_log_execution_time_success(self):
        logger = Mock()

        with log_execution_time(logger, "registry_resync"):
            pass

        extra = logger.info.call_args.kwargs["extra"]
        assert extra["status"] == "success"
        assert extra["operation"] == "registry_resync"

    def test_log_execution_time_reraises(self):
        logger = Mock()

        with pytest.raises(RuntimeError):
            with log_execution_time(logger, "registry_resync"):
                raise RuntimeError("store down")

        extra = logger.error.call_args.kwargs["extra"]
        assert extra["status"] == "error"
        assert extra["error_type"] == "RuntimeError"


class TestErrorTracker:
    """Test error counting"""

    def test_counts_by_type_and_context(self):
        tracker = ErrorTracker(Mock())

        tracker.track_error(ValueError("a"), "register_permit")
        tracker.track_error(ValueError("b"), "register_permit")
        tracker.track_error(KeyError("c"), "startup_sync")

        summary = tracker.get_error_summary()
        assert summary["total_errors"] == 3
        assert summary["unique_errors"] == 2
        assert summary["error_breakdown"]["ValueError:register_permit"] == 2

    def test_last_error(self):
        tracker = ErrorTracker(Mock())

        tracker.track_error(RuntimeError("store down"), "startup_sync")

        last = tracker.get_error_summary()["last_error"]
        assert last["context"] == "startup_sync"
        assert last["message"] == "store down"


class TestRedaction:
    """Test masking of credentials in log output"""

    def test_redact_nested(self):
        fields = {"username": "admin", "password": "pta123", "headers": {"apikey": "k", "accept": "json"}}

        clean = redact(fields)

        assert clean == {"username": "admin", "password": REDACTED,
                         "headers": {"apikey": REDACTED, "accept": "json"}}
        assert fields["password"] == "pta123"

    def test_formatter_masks_password_extra(self):
        data = json.loads(StructuredFormatter().format(make_record(password="pta123", username="admin")))

        assert data["extra"]["password"] == REDACTED
        assert data["extra"]["username"] == "admin"


class TestSetupLogging:
    def test_file_handler_created(self, tmp_path):
        config = AppConfig()
        config.debug = False
        config.environment = "production"
        config.logging.level = "INFO"
        config.logging.log_file = str(tmp_path / "logs" / "app.log")

        root = setup_logging(config)

        try:
            assert root.level == logging.INFO
            assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
            assert (tmp_path / "logs").is_dir()
        finally:
            for handler in list(root.handlers):
                handler.close()
                root.removeHandler(handler)
