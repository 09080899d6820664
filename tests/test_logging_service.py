"""
Tests for structured logging and error tracking
"""

import json
import logging
import sys
from unittest.mock import Mock

import pytest

from infrastructure.monitoring.logging_service import (
    ErrorTracker,
    StructuredFormatter,
    log_execution_time,
    log_marketplace_event,
    log_user_interaction
)
from infrastructure.storage import StorageCorruptionError


def make_record(message="hello", exc_info=None, **extra):
    record = logging.LogRecord("ecofinds.test", logging.INFO, __file__, 10, message, None, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Test JSON log output"""

    def test_basic_fields(self):
        data = json.loads(StructuredFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "ecofinds.test"
        assert data["message"] == "hello"
        assert "extra" not in data

    def test_extra_fields(self):
        data = json.loads(StructuredFormatter().format(make_record(record_id="p1")))

        assert data["extra"] == {"record_id": "p1"}

    def test_exception_info(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record(exc_info=sys.exc_info())

        data = json.loads(StructuredFormatter().format(record))

        assert data["exception"]["type"] == "ValueError"
        assert data["exception"]["message"] == "boom"


class TestEventHelpers:

    def test_log_marketplace_event(self):
        logger = Mock()

        log_marketplace_event(logger, "purchase_completed", "o1", total=20.0)

        message, = logger.info.call_args.args
        extra = logger.info.call_args.kwargs["extra"]
        assert message == "Marketplace event"
        assert extra["marketplace_event_type"] == "purchase_completed"
        assert extra["record_id"] == "o1"
        assert extra["total"] == 20.0

    def test_log_user_interaction(self):
        logger = Mock()

        log_user_interaction(logger, "login", user_id="u1")

        extra = logger.info.call_args.kwargs["extra"]
        assert extra["interaction_type"] == "login"
        assert extra["user_id"] == "u1"

    def test_log_execution_time_reraises(self):
        logger = Mock()

        with pytest.raises(RuntimeError):
            with log_execution_time(logger, "checkout"):
                raise RuntimeError("disk full")

        assert logger.error.called
        assert logger.error.call_args.kwargs["extra"]["status"] == "error"


class TestErrorTracker:
    """Test error counting"""

    def test_track_error_counts_by_type_and_context(self):
        tracker = ErrorTracker(Mock())
        error = StorageCorruptionError("bad data", key="ecofinds_cart")

        tracker.track_error(error, "load:ecofinds_cart", key=error.key)
        tracker.track_error(error, "load:ecofinds_cart", key=error.key)
        tracker.track_error(ValueError("x"), "checkout")

        summary = tracker.get_error_summary()
        assert summary["total_errors"] == 3
        assert summary["unique_errors"] == 2
        assert summary["error_breakdown"]["StorageCorruptionError:load:ecofinds_cart"] == 2

    def test_track_error_logs_context(self):
        logger = Mock()
        tracker = ErrorTracker(logger)

        tracker.track_error(ValueError("x"), "checkout", user_id="u1")

        extra = logger.error.call_args.kwargs["extra"]
        assert extra["context"] == "checkout"
        assert extra["user_id"] == "u1"
        assert extra["error_count"] == 1
