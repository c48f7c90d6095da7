"""
Unit tests for skill_engine/common/error_handling.py
"""

import logging

import pytest

from skill_engine.common.error_handling import (
    ErrorCollector,
    InvalidArgument,
    PersistenceFailure,
    SkillEngineError,
    log_on_exception,
)


class TestErrorTypes:
    """Tests for the error taxonomy."""

    def test_invalid_argument_is_a_value_error(self):
        error = InvalidArgument("bad team size")
        assert isinstance(error, SkillEngineError)
        assert isinstance(error, ValueError)

    def test_persistence_failure_carries_operation(self):
        error = PersistenceFailure("append_evolution", "write conflict")
        assert error.operation == "append_evolution"
        assert str(error) == "[append_evolution] write conflict"
        assert not isinstance(error, ValueError)


class TestErrorCollector:
    """Tests for batch error collection."""

    def test_collects_and_summarises(self):
        collector = ErrorCollector()

        collector.add_exception("profile_builder", "emp-1", PersistenceFailure("transaction", "down"))
        collector.add_exception("profile_builder", "emp-2", InvalidArgument("empty"), severity="medium")

        assert collector.has_errors()
        assert collector.subjects() == ["emp-1", "emp-2"]
        summary = collector.summary()
        assert summary["total"] == 2
        assert summary["by_severity"]["high"] == 1
        assert summary["by_severity"]["medium"] == 1
        assert summary["recoverable"] == 1
        assert summary["non_recoverable"] == 1

    def test_error_to_dict(self):
        error = ErrorCollector().add_exception("team_matcher", "proj-9", InvalidArgument("no requirements"))

        data = error.to_dict()

        assert data["component"] == "team_matcher"
        assert data["subject"] == "proj-9"
        assert data["exception_type"] == "InvalidArgument"
        assert data["recoverable"] is False
        assert data["timestamp"]

    def test_empty_collector(self):
        collector = ErrorCollector()
        assert not collector.has_errors()
        assert collector.summary()["total"] == 0


class TestLogOnException:
    """Tests for the logging context manager."""

    def test_logs_and_reraises(self, caplog):
        logger = logging.getLogger("test.log_on_exception")

        with caplog.at_level(logging.ERROR, logger="test.log_on_exception"):
            with pytest.raises(PersistenceFailure):
                with log_on_exception(logger, "persist profile emp-1", level=logging.ERROR):
                    raise PersistenceFailure("upsert_skill", "timeout")

        assert "[persist profile emp-1] Failed: [upsert_skill] timeout" in caplog.text

    def test_silent_without_exception(self, caplog):
        logger = logging.getLogger("test.log_on_exception")

        with caplog.at_level(logging.DEBUG, logger="test.log_on_exception"):
            with log_on_exception(logger, "noop"):
                pass

        assert caplog.records == []
