"""
Error taxonomy and error-reporting helpers for the skill engine.

The engine raises two kinds of errors:
- InvalidArgument: a caller bug (empty evidence, no requirements, bad team size).
  Raised immediately, never coerced to a default.
- PersistenceFailure: a write or read against the store failed. The partial
  write is rolled back by the repository transaction and the error propagates.

Neither is retried inside the engine. Batch callers use ErrorCollector to keep
going across people while recording what failed.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional


class SkillEngineError(Exception):
    """Base class for all engine errors."""


class InvalidArgument(SkillEngineError, ValueError):
    """A caller passed input the engine cannot work with (400-class)."""


class PersistenceFailure(SkillEngineError):
    """
    A persistence step failed (500-class).

    Attributes:
        operation: Name of the store operation that failed (e.g. "upsert_skill")
    """

    def __init__(self, operation: str, message: str):
        super().__init__(f"[{operation}] {message}")
        self.operation = operation


SEVERITIES = ("critical", "high", "medium", "low")


@dataclass
class EngineError:
    """
    Structured record of one failure during a batch run.

    Serialized into batch results so callers can report per-person failures.
    """

    component: str  # e.g., "profile_builder", "team_matcher"
    subject: str  # person or project the failure is about
    severity: str  # "critical", "high", "medium", "low"
    message: str
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    recoverable: bool = True
    exception_type: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "component": self.component,
            "subject": self.subject,
            "severity": self.severity,
            "message": self.message,
            "timestamp": self.timestamp,
            "recoverable": self.recoverable,
            "exception_type": self.exception_type,
        }


class ErrorCollector:
    """Collects EngineErrors across a batch and summarises them."""

    def __init__(self):
        self.errors: List[EngineError] = []

    def add_exception(
        self,
        component: str,
        subject: str,
        exception: Exception,
        severity: str = "high",
    ) -> EngineError:
        """
        Record an exception raised while processing one subject.

        InvalidArgument is a caller bug and is marked non-recoverable; anything
        else (typically PersistenceFailure) may succeed on a later run.
        """
        error = EngineError(
            component=component,
            subject=subject,
            severity=severity,
            message=str(exception),
            recoverable=not isinstance(exception, InvalidArgument),
            exception_type=type(exception).__name__,
        )
        self.errors.append(error)
        return error

    def has_errors(self) -> bool:
        return bool(self.errors)

    def subjects(self) -> List[str]:
        """Subjects that failed, in the order they were recorded."""
        return [e.subject for e in self.errors]

    def summary(self) -> Dict[str, object]:
        """Get error summary statistics."""
        by_severity = {severity: 0 for severity in SEVERITIES}
        for error in self.errors:
            if error.severity in by_severity:
                by_severity[error.severity] += 1
        return {
            "total": len(self.errors),
            "by_severity": by_severity,
            "recoverable": sum(1 for e in self.errors if e.recoverable),
            "non_recoverable": sum(1 for e in self.errors if not e.recoverable),
        }


def log_on_exception(
    logger: logging.Logger,
    operation: str,
    level: int = logging.WARNING,
    include_traceback: bool = False,
):
    """
    Context manager that logs an exception and lets it propagate.

    Usage:
        with log_on_exception(logger, "persist profile", level=logging.ERROR, include_traceback=True):
            repository.append_evolution(snapshot, session=session)

    Args:
        logger: Logger instance to use
        operation: Operation description for the log message
        level: Log level (default: WARNING)
        include_traceback: Whether to include stack trace in log
    """

    class ExceptionLogger:
        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_val is not None:
                logger.log(level, f"[{operation}] Failed: {exc_val}", exc_info=include_traceback)
            # Never suppress
            return False

    return ExceptionLogger()
