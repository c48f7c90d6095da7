"""
Centralized logging configuration for the skill engine.

Every message emitted through an EngineLogger carries a short context prefix
(run, component, person) so that interleaved output from concurrent profile
builds can still be followed per person:

    [run:1a2b3c4d] [profile_builder] [person:emp-42] Persisted 7 skills

Debug output is controlled by DEBUG_MODE or set_global_debug_mode().
"""

import logging
import os
import sys
from typing import Optional

from skill_engine.common.config import Config


_GLOBAL_DEBUG_MODE = os.getenv("DEBUG_MODE", "false").lower() == "true"


def set_global_debug_mode(enabled: bool) -> None:
    """Toggle DEBUG level for loggers created afterwards."""
    global _GLOBAL_DEBUG_MODE
    _GLOBAL_DEBUG_MODE = enabled


def is_debug_mode() -> bool:
    """Check if debug mode is enabled globally."""
    return _GLOBAL_DEBUG_MODE


class EngineLogger:
    """
    Context-prefixing wrapper around a stdlib logger.

    Use bind() to derive a logger for a narrower scope (e.g. one person)
    without repeating the run/component context.
    """

    def __init__(
        self,
        name: str,
        run_id: Optional[str] = None,
        component: Optional[str] = None,
        person_id: Optional[str] = None,
        debug_mode: Optional[bool] = None,
    ):
        """
        Args:
            name: Logger name (usually __name__)
            run_id: Optional run identifier for correlation (first 8 chars shown)
            component: Optional component name (e.g., "profile_builder")
            person_id: Optional person the messages are about
            debug_mode: Force DEBUG level on/off; None follows the global flag
        """
        self.logger = logging.getLogger(name)
        self.run_id = run_id
        self.component = component
        self.person_id = person_id
        self._debug_mode = debug_mode if debug_mode is not None else is_debug_mode()

        if self._debug_mode:
            self.logger.setLevel(logging.DEBUG)

    def bind(
        self,
        run_id: Optional[str] = None,
        component: Optional[str] = None,
        person_id: Optional[str] = None,
    ) -> "EngineLogger":
        """Return a child logger that overrides the given context fields."""
        return EngineLogger(
            self.logger.name,
            run_id=run_id or self.run_id,
            component=component or self.component,
            person_id=person_id or self.person_id,
            debug_mode=self._debug_mode,
        )

    def _format_message(self, message: str) -> str:
        prefix_parts = []
        if self.run_id:
            prefix_parts.append(f"[run:{self.run_id[:8]}]")
        if self.component:
            prefix_parts.append(f"[{self.component}]")
        if self.person_id:
            prefix_parts.append(f"[person:{self.person_id}]")

        if prefix_parts:
            return f"{' '.join(prefix_parts)} {message}"
        return message

    def debug(self, message: str, **kwargs):
        self.logger.debug(self._format_message(message), **kwargs)

    def info(self, message: str, **kwargs):
        self.logger.info(self._format_message(message), **kwargs)

    def warning(self, message: str, **kwargs):
        self.logger.warning(self._format_message(message), **kwargs)

    def error(self, message: str, **kwargs):
        self.logger.error(self._format_message(message), **kwargs)

    def exception(self, message: str, **kwargs):
        """Log at ERROR with the active traceback."""
        self.logger.exception(self._format_message(message), **kwargs)


def setup_logging(level: Optional[str] = None, format: Optional[str] = None) -> None:
    """
    Configure the root logger with a single stdout handler.

    Args:
        level: Log level name; defaults to Config.LOG_LEVEL
        format: "simple" or "json"; defaults to Config.LOG_FORMAT
    """
    level = level or Config.LOG_LEVEL
    format = format or Config.LOG_FORMAT
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if format == "json":
        formatter = logging.Formatter(
            '{"time": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}'
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def get_logger(
    name: str,
    run_id: Optional[str] = None,
    component: Optional[str] = None,
    person_id: Optional[str] = None,
    debug_mode: Optional[bool] = None,
) -> EngineLogger:
    """Get an EngineLogger for the given context."""
    return EngineLogger(name, run_id, component, person_id, debug_mode)
