"""
Structured logging for the permit portal: JSON log lines, audit helpers for
registry mutations and staff actions, and a per-process error tracker.
"""

import logging
import logging.handlers
import json
import traceback
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional
from contextlib import contextmanager
import streamlit as st

from config.app_config import AppConfig, get_config


# Attributes every LogRecord carries; anything else was passed through `extra`
_RESERVED_RECORD_KEYS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'taskName', 'message', 'asctime'
}

# Registry records hold plaintext passwords; never let them reach a log sink
SENSITIVE_KEYS = {'password', 'supabase_key', 'apikey', 'authorization'}
REDACTED = "***"

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def redact(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of fields with sensitive values masked, nested dicts included"""
    clean = {}
    for key, value in fields.items():
        if key.lower() in SENSITIVE_KEYS:
            clean[key] = REDACTED
        elif isinstance(value, dict):
            clean[key] = redact(value)
        else:
            clean[key] = value
    return clean


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per line: timestamp, level, logger, message and source
    location, plus an `exception` block and any `extra` fields (redacted).
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": traceback.format_exception(*record.exc_info)
            }

        extra_fields = {
            key: value for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_KEYS
        }
        if extra_fields:
            entry["extra"] = redact(extra_fields)

        return json.dumps(entry, ensure_ascii=False, default=str)


class StreamlitLogHandler(logging.Handler):
    """
    Pushes error records into the running page (development only)
    """

    def emit(self, record: logging.LogRecord):
        try:
            if record.levelno >= logging.ERROR:
                st.error(f"🚨 {record.getMessage()}")
            elif record.levelno >= logging.WARNING:
                st.warning(f"⚠️ {record.getMessage()}")
        except Exception:
            self.handleError(record)


def setup_logging(config: Optional[AppConfig] = None) -> logging.Logger:
    """
    Configure the root logger from the logging section of the app config

    Console output is human-readable in debug mode and JSON otherwise. The
    rotating file always receives JSON at DEBUG level.

    Args:
        config: Application config; the global config when omitted

    Returns:
        logging.Logger: Configured root logger
    """
    config = config or get_config()
    level = getattr(logging, config.logging.level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    if config.debug:
        console_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s [%(filename)s:%(lineno)d]'
        ))
    else:
        console_handler.setFormatter(StructuredFormatter())
    root_logger.addHandler(console_handler)

    if config.logging.enable_file_logging:
        Path(config.logging.log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            config.logging.log_file,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)

    # Failed logins are warnings; only errors are pushed into the page
    if config.debug and config.environment == "development":
        streamlit_handler = StreamlitLogHandler()
        streamlit_handler.setLevel(logging.ERROR)
        streamlit_handler.setFormatter(logging.Formatter('%(message)s'))
        root_logger.addHandler(streamlit_handler)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


@contextmanager
def log_execution_time(logger: logging.Logger, operation: str, **extra_fields):
    """
    Time a block: DEBUG on entry, INFO with the duration on success, ERROR on
    failure. Exceptions are re-raised unchanged.

    Args:
        logger: Logger instance
        operation: Short operation name, e.g. "registry_resync"
        **extra_fields: Additional fields to include in every record
    """
    started = datetime.now()
    logger.debug(f"Starting {operation}", extra={
        "operation": operation,
        "start_time": started.isoformat(),
        **extra_fields
    })

    try:
        yield
    except Exception as e:
        logger.error(f"Failed {operation}: {e}", extra={
            "operation": operation,
            "duration_seconds": (datetime.now() - started).total_seconds(),
            "status": "error",
            "error_type": type(e).__name__,
            "error_message": str(e),
            **extra_fields
        })
        raise

    logger.info(f"Completed {operation}", extra={
        "operation": operation,
        "duration_seconds": (datetime.now() - started).total_seconds(),
        "status": "success",
        **extra_fields
    })


def log_user_interaction(logger: logging.Logger, interaction_type: str, **details):
    """
    Audit a staff action

    Args:
        logger: Logger instance
        interaction_type: e.g. "login", "login_failed", "navigate", "export"
        **details: Who and what, e.g. username, view, records
    """
    logger.info(f"Staff {interaction_type}", extra={
        "event_type": "user_interaction",
        "interaction_type": interaction_type,
        "timestamp": datetime.now().isoformat(),
        **details
    })


def log_registry_event(logger: logging.Logger, event_type: str, record_id: str, **details):
    """
    Audit a write against the registry

    Args:
        logger: Logger instance
        event_type: e.g. "permit_registered", "user_updated", "permit_deleted"
        record_id: Id of the affected permit or user
        **details: Additional event fields (passwords are redacted by the formatter)
    """
    logger.info(f"Registry {event_type}", extra={
        "event_type": "registry_event",
        "registry_event_type": event_type,
        "record_id": record_id,
        "timestamp": datetime.now().isoformat(),
        **details
    })


class ErrorTracker:
    """
    Counts failures per exception type and context for the running process
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.error_counts: Dict[str, int] = {}
        self.last_error: Optional[Dict[str, Any]] = None

    def track_error(self, error: Exception, context: str = "", **extra_info):
        """
        Log an error with its traceback and bump its counter

        Args:
            error: Exception that occurred
            context: Where it happened, e.g. "startup_sync", "register_permit"
            **extra_info: Additional fields for the log record
        """
        error_type = type(error).__name__
        error_key = f"{error_type}:{context}"
        self.error_counts[error_key] = self.error_counts.get(error_key, 0) + 1
        self.last_error = {
            "error_type": error_type,
            "context": context,
            "message": str(error),
            "timestamp": datetime.now().isoformat(),
        }

        self.logger.error(f"Error in {context}: {error}", extra={
            "event_type": "error",
            "error_type": error_type,
            "error_message": str(error),
            "context": context,
            "error_count": self.error_counts[error_key],
            **extra_info
        }, exc_info=error)

    def get_error_summary(self) -> Dict[str, Any]:
        return {
            "total_errors": sum(self.error_counts.values()),
            "unique_errors": len(self.error_counts),
            "error_breakdown": dict(self.error_counts),
            "last_error": self.last_error,
            "timestamp": datetime.now().isoformat()
        }


_logger_setup = False
_error_tracker: Optional[ErrorTracker] = None


def initialize_logging(config: Optional[AppConfig] = None) -> ErrorTracker:
    """
    Configure logging once per process and return the shared error tracker
    """
    global _logger_setup, _error_tracker

    if not _logger_setup:
        setup_logging(config)
        _logger_setup = True

    if _error_tracker is None:
        _error_tracker = ErrorTracker(logging.getLogger("pta.errors"))

    return _error_tracker


def get_error_tracker() -> ErrorTracker:
    if _error_tracker is None:
        return initialize_logging()
    return _error_tracker
