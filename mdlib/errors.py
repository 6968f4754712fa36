"""
Error types for the document store, plus error logging for the CLI.

Logs full stack traces for debugging while showing clean messages to users.
"""

import os
import traceback
from datetime import datetime, timezone
from pathlib import Path


class StoreError(Exception):
    """Base class for document store errors."""


class DocumentNotFoundError(StoreError, LookupError):
    """An identifier did not resolve to a document through any tier."""

    def __init__(self, identifier: str, message: str | None = None):
        self.identifier = identifier
        super().__init__(message or f"Document not found: {identifier}")


class CategoryNotFoundError(DocumentNotFoundError):
    """A category directory does not exist."""

    def __init__(self, name: str):
        super().__init__(name, f"Category not found: {name}")


class InvalidNameError(StoreError, ValueError):
    """A document or category name is empty or points outside the root."""


class DocumentTooLargeError(StoreError, ValueError):
    """Content exceeds the configured maximum file size."""


class StoreIOError(StoreError):
    """
    A filesystem operation failed.

    The underlying OSError is chained as ``__cause__``.
    """

    def __init__(self, operation: str, path, cause: BaseException):
        self.operation = operation
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{operation} failed for {self.path}: {cause}")


class PermissionDeniedError(StoreIOError):
    """A filesystem operation was refused by the platform."""


def io_error(operation: str, path, exc: BaseException) -> StoreIOError:
    """Wrap a low-level error with the operation and path that caused it.

    Callers raise the result ``from exc`` so the original traceback is kept.
    """
    if isinstance(exc, PermissionError):
        return PermissionDeniedError(operation, path, exc)
    return StoreIOError(operation, path, exc)


def _error_log_path() -> Path:
    """Resolve error log path, respecting MDLIB_CONFIG_DIR."""
    from .config import get_config_dir
    return get_config_dir() / "mdlib-errors.log"


def log_exception(exc: Exception, context: str = "") -> Path:
    """
    Log exception with full traceback to file.

    Args:
        exc: The exception that occurred
        context: Optional context string (e.g., command name)

    Returns:
        Path to the error log file
    """
    log_path = _error_log_path()
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(log_path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
        with os.fdopen(fd, "a") as f:
            f.write(f"\n{'='*60}\n")
            f.write(f"[{timestamp}]")
            if context:
                f.write(f" {context}")
            f.write("\n")
            f.write("".join(traceback.format_exception(exc)))
    except OSError:
        pass  # Can't write error log; the caller still reports the error
    return log_path
