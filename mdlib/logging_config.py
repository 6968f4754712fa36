"""
Logging configuration for mdlib.

Quiet by default: only warnings from mdlib reach the console.
"""

import logging
import os
import sys
import warnings
from logging.handlers import RotatingFileHandler
from pathlib import Path

OPS_LOG_FILENAME = "mdlib-ops.log"


def configure_quiet_mode(quiet: bool = True):
    """
    Keep console output to what the user asked for.

    Args:
        quiet: If True, suppress warnings and info logging. If False, show everything.
    """
    if quiet:
        warnings.filterwarnings("ignore")
        logging.getLogger("mdlib").setLevel(logging.WARNING)
        # FastMCP logs every request at INFO
        logging.getLogger("mcp").setLevel(logging.WARNING)
    else:
        warnings.filterwarnings("default")
        logging.getLogger("mdlib").setLevel(logging.INFO)


def enable_debug_mode():
    """Enable debug-level logging to stderr."""
    warnings.filterwarnings("default")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if not any(isinstance(h, logging.StreamHandler) and h.stream == sys.stderr
               for h in root_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S"
        ))
        root_logger.addHandler(handler)

    for name in ("mdlib", "mcp"):
        logging.getLogger(name).setLevel(logging.DEBUG)


def configure_ops_log(log_dir):
    """Configure a persistent operations log.

    Writes to {log_dir}/mdlib-ops.log using a rotating file handler
    (1MB max, 3 backups).  Every create, update, delete and tag change is
    recorded, regardless of --verbose.  Calling again for the same
    directory reuses the existing handler.  Returns the handler.
    """
    log_path = Path(log_dir) / OPS_LOG_FILENAME
    mdlib_logger = logging.getLogger("mdlib")

    for existing in mdlib_logger.handlers:
        if isinstance(existing, RotatingFileHandler) and existing.baseFilename == os.path.abspath(log_path):
            return existing

    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        str(log_path),
        maxBytes=1_000_000,
        backupCount=3,
    )
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    mdlib_logger.addHandler(handler)
    # Let INFO through to the file even in quiet mode
    if mdlib_logger.level == logging.NOTSET or mdlib_logger.level > logging.INFO:
        mdlib_logger.setLevel(logging.INFO)

    return handler
