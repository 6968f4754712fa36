"""
Low-level file access for documents.

Text is read and written as UTF-8 without newline translation, so a
document comes back byte-for-byte as it was stored.
"""

import shutil
from pathlib import Path

from .errors import io_error


def read_text(path: Path) -> str:
    """Read a document's full text.

    Raises:
        StoreIOError: If the file cannot be read or is not valid UTF-8
    """
    try:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise io_error("read", path, e) from e


def write_text(path: Path, content: str) -> None:
    """Replace a document's bytes, creating parent directories as needed."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        raise io_error("write", path, e) from e


def remove_file(path: Path) -> None:
    try:
        path.unlink()
    except OSError as e:
        raise io_error("delete", path, e) from e


def make_dir(path: Path) -> None:
    """Create a directory and its parents; existing directories are fine."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise io_error("create directory", path, e) from e


def remove_tree(path: Path) -> None:
    try:
        shutil.rmtree(path)
    except OSError as e:
        raise io_error("delete directory", path, e) from e
