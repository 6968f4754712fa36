"""
Directory scanning.

Walks the document root and derives a Document record for every
recognized file.  Nothing is cached: each call reflects the tree as it is
on disk right now.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, Optional

from .errors import StoreIOError, io_error
from .files import read_text
from .tags import extract_tags
from .types import Document, is_recognized

logger = logging.getLogger(__name__)


def _check_root(root: Path) -> None:
    """Fail early if the root itself cannot be listed."""
    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise io_error("scan", root, e) from e


def walk_tree(root: Path) -> Iterator[tuple[Path, list[str], list[str]]]:
    """
    Walk the tree under root, following symbolic links.

    Yields (directory, dirnames, filenames) like os.walk; callers may prune
    dirnames in place.  A subdirectory whose real path is one of its own
    ancestors is not entered, which stops symlink cycles; other links to
    the same directory are each walked.  Subdirectories that cannot be
    listed are skipped.

    Raises:
        StoreIOError: If root does not exist or cannot be listed
    """
    _check_root(root)
    top = os.fspath(root)
    # dirpath -> real paths of that directory and everything above it
    ancestors: dict[str, frozenset[str]] = {top: frozenset({os.path.realpath(top)})}

    def _skip(err: OSError) -> None:
        logger.debug("Skipping unreadable directory %s: %s", err.filename, err)

    for dirpath, dirnames, filenames in os.walk(top, followlinks=True, onerror=_skip):
        chain = ancestors.pop(dirpath, frozenset())
        kept = []
        for name in dirnames:
            child = os.path.join(dirpath, name)
            real = os.path.realpath(child)
            if real in chain:
                logger.debug("Not following cycle at %s", child)
                continue
            ancestors[child] = chain | {real}
            kept.append(name)
        dirnames[:] = kept
        yield Path(dirpath), dirnames, filenames


def resolve_category(root: Path, path: Path) -> Optional[str]:
    """
    Category of a document: its parent directory relative to root.

    Returns None for documents directly under root.  Nested directories keep
    all their segments, joined with "/".
    """
    root = Path(root)
    path = Path(path)
    try:
        rel = path.relative_to(root)
    except ValueError:
        # Different spellings of the same location (symlinks, "..")
        try:
            rel = path.resolve().relative_to(root.resolve())
        except (ValueError, OSError):
            return None
    parent = rel.parent
    if parent == Path("."):
        return None
    return parent.as_posix()


def _load_document(root: Path, path: Path) -> Optional[Document]:
    """Build the record for one file; None if its metadata is unavailable."""
    if not path.is_file():
        return None
    try:
        st = path.stat()
    except OSError as e:
        logger.debug("Skipping %s: %s", path, e)
        return None

    try:
        tags = extract_tags(read_text(path))
    except StoreIOError as e:
        logger.debug("No tags for %s: %s", path, e)
        tags = []

    return Document(
        path=path,
        name=path.name,
        modified=int(st.st_mtime) if st.st_mtime >= 0 else None,
        size=st.st_size,
        tags=tags,
        category=resolve_category(root, path),
    )


def scan(root: Path) -> list[Document]:
    """
    List every recognized document under root, sorted by name.

    Names compare by code point, so "Readme" sorts before "a.md".
    Unreadable files are skipped rather than failing the scan.

    Raises:
        StoreIOError: If root itself cannot be traversed
    """
    root = Path(root).absolute()
    documents = []
    for dirpath, _, filenames in walk_tree(root):
        for filename in filenames:
            if not is_recognized(filename):
                continue
            doc = _load_document(root, dirpath / filename)
            if doc is not None:
                documents.append(doc)
    documents.sort(key=lambda d: d.name)
    return documents


def list_directories(root: Path) -> list[str]:
    """Every directory below root, relative and "/"-joined, skipping hidden ones."""
    root = Path(root).absolute()
    result = []
    for dirpath, dirnames, _ in walk_tree(root):
        dirnames[:] = [d for d in dirnames if not d.startswith(".")]
        if dirpath != root:
            result.append(dirpath.relative_to(root).as_posix())
    return result
