"""
Document store operations.

DocumentStore is a thin, stateless handle on a root directory.  Every
method re-reads the tree; there is no index to keep in sync.  The only
shared state is a per-path lock held for the duration of one mutation, so
that two threads editing the same file's tags do not interleave.
"""

import logging
import threading
import weakref
from contextlib import contextmanager
from pathlib import Path, PurePosixPath
from typing import Iterable, Iterator, Optional

from . import files
from .errors import CategoryNotFoundError, DocumentTooLargeError, InvalidNameError
from .frontmatter import CATEGORY_KEY, get_field, rewrite_tags
from .resolver import resolve_document
from .scanner import list_directories, scan
from .search import search as search_documents
from .tags import extract_tags
from .types import MARKDOWN_SUFFIX, Document

logger = logging.getLogger(__name__)


class _PathLock:
    __slots__ = ("lock", "__weakref__")

    def __init__(self):
        self.lock = threading.Lock()


_locks_guard = threading.Lock()
_locks: "weakref.WeakValueDictionary[str, _PathLock]" = weakref.WeakValueDictionary()


@contextmanager
def _locked(path: Path) -> Iterator[None]:
    """Hold the lock for one resolved file; dropped once no caller needs it."""
    key = str(path.resolve())
    with _locks_guard:
        entry = _locks.get(key)
        if entry is None:
            entry = _PathLock()
            _locks[key] = entry
    with entry.lock:
        yield


def _relative_parts(name: str) -> PurePosixPath:
    """Validate a root-relative name; reject absolute paths and '..'."""
    rel = PurePosixPath(name.replace("\\", "/"))
    if rel.is_absolute() or ".." in rel.parts or not rel.parts:
        raise InvalidNameError(f"Name must stay inside the document root: {name!r}")
    return rel


class DocumentStore:
    """
    Markdown documents under a root directory.

    Categories are subdirectories; tags live in each document's front
    matter and inline ``#markers``.
    """

    def __init__(self, root: Path, *, max_file_size: Optional[int] = None):
        """
        Args:
            root: Directory holding the documents
            max_file_size: Largest content in bytes accepted by create and
                update; None for no limit
        """
        self.root = Path(root).expanduser().absolute()
        self.max_file_size = max_file_size

    def __repr__(self) -> str:
        return f"DocumentStore({str(self.root)!r})"

    def _check_size(self, content: str) -> None:
        if self.max_file_size is None:
            return
        size = len(content.encode("utf-8"))
        if size > self.max_file_size:
            raise DocumentTooLargeError(
                f"Content too large: {size:,} bytes (limit: {self.max_file_size:,} bytes)"
            )

    # -------------------------------------------------------------------------
    # Read Operations
    # -------------------------------------------------------------------------

    def list_documents(self) -> list[Document]:
        """All documents, sorted by name."""
        return scan(self.root)

    def resolve(self, identifier: str) -> Path:
        """Path of the document an identifier refers to."""
        return resolve_document(self.root, identifier)

    def get_document(self, identifier: str) -> str:
        """Full text of a document, exactly as stored."""
        return files.read_text(self.resolve(identifier))

    def get_tags(self, identifier: str) -> list[str]:
        return extract_tags(self.get_document(identifier))

    def search(
        self,
        text: Optional[str] = None,
        tag: Optional[str] = None,
        category: Optional[str] = None,
    ) -> list[Document]:
        """Documents matching all of the given filters (see search.search)."""
        return search_documents(self.root, text=text, tag=tag, category=category)

    def list_categories(self) -> list[str]:
        """
        Every category in use or available.

        Combines categories of existing documents with all non-hidden
        directories, so empty categories are listed too.
        """
        categories = {doc.category for doc in scan(self.root) if doc.category}
        categories.update(list_directories(self.root))
        return sorted(categories)

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    def create_document(self, name: str, content: str) -> str:
        """
        Write a new document.

        ``.md`` is appended to the name unless present.  If the content's
        front matter names a ``category:``, the document goes in that
        directory (created if needed), otherwise directly under the root.
        An existing file with the same name is overwritten.

        Returns:
            Path written, relative to the root, "/"-separated

        Raises:
            InvalidNameError: If the name is blank or leaves the root
        """
        name = name.strip()
        if not name:
            raise InvalidNameError("Document name cannot be empty")
        self._check_size(content)

        filename = name if name.endswith(MARKDOWN_SUFFIX) else f"{name}{MARKDOWN_SUFFIX}"
        rel = _relative_parts(filename)

        category = (get_field(content, CATEGORY_KEY) or "").strip()
        if category:
            rel = self._category_path(category) / rel

        path = self.root / rel
        with _locked(path):
            files.write_text(path, content)
        logger.info("Created %s", rel.as_posix())
        return rel.as_posix()

    def update_document(self, identifier: str, content: str) -> Path:
        """Replace a document's content entirely."""
        self._check_size(content)
        path = self.resolve(identifier)
        with _locked(path):
            files.write_text(path, content)
        logger.info("Updated %s", path)
        return path

    def delete_document(self, identifier: str) -> Path:
        path = self.resolve(identifier)
        with _locked(path):
            files.remove_file(path)
        logger.info("Deleted %s", path)
        return path

    def add_tags(self, identifier: str, tags: Iterable[str]) -> list[str]:
        """
        Add tags to a document's front matter.

        Tags already present are skipped.  If nothing new is added the file
        is not touched, so repeating a call is harmless.

        Returns:
            The document's tags after the change
        """
        path = self.resolve(identifier)
        with _locked(path):
            content = files.read_text(path)
            current = extract_tags(content)
            added = [t for t in dict.fromkeys(tags) if t and t not in current]
            if not added:
                return current
            new_content = rewrite_tags(content, current + added)
            files.write_text(path, new_content)
        logger.info("Tagged %s: +%s", path, ", ".join(added))
        # Read back: a tag like "a,b" is stored as two
        return extract_tags(new_content)

    def remove_tags(self, identifier: str, tags: Iterable[str]) -> list[str]:
        """
        Remove tags from a document's front matter (exact match).

        The body is never edited, so a tag that also appears as an inline
        ``#marker`` is still reported afterwards.

        Returns:
            The document's tags after the change
        """
        path = self.resolve(identifier)
        remove = set(tags)
        with _locked(path):
            content = files.read_text(path)
            kept = [t for t in extract_tags(content) if t not in remove]
            new_content = rewrite_tags(content, kept)
            if new_content != content:
                files.write_text(path, new_content)
                logger.info("Tagged %s: -%s", path, ", ".join(sorted(remove)))
        return extract_tags(new_content)

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def _category_path(self, name: str) -> PurePosixPath:
        name = name.strip()
        if not name:
            raise InvalidNameError("Category name cannot be empty")
        return _relative_parts(name)

    def create_category(self, name: str) -> Path:
        """Create a category directory; existing ones are left as they are."""
        path = self.root / self._category_path(name)
        files.make_dir(path)
        logger.info("Created category %s", path)
        return path

    def delete_category(self, name: str) -> Path:
        """
        Delete a category directory and everything in it.

        Raises:
            CategoryNotFoundError: If the directory does not exist
        """
        rel = self._category_path(name)
        path = self.root / rel
        if not path.exists():
            raise CategoryNotFoundError(rel.as_posix())
        files.remove_tree(path)
        logger.info("Deleted category %s", path)
        return path
