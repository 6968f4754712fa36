"""
Search and filtering over a scan.
"""

import logging
from pathlib import Path
from typing import Optional

from .errors import StoreIOError
from .files import read_text
from .scanner import scan
from .types import Document

logger = logging.getLogger(__name__)


def _text_matches(doc: Document, needle: str) -> bool:
    try:
        content = read_text(doc.path)
    except StoreIOError as e:
        logger.debug("Excluding unreadable %s from text search: %s", doc.path, e)
        return False
    return needle in content.casefold()


def _tag_matches(doc: Document, tag: str) -> bool:
    wanted = tag.casefold()
    return any(t.casefold() == wanted for t in doc.tags)


def _category_matches(doc: Document, category: str) -> bool:
    return doc.category is not None and doc.category.casefold() == category.casefold()


def search(
    root: Path,
    text: Optional[str] = None,
    tag: Optional[str] = None,
    category: Optional[str] = None,
) -> list[Document]:
    """
    Scan root and keep documents matching every given filter.

    Args:
        root: Document root
        text: Case-insensitive substring of the full content, surrounding
            spaces included. Blank means no text filter.
        tag: Case-insensitive exact tag match
        category: Case-insensitive exact category match; uncategorized
            documents never match. Empty means no category filter.

    Returns:
        Matching documents in scan order
    """
    # Blank queries are ignored; others match as given, spaces included
    needle = text.casefold() if text and text.strip() else None
    results = []
    for doc in scan(root):
        if tag is not None and not _tag_matches(doc, tag):
            continue
        if category and not _category_matches(doc, category):
            continue
        if needle is not None and not _text_matches(doc, needle):
            continue
        results.append(doc)
    return results
