"""
Identifier resolution.

Callers address documents loosely: by display name ("README"), by relative
path ("notes/today.md", or "notes\\today.md" from Windows clients), or by a
bare name that lives somewhere in a category ("today.md").  Three tiers are
tried in order and the first hit wins:

1. direct: root/identifier is a markdown file or a README
2. path: identifier contains a separator; root/identifier with "\\" read as
   "/", markdown extension required
3. scan: first document (in scan order) whose name matches the last path
   segment of identifier, ignoring case; failing that, that segment plus
   ".md" ("today" finds "today.md")

Tier 3 scans the whole tree on every call.
"""

import logging
import re
from pathlib import Path, PurePosixPath
from typing import Optional

from .errors import DocumentNotFoundError
from .scanner import scan
from .types import MARKDOWN_SUFFIX, is_markdown_name, is_readme_name

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[/\\]")


def _join_inside(root: Path, relative: str) -> Optional[Path]:
    """root/relative, or None if relative is absolute or climbs out with '..'."""
    if not relative:
        return None
    rel = PurePosixPath(relative)
    if rel.is_absolute() or ".." in rel.parts or Path(relative).is_absolute():
        return None
    return root / relative


def _direct(root: Path, identifier: str) -> Optional[Path]:
    path = _join_inside(root, identifier)
    if path is None or not path.is_file():
        return None
    if is_markdown_name(path.name) or is_readme_name(path.name):
        return path
    return None


def _by_path(root: Path, identifier: str) -> Optional[Path]:
    # READMEs without the extension are accepted by the direct tier only.
    if not _SEPARATORS.search(identifier):
        return None
    path = _join_inside(root, identifier.replace("\\", "/"))
    if path is None or not path.is_file():
        return None
    return path if is_markdown_name(path.name) else None


def _by_scan(root: Path, identifier: str) -> Optional[Path]:
    target = _SEPARATORS.split(identifier)[-1].lower()
    if not target:
        return None
    docs = scan(root)
    # An exact name beats the same name with ".md" added ("x" -> "x.md")
    for wanted in (target, f"{target}{MARKDOWN_SUFFIX}"):
        for doc in docs:
            if doc.name.lower() == wanted:
                return doc.path
    return None


def resolve_document(root: Path, identifier: str) -> Path:
    """
    Map a caller-supplied identifier to a document path.

    Raises:
        DocumentNotFoundError: If no tier finds a document
        StoreIOError: If the fallback scan cannot traverse root
    """
    root = Path(root).absolute()
    for tier in (_direct, _by_path, _by_scan):
        path = tier(root, identifier)
        if path is not None:
            logger.debug("Resolved %r via %s: %s", identifier, tier.__name__, path)
            return path
    raise DocumentNotFoundError(identifier)
