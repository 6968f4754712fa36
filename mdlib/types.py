"""
Data types for the document store.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


MARKDOWN_SUFFIX = ".md"

# Base names accepted by a scan without the .md suffix check
README_NAMES = frozenset({"readme", "readme.md"})


def is_markdown_name(name: str) -> bool:
    """True if the name carries the markdown extension (case-sensitive)."""
    return Path(name).suffix == MARKDOWN_SUFFIX


def is_readme_name(name: str) -> bool:
    """True for README-like names (``README``, ``readme.txt``, ``ReadMe.md``...).

    Looser than the scan rule: direct lookups accept any name starting
    with "readme".
    """
    return name.lower().startswith("readme")


def is_recognized(name: str) -> bool:
    """
    Decide whether a file with this base name belongs in the store.

    A file is recognized if it has the ``.md`` extension, or if its name is
    exactly ``readme`` or ``readme.md`` in any letter case.
    """
    return name.lower() in README_NAMES or is_markdown_name(name)


@dataclass
class Document:
    """
    Metadata for one document, derived from the filesystem on every scan.

    This is a read-only snapshot and is never cached; mutations go through
    DocumentStore and act on the file itself.

    Attributes:
        path: Absolute location on disk
        name: Base name including extension
        modified: Unix timestamp in seconds, None if not reported
        size: Length in bytes
        tags: Unique tags, front matter first then inline #markers
        category: Parent directory relative to the root, None at top level
    """
    path: Path
    name: str
    modified: Optional[int] = None
    size: int = 0
    tags: list[str] = field(default_factory=list)
    category: Optional[str] = None

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "path": str(self.path),
            "name": self.name,
            "modified": self.modified,
            "size": self.size,
            "tags": list(self.tags),
            "category": self.category,
        }

    def __str__(self) -> str:
        where = f"{self.category}/" if self.category else ""
        tags = f" [{', '.join(self.tags)}]" if self.tags else ""
        return f"{where}{self.name}{tags}"
