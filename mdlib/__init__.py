"""
mdlib

A personal document store over a plain directory of markdown files.
Categories are subdirectories; tags come from each document's front matter
and inline #markers.  There is no database: every call reads the tree.

Quick Start:
    from mdlib import DocumentStore

    store = DocumentStore("~/notes")
    store.create_document("groceries", "---\\ncategory: lists\\n---\\nmilk #weekly")
    store.add_tags("groceries.md", ["food"])
    results = store.search(tag="food")

CLI Usage:
    mdlib list
    mdlib search "milk" --tag food
    mdlib tag groceries.md -t food -r weekly
    mdlib mcp

Environment Variables:
    MDLIB_ROOT        - Document root (default: current directory)
    MDLIB_CONFIG_DIR  - Config and log directory (default: ~/.config/mdlib)
    MDLIB_VERBOSE     - Set to 1 for debug logging
"""

from .errors import (
    CategoryNotFoundError,
    DocumentNotFoundError,
    DocumentTooLargeError,
    InvalidNameError,
    PermissionDeniedError,
    StoreError,
    StoreIOError,
)
from .frontmatter import extract_frontmatter, rewrite_tags
from .resolver import resolve_document
from .scanner import resolve_category, scan
from .search import search
from .store import DocumentStore
from .tags import extract_tags
from .types import Document, is_recognized

__version__ = "0.1.0"
__all__ = [
    "DocumentStore",
    "Document",
    "scan",
    "search",
    "resolve_document",
    "resolve_category",
    "extract_frontmatter",
    "extract_tags",
    "rewrite_tags",
    "is_recognized",
    "StoreError",
    "DocumentNotFoundError",
    "CategoryNotFoundError",
    "InvalidNameError",
    "DocumentTooLargeError",
    "StoreIOError",
    "PermissionDeniedError",
]
