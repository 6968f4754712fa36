"""
MCP stdio server for mdlib: document store tools for AI agents.

Exposes DocumentStore operations as MCP tools so local agents can read,
write, tag and search a directory of markdown notes.

Usage:
    mdlib mcp --root ~/notes                 # stdio server (via CLI)
    claude --mcp-server mdlib="mdlib mcp"    # Claude Code integration

All store calls are serialized through a single asyncio.Lock.
"""

import asyncio
import json
import os
from typing import Annotated, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from .config import get_root, load_or_create_config
from .errors import DocumentNotFoundError, StoreError
from .store import DocumentStore

# ---------------------------------------------------------------------------
# Server setup
# ---------------------------------------------------------------------------

mcp = FastMCP(
    "mdlib",
    instructions=(
        "Personal markdown document store. "
        "Documents are addressed by name, relative path, or bare file name. "
        "Categories are folders; tags live in front matter and inline #markers."
    ),
)

_store: Optional[DocumentStore] = None
_lock = asyncio.Lock()


def _get_store() -> DocumentStore:
    """Lazy-init the store (respects MDLIB_ROOT and MDLIB_CONFIG_DIR).

    Must be called inside ``async with _lock``.
    """
    global _store
    if _store is None:
        config = load_or_create_config()
        _store = DocumentStore(get_root(), max_file_size=config.max_file_size)
    return _store


def _error(e: StoreError) -> str:
    if isinstance(e, DocumentNotFoundError):
        return f"Not found: {e.identifier}"
    return f"Error: {e}"


# ---------------------------------------------------------------------------
# Tool annotations
# ---------------------------------------------------------------------------

_READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False)
_IDEMPOTENT = ToolAnnotations(idempotentHint=True, destructiveHint=False)
_DESTRUCTIVE = ToolAnnotations(destructiveHint=True, idempotentHint=False)

_IDENTIFIER_HELP = (
    "Document name ('todo.md', 'README'), relative path ('work/todo.md'), "
    "or a bare file name found in any category."
)


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@mcp.tool(
    description="List all documents with their category, tags, size and modification time.",
    annotations=_READ_ONLY,
)
async def mdlib_list() -> str:
    """List documents as JSON records."""
    async with _lock:
        try:
            docs = _get_store().list_documents()
        except StoreError as e:
            return _error(e)
    return json.dumps([d.to_dict() for d in docs], indent=2)


@mcp.tool(
    description="Read the full markdown content of a document.",
    annotations=_READ_ONLY,
)
async def mdlib_get(
    identifier: Annotated[str, Field(description=_IDENTIFIER_HELP)],
) -> str:
    """Return document content."""
    async with _lock:
        try:
            return _get_store().get_document(identifier)
        except StoreError as e:
            return _error(e)


@mcp.tool(
    description=(
        "Create a markdown document. '.md' is appended to the name if missing. "
        "A 'category: <name>' line in the front matter files it under that category."
    ),
    annotations=_IDEMPOTENT,
)
async def mdlib_create(
    name: Annotated[str, Field(description="Document name, e.g. 'meeting-notes'.")],
    content: Annotated[str, Field(description="Full markdown content, front matter included.")],
) -> str:
    """Create a document."""
    async with _lock:
        try:
            rel = _get_store().create_document(name, content)
        except StoreError as e:
            return _error(e)
    return f"Created: {rel}"


@mcp.tool(
    description="Replace the full content of an existing document.",
    annotations=_IDEMPOTENT,
)
async def mdlib_update(
    identifier: Annotated[str, Field(description=_IDENTIFIER_HELP)],
    content: Annotated[str, Field(description="New full markdown content.")],
) -> str:
    """Overwrite a document."""
    async with _lock:
        store = _get_store()
        try:
            path = store.update_document(identifier, content)
        except StoreError as e:
            return _error(e)
    return f"Updated: {path.relative_to(store.root).as_posix()}"


@mcp.tool(
    description="Delete a document permanently.",
    annotations=_DESTRUCTIVE,
)
async def mdlib_delete(
    identifier: Annotated[str, Field(description=_IDENTIFIER_HELP)],
) -> str:
    """Delete a document."""
    async with _lock:
        store = _get_store()
        try:
            path = store.delete_document(identifier)
        except StoreError as e:
            return _error(e)
    return f"Deleted: {path.relative_to(store.root).as_posix()}"


@mcp.tool(
    description=(
        "Search documents. All given filters must match: text is a case-insensitive "
        "substring of the content, tag and category match case-insensitively."
    ),
    annotations=_READ_ONLY,
)
async def mdlib_search(
    text: Annotated[Optional[str], Field(description="Text to look for in document content.")] = None,
    tag: Annotated[Optional[str], Field(description="Only documents carrying this tag.")] = None,
    category: Annotated[Optional[str], Field(description="Only documents in this category.")] = None,
) -> str:
    """Search documents; JSON records."""
    async with _lock:
        try:
            docs = _get_store().search(text=text, tag=tag, category=category)
        except StoreError as e:
            return _error(e)
    return json.dumps([d.to_dict() for d in docs], indent=2)


@mcp.tool(
    description=(
        "Add and/or remove tags in a document's front matter. "
        "Adding a tag that is already present changes nothing."
    ),
    annotations=_IDEMPOTENT,
)
async def mdlib_tag(
    identifier: Annotated[str, Field(description=_IDENTIFIER_HELP)],
    add: Annotated[Optional[list[str]], Field(description="Tags to add.")] = None,
    remove: Annotated[Optional[list[str]], Field(description="Tags to remove.")] = None,
) -> str:
    """Edit tags; returns the resulting tag list."""
    if not add and not remove:
        return "Error: specify tags to add or remove"
    async with _lock:
        store = _get_store()
        try:
            tags = store.get_tags(identifier)
            if add:
                tags = store.add_tags(identifier, add)
            if remove:
                tags = store.remove_tags(identifier, remove)
        except StoreError as e:
            return _error(e)
    return f"Tags: {', '.join(tags)}" if tags else "Tags: (none)"


@mcp.tool(
    description="List all categories, including empty ones.",
    annotations=_READ_ONLY,
)
async def mdlib_categories() -> str:
    """List categories as a JSON array."""
    async with _lock:
        try:
            names = _get_store().list_categories()
        except StoreError as e:
            return _error(e)
    return json.dumps(names)


@mcp.tool(
    description="Create a category (a folder). Nested categories use '/'.",
    annotations=_IDEMPOTENT,
)
async def mdlib_category_create(
    name: Annotated[str, Field(description="Category name, e.g. 'work' or 'work/2024'.")],
) -> str:
    """Create a category."""
    async with _lock:
        try:
            _get_store().create_category(name)
        except StoreError as e:
            return _error(e)
    return f"Created category: {name.strip()}"


@mcp.tool(
    description="Delete a category folder and every document inside it.",
    annotations=_DESTRUCTIVE,
)
async def mdlib_category_delete(
    name: Annotated[str, Field(description="Category name.")],
) -> str:
    """Delete a category."""
    async with _lock:
        try:
            _get_store().delete_category(name)
        except StoreError as e:
            return _error(e)
    return f"Deleted category: {name.strip()}"


def main():
    """Run the MCP stdio server."""
    import signal
    # The stdio reader blocks in readline; exit directly on Ctrl+C.
    signal.signal(signal.SIGINT, lambda *_: os._exit(130))
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
