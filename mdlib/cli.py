"""
CLI interface for the document store.

Usage:
    mdlib list
    mdlib get notes/today.md
    mdlib search "query text" --tag todo
"""

import json
import os
import select
import sys
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from .config import get_config_dir, get_root, load_or_create_config
from .errors import DocumentNotFoundError, StoreError
from .logging_config import configure_ops_log, configure_quiet_mode, enable_debug_mode
from .store import DocumentStore
from .types import Document


def _has_stdin_data() -> bool:
    """Check if stdin has data available without blocking.

    Returns True only when stdin is a pipe with data ready to read.
    Returns False for TTYs and empty pipes.
    """
    if sys.stdin.isatty():
        return False
    try:
        ready, _, _ = select.select([sys.stdin], [], [], 0)
        return bool(ready)
    except (ValueError, OSError):
        return False


# Set MDLIB_VERBOSE=1 to enable debug mode via environment
if os.environ.get("MDLIB_VERBOSE") == "1":
    enable_debug_mode()
else:
    configure_quiet_mode(quiet=True)


def _version_callback(value: bool):
    if value:
        from importlib.metadata import version
        print(f"mdlib {version('mdlib')}")
        raise typer.Exit()


def _verbose_callback(value: bool):
    if value:
        enable_debug_mode()


# Global state for CLI options
_json_output = False


def _json_callback(value: bool):
    global _json_output
    _json_output = value


def _get_json_output() -> bool:
    return _json_output


app = typer.Typer(
    name="mdlib",
    help="Personal markdown document store.",
    no_args_is_help=True,
    rich_markup_mode=None,
)


@app.callback()
def main_callback(
    json_output: Annotated[bool, typer.Option(
        "--json", "-j",
        callback=_json_callback,
        is_eager=True,
        help="Output as JSON",
    )] = False,
    verbose: Annotated[bool, typer.Option(
        "--verbose", "-v",
        callback=_verbose_callback,
        is_eager=True,
        help="Enable debug-level logging to stderr",
    )] = False,
    version: Annotated[Optional[bool], typer.Option(
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    )] = None,
):
    """Personal markdown document store with tags and categories."""


RootOption = Annotated[
    Optional[Path],
    typer.Option(
        "--root", "-d",
        envvar="MDLIB_ROOT",
        help="Document root directory (default: current directory)",
    ),
]

ContentOption = Annotated[
    Optional[str],
    typer.Option("--content", "-c", help="Document content"),
]

FileOption = Annotated[
    Optional[Path],
    typer.Option("--file", "-f", help="Read content from this file"),
]


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _get_store(root: Optional[Path]) -> DocumentStore:
    """Open the store at root, applying config limits and the ops log."""
    try:
        config = load_or_create_config(get_config_dir())
        configure_ops_log(config.path)
    except (OSError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    return DocumentStore(get_root(root), max_file_size=config.max_file_size)


def _read_content(content: Optional[str], file: Optional[Path]) -> str:
    """Content from --content, --file, or piped stdin, in that order."""
    if content is not None and file is not None:
        typer.echo("Error: Specify either --content or --file, not both", err=True)
        raise typer.Exit(1)
    if content is not None:
        return content
    if file is not None:
        try:
            return file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            typer.echo(f"Error: cannot read {file}: {e}", err=True)
            raise typer.Exit(1)
    if _has_stdin_data():
        return sys.stdin.read()
    typer.echo("Error: Provide --content, --file, or pipe content on stdin", err=True)
    raise typer.Exit(1)


def _fail(e: StoreError) -> typer.Exit:
    """Report a store error the way users expect; returns the Exit to raise."""
    if isinstance(e, DocumentNotFoundError):
        typer.echo(f"Not found: {e.identifier}", err=True)
    else:
        typer.echo(f"Error: {e}", err=True)
    return typer.Exit(1)


def _format_documents(docs: list[Document]) -> str:
    if _get_json_output():
        return json.dumps([d.to_dict() for d in docs], indent=2)
    return "\n".join(str(d) for d in docs)


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

@app.command("list")
def list_cmd(
    root: RootOption = None,
):
    """List all documents, sorted by name."""
    store = _get_store(root)
    try:
        docs = store.list_documents()
    except StoreError as e:
        raise _fail(e)
    if docs:
        typer.echo(_format_documents(docs))
    elif _get_json_output():
        typer.echo("[]")


@app.command()
def get(
    identifier: Annotated[str, typer.Argument(help="Document name or path")],
    root: RootOption = None,
):
    """
    Print a document's content.

    \b
    Examples:
        mdlib get README
        mdlib get notes/today.md
        mdlib get today.md          # found in any category
    """
    store = _get_store(root)
    try:
        content = store.get_document(identifier)
    except StoreError as e:
        raise _fail(e)
    if _get_json_output():
        typer.echo(json.dumps({"identifier": identifier, "content": content}, indent=2))
    else:
        typer.echo(content, nl=False)


@app.command()
def create(
    name: Annotated[str, typer.Argument(help="Document name (.md is added if missing)")],
    content: ContentOption = None,
    file: FileOption = None,
    root: RootOption = None,
):
    """
    Create a document.

    A 'category:' line in the front matter places the document in that
    category directory.

    \b
    Examples:
        mdlib create today -c "# Today"
        mdlib create groceries -f ./draft.md
        echo "hello #inbox" | mdlib create scratch
    """
    text = _read_content(content, file)
    store = _get_store(root)
    try:
        rel = store.create_document(name, text)
    except StoreError as e:
        raise _fail(e)
    typer.echo(json.dumps({"path": rel}) if _get_json_output() else f"Created {rel}")


@app.command()
def update(
    identifier: Annotated[str, typer.Argument(help="Document name or path")],
    content: ContentOption = None,
    file: FileOption = None,
    root: RootOption = None,
):
    """Replace a document's content."""
    text = _read_content(content, file)
    store = _get_store(root)
    try:
        path = store.update_document(identifier, text)
    except StoreError as e:
        raise _fail(e)
    typer.echo(f"Updated {path.relative_to(store.root).as_posix()}")


@app.command()
def delete(
    identifier: Annotated[str, typer.Argument(help="Document name or path")],
    root: RootOption = None,
):
    """Delete a document."""
    store = _get_store(root)
    try:
        path = store.delete_document(identifier)
    except StoreError as e:
        raise _fail(e)
    typer.echo(f"Deleted {path.relative_to(store.root).as_posix()}")


@app.command()
def search(
    query: Annotated[Optional[str], typer.Argument(help="Text to search for (case-insensitive)")] = None,
    tag: Annotated[Optional[str], typer.Option(
        "--tag", "-t",
        help="Only documents with this tag",
    )] = None,
    category: Annotated[Optional[str], typer.Option(
        "--category", "-C",
        help="Only documents in this category",
    )] = None,
    root: RootOption = None,
):
    """
    Search documents by text, tag and category (all must match).

    \b
    Examples:
        mdlib search "meeting"
        mdlib search --tag todo
        mdlib search "budget" -C work/2024
    """
    store = _get_store(root)
    try:
        docs = store.search(text=query, tag=tag, category=category)
    except StoreError as e:
        raise _fail(e)
    if docs:
        typer.echo(_format_documents(docs))
    elif _get_json_output():
        typer.echo("[]")
    else:
        typer.echo("No matching documents.", err=True)


@app.command()
def tag(
    identifier: Annotated[str, typer.Argument(help="Document name or path")],
    add: Annotated[Optional[list[str]], typer.Option(
        "--tag", "-t",
        help="Tag to add (repeatable)",
    )] = None,
    remove: Annotated[Optional[list[str]], typer.Option(
        "--remove", "-r",
        help="Tag to remove (repeatable)",
    )] = None,
    root: RootOption = None,
):
    """
    Add or remove tags in a document's front matter.

    \b
    Examples:
        mdlib tag today.md -t work -t urgent
        mdlib tag today.md -r urgent
    """
    if not add and not remove:
        typer.echo("Error: Specify at least one --tag or --remove", err=True)
        raise typer.Exit(1)

    store = _get_store(root)
    try:
        tags = store.get_tags(identifier)
        if add:
            tags = store.add_tags(identifier, add)
        if remove:
            tags = store.remove_tags(identifier, remove)
    except StoreError as e:
        raise _fail(e)
    if _get_json_output():
        typer.echo(json.dumps({"identifier": identifier, "tags": tags}))
    else:
        typer.echo(f"{identifier}: {', '.join(tags) if tags else '(no tags)'}")


@app.command()
def categories(
    root: RootOption = None,
):
    """List categories, including empty ones."""
    store = _get_store(root)
    try:
        names = store.list_categories()
    except StoreError as e:
        raise _fail(e)
    if _get_json_output():
        typer.echo(json.dumps(names))
    elif names:
        typer.echo("\n".join(names))


@app.command("category-add")
def category_add(
    name: Annotated[str, typer.Argument(help="Category name; nested ones use '/'")],
    root: RootOption = None,
):
    """Create a category directory."""
    store = _get_store(root)
    try:
        store.create_category(name)
    except StoreError as e:
        raise _fail(e)
    typer.echo(f"Created category {name.strip()}")


@app.command("category-del")
def category_del(
    name: Annotated[str, typer.Argument(help="Category name")],
    yes: Annotated[bool, typer.Option(
        "--yes", "-y",
        help="Don't ask for confirmation",
    )] = False,
    root: RootOption = None,
):
    """Delete a category directory and every document in it."""
    if not yes:
        typer.confirm(f"Delete category '{name.strip()}' and all its documents?", abort=True)
    store = _get_store(root)
    try:
        store.delete_category(name)
    except StoreError as e:
        raise _fail(e)
    typer.echo(f"Deleted category {name.strip()}")


@app.command()
def config():
    """Show the configuration file and its values."""
    try:
        cfg = load_or_create_config(get_config_dir())
    except (OSError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    values = {
        "file": str(cfg.config_path),
        "server_address": cfg.server_address,
        "watch_files": cfg.watch_files,
        "max_file_size_mb": cfg.max_file_size_mb,
        "default_dark_mode": cfg.default_dark_mode,
    }
    if _get_json_output():
        typer.echo(json.dumps(values, indent=2))
    else:
        for key, value in values.items():
            typer.echo(f"{key}: {value}")


@app.command()
def mcp(
    root: RootOption = None,
):
    """Start MCP stdio server for AI agent integration."""
    if root is not None:
        os.environ["MDLIB_ROOT"] = str(root)
    from .mcp import main as mcp_main
    mcp_main()


# -----------------------------------------------------------------------------

def main():
    try:
        app()
    except SystemExit:
        raise  # Let typer handle exit codes
    except KeyboardInterrupt:
        raise SystemExit(130)  # Standard exit code for Ctrl+C
    except Exception as e:
        # Log full traceback to file, show clean message to user
        from .errors import log_exception
        log_path = log_exception(e, context="mdlib CLI")
        typer.echo(f"Error: {e}", err=True)
        typer.echo(f"Details logged to {log_path}", err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
