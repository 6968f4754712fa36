"""
Shared pytest fixtures for mdlib tests.

Builds a small document tree on disk; every test gets its own copy.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from mdlib.store import DocumentStore


# Layout of the sample tree: relative path -> content
SAMPLE_FILES = {
    "README": "# My notes\n\nStart here. #welcome\n",
    "a.md": "---\ntitle: Root A\ntags: [alpha]\n---\nRoot level a.\n",
    "b.md": "Plain note with an inline #beta tag.\n",
    "todo.txt": "not a document #ignored\n",
    "work/a.md": "---\ncategory: work\ntags: [job]\n---\nWork a, needs attention #urgent\n",
    "work/2024/plan.md": "Budget plan for the year. #finance\n",
    "notes/idea.md": "An Idea worth keeping.\n",
}


def write_tree(root: Path, files: dict[str, str]) -> None:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


@pytest.fixture
def notes_root(tmp_path: Path) -> Path:
    """A populated document root, plus an empty and a hidden directory."""
    root = tmp_path / "notes"
    root.mkdir()
    write_tree(root, SAMPLE_FILES)
    (root / "archive").mkdir()
    (root / ".git").mkdir()
    return root


@pytest.fixture
def store(notes_root: Path) -> DocumentStore:
    return DocumentStore(notes_root)


@pytest.fixture
def empty_store(tmp_path: Path) -> DocumentStore:
    root = tmp_path / "empty"
    root.mkdir()
    return DocumentStore(root)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch):
    """Keep config and log files out of the user's home directory."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("MDLIB_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("MDLIB_ROOT", raising=False)
    yield config_dir
    mdlib_logger = logging.getLogger("mdlib")
    for handler in list(mdlib_logger.handlers):
        if isinstance(handler, RotatingFileHandler):
            mdlib_logger.removeHandler(handler)
            handler.close()
