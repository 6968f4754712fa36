"""
Tests for the MCP stdio server tool functions.

Tools are called directly against a real store on a temporary tree;
verifies parameter mapping, return formatting and error reporting.
"""

import json

import pytest

import mdlib.mcp as mcp_mod
from mdlib.mcp import (
    mdlib_categories,
    mdlib_category_create,
    mdlib_category_delete,
    mdlib_create,
    mdlib_delete,
    mdlib_get,
    mdlib_list,
    mdlib_search,
    mdlib_tag,
    mdlib_update,
)
from mdlib.store import DocumentStore


@pytest.fixture(autouse=True)
def patch_store(notes_root, monkeypatch):
    """Point the server at the sample tree for all tests."""
    monkeypatch.setattr(mcp_mod, "_store", DocumentStore(notes_root))


class TestRegistration:

    @pytest.mark.asyncio
    async def test_all_tools_registered(self):
        tools = {t.name for t in await mcp_mod.mcp.list_tools()}
        assert tools == {
            "mdlib_list", "mdlib_get", "mdlib_create", "mdlib_update",
            "mdlib_delete", "mdlib_search", "mdlib_tag", "mdlib_categories",
            "mdlib_category_create", "mdlib_category_delete",
        }


class TestReadTools:

    @pytest.mark.asyncio
    async def test_list(self):
        docs = json.loads(await mdlib_list())
        assert [d["name"] for d in docs] == ["README", "a.md", "a.md", "b.md", "idea.md", "plan.md"]

    @pytest.mark.asyncio
    async def test_get(self):
        assert await mdlib_get("README") == "# My notes\n\nStart here. #welcome\n"

    @pytest.mark.asyncio
    async def test_get_missing(self):
        assert await mdlib_get("missing.md") == "Not found: missing.md"

    @pytest.mark.asyncio
    async def test_search(self):
        docs = json.loads(await mdlib_search(text="attention", category="Work"))
        assert [(d["category"], d["name"]) for d in docs] == [("work", "a.md")]

    @pytest.mark.asyncio
    async def test_search_no_filters(self):
        assert len(json.loads(await mdlib_search())) == 6

    @pytest.mark.asyncio
    async def test_categories(self):
        assert json.loads(await mdlib_categories()) == ["archive", "notes", "work", "work/2024"]


class TestWriteTools:

    @pytest.mark.asyncio
    async def test_create(self, notes_root):
        result = await mdlib_create("inbox-item", "---\ncategory: inbox\n---\nhi")
        assert result == "Created: inbox/inbox-item.md"
        assert (notes_root / "inbox" / "inbox-item.md").exists()

    @pytest.mark.asyncio
    async def test_create_invalid(self):
        assert (await mdlib_create("", "x")).startswith("Error:")

    @pytest.mark.asyncio
    async def test_update(self, notes_root):
        assert await mdlib_update("b.md", "new") == "Updated: b.md"
        assert (notes_root / "b.md").read_text() == "new"

    @pytest.mark.asyncio
    async def test_delete(self, notes_root):
        assert await mdlib_delete("plan.md") == "Deleted: work/2024/plan.md"
        assert not (notes_root / "work" / "2024" / "plan.md").exists()

    @pytest.mark.asyncio
    async def test_delete_missing(self):
        assert await mdlib_delete("gone.md") == "Not found: gone.md"


class TestTagTool:

    @pytest.mark.asyncio
    async def test_add(self):
        assert await mdlib_tag("b.md", add=["x"]) == "Tags: beta, x"

    @pytest.mark.asyncio
    async def test_add_and_remove(self):
        assert await mdlib_tag("a.md", add=["x"], remove=["alpha"]) == "Tags: x"

    @pytest.mark.asyncio
    async def test_remove_all(self):
        assert await mdlib_tag("a.md", remove=["alpha"]) == "Tags: (none)"

    @pytest.mark.asyncio
    async def test_requires_changes(self):
        assert (await mdlib_tag("a.md")).startswith("Error:")

    @pytest.mark.asyncio
    async def test_missing_document(self):
        assert await mdlib_tag("missing.md", add=["x"]) == "Not found: missing.md"


class TestCategoryTools:

    @pytest.mark.asyncio
    async def test_create_and_delete(self, notes_root):
        assert await mdlib_category_create(" projects ") == "Created category: projects"
        assert (notes_root / "projects").is_dir()
        assert await mdlib_category_delete("projects") == "Deleted category: projects"
        assert not (notes_root / "projects").exists()

    @pytest.mark.asyncio
    async def test_delete_missing(self):
        assert await mdlib_category_delete("nope") == "Not found: nope"


class TestLazyStore:

    @pytest.mark.asyncio
    async def test_root_from_environment(self, notes_root, monkeypatch):
        monkeypatch.setattr(mcp_mod, "_store", None)
        monkeypatch.setenv("MDLIB_ROOT", str(notes_root))
        docs = json.loads(await mdlib_list())
        assert len(docs) == 6
        assert mcp_mod._store.root == notes_root
