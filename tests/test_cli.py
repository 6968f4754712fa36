"""
Tests for the typer CLI.
"""

import json

import pytest
from typer.testing import CliRunner

from mdlib.cli import app


runner = CliRunner()


def invoke(*args, **kwargs):
    return runner.invoke(app, [str(a) for a in args], **kwargs)


class TestReadCommands:

    def test_list(self, notes_root):
        result = invoke("list", "--root", notes_root)
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "README [welcome]"
        assert "work/2024/plan.md [finance]" in lines
        assert "notes/idea.md" in lines

    def test_list_json(self, notes_root):
        result = invoke("--json", "list", "--root", notes_root)
        assert result.exit_code == 0
        docs = json.loads(result.output)
        assert [d["name"] for d in docs] == ["README", "a.md", "a.md", "b.md", "idea.md", "plan.md"]
        assert {"path", "name", "modified", "size", "tags", "category"} <= set(docs[0])

    def test_root_from_env(self, notes_root, monkeypatch):
        monkeypatch.setenv("MDLIB_ROOT", str(notes_root))
        result = invoke("list")
        assert result.exit_code == 0
        assert "README [welcome]" in result.output

    def test_get(self, notes_root):
        result = invoke("get", "plan.md", "--root", notes_root)
        assert result.exit_code == 0
        assert result.output == "Budget plan for the year. #finance\n"

    def test_get_missing(self, notes_root):
        result = invoke("get", "missing.md", "--root", notes_root)
        assert result.exit_code == 1
        assert "Not found: missing.md" in result.output

    def test_search(self, notes_root):
        result = invoke("search", "budget", "--root", notes_root)
        assert result.exit_code == 0
        assert result.output.strip() == "work/2024/plan.md [finance]"

    def test_search_filters(self, notes_root):
        result = invoke("--json", "search", "--tag", "JOB", "-C", "work", "--root", notes_root)
        docs = json.loads(result.output)
        assert [(d["category"], d["name"]) for d in docs] == [("work", "a.md")]

    def test_search_no_results(self, notes_root):
        result = invoke("search", "zebra", "--root", notes_root)
        assert result.exit_code == 0
        assert "No matching documents." in result.output

    def test_categories(self, notes_root):
        result = invoke("categories", "--root", notes_root)
        assert result.output.splitlines() == ["archive", "notes", "work", "work/2024"]


class TestWriteCommands:

    def test_create_with_content(self, notes_root):
        result = invoke("create", "today", "-c", "---\ncategory: daily\n---\nHi", "--root", notes_root)
        assert result.exit_code == 0
        assert "Created daily/today.md" in result.output
        assert (notes_root / "daily" / "today.md").read_text() == "---\ncategory: daily\n---\nHi"

    def test_create_from_file(self, notes_root, tmp_path):
        draft = tmp_path / "draft.md"
        draft.write_text("from a file")
        result = invoke("create", "copy", "-f", draft, "--root", notes_root)
        assert result.exit_code == 0
        assert (notes_root / "copy.md").read_text() == "from a file"

    def test_create_without_content(self, notes_root):
        result = invoke("create", "empty", "--root", notes_root)
        assert result.exit_code == 1
        assert not (notes_root / "empty.md").exists()

    def test_create_invalid_name(self, notes_root):
        result = invoke("create", "  ", "-c", "x", "--root", notes_root)
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_update(self, notes_root):
        result = invoke("update", "b.md", "-c", "replaced", "--root", notes_root)
        assert result.exit_code == 0
        assert "Updated b.md" in result.output
        assert (notes_root / "b.md").read_text() == "replaced"

    def test_delete(self, notes_root):
        result = invoke("delete", "idea.md", "--root", notes_root)
        assert result.exit_code == 0
        assert "Deleted notes/idea.md" in result.output
        assert not (notes_root / "notes" / "idea.md").exists()

    def test_tag_add_and_remove(self, notes_root):
        result = invoke("tag", "a.md", "-t", "x", "-t", "y", "--root", notes_root)
        assert result.exit_code == 0
        assert result.output.strip() == "a.md: alpha, x, y"

        result = invoke("--json", "tag", "a.md", "-r", "alpha", "--root", notes_root)
        assert json.loads(result.output) == {"identifier": "a.md", "tags": ["x", "y"]}

    def test_tag_requires_changes(self, notes_root):
        result = invoke("tag", "a.md", "--root", notes_root)
        assert result.exit_code == 1


class TestCategoryCommands:

    def test_add(self, notes_root):
        result = invoke("category-add", "projects", "--root", notes_root)
        assert result.exit_code == 0
        assert (notes_root / "projects").is_dir()

    def test_delete_confirmed(self, notes_root):
        result = invoke("category-del", "work", "--root", notes_root, input="y\n")
        assert result.exit_code == 0
        assert not (notes_root / "work").exists()

    def test_delete_declined(self, notes_root):
        result = invoke("category-del", "work", "--root", notes_root, input="n\n")
        assert result.exit_code != 0
        assert (notes_root / "work").exists()

    def test_delete_missing(self, notes_root):
        result = invoke("category-del", "nope", "--yes", "--root", notes_root)
        assert result.exit_code == 1
        assert "Not found: nope" in result.output


class TestConfigCommand:

    def test_creates_and_shows_config(self, isolated_config):
        result = invoke("--json", "config")
        assert result.exit_code == 0
        values = json.loads(result.output)
        assert values["server_address"] == "127.0.0.1:3000"
        assert values["max_file_size_mb"] == 10
        assert (isolated_config / "mdlib.toml").exists()

    def test_size_limit_applies(self, notes_root, isolated_config):
        isolated_config.mkdir()
        (isolated_config / "mdlib.toml").write_text("[files]\nmax_size_mb = 1\n")
        result = invoke("create", "big", "-c", "x" * (1024 * 1024 + 1), "--root", notes_root)
        assert result.exit_code == 1
        assert "too large" in result.output

    @pytest.mark.parametrize("args", [["config"], ["list", "--root", "."]])
    def test_invalid_config(self, isolated_config, args):
        isolated_config.mkdir()
        (isolated_config / "mdlib.toml").write_text("[server]\nport = 0\n")
        result = invoke(*args)
        assert result.exit_code == 1
        assert "out of range" in result.output
