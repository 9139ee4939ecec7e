"""Tests for the entry model, the immutable tree and the override set."""

from dataclasses import replace

import pytest

from dir2prompt.exceptions import EntryNotFoundError
from dir2prompt.selection_tree.entry import Entry, join_path
from dir2prompt.selection_tree.overrides import OverrideSet
from dir2prompt.selection_tree.tree import SelectionTree, is_ancestor_id
from dir2prompt.types import EntryKind, Selection


def file_entry(path, selection=Selection.SELECTED):
    return Entry(path, path.rsplit("/", 1)[-1], EntryKind.FILE, handle=path, selection=selection)


def dir_entry(path, children=None, selection=Selection.SELECTED):
    name = path.rsplit("/", 1)[-1]
    return Entry(path, name, EntryKind.DIRECTORY, handle=path, selection=selection, children=children)


@pytest.fixture
def tree():
    lib = dir_entry("src/lib", (file_entry("src/lib/util.ts"),))
    src = dir_entry("src", (lib, file_entry("src/a.ts")))
    docs = dir_entry("docs")
    return SelectionTree((src, docs, file_entry("README.md")), "project")


class TestEntry:
    def test_join_path(self):
        assert join_path("", "src") == "src"
        assert join_path("src/lib", "util.ts") == "src/lib/util.ts"

    def test_derived_views(self):
        entry = file_entry("a.ts", Selection.INDETERMINATE)
        assert entry.path == "a.ts"
        assert entry.indeterminate
        assert not entry.selected
        assert entry.has_selection_intent
        assert not file_entry("b.ts", Selection.DESELECTED).has_selection_intent

    def test_loaded_state(self):
        assert not dir_entry("docs").is_loaded
        assert dir_entry("empty", ()).is_loaded

    def test_evolve_returns_same_object_when_unchanged(self):
        child = file_entry("src/a.ts")
        src = dir_entry("src", (child,))

        assert src.evolve(selection=Selection.SELECTED) is src
        assert src.evolve(children=(child,)) is src
        assert src.evolve(selection=Selection.DESELECTED).selection is Selection.DESELECTED

    def test_evolve_compares_children_by_identity(self):
        child = file_entry("src/a.ts")
        src = dir_entry("src", (child,))
        evolved = src.evolve(children=(replace(child),))
        assert evolved is not src
        assert evolved == src

    def test_equality_ignores_handle(self):
        assert replace(file_entry("a.ts"), handle="elsewhere") == file_entry("a.ts")


class TestSelectionTree:
    def test_is_ancestor_id(self):
        assert is_ancestor_id("src", "src")
        assert is_ancestor_id("src", "src/lib/util.ts")
        assert not is_ancestor_id("src", "srcs/util.ts")

    def test_find_and_get(self, tree):
        assert tree.get("src/lib/util.ts").name == "util.ts"
        assert tree.find("src/missing.ts") is None
        assert "README.md" in tree
        assert "docs/guide.md" not in tree

        with pytest.raises(EntryNotFoundError) as exc_info:
            tree.get("docs/guide.md")
        assert exc_info.value.entry_id == "docs/guide.md"

    def test_ancestors(self, tree):
        assert [entry.id for entry in tree.ancestors("src/lib/util.ts")] == ["src", "src/lib", "src/lib/util.ts"]
        with pytest.raises(EntryNotFoundError):
            tree.ancestors("nope")

    def test_iter_entries_is_pre_order(self, tree):
        assert [entry.id for entry in tree.iter_entries()] == [
            "src",
            "src/lib",
            "src/lib/util.ts",
            "src/a.ts",
            "docs",
            "README.md",
        ]

    def test_update_copies_only_the_path(self, tree):
        updated = tree.update("src/lib/util.ts", lambda e: e.evolve(selection=Selection.DESELECTED))

        assert updated.get("src/lib/util.ts").selection is Selection.DESELECTED
        assert tree.get("src/lib/util.ts").selection is Selection.SELECTED
        assert updated.get("src") is not tree.get("src")
        assert updated.get("src/a.ts") is tree.get("src/a.ts")
        assert updated.get("docs") is tree.get("docs")
        assert updated.root_name == "project"

    def test_update_without_change_returns_same_tree(self, tree):
        assert tree.update("src/a.ts", lambda e: e) is tree

    def test_update_rebuilds_ancestors_bottom_up(self, tree):
        visited = []

        def rebuild(entry):
            visited.append(entry.id)
            return entry

        tree.update("src/lib/util.ts", lambda e: e.evolve(selection=Selection.DESELECTED), rebuild_ancestor=rebuild)
        assert visited == ["src/lib", "src"]

    def test_update_missing_entry(self, tree):
        with pytest.raises(EntryNotFoundError):
            tree.update("docs/guide.md", lambda e: e)


class TestOverrideSet:
    def test_with_override(self):
        overrides = OverrideSet().with_override("a.md", True)
        assert "a.md" in overrides
        assert len(overrides) == 1
        assert overrides.with_override("a.md", True) is overrides
        assert "a.md" not in overrides.with_override("a.md", False)

    def test_iteration_is_sorted(self):
        assert list(OverrideSet.of(["b", "a", "c/d"])) == ["a", "b", "c/d"]

    def test_has_override_under(self):
        overrides = OverrideSet.of(["node_modules/react/index.js"])
        assert overrides.has_override_under("node_modules")
        assert overrides.has_override_under("node_modules/react")
        assert overrides.has_override_under("node_modules/react/index.js")
        assert not overrides.has_override_under("node")
        assert not overrides.has_override_under("src")
        assert overrides.has_override_under("")
        assert not OverrideSet().has_override_under("")
