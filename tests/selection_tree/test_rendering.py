"""Tests for the text rendering of a selection tree."""

from dir2prompt.selection_tree.entry import Entry
from dir2prompt.selection_tree.rendering import SelectionNode, build_nodes, render_tree
from dir2prompt.selection_tree.tree import SelectionTree
from dir2prompt.types import EntryKind, Selection


def test_render_tree_shows_markers_and_load_state():
    a = Entry("src/a.ts", "a.ts", EntryKind.FILE)
    logo = Entry("src/logo.png", "logo.png", EntryKind.FILE, selection=Selection.DESELECTED)
    src = Entry("src", "src", EntryKind.DIRECTORY, selection=Selection.INDETERMINATE, children=(a, logo))
    docs = Entry("docs", "docs", EntryKind.DIRECTORY)
    tree = SelectionTree((src, docs), "project")

    assert render_tree(tree) == "\n".join(
        [
            "project/",
            "├── [-] src/",
            "│   ├── [x] a.ts",
            "│   └── [ ] logo.png",
            "└── [x] docs/ (not loaded)",
        ]
    )


def test_only_open_hides_children_of_closed_directories():
    a = Entry("src/a.ts", "a.ts", EntryKind.FILE)
    src = Entry("src", "src", EntryKind.DIRECTORY, children=(a,))
    tree = SelectionTree((src,), "project")

    assert render_tree(tree, only_open=True) == "project/\n└── [x] src/"
    opened = SelectionTree((Entry("src", "src", EntryKind.DIRECTORY, children=(a,), is_open=True),), "project")
    assert render_tree(opened, only_open=True).endswith("[x] a.ts")


def test_empty_tree_renders_root_only():
    assert render_tree(SelectionTree()) == "./"


def test_build_nodes():
    empty = Entry("empty", "empty", EntryKind.DIRECTORY, selection=Selection.DESELECTED, children=())
    root = build_nodes(SelectionTree((empty,), "project"))

    assert root.name == "project"
    (child,) = root.children
    assert isinstance(child, SelectionNode)
    assert child.is_loaded
    assert child.label == "[ ] empty/"
