"""Text rendering of a selection tree, built on anytree."""

from typing import Any, Iterator, Optional

from anytree import ContStyle, Node, RenderTree

from dir2prompt.selection_tree.entry import Entry
from dir2prompt.selection_tree.tree import SelectionTree
from dir2prompt.types import Selection

SELECTION_MARKERS = {
    Selection.SELECTED: "[x]",
    Selection.DESELECTED: "[ ]",
    Selection.INDETERMINATE: "[-]",
}

NOT_LOADED_NOTE = " (not loaded)"


class SelectionNode(Node):  # type: ignore
    """Node class mirroring one selection-tree entry for rendering.

    Extends anytree.Node with the entry's display state. The root node stands for the
    chosen root directory itself and carries no entry.

    Attributes:
        name (str): The name of the file or directory (just the basename).
        parent (Optional[SelectionNode]): The parent node in the tree.
        is_dir (bool): True if this node represents a directory, False for files.
        selection (Optional[Selection]): Tri-state value, or None for the root node.
        is_loaded (bool): Whether a directory's children have been materialized.

    Example:
        >>> root = SelectionNode("project", is_dir=True)
        >>> child = SelectionNode("main.py", parent=root, selection=Selection.SELECTED)
        >>> child.label
        '[x] main.py'
    """

    def __init__(
        self,
        name: str,
        parent: Optional["SelectionNode"] = None,
        is_dir: bool = False,
        selection: Optional[Selection] = None,
        is_loaded: bool = True,
        **kwargs: Any,
    ) -> None:
        super().__init__(name, parent, **kwargs)
        self.is_dir = is_dir
        self.selection = selection
        self.is_loaded = is_loaded

    @property
    def label(self) -> str:
        """Display line for the node without tree connectors."""
        text = f"{self.name}/" if self.is_dir else self.name
        if self.selection is not None:
            text = f"{SELECTION_MARKERS[self.selection]} {text}"
        if self.is_dir and not self.is_loaded:
            text += NOT_LOADED_NOTE
        return text


def build_nodes(tree: SelectionTree, only_open: bool = False) -> SelectionNode:
    """Convert a selection tree into anytree nodes under a root node.

    Args:
        tree: The tree to convert.
        only_open: If True, children of closed directories are omitted, as a tree view
            would display them.
    """
    root = SelectionNode(tree.root_name or ".", is_dir=True)

    def add(entry: Entry, parent: SelectionNode) -> None:
        node = SelectionNode(
            entry.name,
            parent=parent,
            is_dir=entry.is_dir,
            selection=entry.selection,
            is_loaded=entry.is_loaded or entry.is_file,
        )
        if entry.children and (entry.is_open or not only_open):
            for child in entry.children:
                add(child, node)

    for entry in tree.entries:
        add(entry, root)
    return root


def stream_tree_representation(tree: SelectionTree, only_open: bool = False) -> Iterator[str]:
    """Generate a tree representation one line at a time.

    Example:
        >>> from dir2prompt.types import EntryKind
        >>> main = Entry("src/main.py", "main.py", EntryKind.FILE)
        >>> src = Entry("src", "src", EntryKind.DIRECTORY, children=(main,))
        >>> for line in stream_tree_representation(SelectionTree((src,), "project")):
        ...     print(line)
        project/
        └── [x] src/
            └── [x] main.py
    """
    for pre, _, node in RenderTree(build_nodes(tree, only_open), style=ContStyle()):
        yield f"{pre}{node.label}"


def render_tree(tree: SelectionTree, only_open: bool = False) -> str:
    """Get a complete string representation of the selection tree."""
    return "\n".join(stream_tree_representation(tree, only_open))
