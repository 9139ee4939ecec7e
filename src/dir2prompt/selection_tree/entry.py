"""Entry representation for files and directories in the selection tree."""

from dataclasses import dataclass, field, replace
from typing import Any, Optional, Tuple

from dir2prompt.types import EntryKind, Selection


def join_path(parent_path: str, name: str) -> str:
    """Join a root-relative parent path and a child name with a forward slash.

    Example:
        >>> join_path("", "src")
        'src'
        >>> join_path("src", "main.py")
        'src/main.py'
    """
    return f"{parent_path}/{name}" if parent_path else name


@dataclass(frozen=True)
class Entry:
    """Immutable node representing a file or directory in the selection tree.

    Entries are never mutated. Every transition builds new entries along the path from
    the root to the changed node and shares every untouched subtree with the previous
    tree, so older snapshots stay valid.

    Attributes:
        id (str): Slash-joined path from the chosen root; unique across the tree.
        name (str): Base name of the file or directory.
        kind (EntryKind): File or directory.
        handle (Any): Opaque capability for the underlying resource. It is only ever
            handed to a directory or file reader and takes no part in equality.
        selection (Selection): Tri-state checkbox value.
        children (Optional[Tuple[Entry, ...]]): Materialized children, or None when the
            directory has not been read yet. An empty tuple means "read, no children".
        is_open (bool): Display-expansion flag, independent of materialization.
        is_loading_children (bool): True while a directory read targets this entry.

    Example:
        >>> src = Entry("src", "src", EntryKind.DIRECTORY)
        >>> src.is_loaded
        False
        >>> src.selected, src.indeterminate
        (True, False)
    """

    id: str
    name: str
    kind: EntryKind
    handle: Any = field(default=None, compare=False, repr=False)
    selection: Selection = Selection.SELECTED
    children: Optional[Tuple["Entry", ...]] = None
    is_open: bool = False
    is_loading_children: bool = False

    @property
    def path(self) -> str:
        """Root-relative path of the entry (identical to its id)."""
        return self.id

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    @property
    def is_loaded(self) -> bool:
        """Whether the directory's children have been materialized."""
        return self.children is not None

    @property
    def selected(self) -> bool:
        return self.selection is Selection.SELECTED

    @property
    def indeterminate(self) -> bool:
        return self.selection is Selection.INDETERMINATE

    @property
    def has_selection_intent(self) -> bool:
        """Whether the entry is selected or indeterminate."""
        return self.selection.has_intent

    def evolve(
        self,
        *,
        selection: Optional[Selection] = None,
        children: Optional[Tuple["Entry", ...]] = None,
    ) -> "Entry":
        """Return an entry with a new selection and/or children, reusing ``self`` when nothing changes.

        Children are compared by identity, so a subtree that was rebuilt without changes
        keeps sharing the original objects.
        """
        new_selection = self.selection if selection is None else selection
        new_children = self.children if children is None else children
        if new_selection is self.selection and _same_children(self.children, new_children):
            return self
        return replace(self, selection=new_selection, children=new_children)


def _same_children(old: Optional[Tuple[Entry, ...]], new: Optional[Tuple[Entry, ...]]) -> bool:
    if old is new:
        return True
    if old is None or new is None or len(old) != len(new):
        return False
    return all(a is b for a, b in zip(old, new))
