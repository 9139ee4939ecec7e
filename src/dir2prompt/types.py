from enum import Enum
from os import PathLike
from typing import AbstractSet, Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]

# Names of the currently active exclusion rules
ActiveRules = AbstractSet[str]


class EntryKind(str, Enum):
    """Kind of an entry in the selection tree.

    Attributes:
        FILE: Regular file
        DIRECTORY: Directory
    """

    FILE = "file"
    DIRECTORY = "directory"


class Selection(str, Enum):
    """Tri-state checkbox value of an entry.

    A single tagged value replaces the pair of ``selected``/``indeterminate``
    booleans, so the illegal "selected and indeterminate" combination cannot be
    represented.

    Values:
        SELECTED: The entry and all of its loaded descendants are selected.
        DESELECTED: Nothing under the entry is selected.
        INDETERMINATE: Some but not all descendants are selected, or selection
            intent exists but is currently hidden by exclusion rules or an
            unexplored subtree.
    """

    SELECTED = "selected"
    DESELECTED = "deselected"
    INDETERMINATE = "indeterminate"

    @classmethod
    def from_bool(cls, selected: bool) -> "Selection":
        return cls.SELECTED if selected else cls.DESELECTED

    @property
    def has_intent(self) -> bool:
        """Whether the value carries selection intent (selected or indeterminate)."""
        return self is not Selection.DESELECTED


class FileCategory(str, Enum):
    """Content category derived from a file name's extension."""

    CODE = "code"
    IMAGE = "image"
    VIDEO = "video"
    UNSUPPORTED = "unsupported"
