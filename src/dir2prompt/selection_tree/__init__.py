"""Tri-state selection tree over a lazily materialized directory structure.

This package provides the immutable tree model and the pure and asynchronous
transformations applied to it: checkbox toggles, filter recomputation, lazy loading
and completion for export.
"""

from .complete_tree import build_complete_tree
from .entry import Entry
from .filters import apply_filters
from .lazy_loader import LazyLoader, load_children, mark_loading, merge_children
from .overrides import OverrideSet
from .selection import toggle_selection, update_selection
from .tree import SelectionTree

__all__ = [
    "Entry",
    "LazyLoader",
    "OverrideSet",
    "SelectionTree",
    "apply_filters",
    "build_complete_tree",
    "load_children",
    "mark_loading",
    "merge_children",
    "toggle_selection",
    "update_selection",
]
