"""Selection engine: propagates a checkbox toggle down and corrects ancestors up.

Toggling an entry forces the same value onto every already-loaded descendant, then
every loaded directory in the tree is re-derived from its children, bottom-up:

- no child selected or indeterminate: deselected
- every child selected: selected
- anything else: indeterminate

Unloaded descendants are left as they are; they inherit the new value when they are
eventually loaded. The functions here are synchronous and pure.
"""

from typing import Sequence, Tuple

from dir2prompt.selection_tree.entry import Entry
from dir2prompt.selection_tree.overrides import OverrideSet
from dir2prompt.selection_tree.tree import SelectionTree
from dir2prompt.types import Selection


def derive_directory_selection(children: Sequence[Entry]) -> Selection:
    """Derive a loaded directory's selection from its children.

    Example:
        >>> from dir2prompt.types import EntryKind
        >>> a = Entry("a.py", "a.py", EntryKind.FILE)
        >>> b = Entry("b.py", "b.py", EntryKind.FILE, selection=Selection.DESELECTED)
        >>> derive_directory_selection([a, a]).value
        'selected'
        >>> derive_directory_selection([a, b]).value
        'indeterminate'
        >>> derive_directory_selection([b]).value
        'deselected'
    """
    full = sum(1 for child in children if child.selection is Selection.SELECTED)
    partial = sum(1 for child in children if child.selection is Selection.INDETERMINATE)
    if full + partial == 0:
        return Selection.DESELECTED
    if full == len(children):
        return Selection.SELECTED
    return Selection.INDETERMINATE


def _force_selection(entry: Entry, selection: Selection) -> Entry:
    if entry.children is None:
        return entry.evolve(selection=selection)
    children = tuple(_force_selection(child, selection) for child in entry.children)
    return entry.evolve(selection=selection, children=children)


def _correct_directories(entries: Tuple[Entry, ...]) -> Tuple[Entry, ...]:
    corrected = []
    for entry in entries:
        if entry.is_dir and entry.children is not None:
            children = _correct_directories(entry.children)
            entry = entry.evolve(selection=derive_directory_selection(children), children=children)
        corrected.append(entry)
    new_entries = tuple(corrected)
    if all(a is b for a, b in zip(new_entries, entries)):
        return entries
    return new_entries


def update_selection(tree: SelectionTree, entry_id: str, selected: bool) -> SelectionTree:
    """Apply a user's checkbox toggle to the tree.

    Args:
        tree: The current tree.
        entry_id: Id of the toggled entry.
        selected: The new checkbox value.

    Returns:
        A new tree. Subtrees that did not change are shared with ``tree``.

    Raises:
        EntryNotFoundError: If the entry has not been materialized.
    """
    selection = Selection.from_bool(selected)
    toggled = tree.update(entry_id, lambda entry: _force_selection(entry, selection))
    return toggled.with_entries(_correct_directories(toggled.entries))


def update_overrides(overrides: OverrideSet, entry: Entry, selected: bool) -> OverrideSet:
    """Record a manual toggle in the override set.

    Only file toggles are overrides; cascading a directory's value onto its descendants
    is not a manual override of those descendants.
    """
    if not entry.is_file:
        return overrides
    return overrides.with_override(entry.id, selected)


def toggle_selection(
    tree: SelectionTree, overrides: OverrideSet, entry_id: str, selected: bool
) -> Tuple[SelectionTree, OverrideSet]:
    """Toggle an entry and update the override set in one step.

    Raises:
        EntryNotFoundError: If the entry has not been materialized.
    """
    entry = tree.get(entry_id)
    return update_selection(tree, entry_id, selected), update_overrides(overrides, entry, selected)
