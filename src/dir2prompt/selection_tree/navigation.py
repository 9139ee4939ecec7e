"""Display-only tree operations: expansion flags and name search.

None of these touch selection state or materialization.
"""

from dataclasses import replace
from typing import List, Tuple

from dir2prompt.selection_tree.entry import Entry
from dir2prompt.selection_tree.tree import SelectionTree


def toggle_open(tree: SelectionTree, entry_id: str) -> SelectionTree:
    """Flip the ``is_open`` flag of one entry.

    Raises:
        EntryNotFoundError: If the entry has not been materialized.
    """
    return tree.update(entry_id, lambda entry: replace(entry, is_open=not entry.is_open))


def set_open(tree: SelectionTree, entry_id: str, is_open: bool) -> SelectionTree:
    """Set the ``is_open`` flag of one entry.

    Raises:
        EntryNotFoundError: If the entry has not been materialized.
    """
    return tree.update(entry_id, lambda entry: entry if entry.is_open == is_open else replace(entry, is_open=is_open))


def _set_all_open(entries: Tuple[Entry, ...], is_open: bool) -> Tuple[Entry, ...]:
    updated = []
    for entry in entries:
        if entry.is_dir:
            children = _set_all_open(entry.children, is_open) if entry.children is not None else None
            if entry.is_open != is_open or children is not entry.children:
                entry = replace(entry, is_open=is_open, children=children)
        updated.append(entry)
    new_entries = tuple(updated)
    if all(a is b for a, b in zip(new_entries, entries)):
        return entries
    return new_entries


def set_all_open(tree: SelectionTree, is_open: bool) -> SelectionTree:
    """Expand or collapse every directory in the tree.

    Unmaterialized directories are flagged too, but nothing is loaded.
    """
    return tree.with_entries(_set_all_open(tree.entries, is_open))


def search(tree: SelectionTree, text: str) -> SelectionTree:
    """Return a pruned view of entries whose name contains ``text``, ignoring case.

    A matching entry is kept with its whole subtree. A directory that does not match is
    kept only when something beneath it matches, and then only with the matching part of
    its children. An empty ``text`` returns ``tree`` itself.

    Example:
        >>> from dir2prompt.types import EntryKind
        >>> main = Entry("src/main.py", "main.py", EntryKind.FILE)
        >>> util = Entry("src/util.py", "util.py", EntryKind.FILE)
        >>> src = Entry("src", "src", EntryKind.DIRECTORY, children=(main, util))
        >>> [entry.id for entry in search(SelectionTree((src,)), "MAIN").iter_entries()]
        ['src', 'src/main.py']
    """
    if not text:
        return tree
    needle = text.lower()

    def prune(entries: Tuple[Entry, ...]) -> Tuple[Entry, ...]:
        kept: List[Entry] = []
        for entry in entries:
            if needle in entry.name.lower():
                kept.append(entry)
            elif entry.children:
                children = prune(entry.children)
                if children:
                    kept.append(replace(entry, children=children))
        return tuple(kept)

    return tree.with_entries(prune(tree.entries))
