"""Immutable selection tree with copy-on-write updates."""

from dataclasses import dataclass, replace
from typing import Callable, Iterator, List, Optional, Tuple

from dir2prompt.exceptions import EntryNotFoundError
from dir2prompt.selection_tree.entry import Entry

EntryUpdate = Callable[[Entry], Entry]


def is_ancestor_id(ancestor_id: str, entry_id: str) -> bool:
    """Whether ``ancestor_id`` is ``entry_id`` or one of its ancestors.

    Example:
        >>> is_ancestor_id("src", "src/app/main.py"), is_ancestor_id("src", "srcs/x")
        (True, False)
    """
    return entry_id == ancestor_id or entry_id.startswith(ancestor_id + "/")


@dataclass(frozen=True)
class SelectionTree:
    """The top-level entries of a chosen root, as an immutable value.

    Attributes:
        entries (Tuple[Entry, ...]): Entries directly under the chosen root, in
            directory-first, name order.
        root_name (str): Display name of the chosen root directory.

    Example:
        >>> from dir2prompt.types import EntryKind
        >>> tree = SelectionTree((Entry("src", "src", EntryKind.DIRECTORY, children=()),), "project")
        >>> tree.get("src").is_loaded
        True
        >>> tree.find("missing") is None
        True
    """

    entries: Tuple[Entry, ...] = ()
    root_name: str = ""

    def find(self, entry_id: str) -> Optional[Entry]:
        """Return the entry with ``entry_id``, or None if it is not materialized."""
        chain = self._chain(entry_id)
        return chain[-1] if chain else None

    def get(self, entry_id: str) -> Entry:
        """Return the entry with ``entry_id``.

        Raises:
            EntryNotFoundError: If no such entry has been materialized.
        """
        entry = self.find(entry_id)
        if entry is None:
            raise EntryNotFoundError(entry_id)
        return entry

    def ancestors(self, entry_id: str) -> List[Entry]:
        """Return the chain of entries from the top level down to ``entry_id`` inclusive.

        Raises:
            EntryNotFoundError: If no such entry has been materialized.
        """
        chain = self._chain(entry_id)
        if not chain:
            raise EntryNotFoundError(entry_id)
        return chain

    def _chain(self, entry_id: str) -> List[Entry]:
        chain: List[Entry] = []
        level: Optional[Tuple[Entry, ...]] = self.entries
        while level:
            for entry in level:
                if is_ancestor_id(entry.id, entry_id):
                    chain.append(entry)
                    break
            else:
                return []
            if chain[-1].id == entry_id:
                return chain
            level = chain[-1].children
        return []

    def __contains__(self, entry_id: object) -> bool:
        return isinstance(entry_id, str) and self.find(entry_id) is not None

    def iter_entries(self) -> Iterator[Entry]:
        """Yield every materialized entry in pre-order."""

        def walk(entries: Tuple[Entry, ...]) -> Iterator[Entry]:
            for entry in entries:
                yield entry
                if entry.children:
                    yield from walk(entry.children)

        yield from walk(self.entries)

    def with_entries(self, entries: Tuple[Entry, ...]) -> "SelectionTree":
        if entries is self.entries:
            return self
        return replace(self, entries=entries)

    def update(
        self,
        entry_id: str,
        update: EntryUpdate,
        rebuild_ancestor: Optional[EntryUpdate] = None,
    ) -> "SelectionTree":
        """Replace one entry, copying only the path from the top level down to it.

        Args:
            entry_id: Id of the entry to replace.
            update: Called with the current entry; returns its replacement.
            rebuild_ancestor: Optionally called, bottom-up, with every ancestor after its
                children have been replaced, so derived state can be recomputed.

        Raises:
            EntryNotFoundError: If no such entry has been materialized.
        """
        entries = _replace_in(self.entries, entry_id, update, rebuild_ancestor)
        if entries is None:
            raise EntryNotFoundError(entry_id)
        return self.with_entries(entries)


def _replace_in(
    entries: Tuple[Entry, ...],
    entry_id: str,
    update: EntryUpdate,
    rebuild_ancestor: Optional[EntryUpdate],
) -> Optional[Tuple[Entry, ...]]:
    for index, entry in enumerate(entries):
        if not is_ancestor_id(entry.id, entry_id):
            continue
        if entry.id == entry_id:
            new_entry = update(entry)
        else:
            if entry.children is None:
                return None
            children = _replace_in(entry.children, entry_id, update, rebuild_ancestor)
            if children is None:
                return None
            new_entry = entry.evolve(children=children)
            if rebuild_ancestor is not None:
                new_entry = rebuild_ancestor(new_entry)
        if new_entry is entry:
            return entries
        return entries[:index] + (new_entry,) + entries[index + 1 :]  # noqa: E203
    return None
