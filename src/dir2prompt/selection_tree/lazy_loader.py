"""Lazy loader: materializes exactly one directory level on demand.

Loading is split in two halves so that a read which completes late is merged into the
tree that is current at completion time, not the one captured when the read started:

1. :func:`mark_loading` flags the directory while its read is in flight.
2. :func:`merge_children` turns the reader's items into entries and merges them.

:func:`load_children` chains both halves for callers that hold a single tree value, and
:class:`LazyLoader` guarantees that at most one read per directory is ever in flight.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Tuple

from dir2prompt.exclusion_rules.composite_rules import CompositeExclusionRules
from dir2prompt.io.directory_reader import DirectoryItem, DirectoryReader
from dir2prompt.selection_tree.entry import Entry, join_path
from dir2prompt.selection_tree.filters import rederive_directory
from dir2prompt.selection_tree.overrides import OverrideSet
from dir2prompt.selection_tree.tree import SelectionTree
from dir2prompt.types import Selection

logger = logging.getLogger(__name__)


def initial_child_selection(
    child_id: str, parent: Entry, active_rules: CompositeExclusionRules, overrides: OverrideSet
) -> Selection:
    """Selection of a newly discovered child.

    An override always selects. Otherwise a selected or indeterminate parent passes
    selection down to children no active rule excludes.
    """
    if child_id in overrides:
        return Selection.SELECTED
    if parent.has_selection_intent and not active_rules.exclude(child_id):
        return Selection.SELECTED
    return Selection.DESELECTED


def entries_from_items(
    items: Iterable[DirectoryItem],
    parent: Entry,
    active_rules: CompositeExclusionRules,
    overrides: OverrideSet,
) -> Tuple[Entry, ...]:
    """Build unmaterialized, closed entries for a directory's freshly read children."""
    entries = []
    for item in items:
        child_id = join_path(parent.id, item.name)
        entries.append(
            Entry(
                id=child_id,
                name=item.name,
                kind=item.kind,
                handle=item.handle,
                selection=initial_child_selection(child_id, parent, active_rules, overrides),
            )
        )
    return tuple(entries)


async def read_children(reader: DirectoryReader, directory: Entry) -> List[DirectoryItem]:
    """Read one directory level, treating a failed read as an empty directory."""
    try:
        return await reader.read_directory(directory.handle)
    except OSError as e:
        logger.warning("Cannot read directory %s: %s", directory.id, e)
        return []


def mark_loading(tree: SelectionTree, directory_id: str) -> SelectionTree:
    """Flag an unmaterialized directory as having a read in flight.

    Raises:
        EntryNotFoundError: If the directory has not been materialized itself.
    """

    def flag(entry: Entry) -> Entry:
        if entry.is_loaded or entry.is_loading_children:
            return entry
        return replace(entry, is_loading_children=True)

    return tree.update(directory_id, flag)


def merge_children(
    tree: SelectionTree,
    directory_id: str,
    items: Iterable[DirectoryItem],
    active_rules: CompositeExclusionRules,
    overrides: OverrideSet,
) -> SelectionTree:
    """Merge a directory's freshly read children into ``tree``.

    Only the path from the top level down to the directory is copied; every sibling
    subtree is shared with ``tree``. The directory and its ancestors are re-derived from
    their children, so their derived selection stays consistent with the new entries.
    A directory that is already materialized is left untouched, which makes a duplicate
    completion harmless.

    Raises:
        EntryNotFoundError: If the directory has not been materialized itself.
    """
    if tree.get(directory_id).is_loaded:
        return tree

    def attach(entry: Entry) -> Entry:
        children = entries_from_items(items, entry, active_rules, overrides)
        loaded = replace(entry, children=children, is_loading_children=False)
        return rederive_directory(loaded, active_rules, overrides)

    return tree.update(
        directory_id,
        attach,
        rebuild_ancestor=lambda ancestor: rederive_directory(ancestor, active_rules, overrides),
    )


async def load_children(
    tree: SelectionTree,
    directory_id: str,
    active_rules: CompositeExclusionRules,
    overrides: OverrideSet,
    reader: DirectoryReader,
) -> SelectionTree:
    """Read and merge one directory level.

    Returns ``tree`` unchanged when the directory is already materialized or a read for it
    is already in flight.

    Args:
        tree: The current tree.
        directory_id: Id of the directory to load.
        active_rules: The active rules, combined by logical OR.
        overrides: File ids that are always selected.
        reader: Capability used for the single directory read.

    Raises:
        EntryNotFoundError: If the directory has not been materialized itself.
    """
    directory = tree.get(directory_id)
    if directory.is_loaded or directory.is_loading_children:
        return tree
    items = await read_children(reader, directory)
    return merge_children(tree, directory_id, items, active_rules, overrides)


class LazyLoader:
    """Tracks in-flight directory reads so each directory is read at most once at a time.

    Reads are keyed by ``(generation, directory id)``. Concurrent requests for the same
    key share one future; a request for a new generation never joins a read started for
    an older root.

    Example:
        >>> loader = LazyLoader(reader)  # doctest: +SKIP
        >>> first, second = await asyncio.gather(
        ...     loader.read(src), loader.read(src))  # doctest: +SKIP
        >>> reader.calls  # doctest: +SKIP
        1
    """

    def __init__(self, reader: DirectoryReader) -> None:
        self.reader = reader
        self._in_flight: Dict[Tuple[int, str], "asyncio.Future[List[DirectoryItem]]"] = {}

    def is_loading(self, directory_id: str, generation: int = 0) -> bool:
        return (generation, directory_id) in self._in_flight

    def in_flight_count(self) -> int:
        return len(self._in_flight)

    async def read(self, directory: Entry, generation: int = 0) -> List[DirectoryItem]:
        """Return the directory's items, joining a read already in flight for it."""
        key = (generation, directory.id)
        future = self._in_flight.get(key)
        if future is None:
            future = asyncio.ensure_future(read_children(self.reader, directory))
            self._in_flight[key] = future
            future.add_done_callback(lambda _: self._in_flight.pop(key, None))
        else:
            logger.debug("Joining in-flight read of %s", directory.id)
        # One caller being cancelled must not cancel the read for the others.
        return await asyncio.shield(future)

    def forget_stale(self, current_generation: int) -> int:
        """Stop tracking reads started for an older generation.

        Their completions are still delivered to whoever awaits them; callers compare
        generations and discard the result.

        Returns:
            int: Number of reads that were forgotten.
        """
        stale = [key for key in self._in_flight if key[0] != current_generation]
        for key in stale:
            del self._in_flight[key]
        if stale:
            logger.debug("Forgot %d stale directory read(s)", len(stale))
        return len(stale)
