"""Complete-tree builder: finishes materializing whatever the current selection needs."""

import asyncio
import logging
from dataclasses import replace
from typing import Optional, Tuple

from dir2prompt.exclusion_rules.composite_rules import CompositeExclusionRules
from dir2prompt.io.directory_reader import DirectoryReader
from dir2prompt.selection_tree.entry import Entry
from dir2prompt.selection_tree.lazy_loader import entries_from_items, read_children
from dir2prompt.selection_tree.overrides import OverrideSet
from dir2prompt.selection_tree.tree import SelectionTree

logger = logging.getLogger(__name__)


async def build_complete_tree(
    tree: SelectionTree,
    active_rules: CompositeExclusionRules,
    overrides: OverrideSet,
    reader: DirectoryReader,
) -> SelectionTree:
    """Materialize every directory that can contribute to an export.

    Files excluded by an active rule and not overridden are dropped. Directories excluded
    by an active rule with no override beneath them are dropped without ever being read.
    Every other unmaterialized directory that is selected, indeterminate or holds an
    override is read and completed recursively; its children receive the same initial
    selection the lazy loader would give them. Directories that need not contribute are
    kept unexpanded.

    Reads of sibling directories run concurrently. A failed read yields a directory with
    no children instead of aborting the build.

    Args:
        tree: The current tree. It is not modified.
        active_rules: The active rules, combined by logical OR.
        overrides: File ids that are always selected.
        reader: Capability used for every directory read.

    Returns:
        SelectionTree: A new tree used only for the export at hand.
    """
    entries = await _complete_entries(tree.entries, active_rules, overrides, reader)
    return tree.with_entries(entries)


async def _complete_entries(
    entries: Tuple[Entry, ...],
    active_rules: CompositeExclusionRules,
    overrides: OverrideSet,
    reader: DirectoryReader,
) -> Tuple[Entry, ...]:
    completed = await asyncio.gather(*(_complete_entry(entry, active_rules, overrides, reader) for entry in entries))
    return tuple(entry for entry in completed if entry is not None)


async def _complete_entry(
    entry: Entry,
    active_rules: CompositeExclusionRules,
    overrides: OverrideSet,
    reader: DirectoryReader,
) -> Optional[Entry]:
    filtered = active_rules.exclude(entry.id)

    if entry.is_file:
        if filtered and entry.id not in overrides:
            logger.debug("Dropping filtered file %s", entry.id)
            return None
        return entry

    has_override = overrides.has_override_under(entry.id)
    if filtered and not has_override:
        logger.debug("Skipping filtered directory %s", entry.id)
        return None

    if entry.children is not None:
        children = await _complete_entries(entry.children, active_rules, overrides, reader)
        return entry.evolve(children=children)

    if not (has_override or entry.has_selection_intent):
        return entry

    items = await read_children(reader, entry)
    children = entries_from_items(items, entry, active_rules, overrides)
    completed = await _complete_entries(children, active_rules, overrides, reader)
    return replace(entry, children=completed, is_loading_children=False)
