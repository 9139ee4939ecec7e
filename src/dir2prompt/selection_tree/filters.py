"""Filter engine: recomputes selection state whenever the active rule set changes.

The engine is pure, deterministic and idempotent. It is run when the active rules
change, never merely because the override set changed, so in-progress manual
selections are not clobbered. Open/loaded state is always preserved.
"""

import logging
from typing import Sequence, Tuple

from dir2prompt.exclusion_rules.composite_rules import CompositeExclusionRules
from dir2prompt.selection_tree.entry import Entry
from dir2prompt.selection_tree.overrides import OverrideSet
from dir2prompt.selection_tree.selection import derive_directory_selection
from dir2prompt.selection_tree.tree import SelectionTree
from dir2prompt.types import Selection

logger = logging.getLogger(__name__)


def filtered_file_selection(entry: Entry, active_rules: CompositeExclusionRules, overrides: OverrideSet) -> Selection:
    """A file's selection is fully re-derived: overrides win, then rules, else selected."""
    if entry.id in overrides:
        return Selection.SELECTED
    if active_rules.exclude(entry.id):
        return Selection.DESELECTED
    return Selection.SELECTED


def filtered_children_selection(children: Sequence[Entry], rules_active: bool, had_intent: bool) -> Selection:
    """Derive a loaded directory's selection under active rules.

    Same counting rule as the selection engine, except that a directory which carried
    selection intent and now has nothing selected beneath it becomes indeterminate while
    any rule is active: its content is hidden by filters, not deselected.
    """
    selection = derive_directory_selection(children)
    if selection is Selection.DESELECTED and rules_active and had_intent:
        return Selection.INDETERMINATE
    return selection


def unloaded_directory_selection(had_intent: bool, rules_active: bool) -> Selection:
    """An unloaded directory keeps its intent and signals possible hidden content."""
    if not had_intent:
        return Selection.DESELECTED
    return Selection.INDETERMINATE if rules_active else Selection.SELECTED


def rederive_directory(entry: Entry, active_rules: CompositeExclusionRules, overrides: OverrideSet) -> Entry:
    """Recompute one directory's selection from its current children without recursing."""
    if active_rules.exclude(entry.id) and not overrides.has_override_under(entry.id):
        return entry.evolve(selection=Selection.DESELECTED)
    if entry.children is not None:
        selection = filtered_children_selection(entry.children, active_rules.is_active, entry.has_selection_intent)
    else:
        selection = unloaded_directory_selection(entry.has_selection_intent, active_rules.is_active)
    return entry.evolve(selection=selection)


def _filter_entries(
    entries: Tuple[Entry, ...], active_rules: CompositeExclusionRules, overrides: OverrideSet
) -> Tuple[Entry, ...]:
    new_entries = tuple(_filter_entry(entry, active_rules, overrides) for entry in entries)
    if all(a is b for a, b in zip(new_entries, entries)):
        return entries
    return new_entries


def _filter_entry(entry: Entry, active_rules: CompositeExclusionRules, overrides: OverrideSet) -> Entry:
    if entry.is_file:
        return entry.evolve(selection=filtered_file_selection(entry, active_rules, overrides))

    if active_rules.exclude(entry.id) and not overrides.has_override_under(entry.id):
        # Children are still recomputed so they are consistent once the rule is lifted.
        if entry.children is None:
            return entry.evolve(selection=Selection.DESELECTED)
        children = _filter_entries(entry.children, active_rules, overrides)
        return entry.evolve(selection=Selection.DESELECTED, children=children)

    if entry.children is not None:
        children = _filter_entries(entry.children, active_rules, overrides)
        selection = filtered_children_selection(children, active_rules.is_active, entry.has_selection_intent)
        return entry.evolve(selection=selection, children=children)

    return entry.evolve(selection=unloaded_directory_selection(entry.has_selection_intent, active_rules.is_active))


def apply_filters(
    tree: SelectionTree, active_rules: CompositeExclusionRules, overrides: OverrideSet
) -> SelectionTree:
    """Recompute every entry's selection against the active rules.

    Args:
        tree: The current tree.
        active_rules: The active rules, combined by logical OR.
        overrides: File ids that are always selected.

    Returns:
        A new tree; applying the function again with the same arguments returns an
        equal tree.

    Example:
        >>> from dir2prompt.exclusion_rules.rule_set import ExclusionRuleSet
        >>> from dir2prompt.types import EntryKind
        >>> tree = SelectionTree((Entry("notes.md", "notes.md", EntryKind.FILE),))
        >>> rules = ExclusionRuleSet.with_builtin_rules().activate({"Markdown"})
        >>> apply_filters(tree, rules, OverrideSet()).get("notes.md").selected
        False
    """
    logger.debug("Applying %d active rule(s) with %d override(s)", active_rules.get_rule_count(), len(overrides))
    return tree.with_entries(_filter_entries(tree.entries, active_rules, overrides))
