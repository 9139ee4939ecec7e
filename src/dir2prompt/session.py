"""Selection session: the state holder a user interface or the CLI drives.

A session owns the current tree, the active rule names and the override set, and
applies every transition to whatever tree is current when the transition runs. Opening
a new root starts a new generation; directory reads still in flight for an older
generation are discarded when they complete.
"""

import logging
from dataclasses import replace
from typing import Any, FrozenSet, Iterable, Optional

from dir2prompt.exceptions import UnsupportedRootError
from dir2prompt.exclusion_rules.composite_rules import CompositeExclusionRules
from dir2prompt.exclusion_rules.rule_set import ExclusionRuleSet
from dir2prompt.io.directory_reader import DirectoryReader
from dir2prompt.io.file_reader import DEFAULT_MAX_FILE_SIZE, FileReader, LocalFileReader
from dir2prompt.output_assembler import ExportResult, assemble, compose_prompt, explain
from dir2prompt.selection_tree.complete_tree import build_complete_tree
from dir2prompt.selection_tree.entry import Entry, join_path
from dir2prompt.selection_tree.filters import apply_filters
from dir2prompt.selection_tree.lazy_loader import LazyLoader, entries_from_items, mark_loading, merge_children
from dir2prompt.selection_tree.navigation import set_all_open, set_open
from dir2prompt.selection_tree.overrides import OverrideSet
from dir2prompt.selection_tree.selection import toggle_selection
from dir2prompt.selection_tree.tree import SelectionTree
from dir2prompt.types import EntryKind

logger = logging.getLogger(__name__)


class SelectionSession:
    """Interactive selection state over one chosen root directory.

    Attributes:
        reader (DirectoryReader): Capability for directory reads.
        file_reader (FileReader): Capability for file reads at export time.
        rule_set (ExclusionRuleSet): Registry the active rule names refer to.
        tree (SelectionTree): The current tree. Replaced, never mutated, on every transition.
        overrides (OverrideSet): Files force-included by manual toggles.
        generation (int): Identity of the currently opened root.

    Example:
        >>> import asyncio
        >>> from dir2prompt.io.directory_reader import LocalDirectoryReader
        >>> session = SelectionSession(LocalDirectoryReader())
        >>> _ = session.set_active_rules({"Node Modules"})
        >>> asyncio.run(session.open_root("project"))  # doctest: +SKIP
        >>> result = asyncio.run(session.export())  # doctest: +SKIP
    """

    def __init__(
        self,
        reader: DirectoryReader,
        file_reader: Optional[FileReader] = None,
        rule_set: Optional[ExclusionRuleSet] = None,
    ) -> None:
        self.reader = reader
        self.file_reader = file_reader or LocalFileReader(max_size=DEFAULT_MAX_FILE_SIZE)
        self.rule_set = rule_set or ExclusionRuleSet.with_builtin_rules()
        self.tree = SelectionTree()
        self.overrides = OverrideSet()
        self.generation = 0
        self.root_handle: Any = None
        self._active_names: FrozenSet[str] = frozenset()
        self._active_rules = CompositeExclusionRules()
        self._loader = LazyLoader(reader)
        self._open_requests = 0

    @property
    def active_rule_names(self) -> FrozenSet[str]:
        return self._active_names

    @property
    def active_rules(self) -> CompositeExclusionRules:
        return self._active_rules

    @property
    def has_root(self) -> bool:
        return self.root_handle is not None

    async def open_root(self, handle: Any) -> None:
        """Open ``handle`` as the new root.

        The root's first level is read with every entry selected, then the active rules
        are applied. Overrides from a previous root are cleared. A ``None`` handle means
        the user cancelled the picker and is ignored.

        Raises:
            UnsupportedRootError: If ``handle`` is not a directory. State is left untouched.
            FileNotFoundError: If ``handle`` does not exist. State is left untouched.
        """
        if handle is None:
            logger.debug("Root selection cancelled")
            return

        root = self.reader.describe(handle)
        if root.kind is not EntryKind.DIRECTORY:
            raise UnsupportedRootError(str(handle))

        self._open_requests += 1
        request = self._open_requests

        # The root level is read before any state changes, so a failure leaves the old root.
        items = await self.reader.read_directory(root.handle)
        if request != self._open_requests:
            logger.debug("Discarding listing of %s, another root was chosen meanwhile", root.name)
            return

        self.generation += 1
        self._loader.forget_stale(self.generation)
        self.root_handle = root.handle
        self.overrides = OverrideSet()
        # The chosen root is implicitly selected, so every top-level entry starts selected.
        root_entry = Entry("", root.name, EntryKind.DIRECTORY)
        entries = entries_from_items(items, root_entry, CompositeExclusionRules(), self.overrides)
        self.tree = apply_filters(SelectionTree(entries, root.name), self._active_rules, self.overrides)
        logger.info("Opened %s with %d top-level entries", root.name, len(entries))

    def toggle_selection(self, entry_id: str, selected: bool) -> SelectionTree:
        """Apply a checkbox toggle.

        Raises:
            EntryNotFoundError: If the entry has not been materialized.
        """
        self.tree, self.overrides = toggle_selection(self.tree, self.overrides, entry_id, selected)
        return self.tree

    def set_active_rules(self, names: Iterable[str]) -> SelectionTree:
        """Replace the set of active rules and recompute the tree.

        Raises:
            UnknownRuleError: If a name is not registered. State is left untouched.
        """
        active_names = frozenset(names)
        active_rules = self.rule_set.activate(active_names)
        if active_names == self._active_names:
            return self.tree
        self._active_names = active_names
        self._active_rules = active_rules
        logger.debug("Active rules: %s", ", ".join(sorted(active_names)) or "(none)")
        self.tree = apply_filters(self.tree, self._active_rules, self.overrides)
        return self.tree

    def toggle_rule(self, name: str) -> SelectionTree:
        """Activate ``name`` if it is inactive, deactivate it otherwise.

        Raises:
            UnknownRuleError: If the name is not registered.
        """
        return self.set_active_rules(self._active_names ^ {name})

    def activate_all_rules(self) -> SelectionTree:
        return self.set_active_rules(self.rule_set.names())

    async def expand(self, entry_id: str) -> SelectionTree:
        """Materialize a directory's children if that has not happened yet.

        Concurrent calls for the same directory share one read. A read that completes
        after another root was opened is discarded.

        Raises:
            EntryNotFoundError: If the directory has not been materialized itself.
        """
        directory = self.tree.get(entry_id)
        if not directory.is_dir or directory.is_loaded:
            return self.tree

        generation = self.generation
        self.tree = mark_loading(self.tree, entry_id)
        items = await self._loader.read(directory, generation)

        if generation != self.generation:
            logger.debug("Discarding stale listing of %s", entry_id)
            return self.tree
        self.tree = merge_children(self.tree, entry_id, items, self._active_rules, self.overrides)
        return self.tree

    async def toggle_open(self, entry_id: str) -> SelectionTree:
        """Open or close an entry, loading a directory the first time it is opened.

        Raises:
            EntryNotFoundError: If the entry has not been materialized.
        """
        entry = self.tree.get(entry_id)
        if entry.is_dir and not entry.is_loaded:
            self.tree = set_open(self.tree, entry_id, True)
            return await self.expand(entry_id)
        self.tree = set_open(self.tree, entry_id, not entry.is_open)
        return self.tree

    def set_all_open(self, is_open: bool) -> SelectionTree:
        """Expand or collapse every directory without loading anything."""
        self.tree = set_all_open(self.tree, is_open)
        return self.tree

    async def reveal(self, path: str) -> SelectionTree:
        """Load every directory above ``path`` so the entry at ``path`` is materialized.

        Raises:
            EntryNotFoundError: If some component of ``path`` does not exist.
        """
        parts = [part for part in path.strip("/").split("/") if part]
        prefix = ""
        for part in parts[:-1]:
            prefix = join_path(prefix, part)
            await self.expand(prefix)
        if parts:
            self.tree.get(join_path(prefix, parts[-1]))
        return self.tree

    async def complete_tree(self) -> SelectionTree:
        """Materialize whatever the current selection needs for an export."""
        return await build_complete_tree(self.tree, self._active_rules, self.overrides, self.reader)

    async def export(self, prefix: str = "", suffix: str = "") -> ExportResult:
        """Build the export artifact for the current selection.

        The prefix and suffix are wrapped around the records with :func:`compose_prompt`;
        an empty export stays empty.
        """
        completed = await self.complete_tree()
        if logger.isEnabledFor(logging.DEBUG):
            for record in explain(completed, self.rule_set, self._active_names, self.overrides):
                logger.debug("%s %s (%s)", "+" if record.included else "-", record.path, record.reason)

        result = await assemble(completed, self.file_reader)
        if result.is_empty:
            return result
        return replace(result, text=compose_prompt(result.text, prefix, suffix))

