"""Output assembler: turns a completed selection tree into one export artifact.

Each included file becomes one record::

    //--- File: <path> ---

    <content>

Records are concatenated in tree traversal order. A file that cannot be read is
replaced by an error banner in its record; the rest of the batch is unaffected.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Tuple

from dir2prompt.exclusion_rules.rule_set import ExclusionRuleSet
from dir2prompt.file_types import is_code_file
from dir2prompt.io.directory_reader import display_name
from dir2prompt.io.file_reader import FileReader
from dir2prompt.selection_tree.entry import Entry
from dir2prompt.selection_tree.overrides import OverrideSet
from dir2prompt.selection_tree.tree import SelectionTree

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT_READS = 16


def format_record(path: str, content: str) -> str:
    """Format one file record.

    Example:
        >>> format_record("src/a.ts", "export {};")
        '//--- File: src/a.ts ---\\n\\nexport {};\\n\\n'
    """
    return f"//--- File: {display_name(path)} ---\n\n{content}\n\n"


def format_error_banner(message: str) -> str:
    """Inline banner that replaces the content of a file that could not be read."""
    return f"--- ERROR: could not read this file ({display_name(message)}) ---"


def compose_prompt(body: str, prefix: str = "", suffix: str = "") -> str:
    """Wrap an export artifact with an optional prefix and suffix.

    Empty parts are skipped; the rest are separated by a blank line.

    Example:
        >>> compose_prompt("BODY", prefix="Review this:")
        'Review this:\\n\\nBODY'
        >>> compose_prompt("", "", "")
        ''
    """
    return "\n\n".join(part for part in (prefix, body, suffix) if part)


@dataclass(frozen=True)
class CollectedFile:
    """A file chosen for export.

    Attributes:
        path: Root-relative path written in the record header.
        handle: Capability passed to the file reader.
    """

    path: str
    handle: Any = field(compare=False, repr=False)


def _walk_collect(entries: Iterable[Entry], collected: List[CollectedFile]) -> None:
    for entry in entries:
        if entry.is_file:
            if entry.selected and is_code_file(entry.name):
                collected.append(CollectedFile(entry.path, entry.handle))
        elif entry.children and entry.has_selection_intent:
            _walk_collect(entry.children, collected)


def collect(tree: SelectionTree) -> List[CollectedFile]:
    """Return the files to export, in traversal order.

    A file is exported when it is selected, its extension is a code extension, and every
    directory above it is selected or indeterminate. Images, videos and unclassified
    files are never exported, whatever their checkbox says.

    Example:
        >>> from dir2prompt.types import EntryKind
        >>> a = Entry("src/a.ts", "a.ts", EntryKind.FILE)
        >>> logo = Entry("src/logo.png", "logo.png", EntryKind.FILE)
        >>> src = Entry("src", "src", EntryKind.DIRECTORY, children=(a, logo))
        >>> [item.path for item in collect(SelectionTree((src,)))]
        ['src/a.ts']
    """
    collected: List[CollectedFile] = []
    _walk_collect(tree.entries, collected)
    return collected


@dataclass(frozen=True)
class ExportResult:
    """The assembled artifact and what went into it.

    Attributes:
        text: Concatenated records; empty when no file was collected.
        files: Paths of every exported record, in order.
        failed: Paths whose content could not be read and were replaced by a banner.
    """

    text: str
    files: Tuple[str, ...] = ()
    failed: Tuple[str, ...] = ()

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def is_empty(self) -> bool:
        return not self.files


async def _read_record(file: CollectedFile, file_reader: FileReader, semaphore: asyncio.Semaphore) -> Tuple[str, bool]:
    async with semaphore:
        try:
            content = await file_reader.read_text(file.handle)
        except (OSError, UnicodeError) as e:
            logger.warning("Could not read %s: %s", file.path, e)
            return format_record(file.path, format_error_banner(str(e))), False
    return format_record(file.path, content), True


async def assemble(
    tree: SelectionTree,
    file_reader: FileReader,
    max_concurrent_reads: int = DEFAULT_MAX_CONCURRENT_READS,
) -> ExportResult:
    """Read every collected file and concatenate the records.

    Reads run concurrently, at most ``max_concurrent_reads`` at a time, but records are
    always emitted in traversal order.

    Args:
        tree: A completed tree, usually the result of ``build_complete_tree``.
        file_reader: Capability used to read each file's text.
        max_concurrent_reads: Upper bound on simultaneous reads.

    Returns:
        ExportResult: The artifact text and the exported paths.

    Raises:
        ValueError: If max_concurrent_reads is less than 1.
    """
    if max_concurrent_reads < 1:
        raise ValueError("max_concurrent_reads must be at least 1")

    files = collect(tree)
    if not files:
        logger.info("No code files matched the current selection and filters")
        return ExportResult(text="")

    semaphore = asyncio.Semaphore(max_concurrent_reads)
    results = await asyncio.gather(*(_read_record(file, file_reader, semaphore) for file in files))
    logger.info("Assembled %d file record(s)", len(files))
    return ExportResult(
        text="".join(record for record, _ in results),
        files=tuple(file.path for file in files),
        failed=tuple(file.path for file, (_, ok) in zip(files, results) if not ok),
    )


@dataclass(frozen=True)
class InclusionRecord:
    """Why an entry of a completed tree is, or is not, part of the export."""

    path: str
    included: bool
    reason: str


def explain(
    tree: SelectionTree,
    rule_set: ExclusionRuleSet,
    active_names: Iterable[str],
    overrides: Optional[OverrideSet] = None,
) -> List[InclusionRecord]:
    """Explain the inclusion decision for every entry the export would visit.

    Entries under a directory that is not traversed are not listed; the directory's own
    record explains why.

    Raises:
        UnknownRuleError: If an active name is not registered.
    """
    active = set(active_names)
    rule_set.activate(active)
    overrides = overrides or OverrideSet()
    records: List[InclusionRecord] = []

    def filtered_reason(path: str) -> Optional[str]:
        name = rule_set.exclusion_reason(path, active)
        return None if name is None else f"Filtered by '{name}'"

    def walk(entries: Iterable[Entry]) -> None:
        for entry in entries:
            filtered = filtered_reason(entry.path)
            if entry.is_file:
                if not is_code_file(entry.name):
                    records.append(InclusionRecord(entry.path, False, "Not a code file"))
                elif not entry.selected:
                    records.append(InclusionRecord(entry.path, False, filtered or "Deselected"))
                elif filtered and entry.id in overrides:
                    records.append(InclusionRecord(entry.path, True, "Included by manual override"))
                else:
                    records.append(InclusionRecord(entry.path, True, "Selected"))
            elif not entry.has_selection_intent:
                records.append(InclusionRecord(entry.path, False, filtered or "Deselected"))
            elif entry.children is None:
                records.append(InclusionRecord(entry.path, False, "Not loaded"))
            else:
                records.append(InclusionRecord(entry.path, True, "Traversed"))
                walk(entry.children)

    walk(tree.entries)
    return records
