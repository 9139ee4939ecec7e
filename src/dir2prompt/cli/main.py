"""Command-line interface for dir2prompt.

This module opens a directory as a selection session, applies exclusion rules and
manual selections given on the command line, and writes the export artifact.

Exit Codes:
    0: Successful completion
    1: Runtime error during execution
    2: Command-line syntax error
    130: Interrupted by SIGINT (Ctrl+C)

Example:
    # Export a project without node_modules/
    $ dir2prompt -r "Node Modules" /path/to/project

    # Display version information
    $ dir2prompt --version
"""

import asyncio
import locale
import logging
import sys
from argparse import Namespace
from typing import List, Optional, Sequence, Tuple

from dir2prompt.cli.argparser import CUSTOM_RULE_NAME, create_parser, validate_args
from dir2prompt.exceptions import TokenizerNotAvailableError
from dir2prompt.exclusion_rules.git_rules import GitIgnoreExclusionRules
from dir2prompt.exclusion_rules.rule_set import ExclusionRuleSet
from dir2prompt.io.directory_reader import LocalDirectoryReader
from dir2prompt.io.file_reader import LocalFileReader, parse_file_size
from dir2prompt.output_assembler import ExportResult
from dir2prompt.selection_tree.rendering import render_tree
from dir2prompt.selection_tree.tree import SelectionTree
from dir2prompt.session import SelectionSession
from dir2prompt.token_counter import TokenCounter

logger = logging.getLogger(__name__)


def configure_logging(verbosity: int) -> None:
    """Log to stderr: warnings by default, INFO with -v, DEBUG with -vv."""
    level = logging.WARNING if verbosity <= 0 else logging.INFO if verbosity == 1 else logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)


def configure_collation() -> None:
    """Sort directory listings by the user's locale rather than the C locale."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.debug("Keeping the default collation locale: %s", e)


def normalize_entry_path(path: str) -> str:
    """Turn a user-typed relative path into an entry id.

    Example:
        >>> normalize_entry_path("./src//app/")
        'src/app'
    """
    return "/".join(part for part in path.replace("\\", "/").split("/") if part and part != ".")


def build_rule_set(custom_rules: GitIgnoreExclusionRules) -> ExclusionRuleSet:
    """The built-in rules, plus the command-line patterns when any were given."""
    rule_set = ExclusionRuleSet.with_builtin_rules()
    if custom_rules.has_rules():
        rule_set.register(CUSTOM_RULE_NAME, custom_rules)
    return rule_set


def active_rule_names(args: Namespace, rule_set: ExclusionRuleSet) -> List[str]:
    names = list(rule_set.names()) if args.all_rules else list(args.rules)
    if CUSTOM_RULE_NAME in rule_set and CUSTOM_RULE_NAME not in names:
        names.append(CUSTOM_RULE_NAME)
    return names


def format_rule_list(rule_set: ExclusionRuleSet) -> str:
    width = max(len(name) for name in rule_set.names())
    lines = []
    for name in rule_set.names():
        description = getattr(rule_set.get(name), "description", None) or ""
        lines.append(f"{name.ljust(width)}  {description}".rstrip())
    return "\n".join(lines)


def format_counts(result: ExportResult, counter: TokenCounter) -> str:
    """Format the summary of an export into a human-readable string."""
    tokens = counter.get_total_tokens()
    token_line = f"Tokens: {tokens}" if tokens is not None else f"Tokens: ~{counter.get_estimated_tokens()} (estimated)"
    lines = [
        f"Files: {result.file_count}",
        f"Lines: {counter.get_total_lines()}",
        token_line,
        f"Characters: {counter.get_total_characters()}",
    ]
    if result.failed:
        lines.insert(1, f"Unreadable files: {len(result.failed)}")
    return "\n".join(lines)


async def apply_selections(session: SelectionSession, paths: Sequence[str], selected: bool) -> None:
    for path in paths:
        entry_id = normalize_entry_path(path)
        await session.reveal(entry_id)
        session.toggle_selection(entry_id, selected)


async def run(args: Namespace, rule_set: ExclusionRuleSet) -> Tuple[ExportResult, Optional[SelectionTree]]:
    """Drive a selection session from parsed arguments.

    Deselections are applied before selections, so ``--select`` can pick single files
    inside a directory removed with ``--deselect``.

    Returns:
        The export result, and the completed tree when ``--tree`` was requested.
    """
    max_size = parse_file_size(args.max_file_size)
    session = SelectionSession(
        LocalDirectoryReader(follow_symlinks=args.follow_symlinks),
        LocalFileReader(max_size=max_size or None),
        rule_set,
    )
    session.set_active_rules(active_rule_names(args, rule_set))
    await session.open_root(args.directory)
    await apply_selections(session, args.deselect, False)
    await apply_selections(session, args.select, True)

    result = await session.export(prefix=args.prefix, suffix=args.suffix)
    completed = await session.complete_tree() if args.tree else None
    return result, completed


def write_output(text: str, args: Namespace) -> None:
    if args.output is not None:
        args.output.write_text(text, encoding="utf-8")
        logger.info("Wrote %d characters to %s", len(text), args.output)
    else:
        sys.stdout.write(text)
        sys.stdout.flush()


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the dir2prompt command-line interface.

    Exit codes:
        0: Successful completion
        1: Runtime error during execution
        2: Command-line syntax error
        130: Interrupted by SIGINT (Ctrl+C)
    """
    custom_rules = GitIgnoreExclusionRules()
    parser = create_parser(custom_rules)
    args = parser.parse_args(argv)

    try:
        validate_args(args)
    except ValueError as e:
        parser.error(str(e))

    configure_logging(args.verbose)
    configure_collation()

    try:
        rule_set = build_rule_set(custom_rules)
        if args.list_rules:
            print(format_rule_list(rule_set))
            return

        # Fails fast before any directory is read when tiktoken is missing
        counter = TokenCounter(model=args.tokenizer)

        result, completed = asyncio.run(run(args, rule_set))

        if completed is not None:
            print(render_tree(completed), file=sys.stderr)

        if result.is_empty:
            print("Warning: No code files matched the current selections and filters.", file=sys.stderr)

        write_output(result.text, args)

        if args.summary:
            counter.count(result.text)
            summary = format_counts(result, counter)
            if args.summary == "stdout":
                sys.stdout.write("\n" + summary + "\n")
            else:
                print(summary, file=sys.stderr)

    except KeyboardInterrupt:
        print("Error: Interrupted", file=sys.stderr)
        sys.exit(130)
    except TokenizerNotAvailableError as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
