"""Command-line argument parsing for dir2prompt.

This module defines the command-line interface for dir2prompt,
handling argument parsing and validation.
"""

import argparse
import os
from pathlib import Path
from typing import Any, List, Optional, Sequence, Type, Union

from dir2prompt import __version__
from dir2prompt.exclusion_rules.git_rules import GitIgnoreExclusionRules

CUSTOM_RULE_NAME = "Custom Patterns"


def create_pattern_action(custom_rules: GitIgnoreExclusionRules) -> Type[argparse.Action]:
    """Create a custom action class that feeds -e/-i options into ``custom_rules``.

    Patterns are added as the options are parsed, so their order on the command line is
    preserved (later negations can re-include earlier matches).

    Args:
        custom_rules: The gitignore-style rule that collects user patterns.

    Returns:
        A custom action class for use with argparse.
    """

    class PatternRulesAction(argparse.Action):
        def __init__(self, option_strings: List[str], dest: str, **kwargs: Any) -> None:
            super().__init__(option_strings, dest, **kwargs)

        def __call__(
            self,
            parser: argparse.ArgumentParser,
            namespace: argparse.Namespace,
            values: Union[str, Sequence[Any], None],
            option_string: Optional[str] = None,
        ) -> None:
            if values is None:
                return
            if option_string in ("-e", "--exclude-from"):
                path = values if isinstance(values, (str, os.PathLike)) else Path(str(values))
                try:
                    custom_rules.load_rules(path)
                except FileNotFoundError as e:
                    parser.error(str(e))
            else:
                custom_rules.add_rule(str(values))

            collected = getattr(namespace, self.dest, None) or []
            collected.append(values)
            setattr(namespace, self.dest, collected)

    return PatternRulesAction


def create_parser(custom_rules: GitIgnoreExclusionRules) -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Args:
        custom_rules: The gitignore-style rule updated by -e and -i during parsing.

    Returns:
        An ArgumentParser instance configured with dir2prompt's options.
    """
    description = """
    dir2prompt: Concatenate a selected subset of a directory's files into one LLM prompt.

    Every file under DIRECTORY starts selected. Named exclusion rules (see --list-rules)
    and gitignore-style patterns deselect clutter such as node_modules/, build output,
    lock files and images. --deselect and --select then adjust individual files or whole
    directories; selecting a file that a rule excludes overrides the rule for that file.

    Only code and text files are exported. Each file becomes one record:

        //--- File: <path> ---

        <content>
    """

    epilog = """
    Examples:
      # Export everything except node_modules/ and lock files
      dir2prompt -r "Node Modules" -r "Lock Files" /path/to/project

      # Activate every built-in rule, but keep one Markdown file
      dir2prompt --all-rules --select docs/design.md /path/to/project

      # Drop a directory and wrap the export in instructions
      dir2prompt --deselect tests --prefix "Review this code:" /path/to/project

      # Add gitignore-style patterns from the command line or from files
      dir2prompt -i "*.log" -e .gitignore /path/to/project

      # Show the resulting selection tree and a summary with token counts
      dir2prompt --tree -s stderr -t gpt-4 -o prompt.txt /path/to/project

      # List the built-in rules
      dir2prompt --list-rules
    """

    parser = argparse.ArgumentParser(
        prog="dir2prompt",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"dir2prompt {__version__}", help="Show the version and exit"
    )

    PatternAction = create_pattern_action(custom_rules)

    parser.add_argument(
        "directory",
        type=Path,
        nargs="?",
        help="The directory to export. All paths in the output are relative to this directory.",
    )
    parser.add_argument(
        "-r",
        "--rule",
        dest="rules",
        action="append",
        default=[],
        metavar="RULE",
        help="Activate a named exclusion rule (can be specified multiple times).",
    )
    parser.add_argument(
        "--all-rules",
        action="store_true",
        help="Activate every named exclusion rule.",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        type=str,
        metavar="PATTERN",
        action=PatternAction,
        help=(
            "Gitignore-style pattern excluding matching paths. Can be specified multiple times; "
            f"all patterns form one rule named '{CUSTOM_RULE_NAME}', processed in command-line order."
        ),
    )
    parser.add_argument(
        "-e",
        "--exclude-from",
        type=Path,
        metavar="FILE",
        action=PatternAction,
        help="File of gitignore-style patterns (e.g., .gitignore) added to the custom rule.",
    )
    parser.add_argument(
        "--deselect",
        action="append",
        default=[],
        metavar="PATH",
        help="Uncheck the file or directory at PATH, relative to DIRECTORY (can be repeated).",
    )
    parser.add_argument(
        "--select",
        action="append",
        default=[],
        metavar="PATH",
        help=(
            "Check the file or directory at PATH, relative to DIRECTORY (can be repeated). "
            "Selecting a file overrides every exclusion rule for it."
        ),
    )
    parser.add_argument("--prefix", default="", metavar="TEXT", help="Text placed before the exported files.")
    parser.add_argument("--suffix", default="", metavar="TEXT", help="Text placed after the exported files.")
    parser.add_argument(
        "--max-file-size",
        default="5 MiB",
        metavar="SIZE",
        help="Largest file that is read, e.g. '500KB' or '5 MiB' (default: 5 MiB). Use 0 for no limit.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="FILE",
        help="Output file path. If not specified, output is written to stdout.",
    )
    parser.add_argument(
        "--tree",
        action="store_true",
        help="Print the completed selection tree to stderr.",
    )
    parser.add_argument(
        "-s",
        "--summary",
        metavar="DEST",
        choices=["stderr", "stdout"],
        help="Print a summary report. Valid destinations: stderr, stdout",
    )
    parser.add_argument(
        "-t",
        "--tokenizer",
        metavar="MODEL",
        help="Tokenizer model used for exact token counts (e.g., gpt-4). Without it tokens are estimated.",
    )
    parser.add_argument(
        "--list-rules",
        action="store_true",
        help="List the named exclusion rules and exit.",
    )
    parser.add_argument(
        "-L",
        "--follow-symlinks",
        action="store_true",
        help="Follow symbolic links to directories. By default they are skipped.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v for progress, -vv for per-file inclusion decisions).",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments.

    Performs additional validation beyond what argparse can handle.

    Args:
        args: Parsed command-line arguments.

    Raises:
        ValueError: If any arguments fail validation.
    """
    if args.list_rules:
        return
    if args.directory is None:
        raise ValueError("the following arguments are required: directory")
    if args.output is not None and args.output.is_dir():
        raise ValueError(f"--output must be a file, not a directory: {args.output}")
