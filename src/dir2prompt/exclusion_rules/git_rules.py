"""Implementation of exclusion rules using .gitignore pattern syntax."""

from os import PathLike
from pathlib import Path
from typing import Optional, Sequence, Union

from pathspec import PathSpec
from pathspec.patterns import GitWildMatchPattern  # type: ignore

from dir2prompt.types import PathType

from .base_rules import BaseExclusionRules


class GitIgnoreExclusionRules(BaseExclusionRules):
    """Exclusion rule built from .gitignore patterns.

    Uses the pathspec library to match root-relative paths the same way Git does, which
    makes it the natural way to register user-defined rules next to the built-in
    predicates (for example a "Gitignore" rule loaded from the chosen root's
    ``.gitignore`` file).

    Supported syntax includes globs (``*``, ``?``, ``[abc]``), directory patterns ending in
    ``/``, negation with ``!``, ``**`` and comment lines.

    Attributes:
        spec (PathSpec): Compiled pattern matcher from the pathspec library.

    Example:
        >>> rules = GitIgnoreExclusionRules()
        >>> rules.add_rule("*.log")
        >>> rules.exclude("logs/app.log")
        True
        >>> rules.add_rule("!keep.log")
        >>> rules.exclude("keep.log")
        False

    Note:
        Paths handed to the selection engines are checked exactly as they appear in the
        tree, without a trailing slash. A directory-only pattern such as ``build/`` therefore
        excludes the files below ``build`` but not the ``build`` entry itself.
    """

    def __init__(self, rules_files: Optional[Union[PathType, Sequence[PathType]]] = None):
        """Initialize GitIgnoreExclusionRules with patterns from specified files.

        Args:
            rules_files: Path(s) to the file(s) containing .gitignore patterns.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        self.spec = PathSpec.from_lines(GitWildMatchPattern, [])

        if rules_files is not None:
            self.load_rules(rules_files)

    @classmethod
    def from_patterns(cls, patterns: Sequence[str]) -> "GitIgnoreExclusionRules":
        """Create rules from a sequence of gitignore pattern lines.

        Example:
            >>> rules = GitIgnoreExclusionRules.from_patterns(["*.tmp", "cache/"])
            >>> rules.exclude("cache/data.bin")
            True
        """
        rules = cls()
        for pattern in patterns:
            rules.add_rule(pattern)
        return rules

    def exclude(self, path: str) -> bool:
        """Check if a path matches the loaded .gitignore patterns.

        Args:
            path: The root-relative path to check.

        Returns:
            bool: True if the last matching pattern is a non-negated one.
        """
        return self.spec.match_file(path)

    def has_rules(self) -> bool:
        """Check whether any pattern has been loaded."""
        return len(self.spec.patterns) > 0

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """Load and combine .gitignore patterns from one or more files.

        Args:
            rules_files: Path(s) to file(s) containing .gitignore patterns.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        if isinstance(rules_files, (str, PathLike)):
            rules_files = [rules_files]

        for rules_file in rules_files:
            path = Path(rules_file)
            if not path.exists():
                raise FileNotFoundError(f"Rules file not found: {path}")

            with open(path, "r") as f:
                gitignore_content = f.read().splitlines()

            new_patterns = PathSpec.from_lines(GitWildMatchPattern, gitignore_content).patterns

            # Ensure patterns is a list that supports extend
            if not hasattr(self.spec.patterns, "extend"):
                self.spec.patterns = list(self.spec.patterns)

            self.spec.patterns.extend(new_patterns)

    def add_rule(self, rule: str) -> None:
        """Add a single .gitignore pattern directly.

        Args:
            rule: A single .gitignore pattern to add (e.g., "*.pyc", "node_modules/",
                 "!important.txt").
        """
        new_pattern = GitWildMatchPattern(rule)

        # Ensure patterns is a list that supports append
        if not hasattr(self.spec.patterns, "append"):
            self.spec.patterns = list(self.spec.patterns)

        self.spec.patterns.append(new_pattern)
