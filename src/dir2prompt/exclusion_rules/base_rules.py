from abc import ABC, abstractmethod
from typing import Sequence, Union

from dir2prompt.types import PathType


class BaseExclusionRules(ABC):
    """
    Abstract base class defining the interface for path exclusion rules.

    An exclusion rule is a predicate over a root-relative, slash-separated path. Rules are
    registered under a name in an :class:`~dir2prompt.exclusion_rules.rule_set.ExclusionRuleSet`
    and switched on and off by that name; a path is filtered when any active rule excludes it.

    All implementations must provide :meth:`exclude`. File loading and individual rule addition
    are optional capabilities that depend on the rule type.

    Example:
        >>> from dir2prompt.exclusion_rules.git_rules import GitIgnoreExclusionRules
        >>> git_rules = GitIgnoreExclusionRules()
        >>> git_rules.add_rule('*.pyc')
        >>> git_rules.exclude('test.pyc')
        True
        >>> git_rules.exclude('test.py')
        False
        >>>
        >>> from dir2prompt.exclusion_rules.predicate_rules import PredicateExclusionRules
        >>> markdown = PredicateExclusionRules(lambda path: path.lower().endswith('.md'))
        >>> markdown.exclude('README.md')
        True
    """

    @abstractmethod
    def exclude(self, path: str) -> bool:
        """
        Determine if a given path should be excluded.

        Args:
            path (str): The root-relative path to check, using forward slashes
                (for example ``"src/main.py"`` or ``"node_modules"``).

        Returns:
            bool: True if the path should be excluded, False if it should be included.
        """
        pass

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """
        Load and parse exclusion rules from one or more files.

        Rule types that don't support file operations use this default implementation,
        which raises NotImplementedError.

        Args:
            rules_files: Path to a file or sequence of paths containing exclusion rules.

        Raises:
            NotImplementedError: If this rule type doesn't support loading from files.
            FileNotFoundError: If any rules file does not exist (for file-supporting rule types).
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support loading rules from files.")

    def add_rule(self, rule: str) -> None:
        """
        Add a single exclusion rule directly.

        Args:
            rule (str): The exclusion rule to add. The format depends on the specific
                implementation (e.g., a gitignore pattern like "*.pyc").

        Raises:
            NotImplementedError: If this rule type doesn't support adding individual rules.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support adding individual rules.")
