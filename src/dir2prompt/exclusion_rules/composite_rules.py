"""Composite exclusion rules combining the currently active rules."""

from typing import List, Optional, Sequence

from .base_rules import BaseExclusionRules


class CompositeExclusionRules(BaseExclusionRules):
    """The set of active exclusion rules, combined by logical OR.

    This is the value the filter engine, lazy loader and complete-tree builder receive at
    call time. A path is excluded if ANY constituent rule excludes it. An empty composite is
    valid and means "no rule is active": it excludes nothing and :attr:`is_active` is False.

    Attributes:
        rules (List[BaseExclusionRules]): Constituent rules, evaluated in order.

    Example:
        >>> from dir2prompt.exclusion_rules.predicate_rules import PredicateExclusionRules
        >>> markdown = PredicateExclusionRules(lambda p: p.endswith(".md"))
        >>> logs = PredicateExclusionRules(lambda p: p.endswith(".log"))
        >>> composite = CompositeExclusionRules([markdown, logs])
        >>> composite.exclude("README.md"), composite.exclude("main.py")
        (True, False)
        >>> CompositeExclusionRules([]).is_active
        False
    """

    def __init__(self, rules: Sequence[BaseExclusionRules] = ()):
        """Initialize composite exclusion rules.

        Args:
            rules: Sequence of exclusion rules to combine. May be empty.

        Raises:
            TypeError: If any rule doesn't implement BaseExclusionRules.
        """
        for i, rule in enumerate(rules):
            if not isinstance(rule, BaseExclusionRules):
                raise TypeError(f"Rule at index {i} must implement BaseExclusionRules, " f"got {type(rule)}")

        self.rules: List[BaseExclusionRules] = list(rules)

    @property
    def is_active(self) -> bool:
        """Whether at least one rule is active."""
        return len(self.rules) > 0

    def exclude(self, path: str) -> bool:
        """Check if a path should be excluded by any constituent rule.

        Uses short-circuit evaluation: stops as soon as any rule excludes the path.
        """
        return any(rule.exclude(path) for rule in self.rules)

    def matching_rule(self, path: str) -> Optional[BaseExclusionRules]:
        """Return the first constituent rule excluding ``path``, or None."""
        for rule in self.rules:
            if rule.exclude(path):
                return rule
        return None

    def get_rule_count(self) -> int:
        return len(self.rules)

    def get_rules(self) -> List[BaseExclusionRules]:
        """Get a copy of the constituent rules list."""
        return list(self.rules)
