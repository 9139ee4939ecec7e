"""Registry of named exclusion rules."""

from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from dir2prompt.exceptions import UnknownRuleError

from .base_rules import BaseExclusionRules
from .builtin_rules import builtin_rules
from .composite_rules import CompositeExclusionRules


class ExclusionRuleSet:
    """String-keyed table of exclusion rules that callers activate by name.

    The rule set itself holds no activation state. Callers keep the set of active names
    (persisting it is their concern) and resolve it with :meth:`activate` whenever the
    selection engines need it.

    Example:
        >>> rule_set = ExclusionRuleSet.with_builtin_rules()
        >>> active = rule_set.activate({"Node Modules"})
        >>> active.exclude("node_modules/react/index.js")
        True
        >>> rule_set.exclusion_reason("README.md", {"Markdown", "Node Modules"})
        'Markdown'
    """

    def __init__(self, rules: Optional[Mapping[str, BaseExclusionRules]] = None) -> None:
        self._rules: Dict[str, BaseExclusionRules] = {}
        for name, rule in (rules or {}).items():
            self.register(name, rule)

    @classmethod
    def with_builtin_rules(cls) -> "ExclusionRuleSet":
        """Create a rule set pre-populated with the built-in rules."""
        return cls(builtin_rules())

    def register(self, name: str, rule: BaseExclusionRules) -> None:
        """Register ``rule`` under ``name``, replacing any rule with the same name.

        Raises:
            TypeError: If rule doesn't implement BaseExclusionRules.
            ValueError: If name is empty.
        """
        if not isinstance(rule, BaseExclusionRules):
            raise TypeError(f"Rule '{name}' must implement BaseExclusionRules, got {type(rule)}")
        if not name:
            raise ValueError("Rule name must not be empty")
        self._rules[name] = rule

    def names(self) -> Tuple[str, ...]:
        """Registered rule names in registration order."""
        return tuple(self._rules)

    def get(self, name: str) -> BaseExclusionRules:
        try:
            return self._rules[name]
        except KeyError:
            raise UnknownRuleError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def activate(self, active_names: Iterable[str]) -> CompositeExclusionRules:
        """Resolve a set of active rule names into a composite rule.

        Rules are combined in registration order regardless of the order of
        ``active_names``.

        Raises:
            UnknownRuleError: If any name is not registered.
        """
        wanted = set(active_names)
        for name in wanted:
            if name not in self._rules:
                raise UnknownRuleError(name)
        return CompositeExclusionRules([rule for name, rule in self._rules.items() if name in wanted])

    def exclusion_reason(self, path: str, active_names: Iterable[str]) -> Optional[str]:
        """Return the name of the first active rule that excludes ``path``, or None."""
        wanted = set(active_names)
        for name, rule in self._rules.items():
            if name in wanted and rule.exclude(path):
                return name
        return None
