"""Named exclusion rules for filtering files and directories."""

from .base_rules import BaseExclusionRules
from .builtin_rules import builtin_rules
from .composite_rules import CompositeExclusionRules
from .git_rules import GitIgnoreExclusionRules
from .predicate_rules import PredicateExclusionRules
from .rule_set import ExclusionRuleSet

__all__ = [
    "BaseExclusionRules",
    "CompositeExclusionRules",
    "ExclusionRuleSet",
    "GitIgnoreExclusionRules",
    "PredicateExclusionRules",
    "builtin_rules",
]
