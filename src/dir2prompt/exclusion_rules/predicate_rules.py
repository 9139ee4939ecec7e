"""Exclusion rules backed by plain path predicates."""

from typing import Callable, Optional

from .base_rules import BaseExclusionRules


class PredicateExclusionRules(BaseExclusionRules):
    """Exclusion rule wrapping a callable predicate over a root-relative path.

    Attributes:
        predicate (Callable[[str], bool]): Returns True for paths to exclude.
        description (Optional[str]): Human-readable summary shown by ``--list-rules``.

    Example:
        >>> lock_files = PredicateExclusionRules(lambda p: p.endswith("yarn.lock"), "Yarn lock files")
        >>> lock_files.exclude("web/yarn.lock")
        True
        >>> lock_files.description
        'Yarn lock files'
    """

    def __init__(self, predicate: Callable[[str], bool], description: Optional[str] = None):
        if not callable(predicate):
            raise TypeError(f"predicate must be callable, got {type(predicate)}")
        self.predicate = predicate
        self.description = description

    def exclude(self, path: str) -> bool:
        return bool(self.predicate(path))

    def __repr__(self) -> str:
        return f"PredicateExclusionRules(description={self.description!r})"


def under_directory(name: str) -> Callable[[str], bool]:
    """Build a predicate matching a root-level entry ``name`` and everything beneath it.

    Example:
        >>> is_dist = under_directory("dist")
        >>> is_dist("dist"), is_dist("dist/app.js"), is_dist("src/dist"), is_dist("distribution")
        (True, True, False, False)
    """
    prefix = name.rstrip("/") + "/"
    bare = name.rstrip("/")

    def predicate(path: str) -> bool:
        return path == bare or path.startswith(prefix)

    return predicate


def with_suffix(*suffixes: str, case_sensitive: bool = True) -> Callable[[str], bool]:
    """Build a predicate matching paths that end with any of ``suffixes``.

    Example:
        >>> images = with_suffix(".png", ".jpg", case_sensitive=False)
        >>> images("assets/LOGO.PNG")
        True
    """
    if case_sensitive:
        return lambda path: any(path.endswith(suffix) for suffix in suffixes)
    lowered = tuple(suffix.lower() for suffix in suffixes)
    return lambda path: any(path.lower().endswith(suffix) for suffix in lowered)
