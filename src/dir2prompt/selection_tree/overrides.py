"""Manual per-file inclusion overrides."""

from dataclasses import dataclass
from typing import AbstractSet, FrozenSet, Iterable, Iterator


@dataclass(frozen=True)
class OverrideSet:
    """File ids force-included by a direct toggle of the file's own checkbox.

    Overrides win over every exclusion rule. Only a manual file-level toggle adds or
    removes ids; directory toggles and filter recomputation never touch the set.

    Example:
        >>> overrides = OverrideSet().with_override("node_modules/pkg/index.js", True)
        >>> "node_modules/pkg/index.js" in overrides
        True
        >>> overrides.has_override_under("node_modules"), overrides.has_override_under("src")
        (True, False)
    """

    ids: FrozenSet[str] = frozenset()

    @classmethod
    def of(cls, ids: Iterable[str]) -> "OverrideSet":
        return cls(frozenset(ids))

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self.ids

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.ids))

    def __len__(self) -> int:
        return len(self.ids)

    def with_override(self, file_id: str, included: bool) -> "OverrideSet":
        """Return a set with ``file_id`` added (``included``) or removed."""
        if included == (file_id in self.ids):
            return self
        ids: AbstractSet[str] = self.ids | {file_id} if included else self.ids - {file_id}
        return OverrideSet(frozenset(ids))

    def has_override_under(self, directory_path: str) -> bool:
        """Whether an override exists at ``directory_path`` or anywhere beneath it.

        The empty path denotes the chosen root, under which every override lies.
        """
        if not directory_path:
            return bool(self.ids)
        prefix = directory_path + "/"
        return any(file_id == directory_path or file_id.startswith(prefix) for file_id in self.ids)
