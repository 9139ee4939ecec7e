"""Directory reading capability consumed by the lazy loader and complete-tree builder.

A directory reader enumerates exactly one directory level. The selection engines never
touch the file system directly; they only pass opaque handles to a reader.
"""

import asyncio
import locale
import logging
import os
import unicodedata
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Optional, Set, Tuple

from dir2prompt.types import EntryKind, PathType

logger = logging.getLogger(__name__)

# (device, inode) of a directory, as os.stat reports it
FileIdentity = Tuple[int, int]


def display_name(name: str) -> str:
    """Make a file name safe to write as UTF-8.

    Bytes that were not valid UTF-8 reach Python as lone surrogates; they are replaced
    with U+FFFD. The handle keeps the real name, so the file can still be read.

    Example:
        >>> display_name("bad\\udcff.py") == "bad\\ufffd.py"
        True
    """
    return name.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


@dataclass(frozen=True)
class DirectoryItem:
    """One immediate child reported by a directory reader.

    Attributes:
        name: Base name of the child.
        kind: Whether the child is a file or a directory.
        handle: Opaque capability for the child, only ever passed back to a reader.
    """

    name: str
    kind: EntryKind
    handle: Any = field(compare=False, repr=False)

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


def _base_letters(name: str) -> str:
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(char for char in decomposed if not unicodedata.combining(char)).casefold()


def directory_sort_key(name: str, kind: EntryKind) -> tuple:
    """Sort key placing directories first, then names in locale-aware order.

    Accents and case are ignored first, so the order stays sensible in the C locale;
    the current collation locale then breaks ties.
    """
    return (kind is not EntryKind.DIRECTORY, _base_letters(name), locale.strxfrm(name.casefold()), name)


def sort_directory_items(items: Iterable[DirectoryItem]) -> List[DirectoryItem]:
    """Order items directories first, then by locale-aware name comparison.

    Example:
        >>> items = [
        ...     DirectoryItem("b.py", EntryKind.FILE, None),
        ...     DirectoryItem("src", EntryKind.DIRECTORY, None),
        ...     DirectoryItem("A.md", EntryKind.FILE, None),
        ... ]
        >>> [item.name for item in sort_directory_items(items)]
        ['src', 'A.md', 'b.py']
    """
    return sorted(items, key=lambda item: directory_sort_key(item.name, item.kind))


class DirectoryReader(ABC):
    """Abstract capability that reads one directory level."""

    @abstractmethod
    def describe(self, handle: Any) -> DirectoryItem:
        """Describe the resource behind ``handle`` (used to validate a chosen root).

        Raises:
            FileNotFoundError: If the resource does not exist.
        """

    @abstractmethod
    async def read_directory(self, handle: Any) -> List[DirectoryItem]:
        """Return the immediate children of the directory behind ``handle``.

        Implementations must return the items ordered as :func:`sort_directory_items` does.

        Raises:
            OSError: If the directory cannot be listed.
        """


class LocalDirectoryReader(DirectoryReader):
    """Directory reader backed by the local file system.

    Handles are :class:`pathlib.Path` objects. Listing runs in a worker thread so the
    event loop is never blocked.

    Symbolic links to directories are only reported when ``follow_symlinks`` is True.
    Even then, a link pointing at the directory being listed or at one of its ancestors
    is skipped with a warning, so an export never recurses through a link loop. Names
    that are not valid UTF-8 are reported through :func:`display_name`.

    Example:
        >>> import asyncio
        >>> reader = LocalDirectoryReader()
        >>> items = asyncio.run(reader.read_directory("src"))  # doctest: +SKIP
        >>> [item.name for item in items]  # doctest: +SKIP
        ['dir2prompt']
    """

    def __init__(self, follow_symlinks: bool = False) -> None:
        self.follow_symlinks = follow_symlinks

    def describe(self, handle: PathType) -> DirectoryItem:
        path = Path(handle)
        if not path.exists():
            raise FileNotFoundError(f"Path does not exist: {path}")
        kind = EntryKind.DIRECTORY if path.is_dir() else EntryKind.FILE
        return DirectoryItem(display_name(path.resolve().name), kind, path)

    async def read_directory(self, handle: PathType) -> List[DirectoryItem]:
        return await asyncio.to_thread(self._list_directory, Path(handle))

    @staticmethod
    def _ancestor_identities(path: Path) -> Set[FileIdentity]:
        """Identities of ``path`` and every directory above it, following links."""
        absolute = path.absolute()
        identities = set()
        for directory in (absolute, *absolute.parents):
            try:
                info = os.stat(directory)
            except OSError:
                continue
            identities.add((info.st_dev, info.st_ino))
        return identities

    def _list_directory(self, path: Path) -> List[DirectoryItem]:
        items = []
        ancestors: Optional[Set[FileIdentity]] = None
        with os.scandir(path) as entries:
            for entry in entries:
                try:
                    if entry.is_symlink() and entry.is_dir(follow_symlinks=True):
                        if not self.follow_symlinks:
                            logger.debug("Skipping symlinked directory %s", entry.path)
                            continue
                        if ancestors is None:
                            ancestors = self._ancestor_identities(path)
                        target = entry.stat(follow_symlinks=True)
                        if (target.st_dev, target.st_ino) in ancestors:
                            logger.warning("Skipping symlink loop %s -> %s", entry.path, os.path.realpath(entry.path))
                            continue
                    is_dir = entry.is_dir(follow_symlinks=self.follow_symlinks)
                except OSError as e:
                    logger.warning("Cannot stat %s: %s", entry.path, e)
                    continue
                kind = EntryKind.DIRECTORY if is_dir else EntryKind.FILE
                items.append(DirectoryItem(display_name(entry.name), kind, Path(entry.path)))
        return sort_directory_items(items)
