"""File reading capability consumed by the output assembler."""

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union

from humanfriendly import InvalidSize, parse_size

from dir2prompt.exceptions import FileTooLargeError
from dir2prompt.types import PathType

DEFAULT_MAX_FILE_SIZE = "5 MiB"


def parse_file_size(size: Union[str, int]) -> int:
    """Parse a human-readable file size to bytes.

    Args:
        size: Size string like '1GB', '500MB', '5 MiB', or a number of bytes.

    Returns:
        Size in bytes

    Raises:
        ValueError: If size is not a valid size or is negative.

    Example:
        >>> parse_file_size("5 MiB")
        5242880
        >>> parse_file_size(1024)
        1024
    """
    if isinstance(size, int):
        if size < 0:
            raise ValueError("Size cannot be negative")
        return size
    try:
        return int(parse_size(size))
    except InvalidSize as e:
        raise ValueError(f"Invalid size format '{size}': {e}") from e


class FileReader(ABC):
    """Abstract capability that reads one file's content."""

    @abstractmethod
    async def size(self, handle: Any) -> int:
        """Return the size of the file behind ``handle`` in bytes."""

    @abstractmethod
    async def read_text(self, handle: Any) -> str:
        """Return the decoded text content of the file behind ``handle``.

        Raises:
            OSError: If the file cannot be read (including :class:`FileTooLargeError`).
        """


class LocalFileReader(FileReader):
    """File reader backed by the local file system.

    The size is checked before any content is read, so oversized files are rejected
    without loading them. Decoding uses the configured encoding and error handler;
    the default ``"replace"`` handler never fails on malformed bytes.

    Attributes:
        encoding (str): Encoding used to decode file content.
        errors (str): Decode error handler: "strict", "ignore" or "replace".
        max_size (Optional[int]): Maximum readable size in bytes, or None for no limit.
    """

    def __init__(
        self,
        encoding: str = "utf-8",
        errors: str = "replace",
        max_size: Optional[Union[str, int]] = DEFAULT_MAX_FILE_SIZE,
    ) -> None:
        """Initialize the reader.

        Raises:
            ValueError: If errors is not a supported handler or max_size is invalid.
            LookupError: If the specified encoding is not available.
        """
        if errors not in ("strict", "ignore", "replace"):
            raise ValueError(f"Invalid error handler '{errors}'. Must be one of: strict, ignore, replace")

        # Validate encoding early to fail fast
        try:
            "test".encode(encoding).decode(encoding)
        except LookupError as e:
            raise LookupError(f"Encoding '{encoding}' is not available") from e

        self.encoding = encoding
        self.errors = errors
        self.max_size = None if max_size is None else parse_file_size(max_size)

    async def size(self, handle: PathType) -> int:
        return await asyncio.to_thread(lambda: Path(handle).stat().st_size)

    async def read_text(self, handle: PathType) -> str:
        path = Path(handle)
        if self.max_size is not None:
            file_size = await self.size(path)
            if file_size > self.max_size:
                raise FileTooLargeError(str(path), file_size, self.max_size)
        return await asyncio.to_thread(path.read_text, encoding=self.encoding, errors=self.errors)
