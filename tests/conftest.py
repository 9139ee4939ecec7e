"""Test configuration and fixtures for dir2prompt."""

import asyncio
from typing import Dict, List, Optional, Union

import pytest

from dir2prompt.io.directory_reader import DirectoryItem, DirectoryReader, sort_directory_items
from dir2prompt.io.file_reader import FileReader
from dir2prompt.types import EntryKind

# Nested mapping: a str value is a file's content, a dict value is a directory
Layout = Dict[str, Union[str, "Layout"]]


def pytest_addoption(parser):
    """Add custom command-line options for tests."""
    parser.addoption("--run-cli-tests", action="store_true", default=False, help="Run CLI integration tests (slow)")


class InMemoryDirectoryReader(DirectoryReader):
    """Directory reader over a nested dict; handles are root-relative paths.

    Reads of paths listed in ``failing`` raise PermissionError. When ``gate`` is set,
    every read waits for it, which lets tests hold reads in flight.
    """

    def __init__(self, layout: Layout, failing=(), gate: Optional[asyncio.Event] = None):
        self.layout = layout
        self.failing = set(failing)
        self.gate = gate
        self.calls: List[str] = []

    def _node(self, handle: str):
        node = self.layout
        for part in [p for p in handle.split("/") if p]:
            if not isinstance(node, dict) or part not in node:
                raise FileNotFoundError(f"Path does not exist: {handle}")
            node = node[part]
        return node

    def describe(self, handle: str) -> DirectoryItem:
        node = self._node(handle)
        kind = EntryKind.DIRECTORY if isinstance(node, dict) else EntryKind.FILE
        return DirectoryItem(handle.rsplit("/", 1)[-1] or "root", kind, handle)

    async def read_directory(self, handle: str) -> List[DirectoryItem]:
        self.calls.append(handle)
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if handle in self.failing:
            raise PermissionError(f"Permission denied: {handle}")
        node = self._node(handle)
        items = []
        for name, child in node.items():
            kind = EntryKind.DIRECTORY if isinstance(child, dict) else EntryKind.FILE
            items.append(DirectoryItem(name, kind, f"{handle}/{name}" if handle else name))
        return sort_directory_items(items)


class InMemoryFileReader(FileReader):
    """File reader over the same nested dict; paths in ``failing`` raise OSError."""

    def __init__(self, layout: Layout, failing=()):
        self.layout = layout
        self.failing = set(failing)
        self.reads: List[str] = []

    def _content(self, handle: str) -> str:
        node = self.layout
        for part in handle.split("/"):
            node = node[part]
        return node

    async def size(self, handle: str) -> int:
        return len(self._content(handle).encode("utf-8"))

    async def read_text(self, handle: str) -> str:
        self.reads.append(handle)
        await asyncio.sleep(0)
        if handle in self.failing:
            raise OSError(f"Cannot read {handle}")
        return self._content(handle)


@pytest.fixture
def sample_layout() -> Layout:
    """A small web project with clutter the built-in rules target."""
    return {
        "src": {
            "a.ts": "export const a = 1;",
            "b.png": "PNG",
            "lib": {"util.ts": "export {};"},
        },
        "node_modules": {"react": {"index.js": "module.exports = {};"}, "left-pad.js": "lp"},
        "docs": {"guide.md": "# Guide"},
        "README.md": "# Project",
        "package.json": "{}",
    }


@pytest.fixture
def directory_reader_factory():
    return InMemoryDirectoryReader


@pytest.fixture
def file_reader_factory():
    return InMemoryFileReader
