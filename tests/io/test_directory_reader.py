"""Tests for the local directory reader."""

import asyncio
import logging
import os
import sys

import pytest

from dir2prompt.io.directory_reader import DirectoryItem, LocalDirectoryReader, display_name, sort_directory_items
from dir2prompt.types import EntryKind


@pytest.fixture
def project(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.py").write_text("print('hi')")
    (tmp_path / "Docs").mkdir()
    (tmp_path / "b.txt").write_text("b")
    (tmp_path / "A.txt").write_text("a")
    return tmp_path


def test_read_directory_orders_directories_first(project):
    items = asyncio.run(LocalDirectoryReader().read_directory(project))

    assert [item.name for item in items] == ["Docs", "src", "A.txt", "b.txt"]
    assert [item.kind for item in items] == [
        EntryKind.DIRECTORY,
        EntryKind.DIRECTORY,
        EntryKind.FILE,
        EntryKind.FILE,
    ]
    assert items[1].handle == project / "src"


def test_read_directory_only_reads_one_level(project):
    items = asyncio.run(LocalDirectoryReader().read_directory(project / "src"))
    assert [item.name for item in items] == ["main.py"]


def test_read_missing_directory_raises(tmp_path):
    with pytest.raises(OSError):
        asyncio.run(LocalDirectoryReader().read_directory(tmp_path / "missing"))


def test_describe(project):
    reader = LocalDirectoryReader()

    root = reader.describe(project)
    assert root.is_dir
    assert root.name == project.name

    assert reader.describe(project / "A.txt").kind is EntryKind.FILE

    with pytest.raises(FileNotFoundError):
        reader.describe(project / "missing")


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
def test_symlinked_directories_are_skipped_unless_followed(project):
    try:
        (project / "link").symlink_to(project / "src", target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")

    names = [item.name for item in asyncio.run(LocalDirectoryReader().read_directory(project))]
    assert "link" not in names

    followed = asyncio.run(LocalDirectoryReader(follow_symlinks=True).read_directory(project))
    link = next(item for item in followed if item.name == "link")
    assert link.is_dir


def test_sort_directory_items_is_case_insensitive():
    items = [
        DirectoryItem("zeta.py", EntryKind.FILE, None),
        DirectoryItem("Alpha.py", EntryKind.FILE, None),
        DirectoryItem("lib", EntryKind.DIRECTORY, None),
        DirectoryItem("beta.py", EntryKind.FILE, None),
    ]
    assert [item.name for item in sort_directory_items(items)] == ["lib", "Alpha.py", "beta.py", "zeta.py"]


def test_directory_item_equality_ignores_handle():
    assert DirectoryItem("a", EntryKind.FILE, "x") == DirectoryItem("a", EntryKind.FILE, "y")


def test_sort_directory_items_ignores_accents():
    items = [
        DirectoryItem("zeta.py", EntryKind.FILE, None),
        DirectoryItem("Äpfel.py", EntryKind.FILE, None),
        DirectoryItem("alpha.py", EntryKind.FILE, None),
        DirectoryItem("École", EntryKind.DIRECTORY, None),
        DirectoryItem("docs", EntryKind.DIRECTORY, None),
    ]
    assert [item.name for item in sort_directory_items(items)] == ["docs", "École", "alpha.py", "Äpfel.py", "zeta.py"]


def symlink_or_skip(link, target):
    try:
        link.symlink_to(target, target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("cannot create symlinks here")


def test_followed_link_to_own_directory_is_skipped(tmp_path, caplog):
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "x.py").write_text("x = 1\n")
    symlink_or_skip(tmp_path / "a" / "loop", tmp_path / "a")

    with caplog.at_level(logging.WARNING, logger="dir2prompt.io.directory_reader"):
        items = asyncio.run(LocalDirectoryReader(follow_symlinks=True).read_directory(tmp_path / "a"))

    assert [item.name for item in items] == ["x.py"]
    assert "Skipping symlink loop" in caplog.text


def test_followed_link_to_ancestor_is_skipped_through_another_link(tmp_path):
    (tmp_path / "a").mkdir()
    (tmp_path / "b").mkdir()
    symlink_or_skip(tmp_path / "a" / "to_b", tmp_path / "b")
    symlink_or_skip(tmp_path / "b" / "to_a", tmp_path / "a")
    reader = LocalDirectoryReader(follow_symlinks=True)

    assert [item.name for item in asyncio.run(reader.read_directory(tmp_path / "a"))] == ["to_b"]
    # Listed through a/to_b, the link back to a closes a cycle
    assert asyncio.run(reader.read_directory(tmp_path / "a" / "to_b")) == []


def test_display_name():
    assert display_name("main.py") == "main.py"
    assert display_name("bad\udcff.py") == "bad�.py"


@pytest.mark.skipif(sys.getfilesystemencoding().lower() != "utf-8", reason="needs a UTF-8 file system encoding")
def test_undecodable_names_are_reported_as_valid_utf8(tmp_path):
    try:
        with open(os.path.join(os.fsencode(tmp_path), b"bad\xff.py"), "wb") as f:
            f.write(b"print(1)\n")
    except OSError:
        pytest.skip("file system rejects names that are not valid UTF-8")

    (item,) = asyncio.run(LocalDirectoryReader().read_directory(tmp_path))
    assert item.name == "bad�.py"
    assert item.handle.read_bytes() == b"print(1)\n"
