"""Tests for filesystem measurement and guarded removal."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from tests.conftest import set_age, write_file
from xcclean.infrastructure.filesystem import (
    DiskUsage,
    UnsafePathError,
    _make_writable_and_retry,
    directory_size,
    disk_usage,
    ensure_inside,
    list_entries,
    remove_path,
)


class TestDirectorySize:
    def test_file(self, tmp_path: Path) -> None:
        f = write_file(tmp_path / "a.bin", 1234)
        assert directory_size(f) == 1234

    def test_nested_tree(self, tmp_path: Path) -> None:
        write_file(tmp_path / "d" / "a", 100)
        write_file(tmp_path / "d" / "sub" / "b", 200)
        write_file(tmp_path / "d" / "sub" / "deeper" / "c", 300)
        assert directory_size(tmp_path / "d") == 600

    def test_missing_path_is_zero(self, tmp_path: Path) -> None:
        assert directory_size(tmp_path / "nope") == 0

    def test_empty_directory(self, tmp_path: Path) -> None:
        (tmp_path / "empty").mkdir()
        assert directory_size(tmp_path / "empty") == 0

    def test_symlinks_not_followed(self, tmp_path: Path) -> None:
        write_file(tmp_path / "outside" / "big", 10_000)
        write_file(tmp_path / "d" / "small", 10)
        (tmp_path / "d" / "link").symlink_to(tmp_path / "outside")
        assert directory_size(tmp_path / "d") == 10
        assert directory_size(tmp_path / "d" / "link") == 0

    def test_hard_links_counted_once(self, tmp_path: Path) -> None:
        original = write_file(tmp_path / "d" / "one", 500)
        os.link(original, tmp_path / "d" / "two")
        assert directory_size(tmp_path / "d") == 500


class TestListEntries:
    def test_largest_first(self, tmp_path: Path) -> None:
        write_file(tmp_path / "small", 10)
        write_file(tmp_path / "big" / "x", 1000)
        write_file(tmp_path / "mid", 100)
        entries = list_entries(tmp_path)
        assert [e.name for e in entries] == ["big", "mid", "small"]
        assert [e.size for e in entries] == [1000, 100, 10]

    def test_ties_sorted_by_name(self, tmp_path: Path) -> None:
        write_file(tmp_path / "b", 10)
        write_file(tmp_path / "a", 10)
        assert [e.name for e in list_entries(tmp_path)] == ["a", "b"]

    def test_missing_root(self, tmp_path: Path) -> None:
        assert list_entries(tmp_path / "absent") == []

    def test_modified_time(self, tmp_path: Path) -> None:
        old = write_file(tmp_path / "old", 1)
        set_age(old, 30)
        (entry,) = list_entries(tmp_path)
        assert entry.modified == pytest.approx(old.stat().st_mtime)


class TestEnsureInside:
    def test_child_ok(self, tmp_path: Path) -> None:
        ensure_inside(tmp_path / "child", tmp_path)

    def test_root_itself_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(UnsafePathError):
            ensure_inside(tmp_path, tmp_path)

    def test_sibling_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "root").mkdir()
        with pytest.raises(UnsafePathError, match="not inside"):
            ensure_inside(tmp_path / "other" / "x", tmp_path / "root")

    def test_dotdot_escape_rejected(self, tmp_path: Path) -> None:
        root = tmp_path / "root"
        root.mkdir()
        with pytest.raises(UnsafePathError):
            ensure_inside(root / ".." / "escape", root)

    def test_symlink_entry_judged_by_location(self, tmp_path: Path) -> None:
        root = tmp_path / "root"
        root.mkdir()
        (root / "link").symlink_to(tmp_path)
        ensure_inside(root / "link", root)


class TestRemovePath:
    def test_delete_tree(self, tmp_path: Path) -> None:
        write_file(tmp_path / "root" / "item" / "a" / "b", 10)
        remove_path(tmp_path / "root" / "item", tmp_path / "root")
        assert not (tmp_path / "root" / "item").exists()
        assert (tmp_path / "root").is_dir()

    def test_delete_file(self, tmp_path: Path) -> None:
        f = write_file(tmp_path / "root" / "f", 10)
        remove_path(f, tmp_path / "root")
        assert not f.exists()

    def test_symlink_removed_target_kept(self, tmp_path: Path) -> None:
        target = write_file(tmp_path / "keep" / "precious", 10)
        root = tmp_path / "root"
        root.mkdir()
        (root / "link").symlink_to(target.parent)
        remove_path(root / "link", root)
        assert not (root / "link").is_symlink()
        assert target.exists()

    def test_read_only_tree(self, tmp_path: Path) -> None:
        item = tmp_path / "root" / "ro"
        write_file(item / "inner" / "f", 10)
        (item / "inner").chmod(0o500)
        remove_path(item, tmp_path / "root")
        assert not item.exists()

    def test_unreadable_subdirectory(self, tmp_path: Path) -> None:
        item = tmp_path / "root" / "locked"
        write_file(item / "sealed" / "deep" / "f", 10)
        (item / "sealed" / "deep").chmod(0o000)
        (item / "sealed").chmod(0o000)
        remove_path(item, tmp_path / "root")
        assert not item.exists()
        assert (tmp_path / "root").is_dir()

    def test_unreadable_top_directory(self, tmp_path: Path) -> None:
        item = tmp_path / "root" / "locked"
        write_file(item / "f", 10)
        item.chmod(0o000)
        remove_path(item, tmp_path / "root")
        assert not item.exists()

    def test_outside_root_refused(self, tmp_path: Path) -> None:
        victim = write_file(tmp_path / "victim", 10)
        (tmp_path / "root").mkdir()
        with pytest.raises(UnsafePathError):
            remove_path(victim, tmp_path / "root")
        assert victim.exists()

    def test_trash(self, tmp_path: Path) -> None:
        item = write_file(tmp_path / "root" / "item" / "f", 10).parent
        trash = tmp_path / "Trash"
        remove_path(item, tmp_path / "root", trash=True, trash_dir=trash)
        assert not item.exists()
        assert (trash / "item" / "f").is_file()

    def test_trash_name_collision(self, tmp_path: Path) -> None:
        trash = tmp_path / "Trash"
        write_file(trash / "item", 1)
        item = write_file(tmp_path / "root" / "item", 20)
        remove_path(item, tmp_path / "root", trash=True, trash_dir=trash)
        names = sorted(p.name for p in trash.iterdir())
        assert len(names) == 2
        assert names[0] == "item"
        assert names[1].startswith("item ")
        assert (trash / "item").stat().st_size == 1


class TestDiskUsage:
    def test_existing_path(self, tmp_path: Path) -> None:
        usage = disk_usage(tmp_path)
        assert usage.total > 0
        assert usage.free <= usage.total

    def test_missing_path_uses_ancestor(self, tmp_path: Path) -> None:
        assert disk_usage(tmp_path / "a" / "b").total == disk_usage(tmp_path).total

    def test_percent_used(self) -> None:
        assert DiskUsage(total=200, used=50, free=150).percent_used == 25.0
        assert DiskUsage(total=0, used=0, free=0).percent_used == 0.0


class TestRmtreeErrorHandler:
    """rmtree reports unreadable directories as failed ``os.open`` calls."""

    def test_open_failure_opens_and_removes_directory(self, tmp_path: Path) -> None:
        locked = tmp_path / "root" / "locked"
        write_file(locked / "child" / "f", 10)
        locked.chmod(0o000)
        _make_writable_and_retry(os.open, str(locked), PermissionError(13, "denied"))
        assert not locked.exists()
        assert (tmp_path / "root").is_dir()

    def test_scandir_failure_opens_and_removes_directory(self, tmp_path: Path) -> None:
        locked = tmp_path / "root" / "locked"
        write_file(locked / "f", 10)
        locked.chmod(0o300)
        _make_writable_and_retry(os.scandir, str(locked), PermissionError(13, "denied"))
        assert not locked.exists()

    def test_accessible_directory_reraises(self, tmp_path: Path) -> None:
        plain = tmp_path / "plain"
        plain.mkdir()
        err = PermissionError(13, "denied")
        with pytest.raises(PermissionError) as excinfo:
            _make_writable_and_retry(os.open, str(plain), err)
        assert excinfo.value is err
        assert plain.is_dir()

    def test_vanished_path_ignored(self, tmp_path: Path) -> None:
        _make_writable_and_retry(os.rmdir, str(tmp_path / "gone"), FileNotFoundError())

    def test_read_only_file_unlinked(self, tmp_path: Path) -> None:
        f = write_file(tmp_path / "ro" / "f", 10)
        f.chmod(0o400)
        f.parent.chmod(0o500)
        _make_writable_and_retry(os.unlink, str(f), PermissionError(13, "denied"))
        assert not f.exists()
