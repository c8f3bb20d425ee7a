# tests/core/test_dir_collector.py
import os
from pathlib import Path

import pytest

from promptsync.core.dir_collector import collect


def _make_tree(root: Path):
    (root / "pkg" / "sub").mkdir(parents=True)
    (root / "top.txt").write_text("top")
    (root / "pkg" / "mod.py").write_text("mod")
    (root / "pkg" / "sub" / "deep.py").write_text("deep")
    (root / "empty").mkdir()


def test_collects_every_regular_file_recursively(tmp_path):
    _make_tree(tmp_path)
    found = {p.relative_to(tmp_path).as_posix() for p in collect(tmp_path)}
    assert found == {"top.txt", "pkg/mod.py", "pkg/sub/deep.py"}


def test_paths_are_absolute(tmp_path, monkeypatch):
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert all(p.is_absolute() for p in collect(Path(".")))


def test_follows_listing_order(tmp_path):
    for name in ("b.py", "a.py", "c.py"):
        (tmp_path / name).write_text(name)
    expected = [e.name for e in os.scandir(tmp_path)]
    assert [p.name for p in collect(tmp_path)] == expected


def test_single_file_root_yields_itself(tmp_path):
    f = tmp_path / "only.md"
    f.write_text("x")
    assert list(collect(f)) == [f]


def test_is_lazy(tmp_path):
    _make_tree(tmp_path)
    it = collect(tmp_path)
    assert next(it).is_file()


def test_unreadable_subtree_is_skipped(tmp_path, mocker):
    _make_tree(tmp_path)
    locked = tmp_path / "locked"
    locked.mkdir()
    (locked / "secret.txt").write_text("s")
    real_scandir = os.scandir

    def fake_scandir(path):
        if Path(path).name == "locked":
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    mocker.patch("promptsync.core.dir_collector.os.scandir", side_effect=fake_scandir)
    found = {p.relative_to(tmp_path).as_posix() for p in collect(tmp_path)}
    assert found == {"top.txt", "pkg/mod.py", "pkg/sub/deep.py"}


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
def test_symlink_cycle_terminates(tmp_path):
    _make_tree(tmp_path)
    try:
        os.symlink(tmp_path, tmp_path / "pkg" / "loop", target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")
    names = sorted(p.name for p in collect(tmp_path))
    assert names == ["deep.py", "mod.py", "top.txt"]
