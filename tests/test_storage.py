from pathlib import Path

import pytest

from acquire.storage.scratch import scratch_directory
from acquire.storage.sdk_tree import SdkTree, move_directory, write_sentinel


def _make_dir(path: Path, *files: str) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    for name in files:
        (path / name).write_text(name, encoding="utf-8")
    return path


def test_sdk_tree_layout(tmp_path: Path):
    tree = SdkTree(tmp_path)
    assert tree.manifest_directory("6.0.100", "W") == tmp_path / "sdk-manifests" / "6.0.100" / "W"
    assert tree.pack_directory("P", "1.0.0") == tmp_path / "packs" / "P" / "1.0.0"
    assert tree.sentinel_path("6.0.100") == tmp_path / "sdk" / "6.0.100" / "EnableWorkloadResolver.sentinel"


def test_move_creates_missing_parents(tmp_path: Path):
    source = _make_dir(tmp_path / "src", "a.txt")
    destination = tmp_path / "sdk" / "packs" / "P" / "1.0.0"

    move_directory(source, destination)

    assert not source.exists()
    assert (destination / "a.txt").read_text() == "a.txt"


def test_move_replaces_existing_destination(tmp_path: Path):
    destination = _make_dir(tmp_path / "dest", "stale.txt")
    source = _make_dir(tmp_path / "src", "fresh.txt")

    move_directory(source, destination)

    assert sorted(p.name for p in destination.iterdir()) == ["fresh.txt"]


def test_second_identical_move_replaces_rather_than_merges(tmp_path: Path):
    destination = tmp_path / "dest"
    move_directory(_make_dir(tmp_path / "first", "a.txt"), destination)
    move_directory(_make_dir(tmp_path / "second", "a.txt"), destination)

    assert sorted(p.name for p in destination.iterdir()) == ["a.txt"]
    assert not (destination / "second").exists()


def test_move_missing_source_fails(tmp_path: Path):
    with pytest.raises(OSError):
        move_directory(tmp_path / "nope", tmp_path / "dest")


def test_sentinel_is_empty(tmp_path: Path):
    (tmp_path / "sdk" / "6.0.100").mkdir(parents=True)
    path = write_sentinel(SdkTree(tmp_path).sentinel_path("6.0.100"))
    assert path.read_bytes() == b""


def test_sentinel_does_not_create_sdk_directory(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        write_sentinel(SdkTree(tmp_path).sentinel_path("6.0.100"))
    assert not (tmp_path / "sdk").exists()


def test_scratch_directory_layout_and_cleanup(tmp_path: Path):
    with scratch_directory(tmp_path / "tmp") as scratch:
        assert scratch.path.parent == tmp_path / "tmp"
        assert scratch.restore_directory == scratch.path / ".nuget"
        assert scratch.project_path == scratch.path / "restore" / "Restore.csproj"
        _make_dir(scratch.restore_directory / "pkg", "x")
    assert not scratch.path.exists()


def test_scratch_directory_removed_on_error(tmp_path: Path):
    with pytest.raises(RuntimeError):
        with scratch_directory(tmp_path / "tmp") as scratch:
            _make_dir(scratch.restore_directory, "x")
            raise RuntimeError("boom")
    assert list((tmp_path / "tmp").iterdir()) == []


def test_scratch_directories_are_unique(tmp_path: Path):
    with scratch_directory(tmp_path) as first, scratch_directory(tmp_path) as second:
        assert first.path != second.path
