"""Tests for version retention."""

from pathlib import Path

import pytest

from flatwiki.core.versions.retention import (
    is_version_stamp,
    list_version_files,
    prune_versions,
)


def _make_versions(version_dir: Path, count: int) -> list[str]:
    version_dir.mkdir(parents=True, exist_ok=True)
    names = [f"2024010100{i:04d}.md" for i in range(count)]
    for name in names:
        (version_dir / name).write_text(f"version {name}")
    return names


def _remaining(version_dir: Path) -> list[str]:
    return sorted(p.name for p in version_dir.iterdir())


@pytest.mark.parametrize(
    ("count", "limit"),
    [(0, 3), (2, 3), (3, 3), (5, 3), (5, 1), (12, 10)],
)
def test_keeps_newest(tmp_path: Path, count: int, limit: int) -> None:
    names = _make_versions(tmp_path, count)

    deleted = prune_versions(tmp_path, limit)

    expected_kept = names[-limit:] if count > limit else names
    assert _remaining(tmp_path) == expected_kept
    assert deleted == names[: max(count - limit, 0)]


@pytest.mark.parametrize("limit", [0, -1])
def test_non_positive_limit_keeps_everything(tmp_path: Path, limit: int) -> None:
    names = _make_versions(tmp_path, 4)

    assert prune_versions(tmp_path, limit) == []
    assert _remaining(tmp_path) == names


def test_foreign_files_are_ignored(tmp_path: Path) -> None:
    names = _make_versions(tmp_path, 3)
    foreign = ["notes.md", "2024.md", "20240101000000.txt", "2024010100000a.md"]
    for name in foreign:
        (tmp_path / name).write_text("keep me")
    (tmp_path / "20230101000000.md").mkdir()

    prune_versions(tmp_path, 1)

    assert _remaining(tmp_path) == sorted([names[-1], *foreign, "20230101000000.md"])


def test_missing_directory_is_a_no_op(tmp_path: Path) -> None:
    assert prune_versions(tmp_path / "missing", 2) == []
    assert list_version_files(tmp_path / "missing") == []


def test_unlistable_directory_raises(tmp_path: Path) -> None:
    not_a_dir = tmp_path / "file"
    not_a_dir.write_text("")

    with pytest.raises(NotADirectoryError):
        prune_versions(not_a_dir, 1)


def test_failed_delete_does_not_stop_pruning(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    names = _make_versions(tmp_path, 4)
    original_unlink = Path.unlink

    def flaky_unlink(self: Path, missing_ok: bool = False) -> None:
        if self.name == names[0]:
            raise PermissionError(13, "Permission denied", str(self))
        original_unlink(self, missing_ok=missing_ok)

    monkeypatch.setattr(Path, "unlink", flaky_unlink)

    deleted = prune_versions(tmp_path, 1)

    assert deleted == names[1:3]
    assert _remaining(tmp_path) == [names[0], names[3]]


def test_list_is_oldest_first(tmp_path: Path) -> None:
    for name in ["20240301000000.md", "20231231235959.md", "20240101000000.md"]:
        (tmp_path / name).write_text("")

    assert list_version_files(tmp_path) == [
        "20231231235959.md",
        "20240101000000.md",
        "20240301000000.md",
    ]


def test_is_version_stamp() -> None:
    assert is_version_stamp("20240101120000")
    assert not is_version_stamp("2024010112000")
    assert not is_version_stamp("202401011200000")
    assert not is_version_stamp("2024010112000x")
