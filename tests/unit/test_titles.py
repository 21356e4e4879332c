"""Tests for document title resolution."""

from pathlib import Path

from flatwiki.core.tree.titles import resolve_title


def _doc(tmp_path: Path, name: str, content: str | bytes) -> Path:
    directory = tmp_path / name
    directory.mkdir()
    target = directory / "document.md"
    if isinstance(content, bytes):
        target.write_bytes(content)
    else:
        target.write_text(content, encoding="utf-8")
    return directory


def test_first_h1_is_the_title(tmp_path: Path) -> None:
    directory = _doc(tmp_path, "intro", "# Introduction\n\nBody\n")
    assert resolve_title(directory) == "Introduction"


def test_h2_and_deeper_are_ignored(tmp_path: Path) -> None:
    directory = _doc(tmp_path, "page", "## Section\n### Sub\n# Real Title\n")
    assert resolve_title(directory) == "Real Title"


def test_only_the_first_h1_counts(tmp_path: Path) -> None:
    directory = _doc(tmp_path, "page", "# One\n# Two\n")
    assert resolve_title(directory) == "One"


def test_indented_heading_line_is_accepted(tmp_path: Path) -> None:
    directory = _doc(tmp_path, "page", "   # Spaced Out   \n")
    assert resolve_title(directory) == "Spaced Out"


def test_hash_without_space_is_not_a_heading(tmp_path: Path) -> None:
    directory = _doc(tmp_path, "tagged-page", "#hashtag\n")
    assert resolve_title(directory) == "Tagged Page"


def test_missing_document_falls_back_to_directory_name(tmp_path: Path) -> None:
    directory = tmp_path / "getting-started"
    directory.mkdir()
    assert resolve_title(directory) == "Getting Started"


def test_missing_directory_falls_back_to_directory_name(tmp_path: Path) -> None:
    assert resolve_title(tmp_path / "no-such-dir") == "No Such Dir"


def test_no_h1_falls_back_to_directory_name(tmp_path: Path) -> None:
    directory = _doc(tmp_path, "release-notes", "plain text only\n")
    assert resolve_title(directory) == "Release Notes"


def test_undecodable_document_falls_back(tmp_path: Path) -> None:
    directory = _doc(tmp_path, "binary-blob", b"\xff\xfe\x00# nope\n")
    assert resolve_title(directory) == "Binary Blob"


def test_title_filter_is_applied_to_h1(tmp_path: Path) -> None:
    directory = _doc(tmp_path, "party", "# Party :tada:\n")

    title = resolve_title(directory, title_filter=lambda t: t.replace(":tada:", "\U0001f389"))

    assert title == "Party \U0001f389"


def test_title_filter_is_not_applied_to_fallback(tmp_path: Path) -> None:
    directory = tmp_path / "plain-dir"
    directory.mkdir()

    assert resolve_title(directory, title_filter=str.upper) == "Plain Dir"
