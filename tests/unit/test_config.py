"""Tests for configuration loading."""

from pathlib import Path

import pytest

from flatwiki import config as config_module
from flatwiki.config import WikiConfig, resolve_data_directory


def test_defaults(tmp_path: Path) -> None:
    cfg = WikiConfig.from_env(tmp_path)

    assert cfg.root_dir == tmp_path
    assert cfg.documents_path == tmp_path / "documents"
    assert cfg.comments_path == tmp_path / "comments"
    assert cfg.home_path == tmp_path / "pages" / "home"
    assert cfg.max_versions == 10
    assert cfg.title == "Wiki"
    assert cfg.timezone == "UTC"
    assert not cfg.disable_comments
    assert cfg.admins == ()
    assert cfg.mcp_user is None
    assert cfg.excluded_paths == (tmp_path / "pages", tmp_path / "pages" / "home")


def test_environment_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLATWIKI_ROOT", str(tmp_path))
    monkeypatch.setenv("FLATWIKI_MAX_VERSIONS", "3")
    monkeypatch.setenv("FLATWIKI_TITLE", "Team Handbook")
    monkeypatch.setenv("FLATWIKI_TIMEZONE", "Europe/Berlin")
    monkeypatch.setenv("FLATWIKI_DISABLE_COMMENTS", "yes")
    monkeypatch.setenv("FLATWIKI_ADMINS", " alice, bob ,,")
    monkeypatch.setenv("FLATWIKI_MCP_USER", "bob")

    cfg = WikiConfig.from_env()

    assert cfg.root_dir == tmp_path
    assert cfg.max_versions == 3
    assert cfg.title == "Team Handbook"
    assert cfg.timezone == "Europe/Berlin"
    assert cfg.disable_comments
    assert cfg.admins == ("alice", "bob")
    assert cfg.mcp_user == "bob"


def test_explicit_root_wins_over_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("FLATWIKI_ROOT", str(tmp_path / "env"))

    assert WikiConfig.from_env(tmp_path / "arg").root_dir == tmp_path / "arg"


def test_bad_max_versions(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLATWIKI_MAX_VERSIONS", "lots")

    with pytest.raises(ValueError, match="FLATWIKI_MAX_VERSIONS"):
        WikiConfig.from_env(tmp_path)


def test_is_admin() -> None:
    cfg = WikiConfig(root_dir=Path("."), admins=("alice",))

    assert cfg.is_admin("alice")
    assert not cfg.is_admin("Alice")
    assert not cfg.is_admin("")


def test_resolve_data_directory_prefers_existing(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    existing = tmp_path / "second"
    existing.mkdir()
    monkeypatch.setattr(config_module, "DATA_DIRECTORIES", [tmp_path / "first", existing])

    assert resolve_data_directory() == existing


def test_resolve_data_directory_defaults_to_first(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(config_module, "DATA_DIRECTORIES", [tmp_path / "a", tmp_path / "b"])

    assert resolve_data_directory() == tmp_path / "a"
