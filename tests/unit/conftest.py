"""Shared test fixtures."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from flatwiki.config import WikiConfig
from tests.unit.fakes import write_tree

DOCUMENTS = {
    "1-alpha/document.md": "# Alpha\n\nFirst document.\n",
    "2-beta/document.md": "Intro line\n## Not the title\n# Beta\n# Second H1\n",
    "2-beta/nested-page/document.md": "## Only a subheading\n",
    "guides/setup/document.md": "# Setup Guide\n<!-- No Comments -->\n",
    ".hidden/document.md": "# Hidden\n",
    "1-alpha/versions/20240101000000.md": "# Alpha (old)\n",
}


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep FLATWIKI_* settings from the developer's shell out of tests."""
    for name in (
        "FLATWIKI_ROOT",
        "FLATWIKI_MAX_VERSIONS",
        "FLATWIKI_DISABLE_COMMENTS",
        "FLATWIKI_TIMEZONE",
        "FLATWIKI_TITLE",
        "FLATWIKI_ADMINS",
        "FLATWIKI_MCP_USER",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def wiki_root(tmp_path: Path) -> Path:
    """Return a wiki root with a small documents tree."""
    root = tmp_path / "wiki"
    write_tree(root / "documents", DOCUMENTS)
    write_tree(root / "pages" / "home", {"document.md": "# Welcome\n"})
    return root


@pytest.fixture
def documents_root(wiki_root: Path) -> Path:
    return wiki_root / "documents"


@pytest.fixture
def config(wiki_root: Path) -> WikiConfig:
    return WikiConfig(root_dir=wiki_root, max_versions=3, admins=("alice",))
