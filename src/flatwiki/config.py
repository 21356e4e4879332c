"""Configuration constants and settings for the flat-file wiki."""

import os
from dataclasses import dataclass
from pathlib import Path

# Primary content file inside every document directory.
DOCUMENT_FILENAME: str = "document.md"

# Per-document revision directory, next to document.md.
VERSIONS_DIRNAME: str = "versions"

# A document containing this marker (any case) does not accept comments.
NO_COMMENTS_MARKER: str = "<!-- no comments -->"

DEFAULT_DOCUMENTS_DIR: str = "documents"
DEFAULT_COMMENTS_DIR: str = "comments"
DEFAULT_MAX_VERSIONS: int = 10
DEFAULT_TITLE: str = "Wiki"
DEFAULT_TIMEZONE: str = "UTC"

# Wiki root directory. First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("data"),
    Path("~/.local/share/flatwiki").expanduser(),
    Path("~/.flatwiki").expanduser(),
]


def resolve_data_directory() -> Path:
    """Return the first existing data directory, or the first candidate."""
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DATA_DIRECTORIES[0]


def _env_flag(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class WikiConfig:
    """Settings shared by the navigation, history and comment components."""

    root_dir: Path
    documents_dir: str = DEFAULT_DOCUMENTS_DIR
    comments_dir: str = DEFAULT_COMMENTS_DIR
    title: str = DEFAULT_TITLE
    timezone: str = DEFAULT_TIMEZONE
    max_versions: int = DEFAULT_MAX_VERSIONS
    disable_comments: bool = False
    admins: tuple[str, ...] = ()
    mcp_user: str | None = None

    def is_admin(self, user: str) -> bool:
        return user in self.admins

    @property
    def documents_path(self) -> Path:
        return self.root_dir / self.documents_dir

    @property
    def comments_path(self) -> Path:
        return self.root_dir / self.comments_dir

    @property
    def home_path(self) -> Path:
        """Directory of the site's home page, kept out of the navigation."""
        return self.root_dir / "pages" / "home"

    @property
    def excluded_paths(self) -> tuple[Path, ...]:
        """Directories kept out of the navigation: the site pages and the home page."""
        return (self.root_dir / "pages", self.home_path)

    @classmethod
    def from_env(cls, root_dir: Path | None = None) -> "WikiConfig":
        """Build a config from ``FLATWIKI_*`` environment variables.

        An explicit ``root_dir`` wins over ``FLATWIKI_ROOT``.
        """
        if root_dir is None:
            root_env = os.environ.get("FLATWIKI_ROOT")
            root_dir = Path(root_env).expanduser() if root_env else resolve_data_directory()

        max_versions_env = os.environ.get("FLATWIKI_MAX_VERSIONS")
        try:
            max_versions = int(max_versions_env) if max_versions_env else DEFAULT_MAX_VERSIONS
        except ValueError as exc:
            msg = f"FLATWIKI_MAX_VERSIONS must be an integer, got {max_versions_env!r}"
            raise ValueError(msg) from exc

        return cls(
            root_dir=root_dir,
            title=os.environ.get("FLATWIKI_TITLE", DEFAULT_TITLE),
            timezone=os.environ.get("FLATWIKI_TIMEZONE", DEFAULT_TIMEZONE),
            max_versions=max_versions,
            disable_comments=_env_flag(os.environ.get("FLATWIKI_DISABLE_COMMENTS")),
            admins=tuple(
                name.strip()
                for name in os.environ.get("FLATWIKI_ADMINS", "").split(",")
                if name.strip()
            ),
            mcp_user=os.environ.get("FLATWIKI_MCP_USER") or None,
        )
