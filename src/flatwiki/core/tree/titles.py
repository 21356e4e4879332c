"""Resolve display titles for document directories."""

from pathlib import Path

from loguru import logger

from flatwiki.config import DOCUMENT_FILENAME
from flatwiki.core.paths import format_dir_name
from flatwiki.protocols import TitleFilter


def resolve_title(directory: str | Path, *, title_filter: TitleFilter | None = None) -> str:
    """Return the first H1 of the directory's document, or a formatted dir name.

    Only a line starting with ``"# "`` counts; ``## ...`` and deeper headings
    are ignored. Scanning stops at the first match. A missing or unreadable
    document falls back to the formatted name of the last path segment.
    """
    directory = Path(directory)
    try:
        with (directory / DOCUMENT_FILENAME).open(encoding="utf-8") as f:
            for line in f:
                stripped = line.strip()
                if stripped.startswith("# "):
                    title = stripped[2:]
                    return title_filter(title) if title_filter is not None else title
    except FileNotFoundError:
        pass
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Cannot read title from {}: {}", directory, exc)

    return format_dir_name(directory.name)
