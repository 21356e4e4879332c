"""Bounded retention of per-document version files."""

import os
from pathlib import Path

from loguru import logger

from flatwiki.core.paths import is_numeric

# Version files are named YYYYMMDDhhmmss.md; fixed width makes lexical order
# chronological.
VERSION_STAMP_FORMAT: str = "%Y%m%d%H%M%S"
VERSION_STAMP_LENGTH: int = 14
VERSION_SUFFIX: str = ".md"


def is_version_stamp(value: str) -> bool:
    """Check for a 14-digit ``YYYYMMDDhhmmss`` stamp."""
    return len(value) == VERSION_STAMP_LENGTH and is_numeric(value)


def list_version_files(version_dir: str | Path) -> list[str]:
    """Return valid version filenames in ``version_dir``, oldest first.

    Anything that is not a ``<stamp>.md`` file is ignored. A missing
    directory has no versions.

    Raises:
        OSError: If the directory exists but cannot be listed.
    """
    try:
        with os.scandir(version_dir) as entries:
            names = [
                entry.name
                for entry in entries
                if entry.name.endswith(VERSION_SUFFIX)
                and is_version_stamp(entry.name.removesuffix(VERSION_SUFFIX))
                and not entry.is_dir()
            ]
    except FileNotFoundError:
        return []
    return sorted(names)


def prune_versions(version_dir: str | Path, max_versions: int) -> list[str]:
    """Delete the oldest version files so at most ``max_versions`` remain.

    ``max_versions <= 0`` keeps everything. Deletion is best-effort: a file
    that cannot be removed is logged and the remaining deletions go ahead.

    Returns:
        Names of the files actually deleted.
    """
    if max_versions <= 0:
        return []

    versions = list_version_files(version_dir)
    if len(versions) <= max_versions:
        return []

    deleted: list[str] = []
    for name in versions[: len(versions) - max_versions]:
        version_path = Path(version_dir) / name
        try:
            version_path.unlink()
        except OSError as exc:
            logger.warning("Error deleting old version {}: {}", version_path, exc)
            continue
        logger.info("Deleted old version: {}", version_path)
        deleted.append(name)
    return deleted
