"""Per-document comment log stored as one file per comment.

A comment's identity is its filename, ``<unix-seconds>_<author>.md``, under
``<comments root>/<document path>/``. The file body is the raw markdown.
Two comments by the same author within one second share a filename; the
later write replaces the earlier one.
"""

import os
import time
from collections.abc import Callable
from datetime import UTC, datetime, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger

from flatwiki.config import NO_COMMENTS_MARKER
from flatwiki.core.paths import is_numeric, sanitize_path
from flatwiki.exceptions import CommentPermissionError, InvalidCommentIdError
from flatwiki.models.node import Comment

COMMENT_SUFFIX: str = ".md"

_AUTHOR_TRANSLATION = str.maketrans(
    {" ": "_", "/": "_", **dict.fromkeys("#%&{}\\:<>*?|\"';")}
)


def sanitize_author(author: str) -> str:
    """Make an author name safe to embed in a filename."""
    return author.translate(_AUTHOR_TRANSLATION)


def parse_comment_id(comment_id: str) -> tuple[int, str] | None:
    """Split ``<timestamp>_<author>.md`` into its parts.

    Returns None for anything that is not a well-formed comment filename,
    including timestamps too large to convert to a date.
    """
    if not comment_id.endswith(COMMENT_SUFFIX):
        return None
    timestamp, sep, author = comment_id.removesuffix(COMMENT_SUFFIX).partition("_")
    if not sep or not is_numeric(timestamp):
        return None
    if "/" in author or "\\" in author:
        return None
    try:
        datetime.fromtimestamp(int(timestamp), tz=UTC)
    except (ValueError, OverflowError, OSError):
        return None
    return int(timestamp), author


def is_valid_comment_id(comment_id: str) -> bool:
    return parse_comment_id(comment_id) is not None


def comments_allowed(content: str) -> bool:
    """A document opts out of comments with ``<!-- no comments -->``, any case."""
    return NO_COMMENTS_MARKER not in content.lower()


def _zone(timezone: str) -> tzinfo:
    if timezone == "UTC":
        return UTC
    try:
        return ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone {!r}, falling back to UTC", timezone)
        return UTC


def format_comment_time(timestamp: int, timezone: str = "UTC") -> str:
    """Format a comment timestamp for display, e.g. ``Jan 2, 2006 at 15:04``."""
    moment = datetime.fromtimestamp(timestamp, tz=_zone(timezone))
    return f"{moment:%b} {moment.day}, {moment:%Y at %H:%M}"


class CommentStore:
    """Add, list and delete comments below ``comments_root``."""

    def __init__(
        self,
        comments_root: str | Path,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.comments_root = Path(comments_root)
        self._clock = clock

    def comment_dir(self, document_path: str) -> Path:
        return self.comments_root / sanitize_path(document_path)

    def add(self, document_path: str, content: str, author: str) -> Comment:
        """Store a new comment and return it.

        Raises:
            OSError: If the comment directory or file cannot be written.
        """
        timestamp = int(self._clock())
        safe_author = sanitize_author(author)
        comment_id = f"{timestamp}_{safe_author}{COMMENT_SUFFIX}"

        directory = self.comment_dir(document_path)
        directory.mkdir(parents=True, exist_ok=True)
        (directory / comment_id).write_bytes(content.encode("utf-8"))
        logger.debug("Added comment {} to {!r}", comment_id, document_path)

        return Comment(id=comment_id, author=safe_author, timestamp=timestamp, content=content)

    def list_comments(self, document_path: str) -> list[Comment]:
        """Return the comments of a document, oldest first.

        Files with a malformed name or unreadable content are skipped.

        Raises:
            OSError: If the comment directory exists but cannot be listed.
        """
        directory = self.comment_dir(document_path)
        try:
            with os.scandir(directory) as it:
                entries = [entry for entry in it if not entry.is_dir()]
        except FileNotFoundError:
            return []

        comments: list[Comment] = []
        for entry in entries:
            parsed = parse_comment_id(entry.name)
            if parsed is None:
                logger.debug("Skipping malformed comment file {}", entry.path)
                continue
            try:
                content = Path(entry.path).read_bytes().decode("utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Skipping unreadable comment {}: {}", entry.path, exc)
                continue
            timestamp, author = parsed
            comments.append(
                Comment(id=entry.name, author=author, timestamp=timestamp, content=content)
            )

        comments.sort(key=lambda c: (c.timestamp, c.id))
        return comments

    def delete(self, comment_id: str, document_path: str, *, is_admin: bool) -> None:
        """Delete one comment.

        Raises:
            CommentPermissionError: If ``is_admin`` is false. Nothing is touched.
            InvalidCommentIdError: If ``comment_id`` is not a comment filename.
            FileNotFoundError: If the comment does not exist.
        """
        if not is_admin:
            msg = "Only admins can delete comments"
            raise CommentPermissionError(msg)
        if not is_valid_comment_id(comment_id):
            msg = f"Invalid comment ID: {comment_id!r}"
            raise InvalidCommentIdError(msg)

        (self.comment_dir(document_path) / comment_id).unlink()
        logger.info("Deleted comment {} from {!r}", comment_id, document_path)
