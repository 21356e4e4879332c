"""Path sanitizing and naming helpers shared by all wiki components."""

import posixpath
import re

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9_\-/]")
_REPEATED_SLASHES = re.compile(r"/+")


def sanitize_path(path: str) -> str:
    """Turn arbitrary path-like input into a safe relative path.

    Every character outside ``[A-Za-z0-9_-/]`` becomes a dash, ``.`` and
    ``..`` segments are resolved structurally and any leading traversal left
    over is stripped. Never raises; an empty result means the root.
    """
    path = path.strip("/")
    path = _UNSAFE_CHARS.sub("-", path)
    path = _REPEATED_SLASHES.sub("/", path)
    if not path:
        return ""

    path = posixpath.normpath(path)

    while path.startswith(("../", "./")):
        path = path[3:] if path.startswith("../") else path[2:]
    if path in (".", ".."):
        return ""
    return path


def to_url_path(path: str) -> str:
    """Convert a filesystem path to its URL form (spaces become dashes)."""
    return path.replace(" ", "-")


def format_dir_name(name: str) -> str:
    """Format a directory name as a title: dashes to spaces, words capitalized."""
    words = name.replace("-", " ").split()
    return " ".join(word[:1].upper() + word[1:] for word in words)


def is_numeric(value: str) -> bool:
    """Check that ``value`` is non-empty and made of ASCII digits only."""
    return bool(value) and all("0" <= c <= "9" for c in value)
