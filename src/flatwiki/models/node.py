"""Domain models for the flat-file wiki."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class NavNode:
    """A directory in the navigation tree.

    Children keep the order in which the walk inserted them. ``is_active`` is
    per-request state; mark a ``copy()`` rather than a shared tree.
    """

    title: str
    path: str
    is_dir: bool = True
    children: list["NavNode"] = field(default_factory=list)
    is_active: bool = False

    def copy(self) -> "NavNode":
        """Return a deep copy, so marking it leaves this tree untouched."""
        return NavNode(
            title=self.title,
            path=self.path,
            is_dir=self.is_dir,
            children=[child.copy() for child in self.children],
            is_active=self.is_active,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for JSON serialization."""
        return {
            "title": self.title,
            "path": self.path,
            "is_dir": self.is_dir,
            "is_active": self.is_active,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class Breadcrumb:
    """A single ancestor in a breadcrumb trail."""

    title: str
    path: str
    is_last: bool = False


@dataclass(frozen=True)
class VersionInfo:
    """A stored revision of a document."""

    timestamp: str
    path: str


@dataclass(frozen=True)
class Comment:
    """A comment on a document, identified by its filename."""

    id: str
    author: str
    timestamp: int
    content: str
