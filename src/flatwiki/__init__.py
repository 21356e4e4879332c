"""Flat-file wiki core: navigation, version history and comments."""

from flatwiki.config import WikiConfig
from flatwiki.core.comments.store import CommentStore
from flatwiki.core.tree.navigation import NavigationCache, build_navigation
from flatwiki.core.versions.history import DocumentHistory
from flatwiki.core.versions.retention import prune_versions

__all__ = [
    "CommentStore",
    "DocumentHistory",
    "NavigationCache",
    "WikiConfig",
    "build_navigation",
    "prune_versions",
]
