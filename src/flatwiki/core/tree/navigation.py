"""Tree navigation: build, find, active marking, breadcrumbs."""

import os
import threading
from collections.abc import Iterable
from pathlib import Path

from loguru import logger

from flatwiki.config import DEFAULT_TITLE, DOCUMENT_FILENAME, VERSIONS_DIRNAME
from flatwiki.core.paths import format_dir_name, sanitize_path, to_url_path
from flatwiki.core.tree.titles import resolve_title
from flatwiki.exceptions import NavigationBuildError
from flatwiki.models.node import Breadcrumb, NavNode
from flatwiki.protocols import TitleFilter


def _raise(x: Exception) -> None:
    raise x


def _url_path(parts: list[str]) -> str:
    return "/" + "/".join(to_url_path(sanitize_path(part)) for part in parts)


def _normalize(path: str) -> str:
    path = path.removesuffix("/")
    return path or "/"


def build_navigation(
    documents_root: str | Path,
    *,
    root_title: str = DEFAULT_TITLE,
    title_filter: TitleFilter | None = None,
    exclude: Iterable[str | Path] = (),
) -> NavNode:
    """Walk the documents root once and build the navigation tree.

    Every directory below the root becomes a node at its sanitized URL path.
    Hidden directories, ``versions`` directories and anything in ``exclude``
    (the home page subtree) are skipped together with their contents.
    Subdirectories are visited sorted by name, so sibling order is
    alphabetical by directory name.

    Raises:
        NavigationBuildError: If the root cannot be created or the walk fails.
            The error carries the tree built so far.
    """
    root = NavNode(title=root_title, path="/")
    docs = Path(documents_root)
    try:
        docs.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        msg = f"Cannot create documents directory {str(docs)!r}: {exc}"
        raise NavigationBuildError(msg, partial=root) from exc

    excluded = {Path(p).resolve() for p in exclude}
    # Nodes by URL path. Paths embed their parent's path, so one flat index
    # serves every level.
    index: dict[str, NavNode] = {"/": root}

    try:
        for dirpath, dirnames, _filenames in os.walk(docs, onerror=_raise):
            current = Path(dirpath)
            dirnames[:] = sorted(
                name
                for name in dirnames
                if not name.startswith(".")
                and name not in (DOCUMENT_FILENAME, VERSIONS_DIRNAME)
                and (current / name).resolve() not in excluded
            )
            if current == docs:
                continue

            parts = current.relative_to(docs).as_posix().split("/")
            _insert(root, index, parts, current, title_filter)
    except OSError as exc:
        msg = f"Failed to walk documents directory {str(docs)!r}: {exc}"
        raise NavigationBuildError(msg, partial=root) from exc

    logger.debug("Built navigation with {} nodes from {}", len(index) - 1, docs)
    return root


def _insert(
    root: NavNode,
    index: dict[str, NavNode],
    parts: list[str],
    directory: Path,
    title_filter: TitleFilter | None,
) -> None:
    """Insert a directory, creating missing intermediate nodes on the way."""
    current = root
    for depth in range(len(parts)):
        url_path = _url_path(parts[: depth + 1])
        node = index.get(url_path)
        if node is None:
            if depth == len(parts) - 1:
                title = resolve_title(directory, title_filter=title_filter)
            else:
                title = format_dir_name(parts[depth])
            node = NavNode(title=title, path=url_path)
            current.children.append(node)
            index[url_path] = node
        current = node


def find_nav_node(root: NavNode | None, path: str) -> NavNode | None:
    """Find the node with exactly this path (trailing slash ignored)."""
    if root is None:
        return None
    return _find(root, _normalize(path))


def _find(node: NavNode, path: str) -> NavNode | None:
    if node.path == path:
        return node
    for child in node.children:
        found = _find(child, path)
        if found is not None:
            return found
    return None


def mark_active(root: NavNode | None, current_path: str) -> None:
    """Mark the node at ``current_path`` and all of its ancestors active.

    Nothing is cleared first; mark a fresh tree or a ``copy()``.
    """
    if root is None:
        return
    _mark(root, _normalize(current_path))


def _mark(node: NavNode, path: str) -> bool:
    if node.path == path:
        node.is_active = True
    for child in node.children:
        if _mark(child, path):
            node.is_active = True
    return node.is_active


def build_breadcrumbs(root: NavNode, path: str) -> list[Breadcrumb]:
    """Breadcrumb trail from Home to ``path``.

    Prefixes without a navigation node are left out.
    """
    parts = path.strip("/").split("/") if path.strip("/") else []
    breadcrumbs = [Breadcrumb(title="Home", path="/", is_last=not parts)]

    current = ""
    for i, part in enumerate(parts):
        current = f"{current}/{part}"
        node = find_nav_node(root, current)
        if node is not None:
            breadcrumbs.append(
                Breadcrumb(title=node.title, path=current, is_last=i == len(parts) - 1)
            )
    return breadcrumbs


class NavigationCache:
    """Process-wide navigation snapshot.

    ``rebuild()`` builds a complete new tree before swapping it in, so readers
    never see a tree under construction. Trees handed out must be treated as
    read-only; use ``active_tree()`` for a per-request marked copy.
    """

    def __init__(
        self,
        documents_root: str | Path,
        *,
        root_title: str = DEFAULT_TITLE,
        title_filter: TitleFilter | None = None,
        exclude: Iterable[str | Path] = (),
    ) -> None:
        self.documents_root = Path(documents_root)
        self.root_title = root_title
        self.title_filter = title_filter
        self.exclude = tuple(exclude)
        self._lock = threading.Lock()
        self._tree: NavNode | None = None

    def rebuild(self) -> NavNode:
        """Build a fresh tree and publish it. A failed build keeps the old one."""
        tree = build_navigation(
            self.documents_root,
            root_title=self.root_title,
            title_filter=self.title_filter,
            exclude=self.exclude,
        )
        with self._lock:
            self._tree = tree
        return tree

    def get(self) -> NavNode:
        """Return the current snapshot, building it on first use."""
        with self._lock:
            tree = self._tree
        if tree is None:
            tree = self.rebuild()
        return tree

    def active_tree(self, current_path: str) -> NavNode:
        """Return a copy of the snapshot with ``current_path`` marked active."""
        tree = self.get().copy()
        mark_active(tree, current_path)
        return tree
