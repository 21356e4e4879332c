"""MCP server exposing wiki navigation, documents, history and comments."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from flatwiki.config import DOCUMENT_FILENAME, WikiConfig
from flatwiki.core.comments.store import CommentStore, comments_allowed, format_comment_time
from flatwiki.core.paths import sanitize_path
from flatwiki.core.tree.navigation import NavigationCache, build_breadcrumbs, find_nav_node
from flatwiki.core.tree.titles import resolve_title
from flatwiki.core.versions.history import DocumentHistory
from flatwiki.exceptions import WikiError
from flatwiki.models.node import NavNode
from flatwiki.protocols import AdminCheck, RendererProtocol


def _navigation(config: WikiConfig) -> NavigationCache:
    return NavigationCache(
        config.documents_path, root_title=config.title, exclude=config.excluded_paths
    )


# --- Core functions (testable without MCP context) ---


def wiki_navigation(
    config: WikiConfig,
    *,
    active_path: str | None = None,
    cache: NavigationCache | None = None,
) -> dict[str, Any]:
    """Return the navigation tree, optionally with one path marked active."""
    cache = cache or _navigation(config)
    try:
        tree = cache.active_tree(active_path) if active_path else cache.get()
    except WikiError as exc:
        return {"error": str(exc)}
    return {"tree": tree.to_dict()}


def wiki_read_document(
    config: WikiConfig,
    *,
    path: str,
    tree: NavNode | None = None,
    renderer: RendererProtocol | None = None,
) -> dict[str, Any]:
    """Read a document's markdown with its title and breadcrumbs.

    Args:
        path: Document path, e.g. ``guides/setup``.
        tree: Navigation tree for breadcrumbs (built on demand if omitted).
        renderer: Optional renderer; adds an ``html`` field when given.
    """
    clean = sanitize_path(path)
    directory = config.documents_path / clean
    if not directory.is_dir():
        return {"error": f"Document '{path}' not found."}

    try:
        content = (directory / DOCUMENT_FILENAME).read_text(encoding="utf-8")
    except FileNotFoundError:
        content = ""
    except (OSError, UnicodeDecodeError) as exc:
        return {"error": f"Cannot read document '{path}': {exc}"}

    if tree is None:
        tree = _navigation(config).get()
    node = find_nav_node(tree, f"/{clean}")
    result: dict[str, Any] = {
        "path": clean,
        "title": node.title if node else resolve_title(directory),
        "content": content,
        "breadcrumbs": [
            {"title": b.title, "path": b.path, "is_last": b.is_last}
            for b in build_breadcrumbs(tree, f"/{clean}")
        ],
        "comments_allowed": not config.disable_comments and comments_allowed(content),
    }
    if renderer is not None:
        result["html"] = renderer.render(content, clean)
    return result


def wiki_list_comments(
    config: WikiConfig,
    *,
    path: str,
    renderer: RendererProtocol | None = None,
) -> dict[str, Any]:
    """List a document's comments, oldest first."""
    if config.disable_comments:
        return {"comments": [], "count": 0}

    clean = sanitize_path(path)
    serialized = []
    for c in CommentStore(config.comments_path).list_comments(clean):
        entry: dict[str, Any] = {
            "id": c.id,
            "author": c.author,
            "timestamp": c.timestamp,
            "formatted_time": format_comment_time(c.timestamp, config.timezone),
            "content": c.content,
        }
        if renderer is not None:
            entry["html"] = renderer.render(c.content, clean)
        serialized.append(entry)
    return {"comments": serialized, "count": len(serialized)}


def wiki_add_comment(
    config: WikiConfig,
    *,
    path: str,
    author: str,
    content: str,
    store: CommentStore | None = None,
) -> dict[str, Any]:
    """Add a comment to an existing document that accepts comments."""
    if config.disable_comments:
        return {"error": "Comments are disabled system-wide."}

    clean = sanitize_path(path)
    document = config.documents_path / clean / DOCUMENT_FILENAME
    try:
        document_content = document.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {"error": f"Document '{path}' not found."}
    except (OSError, UnicodeDecodeError) as exc:
        return {"error": f"Cannot read document '{path}': {exc}"}

    if not comments_allowed(document_content):
        return {"error": "Comments are not allowed for this document."}
    if not content.strip():
        return {"error": "Comment content cannot be empty."}

    comment = (store or CommentStore(config.comments_path)).add(clean, content, author)
    return {"success": True, "id": comment.id, "author": comment.author}


def wiki_delete_comment(
    config: WikiConfig,
    *,
    path: str,
    comment_id: str,
    user: str,
    admin_check: AdminCheck | None = None,
) -> dict[str, Any]:
    """Delete a comment on behalf of ``user`` if they are an admin."""
    checker = admin_check or config
    try:
        CommentStore(config.comments_path).delete(
            comment_id, sanitize_path(path), is_admin=checker.is_admin(user)
        )
    except (WikiError, FileNotFoundError) as exc:
        return {"error": f"Failed to delete comment: {exc}"}
    return {"success": True, "id": comment_id}


def wiki_list_versions(config: WikiConfig, *, path: str) -> dict[str, Any]:
    """List stored versions of a document, newest first."""
    found = DocumentHistory(config.documents_path, config.max_versions).list_versions(path)
    return {
        "versions": [{"timestamp": v.timestamp, "path": v.path} for v in found],
        "count": len(found),
    }


# --- MCP Server Setup ---


@dataclass
class ServerContext:
    """Shared resources for the MCP server lifetime."""

    config: WikiConfig
    navigation: NavigationCache


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Build the navigation snapshot on startup."""
    config = WikiConfig.from_env()
    navigation = _navigation(config)
    try:
        navigation.rebuild()
    except WikiError:
        logger.opt(exception=True).warning("Initial navigation build failed")
    logger.info("Serving wiki at {}", Path(config.root_dir).resolve())
    yield ServerContext(config=config, navigation=navigation)


mcp_server = FastMCP(
    "flatwiki",
    instructions="""\
The wiki is a tree of markdown documents addressed by path (e.g. "guides/setup").

1. Call wiki_navigation_tool to see the document tree and the paths to use.
2. Call wiki_read_document_tool with a path to get the markdown.
3. Comments and stored versions are listed per document path.
""",
    lifespan=server_lifespan,
)


def _ctx(mcp_ctx: Context) -> ServerContext:
    return mcp_ctx.request_context.lifespan_context  # type: ignore[return-value]


# --- MCP Tool Wrappers ---


@mcp_server.tool()
async def wiki_navigation_tool(
    ctx: Context,
    active_path: str | None = None,
    refresh: bool = False,
) -> dict[str, Any]:
    """Get the wiki navigation tree.

    Args:
        active_path: URL path to mark active together with its ancestors.
        refresh: Re-walk the documents directory before answering.
    """
    server = _ctx(ctx)
    if refresh:
        try:
            server.navigation.rebuild()
        except WikiError as exc:
            return {"error": str(exc)}
    return wiki_navigation(server.config, active_path=active_path, cache=server.navigation)


@mcp_server.tool()
async def wiki_read_document_tool(ctx: Context, path: str) -> dict[str, Any]:
    """Read a document's markdown, title and breadcrumbs.

    Args:
        path: Document path, e.g. "guides/setup".
    """
    server = _ctx(ctx)
    return wiki_read_document(server.config, path=path, tree=server.navigation.get())


@mcp_server.tool()
async def wiki_list_comments_tool(ctx: Context, path: str) -> dict[str, Any]:
    """List comments on a document, oldest first.

    Args:
        path: Document path.
    """
    return wiki_list_comments(_ctx(ctx).config, path=path)


@mcp_server.tool()
async def wiki_add_comment_tool(
    ctx: Context,
    path: str,
    author: str,
    content: str,
) -> dict[str, Any]:
    """Add a markdown comment to a document.

    Args:
        path: Document path.
        author: Display name of the commenter.
        content: Markdown body.
    """
    return wiki_add_comment(_ctx(ctx).config, path=path, author=author, content=content)


@mcp_server.tool()
async def wiki_delete_comment_tool(
    ctx: Context,
    path: str,
    comment_id: str,
) -> dict[str, Any]:
    """Delete a comment. Only works when the server runs as an admin.

    The acting user is FLATWIKI_MCP_USER from the server environment and must
    be listed in FLATWIKI_ADMINS.

    Args:
        path: Document path.
        comment_id: Comment id as returned by wiki_list_comments_tool.
    """
    config = _ctx(ctx).config
    return wiki_delete_comment(
        config, path=path, comment_id=comment_id, user=config.mcp_user or ""
    )


@mcp_server.tool()
async def wiki_list_versions_tool(ctx: Context, path: str) -> dict[str, Any]:
    """List stored versions of a document, newest first.

    Args:
        path: Document path.
    """
    return wiki_list_versions(_ctx(ctx).config, path=path)


def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    from flatwiki.logging_config import configure_logging

    configure_logging(verbose=False)
    mcp_server.run(transport="stdio")
