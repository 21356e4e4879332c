"""CLI for the flat-file wiki (navigation, history, comments, MCP server)."""

import json
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from flatwiki.config import WikiConfig
from flatwiki.core.comments.store import CommentStore, format_comment_time
from flatwiki.core.tree.navigation import NavigationCache
from flatwiki.core.tree.titles import resolve_title
from flatwiki.core.versions.history import DocumentHistory
from flatwiki.core.versions.retention import prune_versions
from flatwiki.exceptions import WikiError
from flatwiki.logging_config import configure_logging
from flatwiki.models.node import NavNode

app = typer.Typer(help="Flat-file wiki: navigation, version history and comments.")

RootOption = Annotated[
    Path | None,
    typer.Option("--root", "-r", help="Wiki root directory (holds documents/ and comments/)"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _config(root: Path | None) -> WikiConfig:
    return WikiConfig.from_env(root.expanduser() if root else None)


def _echo_tree(node: NavNode, depth: int = 0) -> None:
    marker = "*" if node.is_active else " "
    typer.echo(f"{marker} {'    ' * depth}{node.title}  ({node.path})")
    for child in node.children:
        _echo_tree(child, depth + 1)


@app.command()
def nav(
    active: Annotated[
        str | None,
        typer.Option("--active", "-a", help="Mark this URL path and its ancestors active"),
    ] = None,
    root: RootOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Print the navigation tree built from the documents directory."""
    cfg = _config(root)
    cache = NavigationCache(cfg.documents_path, root_title=cfg.title, exclude=cfg.excluded_paths)
    try:
        tree = cache.active_tree(active) if active else cache.get()
    except WikiError as exc:
        logger.error("{}", exc)
        raise typer.Exit(1) from exc

    if output_json:
        typer.echo(json.dumps(tree.to_dict(), indent=2))
    else:
        _echo_tree(tree)


@app.command()
def title(directory: Path = typer.Argument(..., help="Document directory")) -> None:
    """Print the resolved title of a document directory."""
    typer.echo(resolve_title(directory))


@app.command()
def prune(
    doc_path: str = typer.Argument(..., help="Document path, e.g. guides/setup"),
    max_versions: Annotated[
        int | None,
        typer.Option("--max-versions", "-m", help="Versions to keep (<= 0 keeps all)"),
    ] = None,
    root: RootOption = None,
) -> None:
    """Delete the oldest versions of a document beyond the retention limit."""
    cfg = _config(root)
    limit = cfg.max_versions if max_versions is None else max_versions
    history = DocumentHistory(cfg.documents_path, limit)
    deleted = prune_versions(history.version_dir(doc_path), limit)
    typer.echo(f"Deleted {len(deleted)} version(s)")


@app.command()
def versions(
    doc_path: str = typer.Argument(..., help="Document path"),
    root: RootOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List stored versions of a document, newest first."""
    cfg = _config(root)
    found = DocumentHistory(cfg.documents_path, cfg.max_versions).list_versions(doc_path)
    if output_json:
        data = {
            "versions": [{"timestamp": v.timestamp, "path": v.path} for v in found],
            "count": len(found),
        }
        typer.echo(json.dumps(data, indent=2))
        return
    typer.echo(f"{len(found)} versions:\n")
    for version in found:
        typer.echo(f"  {version.timestamp}  {version.path}")


@app.command()
def restore(
    doc_path: str = typer.Argument(..., help="Document path"),
    timestamp: str = typer.Argument(..., help="Version stamp (YYYYMMDDhhmmss)"),
    root: RootOption = None,
) -> None:
    """Restore a document to a stored version."""
    cfg = _config(root)
    history = DocumentHistory(cfg.documents_path, cfg.max_versions)
    try:
        history.restore(doc_path, timestamp)
    except WikiError as exc:
        typer.echo(str(exc))
        raise typer.Exit(1) from exc
    typer.echo(f"Restored {doc_path} to version {timestamp}")


@app.command()
def comments(
    doc_path: str = typer.Argument(..., help="Document path"),
    root: RootOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List the comments on a document, oldest first."""
    cfg = _config(root)
    found = CommentStore(cfg.comments_path).list_comments(doc_path)
    if output_json:
        data = {
            "comments": [
                {
                    "id": c.id,
                    "author": c.author,
                    "timestamp": c.timestamp,
                    "content": c.content,
                }
                for c in found
            ],
            "count": len(found),
        }
        typer.echo(json.dumps(data, indent=2))
        return
    typer.echo(f"{len(found)} comments:\n")
    for c in found:
        typer.echo(f"  [{c.author}] {format_comment_time(c.timestamp, cfg.timezone)}  id={c.id}")
        typer.echo(f"    {c.content[:80]}")
        typer.echo()


@app.command(name="comment-add")
def comment_add(
    doc_path: str = typer.Argument(..., help="Document path"),
    author: str = typer.Option(..., "--author", "-u", help="Comment author"),
    content: str = typer.Option(..., "--content", "-c", help="Markdown body"),
    root: RootOption = None,
) -> None:
    """Add a comment to a document."""
    cfg = _config(root)
    comment = CommentStore(cfg.comments_path).add(doc_path, content, author)
    typer.echo(f"Added comment {comment.id}")


@app.command(name="comment-delete")
def comment_delete(
    doc_path: str = typer.Argument(..., help="Document path"),
    comment_id: str = typer.Argument(..., help="Comment id (<timestamp>_<author>.md)"),
    admin: bool = typer.Option(False, "--admin", help="Act with admin rights"),
    root: RootOption = None,
) -> None:
    """Delete a comment (admin only)."""
    cfg = _config(root)
    try:
        CommentStore(cfg.comments_path).delete(comment_id, doc_path, is_admin=admin)
    except (WikiError, FileNotFoundError) as exc:
        typer.echo(f"Failed to delete comment: {exc}")
        raise typer.Exit(1) from exc
    typer.echo(f"Deleted comment {comment_id}")


@app.command()
def serve() -> None:
    """Start the MCP server (stdio transport)."""
    from flatwiki.mcp.server import run_mcp_server

    run_mcp_server()
