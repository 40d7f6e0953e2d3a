"""Command-line interface for linkshelf."""

import asyncio
import json
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Annotated, Any, TypeVar

import typer
from loguru import logger

from linkshelf.api import HttpBackend
from linkshelf.config import ROOT_FOLDER_ID
from linkshelf.library import Library
from linkshelf.logging_config import configure_logging
from linkshelf.memory_backend import InMemoryBackend
from linkshelf.models.criteria import SortOption, SortOrder, end_of_day
from linkshelf.models.entities import Bookmark, Folder
from linkshelf.protocols import BackendProtocol

T = TypeVar("T")

app = typer.Typer(help="linkshelf: organize bookmarks into folders and tags.")


def make_backend(*, demo: bool) -> BackendProtocol:
    if demo:
        return InMemoryBackend()
    return HttpBackend()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    demo: bool = typer.Option(False, "--demo", help="Use the built-in demo data instead of the API"),
) -> None:
    configure_logging(verbose=verbose)
    ctx.obj = {"demo": demo}


def _run(ctx: typer.Context, action: Callable[[Library], Awaitable[T]]) -> T:
    """Load a library and run ``action`` against it on a fresh event loop."""

    async def runner() -> T:
        library = Library(make_backend(demo=ctx.obj["demo"]))
        loaded = await library.load()
        if not loaded.ok:
            logger.error("Could not load library: {}", loaded.message)
            raise typer.Exit(1)
        try:
            return await action(library)
        finally:
            await library.flush()

    return asyncio.run(runner())


def _apply_filters(
    library: Library,
    *,
    folder: str | None,
    search: str | None,
    tags: list[str] | None,
    date_from: datetime | None,
    date_to: datetime | None,
) -> None:
    if folder:
        library.select_folder(folder)
    if search:
        library.set_search(search)
    for name in tags or ():
        library.toggle_tag(name)
    if date_from:
        library.set_date_range(date_from, end_of_day(date_to) if date_to else None)


def _bookmark_row(b: Bookmark) -> dict[str, Any]:
    return {
        "id": b.id,
        "title": b.title,
        "url": b.url,
        "folder": b.folder_id,
        "tags": list(b.tags),
        "visits": b.visit_count,
        "created": b.created_at_timestamp,
    }


FolderOpt = Annotated[str | None, typer.Option("--folder", "-f", help="Only this folder (no subfolders)")]
SearchOpt = Annotated[str | None, typer.Option("--search", "-s", help="Substring of title or URL")]
TagOpt = Annotated[list[str] | None, typer.Option("--tag", "-t", help="Required tag (repeatable)")]
FromOpt = Annotated[
    datetime | None,
    typer.Option("--from", formats=["%Y-%m-%d"], help="Created on this day, or from it with --to"),
]
ToOpt = Annotated[
    datetime | None,
    typer.Option("--to", formats=["%Y-%m-%d"], help="Created up to the end of this day (requires --from)"),
]


@app.command()
def bookmarks(
    ctx: typer.Context,
    folder: FolderOpt = None,
    search: SearchOpt = None,
    tag: TagOpt = None,
    date_from: FromOpt = None,
    date_to: ToOpt = None,
    sort: SortOption = typer.Option(SortOption.CREATED, "--sort", help="Sort key"),
    order: SortOrder = typer.Option(SortOrder.DESC, "--order", help="Sort direction"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List bookmarks matching the given filters."""
    if date_to and not date_from:
        raise typer.BadParameter("--to needs --from", param_hint="--to")

    async def action(library: Library) -> list[Bookmark]:
        _apply_filters(
            library, folder=folder, search=search, tags=tag, date_from=date_from, date_to=date_to
        )
        library.set_sort(sort, order)
        return library.visible_bookmarks()

    rows = _run(ctx, action)
    if output_json:
        typer.echo(json.dumps({"bookmarks": [_bookmark_row(b) for b in rows], "count": len(rows)}, indent=2))
        return

    typer.echo(f"{len(rows)} bookmarks:\n")
    for b in rows:
        tags_str = ", ".join(b.tags)
        typer.echo(f"  {b.title[:60]}  <{b.url}>")
        typer.echo(f"    id={b.id}  folder={b.folder_id}  visits={b.visit_count}  tags=[{tags_str}]")


@app.command()
def folders(ctx: typer.Context) -> None:
    """Show the folder tree with bookmark counts."""

    async def action(library: Library) -> list[str]:
        counts = {f.id: n for f, n in library.folder_facets()}
        lines: list[str] = []
        root = next((f for f in library.folders if f.id == ROOT_FOLDER_ID), None)
        if root is not None:
            lines.append(f"{root.name} ({counts[root.id]})  [id={root.id}]")

        seen: set[str] = set()

        def walk(items: tuple[Folder, ...], depth: int) -> None:
            for f in items:
                if f.id in seen:
                    continue
                seen.add(f.id)
                lines.append(f"{'  ' * depth}{f.name} ({counts.get(f.id, 0)})  [id={f.id}]")
                walk(library.subfolders(f.id), depth + 1)

        walk(library.top_level_folders(), 1)
        return lines

    for line in _run(ctx, action):
        typer.echo(line)


@app.command()
def tags(
    ctx: typer.Context,
    folder: FolderOpt = None,
    search: SearchOpt = None,
    tag: TagOpt = None,
) -> None:
    """Show tags with counts over the filtered bookmarks."""

    async def action(library: Library) -> list[tuple[str, int]]:
        _apply_filters(library, folder=folder, search=search, tags=tag, date_from=None, date_to=None)
        return [(t.name, n) for t, n in library.tag_facets()]

    for name, count in _run(ctx, action):
        typer.echo(f"  {name} ({count})")


@app.command()
def path(ctx: typer.Context, folder_id: str = typer.Argument(..., help="Folder ID")) -> None:
    """Print the breadcrumb path of a folder."""

    async def action(library: Library) -> tuple[Folder, ...]:
        return library.breadcrumbs(folder_id)

    crumbs = _run(ctx, action)
    typer.echo(" > ".join(["Home", *(f.name for f in crumbs)]))


@app.command()
def add(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Link to save"),
    title: str = typer.Option(..., "--title", help="Title"),
    description: str = typer.Option("", "--description", help="Description"),
    folder: Annotated[str | None, typer.Option("--folder", "-f", help="Target folder ID")] = None,
    tag: TagOpt = None,
) -> None:
    """Add a bookmark, creating any tags that do not exist yet."""

    async def action(library: Library) -> bool:
        now = int(datetime.now().timestamp() * 1000)
        folder_id = library.default_folder_for_new_bookmark(folder)
        if folder_id is None:
            folder_id = next((f.id for f in library.folders if f.id != ROOT_FOLDER_ID), "")
        bookmark = Bookmark(
            id=library.new_id(),
            title=title,
            url=url,
            description=description,
            folder_id=folder_id,
            tags=tuple(tag or ()),
            created_at="just now",
            created_at_timestamp=now,
            visit_count=0,
            last_visited=now,
        )
        result = await library.add_bookmark(bookmark)
        return result.ok

    if not _run(ctx, action):
        typer.echo("Could not add bookmark.")
        raise typer.Exit(1)
    typer.echo("Bookmark added.")


@app.command(name="move-folder")
def move_folder(
    ctx: typer.Context,
    folder_id: str = typer.Argument(..., help="Folder to move"),
    target_id: str = typer.Argument(..., help="New parent folder"),
) -> None:
    """Move a folder under another folder."""

    async def action(library: Library) -> str:
        result = await library.move_folder(folder_id, target_id)
        return result.status

    status = _run(ctx, action)
    typer.echo(f"Move {status}.")
    if status != "applied":
        raise typer.Exit(1)


@app.command()
def visit(ctx: typer.Context, bookmark_id: str = typer.Argument(..., help="Bookmark ID")) -> None:
    """Record a visit of a bookmark."""

    async def action(library: Library) -> Bookmark | None:
        result = await library.visit(bookmark_id)
        return result.data if result.ok else None

    bookmark = _run(ctx, action)
    if bookmark is None:
        typer.echo(f"Bookmark '{bookmark_id}' not found.")
        raise typer.Exit(1)
    typer.echo(f"{bookmark.title}: {bookmark.visit_count} visits")


@app.command()
def serve() -> None:
    """Start the MCP server (stdio transport)."""
    from linkshelf.mcp.server import run_mcp_server

    run_mcp_server()
