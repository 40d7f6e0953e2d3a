"""MCP server exposing the bookmark library as tools."""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from linkshelf.cli import make_backend
from linkshelf.config import ROOT_FOLDER_ID
from linkshelf.library import Library
from linkshelf.models.criteria import SortOption, SortOrder, end_of_day
from linkshelf.models.entities import Bookmark


def _bookmark_dict(b: Bookmark, *, detailed: bool = False) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": b.id,
        "title": b.title,
        "url": b.url,
        "folder_id": b.folder_id,
        "tags": list(b.tags),
    }
    if detailed:
        out.update(
            description=b.description,
            visit_count=b.visit_count,
            last_visited=b.last_visited,
            created_at=b.created_at_timestamp,
            content=b.content,
        )
    return out


# --- Core functions (testable without MCP context) ---


def linkshelf_list_bookmarks(
    library: Library,
    *,
    folder: str = ROOT_FOLDER_ID,
    query: str = "",
    tags: list[str] | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    sort: str = "created",
    order: str = "desc",
    response_format: str = "concise",
) -> dict[str, Any]:
    """Filter and sort bookmarks.

    Args:
        folder: Folder ID ("all" for every folder). Subfolders are not included.
        query: Case-insensitive substring of title or URL.
        tags: Tags that must all be present.
        date_from: Created on this day (YYYY-MM-DD), or from it when date_to is set.
        date_to: Created up to the end of this day (YYYY-MM-DD).
        sort: "created", "frequent" or "recent".
        order: "asc" or "desc".
        response_format: "concise" or "detailed".
    """
    try:
        sort_option = SortOption(sort)
        sort_order = SortOrder(order)
        start = datetime.strptime(date_from, "%Y-%m-%d") if date_from else None
        end = end_of_day(datetime.strptime(date_to, "%Y-%m-%d")) if date_to else None
    except ValueError as e:
        return {"error": str(e), "bookmarks": [], "count": 0}
    if end is not None and start is None:
        return {"error": "date_to requires date_from", "bookmarks": [], "count": 0}

    library.select_folder(folder)
    library.set_search(query)
    library.clear_tags()
    for name in tags or ():
        library.toggle_tag(name)
    library.set_date_range(start, end)
    library.set_sort(sort_option, sort_order)

    rows = library.visible_bookmarks()
    detailed = response_format == "detailed"
    return {
        "bookmarks": [_bookmark_dict(b, detailed=detailed) for b in rows],
        "count": len(rows),
        "total": len(library.bookmarks),
        "tags": [{"name": t.name, "count": n} for t, n in library.tag_facets()],
    }


def linkshelf_folder_tree(library: Library) -> dict[str, Any]:
    """All folders with parent, breadcrumb path and bookmark count."""
    return {
        "folders": [
            {
                "id": f.id,
                "name": f.name,
                "parent_id": f.parent_id,
                "count": count,
                "path": " > ".join(c.name for c in library.breadcrumbs(f.id)),
            }
            for f, count in library.folder_facets()
        ],
        "count": len(library.folders),
    }


async def linkshelf_add_bookmark(
    library: Library,
    *,
    url: str,
    title: str,
    folder: str | None = None,
    tags: list[str] | None = None,
    description: str = "",
) -> dict[str, Any]:
    """Create a bookmark, creating tags that do not exist yet."""
    folder_id = library.default_folder_for_new_bookmark(folder)
    if folder_id is None:
        return {"error": "A target folder is required."}
    now = int(datetime.now().timestamp() * 1000)
    bookmark = Bookmark(
        id=library.new_id(),
        title=title,
        url=url,
        description=description,
        folder_id=folder_id,
        tags=tuple(tags or ()),
        created_at="just now",
        created_at_timestamp=now,
        last_visited=now,
    )
    result = await library.add_bookmark(bookmark)
    if not result.ok:
        return {"success": False, "status": str(result.status), "error": result.message}
    return {"success": True, "bookmark": _bookmark_dict(result.data)}


async def linkshelf_move_folder(library: Library, *, folder_id: str, target_id: str) -> dict[str, Any]:
    """Reparent a folder; cycles are refused."""
    result = await library.move_folder(folder_id, target_id)
    out: dict[str, Any] = {"success": result.ok, "status": str(result.status)}
    if result.message:
        out["error"] = result.message
    return out


async def linkshelf_record_visit(library: Library, *, bookmark_id: str) -> dict[str, Any]:
    result = await library.visit(bookmark_id)
    if not result.ok:
        return {"success": False, "error": f"Bookmark '{bookmark_id}' not found."}
    return {"success": True, "visit_count": result.data.visit_count}


# --- MCP Server Setup ---


@dataclass
class ServerContext:
    """Shared resources for the MCP server lifetime."""

    library: Library


def _make_library() -> Library:
    return Library(make_backend(demo=os.environ.get("LINKSHELF_DEMO") == "1"))


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Load the library on startup, wait for pending notifications on shutdown."""
    library = _make_library()
    loaded = await library.load()
    if not loaded.ok:
        logger.warning("Library loaded partially: {}", loaded.message)
    try:
        yield ServerContext(library=library)
    finally:
        await library.flush()


mcp_server = FastMCP(
    "linkshelf",
    instructions="""\
linkshelf holds saved links organized in a folder tree and tagged by name.

- Folder filters are exact: a parent folder does not include its subfolders.
  Use linkshelf_folder_tree_tool to find folder ids and paths.
- Tag filters use AND semantics: every listed tag must be present.
- Tag counts in list results describe the filtered bookmarks.
""",
    lifespan=server_lifespan,
)


def _ctx(mcp_ctx: Context) -> ServerContext:
    return mcp_ctx.request_context.lifespan_context  # type: ignore[return-value]


# --- MCP Tool Wrappers ---


@mcp_server.tool()
async def linkshelf_list_bookmarks_tool(
    ctx: Context,
    folder: str = ROOT_FOLDER_ID,
    query: str = "",
    tags: list[str] | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    sort: str = "created",
    order: str = "desc",
    response_format: str = "concise",
) -> dict[str, Any]:
    """List bookmarks matching filters, with tag counts for the result.

    Args:
        folder: Folder ID ("all" for every folder).
        query: Substring of title or URL.
        tags: Tags that must all be present.
        date_from: Day (YYYY-MM-DD); alone it selects that single day.
        date_to: Last day (YYYY-MM-DD) of the range.
        sort: "created", "frequent" or "recent".
        order: "asc" or "desc".
        response_format: "concise" or "detailed".
    """
    return linkshelf_list_bookmarks(
        _ctx(ctx).library,
        folder=folder,
        query=query,
        tags=tags,
        date_from=date_from,
        date_to=date_to,
        sort=sort,
        order=order,
        response_format=response_format,
    )


@mcp_server.tool()
async def linkshelf_folder_tree_tool(ctx: Context) -> dict[str, Any]:
    """List all folders with their paths and bookmark counts."""
    return linkshelf_folder_tree(_ctx(ctx).library)


@mcp_server.tool()
async def linkshelf_add_bookmark_tool(
    ctx: Context,
    url: str,
    title: str,
    folder: str | None = None,
    tags: list[str] | None = None,
    description: str = "",
) -> dict[str, Any]:
    """Save a new bookmark. Unknown tags are created automatically.

    Args:
        url: Link to save.
        title: Display title.
        folder: Target folder ID.
        tags: Tag names.
        description: Optional description.
    """
    return await linkshelf_add_bookmark(
        _ctx(ctx).library, url=url, title=title, folder=folder, tags=tags, description=description
    )


@mcp_server.tool()
async def linkshelf_move_folder_tool(ctx: Context, folder_id: str, target_id: str) -> dict[str, Any]:
    """Move a folder under another folder. Moving a folder into its own subtree is refused.

    Args:
        folder_id: Folder to move.
        target_id: New parent folder ("all" for top level).
    """
    return await linkshelf_move_folder(_ctx(ctx).library, folder_id=folder_id, target_id=target_id)


@mcp_server.tool()
async def linkshelf_record_visit_tool(ctx: Context, bookmark_id: str) -> dict[str, Any]:
    """Count a visit of a bookmark (affects "frequent" and "recent" sorting)."""
    return await linkshelf_record_visit(_ctx(ctx).library, bookmark_id=bookmark_id)


def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    from linkshelf.logging_config import configure_logging

    configure_logging(verbose=False)
    mcp_server.run(transport="stdio")
