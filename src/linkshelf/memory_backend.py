"""In-process bookmark service seeded with demo data."""

import asyncio
import time
from dataclasses import replace
from typing import Any

from loguru import logger

from linkshelf.config import ROOT_FOLDER_ID
from linkshelf.models.entities import ApiResponse, Bookmark, Folder, Session, Tag, User

_DAY_MS = 24 * 60 * 60 * 1000
_HOUR_MS = 60 * 60 * 1000


def demo_folders() -> list[Folder]:
    return [
        Folder(id=ROOT_FOLDER_ID, name="My bookmarks", icon="folder_open"),
        Folder(id="work", name="Work projects", icon="work", parent_id=ROOT_FOLDER_ID),
        Folder(id="tech", name="Tech docs", icon="code", parent_id=ROOT_FOLDER_ID),
        Folder(id="reading", name="Reading list", icon="menu_book", parent_id=ROOT_FOLDER_ID),
        Folder(id="course", name="Online courses", icon="school", parent_id=ROOT_FOLDER_ID),
    ]


def demo_tags() -> list[Tag]:
    return [
        Tag(id="1", name="dev", color="blue"),
        Tag(id="2", name="design", color="purple"),
        Tag(id="3", name="CSS", color="cyan"),
        Tag(id="4", name="JavaScript", color="amber"),
        Tag(id="5", name="TS", color="blue"),
        Tag(id="6", name="tools", color="slate"),
        Tag(id="7", name="resources", color="green"),
        Tag(id="8", name="UI", color="pink"),
        Tag(id="9", name="to-read", color="indigo"),
        Tag(id="10", name="productivity", color="orange"),
    ]


def demo_bookmarks(now_ms: int | None = None) -> list[Bookmark]:
    """Six sample bookmarks with timestamps relative to ``now_ms``."""
    now = now_ms if now_ms is not None else int(time.time() * 1000)
    return [
        Bookmark(
            id="b1",
            title="Tailwind CSS Documentation",
            url="https://tailwindcss.com",
            description="A utility-first CSS framework.",
            folder_id="tech",
            tags=("dev", "CSS"),
            created_at="2 hours ago",
            created_at_timestamp=now - 2 * _HOUR_MS,
            visit_count=15,
            last_visited=now - 10_000,
            content="# Notes\n\nUtility-first beats hand-written styles.",
        ),
        Bookmark(
            id="b2",
            title="React Documentation",
            url="https://react.dev",
            description="Learn React with interactive examples.",
            folder_id="tech",
            tags=("dev", "JavaScript"),
            created_at="yesterday",
            created_at_timestamp=now - _DAY_MS,
            visit_count=42,
            last_visited=now - 5_000,
            content="# React 19\n\n- Server Components\n- Actions",
        ),
        Bookmark(
            id="b3",
            title="Coolors.co",
            url="https://coolors.co",
            description="Colour palette generator.",
            folder_id="reading",
            tags=("design", "tools"),
            created_at="3 days ago",
            created_at_timestamp=now - 3 * _DAY_MS,
            visit_count=5,
            last_visited=now - 5 * _DAY_MS,
        ),
        Bookmark(
            id="b4",
            title="A Complete Guide to Flexbox",
            url="https://css-tricks.com/snippets/css/a-guide-to-flexbox/",
            description="Everything about flexbox layout.",
            folder_id="tech",
            tags=("dev", "CSS"),
            created_at="1 week ago",
            created_at_timestamp=now - 7 * _DAY_MS,
            visit_count=8,
            last_visited=now - 2 * _DAY_MS,
        ),
        Bookmark(
            id="b5",
            title="TypeScript Handbook",
            url="https://www.typescriptlang.org/docs/handbook/intro.html",
            description="JavaScript with syntax for types.",
            folder_id="tech",
            tags=("dev", "TS"),
            created_at="2 weeks ago",
            created_at_timestamp=now - 14 * _DAY_MS,
            visit_count=20,
            last_visited=now - _DAY_MS,
        ),
        Bookmark(
            id="b6",
            title="Figma",
            url="https://figma.com",
            description="Community resources for UI design.",
            folder_id="reading",
            tags=("design", "resources"),
            created_at="1 month ago",
            created_at_timestamp=now - 30 * _DAY_MS,
            visit_count=3,
            last_visited=now - 20 * _DAY_MS,
        ),
    ]


class InMemoryBackend:
    """Implements ``BackendProtocol`` over lists held in memory.

    Filtering parameters of ``get_bookmarks`` are ignored: the full
    collection is returned and narrowed client-side.
    """

    def __init__(self, *, latency: float = 0.0, seed: bool = True) -> None:
        self.latency = latency
        self.folders: list[Folder] = demo_folders() if seed else []
        self.tags: list[Tag] = demo_tags() if seed else []
        self.bookmarks: list[Bookmark] = demo_bookmarks() if seed else []

    async def _delay(self) -> None:
        if self.latency:
            await asyncio.sleep(self.latency)

    async def login(self, email: str, password: str) -> ApiResponse[Session]:
        await self._delay()
        user = User(id="u1", name="Demo User", email=email, avatar="DU")
        return ApiResponse(success=True, data=Session(token="demo-token", user=user))

    async def logout(self) -> ApiResponse[None]:
        await self._delay()
        return ApiResponse(success=True)

    async def get_bookmarks(self, params: dict[str, Any] | None = None) -> ApiResponse[list[Bookmark]]:
        await self._delay()
        return ApiResponse(success=True, data=list(self.bookmarks))

    async def create_bookmark(self, bookmark: Bookmark) -> ApiResponse[Bookmark]:
        await self._delay()
        self.bookmarks.insert(0, bookmark)
        return ApiResponse(success=True, data=bookmark)

    async def update_bookmark(self, bookmark_id: str, changes: dict[str, Any]) -> ApiResponse[Bookmark]:
        await self._delay()
        for i, b in enumerate(self.bookmarks):
            if b.id == bookmark_id:
                updated = Bookmark.from_wire({**b.to_wire(), **changes})
                self.bookmarks[i] = updated
                return ApiResponse(success=True, data=updated)
        return ApiResponse(success=False, message="Not found")

    async def delete_bookmark(self, bookmark_id: str) -> ApiResponse[str]:
        await self._delay()
        self.bookmarks = [b for b in self.bookmarks if b.id != bookmark_id]
        return ApiResponse(success=True, data=bookmark_id)

    async def increment_visit(self, bookmark_id: str) -> ApiResponse[None]:
        for i, b in enumerate(self.bookmarks):
            if b.id == bookmark_id:
                self.bookmarks[i] = replace(
                    b, visit_count=b.visit_count + 1, last_visited=int(time.time() * 1000)
                )
        return ApiResponse(success=True)

    async def get_folders(self) -> ApiResponse[list[Folder]]:
        await self._delay()
        return ApiResponse(success=True, data=list(self.folders))

    async def create_folder(self, folder: Folder) -> ApiResponse[Folder]:
        await self._delay()
        self.folders.append(folder)
        return ApiResponse(success=True, data=folder)

    async def update_folder(self, folder_id: str, changes: dict[str, Any]) -> ApiResponse[Folder]:
        for i, f in enumerate(self.folders):
            if f.id == folder_id:
                updated = Folder.from_wire({**f.to_wire(), **changes})
                self.folders[i] = updated
                return ApiResponse(success=True, data=updated)
        return ApiResponse(success=False)

    async def move_folder(self, folder_id: str, new_parent_id: str) -> ApiResponse[None]:
        for i, f in enumerate(self.folders):
            if f.id == folder_id:
                self.folders[i] = replace(f, parent_id=new_parent_id)
        return ApiResponse(success=True)

    async def get_tags(self) -> ApiResponse[list[Tag]]:
        await self._delay()
        return ApiResponse(success=True, data=list(self.tags))

    async def create_tag(self, tag: Tag) -> ApiResponse[Tag]:
        self.tags.append(tag)
        return ApiResponse(success=True, data=tag)

    async def reorder_tags(self, tags: list[Tag]) -> ApiResponse[None]:
        self.tags = list(tags)
        logger.debug("Demo backend stored tag order: {}", [t.name for t in tags])
        return ApiResponse(success=True)
