"""Fake implementations for testing the bookmark engine."""

import asyncio
from typing import Any

from linkshelf.errors import BackendError
from linkshelf.models.entities import ApiResponse, Bookmark, Folder, Session, Tag, User


class FakeBackend:
    """In-memory fake for the bookmark service.

    Records every call and lets tests script failures:

    * ``fail[op] = message`` answers ``success: false``;
    * ``raise_on`` holds operations that raise ``BackendError``;
    * ``outcomes[op]`` is a queue of booleans consumed one per call;
    * ``gates[op]`` is an event the operation waits on before answering.
    """

    def __init__(
        self,
        *,
        folders: list[Folder] | None = None,
        tags: list[Tag] | None = None,
        bookmarks: list[Bookmark] | None = None,
    ) -> None:
        self.folders = list(folders or [])
        self.tags = list(tags or [])
        self.bookmarks = list(bookmarks or [])
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.fail: dict[str, str | None] = {}
        self.raise_on: set[str] = set()
        self.outcomes: dict[str, list[bool]] = {}
        self.gates: dict[str, asyncio.Event] = {}

    def called(self, op: str) -> list[tuple[Any, ...]]:
        """Arguments of every call to ``op``."""
        return [args for name, args in self.calls if name == op]

    def hold(self, op: str) -> asyncio.Event:
        """Make ``op`` wait until the returned event is set."""
        gate = asyncio.Event()
        self.gates[op] = gate
        return gate

    async def _answer(self, op: str, args: tuple[Any, ...], data: Any = None) -> ApiResponse[Any]:
        self.calls.append((op, args))
        gate = self.gates.get(op)
        if gate is not None:
            await gate.wait()
        if op in self.raise_on:
            msg = f"FakeBackend: connection refused for {op}"
            raise BackendError(msg)
        if op in self.fail:
            return ApiResponse(success=False, message=self.fail[op])
        queue = self.outcomes.get(op)
        if queue and not queue.pop(0):
            return ApiResponse(success=False)
        return ApiResponse(success=True, data=data)

    async def login(self, email: str, password: str) -> ApiResponse[Session]:
        session = Session(token="t0k3n", user=User(id="u1", name="Test", email=email))
        return await self._answer("login", (email, password), session)

    async def logout(self) -> ApiResponse[None]:
        return await self._answer("logout", ())

    async def get_bookmarks(self, params: dict[str, Any] | None = None) -> ApiResponse[list[Bookmark]]:
        return await self._answer("get_bookmarks", (params,), list(self.bookmarks))

    async def create_bookmark(self, bookmark: Bookmark) -> ApiResponse[Bookmark]:
        return await self._answer("create_bookmark", (bookmark,), bookmark)

    async def update_bookmark(self, bookmark_id: str, changes: dict[str, Any]) -> ApiResponse[Bookmark]:
        return await self._answer("update_bookmark", (bookmark_id, changes))

    async def delete_bookmark(self, bookmark_id: str) -> ApiResponse[str]:
        return await self._answer("delete_bookmark", (bookmark_id,), bookmark_id)

    async def increment_visit(self, bookmark_id: str) -> ApiResponse[None]:
        return await self._answer("increment_visit", (bookmark_id,))

    async def get_folders(self) -> ApiResponse[list[Folder]]:
        return await self._answer("get_folders", (), list(self.folders))

    async def create_folder(self, folder: Folder) -> ApiResponse[Folder]:
        return await self._answer("create_folder", (folder,), folder)

    async def update_folder(self, folder_id: str, changes: dict[str, Any]) -> ApiResponse[Folder]:
        return await self._answer("update_folder", (folder_id, changes))

    async def move_folder(self, folder_id: str, new_parent_id: str) -> ApiResponse[None]:
        return await self._answer("move_folder", (folder_id, new_parent_id))

    async def get_tags(self) -> ApiResponse[list[Tag]]:
        return await self._answer("get_tags", (), list(self.tags))

    async def create_tag(self, tag: Tag) -> ApiResponse[Tag]:
        return await self._answer("create_tag", (tag,), tag)

    async def reorder_tags(self, tags: list[Tag]) -> ApiResponse[None]:
        return await self._answer("reorder_tags", (list(tags),))


def make_bookmark(bookmark_id: str, **fields: Any) -> Bookmark:
    """Bookmark with sensible defaults for fields a test does not care about."""
    defaults: dict[str, Any] = {
        "title": f"Bookmark {bookmark_id}",
        "url": f"https://example.com/{bookmark_id}",
        "folder_id": "tech",
    }
    defaults.update(fields)
    return Bookmark(id=bookmark_id, **defaults)


# all
# ├── work
# ├── tech
# │   └── frontend
# │       └── react
# └── reading
FOLDERS = [
    Folder(id="all", name="My bookmarks", icon="folder_open"),
    Folder(id="work", name="Work", parent_id="all"),
    Folder(id="tech", name="Tech", parent_id="all"),
    Folder(id="frontend", name="Frontend", parent_id="tech"),
    Folder(id="react", name="React", parent_id="frontend"),
    Folder(id="reading", name="Reading", parent_id="all"),
]

TAGS = [
    Tag(id="a", name="A", color="blue"),
    Tag(id="b", name="B", color="green"),
    Tag(id="c", name="C", color="red"),
]

BOOKMARKS = [
    make_bookmark("b1", title="Python docs", url="https://docs.python.org", folder_id="tech",
                  tags=("A", "B"), created_at_timestamp=300, visit_count=5, last_visited=900),
    make_bookmark("b2", title="React", url="https://react.dev", folder_id="react",
                  tags=("A",), created_at_timestamp=100, visit_count=20, last_visited=700),
    make_bookmark("b3", title="Novel", url="https://books.example.org", folder_id="reading",
                  tags=("C",), created_at_timestamp=200, visit_count=1, last_visited=800),
]
