"""Protocols for dependency injection of the bookmark service."""

from typing import Any, Protocol, runtime_checkable

from linkshelf.models.entities import ApiResponse, Bookmark, Folder, Session, Tag


@runtime_checkable
class BackendProtocol(Protocol):
    """Asynchronous contract of the bookmark persistence service.

    Every operation answers with an ``ApiResponse`` envelope. Transport
    problems are raised as ``BackendError``.
    """

    async def login(self, email: str, password: str) -> ApiResponse[Session]:
        """Authenticate and return a session token."""
        ...

    async def logout(self) -> ApiResponse[None]:
        """End the current session."""
        ...

    async def get_bookmarks(self, params: dict[str, Any] | None = None) -> ApiResponse[list[Bookmark]]:
        """Return all bookmarks, optionally narrowed by query parameters."""
        ...

    async def create_bookmark(self, bookmark: Bookmark) -> ApiResponse[Bookmark]:
        """Persist a new bookmark and echo it back."""
        ...

    async def update_bookmark(self, bookmark_id: str, changes: dict[str, Any]) -> ApiResponse[Bookmark]:
        """Apply a partial update (wire field names) and return the record."""
        ...

    async def delete_bookmark(self, bookmark_id: str) -> ApiResponse[str]:
        """Delete a bookmark and return its id."""
        ...

    async def increment_visit(self, bookmark_id: str) -> ApiResponse[None]:
        """Record one visit of a bookmark."""
        ...

    async def get_folders(self) -> ApiResponse[list[Folder]]:
        """Return all folders, including the root sentinel."""
        ...

    async def create_folder(self, folder: Folder) -> ApiResponse[Folder]:
        """Persist a new folder and echo it back."""
        ...

    async def update_folder(self, folder_id: str, changes: dict[str, Any]) -> ApiResponse[Folder]:
        """Apply a partial update (wire field names) and return the record."""
        ...

    async def move_folder(self, folder_id: str, new_parent_id: str) -> ApiResponse[None]:
        """Reparent a folder."""
        ...

    async def get_tags(self) -> ApiResponse[list[Tag]]:
        """Return all tags in display order."""
        ...

    async def create_tag(self, tag: Tag) -> ApiResponse[Tag]:
        """Persist a new tag and echo it back."""
        ...

    async def reorder_tags(self, tags: list[Tag]) -> ApiResponse[None]:
        """Replace the whole ordered tag collection."""
        ...
