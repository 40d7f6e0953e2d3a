"""Canonical in-memory collections of folders, tags and bookmarks."""

from collections.abc import Iterable
from dataclasses import replace
from typing import Any

from linkshelf.models.entities import Bookmark, Folder, Tag


class EntityStore:
    """Holds the three collections and the session epoch.

    Readers get tuples. Writes go through the synchronizer, which is the
    only component that calls the mutating methods below.
    """

    def __init__(self) -> None:
        self._folders: list[Folder] = []
        self._tags: list[Tag] = []
        self._bookmarks: list[Bookmark] = []
        self.epoch = 0

    @property
    def folders(self) -> tuple[Folder, ...]:
        return tuple(self._folders)

    @property
    def tags(self) -> tuple[Tag, ...]:
        return tuple(self._tags)

    @property
    def bookmarks(self) -> tuple[Bookmark, ...]:
        return tuple(self._bookmarks)

    def find_folder(self, folder_id: str) -> Folder | None:
        return next((f for f in self._folders if f.id == folder_id), None)

    def find_bookmark(self, bookmark_id: str) -> Bookmark | None:
        return next((b for b in self._bookmarks if b.id == bookmark_id), None)

    def tag_index(self, tag_id: str) -> int:
        """Position of a tag in display order, -1 if absent."""
        return next((i for i, t in enumerate(self._tags) if t.id == tag_id), -1)

    # --- Writes ---

    def replace_folders(self, folders: Iterable[Folder]) -> None:
        self._folders = list(folders)

    def replace_tags(self, tags: Iterable[Tag]) -> None:
        self._tags = list(tags)

    def replace_bookmarks(self, bookmarks: Iterable[Bookmark]) -> None:
        self._bookmarks = list(bookmarks)

    def add_folder(self, folder: Folder) -> None:
        self._folders.append(folder)

    def update_folder(self, folder_id: str, **changes: Any) -> None:
        self._folders = [replace(f, **changes) if f.id == folder_id else f for f in self._folders]

    def append_tags(self, tags: Iterable[Tag]) -> None:
        self._tags.extend(tags)

    def prepend_bookmark(self, bookmark: Bookmark) -> None:
        self._bookmarks.insert(0, bookmark)

    def update_bookmark(self, bookmark_id: str, **changes: Any) -> None:
        self._bookmarks = [
            replace(b, **changes) if b.id == bookmark_id else b for b in self._bookmarks
        ]

    def remove_bookmark(self, bookmark_id: str) -> None:
        self._bookmarks = [b for b in self._bookmarks if b.id != bookmark_id]

    def reset(self) -> None:
        """Drop all collections and start a new session epoch."""
        self._folders = []
        self._tags = []
        self._bookmarks = []
        self.epoch += 1
