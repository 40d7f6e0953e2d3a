"""Optimistic commands: local changes that can be undone from a snapshot."""

import time
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from linkshelf.core.store import EntityStore
from linkshelf.models.entities import Bookmark, Tag

S = TypeVar("S")


def now_ms() -> int:
    return int(time.time() * 1000)


class OptimisticCommand(ABC, Generic[S]):
    """A local state change applied ahead of backend confirmation.

    The synchronizer calls ``snapshot`` before ``apply`` and hands the
    snapshot back to ``rollback`` if the backend refuses the change.
    """

    def __init__(self, store: EntityStore) -> None:
        self.store = store

    def is_applicable(self) -> bool:
        return True

    @abstractmethod
    def snapshot(self) -> S: ...

    @abstractmethod
    def apply(self) -> None: ...

    @abstractmethod
    def rollback(self, snapshot: S) -> None: ...


class ReorderTagsCommand(OptimisticCommand[tuple[Tag, ...]]):
    """Move one tag to the position currently held by another."""

    def __init__(self, store: EntityStore, dragged_id: str, target_id: str) -> None:
        super().__init__(store)
        self.dragged_id = dragged_id
        self.target_id = target_id
        self.new_order: list[Tag] = []

    def is_applicable(self) -> bool:
        if self.dragged_id == self.target_id:
            return False
        return self.store.tag_index(self.dragged_id) != -1 and self.store.tag_index(self.target_id) != -1

    def snapshot(self) -> tuple[Tag, ...]:
        return self.store.tags

    def apply(self) -> None:
        dragged_index = self.store.tag_index(self.dragged_id)
        target_index = self.store.tag_index(self.target_id)
        tags = list(self.store.tags)
        moved = tags.pop(dragged_index)
        tags.insert(target_index, moved)
        self.new_order = tags
        self.store.replace_tags(tags)

    def rollback(self, snapshot: tuple[Tag, ...]) -> None:
        self.store.replace_tags(snapshot)


class RecordVisitCommand(OptimisticCommand[Bookmark | None]):
    """Bump a bookmark's visit counter and last-visited time."""

    def __init__(self, store: EntityStore, bookmark_id: str, *, at_ms: int | None = None) -> None:
        super().__init__(store)
        self.bookmark_id = bookmark_id
        self.at_ms = at_ms

    def is_applicable(self) -> bool:
        return self.store.find_bookmark(self.bookmark_id) is not None

    def snapshot(self) -> Bookmark | None:
        return self.store.find_bookmark(self.bookmark_id)

    def apply(self) -> None:
        bookmark = self.store.find_bookmark(self.bookmark_id)
        if bookmark is None:
            return
        changes: dict[str, Any] = {
            "visit_count": (bookmark.visit_count or 0) + 1,
            "last_visited": self.at_ms if self.at_ms is not None else now_ms(),
        }
        self.store.update_bookmark(self.bookmark_id, **changes)

    def rollback(self, snapshot: Bookmark | None) -> None:
        if snapshot is not None:
            self.store.update_bookmark(
                self.bookmark_id,
                visit_count=snapshot.visit_count,
                last_visited=snapshot.last_visited,
            )
