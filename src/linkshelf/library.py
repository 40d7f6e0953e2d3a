"""Application state for one user's bookmark library."""

import random
from dataclasses import replace
from datetime import date, datetime

from linkshelf.config import ROOT_FOLDER_ID
from linkshelf.core.facets import folder_facets, tag_facets
from linkshelf.core.filtering.pipeline import has_active_filters, visible
from linkshelf.core.store import EntityStore
from linkshelf.core.sync.synchronizer import MutationResult, MutationSynchronizer
from linkshelf.core.tree.folders import (
    ExpansionState,
    breadcrumb_path,
    subfolders_of,
    subtree_ids,
    top_level_folders,
)
from linkshelf.models.criteria import DateRange, FilterCriteria, SortOption, SortOrder
from linkshelf.models.entities import Bookmark, Folder, Session, Tag
from linkshelf.protocols import BackendProtocol


class Library:
    """Single owner of the entity store, filter criteria and tree expansion.

    Everything is readable through properties and query methods. The only
    way to change entities is the async mutation methods, which go through
    the ``MutationSynchronizer``. Derived data (visible list, counts,
    breadcrumbs) is recomputed on each call.
    """

    def __init__(self, backend: BackendProtocol, *, rng: random.Random | None = None) -> None:
        self._store = EntityStore()
        self._sync = MutationSynchronizer(self._store, backend, rng=rng)
        self._criteria = FilterCriteria()
        self._expansion = ExpansionState()
        self._pending_parent_id: str | None = None
        self.is_loading = False

    # --- Reads ---

    @property
    def folders(self) -> tuple[Folder, ...]:
        return self._store.folders

    @property
    def tags(self) -> tuple[Tag, ...]:
        return self._store.tags

    @property
    def bookmarks(self) -> tuple[Bookmark, ...]:
        return self._store.bookmarks

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def expanded_folders(self) -> frozenset[str]:
        return self._expansion.expanded

    @property
    def session(self) -> Session | None:
        return self._sync.session

    def new_id(self) -> str:
        return self._sync.new_id()

    def visible_bookmarks(self) -> list[Bookmark]:
        return visible(self._store.bookmarks, self._criteria)

    def has_active_filters(self) -> bool:
        return has_active_filters(self._criteria)

    def folder_facets(self) -> list[tuple[Folder, int]]:
        return folder_facets(self._store.folders, self._store.bookmarks)

    def tag_facets(self) -> list[tuple[Tag, int]]:
        return tag_facets(
            self._store.tags,
            self.visible_bookmarks(),
            filters_active=self.has_active_filters(),
        )

    def breadcrumbs(self, folder_id: str | None = None) -> tuple[Folder, ...]:
        """Path to ``folder_id``, or to the selected folder when omitted."""
        return breadcrumb_path(self._store.folders, folder_id or self._criteria.selected_folder_id)

    def subfolders(self, parent_id: str) -> tuple[Folder, ...]:
        return subfolders_of(self._store.folders, parent_id)

    def top_level_folders(self) -> tuple[Folder, ...]:
        return top_level_folders(self._store.folders)

    def subtree(self, folder_id: str) -> list[str]:
        """Ids of the folder and all its descendants, breadth-first."""
        return subtree_ids(self._store.folders, folder_id)

    def default_folder_for_new_bookmark(self, folder_id: str | None = None) -> str | None:
        """Folder to preselect in the new-bookmark form."""
        if folder_id:
            return folder_id
        selected = self._criteria.selected_folder_id
        return selected if selected != ROOT_FOLDER_ID else None

    # --- View state ---

    def select_folder(self, folder_id: str) -> None:
        self._criteria = replace(self._criteria, selected_folder_id=folder_id)
        self._expansion.reveal(self._store.folders, folder_id)

    def set_search(self, query: str) -> None:
        self._criteria = replace(self._criteria, search_query=query)

    def toggle_tag(self, name: str) -> None:
        self._criteria = self._criteria.toggle_tag(name)

    def clear_tags(self) -> None:
        self._criteria = self._criteria.clear_tags()

    def set_date_range(self, start: datetime | None, end: datetime | None = None) -> None:
        self._criteria = replace(self._criteria, date_range=DateRange(start=start, end=end))

    def select_day(self, day: date | datetime) -> None:
        self._criteria = replace(self._criteria, date_range=self._criteria.date_range.select_day(day))

    def set_sort(self, option: SortOption | str, order: SortOrder | str | None = None) -> None:
        changes: dict[str, object] = {"sort_option": SortOption(option)}
        if order is not None:
            changes["sort_order"] = SortOrder(order)
        self._criteria = replace(self._criteria, **changes)

    def toggle_folder(self, folder_id: str) -> None:
        self._expansion.toggle(folder_id)

    def toggle_all_folders(self) -> None:
        self._expansion.toggle_all(self._store.folders)

    def begin_folder_creation(self, parent_id: str | None = None) -> None:
        """Remember the parent for the next ``create_folder`` call."""
        self._pending_parent_id = parent_id

    # --- Mutations ---

    async def login(self, email: str, password: str) -> MutationResult:
        self.is_loading = True
        try:
            return await self._sync.login(email, password)
        finally:
            self.is_loading = False

    async def logout(self) -> MutationResult:
        result = await self._sync.logout()
        self._criteria = FilterCriteria()
        self._expansion.clear()
        return result

    async def load(self) -> MutationResult:
        self.is_loading = True
        try:
            return await self._sync.load_all()
        finally:
            self.is_loading = False

    async def add_bookmark(self, bookmark: Bookmark) -> MutationResult:
        return await self._sync.create_bookmark(bookmark)

    async def delete_bookmark(self, bookmark_id: str) -> MutationResult:
        return await self._sync.delete_bookmark(bookmark_id)

    async def save_note(self, bookmark_id: str, content: str) -> MutationResult:
        return await self._sync.update_bookmark_content(bookmark_id, content)

    async def visit(self, bookmark_id: str) -> MutationResult:
        return await self._sync.record_visit(bookmark_id)

    async def create_folder(
        self,
        name: str,
        *,
        icon: str = "folder",
        color: str | None = None,
        parent_id: str | None = None,
    ) -> MutationResult:
        result = await self._sync.create_folder(
            name, icon=icon, color=color, parent_id=parent_id or self._pending_parent_id
        )
        if result.ok:
            self._pending_parent_id = None
        return result

    async def rename_folder(self, folder_id: str, new_name: str) -> MutationResult:
        return await self._sync.rename_folder(folder_id, new_name)

    async def move_folder(self, dragged_id: str, target_id: str) -> MutationResult:
        return await self._sync.move_folder(dragged_id, target_id)

    async def create_tag(self, name: str, color: str) -> MutationResult:
        return await self._sync.create_tag(name, color)

    async def move_tag(self, dragged_id: str, target_id: str) -> MutationResult:
        return await self._sync.reorder_tags(dragged_id, target_id)

    async def flush(self) -> None:
        """Wait for background visit notifications."""
        await self._sync.drain()
