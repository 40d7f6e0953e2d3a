"""Tests for Library — the single owner of view state and entities."""

import asyncio
from dataclasses import replace
from datetime import datetime

import pytest

from linkshelf.core.sync.synchronizer import MutationStatus
from linkshelf.library import Library
from linkshelf.models.criteria import SortOption, SortOrder
from tests.unit.fakes import FakeBackend


@pytest.fixture
def library(backend: FakeBackend) -> Library:
    lib = Library(backend)
    assert asyncio.run(lib.load()).ok
    return lib


def _ids(library: Library) -> list[str]:
    return [b.id for b in library.visible_bookmarks()]


def test_default_view_is_newest_first(library: Library) -> None:
    assert _ids(library) == ["b1", "b3", "b2"]
    assert not library.has_active_filters()


def test_select_folder_filters_and_reveals_parent(library: Library) -> None:
    library.select_folder("react")
    assert _ids(library) == ["b2"]
    assert library.expanded_folders == frozenset({"frontend"})
    assert [f.name for f in library.breadcrumbs()] == ["Tech", "Frontend", "React"]


def test_folder_counts_ignore_filters(library: Library) -> None:
    library.set_search("python")
    counts = {f.id: n for f, n in library.folder_facets()}
    assert counts["all"] == 3
    assert counts["react"] == 1


def test_tag_facets_follow_filters(library: Library) -> None:
    library.set_search("python")
    assert [(t.name, n) for t, n in library.tag_facets()] == [("A", 1), ("B", 1)]


def test_sort_and_tags(library: Library) -> None:
    library.set_sort(SortOption.RECENT, SortOrder.ASC)
    assert _ids(library) == ["b2", "b3", "b1"]
    library.toggle_tag("A")
    assert _ids(library) == ["b2", "b1"]
    library.clear_tags()
    assert len(_ids(library)) == 3


def test_set_sort_keeps_order_when_omitted(library: Library) -> None:
    library.set_sort("frequent")
    assert library.criteria.sort_order is SortOrder.DESC
    assert _ids(library) == ["b2", "b1", "b3"]


def test_select_day_narrows_by_creation_date(backend: FakeBackend) -> None:
    day = datetime(2024, 5, 1)
    backend.bookmarks[0] = replace(
        backend.bookmarks[0], created_at_timestamp=int(day.timestamp() * 1000) + 60_000
    )
    lib = Library(backend)
    asyncio.run(lib.load())

    lib.select_day(day.date())

    assert _ids(lib) == ["b1"]
    assert lib.has_active_filters()


def test_default_folder_for_new_bookmark(library: Library) -> None:
    assert library.default_folder_for_new_bookmark() is None
    library.select_folder("work")
    assert library.default_folder_for_new_bookmark() == "work"
    assert library.default_folder_for_new_bookmark("reading") == "reading"


def test_create_folder_uses_pending_parent_once(library: Library, backend: FakeBackend) -> None:
    library.begin_folder_creation("tech")
    asyncio.run(library.create_folder("Python"))
    asyncio.run(library.create_folder("Loose"))

    parents = [args[0].parent_id for args in backend.called("create_folder")]
    assert parents == ["tech", "all"]
    assert [f.name for f in library.subfolders("tech")] == ["Frontend", "Python"]


def test_move_tag_and_visit(library: Library) -> None:
    assert asyncio.run(library.move_tag("c", "a")).ok
    assert [t.name for t in library.tags] == ["C", "A", "B"]

    async def visit() -> int:
        result = await library.visit("b3")
        await library.flush()
        return result.data.visit_count

    assert asyncio.run(visit()) == 2


def test_rename_and_move_guards(library: Library) -> None:
    assert asyncio.run(library.rename_folder("all", "x")).status is MutationStatus.REJECTED
    assert asyncio.run(library.move_folder("frontend", "react")).status is MutationStatus.REJECTED
    assert asyncio.run(library.move_folder("react", "all")).ok
    assert [f.id for f in library.top_level_folders()] == ["work", "tech", "react", "reading"]


def test_logout_resets_view_state(library: Library) -> None:
    library.select_folder("react")
    library.toggle_tag("A")

    asyncio.run(library.logout())

    assert library.bookmarks == ()
    assert library.criteria.selected_folder_id == "all"
    assert library.criteria.active_tags == ()
    assert library.expanded_folders == frozenset()
    assert library.session is None


def test_toggle_all_folders(library: Library) -> None:
    library.toggle_all_folders()
    assert library.expanded_folders == frozenset({"tech", "frontend"})
    library.toggle_all_folders()
    assert library.expanded_folders == frozenset()


def test_subtree(library: Library) -> None:
    assert library.subtree("tech") == ["tech", "frontend", "react"]
    assert library.subtree("reading") == ["reading"]
