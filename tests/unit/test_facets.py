"""Tests for folder and tag counts."""

from linkshelf.core.facets import folder_counts, folder_facets, tag_counts, tag_facets
from linkshelf.core.filtering.pipeline import visible
from linkshelf.models.criteria import FilterCriteria
from linkshelf.models.entities import Bookmark, Folder, Tag
from tests.unit.fakes import TAGS


def test_root_count_is_total_regardless_of_filters(
    folders: list[Folder], bookmarks: list[Bookmark]
) -> None:
    counts = folder_counts(folders, bookmarks)
    assert counts["all"] == len(bookmarks)


def test_folder_counts_are_exact_not_subtree(folders: list[Folder], bookmarks: list[Bookmark]) -> None:
    counts = folder_counts(folders, bookmarks)
    assert counts == {"all": 3, "work": 0, "tech": 1, "frontend": 0, "react": 1, "reading": 1}


def test_folder_facets_keep_folder_order(folders: list[Folder], bookmarks: list[Bookmark]) -> None:
    assert [f.id for f, _ in folder_facets(folders, bookmarks)] == [f.id for f in folders]


def test_tag_counts_follow_filtered_list(bookmarks: list[Bookmark]) -> None:
    shown = visible(bookmarks, FilterCriteria(active_tags=("B",)))
    assert tag_counts(TAGS, shown) == {"a": 1, "b": 1, "c": 0}


def test_duplicate_tag_on_bookmark_counts_once() -> None:
    tags = [Tag(id="a", name="A", color="blue")]
    b = Bookmark(id="x", title="x", url="u", tags=("A", "A"))
    assert tag_counts(tags, [b]) == {"a": 1}


def test_zero_count_tags_hidden_only_when_filtering(bookmarks: list[Bookmark]) -> None:
    shown = visible(bookmarks, FilterCriteria(selected_folder_id="reading"))
    hidden = tag_facets(TAGS, shown, filters_active=True)
    assert [(t.name, n) for t, n in hidden] == [("C", 1)]

    everything = tag_facets(TAGS, visible(bookmarks, FilterCriteria()), filters_active=False)
    assert [(t.name, n) for t, n in everything] == [("A", 2), ("B", 1), ("C", 1)]
