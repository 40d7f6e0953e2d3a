"""Filter and sort bookmarks for display."""

from collections.abc import Callable, Iterable

from linkshelf.config import ROOT_FOLDER_ID
from linkshelf.models.criteria import (
    DateRange,
    FilterCriteria,
    SortOption,
    SortOrder,
    end_of_day,
    floor_epoch_ms,
    start_of_day,
    to_epoch_ms,
)
from linkshelf.models.entities import Bookmark

SORT_KEYS: dict[SortOption, Callable[[Bookmark], int]] = {
    SortOption.CREATED: lambda b: b.created_at_timestamp,
    SortOption.FREQUENT: lambda b: b.visit_count,
    SortOption.RECENT: lambda b: b.last_visited,
}


def matches_folder(bookmark: Bookmark, folder_id: str) -> bool:
    """Exact folder match. Subfolders are not included."""
    return folder_id == ROOT_FOLDER_ID or bookmark.folder_id == folder_id


def matches_search(bookmark: Bookmark, query: str) -> bool:
    """Case-insensitive substring match on title or url."""
    needle = query.lower()
    return needle in bookmark.title.lower() or needle in bookmark.url.lower()


def matches_tags(bookmark: Bookmark, active_tags: Iterable[str]) -> bool:
    """Every active tag must be on the bookmark."""
    return all(t in bookmark.tags for t in active_tags)


def date_bounds(date_range: DateRange) -> tuple[int, int] | None:
    """Inclusive epoch-ms bounds for a date range, or None when unset.

    With only a start, the window is that whole day. With both ends, the
    window runs from the start of the first day up to ``end`` as given.
    """
    if date_range.start is None:
        return None
    lower = to_epoch_ms(start_of_day(date_range.start))
    if date_range.end is None:
        upper = floor_epoch_ms(end_of_day(date_range.start))
    else:
        upper = floor_epoch_ms(date_range.end)
    return lower, upper


def matches_date(bookmark: Bookmark, bounds: tuple[int, int] | None) -> bool:
    if bounds is None:
        return True
    lower, upper = bounds
    return lower <= bookmark.created_at_timestamp <= upper


def visible(bookmarks: Iterable[Bookmark], criteria: FilterCriteria) -> list[Bookmark]:
    """Return the bookmarks matching all criteria, in display order.

    The sort is stable in both directions, so bookmarks with equal keys keep
    their collection order.
    """
    bounds = date_bounds(criteria.date_range)
    result = [
        b
        for b in bookmarks
        if matches_folder(b, criteria.selected_folder_id)
        and matches_search(b, criteria.search_query)
        and matches_tags(b, criteria.active_tags)
        and matches_date(b, bounds)
    ]
    result.sort(
        key=SORT_KEYS[SortOption(criteria.sort_option)],
        reverse=SortOrder(criteria.sort_order) is SortOrder.DESC,
    )
    return result


def has_active_filters(criteria: FilterCriteria) -> bool:
    """True when anything narrows the list beyond the default view."""
    return (
        criteria.selected_folder_id != ROOT_FOLDER_ID
        or criteria.search_query.strip() != ""
        or len(criteria.active_tags) > 0
        or criteria.date_range.start is not None
    )
