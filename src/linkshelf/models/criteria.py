"""Transient filter criteria for the bookmark view."""

from dataclasses import dataclass, replace
from datetime import date, datetime, time
from enum import StrEnum

from linkshelf.config import ROOT_FOLDER_ID


class SortOption(StrEnum):
    CREATED = "created"
    FREQUENT = "frequent"
    RECENT = "recent"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


def start_of_day(moment: datetime) -> datetime:
    """Midnight of the same calendar day, keeping tzinfo."""
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)


def end_of_day(moment: datetime) -> datetime:
    """23:59:59.999 of the same calendar day, keeping tzinfo."""
    return datetime.combine(moment.date(), time(23, 59, 59, 999000), tzinfo=moment.tzinfo)


def to_epoch_ms(moment: datetime) -> int:
    """Convert to epoch milliseconds. Naive datetimes are local time."""
    return round(moment.timestamp() * 1000)


def floor_epoch_ms(moment: datetime) -> int:
    """Epoch milliseconds, truncating sub-millisecond precision.

    Whole seconds convert exactly, so the microseconds are added as integers.
    """
    return to_epoch_ms(moment.replace(microsecond=0)) + moment.microsecond // 1000


def _as_datetime(day: date | datetime) -> datetime:
    if isinstance(day, datetime):
        return day
    return datetime.combine(day, time.min)


@dataclass(frozen=True)
class DateRange:
    """Creation-date window. ``end`` is compared exactly as given."""

    start: datetime | None = None
    end: datetime | None = None

    def select_day(self, day: date | datetime) -> "DateRange":
        """Apply a calendar click and return the new range.

        A click with no start, or on a complete range, starts a new single-day
        range. A click before the current start restarts at that day. Any
        other click closes the range at the end of the clicked day.
        """
        picked = start_of_day(_as_datetime(day))
        if self.start is None or self.end is not None:
            return DateRange(start=picked)
        if picked < start_of_day(self.start):
            return DateRange(start=picked)
        return replace(self, end=end_of_day(picked))


@dataclass(frozen=True)
class FilterCriteria:
    """Everything that narrows and orders the visible bookmark list."""

    selected_folder_id: str = ROOT_FOLDER_ID
    search_query: str = ""
    active_tags: tuple[str, ...] = ()
    date_range: DateRange = DateRange()
    sort_option: SortOption = SortOption.CREATED
    sort_order: SortOrder = SortOrder.DESC

    def toggle_tag(self, name: str) -> "FilterCriteria":
        """Add the tag to the active set, or drop it if already active."""
        if name in self.active_tags:
            return replace(self, active_tags=tuple(t for t in self.active_tags if t != name))
        return replace(self, active_tags=(*self.active_tags, name))

    def clear_tags(self) -> "FilterCriteria":
        return replace(self, active_tags=())
