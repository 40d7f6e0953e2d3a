"""Per-folder and per-tag bookmark counts."""

from collections import Counter
from collections.abc import Iterable, Sequence

from linkshelf.config import ROOT_FOLDER_ID
from linkshelf.models.entities import Bookmark, Folder, Tag


def folder_counts(folders: Iterable[Folder], bookmarks: Sequence[Bookmark]) -> dict[str, int]:
    """Count bookmarks per folder over the whole, unfiltered collection.

    The root sentinel counts everything; other folders count only their
    direct bookmarks.
    """
    per_folder = Counter(b.folder_id for b in bookmarks)
    return {
        f.id: len(bookmarks) if f.id == ROOT_FOLDER_ID else per_folder.get(f.id, 0)
        for f in folders
    }


def tag_counts(tags: Iterable[Tag], visible_bookmarks: Iterable[Bookmark]) -> dict[str, int]:
    """Count visible bookmarks per tag, keyed by tag id and matched by name."""
    per_name: Counter[str] = Counter()
    for b in visible_bookmarks:
        per_name.update(set(b.tags))
    return {t.id: per_name.get(t.name, 0) for t in tags}


def folder_facets(
    folders: Sequence[Folder], bookmarks: Sequence[Bookmark]
) -> list[tuple[Folder, int]]:
    counts = folder_counts(folders, bookmarks)
    return [(f, counts[f.id]) for f in folders]


def tag_facets(
    tags: Sequence[Tag],
    visible_bookmarks: Sequence[Bookmark],
    *,
    filters_active: bool,
) -> list[tuple[Tag, int]]:
    """Tags with their counts, in display order.

    While any filter is active, tags without a visible bookmark are hidden.
    """
    counts = tag_counts(tags, visible_bookmarks)
    return [(t, counts[t.id]) for t in tags if not filters_active or counts[t.id] > 0]
