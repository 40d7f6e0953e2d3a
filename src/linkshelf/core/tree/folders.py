"""Folder tree navigation: ancestry checks, breadcrumbs, subfolders."""

from collections import deque
from collections.abc import Iterable, Sequence

from linkshelf.config import ROOT_FOLDER_ID
from linkshelf.models.entities import Folder


def _index(folders: Iterable[Folder]) -> dict[str, Folder]:
    return {f.id: f for f in folders}


def ancestor_chain(folders: Sequence[Folder], folder_id: str) -> tuple[Folder, ...]:
    """Return the folder and its ancestors, nearest first.

    The walk stops at the root sentinel (excluded), at a folder without a
    parent, at a dangling parent id, or when a folder repeats. The last rule
    bounds the walk to ``len(folders)`` steps on a corrupted tree.
    """
    by_id = _index(folders)
    chain: list[Folder] = []
    seen: set[str] = set()
    current = by_id.get(folder_id)
    while current is not None and current.id not in seen:
        if current.id == ROOT_FOLDER_ID:
            break
        seen.add(current.id)
        chain.append(current)
        if not current.parent_id:
            break
        current = by_id.get(current.parent_id)
    return tuple(chain)


def is_ancestor_or_self(folders: Sequence[Folder], candidate_id: str, folder_id: str) -> bool:
    """True when ``candidate_id`` is ``folder_id`` or one of its ancestors."""
    if candidate_id == folder_id:
        return True
    return any(f.id == candidate_id for f in ancestor_chain(folders, folder_id))


def can_move(folders: Sequence[Folder], dragged_id: str, target_id: str) -> bool:
    """Check that reparenting ``dragged_id`` under ``target_id`` keeps the tree acyclic."""
    if dragged_id == ROOT_FOLDER_ID:
        return False
    return not is_ancestor_or_self(folders, dragged_id, target_id)


def breadcrumb_path(folders: Sequence[Folder], folder_id: str) -> tuple[Folder, ...]:
    """Get the path from the top of the tree down to ``folder_id`` (inclusive).

    Empty for the root sentinel and for unknown ids.
    """
    return tuple(reversed(ancestor_chain(folders, folder_id)))


def subfolders_of(folders: Iterable[Folder], parent_id: str) -> tuple[Folder, ...]:
    """Direct children of ``parent_id``, in collection order."""
    return tuple(f for f in folders if f.parent_id == parent_id)


def top_level_folders(folders: Iterable[Folder]) -> tuple[Folder, ...]:
    """Folders shown at the first level of the sidebar."""
    return tuple(
        f
        for f in folders
        if f.id != ROOT_FOLDER_ID and (not f.parent_id or f.parent_id == ROOT_FOLDER_ID)
    )


def subtree_ids(folders: Sequence[Folder], folder_id: str) -> list[str]:
    """The folder id followed by all descendant ids, breadth-first."""
    children: dict[str, list[str]] = {}
    for f in folders:
        if f.parent_id:
            children.setdefault(f.parent_id, []).append(f.id)

    out: list[str] = []
    seen: set[str] = set()
    queue = deque([folder_id])
    while queue:
        current = queue.popleft()
        if current in seen:
            continue
        seen.add(current)
        out.append(current)
        queue.extend(children.get(current, ()))
    return out


class ExpansionState:
    """Which folders are expanded in the tree view."""

    def __init__(self, expanded: Iterable[str] = ()) -> None:
        self._expanded: set[str] = set(expanded)

    @property
    def expanded(self) -> frozenset[str]:
        return frozenset(self._expanded)

    def is_expanded(self, folder_id: str) -> bool:
        return folder_id in self._expanded

    def expand(self, folder_id: str) -> None:
        self._expanded.add(folder_id)

    def collapse(self, folder_id: str) -> None:
        self._expanded.discard(folder_id)

    def toggle(self, folder_id: str) -> None:
        if folder_id in self._expanded:
            self._expanded.discard(folder_id)
        else:
            self._expanded.add(folder_id)

    def reveal(self, folders: Iterable[Folder], selected_id: str) -> None:
        """Expand the direct parent of a newly selected folder.

        Only the immediate parent is opened, never the full ancestor chain,
        and never the root sentinel.
        """
        selected = _index(folders).get(selected_id)
        if selected is not None and selected.parent_id and selected.parent_id != ROOT_FOLDER_ID:
            self._expanded.add(selected.parent_id)

    def toggle_all(self, folders: Iterable[Folder]) -> None:
        """Collapse everything if anything is open, else expand every parent folder.

        The root sentinel is never expanded.
        """
        if self._expanded:
            self._expanded.clear()
            return
        folders = list(folders)
        parent_ids = {f.parent_id for f in folders if f.parent_id}
        self._expanded = {f.id for f in folders if f.id in parent_ids and f.id != ROOT_FOLDER_ID}

    def clear(self) -> None:
        self._expanded.clear()
