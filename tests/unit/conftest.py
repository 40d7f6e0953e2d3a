"""Shared test fixtures."""

import pytest

from linkshelf.core.store import EntityStore
from linkshelf.core.sync.synchronizer import MutationSynchronizer
from linkshelf.models.entities import Bookmark, Folder
from tests.unit.fakes import BOOKMARKS, FOLDERS, TAGS, FakeBackend


@pytest.fixture
def folders() -> list[Folder]:
    return list(FOLDERS)


@pytest.fixture
def bookmarks() -> list[Bookmark]:
    return list(BOOKMARKS)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend(folders=FOLDERS, tags=TAGS, bookmarks=BOOKMARKS)


@pytest.fixture
def store() -> EntityStore:
    """Store pre-filled with the sample folders, tags and bookmarks."""
    s = EntityStore()
    s.replace_folders(FOLDERS)
    s.replace_tags(TAGS)
    s.replace_bookmarks(BOOKMARKS)
    return s


@pytest.fixture
def sync(store: EntityStore, backend: FakeBackend) -> MutationSynchronizer:
    return MutationSynchronizer(store, backend)
