"""Tests for the in-process demo backend."""

import asyncio

from linkshelf.config import ROOT_FOLDER_ID
from linkshelf.memory_backend import InMemoryBackend, demo_bookmarks, demo_folders, demo_tags
from linkshelf.models.entities import Tag
from linkshelf.protocols import BackendProtocol


def test_satisfies_backend_protocol() -> None:
    assert isinstance(InMemoryBackend(), BackendProtocol)


def test_demo_data_is_consistent() -> None:
    folder_ids = {f.id for f in demo_folders()}
    tag_names = {t.name for t in demo_tags()}
    assert ROOT_FOLDER_ID in folder_ids
    for b in demo_bookmarks(now_ms=10**13):
        assert b.folder_id in folder_ids
        assert set(b.tags) <= tag_names


def test_demo_timestamps_are_relative_to_now() -> None:
    rows = demo_bookmarks(now_ms=1_000_000_000_000)
    assert all(b.created_at_timestamp < 1_000_000_000_000 for b in rows)
    assert max(rows, key=lambda b: b.created_at_timestamp).id == "b1"


def test_unseeded_backend_is_empty() -> None:
    res = asyncio.run(InMemoryBackend(seed=False).get_bookmarks())
    assert res.success and res.data == []


def test_writes_persist() -> None:
    backend = InMemoryBackend()

    async def scenario() -> None:
        await backend.update_bookmark("b1", {"content": "hello"})
        await backend.move_folder("course", "tech")
        await backend.reorder_tags([Tag(id="2", name="design", color="purple")])
        await backend.delete_bookmark("b6")

    asyncio.run(scenario())

    b1 = next(b for b in backend.bookmarks if b.id == "b1")
    assert b1.content == "hello"
    assert next(f for f in backend.folders if f.id == "course").parent_id == "tech"
    assert [t.name for t in backend.tags] == ["design"]
    assert all(b.id != "b6" for b in backend.bookmarks)


def test_update_unknown_bookmark_is_refused() -> None:
    res = asyncio.run(InMemoryBackend().update_bookmark("nope", {"title": "x"}))
    assert not res.success
    assert res.message == "Not found"
