"""Tests for the linkshelf CLI against the demo backend."""

import json
from collections.abc import Iterator

import pytest
from loguru import logger
from typer.testing import CliRunner

from linkshelf.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _quiet_logs(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep log lines out of command output and drop the sink afterwards."""
    monkeypatch.setenv("LINKSHELF_LOG_LEVEL", "WARNING")
    yield
    logger.remove()


def test_bookmarks_json_sorted_by_visits() -> None:
    result = runner.invoke(
        app, ["--demo", "bookmarks", "--folder", "tech", "--sort", "frequent", "--json"]
    )
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["count"] == 4
    assert [b["id"] for b in data["bookmarks"]] == ["b2", "b5", "b1", "b4"]


def test_bookmarks_tag_filter_requires_all_tags() -> None:
    result = runner.invoke(app, ["--demo", "bookmarks", "-t", "dev", "-t", "CSS", "--json"])
    assert result.exit_code == 0, result.output
    assert {b["id"] for b in json.loads(result.output)["bookmarks"]} == {"b1", "b4"}


def test_folders_shows_counts() -> None:
    result = runner.invoke(app, ["--demo", "folders"])
    assert result.exit_code == 0, result.output
    assert "My bookmarks (6)" in result.output
    assert "Tech docs (4)" in result.output
    assert "Online courses (0)" in result.output


def test_tags_hide_empty_when_filtered() -> None:
    result = runner.invoke(app, ["--demo", "tags", "--folder", "reading"])
    assert result.exit_code == 0, result.output
    assert "design (2)" in result.output
    assert "dev" not in result.output


def test_path_prints_breadcrumbs() -> None:
    result = runner.invoke(app, ["--demo", "path", "tech"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "Home > Tech docs"


def test_move_root_is_rejected() -> None:
    result = runner.invoke(app, ["--demo", "move-folder", "all", "work"])
    assert result.exit_code == 1
    assert "Move rejected." in result.output


def test_move_folder_applies() -> None:
    result = runner.invoke(app, ["--demo", "move-folder", "course", "tech"])
    assert result.exit_code == 0, result.output
    assert "Move applied." in result.output


def test_add_bookmark() -> None:
    result = runner.invoke(
        app, ["--demo", "add", "https://htmx.org", "--title", "htmx", "-f", "tech", "-t", "hypermedia"]
    )
    assert result.exit_code == 0, result.output
    assert "Bookmark added." in result.output


def test_visit_counts_up() -> None:
    result = runner.invoke(app, ["--demo", "visit", "b2"])
    assert result.exit_code == 0, result.output
    assert "React Documentation: 43 visits" in result.output


def test_visit_unknown_bookmark_fails() -> None:
    result = runner.invoke(app, ["--demo", "visit", "nope"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_to_without_from_is_refused() -> None:
    result = runner.invoke(app, ["--demo", "bookmarks", "--to", "2024-05-01"])
    assert result.exit_code == 2
    assert "--to" in result.output
