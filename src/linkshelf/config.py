"""Configuration constants for linkshelf."""

import os
from pathlib import Path

# Synthetic folder that stands for "all bookmarks".
ROOT_FOLDER_ID: str = "all"

# Base URL of the bookmark service REST API.
API_BASE_URL: str = os.environ.get("LINKSHELF_API_URL", "http://localhost:8080/api").rstrip("/")

# API token location. First file found is used; a token from login takes precedence.
API_TOKEN_FILES: list[Path] = [
    Path("~/.config/linkshelf-token.txt").expanduser(),
    Path("~/.config/secret/linkshelf-token.txt").expanduser(),
]

# Seconds to wait for the API. Unset means wait forever.
_timeout_env = os.environ.get("LINKSHELF_REQUEST_TIMEOUT")
REQUEST_TIMEOUT: float | None = float(_timeout_env) if _timeout_env else None

# Tag colour palette. The neutral colour is never picked for auto-created tags.
TAG_COLORS: tuple[str, ...] = (
    "blue",
    "purple",
    "green",
    "orange",
    "red",
    "indigo",
    "pink",
    "cyan",
    "amber",
    "slate",
)
NEUTRAL_TAG_COLOR: str = "slate"
