"""Bookmark organization engine: folder tree, filtered views, synced mutations."""

from linkshelf.api import HttpBackend
from linkshelf.library import Library
from linkshelf.memory_backend import InMemoryBackend
from linkshelf.protocols import BackendProtocol

__all__ = ["BackendProtocol", "HttpBackend", "InMemoryBackend", "Library"]
