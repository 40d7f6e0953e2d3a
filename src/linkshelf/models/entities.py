"""Domain models for bookmarks, folders and tags.

Entities are immutable; every change produces a new instance through
``dataclasses.replace``. Counts are not part of the entities, they are
derived from the bookmark collection on every read (see ``core.facets``).
The ``to_wire``/``from_wire`` helpers translate to the camelCase records
the bookmark service speaks; ``count`` is written as 0 and ignored on input.
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Folder:
    """A folder in the bookmark tree."""

    id: str
    name: str
    icon: str = "folder"
    color: str | None = None
    parent_id: str | None = None

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "Folder":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            icon=data.get("icon", "folder"),
            color=data.get("color"),
            parent_id=data.get("parentId"),
        )

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "name": self.name, "icon": self.icon, "count": 0}
        if self.color is not None:
            out["color"] = self.color
        if self.parent_id is not None:
            out["parentId"] = self.parent_id
        return out


@dataclass(frozen=True)
class Tag:
    """A tag. Its position in the tag collection is user-visible order."""

    id: str
    name: str
    color: str

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "Tag":
        return cls(id=str(data["id"]), name=data["name"], color=data.get("color", "blue"))

    def to_wire(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "color": self.color, "count": 0}


@dataclass(frozen=True)
class Bookmark:
    """A saved link.

    ``tags`` holds tag names, not ids. Timestamps are epoch milliseconds.
    """

    id: str
    title: str
    url: str
    description: str = ""
    folder_id: str = ""
    tags: tuple[str, ...] = ()
    created_at: str = ""
    created_at_timestamp: int = 0
    visit_count: int = 0
    last_visited: int = 0
    content: str | None = None
    favicon: str | None = None

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "Bookmark":
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            url=data.get("url", ""),
            description=data.get("description", ""),
            folder_id=data.get("folderId", ""),
            tags=tuple(data.get("tags") or ()),
            created_at=data.get("createdAt", ""),
            created_at_timestamp=int(data.get("createdAtTimestamp", 0)),
            visit_count=int(data.get("visitCount") or 0),
            last_visited=int(data.get("lastVisited") or 0),
            content=data.get("content"),
            favicon=data.get("favicon"),
        )

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "description": self.description,
            "folderId": self.folder_id,
            "tags": list(self.tags),
            "createdAt": self.created_at,
            "createdAtTimestamp": self.created_at_timestamp,
            "visitCount": self.visit_count,
            "lastVisited": self.last_visited,
        }
        if self.content is not None:
            out["content"] = self.content
        if self.favicon is not None:
            out["favicon"] = self.favicon
        return out


@dataclass(frozen=True)
class User:
    """The account a session belongs to."""

    id: str
    name: str
    email: str
    avatar: str = ""


@dataclass(frozen=True)
class Session:
    """Result of a successful login."""

    token: str
    user: User

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "Session":
        user = data["user"]
        return cls(
            token=data["token"],
            user=User(
                id=str(user["id"]),
                name=user.get("name", ""),
                email=user.get("email", ""),
                avatar=user.get("avatar", ""),
            ),
        )


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """Uniform envelope returned by every backend operation."""

    success: bool
    data: T | None = None
    message: str | None = None
