"""REST client for the bookmark service."""

import asyncio
import json
from collections.abc import Callable
from typing import Any, TypeVar

import requests
from loguru import logger

from linkshelf.config import API_BASE_URL, API_TOKEN_FILES, REQUEST_TIMEOUT
from linkshelf.errors import BackendError
from linkshelf.models.entities import ApiResponse, Bookmark, Folder, Session, Tag

T = TypeVar("T")


def _read_token() -> str | None:
    for token_path in API_TOKEN_FILES:
        try:
            return token_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            pass
    return None


class HttpBackend:
    """Bookmark service over HTTP.

    Blocking ``requests`` calls run in a worker thread so the event loop
    stays free while a request is in flight.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        *,
        token: str | None = None,
        timeout: float | None = REQUEST_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.sess = requests.Session()
        self.token = token if token is not None else _read_token()
        logger.debug(
            "API ready: base_url {!r}, token {}, timeout {!r}",
            self.base_url,
            "present" if self.token else "absent",
            self.timeout,
        )

    def call(
        self,
        method: str,
        path: str,
        *,
        payload: Any = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Invoke an endpoint and return the decoded envelope."""
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        logger.debug("Making request: {} {!r} {}", method, path, repr(payload)[:32])
        try:
            r = self.sess.request(
                method,
                f"{self.base_url}/{path}",
                data=json.dumps(payload) if payload is not None else None,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
            r.raise_for_status()
            rv = r.json()
        except requests.RequestException as e:
            msg = f"API call failed: ({method} {path!r}) -> {e}"
            raise BackendError(msg) from e
        except ValueError as e:
            msg = f"API call returned invalid JSON: ({method} {path!r})"
            raise BackendError(msg) from e

        if not isinstance(rv, dict) or "success" not in rv:
            msg = f"API call returned no envelope: ({method} {path!r}) -> {rv!r}"
            raise BackendError(msg)
        return rv

    async def _request(
        self,
        method: str,
        path: str,
        convert: Callable[[Any], T] | None = None,
        *,
        payload: Any = None,
        params: dict[str, Any] | None = None,
    ) -> ApiResponse[T]:
        rv = await asyncio.to_thread(self.call, method, path, payload=payload, params=params)
        success = bool(rv["success"])
        data = rv.get("data")
        if success and convert is not None and data is not None:
            try:
                data = convert(data)
            except (KeyError, TypeError, ValueError) as e:
                msg = f"API call returned malformed data: ({method} {path!r}) -> {e!r}"
                raise BackendError(msg) from e
        return ApiResponse(success=success, data=data, message=rv.get("message"))

    async def login(self, email: str, password: str) -> ApiResponse[Session]:
        res = await self._request(
            "POST", "auth/login", Session.from_wire, payload={"email": email, "password": password}
        )
        if res.success and res.data is not None:
            self.token = res.data.token
        return res

    async def logout(self) -> ApiResponse[None]:
        res: ApiResponse[None] = await self._request("POST", "auth/logout")
        self.token = None
        return res

    async def get_bookmarks(self, params: dict[str, Any] | None = None) -> ApiResponse[list[Bookmark]]:
        return await self._request(
            "GET", "bookmarks", lambda rows: [Bookmark.from_wire(r) for r in rows], params=params
        )

    async def create_bookmark(self, bookmark: Bookmark) -> ApiResponse[Bookmark]:
        return await self._request("POST", "bookmarks", Bookmark.from_wire, payload=bookmark.to_wire())

    async def update_bookmark(self, bookmark_id: str, changes: dict[str, Any]) -> ApiResponse[Bookmark]:
        return await self._request(
            "PUT", f"bookmarks/{bookmark_id}", Bookmark.from_wire, payload=changes
        )

    async def delete_bookmark(self, bookmark_id: str) -> ApiResponse[str]:
        return await self._request("DELETE", f"bookmarks/{bookmark_id}", str)

    async def increment_visit(self, bookmark_id: str) -> ApiResponse[None]:
        return await self._request("POST", f"bookmarks/{bookmark_id}/visit")

    async def get_folders(self) -> ApiResponse[list[Folder]]:
        return await self._request("GET", "folders", lambda rows: [Folder.from_wire(r) for r in rows])

    async def create_folder(self, folder: Folder) -> ApiResponse[Folder]:
        return await self._request("POST", "folders", Folder.from_wire, payload=folder.to_wire())

    async def update_folder(self, folder_id: str, changes: dict[str, Any]) -> ApiResponse[Folder]:
        return await self._request("PUT", f"folders/{folder_id}", Folder.from_wire, payload=changes)

    async def move_folder(self, folder_id: str, new_parent_id: str) -> ApiResponse[None]:
        return await self._request(
            "PUT", f"folders/{folder_id}/move", payload={"parentId": new_parent_id}
        )

    async def get_tags(self) -> ApiResponse[list[Tag]]:
        return await self._request("GET", "tags", lambda rows: [Tag.from_wire(r) for r in rows])

    async def create_tag(self, tag: Tag) -> ApiResponse[Tag]:
        return await self._request("POST", "tags", Tag.from_wire, payload=tag.to_wire())

    async def reorder_tags(self, tags: list[Tag]) -> ApiResponse[None]:
        return await self._request(
            "PUT", "tags/reorder", payload={"tags": [t.to_wire() for t in tags]}
        )
