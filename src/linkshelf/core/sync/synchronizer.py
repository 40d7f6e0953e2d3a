"""Apply mutations to the entity store and the backend, keeping them consistent.

Two strategies are used:

* confirm-then-apply: the backend is asked first and the store only changes
  when it answers ``success: true``;
* optimistic: the store changes immediately through an ``OptimisticCommand``
  and is rolled back from a snapshot when the backend refuses.

Transport errors (``BackendError``) are logged and treated as a refusal.
Nothing is retried. Every response is checked against the store's session
epoch; answers that arrive after a logout or re-login are dropped.
"""

import asyncio
import random
import string
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeVar

from loguru import logger

from linkshelf.config import NEUTRAL_TAG_COLOR, ROOT_FOLDER_ID, TAG_COLORS
from linkshelf.core.store import EntityStore
from linkshelf.core.sync.commands import OptimisticCommand, RecordVisitCommand, ReorderTagsCommand
from linkshelf.core.tree.folders import can_move
from linkshelf.errors import BackendError
from linkshelf.models.entities import ApiResponse, Bookmark, Folder, Session, Tag
from linkshelf.protocols import BackendProtocol

T = TypeVar("T")

_ID_ALPHABET = string.ascii_lowercase + string.digits


class MutationStatus(StrEnum):
    APPLIED = "applied"
    REJECTED = "rejected"
    FAILED = "failed"
    STALE = "stale"


@dataclass(frozen=True)
class MutationResult:
    """Outcome of one synchronizer operation.

    ``rejected`` means a local precondition failed and the backend was never
    contacted. ``failed`` covers ``success: false`` and transport errors.
    ``stale`` means the answer belonged to a session that has since ended.
    """

    status: MutationStatus
    message: str | None = None
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.status is MutationStatus.APPLIED


def _rejected(message: str) -> MutationResult:
    logger.info("Rejected: {}", message)
    return MutationResult(MutationStatus.REJECTED, message)


class MutationSynchronizer:
    """Runs every write against the store and the backend."""

    def __init__(
        self,
        store: EntityStore,
        backend: BackendProtocol,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self.backend = backend
        self.session: Session | None = None
        self._rng = rng or random.Random()
        self._reorder_lock = asyncio.Lock()
        self._background: set[asyncio.Task[Any]] = set()

    def new_id(self) -> str:
        """Client-side id: nine random base-36 characters."""
        return "".join(self._rng.choice(_ID_ALPHABET) for _ in range(9))

    def random_tag_color(self) -> str:
        return self._rng.choice([c for c in TAG_COLORS if c != NEUTRAL_TAG_COLOR])

    # --- Plumbing ---

    async def _send(self, label: str, request: Awaitable[ApiResponse[T]]) -> ApiResponse[T]:
        logger.debug("Sending {}", label)
        try:
            res = await request
        except BackendError as e:
            logger.warning("{} failed: {}", label, e)
            return ApiResponse(success=False)
        if not res.success:
            logger.info("{} refused by backend: {}", label, res.message or "no message")
        return res

    def _is_stale(self, epoch: int, label: str) -> bool:
        if epoch != self.store.epoch:
            logger.info("Dropping {} response from an ended session", label)
            return True
        return False

    async def _confirm(
        self,
        label: str,
        request: Awaitable[ApiResponse[T]],
        apply: Callable[[ApiResponse[T]], Any],
    ) -> MutationResult:
        """Confirm-then-apply: change the store only after ``success: true``."""
        epoch = self.store.epoch
        res = await self._send(label, request)
        if self._is_stale(epoch, label):
            return MutationResult(MutationStatus.STALE)
        if not res.success:
            return MutationResult(MutationStatus.FAILED, res.message)
        return MutationResult(MutationStatus.APPLIED, data=apply(res))

    async def _settle(
        self,
        label: str,
        command: OptimisticCommand[Any],
        snapshot: Any,
        request: Awaitable[ApiResponse[Any]],
        epoch: int,
        *,
        rollback_on_failure: bool,
    ) -> MutationResult:
        res = await self._send(label, request)
        if self._is_stale(epoch, label):
            return MutationResult(MutationStatus.STALE)
        if res.success:
            return MutationResult(MutationStatus.APPLIED)
        if rollback_on_failure:
            logger.info("Rolling back {}", label)
            command.rollback(snapshot)
        return MutationResult(MutationStatus.FAILED, res.message)

    async def _run_optimistic(
        self,
        label: str,
        command: OptimisticCommand[Any],
        send: Callable[[], Awaitable[ApiResponse[Any]]],
    ) -> MutationResult:
        epoch = self.store.epoch
        snapshot = command.snapshot()
        command.apply()
        return await self._settle(
            label, command, snapshot, send(), epoch, rollback_on_failure=True
        )

    async def drain(self) -> None:
        """Wait for fire-and-forget notifications still in flight."""
        while self._background:
            await asyncio.gather(*list(self._background))

    # --- Session ---

    async def login(self, email: str, password: str) -> MutationResult:
        res = await self._send("login", self.backend.login(email, password))
        if not res.success or res.data is None:
            return MutationResult(MutationStatus.FAILED, res.message)
        self.store.reset()
        self.session = res.data
        logger.info("Logged in as {}", res.data.user.email)
        await self.load_all()
        return MutationResult(MutationStatus.APPLIED, data=res.data)

    async def logout(self) -> MutationResult:
        """End the session and drop local data.

        The store is cleared even if the backend call fails, and the epoch
        advances so late answers to older requests are discarded.
        """
        res = await self._send("logout", self.backend.logout())
        self.store.reset()
        self.session = None
        status = MutationStatus.APPLIED if res.success else MutationStatus.FAILED
        return MutationResult(status, res.message)

    async def load_all(self) -> MutationResult:
        """Fetch all collections concurrently; failed ones stay untouched."""
        epoch = self.store.epoch
        folders_res, tags_res, bookmarks_res = await asyncio.gather(
            self._send("load folders", self.backend.get_folders()),
            self._send("load tags", self.backend.get_tags()),
            self._send("load bookmarks", self.backend.get_bookmarks()),
        )
        if self._is_stale(epoch, "initial load"):
            return MutationResult(MutationStatus.STALE)

        failed: list[str] = []
        for name, res, replace_with in (
            ("folders", folders_res, self.store.replace_folders),
            ("tags", tags_res, self.store.replace_tags),
            ("bookmarks", bookmarks_res, self.store.replace_bookmarks),
        ):
            if res.success and res.data is not None:
                replace_with(res.data)
            else:
                failed.append(name)

        logger.info(
            "Loaded {} folders, {} tags, {} bookmarks",
            len(self.store.folders),
            len(self.store.tags),
            len(self.store.bookmarks),
        )
        if failed:
            return MutationResult(MutationStatus.FAILED, f"Could not load {', '.join(failed)}")
        return MutationResult(MutationStatus.APPLIED)

    # --- Bookmarks ---

    async def create_bookmark(self, bookmark: Bookmark) -> MutationResult:
        """Create missing tags, then the bookmark itself.

        Tags named by the bookmark but absent from the tag collection are
        created concurrently; the ones the backend accepts are appended. The
        bookmark is created whether or not every tag made it, and is
        prepended to the collection once confirmed.
        """
        epoch = self.store.epoch
        existing = {t.name for t in self.store.tags}
        missing = [n for n in dict.fromkeys(bookmark.tags) if n not in existing]
        if missing:
            new_tags = [Tag(id=self.new_id(), name=n, color=self.random_tag_color()) for n in missing]
            results = await asyncio.gather(
                *(self._send(f"create tag {t.name!r}", self.backend.create_tag(t)) for t in new_tags)
            )
            if self._is_stale(epoch, "create tags"):
                return MutationResult(MutationStatus.STALE)
            created = [r.data for r in results if r.success and r.data is not None]
            self.store.append_tags(created)

        def apply(res: ApiResponse[Bookmark]) -> Bookmark:
            saved = res.data if res.data is not None else bookmark
            self.store.prepend_bookmark(saved)
            return saved

        return await self._confirm(
            f"create bookmark {bookmark.id}", self.backend.create_bookmark(bookmark), apply
        )

    async def delete_bookmark(self, bookmark_id: str) -> MutationResult:
        return await self._confirm(
            f"delete bookmark {bookmark_id}",
            self.backend.delete_bookmark(bookmark_id),
            lambda _res: self.store.remove_bookmark(bookmark_id),
        )

    async def update_bookmark_content(self, bookmark_id: str, content: str) -> MutationResult:
        return await self._confirm(
            f"update content of {bookmark_id}",
            self.backend.update_bookmark(bookmark_id, {"content": content}),
            lambda _res: self.store.update_bookmark(bookmark_id, content=content),
        )

    async def record_visit(self, bookmark_id: str, *, at_ms: int | None = None) -> MutationResult:
        """Count a visit locally at once and notify the backend in the background.

        The local change is never reverted; backend failures are only logged.
        """
        command = RecordVisitCommand(self.store, bookmark_id, at_ms=at_ms)
        if not command.is_applicable():
            return _rejected(f"unknown bookmark {bookmark_id}")

        epoch = self.store.epoch
        snapshot = command.snapshot()
        command.apply()
        task = asyncio.create_task(
            self._settle(
                f"record visit {bookmark_id}",
                command,
                snapshot,
                self.backend.increment_visit(bookmark_id),
                epoch,
                rollback_on_failure=False,
            )
        )
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return MutationResult(MutationStatus.APPLIED, data=self.store.find_bookmark(bookmark_id))

    # --- Folders ---

    async def create_folder(
        self,
        name: str,
        *,
        icon: str = "folder",
        color: str | None = None,
        parent_id: str | None = None,
    ) -> MutationResult:
        folder = Folder(
            id=self.new_id(),
            name=name,
            icon=icon,
            color=color,
            parent_id=parent_id or ROOT_FOLDER_ID,
        )

        def apply(res: ApiResponse[Folder]) -> Folder:
            saved = res.data if res.data is not None else folder
            self.store.add_folder(saved)
            return saved

        return await self._confirm(f"create folder {name!r}", self.backend.create_folder(folder), apply)

    async def rename_folder(self, folder_id: str, new_name: str) -> MutationResult:
        if folder_id == ROOT_FOLDER_ID:
            return _rejected("the root folder cannot be renamed")
        return await self._confirm(
            f"rename folder {folder_id}",
            self.backend.update_folder(folder_id, {"name": new_name}),
            lambda _res: self.store.update_folder(folder_id, name=new_name),
        )

    async def move_folder(self, dragged_id: str, target_id: str) -> MutationResult:
        """Reparent a folder once the backend agrees.

        Moves that would put a folder inside itself or its own subtree are
        rejected without contacting the backend.
        """
        if not can_move(self.store.folders, dragged_id, target_id):
            return _rejected(f"moving {dragged_id} under {target_id} would create a cycle")
        return await self._confirm(
            f"move folder {dragged_id} -> {target_id}",
            self.backend.move_folder(dragged_id, target_id),
            lambda _res: self.store.update_folder(dragged_id, parent_id=target_id),
        )

    # --- Tags ---

    async def create_tag(self, name: str, color: str) -> MutationResult:
        tag = Tag(id=self.new_id(), name=name, color=color)

        def apply(res: ApiResponse[Tag]) -> Tag:
            saved = res.data if res.data is not None else tag
            self.store.append_tags([saved])
            return saved

        return await self._confirm(f"create tag {name!r}", self.backend.create_tag(tag), apply)

    async def reorder_tags(self, dragged_id: str, target_id: str) -> MutationResult:
        """Move a tag to the target's position, optimistically.

        Reorders run one at a time, so a rollback always restores the order
        that was current when that reorder started.
        """
        async with self._reorder_lock:
            command = ReorderTagsCommand(self.store, dragged_id, target_id)
            if not command.is_applicable():
                return _rejected(f"cannot move tag {dragged_id} onto {target_id}")
            return await self._run_optimistic(
                f"reorder tags ({dragged_id} -> {target_id})",
                command,
                lambda: self.backend.reorder_tags(command.new_order),
            )
