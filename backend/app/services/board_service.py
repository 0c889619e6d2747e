"""BoardService — registry of mounted boards and the operations on them.

Each (idea_id, canvas) pair owns an independent BoardStore. The service
registers one listener per board that records the latest flattened snapshot
and bumps a version counter, so a request can tell whether it changed the
board. Changed snapshots are upserted to the SnapshotStore when persistence
is enabled.
"""

from collections.abc import Callable, Mapping, Sequence
from typing import TypeVar

import structlog
from redis.exceptions import RedisError

from app.core.config import get_settings
from app.core.exceptions import BoardNotMountedError
from app.db.redis import get_redis
from app.domain.board import Block, BoardStore, IdFactory, default_id_factory
from app.domain.categories import CategorySchema, get_schema
from app.domain.drag import DragAction, DragEnd, apply_drag
from app.domain.editing import EditSession, PendingEdit
from app.domain.snapshot import BlockRecord
from app.services.snapshot_store import SnapshotStore

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class MountedBoard:
    """A hydrated board plus its last snapshot and edit session."""

    def __init__(
        self,
        idea_id: str,
        schema: CategorySchema,
        seed: Mapping[str, Sequence[str]] | None,
        id_factory: IdFactory,
        version: int = 0,
    ):
        self.idea_id = idea_id
        self.canvas = schema.name
        self.version = version
        self.snapshot: list[BlockRecord] = []
        self.store = BoardStore.hydrate(schema, seed, on_change=self._record, id_factory=id_factory)
        self.edits = EditSession(self.store)

    def _record(self, snapshot: list[BlockRecord]) -> None:
        self.snapshot = snapshot
        self.version += 1


class BoardService:
    """Mount, mutate, and read the boards of every idea."""

    def __init__(
        self,
        snapshot_store: SnapshotStore | None = None,
        id_factory: IdFactory = default_id_factory,
    ):
        self.snapshot_store = snapshot_store
        self.id_factory = id_factory
        self._boards: dict[tuple[str, str], MountedBoard] = {}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def mount(
        self,
        idea_id: str,
        canvas: str,
        seed: Mapping[str, Sequence[str]] | None = None,
    ) -> MountedBoard:
        """Hydrate a board for an idea's canvas, replacing any mounted one.

        A replaced board's version carries over, so versions never go backwards.

        Raises:
            UnknownCanvasError: If the canvas has no schema
        """
        schema = get_schema(canvas)
        previous = self._boards.get((idea_id, canvas))
        board = MountedBoard(
            idea_id,
            schema,
            seed,
            self.id_factory,
            version=previous.version if previous else 0,
        )
        self._boards[(idea_id, canvas)] = board
        logger.info("board_mounted", idea_id=idea_id, canvas=canvas, blocks=len(board.store))
        await self._persist(board)
        return board

    def get(self, idea_id: str, canvas: str) -> MountedBoard:
        """Return a mounted board.

        Raises:
            UnknownCanvasError: If the canvas has no schema
            BoardNotMountedError: If no board is mounted for the pair
        """
        get_schema(canvas)
        board = self._boards.get((idea_id, canvas))
        if board is None:
            raise BoardNotMountedError(idea_id, canvas)
        return board

    async def unmount(self, idea_id: str, canvas: str) -> None:
        """Drop a mounted board and its persisted snapshot."""
        self.get(idea_id, canvas)
        del self._boards[(idea_id, canvas)]
        logger.info("board_unmounted", idea_id=idea_id, canvas=canvas)

        if self.snapshot_store is None:
            return
        try:
            await self.snapshot_store.delete(idea_id, canvas)
        except RedisError as e:
            logger.error(
                "snapshot_delete_failed",
                idea_id=idea_id,
                canvas=canvas,
                error=str(e),
                error_type=type(e).__name__,
            )

    def context(self, idea_id: str, canvas: str) -> dict[str, list[str]]:
        return self.get(idea_id, canvas).store.context()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def _mutate(self, board: MountedBoard, operation: Callable[[BoardStore], T]) -> tuple[T, bool]:
        before = board.version
        result = operation(board.store)
        changed = board.version != before
        if changed:
            await self._persist(board)
        return result, changed

    async def add_block(self, idea_id: str, canvas: str, category: str) -> tuple[Block, bool]:
        """Add an empty block at the head of a category.

        Raises:
            UnknownCategoryError: If the category is not in the canvas schema
        """
        board = self.get(idea_id, canvas)
        (block, _created), changed = await self._mutate(board, lambda s: s.add_block(category))
        return block, changed

    async def edit_block(self, idea_id: str, canvas: str, block_id: str, text: str) -> bool:
        board = self.get(idea_id, canvas)
        _, changed = await self._mutate(board, lambda s: s.edit_block(block_id, text))
        return changed

    async def remove_block(self, idea_id: str, canvas: str, block_id: str) -> bool:
        board = self.get(idea_id, canvas)
        if board.edits.pending is not None and board.edits.pending.block_id == block_id:
            board.edits.cancel()
        _, changed = await self._mutate(board, lambda s: s.remove_block(block_id))
        return changed

    async def reorder(self, idea_id: str, canvas: str, category: str, from_index: int, to_index: int) -> bool:
        board = self.get(idea_id, canvas)
        _, changed = await self._mutate(
            board, lambda s: s.reorder_within_category(category, from_index, to_index)
        )
        return changed

    async def move(
        self,
        idea_id: str,
        canvas: str,
        block_id: str,
        from_category: str,
        to_category: str,
        at_index: int,
    ) -> bool:
        board = self.get(idea_id, canvas)
        _, changed = await self._mutate(
            board, lambda s: s.move_across_category(block_id, from_category, to_category, at_index)
        )
        return changed

    async def drag(self, idea_id: str, canvas: str, event: DragEnd) -> DragAction | None:
        board = self.get(idea_id, canvas)
        action, _ = await self._mutate(board, lambda s: apply_drag(s, event))
        return action

    # ------------------------------------------------------------------
    # Edit sessions
    # ------------------------------------------------------------------

    def begin_edit(self, idea_id: str, canvas: str, block_id: str) -> PendingEdit | None:
        return self.get(idea_id, canvas).edits.begin(block_id)

    def update_edit(self, idea_id: str, canvas: str, text: str) -> PendingEdit | None:
        return self.get(idea_id, canvas).edits.update(text)

    async def commit_edit(self, idea_id: str, canvas: str) -> bool:
        board = self.get(idea_id, canvas)
        _, changed = await self._mutate(board, lambda s: board.edits.commit())
        return changed

    def cancel_edit(self, idea_id: str, canvas: str) -> None:
        self.get(idea_id, canvas).edits.cancel()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def _persist(self, board: MountedBoard) -> None:
        if self.snapshot_store is None:
            return
        try:
            await self.snapshot_store.upsert(board.idea_id, board.canvas, board.version, board.snapshot)
        except RedisError as e:
            # The board itself is already updated; a later mutation re-sends the full snapshot.
            logger.error(
                "snapshot_persist_failed",
                idea_id=board.idea_id,
                canvas=board.canvas,
                version=board.version,
                error=str(e),
                error_type=type(e).__name__,
            )


_board_service: BoardService | None = None


def get_board_service() -> BoardService:
    """FastAPI dependency returning the process-wide BoardService.

    Override via app.dependency_overrides in tests.
    """
    global _board_service

    if _board_service is None:
        settings = get_settings()
        snapshot_store = None
        if settings.persist_snapshots:
            snapshot_store = SnapshotStore(get_redis(), ttl_seconds=settings.snapshot_ttl_seconds)
        _board_service = BoardService(snapshot_store=snapshot_store)
    return _board_service
