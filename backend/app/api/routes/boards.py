"""Board API routes — mount, mutate, and read the insight canvases.

Every mutation endpoint applies at most one change and returns the full
flattened snapshot. Gestures that change nothing (unknown ids, stale drags,
out-of-range indices) return 200 with ``changed: false``.

Unknown canvas / unmounted board -> 404 and unknown category -> 400 are
mapped by the domain exception handler in ``app.main``.
"""

import structlog
from fastapi import APIRouter, Depends

from app.domain.categories import SCHEMAS, get_schema
from app.domain.drag import DragEnd
from app.schemas.boards import (
    AddBlockRequest,
    BeginEditRequest,
    BoardResponse,
    BlockResponse,
    CanvasResponse,
    ContextResponse,
    DragActionResponse,
    DragRequest,
    EditBlockRequest,
    MountBoardRequest,
    MoveRequest,
    PendingEditResponse,
    ReorderRequest,
)
from app.services.board_service import BoardService, MountedBoard, get_board_service

router = APIRouter()
logger = structlog.get_logger(__name__)


def _board_response(board: MountedBoard, changed: bool, **extra) -> BoardResponse:
    pending = board.edits.pending
    return BoardResponse(
        idea_id=board.idea_id,
        canvas=board.canvas,
        version=board.version,
        blocks=[BlockResponse.from_record(r) for r in board.snapshot],
        changed=changed,
        pending_edit=PendingEditResponse.from_pending(pending) if pending else None,
        **extra,
    )


# ---------------------------------------------------------------------------
# Canvas schemas
# ---------------------------------------------------------------------------


@router.get("/canvases", response_model=list[CanvasResponse])
async def list_canvases() -> list[CanvasResponse]:
    """List every canvas with its categories and layout groups."""
    return [CanvasResponse.from_schema(schema) for schema in SCHEMAS.values()]


@router.get("/canvases/{canvas}", response_model=CanvasResponse)
async def get_canvas(canvas: str) -> CanvasResponse:
    return CanvasResponse.from_schema(get_schema(canvas))


# ---------------------------------------------------------------------------
# Board lifecycle
# ---------------------------------------------------------------------------


@router.put("/ideas/{idea_id}/boards/{canvas}", response_model=BoardResponse)
async def mount_board(
    idea_id: str,
    canvas: str,
    request: MountBoardRequest | None = None,
    service: BoardService = Depends(get_board_service),
) -> BoardResponse:
    """Hydrate (or re-hydrate) a board from an optional seed.

    Seed keys are logical category names (``existingAlternatives``) or
    category keys. A missing or empty seed mounts an empty board.
    """
    seed = request.seed if request else None
    board = await service.mount(idea_id, canvas, seed)
    return _board_response(board, changed=True)


@router.get("/ideas/{idea_id}/boards/{canvas}", response_model=BoardResponse)
async def get_board(
    idea_id: str,
    canvas: str,
    service: BoardService = Depends(get_board_service),
) -> BoardResponse:
    return _board_response(service.get(idea_id, canvas), changed=False)


@router.delete("/ideas/{idea_id}/boards/{canvas}", status_code=204)
async def unmount_board(
    idea_id: str,
    canvas: str,
    service: BoardService = Depends(get_board_service),
) -> None:
    await service.unmount(idea_id, canvas)


@router.get("/ideas/{idea_id}/boards/{canvas}/context", response_model=ContextResponse)
async def get_board_context(
    idea_id: str,
    canvas: str,
    service: BoardService = Depends(get_board_service),
) -> ContextResponse:
    """Per-category text arrays, the prompt context for enrichment calls."""
    return ContextResponse(idea_id=idea_id, canvas=canvas, context=service.context(idea_id, canvas))


# ---------------------------------------------------------------------------
# Block mutations
# ---------------------------------------------------------------------------


@router.post("/ideas/{idea_id}/boards/{canvas}/blocks", response_model=BoardResponse)
async def add_block(
    idea_id: str,
    canvas: str,
    request: AddBlockRequest,
    service: BoardService = Depends(get_board_service),
) -> BoardResponse:
    """Add an empty block at the top of a category.

    For a category at capacity nothing is added; ``block_id`` then names the
    existing block so the client can open it for editing.
    """
    block, changed = await service.add_block(idea_id, canvas, request.category)
    return _board_response(service.get(idea_id, canvas), changed, block_id=block.id)


@router.patch("/ideas/{idea_id}/boards/{canvas}/blocks/{block_id}", response_model=BoardResponse)
async def edit_block(
    idea_id: str,
    canvas: str,
    block_id: str,
    request: EditBlockRequest,
    service: BoardService = Depends(get_board_service),
) -> BoardResponse:
    changed = await service.edit_block(idea_id, canvas, block_id, request.text)
    return _board_response(service.get(idea_id, canvas), changed, block_id=block_id)


@router.delete("/ideas/{idea_id}/boards/{canvas}/blocks/{block_id}", response_model=BoardResponse)
async def remove_block(
    idea_id: str,
    canvas: str,
    block_id: str,
    service: BoardService = Depends(get_board_service),
) -> BoardResponse:
    changed = await service.remove_block(idea_id, canvas, block_id)
    return _board_response(service.get(idea_id, canvas), changed, block_id=block_id)


@router.post("/ideas/{idea_id}/boards/{canvas}/reorder", response_model=BoardResponse)
async def reorder_blocks(
    idea_id: str,
    canvas: str,
    request: ReorderRequest,
    service: BoardService = Depends(get_board_service),
) -> BoardResponse:
    changed = await service.reorder(idea_id, canvas, request.category, request.from_index, request.to_index)
    return _board_response(service.get(idea_id, canvas), changed)


@router.post("/ideas/{idea_id}/boards/{canvas}/move", response_model=BoardResponse)
async def move_block(
    idea_id: str,
    canvas: str,
    request: MoveRequest,
    service: BoardService = Depends(get_board_service),
) -> BoardResponse:
    changed = await service.move(
        idea_id,
        canvas,
        request.block_id,
        request.from_category,
        request.to_category,
        request.at_index,
    )
    return _board_response(service.get(idea_id, canvas), changed, block_id=request.block_id)


@router.post("/ideas/{idea_id}/boards/{canvas}/drag", response_model=BoardResponse)
async def drag_block(
    idea_id: str,
    canvas: str,
    request: DragRequest,
    service: BoardService = Depends(get_board_service),
) -> BoardResponse:
    """Apply a drag-end gesture. ``over_id`` null means the drag was cancelled."""
    action = await service.drag(idea_id, canvas, DragEnd(active_id=request.active_id, over_id=request.over_id))
    return _board_response(
        service.get(idea_id, canvas),
        changed=action is not None,
        block_id=request.active_id,
        drag=DragActionResponse.from_action(action) if action else None,
    )


# ---------------------------------------------------------------------------
# Edit session
# ---------------------------------------------------------------------------


@router.post("/ideas/{idea_id}/boards/{canvas}/edit", response_model=BoardResponse)
async def begin_edit(
    idea_id: str,
    canvas: str,
    request: BeginEditRequest,
    service: BoardService = Depends(get_board_service),
) -> BoardResponse:
    service.begin_edit(idea_id, canvas, request.block_id)
    return _board_response(service.get(idea_id, canvas), changed=False, block_id=request.block_id)


@router.patch("/ideas/{idea_id}/boards/{canvas}/edit", response_model=BoardResponse)
async def update_edit(
    idea_id: str,
    canvas: str,
    request: EditBlockRequest,
    service: BoardService = Depends(get_board_service),
) -> BoardResponse:
    """Change the pending edit buffer. The board itself is untouched."""
    service.update_edit(idea_id, canvas, request.text)
    return _board_response(service.get(idea_id, canvas), changed=False)


@router.post("/ideas/{idea_id}/boards/{canvas}/edit/commit", response_model=BoardResponse)
async def commit_edit(
    idea_id: str,
    canvas: str,
    service: BoardService = Depends(get_board_service),
) -> BoardResponse:
    changed = await service.commit_edit(idea_id, canvas)
    return _board_response(service.get(idea_id, canvas), changed)


@router.delete("/ideas/{idea_id}/boards/{canvas}/edit", response_model=BoardResponse)
async def cancel_edit(
    idea_id: str,
    canvas: str,
    service: BoardService = Depends(get_board_service),
) -> BoardResponse:
    service.cancel_edit(idea_id, canvas)
    return _board_response(service.get(idea_id, canvas), changed=False)
