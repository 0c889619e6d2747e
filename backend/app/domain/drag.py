"""Drag-and-drop resolution.

Translates a drag-end gesture (dragged block id + drop target id) into at
most one BoardStore mutation. The drop target may be a block id or a
category key; category keys are checked first. Malformed or racy gestures
resolve to no action and never raise.
"""

from dataclasses import dataclass
from enum import StrEnum

import structlog

from app.domain.board import BoardStore

logger = structlog.get_logger(__name__)

# Dropping on a column (not on a card) places the block at the top.
COLUMN_DROP_INDEX = 0


class DragKind(StrEnum):
    REORDER = "reorder"
    MOVE = "move"


@dataclass(frozen=True)
class DragEnd:
    """A drag-end gesture. ``over_id`` is None when released outside any target."""

    active_id: str | None
    over_id: str | None


@dataclass(frozen=True)
class DragAction:
    """The single mutation a drag gesture resolves to."""

    kind: DragKind
    block_id: str
    source_category: str
    target_category: str
    from_index: int
    to_index: int


def resolve_drag(store: BoardStore, event: DragEnd) -> DragAction | None:
    """Decide which mutation a drag gesture maps to, without applying it.

    Rules:
        - No drop target (or no dragged id) -> None
        - Dragged block not on the board -> None (logged)
        - Target is a category key -> that category, index 0
        - Target is a block id -> that block's category and index
        - Same category, different index -> REORDER
        - Different category -> MOVE (None if the target is at capacity)
        - Same category, same index -> None
    """
    if not event.active_id or not event.over_id:
        return None

    found = store.find(event.active_id)
    if found is None:
        logger.warning("drag_source_missing", canvas=store.schema.name, block_id=event.active_id)
        return None
    source_category, from_index = found

    if store.schema.has(event.over_id):
        target_category, to_index = event.over_id, COLUMN_DROP_INDEX
    else:
        target = store.find(event.over_id)
        if target is None:
            logger.debug("drag_target_unresolved", canvas=store.schema.name, over_id=event.over_id)
            return None
        target_category, to_index = target

    if source_category == target_category:
        if to_index == from_index:
            return None
        kind = DragKind.REORDER
    else:
        if store.is_full(target_category):
            logger.info("drag_target_full", canvas=store.schema.name, category=target_category)
            return None
        kind = DragKind.MOVE

    return DragAction(
        kind=kind,
        block_id=event.active_id,
        source_category=source_category,
        target_category=target_category,
        from_index=from_index,
        to_index=to_index,
    )


def apply_drag(store: BoardStore, event: DragEnd) -> DragAction | None:
    """Resolve a drag gesture and apply its mutation to the store.

    Returns the applied action, or None when the gesture changed nothing.
    """
    action = resolve_drag(store, event)
    if action is None:
        return None

    if action.kind is DragKind.REORDER:
        changed = store.reorder_within_category(action.source_category, action.from_index, action.to_index)
    else:
        changed = store.move_across_category(
            action.block_id, action.source_category, action.target_category, action.to_index
        )
    return action if changed else None
