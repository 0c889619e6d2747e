"""Block store: the categorized, ordered block board.

A board maps every category of a schema to an ordered list of blocks. It is
the single source of truth for membership and order. Mutations are
synchronous; each one that changes the board hands a freshly flattened
snapshot to the registered listener exactly once. Anomalies (unknown ids,
out-of-range indices) are logged and absorbed, never raised.
"""

import uuid
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, replace

import structlog

from app.core.exceptions import UnknownCategoryError
from app.domain.categories import CategorySchema
from app.domain.snapshot import BlockRecord, flatten, prompt_context

logger = structlog.get_logger(__name__)

ChangeListener = Callable[[list[BlockRecord]], None]
IdFactory = Callable[[str], str]


@dataclass(frozen=True)
class Block:
    """One user-editable insight, owned by exactly one category."""

    id: str
    category: str
    text: str = ""


def default_id_factory(category: str) -> str:
    return f"{category}-{uuid.uuid4().hex}"


class BoardStore:
    """Owns one board. Never shared between two canvases."""

    def __init__(
        self,
        schema: CategorySchema,
        on_change: ChangeListener | None = None,
        id_factory: IdFactory = default_id_factory,
    ):
        self.schema = schema
        self._lists: dict[str, list[Block]] = {key: [] for key in schema.keys()}
        self._listener = on_change
        self._id_factory = id_factory

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def hydrate(
        cls,
        schema: CategorySchema,
        seed: Mapping[str, Sequence[str]] | None = None,
        on_change: ChangeListener | None = None,
        id_factory: IdFactory = default_id_factory,
    ) -> "BoardStore":
        """Build a board from an initial ``{logicalCategoryName: [text, ...]}`` seed.

        Seeded ids are ``"{category}-{index}"``. A missing or empty seed gives
        an empty board, or one blank starter block per category when the
        schema asks for it. The listener is notified once, after hydration.
        """
        store = cls(schema, on_change=on_change, id_factory=id_factory)
        seeded = 0

        for name, items in (seed or {}).items():
            key = schema.resolve_seed_key(name)
            if key is None:
                logger.warning("seed_category_unknown", canvas=schema.name, seed_key=name)
                continue
            if isinstance(items, str) or not isinstance(items, Sequence):
                logger.warning("seed_items_invalid", canvas=schema.name, seed_key=name)
                continue

            texts = [t for t in items if isinstance(t, str)]
            limit = schema.get(key).seed_limit
            if limit is not None:
                texts = texts[:limit]

            store._lists[key] = [
                Block(id=f"{key}-{idx}", category=key, text=text)
                for idx, text in enumerate(texts)
            ]
            seeded += len(texts)

        if seeded == 0 and schema.seed_blank:
            for key in schema.keys():
                store._lists[key] = [Block(id=f"{key}-1", category=key)]

        store._notify()
        return store

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return sum(len(blocks) for blocks in self._lists.values())

    def __contains__(self, block_id) -> bool:
        return self.find(block_id) is not None

    def blocks(self, category: str) -> list[Block]:
        return list(self._lists.get(category, ()))

    def lists(self) -> dict[str, list[Block]]:
        return {key: list(blocks) for key, blocks in self._lists.items()}

    def find(self, block_id: str) -> tuple[str, int] | None:
        """Return ``(category, index)`` of a block, or None."""
        for key, blocks in self._lists.items():
            for index, block in enumerate(blocks):
                if block.id == block_id:
                    return key, index
        return None

    def get(self, block_id: str) -> Block | None:
        found = self.find(block_id)
        if found is None:
            return None
        key, index = found
        return self._lists[key][index]

    def category_of(self, block_id: str) -> str | None:
        found = self.find(block_id)
        return found[0] if found else None

    def is_full(self, category: str) -> bool:
        meta = self.schema.get(category)
        if meta is None or meta.max_blocks is None:
            return False
        return len(self._lists[category]) >= meta.max_blocks

    def snapshot(self) -> list[BlockRecord]:
        return flatten(self.schema, self._lists)

    def context(self) -> dict[str, list[str]]:
        return prompt_context(self.schema, self._lists)

    # ------------------------------------------------------------------
    # Listener
    # ------------------------------------------------------------------

    def set_listener(self, listener: ChangeListener | None) -> None:
        """Register the single change listener (None to detach)."""
        self._listener = listener

    def _notify(self) -> None:
        if self._listener is not None:
            self._listener(self.snapshot())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _require_category(self, category: str) -> None:
        if not self.schema.has(category):
            raise UnknownCategoryError(category, self.schema.name)

    def _new_id(self, category: str) -> str:
        block_id = self._id_factory(category)
        while block_id in self:
            block_id = default_id_factory(category)
        return block_id

    def add_block(self, category: str) -> tuple[Block, bool]:
        """Insert an empty block at the head of ``category``.

        Returns ``(block, created)``. When the category is at capacity, no
        block is created and its head block is returned for editing instead.

        Raises:
            UnknownCategoryError: If ``category`` is not in the schema
        """
        self._require_category(category)

        if self.is_full(category):
            logger.info("category_full", canvas=self.schema.name, category=category)
            return self._lists[category][0], False

        block = Block(id=self._new_id(category), category=category)
        self._lists[category].insert(0, block)
        self._notify()
        return block, True

    def edit_block(self, block_id: str, text: str) -> bool:
        """Replace a block's text in place. Unknown ids are ignored."""
        found = self.find(block_id)
        if found is None:
            logger.info("edit_unknown_block", canvas=self.schema.name, block_id=block_id)
            return False

        key, index = found
        block = self._lists[key][index]
        if block.text == text:
            return False

        self._lists[key][index] = replace(block, text=text)
        self._notify()
        return True

    def remove_block(self, block_id: str) -> bool:
        """Delete a block from whichever category holds it. Unknown ids are ignored."""
        found = self.find(block_id)
        if found is None:
            logger.info("remove_unknown_block", canvas=self.schema.name, block_id=block_id)
            return False

        key, index = found
        del self._lists[key][index]
        self._notify()
        return True

    def reorder_within_category(self, category: str, from_index: int, to_index: int) -> bool:
        """Move the element at ``from_index`` to ``to_index`` within one category.

        ``from_index`` out of range is a no-op; ``to_index`` is clamped.
        """
        blocks = self._lists.get(category)
        if blocks is None:
            logger.info("reorder_unknown_category", canvas=self.schema.name, category=category)
            return False
        if not 0 <= from_index < len(blocks):
            logger.info(
                "reorder_index_out_of_range",
                canvas=self.schema.name,
                category=category,
                from_index=from_index,
                size=len(blocks),
            )
            return False

        to_index = max(0, min(to_index, len(blocks) - 1))
        if to_index == from_index:
            return False

        block = blocks.pop(from_index)
        blocks.insert(to_index, block)
        self._notify()
        return True

    def move_across_category(
        self,
        block_id: str,
        from_category: str,
        to_category: str,
        at_index: int,
    ) -> bool:
        """Transfer a block to another category at ``at_index`` (clamped).

        Both halves are applied before the single notification, so no
        snapshot ever shows the block in neither or both lists.
        """
        source = self._lists.get(from_category)
        target = self._lists.get(to_category)
        if source is None or target is None:
            logger.info(
                "move_unknown_category",
                canvas=self.schema.name,
                from_category=from_category,
                to_category=to_category,
            )
            return False
        if from_category == to_category:
            return False

        index = next((i for i, b in enumerate(source) if b.id == block_id), None)
        if index is None:
            logger.warning(
                "move_block_not_in_source",
                canvas=self.schema.name,
                block_id=block_id,
                from_category=from_category,
            )
            return False
        if self.is_full(to_category):
            logger.info("category_full", canvas=self.schema.name, category=to_category)
            return False

        at_index = max(0, min(at_index, len(target)))
        block = source.pop(index)
        target.insert(at_index, replace(block, category=to_category))
        self._notify()
        return True
