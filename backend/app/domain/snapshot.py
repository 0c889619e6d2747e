"""Flattened board snapshots.

Pure projections of the board state. Nothing here holds state: every call
rebuilds the full view from the category lists it is given.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from app.domain.categories import CategorySchema

TITLE_MAX_LENGTH = 48
DEFAULT_TITLE = "Insight"


class _HasText(Protocol):
    id: str
    category: str
    text: str


@dataclass(frozen=True)
class BlockRecord:
    """One entry of the flattened snapshot."""

    id: str
    category: str
    title: str
    content: str


def derive_title(text: str) -> str:
    """Title shown on a card: the text before the first colon, capped at 48 chars."""
    head = (text or "").split(":", 1)[0].strip()
    return head[:TITLE_MAX_LENGTH] or DEFAULT_TITLE


def flatten(schema: CategorySchema, lists: Mapping[str, Sequence[_HasText]]) -> list[BlockRecord]:
    """Linearize the board: category-declaration order, then position order.

    Categories missing from ``lists`` contribute nothing; keys in ``lists``
    that are not schema categories are ignored.
    """
    records = []
    for key in schema.keys():
        for block in lists.get(key, ()):
            records.append(
                BlockRecord(
                    id=block.id,
                    category=key,
                    title=derive_title(block.text),
                    content=block.text or "",
                )
            )
    return records


def prompt_context(schema: CategorySchema, lists: Mapping[str, Sequence[_HasText]]) -> dict[str, list[str]]:
    """Per-category text arrays keyed by logical seed name, for enrichment prompts."""
    return {
        category.seed_key: [block.text for block in lists.get(category.key, ())]
        for category in schema.categories
    }
