"""Pending card edits.

The text a founder is typing lives in a transient buffer and only reaches
the board on commit. Cancel throws the buffer away.
"""

from dataclasses import dataclass

from app.domain.board import BoardStore


@dataclass
class PendingEdit:
    block_id: str
    original: str
    text: str

    @property
    def dirty(self) -> bool:
        return self.text != self.original


class EditSession:
    """At most one pending edit per board."""

    def __init__(self, store: BoardStore):
        self.store = store
        self.pending: PendingEdit | None = None

    def begin(self, block_id: str) -> PendingEdit | None:
        """Open an edit buffer for a block, discarding any previous buffer.

        Returns None (and leaves no session open) when the block is unknown.
        """
        block = self.store.get(block_id)
        if block is None:
            self.pending = None
            return None
        self.pending = PendingEdit(block_id=block_id, original=block.text, text=block.text)
        return self.pending

    def update(self, text: str) -> PendingEdit | None:
        if self.pending is None:
            return None
        self.pending.text = text
        return self.pending

    def commit(self) -> bool:
        """Merge the buffer into the board and close the session.

        Returns True if the board changed. A block removed while the edit was
        open is left removed.
        """
        pending, self.pending = self.pending, None
        if pending is None or not pending.dirty:
            return False
        return self.store.edit_block(pending.block_id, pending.text)

    def cancel(self) -> None:
        self.pending = None

    @property
    def dirty(self) -> bool:
        return self.pending is not None and self.pending.dirty
