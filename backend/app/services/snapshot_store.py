"""Redis persistence for flattened board snapshots.

One key per idea/canvas pair holding the latest snapshot as JSON. Writes
are plain SETs, so repeating an upsert with the same snapshot leaves Redis
unchanged.
"""

import json
from dataclasses import asdict

from redis.asyncio import Redis

from app.domain.snapshot import BlockRecord


class SnapshotStore:
    """Idempotent upsert/lookup of board snapshots keyed by idea id."""

    def __init__(self, redis: Redis, ttl_seconds: int | None = None):
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def key(idea_id: str, canvas: str) -> str:
        return f"idea:{idea_id}:canvas:{canvas}"

    async def upsert(self, idea_id: str, canvas: str, version: int, blocks: list[BlockRecord]) -> None:
        """Store the snapshot for an idea's canvas, replacing any previous one.

        Args:
            idea_id: Caller-supplied idea identifier
            canvas: Canvas name ("deconstruct", "synthesis")
            version: Board version the snapshot was taken at
            blocks: Flattened snapshot
        """
        payload = json.dumps({
            "idea_id": idea_id,
            "canvas": canvas,
            "version": version,
            "blocks": [asdict(block) for block in blocks],
        })
        await self.redis.set(self.key(idea_id, canvas), payload, ex=self.ttl_seconds)

    async def load(self, idea_id: str, canvas: str) -> dict | None:
        raw = await self.redis.get(self.key(idea_id, canvas))
        if raw is None:
            return None
        return json.loads(raw)

    async def delete(self, idea_id: str, canvas: str) -> None:
        await self.redis.delete(self.key(idea_id, canvas))
