"""Database repository for match signals.

One record per user, keyed by ``user_id`` and fully replaced on every
write. Concurrent writers for the same user are serialized by SQLite;
the last writer wins.
"""

import json
import sqlite3
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from src.signals.models import MatchSignals, NumericFeatures, TrustSignals
from src.utils.outcome import StoreFailure

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS match_signals (
    user_id TEXT PRIMARY KEY,
    embedding_ready_text TEXT NOT NULL,
    primary_intent TEXT,
    supply_tags TEXT NOT NULL,
    demand_tags TEXT NOT NULL,
    icp_tags TEXT NOT NULL,
    geo_tags TEXT NOT NULL,
    stage_tags TEXT NOT NULL,
    trust_signals TEXT NOT NULL,
    numeric_features TEXT NOT NULL,
    recency_weight TEXT NOT NULL,
    opt_out_ids TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""

CREATE_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS idx_match_signals_updated ON match_signals(updated_at);
"""

UPSERT_SQL = """
INSERT INTO match_signals (
    user_id, embedding_ready_text, primary_intent, supply_tags, demand_tags,
    icp_tags, geo_tags, stage_tags, trust_signals, numeric_features,
    recency_weight, opt_out_ids, created_at, updated_at
) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
ON CONFLICT(user_id) DO UPDATE SET
    embedding_ready_text = excluded.embedding_ready_text,
    primary_intent = excluded.primary_intent,
    supply_tags = excluded.supply_tags,
    demand_tags = excluded.demand_tags,
    icp_tags = excluded.icp_tags,
    geo_tags = excluded.geo_tags,
    stage_tags = excluded.stage_tags,
    trust_signals = excluded.trust_signals,
    numeric_features = excluded.numeric_features,
    recency_weight = excluded.recency_weight,
    opt_out_ids = excluded.opt_out_ids,
    updated_at = excluded.updated_at
"""


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SignalRepository:
    """Async SQLite repository for MatchSignals records.

    Every sqlite error is re-raised as :class:`StoreFailure`.
    """

    def __init__(self, db_path: Path | str):
        """Initialize the repository.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._connection: aiosqlite.Connection | None = None

    @asynccontextmanager
    async def _get_connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Yield the shared connection, translating sqlite errors."""
        try:
            if self._connection is None:
                self._connection = await aiosqlite.connect(self.db_path)
                self._connection.row_factory = aiosqlite.Row
            yield self._connection
        except sqlite3.Error as e:
            raise StoreFailure(f"Signal store error: {e}", original_error=e) from e

    async def initialize(self) -> None:
        """Initialize the database, creating tables if needed."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreFailure(f"Cannot create store directory: {e}", original_error=e) from e

        async with self._get_connection() as conn:
            await conn.execute(CREATE_TABLE_SQL)
            await conn.executescript(CREATE_INDEX_SQL)
            await conn.commit()

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None

    async def upsert(self, signals: MatchSignals) -> MatchSignals:
        """Insert the record, or overwrite every column and bump updated_at.

        Returns:
            The record as stored.
        """
        now = _now().isoformat()
        async with self._get_connection() as conn:
            await conn.execute(
                UPSERT_SQL,
                (
                    signals.user_id,
                    signals.embedding_ready_text,
                    signals.primary_intent,
                    json.dumps(signals.supply_tags),
                    json.dumps(signals.demand_tags),
                    json.dumps(signals.icp_tags),
                    json.dumps(signals.geo_tags),
                    json.dumps(signals.stage_tags),
                    signals.trust_signals.model_dump_json(),
                    json.dumps(signals.numeric_features.to_dict()),
                    signals.recency_weight.isoformat(),
                    json.dumps(signals.opt_out_ids),
                    now,
                    now,
                ),
            )
            await conn.commit()

        stored = await self.get_by_user_id(signals.user_id)
        if stored is None:
            raise StoreFailure(f"Upsert for {signals.user_id} was not persisted")
        return stored

    async def get_by_user_id(self, user_id: str) -> MatchSignals | None:
        """Get the signals record for a user, or None."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM match_signals WHERE user_id = ?",
                (user_id,),
            )
            row = await cursor.fetchone()

        if row is None:
            return None

        return self._row_to_signals(row)

    async def count(self) -> int:
        async with self._get_connection() as conn:
            cursor = await conn.execute("SELECT COUNT(*) AS count FROM match_signals")
            row = await cursor.fetchone()
        return int(row["count"]) if row is not None else 0

    async def delete(self, user_id: str) -> bool:
        """Delete a user's record. Returns True if one existed."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "DELETE FROM match_signals WHERE user_id = ?",
                (user_id,),
            )
            await conn.commit()
        return cursor.rowcount > 0

    def _row_to_signals(self, row: aiosqlite.Row) -> MatchSignals:
        """Convert a database row to MatchSignals."""
        return MatchSignals(
            user_id=row["user_id"],
            embedding_ready_text=row["embedding_ready_text"],
            primary_intent=row["primary_intent"],
            supply_tags=json.loads(row["supply_tags"]),
            demand_tags=json.loads(row["demand_tags"]),
            icp_tags=json.loads(row["icp_tags"]),
            geo_tags=json.loads(row["geo_tags"]),
            stage_tags=json.loads(row["stage_tags"]),
            trust_signals=TrustSignals.model_validate_json(row["trust_signals"]),
            numeric_features=NumericFeatures.model_validate(
                json.loads(row["numeric_features"])
            ),
            recency_weight=datetime.fromisoformat(row["recency_weight"]),
            opt_out_ids=json.loads(row["opt_out_ids"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
