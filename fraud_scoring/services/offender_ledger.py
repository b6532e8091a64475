"""Per-entity block counts for emails and card BINs seen on blocked transactions."""
import logging
import sqlite3
from datetime import datetime
from typing import Optional

from fraud_scoring.database import to_timestamp, transaction, utc_now

logger = logging.getLogger(__name__)

ENTITY_EMAIL = "email"
ENTITY_CARD_BIN = "card_bin"


class OffenderLedger:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def record_block(
        self,
        email: Optional[str],
        card_bin: Optional[str],
        now: Optional[datetime] = None,
    ) -> None:
        """Increment the block count of both entities, or neither on failure."""
        ts = to_timestamp(now or utc_now())
        with transaction(self.conn):
            for entity_type, entity_value in ((ENTITY_EMAIL, email), (ENTITY_CARD_BIN, card_bin)):
                if not entity_value:
                    continue
                self.conn.execute(
                    """INSERT INTO blocked_entities
                       (entity_type, entity_value, block_count, created_at, updated_at)
                       VALUES (?, ?, 1, ?, ?)
                       ON CONFLICT(entity_type, entity_value)
                       DO UPDATE SET block_count = block_count + 1, updated_at = excluded.updated_at""",
                    (entity_type, entity_value, ts, ts),
                )

        logger.info(
            "Offender ledger updated",
            extra={"email": email, "card_bin": card_bin},
        )

    def get_block_count(self, entity_type: str, entity_value: str) -> int:
        row = self.conn.execute(
            "SELECT block_count FROM blocked_entities WHERE entity_type = ? AND entity_value = ?",
            (entity_type, entity_value),
        ).fetchone()
        return row["block_count"] if row is not None else 0
