"""Geni AI Session Store

Persists the device session to MongoDB under a fixed key.

- load(): None when nothing is stored (logged out)
- save(): best-effort; failures are logged and reported, never raised
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging

from database import database
from genia import config
from genia.models.session import Session, Plan

logger = logging.getLogger(__name__)


def migrate_session_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """Fill fields missing from records written before quotas existed."""
    migrated = dict(record)
    if migrated.get("quota") is None:
        migrated["quota"] = config.LEGACY_PRO_QUOTA if migrated.get("plan") == Plan.PRO.value else config.INITIAL_QUOTA
    if migrated.get("purchase_index") is None:
        migrated["purchase_index"] = 1
    return migrated


class SessionStore:
    """Key-value persistence of the device session."""

    COLLECTION = "genia_sessions"

    def __init__(self, key: str = config.SESSION_KEY):
        self.key = key
        self.db = None

    def _get_db(self):
        if self.db is None:
            self.db = database.get_db()
        return self.db

    async def load(self) -> Optional[Session]:
        """Stored session, or None when absent or unreadable."""
        try:
            db = self._get_db()
            record = await db[self.COLLECTION].find_one({"session_key": self.key}, {"_id": 0})
        except Exception as e:
            logger.warning(f"Failed to load session {self.key}: {e}")
            return None

        if not record or not record.get("session"):
            return None

        try:
            session = Session(**migrate_session_record(record["session"]))
        except ValueError as e:
            logger.warning(f"Stored session {self.key} is unreadable: {e}")
            return None
        logger.info(f"Restored session for {session.uid}")
        return session

    async def save(self, session: Session) -> bool:
        """Mirror the session. Returns False when the write failed."""
        try:
            db = self._get_db()
            await db[self.COLLECTION].update_one(
                {"session_key": self.key},
                {
                    "$set": {
                        "session": session.model_dump(mode="json"),
                        "updated_at": datetime.now(timezone.utc),
                    },
                    "$setOnInsert": {"created_at": datetime.now(timezone.utc)},
                },
                upsert=True,
            )
        except Exception as e:
            logger.warning(f"Failed to persist session {session.uid}: {e}")
            return False
        return True


# Global store instance
session_store = SessionStore()
