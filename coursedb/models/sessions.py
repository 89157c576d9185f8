"""
Database-backed session storage over the `sessions` table.
Mirrors a custom session save handler: open/close are no-ops, the rest map to SQL.
"""
from typing import Optional

from flask import current_app, has_app_context

from coursedb.config import DEFAULT_SESSION_LIFETIME
from coursedb.database import db
from coursedb.utils.logging import get_logger
from coursedb.utils.exceptions import ValidationError

log = get_logger(__name__)

SESSION_ID_MAX = 128


class SessionStore:
    table_name = "sessions"

    def __init__(self, lifetime: Optional[int] = None) -> None:
        if lifetime is None:
            lifetime = (
                current_app.config.get("SESSION_LIFETIME", DEFAULT_SESSION_LIFETIME)
                if has_app_context()
                else DEFAULT_SESSION_LIFETIME
            )
        self.lifetime = int(lifetime)

    @staticmethod
    def _check_id(session_id: str) -> None:
        if not session_id or len(session_id) > SESSION_ID_MAX:
            raise ValidationError(f"Session id must be 1-{SESSION_ID_MAX} characters")

    def read(self, session_id: str) -> str:
        """Stored payload, or an empty string for an unknown session."""
        self._check_id(session_id)
        row = db.execute(
            f"SELECT data FROM {self.table_name} WHERE id = ?", (session_id,), fetch="one"
        )
        if row is None or row["data"] is None:
            return ""
        return row["data"]

    def write(self, session_id: str, data: str) -> bool:
        self._check_id(session_id)
        with db.connection() as (conn, cur):
            cur.execute(
                db.sql(f"UPDATE {self.table_name} SET data = ?, last_accessed = CURRENT_TIMESTAMP WHERE id = ?"),
                (data, session_id),
            )
            if cur.rowcount == 0:
                db.insert(cur, self.table_name, {"id": session_id, "data": data}, returning=False)
        return True

    def destroy(self, session_id: str) -> bool:
        self._check_id(session_id)
        removed = db.execute(
            f"DELETE FROM {self.table_name} WHERE id = ?", (session_id,), fetch="rowcount"
        )
        return removed > 0

    def gc(self, max_lifetime: Optional[int] = None) -> int:
        """Remove sessions idle for longer than max_lifetime seconds; returns how many."""
        cutoff, param = db.seconds_ago(self.lifetime if max_lifetime is None else max_lifetime)
        removed = db.execute(
            f"DELETE FROM {self.table_name} WHERE last_accessed < {cutoff}", (param,), fetch="rowcount"
        )
        if removed:
            log.info(f"Session gc removed {removed} expired sessions")
        return removed
