"""Key/value store for JSON application state."""

import json
from datetime import datetime
from typing import Any, Optional

from ...core.exceptions import MalformedStateError
from ..database import get_db


class StateRepository:
    def get(self, key: str) -> Optional[Any]:
        """Return the decoded JSON value for key, or None if it was never saved."""
        db = get_db()
        row = db.conn.execute(
            "SELECT value FROM app_state WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except (TypeError, ValueError) as e:
            raise MalformedStateError(f"Stored value for '{key}' is not valid JSON") from e

    def put(self, key: str, value: Any) -> None:
        db = get_db()
        with db.write_lock:
            db.conn.execute(
                """INSERT INTO app_state (key, value, updated_at)
                   VALUES (?, ?, CURRENT_TIMESTAMP)
                   ON CONFLICT(key) DO UPDATE SET
                       value = excluded.value,
                       updated_at = excluded.updated_at""",
                (key, json.dumps(value, ensure_ascii=False)),
            )
            if not db._in_transaction:
                db.conn.commit()

    def delete(self, key: str) -> bool:
        db = get_db()
        with db.write_lock:
            cursor = db.conn.execute("DELETE FROM app_state WHERE key = ?", (key,))
            if not db._in_transaction:
                db.conn.commit()
        return cursor.rowcount > 0

    def claim(self, key: str, expire_after_seconds: int) -> bool:
        """Create key as a lock marker. False if another live claim holds it.

        A claim older than expire_after_seconds is treated as abandoned
        and taken over. The check and the write are one statement, so two
        processes sharing the database cannot both win.
        """
        db = get_db()
        with db.write_lock:
            cursor = db.conn.execute(
                """INSERT INTO app_state (key, value, updated_at)
                   VALUES (?, ?, CURRENT_TIMESTAMP)
                   ON CONFLICT(key) DO UPDATE SET
                       value = excluded.value,
                       updated_at = excluded.updated_at
                   WHERE app_state.updated_at < datetime('now', ?)""",
                (
                    key,
                    json.dumps(datetime.now().isoformat()),
                    f"-{int(expire_after_seconds)} seconds",
                ),
            )
            if not db._in_transaction:
                db.conn.commit()
        return cursor.rowcount > 0
