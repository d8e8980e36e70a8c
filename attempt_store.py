"""SQLite persistence for completed tracing attempts."""

from __future__ import annotations

import sqlite3
import threading
from datetime import UTC, datetime
from pathlib import Path

from attempt_models import Attempt, AttemptCreate

_COLUMNS = "id, shape, attention_score, precision_score, assistance_count, duration_ms, completed_at"


class AttemptStore:
    """Append-only attempt log."""

    def __init__(self, db_path: Path | str = ":memory:") -> None:
        if isinstance(db_path, Path):
            db_path.parent.mkdir(parents=True, exist_ok=True)
            target = str(db_path)
        else:
            target = db_path
        # FastAPI serves sync endpoints from a thread pool
        self._conn = sqlite3.connect(target, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._init_db()

    def _init_db(self) -> None:
        with self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS attempts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    shape TEXT NOT NULL,
                    attention_score INTEGER NOT NULL,
                    precision_score INTEGER NOT NULL,
                    assistance_count INTEGER NOT NULL,
                    duration_ms INTEGER NOT NULL,
                    completed_at TEXT NOT NULL
                )
                """)

    def create_attempt(self, attempt: AttemptCreate) -> Attempt:
        """Store one attempt, stamping it with the current UTC time."""
        completed_at = datetime.now(UTC)
        with self._lock, self._conn:
            cur = self._conn.execute(
                """
                INSERT INTO attempts
                    (shape, attention_score, precision_score, assistance_count, duration_ms, completed_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    attempt.shape,
                    attempt.attention_score,
                    attempt.precision_score,
                    attempt.assistance_count,
                    attempt.duration_ms,
                    completed_at.isoformat(),
                ),
            )
        return Attempt.model_validate(
            {"id": int(cur.lastrowid), "completedAt": completed_at, **attempt.model_dump(by_alias=True)}
        )

    def get_attempts(self) -> list[Attempt]:
        """All attempts ordered by completion time."""
        with self._lock:
            rows = self._conn.execute(
                f"SELECT {_COLUMNS} FROM attempts ORDER BY completed_at, id"
            ).fetchall()
        return [self._row_to_attempt(row) for row in rows]

    @staticmethod
    def _row_to_attempt(row: sqlite3.Row) -> Attempt:
        return Attempt.model_validate({
            "id": int(row["id"]),
            "shape": str(row["shape"]),
            "attentionScore": int(row["attention_score"]),
            "precisionScore": int(row["precision_score"]),
            "assistanceCount": int(row["assistance_count"]),
            "durationMs": int(row["duration_ms"]),
            "completedAt": datetime.fromisoformat(row["completed_at"]),
        })

    def close(self) -> None:
        self._conn.close()
