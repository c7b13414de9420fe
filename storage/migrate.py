"""SQLite schema migrations."""
from __future__ import annotations

import os
import sqlite3
from typing import Iterable

SCHEMA: Iterable[str] = [
    """
CREATE TABLE IF NOT EXISTS interviews (
  id TEXT PRIMARY KEY,
  user_id TEXT NOT NULL,
  role TEXT NOT NULL,
  level TEXT NOT NULL,
  type TEXT NOT NULL,
  techstack_json TEXT NOT NULL,
  questions_json TEXT NOT NULL,
  finalized INTEGER NOT NULL DEFAULT 0,
  cover_image TEXT,
  schedule_type TEXT NOT NULL DEFAULT 'now',
  status TEXT,
  scheduled_for TEXT,
  started_at TEXT,
  created_at TEXT NOT NULL
);
""",
    "CREATE INDEX IF NOT EXISTS idx_interviews_user ON interviews (user_id);",
    "CREATE INDEX IF NOT EXISTS idx_interviews_finalized ON interviews (finalized);",
    """
CREATE TABLE IF NOT EXISTS feedback (
  id TEXT PRIMARY KEY,
  interview_id TEXT NOT NULL,
  user_id TEXT NOT NULL,
  total_score INTEGER NOT NULL,
  category_scores_json TEXT NOT NULL,
  strengths_json TEXT NOT NULL,
  areas_for_improvement_json TEXT NOT NULL,
  final_assessment TEXT NOT NULL,
  created_at TEXT NOT NULL
);
""",
    "CREATE INDEX IF NOT EXISTS idx_feedback_interview_user ON feedback (interview_id, user_id);",
]


def migrate(db_path: str = "data/interviews.db") -> None:
    """Apply schema migrations to the SQLite database."""

    directory = os.path.dirname(str(db_path)) or "."
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        for stmt in SCHEMA:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


if __name__ == "__main__":
    from config.settings import settings

    migrate(settings.DB_PATH)
