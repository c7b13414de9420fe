from __future__ import annotations  # Feedback persistence layer

import json
import sqlite3
from datetime import datetime
from typing import Optional
from uuid import uuid4

from storage.clock import to_iso, utc_now
from storage.sqlite import Database

from .models import CategoryScore, Feedback, FeedbackDraft


_COLUMNS = (
    "id, interview_id, user_id, total_score, category_scores_json, strengths_json, "
    "areas_for_improvement_json, final_assessment, created_at"
)


class FeedbackStore:  # SQLite-backed feedback collection
    def __init__(self, db: Database) -> None:
        self._db = db

    def save(
        self,
        draft: FeedbackDraft,
        *,
        interview_id: str,
        user_id: str,
        feedback_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> Feedback:  # Create a new document, or overwrite ``feedback_id`` in place
        record_id = feedback_id or uuid4().hex
        created = to_iso(created_at or utc_now())
        with self._db.connect() as conn:
            conn.execute(
                f"""
                INSERT OR REPLACE INTO feedback ({_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record_id,
                    interview_id,
                    user_id,
                    draft.total_score,
                    json.dumps([item.model_dump() for item in draft.category_scores]),
                    json.dumps(draft.strengths),
                    json.dumps(draft.areas_for_improvement),
                    draft.final_assessment,
                    created,
                ),
            )
        return Feedback(
            id=record_id,
            interview_id=interview_id,
            user_id=user_id,
            created_at=created,
            **draft.model_dump(),
        )

    def get(self, feedback_id: str) -> Optional[Feedback]:
        with self._db.connect() as conn:
            row = conn.execute(f"SELECT {_COLUMNS} FROM feedback WHERE id = ?", (feedback_id,)).fetchone()
        return _row_to_feedback(row) if row is not None else None

    def get_for_interview(self, interview_id: str, user_id: str) -> Optional[Feedback]:  # First match for the pair
        with self._db.connect() as conn:
            row = conn.execute(
                f"""
                SELECT {_COLUMNS} FROM feedback
                WHERE interview_id = ? AND user_id = ?
                ORDER BY created_at ASC
                LIMIT 1
                """,
                (interview_id, user_id),
            ).fetchone()
        return _row_to_feedback(row) if row is not None else None



def _row_to_feedback(row: sqlite3.Row) -> Feedback:
    return Feedback(
        id=row["id"],
        interview_id=row["interview_id"],
        user_id=row["user_id"],
        total_score=row["total_score"],
        category_scores=[CategoryScore(**item) for item in json.loads(row["category_scores_json"])],
        strengths=json.loads(row["strengths_json"]),
        areas_for_improvement=json.loads(row["areas_for_improvement_json"]),
        final_assessment=row["final_assessment"],
        created_at=row["created_at"],
    )


__all__ = ["FeedbackStore"]
