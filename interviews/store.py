from __future__ import annotations  # Interview storage and dashboard queries

import json
import sqlite3
from datetime import datetime
from typing import Iterable, List, Optional, Sequence
from uuid import uuid4

from storage.clock import as_utc, to_iso, utc_now
from storage.sqlite import Database

from .models import (
    INCOMPLETE,
    IN_PROGRESS,
    SCHEDULED,
    Interview,
    InvalidTransitionError,
    can_transition,
)


_COLUMNS = (
    "id, user_id, role, level, type, techstack_json, questions_json, finalized, cover_image, "
    "schedule_type, status, scheduled_for, started_at, created_at"
)


class InterviewStore:  # SQLite-backed interview collection
    def __init__(self, db: Database) -> None:  # Bind store to a shared database handle
        self._db = db

    def create(
        self,
        *,
        user_id: str,
        role: str,
        level: str,
        interview_type: str,
        techstack: Sequence[str],
        questions: Sequence[str],
        finalized: bool = True,
        cover_image: Optional[str] = None,
        schedule_type: str = "now",
        status: Optional[str] = None,
        scheduled_for: Optional[datetime] = None,
        started_at: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
    ) -> Interview:  # Persist a new interview and return it with its generated id
        if schedule_type == "later" and scheduled_for is None:
            raise ValueError("scheduledFor is required when scheduleType is 'later'")
        interview_id = uuid4().hex
        created = to_iso(created_at or utc_now())
        with self._db.connect() as conn:
            conn.execute(
                f"""
                INSERT INTO interviews ({_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    interview_id,
                    user_id,
                    role,
                    level,
                    interview_type,
                    json.dumps(list(techstack)),
                    json.dumps(list(questions)),
                    int(finalized),
                    cover_image,
                    schedule_type,
                    status,
                    to_iso(scheduled_for),
                    to_iso(started_at),
                    created,
                ),
            )
        return Interview(
            id=interview_id,
            user_id=user_id,
            role=role,
            level=level,
            type=interview_type,
            techstack=list(techstack),
            questions=list(questions),
            finalized=finalized,
            cover_image=cover_image,
            schedule_type=schedule_type,
            status=status,
            scheduled_for=to_iso(scheduled_for),
            started_at=to_iso(started_at),
            created_at=created,
        )

    def get(self, interview_id: str) -> Optional[Interview]:  # Fetch a single interview, None when absent
        with self._db.connect() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM interviews WHERE id = ?",
                (interview_id,),
            ).fetchone()
        return _row_to_interview(row) if row is not None else None

    def list_by_user(self, user_id: str) -> List[Interview]:  # Full history, newest first
        with self._db.connect() as conn:
            rows = conn.execute(
                f"""
                SELECT {_COLUMNS} FROM interviews
                WHERE user_id = ?
                ORDER BY created_at DESC, rowid DESC
                """,
                (user_id,),
            ).fetchall()
        return [_row_to_interview(row) for row in rows]

    def latest_for_user(self, user_id: str) -> List[Interview]:  # Most recent interview as a list of zero or one
        with self._db.connect() as conn:
            rows = conn.execute(
                f"""
                SELECT {_COLUMNS} FROM interviews
                WHERE user_id = ?
                ORDER BY created_at DESC, rowid DESC
                LIMIT 1
                """,
                (user_id,),
            ).fetchall()
        return [_row_to_interview(row) for row in rows]

    def list_public(self, user_id: str, *, limit: int = 20) -> List[Interview]:  # Finalized interviews of other users
        with self._db.connect() as conn:
            rows = conn.execute(
                f"""
                SELECT {_COLUMNS} FROM interviews
                WHERE finalized = 1
                ORDER BY created_at DESC, rowid DESC
                LIMIT ?
                """,
                (limit,),
            ).fetchall()
        # The requester's own rows are dropped after the fetch, so they count toward the limit.
        interviews = [_row_to_interview(row) for row in rows if row["user_id"] != user_id]
        interviews.sort(key=lambda item: as_utc(item.created_at), reverse=True)
        return interviews

    def list_scheduled(self, user_id: str) -> List[Interview]:  # Pending scheduled interviews, soonest first
        return _sort_by_schedule(self._list_by_status(user_id, SCHEDULED), descending=False)

    def list_incomplete(self, user_id: str) -> List[Interview]:  # Missed interviews, most recently missed first
        return _sort_by_schedule(self._list_by_status(user_id, INCOMPLETE), descending=True)

    def update_status(
        self,
        interview_id: str,
        status: str,
        *,
        now: Optional[datetime] = None,
    ) -> bool:  # Move an interview forward along its lifecycle
        """Apply a single status transition.

        Returns ``False`` when the interview does not exist or a concurrent
        writer moved it somewhere other than ``status``. Re-applying the
        current status is a no-op that reports success. Moving to
        ``in-progress`` stamps ``startedAt``.

        Raises:
            InvalidTransitionError: If the move would go backwards.
        """

        with self._db.connect() as conn:
            row = conn.execute(
                "SELECT status FROM interviews WHERE id = ?",
                (interview_id,),
            ).fetchone()
            if row is None:
                return False
            current = row["status"]
            if current == status:
                return True
            if not can_transition(current, status):
                raise InvalidTransitionError(f"Cannot move interview {interview_id} from {current} to {status}")
            if status == IN_PROGRESS:
                cursor = conn.execute(
                    "UPDATE interviews SET status = ?, started_at = ? WHERE id = ? AND status IS ?",
                    (status, to_iso(now or utc_now()), interview_id, current),
                )
            else:
                cursor = conn.execute(
                    "UPDATE interviews SET status = ? WHERE id = ? AND status IS ?",
                    (status, interview_id, current),
                )
            if cursor.rowcount == 1:
                return True
            refreshed = conn.execute(
                "SELECT status FROM interviews WHERE id = ?",
                (interview_id,),
            ).fetchone()
        return refreshed is not None and refreshed["status"] == status

    def mark_incomplete(self, interview_ids: Iterable[str]) -> int:  # Batch-expire scheduled interviews in one transaction
        params = [(INCOMPLETE, interview_id, SCHEDULED) for interview_id in interview_ids]
        if not params:
            return 0
        with self._db.connect() as conn:
            cursor = conn.executemany(
                "UPDATE interviews SET status = ? WHERE id = ? AND status = ?",
                params,
            )
            return int(cursor.rowcount)

    def _list_by_status(self, user_id: str, status: str) -> List[Interview]:  # Unsorted equality query
        with self._db.connect() as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM interviews WHERE user_id = ? AND status = ?",
                (user_id, status),
            ).fetchall()
        return [_row_to_interview(row) for row in rows]


def _sort_by_schedule(interviews: List[Interview], *, descending: bool) -> List[Interview]:  # Undated entries go last
    dated = [item for item in interviews if item.scheduled_for is not None]
    undated = [item for item in interviews if item.scheduled_for is None]
    dated.sort(key=lambda item: as_utc(item.scheduled_for), reverse=descending)
    return dated + undated


def _row_to_interview(row: sqlite3.Row) -> Interview:  # Map a table row to the domain model
    return Interview(
        id=row["id"],
        user_id=row["user_id"],
        role=row["role"],
        level=row["level"],
        type=row["type"],
        techstack=json.loads(row["techstack_json"]) if row["techstack_json"] else [],
        questions=json.loads(row["questions_json"]) if row["questions_json"] else [],
        finalized=bool(row["finalized"]),
        cover_image=row["cover_image"],
        schedule_type=row["schedule_type"],
        status=row["status"],
        scheduled_for=row["scheduled_for"],
        started_at=row["started_at"],
        created_at=row["created_at"],
    )


__all__ = ["InterviewStore"]
