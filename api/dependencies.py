"""Request-scoped access to the stores built at application start."""
from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from config.settings import Settings
from feedback.store import FeedbackStore
from interviews import InterviewStore
from storage.sqlite import Database


@dataclass(frozen=True)
class AppStores:
    db: Database
    interviews: InterviewStore
    feedback: FeedbackStore

    @classmethod
    def open(cls, db: Database) -> "AppStores":
        return cls(db=db, interviews=InterviewStore(db), feedback=FeedbackStore(db))


def get_stores(request: Request) -> AppStores:
    return request.app.state.stores


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_interview_store(request: Request) -> InterviewStore:
    return get_stores(request).interviews


def get_feedback_store(request: Request) -> FeedbackStore:
    return get_stores(request).feedback


__all__ = ["AppStores", "get_feedback_store", "get_interview_store", "get_settings", "get_stores"]
