"""Pydantic schemas for the interview HTTP API."""
from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from feedback.models import TranscriptTurn
from interviews import Interview
from services.analytics import AnalyticsSummary
from services.dashboard import Dashboard


class FeedbackReq(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    interview_id: str = Field(min_length=1, validation_alias=AliasChoices("interviewId", "interview_id"))
    user_id: str = Field(min_length=1, validation_alias=AliasChoices("userId", "user_id"))
    transcript: List[TranscriptTurn] = Field(min_length=1)
    feedback_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("feedbackId", "feedback_id"))


class EnterResp(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    interview: Interview
    feedback_id: Optional[str] = Field(default=None, alias="feedbackId")


class DashboardResp(Dashboard):
    user_id: str


class AnalyticsResp(AnalyticsSummary):
    user_id: str


class ErrorResp(BaseModel):
    error: str
