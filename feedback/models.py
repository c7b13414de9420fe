from __future__ import annotations  # Feedback domain models

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

CategoryName = Literal[
    "Communication Skills",
    "Technical Knowledge",
    "Problem Solving",
    "Cultural Fit",
    "Confidence and Clarity",
]

CATEGORY_NAMES: List[str] = [
    "Communication Skills",
    "Technical Knowledge",
    "Problem Solving",
    "Cultural Fit",
    "Confidence and Clarity",
]


class CategoryScore(BaseModel):  # One scored category
    name: CategoryName
    score: int = Field(ge=0, le=100)
    comment: str = ""


class FeedbackDraft(BaseModel):  # Scored assessment returned by the feedback generator
    model_config = ConfigDict(populate_by_name=True)

    total_score: int = Field(ge=0, le=100, alias="totalScore")
    category_scores: List[CategoryScore] = Field(alias="categoryScores")
    strengths: List[str] = Field(default_factory=list)
    areas_for_improvement: List[str] = Field(default_factory=list, alias="areasForImprovement")
    final_assessment: str = Field(alias="finalAssessment")

    @field_validator("category_scores")
    @classmethod
    def _all_categories_once(cls, value: List[CategoryScore]) -> List[CategoryScore]:
        names = [item.name for item in value]
        if sorted(names) != sorted(CATEGORY_NAMES):
            raise ValueError(f"categoryScores must cover exactly: {', '.join(CATEGORY_NAMES)}")
        return sorted(value, key=lambda item: CATEGORY_NAMES.index(item.name))


class Feedback(FeedbackDraft):  # Stored feedback document
    id: str
    interview_id: str = Field(alias="interviewId")
    user_id: str = Field(alias="userId")
    created_at: datetime = Field(alias="createdAt")


class TranscriptTurn(BaseModel):  # One utterance captured by the voice agent
    role: str = Field(min_length=1)
    content: str


class FeedbackOutcome(BaseModel):  # Result reported back to the caller
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    feedback_id: Optional[str] = Field(default=None, alias="feedbackId")


__all__ = [
    "CATEGORY_NAMES",
    "CategoryName",
    "CategoryScore",
    "Feedback",
    "FeedbackDraft",
    "FeedbackOutcome",
    "TranscriptTurn",
]
