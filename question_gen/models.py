from __future__ import annotations  # Interview generation request and response models

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from storage.clock import as_utc, utc_now

Level = Literal["Junior", "Mid-Level", "Senior", "Lead"]
InterviewType = Literal["Technical", "Behavioral", "Mixed"]


class InterviewRequest(BaseModel):  # Payload submitted by the interview form
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(min_length=1, validation_alias=AliasChoices("userId", "userid", "user_id"))
    role: str = Field(min_length=2)
    level: Level = "Junior"
    type: InterviewType = "Mixed"
    techstack: str = Field(min_length=2)
    amount: int = Field(default=5, ge=1, le=20)
    schedule_type: Literal["now", "later"] = Field(
        default="now", validation_alias=AliasChoices("scheduleType", "schedule_type")
    )
    scheduled_for: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("scheduledFor", "scheduled_for")
    )

    @field_validator("role")
    @classmethod
    def _strip_role(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Role must be at least 2 characters")
        return value

    @model_validator(mode="after")
    def _schedule_consistent(self) -> "InterviewRequest":
        if self.schedule_type == "later":
            if self.scheduled_for is None:
                raise ValueError("scheduledFor is required when scheduleType is 'later'")
            if as_utc(self.scheduled_for) < utc_now():
                raise ValueError("scheduledFor must not be in the past")
        elif self.scheduled_for is not None:
            raise ValueError("scheduledFor is only accepted when scheduleType is 'later'")
        if not self.tech_list():
            raise ValueError("Please enter at least one technology")
        return self

    def tech_list(self) -> List[str]:  # Comma separated input, order preserved, duplicates dropped
        seen: List[str] = []
        for item in self.techstack.split(","):
            name = item.strip()
            if name and name not in seen:
                seen.append(name)
        return seen


class GeneratedQuestions(BaseModel):  # Schema requested from the question generator
    questions: List[str] = Field(min_length=1)


class GenerationOutcome(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    interview_id: Optional[str] = Field(default=None, alias="interviewId")


__all__ = ["GeneratedQuestions", "GenerationOutcome", "InterviewRequest", "InterviewType", "Level"]
