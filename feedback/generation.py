from __future__ import annotations  # Transcript scoring through the feedback generator

import logging
import sqlite3
from textwrap import dedent
from typing import Optional, Sequence

from pydantic import ValidationError

from config.registry import FEEDBACK_KEY, get_model
from interviews import COMPLETED, IN_PROGRESS, InterviewStore, InvalidTransitionError
from llm_gateway import LlmGatewayError
from observability import log_event

from .models import FeedbackDraft, FeedbackOutcome, TranscriptTurn
from .store import FeedbackStore


logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a professional interviewer analyzing a mock interview. "
    "Your task is to evaluate the candidate based on structured categories"
)


def format_transcript(transcript: Sequence[TranscriptTurn]) -> str:  # One "- role: content" line per turn
    return "".join(f"- {turn.role}: {turn.content}\n" for turn in transcript)


def _build_prompt(transcript: Sequence[TranscriptTurn]) -> str:
    return dedent(
        """
        You are an AI interviewer analyzing a mock interview. Your task is to evaluate the candidate based on structured categories. Be thorough and detailed in your analysis. Don't be lenient with the candidate. If there are mistakes or areas for improvement, point them out.
        Transcript:
        {transcript}
        Please score the candidate from 0 to 100 in the following areas. Do not add categories other than the ones provided:
        - **Communication Skills**: Clarity, articulation, structured responses.
        - **Technical Knowledge**: Understanding of key concepts for the role.
        - **Problem Solving**: Ability to analyze problems and propose solutions.
        - **Cultural Fit**: Alignment with company values and job role.
        - **Confidence and Clarity**: Confidence in responses, engagement, and clarity.
        """
    ).strip().format(transcript=format_transcript(transcript))


def generate_feedback(transcript: Sequence[TranscriptTurn]) -> FeedbackDraft:  # Ask the bound model for a scored draft
    llm = get_model(FEEDBACK_KEY)
    raw = llm(system=SYSTEM_PROMPT, prompt=_build_prompt(transcript))
    return FeedbackDraft.model_validate(raw)


def create_feedback(
    interviews: InterviewStore,
    feedback: FeedbackStore,
    *,
    interview_id: str,
    user_id: str,
    transcript: Sequence[TranscriptTurn],
    feedback_id: Optional[str] = None,
) -> FeedbackOutcome:
    """Score ``transcript`` and persist the result.

    Supplying ``feedback_id`` overwrites that document; omitting it creates a
    new one. Nothing is written when generation fails. On success the owner's
    in-progress interview is closed as completed.
    """

    try:
        draft = generate_feedback(transcript)
        record = feedback.save(draft, interview_id=interview_id, user_id=user_id, feedback_id=feedback_id)
    except (LlmGatewayError, ValidationError, KeyError, sqlite3.Error):
        logger.exception("Error saving feedback interview=%s user=%s", interview_id, user_id)
        log_event("feedback.create", user_id, interview_id=interview_id, outcome="failed")
        return FeedbackOutcome(success=False)

    _complete_interview(interviews, interview_id, user_id)
    log_event("feedback.create", user_id, interview_id=interview_id, feedback_id=record.id, outcome="saved")
    return FeedbackOutcome(success=True, feedback_id=record.id)


def _complete_interview(interviews: InterviewStore, interview_id: str, user_id: str) -> None:
    try:
        interview = interviews.get(interview_id)
        if interview is None or interview.user_id != user_id or interview.status != IN_PROGRESS:
            return
        interviews.update_status(interview_id, COMPLETED)
    except (sqlite3.Error, InvalidTransitionError):
        logger.exception("Unable to mark interview %s completed", interview_id)


__all__ = ["SYSTEM_PROMPT", "create_feedback", "format_transcript", "generate_feedback"]
