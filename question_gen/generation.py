from __future__ import annotations  # Question generation and interview creation

import logging
import random
import sqlite3
from datetime import datetime
from textwrap import dedent
from typing import List, Optional

from pydantic import ValidationError

from config.registry import QUESTIONS_KEY, get_model
from interviews import IN_PROGRESS, SCHEDULED, Interview, InterviewStore
from llm_gateway import LlmGatewayError
from observability import log_event
from storage.clock import as_utc, utc_now

from .models import GeneratedQuestions, GenerationOutcome, InterviewRequest


logger = logging.getLogger(__name__)

COVER_IMAGES: List[str] = [
    "/covers/adobe.png",
    "/covers/amazon.png",
    "/covers/facebook.png",
    "/covers/hostinger.png",
    "/covers/pinterest.png",
    "/covers/quora.png",
    "/covers/reddit.png",
    "/covers/skype.png",
    "/covers/spotify.png",
    "/covers/telegram.png",
    "/covers/tiktok.png",
    "/covers/yahoo.png",
]


def random_cover() -> str:
    return random.choice(COVER_IMAGES)


def _build_prompt(request: InterviewRequest) -> str:
    return dedent(
        f"""
        Prepare questions for a job interview.
        The job role is {request.role}.
        The job experience level is {request.level}.
        The tech stack used in the job is: {", ".join(request.tech_list())}.
        The focus between behavioural and technical questions should lean towards: {request.type}.
        The amount of questions required is: {request.amount}.
        Please return only the questions, without any additional text.
        The questions are going to be read by a voice assistant so do not use "/" or "*" or any other special characters which might break the voice assistant.
        """
    ).strip()


def generate_questions(request: InterviewRequest) -> List[str]:  # Ask the bound model for exactly ``amount`` questions
    llm = get_model(QUESTIONS_KEY)
    raw = llm(prompt=_build_prompt(request))
    result = GeneratedQuestions.model_validate(raw)
    questions = [item.strip() for item in result.questions if item and item.strip()]
    if len(questions) < request.amount:
        raise ValueError(f"Expected {request.amount} questions, generator returned {len(questions)}")
    return questions[: request.amount]


def create_interview(
    store: InterviewStore,
    request: InterviewRequest,
    questions: List[str],
    *,
    now: Optional[datetime] = None,
) -> Interview:
    """Persist a generated interview with an explicit starting status.

    Immediate interviews start ``in-progress``; scheduled ones wait in
    ``scheduled`` until the start window opens.
    """

    created = as_utc(now) if now else utc_now()
    later = request.schedule_type == "later"
    return store.create(
        user_id=request.user_id,
        role=request.role,
        level=request.level,
        interview_type=request.type,
        techstack=request.tech_list(),
        questions=questions,
        finalized=True,
        cover_image=random_cover(),
        schedule_type=request.schedule_type,
        status=SCHEDULED if later else IN_PROGRESS,
        scheduled_for=request.scheduled_for if later else None,
        started_at=None if later else created,
        created_at=created,
    )


def generate_interview(
    store: InterviewStore,
    request: InterviewRequest,
    *,
    now: Optional[datetime] = None,
) -> GenerationOutcome:  # Generate questions and store the interview; nothing is stored on failure
    try:
        questions = generate_questions(request)
        interview = create_interview(store, request, questions, now=now)
    except (LlmGatewayError, ValidationError, ValueError, KeyError, sqlite3.Error):
        logger.exception("Interview generation failed user=%s role=%s", request.user_id, request.role)
        log_event("interview.generate", request.user_id, outcome="failed")
        return GenerationOutcome(success=False)
    log_event(
        "interview.generate",
        request.user_id,
        interview_id=interview.id,
        status=interview.status,
        outcome="created",
    )
    return GenerationOutcome(success=True, interview_id=interview.id)


__all__ = ["COVER_IMAGES", "create_interview", "generate_interview", "generate_questions", "random_cover"]
