"""FastAPI routes for interview generation, entry, dashboards and feedback."""
from __future__ import annotations

import logging
import sqlite3
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse, RedirectResponse

from api.dependencies import AppStores, get_feedback_store, get_interview_store, get_settings, get_stores
from api.schemas import AnalyticsResp, DashboardResp, EnterResp, ErrorResp, FeedbackReq
from config.settings import Settings
from feedback import Feedback, FeedbackOutcome, FeedbackStore, create_feedback
from interviews import Interview, InterviewStore
from question_gen import GenerationOutcome, InterviewRequest, generate_interview
from services.analytics import build_analytics
from services.dashboard import build_dashboard
from services.lifecycle import enter_interview


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

ENTRY_REDIRECTS = {
    "too-early": "/?error=too-early",
    "expired": "/?error=expired",
    "not-found": "/",
}


@router.get(
    "/interviews",
    response_model=List[Interview],
    responses={400: {"model": ErrorResp}, 500: {"model": ErrorResp}},
)
def latest_interview(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    store: InterviewStore = Depends(get_interview_store),
):  # Latest interview for a user as a list of zero or one
    if not user_id:
        return JSONResponse({"error": "userId is required"}, status_code=400)
    try:
        return store.latest_for_user(user_id)
    except sqlite3.Error:
        logger.exception("Error fetching interviews user=%s", user_id)
        return JSONResponse({"error": "Failed to fetch interviews"}, status_code=500)


@router.post("/interviews/generate", response_model=GenerationOutcome)
def generate(
    payload: InterviewRequest,
    store: InterviewStore = Depends(get_interview_store),
):  # Generate questions and store a new interview
    outcome = generate_interview(store, payload)
    if not outcome.success:
        return JSONResponse({"success": False}, status_code=500)
    return outcome


@router.get("/interviews/{interview_id}", response_model=Interview)
def fetch_interview(
    interview_id: str,
    store: InterviewStore = Depends(get_interview_store),
) -> Interview:
    interview = store.get(interview_id)
    if interview is None:
        raise HTTPException(status_code=404, detail="Interview not found")
    return interview


@router.get("/interviews/{interview_id}/enter", response_model=EnterResp)
def enter(
    interview_id: str,
    user_id: Optional[str] = Query(default=None, alias="userId"),
    stores: AppStores = Depends(get_stores),
    cfg: Settings = Depends(get_settings),
):  # Gate entry into the interview room
    result = enter_interview(stores.interviews, interview_id, window_minutes=cfg.START_WINDOW_MINUTES)
    if result.outcome in ENTRY_REDIRECTS:
        return RedirectResponse(url=ENTRY_REDIRECTS[result.outcome], status_code=303)
    if not result.admitted or result.interview is None:
        raise HTTPException(status_code=500, detail="Unable to start interview")
    feedback = stores.feedback.get_for_interview(interview_id, user_id) if user_id else None
    return EnterResp(interview=result.interview, feedback_id=feedback.id if feedback else None)


@router.get("/interviews/{interview_id}/feedback", response_model=Feedback)
def fetch_feedback(
    interview_id: str,
    user_id: str = Query(alias="userId", min_length=1),
    store: FeedbackStore = Depends(get_feedback_store),
) -> Feedback:
    record = store.get_for_interview(interview_id, user_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Feedback not found")
    return record


@router.post("/feedback", response_model=FeedbackOutcome)
def submit_feedback(
    payload: FeedbackReq,
    stores: AppStores = Depends(get_stores),
):  # Score a finished transcript
    outcome = create_feedback(
        stores.interviews,
        stores.feedback,
        interview_id=payload.interview_id,
        user_id=payload.user_id,
        transcript=payload.transcript,
        feedback_id=payload.feedback_id,
    )
    if not outcome.success:
        return JSONResponse({"success": False}, status_code=500)
    return outcome


@router.get("/dashboard", response_model=DashboardResp)
def dashboard(
    user_id: str = Query(alias="userId", min_length=1),
    store: InterviewStore = Depends(get_interview_store),
    cfg: Settings = Depends(get_settings),
) -> DashboardResp:
    sections = build_dashboard(store, user_id, app_settings=cfg)
    return DashboardResp(user_id=user_id, **sections.model_dump())


@router.get("/analytics", response_model=AnalyticsResp)
def analytics(
    user_id: str = Query(alias="userId", min_length=1),
    store: InterviewStore = Depends(get_interview_store),
    cfg: Settings = Depends(get_settings),
) -> AnalyticsResp:
    summary = build_analytics(
        store.list_by_user(user_id),
        top_n=cfg.ANALYTICS_TOP_TECH,
        recent_n=cfg.RECENT_ACTIVITY,
    )
    return AnalyticsResp(user_id=user_id, **summary.model_dump())
