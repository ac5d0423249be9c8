"""
Dashboard API Endpoints

Read-only views over the coach report: the full report, one domain's
stats and insights, the coach message and scheduling advice.

as_of defaults to the server's local time. Pass it explicitly to reproduce a
past report; the same as_of over unchanged logs returns the same body.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional
import logging

from core.auth import get_current_user
from core.config import settings
from core.database import get_db
from core.exceptions import NotFoundError
from models import User
from schemas import CoachMessageResponse, SchedulingRecommendationsResponse
from services.coach_entries import Domain
from services.coach_report import CoachReport, CoachReportBuilder, to_jsonable
from services.log_store import SqlLogStore
from services.metric_calculators import calculate_schedule_stats, local_naive
from services.recommendation_engine import generate_scheduling_recommendations

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/dashboard", tags=["dashboard"])

STATS_DOMAINS = (
    Domain.WORKOUT,
    Domain.NUTRITION,
    Domain.HYDRATION,
    Domain.RECOVERY,
    Domain.HABITS,
    Domain.SCHEDULING,
)


def _build(db: Session, user: User, as_of: Optional[datetime]) -> CoachReport:
    store = SqlLogStore(db)
    builder = CoachReportBuilder(store, store, settings.DEFAULT_HYDRATION_TARGET_ML)
    return builder.build_report(user.id, as_of or datetime.now())


@router.get("/report")
def get_report(
    as_of: Optional[datetime] = Query(None, description="Reference time (defaults to now)"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Full coach report: per-domain stats, targets, insights,
    recommendations (at most 5) and the coach message.
    """
    return _build(db, current_user, as_of).to_dict()


@router.get("/stats/{domain}")
def get_domain_stats(
    domain: str,
    as_of: Optional[datetime] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Stats and insights for a single domain."""
    if domain not in {d.value for d in STATS_DOMAINS}:
        raise NotFoundError("Stats domain", domain)

    report = _build(db, current_user, as_of)
    return {
        "domain": domain,
        "as_of": report.as_of.isoformat(),
        "stats": to_jsonable(getattr(report.stats, domain)),
        "insights": report.insights[domain],
    }


@router.get("/coach-message", response_model=CoachMessageResponse)
def get_coach_message(
    as_of: Optional[datetime] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    report = _build(db, current_user, as_of)
    return CoachMessageResponse(as_of=report.as_of, message=report.coach_message)


@router.get("/scheduling-recommendations", response_model=SchedulingRecommendationsResponse)
def get_scheduling_recommendations(
    as_of: Optional[datetime] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Planning advice by goal and experience, plus how full the calendar is."""
    store = SqlLogStore(db)
    as_of = local_naive(as_of or datetime.now())
    schedule = calculate_schedule_stats(store.list_scheduled_events(current_user.id), as_of)
    recommendations = generate_scheduling_recommendations(store.get_profile(current_user.id), schedule)
    return SchedulingRecommendationsResponse(as_of=as_of, recommendations=recommendations)
