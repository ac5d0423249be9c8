"""
Profile API Endpoints

The profile drives every target: calories and macros, hydration and the
generated workouts. Targets degrade gracefully when no profile exists;
workout generation does not.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from dataclasses import asdict
from datetime import date
from typing import Optional
import logging
import random

from core.auth import get_current_user
from core.config import settings
from core.database import get_db
from core.exceptions import NotFoundError, ValidationError
from models import Profile, User, WorkoutLog
from schemas import (
    ExerciseSchema,
    GeneratedWorkoutResponse,
    GenerateWorkoutRequest,
    MacroTargetsResponse,
    ProfileResponse,
    ProfileUpdate,
    TargetsResponse,
)
from services.intake_targets import (
    calculate_macro_targets,
    recommended_hydration_ml,
    resolve_hydration_target,
)
from services.log_store import profile_from_row
from services.workout_generator import ProfileRequiredError, generate_workout

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/profile", tags=["profile"])


def _profile_row(db: Session, user: User) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.user_id == user.id).first()


@router.get("", response_model=ProfileResponse)
def get_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    row = _profile_row(db, current_user)
    if not row:
        raise NotFoundError("Profile", str(current_user.id))
    return row


@router.put("", response_model=ProfileResponse)
def upsert_profile(
    payload: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create the profile on first call, replace it afterwards."""
    row = _profile_row(db, current_user)
    if row is None:
        row = Profile(user_id=current_user.id)
        db.add(row)
        logger.info(f"Creating profile for user {current_user.id}")

    for field, value in payload.model_dump().items():
        setattr(row, field, value)

    db.commit()
    db.refresh(row)
    return row


@router.get("/targets", response_model=TargetsResponse)
def get_targets(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Daily calorie/macro and hydration targets.

    Without a profile, macros is null and hydration falls back to the
    configured default.
    """
    row = _profile_row(db, current_user)
    profile = profile_from_row(row) if row else None
    default_ml = settings.DEFAULT_HYDRATION_TARGET_ML
    macros = calculate_macro_targets(profile)

    return TargetsResponse(
        macros=MacroTargetsResponse(**asdict(macros)) if macros else None,
        hydration_ml=resolve_hydration_target(profile, default_ml),
        recommended_hydration_ml=recommended_hydration_ml(profile, default_ml),
    )


@router.post("/generate-workout", response_model=GeneratedWorkoutResponse)
def create_generated_workout(
    request: Optional[GenerateWorkoutRequest] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Generate a workout from the profile's goal and experience, filtered by
    medical notes. With save=true it is also stored as a workout log entry.
    """
    row = _profile_row(db, current_user)
    profile = profile_from_row(row) if row else None
    request = request or GenerateWorkoutRequest()
    rng = random.Random(request.seed) if request.seed is not None else None

    try:
        workout = generate_workout(profile, request.workout_date or date.today(), rng)
    except ProfileRequiredError as e:
        raise ValidationError(str(e), field="profile")

    exercises = [
        ExerciseSchema(name=e.name, sets=e.sets, reps=e.reps, weight=e.weight)
        for e in workout.exercises
    ]

    workout_id = None
    if request.save:
        entry = WorkoutLog(
            user_id=current_user.id,
            date=workout.date,
            name=f"Generated {workout.goal} workout",
            workout_type="generated",
            exercises=[e.model_dump() for e in exercises],
            generated=True,
        )
        db.add(entry)
        db.commit()
        db.refresh(entry)
        workout_id = entry.id

    return GeneratedWorkoutResponse(
        date=workout.date,
        goal=workout.goal,
        experience=workout.experience,
        exercises=exercises,
        workout_id=workout_id,
    )
