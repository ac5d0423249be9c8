"""
Log API Endpoints

Create, list and delete the raw logs the coach report is built from:
workouts, nutrition, hydration, pain/fatigue, habits (with per-day
completions) and scheduled events.

Every query is scoped to the authenticated user. Rows owned by someone else
are reported as not found.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import date, datetime, timedelta
from typing import List, Optional
from uuid import UUID
import logging

from core.auth import get_current_user
from core.database import get_db
from core.exceptions import ConflictError, NotFoundError
from models import (
    Habit,
    HabitCompletionLog,
    HydrationLog,
    NutritionLog,
    PainFatigueLog,
    ScheduledEventLog,
    User,
    WorkoutLog,
)
from schemas import (
    HabitCompletionResponse,
    HabitCompletionUpdate,
    HabitCreate,
    HabitResponse,
    HydrationCreate,
    HydrationResponse,
    NutritionCreate,
    NutritionResponse,
    PainFatigueCreate,
    PainFatigueResponse,
    ScheduledEventCreate,
    ScheduledEventCreateResponse,
    ScheduledEventResponse,
    WorkoutCreate,
    WorkoutResponse,
)
from services.log_store import event_from_row
from services.schedule_conflicts import find_conflicts

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["logs"])


def _get_owned(db: Session, model, id: UUID, user: User, resource: str):
    entry = db.query(model).filter(model.id == id, model.user_id == user.id).first()
    if not entry:
        raise NotFoundError(resource, str(id))
    return entry


def _list_dated(db: Session, model, user: User, start_date: Optional[date], end_date: Optional[date]):
    query = db.query(model).filter(model.user_id == user.id)
    if start_date:
        query = query.filter(model.date >= start_date)
    if end_date:
        query = query.filter(model.date <= end_date)
    return query.order_by(model.date.desc(), model.created_at.desc()).all()


def _delete(db: Session, entry) -> None:
    db.delete(entry)
    db.commit()


# =============================================================================
# WORKOUTS
# =============================================================================

@router.post("/workouts", response_model=WorkoutResponse, status_code=201)
def create_workout(
    workout: WorkoutCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    entry = WorkoutLog(
        user_id=current_user.id,
        date=workout.date,
        name=workout.name,
        workout_type=workout.workout_type,
        duration_minutes=workout.duration_minutes,
        exercises=[e.model_dump() for e in workout.exercises],
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


@router.get("/workouts", response_model=List[WorkoutResponse])
def list_workouts(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _list_dated(db, WorkoutLog, current_user, start_date, end_date)


@router.delete("/workouts/{id}", status_code=204)
def delete_workout(
    id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _delete(db, _get_owned(db, WorkoutLog, id, current_user, "Workout"))
    return None


# =============================================================================
# NUTRITION
# =============================================================================

@router.post("/nutrition", response_model=NutritionResponse, status_code=201)
def create_nutrition_entry(
    meal: NutritionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    entry = NutritionLog(user_id=current_user.id, **meal.model_dump())
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


@router.get("/nutrition", response_model=List[NutritionResponse])
def list_nutrition_entries(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _list_dated(db, NutritionLog, current_user, start_date, end_date)


@router.delete("/nutrition/{id}", status_code=204)
def delete_nutrition_entry(
    id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _delete(db, _get_owned(db, NutritionLog, id, current_user, "Nutrition entry"))
    return None


# =============================================================================
# HYDRATION
# =============================================================================

@router.post("/hydration", response_model=HydrationResponse, status_code=201)
def create_hydration_entry(
    hydration: HydrationCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    entry = HydrationLog(user_id=current_user.id, **hydration.model_dump())
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


@router.get("/hydration", response_model=List[HydrationResponse])
def list_hydration_entries(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _list_dated(db, HydrationLog, current_user, start_date, end_date)


@router.delete("/hydration/{id}", status_code=204)
def delete_hydration_entry(
    id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _delete(db, _get_owned(db, HydrationLog, id, current_user, "Hydration entry"))
    return None


# =============================================================================
# PAIN & FATIGUE
# =============================================================================

@router.post("/pain-fatigue", response_model=PainFatigueResponse, status_code=201)
def create_pain_fatigue_entry(
    payload: PainFatigueCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    entry = PainFatigueLog(user_id=current_user.id, **payload.model_dump())
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


@router.get("/pain-fatigue", response_model=List[PainFatigueResponse])
def list_pain_fatigue_entries(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _list_dated(db, PainFatigueLog, current_user, start_date, end_date)


@router.delete("/pain-fatigue/{id}", status_code=204)
def delete_pain_fatigue_entry(
    id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _delete(db, _get_owned(db, PainFatigueLog, id, current_user, "Pain/fatigue entry"))
    return None


# =============================================================================
# HABITS
# =============================================================================

@router.post("/habits", response_model=HabitResponse, status_code=201)
def create_habit(
    habit: HabitCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Habit names are unique per user."""
    existing = db.query(Habit).filter(
        Habit.user_id == current_user.id,
        Habit.name == habit.name,
    ).first()
    if existing:
        raise ConflictError(f"Habit already exists: {habit.name}")

    entry = Habit(user_id=current_user.id, **habit.model_dump())
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


@router.get("/habits", response_model=List[HabitResponse])
def list_habits(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return (
        db.query(Habit)
        .filter(Habit.user_id == current_user.id)
        .order_by(Habit.created_at, Habit.name)
        .all()
    )


@router.delete("/habits/{id}", status_code=204)
def delete_habit(
    id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Deleting a habit also deletes its completion history."""
    _delete(db, _get_owned(db, Habit, id, current_user, "Habit"))
    return None


@router.put("/habits/{id}/completions/{day}", response_model=HabitCompletionResponse)
def set_habit_completion(
    id: UUID,
    day: date,
    payload: HabitCompletionUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Mark a habit done (or not done) for one day.

    There is at most one record per habit per day; a second call overwrites
    the first.
    """
    habit = _get_owned(db, Habit, id, current_user, "Habit")

    record = db.query(HabitCompletionLog).filter(
        HabitCompletionLog.habit_id == habit.id,
        HabitCompletionLog.date == day,
    ).first()
    if record is None:
        record = HabitCompletionLog(habit_id=habit.id, date=day)
        db.add(record)

    record.completed = payload.completed
    record.recorded_at = datetime.now()
    db.commit()
    db.refresh(record)
    return record


@router.get("/habits/{id}/completions", response_model=List[HabitCompletionResponse])
def list_habit_completions(
    id: UUID,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    habit = _get_owned(db, Habit, id, current_user, "Habit")
    query = db.query(HabitCompletionLog).filter(HabitCompletionLog.habit_id == habit.id)
    if start_date:
        query = query.filter(HabitCompletionLog.date >= start_date)
    if end_date:
        query = query.filter(HabitCompletionLog.date <= end_date)
    return query.order_by(HabitCompletionLog.date.desc()).all()


# =============================================================================
# SCHEDULING
# =============================================================================

@router.post("/schedule", response_model=ScheduledEventCreateResponse, status_code=201)
def create_scheduled_event(
    event: ScheduledEventCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Schedule an event.

    Overlapping events (one hour assumed per event) are returned alongside
    the new event. They never block the write.
    """
    # Neighbouring days matter for events near midnight
    nearby = db.query(ScheduledEventLog).filter(
        ScheduledEventLog.user_id == current_user.id,
        ScheduledEventLog.date >= event.date - timedelta(days=1),
        ScheduledEventLog.date <= event.date + timedelta(days=1),
    ).all()

    entry = ScheduledEventLog(user_id=current_user.id, **event.model_dump())
    db.add(entry)
    db.commit()
    db.refresh(entry)

    rows_by_id = {row.id: row for row in nearby}
    conflicts = find_conflicts(event_from_row(entry), [event_from_row(row) for row in nearby])
    if conflicts:
        logger.info(
            f"Scheduled event {entry.id} overlaps {len(conflicts)} existing event(s)",
            extra={"extra_fields": {"user_id": str(current_user.id), "event_id": str(entry.id)}},
        )

    return ScheduledEventCreateResponse(
        event=ScheduledEventResponse.model_validate(entry),
        conflicts=[ScheduledEventResponse.model_validate(rows_by_id[c.id]) for c in conflicts],
    )


@router.get("/schedule", response_model=List[ScheduledEventResponse])
def list_scheduled_events(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _list_dated(db, ScheduledEventLog, current_user, start_date, end_date)


@router.delete("/schedule/{id}", status_code=204)
def delete_scheduled_event(
    id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _delete(db, _get_owned(db, ScheduledEventLog, id, current_user, "Scheduled event"))
    return None
