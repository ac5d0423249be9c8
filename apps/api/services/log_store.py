"""
Log Store

The read boundary between persistence and the coaching code.

LogStore and ProfileProvider are the interfaces the report builder depends
on. SqlLogStore implements both over the ORM tables and converts every row
into an immutable value type before returning it. Results are always scoped
to the requested user; callers never filter by user themselves.
"""

from datetime import date
from typing import List, Optional, Protocol
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from models import (
    Habit as HabitRow,
    HabitCompletionLog,
    HydrationLog,
    NutritionLog,
    PainFatigueLog,
    Profile as ProfileRow,
    ScheduledEventLog,
    WorkoutLog,
)
from services.coach_entries import (
    EnergyEntry,
    Exercise,
    Habit,
    HabitCompletion,
    HydrationEntry,
    NutritionEntry,
    PainEntry,
    PainFatigueEntry,
    Profile,
    ScheduledEvent,
    WorkoutEntry,
)

logger = logging.getLogger(__name__)


class LogStore(Protocol):
    def list_workouts(self, user_id: UUID, start: Optional[date] = None, end: Optional[date] = None) -> List[WorkoutEntry]: ...

    def list_nutrition(self, user_id: UUID, start: Optional[date] = None, end: Optional[date] = None) -> List[NutritionEntry]: ...

    def list_hydration(self, user_id: UUID, start: Optional[date] = None, end: Optional[date] = None) -> List[HydrationEntry]: ...

    def list_pain_fatigue(self, user_id: UUID, start: Optional[date] = None, end: Optional[date] = None) -> List[PainFatigueEntry]: ...

    def list_habits(self, user_id: UUID) -> List[Habit]: ...

    def list_habit_completions(self, user_id: UUID, start: Optional[date] = None, end: Optional[date] = None) -> List[HabitCompletion]: ...

    def list_scheduled_events(self, user_id: UUID, start: Optional[date] = None, end: Optional[date] = None) -> List[ScheduledEvent]: ...


class ProfileProvider(Protocol):
    def get_profile(self, user_id: UUID) -> Optional[Profile]: ...


# =============================================================================
# ROW CONVERSION
# =============================================================================

def exercise_from_dict(data: dict) -> Exercise:
    return Exercise(
        name=str(data.get("name") or "Unknown"),
        sets=int(data.get("sets") or 0),
        reps=int(data.get("reps") or 0),
        weight=float(data.get("weight") or 0),
    )


def workout_from_row(row: WorkoutLog) -> WorkoutEntry:
    return WorkoutEntry(
        date=row.date,
        exercises=tuple(exercise_from_dict(e) for e in (row.exercises or [])),
        name=row.name,
        workout_type=row.workout_type,
        duration_minutes=row.duration_minutes,
    )


def nutrition_from_row(row: NutritionLog) -> NutritionEntry:
    return NutritionEntry(
        date=row.date,
        food_name=row.food_name,
        calories=row.calories or 0.0,
        protein=row.protein_g or 0.0,
        carbs=row.carbs_g or 0.0,
        fat=row.fat_g or 0.0,
        logged_at=row.logged_at,
        meal_type=row.meal_type,
    )


def hydration_from_row(row: HydrationLog) -> HydrationEntry:
    return HydrationEntry(date=row.date, amount_ml=row.amount_ml, logged_at=row.logged_at)


def pain_fatigue_from_row(row: PainFatigueLog) -> PainFatigueEntry:
    if row.entry_type == "energy":
        return EnergyEntry(date=row.date, level=row.level, logged_at=row.logged_at)
    return PainEntry(
        date=row.date,
        location=row.location,
        intensity=row.intensity,
        notes=row.notes,
        logged_at=row.logged_at,
    )


def habit_from_row(row: HabitRow) -> Habit:
    return Habit(id=row.id, name=row.name, active=row.active, created_at=row.created_at)


def completion_from_row(row: HabitCompletionLog) -> HabitCompletion:
    return HabitCompletion(
        habit_id=row.habit_id,
        date=row.date,
        completed=row.completed,
        timestamp=row.recorded_at,
    )


def event_from_row(row: ScheduledEventLog) -> ScheduledEvent:
    return ScheduledEvent(
        title=row.title,
        date=row.date,
        time=row.time,
        event_type=row.event_type,
        notes=row.notes,
        id=row.id,
    )


def profile_from_row(row: ProfileRow) -> Profile:
    return Profile(
        age=row.age,
        weight_kg=row.weight_kg,
        height_cm=row.height_cm,
        goal=row.goal,
        experience=row.experience,
        medical=row.medical,
        name=row.name,
        created_at=row.created_at,
        hydration_target_ml=row.hydration_target_ml,
    )


# =============================================================================
# SQLALCHEMY IMPLEMENTATION
# =============================================================================

class SqlLogStore:
    """LogStore and ProfileProvider over one SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def _dated(self, model, user_id: UUID, start: Optional[date], end: Optional[date]):
        query = self.db.query(model).filter(model.user_id == user_id)
        if start is not None:
            query = query.filter(model.date >= start)
        if end is not None:
            query = query.filter(model.date <= end)
        return query

    def list_workouts(self, user_id, start=None, end=None):
        rows = self._dated(WorkoutLog, user_id, start, end).all()
        return [workout_from_row(row) for row in rows]

    def list_nutrition(self, user_id, start=None, end=None):
        rows = self._dated(NutritionLog, user_id, start, end).all()
        return [nutrition_from_row(row) for row in rows]

    def list_hydration(self, user_id, start=None, end=None):
        rows = self._dated(HydrationLog, user_id, start, end).all()
        return [hydration_from_row(row) for row in rows]

    def list_pain_fatigue(self, user_id, start=None, end=None):
        rows = self._dated(PainFatigueLog, user_id, start, end).all()
        return [pain_fatigue_from_row(row) for row in rows]

    def list_habits(self, user_id):
        rows = self.db.query(HabitRow).filter(HabitRow.user_id == user_id).all()
        return [habit_from_row(row) for row in rows]

    def list_habit_completions(self, user_id, start=None, end=None):
        query = (
            self.db.query(HabitCompletionLog)
            .join(HabitRow, HabitCompletionLog.habit_id == HabitRow.id)
            .filter(HabitRow.user_id == user_id)
        )
        if start is not None:
            query = query.filter(HabitCompletionLog.date >= start)
        if end is not None:
            query = query.filter(HabitCompletionLog.date <= end)
        return [completion_from_row(row) for row in query.all()]

    def list_scheduled_events(self, user_id, start=None, end=None):
        rows = self._dated(ScheduledEventLog, user_id, start, end).all()
        return [event_from_row(row) for row in rows]

    def get_profile(self, user_id):
        row = self.db.query(ProfileRow).filter(ProfileRow.user_id == user_id).first()
        if row is None:
            logger.debug(f"No profile for user {user_id}")
            return None
        return profile_from_row(row)
