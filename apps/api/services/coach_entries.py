"""
Coach Entry Types

Immutable value records consumed by the metric calculators, insight
generators and recommendation engine. The log store converts ORM rows into
these before any aggregation happens, so the coaching code never touches a
session and never mutates what it is given.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union
from uuid import UUID


class Goal(str, Enum):
    BUILD_MUSCLE = "build-muscle"
    LOSE_FAT = "lose-fat"
    IMPROVE_ENDURANCE = "improve-endurance"


class Experience(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Trend(str, Enum):
    """Coarse 7-day vs previous 7-day classification."""
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"
    INSUFFICIENT_DATA = "insufficient_data"


class Domain(str, Enum):
    WORKOUT = "workout"
    NUTRITION = "nutrition"
    HYDRATION = "hydration"
    RECOVERY = "recovery"
    HABITS = "habits"
    SCHEDULING = "scheduling"
    GOAL = "goal"
    GENERAL = "general"
    PROFILE = "profile"


@dataclass(frozen=True)
class Exercise:
    name: str
    sets: int = 0
    reps: int = 0
    weight: float = 0.0

    @property
    def volume(self) -> float:
        return self.weight * self.sets * self.reps


@dataclass(frozen=True)
class WorkoutEntry:
    date: date
    exercises: Tuple[Exercise, ...] = ()
    name: Optional[str] = None
    workout_type: Optional[str] = None
    duration_minutes: Optional[int] = None

    @property
    def volume(self) -> float:
        return sum(exercise.volume for exercise in self.exercises)


@dataclass(frozen=True)
class NutritionEntry:
    """One logged food item."""
    date: date
    food_name: str
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    logged_at: Optional[datetime] = None
    meal_type: Optional[str] = None


@dataclass(frozen=True)
class HydrationEntry:
    date: date
    amount_ml: float
    logged_at: Optional[datetime] = None


@dataclass(frozen=True)
class EnergyEntry:
    date: date
    level: int  # 0-10
    logged_at: Optional[datetime] = None


@dataclass(frozen=True)
class PainEntry:
    date: date
    location: str
    intensity: int  # 1-10
    notes: Optional[str] = None
    logged_at: Optional[datetime] = None


PainFatigueEntry = Union[EnergyEntry, PainEntry]


@dataclass(frozen=True)
class Habit:
    id: UUID
    name: str
    active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class HabitCompletion:
    habit_id: UUID
    date: date
    completed: bool = True
    timestamp: Optional[datetime] = None


class CompletionIndex:
    """
    Read-only (habit_id, date) -> HabitCompletion lookup.

    When the same key appears twice the record with the later timestamp wins.
    """

    def __init__(self, completions: Iterable[HabitCompletion] = ()):
        records: Dict[Tuple[UUID, date], HabitCompletion] = {}
        for completion in completions:
            key = (completion.habit_id, completion.date)
            existing = records.get(key)
            if existing is None or _stamp(completion) >= _stamp(existing):
                records[key] = completion
        self._records: Mapping[Tuple[UUID, date], HabitCompletion] = MappingProxyType(records)

    def get(self, habit_id: UUID, day: date) -> Optional[HabitCompletion]:
        return self._records.get((habit_id, day))

    def is_completed(self, habit_id: UUID, day: date) -> bool:
        record = self._records.get((habit_id, day))
        return bool(record and record.completed)

    def completed_days(self, habit_id: UUID) -> frozenset:
        return frozenset(
            day for (hid, day), record in self._records.items()
            if hid == habit_id and record.completed
        )

    def __len__(self) -> int:
        return len(self._records)


def _stamp(completion: HabitCompletion) -> datetime:
    return completion.timestamp or datetime.min


@dataclass(frozen=True)
class ScheduledEvent:
    title: str
    date: date
    time: time
    event_type: str
    notes: Optional[str] = None
    id: Optional[UUID] = None

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.date, self.time)


@dataclass(frozen=True)
class Profile:
    """
    Body and goal data. goal/experience are kept as raw strings so that an
    unknown value degrades to default behaviour instead of failing.
    """
    age: int
    weight_kg: float
    height_cm: float
    goal: Optional[str] = None
    experience: Optional[str] = None
    medical: Optional[str] = None
    name: Optional[str] = None
    created_at: Optional[datetime] = None
    hydration_target_ml: Optional[int] = None


@dataclass(frozen=True)
class LogBundle:
    """Everything the report needs for one user, fetched once."""
    workouts: Tuple[WorkoutEntry, ...] = ()
    nutrition: Tuple[NutritionEntry, ...] = ()
    hydration: Tuple[HydrationEntry, ...] = ()
    pain_fatigue: Tuple[PainFatigueEntry, ...] = ()
    habits: Tuple[Habit, ...] = ()
    completions: CompletionIndex = field(default_factory=CompletionIndex)
    events: Tuple[ScheduledEvent, ...] = ()
