from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from datetime import datetime, date, time
from uuid import UUID
from typing import Optional, List, Literal

from services.coach_entries import Experience, Goal


# =============================================================================
# PROFILE
# =============================================================================

class ProfileUpdate(BaseModel):
    """Full profile replacement. Every field except name/medical/hydration target is required."""
    name: Optional[str] = None
    age: int = Field(..., ge=13, le=120)
    weight_kg: float = Field(..., gt=0, le=500)
    height_cm: float = Field(..., gt=0, le=300)
    goal: Goal
    experience: Experience
    medical: Optional[str] = None
    hydration_target_ml: Optional[int] = Field(None, ge=500, le=5000)

    model_config = ConfigDict(use_enum_values=True)


class ProfileResponse(BaseModel):
    id: UUID
    name: Optional[str]
    age: int
    weight_kg: float
    height_cm: float
    goal: str
    experience: str
    medical: Optional[str]
    hydration_target_ml: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MacroTargetsResponse(BaseModel):
    bmr: float
    tdee: float
    target_calories: float  # Unrounded
    calories: int
    protein_g: int
    carbs_g: int
    fat_g: int

    model_config = ConfigDict(from_attributes=True)


class TargetsResponse(BaseModel):
    macros: Optional[MacroTargetsResponse] = None
    hydration_ml: int
    recommended_hydration_ml: int

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# WORKOUTS
# =============================================================================

class ExerciseSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    sets: int = Field(0, ge=0)
    reps: int = Field(0, ge=0)
    weight: float = Field(0, ge=0)  # kg

    model_config = ConfigDict(from_attributes=True)


class WorkoutCreate(BaseModel):
    date: date
    name: Optional[str] = None
    workout_type: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, ge=0)
    exercises: List[ExerciseSchema] = []


class WorkoutResponse(BaseModel):
    id: UUID
    date: date
    name: Optional[str]
    workout_type: Optional[str]
    duration_minutes: Optional[int]
    exercises: List[ExerciseSchema]
    generated: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GenerateWorkoutRequest(BaseModel):
    workout_date: Optional[date] = None  # Defaults to today
    save: bool = False  # Also store it as a workout log entry
    seed: Optional[int] = None  # Fixes the exercise order


class GeneratedWorkoutResponse(BaseModel):
    date: date
    goal: Optional[str]
    experience: Optional[str]
    exercises: List[ExerciseSchema]
    workout_id: Optional[UUID] = None  # Set when saved

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# NUTRITION & HYDRATION
# =============================================================================

class NutritionCreate(BaseModel):
    date: date
    logged_at: Optional[datetime] = None
    meal_type: Optional[str] = None  # breakfast, lunch, dinner, snack
    food_name: str = Field(..., min_length=1, max_length=200)
    calories: float = Field(0, ge=0)
    protein_g: float = Field(0, ge=0)
    carbs_g: float = Field(0, ge=0)
    fat_g: float = Field(0, ge=0)


class NutritionResponse(BaseModel):
    id: UUID
    date: date
    logged_at: Optional[datetime]
    meal_type: Optional[str]
    food_name: str
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float

    model_config = ConfigDict(from_attributes=True)


class HydrationCreate(BaseModel):
    date: date
    logged_at: Optional[datetime] = None
    amount_ml: float = Field(..., gt=0, le=5000)


class HydrationResponse(BaseModel):
    id: UUID
    date: date
    logged_at: Optional[datetime]
    amount_ml: float

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# PAIN & FATIGUE
# =============================================================================

class PainFatigueCreate(BaseModel):
    """
    Either an energy entry (level 0-10) or a pain entry
    (location + intensity 1-10). Mixing the two shapes is rejected.
    """
    entry_type: Literal["energy", "pain"]
    date: date
    logged_at: Optional[datetime] = None
    level: Optional[int] = Field(None, ge=0, le=10)
    location: Optional[str] = Field(None, min_length=1, max_length=100)
    intensity: Optional[int] = Field(None, ge=1, le=10)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_shape(self):
        if self.entry_type == "energy":
            if self.level is None:
                raise ValueError("energy entries require level")
            if self.location is not None or self.intensity is not None:
                raise ValueError("energy entries cannot have location or intensity")
        else:
            if self.location is None or self.intensity is None:
                raise ValueError("pain entries require location and intensity")
            if self.level is not None:
                raise ValueError("pain entries cannot have level")
        return self


class PainFatigueResponse(BaseModel):
    id: UUID
    entry_type: str
    date: date
    logged_at: Optional[datetime]
    level: Optional[int]
    location: Optional[str]
    intensity: Optional[int]
    notes: Optional[str]

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# HABITS
# =============================================================================

class HabitCreate(BaseModel):
    name: str = Field(..., max_length=100)
    description: Optional[str] = None
    active: bool = True

    @field_validator("name")
    @classmethod
    def name_min_length(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Habit name must be at least 3 characters")
        return v


class HabitResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str]
    active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class HabitCompletionUpdate(BaseModel):
    completed: bool = True


class HabitCompletionResponse(BaseModel):
    habit_id: UUID
    date: date
    completed: bool
    recorded_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# SCHEDULING
# =============================================================================

class ScheduledEventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    date: date
    time: time
    event_type: str = Field(..., min_length=1, max_length=50)
    notes: Optional[str] = None


class ScheduledEventResponse(BaseModel):
    id: UUID
    title: str
    date: date
    time: time
    event_type: str
    notes: Optional[str]

    model_config = ConfigDict(from_attributes=True)


class ScheduledEventCreateResponse(BaseModel):
    """The stored event plus any overlapping events. Conflicts are advisory."""
    event: ScheduledEventResponse
    conflicts: List[ScheduledEventResponse] = []


# =============================================================================
# DASHBOARD
# =============================================================================

class CoachMessageResponse(BaseModel):
    as_of: datetime
    message: str


class SchedulingRecommendationsResponse(BaseModel):
    as_of: datetime
    recommendations: List[str]
