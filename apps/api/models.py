from sqlalchemy import Column, Integer, Boolean, CheckConstraint, Float, Date, DateTime, ForeignKey, Text, String, Time, Index, UniqueConstraint, Uuid, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from core.database import Base
import uuid


class User(Base):
    __tablename__ = "app_user"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    email = Column(Text, unique=True, nullable=True)
    display_name = Column(Text, nullable=True)

    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")


class Profile(Base):
    """
    Body and goal data required before macro targets or workout
    generation can be computed. One per user.
    """
    __tablename__ = "profile"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("app_user.id"), nullable=False, unique=True)
    name = Column(Text, nullable=True)
    age = Column(Integer, nullable=False)
    weight_kg = Column(Float, nullable=False)
    height_cm = Column(Float, nullable=False)
    goal = Column(Text, nullable=False)  # 'build-muscle', 'lose-fat', 'improve-endurance'
    experience = Column(Text, nullable=False)  # 'beginner', 'intermediate', 'advanced'
    medical = Column(Text, nullable=True)
    hydration_target_ml = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="profile")

    __table_args__ = (
        CheckConstraint("age BETWEEN 13 AND 120", name="ck_profile_age_range"),
        CheckConstraint("weight_kg > 0", name="ck_profile_weight_positive"),
        CheckConstraint("height_cm > 0", name="ck_profile_height_positive"),
    )


class WorkoutLog(Base):
    """
    A completed workout session.

    exercises is a JSON list of {name, sets, reps, weight}.
    """
    __tablename__ = "workout_log"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("app_user.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    name = Column(Text, nullable=True)
    workout_type = Column(Text, nullable=True)  # 'strength', 'cardio', 'hiit', 'generated', ...
    duration_minutes = Column(Integer, nullable=True)
    exercises = Column(JSON, nullable=False, default=list)
    generated = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_workout_log_user_date", "user_id", "date"),
    )


class NutritionLog(Base):
    """One food item logged by the user."""
    __tablename__ = "nutrition_log"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("app_user.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    logged_at = Column(DateTime, nullable=True)
    meal_type = Column(Text, nullable=True)  # 'breakfast', 'lunch', 'dinner', 'snack'
    food_name = Column(Text, nullable=False)
    calories = Column(Float, nullable=False, default=0)
    protein_g = Column(Float, nullable=False, default=0)
    carbs_g = Column(Float, nullable=False, default=0)
    fat_g = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_nutrition_log_user_date", "user_id", "date"),
        CheckConstraint("calories >= 0", name="ck_nutrition_calories_non_negative"),
    )


class HydrationLog(Base):
    __tablename__ = "hydration_log"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("app_user.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    logged_at = Column(DateTime, nullable=True)
    amount_ml = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_hydration_log_user_date", "user_id", "date"),
        CheckConstraint("amount_ml > 0", name="ck_hydration_amount_positive"),
    )


class PainFatigueLog(Base):
    """
    Energy or pain entry.

    entry_type selects which columns are meaningful:
    - 'energy': level (0-10)
    - 'pain': location, intensity (1-10), notes
    """
    __tablename__ = "pain_fatigue_log"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("app_user.id"), nullable=False, index=True)
    entry_type = Column(Text, nullable=False)
    date = Column(Date, nullable=False)
    logged_at = Column(DateTime, nullable=True)
    level = Column(Integer, nullable=True)
    location = Column(Text, nullable=True)
    intensity = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_pain_fatigue_log_user_date", "user_id", "date"),
        CheckConstraint("entry_type IN ('energy', 'pain')", name="ck_pain_fatigue_entry_type"),
    )


class Habit(Base):
    __tablename__ = "habit"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("app_user.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    completions = relationship("HabitCompletionLog", back_populates="habit", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_habit_user_name"),
    )


class HabitCompletionLog(Base):
    """At most one completion record per habit per date."""
    __tablename__ = "habit_completion"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    habit_id = Column(Uuid(as_uuid=True), ForeignKey("habit.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    completed = Column(Boolean, default=True, nullable=False)
    recorded_at = Column(DateTime, nullable=False)

    habit = relationship("Habit", back_populates="completions")

    __table_args__ = (
        UniqueConstraint("habit_id", "date", name="uq_habit_completion_habit_date"),
    )


class ScheduledEventLog(Base):
    __tablename__ = "scheduled_event"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("app_user.id"), nullable=False, index=True)
    title = Column(Text, nullable=False)
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)
    event_type = Column(Text, nullable=False)  # 'workout', 'cardio', 'rest', 'meal-prep', ...
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_scheduled_event_user_date", "user_id", "date"),
    )
