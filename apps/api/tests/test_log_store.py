"""
Tests for the SQL-backed log store

Rows go in through the ORM; what comes out must be immutable value types,
scoped to one user and filtered by date.
"""
from datetime import date, datetime, time

import pytest

from models import (
    Habit,
    HabitCompletionLog,
    HydrationLog,
    NutritionLog,
    PainFatigueLog,
    Profile,
    ScheduledEventLog,
    WorkoutLog,
)
from services.coach_entries import EnergyEntry, Exercise, PainEntry
from services.log_store import SqlLogStore, exercise_from_dict


@pytest.fixture
def store(db_session):
    return SqlLogStore(db_session)


def add_all(db_session, *rows):
    db_session.add_all(rows)
    db_session.commit()


class TestConversions:
    def test_exercise_defaults(self):
        assert exercise_from_dict({"name": "Plank", "sets": 3}) == Exercise("Plank", 3, 0, 0.0)
        assert exercise_from_dict({}).name == "Unknown"

    def test_workout_exercises_and_volume(self, db_session, store, test_user):
        add_all(db_session, WorkoutLog(
            user_id=test_user.id,
            date=date(2026, 3, 10),
            workout_type="strength",
            exercises=[{"name": "Squats", "sets": 3, "reps": 10, "weight": 60}],
        ))

        [workout] = store.list_workouts(test_user.id)

        assert workout.exercises == (Exercise("Squats", 3, 10, 60.0),)
        assert workout.volume == 1800
        assert workout.workout_type == "strength"

    def test_nutrition_macros(self, db_session, store, test_user):
        add_all(db_session, NutritionLog(
            user_id=test_user.id, date=date(2026, 3, 10), food_name="Eggs",
            calories=150, protein_g=12, carbs_g=1, fat_g=10,
        ))

        [meal] = store.list_nutrition(test_user.id)

        assert (meal.calories, meal.protein, meal.carbs, meal.fat) == (150, 12, 1, 10)

    def test_pain_fatigue_shapes(self, db_session, store, test_user):
        add_all(
            db_session,
            PainFatigueLog(user_id=test_user.id, entry_type="energy", date=date(2026, 3, 10), level=6),
            PainFatigueLog(user_id=test_user.id, entry_type="pain", date=date(2026, 3, 10),
                           location="knee", intensity=4),
        )

        entries = store.list_pain_fatigue(test_user.id)

        assert sorted(type(e).__name__ for e in entries) == ["EnergyEntry", "PainEntry"]
        energy = next(e for e in entries if isinstance(e, EnergyEntry))
        pain = next(e for e in entries if isinstance(e, PainEntry))
        assert energy.level == 6
        assert (pain.location, pain.intensity) == ("knee", 4)

    def test_scheduled_event(self, db_session, store, test_user):
        row = ScheduledEventLog(user_id=test_user.id, title="Swim", date=date(2026, 3, 12),
                                time=time(7, 30), event_type="cardio")
        add_all(db_session, row)

        [event] = store.list_scheduled_events(test_user.id)

        assert event.id == row.id
        assert event.starts_at == datetime(2026, 3, 12, 7, 30)


class TestScoping:
    def test_other_users_rows_are_invisible(self, db_session, store, test_user, other_user):
        add_all(
            db_session,
            HydrationLog(user_id=test_user.id, date=date(2026, 3, 10), amount_ml=500),
            HydrationLog(user_id=other_user.id, date=date(2026, 3, 10), amount_ml=900),
        )

        entries = store.list_hydration(test_user.id)

        assert [e.amount_ml for e in entries] == [500]

    def test_date_range_is_inclusive(self, db_session, store, test_user):
        add_all(db_session, *[
            HydrationLog(user_id=test_user.id, date=date(2026, 3, day), amount_ml=day * 100)
            for day in (8, 9, 10, 11)
        ])

        entries = store.list_hydration(test_user.id, start=date(2026, 3, 9), end=date(2026, 3, 10))

        assert sorted(e.date.day for e in entries) == [9, 10]

    def test_completions_join_through_habit_owner(self, db_session, store, test_user, other_user):
        mine = Habit(user_id=test_user.id, name="Stretch")
        theirs = Habit(user_id=other_user.id, name="Stretch")
        add_all(db_session, mine, theirs)
        add_all(
            db_session,
            HabitCompletionLog(habit_id=mine.id, date=date(2026, 3, 9), recorded_at=datetime(2026, 3, 9, 20)),
            HabitCompletionLog(habit_id=mine.id, date=date(2026, 3, 11), recorded_at=datetime(2026, 3, 11, 20)),
            HabitCompletionLog(habit_id=theirs.id, date=date(2026, 3, 9), recorded_at=datetime(2026, 3, 9, 21)),
        )

        completions = store.list_habit_completions(test_user.id, end=date(2026, 3, 10))

        assert len(completions) == 1
        assert completions[0].habit_id == mine.id
        assert completions[0].timestamp == datetime(2026, 3, 9, 20)
        assert [h.name for h in store.list_habits(test_user.id)] == ["Stretch"]


class TestProfile:
    def test_missing_profile(self, store, test_user):
        assert store.get_profile(test_user.id) is None

    def test_profile_fields(self, db_session, store, test_user):
        add_all(db_session, Profile(
            user_id=test_user.id, name="Sam", age=25, weight_kg=70, height_cm=175,
            goal="build-muscle", experience="beginner", medical="knee", hydration_target_ml=2500,
        ))

        profile = store.get_profile(test_user.id)

        assert profile.goal == "build-muscle"
        assert profile.medical == "knee"
        assert profile.hydration_target_ml == 2500
        assert profile.created_at is not None
