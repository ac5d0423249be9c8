"""
Workout Generator

Builds a one-off workout from the profile's goal and experience level.

Templates are fixed per (goal, experience). Exercises that conflict with
keywords in the free-text medical notes are removed; if fewer than
MIN_EXERCISES survive, low-impact alternatives are appended. The result is
shuffled and capped at MAX_EXERCISES.

For endurance templates `reps` holds minutes.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple
import logging
import random

from services.coach_entries import Exercise, Experience, Goal, Profile

logger = logging.getLogger(__name__)

MIN_EXERCISES = 3
MAX_EXERCISES = 6


class ProfileRequiredError(ValueError):
    """Raised when a workout is requested before a profile exists."""


def _ex(name: str, sets: int, reps: int, weight: float = 0) -> Exercise:
    return Exercise(name=name, sets=sets, reps=reps, weight=weight)


WORKOUT_TEMPLATES: Dict[Tuple[str, str], List[Exercise]] = {
    (Goal.BUILD_MUSCLE.value, Experience.BEGINNER.value): [
        _ex("Push-ups", 3, 10),
        _ex("Squats", 3, 12),
        _ex("Dumbbell Rows", 3, 10, 5),
        _ex("Plank", 3, 30),
        _ex("Lunges", 3, 10),
    ],
    (Goal.BUILD_MUSCLE.value, Experience.INTERMEDIATE.value): [
        _ex("Bench Press", 4, 8, 40),
        _ex("Deadlifts", 4, 6, 50),
        _ex("Squats", 4, 8, 45),
        _ex("Pull-ups", 3, 8),
        _ex("Overhead Press", 3, 8, 25),
    ],
    (Goal.BUILD_MUSCLE.value, Experience.ADVANCED.value): [
        _ex("Bench Press", 5, 5, 60),
        _ex("Deadlifts", 5, 5, 80),
        _ex("Squats", 5, 5, 70),
        _ex("Pull-ups", 4, 10),
        _ex("Overhead Press", 4, 6, 40),
    ],
    (Goal.LOSE_FAT.value, Experience.BEGINNER.value): [
        _ex("Burpees", 3, 10),
        _ex("Mountain Climbers", 3, 20),
        _ex("Jumping Jacks", 3, 30),
        _ex("High Knees", 3, 30),
        _ex("Plank", 3, 45),
    ],
    (Goal.LOSE_FAT.value, Experience.INTERMEDIATE.value): [
        _ex("Kettlebell Swings", 4, 15, 12),
        _ex("Box Jumps", 4, 12),
        _ex("Burpees", 4, 15),
        _ex("Mountain Climbers", 4, 30),
        _ex("Jump Rope", 3, 60),
    ],
    (Goal.LOSE_FAT.value, Experience.ADVANCED.value): [
        _ex("Kettlebell Swings", 5, 20, 16),
        _ex("Box Jumps", 5, 15),
        _ex("Burpees", 5, 20),
        _ex("Mountain Climbers", 5, 40),
        _ex("Jump Rope", 4, 90),
    ],
    (Goal.IMPROVE_ENDURANCE.value, Experience.BEGINNER.value): [
        _ex("Jogging", 1, 20),
        _ex("Cycling", 1, 30),
        _ex("Walking", 1, 45),
        _ex("Swimming", 1, 15),
        _ex("Rowing", 1, 20),
    ],
    (Goal.IMPROVE_ENDURANCE.value, Experience.INTERMEDIATE.value): [
        _ex("Running", 1, 30),
        _ex("Cycling", 1, 45),
        _ex("Swimming", 1, 25),
        _ex("Rowing", 1, 30),
        _ex("Elliptical", 1, 35),
    ],
    (Goal.IMPROVE_ENDURANCE.value, Experience.ADVANCED.value): [
        _ex("Running", 1, 45),
        _ex("Cycling", 1, 60),
        _ex("Swimming", 1, 40),
        _ex("Rowing", 1, 45),
        _ex("Elliptical", 1, 50),
    ],
}

FALLBACK_TEMPLATE = (Goal.BUILD_MUSCLE.value, Experience.BEGINNER.value)

# medical keywords -> exercises to drop (lowercase names)
MEDICAL_RESTRICTIONS: List[Tuple[Tuple[str, ...], frozenset]] = [
    (("back", "spine"), frozenset({"deadlifts", "squats", "overhead press"})),
    (("knee",), frozenset({"squats", "lunges", "box jumps", "jumping jacks"})),
    (("shoulder",), frozenset({"overhead press", "pull-ups", "push-ups"})),
    (("heart", "cardiac"), frozenset({"burpees", "box jumps", "jumping jacks", "high knees"})),
]

SAFE_ALTERNATIVES: List[Exercise] = [
    _ex("Walking", 1, 30),
    _ex("Cycling", 1, 20),
    _ex("Swimming", 1, 15),
    _ex("Plank", 3, 30),
    _ex("Bird Dog", 3, 10),
]


@dataclass(frozen=True)
class GeneratedWorkout:
    date: date
    goal: Optional[str]
    experience: Optional[str]
    exercises: Tuple[Exercise, ...]


def apply_medical_limitations(exercises: Sequence[Exercise], medical: Optional[str]) -> List[Exercise]:
    """
    Drop exercises flagged by keywords in the medical notes.

    Matching is a case-insensitive substring check, so "lower back pain"
    triggers the back rule.
    """
    if not medical:
        return list(exercises)

    notes = medical.lower()
    filtered = list(exercises)
    for keywords, excluded in MEDICAL_RESTRICTIONS:
        if any(keyword in notes for keyword in keywords):
            filtered = [ex for ex in filtered if ex.name.lower() not in excluded]

    if len(filtered) < MIN_EXERCISES:
        filtered.extend(SAFE_ALTERNATIVES)
    return filtered


def generate_workout(
    profile: Optional[Profile],
    on: date,
    rng: Optional[random.Random] = None,
) -> GeneratedWorkout:
    if profile is None:
        raise ProfileRequiredError("Please complete your profile first")

    template = WORKOUT_TEMPLATES.get((profile.goal, profile.experience))
    if template is None:
        logger.info(
            f"No workout template for goal={profile.goal} experience={profile.experience}, using fallback"
        )
        template = WORKOUT_TEMPLATES[FALLBACK_TEMPLATE]

    exercises = apply_medical_limitations(template, profile.medical)
    (rng or random.Random()).shuffle(exercises)

    return GeneratedWorkout(
        date=on,
        goal=profile.goal,
        experience=profile.experience,
        exercises=tuple(exercises[:MAX_EXERCISES]),
    )
