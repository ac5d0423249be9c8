"""
Recommendation Engine

Builds the short, actionable recommendation list shown on the dashboard.

Assembly order is fixed: goal-based, workout, nutrition, hydration,
recovery, habits, general. The list is then cut to MAX_RECOMMENDATIONS.
Truncation drops the late entries first, so goal-based advice always
survives and general advice is the first to go.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from services.coach_entries import Domain, Experience, Goal, Profile
from services.intake_targets import MacroTargets
from services.metric_calculators import (
    DomainStats,
    HabitStats,
    HydrationStats,
    NutritionStats,
    RecoveryStats,
    ScheduleStats,
    WorkoutStats,
)

MAX_RECOMMENDATIONS = 5

# Dynamic rule thresholds
MIN_WEEKLY_WORKOUTS = 3
MUSCLE_VOLUME_FLOOR = 500
PROTEIN_TARGET_FRACTION = 0.8
HYDRATION_TARGET_FRACTION = 0.8
LOW_ENERGY = 5
PAIN_FREQUENCY_LIMIT = 20
HABIT_COMPLETION_FLOOR = 60

# Scheduling advice bounds on upcoming events
FEW_UPCOMING_EVENTS = 2
MANY_UPCOMING_EVENTS = 7


@dataclass(frozen=True)
class Recommendation:
    title: str
    content: str
    domain: Domain


GOAL_RECOMMENDATIONS: Dict[str, List[Recommendation]] = {
    Goal.BUILD_MUSCLE.value: [
        Recommendation(
            "Muscle Building Focus",
            "Focus on compound movements like squats, deadlifts and bench press. "
            "Aim for 3-4 sets of 6-12 reps with progressive overload.",
            Domain.GOAL,
        ),
        Recommendation(
            "Protein Intake",
            "Get 1.6-2.2 g of protein per kg of body weight to support muscle growth and recovery.",
            Domain.GOAL,
        ),
    ],
    Goal.LOSE_FAT.value: [
        Recommendation(
            "Fat Loss Strategy",
            "Create a caloric deficit through diet and exercise. "
            "Combine cardio and strength training for optimal fat loss.",
            Domain.GOAL,
        ),
        Recommendation(
            "High-Intensity Training",
            "Add HIIT workouts 2-3 times per week to boost metabolism.",
            Domain.GOAL,
        ),
    ],
    Goal.IMPROVE_ENDURANCE.value: [
        Recommendation(
            "Endurance Training",
            "Gradually increase cardio duration and intensity. Mix steady-state and interval work.",
            Domain.GOAL,
        ),
        Recommendation(
            "Recovery for Endurance",
            "Allow adequate recovery between cardio sessions and fuel for sustained energy.",
            Domain.GOAL,
        ),
    ],
}

COMPLETE_PROFILE = Recommendation(
    "Complete Your Profile",
    "Add your age, weight, height and goal to get personalized recommendations.",
    Domain.PROFILE,
)

GENERAL_RECOMMENDATIONS = [
    Recommendation(
        "Consistency is Key",
        "Build sustainable habits rather than chasing perfect workouts. Small, consistent efforts add up.",
        Domain.GENERAL,
    ),
    Recommendation(
        "Listen to Your Body",
        "Pay attention to your energy levels and pain. Rest when needed and adjust your training.",
        Domain.GENERAL,
    ),
]


def goal_recommendations(profile: Optional[Profile]) -> List[Recommendation]:
    if profile is None:
        return [COMPLETE_PROFILE]
    return list(GOAL_RECOMMENDATIONS.get(profile.goal or "", []))


def workout_recommendations(stats: WorkoutStats, profile: Optional[Profile]) -> List[Recommendation]:
    recommendations = []
    if stats.workouts_this_week < MIN_WEEKLY_WORKOUTS:
        recommendations.append(Recommendation(
            "Increase Workout Frequency",
            "Aim for at least 3 workouts per week to see consistent progress.",
            Domain.WORKOUT,
        ))
    if (
        profile is not None
        and profile.goal == Goal.BUILD_MUSCLE.value
        and stats.average_volume < MUSCLE_VOLUME_FLOOR
    ):
        recommendations.append(Recommendation(
            "Progressive Overload",
            "Add weight, sets or reps each week to keep building muscle.",
            Domain.WORKOUT,
        ))
    return recommendations


def nutrition_recommendations(stats: NutritionStats, targets: Optional[MacroTargets]) -> List[Recommendation]:
    if targets is None:
        return []
    if stats.average_daily_protein < targets.protein_g * PROTEIN_TARGET_FRACTION:
        return [Recommendation(
            "Increase Protein Intake",
            "Add more protein-rich foods to support your goals and recovery.",
            Domain.NUTRITION,
        )]
    return []


def hydration_recommendations(stats: HydrationStats) -> List[Recommendation]:
    if stats.average_daily < stats.target_ml * HYDRATION_TARGET_FRACTION:
        return [Recommendation(
            "Improve Hydration",
            "Set reminders to drink water through the day and carry a water bottle.",
            Domain.HYDRATION,
        )]
    return []


def recovery_recommendations(stats: RecoveryStats) -> List[Recommendation]:
    recommendations = []
    if stats.energy_entries > 0 and stats.average_energy < LOW_ENERGY:
        recommendations.append(Recommendation(
            "Prioritize Recovery",
            "Get 7-9 hours of quality sleep and try stress management techniques.",
            Domain.RECOVERY,
        ))
    if stats.pain_frequency > PAIN_FREQUENCY_LIMIT:
        recommendations.append(Recommendation(
            "Address Pain",
            "Consider seeing a physical therapist or healthcare provider about recurring pain.",
            Domain.RECOVERY,
        ))
    return recommendations


def habit_recommendations(stats: HabitStats) -> List[Recommendation]:
    if stats.average_completion_rate < HABIT_COMPLETION_FLOOR:
        return [Recommendation(
            "Simplify Habits",
            "Cut back to 1-2 key habits and build consistency with those first.",
            Domain.HABITS,
        )]
    return []


def generate_recommendations(
    profile: Optional[Profile],
    stats: DomainStats,
    targets: Optional[MacroTargets] = None,
) -> List[Recommendation]:
    """
    Merge goal-based, threshold-triggered and general advice, capped at
    MAX_RECOMMENDATIONS. Domains without data contribute nothing.
    """
    recommendations = goal_recommendations(profile)

    if not stats.workout.is_empty:
        recommendations.extend(workout_recommendations(stats.workout, profile))
    if not stats.nutrition.is_empty:
        recommendations.extend(nutrition_recommendations(stats.nutrition, targets))
    if not stats.hydration.is_empty:
        recommendations.extend(hydration_recommendations(stats.hydration))
    if not stats.recovery.is_empty:
        recommendations.extend(recovery_recommendations(stats.recovery))
    if not stats.habits.is_empty:
        recommendations.extend(habit_recommendations(stats.habits))

    recommendations.extend(GENERAL_RECOMMENDATIONS)
    return recommendations[:MAX_RECOMMENDATIONS]


# =============================================================================
# SCHEDULING
# =============================================================================

SCHEDULING_GOAL_ADVICE = {
    Goal.BUILD_MUSCLE.value: [
        "Schedule 3-4 strength training sessions per week",
        "Allow 48-72 hours between sessions for the same muscle group",
        "Include rest days for muscle recovery",
    ],
    Goal.LOSE_FAT.value: [
        "Schedule 4-5 cardio sessions per week",
        "Include 2-3 strength training sessions",
        "Mix high-intensity and moderate-intensity cardio",
    ],
    Goal.IMPROVE_ENDURANCE.value: [
        "Schedule 3-4 cardio sessions per week",
        "Include 1-2 strength training sessions",
        "Gradually increase duration and intensity",
    ],
}

SCHEDULING_EXPERIENCE_ADVICE = {
    Experience.BEGINNER.value: [
        "Start with 2-3 sessions per week",
        "Focus on learning proper form",
        "Allow plenty of recovery time",
    ],
    Experience.INTERMEDIATE.value: [
        "Aim for 4-5 sessions per week",
        "Include variety in your training",
        "Plan deload weeks every 4-6 weeks",
    ],
    Experience.ADVANCED.value: [
        "You can handle 5-6 sessions per week",
        "Consider periodization in your training",
        "Monitor recovery and adjust as needed",
    ],
}


def generate_scheduling_recommendations(
    profile: Optional[Profile],
    stats: ScheduleStats,
) -> List[str]:
    """Planning advice by goal, experience and how full the calendar is. Not capped."""
    if profile is None:
        return ["Complete your profile to get personalized scheduling recommendations."]

    recommendations = list(SCHEDULING_GOAL_ADVICE.get(profile.goal or "", []))
    recommendations.extend(SCHEDULING_EXPERIENCE_ADVICE.get(profile.experience or "", []))

    if stats.upcoming_events < FEW_UPCOMING_EVENTS:
        recommendations.append("Consider scheduling more events to maintain consistency")
    elif stats.upcoming_events > MANY_UPCOMING_EVENTS:
        recommendations.append("You have many events scheduled. Make sure you allow enough recovery time.")

    return recommendations
