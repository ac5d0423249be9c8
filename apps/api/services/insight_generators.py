"""
Insight Generators

One rule table per domain. Each generator takes that domain's stats (never
raw entries) and returns an ordered list of short observations.

Rules are evaluated top to bottom and every matching rule adds a line; this
is not first-match-wins. A domain with no data yields exactly one
placeholder line so callers can always render something.
"""

from typing import Dict, List, Optional

from services.coach_entries import Domain, Goal, Profile, Trend
from services.intake_targets import MacroTargets
from services.metric_calculators import (
    HabitStats,
    HydrationStats,
    NutritionStats,
    RecoveryStats,
    ScheduleStats,
    WorkoutStats,
    most_common,
)


EMPTY_DOMAIN_MESSAGES: Dict[Domain, str] = {
    Domain.WORKOUT: "No workout data yet. Start logging your workouts to get performance insights.",
    Domain.NUTRITION: "No nutrition data yet. Start tracking your meals to get nutrition insights.",
    Domain.HYDRATION: "No hydration data yet. Start tracking your water intake to get hydration insights.",
    Domain.RECOVERY: "No energy or pain data yet. Log your daily energy and any pain to get recovery insights.",
    Domain.HABITS: "No habits yet. Add your first fitness habit to start tracking consistency.",
    Domain.SCHEDULING: "No events scheduled yet. Schedule your first workout to get planning insights.",
}

# Calorie intake within this many kcal of target counts as balanced
CALORIE_BALANCE_TOLERANCE = 200
# Protein this many grams under target triggers the muscle-building nudge
PROTEIN_SHORTFALL_G = 20

# Minimum weekly sessions per goal before frequency advice is given
GOAL_FREQUENCY_ADVICE = {
    Goal.BUILD_MUSCLE.value: (3, "For muscle building, aim for 3-4 workouts per week."),
    Goal.LOSE_FAT.value: (4, "For fat loss, aim for 4-5 workouts per week."),
    Goal.IMPROVE_ENDURANCE.value: (3, "For endurance, aim for 3-4 cardio sessions per week."),
}

EVENT_TYPE_LABELS = {
    "workout": "Workout",
    "cardio": "Cardio",
    "strength": "Strength Training",
    "flexibility": "Flexibility",
    "rest": "Rest Day",
    "meal-prep": "Meal Prep",
    "other": "Other",
}


def _placeholder(domain: Domain) -> List[str]:
    return [EMPTY_DOMAIN_MESSAGES[domain]]


def workout_insights(stats: WorkoutStats, profile: Optional[Profile] = None) -> List[str]:
    if stats.is_empty:
        return _placeholder(Domain.WORKOUT)

    goal = profile.goal if profile else None
    insights: List[str] = []

    if stats.total_volume > 0:
        insights.append(f"Your average workout volume is {stats.average_volume:.0f} kg.")
        if goal == Goal.BUILD_MUSCLE.value:
            if stats.average_volume > 1000:
                insights.append("Excellent volume for muscle building!")
            elif stats.average_volume > 500:
                insights.append("Good volume. Increase it gradually for better muscle gains.")
            else:
                insights.append("Focus on progressive overload to raise your volume for muscle building.")

    insights.append(f"You're averaging {stats.workout_frequency:.1f} workouts per week.")
    advice = GOAL_FREQUENCY_ADVICE.get(goal or "")
    if advice and stats.workout_frequency < advice[0]:
        insights.append(advice[1])

    if stats.workout_streak > 0:
        insights.append(f"Great job maintaining a {stats.workout_streak}-day workout streak!")

    return insights


def nutrition_insights(
    stats: NutritionStats,
    targets: Optional[MacroTargets] = None,
    profile: Optional[Profile] = None,
) -> List[str]:
    """
    Calorie and protein lines compare per-day averages against the daily
    targets, so they only appear when targets exist (i.e. a profile is set).
    """
    if stats.is_empty:
        return _placeholder(Domain.NUTRITION)

    goal = profile.goal if profile else None
    insights: List[str] = []

    if targets is not None and stats.average_daily_calories > 0:
        difference = stats.average_daily_calories - targets.target_calories
        if abs(difference) < CALORIE_BALANCE_TOLERANCE:
            insights.append("Your calorie intake is well-balanced.")
        elif difference > 0:
            insights.append("You're consuming more calories than recommended.")
        else:
            insights.append("You're consuming fewer calories than recommended.")

    if targets is not None and stats.average_daily_protein > 0:
        difference = stats.average_daily_protein - targets.protein_g
        if goal == Goal.BUILD_MUSCLE.value and difference < -PROTEIN_SHORTFALL_G:
            insights.append("Consider increasing protein intake for muscle building.")
        elif difference > 0:
            insights.append("Good protein intake!")

    insights.append(f"You've logged {stats.total_meals} meals.")
    if stats.most_logged_food:
        insights.append(f"Your most logged food is {stats.most_logged_food}.")

    return insights


def hydration_insights(stats: HydrationStats) -> List[str]:
    if stats.is_empty:
        return _placeholder(Domain.HYDRATION)

    insights: List[str] = []

    if stats.target_ml > 0:
        percentage = stats.average_daily / stats.target_ml * 100
        if percentage >= 100:
            insights.append("Excellent hydration! You consistently meet your daily water goal.")
        elif percentage >= 80:
            insights.append("Good hydration habits. You're close to your daily target.")
        else:
            insights.append("Consider increasing your water intake to meet your daily hydration goal.")

    if stats.current_streak > 0:
        insights.append(f"You've met your hydration goal for {stats.current_streak} consecutive day(s).")

    if stats.target_achievement > 80:
        insights.append(f"You meet your hydration target {stats.target_achievement:.1f}% of the time.")

    if stats.today_target_met:
        insights.append("Congratulations! You've met your hydration goal for today.")
    elif stats.today_percentage < 50:
        insights.append("You're below 50% of today's hydration goal. Drink some more water.")

    return insights


def recovery_insights(stats: RecoveryStats) -> List[str]:
    if stats.is_empty:
        return _placeholder(Domain.RECOVERY)

    insights: List[str] = []

    if stats.energy_entries > 0:
        if stats.average_energy >= 7:
            insights.append("Excellent energy levels! You're well-rested and ready for training.")
        elif stats.average_energy >= 5:
            insights.append("Good energy levels. Keep an eye on sleep and stress.")
        else:
            insights.append("Your energy levels are low. Focus on recovery, sleep and stress management.")

    if stats.energy_trend == Trend.IMPROVING:
        insights.append("Your energy levels are improving. Great work on recovery!")
    elif stats.energy_trend == Trend.DECLINING:
        insights.append("Your energy levels are declining. Consider a rest day or lower intensity.")

    if stats.pain_frequency > 30:
        insights.append("You're experiencing frequent pain. Consider consulting a healthcare provider.")
    elif stats.most_common_pain_location:
        insights.append(
            f"Your most common pain location is {stats.most_common_pain_location}. "
            "Consider targeted stretching or strengthening."
        )

    if stats.today_energy_level is not None:
        if stats.today_energy_level < 3:
            insights.append("Your energy is very low today. Consider a light workout or rest day.")
        elif stats.today_energy_level > 8:
            insights.append("You have high energy today! Great time for an intense workout.")

    if stats.today_has_pain and stats.today_average_pain_intensity > 7:
        insights.append("You're experiencing severe pain today. Rest, and see a provider if it persists.")

    return insights


def habit_insights(stats: HabitStats) -> List[str]:
    if stats.is_empty:
        return _placeholder(Domain.HABITS)

    insights: List[str] = []

    if stats.average_completion_rate >= 80:
        insights.append("Excellent! You're maintaining very high habit completion rates.")
    elif stats.average_completion_rate >= 60:
        insights.append("Good job! You're doing well with your habits.")
    elif stats.average_completion_rate < 40:
        insights.append("Your habit completion rate is low. Consider simplifying your habits.")

    if stats.best_habit:
        insights.append(f'Your best performing habit is "{stats.best_habit.name}".')

    if stats.worst_habit and stats.best_habit and stats.worst_habit.habit_id != stats.best_habit.habit_id:
        insights.append(f'Consider focusing on "{stats.worst_habit.name}". It has the lowest completion rate.')

    if stats.today_total > 0:
        if stats.today_completion_rate == 100:
            insights.append("Perfect! You've completed all your habits today.")
        elif stats.today_completion_rate > 70:
            insights.append("Great progress today! You're on track with your habits.")
        elif stats.today_completion_rate < 50:
            insights.append("You're behind on today's habits. Try to complete at least one more.")

    return insights


def scheduling_insights(stats: ScheduleStats) -> List[str]:
    if stats.is_empty:
        return _placeholder(Domain.SCHEDULING)

    insights: List[str] = []

    if stats.upcoming_events == 0:
        insights.append("No upcoming events scheduled. Consider planning your next workout session.")
    else:
        insights.append(f"You have {stats.upcoming_events} upcoming event(s) scheduled.")

    if stats.past_events > 0:
        insights.append(f"You've completed {stats.past_events} scheduled event(s).")

    top_type = most_common(
        event_type for event_type, count in stats.events_by_type.items() for _ in range(count)
    )
    if top_type:
        label = EVENT_TYPE_LABELS.get(top_type, top_type)
        insights.append(f"Your most scheduled activity type is: {label}")

    return insights
