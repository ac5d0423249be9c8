"""
Tests for the per-domain insight rule tables
"""
import pytest
from uuid import uuid4

from services.coach_entries import Domain, Profile, Trend
from services.insight_generators import (
    EMPTY_DOMAIN_MESSAGES,
    habit_insights,
    hydration_insights,
    nutrition_insights,
    recovery_insights,
    scheduling_insights,
    workout_insights,
)
from services.intake_targets import calculate_macro_targets
from services.metric_calculators import (
    HabitStats,
    HabitSummary,
    HydrationStats,
    NutritionStats,
    RecoveryStats,
    ScheduleStats,
    WorkoutStats,
)

MUSCLE_PROFILE = Profile(age=25, weight_kg=70, height_cm=175, goal="build-muscle", experience="beginner")


class TestEmptyDomains:
    """Each empty domain yields exactly one placeholder line"""

    @pytest.mark.parametrize("generator,stats,domain", [
        (workout_insights, WorkoutStats(), Domain.WORKOUT),
        (nutrition_insights, NutritionStats(), Domain.NUTRITION),
        (hydration_insights, HydrationStats(target_ml=2000), Domain.HYDRATION),
        (recovery_insights, RecoveryStats(), Domain.RECOVERY),
        (habit_insights, HabitStats(), Domain.HABITS),
        (scheduling_insights, ScheduleStats(), Domain.SCHEDULING),
    ])
    def test_placeholder(self, generator, stats, domain):
        assert generator(stats) == [EMPTY_DOMAIN_MESSAGES[domain]]


class TestWorkoutInsights:
    def test_high_volume_muscle_building(self):
        stats = WorkoutStats(total_workouts=4, total_volume=6000, average_volume=1500, workout_frequency=4, workout_streak=2)
        lines = workout_insights(stats, MUSCLE_PROFILE)

        assert lines[0] == "Your average workout volume is 1500 kg."
        assert "Excellent volume for muscle building!" in lines
        assert not any("aim for 3-4 workouts" in line for line in lines)
        assert lines[-1] == "Great job maintaining a 2-day workout streak!"

    def test_low_frequency_advice_by_goal(self):
        stats = WorkoutStats(total_workouts=2, workout_frequency=2)
        lose_fat = Profile(age=30, weight_kg=90, height_cm=180, goal="lose-fat", experience="beginner")

        lines = workout_insights(stats, lose_fat)

        assert "You're averaging 2.0 workouts per week." in lines
        assert "For fat loss, aim for 4-5 workouts per week." in lines

    def test_no_profile_skips_goal_rules(self):
        stats = WorkoutStats(total_workouts=1, total_volume=100, average_volume=100, workout_frequency=1)
        lines = workout_insights(stats, None)
        assert lines == [
            "Your average workout volume is 100 kg.",
            "You're averaging 1.0 workouts per week.",
        ]


class TestNutritionInsights:
    def test_balanced_calories_and_good_protein(self):
        targets = calculate_macro_targets(MUSCLE_PROFILE)
        stats = NutritionStats(
            total_meals=6,
            average_daily_calories=2300,
            average_daily_protein=190,
            most_logged_food="Rice",
        )

        lines = nutrition_insights(stats, targets, MUSCLE_PROFILE)

        assert lines == [
            "Your calorie intake is well-balanced.",
            "Good protein intake!",
            "You've logged 6 meals.",
            "Your most logged food is Rice.",
        ]

    def test_protein_shortfall_for_muscle_building(self):
        targets = calculate_macro_targets(MUSCLE_PROFILE)
        stats = NutritionStats(total_meals=3, average_daily_calories=3000, average_daily_protein=100)

        lines = nutrition_insights(stats, targets, MUSCLE_PROFILE)

        assert "You're consuming more calories than recommended." in lines
        assert "Consider increasing protein intake for muscle building." in lines

    def test_without_targets_only_counts(self):
        stats = NutritionStats(total_meals=2, average_daily_calories=1000, average_daily_protein=50)
        assert nutrition_insights(stats, None) == ["You've logged 2 meals."]


class TestHydrationInsights:
    @pytest.mark.parametrize("average,expected", [
        (2000, "Excellent hydration!"),
        (1600, "Good hydration habits."),
        (1500, "Consider increasing your water intake"),
    ])
    def test_average_bands(self, average, expected):
        stats = HydrationStats(total_entries=3, target_ml=2000, average_daily=average, today_percentage=60)
        assert hydration_insights(stats)[0].startswith(expected)

    def test_all_matching_rules_fire(self):
        stats = HydrationStats(
            total_entries=3,
            target_ml=2000,
            average_daily=2200,
            current_streak=3,
            target_achievement=100,
            today_total=2200,
            today_percentage=100,
            today_target_met=True,
        )

        lines = hydration_insights(stats)

        assert len(lines) == 4
        assert "You've met your hydration goal for 3 consecutive day(s)." in lines
        assert "You meet your hydration target 100.0% of the time." in lines
        assert lines[-1] == "Congratulations! You've met your hydration goal for today."

    def test_low_today(self):
        stats = HydrationStats(total_entries=1, target_ml=2000, average_daily=2000, today_total=500, today_percentage=25)
        assert hydration_insights(stats)[-1].startswith("You're below 50% of today's hydration goal")


class TestRecoveryInsights:
    def test_trend_and_today_lines_co_occur(self):
        stats = RecoveryStats(
            total_entries=14,
            energy_entries=14,
            average_energy=6.5,
            energy_trend=Trend.DECLINING,
            today_energy_level=2,
        )

        lines = recovery_insights(stats)

        assert lines[0].startswith("Good energy levels.")
        assert lines[1].startswith("Your energy levels are declining.")
        assert lines[2].startswith("Your energy is very low today.")

    def test_frequent_pain_suppresses_location_line(self):
        stats = RecoveryStats(total_entries=12, pain_entries=12, pain_frequency=40, most_common_pain_location="knee")
        lines = recovery_insights(stats)
        assert lines == ["You're experiencing frequent pain. Consider consulting a healthcare provider."]

    def test_location_line_when_pain_is_occasional(self):
        stats = RecoveryStats(total_entries=2, pain_entries=2, pain_frequency=6.7, most_common_pain_location="knee")
        assert recovery_insights(stats)[0].startswith("Your most common pain location is knee.")

    def test_severe_pain_today(self):
        stats = RecoveryStats(total_entries=1, pain_entries=1, pain_frequency=3.3, most_common_pain_location="back",
                              today_has_pain=True, today_average_pain_intensity=8)
        assert recovery_insights(stats)[-1].startswith("You're experiencing severe pain today.")

    def test_energy_bands(self):
        high = RecoveryStats(total_entries=1, energy_entries=1, average_energy=7)
        low = RecoveryStats(total_entries=1, energy_entries=1, average_energy=4.9)
        assert recovery_insights(high)[0].startswith("Excellent energy levels!")
        assert recovery_insights(low)[0].startswith("Your energy levels are low.")


class TestHabitInsights:
    @staticmethod
    def _summary(name, rate):
        return HabitSummary(habit_id=uuid4(), name=name, completion_rate=rate, streak=0, total_completions=1)

    def test_best_and_worst(self):
        best = self._summary("Walk", 100)
        worst = self._summary("Read", 20)
        stats = HabitStats(total_habits=2, active_habits=2, average_completion_rate=60, best_habit=best,
                           worst_habit=worst, today_total=2, today_completed=2, today_completion_rate=100)

        lines = habit_insights(stats)

        assert lines == [
            "Good job! You're doing well with your habits.",
            'Your best performing habit is "Walk".',
            'Consider focusing on "Read". It has the lowest completion rate.',
            "Perfect! You've completed all your habits today.",
        ]

    def test_middle_band_has_no_average_line(self):
        only = self._summary("Walk", 50)
        stats = HabitStats(total_habits=1, active_habits=1, average_completion_rate=50, best_habit=only,
                           worst_habit=only, today_total=1, today_completed=0, today_completion_rate=0)

        lines = habit_insights(stats)

        assert lines == [
            'Your best performing habit is "Walk".',
            "You're behind on today's habits. Try to complete at least one more.",
        ]

    def test_low_completion(self):
        only = self._summary("Walk", 10)
        stats = HabitStats(total_habits=1, active_habits=1, average_completion_rate=10, best_habit=only, worst_habit=only)
        assert habit_insights(stats)[0].startswith("Your habit completion rate is low.")


PERFECT_DAY = "Perfect! You've completed all your habits today."
GREAT_PROGRESS = "Great progress today! You're on track with your habits."
BEHIND_TODAY = "You're behind on today's habits. Try to complete at least one more."


class TestTodayHabitCompletion:
    @pytest.mark.parametrize("today_rate,expected", [
        (100, [PERFECT_DAY]),
        (80, [GREAT_PROGRESS]),
        (70, []),
        (60, []),
        (40, [BEHIND_TODAY]),
    ])
    def test_today_rate_bands(self, today_rate, expected):
        stats = HabitStats(total_habits=10, active_habits=10, average_completion_rate=50, today_total=10,
                           today_completed=today_rate // 10, today_completion_rate=today_rate)
        assert habit_insights(stats) == expected


class TestSchedulingInsights:
    def test_counts_and_top_type(self):
        stats = ScheduleStats(total_events=3, upcoming_events=0, past_events=3,
                              events_by_type={"cardio": 2, "rest": 1})
        assert scheduling_insights(stats) == [
            "No upcoming events scheduled. Consider planning your next workout session.",
            "You've completed 3 scheduled event(s).",
            "Your most scheduled activity type is: Cardio",
        ]

    def test_upcoming_count(self):
        stats = ScheduleStats(total_events=2, upcoming_events=2, events_by_type={"meal-prep": 2})
        lines = scheduling_insights(stats)
        assert lines[0] == "You have 2 upcoming event(s) scheduled."
        assert lines[-1] == "Your most scheduled activity type is: Meal Prep"
