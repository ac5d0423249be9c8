"""
Metric Calculators

Reduce raw log entries to per-domain stats: totals and averages, streaks,
7-day vs previous-7-day trends and completion rates.

Rules:
- Every function takes its reference date explicitly. Nothing here reads the clock.
- Inputs are never assumed sorted; anything order-dependent sorts first.
- Empty input returns a stats object with zero/None fields. Callers branch on
  the `is_empty` property (total count == 0) to render "no data yet".
"""

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from uuid import UUID

from services.coach_entries import (
    CompletionIndex,
    EnergyEntry,
    Habit,
    HydrationEntry,
    LogBundle,
    NutritionEntry,
    PainEntry,
    PainFatigueEntry,
    Profile,
    ScheduledEvent,
    Trend,
    WorkoutEntry,
)


# Trend classification: recent mean must beat previous mean by more than this
TREND_THRESHOLD = 1
TREND_MIN_ENTRIES = 14
TREND_WINDOW_DAYS = 7

COMPLETION_WINDOW_DAYS = 7
PAIN_FREQUENCY_WINDOW_DAYS = 30
WEEK_WINDOW_DAYS = 7
MONTH_WINDOW_DAYS = 30


# =============================================================================
# GENERIC CALCULATORS
# =============================================================================

def local_naive(moment: datetime) -> datetime:
    """Stored event times are naive local wall-clock times; aware moments are converted to match."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def last_n_days(as_of: date, n: int) -> List[date]:
    """The n days ending at (and including) as_of, oldest first."""
    return [as_of - timedelta(days=offset) for offset in range(n - 1, -1, -1)]


def days_before(as_of: date, day: date) -> int:
    return (as_of - day).days


def calculate_streak(qualifying_days: Iterable[date], as_of: date) -> int:
    """
    Count consecutive qualifying days walking back from as_of.

    as_of itself must qualify; no entry today means a streak of 0.
    """
    days = set(qualifying_days)
    streak = 0
    day = as_of
    while day in days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def calculate_longest_streak(days: Iterable[date]) -> int:
    """Longest run of consecutive calendar days anywhere in the history."""
    longest = 0
    current = 0
    previous: Optional[date] = None
    for day in sorted(set(days)):
        if previous is not None and (day - previous).days == 1:
            current += 1
        else:
            current = 1
        longest = max(longest, current)
        previous = day
    return longest


def classify_trend(
    dated_values: Iterable[Tuple[date, float]],
    as_of: date,
    min_entries: int = TREND_MIN_ENTRIES,
) -> Trend:
    """
    Compare the mean of the last 7 days against the 7 days before that.

    Recent window: 0-6 days before as_of. Previous window: 7-13 days before.
    Both windows only need one value each once min_entries is met overall.
    """
    values = list(dated_values)
    if len(values) < min_entries:
        return Trend.INSUFFICIENT_DATA

    recent: List[float] = []
    previous: List[float] = []
    for day, value in values:
        offset = days_before(as_of, day)
        if 0 <= offset < TREND_WINDOW_DAYS:
            recent.append(value)
        elif TREND_WINDOW_DAYS <= offset < 2 * TREND_WINDOW_DAYS:
            previous.append(value)

    if not recent or not previous:
        return Trend.INSUFFICIENT_DATA

    difference = sum(recent) / len(recent) - sum(previous) / len(previous)
    if difference > TREND_THRESHOLD:
        return Trend.IMPROVING
    if difference < -TREND_THRESHOLD:
        return Trend.DECLINING
    return Trend.STABLE


def completion_rate(completed_days: int, window_days: int) -> float:
    """Percentage of days in a window that met the goal."""
    if window_days <= 0:
        return 0.0
    return completed_days / window_days * 100


def calculate_workout_frequency(
    total_workouts: int,
    profile_created_at: Optional[datetime],
    as_of: date,
) -> float:
    """Workouts per week since the profile was created (at least one week)."""
    weeks = 0
    if profile_created_at is not None:
        weeks = days_before(as_of, profile_created_at.date()) // 7
    return total_workouts / max(1, weeks)


def most_common(items: Iterable[str]) -> Optional[str]:
    """Most frequent item; ties go to the alphabetically first one."""
    counts = Counter(items)
    if not counts:
        return None
    return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))[0][0]


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _entry_sort_key(entry) -> Tuple[date, datetime]:
    return (entry.date, entry.logged_at or datetime.min)


# =============================================================================
# WORKOUTS
# =============================================================================

@dataclass
class WorkoutStats:
    total_workouts: int = 0
    total_volume: float = 0.0
    average_volume: float = 0.0
    most_used_exercise: Optional[str] = None
    workout_streak: int = 0
    longest_streak: int = 0
    workouts_this_week: int = 0
    workouts_this_month: int = 0
    workout_frequency: float = 0.0
    total_duration_minutes: int = 0
    workout_types: Dict[str, int] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.total_workouts == 0


def calculate_workout_stats(
    workouts: Iterable[WorkoutEntry],
    as_of: date,
    profile: Optional[Profile] = None,
) -> WorkoutStats:
    workouts = sorted(workouts, key=lambda w: w.date)
    if not workouts:
        return WorkoutStats()

    total = len(workouts)
    total_volume = sum(w.volume for w in workouts)
    workout_days = {w.date for w in workouts}

    type_counts = Counter(w.workout_type for w in workouts if w.workout_type)

    return WorkoutStats(
        total_workouts=total,
        total_volume=total_volume,
        average_volume=total_volume / total,
        most_used_exercise=most_common(ex.name for w in workouts for ex in w.exercises),
        workout_streak=calculate_streak(workout_days, as_of),
        longest_streak=calculate_longest_streak(workout_days),
        workouts_this_week=sum(1 for w in workouts if 0 <= days_before(as_of, w.date) < WEEK_WINDOW_DAYS),
        workouts_this_month=sum(1 for w in workouts if 0 <= days_before(as_of, w.date) < MONTH_WINDOW_DAYS),
        workout_frequency=calculate_workout_frequency(
            total, profile.created_at if profile else None, as_of
        ),
        total_duration_minutes=sum(w.duration_minutes or 0 for w in workouts),
        workout_types=dict(sorted(type_counts.items())),
    )


# =============================================================================
# NUTRITION
# =============================================================================

@dataclass
class NutritionStats:
    total_meals: int = 0
    days_logged: int = 0
    # Per logged food item
    average_calories: float = 0.0
    average_protein: float = 0.0
    average_carbs: float = 0.0
    average_fat: float = 0.0
    # Per logged day (comparable with daily targets)
    average_daily_calories: float = 0.0
    average_daily_protein: float = 0.0
    most_logged_food: Optional[str] = None
    today_meals: int = 0
    today_calories: float = 0.0
    today_protein: float = 0.0
    today_carbs: float = 0.0
    today_fat: float = 0.0
    today_macro_ratio: Optional[Dict[str, float]] = None

    @property
    def is_empty(self) -> bool:
        return self.total_meals == 0


def calculate_nutrition_stats(meals: Iterable[NutritionEntry], as_of: date) -> NutritionStats:
    meals = sorted(meals, key=_entry_sort_key)
    if not meals:
        return NutritionStats()

    total = len(meals)
    daily_calories: Dict[date, float] = defaultdict(float)
    daily_protein: Dict[date, float] = defaultdict(float)
    for meal in meals:
        daily_calories[meal.date] += meal.calories
        daily_protein[meal.date] += meal.protein

    today = [m for m in meals if m.date == as_of]
    today_calories = sum(m.calories for m in today)
    today_protein = sum(m.protein for m in today)
    today_carbs = sum(m.carbs for m in today)
    today_fat = sum(m.fat for m in today)

    macro_ratio = None
    if today_calories > 0:
        macro_ratio = {
            "protein": today_protein * 4 / today_calories * 100,
            "carbs": today_carbs * 4 / today_calories * 100,
            "fat": today_fat * 9 / today_calories * 100,
        }

    return NutritionStats(
        total_meals=total,
        days_logged=len(daily_calories),
        average_calories=sum(m.calories for m in meals) / total,
        average_protein=sum(m.protein for m in meals) / total,
        average_carbs=sum(m.carbs for m in meals) / total,
        average_fat=sum(m.fat for m in meals) / total,
        average_daily_calories=_mean(list(daily_calories.values())),
        average_daily_protein=_mean(list(daily_protein.values())),
        most_logged_food=most_common(m.food_name for m in meals),
        today_meals=len(today),
        today_calories=today_calories,
        today_protein=today_protein,
        today_carbs=today_carbs,
        today_fat=today_fat,
        today_macro_ratio=macro_ratio,
    )


# =============================================================================
# HYDRATION
# =============================================================================

@dataclass
class HydrationStats:
    total_entries: int = 0
    target_ml: int = 0
    average_daily: float = 0.0
    best_day: Optional[date] = None
    best_day_amount: float = 0.0
    current_streak: int = 0
    target_achievement: float = 0.0
    today_total: float = 0.0
    today_percentage: float = 0.0
    today_remaining: float = 0.0
    today_target_met: bool = False

    @property
    def is_empty(self) -> bool:
        return self.total_entries == 0


def daily_hydration_totals(entries: Iterable[HydrationEntry]) -> Dict[date, float]:
    totals: Dict[date, float] = defaultdict(float)
    for entry in entries:
        totals[entry.date] += entry.amount_ml
    return dict(sorted(totals.items()))


def calculate_hydration_stats(
    entries: Iterable[HydrationEntry],
    as_of: date,
    target_ml: int,
) -> HydrationStats:
    entries = list(entries)
    if not entries:
        return HydrationStats(target_ml=target_ml, today_remaining=float(max(0, target_ml)))

    totals = daily_hydration_totals(entries)
    met_days = [day for day, amount in totals.items() if amount >= target_ml]

    # Earliest date wins a tie for best day
    best_day, best_amount = max(totals.items(), key=lambda kv: (kv[1], -kv[0].toordinal()))

    today_total = totals.get(as_of, 0.0)
    today_percentage = min(today_total / target_ml * 100, 100.0) if target_ml > 0 else 0.0

    return HydrationStats(
        total_entries=len(entries),
        target_ml=target_ml,
        average_daily=_mean(list(totals.values())),
        best_day=best_day,
        best_day_amount=best_amount,
        current_streak=calculate_streak(met_days, as_of),
        target_achievement=completion_rate(len(met_days), len(totals)),
        today_total=today_total,
        today_percentage=today_percentage,
        today_remaining=max(0.0, target_ml - today_total),
        today_target_met=today_total >= target_ml,
    )


# =============================================================================
# RECOVERY (PAIN & FATIGUE)
# =============================================================================

@dataclass
class RecoveryStats:
    total_entries: int = 0
    energy_entries: int = 0
    pain_entries: int = 0
    average_energy: float = 0.0
    energy_trend: Trend = Trend.STABLE
    pain_frequency: float = 0.0
    most_common_pain_location: Optional[str] = None
    recent_energy_level: Optional[int] = None
    today_energy_level: Optional[int] = None
    today_has_pain: bool = False
    today_average_pain_intensity: float = 0.0

    @property
    def is_empty(self) -> bool:
        return self.total_entries == 0


def calculate_pain_frequency(pain_entries: Iterable[PainEntry], as_of: date) -> float:
    """Percentage of the last 30 days with at least one pain entry."""
    pain_days = {
        entry.date for entry in pain_entries
        if 0 <= days_before(as_of, entry.date) < PAIN_FREQUENCY_WINDOW_DAYS
    }
    return len(pain_days) / PAIN_FREQUENCY_WINDOW_DAYS * 100


def calculate_recovery_stats(entries: Iterable[PainFatigueEntry], as_of: date) -> RecoveryStats:
    entries = sorted(entries, key=_entry_sort_key)
    if not entries:
        return RecoveryStats()

    energy = [e for e in entries if isinstance(e, EnergyEntry)]
    pain = [e for e in entries if isinstance(e, PainEntry)]

    today_energy = [e for e in energy if e.date == as_of]
    today_pain = [e for e in pain if e.date == as_of]

    return RecoveryStats(
        total_entries=len(entries),
        energy_entries=len(energy),
        pain_entries=len(pain),
        average_energy=_mean([e.level for e in energy]),
        energy_trend=classify_trend(((e.date, e.level) for e in energy), as_of),
        pain_frequency=calculate_pain_frequency(pain, as_of),
        most_common_pain_location=most_common(e.location for e in pain),
        recent_energy_level=energy[-1].level if energy else None,
        today_energy_level=today_energy[-1].level if today_energy else None,
        today_has_pain=bool(today_pain),
        today_average_pain_intensity=_mean([e.intensity for e in today_pain]),
    )


# =============================================================================
# HABITS
# =============================================================================

@dataclass(frozen=True)
class HabitSummary:
    habit_id: UUID
    name: str
    completion_rate: float
    streak: int
    total_completions: int


@dataclass
class HabitStats:
    total_habits: int = 0
    active_habits: int = 0
    average_completion_rate: float = 0.0
    best_habit: Optional[HabitSummary] = None
    worst_habit: Optional[HabitSummary] = None
    total_completions: int = 0
    today_total: int = 0
    today_completed: int = 0
    today_completion_rate: float = 0.0
    per_habit: Tuple[HabitSummary, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.total_habits == 0


def summarize_habit(habit: Habit, completions: CompletionIndex, as_of: date) -> HabitSummary:
    window = last_n_days(as_of, COMPLETION_WINDOW_DAYS)
    completed_days = completions.completed_days(habit.id)
    return HabitSummary(
        habit_id=habit.id,
        name=habit.name,
        completion_rate=completion_rate(
            sum(1 for day in window if day in completed_days), len(window)
        ),
        streak=calculate_streak(completed_days, as_of),
        total_completions=len(completed_days),
    )


def calculate_habit_stats(
    habits: Iterable[Habit],
    completions: CompletionIndex,
    as_of: date,
) -> HabitStats:
    habits = sorted(habits, key=lambda h: (h.created_at or datetime.min, h.name))
    if not habits:
        return HabitStats()

    active = [h for h in habits if h.active]
    summaries = tuple(summarize_habit(h, completions, as_of) for h in active)
    today_completed = sum(1 for h in active if completions.is_completed(h.id, as_of))

    best = worst = None
    for summary in summaries:
        if best is None or summary.completion_rate > best.completion_rate:
            best = summary
        if worst is None or summary.completion_rate < worst.completion_rate:
            worst = summary

    return HabitStats(
        total_habits=len(habits),
        active_habits=len(active),
        average_completion_rate=_mean([s.completion_rate for s in summaries]),
        best_habit=best,
        worst_habit=worst,
        total_completions=sum(s.total_completions for s in summaries),
        today_total=len(active),
        today_completed=today_completed,
        today_completion_rate=completion_rate(today_completed, len(active)),
        per_habit=summaries,
    )


# =============================================================================
# SCHEDULING
# =============================================================================

@dataclass(frozen=True)
class DaySchedule:
    date: date
    events: int


@dataclass
class ScheduleStats:
    total_events: int = 0
    upcoming_events: int = 0
    past_events: int = 0
    events_by_type: Dict[str, int] = field(default_factory=dict)
    next_event: Optional[ScheduledEvent] = None
    today_events: int = 0
    week_schedule: Tuple[DaySchedule, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.total_events == 0


def calculate_schedule_stats(events: Iterable[ScheduledEvent], as_of: datetime) -> ScheduleStats:
    as_of = local_naive(as_of)
    events = sorted(events, key=lambda e: (e.starts_at, e.title))
    today = as_of.date()
    week = [today + timedelta(days=offset) for offset in range(WEEK_WINDOW_DAYS)]
    if not events:
        return ScheduleStats(week_schedule=tuple(DaySchedule(day, 0) for day in week))

    upcoming = [e for e in events if e.starts_at > as_of]
    per_day = Counter(e.date for e in events)

    return ScheduleStats(
        total_events=len(events),
        upcoming_events=len(upcoming),
        past_events=len(events) - len(upcoming),
        events_by_type=dict(sorted(Counter(e.event_type for e in events).items())),
        next_event=upcoming[0] if upcoming else None,
        today_events=per_day.get(today, 0),
        week_schedule=tuple(DaySchedule(day, per_day.get(day, 0)) for day in week),
    )


# =============================================================================
# ALL DOMAINS
# =============================================================================

@dataclass
class DomainStats:
    workout: WorkoutStats = field(default_factory=WorkoutStats)
    nutrition: NutritionStats = field(default_factory=NutritionStats)
    hydration: HydrationStats = field(default_factory=HydrationStats)
    recovery: RecoveryStats = field(default_factory=RecoveryStats)
    habits: HabitStats = field(default_factory=HabitStats)
    scheduling: ScheduleStats = field(default_factory=ScheduleStats)


def calculate_domain_stats(
    bundle: LogBundle,
    as_of: datetime,
    profile: Optional[Profile],
    hydration_target_ml: int,
) -> DomainStats:
    """Run every domain calculator against one user's logs."""
    today = as_of.date()
    return DomainStats(
        workout=calculate_workout_stats(bundle.workouts, today, profile),
        nutrition=calculate_nutrition_stats(bundle.nutrition, today),
        hydration=calculate_hydration_stats(bundle.hydration, today, hydration_target_ml),
        recovery=calculate_recovery_stats(bundle.pain_fatigue, today),
        habits=calculate_habit_stats(bundle.habits, bundle.completions, today),
        scheduling=calculate_schedule_stats(bundle.events, as_of),
    )
