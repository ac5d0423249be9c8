"""
Coach Report

Single entry point for the dashboard: fetch one user's logs, reduce them to
per-domain stats, derive insights and recommendations, and wrap it all with
a time-of-day coach message.

The build is a stateless read. Given the same logs and the same as_of it
returns an identical report; nothing here reads the clock or caches results.
"""

from dataclasses import dataclass, field, fields, is_dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from services.coach_entries import CompletionIndex, Domain, Goal, LogBundle, Profile
from services.insight_generators import (
    habit_insights,
    hydration_insights,
    nutrition_insights,
    recovery_insights,
    scheduling_insights,
    workout_insights,
)
from services.intake_targets import (
    MacroTargets,
    calculate_macro_targets,
    recommended_hydration_ml,
    resolve_hydration_target,
)
from services.log_store import LogStore, ProfileProvider
from services.metric_calculators import DomainStats, RecoveryStats, calculate_domain_stats, local_naive
from services.recommendation_engine import Recommendation, generate_recommendations

logger = logging.getLogger(__name__)

LOW_ENERGY_TODAY = 4
HIGH_ENERGY_TODAY = 7
SEVERE_PAIN_TODAY = 6

GOAL_DESCRIPTIONS = {
    Goal.BUILD_MUSCLE.value: "You're working on building muscle.",
    Goal.LOSE_FAT.value: "You're working on losing fat.",
    Goal.IMPROVE_ENDURANCE.value: "You're working on your endurance.",
}


@dataclass(frozen=True)
class ReportTargets:
    macros: Optional[MacroTargets]
    hydration_ml: int
    recommended_hydration_ml: int


@dataclass
class CoachReport:
    user_id: UUID
    as_of: datetime
    stats: DomainStats
    targets: ReportTargets
    insights: Dict[str, List[str]] = field(default_factory=dict)
    recommendations: List[Recommendation] = field(default_factory=list)
    coach_message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": str(self.user_id),
            "as_of": self.as_of.isoformat(),
            "per_domain_stats": to_jsonable(self.stats),
            "targets": to_jsonable(self.targets),
            "insights": {domain: list(lines) for domain, lines in self.insights.items()},
            "recommendations": to_jsonable(self.recommendations),
            "coach_message": self.coach_message,
        }


def to_jsonable(value: Any) -> Any:
    """Convert stats dataclasses (and what they hold) into plain JSON types."""
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, dict):
        return {str(to_jsonable(k)): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, frozenset, set)):
        return [to_jsonable(v) for v in value]
    return value


def greeting_for(as_of: datetime) -> str:
    if as_of.hour < 12:
        return "Good morning"
    if as_of.hour < 17:
        return "Good afternoon"
    return "Good evening"


def build_coach_message(profile: Optional[Profile], recovery: RecoveryStats, as_of: datetime) -> str:
    """
    Greeting plus same-day guidance from today's energy and pain entries.
    """
    greeting = greeting_for(as_of)
    if profile is None:
        return (
            f"{greeting}! I'm here to help you reach your fitness goals. "
            "Complete your profile to get personalized coaching."
        )

    parts = [f"{greeting}, {profile.name}!" if profile.name else f"{greeting}!"]

    description = GOAL_DESCRIPTIONS.get(profile.goal or "")
    if description:
        parts.append(description)

    energy = recovery.today_energy_level
    if energy is not None and energy < LOW_ENERGY_TODAY:
        parts.append("Your energy is low today. Consider a lighter workout or a rest day.")
    elif energy is not None and energy > HIGH_ENERGY_TODAY:
        parts.append("Great energy today! Perfect time for an intense workout.")

    if recovery.today_has_pain and recovery.today_average_pain_intensity > SEVERE_PAIN_TODAY:
        parts.append("You're in significant pain. Rest, and consult a healthcare provider if needed.")

    return " ".join(parts)


def generate_insights(
    stats: DomainStats,
    profile: Optional[Profile],
    macros: Optional[MacroTargets],
) -> Dict[str, List[str]]:
    return {
        Domain.WORKOUT.value: workout_insights(stats.workout, profile),
        Domain.NUTRITION.value: nutrition_insights(stats.nutrition, macros, profile),
        Domain.HYDRATION.value: hydration_insights(stats.hydration),
        Domain.RECOVERY.value: recovery_insights(stats.recovery),
        Domain.HABITS.value: habit_insights(stats.habits),
        Domain.SCHEDULING.value: scheduling_insights(stats.scheduling),
    }


class CoachReportBuilder:
    """
    Composes the report from a log store and a profile provider.

    Logs are fetched up to as_of's date so that re-running a past report
    ignores entries added since. Scheduled events are fetched unbounded
    because upcoming events are part of the scheduling stats.
    """

    def __init__(
        self,
        log_store: LogStore,
        profile_provider: ProfileProvider,
        default_hydration_target_ml: int,
    ):
        self.log_store = log_store
        self.profile_provider = profile_provider
        self.default_hydration_target_ml = default_hydration_target_ml

    def fetch_logs(self, user_id: UUID, as_of: datetime) -> LogBundle:
        end = as_of.date()
        store = self.log_store
        return LogBundle(
            workouts=tuple(store.list_workouts(user_id, end=end)),
            nutrition=tuple(store.list_nutrition(user_id, end=end)),
            hydration=tuple(store.list_hydration(user_id, end=end)),
            pain_fatigue=tuple(store.list_pain_fatigue(user_id, end=end)),
            habits=tuple(store.list_habits(user_id)),
            completions=CompletionIndex(store.list_habit_completions(user_id, end=end)),
            events=tuple(store.list_scheduled_events(user_id)),
        )

    def build_report(self, user_id: UUID, as_of: datetime) -> CoachReport:
        as_of = local_naive(as_of)
        profile = self.profile_provider.get_profile(user_id)
        bundle = self.fetch_logs(user_id, as_of)

        hydration_target = resolve_hydration_target(profile, self.default_hydration_target_ml)
        macros = calculate_macro_targets(profile)
        stats = calculate_domain_stats(bundle, as_of, profile, hydration_target)

        report = CoachReport(
            user_id=user_id,
            as_of=as_of,
            stats=stats,
            targets=ReportTargets(
                macros=macros,
                hydration_ml=hydration_target,
                recommended_hydration_ml=recommended_hydration_ml(
                    profile, self.default_hydration_target_ml
                ),
            ),
            insights=generate_insights(stats, profile, macros),
            recommendations=generate_recommendations(profile, stats, macros),
            coach_message=build_coach_message(profile, stats.recovery, as_of),
        )

        logger.debug(
            "coach_report_built",
            extra={"extra_fields": {
                "user_id": str(user_id),
                "as_of": as_of.isoformat(),
                "has_profile": profile is not None,
                "recommendations": len(report.recommendations),
            }},
        )
        return report
