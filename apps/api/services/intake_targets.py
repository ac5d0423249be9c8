"""
Intake Target Service

Daily calorie/macro targets and hydration targets derived from the profile.

BMR uses the Mifflin-St Jeor form 10*kg + 6.25*cm - 5*age WITHOUT the
sex-specific constant (+5 / -161). Stored targets and nutrition insights
are calibrated on this unisex figure.

TDEE applies a fixed sedentary multiplier (1.2).
"""
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
import math

from services.coach_entries import Goal, Profile

SEDENTARY_MULTIPLIER = 1.2

# goal -> (calorie delta, protein ratio, carbs ratio, fat ratio)
GOAL_ADJUSTMENTS: Dict[str, Tuple[int, float, float, float]] = {
    Goal.BUILD_MUSCLE.value: (300, 0.30, 0.50, 0.20),
    Goal.LOSE_FAT.value: (-500, 0.35, 0.35, 0.30),
    Goal.IMPROVE_ENDURANCE.value: (200, 0.20, 0.60, 0.20),
}
DEFAULT_ADJUSTMENT: Tuple[int, float, float, float] = (0, 0.25, 0.45, 0.30)

CALORIES_PER_GRAM_PROTEIN = 4
CALORIES_PER_GRAM_CARBS = 4
CALORIES_PER_GRAM_FAT = 9

HYDRATION_ML_PER_KG = 30
ENDURANCE_HYDRATION_BONUS_ML = 500


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2374.5 -> 2375)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class MacroTargets:
    bmr: float
    tdee: float
    target_calories: float  # unrounded
    calories: int
    protein_g: int
    carbs_g: int
    fat_g: int


def calculate_bmr(profile: Profile) -> float:
    """
    Basal metabolic rate (kcal/day).

    Examples:
        >>> calculate_bmr(Profile(age=25, weight_kg=70, height_cm=175))
        1728.75
    """
    return 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age


def calculate_tdee(bmr: float) -> float:
    return bmr * SEDENTARY_MULTIPLIER


def calculate_macro_targets(profile: Optional[Profile]) -> Optional[MacroTargets]:
    """
    Daily calorie and macro targets for the profile's goal.

    Returns None when there is no profile. Unknown goals use the default split.
    """
    if profile is None:
        return None

    bmr = calculate_bmr(profile)
    tdee = calculate_tdee(bmr)
    delta, protein_ratio, carbs_ratio, fat_ratio = GOAL_ADJUSTMENTS.get(
        profile.goal or "", DEFAULT_ADJUSTMENT
    )
    target = tdee + delta

    return MacroTargets(
        bmr=bmr,
        tdee=tdee,
        target_calories=target,
        calories=round_half_up(target),
        protein_g=round_half_up(target * protein_ratio / CALORIES_PER_GRAM_PROTEIN),
        carbs_g=round_half_up(target * carbs_ratio / CALORIES_PER_GRAM_CARBS),
        fat_g=round_half_up(target * fat_ratio / CALORIES_PER_GRAM_FAT),
    )


def recommended_hydration_ml(profile: Optional[Profile], default_ml: int) -> int:
    """30 ml per kg body weight, +500 ml for endurance goals, to the nearest 100 ml."""
    if profile is None:
        return default_ml

    recommended = profile.weight_kg * HYDRATION_ML_PER_KG
    if profile.goal == Goal.IMPROVE_ENDURANCE.value:
        recommended += ENDURANCE_HYDRATION_BONUS_ML
    return round_half_up(recommended / 100) * 100


def resolve_hydration_target(profile: Optional[Profile], default_ml: int) -> int:
    """The user's own target when set, otherwise the configured default."""
    if profile is not None and profile.hydration_target_ml:
        return profile.hydration_target_ml
    return default_ml
