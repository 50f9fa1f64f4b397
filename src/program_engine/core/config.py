"""
Configuration constants for the plan synthesis engine.

All adjustable parameters are centralized here for easy tuning.
Keyword rule tables and guidance strings can additionally be overridden
through engine.yaml (see core/engine/config_loader.py and core/rules.py).
"""

from typing import Final

# =============================================================================
# CALENDAR
# =============================================================================

WEEKDAYS: Final[tuple[str, ...]] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

INTENSITIES: Final[tuple[str, ...]] = (
    "None",
    "Very Low",
    "Low",
    "Medium-Low",
    "Medium",
    "Medium-High",
    "High",
)

SESSION_TYPES: Final[tuple[str, ...]] = ("cardio", "strength", "recovery", "other")

PROGRAM_TYPES: Final[tuple[str, ...]] = (
    "marathon",
    "half-marathon",
    "weight_loss",
    "powerlifting",
    "hypertrophy",
    "general_fitness",
)

ENDURANCE_PROGRAM_TYPES: Final[tuple[str, ...]] = ("marathon", "half-marathon")

EXPERIENCE_LEVELS: Final[tuple[str, ...]] = ("beginner", "intermediate", "advanced")
DEFAULT_EXPERIENCE_LEVEL: Final[str] = "intermediate"

STRENGTH_SPLITS: Final[tuple[str, ...]] = (
    "fullBody",
    "upperLower",
    "pushPullLegs",
    "bodyPart",
    "custom",
)

# =============================================================================
# GOAL TIMELINE
# =============================================================================

URGENCY_HIGH_DAYS: Final[int] = 30  # Fewer days than this: high urgency
URGENCY_MEDIUM_DAYS: Final[int] = 90  # Fewer days than this: medium urgency

# =============================================================================
# UNIT CONVERSION
# =============================================================================

KG_PER_LB: Final[float] = 0.453592
KM_PER_MILE: Final[float] = 1.60934
KCAL_PER_KG: Final[float] = 7700.0  # Energy content of 1 kg of body mass
WEEKS_PER_MONTH: Final[float] = 4.33

# =============================================================================
# ENDURANCE GOALS
# =============================================================================

RACE_DISTANCE_KM: Final[dict[str, float]] = {
    "marathon": 42.195,
    "half-marathon": 21.0975,
}

RACE_DISTANCE_MILES: Final[dict[str, float]] = {
    "marathon": 26.2,
    "half-marathon": 13.1,
}

# Weekly mileage (miles) at the start of the build, by experience level
BASE_WEEKLY_MILEAGE: Final[dict[str, dict[str, int]]] = {
    "marathon": {"beginner": 20, "intermediate": 35, "advanced": 50},
    "half-marathon": {"beginner": 15, "intermediate": 25, "advanced": 35},
}

# Weekly mileage (miles) at the top of the build, by experience level
PEAK_WEEKLY_MILEAGE: Final[dict[str, dict[str, int]]] = {
    "marathon": {"beginner": 45, "intermediate": 65, "advanced": 85},
    "half-marathon": {"beginner": 30, "intermediate": 45, "advanced": 60},
}

FAST_PACE_MIN_PER_KM: Final[float] = 4.0  # Faster goals need more volume
SLOW_PACE_MIN_PER_KM: Final[float] = 6.0  # Slower goals need less volume
FAST_PACE_PEAK_SCALE: Final[float] = 1.2
SLOW_PACE_PEAK_SCALE: Final[float] = 0.8

MAX_TRAINING_WEEKS: Final[dict[str, int]] = {
    "marathon": 16,
    "half-marathon": 12,
}
BUILD_FRACTION: Final[float] = 0.75

# Training pace offsets against goal pace, in min/km
EASY_PACE_OFFSET_KM: Final[float] = 1.0
TEMPO_PACE_OFFSET_KM: Final[float] = -0.3
INTERVAL_PACE_OFFSET_KM: Final[float] = -1.0

MIN_PROGRESSION_WEEKS: Final[int] = 8  # Denominator floor for mileage increment
PROGRESSION_TAPER_ALLOWANCE: Final[int] = 3

# =============================================================================
# MILEAGE PROGRESSION
# =============================================================================

LONG_RUN_BOUNDS: Final[dict[str, tuple[int, int]]] = {
    "marathon": (8, 20),
    "half-marathon": (6, 13),
}

STEP_BACK_EVERY: Final[int] = 4  # Every 4th build week (after week 4) is lighter
STEP_BACK_MILEAGE_FACTOR: Final[float] = 0.8
STEP_BACK_LONG_RUN_FACTOR: Final[float] = 0.85

TAPER_MAX_REDUCTION: Final[float] = 0.4

# Long run in miles by taper week (1, 2, 3+)
TAPER_LONG_RUN: Final[dict[str, tuple[int, int, int]]] = {
    "marathon": (12, 8, 3),
    "half-marathon": (8, 5, 3),
}

EASY_SHARE: Final[float] = 0.60
TEMPO_SHARE: Final[float] = 0.25
INTERVAL_SHARE: Final[float] = 0.15

# Training pace offsets against goal pace, in min/mile
EASY_PACE_OFFSET_MILE: Final[float] = 1.5
TEMPO_PACE_OFFSET_MILE: Final[float] = -0.25
INTERVAL_PACE_OFFSET_MILE: Final[float] = -0.75
LONG_PACE_OFFSET_MILE: Final[float] = 1.0

DEFAULT_PACE_GUIDANCE: Final[dict[str, str]] = {
    "easy": "Conversational pace (Zone 2)",
    "tempo": "Comfortably hard, sustainable for about an hour",
    "interval": "Hard repeats near 5K effort",
    "long": "Easy, steady pace; finish feeling strong",
}

# =============================================================================
# WEIGHT LOSS
# =============================================================================

MAX_RECOMMENDED_WEEKLY_LOSS_KG: Final[float] = 0.75
MAX_SAFE_WEEKLY_LOSS_KG: Final[float] = 1.0
MIN_LOSS_WEEKS: Final[int] = 4

# =============================================================================
# POWERLIFTING
# =============================================================================

TOTAL_BODYWEIGHT_MULTIPLIER: Final[dict[str, float]] = {
    "beginner": 2.5,
    "intermediate": 3.5,
    "advanced": 4.5,
}
MAX_WEEKLY_TOTAL_INCREASE_BEGINNER: Final[float] = 5.0
MAX_WEEKLY_TOTAL_INCREASE: Final[float] = 2.5

# =============================================================================
# HYPERTROPHY
# =============================================================================

MAX_MONTHLY_MUSCLE_GAIN_KG: Final[dict[str, float]] = {
    "beginner": 1.0,
    "intermediate": 0.5,
    "advanced": 0.25,
}

# =============================================================================
# STRENGTH ENFORCEMENT
# =============================================================================

SECONDARY_SESSION_SUFFIX: Final[str] = " (Evening)"
STRENGTH_TEMPLATE_INTENSITY: Final[str] = "Medium-High"

UPPER_BODY_DAYS: Final[tuple[str, ...]] = ("Monday", "Wednesday", "Friday")
PUSH_DAYS: Final[tuple[str, ...]] = ("Monday", "Thursday")
PULL_DAYS: Final[tuple[str, ...]] = ("Tuesday", "Friday")

# =============================================================================
# RECOVERY
# =============================================================================

RECOVERY_HIGH_SCORE: Final[int] = 67  # Score at or above: high readiness
RECOVERY_MEDIUM_SCORE: Final[int] = 34  # Score at or above: medium readiness
DEFAULT_RECOVERY_STATUS: Final[str] = "medium"

# =============================================================================
# RECONCILIATION
# =============================================================================

MERGE_SEPARATOR: Final[str] = " + "
MAX_CALORIE_INCREASE: Final[float] = 1.2
MAX_PROTEIN_INCREASE: Final[float] = 1.3
MAX_CARB_INCREASE: Final[float] = 1.2
MAX_TRAINING_DAY_INCREASE: Final[int] = 2

# =============================================================================
# EXTERNAL PLAN FALLBACK
# =============================================================================

FALLBACK_PHASE_NAME: Final[str] = "Foundation Phase"
FALLBACK_PHASE_FOCUS: Final[str] = "Building base fitness"
DEFAULT_PHASE_WEEKS: Final[int] = 4
DEFAULT_TOTAL_WEEKS: Final[int] = 12

DEFAULT_NUTRITION: Final[dict[str, int]] = {
    "calories": 2000,
    "protein": 150,
    "carbs": 200,
    "fat": 70,
}
