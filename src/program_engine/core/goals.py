"""
Goal requirement calculation.

Turns a coarse goal description (program type, free-text target
metric, goal date, experience level) into quantitative targets.  A
target metric that does not parse is not an error: the result then
carries only the timeline fields.
"""

import math
import re
from datetime import datetime

from .config import (
    BASE_WEEKLY_MILEAGE,
    BUILD_FRACTION,
    DEFAULT_EXPERIENCE_LEVEL,
    EASY_PACE_OFFSET_KM,
    ENDURANCE_PROGRAM_TYPES,
    FAST_PACE_MIN_PER_KM,
    FAST_PACE_PEAK_SCALE,
    INTERVAL_PACE_OFFSET_KM,
    KCAL_PER_KG,
    KG_PER_LB,
    KM_PER_MILE,
    MAX_MONTHLY_MUSCLE_GAIN_KG,
    MAX_RECOMMENDED_WEEKLY_LOSS_KG,
    MAX_SAFE_WEEKLY_LOSS_KG,
    MAX_TRAINING_WEEKS,
    MAX_WEEKLY_TOTAL_INCREASE,
    MAX_WEEKLY_TOTAL_INCREASE_BEGINNER,
    MIN_LOSS_WEEKS,
    MIN_PROGRESSION_WEEKS,
    PEAK_WEEKLY_MILEAGE,
    PROGRESSION_TAPER_ALLOWANCE,
    RACE_DISTANCE_KM,
    SLOW_PACE_MIN_PER_KM,
    SLOW_PACE_PEAK_SCALE,
    TEMPO_PACE_OFFSET_KM,
    TOTAL_BODYWEIGHT_MULTIPLIER,
    URGENCY_HIGH_DAYS,
    URGENCY_MEDIUM_DAYS,
    WEEKS_PER_MONTH,
)
from .models import GoalRequirements, UserProfile, WeightEntry

_TIME_RE = re.compile(r"(\d+):(\d+):(\d+)")
_WEIGHT_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(lbs?|kg)", re.IGNORECASE)
_TOTAL_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(lbs?|kg)?\s*total", re.IGNORECASE)
_MUSCLE_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(lbs?|kg)?\s*muscle", re.IGNORECASE)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def parse_goal_time(target_metric: str | None) -> float | None:
    """
    Parse an ``H:MM:SS`` race time into total minutes.

    Args:
        target_metric: Free-text goal, e.g. "3:30:00" or "sub 1:45:00 half"

    Returns:
        Total minutes, or None if no time is present
    """
    if not target_metric:
        return None
    match = _TIME_RE.search(target_metric)
    if match is None:
        return None
    hours, minutes, seconds = (int(g) for g in match.groups())
    return hours * 60 + minutes + seconds / 60


def _to_kg(amount: float, unit: str | None) -> float:
    """Convert an amount to kg; a missing unit means pounds."""
    unit = (unit or "lb").lower()
    return amount * KG_PER_LB if unit.startswith("lb") else amount


def experience_key(experience_level: str | None) -> str:
    """Experience level as a table key; unknown levels read as intermediate."""
    if experience_level in TOTAL_BODYWEIGHT_MULTIPLIER:
        return experience_level
    return DEFAULT_EXPERIENCE_LEVEL


def goal_timeline(goal_date: str, now: datetime | None = None) -> tuple[int, int, str]:
    """
    Days, weeks and urgency until the goal date.

    days = max(1, ceil((goal - now) / 1 day)); weeks = ceil(days / 7);
    urgency is high under 30 days, medium under 90, else low.
    """
    now = now or datetime.now()
    goal = datetime.strptime(goal_date, "%Y-%m-%d")
    days = max(1, math.ceil((goal - now).total_seconds() / 86400))
    weeks = math.ceil(days / 7)
    if days < URGENCY_HIGH_DAYS:
        urgency = "high"
    elif days < URGENCY_MEDIUM_DAYS:
        urgency = "medium"
    else:
        urgency = "low"
    return days, weeks, urgency


def peak_mileage_for_pace(program_type: str, experience_level: str, pace_min_per_km: float | None) -> int:
    """
    Peak weekly mileage from the experience table, scaled by goal pace.

    Faster than 4:00/km scales the peak by 1.2; slower than 6:00/km by 0.8.
    """
    peak = PEAK_WEEKLY_MILEAGE[program_type][experience_key(experience_level)]
    if pace_min_per_km is None:
        return peak
    if pace_min_per_km < FAST_PACE_MIN_PER_KM:
        return round_half_up(peak * FAST_PACE_PEAK_SCALE)
    if pace_min_per_km > SLOW_PACE_MIN_PER_KM:
        return round_half_up(peak * SLOW_PACE_PEAK_SCALE)
    return peak


def training_block(program_type: str, weeks_until_goal: int | None = None) -> tuple[int, int, int]:
    """
    Split an endurance block into (total, build, taper) weeks.

    total = min(weeks_until_goal, 16 marathon / 12 half); build = floor(0.75 * total).
    """
    total = MAX_TRAINING_WEEKS[program_type]
    if weeks_until_goal is not None:
        total = max(1, min(weeks_until_goal, total))
    build = math.floor(total * BUILD_FRACTION)
    return total, build, total - build


def _endurance_requirements(
    req: GoalRequirements,
    program_type: str,
    target_metric: str,
    experience_level: str,
) -> None:
    total_minutes = parse_goal_time(target_metric)
    if total_minutes is None:
        return

    match = _TIME_RE.search(target_metric)
    pace_km = total_minutes / RACE_DISTANCE_KM[program_type]
    level = experience_key(experience_level)

    base = BASE_WEEKLY_MILEAGE[program_type][level]
    peak = peak_mileage_for_pace(program_type, level, pace_km)
    total, build, taper = training_block(program_type, req.weeks_until_goal)

    req.target_time = match.group(0) if match else target_metric
    req.target_pace_min_per_km = round(pace_km, 2)
    req.base_weekly_mileage = base
    req.peak_weekly_mileage = peak
    req.mileage_progression = round(
        (peak - base) / max(MIN_PROGRESSION_WEEKS, req.weeks_until_goal - PROGRESSION_TAPER_ALLOWANCE),
        1,
    )
    req.total_training_weeks = total
    req.build_weeks = build
    req.taper_weeks = taper
    req.goal_pace_min_per_mile = round(pace_km * KM_PER_MILE, 2)
    req.easy_pace_min_per_mile = round((pace_km + EASY_PACE_OFFSET_KM) * KM_PER_MILE, 2)
    req.tempo_pace_min_per_mile = round((pace_km + TEMPO_PACE_OFFSET_KM) * KM_PER_MILE, 2)
    req.interval_pace_min_per_mile = round((pace_km + INTERVAL_PACE_OFFSET_KM) * KM_PER_MILE, 2)


def _weight_loss_requirements(
    req: GoalRequirements,
    target_metric: str,
    profile: UserProfile,
    weight_history: list[WeightEntry],
) -> None:
    match = _WEIGHT_RE.search(target_metric)
    if match is None:
        return

    loss_kg = _to_kg(float(match.group(1)), match.group(2))
    current_weight = weight_history[0].weight_kg if weight_history else profile.weight_kg
    weeks = max(1, req.weeks_until_goal)

    weekly_target = min(MAX_RECOMMENDED_WEEKLY_LOSS_KG, loss_kg / weeks)

    req.target_weight_loss_kg = round(loss_kg, 2)
    req.target_weight_kg = round(current_weight - loss_kg, 2)
    req.weekly_weight_loss_target = round(weekly_target, 2)
    req.max_safe_weekly_loss = round(
        min(MAX_SAFE_WEEKLY_LOSS_KG, loss_kg / max(MIN_LOSS_WEEKS, req.weeks_until_goal)), 2
    )
    req.daily_calorie_deficit = round_half_up(weekly_target * KCAL_PER_KG / 7)
    req.feasible = loss_kg / weeks <= MAX_SAFE_WEEKLY_LOSS_KG


def _powerlifting_requirements(
    req: GoalRequirements,
    target_metric: str,
    profile: UserProfile,
    experience_level: str,
) -> None:
    match = _TOTAL_RE.search(target_metric)
    if match is None:
        return

    target_kg = _to_kg(float(match.group(1)), match.group(2))
    level = experience_key(experience_level)
    current_total = profile.weight_kg * TOTAL_BODYWEIGHT_MULTIPLIER[level]
    increase = target_kg - current_total
    weekly = increase / max(1, req.weeks_until_goal)
    limit = MAX_WEEKLY_TOTAL_INCREASE_BEGINNER if level == "beginner" else MAX_WEEKLY_TOTAL_INCREASE

    req.target_total_kg = round(target_kg, 1)
    req.estimated_current_total = float(round_half_up(current_total))
    req.total_increase = float(round_half_up(increase))
    req.weekly_increase = round(weekly, 1)
    req.feasible = weekly <= limit


def _hypertrophy_requirements(
    req: GoalRequirements,
    target_metric: str,
    experience_level: str,
) -> None:
    match = _MUSCLE_RE.search(target_metric)
    if match is None:
        return

    gain_kg = _to_kg(float(match.group(1)), match.group(2))
    max_monthly = MAX_MONTHLY_MUSCLE_GAIN_KG[experience_key(experience_level)]
    weeks = max(1, req.weeks_until_goal)
    months = weeks / WEEKS_PER_MONTH
    weekly = gain_kg / weeks

    req.target_muscle_gain_kg = round(gain_kg, 2)
    req.weekly_gain_target = round(weekly, 3)
    req.monthly_gain_target = round(weekly * WEEKS_PER_MONTH, 2)
    req.feasible = gain_kg / months <= max_monthly
    req.recommended_calorie_surplus = round_half_up(weekly * KCAL_PER_KG / 7)


def calculate_goal_requirements(
    program_type: str,
    target_metric: str | None,
    goal_date: str,
    profile: UserProfile,
    weight_history: list[WeightEntry] | None = None,
    now: datetime | None = None,
    experience_level: str | None = None,
) -> GoalRequirements:
    """
    Calculate quantitative requirements for a goal.

    Args:
        program_type: marathon, half-marathon, weight_loss, powerlifting, hypertrophy, ...
        target_metric: Free text ("3:30:00", "15lbs", "1000lb total", "10lbs muscle")
        goal_date: ISO date of the goal
        profile: User profile (bodyweight, experience level)
        weight_history: Weight entries ordered newest-first
        now: Reference time (defaults to now)
        experience_level: Overrides profile.experience_level when given

    Returns:
        GoalRequirements.  Discipline-specific fields are None when the
        target metric does not match the discipline's pattern.
    """
    days, weeks, urgency = goal_timeline(goal_date, now)
    req = GoalRequirements(days_until_goal=days, weeks_until_goal=weeks, urgency=urgency)

    metric = target_metric or ""
    level = experience_level or profile.experience_level
    history = weight_history or []

    if program_type in ENDURANCE_PROGRAM_TYPES:
        _endurance_requirements(req, program_type, metric, level)
    elif program_type == "weight_loss":
        _weight_loss_requirements(req, metric, profile, history)
    elif program_type == "powerlifting":
        _powerlifting_requirements(req, metric, profile, level)
    elif program_type == "hypertrophy":
        _hypertrophy_requirements(req, metric, level)

    return req
