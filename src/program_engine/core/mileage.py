"""
Mileage progression for endurance programs.

Computes weekly volume and pace targets week by week: a linear build
from base to peak mileage with a lighter step-back week every fourth
week, followed by a taper that sheds up to 40% of peak volume.
"""

import math

from .config import (
    BASE_WEEKLY_MILEAGE,
    DEFAULT_PACE_GUIDANCE,
    EASY_PACE_OFFSET_MILE,
    EASY_SHARE,
    ENDURANCE_PROGRAM_TYPES,
    INTERVAL_PACE_OFFSET_MILE,
    INTERVAL_SHARE,
    LONG_PACE_OFFSET_MILE,
    LONG_RUN_BOUNDS,
    RACE_DISTANCE_KM,
    RACE_DISTANCE_MILES,
    STEP_BACK_EVERY,
    STEP_BACK_LONG_RUN_FACTOR,
    STEP_BACK_MILEAGE_FACTOR,
    TAPER_LONG_RUN,
    TAPER_MAX_REDUCTION,
    TEMPO_PACE_OFFSET_MILE,
    TEMPO_SHARE,
)
from .goals import experience_key, parse_goal_time, peak_mileage_for_pace, round_half_up, training_block
from .models import MileageWeek, PaceGuidance


def format_pace(minutes_per_mile: float) -> str:
    """
    Format a decimal pace as ``M:SS/mile``.

    Seconds are round(frac * 60), zero-padded; a value that rounds to 60
    seconds carries into the minute (7.999 -> "8:00/mile").
    """
    whole = math.floor(minutes_per_mile)
    seconds = round_half_up((minutes_per_mile - whole) * 60)
    if seconds == 60:
        whole += 1
        seconds = 0
    return f"{whole}:{seconds:02d}/mile"


def goal_pace_per_mile(program_type: str, goal_time: str | None) -> float | None:
    """Race pace in min/mile for an ``H:MM:SS`` goal, or None if it does not parse."""
    total_minutes = parse_goal_time(goal_time)
    if total_minutes is None:
        return None
    return total_minutes / RACE_DISTANCE_MILES[program_type]


def pace_guidance(program_type: str, goal_time: str | None = None) -> PaceGuidance:
    """
    Pace strings for easy / tempo / interval / long runs.

    Qualitative cues unless ``goal_time`` parses, in which case each run
    type is a fixed offset from goal pace in min/mile.
    """
    goal_pace = goal_pace_per_mile(program_type, goal_time)
    if goal_pace is None:
        return PaceGuidance(**DEFAULT_PACE_GUIDANCE)
    return PaceGuidance(
        easy=format_pace(goal_pace + EASY_PACE_OFFSET_MILE),
        tempo=format_pace(goal_pace + TEMPO_PACE_OFFSET_MILE),
        interval=format_pace(goal_pace + INTERVAL_PACE_OFFSET_MILE),
        long=format_pace(goal_pace + LONG_PACE_OFFSET_MILE),
    )


def is_step_back_week(week: int) -> bool:
    """Every 4th week after week 4 (8, 12, 16, ...) is a lighter week."""
    return week % STEP_BACK_EVERY == 0 and week > STEP_BACK_EVERY


def calculate_mileage_week(
    week: int,
    program_type: str,
    experience_level: str,
    goal_time: str | None = None,
    total_weeks: int | None = None,
) -> MileageWeek:
    """
    Volume and pace targets for one week of an endurance block.

    Args:
        week: 1-based week number within the block
        program_type: "marathon" or "half-marathon"
        experience_level: beginner | intermediate | advanced
        goal_time: Optional ``H:MM:SS`` race goal (scales peak and sets paces)
        total_weeks: Weeks until the race; the block is capped at 16 / 12

    Returns:
        MileageWeek with rounded integer mileage

    Raises:
        ValueError: If program_type is not an endurance type or week is out of range
    """
    if program_type not in ENDURANCE_PROGRAM_TYPES:
        raise ValueError(f"Mileage progression only applies to {ENDURANCE_PROGRAM_TYPES}, got {program_type!r}")

    total, build_weeks, taper_weeks = training_block(program_type, total_weeks)
    if not 1 <= week <= total:
        raise ValueError(f"week must be between 1 and {total}, got {week}")

    level = experience_key(experience_level)
    base = BASE_WEEKLY_MILEAGE[program_type][level]
    total_minutes = parse_goal_time(goal_time)
    pace_km = total_minutes / RACE_DISTANCE_KM[program_type] if total_minutes is not None else None
    peak = peak_mileage_for_pace(program_type, level, pace_km)

    if week <= build_weeks:
        phase = "build"
        progress_ratio = (week - 1) / max(1, build_weeks - 1)
        weekly = round_half_up(base + (peak - base) * progress_ratio)
        long_lo, long_hi = LONG_RUN_BOUNDS[program_type]
        long_run = round_half_up(long_lo + (long_hi - long_lo) * progress_ratio)
        if is_step_back_week(week):
            weekly = round_half_up(weekly * STEP_BACK_MILEAGE_FACTOR)
            long_run = round_half_up(long_run * STEP_BACK_LONG_RUN_FACTOR)
    else:
        phase = "taper"
        taper_week = week - build_weeks
        taper_ratio = 1 - (taper_week / taper_weeks) * TAPER_MAX_REDUCTION
        weekly = round_half_up(peak * taper_ratio)
        long_run = TAPER_LONG_RUN[program_type][min(taper_week, 3) - 1]

    remainder = max(0, weekly - long_run)

    return MileageWeek(
        week=week,
        phase=phase,
        weekly_mileage=weekly,
        long_run_miles=long_run,
        easy_run_miles=round_half_up(remainder * EASY_SHARE),
        tempo_miles=round_half_up(remainder * TEMPO_SHARE),
        interval_miles=round_half_up(remainder * INTERVAL_SHARE),
        pace_guidance=pace_guidance(program_type, goal_time),
    )


def plan_mileage(
    program_type: str,
    experience_level: str,
    goal_time: str | None = None,
    total_weeks: int | None = None,
) -> list[MileageWeek]:
    """Every week of the block, build through taper."""
    total, _, _ = training_block(program_type, total_weeks)
    return [
        calculate_mileage_week(week, program_type, experience_level, goal_time, total_weeks)
        for week in range(1, total + 1)
    ]
