"""
Read views over a program: today's workout and calendar progress.
"""

import math
from datetime import datetime

from .config import DEFAULT_TOTAL_WEEKS, WEEKDAYS
from .goals import goal_timeline
from .models import GoalRequirements, Phase, Program, ProgramProgress, TodaysWorkout, WorkoutSession
from .recovery import recovery_adjustment

# Weekly template used when a program has no synthesized phases yet:
# weekday -> (title, type, intensity, description)
_BASIC_WEEKS: dict[str, dict[str, tuple[str, str, str, str]]] = {
    "marathon": {
        "Monday": ("Recovery Run", "cardio", "Low", "Easy 30-45 minute run at conversational pace"),
        "Tuesday": ("Speed Work", "cardio", "High", "8-10 x 400m repeats at 5K pace"),
        "Wednesday": ("Easy Run", "cardio", "Low", "40-50 minute easy run"),
        "Thursday": ("Tempo Run", "cardio", "Medium", "20 minutes at threshold pace"),
        "Friday": ("Rest Day", "recovery", "Very Low", "Complete rest or light stretching"),
        "Saturday": ("Long Run", "cardio", "Medium", "Long steady run at easy pace"),
        "Sunday": ("Cross Training", "recovery", "Low", "Light cross-training or rest"),
    },
    "powerlifting": {
        "Monday": ("Squat Focus", "strength", "High", "Back Squat 5x5, accessory work"),
        "Tuesday": ("Upper Body", "strength", "Medium", "Bench Press and upper body accessories"),
        "Wednesday": ("Rest Day", "recovery", "Very Low", "Complete rest or light mobility"),
        "Thursday": ("Deadlift Focus", "strength", "High", "Deadlift 4x5, back work"),
        "Friday": ("Upper Body", "strength", "Medium", "Press variations and arm work"),
        "Saturday": ("Accessory Day", "strength", "Medium-Low", "Accessory movements and core"),
        "Sunday": ("Rest Day", "recovery", "None", "Complete rest"),
    },
    "weight_loss": {
        "Monday": ("Full Body Strength", "strength", "Medium", "Circuit training with compound movements"),
        "Tuesday": ("HIIT Cardio", "cardio", "High", "30 seconds work, 30 seconds rest intervals"),
        "Wednesday": ("Active Recovery", "recovery", "Low", "30-45 minute walk or yoga"),
        "Thursday": ("Upper Body Focus", "strength", "Medium", "Upper body strength training"),
        "Friday": ("Steady Cardio", "cardio", "Medium-Low", "45-60 minutes Zone 2 cardio"),
        "Saturday": ("Lower Body Focus", "strength", "Medium", "Lower body strength training"),
        "Sunday": ("Rest Day", "recovery", "None", "Complete rest"),
    },
}


def workout_duration(session_type: str, intensity: str) -> str:
    """Expected session length as a minutes range."""
    if session_type == "cardio":
        if intensity == "High":
            return "45-60 minutes"
        if intensity in ("Medium", "Medium-High"):
            return "30-45 minutes"
        return "20-30 minutes"
    if session_type == "strength":
        if intensity == "High":
            return "60-75 minutes"
        if intensity in ("Medium", "Medium-High"):
            return "45-60 minutes"
        return "30-45 minutes"
    if session_type == "recovery":
        return "20-45 minutes"
    return "30-45 minutes"


def current_week(start_date: str, now: datetime | None = None) -> int:
    """1-based program week: floor(ceil(|now - start| in days) / 7) + 1."""
    now = now or datetime.now()
    start = datetime.strptime(start_date, "%Y-%m-%d")
    days = math.ceil(abs((now - start).total_seconds()) / 86400)
    return days // 7 + 1


def phase_for_week(phases: list[Phase], week: int) -> Phase | None:
    """Phase covering ``week`` by cumulative duration; the first phase once past the end."""
    if not phases:
        return None
    elapsed = 0
    for phase in phases:
        if elapsed < week <= elapsed + phase.duration_weeks:
            return phase
        elapsed += phase.duration_weeks
    return phases[0]


def basic_session(program_type: str, day: str) -> WorkoutSession | None:
    """Session from the built-in weekly template, if the program type has one."""
    week = _BASIC_WEEKS.get(program_type)
    if week is None or day not in week:
        return None
    title, session_type, intensity, description = week[day]
    return WorkoutSession(
        day=day,
        title=title,
        description=description,
        intensity=intensity,
        session_type=session_type,
    )


def todays_workout(
    program: Program,
    now: datetime | None = None,
    recovery_status: str | None = None,
) -> TodaysWorkout | None:
    """
    The session scheduled for today.

    Looks in the phase covering the current week; a program without a
    session today falls back to the built-in template for its type.
    The recovery note is exposed only when recovery is low.

    Returns:
        TodaysWorkout, or None when the program is inactive or nothing is scheduled
    """
    if not program.active:
        return None
    now = now or datetime.now()
    today = WEEKDAYS[now.weekday()]

    session = None
    phase = phase_for_week(program.phases, current_week(program.start_date, now))
    if phase is not None:
        session = next((s for s in phase.weekly_structure if s.day == today), None)
    if session is None:
        session = basic_session(program.program_type, today)
    if session is None:
        return None

    return TodaysWorkout(
        session=session,
        program_id=program.program_id,
        program_name=program.name,
        duration=workout_duration(session.session_type, session.intensity),
        recovery_adjustment=recovery_adjustment(session, recovery_status) if recovery_status == "low" else None,
    )


def _progress_status(percentage: float) -> str:
    if percentage < 25:
        return "early phase - building foundation"
    if percentage < 50:
        return "building phase - developing capacity"
    if percentage < 75:
        return "development phase - increasing intensity"
    return "peak phase - goal-specific preparation"


def _effectiveness(
    percentage: float,
    total_weeks: int,
    days_until_goal: int | None,
    requirements: GoalRequirements | None,
) -> str:
    if days_until_goal:
        timeline = (total_weeks * 7 - days_until_goal) / (total_weeks * 7) * 100
        if timeline > percentage + 10:
            result = "ahead of schedule - can accommodate modifications"
        elif timeline < percentage - 10:
            result = "behind schedule - need to prioritize goal-critical activities"
        else:
            result = "on track - balanced approach possible"
    else:
        result = "flexible timeline - can accommodate user preferences"
    if requirements is not None and not requirements.feasible:
        result += " (goal timeline may need adjustment)"
    return result


def program_progress(
    program: Program,
    now: datetime | None = None,
    requirements: GoalRequirements | None = None,
) -> ProgramProgress:
    """
    Calendar progress: current week against total weeks, capped at 100%.

    Total weeks is the sum of phase durations (12 without phases).
    Workouts are counted from training days per week, with every full
    elapsed week treated as completed.
    """
    now = now or datetime.now()
    week = current_week(program.start_date, now)
    total = program.total_weeks or DEFAULT_TOTAL_WEEKS
    percentage = min(week / total * 100, 100.0)
    days_until_goal = goal_timeline(program.goal_date, now)[0] if program.goal_date else None

    return ProgramProgress(
        progress_percentage=round(percentage, 1),
        current_week=week,
        total_weeks=total,
        days_until_goal=days_until_goal,
        completed_workouts=min(week - 1, total) * program.training_days_per_week,
        total_workouts=total * program.training_days_per_week,
        progress_status=_progress_status(percentage),
        effectiveness=_effectiveness(percentage, total, days_until_goal, requirements),
    )
