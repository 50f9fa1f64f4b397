"""
Data models for program-engine.

All core dataclasses representing programs, phases, weekly sessions,
and the derived goal / mileage views.  Engine functions never mutate
these in place; they build new instances with ``dataclasses.replace``.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from .config import (
    EXPERIENCE_LEVELS,
    INTENSITIES,
    PROGRAM_TYPES,
    SESSION_TYPES,
    STRENGTH_SPLITS,
    WEEKDAYS,
)

Weekday = str  # One of config.WEEKDAYS ("Monday" .. "Sunday")
Intensity = str  # One of config.INTENSITIES
SessionType = Literal["cardio", "strength", "recovery", "other"]
ProgramType = Literal[
    "marathon", "half-marathon", "weight_loss", "powerlifting", "hypertrophy", "general_fitness"
]
ExperienceLevel = Literal["beginner", "intermediate", "advanced"]
StrengthSplit = Literal["fullBody", "upperLower", "pushPullLegs", "bodyPart", "custom"]
Urgency = Literal["low", "medium", "high"]
RecoveryStatus = Literal["low", "medium", "high"]


def validate_iso_date(date_str: str) -> None:
    """Validate date string is ISO format YYYY-MM-DD."""
    if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValueError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")
    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_str}") from e


@dataclass
class WorkoutSession:
    """
    One scheduled activity on one weekday.

    A session always carries exactly one discipline in ``session_type``;
    combined entries ("run + lift") are split by the classifier before
    they reach a phase.
    """

    day: Weekday
    title: str
    description: str
    intensity: Intensity = "Medium"
    session_type: SessionType = "other"
    adjusted_for_recovery: str | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        """Validate session data."""
        if self.day not in WEEKDAYS:
            raise ValueError(f"Invalid day: {self.day!r}")
        if self.intensity not in INTENSITIES:
            raise ValueError(f"Invalid intensity: {self.intensity!r}")
        if self.session_type not in SESSION_TYPES:
            raise ValueError(f"Invalid session_type: {self.session_type!r}")


@dataclass
class Phase:
    """A contiguous block of weeks with a shared training focus."""

    name: str
    duration_weeks: int
    focus: str
    weekly_structure: list[WorkoutSession] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.duration_weeks <= 0:
            raise ValueError("duration_weeks must be positive")

    def count_type(self, session_type: str) -> int:
        """Number of sessions of the given discipline in the weekly structure."""
        return sum(1 for s in self.weekly_structure if s.session_type == session_type)


@dataclass
class StrengthConfig:
    """
    User-mandated strength training block.

    When ``enabled``, every phase must end up with exactly
    ``days_per_week`` strength sessions.  ``custom_split`` is free text
    and only consulted when ``split == "custom"``.
    """

    enabled: bool = False
    days_per_week: int = 3
    split: StrengthSplit = "fullBody"
    custom_split: str = ""

    def __post_init__(self) -> None:
        if not 1 <= self.days_per_week <= 7:
            raise ValueError("days_per_week must be between 1 and 7")
        if self.split not in STRENGTH_SPLITS:
            raise ValueError(f"Invalid split: {self.split!r}")

    @property
    def required_sessions(self) -> int:
        """Strength sessions every phase must contain (0 when disabled)."""
        return self.days_per_week if self.enabled else 0


@dataclass
class NutritionPlan:
    """Daily macro targets in kcal and grams."""

    calories: float
    protein: float
    carbs: float
    fat: float
    recommendations: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        for name in ("calories", "protein", "carbs", "fat"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")


@dataclass
class UpdateRecord:
    """One accepted update request.  Append-only audit entry."""

    date: str  # ISO timestamp
    request_text: str
    changes: list[str] = field(default_factory=list)


@dataclass
class Program:
    """
    A user's multi-week training plan aggregate.

    The engine receives a Program snapshot and returns a new snapshot;
    persistence belongs to io.program_store.
    """

    program_id: str
    name: str
    program_type: ProgramType
    start_date: str  # ISO format: YYYY-MM-DD
    goal_date: str | None = None
    target_metric: str = ""
    experience_level: ExperienceLevel = "intermediate"
    training_days_per_week: int = 4
    strength_config: StrengthConfig | None = None
    phases: list[Phase] = field(default_factory=list)
    update_history: list[UpdateRecord] = field(default_factory=list)
    nutrition_plan: NutritionPlan | None = None
    overview: str = ""
    last_updated: str | None = None
    active: bool = True

    def __post_init__(self) -> None:
        """Validate program data."""
        validate_iso_date(self.start_date)
        if self.goal_date is not None:
            validate_iso_date(self.goal_date)
        if self.program_type not in PROGRAM_TYPES:
            raise ValueError(f"Invalid program_type: {self.program_type!r}")
        if self.experience_level not in EXPERIENCE_LEVELS:
            raise ValueError(f"Invalid experience_level: {self.experience_level!r}")
        if not 1 <= self.training_days_per_week <= 7:
            raise ValueError("training_days_per_week must be between 1 and 7")

    @property
    def required_strength_sessions(self) -> int:
        """Strength sessions per phase mandated by the strength config."""
        if self.strength_config is None:
            return 0
        return self.strength_config.required_sessions

    @property
    def total_weeks(self) -> int:
        """Sum of phase durations (0 when no phases have been synthesized)."""
        return sum(p.duration_weeks for p in self.phases)


@dataclass
class UserProfile:
    """Physical characteristics consumed by the goal calculator."""

    age: int
    gender: str
    weight_kg: float
    height_cm: float
    body_fat: float | None = None
    activity_level: str = "moderatelyActive"
    fitness_goal: str = "improvePerformance"
    experience_level: ExperienceLevel = "intermediate"

    def __post_init__(self) -> None:
        if self.weight_kg <= 0:
            raise ValueError("weight_kg must be positive")
        if self.height_cm <= 0:
            raise ValueError("height_cm must be positive")
        if self.experience_level not in EXPERIENCE_LEVELS:
            raise ValueError(f"Invalid experience_level: {self.experience_level!r}")


@dataclass
class WeightEntry:
    """A bodyweight measurement.  Histories are ordered newest-first."""

    date: str
    weight_kg: float

    def __post_init__(self) -> None:
        validate_iso_date(self.date)
        if self.weight_kg <= 0:
            raise ValueError("weight_kg must be positive")


@dataclass
class RecoveryEntry:
    """A daily recovery reading from the wearable feed."""

    date: str
    score: float  # 0-100
    hrv_ms: float | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.score <= 100:
            raise ValueError("score must be between 0 and 100")


@dataclass
class GoalRequirements:
    """
    Quantitative targets derived from a goal description.

    Only the timeline fields are guaranteed.  Discipline-specific fields
    stay ``None`` when the target metric did not parse.
    """

    days_until_goal: int
    weeks_until_goal: int
    urgency: Urgency
    feasible: bool = True

    # Endurance
    target_time: str | None = None
    target_pace_min_per_km: float | None = None
    goal_pace_min_per_mile: float | None = None
    easy_pace_min_per_mile: float | None = None
    tempo_pace_min_per_mile: float | None = None
    interval_pace_min_per_mile: float | None = None
    base_weekly_mileage: int | None = None
    peak_weekly_mileage: int | None = None
    mileage_progression: float | None = None
    total_training_weeks: int | None = None
    build_weeks: int | None = None
    taper_weeks: int | None = None

    # Weight loss
    target_weight_loss_kg: float | None = None
    target_weight_kg: float | None = None
    weekly_weight_loss_target: float | None = None
    max_safe_weekly_loss: float | None = None
    daily_calorie_deficit: int | None = None

    # Powerlifting
    target_total_kg: float | None = None
    estimated_current_total: float | None = None
    total_increase: float | None = None
    weekly_increase: float | None = None

    # Hypertrophy
    target_muscle_gain_kg: float | None = None
    weekly_gain_target: float | None = None
    monthly_gain_target: float | None = None
    recommended_calorie_surplus: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return only the fields that carry a value."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


@dataclass
class PaceGuidance:
    """Per-run-type pace strings ("8:01/mile" or a qualitative cue)."""

    easy: str
    tempo: str
    interval: str
    long: str


@dataclass
class MileageWeek:
    """Weekly volume targets (miles) for one week of an endurance build."""

    week: int
    phase: Literal["build", "taper"]
    weekly_mileage: int
    long_run_miles: int
    easy_run_miles: int
    tempo_miles: int
    interval_miles: int
    pace_guidance: PaceGuidance

    @property
    def component_total(self) -> int:
        """easy + tempo + interval + long; tracks weekly_mileage within rounding."""
        return self.easy_run_miles + self.tempo_miles + self.interval_miles + self.long_run_miles


@dataclass
class SessionEdit:
    """
    A single-session edit addressed by (day, original_title).

    A description or intensity left as None keeps the session's current value.
    """

    day: Weekday
    original_title: str
    new_title: str
    new_description: str | None = None
    new_intensity: Intensity | None = None

    def __post_init__(self) -> None:
        if self.new_intensity is not None and self.new_intensity not in INTENSITIES:
            raise ValueError(f"Invalid intensity: {self.new_intensity!r}")


@dataclass
class ProgramFeedback:
    """Outcome of an update request, shown back to the user."""

    success: bool
    message: str
    changes: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


@dataclass
class TodaysWorkout:
    """Read view of today's scheduled session."""

    session: WorkoutSession
    program_id: str
    program_name: str
    duration: str
    recovery_adjustment: str | None = None


@dataclass
class ProgramProgress:
    """Calendar progress through a program."""

    progress_percentage: float
    current_week: int
    total_weeks: int
    days_until_goal: int | None
    completed_workouts: int
    total_workouts: int
    progress_status: str = ""
    effectiveness: str = ""
