"""
JSON serialization for program data models.

Handles conversion between dataclasses and JSON-compatible dicts.
"""

import json
import re
from datetime import datetime
from typing import Any

from ..core.config import EXPERIENCE_LEVELS, INTENSITIES, PROGRAM_TYPES, SESSION_TYPES, STRENGTH_SPLITS, WEEKDAYS
from ..core.models import (
    NutritionPlan,
    Phase,
    Program,
    RecoveryEntry,
    StrengthConfig,
    UpdateRecord,
    UserProfile,
    WeightEntry,
    WorkoutSession,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> str:
    """
    Validate and normalize date string to ISO format.

    Args:
        date_str: Date string to validate

    Returns:
        Normalized YYYY-MM-DD string

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e

    return date_str


def validate_choice(value: Any, choices: tuple[str, ...], name: str) -> str:
    """
    Validate that a value is one of the allowed strings.

    Raises:
        ValidationError: If value is not in choices
    """
    if value not in choices:
        raise ValidationError(f"Invalid {name}: {value!r}. Must be one of {choices}")
    return value


def validate_range(value: int | float, low: int | float, high: int | float, name: str) -> int | float:
    """
    Validate that low <= value <= high.

    Raises:
        ValidationError: If value is outside the range
    """
    if not low <= value <= high:
        raise ValidationError(f"{name} must be between {low} and {high}, got {value}")
    return value


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is positive.

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def session_to_dict(session: WorkoutSession) -> dict[str, Any]:
    d: dict[str, Any] = {
        "day": session.day,
        "title": session.title,
        "description": session.description,
        "intensity": session.intensity,
        "session_type": session.session_type,
    }
    if session.adjusted_for_recovery is not None:
        d["adjusted_for_recovery"] = session.adjusted_for_recovery
    if session.notes is not None:
        d["notes"] = session.notes
    return d


def dict_to_session(data: dict[str, Any]) -> WorkoutSession:
    """
    Convert dict to WorkoutSession.

    Raises:
        ValidationError: If data is invalid
    """
    validate_choice(data.get("day"), WEEKDAYS, "day")
    validate_choice(data.get("intensity", "Medium"), INTENSITIES, "intensity")
    validate_choice(data.get("session_type", "other"), SESSION_TYPES, "session_type")

    return WorkoutSession(
        day=data["day"],
        title=str(data.get("title", "")),
        description=str(data.get("description", "")),
        intensity=data.get("intensity", "Medium"),
        session_type=data.get("session_type", "other"),
        adjusted_for_recovery=data.get("adjusted_for_recovery"),
        notes=data.get("notes"),
    )


def phase_to_dict(phase: Phase) -> dict[str, Any]:
    return {
        "name": phase.name,
        "duration_weeks": phase.duration_weeks,
        "focus": phase.focus,
        "weekly_structure": [session_to_dict(s) for s in phase.weekly_structure],
    }


def dict_to_phase(data: dict[str, Any]) -> Phase:
    validate_positive(data.get("duration_weeks", 0), "duration_weeks")
    return Phase(
        name=str(data["name"]),
        duration_weeks=int(data["duration_weeks"]),
        focus=str(data.get("focus", "")),
        weekly_structure=[dict_to_session(s) for s in data.get("weekly_structure", [])],
    )


def strength_config_to_dict(config: StrengthConfig) -> dict[str, Any]:
    return {
        "enabled": config.enabled,
        "days_per_week": config.days_per_week,
        "split": config.split,
        "custom_split": config.custom_split,
    }


def dict_to_strength_config(data: dict[str, Any]) -> StrengthConfig:
    validate_range(data.get("days_per_week", 3), 1, 7, "days_per_week")
    validate_choice(data.get("split", "fullBody"), STRENGTH_SPLITS, "split")
    return StrengthConfig(
        enabled=bool(data.get("enabled", False)),
        days_per_week=int(data.get("days_per_week", 3)),
        split=data.get("split", "fullBody"),
        custom_split=str(data.get("custom_split", "")),
    )


def nutrition_to_dict(plan: NutritionPlan) -> dict[str, Any]:
    return {
        "calories": plan.calories,
        "protein": plan.protein,
        "carbs": plan.carbs,
        "fat": plan.fat,
        "recommendations": list(plan.recommendations),
    }


def dict_to_nutrition(data: dict[str, Any]) -> NutritionPlan:
    for name in ("calories", "protein", "carbs", "fat"):
        if float(data.get(name, 0)) < 0:
            raise ValidationError(f"{name} must be non-negative, got {data.get(name)}")
    return NutritionPlan(
        calories=float(data["calories"]),
        protein=float(data["protein"]),
        carbs=float(data["carbs"]),
        fat=float(data["fat"]),
        recommendations=[str(r) for r in data.get("recommendations", [])],
    )


def update_record_to_dict(record: UpdateRecord) -> dict[str, Any]:
    return {"date": record.date, "request_text": record.request_text, "changes": list(record.changes)}


def dict_to_update_record(data: dict[str, Any]) -> UpdateRecord:
    return UpdateRecord(
        date=str(data["date"]),
        request_text=str(data.get("request_text", "")),
        changes=[str(c) for c in data.get("changes", [])],
    )


def program_to_dict(program: Program) -> dict[str, Any]:
    """
    Convert Program to JSON-compatible dict.

    Optional blocks (strength config, nutrition plan) are omitted when unset.
    """
    d: dict[str, Any] = {
        "program_id": program.program_id,
        "name": program.name,
        "program_type": program.program_type,
        "start_date": program.start_date,
        "goal_date": program.goal_date,
        "target_metric": program.target_metric,
        "experience_level": program.experience_level,
        "training_days_per_week": program.training_days_per_week,
        "phases": [phase_to_dict(p) for p in program.phases],
        "update_history": [update_record_to_dict(r) for r in program.update_history],
        "overview": program.overview,
        "last_updated": program.last_updated,
        "active": program.active,
    }
    if program.strength_config is not None:
        d["strength_config"] = strength_config_to_dict(program.strength_config)
    if program.nutrition_plan is not None:
        d["nutrition_plan"] = nutrition_to_dict(program.nutrition_plan)
    return d


def dict_to_program(data: dict[str, Any]) -> Program:
    """
    Convert dict to Program.

    Args:
        data: Dict representation

    Returns:
        Program instance

    Raises:
        ValidationError: If data is invalid
    """
    validate_date(data.get("start_date"))
    if data.get("goal_date") is not None:
        validate_date(data["goal_date"])
    validate_choice(data.get("program_type"), PROGRAM_TYPES, "program_type")
    validate_choice(data.get("experience_level", "intermediate"), EXPERIENCE_LEVELS, "experience_level")
    validate_range(data.get("training_days_per_week", 4), 1, 7, "training_days_per_week")

    strength = data.get("strength_config")
    nutrition = data.get("nutrition_plan")

    return Program(
        program_id=str(data["program_id"]),
        name=str(data.get("name", "")),
        program_type=data["program_type"],
        start_date=data["start_date"],
        goal_date=data.get("goal_date"),
        target_metric=str(data.get("target_metric", "")),
        experience_level=data.get("experience_level", "intermediate"),
        training_days_per_week=int(data.get("training_days_per_week", 4)),
        strength_config=dict_to_strength_config(strength) if strength else None,
        phases=[dict_to_phase(p) for p in data.get("phases", [])],
        update_history=[dict_to_update_record(r) for r in data.get("update_history", [])],
        nutrition_plan=dict_to_nutrition(nutrition) if nutrition else None,
        overview=str(data.get("overview", "")),
        last_updated=data.get("last_updated"),
        active=bool(data.get("active", True)),
    )


def user_profile_to_dict(profile: UserProfile) -> dict[str, Any]:
    d: dict[str, Any] = {
        "age": profile.age,
        "gender": profile.gender,
        "weight_kg": profile.weight_kg,
        "height_cm": profile.height_cm,
        "activity_level": profile.activity_level,
        "fitness_goal": profile.fitness_goal,
        "experience_level": profile.experience_level,
    }
    if profile.body_fat is not None:
        d["body_fat"] = profile.body_fat
    return d


def dict_to_user_profile(data: dict[str, Any]) -> UserProfile:
    """
    Convert dict to UserProfile.

    Raises:
        ValidationError: If data is invalid
    """
    validate_positive(data.get("weight_kg", 0), "weight_kg")
    validate_positive(data.get("height_cm", 0), "height_cm")
    validate_choice(data.get("experience_level", "intermediate"), EXPERIENCE_LEVELS, "experience_level")

    return UserProfile(
        age=int(data.get("age", 30)),
        gender=str(data.get("gender", "")),
        weight_kg=float(data["weight_kg"]),
        height_cm=float(data["height_cm"]),
        body_fat=float(data["body_fat"]) if data.get("body_fat") is not None else None,
        activity_level=str(data.get("activity_level", "moderatelyActive")),
        fitness_goal=str(data.get("fitness_goal", "improvePerformance")),
        experience_level=data.get("experience_level", "intermediate"),
    )


def dict_to_weight_entry(data: dict[str, Any]) -> WeightEntry:
    validate_date(data.get("date"))
    validate_positive(data.get("weight_kg", 0), "weight_kg")
    return WeightEntry(date=data["date"], weight_kg=float(data["weight_kg"]))


def dict_to_recovery_entry(data: dict[str, Any]) -> RecoveryEntry:
    validate_date(data.get("date"))
    validate_range(data.get("score", -1), 0, 100, "score")
    hrv = data.get("hrv_ms")
    return RecoveryEntry(date=data["date"], score=float(data["score"]), hrv_ms=float(hrv) if hrv is not None else None)


def program_to_json(program: Program) -> str:
    """Serialize a program as an indented JSON document."""
    return json.dumps(program_to_dict(program), indent=2)


def json_to_program(text: str) -> Program:
    """
    Deserialize a JSON document to a Program.

    Raises:
        ValidationError: If JSON is invalid or data validation fails
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("Program document must be a JSON object")
    try:
        return dict_to_program(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid program data: {e}") from e
