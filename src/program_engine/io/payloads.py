"""
Boundary models for text returned by the generative collaborator.

The collaborator answers in semi-structured text that is expected to
contain one JSON object.  Everything that crosses into the engine is
validated here with pydantic; the rest of the engine only ever sees
core.models dataclasses.  Any failure surfaces as MalformedExternalPlan.
"""

import json
import re
from typing import Any

from loguru import logger
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..core.config import (
    DEFAULT_NUTRITION,
    DEFAULT_PHASE_WEEKS,
    FALLBACK_PHASE_FOCUS,
    FALLBACK_PHASE_NAME,
    INTENSITIES,
    SESSION_TYPES,
    STRENGTH_SPLITS,
    WEEKDAYS,
)
from ..core.errors import MalformedExternalPlan
from ..core.models import NutritionPlan, Phase, WorkoutSession

_DIGITS_RE = re.compile(r"\d+")


def _fold(value: str) -> str:
    return re.sub(r"[\s_-]", "", value).lower()


_INTENSITY_LOOKUP = {_fold(i): i for i in INTENSITIES}


def canonical_day(value: Any) -> str:
    """Full weekday name from a full name or an abbreviation of 3+ letters."""
    text = str(value).strip().lower()
    if len(text) >= 3:
        for day in WEEKDAYS:
            if day.lower().startswith(text):
                return day
    raise ValueError(f"unknown day {value!r}")


def canonical_intensity(value: Any) -> str:
    """Intensity label matched ignoring case, spaces, dashes and underscores."""
    try:
        return _INTENSITY_LOOKUP[_fold(str(value))]
    except KeyError:
        raise ValueError(f"unknown intensity {value!r}") from None


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SessionPayload(_Payload):
    day: str
    title: str = ""
    description: str = ""
    intensity: str = "Medium"
    session_type: str = Field("other", validation_alias=AliasChoices("type", "session_type", "sessionType"))
    notes: str | None = Field(None, validation_alias=AliasChoices("personalizedNotes", "notes"))

    @field_validator("day", mode="before")
    @classmethod
    def _canonical_day(cls, v: Any) -> str:
        return canonical_day(v)

    @field_validator("intensity", mode="before")
    @classmethod
    def _canonical_intensity(cls, v: Any) -> str:
        if v is None or v == "":
            return "Medium"
        return canonical_intensity(v)

    @field_validator("session_type", mode="before")
    @classmethod
    def _canonical_type(cls, v: Any) -> str:
        if v is None or v == "":
            return "other"
        text = str(v).strip().lower()
        if text not in SESSION_TYPES:
            raise ValueError(f"unknown session type {v!r}")
        return text

    @field_validator("title", "description", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    def to_session(self) -> WorkoutSession:
        return WorkoutSession(
            day=self.day,
            title=self.title,
            description=self.description,
            intensity=self.intensity,
            session_type=self.session_type,
            notes=self.notes,
        )


class PhasePayload(_Payload):
    name: str = "Training Phase"
    duration_weeks: int = Field(
        DEFAULT_PHASE_WEEKS, validation_alias=AliasChoices("duration_weeks", "durationWeeks", "duration")
    )
    focus: str = ""
    weekly_structure: list[SessionPayload] = Field(
        default_factory=list, validation_alias=AliasChoices("weeklyStructure", "weekly_structure")
    )

    @field_validator("duration_weeks", mode="before")
    @classmethod
    def _weeks(cls, v: Any) -> int:
        """Accept an int or a string such as "6 weeks"; anything else is the default."""
        if isinstance(v, bool):
            return DEFAULT_PHASE_WEEKS
        if isinstance(v, (int, float)):
            weeks = int(v)
        else:
            match = _DIGITS_RE.search(str(v or ""))
            weeks = int(match.group(0)) if match else 0
        return weeks if weeks > 0 else DEFAULT_PHASE_WEEKS

    def to_phase(self) -> Phase:
        return Phase(
            name=self.name,
            duration_weeks=self.duration_weeks,
            focus=self.focus,
            weekly_structure=[s.to_session() for s in self.weekly_structure],
        )


class NutritionPayload(_Payload):
    """Macro targets; a missing or zero value means "keep the current one"."""

    calories: float | None = Field(None, ge=0)
    protein: float | None = Field(None, ge=0)
    carbs: float | None = Field(None, ge=0)
    fat: float | None = Field(None, ge=0)
    recommendations: list[str] = Field(default_factory=list)

    def to_nutrition(self, base: dict[str, float] = DEFAULT_NUTRITION) -> NutritionPlan:
        """Fill unset macros from ``base``."""
        return NutritionPlan(
            calories=self.calories or base["calories"],
            protein=self.protein or base["protein"],
            carbs=self.carbs or base["carbs"],
            fat=self.fat or base["fat"],
            recommendations=list(self.recommendations),
        )


class StrengthPayload(_Payload):
    """Partial strength config; unset fields keep the program's current values."""

    enabled: bool | None = None
    days_per_week: int | None = Field(None, ge=1, le=7, validation_alias=AliasChoices("daysPerWeek", "days_per_week"))
    split: str | None = None
    custom_split: str | None = Field(None, validation_alias=AliasChoices("customSplit", "custom_split"))

    @field_validator("split")
    @classmethod
    def _known_split(cls, v: str | None) -> str | None:
        if v is not None and v not in STRENGTH_SPLITS:
            raise ValueError(f"unknown split {v!r}")
        return v


class PlanPayload(_Payload):
    """A complete program proposal."""

    phases: list[PhasePayload] = Field(min_length=1)
    nutrition_plan: NutritionPayload | None = Field(
        None, validation_alias=AliasChoices("nutritionPlan", "nutrition_plan")
    )
    overview: str = Field("", validation_alias=AliasChoices("programOverview", "overview"))


class UpdatedProgramPayload(_Payload):
    """The optional ``updatedProgram`` block of an update response."""

    training_days_per_week: int | None = Field(
        None, validation_alias=AliasChoices("trainingDaysPerWeek", "training_days_per_week")
    )
    phases: list[PhasePayload] | None = None
    nutrition_plan: NutritionPayload | None = Field(
        None, validation_alias=AliasChoices("nutritionPlan", "nutrition_plan")
    )
    strength_training: StrengthPayload | None = Field(
        None, validation_alias=AliasChoices("strengthTraining", "strength_training")
    )


class UpdateResponsePayload(_Payload):
    success: StrictBool
    message: StrictStr
    changes: list[str] | None = None
    recommendations: list[str] = Field(default_factory=list)
    updated_program: UpdatedProgramPayload | None = Field(
        None, validation_alias=AliasChoices("updatedProgram", "updated_program")
    )


def extract_json(text: str) -> dict[str, Any]:
    """
    Pull one JSON object out of collaborator text.

    The whole text is tried first; failing that, the span from the first
    ``{`` to the last ``}``.

    Raises:
        MalformedExternalPlan: If no JSON object can be decoded
    """
    if not text or not text.strip():
        raise MalformedExternalPlan("Empty response")

    try:
        data = json.loads(text.strip())
    except json.JSONDecodeError:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise MalformedExternalPlan("No JSON object found in response") from None
        try:
            data = json.loads(text[start : end + 1])
        except json.JSONDecodeError as e:
            raise MalformedExternalPlan(f"Invalid JSON in response: {e}") from e

    if not isinstance(data, dict):
        raise MalformedExternalPlan(f"Expected a JSON object, got {type(data).__name__}")
    return data


def parse_plan_payload(text: str) -> PlanPayload:
    """
    Validate a full program proposal.

    Raises:
        MalformedExternalPlan: On missing JSON or any schema violation
    """
    data = extract_json(text)
    try:
        return PlanPayload.model_validate(data)
    except PydanticValidationError as e:
        raise MalformedExternalPlan(f"Invalid plan payload: {e.error_count()} error(s)") from e


def parse_update_response(text: str) -> UpdateResponsePayload:
    """
    Validate an update response (``success`` bool and ``message`` string required).

    Raises:
        MalformedExternalPlan: On missing JSON or any schema violation
    """
    data = extract_json(text)
    try:
        return UpdateResponsePayload.model_validate(data)
    except PydanticValidationError as e:
        raise MalformedExternalPlan(f"Invalid update response: {e.error_count()} error(s)") from e


def fallback_phases() -> list[Phase]:
    """The single foundation phase used when no usable plan was received."""
    return [Phase(name=FALLBACK_PHASE_NAME, duration_weeks=DEFAULT_PHASE_WEEKS, focus=FALLBACK_PHASE_FOCUS)]


def phases_from_text(text: str) -> tuple[list[Phase], NutritionPlan | None, str]:
    """
    Phases, nutrition plan and overview from a plan proposal.

    Never raises: a malformed payload is logged and replaced by the
    foundation phase with no nutrition plan.
    """
    try:
        payload = parse_plan_payload(text)
    except MalformedExternalPlan as e:
        logger.warning(f"Falling back to foundation phase: {e}")
        return fallback_phases(), None, ""

    nutrition = payload.nutrition_plan.to_nutrition() if payload.nutrition_plan else None
    return [p.to_phase() for p in payload.phases], nutrition, payload.overview
