"""
Schedule reconciliation.

Applies incremental changes to an existing Program without destroying
its structure: single-session edits, phase-level enhancements proposed
by the generative collaborator, nutrition and strength config updates.
Every accepted request appends exactly one UpdateRecord.

All functions return new Program snapshots; inputs are never mutated.
"""

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from loguru import logger

from ..io.payloads import (
    NutritionPayload,
    StrengthPayload,
    UpdatedProgramPayload,
    UpdateResponsePayload,
    parse_update_response,
)
from .classifier import normalize_sessions
from .config import (
    MAX_CALORIE_INCREASE,
    MAX_CARB_INCREASE,
    MAX_PROTEIN_INCREASE,
    MAX_TRAINING_DAY_INCREASE,
    MERGE_SEPARATOR,
)
from .enforcer import resynthesize_strength
from .errors import MalformedExternalPlan
from .models import (
    NutritionPlan,
    Phase,
    Program,
    ProgramFeedback,
    SessionEdit,
    StrengthConfig,
    UpdateRecord,
)
from .recovery import annotate_phases

PROCESSING_FAILURE_MESSAGE = (
    "I received a response but couldn't process it properly. "
    "Please try rephrasing your request or try again later."
)
CONNECTION_FAILURE_MESSAGE = (
    "There was an error connecting to the AI service. "
    "Please check your internet connection and try again."
)
DEFAULT_PLAN_CHANGE_NOTE = "Program updated based on your request"
ENHANCEMENT_FOCUS = "user enhancements"

Collaborator = Callable[[str], str]


def _timestamp(now: datetime | None) -> str:
    return (now or datetime.now()).isoformat(timespec="seconds")


# =============================================================================
# Single-session edits
# =============================================================================


def apply_session_edit(phases: list[Phase], edit: SessionEdit) -> tuple[list[Phase], bool]:
    """
    Apply an edit to the first ``(day, original_title)`` match in each phase.

    Only title, description and intensity change; a description or
    intensity left unset keeps the matched session's value.  Applying
    the same edit twice gives the same schedule as applying it once.

    Returns:
        (new phases, whether any session matched)
    """
    found = False
    result = []
    for phase in phases:
        structure = list(phase.weekly_structure)
        for i, session in enumerate(structure):
            if session.day == edit.day and session.title == edit.original_title:
                structure[i] = replace(
                    session,
                    title=edit.new_title,
                    description=session.description if edit.new_description is None else edit.new_description,
                    intensity=session.intensity if edit.new_intensity is None else edit.new_intensity,
                )
                found = True
                break
        result.append(replace(phase, weekly_structure=structure))
    return result, found


def edit_change_note(edit: SessionEdit, found: bool) -> str:
    if found:
        return f"Updated {edit.day} workout from {edit.original_title} to {edit.new_title}"
    return f"Updated {edit.day} workout"


# =============================================================================
# Phase-level enhancements
# =============================================================================


def merge_phase(existing: Phase, proposed: Phase) -> Phase:
    """
    Merge a proposed weekly structure into an existing phase.

    Proposed sessions on a free day are appended.  On an occupied day
    with a different title the descriptions are concatenated and a note
    names the added session; a proposal with the same title is dropped.
    """
    structure = list(existing.weekly_structure)
    for new in normalize_sessions(proposed.weekly_structure):
        index = next((i for i, s in enumerate(structure) if s.day == new.day), None)
        if index is None:
            structure.append(new)
            continue
        current = structure[index]
        if current.title != new.title:
            structure[index] = replace(
                current,
                description=f"{current.description}{MERGE_SEPARATOR}{new.description}",
                notes=f"Enhanced with: {new.title}",
            )

    return replace(
        existing,
        weekly_structure=structure,
        focus=f"{existing.focus}{MERGE_SEPARATOR}{proposed.focus or ENHANCEMENT_FOCUS}",
    )


def merge_phases(existing: list[Phase], proposed: list[Phase]) -> list[Phase]:
    """Merge proposals by phase index; proposals beyond the existing phases are ignored."""
    result = []
    for index, phase in enumerate(existing):
        candidate = proposed[index] if index < len(proposed) else None
        if candidate is not None and candidate.weekly_structure:
            result.append(merge_phase(phase, candidate))
        else:
            result.append(phase)
    return result


def clamp_nutrition(current: NutritionPlan, proposed: NutritionPayload) -> NutritionPlan:
    """
    Accept a proposed nutrition plan within safety bounds.

    Calories and carbs may grow by at most 20%, protein by 30%; fat is
    taken as proposed.  Recommendations are appended to the current ones.
    """
    return NutritionPlan(
        calories=min(proposed.calories or current.calories, current.calories * MAX_CALORIE_INCREASE),
        protein=min(proposed.protein or current.protein, current.protein * MAX_PROTEIN_INCREASE),
        carbs=min(proposed.carbs or current.carbs, current.carbs * MAX_CARB_INCREASE),
        fat=proposed.fat or current.fat,
        recommendations=[*current.recommendations, *proposed.recommendations],
    )


def accept_training_days(current: int, proposed: int | None) -> int:
    """Proposed days per week, if it adds at most two days and stays within a week."""
    if proposed is None or proposed < 1:
        return current
    if proposed <= current + MAX_TRAINING_DAY_INCREASE and proposed <= 7:
        return proposed
    logger.info(f"Ignoring training days change {current} -> {proposed}")
    return current


def merge_strength_config(current: StrengthConfig | None, update: StrengthPayload) -> StrengthConfig:
    """Overlay the set fields of ``update``; a new config starts enabled."""
    base = current if current is not None else StrengthConfig(enabled=True)
    return StrengthConfig(
        enabled=base.enabled if update.enabled is None else update.enabled,
        days_per_week=base.days_per_week if update.days_per_week is None else update.days_per_week,
        split=base.split if update.split is None else update.split,
        custom_split=base.custom_split if update.custom_split is None else update.custom_split,
    )


def restore_strength_counts(phases: list[Phase], strength_config: StrengthConfig | None) -> list[Phase]:
    """
    Resynthesize strength work in the phases whose count drifted from the config.

    Only strength-typed sessions are replaced.  Sessions of other types
    survive even when merged text mentions strength work.
    """
    required = strength_config.required_sessions if strength_config is not None else 0
    if required == 0:
        return phases
    return [
        replace(phase, weekly_structure=resynthesize_strength(phase.weekly_structure, required, strength_config))
        if phase.count_type("strength") != required
        else phase
        for phase in phases
    ]


def apply_program_updates(program: Program, updates: UpdatedProgramPayload, request_text: str) -> Program:
    """Apply an ``updatedProgram`` block (without recording history)."""
    training_days = accept_training_days(program.training_days_per_week, updates.training_days_per_week)

    strength_config = program.strength_config
    if updates.strength_training is not None:
        strength_config = merge_strength_config(strength_config, updates.strength_training)

    phases = program.phases
    overview = program.overview
    if updates.phases and program.phases:
        phases = merge_phases(program.phases, [p.to_phase() for p in updates.phases])
        overview = f'{program.overview} Enhanced based on: "{request_text}"'.strip()
    phases = restore_strength_counts(phases, strength_config)

    nutrition = program.nutrition_plan
    if updates.nutrition_plan is not None and nutrition is not None:
        nutrition = clamp_nutrition(nutrition, updates.nutrition_plan)

    return replace(
        program,
        training_days_per_week=training_days,
        strength_config=strength_config,
        phases=phases,
        overview=overview,
        nutrition_plan=nutrition,
    )


# =============================================================================
# Update requests
# =============================================================================


def _record(program: Program, request_text: str, changes: list[str], now: datetime | None) -> Program:
    stamp = _timestamp(now)
    record = UpdateRecord(date=stamp, request_text=request_text, changes=list(changes))
    return replace(program, update_history=[*program.update_history, record], last_updated=stamp)


def edit_session(program: Program, edit: SessionEdit, now: datetime | None = None) -> Program:
    """Apply a user's own single-session edit and record it."""
    phases, found = apply_session_edit(program.phases, edit)
    if not found:
        logger.info(f"No session {edit.original_title!r} on {edit.day} in program {program.program_id}")
    request_text = f"Edit {edit.day} workout {edit.original_title!r}"
    return _record(replace(program, phases=phases), request_text, [edit_change_note(edit, found)], now)


def apply_update_response(
    program: Program,
    response: UpdateResponsePayload,
    request_text: str,
    edit: SessionEdit | None = None,
    recovery_status: str | None = None,
    now: datetime | None = None,
) -> tuple[Program, ProgramFeedback]:
    """
    Reconcile a validated collaborator response into a program.

    A response with ``success=False`` leaves the program untouched.

    Args:
        program: Current program snapshot
        response: Validated update response
        request_text: The user's request, stored in the update record
        edit: Target of a single-session edit, if the request was one
        recovery_status: Refresh recovery annotations for this status
        now: Timestamp for the update record

    Returns:
        (updated program, feedback)
    """
    feedback = ProgramFeedback(
        success=response.success,
        message=response.message,
        changes=list(response.changes or []),
        recommendations=list(response.recommendations),
    )
    if not response.success:
        return program, feedback

    if edit is not None:
        phases, found = apply_session_edit(program.phases, edit)
        updated = replace(program, phases=phases)
        default_note = edit_change_note(edit, found)
    else:
        updated = program
        if response.updated_program is not None:
            updated = apply_program_updates(program, response.updated_program, request_text)
        default_note = DEFAULT_PLAN_CHANGE_NOTE

    if recovery_status is not None:
        updated = replace(updated, phases=annotate_phases(updated.phases, recovery_status))

    changes = response.changes if response.changes is not None else [default_note]
    updated = _record(updated, request_text, changes, now)
    logger.info(f"Program {program.program_id} updated: {len(changes)} change(s)")

    feedback.changes = list(changes)
    return updated, feedback


def build_update_prompt(program: Program, request_text: str, edit: SessionEdit | None = None) -> str:
    """Prompt text handed to the generative collaborator."""
    lines = [
        f'USER REQUEST: "{request_text}"',
        f"PROGRAM: {program.name} ({program.program_type})",
        f"GOAL: {program.target_metric or 'General fitness'} by {program.goal_date or 'not set'}",
        f"TRAINING DAYS: {program.training_days_per_week}/week, EXPERIENCE: {program.experience_level}",
    ]
    for phase in program.phases:
        sessions = ", ".join(f"{s.day}: {s.title} [{s.session_type}]" for s in phase.weekly_structure)
        lines.append(f"PHASE {phase.name} ({phase.duration_weeks} weeks): {sessions or 'no sessions'}")
    if edit is not None:
        lines.append(
            f"EDIT: {edit.day} {edit.original_title!r} -> {edit.new_title!r} "
            f"({edit.new_intensity or 'unchanged intensity'}): {edit.new_description or 'unchanged description'}"
        )
    lines.append(
        'Return JSON: {"success": bool, "message": str, "changes": [str], "recommendations": [str], '
        '"updatedProgram": {"trainingDaysPerWeek": int, "phases": [...], "nutritionPlan": {...}}}. '
        "Each workout entry must carry exactly one type: cardio, strength, recovery or other."
    )
    return "\n".join(lines)


def request_program_update(
    program: Program,
    request_text: str,
    collaborator: Collaborator,
    edit: SessionEdit | None = None,
    recovery_status: str | None = None,
    now: datetime | None = None,
) -> tuple[Program, ProgramFeedback]:
    """
    Ask the collaborator for an update and reconcile its answer.

    Never raises: a failing collaborator or an unusable answer returns
    the program unchanged with ``success=False`` feedback.
    """
    prompt = build_update_prompt(program, request_text, edit)
    try:
        text = collaborator(prompt)
    except Exception as e:
        logger.error(f"Error requesting program update: {e}")
        return program, ProgramFeedback(success=False, message=CONNECTION_FAILURE_MESSAGE)

    try:
        response = parse_update_response(text)
    except MalformedExternalPlan as e:
        logger.warning(f"Error parsing update response: {e}")
        return program, ProgramFeedback(success=False, message=PROCESSING_FAILURE_MESSAGE)

    return apply_update_response(program, response, request_text, edit, recovery_status, now)


def latest_feedback(program: Program) -> ProgramFeedback | None:
    """Summary of the most recent update, or None if the program was never updated."""
    if not program.update_history:
        return None
    latest = program.update_history[-1]
    return ProgramFeedback(
        success=True,
        message=(
            f"Your program was last updated on {latest.date[:10]} "
            f'based on your request: "{latest.request_text}"'
        ),
        changes=list(latest.changes),
    )
