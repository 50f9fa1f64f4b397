"""
Session count enforcement.

Guarantees that every phase of a program carries exactly the number of
strength sessions the user asked for.  Enforcement is a pipeline of
three pure passes over one weekly structure:

1. strip base-program strength work (only when a strength block is required)
2. split combined entries into single-discipline sessions
3. drop leftover strength sessions and synthesize the required count
"""

from dataclasses import replace

from loguru import logger

from .classifier import normalize_sessions
from .config import WEEKDAYS
from .errors import InvariantViolation
from .models import Phase, Program, StrengthConfig, WorkoutSession
from .rules import STRIP_DESCRIPTION_KEYWORDS, STRIP_TITLE_KEYWORDS, contains_any, mentions_core_work
from .strength import generate_strength_session


def is_base_strength(session: WorkoutSession) -> bool:
    """
    True if a session looks like strength work from the base program.

    Matches the strength type, a strength keyword in the title or
    description, or a mention of core work (but not of a "score").
    """
    if session.session_type == "strength":
        return True
    if contains_any(session.title, STRIP_TITLE_KEYWORDS):
        return True
    if contains_any(session.description, STRIP_DESCRIPTION_KEYWORDS):
        return True
    return mentions_core_work(session.title) or mentions_core_work(session.description)


def strip_base_strength(sessions: list[WorkoutSession]) -> list[WorkoutSession]:
    """Remove every base-program strength session."""
    kept = []
    for session in sessions:
        if is_base_strength(session):
            logger.debug(f"Removing base program strength workout: {session.title}")
            continue
        kept.append(session)
    return kept


def assign_strength_days(occupied: list[str], required: int) -> list[str]:
    """
    Pick a weekday for each of ``required`` strength sessions.

    Free days come first in week order.  When there are not enough free
    days the remainder is taken from the start of the week among the
    occupied days.
    """
    if required <= 0:
        return []
    taken = set(occupied)
    days = [day for day in WEEKDAYS if day not in taken]
    if len(days) < required:
        days += [day for day in WEEKDAYS if day in taken][: required - len(days)]
    return [days[i % len(days)] for i in range(required)]


def resynthesize_strength(
    sessions: list[WorkoutSession],
    required: int,
    strength_config: StrengthConfig | None = None,
) -> list[WorkoutSession]:
    """
    Replace every strength-typed session with exactly ``required`` new ones.

    Sessions of other types are kept untouched, whatever their text says.

    Raises:
        InvariantViolation: If the result does not hold ``required`` strength sessions
    """
    remaining = [s for s in sessions if s.session_type != "strength"]

    occupied = {s.day for s in remaining}
    result = list(remaining)
    for day in assign_strength_days([s.day for s in remaining], required):
        session = generate_strength_session(day, strength_config, is_secondary=day in occupied)
        occupied.add(day)
        result.append(session)
        logger.debug(f"Added strength workout: {session.title} on {day}")

    found = sum(1 for s in result if s.session_type == "strength")
    if found != required:
        raise InvariantViolation(f"Expected exactly {required} strength sessions, found {found}")
    return result


def enforce_strength_sessions(
    sessions: list[WorkoutSession],
    required: int,
    strength_config: StrengthConfig | None = None,
) -> list[WorkoutSession]:
    """
    Normalize one weekly structure to exactly ``required`` strength sessions.

    With ``required == 0`` the structure is only split into
    single-discipline sessions; existing strength work is kept.

    Args:
        sessions: Weekly structure as proposed (not mutated)
        required: Strength sessions the week must contain
        strength_config: Split used to build the synthesized sessions

    Returns:
        New list of sessions

    Raises:
        InvariantViolation: If the result does not hold ``required`` strength sessions
    """
    if required <= 0:
        return normalize_sessions(sessions)

    remaining = normalize_sessions(strip_base_strength(sessions))
    return resynthesize_strength(remaining, required, strength_config)


def enforce_phase(phase: Phase, strength_config: StrengthConfig | None) -> Phase:
    """Return a copy of ``phase`` with its weekly structure enforced."""
    required = strength_config.required_sessions if strength_config is not None else 0
    structure = enforce_strength_sessions(phase.weekly_structure, required, strength_config)
    if required:
        logger.debug(f"Phase {phase.name!r}: {required} strength sessions enforced")
    return replace(phase, weekly_structure=structure)


def enforce_phases(phases: list[Phase], strength_config: StrengthConfig | None) -> list[Phase]:
    return [enforce_phase(phase, strength_config) for phase in phases]


def enforce_program(program: Program) -> Program:
    """Return a copy of ``program`` whose every phase satisfies its strength config."""
    return replace(program, phases=enforce_phases(program.phases, program.strength_config))
