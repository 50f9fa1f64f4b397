"""
Workout type classification and splitting.

Generated schedules sometimes bundle two disciplines into one entry
("Easy run followed by upper body strength").  Every WorkoutSession must
carry exactly one discipline, so such entries are detected with keyword
heuristics and split into one session per discipline on the same day.
"""

import re
from dataclasses import replace

from loguru import logger

from .models import WorkoutSession
from .rules import (
    CARDIO_EXTRACT_KEYWORDS,
    CARDIO_KEYWORDS,
    COMBINED_MARKERS,
    STRENGTH_EXTRACT_KEYWORDS,
    STRENGTH_KEYWORDS,
    contains_any,
)

CARDIO_FALLBACK_DESCRIPTION = "Cardio training session"
STRENGTH_FALLBACK_DESCRIPTION = "Strength training session"

# "and then" must come before "then" so the leftover "and" is not kept
_SEGMENT_SPLIT_RE = re.compile(r"\+|\bfollowed by\b|\band then\b|\bthen\b|,", re.IGNORECASE)


def _marker_pattern(markers: tuple[str, ...]) -> re.Pattern[str]:
    words = "|".join(re.escape(m) for m in markers if m)
    if not words:
        return re.compile(r"\+")
    return re.compile(rf"\+|\b(?:{words})\b", re.IGNORECASE)


_COMBINED_RE = _marker_pattern(COMBINED_MARKERS)


def _session_text(session: WorkoutSession) -> str:
    return f"{session.title} {session.description}"


def has_cardio(session: WorkoutSession) -> bool:
    """True if the title or description mentions a cardio activity."""
    return contains_any(_session_text(session), CARDIO_KEYWORDS)


def has_strength(session: WorkoutSession) -> bool:
    """True if the title or description mentions strength work."""
    return contains_any(_session_text(session), STRENGTH_KEYWORDS)


def is_combined(session: WorkoutSession) -> bool:
    """
    Detect an entry that bundles several activities.

    Combined = a "+" or a joining word ("and", "followed by", "then",
    "after", "before") in title or description, or a description that
    mentions both a cardio and a strength keyword.
    """
    if _COMBINED_RE.search(session.title) or _COMBINED_RE.search(session.description):
        return True
    return contains_any(session.description, CARDIO_KEYWORDS) and contains_any(
        session.description, STRENGTH_KEYWORDS
    )


def extract_description(description: str, keywords: tuple[str, ...], fallback: str) -> str:
    """
    Pick the part of a combined description that belongs to one discipline.

    Splits on "+", "followed by", "and then", "then" and commas, returns
    the first segment containing one of ``keywords`` (first letter
    capitalized), else ``fallback``.
    """
    if not description:
        return fallback
    for part in _SEGMENT_SPLIT_RE.split(description):
        segment = part.strip()
        if segment and contains_any(segment, keywords):
            return segment[0].upper() + segment[1:]
    return fallback


def split_session(session: WorkoutSession) -> list[WorkoutSession]:
    """
    Split one schedule entry into single-discipline sessions.

    Entries that are not combined, or combined entries in which neither
    a cardio nor a strength activity can be recognised, pass through
    unchanged.

    Returns:
        One or two sessions sharing ``session.day``
    """
    if not is_combined(session):
        return [session]

    cardio = has_cardio(session)
    strength = has_strength(session)

    if not cardio and not strength:
        logger.warning(f"Combined workout detected but could not separate: {session.title!r}")
        return [session]

    result: list[WorkoutSession] = []
    if cardio:
        result.append(
            replace(
                session,
                title=f"{session.day} Cardio Session",
                description=extract_description(
                    session.description, CARDIO_EXTRACT_KEYWORDS, CARDIO_FALLBACK_DESCRIPTION
                ),
                session_type="cardio",
            )
        )
    if strength:
        result.append(
            replace(
                session,
                title=f"{session.day} Strength Training",
                description=extract_description(
                    session.description, STRENGTH_EXTRACT_KEYWORDS, STRENGTH_FALLBACK_DESCRIPTION
                ),
                session_type="strength",
            )
        )
    return result


def normalize_sessions(sessions: list[WorkoutSession]) -> list[WorkoutSession]:
    """Split every combined entry; order of the original entries is kept."""
    result: list[WorkoutSession] = []
    for session in sessions:
        result.extend(split_session(session))
    return result
