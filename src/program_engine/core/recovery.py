"""
Recovery-aware session annotations.

Readiness from the wearable feed is reduced to a low / medium / high
status.  The status never changes a session; it only attaches a short
guidance note in ``adjusted_for_recovery``.
"""

from dataclasses import replace

from .config import DEFAULT_RECOVERY_STATUS, RECOVERY_HIGH_SCORE, RECOVERY_MEDIUM_SCORE
from .models import Phase, RecoveryEntry, WorkoutSession
from .rules import RECOVERY_HIGH_MEDIUM, RECOVERY_LOW_CARDIO_MEDIUM, RECOVERY_LOW_HIGH_INTENSITY


def recovery_status_from_score(score: float) -> str:
    """Map a 0-100 recovery score to low / medium / high."""
    if score >= RECOVERY_HIGH_SCORE:
        return "high"
    if score >= RECOVERY_MEDIUM_SCORE:
        return "medium"
    return "low"


def latest_recovery_status(entries: list[RecoveryEntry] | None) -> str:
    """Status of the newest entry; medium when there is no data."""
    if not entries:
        return DEFAULT_RECOVERY_STATUS
    newest = max(entries, key=lambda e: e.date)
    return recovery_status_from_score(newest.score)


def recovery_adjustment(session: WorkoutSession, status: str | None) -> str | None:
    """
    Guidance note for one session under the given recovery status.

    Returns:
        The note, or None when the session needs no adjustment
    """
    if status == "low":
        if session.intensity == "High":
            return RECOVERY_LOW_HIGH_INTENSITY
        if session.session_type == "cardio" and session.intensity == "Medium":
            return RECOVERY_LOW_CARDIO_MEDIUM
    elif status == "high" and session.intensity == "Medium":
        return RECOVERY_HIGH_MEDIUM
    return None


def annotate_sessions(sessions: list[WorkoutSession], status: str | None) -> list[WorkoutSession]:
    """Copies of ``sessions`` with ``adjusted_for_recovery`` refreshed."""
    return [replace(s, adjusted_for_recovery=recovery_adjustment(s, status)) for s in sessions]


def annotate_phases(phases: list[Phase], status: str | None) -> list[Phase]:
    return [replace(p, weekly_structure=annotate_sessions(p.weekly_structure, status)) for p in phases]
