"""
Strength session templates keyed by training split.

Each template produces one strength WorkoutSession for a given weekday.
A session placed on a day that already holds another session is marked
secondary and gets an " (Evening)" title suffix.
"""

from .config import (
    PULL_DAYS,
    PUSH_DAYS,
    SECONDARY_SESSION_SUFFIX,
    STRENGTH_TEMPLATE_INTENSITY,
    UPPER_BODY_DAYS,
)
from .models import StrengthConfig, WorkoutSession

_BODY_PARTS = ("chest", "back", "legs", "shoulders", "arms")


def _session(day: str, title: str, description: str, notes: str) -> WorkoutSession:
    return WorkoutSession(
        day=day,
        title=title,
        description=description,
        intensity=STRENGTH_TEMPLATE_INTENSITY,
        session_type="strength",
        notes=notes,
    )


def _full_body(day: str, suffix: str) -> WorkoutSession:
    return _session(
        day,
        f"{day} Full Body Strength{suffix}",
        "Full body strength training focusing on compound movements: squats, deadlifts, "
        "bench press, rows, and overhead press",
        "Focus on compound movements with progressive overload",
    )


def _upper_lower(day: str, suffix: str) -> WorkoutSession:
    if day in UPPER_BODY_DAYS:
        return _session(
            day,
            f"{day} Upper Body Strength{suffix}",
            "Upper body strength training: bench press, rows, overhead press, pull-ups, and arm work",
            "Focus on progressive overload and proper form",
        )
    return _session(
        day,
        f"{day} Lower Body Strength{suffix}",
        "Lower body strength training: squats, deadlifts, lunges, hip thrusts, and calf raises",
        "Focus on progressive overload and proper form",
    )


def _push_pull_legs(day: str, suffix: str) -> WorkoutSession:
    notes = "Focus on muscle group specific movements and progressive overload"
    if day in PUSH_DAYS:
        return _session(
            day,
            f"{day} Push Strength{suffix}",
            "Push day: chest, shoulders, triceps - bench press, overhead press, dips, tricep work",
            notes,
        )
    if day in PULL_DAYS:
        return _session(
            day,
            f"{day} Pull Strength{suffix}",
            "Pull day: back, biceps - rows, pull-ups, lat pulldowns, bicep curls",
            notes,
        )
    return _session(
        day,
        f"{day} Leg Strength{suffix}",
        "Leg day: quads, hamstrings, glutes, calves - squats, deadlifts, lunges, calf raises",
        notes,
    )


def _body_part(day: str, suffix: str) -> WorkoutSession:
    return _session(
        day,
        f"{day} Strength Training{suffix}",
        "Targeted muscle group training with high volume and focused exercises for maximum "
        "muscle development",
        "Focus on 1-2 muscle groups with higher volume",
    )


def _custom(day: str, suffix: str, custom_split: str) -> WorkoutSession:
    """
    Interpret a free-text split description with substring heuristics.

    push + (pull | legs) → push/pull/legs by weekday; upper + lower →
    upper/lower by weekday; any named body part → targeted training;
    otherwise a generic custom session.
    """
    text = custom_split.lower()
    notes = f'Following your custom split: "{custom_split}"' if custom_split else None

    if "push" in text and ("pull" in text or "legs" in text):
        if day in PUSH_DAYS:
            title = f"{day} Push Day{suffix}"
            description = f"Push day from your custom split: chest, shoulders, triceps - {custom_split}"
        elif day in PULL_DAYS:
            title = f"{day} Pull Day{suffix}"
            description = f"Pull day from your custom split: back, biceps - {custom_split}"
        else:
            title = f"{day} Leg Day{suffix}"
            description = f"Leg day from your custom split: quads, hamstrings, glutes - {custom_split}"
    elif "upper" in text and "lower" in text:
        if day in UPPER_BODY_DAYS:
            title = f"{day} Upper Body{suffix}"
            description = f"Upper body day from your custom split: {custom_split}"
        else:
            title = f"{day} Lower Body{suffix}"
            description = f"Lower body day from your custom split: {custom_split}"
    elif any(part in text for part in _BODY_PARTS):
        title = f"{day} Targeted Training{suffix}"
        description = f"Targeted muscle group training from your custom split: {custom_split}"
    else:
        title = f"{day} Custom Training{suffix}"
        description = (
            f"Custom strength training following your specified split: {custom_split}"
            if custom_split
            else "Custom strength training following your specified split"
        )

    return WorkoutSession(
        day=day,
        title=title,
        description=description,
        intensity=STRENGTH_TEMPLATE_INTENSITY,
        session_type="strength",
        notes=notes,
    )


def generate_strength_session(
    day: str,
    config: StrengthConfig | None,
    is_secondary: bool = False,
) -> WorkoutSession:
    """
    Build one strength session for ``day`` from the configured split.

    Args:
        day: Weekday name
        config: Strength configuration (None behaves like fullBody)
        is_secondary: Day already holds another session; suffix the title

    Returns:
        A strength-typed WorkoutSession
    """
    suffix = SECONDARY_SESSION_SUFFIX if is_secondary else ""
    split = config.split if config is not None else "fullBody"

    if split == "custom":
        return _custom(day, suffix, config.custom_split.strip())
    if split == "upperLower":
        return _upper_lower(day, suffix)
    if split == "pushPullLegs":
        return _push_pull_legs(day, suffix)
    if split == "bodyPart":
        return _body_part(day, suffix)
    return _full_body(day, suffix)
