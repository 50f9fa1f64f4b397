"""
Keyword rule tables for schedule normalization and recovery guidance.

The tables are intentionally approximate: they stand in for language
understanding with plain substring heuristics.  Values come from
engine.yaml when present, else from the defaults below.
"""

from typing import Any

from .engine.config_loader import load_engine_config

_DEFAULTS: dict[str, dict[str, Any]] = {
    "classifier": {
        "combined_markers": ["and", "followed by", "then", "after", "before"],
        "cardio_keywords": ["run", "cardio", "bike", "swim", "jog"],
        "strength_keywords": ["strength", "weight", "lift", "squat", "deadlift", "bench", "press"],
        "cardio_extract_keywords": [
            "run", "jog", "bike", "cycle", "swim", "cardio", "aerobic", "endurance",
        ],
        "strength_extract_keywords": [
            "strength", "weight", "lift", "press", "squat", "deadlift", "bench", "resistance", "muscle",
        ],
    },
    "enforcer": {
        "strip_title_keywords": ["strength", "weight", "lift", "resistance", "gym"],
        "strip_description_keywords": [
            "strength", "weight training", "resistance", "squat", "deadlift", "bench press",
            "pull-up", "push-up",
        ],
    },
    "recovery": {
        "low_high_intensity": "Reduce intensity by 20-30%. Focus on technique and recovery.",
        "low_cardio_medium": "Reduce duration by 20-30% and keep the effort conversational.",
        "high_medium": "You can push slightly harder today if you feel good.",
    },
}

_CONFIG = load_engine_config()


def _lookup(section: str, key: str) -> Any:
    value = _CONFIG.get(section, {}).get(key)
    if value is None:
        return _DEFAULTS[section][key]
    return value


def _keywords(section: str, key: str) -> tuple[str, ...]:
    return tuple(str(k).lower() for k in _lookup(section, key))


COMBINED_MARKERS = _keywords("classifier", "combined_markers")
CARDIO_KEYWORDS = _keywords("classifier", "cardio_keywords")
STRENGTH_KEYWORDS = _keywords("classifier", "strength_keywords")
CARDIO_EXTRACT_KEYWORDS = _keywords("classifier", "cardio_extract_keywords")
STRENGTH_EXTRACT_KEYWORDS = _keywords("classifier", "strength_extract_keywords")

STRIP_TITLE_KEYWORDS = _keywords("enforcer", "strip_title_keywords")
STRIP_DESCRIPTION_KEYWORDS = _keywords("enforcer", "strip_description_keywords")

RECOVERY_LOW_HIGH_INTENSITY: str = str(_lookup("recovery", "low_high_intensity"))
RECOVERY_LOW_CARDIO_MEDIUM: str = str(_lookup("recovery", "low_cardio_medium"))
RECOVERY_HIGH_MEDIUM: str = str(_lookup("recovery", "high_medium"))


def contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    """True if any keyword occurs as a substring of the lower-cased text."""
    lowered = text.lower()
    return any(k in lowered for k in keywords)


def mentions_core_work(text: str) -> bool:
    """'core' counts as strength work unless the text is about a score."""
    lowered = text.lower()
    return "core" in lowered and "score" not in lowered
