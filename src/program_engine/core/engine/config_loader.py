"""
Rule-table config loader.

The keyword tables and guidance strings used by schedule normalization
live in engine.yaml next to the package.  A user file at
``<engine home>/engine.yaml`` may override any key; the engine home is
``$PROGRAM_ENGINE_HOME`` or ``~/.program-engine`` and is shared with the
program store.

Usage:
    from program_engine.core.engine.config_loader import load_engine_config
    cfg = load_engine_config()
    cardio = cfg["classifier"]["cardio_keywords"]

Unreadable files are logged and skipped; callers fall back to the
defaults in core/rules.py for anything missing.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

ENGINE_SECTIONS = ("classifier", "enforcer", "recovery")

# Sections whose values are keyword lists; the rest hold guidance strings
KEYWORD_SECTIONS = ("classifier", "enforcer")

BUNDLED_YAML = Path(__file__).resolve().parents[2] / "engine.yaml"


def engine_home() -> Path:
    """Directory holding user data and overrides (``PROGRAM_ENGINE_HOME`` wins)."""
    override = os.environ.get("PROGRAM_ENGINE_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".program-engine"


def _read_sections(path: Path) -> dict[str, dict[str, Any]]:
    """
    Parse one YAML file into known sections.

    Top-level keys other than the engine sections, sections that are not
    mappings, and values of the wrong shape are dropped with a warning.
    Keyword sections take non-empty lists of strings; other sections
    take non-empty strings.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        logger.warning(f"Ignoring unreadable config file {path}: {exc}")
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring {path}: top level must be a mapping")
        return {}

    sections: dict[str, dict[str, Any]] = {}
    for name, body in data.items():
        if name not in ENGINE_SECTIONS:
            logger.warning(f"{path}: unknown section {name!r} ignored")
        elif not isinstance(body, dict):
            logger.warning(f"{path}: section {name!r} is not a mapping, ignored")
        else:
            sections[name] = {key: value for key, value in body.items() if _valid_value(path, name, key, value)}
    return sections


def _valid_value(path: Path, section: str, key: str, value: Any) -> bool:
    if section in KEYWORD_SECTIONS:
        if isinstance(value, list) and value and all(isinstance(v, str) and v.strip() for v in value):
            return True
        logger.warning(f"{path}: {section}.{key} must be a non-empty list of strings, ignored")
        return False
    if isinstance(value, str) and value.strip():
        return True
    logger.warning(f"{path}: {section}.{key} must be a non-empty string, ignored")
    return False


def load_engine_config(user_path: Path | None = None) -> dict[str, dict[str, Any]]:
    """
    Bundled rule tables with user overrides applied key by key.

    Args:
        user_path: Override file (default: ``engine_home() / "engine.yaml"``)

    Returns:
        Mapping of section name to its keys; every engine section is present.
    """
    config: dict[str, dict[str, Any]] = {name: {} for name in ENGINE_SECTIONS}

    if BUNDLED_YAML.exists():
        for name, body in _read_sections(BUNDLED_YAML).items():
            config[name].update(body)

    user_path = user_path or engine_home() / "engine.yaml"
    if user_path.exists():
        logger.debug(f"Applying engine overrides from {user_path}")
        for name, body in _read_sections(user_path).items():
            config[name].update(body)

    return config
