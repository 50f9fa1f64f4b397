"""
JSON file storage for programs and the user's profile data.

Each program lives in its own ``<program_id>.json`` document under the
store's ``programs/`` directory.  A separate profile.json holds the user
profile, weight history and recovery readings consumed by the engine.
"""

import json
import os
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from loguru import logger

from ..core.engine.config_loader import engine_home
from ..core.models import Program, RecoveryEntry, UserProfile, WeightEntry
from .serializers import (
    ValidationError,
    dict_to_recovery_entry,
    dict_to_user_profile,
    dict_to_weight_entry,
    json_to_program,
    program_to_json,
    user_profile_to_dict,
)


class ProgramStore:
    """
    Manages programs stored as one JSON document each.

    Read-modify-write of a single program goes through ``update``, which
    holds a per-program lock so concurrent in-process updates of the
    same program are serialized.  Different programs never contend.
    """

    def __init__(self, root: str | Path):
        """
        Initialize the store.

        Args:
            root: Directory holding ``programs/`` and ``profile.json``
        """
        self.root = Path(root)
        self.programs_dir = self.root / "programs"
        self.profile_path = self.root / "profile.json"
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def init(self) -> None:
        """Create the store directories if they don't exist."""
        self.programs_dir.mkdir(parents=True, exist_ok=True)

    def _program_path(self, program_id: str) -> Path:
        if not program_id or "/" in program_id or program_id.startswith("."):
            raise ValidationError(f"Invalid program id: {program_id!r}")
        return self.programs_dir / f"{program_id}.json"

    def _lock_for(self, program_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(program_id, threading.Lock())

    def exists(self, program_id: str) -> bool:
        return self._program_path(program_id).exists()

    def load(self, program_id: str) -> Program:
        """
        Load one program.

        Raises:
            FileNotFoundError: If the program does not exist
            ValidationError: If the stored document is invalid
        """
        path = self._program_path(program_id)
        if not path.exists():
            raise FileNotFoundError(f"Program not found: {program_id}")
        try:
            return json_to_program(path.read_text(encoding="utf-8"))
        except ValidationError as e:
            raise ValidationError(f"Error parsing {path}: {e}") from e

    def save(self, program: Program) -> None:
        """Write a program, replacing any previous version atomically."""
        self.init()
        path = self._program_path(program.program_id)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(program_to_json(program), encoding="utf-8")
        os.replace(tmp, path)

    def list_ids(self) -> list[str]:
        if not self.programs_dir.exists():
            return []
        return sorted(p.stem for p in self.programs_dir.glob("*.json"))

    def list_programs(self) -> list[Program]:
        """All stored programs; unreadable documents are skipped with a warning."""
        programs = []
        for program_id in self.list_ids():
            try:
                programs.append(self.load(program_id))
            except ValidationError as e:
                logger.warning(f"Skipping program {program_id}: {e}")
        return programs

    @contextmanager
    def locked(self, program_id: str) -> Iterator[None]:
        """Hold the program's lock for a custom read-modify-write."""
        with self._lock_for(program_id):
            yield

    def update(self, program_id: str, fn: Callable[[Program], Program]) -> Program:
        """
        Load, transform and save a program under its lock.

        Args:
            program_id: Program to update
            fn: Pure transform from the stored snapshot to the new one

        Returns:
            The saved program
        """
        with self.locked(program_id):
            updated = fn(self.load(program_id))
            self.save(updated)
        return updated

    def delete(self, program_id: str) -> None:
        path = self._program_path(program_id)
        if not path.exists():
            raise FileNotFoundError(f"Program not found: {program_id}")
        path.unlink()

    # -------------------------------------------------------------------------
    # Profile data
    # -------------------------------------------------------------------------

    def _read_profile_data(self) -> dict[str, Any]:
        if not self.profile_path.exists():
            return {}
        try:
            with open(self.profile_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {self.profile_path}: {e}") from e
        return data if isinstance(data, dict) else {}

    def _write_profile_data(self, data: dict[str, Any]) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        with open(self.profile_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def load_profile(self) -> UserProfile | None:
        """
        Load the user profile.

        Returns:
            UserProfile if set and valid, None otherwise
        """
        data = self._read_profile_data().get("profile")
        if not data:
            return None
        try:
            return dict_to_user_profile(data)
        except (ValidationError, KeyError, ValueError):
            return None

    def save_profile(self, profile: UserProfile) -> None:
        data = self._read_profile_data()
        data["profile"] = user_profile_to_dict(profile)
        self._write_profile_data(data)

    def load_weight_history(self) -> list[WeightEntry]:
        """Weight entries, newest first."""
        entries = [dict_to_weight_entry(e) for e in self._read_profile_data().get("weights", [])]
        entries.sort(key=lambda e: e.date, reverse=True)
        return entries

    def append_weight(self, entry: WeightEntry) -> None:
        """Record a weight; an entry for the same date is replaced."""
        data = self._read_profile_data()
        weights = [w for w in data.get("weights", []) if w.get("date") != entry.date]
        weights.append({"date": entry.date, "weight_kg": entry.weight_kg})
        data["weights"] = weights
        self._write_profile_data(data)

    def load_recovery(self) -> list[RecoveryEntry]:
        """Recovery readings, newest first."""
        entries = [dict_to_recovery_entry(e) for e in self._read_profile_data().get("recovery", [])]
        entries.sort(key=lambda e: e.date, reverse=True)
        return entries

    def append_recovery(self, entry: RecoveryEntry) -> None:
        """Record a recovery reading; an entry for the same date is replaced."""
        data = self._read_profile_data()
        readings = [r for r in data.get("recovery", []) if r.get("date") != entry.date]
        reading: dict[str, Any] = {"date": entry.date, "score": entry.score}
        if entry.hrv_ms is not None:
            reading["hrv_ms"] = entry.hrv_ms
        readings.append(reading)
        data["recovery"] = readings
        self._write_profile_data(data)


def get_default_store_path() -> Path:
    """
    Default store location.

    ``PROGRAM_ENGINE_HOME`` overrides ``~/.program-engine``.
    """
    return engine_home()
