"""Program commands: create, list, show, today, progress, history, delete."""

import json
import re
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.config import EXPERIENCE_LEVELS, PROGRAM_TYPES, STRENGTH_SPLITS
from ...core.goals import calculate_goal_requirements
from ...core.models import Program, StrengthConfig
from ...core.progress import program_progress, todays_workout
from ...core.reconciler import latest_feedback
from ...core.recovery import latest_recovery_status
from ...core.synthesis import synthesize_program
from ...io.serializers import ValidationError, program_to_dict, update_record_to_dict, validate_date
from .. import views
from ..app import JsonOption, StoreOption, app, get_store

ProgramIdArg = Annotated[str, typer.Argument(help="Program ID (see 'program-engine list')")]

DateOption = Annotated[
    Optional[str],
    typer.Option("--date", "-d", help="Reference date YYYY-MM-DD (default: today)"),
]


def slugify(name: str) -> str:
    """Program id from a display name: lowercase words joined by dashes."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "program"


def _reference_time(date: str | None) -> datetime:
    if date is None:
        return datetime.now()
    validate_date(date)
    return datetime.strptime(date, "%Y-%m-%d")


def _load(store, program_id: str) -> Program:
    try:
        return store.load(program_id)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)


@app.command()
def create(
    name: Annotated[str, typer.Option("--name", "-n", help="Program name")],
    program_type: Annotated[
        str,
        typer.Option("--type", "-t", help=f"Program type: {', '.join(PROGRAM_TYPES)}"),
    ],
    goal_date: Annotated[
        Optional[str],
        typer.Option("--goal-date", "-g", help="Goal date (YYYY-MM-DD)"),
    ] = None,
    target: Annotated[
        str,
        typer.Option("--target", help='Target metric, e.g. "3:30:00" or "15lbs"'),
    ] = "",
    start_date: Annotated[
        Optional[str],
        typer.Option("--start-date", help="Start date (default: today)"),
    ] = None,
    level: Annotated[
        str,
        typer.Option("--level", "-l", help=f"Experience level: {', '.join(EXPERIENCE_LEVELS)}"),
    ] = "intermediate",
    days: Annotated[
        int,
        typer.Option("--days", help="Training days per week"),
    ] = 4,
    strength_days: Annotated[
        int,
        typer.Option("--strength-days", "-s", help="Mandatory strength sessions per week (0 = none)"),
    ] = 0,
    split: Annotated[
        str,
        typer.Option("--split", help=f"Strength split: {', '.join(STRENGTH_SPLITS)}"),
    ] = "fullBody",
    custom_split: Annotated[
        str,
        typer.Option("--custom-split", help='Free-text split for --split custom, e.g. "push pull legs"'),
    ] = "",
    plan_file: Annotated[
        Optional[Path],
        typer.Option("--plan-file", help="File holding the generated plan (JSON or text containing JSON)"),
    ] = None,
    program_id: Annotated[
        Optional[str],
        typer.Option("--id", help="Program ID (default: derived from name)"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing program with the same ID"),
    ] = False,
    store_path: StoreOption = None,
) -> None:
    """
    Create a program and synthesize its phases.

    Without --plan-file, or when the plan cannot be read, the program
    starts with a single foundation phase.  Strength sessions are always
    enforced to exactly --strength-days per phase.
    """
    store = get_store(store_path)
    pid = program_id or slugify(name)

    try:
        if store.exists(pid) and not force:
            views.print_error(f"Program '{pid}' already exists. Use --force to overwrite.")
            raise typer.Exit(1)

        strength = None
        if strength_days > 0:
            strength = StrengthConfig(enabled=True, days_per_week=strength_days, split=split, custom_split=custom_split)

        program = Program(
            program_id=pid,
            name=name,
            program_type=program_type,
            start_date=start_date or datetime.now().strftime("%Y-%m-%d"),
            goal_date=goal_date,
            target_metric=target,
            experience_level=level,
            training_days_per_week=days,
            strength_config=strength,
        )
        plan_text = plan_file.read_text(encoding="utf-8") if plan_file is not None else ""
        readings = store.load_recovery()
        profile = store.load_profile()
    except (ValueError, ValidationError, OSError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    program = synthesize_program(
        program,
        plan_text,
        recovery_status=latest_recovery_status(readings) if readings else None,
        fitness_goal=profile.fitness_goal if profile is not None else None,
    )
    store.save(program)

    views.print_success(f"Created program '{pid}' with {len(program.phases)} phase(s), {program.total_weeks} weeks")
    views.print_program(program)


@app.command("list")
def list_programs(
    store_path: StoreOption = None,
    json_out: JsonOption = False,
) -> None:
    """List stored programs."""
    programs = get_store(store_path).list_programs()

    if json_out:
        print(json.dumps([program_to_dict(p) for p in programs], indent=2))
        return

    views.print_programs(programs)


@app.command()
def show(
    program_id: ProgramIdArg,
    store_path: StoreOption = None,
    json_out: JsonOption = False,
) -> None:
    """Show a program's phases, weekly structure and nutrition plan."""
    program = _load(get_store(store_path), program_id)

    if json_out:
        print(json.dumps(program_to_dict(program), indent=2))
        return

    views.print_program(program)


@app.command()
def today(
    program_id: ProgramIdArg,
    date: DateOption = None,
    store_path: StoreOption = None,
    json_out: JsonOption = False,
) -> None:
    """Show today's scheduled session."""
    store = get_store(store_path)
    program = _load(store, program_id)

    try:
        now = _reference_time(date)
        readings = store.load_recovery()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    workout = todays_workout(program, now, recovery_status=latest_recovery_status(readings) if readings else None)

    if json_out:
        print(json.dumps(asdict(workout) if workout is not None else None, indent=2))
        return

    views.print_todays_workout(workout)


@app.command()
def progress(
    program_id: ProgramIdArg,
    date: DateOption = None,
    store_path: StoreOption = None,
    json_out: JsonOption = False,
) -> None:
    """Show calendar progress through a program."""
    store = get_store(store_path)
    program = _load(store, program_id)

    try:
        now = _reference_time(date)
        profile = store.load_profile()
        weights = store.load_weight_history()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    requirements = None
    if profile is not None and program.goal_date is not None:
        requirements = calculate_goal_requirements(
            program.program_type,
            program.target_metric,
            program.goal_date,
            profile,
            weight_history=weights,
            now=now,
            experience_level=program.experience_level,
        )

    result = program_progress(program, now, requirements)

    if json_out:
        print(json.dumps(asdict(result), indent=2))
        return

    views.console.print(views.format_progress(result))


@app.command()
def history(
    program_id: ProgramIdArg,
    store_path: StoreOption = None,
    json_out: JsonOption = False,
) -> None:
    """Show the update history of a program."""
    program = _load(get_store(store_path), program_id)

    if json_out:
        print(json.dumps([update_record_to_dict(r) for r in program.update_history], indent=2))
        return

    views.print_update_history(program.update_history)
    feedback = latest_feedback(program)
    if feedback is not None:
        views.print_info(feedback.message)


@app.command()
def delete(
    program_id: ProgramIdArg,
    store_path: StoreOption = None,
) -> None:
    """Delete a stored program."""
    try:
        get_store(store_path).delete(program_id)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Deleted program '{program_id}'")
