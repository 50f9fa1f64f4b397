"""Goal analysis commands: goals, mileage."""

import json
from dataclasses import asdict
from typing import Annotated, Optional

import typer

from ...core.config import ENDURANCE_PROGRAM_TYPES, PROGRAM_TYPES
from ...core.goals import calculate_goal_requirements
from ...core.mileage import calculate_mileage_week, plan_mileage
from ...io.serializers import ValidationError, validate_choice, validate_date
from .. import views
from ..app import JsonOption, StoreOption, app, get_store


@app.command()
def goals(
    program_type: Annotated[
        str,
        typer.Option("--type", "-t", help=f"Program type: {', '.join(PROGRAM_TYPES)}"),
    ],
    goal_date: Annotated[
        str,
        typer.Option("--goal-date", "-g", help="Goal date (YYYY-MM-DD)"),
    ],
    target: Annotated[
        Optional[str],
        typer.Option("--target", help='Target metric, e.g. "3:30:00", "15lbs", "1000lb total"'),
    ] = None,
    level: Annotated[
        Optional[str],
        typer.Option("--level", "-l", help="Experience level (defaults to the profile's)"),
    ] = None,
    store_path: StoreOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Calculate quantitative requirements for a goal.

    Uses the stored profile (bodyweight, experience) and weight history.
    """
    store = get_store(store_path)

    try:
        validate_choice(program_type, PROGRAM_TYPES, "program type")
        validate_date(goal_date)
        profile = store.load_profile()
        weights = store.load_weight_history()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if profile is None:
        views.print_error("No profile found. Run 'program-engine profile' first.")
        raise typer.Exit(1)

    req = calculate_goal_requirements(
        program_type,
        target,
        goal_date,
        profile,
        weight_history=weights,
        experience_level=level,
    )

    if json_out:
        print(json.dumps(req.to_dict(), indent=2))
        return

    views.console.print(views.format_requirements(req))
    if not req.feasible:
        views.print_warning("This goal is aggressive for the time available.")


@app.command()
def mileage(
    program_type: Annotated[
        str,
        typer.Option("--type", "-t", help="marathon or half-marathon"),
    ] = "marathon",
    level: Annotated[
        str,
        typer.Option("--level", "-l", help="Experience level"),
    ] = "intermediate",
    goal_time: Annotated[
        Optional[str],
        typer.Option("--goal-time", help="Race goal time (H:MM:SS)"),
    ] = None,
    weeks: Annotated[
        Optional[int],
        typer.Option("--weeks", "-w", help="Weeks until race (block is capped at 16 / 12)"),
    ] = None,
    week: Annotated[
        Optional[int],
        typer.Option("--week", help="Show a single week only"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the weekly mileage progression for an endurance block.
    """
    if program_type not in ENDURANCE_PROGRAM_TYPES:
        views.print_error(f"Mileage progression only applies to {', '.join(ENDURANCE_PROGRAM_TYPES)}")
        raise typer.Exit(1)

    try:
        if week is not None:
            rows = [calculate_mileage_week(week, program_type, level, goal_time, weeks)]
        else:
            rows = plan_mileage(program_type, level, goal_time, weeks)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps([asdict(w) for w in rows], indent=2))
        return

    views.console.print(views.format_mileage_table(rows))
