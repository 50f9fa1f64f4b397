"""Profile commands: profile, recovery."""

import json
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.models import RecoveryEntry, UserProfile, WeightEntry
from ...core.recovery import recovery_status_from_score
from ...io.serializers import ValidationError, user_profile_to_dict, validate_date
from .. import views
from ..app import JsonOption, StoreOption, app, get_store


@app.command()
def profile(
    weight_kg: Annotated[
        Optional[float],
        typer.Option("--weight-kg", "-w", help="Current bodyweight in kg (also logged to weight history)"),
    ] = None,
    height_cm: Annotated[
        Optional[float],
        typer.Option("--height-cm", help="Height in centimeters"),
    ] = None,
    age: Annotated[Optional[int], typer.Option("--age", help="Age in years")] = None,
    gender: Annotated[Optional[str], typer.Option("--gender", help="Gender")] = None,
    body_fat: Annotated[Optional[float], typer.Option("--body-fat", help="Body fat percentage")] = None,
    activity: Annotated[
        Optional[str],
        typer.Option("--activity", help="Activity level, e.g. moderatelyActive"),
    ] = None,
    fitness_goal: Annotated[
        Optional[str],
        typer.Option("--goal", help="Fitness goal: loseWeight, gainMuscle, improvePerformance, ..."),
    ] = None,
    level: Annotated[Optional[str], typer.Option("--level", "-l", help="Experience level")] = None,
    store_path: StoreOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show or update the user profile.

    Without options the current profile is shown.  Any option updates
    the stored profile; weight and height are required the first time.
    """
    store = get_store(store_path)

    try:
        current = store.load_profile()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    updates = (weight_kg, height_cm, age, gender, body_fat, activity, fitness_goal, level)
    if all(v is None for v in updates):
        if current is None:
            views.print_warning("No profile set. Use --weight-kg and --height-cm to create one.")
            raise typer.Exit(1)
        if json_out:
            print(json.dumps(user_profile_to_dict(current), indent=2))
        else:
            for key, value in user_profile_to_dict(current).items():
                views.console.print(f"{key.replace('_', ' ')}: [bold]{value}[/bold]")
        return

    if current is None and (weight_kg is None or height_cm is None):
        views.print_error("--weight-kg and --height-cm are required to create a profile")
        raise typer.Exit(1)

    try:
        base = current or UserProfile(age=30, gender="", weight_kg=weight_kg, height_cm=height_cm)
        updated = UserProfile(
            age=age if age is not None else base.age,
            gender=gender if gender is not None else base.gender,
            weight_kg=weight_kg if weight_kg is not None else base.weight_kg,
            height_cm=height_cm if height_cm is not None else base.height_cm,
            body_fat=body_fat if body_fat is not None else base.body_fat,
            activity_level=activity if activity is not None else base.activity_level,
            fitness_goal=fitness_goal if fitness_goal is not None else base.fitness_goal,
            experience_level=level if level is not None else base.experience_level,
        )
        store.save_profile(updated)
        if weight_kg is not None:
            store.append_weight(WeightEntry(date=datetime.now().strftime("%Y-%m-%d"), weight_kg=weight_kg))
    except (ValueError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success("Profile saved")


@app.command()
def recovery(
    score: Annotated[float, typer.Option("--score", "-s", help="Recovery score 0-100")],
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Reading date YYYY-MM-DD (default: today)"),
    ] = None,
    hrv_ms: Annotated[Optional[float], typer.Option("--hrv", help="HRV in milliseconds")] = None,
    store_path: StoreOption = None,
) -> None:
    """
    Record a daily recovery reading.

    The most recent reading drives recovery notes on new and updated plans.
    """
    store = get_store(store_path)

    try:
        reading_date = validate_date(date) if date is not None else datetime.now().strftime("%Y-%m-%d")
        store.append_recovery(RecoveryEntry(date=reading_date, score=score, hrv_ms=hrv_ms))
    except (ValueError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Recorded recovery {score:.0f} on {reading_date}: {recovery_status_from_score(score)}")
