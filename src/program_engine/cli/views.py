"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of programs, goals and mileage.
"""

from rich.console import Console
from rich.table import Table

from ..core.models import (
    GoalRequirements,
    MileageWeek,
    Phase,
    Program,
    ProgramFeedback,
    ProgramProgress,
    TodaysWorkout,
    UpdateRecord,
)

console = Console()

_TYPE_STYLES = {"cardio": "cyan", "strength": "magenta", "recovery": "green", "other": "white"}


def format_requirements(req: GoalRequirements) -> Table:
    """Two-column table of every populated requirement field."""
    table = Table(title="Goal Requirements")
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")

    for key, value in req.to_dict().items():
        if isinstance(value, bool):
            shown = "yes" if value else "no"
        else:
            shown = str(value)
        table.add_row(key.replace("_", " "), shown)

    return table


def format_mileage_table(weeks: list[MileageWeek]) -> Table:
    """
    Create a Rich table of weekly mileage targets.

    Args:
        weeks: Mileage weeks in order

    Returns:
        Rich Table object
    """
    table = Table(title="Mileage Progression")

    table.add_column("Wk", justify="right", style="dim", width=3)
    table.add_column("Phase", style="magenta")
    table.add_column("Total", justify="right", style="bold")
    table.add_column("Long", justify="right")
    table.add_column("Easy", justify="right")
    table.add_column("Tempo", justify="right")
    table.add_column("Interval", justify="right")
    table.add_column("Easy pace", style="green")
    table.add_column("Long pace", style="green")

    for w in weeks:
        table.add_row(
            str(w.week),
            w.phase,
            str(w.weekly_mileage),
            str(w.long_run_miles),
            str(w.easy_run_miles),
            str(w.tempo_miles),
            str(w.interval_miles),
            w.pace_guidance.easy,
            w.pace_guidance.long,
        )

    return table


def format_phase_table(phase: Phase, index: int) -> Table:
    table = Table(title=f"Phase {index}: {phase.name} ({phase.duration_weeks} weeks)", caption=phase.focus)

    table.add_column("Day", style="cyan")
    table.add_column("Type")
    table.add_column("Title", style="bold")
    table.add_column("Intensity")
    table.add_column("Description")

    for s in phase.weekly_structure:
        style = _TYPE_STYLES.get(s.session_type, "white")
        description = s.description
        if s.adjusted_for_recovery:
            description += f"\n[yellow]{s.adjusted_for_recovery}[/yellow]"
        table.add_row(s.day, f"[{style}]{s.session_type}[/{style}]", s.title, s.intensity, description)

    return table


def print_program(program: Program) -> None:
    """Print a program header, its phases and nutrition plan."""
    console.print()
    console.print(f"[bold cyan]{program.name}[/bold cyan]  [dim]({program.program_id})[/dim]")
    console.print(
        f"Type: {program.program_type}  Goal: {program.target_metric or '-'}"
        f"  by {program.goal_date or '-'}  Level: {program.experience_level}"
        f"  Days/week: {program.training_days_per_week}"
    )
    cfg = program.strength_config
    if cfg is not None and cfg.enabled:
        split = f"{cfg.split} ({cfg.custom_split})" if cfg.split == "custom" and cfg.custom_split else cfg.split
        console.print(f"Strength: {cfg.days_per_week}x/week, {split}")
    if program.overview:
        console.print(f"[dim]{program.overview}[/dim]")

    if not program.phases:
        console.print("[yellow]No phases yet.[/yellow]")
    for i, phase in enumerate(program.phases, 1):
        console.print()
        console.print(format_phase_table(phase, i))

    if program.nutrition_plan is not None:
        n = program.nutrition_plan
        console.print()
        console.print(
            f"[bold]Nutrition:[/bold] {n.calories:.0f} kcal, protein {n.protein:.0f} g, "
            f"carbs {n.carbs:.0f} g, fat {n.fat:.0f} g"
        )
        for rec in n.recommendations:
            console.print(f"  - {rec}")
    console.print()


def print_programs(programs: list[Program]) -> None:
    if not programs:
        console.print("[yellow]No programs yet.[/yellow]")
        return

    table = Table(title="Programs")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Type", style="magenta")
    table.add_column("Goal")
    table.add_column("Weeks", justify="right")
    table.add_column("Active")
    for p in programs:
        table.add_row(
            p.program_id, p.name, p.program_type, p.target_metric or "-",
            str(p.total_weeks), "yes" if p.active else "no",
        )
    console.print(table)


def print_todays_workout(workout: TodaysWorkout | None) -> None:
    if workout is None:
        console.print("[yellow]Nothing scheduled today.[/yellow]")
        return
    s = workout.session
    console.print()
    console.print(f"[bold cyan]{s.title}[/bold cyan]  [dim]{workout.program_name}[/dim]")
    console.print(f"{s.day} | {s.session_type} | {s.intensity} | {workout.duration}")
    console.print(s.description)
    if workout.recovery_adjustment:
        console.print(f"[yellow]Recovery: {workout.recovery_adjustment}[/yellow]")
    console.print()


def format_progress(progress: ProgramProgress) -> str:
    """Format program progress as a text block."""
    lines = [
        "Program progress",
        f"- Week: {progress.current_week} of {progress.total_weeks} ({progress.progress_percentage:.1f}%)",
        f"- Workouts: {progress.completed_workouts} of {progress.total_workouts}",
    ]
    if progress.days_until_goal is not None:
        lines.append(f"- Days until goal: {progress.days_until_goal}")
    lines.append(f"- Status: {progress.progress_status}")
    lines.append(f"- Timeline: {progress.effectiveness}")
    return "\n".join(lines)


def print_update_history(records: list[UpdateRecord]) -> None:
    if not records:
        console.print("[yellow]No updates recorded yet.[/yellow]")
        return

    table = Table(title="Update History")
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Request")
    table.add_column("Changes")
    for i, r in enumerate(records, 1):
        table.add_row(str(i), r.date, r.request_text, "\n".join(r.changes))
    console.print(table)


def print_feedback(feedback: ProgramFeedback) -> None:
    if feedback.success:
        print_success(feedback.message)
    else:
        print_error(feedback.message)
    for change in feedback.changes:
        console.print(f"  * {change}")
    for rec in feedback.recommendations:
        console.print(f"  [dim]> {rec}[/dim]")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")
