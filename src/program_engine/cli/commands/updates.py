"""Program update commands: edit, update."""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.errors import CollaboratorFailure
from ...core.models import SessionEdit
from ...core.reconciler import edit_session, request_program_update
from ...core.recovery import latest_recovery_status
from ...io.payloads import canonical_day, canonical_intensity
from ...io.serializers import ValidationError
from .. import views
from ..app import JsonOption, StoreOption, app, get_store

ProgramIdArg = Annotated[str, typer.Argument(help="Program ID (see 'program-engine list')")]


def _build_edit(
    day: str,
    title: str,
    new_title: str | None,
    new_description: str | None,
    new_intensity: str | None,
) -> SessionEdit:
    """Session edit from CLI options; omitted fields keep the session's current values."""
    return SessionEdit(
        day=canonical_day(day),
        original_title=title,
        new_title=new_title or title,
        new_description=new_description,
        new_intensity=canonical_intensity(new_intensity) if new_intensity else None,
    )


@app.command()
def edit(
    program_id: ProgramIdArg,
    day: Annotated[str, typer.Option("--day", help="Weekday of the session (Mon, Tuesday, ...)")],
    title: Annotated[str, typer.Option("--title", help="Current session title")],
    new_title: Annotated[Optional[str], typer.Option("--new-title", help="Replacement title")] = None,
    new_description: Annotated[
        Optional[str],
        typer.Option("--new-description", help="Replacement description"),
    ] = None,
    new_intensity: Annotated[
        Optional[str],
        typer.Option("--new-intensity", help="Replacement intensity (Low, Medium, High, ...)"),
    ] = None,
    store_path: StoreOption = None,
) -> None:
    """
    Edit one session by day and title in every phase.

    The change is recorded in the program's update history.
    """
    store = get_store(store_path)

    try:
        session_edit = _build_edit(day, title, new_title, new_description, new_intensity)
        updated = store.update(program_id, lambda p: edit_session(p, session_edit))
    except (FileNotFoundError, ValueError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(updated.update_history[-1].changes[0])


@app.command()
def update(
    program_id: ProgramIdArg,
    request: Annotated[str, typer.Option("--request", "-r", help="What to change, in plain words")],
    response_file: Annotated[
        Path,
        typer.Option(
            "--response-file",
            exists=True,
            dir_okay=False,
            help="File holding the generated update response",
        ),
    ],
    day: Annotated[Optional[str], typer.Option("--day", help="Target a single session: weekday")] = None,
    title: Annotated[Optional[str], typer.Option("--title", help="Target a single session: title")] = None,
    new_title: Annotated[Optional[str], typer.Option("--new-title", help="Replacement title")] = None,
    new_description: Annotated[
        Optional[str],
        typer.Option("--new-description", help="Replacement description"),
    ] = None,
    new_intensity: Annotated[
        Optional[str],
        typer.Option("--new-intensity", help="Replacement intensity"),
    ] = None,
    store_path: StoreOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Reconcile a generated update response into a program.

    The response is merged into the existing phases without discarding
    them.  An unreadable response leaves the program unchanged.
    """
    store = get_store(store_path)

    try:
        session_edit = None
        if day is not None or title is not None:
            if day is None or title is None:
                raise ValueError("--day and --title must be given together")
            session_edit = _build_edit(day, title, new_title, new_description, new_intensity)
        readings = store.load_recovery()
    except (ValueError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    def collaborator(prompt: str) -> str:
        try:
            return response_file.read_text(encoding="utf-8")
        except OSError as e:
            raise CollaboratorFailure(f"Cannot read {response_file}: {e}") from e

    try:
        with store.locked(program_id):
            program = store.load(program_id)
            updated, feedback = request_program_update(
                program,
                request,
                collaborator,
                edit=session_edit,
                recovery_status=latest_recovery_status(readings) if readings else None,
            )
            if updated is not program:
                store.save(updated)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(
            json.dumps(
                {
                    "success": feedback.success,
                    "message": feedback.message,
                    "changes": feedback.changes,
                    "recommendations": feedback.recommendations,
                },
                indent=2,
            )
        )
    else:
        views.print_feedback(feedback)

    if not feedback.success:
        raise typer.Exit(1)
