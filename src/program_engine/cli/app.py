"""Shared Typer app object, shared option types, and store utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..io.program_store import ProgramStore, get_default_store_path

# Shared --store-path option type used across all commands
StoreOption = Annotated[
    Optional[Path],
    typer.Option("--store-path", "-p", help="Store directory (default: ~/.program-engine)"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="program-engine",
    help="Goal-driven training plan synthesis and reconciliation.",
    no_args_is_help=True,
)


def get_store(store_path: Path | None) -> ProgramStore:
    """Get program store from path or the default location."""
    return ProgramStore(store_path if store_path is not None else get_default_store_path())
