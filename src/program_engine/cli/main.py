"""
CLI entry point using Typer.

Provides commands for training program management:
- profile / recovery: Maintain the user profile and recovery readings
- goals / mileage: Derive quantitative targets for a goal
- create: Create a program and synthesize its phases
- list / show / today / progress / history: Read a program
- edit / update: Change a program without discarding its structure
- delete: Remove a program
"""

from .app import app

# Importing the command modules registers their commands on ``app``.
from .commands import goals, profile, programs, updates  # noqa: F401

if __name__ == "__main__":
    app()
