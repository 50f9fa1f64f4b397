"""
Minimal smoke tests for the program-engine CLI.

Tests basic functionality:
- App runs without errors
- Profile and recovery readings are stored
- Goal requirements and mileage are shown
- Programs are created, read, edited and updated
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from program_engine.cli.main import app


runner = CliRunner()

PLAN = {
    "programOverview": "Six weeks of base and build",
    "phases": [
        {
            "name": "Base",
            "duration": "2 weeks",
            "focus": "Aerobic base",
            "weeklyStructure": [
                {"day": "Monday", "title": "Easy Run", "description": "40 minute easy run", "intensity": "Low", "type": "cardio"},
                {"day": "Wednesday", "title": "Tempo Run", "description": "20 minutes at threshold", "intensity": "High", "type": "cardio"},
                {"day": "Saturday", "title": "Long Run", "description": "90 minutes steady", "intensity": "Medium", "type": "cardio"},
            ],
        },
        {
            "name": "Build",
            "duration": "4 weeks",
            "focus": "Volume",
            "weeklyStructure": [
                {"day": "Mon", "title": "Intervals", "description": "6 x 800m", "intensity": "High", "type": "cardio"},
                {"day": "Thu", "title": "Easy Run", "description": "45 minute easy run", "intensity": "Low", "type": "cardio"},
                {"day": "Sun", "title": "Long Run", "description": "2 hours steady", "intensity": "Medium", "type": "cardio"},
            ],
        },
    ],
}


@pytest.fixture
def temp_store():
    """Create a temporary store directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _create(store: Path, *extra: str, name: str = "Spring Marathon"):
    plan_file = store / "plan.json"
    plan_file.write_text("Here is the plan:\n" + json.dumps(PLAN), encoding="utf-8")
    return runner.invoke(app, [
        "create",
        "--name", name,
        "--type", "marathon",
        "--start-date", "2026-01-05",
        "--goal-date", "2026-05-03",
        "--target", "3:30:00",
        "--strength-days", "2",
        "--plan-file", str(plan_file),
        "--store-path", str(store),
        *extra,
    ])


def _show(store: Path, program_id: str = "spring-marathon") -> dict:
    result = runner.invoke(app, ["show", program_id, "--store-path", str(store), "--json"])
    assert result.exit_code == 0
    return json.loads(result.stdout)


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "plan" in result.output.lower()

    def test_profile_roundtrip(self, temp_store):
        result = runner.invoke(app, [
            "profile",
            "--weight-kg", "80",
            "--height-cm", "180",
            "--goal", "loseWeight",
            "--store-path", str(temp_store),
        ])
        assert result.exit_code == 0
        assert (temp_store / "profile.json").exists()

        result = runner.invoke(app, ["profile", "--store-path", str(temp_store), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["weight_kg"] == 80.0
        assert data["fitness_goal"] == "loseWeight"

    def test_profile_needs_weight_and_height_first(self, temp_store):
        result = runner.invoke(app, ["profile", "--age", "40", "--store-path", str(temp_store)])
        assert result.exit_code == 1

    def test_goals_json(self, temp_store):
        runner.invoke(app, ["profile", "--weight-kg", "80", "--height-cm", "180", "--store-path", str(temp_store)])

        result = runner.invoke(app, [
            "goals",
            "--type", "weight_loss",
            "--goal-date", "2099-01-01",
            "--target", "15lbs",
            "--store-path", str(temp_store),
            "--json",
        ])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["target_weight_loss_kg"] == pytest.approx(6.8)
        assert data["target_weight_kg"] == pytest.approx(73.2)
        assert data["urgency"] == "low"

    def test_goals_without_profile_fails(self, temp_store):
        result = runner.invoke(app, [
            "goals", "--type", "marathon", "--goal-date", "2099-01-01", "--store-path", str(temp_store),
        ])
        assert result.exit_code == 1

    def test_mileage_json(self):
        result = runner.invoke(app, ["mileage", "--type", "marathon", "--goal-time", "3:30:00", "--json"])

        assert result.exit_code == 0
        weeks = json.loads(result.stdout)
        assert len(weeks) == 16
        assert weeks[0]["weekly_mileage"] == 35
        assert weeks[-1]["phase"] == "taper"
        assert weeks[0]["pace_guidance"]["easy"] == "9:31/mile"

    def test_mileage_table(self):
        result = runner.invoke(app, ["mileage", "--type", "half-marathon", "--week", "1"])
        assert result.exit_code == 0
        assert "Mileage" in result.output

    def test_mileage_rejects_strength_program(self):
        result = runner.invoke(app, ["mileage", "--type", "powerlifting"])
        assert result.exit_code == 1

    def test_create_enforces_strength_days(self, temp_store):
        result = _create(temp_store)
        assert result.exit_code == 0
        assert (temp_store / "programs" / "spring-marathon.json").exists()

        data = _show(temp_store)
        assert [p["name"] for p in data["phases"]] == ["Base", "Build"]
        for phase in data["phases"]:
            assert sum(1 for s in phase["weekly_structure"] if s["session_type"] == "strength") == 2
        assert data["nutrition_plan"]["calories"] == 2000

    def test_create_duplicate_needs_force(self, temp_store):
        assert _create(temp_store).exit_code == 0
        assert _create(temp_store).exit_code == 1
        assert _create(temp_store, "--force").exit_code == 0

    def test_create_without_plan_uses_foundation_phase(self, temp_store):
        result = runner.invoke(app, [
            "create", "--name", "Cut", "--type", "weight_loss", "--store-path", str(temp_store),
        ])
        assert result.exit_code == 0

        data = _show(temp_store, "cut")
        assert [p["name"] for p in data["phases"]] == ["Foundation Phase"]

    def test_create_rejects_bad_type(self, temp_store):
        result = runner.invoke(app, ["create", "--name", "X", "--type", "yoga", "--store-path", str(temp_store)])
        assert result.exit_code == 1

    def test_list_and_show(self, temp_store):
        _create(temp_store)

        result = runner.invoke(app, ["list", "--store-path", str(temp_store), "--json"])
        assert result.exit_code == 0
        assert [p["program_id"] for p in json.loads(result.stdout)] == ["spring-marathon"]

        result = runner.invoke(app, ["show", "spring-marathon", "--store-path", str(temp_store)])
        assert result.exit_code == 0
        assert "Spring Marathon" in result.output

    def test_show_missing_program(self, temp_store):
        result = runner.invoke(app, ["show", "nope", "--store-path", str(temp_store)])
        assert result.exit_code == 1

    def test_today_and_progress(self, temp_store):
        _create(temp_store)
        runner.invoke(app, ["recovery", "--score", "20", "--date", "2026-01-19", "--store-path", str(temp_store)])

        result = runner.invoke(app, [
            "today", "spring-marathon", "--date", "2026-01-19", "--store-path", str(temp_store), "--json",
        ])
        assert result.exit_code == 0
        workout = json.loads(result.stdout)
        assert workout["session"]["title"] == "Intervals"
        assert workout["recovery_adjustment"].startswith("Reduce intensity")

        result = runner.invoke(app, [
            "progress", "spring-marathon", "--date", "2026-01-19", "--store-path", str(temp_store), "--json",
        ])
        assert result.exit_code == 0
        progress = json.loads(result.stdout)
        assert progress["current_week"] == 3
        assert progress["total_weeks"] == 6
        assert progress["progress_percentage"] == 50.0

    def test_edit_records_history(self, temp_store):
        _create(temp_store)

        result = runner.invoke(app, [
            "edit", "spring-marathon",
            "--day", "sat",
            "--title", "Long Run",
            "--new-title", "Long Run with Strides",
            "--new-description", "90 minutes with 6 strides",
            "--store-path", str(temp_store),
        ])
        assert result.exit_code == 0

        data = _show(temp_store)
        saturday = [s for s in data["phases"][0]["weekly_structure"] if s["day"] == "Saturday"]
        assert saturday[0]["title"] == "Long Run with Strides"

        result = runner.invoke(app, ["history", "spring-marathon", "--store-path", str(temp_store), "--json"])
        records = json.loads(result.stdout)
        assert len(records) == 1
        assert records[0]["changes"] == ["Updated Saturday workout from Long Run to Long Run with Strides"]

    def test_title_only_edit_keeps_other_fields(self, temp_store):
        _create(temp_store)

        result = runner.invoke(app, [
            "edit", "spring-marathon",
            "--day", "Monday",
            "--title", "Easy Run",
            "--new-title", "Recovery Jog",
            "--store-path", str(temp_store),
        ])
        assert result.exit_code == 0

        monday = _show(temp_store)["phases"][0]["weekly_structure"][0]
        assert monday["title"] == "Recovery Jog"
        assert monday["description"] == "40 minute easy run"
        assert monday["intensity"] == "Low"

    def test_edit_rejects_unknown_day(self, temp_store):
        _create(temp_store)
        result = runner.invoke(app, [
            "edit", "spring-marathon", "--day", "xx", "--title", "Long Run", "--store-path", str(temp_store),
        ])
        assert result.exit_code == 1

    def test_update_from_response_file(self, temp_store):
        _create(temp_store)
        response = temp_store / "response.txt"
        response.write_text(json.dumps({
            "success": True,
            "message": "Added a recovery swim",
            "changes": ["Added Friday swim"],
            "updatedProgram": {
                "phases": [
                    {"name": "Base", "focus": "Recovery", "weeklyStructure": [
                        {"day": "Friday", "title": "Recovery Swim", "description": "Easy 30 minute swim", "intensity": "Low", "type": "recovery"},
                    ]},
                ],
            },
        }), encoding="utf-8")

        result = runner.invoke(app, [
            "update", "spring-marathon",
            "--request", "Add a recovery swim",
            "--response-file", str(response),
            "--store-path", str(temp_store),
            "--json",
        ])

        assert result.exit_code == 0
        feedback = json.loads(result.stdout)
        assert feedback["success"] is True
        assert feedback["changes"] == ["Added Friday swim"]

        data = _show(temp_store)
        assert any(s["title"] == "Recovery Swim" for s in data["phases"][0]["weekly_structure"])
        assert data["phases"][0]["focus"] == "Aerobic base + Recovery"
        assert len(data["update_history"]) == 1

    def test_update_with_unusable_response_keeps_program(self, temp_store):
        _create(temp_store)
        before = _show(temp_store)
        response = temp_store / "response.txt"
        response.write_text("Sorry, something went wrong.", encoding="utf-8")

        result = runner.invoke(app, [
            "update", "spring-marathon",
            "--request", "Make it harder",
            "--response-file", str(response),
            "--store-path", str(temp_store),
        ])

        assert result.exit_code == 1
        assert _show(temp_store) == before

    def test_recovery_rejects_out_of_range_score(self, temp_store):
        result = runner.invoke(app, ["recovery", "--score", "150", "--store-path", str(temp_store)])
        assert result.exit_code == 1

    def test_delete(self, temp_store):
        _create(temp_store)
        result = runner.invoke(app, ["delete", "spring-marathon", "--store-path", str(temp_store)])
        assert result.exit_code == 0
        assert not (temp_store / "programs" / "spring-marathon.json").exists()
