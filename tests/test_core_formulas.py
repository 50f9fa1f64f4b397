"""
Formula-focused unit tests for goal requirements and mileage progression.

Values are hand-computed from the formulas so the tests act as a
reference for the tables in core/config.py.
"""

from datetime import datetime

import pytest

from program_engine.core.config import BASE_WEEKLY_MILEAGE, PEAK_WEEKLY_MILEAGE
from program_engine.core.goals import (
    calculate_goal_requirements,
    goal_timeline,
    parse_goal_time,
    peak_mileage_for_pace,
    round_half_up,
    training_block,
)
from program_engine.core.mileage import (
    calculate_mileage_week,
    format_pace,
    is_step_back_week,
    pace_guidance,
    plan_mileage,
)
from program_engine.core.models import UserProfile, WeightEntry

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

NOW = datetime(2026, 1, 1)
GOAL_IN_10_WEEKS = "2026-03-12"  # 70 days after NOW


def _profile(weight_kg: float = 90.0, level: str = "intermediate") -> UserProfile:
    return UserProfile(age=35, gender="male", weight_kg=weight_kg, height_cm=180.0, experience_level=level)


# ---------------------------------------------------------------------------
# Rounding and parsing
# ---------------------------------------------------------------------------


class TestRounding:
    def test_half_rounds_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4

    def test_below_half_rounds_down(self):
        assert round_half_up(748.43) == 748

    def test_parse_goal_time(self):
        assert parse_goal_time("3:30:00") == pytest.approx(210.0)
        assert parse_goal_time("sub 1:45:30 half") == pytest.approx(105.5)

    def test_parse_goal_time_missing(self):
        assert parse_goal_time("finish strong") is None
        assert parse_goal_time(None) is None


# ---------------------------------------------------------------------------
# Goal timeline
# ---------------------------------------------------------------------------


class TestGoalTimeline:
    def test_ten_weeks_out_is_medium_urgency(self):
        assert goal_timeline(GOAL_IN_10_WEEKS, NOW) == (70, 10, "medium")

    def test_under_thirty_days_is_high(self):
        days, weeks, urgency = goal_timeline("2026-01-11", NOW)
        assert (days, weeks, urgency) == (10, 2, "high")

    def test_far_goal_is_low(self):
        assert goal_timeline("2026-12-31", NOW)[2] == "low"

    def test_past_goal_clamps_to_one_day(self):
        assert goal_timeline("2025-06-01", NOW) == (1, 1, "high")

    def test_partial_day_rounds_up(self):
        days, _, _ = goal_timeline("2026-01-03", datetime(2026, 1, 1, 12, 0))
        assert days == 2


# ---------------------------------------------------------------------------
# Endurance requirements
# ---------------------------------------------------------------------------


class TestEnduranceRequirements:
    def test_marathon_330_paces(self):
        """3:30:00 over 42.195 km is 4.98 min/km, about 8.01 min/mile."""
        req = calculate_goal_requirements("marathon", "3:30:00", GOAL_IN_10_WEEKS, _profile(), now=NOW)

        assert req.target_pace_min_per_km == 4.98
        assert req.goal_pace_min_per_mile == pytest.approx(8.01, abs=0.011)
        assert req.easy_pace_min_per_mile == pytest.approx((210 / 42.195 + 1.0) * 1.60934, abs=0.01)
        assert req.tempo_pace_min_per_mile == pytest.approx((210 / 42.195 - 0.3) * 1.60934, abs=0.01)
        assert req.interval_pace_min_per_mile == pytest.approx((210 / 42.195 - 1.0) * 1.60934, abs=0.01)
        assert req.target_time == "3:30:00"

    def test_marathon_mileage_fields(self):
        req = calculate_goal_requirements("marathon", "3:30:00", GOAL_IN_10_WEEKS, _profile(), now=NOW)

        assert req.base_weekly_mileage == 35
        assert req.peak_weekly_mileage == 65
        assert req.total_training_weeks == 10
        assert req.build_weeks == 7
        assert req.taper_weeks == 3
        # (65 - 35) / max(8, 10 - 3)
        assert req.mileage_progression == pytest.approx(3.8)

    def test_block_capped_at_sixteen_weeks(self):
        req = calculate_goal_requirements("marathon", "3:30:00", "2026-12-31", _profile(), now=NOW)
        assert req.total_training_weeks == 16
        assert req.build_weeks == 12
        assert req.taper_weeks == 4

    def test_half_marathon_capped_at_twelve(self):
        assert training_block("half-marathon", 40) == (12, 9, 3)

    def test_fast_goal_scales_peak_up(self):
        # 2:30:00 marathon is about 3.55 min/km
        assert peak_mileage_for_pace("marathon", "intermediate", 3.55) == 78

    def test_slow_goal_scales_peak_down(self):
        assert peak_mileage_for_pace("marathon", "intermediate", 6.5) == 52

    def test_unknown_level_reads_as_intermediate(self):
        assert peak_mileage_for_pace("marathon", "elite", None) == PEAK_WEEKLY_MILEAGE["marathon"]["intermediate"]

    def test_unparseable_target_keeps_generic_fields_only(self):
        req = calculate_goal_requirements("marathon", "just finish", GOAL_IN_10_WEEKS, _profile(), now=NOW)

        assert req.to_dict() == {
            "days_until_goal": 70,
            "weeks_until_goal": 10,
            "urgency": "medium",
            "feasible": True,
        }


# ---------------------------------------------------------------------------
# Weight loss, powerlifting, hypertrophy
# ---------------------------------------------------------------------------


class TestWeightLossRequirements:
    def test_fifteen_pounds_in_ten_weeks(self):
        req = calculate_goal_requirements("weight_loss", "15lbs", GOAL_IN_10_WEEKS, _profile(90.0), now=NOW)

        assert req.target_weight_loss_kg == pytest.approx(6.8)
        assert req.weekly_weight_loss_target == pytest.approx(0.68)
        assert req.daily_calorie_deficit == 748
        assert req.target_weight_kg == pytest.approx(83.2)
        assert req.max_safe_weekly_loss == pytest.approx(0.68)
        assert req.feasible is True

    def test_newest_weight_entry_wins_over_profile(self):
        history = [WeightEntry("2025-12-30", 95.0), WeightEntry("2025-12-01", 97.0)]
        req = calculate_goal_requirements(
            "weight_loss", "5kg", GOAL_IN_10_WEEKS, _profile(90.0), weight_history=history, now=NOW
        )
        assert req.target_weight_kg == pytest.approx(90.0)

    def test_weekly_target_capped(self):
        req = calculate_goal_requirements("weight_loss", "10kg", GOAL_IN_10_WEEKS, _profile(), now=NOW)
        assert req.weekly_weight_loss_target == 0.75
        # 0.75 * 7700 / 7 = 825
        assert req.daily_calorie_deficit == 825
        assert req.feasible is True

    def test_aggressive_loss_not_feasible(self):
        req = calculate_goal_requirements("weight_loss", "12kg", GOAL_IN_10_WEEKS, _profile(), now=NOW)
        assert req.feasible is False

    def test_no_unit_does_not_parse(self):
        req = calculate_goal_requirements("weight_loss", "lose 15", GOAL_IN_10_WEEKS, _profile(), now=NOW)
        assert req.target_weight_loss_kg is None
        assert req.daily_calorie_deficit is None


class TestPowerliftingRequirements:
    def test_thousand_pound_total(self):
        req = calculate_goal_requirements("powerlifting", "1000lb total", GOAL_IN_10_WEEKS, _profile(), now=NOW)

        assert req.target_total_kg == pytest.approx(453.6)
        assert req.estimated_current_total == 315.0
        assert req.total_increase == 139.0
        assert req.weekly_increase == pytest.approx(13.9)
        assert req.feasible is False

    def test_kg_total_within_reach(self):
        req = calculate_goal_requirements("powerlifting", "330 kg total", GOAL_IN_10_WEEKS, _profile(), now=NOW)
        assert req.weekly_increase == pytest.approx(1.5)
        assert req.feasible is True

    def test_beginner_allows_faster_gains(self):
        # 90 * 2.5 = 225 current; +40 kg over 10 weeks = 4/week
        req = calculate_goal_requirements(
            "powerlifting", "265kg total", GOAL_IN_10_WEEKS, _profile(level="beginner"), now=NOW
        )
        assert req.feasible is True


class TestHypertrophyRequirements:
    def test_ten_pounds_of_muscle(self):
        req = calculate_goal_requirements("hypertrophy", "10lbs muscle", GOAL_IN_10_WEEKS, _profile(), now=NOW)

        assert req.target_muscle_gain_kg == pytest.approx(4.54)
        assert req.weekly_gain_target == pytest.approx(0.454)
        assert req.monthly_gain_target == pytest.approx(1.96)
        assert req.recommended_calorie_surplus == 499
        assert req.feasible is False

    def test_small_gain_is_feasible(self):
        req = calculate_goal_requirements("hypertrophy", "1kg muscle", GOAL_IN_10_WEEKS, _profile(), now=NOW)
        assert req.feasible is True


# ---------------------------------------------------------------------------
# Mileage progression
# ---------------------------------------------------------------------------


class TestMileageProgression:
    def test_first_week_starts_at_base(self):
        week = calculate_mileage_week(1, "marathon", "intermediate")

        assert week.phase == "build"
        assert week.weekly_mileage == BASE_WEEKLY_MILEAGE["marathon"]["intermediate"]
        assert week.long_run_miles == 8
        assert (week.easy_run_miles, week.tempo_miles, week.interval_miles) == (16, 7, 4)

    def test_step_back_week(self):
        # Week 12 of 16 is the last build week: peak 65 / long 20, then x0.8 / x0.85
        week = calculate_mileage_week(12, "marathon", "intermediate")
        assert week.weekly_mileage == 52
        assert week.long_run_miles == 17

    def test_taper_weeks(self):
        first = calculate_mileage_week(13, "marathon", "intermediate")
        last = calculate_mileage_week(16, "marathon", "intermediate")

        assert first.phase == "taper"
        assert first.weekly_mileage == 59
        assert first.long_run_miles == 12
        assert last.weekly_mileage == 39
        assert last.long_run_miles == 3

    def test_step_back_schedule(self):
        assert [w for w in range(1, 17) if is_step_back_week(w)] == [8, 12, 16]

    @pytest.mark.parametrize("program_type", ["marathon", "half-marathon"])
    @pytest.mark.parametrize("level", ["beginner", "intermediate", "advanced"])
    def test_build_weeks_never_decrease(self, program_type, level):
        weeks = plan_mileage(program_type, level)
        build = [w.weekly_mileage for w in weeks if w.phase == "build" and not is_step_back_week(w.week)]
        assert build == sorted(build)

    @pytest.mark.parametrize("program_type", ["marathon", "half-marathon"])
    @pytest.mark.parametrize("goal_time", [None, "3:30:00", "1:40:00"])
    def test_components_track_weekly_total(self, program_type, goal_time):
        for week in plan_mileage(program_type, "advanced", goal_time):
            assert abs(week.component_total - week.weekly_mileage) <= 2

    def test_plan_length_follows_horizon(self):
        weeks = plan_mileage("half-marathon", "beginner", total_weeks=8)
        assert [w.week for w in weeks] == list(range(1, 9))
        assert [w.phase for w in weeks].count("taper") == 2

    def test_week_out_of_range(self):
        with pytest.raises(ValueError):
            calculate_mileage_week(17, "marathon", "intermediate")

    def test_non_endurance_type_rejected(self):
        with pytest.raises(ValueError):
            calculate_mileage_week(1, "powerlifting", "intermediate")


class TestPaceGuidance:
    def test_format_pace(self):
        assert format_pace(8.5) == "8:30/mile"
        assert format_pace(7.05) == "7:03/mile"

    def test_rounded_sixty_seconds_carries(self):
        assert format_pace(7.999) == "8:00/mile"

    def test_paces_from_goal_time(self):
        # 210 / 26.2 = 8.0153 min/mile
        guide = pace_guidance("marathon", "3:30:00")
        assert guide.easy == "9:31/mile"
        assert guide.tempo == "7:46/mile"
        assert guide.interval == "7:16/mile"
        assert guide.long == "9:01/mile"

    def test_qualitative_without_goal_time(self):
        guide = pace_guidance("marathon", None)
        assert "/mile" not in guide.easy
        assert guide.easy
