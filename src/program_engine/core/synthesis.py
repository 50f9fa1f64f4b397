"""
Program synthesis.

Builds a program's phases from a plan proposal of the generative
collaborator: the proposal is validated, every phase is enforced to the
user's strength config, recovery notes are attached and a nutrition
plan is filled in when the proposal has none.
"""

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from loguru import logger

from ..io.payloads import phases_from_text
from .config import DEFAULT_NUTRITION, ENDURANCE_PROGRAM_TYPES
from .enforcer import enforce_phases
from .models import GoalRequirements, MileageWeek, NutritionPlan, Program
from .recovery import annotate_phases

_GENERAL_ADVICE = (
    "Stay hydrated by drinking at least 2-3 liters of water daily.",
    "Aim to eat 3-4 hours before intense training sessions.",
)

_PROGRAM_ADVICE: dict[str, tuple[str, ...]] = {
    "endurance": (
        "Focus on carbohydrate intake before long runs (1-4g/kg body weight).",
        "Consume 30-60g of carbs per hour during runs longer than 90 minutes.",
        "Include a 3:1 or 4:1 carb to protein ratio in post-run recovery meals.",
    ),
    "strength": (
        "Consume 1.6-2.2g of protein per kg of body weight to support muscle growth.",
        "Include a protein-rich meal within 1-2 hours after strength training.",
        "Consider creatine supplementation (3-5g daily) for improved strength performance.",
    ),
    "weight_loss": (
        "Focus on protein intake (1.8-2.2g/kg) to preserve muscle while in a calorie deficit.",
        "Include fiber-rich foods to increase satiety and improve digestion.",
        "Consider intermittent fasting if it fits your schedule and preferences.",
        "Aim for a sustainable calorie deficit of 500-750 calories per day.",
    ),
    "general": (
        "Prioritize whole foods over processed options when possible.",
        "Include a variety of colorful fruits and vegetables for micronutrients.",
        "Consider omega-3 fatty acids for heart health (fatty fish, flaxseeds, walnuts).",
    ),
}

# (program group, fitness goal) -> extra advice
_GOAL_ADVICE: dict[tuple[str, str], str] = {
    ("endurance", "loseWeight"): "Create a small calorie deficit (300-500 calories) on non-long run days.",
    ("endurance", "gainMuscle"): (
        "Increase protein intake to 1.8-2.2g/kg to support muscle maintenance during high mileage."
    ),
    ("strength", "loseWeight"): "Maintain high protein intake while in a calorie deficit to preserve muscle mass.",
    ("strength", "gainMuscle"): "Aim for a calorie surplus of 300-500 calories on training days.",
    ("general", "loseWeight"): "Create a moderate calorie deficit through both diet and exercise.",
    ("general", "gainMuscle"): "Ensure adequate protein and calorie intake to support muscle growth.",
}


def _program_group(program_type: str) -> str:
    if program_type in ENDURANCE_PROGRAM_TYPES:
        return "endurance"
    if program_type in ("powerlifting", "hypertrophy"):
        return "strength"
    if program_type == "weight_loss":
        return "weight_loss"
    return "general"


def nutrition_recommendations(program_type: str, fitness_goal: str | None = None) -> list[str]:
    """General advice plus advice for the program type and fitness goal."""
    group = _program_group(program_type)
    advice = [*_GENERAL_ADVICE, *_PROGRAM_ADVICE[group]]
    extra = _GOAL_ADVICE.get((group, fitness_goal or ""))
    if extra:
        advice.append(extra)
    return advice


def default_nutrition_plan(program_type: str, fitness_goal: str | None = None) -> NutritionPlan:
    """2000 kcal / 150 g protein / 200 g carbs / 70 g fat with program advice."""
    return NutritionPlan(
        calories=DEFAULT_NUTRITION["calories"],
        protein=DEFAULT_NUTRITION["protein"],
        carbs=DEFAULT_NUTRITION["carbs"],
        fat=DEFAULT_NUTRITION["fat"],
        recommendations=nutrition_recommendations(program_type, fitness_goal),
    )


def synthesize_program(
    program: Program,
    plan_text: str,
    recovery_status: str | None = None,
    fitness_goal: str | None = None,
    now: datetime | None = None,
) -> Program:
    """
    Replace a program's phases with a validated plan proposal.

    Args:
        program: Program whose config (type, strength block) drives enforcement
        plan_text: Raw collaborator output; malformed text yields the foundation phase
        recovery_status: Attach recovery notes for this status
        fitness_goal: Profile goal used to tailor nutrition advice
        now: Timestamp for ``last_updated``

    Returns:
        New program snapshot
    """
    phases, nutrition, overview = phases_from_text(plan_text)
    phases = enforce_phases(phases, program.strength_config)
    if recovery_status is not None:
        phases = annotate_phases(phases, recovery_status)

    if nutrition is None:
        nutrition = default_nutrition_plan(program.program_type, fitness_goal)
    elif not nutrition.recommendations:
        nutrition = replace(nutrition, recommendations=nutrition_recommendations(program.program_type, fitness_goal))

    logger.info(f"Synthesized {len(phases)} phase(s) for program {program.program_id}")
    return replace(
        program,
        phases=phases,
        nutrition_plan=nutrition,
        overview=overview or program.overview,
        last_updated=(now or datetime.now()).isoformat(timespec="seconds"),
    )


def build_plan_prompt(
    program: Program,
    requirements: GoalRequirements | None = None,
    mileage: list[MileageWeek] | None = None,
) -> str:
    """Prompt text asking the collaborator for a full plan."""
    lines = [
        f"Create a {program.program_type} training program: {program.name}",
        f"GOAL: {program.target_metric or 'General fitness'} by {program.goal_date or 'not set'}",
        f"TRAINING DAYS: {program.training_days_per_week}/week, EXPERIENCE: {program.experience_level}",
    ]
    if program.strength_config is not None and program.strength_config.enabled:
        cfg = program.strength_config
        split = cfg.custom_split if cfg.split == "custom" and cfg.custom_split else cfg.split
        lines.append(f"STRENGTH: exactly {cfg.days_per_week} sessions/week, split {split}")
    if requirements is not None:
        targets = ", ".join(f"{k}={v}" for k, v in requirements.to_dict().items())
        lines.append(f"REQUIREMENTS: {targets}")
    if mileage:
        weeks = "; ".join(f"wk{w.week} {w.weekly_mileage}mi (long {w.long_run_miles})" for w in mileage)
        lines.append(f"MILEAGE: {weeks}")
    lines.append(
        'Return JSON: {"programOverview": str, "phases": [{"name": str, "duration": "N weeks", '
        '"focus": str, "weeklyStructure": [{"day": str, "title": str, "description": str, '
        '"intensity": str, "type": "cardio|strength|recovery|other"}]}], '
        '"nutritionPlan": {"calories": int, "protein": int, "carbs": int, "fat": int, '
        '"recommendations": [str]}}. Each workout entry must carry exactly one type.'
    )
    return "\n".join(lines)


def generate_program(
    program: Program,
    collaborator: Callable[[str], str],
    requirements: GoalRequirements | None = None,
    mileage: list[MileageWeek] | None = None,
    recovery_status: str | None = None,
    fitness_goal: str | None = None,
    now: datetime | None = None,
) -> Program:
    """
    Ask the collaborator for a plan and synthesize it.

    A failing collaborator is logged and yields the foundation phase.
    """
    prompt = build_plan_prompt(program, requirements, mileage)
    try:
        text = collaborator(prompt)
    except Exception as e:
        logger.error(f"Error generating plan for program {program.program_id}: {e}")
        text = ""
    return synthesize_program(program, text, recovery_status, fitness_goal, now)
