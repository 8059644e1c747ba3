# -*- coding: utf-8 -*-
"""LLM-driven diet plan generation."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from ..agent_service import complete_text, parse_json_reply
from ..app_db import utc_today
from .models import AIDietPlan
from .storage import create_plan

logger = logging.getLogger(__name__)

_MEAL_SCHEMA = {
    "planName": "A descriptive name for the diet plan",
    "meals": [
        {
            "day": 1,
            "mealTime": "Breakfast",
            "foodName": "Food item name",
            "quantity": 100,
            "caloriesPer100g": 250.5,
            "proteinPer100g": 12.5,
            "carbsPer100g": 30.0,
            "fatsPer100g": 8.5,
            "instructions": "Brief preparation instructions",
        }
    ],
}

SYSTEM_PROMPT = (
    "You are a professional nutritionist. Reply with a single JSON object only. "
    "Do NOT output markdown or extra text."
)


@dataclass(frozen=True)
class PlanParseOk:
    plan: AIDietPlan


@dataclass(frozen=True)
class PlanParseError:
    reason: str


PlanParseResult = Union[PlanParseOk, PlanParseError]


def build_prompt(*, goals: Optional[str], preferences: Optional[str], budget: Optional[str], duration: int) -> str:
    return (
        f"Create a detailed {duration}-day diet plan based on the following:\n\n"
        f"Goals: {goals or 'General health and fitness'}\n"
        f"Dietary Preferences: {preferences or 'No restrictions'}\n"
        f"Budget: {budget or 'Moderate'}\n\n"
        "Return the plan in this STRICT JSON format:\n"
        f"{json.dumps(_MEAL_SCHEMA, indent=2)}\n\n"
        "Requirements:\n"
        f"- Include 4 meals per day (Breakfast, Lunch, Snack, Dinner) for {duration} days\n"
        '- Use mealTime values "Breakfast", "Lunch", "Snack", "Dinner" (exact capitalization)\n'
        "- All nutrition values are per 100g\n"
        "- Quantity is in grams\n"
        "- Keep food names simple and clear\n"
        "- Ensure the diet meets the user's goals and budget"
    )


def parse_ai_plan(text: str) -> PlanParseResult:
    """Decode and validate a model reply into an ``AIDietPlan``."""
    try:
        data = parse_json_reply(text)
    except ValueError as exc:
        return PlanParseError(f"invalid JSON: {exc}")
    if not isinstance(data, dict):
        return PlanParseError("reply is not a JSON object")
    try:
        return PlanParseOk(AIDietPlan.model_validate(data))
    except ValidationError as exc:
        logger.warning("AI diet plan failed validation: %s", exc.errors()[:3])
        return PlanParseError(f"invalid plan structure: {exc.error_count()} error(s)")


def generate_ai_plan(
    *,
    user_id: int,
    goals: Optional[str],
    preferences: Optional[str],
    budget: Optional[str],
    duration: int,
) -> Union[Dict[str, Any], PlanParseError]:
    """Ask the AI provider for a plan and persist it as an AI-generated diet plan.

    Raises ``AgentError`` when the provider fails. An unusable reply is returned
    as ``PlanParseError`` and nothing is written.
    """
    prompt = build_prompt(goals=goals, preferences=preferences, budget=budget, duration=duration)
    text = complete_text(prompt, system_prompt=SYSTEM_PROMPT)

    result = parse_ai_plan(text)
    if isinstance(result, PlanParseError):
        logger.warning("discarding AI diet plan reply: %s", result.reason)
        return result

    plan = result.plan
    foods = [
        {
            "food_name": meal.food_name,
            "calories_per_100g": meal.calories_per_100g,
            "protein_per_100g": meal.protein_per_100g,
            "carbs_per_100g": meal.carbs_per_100g,
            "fats_per_100g": meal.fats_per_100g,
        }
        for meal in plan.meals
    ]
    # Calories are left unset so they are computed from the stored food row.
    items = [
        {"food_name": meal.food_name, "meal_time": meal.meal_time, "quantity": meal.quantity}
        for meal in plan.meals
    ]

    start = utc_today()
    created = create_plan(
        user_id=user_id,
        plan_name=plan.plan_name,
        start_date=start,
        end_date=start + timedelta(days=duration),
        items=items,
        foods=foods,
        is_ai_generated=True,
    )
    created["ai_response"] = plan.model_dump(by_alias=True, mode="json")
    return created
