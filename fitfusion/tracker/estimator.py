# -*- coding: utf-8 -*-
"""AI nutrition estimates for foods and exercises missing from the database.

Estimates are returned to the caller only; nothing is written until the user
logs the entry.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from pydantic import ValidationError

from ..agent_service import complete_text, parse_json_reply
from .models import AIExerciseEstimate, AIFoodEstimate

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a nutrition database. Reply with a single JSON object only, no markdown or extra text."


def _food_prompt(query: str) -> str:
    return (
        f'Provide nutritional information for "{query}" per 100g.\n'
        "Return ONLY a single valid JSON object in this exact format:\n"
        "{\n"
        f'  "food_name": "{query}",\n'
        '  "calories_per_100g": 123,\n'
        '  "protein_per_100g": 12.3,\n'
        '  "carbs_per_100g": 45.6,\n'
        '  "fats_per_100g": 7.8\n'
        "}\n"
        "If you cannot find the food, return null for the values."
    )


def _exercise_prompt(query: str) -> str:
    return (
        f'Provide the average calories burned per minute for "{query}".\n'
        "Return ONLY a single valid JSON object in this exact format:\n"
        "{\n"
        f'  "exercise_name": "{query}",\n'
        '  "calories_burned_per_minute": 8.5\n'
        "}\n"
        "If you cannot find the exercise, return null for the value."
    )


def _ask(prompt: str) -> Any:
    text = complete_text(prompt, system_prompt=SYSTEM_PROMPT)
    return parse_json_reply(text)


def estimate_food(query: str) -> List[Dict[str, Any]]:
    """Return a single-element list with the AI estimate, or [] when it has no calories.

    Raises ``AgentError`` on provider failure and ``ValueError`` on a malformed reply.
    """
    data = _ask(_food_prompt(query))
    if not isinstance(data, dict):
        return []
    data.setdefault("food_name", query)
    try:
        estimate = AIFoodEstimate.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"invalid food estimate: {exc.error_count()} error(s)") from exc
    if not estimate.calories_per_100g:
        return []
    return [estimate.model_dump()]


def estimate_exercise(query: str) -> List[Dict[str, Any]]:
    data = _ask(_exercise_prompt(query))
    if not isinstance(data, dict):
        return []
    data.setdefault("exercise_name", query)
    try:
        estimate = AIExerciseEstimate.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"invalid exercise estimate: {exc.error_count()} error(s)") from exc
    if not estimate.calories_burned_per_minute:
        return []
    return [estimate.model_dump()]
