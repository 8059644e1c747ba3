# -*- coding: utf-8 -*-
"""Health logging — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..diet_plans.models import MealTimeField


def _strip_name(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("Name is required")
    return value.strip()


class FoodLogCreateRequest(BaseModel):
    food_name: str = Field(..., max_length=200)
    quantity_grams: float = Field(..., gt=0)
    meal_time: Optional[MealTimeField] = None

    normalize_food_name = field_validator("food_name")(_strip_name)


class ExerciseLogCreateRequest(BaseModel):
    exercise_name: str = Field(..., max_length=200)
    duration_minutes: float = Field(..., gt=0)

    normalize_exercise_name = field_validator("exercise_name")(_strip_name)


class DailySummary(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    total_food_calories: float = 0.0
    total_exercise_calories: float = 0.0
    net_calories: float = 0.0


class DailySummaryResponse(BaseModel):
    success: bool = True
    data: DailySummary


class FoodSuggestion(BaseModel):
    """One AI-suggested food; accepts both ``name``/``food_name`` and short nutrient keys."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    food_name: Optional[str] = None
    calories_per_100g: Optional[float] = Field(None, ge=0)
    calories: Optional[float] = Field(None, ge=0)
    protein_per_100g: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    carbs_per_100g: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fats_per_100g: Optional[float] = Field(None, ge=0)
    fat: Optional[float] = Field(None, ge=0)


class FoodSuggestionsRequest(BaseModel):
    foods: List[FoodSuggestion]
