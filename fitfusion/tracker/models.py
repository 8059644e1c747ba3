# -*- coding: utf-8 -*-
"""Tracker — Pydantic models."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..diet_plans.models import MealTimeField


class FoodRef(BaseModel):
    """A food picked from search results; ``food_id`` is absent for AI estimates."""

    model_config = ConfigDict(extra="ignore")

    food_id: Optional[int] = None
    food_name: Optional[str] = Field(None, max_length=200)
    calories_per_100g: Optional[float] = Field(None, ge=0)
    protein_per_100g: Optional[float] = Field(None, ge=0)
    carbs_per_100g: Optional[float] = Field(None, ge=0)
    fats_per_100g: Optional[float] = Field(None, ge=0)


class ExerciseRef(BaseModel):
    model_config = ConfigDict(extra="ignore")

    exercise_id: Optional[int] = None
    exercise_name: Optional[str] = Field(None, max_length=200)
    calories_burned_per_minute: Optional[float] = Field(None, ge=0)


class FoodLogEntryRequest(BaseModel):
    food: FoodRef
    quantity_grams: float = Field(..., gt=0)
    meal_time: MealTimeField


class ExerciseLogEntryRequest(BaseModel):
    exercise: ExerciseRef
    duration_minutes: float = Field(..., gt=0)


class AIFoodEstimate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    food_name: str
    calories_per_100g: Optional[float] = None
    protein_per_100g: Optional[float] = None
    carbs_per_100g: Optional[float] = None
    fats_per_100g: Optional[float] = None
    source: Literal["ai"] = "ai"


class AIExerciseEstimate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    exercise_name: str
    calories_burned_per_minute: Optional[float] = None
    source: Literal["ai"] = "ai"
