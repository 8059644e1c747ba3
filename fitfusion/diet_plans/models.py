# -*- coding: utf-8 -*-
"""Diet plans — Pydantic models."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator


class MealTime(str, Enum):
    breakfast = "Breakfast"
    lunch = "Lunch"
    snack = "Snack"
    dinner = "Dinner"

    @classmethod
    def _missing_(cls, value: object) -> Optional["MealTime"]:
        # Accept any capitalization ("breakfast", "DINNER").
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return None


def _coerce_meal_time(value: Any) -> Any:
    if isinstance(value, str):
        return MealTime(value)
    return value


MealTimeField = Annotated[MealTime, BeforeValidator(_coerce_meal_time)]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


def _require_name(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("Plan name is required")
    return value.strip()


def _require_food_name(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("Food name is required")
    return value.strip()


class PlanFoodIn(BaseModel):
    food_name: str = Field(..., max_length=200)
    calories_per_100g: Optional[float] = Field(None, ge=0)
    protein_per_100g: Optional[float] = Field(None, ge=0)
    carbs_per_100g: Optional[float] = Field(None, ge=0)
    fats_per_100g: Optional[float] = Field(None, ge=0)

    normalize_food_name = field_validator("food_name")(_require_food_name)


class PlanItemIn(BaseModel):
    food_id: Optional[int] = None
    food_name: Optional[str] = Field(None, max_length=200)
    product_id: Optional[int] = None
    meal_time: MealTimeField
    quantity: float = Field(..., gt=0, description="Grams for food, units for products")
    calories: Optional[float] = Field(None, ge=0, description="Computed from the food when omitted")

    @field_validator("food_name")
    @classmethod
    def _blank_as_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()


class DietPlanCreateRequest(_CamelModel):
    plan_name: str = Field(..., alias="planName", max_length=200)
    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")
    items: List[PlanItemIn] = Field(default_factory=list)
    foods: List[PlanFoodIn] = Field(default_factory=list)

    normalize_plan_name = field_validator("plan_name")(_require_name)

    @model_validator(mode="after")
    def _check_range(self) -> "DietPlanCreateRequest":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must not be before start date")
        return self


class ManualFoodRef(BaseModel):
    food_id: int
    food_name: Optional[str] = None
    calories_per_100g: Optional[float] = None


class ManualItemIn(BaseModel):
    food: ManualFoodRef
    quantity: float = Field(..., gt=0)


class ManualMealIn(BaseModel):
    meal_time: MealTimeField
    items: List[ManualItemIn] = Field(default_factory=list)


class ManualDayIn(BaseModel):
    day: Optional[int] = Field(None, ge=1)
    meals: List[ManualMealIn] = Field(default_factory=list)


class ManualPlanRequest(_CamelModel):
    plan_name: str = Field(..., alias="planName", max_length=200)
    start_date: date = Field(..., alias="startDate")
    end_date: date = Field(..., alias="endDate")
    days: List[ManualDayIn]

    normalize_plan_name = field_validator("plan_name")(_require_name)

    @model_validator(mode="after")
    def _check_range(self) -> "ManualPlanRequest":
        if self.end_date < self.start_date:
            raise ValueError("End date must not be before start date")
        return self


class DietPlanUpdateRequest(_CamelModel):
    plan_name: str = Field(..., alias="planName", max_length=200)
    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")

    normalize_plan_name = field_validator("plan_name")(_require_name)


class AIPlanRequest(BaseModel):
    goals: Optional[str] = Field(None, max_length=1000)
    preferences: Optional[str] = Field(None, max_length=1000)
    budget: Optional[str] = Field(None, max_length=200)
    duration: int = Field(7, ge=1, le=30, description="Days")


class AIMeal(_CamelModel):
    """One meal row of the AI reply (per-100g nutrition, quantity in grams)."""

    day: int = Field(1, ge=1)
    meal_time: MealTimeField = Field(..., alias="mealTime")
    food_name: str = Field(..., alias="foodName", max_length=200)
    quantity: float = Field(..., gt=0)
    calories_per_100g: float = Field(0.0, alias="caloriesPer100g", ge=0)
    protein_per_100g: float = Field(0.0, alias="proteinPer100g", ge=0)
    carbs_per_100g: float = Field(0.0, alias="carbsPer100g", ge=0)
    fats_per_100g: float = Field(0.0, alias="fatsPer100g", ge=0)
    instructions: Optional[str] = None

    normalize_food_name = field_validator("food_name")(_require_food_name)

    @field_validator(
        "calories_per_100g", "protein_per_100g", "carbs_per_100g", "fats_per_100g", mode="before"
    )
    @classmethod
    def _null_as_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value


class AIDietPlan(_CamelModel):
    plan_name: str = Field(..., alias="planName", min_length=1, max_length=200)
    meals: List[AIMeal] = Field(..., min_length=1)
