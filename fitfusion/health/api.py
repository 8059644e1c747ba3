# -*- coding: utf-8 -*-
"""Health logging — API endpoints."""

from __future__ import annotations

import hmac
import logging
from datetime import date

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from ..app_db import utc_today
from ..auth.security import get_current_user
from ..config import settings
from .models import DailySummaryResponse, ExerciseLogCreateRequest, FoodLogCreateRequest, FoodSuggestionsRequest
from .storage import (
    DEFAULT_LOG_LIMIT,
    daily_summary,
    delete_exercise_log,
    delete_food_log,
    ingest_food_suggestions,
    list_exercise_logs,
    list_food_logs,
    log_exercise_by_name,
    log_food_by_name,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/health", tags=["Health"])


def require_ingestion_key(
    x_ingest_key: str | None = Header(default=None),
    ingest_key: str | None = Query(default=None),
) -> None:
    if not settings.ingestion_key:
        logger.warning("FITFUSION_INGESTION_KEY not set; refusing ingestion request")
        raise HTTPException(status_code=403, detail="Ingestion disabled")
    supplied = x_ingest_key or ingest_key or ""
    if not hmac.compare_digest(supplied, settings.ingestion_key):
        raise HTTPException(status_code=401, detail="Invalid ingestion key")


@router.post("/food-suggestions", status_code=201, summary="Ingest AI food suggestions (server-to-server)")
def food_suggestions(request: FoodSuggestionsRequest, _: None = Depends(require_ingestion_key)):
    stored = ingest_food_suggestions(food.model_dump() for food in request.foods)
    return {"success": True, "data": stored}


@router.get("/food-logs", summary="List food logs")
def food_logs(
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    limit: int = Query(default=DEFAULT_LOG_LIMIT, ge=1, le=500),
    user: dict = Depends(get_current_user),
):
    data = list_food_logs(user_id=user["user_id"], start_date=start_date, end_date=end_date, limit=limit)
    return {"success": True, "data": data}


@router.post("/food-logs", status_code=201, summary="Log a food by name")
def add_food_log(request: FoodLogCreateRequest, user: dict = Depends(get_current_user)):
    log = log_food_by_name(
        user_id=user["user_id"],
        food_name=request.food_name,
        quantity_grams=request.quantity_grams,
        meal_time=request.meal_time.value if request.meal_time else None,
    )
    return {"success": True, "message": "Food log added successfully", "data": log}


@router.delete("/food-logs/{log_id}", summary="Delete a food log")
def remove_food_log(log_id: int, user: dict = Depends(get_current_user)):
    if not delete_food_log(user_id=user["user_id"], log_id=log_id):
        raise HTTPException(status_code=404, detail="Food log entry not found")
    return {"success": True, "message": "Food log entry deleted successfully"}


@router.get("/exercise-logs", summary="List exercise logs")
def exercise_logs(
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    limit: int = Query(default=DEFAULT_LOG_LIMIT, ge=1, le=500),
    user: dict = Depends(get_current_user),
):
    data = list_exercise_logs(user_id=user["user_id"], start_date=start_date, end_date=end_date, limit=limit)
    return {"success": True, "data": data}


@router.post("/exercise-logs", status_code=201, summary="Log an exercise by name")
def add_exercise_log(request: ExerciseLogCreateRequest, user: dict = Depends(get_current_user)):
    log = log_exercise_by_name(
        user_id=user["user_id"],
        exercise_name=request.exercise_name,
        duration_minutes=request.duration_minutes,
    )
    return {"success": True, "message": "Exercise log added successfully", "data": log}


@router.delete("/exercise-logs/{log_id}", summary="Delete an exercise log")
def remove_exercise_log(log_id: int, user: dict = Depends(get_current_user)):
    if not delete_exercise_log(user_id=user["user_id"], log_id=log_id):
        raise HTTPException(status_code=404, detail="Exercise log entry not found")
    return {"success": True, "message": "Exercise log entry deleted successfully"}


@router.get("/summary", response_model=DailySummaryResponse, summary="Calories in, out and net for one day")
def summary(
    day: date | None = Query(default=None, alias="date", description="YYYY-MM-DD, defaults to today (UTC)"),
    user: dict = Depends(get_current_user),
):
    data = daily_summary(user_id=user["user_id"], day=day or utc_today())
    return DailySummaryResponse.model_validate({"data": data})
