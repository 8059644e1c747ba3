# -*- coding: utf-8 -*-
"""Tracker — search, log and review today's food and exercise entries."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from ..agent_service import AgentError
from ..auth.security import get_current_user
from ..health.storage import (
    delete_exercise_log,
    delete_food_log,
    log_exercise_entry,
    log_food_entry,
    todays_logs,
)
from ..nutrition.storage import search_exercises, search_foods
from .estimator import estimate_exercise, estimate_food
from .models import ExerciseLogEntryRequest, FoodLogEntryRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/log", tags=["Tracker"])

SEARCH_LIMIT = 5


def _require_query(q: str | None) -> str:
    query = (q or "").strip()
    if not query:
        raise HTTPException(status_code=400, detail="Query is required")
    return query


@router.get("/search-food", summary="Search foods in the database, then ask the AI")
def search_food(q: str | None = Query(default=None), user: dict = Depends(get_current_user)):  # noqa: ARG001
    query = _require_query(q)
    results = search_foods(query, limit=SEARCH_LIMIT, tag_source=True)
    if results:
        return {"success": True, "results": results}
    try:
        results = estimate_food(query)
    except (AgentError, ValueError) as exc:
        logger.error("food search fallback failed for %r: %s", query, exc)
        raise HTTPException(status_code=500, detail="Failed to search for food") from exc
    return {"success": True, "results": results}


@router.get("/search-exercise", summary="Search exercises in the database, then ask the AI")
def search_exercise(q: str | None = Query(default=None), user: dict = Depends(get_current_user)):  # noqa: ARG001
    query = _require_query(q)
    results = search_exercises(query, limit=SEARCH_LIMIT, tag_source=True)
    if results:
        return {"success": True, "results": results}
    try:
        results = estimate_exercise(query)
    except (AgentError, ValueError) as exc:
        logger.error("exercise search fallback failed for %r: %s", query, exc)
        raise HTTPException(status_code=500, detail="Failed to search for exercise") from exc
    return {"success": True, "results": results}


@router.post("/food", status_code=201, summary="Log a food picked from search")
def log_food(request: FoodLogEntryRequest, user: dict = Depends(get_current_user)):
    log = log_food_entry(
        user_id=user["user_id"],
        food=request.food.model_dump(),
        quantity_grams=request.quantity_grams,
        meal_time=request.meal_time.value,
    )
    return {"success": True, "log": log}


@router.post("/exercise", status_code=201, summary="Log an exercise picked from search")
def log_exercise(request: ExerciseLogEntryRequest, user: dict = Depends(get_current_user)):
    log = log_exercise_entry(
        user_id=user["user_id"],
        exercise=request.exercise.model_dump(),
        duration_minutes=request.duration_minutes,
    )
    return {"success": True, "log": log}


@router.get("/today", summary="Today's food and exercise logs")
def today(user: dict = Depends(get_current_user)):
    return {"success": True, **todays_logs(user_id=user["user_id"])}


@router.delete("/food/{log_id}", summary="Delete a food log")
def remove_food(log_id: int, user: dict = Depends(get_current_user)):
    if not delete_food_log(user_id=user["user_id"], log_id=log_id):
        raise HTTPException(status_code=404, detail="Log not found")
    return {"success": True, "message": "Food log deleted"}


@router.delete("/exercise/{log_id}", summary="Delete an exercise log")
def remove_exercise(log_id: int, user: dict = Depends(get_current_user)):
    if not delete_exercise_log(user_id=user["user_id"], log_id=log_id):
        raise HTTPException(status_code=404, detail="Log not found")
    return {"success": True, "message": "Exercise log deleted"}
