# -*- coding: utf-8 -*-
"""Diet plans — API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..agent_service import AgentError
from ..auth.security import get_current_user
from .generator import PlanParseError, generate_ai_plan
from .models import AIPlanRequest, DietPlanCreateRequest, DietPlanUpdateRequest, ManualPlanRequest, PlanItemIn
from .storage import (
    add_plan_item,
    create_manual_plan,
    create_plan,
    delete_plan,
    delete_plan_item,
    get_plan,
    list_plans,
    update_plan,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/diet-plans", tags=["Diet Plans"])
ai_router = APIRouter(prefix="/api/ai-diet-plan", tags=["Diet Plans"])

RECENT_PLAN_LIMIT = 3


@router.get("", summary="List the user's diet plans")
def plans(user: dict = Depends(get_current_user)):
    return {"success": True, "plans": list_plans(user["user_id"])}


@router.get("/recent", summary="Latest diet plans")
def recent_plans(user: dict = Depends(get_current_user)):
    return {"success": True, "plans": list_plans(user["user_id"], limit=RECENT_PLAN_LIMIT)}


@router.get("/{plan_id}", summary="Diet plan detail with items")
def plan_detail(plan_id: int, user: dict = Depends(get_current_user)):
    found = get_plan(user["user_id"], plan_id)
    if not found:
        raise HTTPException(status_code=404, detail="Diet plan not found")
    return {"success": True, **found}


@router.post("/manual", status_code=201, summary="Create a plan from selected foods")
def create_manual(request: ManualPlanRequest, user: dict = Depends(get_current_user)):
    plan_id = create_manual_plan(
        user_id=user["user_id"],
        plan_name=request.plan_name,
        start_date=request.start_date,
        end_date=request.end_date,
        days=[day.model_dump() for day in request.days],
    )
    return {"success": True, "message": "Diet plan created successfully", "planId": plan_id}


@router.post("", status_code=201, summary="Create a plan, upserting foods by name")
def create(request: DietPlanCreateRequest, user: dict = Depends(get_current_user)):
    created = create_plan(
        user_id=user["user_id"],
        plan_name=request.plan_name,
        start_date=request.start_date,
        end_date=request.end_date,
        items=[item.model_dump() for item in request.items],
        foods=[food.model_dump() for food in request.foods],
    )
    return {"success": True, "message": "Diet plan created successfully", **created}


@router.put("/{plan_id}", summary="Update a plan's name and dates")
def update(plan_id: int, request: DietPlanUpdateRequest, user: dict = Depends(get_current_user)):
    plan = update_plan(
        user_id=user["user_id"],
        plan_id=plan_id,
        plan_name=request.plan_name,
        start_date=request.start_date,
        end_date=request.end_date,
    )
    return {"success": True, "message": "Diet plan updated successfully", "plan": plan}


@router.delete("/{plan_id}", summary="Delete a plan and its items")
def delete(plan_id: int, user: dict = Depends(get_current_user)):
    delete_plan(user_id=user["user_id"], plan_id=plan_id)
    return {"success": True, "message": "Diet plan deleted successfully"}


@router.post("/{plan_id}/items", status_code=201, summary="Add an item to a plan")
def add_item(plan_id: int, request: PlanItemIn, user: dict = Depends(get_current_user)):
    item = add_plan_item(
        user_id=user["user_id"],
        plan_id=plan_id,
        food_id=request.food_id,
        product_id=request.product_id,
        meal_time=request.meal_time,
        quantity=request.quantity,
        calories=request.calories,
    )
    return {"success": True, "message": "Item added to diet plan", "item": item}


@router.delete("/{plan_id}/items/{item_id}", summary="Remove an item from a plan")
def remove_item(plan_id: int, item_id: int, user: dict = Depends(get_current_user)):
    delete_plan_item(user_id=user["user_id"], plan_id=plan_id, item_id=item_id)
    return {"success": True, "message": "Item removed from diet plan"}


@ai_router.post("/generate", status_code=201, summary="Generate and save an AI diet plan")
def generate(request: AIPlanRequest, user: dict = Depends(get_current_user)):
    try:
        created = generate_ai_plan(
            user_id=user["user_id"],
            goals=request.goals,
            preferences=request.preferences,
            budget=request.budget,
            duration=request.duration,
        )
    except AgentError as exc:
        logger.error("AI diet plan generation failed: %s", exc)
        raise HTTPException(status_code=500, detail="Error generating AI diet plan") from exc

    if isinstance(created, PlanParseError):
        raise HTTPException(status_code=500, detail="Failed to parse AI response. Please try again.")
    return {
        "success": True,
        "message": "AI diet plan generated and saved successfully",
        "plan": created["plan"],
        "items": created["items"],
        "aiResponse": created["ai_response"],
    }
