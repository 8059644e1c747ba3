# -*- coding: utf-8 -*-
"""Nutrition — food autocomplete endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ..auth.security import get_current_user
from .storage import search_foods

router = APIRouter(prefix="/api/food", tags=["Food"])


@router.get("/search", summary="Autocomplete food names")
def search(
    q: str | None = Query(default=None, description="Substring of the food name"),
    user: dict = Depends(get_current_user),  # noqa: ARG001
):
    if not q or not q.strip():
        return {"success": True, "foods": []}
    return {"success": True, "foods": search_foods(q, limit=10)}
