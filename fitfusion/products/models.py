# -*- coding: utf-8 -*-
"""Products — Pydantic models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ProductCreateRequest(BaseModel):
    product_name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=4000)
    price: float = Field(..., gt=0)
    stock_quantity: int = Field(0, ge=0)
    category_id: int


class ReviewCreateRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5, description="1..5 stars")
    comment: Optional[str] = Field(None, max_length=2000)
