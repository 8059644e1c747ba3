# -*- coding: utf-8 -*-
"""Orders & cart — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OrderStatus(str, Enum):
    cart = "Cart"
    pending = "Pending"
    shipped = "Shipped"
    delivered = "Delivered"
    cancelled = "Cancelled"


# Transitions allowed through the status endpoint. Checkout (Cart -> Pending) and
# the payment shortcut (Cart -> Delivered) have their own endpoints.
STATUS_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.pending: frozenset({OrderStatus.shipped, OrderStatus.cancelled}),
    OrderStatus.shipped: frozenset({OrderStatus.delivered, OrderStatus.cancelled}),
}


class CartItemAddRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(..., alias="productId", gt=0)
    quantity: int = Field(..., ge=1)


class CartItemUpdateRequest(BaseModel):
    quantity: int = Field(..., ge=1, description="Use DELETE to remove an item")


class PlaceOrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    shipping_address: str = Field(..., alias="shippingAddress", max_length=1000)

    @field_validator("shipping_address")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Shipping address is required")
        return value.strip()


class OrderStatusUpdateRequest(BaseModel):
    status: str = Field(..., description="Pending | Shipped | Delivered | Cancelled")
