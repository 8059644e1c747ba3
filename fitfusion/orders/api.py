# -*- coding: utf-8 -*-
"""Orders & cart — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user
from .models import CartItemAddRequest, CartItemUpdateRequest, OrderStatusUpdateRequest, PlaceOrderRequest
from .storage import (
    add_cart_item,
    complete_order,
    get_cart,
    get_order,
    list_orders,
    place_order,
    remove_cart_item,
    update_cart_item,
    update_order_status,
)

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.get("/cart", summary="Get (or lazily create) the current cart")
def cart(user: dict = Depends(get_current_user)):
    return {"success": True, "cart": get_cart(user["user_id"])}


@router.post("/cart/items", status_code=201, summary="Add a product to the cart")
def add_item(request: CartItemAddRequest, user: dict = Depends(get_current_user)):
    result = add_cart_item(user_id=user["user_id"], product_id=request.product_id, quantity=request.quantity)
    return {"success": True, "message": "Item added to cart successfully", **result}


@router.put("/cart/items/{item_id}", summary="Set the quantity of a cart item")
def update_item(item_id: int, request: CartItemUpdateRequest, user: dict = Depends(get_current_user)):
    result = update_cart_item(user_id=user["user_id"], item_id=item_id, quantity=request.quantity)
    return {"success": True, "message": "Cart item updated successfully", **result}


@router.delete("/cart/items/{item_id}", summary="Remove an item from the cart")
def delete_item(item_id: int, user: dict = Depends(get_current_user)):
    result = remove_cart_item(user_id=user["user_id"], item_id=item_id)
    return {"success": True, "message": "Item removed from cart successfully", **result}


@router.post("/place-order", summary="Check out the cart")
def checkout(request: PlaceOrderRequest, user: dict = Depends(get_current_user)):
    order_id = place_order(user_id=user["user_id"], shipping_address=request.shipping_address)
    return {"success": True, "message": "Order placed successfully", "orderId": order_id}


@router.get("", summary="Order history (excludes the cart)")
def history(
    status: str | None = Query(default=None, description="Filter by status"),
    user: dict = Depends(get_current_user),
):
    return {"success": True, "orders": list_orders(user_id=user["user_id"], status=status or None)}


@router.get("/{order_id}", summary="Order detail with items")
def detail(order_id: int, user: dict = Depends(get_current_user)):
    found = get_order(user_id=user["user_id"], order_id=order_id)
    if not found:
        raise HTTPException(status_code=404, detail="Order not found")
    return {"success": True, **found}


@router.put("/{order_id}/status", summary="Advance an order through its lifecycle")
def status_update(order_id: int, request: OrderStatusUpdateRequest, user: dict = Depends(get_current_user)):
    order = update_order_status(user_id=user["user_id"], order_id=order_id, status=request.status)
    return {"success": True, "message": "Order status updated successfully", "order": order}


@router.put("/{order_id}/complete", summary="Complete payment for a cart order")
def complete(order_id: int, user: dict = Depends(get_current_user)):
    complete_order(user_id=user["user_id"], order_id=order_id)
    return {"success": True, "message": "Order placed successfully"}
