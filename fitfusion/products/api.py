# -*- coding: utf-8 -*-
"""Products — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..auth.security import get_current_user
from .models import ProductCreateRequest, ReviewCreateRequest
from .storage import (
    add_review,
    create_product,
    get_product_detail,
    get_supplier_id_for_user,
    list_categories,
    list_products,
    list_supplier_products,
)

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.post("", status_code=201, summary="Create a product (suppliers only)")
def create(request: ProductCreateRequest, user: dict = Depends(get_current_user)):
    supplier_id = get_supplier_id_for_user(user["user_id"])
    if supplier_id is None:
        raise HTTPException(status_code=403, detail="Only suppliers can add products")

    product = create_product(
        supplier_id=supplier_id,
        product_name=request.product_name,
        description=request.description,
        price=request.price,
        stock_quantity=request.stock_quantity,
        category_id=request.category_id,
    )
    return {"success": True, "message": "Product added successfully", "product": product}


@router.get("", summary="List all products with ratings")
def list_all():
    return {"success": True, "products": list_products()}


@router.get("/supplier/mine", summary="Products owned by the current supplier")
def supplier_products(user: dict = Depends(get_current_user)):
    supplier_id = get_supplier_id_for_user(user["user_id"])
    if supplier_id is None:
        raise HTTPException(status_code=403, detail="Only suppliers can view their products")
    return {"success": True, "products": list_supplier_products(supplier_id)}


@router.get("/categories/list", summary="List product categories")
def categories():
    return {"success": True, "categories": list_categories()}


@router.get("/{product_id}", summary="Product detail with reviews")
def detail(product_id: int):
    found = get_product_detail(product_id)
    if not found:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"success": True, **found}


@router.post("/{product_id}/reviews", status_code=201, summary="Review a product")
def review(product_id: int, request: ReviewCreateRequest, user: dict = Depends(get_current_user)):
    created = add_review(
        user_id=user["user_id"],
        product_id=product_id,
        rating=request.rating,
        comment=request.comment,
    )
    return {"success": True, "message": "Review added successfully", "review": created}
