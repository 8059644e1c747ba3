# -*- coding: utf-8 -*-
"""Auth — API endpoints."""

from __future__ import annotations

import sqlite3

from fastapi import APIRouter, Depends, HTTPException, Response

from ..app_db import iso_now
from ..config import settings
from .models import LoginRequest, ProfileUpdateRequest, SignupRequest, UserPublic
from .security import TOKEN_COOKIE_NAME, create_access_token, get_current_user, hash_password, verify_password
from .storage import (
    create_user,
    get_user_by_id,
    get_user_by_identifier,
    touch_login,
    update_profile,
    user_exists,
    username_taken_by_other,
)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _user_public(row: dict) -> dict:
    return UserPublic(
        userId=row["user_id"],
        username=row["username"],
        email=row["email"],
        phone_number=row.get("phone_number"),
        address=row.get("address"),
        role=row["role"],
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    ).model_dump()


def _set_auth_cookie(resp: Response, token: str) -> None:
    max_age = int(settings.token_ttl_days) * 24 * 60 * 60
    resp.set_cookie(
        TOKEN_COOKIE_NAME,
        token,
        httponly=True,
        secure=bool(settings.cookie_secure),
        samesite="lax",
        max_age=max_age,
        path="/",
    )


@router.post("/signup", status_code=201, summary="Register a new user")
def signup(request: SignupRequest, response: Response):
    if user_exists(email=request.email, username=request.username):
        raise HTTPException(status_code=409, detail="User with this email or username already exists")

    try:
        user = create_user(
            username=request.username,
            email=request.email,
            password_hash=hash_password(request.password),
            role=request.role,
            phone_number=request.phone_number,
            address=request.address,
            supplier_name=request.supplier_name,
        )
    except sqlite3.IntegrityError as exc:
        raise HTTPException(status_code=409, detail="User with this email or username already exists") from exc

    _set_auth_cookie(response, create_access_token(user))
    return {"success": True, "message": "User created successfully", "user": _user_public(user)}


@router.post("/login", summary="Login with email or username")
def login(request: LoginRequest, response: Response):
    user = get_user_by_identifier(request.identifier)
    if not user or not verify_password(request.password, user["password"]):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    touch_login(user["user_id"])
    _set_auth_cookie(response, create_access_token(user))
    return {"success": True, "message": "Login successful", "user": _user_public(user)}


@router.post("/logout", summary="Logout")
def logout(response: Response, user: dict = Depends(get_current_user)):  # noqa: ARG001
    response.delete_cookie(TOKEN_COOKIE_NAME, path="/")
    return {"success": True, "message": "Logout successful"}


@router.get("/profile", summary="Get current user profile")
def get_profile(user: dict = Depends(get_current_user)):
    row = get_user_by_id(user["user_id"])
    if not row:
        raise HTTPException(status_code=404, detail="User not found")
    return {"success": True, "user": _user_public(row)}


@router.put("/profile", summary="Update current user profile")
def put_profile(request: ProfileUpdateRequest, user: dict = Depends(get_current_user)):
    fields = request.model_dump(exclude_unset=True)
    if fields.get("username") is None:
        fields.pop("username", None)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    if "username" in fields and username_taken_by_other(fields["username"], user["user_id"]):
        raise HTTPException(status_code=409, detail="Username is already taken")

    try:
        row = update_profile(user["user_id"], fields)
    except sqlite3.IntegrityError as exc:
        raise HTTPException(status_code=409, detail="Username is already taken") from exc
    if not row:
        raise HTTPException(status_code=404, detail="User not found")
    return {"success": True, "message": "Profile updated successfully", "user": _user_public(row)}


@router.get("/check", summary="Check authentication")
def check(user: dict = Depends(get_current_user)):
    return {
        "success": True,
        "message": "User is authenticated",
        "user": {
            "userId": user["user_id"],
            "username": user["username"],
            "email": user["email"],
            "role": user["role"],
        },
    }


@router.get("/health", summary="Auth service liveness")
def auth_health():
    return {"success": True, "message": "Auth service is running", "timestamp": iso_now()}
