# -*- coding: utf-8 -*-
"""Auth — Pydantic models."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


class SignupRequest(BaseModel):
    username: str = Field(..., max_length=64)
    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)
    role: Literal["customer", "supplier"] = "customer"
    phone_number: Optional[str] = Field(None, max_length=32)
    address: Optional[str] = Field(None, max_length=500)
    supplier_name: Optional[str] = Field(None, max_length=128)

    @field_validator("username")
    @classmethod
    def _check_username(cls, value: str) -> str:
        if len(value.strip()) < 3:
            raise ValueError("Username must be at least 3 characters long")
        return value.strip()

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if "@" not in value:
            raise ValueError("Please provide a valid email address")
        return value.strip()

    @field_validator("password")
    @classmethod
    def _check_password(cls, value: str) -> str:
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters long")
        if " " in value:
            raise ValueError("Password must not contain spaces")
        return value


class LoginRequest(BaseModel):
    identifier: str = Field(..., min_length=1, max_length=254, description="Email or username")
    password: str = Field(..., min_length=1, max_length=128)


class ProfileUpdateRequest(BaseModel):
    username: Optional[str] = Field(None, min_length=3, max_length=64)
    phone_number: Optional[str] = Field(None, max_length=32)
    address: Optional[str] = Field(None, max_length=500)


class UserPublic(BaseModel):
    userId: int
    username: str
    email: str
    phone_number: Optional[str] = None
    address: Optional[str] = None
    role: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
