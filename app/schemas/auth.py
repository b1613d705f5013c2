"""
app/schemas/auth.py

Schemas for registration, login and session lookup.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=320)
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: UUID
    email: str
    name: str
    plan: str
    role: str


class AuthResponse(BaseModel):
    success: bool = True
    user: UserResponse


class MeResponse(BaseModel):
    user: UserResponse | None = None
