# api/schemas/auth.py
from pydantic import BaseModel, Field
from typing import Any


class AdminLoginRequest(BaseModel):
    """Request schema for admin login; a non-string password never matches"""
    password: Any = Field(None, description="Admin password")


class AdminLoginResponse(BaseModel):
    """Signed admin token and its expiry (epoch milliseconds)"""
    token: str
    expiresAt: int
