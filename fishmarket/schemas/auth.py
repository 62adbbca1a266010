# -*- coding: utf-8 -*-
"""
Identity schemas: registration and login bodies.
"""
from typing import Optional

from pydantic import Field, field_validator

from fishmarket.schemas.base import RequestModel, normalize_email


class RegisterRequest(RequestModel):
    """Schema for registering a new account."""
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=128,
                          description="Raw password, never stored")
    full_name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=64)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return normalize_email(v)


class LoginRequest(RequestModel):
    """Schema for logging in."""
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return normalize_email(v)
