# -*- coding: utf-8 -*-
"""
Catalog schemas for categories and membership packages.
"""
from decimal import Decimal
from typing import ClassVar, FrozenSet, List, Optional

from pydantic import Field, field_validator

from fishmarket.schemas.base import FieldMask, RequestModel, normalize_money


class CreateCategoryRequest(RequestModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    icon_url: Optional[str] = None


class UpdateCategoryRequest(FieldMask):
    NULLABLE: ClassVar[FrozenSet[str]] = frozenset({'description', 'icon_url'})

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    icon_url: Optional[str] = None


class CreateMembershipPackageRequest(RequestModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., gt=0, max_digits=10)
    duration_days: int = Field(..., gt=0)
    max_ads: int = Field(..., gt=0)
    boost_credits: int = Field(0, ge=0)
    features: List[str] = Field(default_factory=list)

    @field_validator('price')
    @classmethod
    def quantize_price(cls, v):
        return normalize_money(v)


class UpdateMembershipPackageRequest(FieldMask):
    NULLABLE: ClassVar[FrozenSet[str]] = frozenset({'description'})

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10)
    duration_days: Optional[int] = Field(None, gt=0)
    max_ads: Optional[int] = Field(None, gt=0)
    boost_credits: Optional[int] = Field(None, ge=0)
    features: Optional[List[str]] = None

    @field_validator('price')
    @classmethod
    def quantize_price(cls, v):
        return normalize_money(v) if v is not None else v


class AssignMembershipRequest(RequestModel):
    user_id: int = Field(..., gt=0)
