# -*- coding: utf-8 -*-
"""
Ad schemas: listing filters, create/update bodies, boost and moderation.
"""
from decimal import Decimal
from typing import List, Literal, Optional

from flask import current_app
from pydantic import Field, field_validator, model_validator

from fishmarket.schemas.base import FieldMask, QueryModel, RequestModel, normalize_money


def check_image_cap(images: Optional[List[str]]) -> Optional[List[str]]:
    """Enforce the app's FISHMARKET_MAX_AD_IMAGES limit."""
    cap = current_app.config["MAX_AD_IMAGES"]
    if images is not None and len(images) > cap:
        raise ValueError(f'At most {cap} images are allowed')
    return images


class AdFilters(QueryModel):
    """Query-string filters for the public listing; every field is optional."""
    category_id: Optional[int] = None
    user_id: Optional[int] = None
    search: Optional[str] = None
    location: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    limit: Optional[int] = Field(None, gt=0)
    offset: Optional[int] = Field(None, ge=0)

    @model_validator(mode='after')
    def check_price_range(self):
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError('min_price cannot exceed max_price')
        return self


class CreateAdRequest(RequestModel):
    category_id: int
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., gt=0, max_digits=10)
    location: str = Field(..., min_length=1, max_length=255)
    contact_info: str = Field(..., min_length=1, max_length=255)
    images: List[str] = Field(default_factory=list)

    @field_validator('price')
    @classmethod
    def quantize_price(cls, v):
        return normalize_money(v)

    @field_validator('images')
    @classmethod
    def cap_images(cls, v):
        return check_image_cap(v)


class UpdateAdRequest(FieldMask):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    contact_info: Optional[str] = Field(None, min_length=1, max_length=255)
    images: Optional[List[str]] = None

    @field_validator('price')
    @classmethod
    def quantize_price(cls, v):
        return normalize_money(v) if v is not None else v

    @field_validator('images')
    @classmethod
    def cap_images(cls, v):
        return check_image_cap(v)


class BoostAdRequest(RequestModel):
    duration_days: int = Field(..., gt=0, le=365)


class ModerateAdRequest(RequestModel):
    status: Literal['active', 'rejected']
    rejection_reason: Optional[str] = None
