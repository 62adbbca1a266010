# -*- coding: utf-8 -*-
"""
Shared request-schema helpers.
"""
import re
from decimal import Decimal
from typing import Any, ClassVar, Dict, FrozenSet

from pydantic import BaseModel, ConfigDict, model_validator

from fishmarket.utils.money import to_money

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


def normalize_email(v: str) -> str:
    v = (v or '').strip().lower()
    if not EMAIL_RE.match(v):
        raise ValueError('Invalid email format')
    return v


def normalize_money(v: Decimal) -> Decimal:
    return to_money(v)


class RequestModel(BaseModel):
    """Base for request bodies: unknown keys are rejected."""
    model_config = ConfigDict(extra='forbid', str_strip_whitespace=True)


class FieldMask(RequestModel):
    """
    Partial update body.

    A field that was not sent stays untouched; a field sent as null clears
    the column, which is only allowed for the names in ``NULLABLE``.
    """
    NULLABLE: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode='after')
    def _reject_null_for_required_columns(self):
        for name in self.model_fields_set:
            if getattr(self, name) is None and name not in self.NULLABLE:
                raise ValueError(f'{name} cannot be null')
        return self

    def changes(self) -> Dict[str, Any]:
        """Only the fields the caller actually sent."""
        return self.model_dump(exclude_unset=True)


class QueryModel(BaseModel):
    """Base for query-string filters: unrelated query keys are ignored."""
    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True)
