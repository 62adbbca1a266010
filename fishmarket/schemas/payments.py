# -*- coding: utf-8 -*-
"""
Payment schemas: payment creation and gateway notifications.
"""
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fishmarket.schemas.base import RequestModel, normalize_money


class CreatePaymentRequest(RequestModel):
    type: Literal['membership', 'boost']
    amount: Decimal = Field(..., gt=0, max_digits=10)
    membership_id: Optional[int] = None
    ad_id: Optional[int] = None

    @field_validator('amount')
    @classmethod
    def quantize_amount(cls, v):
        return normalize_money(v)

    @model_validator(mode='after')
    def check_reference_matches_type(self):
        if self.type == 'membership':
            if self.membership_id is None:
                raise ValueError('membership_id is required for membership payments')
            self.ad_id = None
        else:
            if self.ad_id is None:
                raise ValueError('ad_id is required for boost payments')
            self.membership_id = None
        return self


class GatewayNotification(BaseModel):
    """
    Payment-gateway notification body.

    Only the fields needed for lookup, status mapping and signature checks are
    declared; the full body is persisted verbatim alongside the payment.
    """
    model_config = ConfigDict(extra='allow')

    order_id: str = Field(..., min_length=1)
    transaction_status: str = Field(..., min_length=1)
    status_code: Optional[str] = None
    gross_amount: Optional[str] = None
    signature_key: Optional[str] = None
    fraud_status: Optional[str] = None

    @field_validator('status_code', 'gross_amount', mode='before')
    @classmethod
    def stringify(cls, v):
        return str(v) if v is not None else v
