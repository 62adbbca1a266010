# -*- coding: utf-8 -*-
from fishmarket.database import db

from .user import User
from .category import Category
from .membership import MembershipPackage
from .ad import Ad, AdStatus
from .payment import Payment, PaymentStatus, PaymentType

__all__ = [
    "db",
    "User",
    "Category",
    "MembershipPackage",
    "Ad",
    "AdStatus",
    "Payment",
    "PaymentStatus",
    "PaymentType",
]
