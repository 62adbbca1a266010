"""
Ad model - the central listing entity of the marketplace.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from fishmarket.database import db
from fishmarket.models.types import JSONList
from fishmarket.utils.clock import utcnow
from fishmarket.utils.money import money_to_wire


class AdStatus:
    DRAFT = 'draft'
    ACTIVE = 'active'
    EXPIRED = 'expired'
    REJECTED = 'rejected'
    DELETED = 'deleted'

    ALL = (DRAFT, ACTIVE, EXPIRED, REJECTED, DELETED)
    MODERATION = (ACTIVE, REJECTED)


class Ad(db.Model):
    __tablename__ = 'ads'
    __table_args__ = (
        db.CheckConstraint('price > 0', name='ck_ads_price_positive'),
        db.CheckConstraint('view_count >= 0', name='ck_ads_view_count_non_negative'),
        db.CheckConstraint('contact_count >= 0', name='ck_ads_contact_count_non_negative'),
        db.Index('ix_ads_status_created_at', 'status', 'created_at'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id'), nullable=False, index=True)

    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    location = db.Column(db.String(255), nullable=False)
    contact_info = db.Column(db.String(255), nullable=False)
    images = db.Column(JSONList, nullable=False, default=list)

    # Boost
    is_boosted = db.Column(db.Boolean, nullable=False, default=False)
    boost_expires_at = db.Column(db.DateTime, nullable=True)

    # Metrics
    view_count = db.Column(db.Integer, nullable=False, default=0)
    contact_count = db.Column(db.Integer, nullable=False, default=0)

    # Moderation
    status = db.Column(db.String(20), nullable=False, default=AdStatus.DRAFT)
    rejection_reason = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    category = db.relationship('Category', lazy=True)

    def is_effectively_boosted(self, now: Optional[datetime] = None) -> bool:
        """A boost flag only counts while its expiry is still in the future."""
        now = now or utcnow()
        return bool(self.is_boosted) and self.boost_expires_at is not None and self.boost_expires_at > now

    @property
    def is_deleted(self) -> bool:
        return self.status == AdStatus.DELETED

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'category_id': self.category_id,
            'title': self.title,
            'description': self.description,
            'price': money_to_wire(self.price),
            'location': self.location,
            'contact_info': self.contact_info,
            'images': self.images or [],
            'is_boosted': bool(self.is_boosted),
            'boost_expires_at': self.boost_expires_at.isoformat() if self.boost_expires_at else None,
            'boost_active': self.is_effectively_boosted(),
            'view_count': self.view_count or 0,
            'contact_count': self.contact_count or 0,
            'status': self.status,
            'rejection_reason': self.rejection_reason,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
