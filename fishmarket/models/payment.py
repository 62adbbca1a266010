# fishmarket/models/payment.py
from typing import Any, Dict

from fishmarket.database import db
from fishmarket.models.types import JSONDict
from fishmarket.utils.clock import utcnow
from fishmarket.utils.money import money_to_wire


class PaymentType:
    MEMBERSHIP = 'membership'
    BOOST = 'boost'

    ALL = (MEMBERSHIP, BOOST)


class PaymentStatus:
    PENDING = 'pending'
    PAID = 'paid'
    FAILED = 'failed'
    CANCELLED = 'cancelled'

    ALL = (PENDING, PAID, FAILED, CANCELLED)
    TERMINAL = (PAID, FAILED, CANCELLED)


class Payment(db.Model):
    __tablename__ = "payments"
    __table_args__ = (
        db.CheckConstraint('amount > 0', name='ck_payments_amount_positive'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    membership_id = db.Column(db.Integer, db.ForeignKey('membership_packages.id'), nullable=True)
    ad_id = db.Column(db.Integer, db.ForeignKey('ads.id'), nullable=True)

    type = db.Column(db.String(16), nullable=False)      # membership, boost
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    status = db.Column(db.String(16), nullable=False, default=PaymentStatus.PENDING)

    # merchant order reference, echoed back by the gateway as order_id
    transaction_id = db.Column(db.String(64), unique=True, nullable=True, index=True)
    gateway_response = db.Column(JSONDict, nullable=True)
    entitlement_applied_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    membership = db.relationship('MembershipPackage', lazy=True)
    ad = db.relationship('Ad', lazy=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'membership_id': self.membership_id,
            'ad_id': self.ad_id,
            'type': self.type,
            'amount': money_to_wire(self.amount),
            'status': self.status,
            'transaction_id': self.transaction_id,
            'gateway_response': self.gateway_response,
            'entitlement_applied': self.entitlement_applied_at is not None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
