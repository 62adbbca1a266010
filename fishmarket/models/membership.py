# fishmarket/models/membership.py
from typing import Any, Dict

from fishmarket.database import db
from fishmarket.models.types import JSONList
from fishmarket.utils.clock import utcnow
from fishmarket.utils.money import money_to_wire


class MembershipPackage(db.Model):
    """
    Purchasable entitlement bundle.
    Paying for a package sets the buyer's membership and grants its boost credits.
    """
    __tablename__ = 'membership_packages'
    __table_args__ = (
        db.CheckConstraint('price > 0', name='ck_membership_packages_price_positive'),
        db.CheckConstraint('duration_days > 0', name='ck_membership_packages_duration_positive'),
        db.CheckConstraint('max_ads > 0', name='ck_membership_packages_max_ads_positive'),
        db.CheckConstraint('boost_credits >= 0', name='ck_membership_packages_boost_credits_non_negative'),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    duration_days = db.Column(db.Integer, nullable=False)
    max_ads = db.Column(db.Integer, nullable=False)
    boost_credits = db.Column(db.Integer, nullable=False, default=0)
    features = db.Column(JSONList, nullable=False, default=list)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'price': money_to_wire(self.price),
            'duration_days': self.duration_days,
            'max_ads': self.max_ads,
            'boost_credits': self.boost_credits or 0,
            'features': self.features or [],
            'is_active': bool(self.is_active),
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
