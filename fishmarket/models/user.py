# fishmarket/models/user.py
from werkzeug.security import generate_password_hash, check_password_hash

from fishmarket.database import db
from fishmarket.utils.clock import utcnow


class User(db.Model):
    __tablename__ = 'users'
    __table_args__ = (
        db.CheckConstraint('boost_credits >= 0', name='ck_users_boost_credits_non_negative'),
    )

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(64), nullable=True)
    avatar_url = db.Column(db.Text, nullable=True)

    membership_id = db.Column(db.Integer, db.ForeignKey('membership_packages.id'), nullable=True)
    boost_credits = db.Column(db.Integer, nullable=False, default=0)

    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    membership = db.relationship('MembershipPackage', lazy=True)
    ads = db.relationship('Ad', backref='owner', lazy='dynamic')
    payments = db.relationship('Payment', backref='user', lazy='dynamic')

    # --- password helpers ---
    def set_password(self, raw_password: str):
        self.password_hash = generate_password_hash(raw_password)

    def check_password(self, raw_password: str) -> bool:
        return check_password_hash(self.password_hash, raw_password)

    # --- safe serializer ---
    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "phone": self.phone,
            "avatar_url": self.avatar_url,
            "membership_id": self.membership_id,
            "boost_credits": self.boost_credits or 0,
            "is_admin": bool(self.is_admin),
            "is_active": bool(self.is_active),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
