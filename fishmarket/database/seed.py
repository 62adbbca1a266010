"""
Reference data for a fresh marketplace: fish-trade categories and the
default membership packages. Seeding is idempotent by name.
"""
from decimal import Decimal

import sqlalchemy as sa
from flask import current_app

from fishmarket.database import db

DEFAULT_CATEGORIES = [
    {"name": "Ikan Hias", "description": "Ornamental and aquarium fish"},
    {"name": "Ikan Konsumsi", "description": "Fish raised or caught for food"},
    {"name": "Bibit Ikan", "description": "Fry, fingerlings and breeding stock"},
    {"name": "Pakan & Peralatan", "description": "Feed, tanks, pumps and other equipment"},
]

DEFAULT_PACKAGES = [
    {
        "name": "Basic",
        "description": "Starter membership for occasional sellers",
        "price": Decimal("50000.00"),
        "duration_days": 30,
        "max_ads": 10,
        "boost_credits": 5,
        "features": ["10 active ads", "5 boost credits"],
    },
    {
        "name": "Premium",
        "description": "For farms and shops listing every week",
        "price": Decimal("150000.00"),
        "duration_days": 30,
        "max_ads": 50,
        "boost_credits": 25,
        "features": ["50 active ads", "25 boost credits", "Priority support"],
    },
]


def seed_reference_data() -> int:
    """Insert missing default categories and packages; returns how many were added."""
    from fishmarket.models.category import Category
    from fishmarket.models.membership import MembershipPackage

    insp = sa.inspect(db.engine)
    if not insp.has_table("categories") or not insp.has_table("membership_packages"):
        current_app.logger.warning(
            "Skipping reference data seeding: catalog tables missing "
            "(migrate will create them)."
        )
        return 0

    added = 0
    for data in DEFAULT_CATEGORIES:
        if not Category.query.filter_by(name=data["name"]).first():
            db.session.add(Category(is_active=True, **data))
            added += 1
    for data in DEFAULT_PACKAGES:
        if not MembershipPackage.query.filter_by(name=data["name"]).first():
            db.session.add(MembershipPackage(is_active=True, **data))
            added += 1
    db.session.commit()

    current_app.logger.info(f"Seeded {added} reference records")
    return added
