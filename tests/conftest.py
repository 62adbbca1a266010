import pytest
import os
import tempfile
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

# Set test environment variables
os.environ["FLASK_ENV"] = "testing"
os.environ["TESTING"] = "true"
os.environ["FISHMARKET_JWT_SECRET"] = "test-jwt-secret-with-enough-bytes-for-hs256"
os.environ["FISHMARKET_LOG_JSON"] = "true"
os.environ["FISHMARKET_REQUIRE_GATEWAY_SIGNATURE"] = "0"


@pytest.fixture
def app():
    """Create and configure a new app instance for each test."""
    db_fd, db_path = tempfile.mkstemp()
    with patch.dict(os.environ, {
        "DATABASE_URL": f"sqlite:///{db_path}",
    }):
        from fishmarket.factory import create_app
        from fishmarket.database import db
        app = create_app()
        with app.app_context():
            db.create_all()
            yield app
            db.session.remove()
            db.drop_all()
    os.close(db_fd)
    os.unlink(db_path)


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Build and persist a user; keyword arguments override the defaults."""
    from fishmarket.database import db
    from fishmarket.models.user import User

    counter = {'n': 0}

    def _make(email=None, password="secret-pass-1", **fields):
        counter['n'] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            full_name=fields.pop('full_name', f"User {counter['n']}"),
            boost_credits=fields.pop('boost_credits', 0),
            is_admin=fields.pop('is_admin', False),
            is_active=fields.pop('is_active', True),
            **fields
        )
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def make_category(app):
    from fishmarket.database import db
    from fishmarket.models.category import Category

    def _make(name="Ikan Hias", is_active=True, **fields):
        category = Category(name=name, is_active=is_active, **fields)
        db.session.add(category)
        db.session.commit()
        return category

    return _make


@pytest.fixture
def make_package(app):
    from fishmarket.database import db
    from fishmarket.models.membership import MembershipPackage

    def _make(name="Premium", boost_credits=5, is_active=True, **fields):
        package = MembershipPackage(
            name=name,
            price=fields.pop('price', Decimal("150000.00")),
            duration_days=fields.pop('duration_days', 30),
            max_ads=fields.pop('max_ads', 50),
            boost_credits=boost_credits,
            features=fields.pop('features', ["Priority listing"]),
            is_active=is_active,
            **fields
        )
        db.session.add(package)
        db.session.commit()
        return package

    return _make


@pytest.fixture
def make_ad(app, make_category):
    """Build and persist an ad owned by ``owner``; active unless told otherwise."""
    from fishmarket.database import db
    from fishmarket.models.ad import Ad, AdStatus
    from fishmarket.utils.clock import utcnow

    state = {'category': None}

    def _make(owner, status=AdStatus.ACTIVE, boosted_for=None, **fields):
        if 'category_id' not in fields:
            if state['category'] is None:
                state['category'] = make_category()
            fields['category_id'] = state['category'].id
        ad = Ad(
            user_id=owner.id,
            title=fields.pop('title', "Arwana Super Red"),
            description=fields.pop('description', "Healthy juvenile, 25cm"),
            price=fields.pop('price', Decimal("750000.00")),
            location=fields.pop('location', "Jakarta Barat"),
            contact_info=fields.pop('contact_info', "0812-0000-0000"),
            images=fields.pop('images', []),
            status=status,
            **fields
        )
        if boosted_for is not None:
            ad.is_boosted = True
            ad.boost_expires_at = utcnow() + boosted_for
        db.session.add(ad)
        db.session.commit()
        return ad

    return _make


@pytest.fixture
def make_payment(app):
    from fishmarket.database import db
    from fishmarket.models.payment import Payment, PaymentStatus
    from fishmarket.services.payment_service import new_order_reference

    def _make(user, type, amount="50.00", status=PaymentStatus.PENDING, **fields):
        payment = Payment(
            user_id=user.id,
            type=type,
            amount=Decimal(amount),
            status=status,
            transaction_id=fields.pop('transaction_id', new_order_reference()),
            **fields
        )
        db.session.add(payment)
        db.session.commit()
        return payment

    return _make


@pytest.fixture
def auth_headers(app):
    """Bearer headers for a user, minted the same way login does."""
    from fishmarket.services.auth_service import AuthService

    def _headers(user):
        return {'Authorization': f"Bearer {AuthService().issue_token(user)}"}

    return _headers


@pytest.fixture
def reload(app):
    """Re-read a row after a request has changed it through another session."""
    from fishmarket.database import db

    def _reload(model, pk):
        db.session.expire_all()
        return db.session.get(model, pk)

    return _reload


@pytest.fixture
def write_outside_session(app):
    """Run a statement on its own connection, as a concurrent request would."""
    from fishmarket.database import db

    def _write(statement):
        with db.engine.begin() as conn:
            conn.execute(statement)

    return _write


@pytest.fixture
def one_day():
    return timedelta(days=1)
