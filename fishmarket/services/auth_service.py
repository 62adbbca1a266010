"""
Identity & session service.

Registers and authenticates users and issues signed, expiring bearer
tokens through Flask-JWT-Extended. Tokens carry the user id as the JWT
subject; nothing about a session is stored server side, so a token stays
valid until it expires or its user is deactivated.
"""
from datetime import timedelta
from typing import Any, Dict, Tuple

import jwt
from flask import current_app
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from sqlalchemy.exc import IntegrityError

from fishmarket.database import db
from fishmarket.models.user import User
from fishmarket.schemas.auth import LoginRequest, RegisterRequest
from fishmarket.services.errors import (
    AccountInactive,
    Conflict,
    InvalidCredentials,
    InvalidToken,
    NotFound,
)
from fishmarket.services.metrics import get_metrics_service
from fishmarket.services.structured_logging import get_logger

logger = get_logger('fishmarket.auth')


class AuthService:
    """JWT-based authentication service."""

    def _record(self, event: str, success: bool, **context):
        logger.log_auth_event(event, success, **context)
        metrics = get_metrics_service()
        if metrics:
            metrics.record_auth_event(event, success)

    def issue_token(self, user: User) -> str:
        hours = current_app.config.get("TOKEN_TTL_HOURS", 24)
        return create_access_token(
            identity=str(user.id),
            additional_claims={"is_admin": bool(user.is_admin)},
            expires_delta=timedelta(hours=hours),
        )

    def register(self, data: RegisterRequest) -> Tuple[User, str]:
        """Create an account and return it with a fresh session token."""
        if User.query.filter_by(email=data.email).first():
            self._record('register', False, email=data.email, reason='duplicate_email')
            raise Conflict("User already exists", email=data.email)

        user = User(
            email=data.email,
            full_name=data.full_name,
            phone=data.phone,
            boost_credits=0,
            is_admin=False,
            is_active=True,
        )
        user.set_password(data.password)

        try:
            db.session.add(user)
            db.session.commit()
        except IntegrityError:
            # lost a race with a concurrent registration for the same email
            db.session.rollback()
            self._record('register', False, email=data.email, reason='duplicate_email')
            raise Conflict("User already exists", email=data.email)

        self._record('register', True, user_id=user.id)
        return user, self.issue_token(user)

    def login(self, data: LoginRequest) -> Tuple[User, str]:
        user = User.query.filter_by(email=data.email).first()
        if not user or not user.check_password(data.password):
            self._record('login', False, email=data.email, reason='invalid_credentials')
            raise InvalidCredentials("Invalid credentials")

        if not user.is_active:
            self._record('login', False, user_id=user.id, reason='account_inactive')
            raise AccountInactive("User account is inactive")

        self._record('login', True, user_id=user.id)
        return user, self.issue_token(user)

    def decode(self, token: str) -> Dict[str, Any]:
        """Verify signature and expiry, returning the token claims."""
        if not token:
            raise InvalidToken("Missing token")
        try:
            return decode_token(token)
        except (jwt.PyJWTError, JWTExtendedException) as e:
            self._record('resolve_session', False, reason=type(e).__name__)
            raise InvalidToken("Invalid token")

    def resolve_session(self, token: str) -> User:
        """Return the active user a bearer token belongs to."""
        claims = self.decode(token)
        try:
            user_id = int(claims.get("sub"))
        except (TypeError, ValueError):
            self._record('resolve_session', False, reason='bad_subject')
            raise InvalidToken("Invalid token")

        user = db.session.get(User, user_id)
        if not user:
            self._record('resolve_session', False, user_id=user_id, reason='user_not_found')
            raise NotFound("User not found", user_id=user_id)
        if not user.is_active:
            self._record('resolve_session', False, user_id=user_id, reason='account_inactive')
            raise AccountInactive("User account is inactive")
        return user
