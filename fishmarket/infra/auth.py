"""
Unified authentication infrastructure module.

Routes import their auth decorators from here. Both decorators resolve the
``Authorization: Bearer <token>`` header into an active user and expose it
as ``current_user`` (also stored on ``flask.g``).
"""
from functools import wraps
from typing import Optional

from flask import g, request
from werkzeug.local import LocalProxy

from fishmarket.services.auth_service import AuthService
from fishmarket.services.errors import InvalidToken, Unauthorized
from fishmarket.services.request_context import set_auth_context

current_user = LocalProxy(lambda: getattr(g, 'current_user', None))


def bearer_token() -> Optional[str]:
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def authenticate():
    token = bearer_token()
    if not token:
        raise InvalidToken("Missing bearer token")

    user = AuthService().resolve_session(token)
    g.current_user = user
    set_auth_context(user.id, bool(user.is_admin))
    return user


def login_required(f):
    """Require a valid session for the wrapped view."""
    @wraps(f)
    def decorated(*args, **kwargs):
        authenticate()
        return f(*args, **kwargs)
    return decorated


def admin_required(f):
    """Require a valid session belonging to an administrator."""
    @wraps(f)
    def decorated(*args, **kwargs):
        user = authenticate()
        if not user.is_admin:
            raise Unauthorized("Admin access required")
        return f(*args, **kwargs)
    return decorated


def require_self_or_admin(user_id: int):
    """Owner-scoped reads and edits: the caller must be the user or an admin."""
    user = current_user._get_current_object()
    if user is None or (user.id != user_id and not user.is_admin):
        raise Unauthorized("Access denied")
