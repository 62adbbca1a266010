"""
Infrastructure package - unified entry points for core services.

This package provides standardized, centralized access to:
- Database (db)
- Authentication (login_required, admin_required, current_user)
- Logging (configure_logging, init_logging, get_logger)
"""

from fishmarket.infra.db import db
from fishmarket.infra.auth import (
    admin_required,
    current_user,
    login_required,
    require_self_or_admin,
)
from fishmarket.infra.log import configure_logging, init_logging, get_logger

__all__ = [
    "db",
    "login_required",
    "admin_required",
    "current_user",
    "require_self_or_admin",
    "configure_logging",
    "init_logging",
    "get_logger",
]
