"""
Database handle for the HTTP layer.

Routes, error handlers and CLI commands take the SQLAlchemy instance from
here; models and services import ``fishmarket.database`` directly.
"""

from fishmarket.database import db

__all__ = ["db"]
