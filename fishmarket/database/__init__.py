"""Shared Flask-SQLAlchemy instance."""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

__all__ = ["db"]
