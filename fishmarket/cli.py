"""
Flask CLI commands: ``flask seed-reference-data`` and ``flask create-admin``.
"""
import click
from flask import Flask

from fishmarket.infra.db import db
from fishmarket.database.seed import seed_reference_data
from fishmarket.schemas.base import normalize_email


def create_admin(email: str, password: str, full_name: str):
    """Create an administrator, or promote the existing account with that email."""
    from fishmarket.models.user import User

    email = normalize_email(email)
    user = User.query.filter_by(email=email).first()
    if user:
        user.is_admin = True
        user.is_active = True
    else:
        user = User(email=email, full_name=full_name, boost_credits=0, is_admin=True, is_active=True)
        user.set_password(password)
        db.session.add(user)
    db.session.commit()
    return user


def register_cli(app: Flask):

    @app.cli.command("seed-reference-data")
    def seed_reference_data_command():
        """Insert the default categories and membership packages."""
        added = seed_reference_data()
        click.echo(f"Added {added} reference records")

    @app.cli.command("create-admin")
    @click.argument("email")
    @click.argument("password")
    @click.argument("full_name")
    def create_admin_command(email, password, full_name):
        """Create or promote an administrator account."""
        user = create_admin(email, password, full_name)
        click.echo(f"Admin ready: {user.email} (id={user.id})")
