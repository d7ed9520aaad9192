"""CLI tools for Gifter administration."""

import click

from gifter.db.base import Base
from gifter.db.session import SessionLocal, engine
from gifter.services import auth_service
from gifter.services.errors import GifterServiceError


@click.group()
def cli():
    """Gifter CLI tools."""
    pass


@cli.command()
def init_db():
    """
    Create all tables directly from the models.

    For local SQLite databases. Production databases use `alembic upgrade head`.
    """
    from gifter.db import models  # noqa: F401  registers tables on Base.metadata

    Base.metadata.create_all(bind=engine)
    click.echo(f"✓ Tables created: {', '.join(sorted(Base.metadata.tables))}")


@cli.command()
@click.option("--email", required=True, help="Login email")
@click.option("--username", required=True, help="Display name (max 50 characters)")
@click.option("--password", required=True, prompt=True, hide_input=True, help="Password (min 6 characters)")
def create_user(email: str, username: str, password: str):
    """
    Register a user without going through the API.

    Example:
        python -m gifter.cli create-user --email "santa@example.com" --username "Santa"
    """
    db = SessionLocal()
    try:
        user = auth_service.register_user(db, email, username, password)
        click.echo(f"✓ Created user: {user.email}")
        click.echo(f"  ID: {user.id}")
    except GifterServiceError as e:
        click.echo(f"❌ {e.message}")
        raise SystemExit(1)
    finally:
        db.close()


@cli.command()
@click.option("--email", required=True, help="User email to revoke sessions for")
def revoke_sessions(email: str):
    """
    Revoke all sessions for a user by bumping their token_version.

    Example:
        python -m gifter.cli revoke-sessions --email "user@example.com"
    """
    db = SessionLocal()
    try:
        version = auth_service.revoke_sessions(db, email)
        click.echo(f"✓ Revoked all sessions for {email}")
        click.echo(f"  Token version: {version - 1} → {version}")
    except GifterServiceError:
        click.echo(f"❌ User not found: {email}")
        raise SystemExit(1)
    finally:
        db.close()


if __name__ == "__main__":
    cli()
