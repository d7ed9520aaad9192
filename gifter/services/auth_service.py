"""Authentication service - registration, credential checks, session revocation."""

import logging
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gifter.core.security import create_session_token, hash_password, verify_password
from gifter.core.structured_logging import build_log_context
from gifter.db.models import User
from gifter.services.errors import ConflictError, NotFoundOrForbidden, ValidationError
from gifter.services.unit_of_work import atomic
from gifter.utils.normalization import normalize_email, normalize_name

logger = logging.getLogger(__name__)

MAX_USERNAME_LENGTH = 50
MIN_PASSWORD_LENGTH = 6

# Checked against when the email is unknown so both failure paths cost a bcrypt round
_DUMMY_HASH = hash_password("gifter-dummy-password")


def get_user_by_email(db: Session, email: str) -> User | None:
    normalized = normalize_email(email)
    if not normalized:
        return None
    return db.execute(select(User).where(User.email == normalized)).scalar_one_or_none()


def register_user(db: Session, email: str, username: str, password: str) -> User:
    """
    Create an account.

    Raises:
        ValidationError: empty email/username, username too long, short password
        ConflictError: email already registered
    """
    normalized_email = normalize_email(email)
    if not normalized_email:
        raise ValidationError("Email is required")
    clean_username = normalize_name(username)
    if not clean_username or len(clean_username) > MAX_USERNAME_LENGTH:
        raise ValidationError(f"Username must be 1-{MAX_USERNAME_LENGTH} characters")
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if get_user_by_email(db, normalized_email):
        raise ConflictError("Email already registered")

    user = User(
        email=normalized_email,
        username=clean_username,
        password_hash=hash_password(password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.rollback()
        raise ConflictError("Email already registered")
    db.refresh(user)

    logger.info("user_registered", extra=build_log_context(user_id=user.id))
    return user


def authenticate(db: Session, email: str, password: str) -> User | None:
    """Return the user for valid credentials, None otherwise."""
    user = get_user_by_email(db, email)
    if user is None:
        verify_password(password or "", _DUMMY_HASH)
        return None
    if not verify_password(password or "", user.password_hash):
        logger.info("login_failed", extra=build_log_context(user_id=user.id))
        return None
    return user


def create_session_for_user(user: User) -> str:
    """Session JWT bound to the user's current token version."""
    return create_session_token(user.id, user.token_version)


def complete_onboarding(db: Session, user_id: UUID) -> User:
    """Mark onboarding as done. Idempotent."""
    with atomic(db):
        result = db.execute(
            update(User)
            .where(User.id == user_id)
            .values(onboarding_completed=True)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundOrForbidden("User")

    logger.info("onboarding_completed", extra=build_log_context(user_id=user_id))
    return db.get(User, user_id, populate_existing=True)


def revoke_sessions(db: Session, email: str) -> int:
    """
    Revoke all sessions for a user by bumping their token_version.

    Returns the new token version.
    """
    user = get_user_by_email(db, email)
    if user is None:
        raise NotFoundOrForbidden("User")

    with atomic(db):
        user.token_version += 1

    logger.info("sessions_revoked", extra=build_log_context(user_id=user.id))
    return user.token_version
