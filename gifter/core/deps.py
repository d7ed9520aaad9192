"""FastAPI dependencies for authentication and database access."""

from typing import Generator

from fastapi import Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from gifter.core.security import decode_session_token
from gifter.db.models import User
from gifter.db.session import SessionLocal
from gifter.schemas.auth import TokenPayload, UserSession


# Cookie and header names
COOKIE_NAME = "gifter_session"
CSRF_HEADER = "X-Requested-With"
CSRF_HEADER_VALUE = "XMLHttpRequest"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Get authenticated user from session cookie.

    Validates:
    - Session cookie exists
    - JWT is valid and not expired
    - User exists
    - Token version matches (for revocation support)

    Raises:
        HTTPException 401: Authentication failed
    """
    token = request.cookies.get(COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = TokenPayload.model_validate(decode_session_token(token))
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid session")

    user = db.execute(
        select(User).where(User.id == payload.sub)
    ).scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")

    if user.token_version != payload.token_version:
        raise HTTPException(status_code=401, detail="Session revoked")

    return user


def get_current_session(
    request: Request,
    db: Session = Depends(get_db),
) -> UserSession:
    """
    Session context for authenticated requests.

    This is the PRIMARY auth dependency: routers take user_id from here and
    pass it to every service call.
    """
    user = get_current_user(request, db)
    return UserSession(
        user_id=user.id,
        email=user.email,
        username=user.username,
        onboarding_completed=user.onboarding_completed,
    )


def require_csrf_header(request: Request) -> None:
    """
    Verify CSRF header on mutations.

    Apply to state-changing endpoints (POST, PUT, PATCH, DELETE).

    Raises:
        HTTPException 403: Missing or invalid CSRF header
    """
    if request.headers.get(CSRF_HEADER) != CSRF_HEADER_VALUE:
        raise HTTPException(
            status_code=403,
            detail=f"Missing CSRF header. Include '{CSRF_HEADER}: {CSRF_HEADER_VALUE}'",
        )
