"""Authentication router - password login and session cookie management."""

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from gifter.core.config import settings
from gifter.core.deps import (
    COOKIE_NAME,
    get_current_session,
    get_current_user,
    get_db,
    require_csrf_header,
)
from gifter.core.rate_limit import AUTH_LIMIT, limiter
from gifter.db.models import User
from gifter.schemas.auth import LoginRequest, MeResponse, RegisterRequest, UserSession
from gifter.services import auth_service

router = APIRouter(prefix="/auth", tags=["Auth"])


def _me(user: User) -> MeResponse:
    return MeResponse(
        user_id=user.id,
        email=user.email,
        username=user.username,
        onboarding_completed=user.onboarding_completed,
        created_at=user.created_at,
    )


def _set_session_cookie(response: Response, user: User) -> None:
    response.set_cookie(
        key=COOKIE_NAME,
        value=auth_service.create_session_for_user(user),
        max_age=settings.JWT_EXPIRES_HOURS * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path="/",
    )


# =============================================================================
# Credentials
# =============================================================================

@router.post("/register", response_model=MeResponse, status_code=201)
@limiter.limit(AUTH_LIMIT)
def register(
    request: Request,
    response: Response,
    data: RegisterRequest,
    db: Session = Depends(get_db),
):
    """Create an account and start a session."""
    user = auth_service.register_user(db, data.email, data.username, data.password)
    _set_session_cookie(response, user)
    return _me(user)


@router.post("/login", response_model=MeResponse)
@limiter.limit(AUTH_LIMIT)
def login(
    request: Request,
    response: Response,
    data: LoginRequest,
    db: Session = Depends(get_db),
):
    """
    Check email + password and set the session cookie.

    Unknown email and wrong password get the same 401.
    """
    user = auth_service.authenticate(db, data.email, data.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    _set_session_cookie(response, user)
    return _me(user)


# =============================================================================
# Session Endpoints
# =============================================================================

@router.get("/me", response_model=MeResponse)
def get_me(user: User = Depends(get_current_user)):
    """
    Get current authenticated user info.

    Used by the frontend to decide between onboarding and dashboard.
    """
    return _me(user)


@router.post(
    "/onboarding-complete",
    response_model=MeResponse,
    dependencies=[Depends(require_csrf_header)],
)
def complete_onboarding(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    user = auth_service.complete_onboarding(db, session.user_id)
    return _me(user)


@router.post("/logout", dependencies=[Depends(require_csrf_header)])
def logout(
    response: Response,
    session: UserSession = Depends(get_current_session),
):
    """
    Clear session cookie.

    Requires X-Requested-With header for CSRF protection.
    """
    response.delete_cookie(COOKIE_NAME, path="/")
    return {"status": "logged_out"}
