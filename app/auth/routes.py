# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Admin sign-in through Supabase Auth (email/password).
#
#   POST /auth/login    -> access + refresh tokens
#   POST /auth/logout   -> revoke the session
#   GET  /auth/session  -> {authenticated, user}
#   GET  /auth/me       -> current admin
# =============================================================================

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials

from app.auth.dependencies import get_current_user, get_current_user_optional, security
from app.auth.models import AuthUser, LoginRequest, LoginResponse, SessionStatus
from app.dependencies import AuthClientDep, StoreDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, auth_client: AuthClientDep) -> LoginResponse:
    """
    Sign in with email and password.

    Raises:
        401: If the credentials are rejected
    """
    try:
        response = auth_client.auth.sign_in_with_password(
            {"email": request.email, "password": request.password}
        )
    except Exception as e:
        logger.warning(f"Sign-in failed for {request.email}: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid login credentials",
        )

    session = response.session
    if session is None or response.user is None:
        logger.warning(f"Sign-in for {request.email} returned no session")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid login credentials",
        )

    logger.info(f"Admin signed in: {response.user.id}")
    return LoginResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_at=session.expires_at,
        user=AuthUser(id=response.user.id, email=response.user.email, role=response.user.role),
    )


@router.post("/logout")
async def logout(
    store: StoreDep,
    user: AuthUser = Depends(get_current_user),
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Revoke the caller's session.

    The client drops its tokens either way; `revoked` reports whether the
    auth service confirmed it.
    """
    revoked = True
    try:
        store.raw.auth.admin.sign_out(credentials.credentials)
    except Exception as e:
        revoked = False
        logger.warning(f"Could not revoke session for {user.id}: {e}")

    logger.info(f"Admin signed out: {user.id}")
    return {"success": True, "revoked": revoked}


@router.get("/session", response_model=SessionStatus)
async def session_status(
    user: AuthUser | None = Depends(get_current_user_optional),
) -> SessionStatus:
    """Report whether the bearer token (if any) is a valid session."""
    return SessionStatus(authenticated=user is not None, user=user)


@router.get("/me", response_model=AuthUser)
async def get_current_user_info(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    """
    The signed-in admin.

    Raises:
        401: If not authenticated
    """
    return user
