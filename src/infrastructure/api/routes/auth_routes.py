from __future__ import annotations

import logging
import re

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import RedirectResponse

from src.application.dtos.auth_dto import SessionResponse, SignInBody, SignInResponse, SignUpBody
from src.application.dtos.common_dto import BlockingScreenResponse, SuccessResponse
from src.domain.entities.profile import ProfileEntity
from src.domain.entities.session import Session, SessionClaims, SessionStatus
from src.domain.services.admission_service import OVERVIEW_PATH
from src.infrastructure.api.dependencies import (
    get_auth_adapter,
    get_current_claims,
    get_profile_repo,
    get_session,
    get_session_provider,
)
from src.infrastructure.auth.session_provider import SessionProvider
from src.infrastructure.database.repositories.profile_repository import ProfileRepository
from src.infrastructure.database.supabase_client import SupabaseAuthAdapter

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        401: {"description": "Unauthorized - Invalid credentials or missing session"},
        422: {"description": "Validation Error - Invalid request format"},
    },
)


def _signed_in(token: str, profile: ProfileEntity) -> SignInResponse:
    session = SessionResponse.from_session(Session.authenticated(SessionClaims.from_profile(profile)))
    return SignInResponse(status=session.status, user=session.user, access_token=token)


@router.get(
    "/signin",
    response_model=BlockingScreenResponse,
    summary="Sign-in Page",
    description="Sign-in screen. An already signed-in account is sent to the dashboard home.",
)
def sign_in_page(session: Session = Depends(get_session)):
    if session.status is SessionStatus.AUTHENTICATED:
        return RedirectResponse(url=OVERVIEW_PATH, status_code=status.HTTP_303_SEE_OTHER)
    return BlockingScreenResponse(screen="signin")


@router.post(
    "/signin",
    response_model=SignInResponse,
    status_code=status.HTTP_200_OK,
    summary="Sign In",
    description="""
    Sign in with email and password.

    This endpoint:
    - Verifies the credentials with Supabase Auth
    - Ensures the user profile exists
    - Issues a session carrying the profile's creator flags (JSON body and cookie)

    The creator flags are cached in the session; use `/auth/refresh` to pick up
    changes made after sign-in.
    """,
)
def sign_in(
    body: SignInBody,
    response: Response,
    auth: SupabaseAuthAdapter = Depends(get_auth_adapter),
    profiles: ProfileRepository = Depends(get_profile_repo),
    sessions: SessionProvider = Depends(get_session_provider),
):
    """Validate credentials and start a session."""
    try:
        user = auth.sign_in_with_password(body.email.strip(), body.password)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password") from exc
    try:
        profile = profiles.get(user.id) or profiles.upsert(user.id, user.email)
    except RuntimeError as exc:
        logger.exception("auth.signin.profile_error user_id=%s", user.id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Could not load profile") from exc
    token = sessions.issue(response, profile)
    logger.info("auth.signin user_id=%s is_creator=%s", profile.id, profile.is_creator)
    return _signed_in(token, profile)


@router.post(
    "/signup",
    response_model=SignInResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Creator Sign Up",
    description="""
    Register a creator account.

    Creates the auth account and a creator profile in the `user` state (enrolled,
    no application submitted yet), then signs the new account in.

    **Request Requirements:**
    - Username, email and password are required
    - Email must be valid
    - Password must be at least 6 characters
    """,
    responses={400: {"description": "Bad Request - Invalid registration data"}},
)
def sign_up(
    body: SignUpBody,
    response: Response,
    auth: SupabaseAuthAdapter = Depends(get_auth_adapter),
    profiles: ProfileRepository = Depends(get_profile_repo),
    sessions: SessionProvider = Depends(get_session_provider),
):
    """Create a creator account and start a session."""
    username = body.username.strip()
    email = body.email.strip()
    if not username or not email or not body.password:
        raise HTTPException(status_code=400, detail="Please fill in all required fields")
    if not EMAIL_RE.match(email):
        raise HTTPException(status_code=400, detail="Please enter a valid email address")
    if len(body.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail="Password must be at least 6 characters")

    try:
        user = auth.sign_up(email, body.password, username)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    try:
        profile = profiles.create_creator(user.id, user.email, username, (body.bio or "").strip() or None)
    except RuntimeError as exc:
        logger.exception("auth.signup.profile_error user_id=%s", user.id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Could not create profile") from exc
    token = sessions.issue(response, profile)
    logger.info("auth.signup user_id=%s", profile.id)
    return _signed_in(token, profile)


@router.get(
    "/session",
    response_model=SessionResponse,
    summary="Current Session",
    description="Return the session status and the creator flags cached in it.",
)
def get_current_session(session: Session = Depends(get_session)):
    return SessionResponse.from_session(session)


@router.post(
    "/refresh",
    response_model=SignInResponse,
    summary="Refresh Session",
    description="""
    Re-read the profile and re-issue the session.

    Picks up creator status changes made outside this session, e.g. an approval
    by a reviewer.
    """,
)
def refresh_session(
    response: Response,
    claims: SessionClaims = Depends(get_current_claims),
    profiles: ProfileRepository = Depends(get_profile_repo),
    sessions: SessionProvider = Depends(get_session_provider),
):
    try:
        profile = profiles.get(claims.user_id)
    except RuntimeError as exc:
        logger.exception("auth.refresh.profile_error user_id=%s", claims.user_id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Could not load profile") from exc
    if profile is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Profile no longer exists")
    token = sessions.issue(response, profile)
    if profile.creator_status is not claims.creator_status or profile.is_creator != claims.is_creator:
        logger.info(
            "auth.refresh.changed user_id=%s status=%s->%s",
            profile.id,
            claims.creator_status.value,
            profile.creator_status.value,
        )
    return _signed_in(token, profile)


@router.post("/signout", response_model=SuccessResponse, summary="Sign Out")
def sign_out(response: Response, sessions: SessionProvider = Depends(get_session_provider)):
    sessions.clear(response)
    return SuccessResponse(message="Signed out")
