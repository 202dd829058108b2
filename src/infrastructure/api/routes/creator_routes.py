from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from src.application.dtos.creator_dto import CreatorProfileResponse
from src.application.use_cases.begin_enrollment import BeginEnrollmentUseCase
from src.domain.entities.session import SessionClaims
from src.infrastructure.api.dependencies import get_current_claims, get_profile_repo, get_session_provider
from src.infrastructure.auth.session_provider import SessionProvider
from src.infrastructure.database.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/creators",
    tags=["Creators"],
    responses={401: {"description": "Unauthorized - Not signed in"}},
)


@router.post(
    "/enroll",
    response_model=CreatorProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="Begin Creator Enrollment",
    description="""
    Mark the signed-in account as an enrolling creator.

    Sets `is_creator=true` and `creator_status=user`, then re-issues the session
    so the dashboard sends the account to the enrollment form. Calling it again
    is a no-op and never moves a creator back from a later status.
    """,
)
def begin_enrollment(
    response: Response,
    claims: SessionClaims = Depends(get_current_claims),
    profiles: ProfileRepository = Depends(get_profile_repo),
    sessions: SessionProvider = Depends(get_session_provider),
):
    try:
        profile = BeginEnrollmentUseCase(profiles).execute(claims.user_id, claims.email)
    except RuntimeError as exc:
        logger.exception("creators.enroll.error user_id=%s", claims.user_id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to start enrollment") from exc
    sessions.issue(response, profile)
    return CreatorProfileResponse.from_entity(profile)


@router.get("/me", response_model=CreatorProfileResponse, summary="Get Creator Profile")
def get_me(
    claims: SessionClaims = Depends(get_current_claims),
    profiles: ProfileRepository = Depends(get_profile_repo),
):
    """Profile as currently stored, which may be newer than the session's cached flags."""
    profile = profiles.get(claims.user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return CreatorProfileResponse.from_entity(profile)
