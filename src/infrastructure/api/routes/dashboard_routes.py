from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile, status
from fastapi.responses import RedirectResponse

from src.application.dtos.common_dto import ErrorResponse
from src.application.dtos.creator_dto import (
    CreatorProfileResponse,
    EnrollmentBody,
    EnrollmentFormResponse,
    EnrollmentSubmittedResponse,
    StatusScreenResponse,
    UpdateProfileBody,
)
from src.application.dtos.game_dto import (
    GameItem,
    ListGamesResponse,
    OverviewResponse,
    UpdateGameBody,
    UploadFormResponse,
    UploadGameResponse,
)
from src.application.use_cases.list_games import GetOverviewUseCase, ListGamesUseCase
from src.application.use_cases.submit_enrollment import (
    EXPERIENCE_LEVELS,
    EnrollmentAlreadySubmittedError,
    EnrollmentApplication,
    EnrollmentValidationError,
    SubmitEnrollmentUseCase,
)
from src.application.use_cases.update_game import GameNotFoundError, UpdateGameUseCase
from src.application.use_cases.upload_game import (
    AGE_RATINGS,
    GAME_CATEGORIES,
    MAX_UPLOAD_BYTES,
    GameDraft,
    GameUploadError,
    UploadGameUseCase,
    parse_tags,
)
from src.domain.entities.game import GameEntity
from src.domain.entities.profile import ProfileEntity
from src.domain.entities.session import SessionClaims
from src.domain.services.admission_service import OVERVIEW_PATH
from src.infrastructure.api.dependencies import (
    get_game_repo,
    get_profile_repo,
    get_session_provider,
    get_storage,
)
from src.infrastructure.api.page_guard import dashboard_page
from src.infrastructure.auth.session_provider import SessionProvider
from src.infrastructure.database.repositories.game_repository import GameRepository
from src.infrastructure.database.repositories.profile_repository import ProfileRepository
from src.infrastructure.storage.supabase_storage import SupabaseStorage

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/dashboard",
    tags=["Creator Dashboard"],
    responses={
        303: {"description": "See Other - The session's creator status sends the request to another page"},
        403: {"description": "Forbidden - The account is not a creator"},
        422: {"description": "Validation Error - Invalid request format"},
    },
)


def _game_item(game: GameEntity, storage: SupabaseStorage) -> GameItem:
    return GameItem.from_entity(
        game,
        file_url=storage.get_public_url(game.file_path) if game.file_path else None,
        thumbnail_url=storage.get_public_url(game.thumbnail_path) if game.thumbnail_path else None,
    )


def _load_profile(profiles: ProfileRepository, user_id: str) -> ProfileEntity:
    profile = profiles.get(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.get("", include_in_schema=False)
def dashboard_root():
    return RedirectResponse(url=OVERVIEW_PATH, status_code=status.HTTP_308_PERMANENT_REDIRECT)


@router.get(
    "/overview",
    response_model=OverviewResponse,
    summary="Dashboard Overview",
    description="Totals across all of the creator's games and the three most recent games.",
)
def overview(
    claims: SessionClaims = Depends(dashboard_page()),
    games: GameRepository = Depends(get_game_repo),
    storage: SupabaseStorage = Depends(get_storage),
):
    stats, recent = GetOverviewUseCase(games).execute(claims.user_id)
    return OverviewResponse(
        total_games=stats.total_games,
        total_plays=stats.total_plays,
        total_downloads=stats.total_downloads,
        recent_games=[_game_item(g, storage) for g in recent],
    )


@router.get(
    "/games",
    response_model=ListGamesResponse,
    summary="List Games",
    description="""
    List the creator's games, newest first.

    **Filters:**
    - `q`: case-insensitive match on title or description
    - `status`: review status, or `all`
    """,
)
def list_games(
    q: str | None = Query(None, max_length=200, description="Search text"),
    review_status: Literal["all", "pending", "approved", "rejected", "published"] = Query(
        "all", alias="status", description="Review status filter"
    ),
    claims: SessionClaims = Depends(dashboard_page()),
    games: GameRepository = Depends(get_game_repo),
    storage: SupabaseStorage = Depends(get_storage),
):
    found = ListGamesUseCase(games).execute(claims.user_id, query=q, status=review_status)
    return ListGamesResponse(games=[_game_item(g, storage) for g in found])


@router.patch(
    "/games/{game_id}",
    response_model=UploadGameResponse,
    summary="Update Game Metadata",
    responses={
        400: {"description": "Bad Request - Invalid metadata"},
        404: {"description": "Not Found - Game does not exist or belongs to another creator"},
    },
)
def update_game(
    game_id: str,
    body: UpdateGameBody,
    claims: SessionClaims = Depends(dashboard_page()),
    games: GameRepository = Depends(get_game_repo),
    storage: SupabaseStorage = Depends(get_storage),
):
    try:
        game = UpdateGameUseCase(games).execute(claims.user_id, game_id, body.model_dump(exclude_none=True))
    except GameNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc
    except GameUploadError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RuntimeError as exc:
        logger.exception("dashboard.games.update_error game_id=%s", game_id)
        raise HTTPException(status_code=502, detail="Failed to update game") from exc
    return UploadGameResponse(game=_game_item(game, storage))


@router.get("/upload", response_model=UploadFormResponse, summary="Upload Form")
def upload_form(claims: SessionClaims = Depends(dashboard_page())):
    return UploadFormResponse(
        categories=list(GAME_CATEGORIES),
        age_ratings=list(AGE_RATINGS),
        max_upload_bytes=MAX_UPLOAD_BYTES,
    )


@router.post(
    "/upload",
    response_model=UploadGameResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Game",
    description="""
    Upload a new game.

    **Files:**
    - `game_file`: the Godot `.pck` binary
    - `thumbnail`: any image format Pillow can read, stored as PNG

    **Maximum file size**: 50MB per file

    The game is created in review (`pending`) and inactive.
    """,
    responses={400: {"description": "Bad Request - Missing fields or invalid files"}},
)
async def upload_game(
    title: str = Form(""),
    description: str = Form(""),
    category: str = Form(""),
    tags: str = Form(""),
    version: str = Form("1.0.0"),
    age_rating: str = Form(""),
    game_file: UploadFile | None = File(None, description="Game binary (.pck)"),
    thumbnail: UploadFile | None = File(None, description="Thumbnail image"),
    claims: SessionClaims = Depends(dashboard_page()),
    games: GameRepository = Depends(get_game_repo),
    storage: SupabaseStorage = Depends(get_storage),
):
    draft = GameDraft(
        title=title,
        description=description,
        category=category,
        version=version.strip() or "1.0.0",
        tags=parse_tags(tags),
        age_rating=age_rating or None,
    )
    game_bytes = await game_file.read() if game_file else None
    thumbnail_bytes = await thumbnail.read() if thumbnail else None

    uc = UploadGameUseCase(storage=storage, game_repo=games)
    try:
        game = uc.execute(
            claims.user_id,
            draft,
            game_filename=game_file.filename if game_file else None,
            game_bytes=game_bytes,
            thumbnail_bytes=thumbnail_bytes,
            thumbnail_content_type=thumbnail.content_type if thumbnail else None,
        )
    except GameUploadError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RuntimeError as exc:
        logger.exception("dashboard.upload.error creator_id=%s", claims.user_id)
        raise HTTPException(status_code=502, detail="Failed to upload game. Please try again.") from exc
    return UploadGameResponse(game=_game_item(game, storage))


@router.get("/creator-enrollment", response_model=EnrollmentFormResponse, summary="Enrollment Form")
def enrollment_form(
    claims: SessionClaims = Depends(dashboard_page()),
    profiles: ProfileRepository = Depends(get_profile_repo),
):
    return EnrollmentFormResponse(
        experience_levels=list(EXPERIENCE_LEVELS),
        profile=CreatorProfileResponse.from_entity(_load_profile(profiles, claims.user_id)),
    )


@router.post(
    "/creator-enrollment",
    response_model=EnrollmentSubmittedResponse,
    summary="Submit Creator Application",
    description="""
    Submit the creator application, moving the account from `user` to `pending`.

    **Request Requirements:**
    - An experience level (0-1, 1-3, 3-5 or 5+)
    - All three agreements accepted

    The session is re-issued with the new status. An application can only be
    submitted once.
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request - Incomplete application"},
        409: {"model": ErrorResponse, "description": "Conflict - Application already submitted"},
        502: {"model": ErrorResponse, "description": "Bad Gateway - Profile store write failed"},
    },
)
def submit_enrollment(
    body: EnrollmentBody,
    response: Response,
    claims: SessionClaims = Depends(dashboard_page()),
    profiles: ProfileRepository = Depends(get_profile_repo),
    sessions: SessionProvider = Depends(get_session_provider),
):
    application = EnrollmentApplication(
        years_experience=body.years_experience,
        agreed_to_terms=body.agreed_to_terms,
        agreed_to_review=body.agreed_to_review,
        agreed_to_original=body.agreed_to_original,
        bio=body.bio,
        portfolio_url=body.portfolio_url,
        twitter=body.twitter,
        youtube=body.youtube,
        itchio=body.itchio,
    )
    try:
        profile = SubmitEnrollmentUseCase(profiles).execute(claims.user_id, application)
    except EnrollmentValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except EnrollmentAlreadySubmittedError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except RuntimeError as exc:
        logger.exception("dashboard.enrollment.error user_id=%s", claims.user_id)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to submit application. Please try again.",
        ) from exc

    token = sessions.issue(response, profile)
    return EnrollmentSubmittedResponse(
        profile=CreatorProfileResponse.from_entity(profile),
        access_token=token,
        next_url=OVERVIEW_PATH,
    )


@router.get("/pending-approval", response_model=StatusScreenResponse, summary="Application Pending")
def pending_approval(
    claims: SessionClaims = Depends(dashboard_page()),
    profiles: ProfileRepository = Depends(get_profile_repo),
):
    profile = profiles.get(claims.user_id)
    return StatusScreenResponse(
        creator_status=claims.creator_status,
        email=claims.email,
        submitted_at=profile.creator_application_submitted_at if profile else None,
    )


@router.get("/rejected", response_model=StatusScreenResponse, summary="Application Not Approved")
def rejected(claims: SessionClaims = Depends(dashboard_page())):
    return StatusScreenResponse(creator_status=claims.creator_status, email=claims.email)


@router.get("/settings", response_model=CreatorProfileResponse, summary="Profile Settings")
def get_settings_page(
    claims: SessionClaims = Depends(dashboard_page()),
    profiles: ProfileRepository = Depends(get_profile_repo),
):
    return CreatorProfileResponse.from_entity(_load_profile(profiles, claims.user_id))


@router.patch(
    "/settings",
    response_model=CreatorProfileResponse,
    summary="Update Profile Settings",
    description="""
    Update the creator's public profile.

    Only username, bio and social links can be changed here; the email address
    is managed by auth. Omitted fields are left unchanged.
    """,
    responses={400: {"description": "Bad Request - Invalid username"}},
)
def update_settings(
    body: UpdateProfileBody,
    claims: SessionClaims = Depends(dashboard_page()),
    profiles: ProfileRepository = Depends(get_profile_repo),
):
    updates = body.model_dump(exclude_unset=True)
    if "username" in updates and not (updates["username"] or "").strip():
        raise HTTPException(status_code=400, detail="Username cannot be empty")
    updates = {k: (v.strip() or None) if isinstance(v, str) else v for k, v in updates.items()}
    try:
        profile = profiles.update(claims.user_id, updates)
    except RuntimeError as exc:
        logger.exception("dashboard.settings.error user_id=%s", claims.user_id)
        raise HTTPException(status_code=502, detail="Failed to update profile.") from exc
    return CreatorProfileResponse.from_entity(profile)
