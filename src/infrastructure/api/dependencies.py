from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from src.domain.entities.session import Session, SessionClaims
from src.infrastructure.auth.session_provider import SessionProvider, SessionSigner
from src.infrastructure.config import Settings, get_settings
from src.infrastructure.database.repositories.game_repository import GameRepository
from src.infrastructure.database.repositories.profile_repository import ProfileRepository
from src.infrastructure.database.supabase_client import SupabaseAuthAdapter, get_supabase_client
from src.infrastructure.storage.supabase_storage import SupabaseStorage


def get_auth_adapter() -> SupabaseAuthAdapter:
    return SupabaseAuthAdapter()


def get_session_signer(settings: Annotated[Settings, Depends(get_settings)]) -> SessionSigner:
    return SessionSigner(settings.session_secret, settings.session_max_age_seconds)


def get_session_provider(
    settings: Annotated[Settings, Depends(get_settings)],
    signer: Annotated[SessionSigner, Depends(get_session_signer)],
) -> SessionProvider:
    return SessionProvider(signer, settings.session_cookie_name, settings.session_cookie_secure)


def get_session(
    request: Request,
    provider: Annotated[SessionProvider, Depends(get_session_provider)],
) -> Session:
    return provider.get_session(request)


def get_current_claims(session: Annotated[Session, Depends(get_session)]) -> SessionClaims:
    if session.claims is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not signed in")
    return session.claims


def get_storage() -> SupabaseStorage:
    return SupabaseStorage(get_supabase_client())


def get_profile_repo() -> ProfileRepository:
    return ProfileRepository(get_supabase_client())


def get_game_repo() -> GameRepository:
    return GameRepository(get_supabase_client())
