from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.domain.entities.profile import CreatorStatus, ProfileEntity


class SessionStatus(str, Enum):
    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class SessionClaims:
    """Profile flags cached in the signed session at sign-in time."""

    user_id: str
    email: str | None
    is_creator: bool
    creator_status: CreatorStatus

    @classmethod
    def from_profile(cls, profile: ProfileEntity) -> SessionClaims:
        return cls(
            user_id=profile.id,
            email=profile.email,
            is_creator=profile.is_creator,
            creator_status=profile.creator_status,
        )


@dataclass(frozen=True)
class Session:
    status: SessionStatus
    claims: SessionClaims | None = None

    @classmethod
    def loading(cls) -> Session:
        return cls(status=SessionStatus.LOADING)

    @classmethod
    def unauthenticated(cls) -> Session:
        return cls(status=SessionStatus.UNAUTHENTICATED)

    @classmethod
    def authenticated(cls, claims: SessionClaims) -> Session:
        return cls(status=SessionStatus.AUTHENTICATED, claims=claims)
