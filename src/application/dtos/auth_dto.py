from __future__ import annotations

from pydantic import BaseModel, Field

from src.domain.entities.profile import CreatorStatus
from src.domain.entities.session import Session, SessionStatus


class SignInBody(BaseModel):
    """Credentials for password sign-in."""
    email: str = Field(..., min_length=3, description="Account email", examples=["dev@studio.io"])
    password: str = Field(..., min_length=1, description="Account password")


class SignUpBody(BaseModel):
    """Creator account registration."""
    username: str = Field(..., min_length=1, max_length=50, description="Public creator name")
    email: str = Field(..., description="Account email", examples=["dev@studio.io"])
    password: str = Field(..., description="Account password (at least 6 characters)")
    bio: str | None = Field(None, max_length=2000, description="Optional creator bio")


class SessionUser(BaseModel):
    """Claims cached in the session."""
    id: str = Field(..., description="User id")
    email: str | None = Field(None, description="Account email")
    is_creator: bool = Field(..., description="Whether the account has started creator enrollment")
    creator_status: CreatorStatus = Field(..., description="Creator lifecycle status")


class SessionResponse(BaseModel):
    """Current session as seen by the dashboard."""
    status: SessionStatus = Field(..., description="Session resolution status")
    user: SessionUser | None = Field(None, description="Cached claims when authenticated")

    @classmethod
    def from_session(cls, session: Session) -> SessionResponse:
        if session.claims is None:
            return cls(status=session.status)
        claims = session.claims
        return cls(
            status=session.status,
            user=SessionUser(
                id=claims.user_id,
                email=claims.email,
                is_creator=claims.is_creator,
                creator_status=claims.creator_status,
            ),
        )


class SignInResponse(SessionResponse):
    """Issued session token plus its claims."""
    access_token: str = Field(..., description="Signed session token, also set as a cookie")
    token_type: str = Field("bearer", description="Token type")
