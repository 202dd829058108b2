from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from src.domain.entities.profile import CreatorStatus, ProfileEntity


class CreatorProfileResponse(BaseModel):
    """Creator profile as stored in the profile store."""
    id: str = Field(..., description="Unique identifier of the user")
    email: str | None = Field(None, description="Email address of the user")
    username: str | None = Field(None, description="Public creator name")
    is_creator: bool = Field(..., description="Whether creator enrollment has begun")
    creator_status: CreatorStatus = Field(..., description="Creator lifecycle status")
    creator_bio: str | None = None
    years_experience: str | None = None
    portfolio_url: str | None = None
    twitter: str | None = None
    youtube: str | None = None
    itchio: str | None = None
    creator_application_submitted_at: datetime | None = None
    creator_joined_at: datetime | None = None

    @classmethod
    def from_entity(cls, profile: ProfileEntity) -> CreatorProfileResponse:
        return cls(
            id=profile.id,
            email=profile.email,
            username=profile.username,
            is_creator=profile.is_creator,
            creator_status=profile.creator_status,
            creator_bio=profile.creator_bio,
            years_experience=profile.years_experience,
            portfolio_url=profile.portfolio_url,
            twitter=profile.twitter,
            youtube=profile.youtube,
            itchio=profile.itchio,
            creator_application_submitted_at=profile.creator_application_submitted_at,
            creator_joined_at=profile.creator_joined_at,
        )


class EnrollmentBody(BaseModel):
    """Creator application form."""
    years_experience: str = Field("", description="One of 0-1, 1-3, 3-5, 5+", examples=["1-3"])
    agreed_to_terms: bool = Field(False, description="Accepted the creator terms")
    agreed_to_review: bool = Field(False, description="Accepted that games are reviewed")
    agreed_to_original: bool = Field(False, description="Confirmed games are original content")
    bio: str | None = Field(None, max_length=2000)
    portfolio_url: str | None = Field(None, max_length=500)
    twitter: str | None = Field(None, max_length=100)
    youtube: str | None = Field(None, max_length=500)
    itchio: str | None = Field(None, max_length=500)


class EnrollmentFormResponse(BaseModel):
    """Options for rendering the enrollment form."""
    experience_levels: list[str]
    profile: CreatorProfileResponse


class EnrollmentSubmittedResponse(BaseModel):
    """Result of a submitted application; the session token carries the new status."""
    profile: CreatorProfileResponse
    access_token: str = Field(..., description="Re-issued session token")
    next_url: str = Field(..., description="Where the dashboard should navigate next")


class StatusScreenResponse(BaseModel):
    """Payload of the pending-approval and rejected screens."""
    creator_status: CreatorStatus
    email: str | None = None
    submitted_at: datetime | None = None


class UpdateProfileBody(BaseModel):
    """Editable profile settings. Email is managed by auth and never updated here."""
    username: str | None = Field(None, min_length=1, max_length=50)
    creator_bio: str | None = Field(None, max_length=2000)
    twitter: str | None = Field(None, max_length=100)
    youtube: str | None = Field(None, max_length=500)
    itchio: str | None = Field(None, max_length=500)
