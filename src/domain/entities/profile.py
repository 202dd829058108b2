from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class CreatorStatus(str, Enum):
    """Creator lifecycle status stored in ``profiles.creator_status``."""

    USER = "user"  # enrolled flag set, no application submitted yet
    PENDING = "pending"  # application submitted, awaiting review
    APPROVED = "approved"  # full dashboard access
    REJECTED = "rejected"  # terminal

    @classmethod
    def parse(cls, value: str | None) -> CreatorStatus:
        if not value:
            return cls.USER
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.USER


@dataclass(frozen=True)
class ProfileEntity:
    id: str  # user id from Supabase auth
    email: str | None
    created_at: datetime | None = None
    username: str | None = None
    is_creator: bool = False
    creator_status: CreatorStatus = CreatorStatus.USER
    creator_bio: str | None = None
    years_experience: str | None = None
    portfolio_url: str | None = None
    twitter: str | None = None
    youtube: str | None = None
    itchio: str | None = None
    # Set once, never cleared
    creator_application_submitted_at: datetime | None = None
    creator_joined_at: datetime | None = None
