from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from src.domain.entities.profile import CreatorStatus, ProfileEntity
from src.infrastructure.database.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

EXPERIENCE_LEVELS = ("0-1", "1-3", "3-5", "5+")


class EnrollmentValidationError(ValueError):
    pass


class EnrollmentAlreadySubmittedError(ValueError):
    def __init__(self, status: CreatorStatus) -> None:
        super().__init__(f"Creator application already submitted (status: {status.value})")
        self.status = status


@dataclass(frozen=True)
class EnrollmentApplication:
    years_experience: str
    agreed_to_terms: bool
    agreed_to_review: bool
    agreed_to_original: bool
    bio: str | None = None
    portfolio_url: str | None = None
    twitter: str | None = None
    youtube: str | None = None
    itchio: str | None = None


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass
class SubmitEnrollmentUseCase:
    profiles: ProfileRepository

    @staticmethod
    def validate(application: EnrollmentApplication) -> None:
        if not application.years_experience:
            raise EnrollmentValidationError("Please select your experience level")
        if application.years_experience not in EXPERIENCE_LEVELS:
            raise EnrollmentValidationError("Please select a valid experience level")
        if not (
            application.agreed_to_terms
            and application.agreed_to_review
            and application.agreed_to_original
        ):
            raise EnrollmentValidationError("Please agree to all terms to continue")

    def execute(self, user_id: str, application: EnrollmentApplication) -> ProfileEntity:
        """
        Submit a creator application: ``user -> pending``.

        The only transition this service writes. An application can be submitted
        once; a creator whose status is past ``user`` is rejected with
        EnrollmentAlreadySubmittedError and the stored status is left untouched.
        Store failures surface as RuntimeError.
        """
        self.validate(application)

        profile = self.profiles.get(user_id)
        if profile is None:
            raise RuntimeError(f"Profile {user_id} not found")
        if profile.is_creator and profile.creator_status is not CreatorStatus.USER:
            raise EnrollmentAlreadySubmittedError(profile.creator_status)

        now = datetime.now(UTC)
        updated = self.profiles.update(
            user_id,
            {
                "creator_bio": _blank_to_none(application.bio),
                "years_experience": application.years_experience,
                "portfolio_url": _blank_to_none(application.portfolio_url),
                "twitter": _blank_to_none(application.twitter),
                "youtube": _blank_to_none(application.youtube),
                "itchio": _blank_to_none(application.itchio),
                "creator_status": CreatorStatus.PENDING,
                "is_creator": True,
                "creator_application_submitted_at": profile.creator_application_submitted_at or now,
                "creator_joined_at": profile.creator_joined_at or now,
            },
        )
        logger.info("enrollment.submitted user_id=%s experience=%s", user_id, application.years_experience)
        return updated
