from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from src.domain.entities.profile import CreatorStatus, ProfileEntity
from src.infrastructure.database.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)


@dataclass
class BeginEnrollmentUseCase:
    profiles: ProfileRepository

    def execute(self, user_id: str, email: str | None) -> ProfileEntity:
        """
        Mark an account as an enrolling creator (``is_creator=True``, status ``user``).

        Idempotent: an account that is already a creator is returned unchanged,
        whatever its status.
        """
        profile = self.profiles.get(user_id) or self.profiles.upsert(user_id, email)
        if profile.is_creator:
            return profile

        updated = self.profiles.update(
            user_id,
            {
                "is_creator": True,
                "creator_status": CreatorStatus.USER,
                "creator_joined_at": profile.creator_joined_at or datetime.now(UTC),
            },
        )
        logger.info("enrollment.begin user_id=%s", user_id)
        return updated
