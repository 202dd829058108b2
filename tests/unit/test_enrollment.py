"""
Tests for beginning and submitting a creator enrollment.
"""
from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import Mock

import pytest

from src.application.use_cases.begin_enrollment import BeginEnrollmentUseCase
from src.application.use_cases.submit_enrollment import (
    EnrollmentAlreadySubmittedError,
    EnrollmentApplication,
    EnrollmentValidationError,
    SubmitEnrollmentUseCase,
)
from src.domain.entities.profile import CreatorStatus, ProfileEntity


def make_application(**overrides) -> EnrollmentApplication:
    values = dict(
        years_experience="1-3",
        agreed_to_terms=True,
        agreed_to_review=True,
        agreed_to_original=True,
        bio="  Indie dev  ",
        portfolio_url="",
        twitter="@studio",
    )
    values.update(overrides)
    return EnrollmentApplication(**values)


class TestSubmitEnrollment:
    def test_user_moves_to_pending(self, profiles):
        profiles.create_creator("u1", "dev@studio.io", "studio")

        updated = SubmitEnrollmentUseCase(profiles).execute("u1", make_application())

        assert updated.creator_status is CreatorStatus.PENDING
        assert updated.is_creator is True
        assert updated.creator_application_submitted_at is not None
        assert updated.creator_bio == "Indie dev"
        assert updated.portfolio_url is None
        assert updated.twitter == "@studio"
        assert profiles.get("u1").creator_status is CreatorStatus.PENDING

    def test_resubmission_never_regresses(self, profiles):
        profiles.create_creator("u1", "dev@studio.io", "studio")
        uc = SubmitEnrollmentUseCase(profiles)
        first = uc.execute("u1", make_application())

        with pytest.raises(EnrollmentAlreadySubmittedError) as info:
            uc.execute("u1", make_application(years_experience="5+"))

        assert info.value.status is CreatorStatus.PENDING
        stored = profiles.get("u1")
        assert stored.creator_status is CreatorStatus.PENDING
        assert stored.years_experience == "1-3"
        assert stored.creator_application_submitted_at == first.creator_application_submitted_at

    @pytest.mark.parametrize("status", [CreatorStatus.APPROVED, CreatorStatus.REJECTED])
    def test_reviewed_creators_cannot_resubmit(self, profiles, status):
        profiles.create_creator("u1", "dev@studio.io", "studio")
        profiles.update("u1", {"creator_status": status})

        with pytest.raises(EnrollmentAlreadySubmittedError):
            SubmitEnrollmentUseCase(profiles).execute("u1", make_application())
        assert profiles.get("u1").creator_status is status

    def test_non_creator_can_submit_directly(self, profiles):
        profiles.upsert("u2", "new@studio.io")

        updated = SubmitEnrollmentUseCase(profiles).execute("u2", make_application())

        assert updated.is_creator is True
        assert updated.creator_status is CreatorStatus.PENDING
        assert updated.creator_joined_at is not None

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"years_experience": ""}, "Please select your experience level"),
            ({"years_experience": "10+"}, "Please select a valid experience level"),
            ({"agreed_to_terms": False}, "Please agree to all terms to continue"),
            ({"agreed_to_review": False}, "Please agree to all terms to continue"),
            ({"agreed_to_original": False}, "Please agree to all terms to continue"),
        ],
    )
    def test_validation(self, overrides, message):
        repo = Mock()
        with pytest.raises(EnrollmentValidationError, match=message):
            SubmitEnrollmentUseCase(repo).execute("u1", make_application(**overrides))
        repo.update.assert_not_called()

    def test_store_failure_propagates(self):
        repo = Mock()
        repo.get.return_value = ProfileEntity(id="u1", email=None, is_creator=True)
        repo.update.side_effect = RuntimeError("DB update profile failed: timeout")

        with pytest.raises(RuntimeError):
            SubmitEnrollmentUseCase(repo).execute("u1", make_application())

    def test_keeps_original_joined_at(self):
        joined = datetime(2024, 1, 15, tzinfo=UTC)
        repo = Mock()
        repo.get.return_value = ProfileEntity(
            id="u1", email=None, is_creator=True, creator_joined_at=joined
        )

        SubmitEnrollmentUseCase(repo).execute("u1", make_application())

        written = repo.update.call_args.args[1]
        assert written["creator_joined_at"] == joined
        assert written["creator_status"] is CreatorStatus.PENDING


class TestBeginEnrollment:
    def test_non_creator_becomes_user(self, profiles):
        profiles.upsert("u1", "dev@studio.io")

        profile = BeginEnrollmentUseCase(profiles).execute("u1", "dev@studio.io")

        assert profile.is_creator is True
        assert profile.creator_status is CreatorStatus.USER
        assert profile.creator_joined_at is not None

    def test_creates_missing_profile(self, profiles):
        profile = BeginEnrollmentUseCase(profiles).execute("u9", "nine@studio.io")
        assert profile.is_creator is True
        assert profiles.get("u9").email == "nine@studio.io"

    def test_is_idempotent_and_keeps_later_status(self, profiles):
        profiles.create_creator("u1", "dev@studio.io", "studio")
        profiles.update("u1", {"creator_status": CreatorStatus.APPROVED})

        profile = BeginEnrollmentUseCase(profiles).execute("u1", "dev@studio.io")

        assert profile.creator_status is CreatorStatus.APPROVED
