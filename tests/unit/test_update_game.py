from datetime import UTC, datetime

import pytest

from src.application.use_cases.update_game import GameNotFoundError, UpdateGameUseCase
from src.application.use_cases.upload_game import GameUploadError
from src.domain.entities.game import GameEntity
from src.infrastructure.database.repositories.game_repository import GameRepository


@pytest.fixture
def repo():
    repo = GameRepository(None)
    repo.create(
        GameEntity(
            id="g1",
            creator_id="c1",
            title="Cookie Run",
            description="Collect cookies",
            category="Arcade",
            created_at=datetime(2024, 2, 1, tzinfo=UTC),
        )
    )
    return repo


def test_title_and_description_are_trimmed(repo):
    updated = UpdateGameUseCase(repo).execute(
        "c1", "g1", {"title": "  Cookie Run 2 ", "description": "\tMore cookies\n"}
    )

    assert updated.title == "Cookie Run 2"
    assert updated.description == "More cookies"
    assert repo.get("g1").title == "Cookie Run 2"
    assert updated.last_updated_at is not None


def test_blank_title_is_rejected(repo):
    with pytest.raises(GameUploadError, match="required fields"):
        UpdateGameUseCase(repo).execute("c1", "g1", {"title": "   "})
    assert repo.get("g1").title == "Cookie Run"


def test_unset_fields_are_left_alone(repo):
    updated = UpdateGameUseCase(repo).execute("c1", "g1", {"title": None, "tags": ["runner"]})
    assert updated.title == "Cookie Run"
    assert updated.tags == ["runner"]


def test_other_creators_game_is_not_found(repo):
    with pytest.raises(GameNotFoundError):
        UpdateGameUseCase(repo).execute("c2", "g1", {"title": "Mine"})
