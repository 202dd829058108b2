from datetime import UTC, datetime, timedelta

import pytest

from src.application.use_cases.list_games import GetOverviewUseCase, filter_games, summarize
from src.domain.entities.game import GameEntity, ReviewStatus
from src.infrastructure.database.repositories.game_repository import GameRepository

NOW = datetime(2024, 2, 1, tzinfo=UTC)


def game(game_id, title, description="", status=ReviewStatus.PENDING, plays=0, downloads=0, age_days=0):
    return GameEntity(
        id=game_id,
        creator_id="c1",
        title=title,
        description=description,
        category="Arcade",
        created_at=NOW - timedelta(days=age_days),
        review_status=status,
        play_count=plays,
        download_count=downloads,
    )


GAMES = [
    game("g1", "Cookie Run", "Endless runner", ReviewStatus.PUBLISHED, plays=1200, downloads=300),
    game("g2", "Jar Puzzle", "Match three cookies", ReviewStatus.PENDING, plays=10, downloads=4),
    game("g3", "Crumbs", None, ReviewStatus.REJECTED),
]


def test_search_matches_title_or_description_case_insensitive():
    assert [g.id for g in filter_games(GAMES, "COOKIE")] == ["g1", "g2"]
    assert [g.id for g in filter_games(GAMES, "runner")] == ["g1"]


def test_status_filter():
    assert [g.id for g in filter_games(GAMES, status="rejected")] == ["g3"]
    assert len(filter_games(GAMES, status="all")) == 3


def test_unknown_status_is_an_error():
    with pytest.raises(ValueError):
        filter_games(GAMES, status="archived")


def test_summarize():
    stats = summarize(GAMES)
    assert stats.total_games == 3
    assert stats.total_plays == 1210
    assert stats.total_downloads == 304


def test_overview_returns_three_newest():
    repo = GameRepository(None)
    for i in range(5):
        repo.create(game(f"g{i}", f"Game {i}", age_days=i))

    stats, recent = GetOverviewUseCase(repo).execute("c1")

    assert stats.total_games == 5
    assert [g.id for g in recent] == ["g0", "g1", "g2"]
