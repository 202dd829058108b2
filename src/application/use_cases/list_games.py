from __future__ import annotations

from dataclasses import dataclass

from src.domain.entities.game import GameEntity, ReviewStatus
from src.infrastructure.database.repositories.game_repository import GameRepository

RECENT_GAMES_LIMIT = 3


@dataclass(frozen=True)
class OverviewStats:
    total_games: int
    total_plays: int
    total_downloads: int


def filter_games(
    games: list[GameEntity], query: str | None = None, status: str | None = "all"
) -> list[GameEntity]:
    """Case-insensitive search on title/description, then an optional review status filter."""
    filtered = list(games)
    needle = (query or "").strip().lower()
    if needle:
        filtered = [
            g
            for g in filtered
            if needle in g.title.lower() or needle in (g.description or "").lower()
        ]
    if status and status != "all":
        wanted = ReviewStatus(status)
        filtered = [g for g in filtered if g.review_status is wanted]
    return filtered


def summarize(games: list[GameEntity]) -> OverviewStats:
    return OverviewStats(
        total_games=len(games),
        total_plays=sum(g.play_count or 0 for g in games),
        total_downloads=sum(g.download_count or 0 for g in games),
    )


@dataclass
class ListGamesUseCase:
    game_repo: GameRepository

    def execute(
        self, creator_id: str, query: str | None = None, status: str | None = "all"
    ) -> list[GameEntity]:
        return filter_games(self.game_repo.list_by_creator(creator_id), query, status)


@dataclass
class GetOverviewUseCase:
    game_repo: GameRepository

    def execute(self, creator_id: str) -> tuple[OverviewStats, list[GameEntity]]:
        """Totals across all of a creator's games plus the most recent few."""
        games = self.game_repo.list_by_creator(creator_id)
        return summarize(games), games[:RECENT_GAMES_LIMIT]
