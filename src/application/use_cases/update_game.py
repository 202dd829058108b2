from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from src.application.use_cases.upload_game import GameDraft, validate_metadata
from src.domain.entities.game import GameEntity
from src.infrastructure.database.repositories.game_repository import GameRepository


class GameNotFoundError(LookupError):
    pass


@dataclass
class UpdateGameUseCase:
    game_repo: GameRepository

    def execute(self, creator_id: str, game_id: str, changes: dict[str, Any]) -> GameEntity:
        game = self.game_repo.get(game_id)
        # Another creator's game is reported the same as a missing one
        if game is None or game.creator_id != creator_id:
            raise GameNotFoundError(game_id)

        updates = {k: v for k, v in changes.items() if v is not None}
        for key in ("title", "description"):
            if key in updates:
                updates[key] = updates[key].strip()

        draft = replace(
            GameDraft(
                title=game.title,
                description=game.description,
                category=game.category,
                version=game.version,
                tags=game.tags,
                age_rating=game.age_rating,
            ),
            **updates,
        )
        validate_metadata(draft)
        return self.game_repo.update(game_id, updates)
