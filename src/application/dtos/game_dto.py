from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from src.domain.entities.game import GameEntity, ReviewStatus


class GameItem(BaseModel):
    """A game as listed on the dashboard."""
    id: str = Field(..., description="Unique identifier of the game")
    creator_id: str = Field(..., description="Owning creator")
    title: str
    description: str
    category: str
    version: str
    tags: list[str] = Field(default_factory=list)
    age_rating: str | None = None
    review_status: ReviewStatus = Field(..., description="Review state of the game")
    is_active: bool
    play_count: int
    download_count: int
    file_size_bytes: int | None = None
    file_url: str | None = Field(None, description="Public URL of the .pck binary")
    thumbnail_url: str | None = Field(None, description="Public URL of the thumbnail")
    created_at: datetime
    last_updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, game: GameEntity, file_url: str | None, thumbnail_url: str | None) -> GameItem:
        return cls(
            id=game.id,
            creator_id=game.creator_id,
            title=game.title,
            description=game.description,
            category=game.category,
            version=game.version,
            tags=game.tags,
            age_rating=game.age_rating,
            review_status=game.review_status,
            is_active=game.is_active,
            play_count=game.play_count,
            download_count=game.download_count,
            file_size_bytes=game.file_size_bytes,
            file_url=file_url,
            thumbnail_url=thumbnail_url,
            created_at=game.created_at,
            last_updated_at=game.last_updated_at,
        )


class ListGamesResponse(BaseModel):
    games: list[GameItem]


class OverviewResponse(BaseModel):
    """Dashboard home: totals across all games and the most recent ones."""
    total_games: int
    total_plays: int
    total_downloads: int
    recent_games: list[GameItem]


class UploadFormResponse(BaseModel):
    categories: list[str]
    age_ratings: list[str]
    max_upload_bytes: int


class UploadGameResponse(BaseModel):
    game: GameItem


class UpdateGameBody(BaseModel):
    """Editable game metadata; omitted fields are left unchanged."""
    title: str | None = Field(None, min_length=1, max_length=120)
    description: str | None = Field(None, min_length=1, max_length=5000)
    category: str | None = None
    tags: list[str] | None = None
    version: str | None = Field(None, max_length=20)
    age_rating: str | None = None
