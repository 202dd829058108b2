from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ReviewStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PUBLISHED = "published"


@dataclass(frozen=True)
class GameEntity:
    id: str
    creator_id: str
    title: str
    description: str
    category: str
    created_at: datetime
    version: str = "1.0.0"
    tags: list[str] = field(default_factory=list)
    age_rating: str | None = None
    review_status: ReviewStatus = ReviewStatus.PENDING
    is_active: bool = False
    play_count: int = 0
    download_count: int = 0
    total_play_time_seconds: int = 0
    file_size_bytes: int | None = None  # size of the .pck binary
    file_path: str | None = None  # storage path {creator_id}/{game_id}/main.pck
    thumbnail_path: str | None = None
    last_updated_at: datetime | None = None
