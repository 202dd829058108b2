from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

from src.domain.entities.game import GameEntity, ReviewStatus
from src.infrastructure.database.repositories.game_repository import GameRepository
from src.infrastructure.storage.supabase_storage import SupabaseStorage

logger = logging.getLogger(__name__)

GAME_CATEGORIES = (
    "Action",
    "Puzzle",
    "Arcade",
    "Adventure",
    "Strategy",
    "Casual",
    "Racing",
    "Sports",
    "RPG",
    "Other",
)
AGE_RATINGS = ("Everyone", "Everyone 10+", "Teen", "Mature 17+", "Adults Only")
MAX_UPLOAD_BYTES = 50 * 1024 * 1024


class GameUploadError(ValueError):
    pass


@dataclass(frozen=True)
class GameDraft:
    title: str
    description: str
    category: str
    version: str = "1.0.0"
    tags: list[str] = field(default_factory=list)
    age_rating: str | None = None


def parse_tags(raw: str | None) -> list[str]:
    """Comma separated tags, trimmed, empty entries and duplicates dropped."""
    tags: list[str] = []
    for part in (raw or "").split(","):
        tag = part.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def validate_metadata(draft: GameDraft) -> None:
    if not draft.title.strip() or not draft.description.strip() or not draft.category:
        raise GameUploadError("Please fill in all required fields")
    if draft.category not in GAME_CATEGORIES:
        raise GameUploadError(f"Unknown category: {draft.category}")
    if draft.age_rating and draft.age_rating not in AGE_RATINGS:
        raise GameUploadError(f"Unknown age rating: {draft.age_rating}")


@dataclass
class UploadGameUseCase:
    storage: SupabaseStorage
    game_repo: GameRepository

    @staticmethod
    def validate(
        draft: GameDraft,
        game_filename: str | None,
        game_bytes: bytes | None,
        thumbnail_bytes: bytes | None,
        thumbnail_content_type: str | None,
    ) -> None:
        validate_metadata(draft)
        if not game_bytes or not game_filename:
            raise GameUploadError("Please upload a game file (.pck)")
        if not game_filename.lower().endswith(".pck"):
            raise GameUploadError("Please upload a valid .pck file")
        if not thumbnail_bytes:
            raise GameUploadError("Please upload a thumbnail image")
        if thumbnail_content_type and not thumbnail_content_type.startswith("image/"):
            raise GameUploadError("Please upload a valid image file")
        if len(game_bytes) > MAX_UPLOAD_BYTES or len(thumbnail_bytes) > MAX_UPLOAD_BYTES:
            raise GameUploadError("File size must be less than 50MB")

    def execute(
        self,
        creator_id: str,
        draft: GameDraft,
        *,
        game_filename: str | None,
        game_bytes: bytes | None,
        thumbnail_bytes: bytes | None,
        thumbnail_content_type: str | None = None,
    ) -> GameEntity:
        """
        Upload a new game binary and thumbnail and create its record.

        New games start in review (``pending``) and inactive. Objects already
        written are removed again if a later step fails.
        """
        self.validate(draft, game_filename, game_bytes, thumbnail_bytes, thumbnail_content_type)

        game_id = str(uuid.uuid4())
        written: list[str] = []
        try:
            game_file = self.storage.upload_game_file(creator_id, game_id, game_bytes)
            written.append(game_file.path)
            try:
                thumbnail = self.storage.upload_thumbnail(creator_id, game_id, thumbnail_bytes)
            except ValueError as exc:
                raise GameUploadError(str(exc)) from exc
            written.append(thumbnail.path)

            now = datetime.now(UTC)
            entity = GameEntity(
                id=game_id,
                creator_id=creator_id,
                title=draft.title.strip(),
                description=draft.description.strip(),
                category=draft.category,
                created_at=now,
                version=draft.version or "1.0.0",
                tags=list(draft.tags),
                age_rating=draft.age_rating or None,
                review_status=ReviewStatus.PENDING,
                is_active=False,
                file_size_bytes=game_file.size,
                file_path=game_file.path,
                thumbnail_path=thumbnail.path,
                last_updated_at=now,
            )
            created = self.game_repo.create(entity)
        except (GameUploadError, RuntimeError):
            for path in written:
                self.storage.delete(path)
            raise

        logger.info(
            "games.upload.created creator_id=%s game_id=%s size=%s",
            creator_id,
            created.id,
            created.file_size_bytes,
        )
        return created
