"""
Tests for the game upload use case.
"""
from __future__ import annotations

import io
from unittest.mock import Mock

import pytest
from PIL import Image

from src.application.use_cases.upload_game import (
    GameDraft,
    GameUploadError,
    UploadGameUseCase,
    parse_tags,
)
from src.domain.entities.game import ReviewStatus
from src.infrastructure.database.repositories.game_repository import GameRepository
from src.infrastructure.storage.supabase_storage import SupabaseStorage, StorageResult


def make_png_bytes(w=4, h=4, color=(200, 120, 40)) -> bytes:
    img = Image.new("RGB", (w, h), color)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


DRAFT = GameDraft(title="Cookie Run", description="Run!", category="Arcade", tags=["runner"])


@pytest.fixture
def local_storage(tmp_path, monkeypatch):
    monkeypatch.setenv("SUPABASE_STORAGE_LOCAL_DIR", str(tmp_path))
    return SupabaseStorage(None)


class TestUploadGameUseCase:
    def test_creates_pending_inactive_game(self, local_storage, tmp_path):
        uc = UploadGameUseCase(storage=local_storage, game_repo=GameRepository(None))

        game = uc.execute(
            "creator-1",
            DRAFT,
            game_filename="cookie.pck",
            game_bytes=b"GDPC" + b"\x00" * 60,
            thumbnail_bytes=make_png_bytes(),
            thumbnail_content_type="image/png",
        )

        assert game.review_status is ReviewStatus.PENDING
        assert game.is_active is False
        assert game.play_count == 0
        assert game.file_size_bytes == 64
        assert game.file_path == f"creator-1/{game.id}/main.pck"
        assert game.thumbnail_path == f"creator-1/{game.id}/thumbnail.png"
        assert (tmp_path / game.file_path).read_bytes().startswith(b"GDPC")
        assert (tmp_path / game.thumbnail_path).exists()

    @pytest.mark.parametrize(
        "draft, filename, game_bytes, thumb, message",
        [
            (GameDraft(title="", description="d", category="Arcade"), "a.pck", b"x", b"x", "required fields"),
            (GameDraft(title="t", description="d", category="Cooking"), "a.pck", b"x", b"x", "Unknown category"),
            (DRAFT, None, None, b"x", "game file"),
            (DRAFT, "game.zip", b"x", b"x", "valid .pck"),
            (DRAFT, "game.pck", b"x", None, "thumbnail"),
        ],
    )
    def test_validation(self, draft, filename, game_bytes, thumb, message):
        storage = Mock()
        uc = UploadGameUseCase(storage=storage, game_repo=Mock())
        with pytest.raises(GameUploadError, match=message):
            uc.execute("c1", draft, game_filename=filename, game_bytes=game_bytes, thumbnail_bytes=thumb)
        storage.upload_game_file.assert_not_called()

    def test_rejects_non_image_thumbnail_content_type(self):
        uc = UploadGameUseCase(storage=Mock(), game_repo=Mock())
        with pytest.raises(GameUploadError, match="valid image"):
            uc.execute(
                "c1",
                DRAFT,
                game_filename="a.pck",
                game_bytes=b"x",
                thumbnail_bytes=b"x",
                thumbnail_content_type="text/plain",
            )

    def test_undecodable_thumbnail_removes_game_file(self, local_storage, tmp_path):
        uc = UploadGameUseCase(storage=local_storage, game_repo=GameRepository(None))

        with pytest.raises(GameUploadError, match="valid image"):
            uc.execute(
                "creator-1",
                DRAFT,
                game_filename="a.pck",
                game_bytes=b"GDPC",
                thumbnail_bytes=b"not an image",
            )

        assert not list(tmp_path.rglob("main.pck"))

    def test_record_failure_removes_uploaded_objects(self):
        storage = Mock()
        storage.upload_game_file.return_value = StorageResult(
            path="c1/g/main.pck", content_type="application/octet-stream", size=4
        )
        storage.upload_thumbnail.return_value = StorageResult(
            path="c1/g/thumbnail.png", content_type="image/png", size=10
        )
        game_repo = Mock()
        game_repo.create.side_effect = RuntimeError("DB insert game failed")

        uc = UploadGameUseCase(storage=storage, game_repo=game_repo)
        with pytest.raises(RuntimeError):
            uc.execute("c1", DRAFT, game_filename="a.pck", game_bytes=b"GDPC", thumbnail_bytes=b"png")

        deleted = [c.args[0] for c in storage.delete.call_args_list]
        assert deleted == ["c1/g/main.pck", "c1/g/thumbnail.png"]


def test_parse_tags():
    assert parse_tags(" runner, arcade ,,runner, ") == ["runner", "arcade"]
    assert parse_tags(None) == []
