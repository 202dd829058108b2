from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError
from supabase import Client

logger = logging.getLogger(__name__)

GAME_FILE_NAME = "main.pck"
THUMBNAIL_FILE_NAME = "thumbnail.png"


@dataclass
class StorageResult:
    path: str
    content_type: str
    size: int
    width: int | None = None
    height: int | None = None


class SupabaseStorage:
    """Storage adapter for the Supabase ``games`` bucket with a local fake fallback.

    Layout: ``{creator_id}/{game_id}/main.pck`` and ``{creator_id}/{game_id}/thumbnail.png``.
    """

    def __init__(self, client: Client | None) -> None:
        self.client = client
        self.bucket = os.getenv("SUPABASE_STORAGE_BUCKET", "games")
        self.disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
        self.local_dir = Path(os.getenv("SUPABASE_STORAGE_LOCAL_DIR", ".local_storage"))
        if self.is_local:
            self.local_dir.mkdir(parents=True, exist_ok=True)

    @property
    def is_local(self) -> bool:
        return self.disabled or self.client is None

    def local_url_prefix(self) -> str:
        return f"/storage/{self.bucket}"

    @staticmethod
    def game_file_path(creator_id: str, game_id: str) -> str:
        return f"{creator_id}/{game_id}/{GAME_FILE_NAME}"

    @staticmethod
    def thumbnail_path(creator_id: str, game_id: str) -> str:
        return f"{creator_id}/{game_id}/{THUMBNAIL_FILE_NAME}"

    @staticmethod
    def _encode_thumbnail(data: bytes) -> tuple[bytes, int, int]:
        try:
            img = Image.open(BytesIO(data))
            img.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise ValueError("Please upload a valid image file") from exc
        if img.mode not in ("RGB", "RGBA"):
            img = img.convert("RGBA")
        buf = BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue(), img.width, img.height

    def upload_bytes(self, storage_path: str, data: bytes, content_type: str) -> StorageResult:
        """Write an object, replacing any existing one at the same path."""
        if self.is_local:
            # local fake storage
            full_path = self.local_dir / storage_path
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_bytes(data)
            return StorageResult(path=storage_path, content_type=content_type, size=len(data))
        try:  # pragma: no cover - network
            self.client.storage.from_(self.bucket).upload(
                path=storage_path,
                file=data,
                file_options={"content-type": content_type, "cache-control": "3600", "upsert": "true"},
            )
        except Exception as exc:  # pragma: no cover
            logger.exception("storage.upload.error path=%s", storage_path)
            raise RuntimeError(f"Storage upload failed: {exc}") from exc
        return StorageResult(path=storage_path, content_type=content_type, size=len(data))  # pragma: no cover

    def upload_game_file(self, creator_id: str, game_id: str, data: bytes) -> StorageResult:
        return self.upload_bytes(
            self.game_file_path(creator_id, game_id), data, "application/octet-stream"
        )

    def upload_thumbnail(self, creator_id: str, game_id: str, data: bytes) -> StorageResult:
        png, width, height = self._encode_thumbnail(data)
        stored = self.upload_bytes(self.thumbnail_path(creator_id, game_id), png, "image/png")
        stored.width, stored.height = width, height
        return stored

    def get_public_url(self, storage_path: str) -> str:
        if self.is_local:
            return f"{self.local_url_prefix()}/{storage_path}"
        return self.client.storage.from_(self.bucket).get_public_url(storage_path)  # pragma: no cover

    def delete(self, storage_path: str) -> None:
        if self.is_local:
            full_path = self.local_dir / storage_path
            if full_path.exists():
                full_path.unlink()
            return
        try:  # pragma: no cover - network
            self.client.storage.from_(self.bucket).remove([storage_path])
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"Storage delete failed: {exc}") from exc
