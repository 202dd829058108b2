from __future__ import annotations

import json
import os
from dataclasses import asdict, replace
from datetime import UTC, datetime
from typing import Any

from supabase import Client

from src.domain.entities.game import GameEntity, ReviewStatus
from src.infrastructure.database.postgres_client import get_postgres_client

# Metadata a creator may edit after upload
EDITABLE_COLUMNS = frozenset({"title", "description", "category", "tags", "version", "age_rating"})

# module-level in-memory store for disabled mode
_MEM_GAMES: dict[str, GameEntity] = {}


class GameRepository:
    def __init__(self, client: Client | None) -> None:
        self.client = client
        self.disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
        self.use_local_db = os.getenv("USE_LOCAL_DB", "0") == "1"
        self.pg_client = get_postgres_client() if self.use_local_db else None

    def _row_to_entity(self, row: dict) -> GameEntity:
        """Convert database row to GameEntity."""
        created_at = row["created_at"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        last_updated_at = row.get("last_updated_at")
        if isinstance(last_updated_at, str):
            last_updated_at = datetime.fromisoformat(last_updated_at)
        # jsonb comes back decoded from Supabase, as text from some local setups
        tags = row.get("tags") or []
        if isinstance(tags, str):
            tags = json.loads(tags)

        return GameEntity(
            id=row["id"],
            creator_id=row["creator_id"],
            title=row["title"],
            description=row.get("description") or "",
            category=row.get("category") or "Other",
            created_at=created_at,
            version=row.get("version") or "1.0.0",
            tags=list(tags),
            age_rating=row.get("age_rating"),
            review_status=ReviewStatus(row.get("review_status") or "pending"),
            is_active=bool(row.get("is_active", False)),
            play_count=row.get("play_count") or 0,
            download_count=row.get("download_count") or 0,
            total_play_time_seconds=row.get("total_play_time_seconds") or 0,
            file_size_bytes=row.get("file_size_bytes"),
            file_path=row.get("file_path"),
            thumbnail_path=row.get("thumbnail_path"),
            last_updated_at=last_updated_at,
        )

    @staticmethod
    def _entity_to_row(entity: GameEntity) -> dict[str, Any]:
        row = asdict(entity)
        row["review_status"] = entity.review_status.value
        row["created_at"] = entity.created_at.isoformat()
        row["last_updated_at"] = entity.last_updated_at.isoformat() if entity.last_updated_at else None
        return row

    def _in_memory(self) -> bool:
        return self.disabled or self.client is None

    def create(self, entity: GameEntity) -> GameEntity:
        # PostgreSQL mode
        if self.use_local_db and self.pg_client:
            row = self._entity_to_row(entity)
            row["tags"] = json.dumps(entity.tags)
            columns = list(row)
            placeholders = ", ".join(["%s"] * len(columns))
            try:
                created = self.pg_client.execute_returning(
                    f"INSERT INTO games ({', '.join(columns)}) VALUES ({placeholders}) RETURNING *",
                    tuple(row[c] for c in columns),
                )
                return self._row_to_entity(created)
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL insert game failed: {exc}") from exc

        # In-memory mode
        if self._in_memory():
            _MEM_GAMES[entity.id] = entity
            return entity

        # Supabase mode
        try:  # pragma: no cover - network
            res = self.client.table("games").insert([self._entity_to_row(entity)]).execute()
            return self._row_to_entity(res.data[0])
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"DB insert game failed: {exc}") from exc

    def list_by_creator(self, creator_id: str) -> list[GameEntity]:
        """Games of one creator, newest first."""
        if self.use_local_db and self.pg_client:
            rows = self.pg_client.fetch_all(
                "SELECT * FROM games WHERE creator_id = %s ORDER BY created_at DESC", (creator_id,)
            )
            return [self._row_to_entity(row) for row in rows]

        if self._in_memory():
            games = [g for g in _MEM_GAMES.values() if g.creator_id == creator_id]
            return sorted(games, key=lambda g: g.created_at, reverse=True)

        try:  # pragma: no cover - network
            res = (
                self.client.table("games")
                .select("*")
                .eq("creator_id", creator_id)
                .order("created_at", desc=True)
                .execute()
            )
            return [self._row_to_entity(row) for row in res.data or []]
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"DB list games failed: {exc}") from exc

    def get(self, game_id: str) -> GameEntity | None:
        if self.use_local_db and self.pg_client:
            row = self.pg_client.fetch_one("SELECT * FROM games WHERE id = %s", (game_id,))
            return self._row_to_entity(row) if row else None

        if self._in_memory():
            return _MEM_GAMES.get(game_id)

        try:  # pragma: no cover - network
            res = self.client.table("games").select("*").eq("id", game_id).limit(1).execute()
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"DB get game failed: {exc}") from exc
        rows = res.data or []  # pragma: no cover
        return self._row_to_entity(rows[0]) if rows else None  # pragma: no cover

    def update(self, game_id: str, updates: dict[str, Any]) -> GameEntity:
        safe = {k: v for k, v in updates.items() if k in EDITABLE_COLUMNS}
        now = datetime.now(UTC)

        if self.use_local_db and self.pg_client:
            values = dict(safe, last_updated_at=now)
            if "tags" in values:
                values["tags"] = json.dumps(values["tags"])
            columns = sorted(values)
            assignments = ", ".join(f"{col} = %s" for col in columns)
            try:
                row = self.pg_client.execute_returning(
                    f"UPDATE games SET {assignments} WHERE id = %s RETURNING *",
                    tuple(values[c] for c in columns) + (game_id,),
                )
                return self._row_to_entity(row)
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL update game failed: {exc}") from exc

        if self._in_memory():
            current = _MEM_GAMES.get(game_id)
            if current is None:
                raise RuntimeError(f"Game {game_id} not found")
            updated = replace(current, last_updated_at=now, **safe)
            _MEM_GAMES[game_id] = updated
            return updated

        try:  # pragma: no cover - network
            data = dict(safe, last_updated_at=now.isoformat())
            res = self.client.table("games").update(data).eq("id", game_id).execute()
            rows = res.data or []
            if not rows:
                raise RuntimeError(f"Game {game_id} not found")
            return self._row_to_entity(rows[0])
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"DB update game failed: {exc}") from exc
