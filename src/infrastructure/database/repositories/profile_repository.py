from __future__ import annotations

import logging
import os
from dataclasses import replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from supabase import Client

from src.domain.entities.profile import CreatorStatus, ProfileEntity
from src.infrastructure.database.postgres_client import get_postgres_client

logger = logging.getLogger(__name__)

# Columns that may be written through update(); email is managed by auth
UPDATABLE_COLUMNS = frozenset(
    {
        "username",
        "is_creator",
        "creator_status",
        "creator_bio",
        "years_experience",
        "portfolio_url",
        "twitter",
        "youtube",
        "itchio",
        "creator_application_submitted_at",
        "creator_joined_at",
    }
)

# module-level in-memory store for disabled mode
_MEM_PROFILES: dict[str, ProfileEntity] = {}


def _parse_dt(value: Any) -> datetime | None:
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


def _to_db_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def _to_json_value(value: Any) -> Any:
    value = _to_db_value(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class ProfileRepository:
    def __init__(self, client: Client | None) -> None:
        self.client = client
        self.disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
        self.use_local_db = os.getenv("USE_LOCAL_DB", "0") == "1"
        self.pg_client = get_postgres_client() if self.use_local_db else None

    def _row_to_entity(self, row: dict) -> ProfileEntity:
        """Convert database row to ProfileEntity."""
        return ProfileEntity(
            id=row["id"],
            email=row.get("email"),
            created_at=_parse_dt(row.get("created_at")),
            username=row.get("username"),
            is_creator=bool(row.get("is_creator")),
            creator_status=CreatorStatus.parse(row.get("creator_status")),
            creator_bio=row.get("creator_bio"),
            years_experience=row.get("years_experience"),
            portfolio_url=row.get("portfolio_url"),
            twitter=row.get("twitter"),
            youtube=row.get("youtube"),
            itchio=row.get("itchio"),
            creator_application_submitted_at=_parse_dt(row.get("creator_application_submitted_at")),
            creator_joined_at=_parse_dt(row.get("creator_joined_at")),
        )

    def _in_memory(self) -> bool:
        return self.disabled or self.client is None

    def get(self, user_id: str) -> ProfileEntity | None:
        if self.use_local_db and self.pg_client:
            try:
                row = self.pg_client.fetch_one("SELECT * FROM profiles WHERE id = %s", (user_id,))
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL get profile failed: {exc}") from exc
            return self._row_to_entity(row) if row else None

        if self._in_memory():
            return _MEM_PROFILES.get(user_id)

        try:  # pragma: no cover - network
            res = self.client.table("profiles").select("*").eq("id", user_id).limit(1).execute()
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"DB get profile failed: {exc}") from exc
        rows = res.data or []  # pragma: no cover
        return self._row_to_entity(rows[0]) if rows else None  # pragma: no cover

    def upsert(self, user_id: str, email: str | None) -> ProfileEntity:
        """Ensure a profile row exists; creator fields of an existing row are untouched."""
        if self.use_local_db and self.pg_client:
            try:
                row = self.pg_client.execute_returning(
                    """
                    INSERT INTO profiles (id, email, is_creator, creator_status, created_at)
                    VALUES (%s, %s, FALSE, 'user', CURRENT_TIMESTAMP)
                    ON CONFLICT (id) DO UPDATE SET email = EXCLUDED.email
                    RETURNING *
                    """,
                    (user_id, email),
                )
                return self._row_to_entity(row)
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL upsert profile failed: {exc}") from exc

        if self._in_memory():
            current = _MEM_PROFILES.get(user_id)
            if current is None:
                entity = ProfileEntity(id=user_id, email=email, created_at=datetime.now(UTC))
            else:
                entity = replace(current, email=email or current.email)
            _MEM_PROFILES[user_id] = entity
            return entity

        try:  # pragma: no cover - network
            self.client.table("profiles").upsert(
                {"id": user_id, "email": email}, on_conflict="id"
            ).execute()
            res = self.client.table("profiles").select("*").eq("id", user_id).single().execute()
            return self._row_to_entity(res.data)
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"DB upsert profile failed: {exc}") from exc

    def create_creator(
        self, user_id: str, email: str | None, username: str, bio: str | None = None
    ) -> ProfileEntity:
        """Create the profile of an account registered through creator sign-up."""
        now = datetime.now(UTC)
        self.upsert(user_id, email)
        return self.update(
            user_id,
            {
                "username": username,
                "creator_bio": bio,
                "is_creator": True,
                "creator_status": CreatorStatus.USER,
                "creator_joined_at": now,
            },
        )

    def update(self, user_id: str, updates: dict[str, Any]) -> ProfileEntity:
        safe = {k: v for k, v in updates.items() if k in UPDATABLE_COLUMNS}
        dropped = set(updates) - set(safe)
        if dropped:
            logger.debug("profiles.update.ignored_columns user_id=%s columns=%s", user_id, sorted(dropped))
        if not safe:
            current = self.get(user_id)
            if current is None:
                raise RuntimeError(f"Profile {user_id} not found")
            return current

        if self.use_local_db and self.pg_client:
            columns = sorted(safe)
            assignments = ", ".join(f"{col} = %s" for col in columns)
            params = tuple(_to_db_value(safe[col]) for col in columns) + (user_id,)
            try:
                row = self.pg_client.execute_returning(
                    f"UPDATE profiles SET {assignments} WHERE id = %s RETURNING *", params
                )
                return self._row_to_entity(row)
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL update profile failed: {exc}") from exc

        if self._in_memory():
            current = _MEM_PROFILES.get(user_id)
            if current is None:
                raise RuntimeError(f"Profile {user_id} not found")
            values = dict(safe)
            if "creator_status" in values:
                values["creator_status"] = CreatorStatus.parse(_to_db_value(values["creator_status"]))
            updated = replace(current, **values)
            _MEM_PROFILES[user_id] = updated
            return updated

        try:  # pragma: no cover - network
            data = {k: _to_json_value(v) for k, v in safe.items()}
            res = self.client.table("profiles").update(data).eq("id", user_id).execute()
            rows = res.data or []
            if not rows:
                raise RuntimeError(f"Profile {user_id} not found")
            return self._row_to_entity(rows[0])
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"DB update profile failed: {exc}") from exc
