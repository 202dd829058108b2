from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass

from supabase import Client, create_client

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UserInfo:
    id: str
    email: str | None


class SupabaseAuthAdapter:
    """Small wrapper around Supabase Auth password sign-in and sign-up.

    When SUPABASE_DISABLED=1, any non-empty password is accepted and the user id
    is derived deterministically from the email.
    """

    def __init__(self) -> None:
        self.disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
        self.url = os.getenv("SUPABASE_URL")
        self.key = os.getenv("SUPABASE_ANON_KEY")
        self._client: Client | None = None
        if not self.disabled and self.url and self.key:
            self._client = create_client(self.url, self.key)

    @staticmethod
    def _fake_user(email: str) -> UserInfo:
        normalized = email.strip().lower()
        fake_id = str(uuid.uuid5(uuid.NAMESPACE_URL, f"cookiejar:{normalized}"))
        return UserInfo(id=fake_id, email=normalized)

    def sign_in_with_password(self, email: str, password: str) -> UserInfo:
        if not email or not password:
            raise ValueError("Missing email or password")
        if self.disabled or not self._client:
            return self._fake_user(email)
        try:  # pragma: no cover - network path
            res = self._client.auth.sign_in_with_password({"email": email, "password": password})
            user = res.user
            if not user:
                raise ValueError("Invalid email or password")
            return UserInfo(id=user.id, email=user.email)
        except ValueError:
            raise
        except Exception as exc:  # pragma: no cover - network path
            logger.info("auth.sign_in.rejected email=%s", email)
            raise ValueError(f"Invalid email or password: {exc}") from exc

    def sign_up(self, email: str, password: str, username: str) -> UserInfo:
        if not email or not password:
            raise ValueError("Missing email or password")
        if self.disabled or not self._client:
            return self._fake_user(email)
        try:  # pragma: no cover - network path
            res = self._client.auth.sign_up(
                {"email": email, "password": password, "options": {"data": {"username": username}}}
            )
            user = res.user
            if not user:
                raise ValueError("Sign-up did not return a user")
            return UserInfo(id=user.id, email=user.email)
        except ValueError:
            raise
        except Exception as exc:  # pragma: no cover - network path
            raise ValueError(f"Sign-up failed: {exc}") from exc


# Simple reusable singleton client getter for repositories/storage
_CLIENT_SINGLETON: Client | None = None


def get_supabase_client() -> Client | None:
    global _CLIENT_SINGLETON
    disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_ANON_KEY")
    if disabled or not url or not key:
        return None
    if _CLIENT_SINGLETON is None:
        _CLIENT_SINGLETON = create_client(url, key)
    return _CLIENT_SINGLETON
