from __future__ import annotations

import os

from src.domain.services.access_router import HostPolicy


def _getenv(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    return value if value else default


def _getenv_bool(name: str, default: bool = False) -> bool:
    raw = _getenv(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "y", "on"}


def _getenv_csv_set(name: str, default: str = "") -> frozenset[str]:
    raw = _getenv(name, default) or ""
    parts = [p.strip().lower() for p in raw.split(",")]
    return frozenset(p for p in parts if p)


class Settings:
    def __init__(self) -> None:
        self.environment = (_getenv("ENV", "development") or "development").lower()
        self.public_host = (_getenv("PUBLIC_HOST", "thecookiejar.app") or "").lower()
        self.creator_host = (_getenv("CREATOR_HOST", "creator.thecookiejar.app") or "").lower()
        self.local_hosts = _getenv_csv_set("LOCAL_HOSTS", "localhost,127.0.0.1")
        # Local hosts always keep landing paths; this extends that to every creator host
        self.local_dev = _getenv_bool("LOCAL_DEV", default=False)

        self.session_secret = _getenv("SESSION_SECRET", "dev-session-secret-change-me") or ""
        self.session_max_age_seconds = int(_getenv("SESSION_MAX_AGE_SECONDS", str(30 * 24 * 60 * 60)) or "0")
        self.session_cookie_name = _getenv("SESSION_COOKIE_NAME", "cookiejar_session") or "cookiejar_session"
        self.session_cookie_secure = _getenv_bool("SESSION_COOKIE_SECURE", default=(self.environment == "production"))

    def host_policy(self) -> HostPolicy:
        return HostPolicy(
            public_host=self.public_host,
            creator_host=self.creator_host,
            local_hosts=self.local_hosts,
            local_dev=self.local_dev,
        )


def get_settings() -> Settings:
    # Re-read on every call so tests can flip env vars per case
    return Settings()
