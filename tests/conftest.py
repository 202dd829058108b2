import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so 'src' is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SUPABASE_DISABLED", "1")
os.environ.setdefault("SUPABASE_STORAGE_LOCAL_DIR", ".local_storage")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("PUBLIC_HOST", "thecookiejar.app")
os.environ.setdefault("CREATOR_HOST", "creator.thecookiejar.app")
os.environ.setdefault("LOCAL_HOSTS", "localhost,127.0.0.1")
os.environ.setdefault("LOCAL_DEV", "0")


@pytest.fixture(autouse=True)
def _reset_stores():
    from src.infrastructure.database.repositories import game_repository, profile_repository

    profile_repository._MEM_PROFILES.clear()
    game_repository._MEM_GAMES.clear()
    yield


@pytest.fixture(scope="session")
def app():
    # lazy import after env configured
    from src.main import create_app

    return create_app()


@pytest.fixture()
def client(app) -> TestClient:
    # a fresh client per test so session cookies do not leak between tests
    return TestClient(app, follow_redirects=False)


@pytest.fixture()
def profiles():
    from src.infrastructure.database.repositories.profile_repository import ProfileRepository

    return ProfileRepository(None)


@pytest.fixture()
def sign_up(client):
    """Register a creator (status ``user``) and return the auth header of its session."""

    def _sign_up(email: str = "dev@studio.io", username: str = "studio") -> dict[str, str]:
        r = client.post(
            "/auth/signup",
            json={"username": username, "email": email, "password": "secret123"},
        )
        assert r.status_code == 201, r.text
        return {"Authorization": f"Bearer {r.json()['access_token']}"}

    return _sign_up
