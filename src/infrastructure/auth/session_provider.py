"""Credentials-based session layer.

Sessions are HS256 tokens carrying the profile flags read at sign-in. They are
not refreshed from the profile store on every request, so a status change made
by a reviewer is only visible after ``POST /auth/refresh`` or a new sign-in.
"""
from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from fastapi import Request, Response
from fastapi.security.utils import get_authorization_scheme_param
from jose import JWTError, jwt

from src.domain.entities.profile import CreatorStatus, ProfileEntity
from src.domain.entities.session import Session, SessionClaims

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class SessionSigner:
    def __init__(self, secret: str, max_age_seconds: int) -> None:
        if not secret:
            raise RuntimeError("SESSION_SECRET must not be empty")
        self.secret = secret
        self.max_age_seconds = max_age_seconds

    def issue(self, claims: SessionClaims) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": claims.user_id,
            "email": claims.email,
            "is_creator": claims.is_creator,
            "creator_status": claims.creator_status.value,
            "iat": now,
            "exp": now + timedelta(seconds=self.max_age_seconds),
        }
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def decode(self, token: str) -> SessionClaims | None:
        """Return the claims of a valid token, None for anything expired or malformed."""
        try:
            payload = jwt.decode(token, self.secret, algorithms=[ALGORITHM])
        except JWTError as exc:
            logger.debug("session.decode.rejected reason=%s", exc)
            return None
        user_id = payload.get("sub")
        if not user_id:
            logger.debug("session.decode.rejected reason=missing_sub")
            return None
        return SessionClaims(
            user_id=str(user_id),
            email=payload.get("email"),
            is_creator=bool(payload.get("is_creator", False)),
            creator_status=CreatorStatus.parse(payload.get("creator_status")),
        )


class SessionProvider:
    """Resolves the session of a request from its bearer token or session cookie."""

    def __init__(self, signer: SessionSigner, cookie_name: str, secure_cookie: bool = False) -> None:
        self.signer = signer
        self.cookie_name = cookie_name
        self.secure_cookie = secure_cookie

    def issue(self, response: Response, profile: ProfileEntity) -> str:
        """Sign the profile's current flags into a new session and set the cookie."""
        token = self.signer.issue(SessionClaims.from_profile(profile))
        response.set_cookie(
            key=self.cookie_name,
            value=token,
            max_age=self.signer.max_age_seconds,
            httponly=True,
            secure=self.secure_cookie,
            samesite="lax",
        )
        return token

    def clear(self, response: Response) -> None:
        response.delete_cookie(key=self.cookie_name)

    def _token_from_request(self, request: Request) -> str | None:
        scheme, param = get_authorization_scheme_param(request.headers.get("authorization"))
        if scheme.lower() == "bearer" and param:
            return param
        return request.cookies.get(self.cookie_name) or None

    def get_session(self, request: Request) -> Session:
        token = self._token_from_request(request)
        if not token:
            return Session.unauthenticated()
        claims = self.signer.decode(token)
        if claims is None:
            return Session.unauthenticated()
        return Session.authenticated(claims)
