from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import RedirectResponse, Response

from src.domain.services.access_router import AccessRouter, Redirect
from src.infrastructure.config import get_settings

logger = logging.getLogger(__name__)

# Served on every host, never routed between marketing and creator hosts
ROUTING_EXEMPT_PATHS = ("/health", "/docs", "/openapi.json", "/redoc", "/favicon.ico", "/robots.txt", "/sitemap.xml")
ROUTING_EXEMPT_PREFIXES = ("/static/", "/docs/", "/storage/")


def _is_routing_exempt(path: str) -> bool:
    return path in ROUTING_EXEMPT_PATHS or path.startswith(ROUTING_EXEMPT_PREFIXES)


class HostRoutingMiddleware(BaseHTTPMiddleware):
    """Keeps the dashboard on the creator host and the landing pages on the public host."""

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if _is_routing_exempt(path):
            return await call_next(request)

        host = request.headers.get("host", "")
        decision = AccessRouter.route(host, path, get_settings().host_policy())
        if not isinstance(decision, Redirect):
            return await call_next(request)

        target = f"{request.url.scheme}://{decision.host}{decision.path}"
        if request.url.query:
            target = f"{target}?{request.url.query}"
        logger.info("routing.redirect host=%s path=%s target=%s", host, path, target)
        return RedirectResponse(url=target, status_code=307)


def add_default_middlewares(app: FastAPI) -> None:
    # CORS configuration
    # In development, allow common frontend origins
    env = os.getenv("ENV", "development")
    settings = get_settings()

    if env in ("development", "staging"):
        allowed_origins = [
            "http://localhost:3000",
            "http://localhost:3001",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:3001",
        ]
    else:
        allowed_origins = [
            f"https://{settings.public_host}",
            f"https://{settings.creator_host}",
        ]

    app.add_middleware(HostRoutingMiddleware)
    # Added last so CORS stays the outermost layer
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
