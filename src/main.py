from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from src.application.dtos.common_dto import HealthResponse, RootResponse
from src.infrastructure.api.middlewares import add_default_middlewares
from src.infrastructure.api.page_guard import PageNotAdmitted, page_not_admitted_handler
from src.infrastructure.api.routes.auth_routes import router as auth_router
from src.infrastructure.api.routes.creator_routes import router as creator_router
from src.infrastructure.api.routes.dashboard_routes import router as dashboard_router
from src.infrastructure.database.supabase_client import get_supabase_client
from src.infrastructure.storage.supabase_storage import SupabaseStorage


def configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="CookieJar Creator Backend",
        version="0.1.0",
        description="""
        ## CookieJar Creator Backend API

        Backend for the CookieJar mobile-game platform: the public marketing host and
        the creator dashboard host, with Supabase for auth, database, and storage.

        ### Features
        - **Host Routing**: Dashboard and auth pages live on the creator host, landing
          pages on the public host; requests on the wrong host are redirected
        - **Creator Admission**: Dashboard pages render, redirect, or show a blocking
          screen depending on the session's creator status (user, pending, approved,
          rejected)
        - **Enrollment**: Creator sign-up and application submission
        - **Games**: Upload `.pck` game binaries with thumbnails, list and edit games

        ### Authentication
        Sign in through `/auth/signin`. The session token is set as a cookie and can
        also be sent as a Bearer token:
        ```
        Authorization: Bearer your-session-token
        ```

        ### Error Responses
        - **303 See Other**: Dashboard page not available for the current creator status
        - **400 Bad Request**: Invalid form data
        - **401 Unauthorized**: Missing or invalid session
        - **403 Forbidden**: Account is not a creator
        - **409 Conflict**: Creator application already submitted
        - **502 Bad Gateway**: Supabase request failed
        """,
        contact={
            "name": "CookieJar Team",
            "email": "creators@thecookiejar.app",
        },
    )
    add_default_middlewares(app)
    app.add_exception_handler(PageNotAdmitted, page_not_admitted_handler)

    @app.get(
        "/",
        response_model=RootResponse,
        summary="API Root",
        description="Landing root on the public host; the creator host redirects it to the dashboard",
        response_description="API information including status and version",
    )
    def root():
        """Get API root information."""
        return {"status": "ok", "service": "cookiejar-creator-backend", "version": app.version}

    @app.get(
        "/health",
        response_model=HealthResponse,
        summary="Health Check",
        description="Check if the API service is running and healthy",
        response_description="Health status of the API service",
    )
    def health():
        """Check API health status."""
        return {"status": "healthy"}

    app.include_router(auth_router)
    app.include_router(creator_router)
    app.include_router(dashboard_router)

    storage = SupabaseStorage(get_supabase_client())
    if storage.is_local:
        # Serves the URLs get_public_url hands out without a Supabase bucket
        app.mount(storage.local_url_prefix(), StaticFiles(directory=storage.local_dir), name="storage")
    return app


app = create_app()
