from __future__ import annotations

import logging
from typing import Annotated, Callable

from fastapi import Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from src.domain.entities.session import Session, SessionClaims
from src.domain.services.admission_service import (
    SIGNIN_PATH,
    AdmissionDecision,
    AdmissionService,
    BlockingScreen,
    RedirectTo,
    Render,
    ShowBlockingScreen,
)
from src.infrastructure.api.dependencies import get_session
from src.infrastructure.config import Settings, get_settings

logger = logging.getLogger(__name__)


class PageNotAdmitted(Exception):
    """Raised by the page guard when a dashboard page must not render."""

    def __init__(self, decision: RedirectTo | ShowBlockingScreen) -> None:
        super().__init__(repr(decision))
        self.decision = decision


def dashboard_page(allow_pending: bool = False) -> Callable[..., SessionClaims]:
    """Dependency factory: admit the request to a dashboard page or raise PageNotAdmitted.

    Returns the session claims of an admitted request.
    """

    def guard(request: Request, session: Annotated[Session, Depends(get_session)]) -> SessionClaims:
        decision: AdmissionDecision = AdmissionService.decide(
            session, request.url.path, allow_pending=allow_pending
        )
        if isinstance(decision, Render):
            # Render is only reachable with claims present
            if session.claims is not None:
                return session.claims
            decision = RedirectTo(SIGNIN_PATH)
        user_id = session.claims.user_id if session.claims else None
        logger.info(
            "admission.blocked path=%s user_id=%s decision=%s", request.url.path, user_id, decision
        )
        raise PageNotAdmitted(decision)

    return guard


async def page_not_admitted_handler(request: Request, exc: PageNotAdmitted):
    decision = exc.decision
    if isinstance(decision, RedirectTo):
        return RedirectResponse(url=decision.path, status_code=status.HTTP_303_SEE_OTHER)

    if decision.kind is BlockingScreen.ACCESS_DENIED:
        settings: Settings = get_settings()
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={
                "screen": decision.kind.value,
                "detail": "You need to be an approved creator to access this dashboard.",
                "home_url": f"https://{settings.public_host}",
            },
        )

    return JSONResponse(status_code=status.HTTP_200_OK, content={"screen": decision.kind.value})
