from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import assert_never

from src.domain.entities.profile import CreatorStatus
from src.domain.entities.session import Session, SessionStatus

SIGNIN_PATH = "/auth/signin"
OVERVIEW_PATH = "/dashboard/overview"
ENROLLMENT_PATH = "/dashboard/creator-enrollment"
PENDING_APPROVAL_PATH = "/dashboard/pending-approval"
REJECTED_PATH = "/dashboard/rejected"


class BlockingScreen(str, Enum):
    SPINNER = "spinner"
    ACCESS_DENIED = "access-denied"


class DashboardPage(str, Enum):
    ENROLLMENT = "enrollment"
    PENDING_APPROVAL = "pending-approval"
    REJECTED = "rejected"
    OTHER = "other"


@dataclass(frozen=True)
class Render:
    pass


@dataclass(frozen=True)
class RedirectTo:
    path: str


@dataclass(frozen=True)
class ShowBlockingScreen:
    kind: BlockingScreen


AdmissionDecision = Render | RedirectTo | ShowBlockingScreen


def classify_page(path: str) -> DashboardPage:
    normalized = (path or "").rstrip("/") or "/"
    if normalized == ENROLLMENT_PATH:
        return DashboardPage.ENROLLMENT
    if normalized == PENDING_APPROVAL_PATH:
        return DashboardPage.PENDING_APPROVAL
    if normalized == REJECTED_PATH:
        return DashboardPage.REJECTED
    return DashboardPage.OTHER


class AdmissionService:
    """Decides whether a dashboard page renders for the given session.

    Pure: the session is resolved by the caller, nothing is read or written here.
    Check order is fixed: session state, non-creator, then ``user``, ``pending``,
    ``rejected``; ``approved`` is the fallthrough with normal access. A stale
    ``creator_status`` on a non-creator session never grants access.
    """

    @staticmethod
    def decide(session: Session, path: str, allow_pending: bool = False) -> AdmissionDecision:
        if session.status is SessionStatus.LOADING:
            return ShowBlockingScreen(BlockingScreen.SPINNER)
        if session.status is SessionStatus.UNAUTHENTICATED or session.claims is None:
            return RedirectTo(SIGNIN_PATH)

        claims = session.claims
        if not claims.is_creator:
            return ShowBlockingScreen(BlockingScreen.ACCESS_DENIED)
        return AdmissionService.decide_for_creator(claims.creator_status, path, allow_pending)

    @staticmethod
    def decide_for_creator(
        status: CreatorStatus, path: str, allow_pending: bool = False
    ) -> AdmissionDecision:
        page = classify_page(path)

        if status is CreatorStatus.USER:
            if page is DashboardPage.ENROLLMENT:
                return Render()
            return RedirectTo(ENROLLMENT_PATH)

        if status is CreatorStatus.PENDING:
            if allow_pending or page is DashboardPage.PENDING_APPROVAL:
                return Render()
            return RedirectTo(PENDING_APPROVAL_PATH)

        if status is CreatorStatus.REJECTED:
            # The rejected screen is terminal and renders itself
            if page is DashboardPage.REJECTED:
                return Render()
            return RedirectTo(REJECTED_PATH)

        if status is CreatorStatus.APPROVED:
            if page is DashboardPage.PENDING_APPROVAL:
                return RedirectTo(OVERVIEW_PATH)
            return Render()

        assert_never(status)
