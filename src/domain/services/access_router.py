from __future__ import annotations

from dataclasses import dataclass, field

API_PREFIX = "/api"
DASHBOARD_PREFIX = "/dashboard"
AUTH_PREFIX = "/auth"
CREATOR_HOME_PATH = "/dashboard/overview"


@dataclass(frozen=True)
class HostPolicy:
    """Which hosts serve the marketing site and which serve the creator dashboard."""

    public_host: str = "thecookiejar.app"
    creator_host: str = "creator.thecookiejar.app"
    local_hosts: frozenset[str] = field(
        default_factory=lambda: frozenset({"localhost", "127.0.0.1"})
    )
    # Single-host local testing: no subdomain separation
    local_dev: bool = False


@dataclass(frozen=True)
class PassThrough:
    pass


@dataclass(frozen=True)
class Redirect:
    host: str
    path: str


RoutingDecision = PassThrough | Redirect


def _normalize_host(host: str | None) -> str:
    if not host:
        return ""
    host = host.strip().lower()
    if host.startswith("["):  # IPv6 literal, e.g. [::1]:3000
        return host.split("]", 1)[0] + "]"
    return host.split(":", 1)[0]


def _has_prefix(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


class AccessRouter:
    """Host/path request classification. Total over (host, path); never raises.

    Rules, first match wins:
    1. API paths pass through.
    2. Public host: dashboard/auth paths move to the creator host, everything else passes.
    3. Creator or local host: ``/`` goes to the dashboard home, dashboard/auth paths
       pass, anything else moves to the public host (passes in local development).
    4. Anything else passes.
    """

    @staticmethod
    def is_public_host(host: str, policy: HostPolicy) -> bool:
        name = _normalize_host(host)
        return name in (policy.public_host, f"www.{policy.public_host}")

    @staticmethod
    def is_creator_host(host: str, policy: HostPolicy) -> bool:
        return _normalize_host(host) == policy.creator_host

    @staticmethod
    def is_local_host(host: str, policy: HostPolicy) -> bool:
        return _normalize_host(host) in policy.local_hosts

    @staticmethod
    def route(host: str | None, path: str, policy: HostPolicy) -> RoutingDecision:
        host = host or ""
        path = path or "/"
        is_creator_area = _has_prefix(path, DASHBOARD_PREFIX) or _has_prefix(path, AUTH_PREFIX)

        if _has_prefix(path, API_PREFIX):
            return PassThrough()

        if AccessRouter.is_public_host(host, policy):
            if is_creator_area:
                return Redirect(host=policy.creator_host, path=path)
            return PassThrough()

        is_local = AccessRouter.is_local_host(host, policy)
        if AccessRouter.is_creator_host(host, policy) or is_local:
            if path == "/":
                # Same host, port included
                return Redirect(host=host, path=CREATOR_HOME_PATH)
            if is_creator_area:
                return PassThrough()
            if is_local or policy.local_dev:
                return PassThrough()
            return Redirect(host=policy.public_host, path=path)

        return PassThrough()
