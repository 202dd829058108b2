import pytest

from src.domain.services.access_router import AccessRouter, HostPolicy, PassThrough, Redirect

POLICY = HostPolicy(
    public_host="thecookiejar.app",
    creator_host="creator.thecookiejar.app",
    local_hosts=frozenset({"localhost", "127.0.0.1"}),
    local_dev=False,
)
PUBLIC = "thecookiejar.app"
CREATOR = "creator.thecookiejar.app"


@pytest.mark.parametrize(
    "host, path, expected",
    [
        # API routes are never gated
        (PUBLIC, "/api/creators/enroll", PassThrough()),
        (CREATOR, "/api/creators/me", PassThrough()),
        ("unknown.example", "/api", PassThrough()),
        # Public host
        (PUBLIC, "/", PassThrough()),
        (PUBLIC, "/about", PassThrough()),
        (PUBLIC, "/dashboard/games", Redirect(CREATOR, "/dashboard/games")),
        (PUBLIC, "/dashboard", Redirect(CREATOR, "/dashboard")),
        (PUBLIC, "/auth/signin", Redirect(CREATOR, "/auth/signin")),
        ("www.thecookiejar.app", "/auth/signin", Redirect(CREATOR, "/auth/signin")),
        # Creator host
        (CREATOR, "/", Redirect(CREATOR, "/dashboard/overview")),
        (CREATOR, "/dashboard/overview", PassThrough()),
        (CREATOR, "/auth/signin", PassThrough()),
        (CREATOR, "/about", Redirect(PUBLIC, "/about")),
        # Local development host: single host, no subdomain separation
        ("localhost:3000", "/", Redirect("localhost:3000", "/dashboard/overview")),
        ("localhost:3000", "/dashboard/games", PassThrough()),
        ("localhost:3000", "/about", PassThrough()),
        # Unknown hosts fall through
        ("preview.vercel.app", "/dashboard/games", PassThrough()),
        ("", "/", PassThrough()),
    ],
)
def test_route_table(host, path, expected):
    assert AccessRouter.route(host, path, POLICY) == expected


def test_host_match_ignores_port_and_case():
    assert AccessRouter.route("Creator.TheCookieJar.app:443", "/about", POLICY) == Redirect(PUBLIC, "/about")


def test_prefix_match_is_segment_aware():
    assert AccessRouter.route(PUBLIC, "/dashboards-are-cool", POLICY) == PassThrough()
    assert AccessRouter.route(PUBLIC, "/apiary", POLICY) == PassThrough()


def test_local_dev_mode_passes_marketing_paths_on_creator_host():
    policy = HostPolicy(public_host=PUBLIC, creator_host=CREATOR, local_dev=True)
    assert AccessRouter.route(CREATOR, "/about", policy) == PassThrough()
    assert AccessRouter.route(CREATOR, "/", policy) == Redirect(CREATOR, "/dashboard/overview")


HOSTS = [PUBLIC, CREATOR, "localhost:3000", "other.example"]
PATHS = ["/", "/about", "/pricing/plans", "/dashboard", "/dashboard/games", "/auth/signin", "/api/x"]


@pytest.mark.parametrize("host", HOSTS)
@pytest.mark.parametrize("path", PATHS)
def test_redirects_reach_a_fixed_point(host, path):
    decision = AccessRouter.route(host, path, POLICY)
    hops = 0
    while isinstance(decision, Redirect):
        hops += 1
        assert hops <= 2, f"redirect loop from {host}{path}"
        decision = AccessRouter.route(decision.host, decision.path, POLICY)
    assert decision == PassThrough()


@pytest.mark.parametrize("host", HOSTS)
@pytest.mark.parametrize("path", PATHS)
def test_redirect_preserves_path_except_creator_root(host, path):
    decision = AccessRouter.route(host, path, POLICY)
    if not isinstance(decision, Redirect):
        return
    if path == "/":
        assert decision.path == "/dashboard/overview"
    else:
        assert decision.path == path
