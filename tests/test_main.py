"""
Tests for hrms_portal/main.py - startup verification, logout and the console.
"""
import httpx
import pytest
import pytest_asyncio

from conftest import ADMIN_USER, BASE_URL, EMPLOYEE_USER, LEAVE_BALANCE_DATA, FakeBackend, json_response


@pytest_asyncio.fixture
async def make_portal(notifier):
    """Build portals over the fake backend; closes them afterwards."""
    from hrms_portal.core.session import MemorySessionStore
    from hrms_portal.main import HRMSPortal

    portals = []

    def _make(backend: FakeBackend, token=None, user=None):
        portal = HRMSPortal(
            store=MemorySessionStore(token, user),
            notifier=notifier,
            base_url=BASE_URL,
            transport=httpx.MockTransport(backend),
        )
        portals.append(portal)
        return portal

    yield _make
    for portal in portals:
        await portal.close()


class TestStartup:
    """Test restoring and verifying a stored session."""

    @pytest.mark.asyncio
    async def test_no_stored_session(self, make_portal, backend):
        portal = make_portal(backend)

        assert await portal.startup() is False
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_verified_session_gets_fresh_user(self, make_portal, backend):
        """GET /auth/me replaces the stored user and its permissions."""
        fresh = {**EMPLOYEE_USER, "permissions": ["view_dashboard_employee", "view_leaves_own"]}
        backend.on("GET", "/auth/me", json_response(success=True, data={"user": fresh}))
        portal = make_portal(backend, "tok", EMPLOYEE_USER)

        assert await portal.startup() is True
        assert portal.session.user.permissions == ["view_dashboard_employee", "view_leaves_own"]
        assert portal.session.store.read()[1]["permissions"] == fresh["permissions"]
        assert backend.requests[0].headers["Authorization"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_rejected_session_is_cleared(self, make_portal, backend):
        """A 401 from /auth/me ends the session without a redirect loop."""
        backend.on("GET", "/auth/me", json_response(401, success=False, message="jwt expired"))
        portal = make_portal(backend, "stale", ADMIN_USER)

        assert await portal.startup() is False
        assert not portal.session.is_authenticated
        assert portal.session.store.read() is None

    @pytest.mark.asyncio
    async def test_unreachable_backend_signs_out(self, make_portal):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        portal = make_portal(refuse, "tok", ADMIN_USER)

        assert await portal.startup() is False
        assert not portal.session.is_authenticated


class TestLogout:
    """Test local-first logout."""

    @pytest.mark.asyncio
    async def test_logout_sends_old_token(self, make_portal, backend):
        backend.on("POST", "/auth/logout", json_response(success=True))
        portal = make_portal(backend, "tok", ADMIN_USER)
        portal.session.load()

        await portal.logout()

        assert not portal.session.is_authenticated
        assert portal.navigator.location == "/login"
        assert backend.calls("POST", "/auth/logout")[0].headers["Authorization"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_logout_failure_is_swallowed(self, make_portal, backend):
        backend.on("POST", "/auth/logout", json_response(500, success=False))
        portal = make_portal(backend, "tok", ADMIN_USER)
        portal.session.load()

        await portal.logout()

        assert portal.session.store.read() is None

    @pytest.mark.asyncio
    async def test_logout_without_session_makes_no_request(self, make_portal, backend):
        portal = make_portal(backend)

        await portal.logout()

        assert backend.requests == []


class TestLoginFlow:
    """Test sign-in through the portal."""

    @pytest.mark.asyncio
    async def test_login_then_open(self, make_portal, backend):
        backend.on("POST", "/auth/login", json_response(success=True, token="tok-1", user=EMPLOYEE_USER))
        backend.on("GET", "/leaves/history", json_response(success=True, data=[]))
        backend.on("GET", "/leaves/balance", json_response(success=True, data=LEAVE_BALANCE_DATA))
        backend.on("GET", "/leaves/types", json_response(success=True, data=[]))
        portal = make_portal(backend)

        page = await portal.login("eli@example.com", "secret")
        assert page.login_error is None

        leaves = await portal.open("/leaves")

        assert portal.navigator.location == "/leaves"
        assert "No leave records found" in leaves.render()
        history_request = backend.calls("GET", "/leaves/history")[0]
        assert history_request.headers["Authorization"] == "Bearer tok-1"


class TestConsole:
    """Test argument parsing."""

    def test_parser(self):
        from hrms_portal.main import build_parser

        args = build_parser().parse_args(["--log-level", "DEBUG", "login", "a@example.com", "-p", "secret"])

        assert args.command == "login"
        assert args.email == "a@example.com"
        assert args.password == "secret"
        assert args.log_level == "DEBUG"

    def test_command_required(self):
        from hrms_portal.main import build_parser

        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_open_route(self):
        from hrms_portal.main import build_parser

        args = build_parser().parse_args(["open", "/leaves"])

        assert (args.command, args.route) == ("open", "/leaves")
