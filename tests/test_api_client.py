"""
Tests for hrms_portal/api/client.py - auth headers, 401 handling and errors.
"""
import httpx
import pytest

from conftest import ADMIN_USER, json_response


class TestAuthorizationHeader:
    """Test bearer token propagation."""

    @pytest.mark.asyncio
    async def test_no_header_without_session(self, client, backend):
        backend.on("GET", "/employees", json_response(success=True, data=[]))

        await client.get("/employees")

        assert "Authorization" not in backend.requests[0].headers

    @pytest.mark.asyncio
    async def test_bearer_after_login(self, client, backend, session):
        """Every request after login carries the session token."""
        backend.on("GET", "/employees", json_response(success=True, data=[]))
        session.login("tok-123", ADMIN_USER)

        await client.get("/employees")

        assert backend.requests[0].headers["Authorization"] == "Bearer tok-123"

    @pytest.mark.asyncio
    async def test_explicit_header_wins(self, client, backend, session):
        backend.on("POST", "/auth/logout", json_response(success=True))

        await client.request("POST", "/auth/logout", headers={"Authorization": "Bearer old"})

        assert backend.requests[0].headers["Authorization"] == "Bearer old"

    @pytest.mark.asyncio
    async def test_request_id_header(self, client, backend):
        """The request hook stamps a trace id on outgoing requests."""
        backend.on("GET", "/employees", json_response(success=True, data=[]))

        await client.get("/employees")

        assert backend.requests[0].headers.get("X-Request-ID")


class TestUnauthorizedHandling:
    """Test forced logout on 401."""

    @pytest.mark.asyncio
    async def test_401_clears_session_and_redirects(self, client, backend, session, navigator):
        """A 401 from a protected endpoint ends the session."""
        from hrms_portal.core.exceptions import AuthenticationError

        backend.on("GET", "/leaves/history", json_response(401, success=False, message="Token expired"))
        session.login("stale", ADMIN_USER)
        navigator.navigate("/leaves")

        with pytest.raises(AuthenticationError) as exc_info:
            await client.get("/leaves/history")

        assert exc_info.value.session_cleared is True
        assert session.token is None
        assert session.store.read() is None
        assert navigator.location == "/login"

    @pytest.mark.asyncio
    async def test_401_on_login_is_reported_inline(self, client, backend, session, navigator):
        """Bad credentials do not trigger the redirect."""
        from hrms_portal.core.exceptions import AuthenticationError

        backend.on("POST", "/auth/login", json_response(401, success=False, message="Invalid credentials"))
        navigator.navigate("/login")
        session.login("existing", ADMIN_USER)

        with pytest.raises(AuthenticationError) as exc_info:
            await client.post("/auth/login", json={"email": "a@example.com", "password": "x"})

        assert exc_info.value.session_cleared is False
        assert exc_info.value.message == "Invalid credentials"
        assert session.token == "existing"

    @pytest.mark.asyncio
    async def test_401_on_register_keeps_session(self, client, backend, session, navigator):
        from hrms_portal.api.v1.auth import AuthAPI
        from hrms_portal.core.exceptions import AuthenticationError

        backend.on("POST", "/auth/register", json_response(401, success=False, message="Registration closed"))
        navigator.navigate("/register")
        session.login("existing", ADMIN_USER)

        with pytest.raises(AuthenticationError) as exc_info:
            await AuthAPI(client).register({"email": "new@example.com", "password": "secret1"})

        assert exc_info.value.session_cleared is False
        assert session.token == "existing"
        assert navigator.location == "/register"

    @pytest.mark.asyncio
    async def test_403_keeps_session(self, client, backend, session):
        from hrms_portal.core.exceptions import AuthorizationError

        backend.on("GET", "/roles", json_response(403, success=False, message="Forbidden"))
        session.login("tok", ADMIN_USER)

        with pytest.raises(AuthorizationError):
            await client.get("/roles")

        assert session.is_authenticated


class TestTransport:
    """Test request shaping and transport failures."""

    def test_is_auth_request(self):
        from hrms_portal.api.client import ApiClient

        assert ApiClient.is_auth_request("/auth/login")
        assert ApiClient.is_auth_request("/auth/me")
        assert ApiClient.is_auth_request("/auth/register")
        assert not ApiClient.is_auth_request("/auth/logout")
        assert not ApiClient.is_auth_request("/employees")

    @pytest.mark.asyncio
    async def test_none_params_are_dropped(self, client, backend):
        backend.on("GET", "/employees", json_response(success=True, data=[]))

        await client.get("/employees", params={"search": "asha", "status": None})

        assert dict(backend.requests[0].url.params) == {"search": "asha"}

    @pytest.mark.asyncio
    async def test_transport_failure_raises_network_error(self, session, navigator):
        from hrms_portal.api.client import ApiClient
        from hrms_portal.core.exceptions import NetworkError

        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        api_client = ApiClient(session, navigator, base_url="http://hrms.test/api/v1",
                               transport=httpx.MockTransport(refuse))
        try:
            with pytest.raises(NetworkError):
                await api_client.get("/employees")
        finally:
            await api_client.close()

    @pytest.mark.asyncio
    async def test_validation_error_carries_fields(self, client, backend):
        from hrms_portal.core.exceptions import ValidationError

        backend.on("POST", "/departments", json_response(
            400, success=False, message="Validation failed",
            errors=[{"field": "code", "message": "Code already exists"}],
        ))

        with pytest.raises(ValidationError) as exc_info:
            await client.post("/departments", json={"name": "Eng", "code": "ENG"})

        assert exc_info.value.field_errors == {"code": "Code already exists"}

    @pytest.mark.asyncio
    async def test_json_body_content_type(self, client, backend):
        backend.on("POST", "/departments", json_response(201, success=True))

        await client.post("/departments", json={"name": "Eng"})

        request = backend.requests[0]
        assert request.headers["Content-Type"] == "application/json"
        assert backend.body(request) == {"name": "Eng"}

    @pytest.mark.asyncio
    async def test_upload_is_multipart(self, client, backend):
        backend.on("POST", "/employees/e1/documents", json_response(201, success=True))

        await client.upload(
            "/employees/e1/documents",
            files={"file": ("pan.pdf", b"%PDF", "application/pdf")},
            data={"documentType": "PAN Card"},
        )

        request = backend.requests[0]
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b"PAN Card" in request.content

    @pytest.mark.asyncio
    async def test_client_is_recreated_after_close(self, client, backend):
        backend.on("GET", "/employees", json_response(success=True, data=[]))

        await client.get("/employees")
        await client.close()
        await client.get("/employees")

        assert len(backend.requests) == 2
