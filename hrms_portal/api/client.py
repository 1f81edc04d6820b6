"""
HTTP client for the HRMS REST backend.

Uses httpx.AsyncClient with:
- A fixed base URL (`settings.api_url`)
- Bearer token taken from the session on every request
- Forced logout + redirect to /login on 401 from protected endpoints
- No retries, no caching and no request de-duplication
"""

import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from hrms_portal.core.config import settings
from hrms_portal.core.exceptions import AuthenticationError, NetworkError, error_from_response
from hrms_portal.core.logging_config import log_request, log_response
from hrms_portal.core.navigation import Navigator
from hrms_portal.core.session import SessionManager

logger = logging.getLogger("hrms_portal.api")

FileSpec = Mapping[str, Any]


def _drop_none(params: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    # Unset filters are left out of the query string
    if params is None:
        return None
    return {k: v for k, v in params.items() if v is not None}


class ApiClient:
    """
    Thin async wrapper around httpx.AsyncClient.

    Every call returns the raw httpx.Response for 2xx statuses. Anything else
    raises an ApiError subclass; transport failures raise NetworkError.
    """

    def __init__(
        self,
        session: SessionManager,
        navigator: Navigator,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session = session
        self.navigator = navigator
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers={
                    "Accept": "application/json",
                    "User-Agent": f"{settings.PROJECT_NAME.replace(' ', '')}/1.0",
                },
                event_hooks={"request": [log_request], "response": [log_response]},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @staticmethod
    def is_auth_request(url: str) -> bool:
        """Auth endpoints report 401 inline instead of ending the session."""
        return any(endpoint in url for endpoint in settings.AUTH_ENDPOINTS)

    def _auth_headers(self) -> Dict[str, str]:
        token = self.session.token
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        data: Optional[Mapping[str, Any]] = None,
        files: Optional[FileSpec] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        """
        Send one request against the backend.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE)
            path: Path relative to the API base (e.g. "/leaves/apply")
            params: Query parameters; None values are dropped
            json: JSON body
            data: Form fields (multipart when `files` is given)
            files: Multipart files, httpx format
            headers: Extra headers; they override the session bearer token

        Returns:
            httpx.Response for a 2xx status

        Raises:
            NetworkError: the request never produced a response
            ApiError: non-2xx status (subclass chosen by status code)
        """
        client = await self._get_client()
        request_headers = self._auth_headers()
        if json is not None and files is None:
            request_headers["Content-Type"] = "application/json"
        if headers:
            request_headers.update(headers)

        try:
            response = await client.request(
                method.upper(),
                path,
                params=_drop_none(params),
                json=json,
                data=data,
                files=files,
                headers=request_headers,
            )
        except httpx.TransportError as e:
            logger.warning(f"{method.upper()} {path} failed: {e}")
            raise NetworkError(f"Could not reach the HRMS server: {e}") from e

        if response.is_success:
            return response

        # Binary endpoints may answer errors with JSON; make sure the body is loaded
        await response.aread()
        error = error_from_response(response)

        if isinstance(error, AuthenticationError) and not self.is_auth_request(path):
            self.session.invalidate()
            self.navigator.redirect_to_login()
            error.session_cleared = True

        raise error

    async def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> httpx.Response:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None, params: Optional[Mapping[str, Any]] = None) -> httpx.Response:
        return await self.request("POST", path, params=params, json=json)

    async def put(self, path: str, json: Any = None) -> httpx.Response:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> httpx.Response:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str, params: Optional[Mapping[str, Any]] = None) -> httpx.Response:
        return await self.request("DELETE", path, params=params)

    async def upload(
        self,
        path: str,
        files: FileSpec,
        data: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Response:
        """POST multipart form data (documents, résumés)."""
        return await self.request("POST", path, data=data, files=files)

    async def download(self, path: str, params: Optional[Mapping[str, Any]] = None) -> httpx.Response:
        """GET a binary payload (CSV/PDF exports, payslips)."""
        return await self.request("GET", path, params=params)


class AreaAPI:
    """Base for the per-area clients; all of them share one ApiClient."""

    def __init__(self, client: ApiClient):
        self.client = client
