"""
Shared test fixtures for the HRMS portal tests.

HTTP never leaves the process: `FakeBackend` answers requests through
httpx.MockTransport from a table of canned responses.
"""
import json
import os
from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest
import pytest_asyncio

# Set test environment before importing portal modules
os.environ["ENVIRONMENT"] = "development"
os.environ["DEBUG"] = "true"

from hrms_portal.api.client import ApiClient  # noqa: E402
from hrms_portal.api.v1 import HRMSApi  # noqa: E402
from hrms_portal.core.navigation import Navigator  # noqa: E402
from hrms_portal.core.notifications import NotificationCenter  # noqa: E402
from hrms_portal.core.session import MemorySessionStore, SessionManager  # noqa: E402
from hrms_portal.views.base import PageContext  # noqa: E402

BASE_URL = "http://hrms.test/api/v1"

Handler = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


def json_response(status_code: int = 200, **body: Any) -> httpx.Response:
    return httpx.Response(status_code, json=body)


class FakeBackend:
    """Routes `(METHOD, path)` to canned responses and records every request."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.requests: List[httpx.Request] = []

    def on(self, method: str, path: str, response: Handler) -> None:
        self.routes[(method.upper(), path)] = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith("/api/v1"):
            path = path[len("/api/v1"):]
        handler = self.routes.get((request.method, path))
        if handler is None:
            return json_response(404, success=False, message=f"No route {request.method} {path}")
        if callable(handler):
            return handler(request)
        return handler

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method.upper() and r.url.path == f"/api/v1{path}"
        ]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content.decode("utf-8"))


ADMIN_USER = {
    "_id": "u-admin",
    "name": "Asha Admin",
    "email": "admin@example.com",
    "role": "admin",
    "permissions": [
        "view_dashboard_admin", "view_employees", "manage_employees",
        "view_leaves_all", "manage_leaves", "view_payroll_all",
        "view_attendance_all", "view_tickets_all", "manage_tickets",
    ],
}

EMPLOYEE_USER = {
    "_id": "u-emp",
    "name": "Eli Employee",
    "email": "eli@example.com",
    "role": {"_id": "r-emp", "name": "Employee"},
    "permissions": [
        "view_dashboard_employee", "view_leaves_own", "view_payroll_own",
        "view_attendance_own", "view_tickets_own",
    ],
}

# Shape of GET /leaves/balance: entitlements keyed by leave type
LEAVE_BALANCE_DATA = {
    "employeeId": "e-emp",
    "balances": {
        "casualLeave": {"totalAllowed": 12, "used": 2, "available": 10, "pending": 1},
        "sickLeave": {"totalAllowed": 10, "used": 0, "available": 10, "pending": 0},
        "earnedLeave": {"totalAllowed": 15, "used": 5, "available": 10, "pending": 0},
        "maternityLeave": {"totalAllowed": 0, "used": 0, "available": 0, "pending": 0},
    },
    "lastUpdated": "2025-03-01T09:00:00.000Z",
}


@pytest.fixture
def backend():
    """Fake HRMS backend with no routes registered."""
    return FakeBackend()


@pytest.fixture
def session():
    """Session manager over an in-memory store."""
    return SessionManager(MemorySessionStore())


@pytest.fixture
def navigator():
    return Navigator()


@pytest.fixture
def notifier():
    """Notification center with a long timeout so messages stay visible during a test."""
    return NotificationCenter(timeout_ms=60000)


@pytest_asyncio.fixture
async def client(backend, session, navigator):
    """ApiClient wired to the fake backend."""
    api_client = ApiClient(session, navigator, base_url=BASE_URL, transport=httpx.MockTransport(backend))
    yield api_client
    await api_client.close()


@pytest.fixture
def api(client):
    return HRMSApi(client)


@pytest.fixture
def ctx(api, session, navigator, notifier):
    """Page context shared by the page tests."""
    return PageContext(api=api, session=session, navigator=navigator, notifier=notifier)


@pytest.fixture
def admin_session(session):
    session.login("admin-token", ADMIN_USER)
    return session


@pytest.fixture
def employee_session(session):
    session.login("employee-token", EMPLOYEE_USER)
    return session
