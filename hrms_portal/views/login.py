import logging
from typing import Optional

from hrms_portal.core.exceptions import HRMSError, NetworkError
from hrms_portal.core.navigation import HOME_PATH
from hrms_portal.schemas.auth import LoginResponse
from hrms_portal.views.base import Page

logger = logging.getLogger("hrms_portal.views.login")


class LoginPage(Page):
    """Password and Google sign-in. Failures are shown on the page, not as notifications."""

    title = "Login to Your Account"

    def __init__(self, ctx):
        super().__init__(ctx)
        self.login_error: Optional[str] = None

    async def login(self, email: str, password: str) -> bool:
        if not email or not password:
            self.login_error = "Please enter email and password"
            return False
        try:
            response = await self.api.auth.login(email, password)
        except HRMSError as e:
            self.login_error = self._failure_message(e, "Login failed")
            return False
        return self._start_session(response, "Login failed")

    async def google_login(self, id_token: str) -> bool:
        try:
            response = await self.api.auth.google_login(id_token)
        except HRMSError as e:
            self.login_error = self._failure_message(e, "Google Login failed")
            return False
        return self._start_session(response, "Google Login failed")

    def _start_session(self, response, fallback: str) -> bool:
        payload = LoginResponse.model_validate(response.json())
        if not payload.token or payload.user is None:
            self.login_error = payload.message or fallback
            return False
        self.session.login(payload.token, payload.user)
        self.login_error = None
        self.ctx.navigator.navigate(HOME_PATH, replace=True)
        return True

    @staticmethod
    def _failure_message(error: HRMSError, fallback: str) -> str:
        if isinstance(error, NetworkError):
            return error.message
        return getattr(error, "server_message", None) or fallback

    def render_content(self) -> str:
        lines = ["HRMS - Human Resource Management System", "", "Email:", "Password:"]
        if self.login_error:
            lines.append(f"! {self.login_error}")
        return "\n".join(lines)
