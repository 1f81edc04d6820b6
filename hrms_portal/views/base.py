"""
Page view models.

Every screen follows the same loop: fetch on mount, render, mutate on user
action, notify, re-fetch. Pages render to plain text so they can be driven
from the console or inspected in tests.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from hrms_portal.api.v1 import HRMSApi
from hrms_portal.core.exceptions import (
    ApiError,
    AuthenticationError,
    FormValidationError,
    HRMSError,
    ValidationError,
)
from hrms_portal.core.navigation import Navigator
from hrms_portal.core.notifications import NotificationCenter
from hrms_portal.core.session import SessionManager
from hrms_portal.forms.base import FormModel
from hrms_portal.services.exports import ExportError, generate_filename, save_export

logger = logging.getLogger("hrms_portal.views")


class ViewState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass
class PageContext:
    """Everything a page needs; built once per portal."""
    api: HRMSApi
    session: SessionManager
    navigator: Navigator
    notifier: NotificationCenter


class Page:
    title = ""
    load_error_message = "Failed to load data"

    def __init__(self, ctx: PageContext):
        self.ctx = ctx
        self.api = ctx.api
        self.session = ctx.session
        self.notifier = ctx.notifier
        self.state = ViewState.LOADING
        self.error: Optional[str] = None

    @property
    def user(self):
        return self.session.user

    # ============ Lifecycle ============

    async def mount(self) -> None:
        await self.refresh()

    async def refresh(self) -> None:
        """Re-issue the page's reads."""
        self.state = ViewState.LOADING
        try:
            await self.load()
        except HRMSError as e:
            self.state = ViewState.ERROR
            self.error = self.report_error(e, self.load_error_message) or self.load_error_message
            return
        self.state = ViewState.READY
        self.error = None

    async def load(self) -> None:
        """Fetch everything the page shows."""

    async def mutate(
        self,
        action: Awaitable,
        success: Optional[str] = None,
        failure: str = "Operation failed",
        form: Optional[FormModel] = None,
        refresh: bool = True,
    ) -> bool:
        """
        Run one user action, report the outcome and re-fetch.

        Args:
            action: Awaitable performing the request(s)
            success: Notification shown when the action succeeds
            failure: Fallback message when the server gives none
            form: Form whose fields receive server-side validation errors
            refresh: Re-fetch the page after success

        Returns:
            True on success
        """
        try:
            await action
        except FormValidationError as e:
            self.notifier.error(e.message)
            return False
        except HRMSError as e:
            self.report_error(e, failure, form)
            return False

        if success:
            self.notifier.success(success)
        if refresh:
            await self.refresh()
        return True

    def report_error(self, error: HRMSError, fallback: str, form: Optional[FormModel] = None) -> str:
        """
        Surface a failed request.

        Returns:
            The message shown, or "" when nothing was shown
        """
        if isinstance(error, AuthenticationError) and error.session_cleared:
            # Already redirected to /login
            return ""

        if form is not None and isinstance(error, ValidationError) and error.field_errors:
            if form.apply_server_errors(error):
                return ""

        message = fallback
        if isinstance(error, ApiError) and error.server_message:
            message = error.server_message
        logger.debug(f"{type(self).__name__}: {type(error).__name__}: {error.message}")
        self.notifier.error(message)
        return message

    # ============ Rendering ============

    def render(self) -> str:
        header = f"{self.title}\n{'=' * len(self.title)}" if self.title else ""
        if self.state == ViewState.LOADING:
            body = "Loading..."
        elif self.state == ViewState.ERROR:
            body = f"Error: {self.error}"
        else:
            body = self.render_content()
        return f"{header}\n{body}".strip("\n") if header else body

    def render_content(self) -> str:
        return ""

    # ============ Exports ============

    async def run_export(
        self,
        fetch: Callable[..., Awaitable[httpx.Response]],
        module: str,
        fmt: str,
        filters: Optional[Dict[str, Any]] = None,
        success: str = "Export completed",
    ) -> Optional[str]:
        """Download an export and save it under EXPORT_DIR. Returns the saved path."""
        try:
            response = await fetch(filters)
            path = save_export(response, generate_filename(module, fmt, filters))
        except ExportError as e:
            self.notifier.error(e.message)
            return None
        except HRMSError as e:
            self.report_error(e, "Export failed")
            return None
        self.notifier.success(success)
        return path
