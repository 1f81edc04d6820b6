"""
HRMS Portal entry point.

`HRMSPortal` wires the shared pieces together (settings, session, navigator,
notifications, API client, router). `main()` is the `hrms-portal` console:

    hrms-portal login alice@example.com
    hrms-portal whoami
    hrms-portal open /leaves
    hrms-portal logout
"""

import argparse
import asyncio
import getpass
import sys
from typing import Optional

import httpx

from hrms_portal.api.client import ApiClient
from hrms_portal.api.v1 import HRMSApi
from hrms_portal.core.config import settings
from hrms_portal.core.exceptions import HRMSError
from hrms_portal.core.logging_config import get_logger, setup_logging
from hrms_portal.core.navigation import LOGIN_PATH, Navigator
from hrms_portal.core.notifications import NotificationCenter, notifications
from hrms_portal.core.session import SessionManager, SessionStore
from hrms_portal.schemas.common import unwrap
from hrms_portal.views.base import Page, PageContext
from hrms_portal.views.login import LoginPage
from hrms_portal.views.routes import Router

logger = get_logger("hrms_portal")


class HRMSPortal:
    """One signed-in (or signed-out) portal instance."""

    def __init__(
        self,
        store: Optional[SessionStore] = None,
        notifier: Optional[NotificationCenter] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session = SessionManager(store)
        self.navigator = Navigator()
        self.notifier = notifier or notifications
        self.client = ApiClient(self.session, self.navigator, base_url=base_url, transport=transport)
        self.api = HRMSApi(self.client)
        self.ctx = PageContext(api=self.api, session=self.session, navigator=self.navigator, notifier=self.notifier)
        self.router = Router(self.ctx)

    async def startup(self) -> bool:
        """
        Restore the stored session and confirm it with the backend.

        The stored user is trusted until GET /auth/me answers; its fresh user
        record (with current permissions) then replaces the stored one. Any
        failure ends the session.

        Returns:
            True when a verified session is active
        """
        if self.session.load() is None:
            return False

        try:
            response = await self.api.auth.get_me()
        except HRMSError as e:
            logger.warning(f"Stored session rejected: {e.message}")
            self.session.logout()
            return False

        user = unwrap(response, "data", "user") or unwrap(response, "user")
        if not isinstance(user, dict):
            logger.warning("Session check returned no user; signing out")
            self.session.logout()
            return False

        self.session.refresh_user(user)
        logger.set_context(user=self.session.user.email or self.session.user.id)
        return True

    async def login(self, email: str, password: str) -> LoginPage:
        page = LoginPage(self.ctx)
        await page.mount()
        if await page.login(email, password):
            logger.set_context(user=email)
        return page

    async def google_login(self, id_token: str) -> LoginPage:
        page = LoginPage(self.ctx)
        await page.mount()
        await page.google_login(id_token)
        return page

    async def logout(self) -> None:
        """Clear local state first, then tell the backend (best effort)."""
        had_session = self.session.is_authenticated
        token = self.session.token
        self.session.logout()
        logger.clear_context()
        self.navigator.navigate(LOGIN_PATH, replace=True)
        if not had_session:
            return
        try:
            await self.api.auth.logout(token)
        except HRMSError as e:
            logger.warning(f"Logout request failed: {e.message}")

    async def open(self, path: str) -> Page:
        return await self.router.open(path)

    async def close(self) -> None:
        await self.client.close()


# ============ Console ============

def _print_page(portal: HRMSPortal, page: Page) -> None:
    print(f"[{portal.navigator.location}]")
    print(page.render())
    notification = portal.notifier.current
    if notification is not None:
        print(f"\n({notification.severity.value}) {notification.message}")


async def _run(args: argparse.Namespace) -> int:
    portal = HRMSPortal()
    try:
        if args.command == "login":
            password = args.password or getpass.getpass("Password: ")
            page = await portal.login(args.email, password)
            if page.login_error:
                print(page.login_error, file=sys.stderr)
                return 1
            print(f"Signed in as {portal.session.user.display_name} ({portal.session.user.role_name})")
            return 0

        if args.command == "google-login":
            page = await portal.google_login(args.id_token)
            if page.login_error:
                print(page.login_error, file=sys.stderr)
                return 1
            print(f"Signed in as {portal.session.user.display_name} ({portal.session.user.role_name})")
            return 0

        if args.command == "logout":
            portal.session.load()
            await portal.logout()
            print("Signed out")
            return 0

        verified = await portal.startup()

        if args.command == "whoami":
            if not verified:
                print("Not signed in", file=sys.stderr)
                return 1
            user = portal.session.user
            print(f"{user.display_name} <{user.email}>")
            print(f"Role:        {user.role_name}")
            print(f"Permissions: {', '.join(user.permissions) or '-'}")
            print(f"Pages:       {', '.join(portal.router.visible_routes())}")
            return 0

        if args.command == "open":
            page = await portal.open(args.route)
            _print_page(portal, page)
            return 0 if portal.navigator.location != LOGIN_PATH else 1

        return 2
    finally:
        await portal.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hrms-portal",
        description=f"{settings.PROJECT_NAME} console client ({settings.api_url})",
    )
    parser.add_argument("--log-level", help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ERROR)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    login = subparsers.add_parser("login", help="Sign in with email and password")
    login.add_argument("email")
    login.add_argument("--password", "-p", help="Prompted for when omitted")

    google = subparsers.add_parser("google-login", help="Sign in with a Google ID token")
    google.add_argument("id_token")

    subparsers.add_parser("logout", help="Sign out and forget the stored session")
    subparsers.add_parser("whoami", help="Show the signed-in user")

    open_cmd = subparsers.add_parser("open", help="Render a page, e.g. /dashboard or /leaves")
    open_cmd.add_argument("route")
    return parser


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(log_level=args.log_level or ("WARNING" if not settings.DEBUG else None))
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
