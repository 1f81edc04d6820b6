"""
Route table and guards.

Unauthenticated users only ever reach /login. Authenticated users reach a
page when they hold any of its permissions (and its role, where one is
required); otherwise they get the Access Restricted page.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Type

from hrms_portal.core.navigation import HOME_PATH, LOGIN_PATH, normalize_path
from hrms_portal.views.appraisals import AppraisalsPage
from hrms_portal.views.attendance import AttendancePage
from hrms_portal.views.base import Page, PageContext
from hrms_portal.views.dashboard import DashboardPage
from hrms_portal.views.employees import EmployeesPage
from hrms_portal.views.helpdesk import HelpdeskPage
from hrms_portal.views.leaves import LeaveSettingsPage, LeavesPage
from hrms_portal.views.login import LoginPage
from hrms_portal.views.organization import DepartmentsPage, DesignationsPage, LocationsPage
from hrms_portal.views.payroll import MyPayslipsPage, PayrollPage
from hrms_portal.views.performance import GoalsPage, PerformancePage
from hrms_portal.views.profile import ProfilePage
from hrms_portal.views.roles import RoleManagementPage

logger = logging.getLogger("hrms_portal.routes")


class AccessDenied(Page):
    title = "Access Restricted"

    def render_content(self) -> str:
        return (
            "This section isn't available for your role. If you believe this is a mistake, "
            "please contact your administrator.\n"
            f"Back to Dashboard: {HOME_PATH}"
        )


@dataclass(frozen=True)
class Route:
    path: str
    page: Type[Page]
    permissions: Tuple[str, ...] = ()
    roles: Tuple[str, ...] = ()
    # Users without any of these get `self_service` instead of `page`
    manager_permissions: Tuple[str, ...] = ()
    self_service: Optional[Type[Page]] = None


ROUTES: Sequence[Route] = (
    Route("/dashboard", DashboardPage, ("view_dashboard_admin", "view_dashboard_hr", "view_dashboard_employee")),
    Route("/profile", ProfilePage),
    Route("/employees", EmployeesPage, ("view_employees",)),
    Route("/attendance", AttendancePage, ("view_attendance_all", "view_attendance_own")),
    Route("/leaves", LeavesPage, ("view_leaves_all", "view_leaves_own")),
    Route("/leaves/settings", LeaveSettingsPage, roles=("admin", "hr")),
    Route(
        "/payroll",
        PayrollPage,
        ("view_payroll_all", "view_payroll_own"),
        manager_permissions=("view_payroll_all",),
        self_service=MyPayslipsPage,
    ),
    Route("/payroll/my-payslips", MyPayslipsPage, ("view_payroll_all", "view_payroll_own")),
    Route("/helpdesk", HelpdeskPage, ("view_tickets_all", "view_tickets_own")),
    Route("/departments", DepartmentsPage, roles=("admin", "hr")),
    Route("/designations", DesignationsPage, roles=("admin", "hr")),
    Route("/locations", LocationsPage, roles=("admin", "hr")),
    Route("/roles", RoleManagementPage, roles=("admin",)),
    Route("/goals", GoalsPage),
    Route("/reviews", PerformancePage),
    Route("/appraisals", AppraisalsPage),
)


class Router:
    def __init__(self, ctx: PageContext, routes: Optional[Sequence[Route]] = None):
        self.ctx = ctx
        self.routes: Dict[str, Route] = {r.path: r for r in (routes if routes is not None else ROUTES)}
        self.current: Optional[Page] = None

    def is_allowed(self, route: Route) -> bool:
        session = self.ctx.session
        if route.permissions and not session.has_any_permission(route.permissions):
            return False
        if route.roles and not session.has_role(*route.roles):
            return False
        return True

    def visible_routes(self) -> List[str]:
        """Paths the current user may open (the navigation menu)."""
        if not self.ctx.session.is_authenticated:
            return [LOGIN_PATH]
        return [path for path, route in self.routes.items() if self.is_allowed(route)]

    def resolve(self, path: str) -> Tuple[str, Type[Page]]:
        """
        Decide where a navigation to `path` ends up.

        Returns:
            (final path, page class); the page class is AccessDenied when
            the user lacks permission for an existing route
        """
        path = normalize_path(path)
        if not self.ctx.session.is_authenticated:
            return LOGIN_PATH, LoginPage
        if path in ("/", LOGIN_PATH):
            path = HOME_PATH

        route = self.routes.get(path)
        if route is None:
            logger.debug(f"Unknown route {path}, falling back to {HOME_PATH}")
            path = HOME_PATH
            route = self.routes[HOME_PATH]

        if not self.is_allowed(route):
            return path, AccessDenied
        if route.self_service and not self.ctx.session.has_any_permission(route.manager_permissions):
            return path, route.self_service
        return path, route.page

    async def open(self, path: str) -> Page:
        """Navigate to `path`, then build and mount the resulting page."""
        final_path, page_cls = self.resolve(path)
        redirected = final_path != normalize_path(path)
        if final_path != self.ctx.navigator.location or redirected:
            self.ctx.navigator.navigate(final_path, replace=redirected)

        page = page_cls(self.ctx)
        await page.mount()
        self.current = page
        return page
