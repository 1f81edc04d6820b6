"""
Tests for hrms_portal/views - page loop, error surfacing and individual pages.
"""
import httpx
import pytest

from conftest import ADMIN_USER, EMPLOYEE_USER, LEAVE_BALANCE_DATA, json_response


class TestTables:
    """Test text table rendering."""

    def test_empty_rows_render_message(self):
        """An empty collection never renders an empty table."""
        from hrms_portal.views.tables import render_table

        assert render_table([], [("name", "Name")], "No employees found") == "No employees found"

    def test_columns_in_order(self):
        from hrms_portal.views.tables import render_table

        text = render_table(
            [{"name": "Ravi", "code": "EMP001", "extra": "x"}],
            [("code", "Code"), ("name", "Name")],
            "No employees found",
        )

        header = text.splitlines()[0]
        assert header.index("Code") < header.index("Name")
        assert "EMP001" in text
        assert "extra" not in text

    def test_format_cell(self):
        from datetime import date, datetime

        from hrms_portal.schemas.leave import LeaveStatus
        from hrms_portal.views.tables import format_cell, format_money

        assert format_cell(None) == ""
        assert format_cell(True) == "Yes"
        assert format_cell(LeaveStatus.PENDING) == "Pending"
        assert format_cell(date(2025, 3, 1)) == "2025-03-01"
        assert format_cell(datetime(2025, 3, 1, 9, 30)) == "2025-03-01 09:30"
        assert format_cell(1500.0) == "1,500"
        assert format_money(1234.5) == "₹1,234.50"


class TestPageLoop:
    """Test mount, mutate and error reporting on the base page."""

    @pytest.mark.asyncio
    async def test_load_failure_sets_error_state(self, ctx, backend, admin_session, notifier):
        from hrms_portal.views.base import ViewState
        from hrms_portal.views.employees import EmployeesPage

        backend.on("GET", "/employees", json_response(500, success=False))
        page = EmployeesPage(ctx)

        await page.mount()

        assert page.state == ViewState.ERROR
        assert page.render().endswith("Error: Failed to fetch employees")
        assert notifier.current.message == "Failed to fetch employees"

    @pytest.mark.asyncio
    async def test_server_message_preferred(self, ctx, backend, admin_session, notifier):
        from hrms_portal.views.organization import DepartmentsPage

        backend.on("GET", "/departments", json_response(success=True, data=[]))
        backend.on("DELETE", "/departments/d1", json_response(409, success=False, message="Department has employees"))
        page = DepartmentsPage(ctx)
        await page.mount()

        assert await page.delete("d1") is False
        assert notifier.current.message == "Department has employees"

    @pytest.mark.asyncio
    async def test_field_errors_go_to_form(self, ctx, backend, admin_session, notifier):
        """Mapped server field errors replace the generic notification."""
        from hrms_portal.forms.simple import DepartmentForm
        from hrms_portal.views.organization import DepartmentsPage

        backend.on("GET", "/departments", json_response(success=True, data=[]))
        backend.on("POST", "/departments", json_response(
            400, success=False, message="Validation failed",
            errors=[{"field": "code", "message": "Code already exists"}],
        ))
        page = DepartmentsPage(ctx)
        await page.mount()
        form = DepartmentForm({"name": "Engineering", "code": "ENG"}, notifier=notifier)

        assert await page.save(form) is False
        assert form.errors == {"code": "Code already exists"}
        assert notifier.current is None

    @pytest.mark.asyncio
    async def test_expired_session_is_silent(self, ctx, backend, admin_session, navigator, notifier):
        """After a forced logout the page shows no error notification."""
        from hrms_portal.views.employees import EmployeesPage

        backend.on("GET", "/employees", json_response(401, success=False, message="jwt expired"))
        page = EmployeesPage(ctx)

        await page.mount()

        assert notifier.current is None
        assert navigator.location == "/login"
        assert not admin_session.is_authenticated

    @pytest.mark.asyncio
    async def test_export_rejects_json(self, ctx, backend, admin_session, notifier, tmp_path, monkeypatch):
        from hrms_portal.core.config import settings
        from hrms_portal.views.leaves import LeavesPage

        monkeypatch.setattr(settings, "EXPORT_DIR", str(tmp_path))
        backend.on("GET", "/leaves/export/csv", json_response(success=False, message="No data"))
        page = LeavesPage(ctx)

        assert await page.export("csv") is None
        assert notifier.current.message == "Invalid response format"

    @pytest.mark.asyncio
    async def test_export_saves_file(self, ctx, backend, admin_session, notifier, tmp_path, monkeypatch):
        from hrms_portal.core.config import settings
        from hrms_portal.views.leaves import LeavesPage

        monkeypatch.setattr(settings, "EXPORT_DIR", str(tmp_path))
        backend.on("GET", "/leaves/export/pdf", httpx.Response(
            200, content=b"%PDF-1.4", headers={"content-type": "application/pdf"},
        ))
        page = LeavesPage(ctx)

        path = await page.export("pdf")

        assert path is not None
        assert path.endswith(".pdf")
        assert notifier.current.message == "Leave report exported successfully"


class TestLoginPage:
    """Test inline login errors and session start."""

    @pytest.mark.asyncio
    async def test_bad_credentials_inline(self, ctx, backend, session, navigator, notifier):
        from hrms_portal.views.login import LoginPage

        backend.on("POST", "/auth/login", json_response(401, success=False, message="Invalid credentials"))
        navigator.navigate("/login")
        page = LoginPage(ctx)
        await page.mount()

        assert await page.login("a@example.com", "wrong") is False
        assert page.login_error == "Invalid credentials"
        assert "! Invalid credentials" in page.render()
        assert navigator.location == "/login"
        assert notifier.current is None

    @pytest.mark.asyncio
    async def test_empty_fields(self, ctx, backend):
        from hrms_portal.views.login import LoginPage

        page = LoginPage(ctx)

        assert await page.login("", "") is False
        assert page.login_error == "Please enter email and password"
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_success_starts_session(self, ctx, backend, session, navigator):
        from hrms_portal.views.login import LoginPage

        backend.on("POST", "/auth/login", json_response(success=True, token="tok-9", user=ADMIN_USER))
        page = LoginPage(ctx)

        assert await page.login("admin@example.com", "secret") is True
        assert session.token == "tok-9"
        assert session.store.read()[0] == "tok-9"
        assert navigator.location == "/dashboard"


def _register_leave_reads(backend, pending=None):
    backend.on("GET", "/leaves/history", json_response(success=True, data=[]))
    backend.on("GET", "/leaves/balance", json_response(success=True, data=LEAVE_BALANCE_DATA))
    backend.on("GET", "/leaves/types", json_response(success=True, data=[]))
    backend.on("GET", "/leaves/pending-approvals", json_response(success=True, data=pending or []))


class TestLeavesPage:
    """Test approval gating and leave actions."""

    @pytest.mark.asyncio
    async def test_employee_skips_pending_approvals(self, ctx, backend, employee_session):
        from hrms_portal.views.leaves import LeavesPage

        _register_leave_reads(backend)
        page = LeavesPage(ctx)

        await page.mount()

        assert page.can_approve is False
        assert backend.calls("GET", "/leaves/pending-approvals") == []
        text = page.render()
        assert "No leave records found" in text
        assert "Pending Approvals" not in text

    @pytest.mark.asyncio
    async def test_balances_keyed_by_leave_type(self, ctx, backend, employee_session):
        from hrms_portal.views.leaves import LeavesPage

        _register_leave_reads(backend)
        page = LeavesPage(ctx)

        await page.mount()

        casual = page.balances[0]
        assert [b.leave_type for b in page.balances] == [
            "Casual Leave", "Sick Leave", "Earned Leave", "Maternity Leave",
        ]
        assert (casual.total_accrued, casual.used, casual.available, casual.pending) == (12, 2, 10, 1)
        text = page.render()
        assert "Casual Leave" in text
        assert "No leave balance available" not in text

    @pytest.mark.asyncio
    async def test_balance_list_and_empty_shapes(self, ctx, backend, employee_session):
        from hrms_portal.views.leaves import LeavesPage

        _register_leave_reads(backend)
        backend.on("GET", "/leaves/balance", json_response(success=True, data=[
            {"leaveType": {"name": "Casual"}, "totalAccrued": 8, "used": 1, "available": 7, "pending": 0},
        ]))
        page = LeavesPage(ctx)
        await page.mount()

        assert page.balances[0].total_accrued == 8
        assert "Casual" in page.render()

        backend.on("GET", "/leaves/balance", json_response(success=True, data={"balances": {}}))
        await page.refresh()

        assert page.balances == []
        assert "No leave balance available" in page.render()

    @pytest.mark.asyncio
    async def test_manager_sees_pending_approvals(self, ctx, backend, admin_session):
        from hrms_portal.views.leaves import LeavesPage

        _register_leave_reads(backend, pending=[{
            "_id": "l1",
            "employeeId": {"firstName": "Ravi", "lastName": "Kumar"},
            "leaveType": {"name": "Casual"},
            "startDate": "2025-03-10T00:00:00Z",
            "endDate": "2025-03-11T00:00:00Z",
            "totalDays": 2,
            "reason": "Travel",
            "status": "pending",
        }])
        page = LeavesPage(ctx)

        await page.mount()

        assert len(page.pending) == 1
        assert "Ravi Kumar" in page.render()

    @pytest.mark.asyncio
    async def test_role_fallback_without_permission_list(self, ctx, session):
        from hrms_portal.views.leaves import LeavesPage

        session.login("tok", {"_id": "u-hr", "role": "HR", "permissions": []})

        assert LeavesPage(ctx).can_approve is True

    @pytest.mark.asyncio
    async def test_reject_requires_reason(self, ctx, backend, admin_session, notifier):
        from hrms_portal.views.leaves import LeavesPage

        page = LeavesPage(ctx)

        assert await page.reject("l1", "  ") is False
        assert notifier.current.message == "Rejection reason is required"
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_approve_refreshes(self, ctx, backend, admin_session, notifier):
        from hrms_portal.views.leaves import LeavesPage

        _register_leave_reads(backend)
        backend.on("PUT", "/leaves/l1/status", json_response(success=True))
        page = LeavesPage(ctx)

        assert await page.approve("l1") is True
        assert notifier.current.message == "Leave approved successfully!"
        assert len(backend.calls("GET", "/leaves/history")) == 1

    @pytest.mark.asyncio
    async def test_apply_with_invalid_form(self, ctx, backend, employee_session, notifier):
        from hrms_portal.views.leaves import LeavesPage

        page = LeavesPage(ctx)
        form = page.application_form()

        assert await page.apply(form) is False
        assert notifier.current.message == "Please fix errors before proceeding"
        assert "leaveType" in form.errors
        assert backend.requests == []


class TestEmployeesPage:
    """Test onboarding and the one-time credentials dialog."""

    @pytest.mark.asyncio
    async def test_generated_password_shown_once(self, ctx, backend, admin_session):
        from hrms_portal.views.employees import EmployeesPage

        backend.on("GET", "/employees", json_response(success=True, data=[]))
        backend.on("POST", "/employees", json_response(201, success=True, data={
            "employee": {"_id": "e1", "email": "ravi@example.com"},
            "generatedPassword": "Tmp#1234",
        }))
        page = EmployeesPage(ctx)
        await page.mount()

        form = page.new_form()
        form.update(firstName="Ravi", lastName="Kumar", email="ravi@example.com", phone="9876543210",
                    department="d1", designation="g1", employmentType="Full-time", salary="50000")
        result = await page.save(form)

        assert result.generated_password == "Tmp#1234"
        assert "Tmp#1234" in page.render()
        page.dismiss_credentials()
        assert "Tmp#1234" not in page.render()
        assert "No employees found" in page.render()

    @pytest.mark.asyncio
    async def test_can_manage(self, ctx, admin_session):
        from hrms_portal.views.employees import EmployeesPage

        assert EmployeesPage(ctx).can_manage is True

    @pytest.mark.asyncio
    async def test_delete_failure_message(self, ctx, backend, admin_session, notifier):
        from hrms_portal.views.employees import EmployeesPage

        backend.on("DELETE", "/employees/e1", json_response(500, success=False))
        page = EmployeesPage(ctx)

        assert await page.delete("e1") is False
        assert notifier.current.message == "Failed to deactivate employee"


class TestPayrollPages:
    """Test payroll generation and the employee payslip year view."""

    @pytest.mark.asyncio
    async def test_generate_reports_count(self, ctx, backend, admin_session, notifier):
        from hrms_portal.views.payroll import PayrollPage

        backend.on("POST", "/payroll/generate", json_response(success=True, data={
            "summary": {"successfullyGenerated": 12},
        }))
        backend.on("GET", "/payroll/payslips/3/2025", json_response(success=True, data=[]))
        page = PayrollPage(ctx)
        page.month, page.year = 3, 2025

        assert await page.generate() is True
        assert notifier.current.message == "Payroll generated for 12 employees!"
        assert page.render_content() == "No payslips found for 3/2025"

    @pytest.mark.asyncio
    async def test_my_payslips_skips_missing_months(self, ctx, backend, employee_session):
        from hrms_portal.views.payroll import MyPayslipsPage

        backend.on("GET", "/employees/me", json_response(success=True, data={"employee": {"_id": "e9"}}))
        backend.on("GET", "/payroll/payslip/e9/3/2025", json_response(success=True, data={
            "_id": "p3", "month": 3, "year": 2025, "netSalary": 42000, "status": "paid",
        }))
        page = MyPayslipsPage(ctx)
        page.year = 2025

        await page.mount()

        assert [p.month for p in page.payslips] == [3]
        assert len(backend.calls("GET", "/employees/me")) == 1
        assert "₹42,000.00" in page.render()


class TestRoleManagementPage:
    """Test permission matrix toggles."""

    @pytest.fixture
    def role_routes(self, backend):
        backend.on("GET", "/roles", json_response(success=True, data=[
            {"_id": "r1", "name": "Admin", "isSystem": True, "permissions": ["p1"]},
            {"_id": "r2", "name": "Team Lead", "permissions": ["p1"]},
        ]))
        backend.on("GET", "/roles/permissions", json_response(success=True, data=[], grouped={
            "leaves": [
                {"_id": "p1", "name": "view_leaves_all", "module": "leaves"},
                {"_id": "p2", "name": "approve_leaves", "module": "leaves"},
            ],
        }))
        backend.on("GET", "/auth/users", json_response(success=True, data=[]))
        backend.on("PUT", "/roles/r2", json_response(success=True))
        return backend

    @pytest.mark.asyncio
    async def test_matrix_cells(self, ctx, role_routes, admin_session):
        from hrms_portal.views.roles import RoleManagementPage

        page = RoleManagementPage(ctx)
        await page.mount()

        row = page.matrix(page.role("r2"))[0]
        assert row == {"module": "leaves", "view": "[x]", "create": "-", "update": "[ ]", "delete": "-", "other": "-"}

    @pytest.mark.asyncio
    async def test_toggle_sends_new_ids(self, ctx, role_routes, admin_session):
        from hrms_portal.views.roles import RoleManagementPage

        page = RoleManagementPage(ctx)
        await page.mount()

        assert await page.toggle_permission("r2", "leaves", "update") is True
        body = role_routes.body(role_routes.calls("PUT", "/roles/r2")[0])
        assert body == {"permissions": ["p1", "p2"]}

    @pytest.mark.asyncio
    async def test_system_role_is_read_only(self, ctx, role_routes, admin_session, notifier):
        from hrms_portal.views.roles import RoleManagementPage

        page = RoleManagementPage(ctx)
        await page.mount()

        assert await page.toggle_permission("r1", "leaves", "update") is False
        assert notifier.current.severity.value == "warning"
        assert role_routes.calls("PUT", "/roles/r1") == []


class TestHelpdeskPage:
    """Test ticket actions that need ticket management."""

    @pytest.mark.asyncio
    async def test_employee_cannot_assign(self, ctx, backend, employee_session, notifier):
        from hrms_portal.views.helpdesk import HelpdeskPage

        page = HelpdeskPage(ctx)

        assert await page.assign("t1", "e2") is False
        assert notifier.current.message == "You do not have permission to assign tickets"
        assert backend.calls("PUT", "/helpdesk/t1/assign") == []

    @pytest.mark.asyncio
    async def test_admin_assigns(self, ctx, backend, admin_session):
        from hrms_portal.views.helpdesk import HelpdeskPage

        backend.on("PUT", "/helpdesk/t1/assign", json_response(success=True))
        backend.on("GET", "/helpdesk", json_response(success=True, data=[]))
        page = HelpdeskPage(ctx)

        assert await page.assign("t1", "e2") is True
        assert backend.body(backend.calls("PUT", "/helpdesk/t1/assign")[0]) == {"assignedTo": "e2"}


class TestEmployeeUserFixtures:
    """Sanity check of the shared user records."""

    def test_roles(self):
        from hrms_portal.schemas.auth import SessionUser

        assert SessionUser.model_validate(ADMIN_USER).role_name == "admin"
        assert SessionUser.model_validate(EMPLOYEE_USER).role_name == "employee"
