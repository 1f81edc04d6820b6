import logging
from typing import List, Optional

from hrms_portal.core.exceptions import HRMSError
from hrms_portal.forms.employee_form import CredentialsDialog, EmployeeForm, EmployeeSubmitResult
from hrms_portal.schemas.common import ref_name, unwrap_list
from hrms_portal.schemas.employee import Employee
from hrms_portal.views.base import Page
from hrms_portal.views.tables import render_table

logger = logging.getLogger("hrms_portal.views.employees")

EMPLOYEE_COLUMNS = [
    ("employeeCode", "Code"),
    ("name", "Name"),
    ("email", "Email"),
    ("department", "Department"),
    ("designation", "Designation"),
    ("status", "Status"),
]


class EmployeesPage(Page):
    """Employee directory with onboarding, editing and deactivation."""

    title = "Employees"
    load_error_message = "Failed to fetch employees"

    def __init__(self, ctx):
        super().__init__(ctx)
        self.employees: List[Employee] = []
        self.search = ""
        self.status = ""
        self.credentials: Optional[CredentialsDialog] = None

    @property
    def can_manage(self) -> bool:
        return self.session.has_permission("manage_employees") or self.session.has_role("admin", "hr")

    async def load(self) -> None:
        response = await self.api.employees.get_all({"search": self.search or None, "status": self.status or None})
        self.employees = Employee.parse_list(unwrap_list(response, "employees"))

    async def apply_filters(self, search: str = "", status: str = "") -> None:
        self.search = search.strip()
        self.status = status
        await self.refresh()

    # ============ Add / edit ============

    def new_form(self) -> EmployeeForm:
        return EmployeeForm(self.api, notifier=self.notifier)

    async def edit_form(self, employee_id: str) -> Optional[EmployeeForm]:
        form = EmployeeForm(self.api, employee_id=employee_id, notifier=self.notifier)
        try:
            await form.load()
        except HRMSError as e:
            self.report_error(e, "Failed to load employee data")
            return None
        return form

    async def save(self, form: EmployeeForm) -> Optional[EmployeeSubmitResult]:
        try:
            result = await form.submit()
        except HRMSError as e:
            self.report_error(e, "Operation Failed", form)
            return None
        if result is None:
            return None

        if result.created and result.generated_password:
            self.credentials = CredentialsDialog.from_result(result)
        await self.refresh()
        return result

    def dismiss_credentials(self) -> None:
        if self.credentials is not None:
            self.credentials.close()

    async def verify_document(self, form: EmployeeForm, document_id: str, status: str) -> bool:
        return await self.mutate(
            form.verify_document(document_id, status),
            failure="Verification Failed",
            refresh=False,
        )

    async def delete(self, employee_id: str) -> bool:
        return await self.mutate(
            self.api.employees.delete(employee_id),
            success="Employee deleted successfully",
            failure="Failed to deactivate employee",
        )

    # ============ Rendering ============

    def rows(self):
        return [
            {
                "employeeCode": emp.employee_code,
                "name": emp.full_name,
                "email": emp.email,
                "department": ref_name(emp.job_info.department if emp.job_info else emp.department),
                "designation": ref_name(
                    emp.job_info.designation if emp.job_info else emp.designation, "title", "name"
                ),
                "status": emp.status,
            }
            for emp in self.employees
        ]

    def render_content(self) -> str:
        parts = []
        if self.credentials is not None and self.credentials.is_open:
            parts.append(self.credentials.render())
        parts.append(render_table(self.rows(), EMPLOYEE_COLUMNS, "No employees found"))
        return "\n\n".join(parts)
