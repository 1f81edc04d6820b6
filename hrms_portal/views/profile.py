from typing import Optional

from hrms_portal.forms.simple import ChangePasswordForm
from hrms_portal.schemas.common import ref_name, unwrap
from hrms_portal.schemas.employee import Employee
from hrms_portal.views.base import Page
from hrms_portal.views.tables import format_cell, format_money


class ProfilePage(Page):
    title = "My Profile"
    load_error_message = "Failed to load profile"

    def __init__(self, ctx):
        super().__init__(ctx)
        self.employee: Optional[Employee] = None

    async def load(self) -> None:
        response = await self.api.employees.get_my_profile()
        raw = unwrap(response, "data", "employee", default=None)
        self.employee = Employee.model_validate(raw) if raw else None

    def password_form(self) -> ChangePasswordForm:
        return ChangePasswordForm(notifier=self.notifier)

    async def change_password(self, form: ChangePasswordForm) -> bool:
        async def _submit():
            form.require_valid()
            await self.api.auth.change_password(form.get("currentPassword"), form.get("newPassword"))

        return await self.mutate(
            _submit(),
            success="Password changed successfully",
            failure="Failed to change password",
            form=form,
            refresh=False,
        )

    def render_content(self) -> str:
        user = self.user
        lines = [f"Name:  {user.display_name if user else ''}", f"Email: {user.email if user else ''}",
                 f"Role:  {user.role_name if user else ''}"]
        emp = self.employee
        if emp is None:
            lines.append("No employee profile linked to this account")
            return "\n".join(lines)

        job = emp.job_info
        lines += [
            "",
            f"Employee Code: {emp.employee_code or ''}",
            f"Phone:         {emp.phone or ''}",
            f"Department:    {ref_name(job.department if job else emp.department)}",
            f"Designation:   {ref_name(job.designation if job else emp.designation, 'title', 'name')}",
            f"Join Date:     {format_cell(emp.join_date)}",
            f"Salary:        {format_money(emp.salary)}",
            f"Profile:       {emp.profile_completion or 0}% complete",
        ]
        return "\n".join(lines)
