"""Leave self-service, approvals and leave configuration."""

import asyncio
from typing import Any, Dict, List, Optional

from hrms_portal.forms.leave_form import LeaveApplicationForm
from hrms_portal.schemas.common import ref_name, unwrap, unwrap_list
from hrms_portal.schemas.leave import LeaveApplication, LeaveBalance, LeavePolicy, LeaveStatus, LeaveType
from hrms_portal.views.base import Page
from hrms_portal.views.tables import render_table

BALANCE_COLUMNS = [
    ("leaveType", "Leave Type"),
    ("totalAccrued", "Accrued"),
    ("used", "Used"),
    ("pending", "Pending"),
    ("available", "Available"),
]

LEAVE_COLUMNS = [
    ("leaveType", "Leave Type"),
    ("startDate", "From"),
    ("endDate", "To"),
    ("totalDays", "Days"),
    ("reason", "Reason"),
    ("status", "Status"),
]

APPROVAL_COLUMNS = [("employee", "Employee")] + LEAVE_COLUMNS[:-1]


def _leave_row(leave: LeaveApplication) -> Dict[str, Any]:
    return {
        "id": leave.id,
        "employee": ref_name(leave.employee_id),
        "leaveType": ref_name(leave.leave_type),
        "startDate": leave.start_date,
        "endDate": leave.end_date,
        "totalDays": leave.total_days,
        "reason": leave.reason,
        "status": leave.status,
    }


class LeavesPage(Page):
    title = "Leave Management"
    load_error_message = "Failed to fetch leave data"

    def __init__(self, ctx):
        super().__init__(ctx)
        self.balances: List[LeaveBalance] = []
        self.history: List[LeaveApplication] = []
        self.pending: List[LeaveApplication] = []
        self.leave_types: List[LeaveType] = []

    @property
    def can_approve(self) -> bool:
        """Approvers hold manage_leaves; user records without a permission list fall back to role."""
        user = self.user
        if user is None:
            return False
        if user.permissions:
            return self.session.has_permission("manage_leaves")
        return self.session.has_role("admin", "hr")

    async def load(self) -> None:
        requests = [
            self.api.leaves.get_history({}),
            self.api.leaves.get_balance(),
            self.api.leaves.get_leave_types(),
        ]
        if self.can_approve:
            requests.append(self.api.leaves.get_pending_approvals())
        responses = await asyncio.gather(*requests)

        self.history = LeaveApplication.parse_list(unwrap_list(responses[0], "leaves"))
        balances = unwrap(responses[1], "data", default=[])
        if isinstance(balances, dict):
            balances = balances.get("balances")
        self.balances = LeaveBalance.parse_balances(balances)
        self.leave_types = LeaveType.parse_list(unwrap_list(responses[2], "leaveTypes"))
        self.pending = (
            LeaveApplication.parse_list(unwrap_list(responses[3], "pendingLeaves")) if self.can_approve else []
        )

    # ============ Employee actions ============

    def application_form(self) -> LeaveApplicationForm:
        return LeaveApplicationForm(self.api, notifier=self.notifier)

    async def apply(self, form: LeaveApplicationForm) -> bool:
        return await self.mutate(form.submit(), failure="Failed to apply for leave", form=form)

    async def cancel(self, leave_id: str) -> bool:
        return await self.mutate(
            self.api.leaves.cancel(leave_id),
            success="Leave cancelled successfully",
            failure="Failed to cancel leave",
        )

    # ============ Approver actions ============

    async def approve(self, leave_id: str) -> bool:
        return await self.mutate(
            self.api.leaves.approve(leave_id),
            success="Leave approved successfully!",
            failure="Failed to approve leave",
        )

    async def reject(self, leave_id: str, reason: str) -> bool:
        if not reason or not reason.strip():
            self.notifier.error("Rejection reason is required")
            return False
        return await self.mutate(
            self.api.leaves.reject(leave_id, reason.strip()),
            success="Leave rejected successfully",
            failure="Failed to reject leave",
        )

    async def export(self, fmt: str) -> Optional[str]:
        if fmt == "pdf":
            return await self.run_export(
                self.api.leaves.export_pdf, "leaves", "pdf", {}, "Leave report exported successfully"
            )
        return await self.run_export(
            self.api.leaves.export_csv, "leaves", "csv", {}, "Leave records exported successfully"
        )

    # ============ Rendering ============

    def cancellable(self) -> List[LeaveApplication]:
        return [leave for leave in self.history if leave.status == LeaveStatus.PENDING]

    def render_content(self) -> str:
        balance_rows = [
            {
                "leaveType": ref_name(b.leave_type),
                "totalAccrued": b.total_accrued,
                "used": b.used,
                "pending": b.pending,
                "available": b.available,
            }
            for b in self.balances
        ]
        parts = [
            "Leave Balance\n" + render_table(balance_rows, BALANCE_COLUMNS, "No leave balance available"),
            "My Leaves\n" + render_table([_leave_row(l) for l in self.history], LEAVE_COLUMNS, "No leave records found"),
        ]
        if self.can_approve:
            parts.append(
                "Pending Approvals\n"
                + render_table([_leave_row(l) for l in self.pending], APPROVAL_COLUMNS, "No pending approvals")
            )
        return "\n\n".join(parts)


class LeaveSettingsPage(Page):
    """Leave types and accrual policies (admin/HR)."""

    title = "Leave Settings"
    load_error_message = "Failed to fetch leave types"

    def __init__(self, ctx):
        super().__init__(ctx)
        self.leave_types: List[LeaveType] = []
        self.policies: List[LeavePolicy] = []

    async def load(self) -> None:
        types, policies = await asyncio.gather(
            self.api.leaves.get_leave_types(),
            self.api.leaves.get_leave_policies(),
        )
        self.leave_types = LeaveType.parse_list(unwrap_list(types, "leaveTypes"))
        self.policies = LeavePolicy.parse_list(unwrap_list(policies, "policies"))

    async def save_leave_type(self, data: Dict[str, Any], type_id: Optional[str] = None) -> bool:
        if type_id:
            return await self.mutate(
                self.api.leaves.update_leave_type(type_id, data),
                "Leave type updated successfully",
                "Failed to save leave type",
            )
        return await self.mutate(
            self.api.leaves.create_leave_type(data),
            "Leave type created successfully",
            "Failed to save leave type",
        )

    async def delete_leave_type(self, type_id: str) -> bool:
        return await self.mutate(
            self.api.leaves.delete_leave_type(type_id),
            "Leave type deleted successfully",
            "Failed to delete leave type",
        )

    async def save_policy(self, data: Dict[str, Any], policy_id: Optional[str] = None) -> bool:
        if policy_id:
            return await self.mutate(
                self.api.leaves.update_leave_policy(policy_id, data),
                "Policy updated successfully",
                "Failed to save policy",
            )
        return await self.mutate(
            self.api.leaves.create_leave_policy(data),
            "Policy created successfully",
            "Failed to save policy",
        )

    def render_content(self) -> str:
        type_rows = [
            {"name": t.name, "code": t.code, "paid": t.is_paid, "active": t.is_active} for t in self.leave_types
        ]
        policy_rows = [
            {
                "name": p.name,
                "leaveType": ref_name(p.leave_type),
                "quota": p.annual_quota,
                "accrual": p.accrual_type,
                "carryForward": p.carry_forward,
            }
            for p in self.policies
        ]
        return "\n\n".join([
            "Leave Types\n" + render_table(
                type_rows, [("name", "Name"), ("code", "Code"), ("paid", "Paid"), ("active", "Active")],
                "No leave types found",
            ),
            "Policies\n" + render_table(
                policy_rows,
                [("name", "Name"), ("leaveType", "Leave Type"), ("quota", "Annual Quota"),
                 ("accrual", "Accrual"), ("carryForward", "Carry Forward")],
                "No leave policies found",
            ),
        ])
