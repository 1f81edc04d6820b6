import asyncio
import logging
from datetime import date
from typing import List, Optional

from hrms_portal.core.exceptions import ApiError, HRMSError
from hrms_portal.schemas.common import ref_name, unwrap, unwrap_list
from hrms_portal.schemas.payroll import Payslip
from hrms_portal.services.exports import ExportError, save_export
from hrms_portal.views.base import Page
from hrms_portal.views.tables import format_money, render_table

logger = logging.getLogger("hrms_portal.views.payroll")

PAYSLIP_COLUMNS = [
    ("employee", "Employee"),
    ("period", "Period"),
    ("payableDays", "Payable Days"),
    ("gross", "Gross"),
    ("deductions", "Deductions"),
    ("net", "Net Salary"),
    ("status", "Status"),
]


def _payslip_row(payslip: Payslip) -> dict:
    deductions = payslip.total_deductions if payslip.total_deductions is not None else payslip.deductions
    return {
        "employee": ref_name(payslip.employee_id),
        "period": payslip.period,
        "payableDays": payslip.payable_days,
        "gross": format_money(payslip.gross_salary),
        "deductions": format_money(deductions),
        "net": format_money(payslip.net_salary),
        "status": payslip.status,
    }


class _PayslipDownloads(Page):

    async def download(self, payslip: Payslip, success: str, failure: str) -> Optional[str]:
        try:
            response = await self.api.payroll.download(payslip.id)
            path = save_export(response, f"payslip-{payslip.year}-{payslip.month:02d}-{payslip.id}.pdf")
        except ExportError as e:
            self.notifier.error(e.message)
            return None
        except HRMSError as e:
            self.report_error(e, failure)
            return None
        self.notifier.success(success)
        return path


class PayrollPage(_PayslipDownloads):
    """Monthly payroll run: generate, review, approve, lock."""

    title = "Payroll"
    load_error_message = "Failed to fetch payslips"

    def __init__(self, ctx):
        super().__init__(ctx)
        today = date.today()
        self.month = today.month
        self.year = today.year
        self.payslips: List[Payslip] = []

    async def load(self) -> None:
        response = await self.api.payroll.get_payslips(self.month, self.year)
        self.payslips = Payslip.parse_list(unwrap_list(response, "payslips"))

    async def select_period(self, month: int, year: int) -> None:
        self.month, self.year = month, year
        await self.refresh()

    async def generate(self, department: Optional[str] = None, employee_id: Optional[str] = None) -> bool:
        try:
            response = await self.api.payroll.generate(self.month, self.year, department, employee_id)
        except HRMSError as e:
            self.report_error(e, "Failed to generate payroll")
            return False
        count = unwrap(response, "data", "summary", "successfullyGenerated", default=0)
        self.notifier.success(f"Payroll generated for {count} employees!")
        await self.refresh()
        return True

    async def approve(self, payroll_id: str) -> bool:
        return await self.mutate(self.api.payroll.approve(payroll_id), "Payroll approved", "Failed to approve payroll")

    async def lock(self, payroll_id: str) -> bool:
        return await self.mutate(self.api.payroll.lock(payroll_id), "Payroll locked", "Failed to lock payroll")

    async def update_status(self, payroll_id: str, status: str) -> bool:
        return await self.mutate(
            self.api.payroll.update_status(payroll_id, status),
            f"Payroll marked as {status}",
            "Failed to update payroll status",
        )

    async def download_payslip(self, payslip: Payslip) -> Optional[str]:
        return await self.download(payslip, "Downloading payslip...", "Failed to download payslip")

    async def export(self, fmt: str) -> Optional[str]:
        filters = {"month": self.month, "year": self.year}
        if fmt == "pdf":
            return await self.run_export(
                self.api.payroll.export_pdf, "payroll", "pdf", filters, "Payroll report exported successfully"
            )
        return await self.run_export(
            self.api.payroll.export_csv, "payroll", "csv", filters, "Payroll data exported successfully"
        )

    def render_content(self) -> str:
        return render_table(
            [_payslip_row(p) for p in self.payslips],
            PAYSLIP_COLUMNS,
            f"No payslips found for {self.month}/{self.year}",
        )


class MyPayslipsPage(_PayslipDownloads):
    """The signed-in employee's payslips for one year."""

    title = "My Payslips"
    load_error_message = "Failed to load payslips"

    def __init__(self, ctx):
        super().__init__(ctx)
        self.year = date.today().year
        self.employee_id: Optional[str] = None
        self.payslips: List[Payslip] = []

    async def _resolve_employee_id(self) -> Optional[str]:
        if self.employee_id:
            return self.employee_id
        if self.user and self.user.employee_id:
            self.employee_id = self.user.employee_id
        else:
            response = await self.api.employees.get_my_profile()
            self.employee_id = unwrap(response, "data", "employee", "_id")
        return self.employee_id

    async def load(self) -> None:
        employee_id = await self._resolve_employee_id()
        if not employee_id:
            self.payslips = []
            return

        # There is no per-year endpoint; ask for each month and keep what exists
        results = await asyncio.gather(
            *(self.api.payroll.get_payslip(employee_id, month, self.year) for month in range(1, 13)),
            return_exceptions=True,
        )
        payslips = []
        for result in results:
            if isinstance(result, ApiError):
                continue
            if isinstance(result, BaseException):
                raise result
            data = unwrap(result, "data")
            if isinstance(data, dict):
                payslips.append(Payslip.model_validate(data))
        self.payslips = sorted(payslips, key=lambda p: p.month, reverse=True)

    async def select_year(self, year: int) -> None:
        self.year = year
        await self.refresh()

    async def download_payslip(self, payslip: Payslip) -> Optional[str]:
        return await self.download(payslip, "Download started", "Failed to download payslip")

    def render_content(self) -> str:
        return render_table(
            [_payslip_row(p) for p in self.payslips],
            PAYSLIP_COLUMNS[1:],
            f"No payslips found for {self.year}",
        )
