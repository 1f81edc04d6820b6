from typing import Any, Dict, Optional

import httpx

from hrms_portal.api.client import AreaAPI


class PayrollAPI(AreaAPI):
    """Payroll generation and payslips. All amounts are computed by the payroll engine."""

    async def generate(
        self,
        month: int,
        year: int,
        department: Optional[str] = None,
        employee_id: Optional[str] = None,
    ) -> httpx.Response:
        body: Dict[str, Any] = {"month": month, "year": year}
        if department:
            body["department"] = department
        if employee_id:
            body["employeeId"] = employee_id
        return await self.client.post("/payroll/generate", json=body)

    async def get_payslips(self, month: int, year: int) -> httpx.Response:
        return await self.client.get(f"/payroll/payslips/{month}/{year}")

    async def get_payslip(self, employee_id: str, month: int, year: int) -> httpx.Response:
        return await self.client.get(f"/payroll/payslip/{employee_id}/{month}/{year}")

    async def get_reports(self, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.get("/payroll/reports", params=params)

    async def update_status(self, payroll_id: str, status: str) -> httpx.Response:
        return await self.client.put(f"/payroll/{payroll_id}/status", json={"status": status})

    async def approve(self, payroll_id: str) -> httpx.Response:
        return await self.client.put(f"/payroll/{payroll_id}/approve")

    async def lock(self, payroll_id: str) -> httpx.Response:
        return await self.client.put(f"/payroll/{payroll_id}/lock")

    async def download(self, payroll_id: str) -> httpx.Response:
        return await self.client.download(f"/payroll/{payroll_id}/download")

    async def export_csv(self, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.download("/payroll/export/csv", params=params)

    async def export_pdf(self, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.download("/payroll/export/pdf", params=params)
