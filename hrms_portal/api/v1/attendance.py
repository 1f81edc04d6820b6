from typing import Any, Dict, List, Optional

import httpx

from hrms_portal.api.client import AreaAPI


class AttendanceAPI(AreaAPI):

    async def check_in(self) -> httpx.Response:
        return await self.client.post("/attendance/check-in")

    async def check_out(self) -> httpx.Response:
        return await self.client.post("/attendance/check-out")

    async def get_records(self, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.get("/attendance", params=params)

    async def manual_entry(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.post("/attendance/manual-entry", json=data)

    async def get_report(self, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.get("/attendance/report", params=params)

    async def bulk_entry(self, records: List[Dict[str, Any]]) -> httpx.Response:
        return await self.client.post("/attendance/bulk", json={"records": records})

    async def toggle_lock(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.post("/attendance/lock", json=data)

    async def export_csv(self, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.download("/attendance/export/csv", params=params)

    async def export_pdf(self, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.download("/attendance/export/pdf", params=params)
