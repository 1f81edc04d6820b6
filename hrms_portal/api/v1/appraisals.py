from typing import Any, Dict, Optional

import httpx

from hrms_portal.api.client import AreaAPI


class AppraisalAPI(AreaAPI):
    """Appraisal cycles link finalized reviews to increment proposals."""

    async def create_cycle(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.post("/appraisals/cycles", json=data)

    async def get_cycles(self) -> httpx.Response:
        return await self.client.get("/appraisals/cycles")

    async def get_eligible_employees(self, cycle_id: str) -> httpx.Response:
        return await self.client.get(f"/appraisals/cycles/{cycle_id}/eligible-employees")

    async def propose_increment(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.post("/appraisals/propose", json=data)

    async def approve(self, appraisal_id: str) -> httpx.Response:
        return await self.client.patch(f"/appraisals/{appraisal_id}/approve")

    async def reject(self, appraisal_id: str, remarks: Optional[str] = None) -> httpx.Response:
        return await self.client.patch(
            f"/appraisals/{appraisal_id}/reject",
            json={"remarks": remarks} if remarks else None,
        )

    async def get_all(self, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.get("/appraisals", params=params)

    async def get_my_history(self) -> httpx.Response:
        return await self.client.get("/appraisals/my-history")
