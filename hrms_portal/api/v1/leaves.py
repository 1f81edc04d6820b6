from typing import Any, Dict, Optional

import httpx

from hrms_portal.api.client import AreaAPI
from hrms_portal.schemas.leave import LeaveStatus


class LeaveAPI(AreaAPI):
    """Leave types, policies and applications. Status transitions are decided by the backend."""

    # ============ Leave Types ============

    async def get_leave_types(self) -> httpx.Response:
        return await self.client.get("/leaves/types")

    async def create_leave_type(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.post("/leaves/types", json=data)

    async def update_leave_type(self, type_id: str, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.put(f"/leaves/types/{type_id}", json=data)

    async def delete_leave_type(self, type_id: str) -> httpx.Response:
        return await self.client.delete(f"/leaves/types/{type_id}")

    # ============ Leave Policies ============

    async def get_leave_policies(self) -> httpx.Response:
        return await self.client.get("/leaves/policies")

    async def create_leave_policy(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.post("/leaves/policies", json=data)

    async def update_leave_policy(self, policy_id: str, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.put(f"/leaves/policies/{policy_id}", json=data)

    # ============ Applications ============

    async def get_balance(self, employee_id: Optional[str] = None) -> httpx.Response:
        return await self.client.get("/leaves/balance", params={"employeeId": employee_id})

    async def apply(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.post("/leaves/apply", json=data)

    async def get_history(self, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.get("/leaves/history", params=params)

    async def get_pending_approvals(self) -> httpx.Response:
        return await self.client.get("/leaves/pending-approvals")

    async def update_status(self, leave_id: str, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.put(f"/leaves/{leave_id}/status", json=data)

    async def approve(self, leave_id: str) -> httpx.Response:
        return await self.update_status(leave_id, {"status": LeaveStatus.APPROVED.value})

    async def reject(self, leave_id: str, reason: str) -> httpx.Response:
        return await self.update_status(
            leave_id, {"status": LeaveStatus.REJECTED.value, "rejectionReason": reason}
        )

    async def cancel(self, leave_id: str) -> httpx.Response:
        return await self.client.delete(f"/leaves/{leave_id}")

    # ============ Exports ============

    async def export_csv(self, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.download("/leaves/export/csv", params=params)

    async def export_pdf(self, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.download("/leaves/export/pdf", params=params)
