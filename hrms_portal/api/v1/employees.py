from typing import Any, Dict, Optional

import httpx

from hrms_portal.api.client import AreaAPI


class EmployeeAPI(AreaAPI):

    async def get_all(self, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.get("/employees", params=params)

    async def get_by_id(self, employee_id: str) -> httpx.Response:
        return await self.client.get(f"/employees/{employee_id}")

    async def get_my_profile(self) -> httpx.Response:
        return await self.client.get("/employees/me")

    async def create(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.post("/employees", json=data)

    async def update(self, employee_id: str, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.put(f"/employees/{employee_id}", json=data)

    async def delete(self, employee_id: str) -> httpx.Response:
        return await self.client.delete(f"/employees/{employee_id}")

    async def upload_document(
        self,
        employee_id: str,
        document_type: str,
        filename: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> httpx.Response:
        return await self.client.upload(
            f"/employees/{employee_id}/documents",
            files={"file": (filename, content, content_type)},
            data={"documentType": document_type},
        )

    async def verify_document(
        self,
        employee_id: str,
        document_id: str,
        status: str,
        rejection_reason: Optional[str] = None,
    ) -> httpx.Response:
        body: Dict[str, Any] = {"status": status}
        if rejection_reason is not None:
            body["rejectionReason"] = rejection_reason
        return await self.client.put(f"/employees/{employee_id}/documents/{document_id}/verify", json=body)
