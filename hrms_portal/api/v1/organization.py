from typing import Any, Dict, Optional

import httpx

from hrms_portal.api.client import AreaAPI


class MetadataAPI(AreaAPI):
    """CRUD over one organizational metadata collection."""

    resource: str = ""

    async def get_all(self, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.get(f"/{self.resource}", params=params)

    async def create(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.post(f"/{self.resource}", json=data)

    async def update(self, item_id: str, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.put(f"/{self.resource}/{item_id}", json=data)

    async def delete(self, item_id: str) -> httpx.Response:
        return await self.client.delete(f"/{self.resource}/{item_id}")


class DepartmentAPI(MetadataAPI):
    resource = "departments"


class DesignationAPI(MetadataAPI):
    resource = "designations"

    async def get_for_department(self, department_id: Optional[str]) -> httpx.Response:
        return await self.get_all(params={"departmentId": department_id})


class LocationAPI(MetadataAPI):
    resource = "locations"
