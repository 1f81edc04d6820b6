from typing import Any, Dict

import httpx

from hrms_portal.api.client import AreaAPI


class RoleAPI(AreaAPI):

    async def get_roles(self) -> httpx.Response:
        return await self.client.get("/roles")

    async def create_role(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.post("/roles", json=data)

    async def update_role(self, role_id: str, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.put(f"/roles/{role_id}", json=data)

    async def get_permissions(self) -> httpx.Response:
        """Flat permission list plus `grouped` (module -> permissions)."""
        return await self.client.get("/roles/permissions")

    async def assign_role(self, user_id: str, role_id: str) -> httpx.Response:
        return await self.client.post("/roles/assign", json={"userId": user_id, "roleId": role_id})
