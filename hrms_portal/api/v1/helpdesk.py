from typing import Any, Dict, Optional

import httpx

from hrms_portal.api.client import AreaAPI


class HelpdeskAPI(AreaAPI):

    async def get_tickets(self, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.get("/helpdesk", params=params)

    async def get_ticket(self, ticket_id: str) -> httpx.Response:
        return await self.client.get(f"/helpdesk/{ticket_id}")

    async def create_ticket(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.post("/helpdesk", json=data)

    async def assign_ticket(self, ticket_id: str, assigned_to: str) -> httpx.Response:
        return await self.client.put(f"/helpdesk/{ticket_id}/assign", json={"assignedTo": assigned_to})

    async def add_update(self, ticket_id: str, comment: str) -> httpx.Response:
        return await self.client.post(f"/helpdesk/{ticket_id}/update", json={"comment": comment})

    async def resolve_ticket(self, ticket_id: str) -> httpx.Response:
        return await self.client.put(f"/helpdesk/{ticket_id}/resolve")

    async def close_ticket(self, ticket_id: str) -> httpx.Response:
        return await self.client.put(f"/helpdesk/{ticket_id}/close")

    async def update_priority(self, ticket_id: str, priority: str) -> httpx.Response:
        return await self.client.put(f"/helpdesk/{ticket_id}/priority", json={"priority": priority})
