from typing import Any, Dict, Optional

import httpx

from hrms_portal.api.client import AreaAPI


class CalendarAPI(AreaAPI):

    async def get_all(self, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.get("/calendar", params=params)

    async def create(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.post("/calendar", json=data)

    async def update(self, event_id: str, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.put(f"/calendar/{event_id}", json=data)

    async def delete(self, event_id: str) -> httpx.Response:
        return await self.client.delete(f"/calendar/{event_id}")
