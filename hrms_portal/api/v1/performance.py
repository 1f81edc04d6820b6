from typing import Any, Dict, Optional

import httpx

from hrms_portal.api.client import AreaAPI


class GoalAPI(AreaAPI):

    async def get_all(self, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.get("/goals", params=params)

    async def get_my_goals(self) -> httpx.Response:
        return await self.client.get("/goals/my")

    async def create(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.post("/goals", json=data)

    async def update(self, goal_id: str, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.put(f"/goals/{goal_id}", json=data)

    async def update_progress(self, goal_id: str, progress: float, comment: Optional[str] = None) -> httpx.Response:
        body: Dict[str, Any] = {"progress": progress}
        if comment:
            body["comment"] = comment
        return await self.client.patch(f"/goals/{goal_id}/progress", json=body)

    async def delete(self, goal_id: str) -> httpx.Response:
        return await self.client.delete(f"/goals/{goal_id}")


class ReviewCycleAPI(AreaAPI):

    async def get_all(self) -> httpx.Response:
        return await self.client.get("/review-cycles")

    async def create(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.post("/review-cycles", json=data)

    async def update(self, cycle_id: str, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.put(f"/review-cycles/{cycle_id}", json=data)

    async def delete(self, cycle_id: str) -> httpx.Response:
        return await self.client.delete(f"/review-cycles/{cycle_id}")


class PerformanceReviewAPI(AreaAPI):
    """Review workflow requests; the workflow engine validates every transition."""

    async def init_review(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.post("/performance-reviews/init", json=data)

    async def get_my_review(self) -> httpx.Response:
        return await self.client.get("/performance-reviews/my")

    async def get_team_reviews(self, filters: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.get("/performance-reviews/team", params=filters)

    async def get_all_reviews(self, filters: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.get("/performance-reviews/all", params=filters)

    async def get(self, review_id: str) -> httpx.Response:
        return await self.client.get(f"/performance-reviews/{review_id}")

    async def submit_self_review(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.patch("/performance-reviews/self", json=data)

    async def submit_manager_review(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.patch("/performance-reviews/manager", json=data)

    async def submit_hr_review(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.patch("/performance-reviews/hr", json=data)

    async def finalize_review(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.patch("/performance-reviews/finalize", json=data)
