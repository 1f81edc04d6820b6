from typing import Any, Dict, Optional

import httpx

from hrms_portal.api.client import AreaAPI


class RecruitmentAPI(AreaAPI):

    # ============ Job Postings ============

    async def get_job_postings(self, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.get("/recruitment/jobs", params=params)

    async def create_job_posting(self, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.post("/recruitment/jobs", json=data)

    async def update_job_posting(self, job_id: str, data: Dict[str, Any]) -> httpx.Response:
        return await self.client.put(f"/recruitment/jobs/{job_id}", json=data)

    # ============ Candidates ============

    async def get_candidates(self, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.get("/recruitment/candidates", params=params)

    async def get_candidate(self, candidate_id: str) -> httpx.Response:
        return await self.client.get(f"/recruitment/candidates/{candidate_id}")

    async def update_candidate_status(self, candidate_id: str, status: str) -> httpx.Response:
        return await self.client.put(f"/recruitment/candidates/{candidate_id}", json={"status": status})

    async def convert_to_employee(self, candidate_id: str) -> httpx.Response:
        return await self.client.post(f"/recruitment/candidates/{candidate_id}/convert")

    # ============ Public ============

    async def submit_application(
        self,
        fields: Dict[str, Any],
        resume_filename: str,
        resume_content: bytes,
        content_type: str = "application/pdf",
    ) -> httpx.Response:
        """Multipart application with the résumé under the `resume` part."""
        return await self.client.upload(
            "/recruitment/apply",
            files={"resume": (resume_filename, resume_content, content_type)},
            data={k: str(v) for k, v in fields.items() if v is not None},
        )
