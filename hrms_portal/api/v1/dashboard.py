import httpx

from hrms_portal.api.client import AreaAPI


class DashboardAPI(AreaAPI):

    async def get_admin_dashboard(self) -> httpx.Response:
        return await self.client.get("/dashboard/admin")

    async def get_hr_dashboard(self) -> httpx.Response:
        return await self.client.get("/dashboard/hr")

    async def get_employee_dashboard(self) -> httpx.Response:
        return await self.client.get("/dashboard/employee")

    async def for_role(self, role_name: str) -> httpx.Response:
        """Pick the dashboard endpoint matching the user's role."""
        if role_name == "admin":
            return await self.get_admin_dashboard()
        if role_name == "hr":
            return await self.get_hr_dashboard()
        return await self.get_employee_dashboard()
