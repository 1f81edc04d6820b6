from typing import Optional

import httpx

from hrms_portal.api.client import AreaAPI


class AuthAPI(AreaAPI):
    """Authentication endpoints. /auth/login, /auth/register and /auth/me report 401 inline."""

    async def login(self, email: str, password: str) -> httpx.Response:
        return await self.client.post("/auth/login", json={"email": email, "password": password})

    async def google_login(self, id_token: str) -> httpx.Response:
        """Exchange a Google ID token for a backend session token."""
        return await self.client.post("/auth/google-login", json={"token": id_token})

    async def register(self, data: dict) -> httpx.Response:
        return await self.client.post("/auth/register", json=data)

    async def logout(self, token: Optional[str] = None) -> httpx.Response:
        """Revoke the session server-side; `token` covers calls made after local state was cleared."""
        headers = {"Authorization": f"Bearer {token}"} if token else None
        return await self.client.request("POST", "/auth/logout", headers=headers)

    async def change_password(self, current_password: str, new_password: str) -> httpx.Response:
        return await self.client.post(
            "/auth/change-password",
            json={"currentPassword": current_password, "newPassword": new_password},
        )

    async def get_me(self) -> httpx.Response:
        return await self.client.get("/auth/me")

    async def get_users(self) -> httpx.Response:
        return await self.client.get("/auth/users")
