from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, Field

from hrms_portal.schemas.common import HRMSModel


class SessionUser(HRMSModel):
    """User record returned by /auth/login, /auth/google-login and /auth/me."""
    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    name: Optional[str] = None
    email: Optional[str] = None
    role: Union[str, Dict[str, Any], None] = None
    permissions: List[str] = Field(default_factory=list)
    picture: Optional[str] = None
    employee_id: Optional[str] = None

    @property
    def role_name(self) -> str:
        """Lower-cased role name whether the role is a string or a populated object."""
        if isinstance(self.role, dict):
            return str(self.role.get("name") or "").lower()
        return (self.role or "").lower()

    @property
    def display_name(self) -> str:
        return self.name or self.email or self.id or "unknown"

    def to_storage(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class LoginResponse(HRMSModel):
    success: bool = False
    message: Optional[str] = None
    token: Optional[str] = None
    user: Optional[SessionUser] = None


class LoginRequest(HRMSModel):
    email: str
    password: str


class ChangePasswordRequest(HRMSModel):
    current_password: str
    new_password: str
