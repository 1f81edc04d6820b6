import asyncio
from typing import Any, Dict, List, Optional

from hrms_portal.forms.simple import RoleForm
from hrms_portal.schemas.auth import SessionUser
from hrms_portal.schemas.common import unwrap, unwrap_list
from hrms_portal.schemas.organization import Permission, Role
from hrms_portal.services.permission_matrix import (
    MATRIX_ACTIONS,
    get_permission_for_cell,
    parse_grouped,
    role_permission_ids,
    toggle_permission_ids,
)
from hrms_portal.views.base import Page
from hrms_portal.views.tables import render_table


class RoleManagementPage(Page):
    """Roles, the role x permission matrix and user role assignment."""

    title = "Role Management"
    load_error_message = "Failed to fetch roles"

    def __init__(self, ctx):
        super().__init__(ctx)
        self.roles: List[Role] = []
        self.grouped: Dict[str, List[Permission]] = {}
        self.users: List[SessionUser] = []

    async def load(self) -> None:
        roles, permissions, users = await asyncio.gather(
            self.api.roles.get_roles(),
            self.api.roles.get_permissions(),
            self.api.auth.get_users(),
        )
        self.roles = Role.parse_list(unwrap_list(roles, "roles"))
        self.grouped = parse_grouped(unwrap(permissions, "grouped", default={}))
        self.users = SessionUser.parse_list(unwrap_list(users, "users"))

    def role(self, role_id: str) -> Optional[Role]:
        return next((r for r in self.roles if r.id == role_id), None)

    # ============ Roles ============

    def role_form(self, role: Optional[Role] = None) -> RoleForm:
        initial = {"name": role.name, "description": role.description, "isActive": role.is_active} if role else None
        return RoleForm(initial, notifier=self.notifier)

    async def save_role(self, form: RoleForm, role_id: Optional[str] = None) -> bool:
        async def _submit():
            form.require_valid()
            if role_id:
                await self.api.roles.update_role(role_id, form.payload())
            else:
                await self.api.roles.create_role(form.payload())

        verb = "updated" if role_id else "created"
        return await self.mutate(_submit(), f"Role {verb} successfully", "Failed to save role", form=form)

    async def assign_role(self, user_id: str, role_id: str) -> bool:
        return await self.mutate(
            self.api.roles.assign_role(user_id, role_id),
            "Role assigned successfully",
            "Failed to assign role",
        )

    # ============ Permission matrix ============

    def matrix(self, role: Role) -> List[Dict[str, Any]]:
        """One row per module; each action cell is "[x]", "[ ]" or "-" when no permission backs it."""
        granted = set(role_permission_ids(role))
        rows = []
        for module in sorted(self.grouped):
            row: Dict[str, Any] = {"module": module}
            for action in MATRIX_ACTIONS:
                permission = get_permission_for_cell(self.grouped, module, action)
                if permission is None:
                    row[action] = "-"
                else:
                    row[action] = "[x]" if permission.id in granted else "[ ]"
            rows.append(row)
        return rows

    async def toggle_permission(self, role_id: str, module: str, action: str) -> bool:
        role = self.role(role_id)
        if role is None:
            return False
        if role.is_system:
            self.notifier.warning("System role permissions cannot be changed")
            return False
        permission = get_permission_for_cell(self.grouped, module, action)
        if permission is None or permission.id is None:
            return False

        new_ids = toggle_permission_ids(role_permission_ids(role), permission.id)
        return await self.mutate(
            self.api.roles.update_role(role_id, {"permissions": new_ids}),
            "Permissions updated",
            "Failed to update permission",
        )

    def render_matrix(self, role_id: str) -> str:
        role = self.role(role_id)
        if role is None:
            return "Role not found"
        columns = [("module", "Module")] + [(action, action.capitalize()) for action in MATRIX_ACTIONS]
        header = f"{role.name} (system role, read-only)" if role.is_system else role.name
        return f"{header}\n" + render_table(self.matrix(role), columns, "No permissions defined")

    def render_content(self) -> str:
        rows = [
            {
                "name": r.name,
                "description": r.description,
                "permissions": len(r.permissions),
                "system": r.is_system,
                "active": r.is_active,
            }
            for r in self.roles
        ]
        return render_table(
            rows,
            [("name", "Role"), ("description", "Description"), ("permissions", "Permissions"),
             ("system", "System"), ("active", "Active")],
            "No roles found",
        )
