"""
Role x permission matrix.

Permissions come grouped by module from GET /roles/permissions
(`data.grouped`). Each matrix cell is one module/action pair and maps to the
first permission in that module whose name starts with one of the action's
prefixes.
"""

from typing import Any, Dict, List, Optional, Sequence

from hrms_portal.schemas.common import ref_id
from hrms_portal.schemas.organization import Permission, Role

MATRIX_ACTIONS = ("view", "create", "update", "delete", "other")

ACTION_PREFIXES: Dict[str, Sequence[str]] = {
    "view": ("view_",),
    "create": ("create_", "apply_"),
    "update": ("update_", "approve_", "process_", "manage_"),
    "delete": ("delete_",),
}

_STANDARD_PREFIXES = ("view_", "create_", "update_", "delete_", "approve_", "apply_", "process_", "manage_")


def parse_grouped(grouped: Optional[Dict[str, List[Dict[str, Any]]]]) -> Dict[str, List[Permission]]:
    return {module: Permission.parse_list(items) for module, items in (grouped or {}).items()}


def get_permission_for_cell(
    grouped: Dict[str, List[Permission]],
    module: str,
    action: str,
) -> Optional[Permission]:
    """Permission behind one matrix cell, or None when the module has none for that action."""
    permissions = grouped.get(module) or []
    if action == "other":
        for permission in permissions:
            if not permission.name.startswith(_STANDARD_PREFIXES):
                return permission
        return None

    prefixes = ACTION_PREFIXES.get(action)
    if not prefixes:
        raise ValueError(f"Unknown matrix action: {action}")
    for permission in permissions:
        if permission.name.startswith(tuple(prefixes)):
            return permission
    return None


def role_permission_ids(role: Role) -> List[str]:
    return [pid for pid in (ref_id(p) for p in role.permissions) if pid]


def toggle_permission_ids(current: Sequence[str], permission_id: str) -> List[str]:
    """New permission id list after flipping one checkbox."""
    if permission_id in current:
        return [pid for pid in current if pid != permission_id]
    return list(current) + [permission_id]
