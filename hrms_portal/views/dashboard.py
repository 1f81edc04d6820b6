from typing import Any, Dict

from hrms_portal.schemas.common import unwrap
from hrms_portal.views.base import Page
from hrms_portal.views.tables import format_cell, render_table


def _label(key: str) -> str:
    words = []
    current = ""
    for ch in key:
        if ch.isupper() and current:
            words.append(current)
            current = ch.lower()
        else:
            current += ch
    words.append(current)
    return " ".join(words).capitalize()


class DashboardPage(Page):
    """Role-specific summary; the backend decides what goes into each dashboard."""

    title = "Dashboard"
    load_error_message = "Failed to load dashboard data"

    def __init__(self, ctx):
        super().__init__(ctx)
        self.data: Dict[str, Any] = {}

    async def load(self) -> None:
        role = self.user.role_name if self.user else ""
        response = await self.api.dashboard.for_role(role)
        self.data = unwrap(response, "data", default={})

    def render_content(self) -> str:
        if not self.data:
            return "No dashboard data available"
        sections = []
        for key, value in self.data.items():
            heading = _label(key)
            if isinstance(value, dict):
                lines = [f"  {_label(k)}: {format_cell(v)}" for k, v in value.items() if not isinstance(v, (dict, list))]
                sections.append(f"{heading}\n" + "\n".join(lines))
            elif isinstance(value, list):
                rows = [row for row in value if isinstance(row, dict)]
                columns = [(k, _label(k)) for k in (rows[0].keys() if rows else [])
                           if not isinstance(rows[0][k], (dict, list))]
                sections.append(f"{heading}\n" + render_table(rows, columns, f"No {heading.lower()}"))
            else:
                sections.append(f"{heading}: {format_cell(value)}")
        return "\n\n".join(sections)
