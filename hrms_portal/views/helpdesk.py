from typing import Any, Dict, List, Optional

from hrms_portal.forms.simple import TicketForm
from hrms_portal.schemas.common import ref_name, unwrap_list
from hrms_portal.schemas.helpdesk import Ticket, TicketPriority
from hrms_portal.views.base import Page
from hrms_portal.views.tables import render_table

TICKET_COLUMNS = [
    ("ticketNumber", "Ticket"),
    ("subject", "Subject"),
    ("category", "Category"),
    ("priority", "Priority"),
    ("status", "Status"),
    ("raisedBy", "Raised By"),
    ("assignedTo", "Assigned To"),
]


class HelpdeskPage(Page):
    title = "Helpdesk"
    load_error_message = "Failed to fetch tickets"

    def __init__(self, ctx):
        super().__init__(ctx)
        self.filters: Dict[str, Any] = {"status": None, "category": None, "priority": None}
        self.tickets: List[Ticket] = []

    @property
    def can_manage(self) -> bool:
        return self.session.has_permission("manage_tickets")

    async def load(self) -> None:
        response = await self.api.helpdesk.get_tickets(self.filters)
        self.tickets = Ticket.parse_list(unwrap_list(response, "tickets"))

    async def set_filters(self, **filters: Optional[str]) -> None:
        for key, value in filters.items():
            if key in self.filters:
                self.filters[key] = value or None
        await self.refresh()

    def ticket_form(self) -> TicketForm:
        return TicketForm(notifier=self.notifier)

    async def create(self, form: TicketForm) -> bool:
        async def _submit():
            form.require_valid()
            await self.api.helpdesk.create_ticket(form.payload())

        return await self.mutate(_submit(), "Ticket created successfully!", "Failed to create ticket", form=form)

    async def assign(self, ticket_id: str, assignee_id: str) -> bool:
        if not self.can_manage:
            self.notifier.error("You do not have permission to assign tickets")
            return False
        return await self.mutate(
            self.api.helpdesk.assign_ticket(ticket_id, assignee_id),
            "Ticket assigned successfully!",
            "Failed to assign ticket",
        )

    async def comment(self, ticket_id: str, comment: str) -> bool:
        if not comment or not comment.strip():
            self.notifier.error("Comment cannot be empty")
            return False
        return await self.mutate(
            self.api.helpdesk.add_update(ticket_id, comment.strip()), "Comment added", "Failed to add comment"
        )

    async def resolve(self, ticket_id: str) -> bool:
        return await self.mutate(
            self.api.helpdesk.resolve_ticket(ticket_id), "Ticket resolved successfully!", "Failed to resolve ticket"
        )

    async def close(self, ticket_id: str) -> bool:
        return await self.mutate(self.api.helpdesk.close_ticket(ticket_id), "Ticket closed", "Failed to close ticket")

    async def change_priority(self, ticket_id: str, priority: str) -> bool:
        priority = TicketPriority(priority).value
        return await self.mutate(
            self.api.helpdesk.update_priority(ticket_id, priority), "Priority updated", "Failed to update priority"
        )

    def render_content(self) -> str:
        rows = [
            {
                "ticketNumber": t.ticket_number or t.id,
                "subject": t.subject,
                "category": t.category,
                "priority": t.priority,
                "status": t.status,
                "raisedBy": ref_name(t.employee_id),
                "assignedTo": ref_name(t.assigned_to),
            }
            for t in self.tickets
        ]
        return render_table(rows, TICKET_COLUMNS, "No tickets found")
