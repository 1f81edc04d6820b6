from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from hrms_portal.schemas.common import HRMSModel, Record, Reference


class TicketCategory(str, Enum):
    IT = "IT"
    HR = "HR"
    ADMIN = "Admin"
    FACILITIES = "Facilities"


class TicketPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class TicketStatus(str, Enum):
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


class TicketUpdate(HRMSModel):
    updated_by: Reference = None
    comment: Optional[str] = None
    timestamp: Optional[datetime] = None


class Ticket(Record):
    ticket_number: Optional[str] = None
    employee_id: Reference = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    subject: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = TicketPriority.MEDIUM.value
    status: Optional[str] = TicketStatus.OPEN.value
    assigned_to: Reference = None
    updates: List[TicketUpdate] = Field(default_factory=list)
    resolved_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def is_closed(self) -> bool:
        return self.status == TicketStatus.CLOSED.value
