import re
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, Field, model_validator

from hrms_portal.schemas.common import HRMSModel, Record, Reference


class LeaveStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    CANCELLED = "Cancelled"

    @classmethod
    def _missing_(cls, value):
        # Older leave records store statuses in lower case
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


class HalfDaySession(str, Enum):
    FIRST_HALF = "First Half"
    SECOND_HALF = "Second Half"


class LeaveType(Record):
    name: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None
    is_paid: bool = True
    is_active: bool = True
    color: Optional[str] = None


class LeavePolicy(Record):
    name: Optional[str] = None
    leave_type: Reference = None
    annual_quota: Optional[float] = None
    accrual_type: Optional[str] = None
    carry_forward: bool = False
    max_carry_forward: Optional[float] = None
    applicable_roles: list = Field(default_factory=list)


class LeaveBalance(HRMSModel):
    """Remaining entitlement of one leave type; computed server-side."""
    leave_type: Reference = None
    total_accrued: float = Field(default=0, validation_alias=AliasChoices("totalAccrued", "totalAllowed"))
    used: float = 0
    available: float = 0
    pending: float = 0

    @classmethod
    def parse_balances(cls, data: Any) -> List["LeaveBalance"]:
        """
        Balances from `GET /leaves/balance`.

        The endpoint keys entitlements by leave type
        (`{casualLeave: {totalAllowed, used, available, pending}, ...}`);
        per-policy balances come back as a list of records instead.
        """
        if isinstance(data, list):
            return cls.parse_list(data)
        if not isinstance(data, dict):
            return []
        balances = []
        for key, entry in data.items():
            if not isinstance(entry, dict):
                continue
            values = {k: v for k, v in entry.items() if v is not None}
            balances.append(cls.model_validate({**values, "leaveType": _leave_type_label(key)}))
        return balances


def _leave_type_label(key: str) -> str:
    """`casualLeave` -> `Casual Leave`."""
    return re.sub(r"(?<!^)(?=[A-Z])", " ", key).title()


class LeaveApplication(Record):
    employee_id: Reference = None
    leave_type: Reference = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    total_days: Optional[float] = None
    reason: Optional[str] = None
    status: LeaveStatus = LeaveStatus.PENDING
    half_day: bool = False
    half_day_session: Optional[HalfDaySession] = None
    rejection_reason: Optional[str] = None
    approved_by: Reference = None


class LeaveApplicationRequest(HRMSModel):
    """Body of POST /leaves/apply."""
    leave_type: str
    start_date: date
    end_date: date
    reason: str
    half_day: bool = False
    half_day_session: Optional[HalfDaySession] = None

    @model_validator(mode="after")
    def _half_day_is_single_day(self):
        if self.half_day:
            self.end_date = self.start_date
            if self.half_day_session is None:
                self.half_day_session = HalfDaySession.FIRST_HALF
        else:
            self.half_day_session = None
        if self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
