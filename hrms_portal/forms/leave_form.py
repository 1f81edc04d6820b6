from datetime import date
from typing import Any, Optional

import httpx

from hrms_portal.api.v1 import HRMSApi
from hrms_portal.core.notifications import NotificationCenter
from hrms_portal.forms.base import FormModel
from hrms_portal.schemas.leave import HalfDaySession, LeaveApplicationRequest


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


class LeaveApplicationForm(FormModel):
    """Leave request. A half-day leave always ends on the day it starts."""

    defaults = {
        "leaveType": "",
        "startDate": "",
        "endDate": "",
        "reason": "",
        "halfDay": False,
        "halfDaySession": HalfDaySession.FIRST_HALF.value,
    }
    required = ("leaveType", "startDate", "endDate", "reason")

    def __init__(self, api: HRMSApi, notifier: Optional[NotificationCenter] = None):
        super().__init__(notifier=notifier)
        self.api = api

    def on_change(self, name: str, value: Any) -> None:
        if not self.data.get("halfDay"):
            return
        if name in ("halfDay", "startDate", "endDate"):
            self.data["endDate"] = self.data.get("startDate")
            self.errors.pop("endDate", None)

    def validate_field(self, name: str) -> Optional[str]:
        message = super().validate_field(name)
        if message:
            return message
        if name in ("startDate", "endDate") and _as_date(self.get(name)) is None:
            return "Invalid date"
        if name == "endDate":
            start, end = _as_date(self.get("startDate")), _as_date(self.get("endDate"))
            if start and end and end < start:
                return "End date cannot be before start date"
        return None

    def to_request(self) -> LeaveApplicationRequest:
        return LeaveApplicationRequest(
            leave_type=self.data["leaveType"],
            start_date=_as_date(self.data["startDate"]),
            end_date=_as_date(self.data["endDate"]),
            reason=self.data["reason"].strip(),
            half_day=bool(self.data["halfDay"]),
            half_day_session=self.data.get("halfDaySession") if self.data["halfDay"] else None,
        )

    async def submit(self) -> httpx.Response:
        """Validate and POST /leaves/apply. Raises FormValidationError or ApiError."""
        self.require_valid()
        response = await self.api.leaves.apply(self.to_request().to_payload())
        self.notifier.success("Leave application submitted successfully")
        self.data = dict(self.defaults)
        return response
