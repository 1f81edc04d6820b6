from datetime import datetime
from typing import Optional

from hrms_portal.schemas.common import Record, Reference


class AttendanceRecord(Record):
    employee_id: Reference = None
    date: Optional[datetime] = None
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    worked_hours: Optional[float] = None
    status: Optional[str] = None
    remarks: Optional[str] = None
    is_locked: bool = False

    @property
    def is_checked_in(self) -> bool:
        return self.check_in_time is not None and self.check_out_time is None

    @property
    def is_checked_out(self) -> bool:
        return self.check_out_time is not None
