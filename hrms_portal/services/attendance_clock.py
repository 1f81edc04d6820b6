from datetime import datetime, timezone
from typing import Optional

from hrms_portal.schemas.attendance import AttendanceRecord

NOT_STARTED = "NOT STARTED"
CHECKED_IN = "CHECKED IN"
CHECKED_OUT = "CHECKED OUT"


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def work_duration(
    check_in: Optional[datetime],
    check_out: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Elapsed work time as `HH : MM : SS`.

    Runs against `now` until the user checks out; never negative.
    """
    if check_in is None:
        return "00 : 00 : 00"
    end = check_out or now or datetime.now(timezone.utc)
    seconds = max(0, int((_aware(end) - _aware(check_in)).total_seconds()))
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d} : {minutes:02d} : {secs:02d}"


def clock_status(record: Optional[AttendanceRecord]) -> str:
    if record is None or record.check_in_time is None:
        return NOT_STARTED
    if record.check_out_time is None:
        return CHECKED_IN
    return CHECKED_OUT
