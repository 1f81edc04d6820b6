import asyncio
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from hrms_portal.schemas.attendance import AttendanceRecord
from hrms_portal.schemas.common import ref_id, ref_name, unwrap_list
from hrms_portal.schemas.employee import Employee
from hrms_portal.services.attendance_clock import clock_status, work_duration
from hrms_portal.views.base import Page
from hrms_portal.views.tables import render_table

ATTENDANCE_COLUMNS = [
    ("date", "Date"),
    ("employee", "Employee"),
    ("checkIn", "Check In"),
    ("checkOut", "Check Out"),
    ("workedHours", "Hours"),
    ("status", "Status"),
]


class AttendancePage(Page):
    title = "Attendance"
    load_error_message = "Failed to fetch attendance"

    def __init__(self, ctx):
        super().__init__(ctx)
        today = date.today()
        self.filters: Dict[str, Any] = {
            "startDate": today.replace(day=1).isoformat(),
            "endDate": today.isoformat(),
            "employeeId": None,
        }
        self.records: List[AttendanceRecord] = []
        self.today: Optional[AttendanceRecord] = None
        self.employees: List[Employee] = []

    @property
    def can_view_all(self) -> bool:
        return self.session.has_permission("view_attendance_all")

    async def load(self) -> None:
        today = date.today().isoformat()
        fetch_employees = self.can_view_all and not self.employees
        requests = [
            self.api.attendance.get_records(self.filters),
            self.api.attendance.get_records({"startDate": today, "endDate": today}),
        ]
        if fetch_employees:
            requests.append(self.api.employees.get_all({}))
        responses = await asyncio.gather(*requests)

        self.records = AttendanceRecord.parse_list(unwrap_list(responses[0], "attendance"))
        todays_records = AttendanceRecord.parse_list(unwrap_list(responses[1], "attendance"))
        self.today = self._own_record(todays_records)
        if fetch_employees:
            self.employees = Employee.parse_list(unwrap_list(responses[2], "employees"))

    def _own_record(self, records: List[AttendanceRecord]) -> Optional[AttendanceRecord]:
        """Today's record of the signed-in user; view-all users get every employee's records."""
        own_id = self.user.employee_id if self.user else None
        if self.can_view_all and own_id:
            return next((r for r in records if ref_id(r.employee_id) == own_id), None)
        return records[0] if records else None

    async def set_filters(self, start_date: str, end_date: str, employee_id: Optional[str] = None) -> None:
        self.filters.update({"startDate": start_date, "endDate": end_date, "employeeId": employee_id})
        await self.refresh()

    # ============ Clock ============

    @property
    def status(self) -> str:
        return clock_status(self.today)

    def elapsed(self, now: Optional[datetime] = None) -> str:
        if self.today is None:
            return work_duration(None)
        return work_duration(self.today.check_in_time, self.today.check_out_time, now or datetime.now(timezone.utc))

    async def check_in(self) -> bool:
        return await self.mutate(self.api.attendance.check_in(), "Checked in successfully!", "Check-in failed")

    async def check_out(self) -> bool:
        return await self.mutate(self.api.attendance.check_out(), "Checked out successfully!", "Check-out failed")

    # ============ HR tools ============

    async def manual_entry(self, data: Dict[str, Any]) -> bool:
        return await self.mutate(
            self.api.attendance.manual_entry(data),
            "Attendance entry saved",
            "Failed to save attendance entry",
        )

    async def bulk_entry(self, records: List[Dict[str, Any]]) -> bool:
        return await self.mutate(
            self.api.attendance.bulk_entry(records),
            f"{len(records)} attendance records saved",
            "Bulk attendance upload failed",
        )

    async def toggle_lock(self, data: Dict[str, Any]) -> bool:
        return await self.mutate(self.api.attendance.toggle_lock(data), "Attendance lock updated", "Failed to update lock")

    async def export(self, fmt: str) -> Optional[str]:
        if fmt == "pdf":
            return await self.run_export(
                self.api.attendance.export_pdf, "attendance", "pdf", dict(self.filters),
                "Attendance report exported successfully",
            )
        return await self.run_export(
            self.api.attendance.export_csv, "attendance", "csv", dict(self.filters),
            "Attendance data exported successfully",
        )

    # ============ Rendering ============

    def render_content(self) -> str:
        panel = f"Today: {self.status}    Working time: {self.elapsed()}"
        rows = [
            {
                "date": record.date,
                "employee": ref_name(record.employee_id),
                "checkIn": record.check_in_time,
                "checkOut": record.check_out_time,
                "workedHours": record.worked_hours,
                "status": record.status,
            }
            for record in self.records
        ]
        return panel + "\n\n" + render_table(rows, ATTENDANCE_COLUMNS, "No attendance records found")
