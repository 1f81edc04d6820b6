from hrms_portal.api.client import ApiClient
from hrms_portal.api.v1.appraisals import AppraisalAPI
from hrms_portal.api.v1.attendance import AttendanceAPI
from hrms_portal.api.v1.auth import AuthAPI
from hrms_portal.api.v1.calendar import CalendarAPI
from hrms_portal.api.v1.dashboard import DashboardAPI
from hrms_portal.api.v1.employees import EmployeeAPI
from hrms_portal.api.v1.helpdesk import HelpdeskAPI
from hrms_portal.api.v1.leaves import LeaveAPI
from hrms_portal.api.v1.organization import DepartmentAPI, DesignationAPI, LocationAPI
from hrms_portal.api.v1.payroll import PayrollAPI
from hrms_portal.api.v1.performance import GoalAPI, PerformanceReviewAPI, ReviewCycleAPI
from hrms_portal.api.v1.recruitment import RecruitmentAPI
from hrms_portal.api.v1.roles import RoleAPI


class HRMSApi:
    """All area clients over one shared ApiClient."""

    def __init__(self, client: ApiClient):
        self.client = client
        self.auth = AuthAPI(client)
        self.employees = EmployeeAPI(client)
        self.attendance = AttendanceAPI(client)
        self.leaves = LeaveAPI(client)
        self.payroll = PayrollAPI(client)
        self.dashboard = DashboardAPI(client)
        self.helpdesk = HelpdeskAPI(client)
        self.recruitment = RecruitmentAPI(client)
        self.roles = RoleAPI(client)
        self.departments = DepartmentAPI(client)
        self.designations = DesignationAPI(client)
        self.locations = LocationAPI(client)
        self.goals = GoalAPI(client)
        self.review_cycles = ReviewCycleAPI(client)
        self.reviews = PerformanceReviewAPI(client)
        self.appraisals = AppraisalAPI(client)
        self.calendar = CalendarAPI(client)

    async def close(self) -> None:
        await self.client.close()


__all__ = [
    "AppraisalAPI",
    "AttendanceAPI",
    "AuthAPI",
    "CalendarAPI",
    "DashboardAPI",
    "DepartmentAPI",
    "DesignationAPI",
    "EmployeeAPI",
    "GoalAPI",
    "HRMSApi",
    "HelpdeskAPI",
    "LeaveAPI",
    "LocationAPI",
    "PayrollAPI",
    "PerformanceReviewAPI",
    "RecruitmentAPI",
    "ReviewCycleAPI",
    "RoleAPI",
]
