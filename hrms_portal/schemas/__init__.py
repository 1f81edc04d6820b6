from hrms_portal.schemas.attendance import AttendanceRecord
from hrms_portal.schemas.auth import LoginResponse, SessionUser
from hrms_portal.schemas.common import HRMSModel, Record, ref_id, ref_name, unwrap, unwrap_list
from hrms_portal.schemas.employee import Employee, EmployeeCreateResult, EmployeeDocument
from hrms_portal.schemas.helpdesk import Ticket, TicketCategory, TicketPriority, TicketStatus
from hrms_portal.schemas.leave import (
    LeaveApplication,
    LeaveApplicationRequest,
    LeaveBalance,
    LeavePolicy,
    LeaveStatus,
    LeaveType,
)
from hrms_portal.schemas.organization import Department, Designation, Location, Permission, Role
from hrms_portal.schemas.payroll import Payslip
from hrms_portal.schemas.performance import (
    AppraisalCycle,
    AppraisalRecord,
    Goal,
    PerformanceReview,
    ReviewCycle,
)

__all__ = [
    "AppraisalCycle",
    "AppraisalRecord",
    "AttendanceRecord",
    "Department",
    "Designation",
    "Employee",
    "EmployeeCreateResult",
    "EmployeeDocument",
    "Goal",
    "HRMSModel",
    "LeaveApplication",
    "LeaveApplicationRequest",
    "LeaveBalance",
    "LeavePolicy",
    "LeaveStatus",
    "LeaveType",
    "Location",
    "LoginResponse",
    "PerformanceReview",
    "Permission",
    "Payslip",
    "Record",
    "ReviewCycle",
    "Role",
    "SessionUser",
    "Ticket",
    "TicketCategory",
    "TicketPriority",
    "TicketStatus",
    "ref_id",
    "ref_name",
    "unwrap",
    "unwrap_list",
]
