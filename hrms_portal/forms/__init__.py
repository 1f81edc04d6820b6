from hrms_portal.forms.base import FIX_ERRORS_MESSAGE, FormModel, MultiStepForm
from hrms_portal.forms.employee_form import CredentialsDialog, EmployeeForm, EmployeeSubmitResult
from hrms_portal.forms.leave_form import LeaveApplicationForm
from hrms_portal.forms.simple import (
    ChangePasswordForm,
    DepartmentForm,
    DesignationForm,
    GoalForm,
    LocationForm,
    ReviewCycleForm,
    RoleForm,
    TicketForm,
)

__all__ = [
    "ChangePasswordForm",
    "CredentialsDialog",
    "DepartmentForm",
    "DesignationForm",
    "EmployeeForm",
    "EmployeeSubmitResult",
    "FIX_ERRORS_MESSAGE",
    "FormModel",
    "GoalForm",
    "LeaveApplicationForm",
    "LocationForm",
    "MultiStepForm",
    "ReviewCycleForm",
    "RoleForm",
    "TicketForm",
]
