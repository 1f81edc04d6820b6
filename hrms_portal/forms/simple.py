"""Single-dialog forms for metadata, tickets, goals, roles and passwords."""

from typing import Optional

from hrms_portal.forms.base import FormModel, is_blank
from hrms_portal.schemas.helpdesk import TicketCategory, TicketPriority


class DepartmentForm(FormModel):
    defaults = {"name": "", "code": "", "description": "", "isActive": True}
    required = ("name", "code")
    invalid_message = "Name and Code are required"


class DesignationForm(FormModel):
    defaults = {"name": "", "department": "", "level": 0, "description": "", "isActive": True}
    required = ("name", "department")
    invalid_message = "Name and Department are required"


class LocationForm(FormModel):
    defaults = {
        "name": "",
        "city": "",
        "country": "",
        "timezone": "Asia/Kolkata",
        "workType": "Onsite",
        "description": "",
        "isActive": True,
    }
    required = ("name", "city", "country", "timezone")
    invalid_message = "Please fill all required fields"


class TicketForm(FormModel):
    defaults = {
        "category": "",
        "subcategory": "",
        "subject": "",
        "description": "",
        "priority": TicketPriority.MEDIUM.value,
    }
    required = ("category", "subject", "description", "priority")

    def validate_field(self, name: str) -> Optional[str]:
        message = super().validate_field(name)
        if message:
            return message
        if name == "category" and self.get(name) not in {c.value for c in TicketCategory}:
            return "Invalid category"
        if name == "priority" and self.get(name) not in {p.value for p in TicketPriority}:
            return "Invalid priority"
        return None


class GoalForm(FormModel):
    defaults = {
        "title": "",
        "description": "",
        "type": "Individual",
        "assignedTo": [],
        "departmentId": "",
        "weightage": 0,
        "targetValue": "",
        "startDate": "",
        "endDate": "",
        "status": "Not Started",
    }
    required = ("title", "assignedTo")

    def validate_field(self, name: str) -> Optional[str]:
        if name == "assignedTo" and is_blank(self.get(name)):
            return "Please assign to at least one employee"
        return super().validate_field(name)


class ReviewCycleForm(FormModel):
    defaults = {
        "name": "",
        "startDate": "",
        "endDate": "",
        "status": "Upcoming",
        "selfReviewOpen": False,
        "managerReviewOpen": False,
        "hrReviewOpen": False,
    }
    required = ("name", "startDate", "endDate")

    def validate_field(self, name: str) -> Optional[str]:
        message = super().validate_field(name)
        if message is None and name == "endDate" and str(self.get("endDate")) < str(self.get("startDate")):
            return "End date cannot be before start date"
        return message


class RoleForm(FormModel):
    defaults = {"name": "", "description": "", "isActive": True}
    required = ("name",)


class ChangePasswordForm(FormModel):
    defaults = {"currentPassword": "", "newPassword": "", "confirmPassword": ""}
    required = ("currentPassword", "newPassword", "confirmPassword")
    min_length = 8

    def validate_field(self, name: str) -> Optional[str]:
        message = super().validate_field(name)
        if message:
            return message
        if name == "newPassword":
            new = self.get("newPassword")
            if len(new) < self.min_length:
                return f"Password must be at least {self.min_length} characters"
            if new == self.get("currentPassword"):
                return "New password must differ from the current one"
        if name == "confirmPassword" and self.get("confirmPassword") != self.get("newPassword"):
            return "Passwords do not match"
        return None
