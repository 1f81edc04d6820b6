"""
Employee onboarding wizard.

Four steps (personal, job, statutory, documents). Documents are queued
locally and uploaded only after the employee record exists, as a second
concurrent wave of requests.
"""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from hrms_portal.api.v1 import HRMSApi
from hrms_portal.core.config import settings
from hrms_portal.core.notifications import NotificationCenter
from hrms_portal.forms.base import MultiStepForm, is_blank
from hrms_portal.schemas.common import unwrap
from hrms_portal.schemas.employee import DocumentStatus, Employee, EmployeeCreateResult

logger = logging.getLogger("hrms_portal.forms.employee")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\d{10}$")
PAN_RE = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]{1}$")
AADHAAR_RE = re.compile(r"^\d{12}$")

# Statutory eligibility thresholds (monthly salary, INR)
PF_SALARY_LIMIT = 15000
ESI_SALARY_LIMIT = 21000

DOCUMENT_TYPES = ("Aadhaar Card", "PAN Card", "Resume", "Photo", "Offer Letter", "Other")

EMPLOYEE_STEPS = ("Personal Details", "Job Information", "Statutory Details", "Documents")

_STEP_FIELDS = {
    0: ("firstName", "lastName", "email", "phone"),
    1: ("department", "designation", "employmentType", "salary", "panCard", "aadharCard"),
    2: ("uan", "esiNumber"),
    3: (),
}


def _to_number(value: Any) -> Optional[float]:
    """Numeric value of a form input; blank counts as 0, garbage as None."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _format_date(value: Any) -> str:
    if not value:
        return ""
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    return str(value)[:10]


@dataclass
class QueuedDocument:
    document_type: str
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class EmployeeSubmitResult:
    employee_id: str
    created: bool
    employee: Optional[Employee] = None
    generated_password: Optional[str] = None
    uploaded: int = 0
    failed_uploads: List[str] = field(default_factory=list)


class EmployeeForm(MultiStepForm):
    steps = EMPLOYEE_STEPS
    completion_fields = (
        "firstName", "lastName", "email", "phone", "department", "designation",
        "employmentType", "salary", "joinDate", "address",
    )

    def __init__(
        self,
        api: HRMSApi,
        employee_id: Optional[str] = None,
        notifier: Optional[NotificationCenter] = None,
    ):
        super().__init__(self._initial_data(), notifier)
        self.api = api
        self.employee_id = employee_id
        self.upload_queue: List[QueuedDocument] = []
        self.documents = []

    @staticmethod
    def _initial_data() -> Dict[str, Any]:
        return {
            "firstName": "", "lastName": "", "email": "", "phone": "",
            "dateOfBirth": "", "gender": "",
            "address": "", "city": "", "state": "", "pinCode": "",
            "emergencyContact": {"name": "", "relationship": "", "phone": ""},
            "department": "", "designation": "", "employmentType": "",
            "joinDate": date.today().isoformat(),
            "salary": "", "bankAccount": "", "panCard": "", "aadharCard": "",
            "uan": "", "pfNumber": "", "esiNumber": "", "taxDeduction": 0,
            "isPfEligible": True, "isEsiEligible": True,
        }

    @property
    def is_edit_mode(self) -> bool:
        return self.employee_id is not None

    # ============ Field rules ============

    def step_fields(self, step: int):
        return _STEP_FIELDS.get(step, ())

    def on_change(self, name: str, value: Any) -> None:
        if name == "salary":
            salary = _to_number(value)
            self.data["isPfEligible"] = salary is not None and salary <= PF_SALARY_LIMIT
            self.data["isEsiEligible"] = salary is not None and salary <= ESI_SALARY_LIMIT

    def validate_field(self, name: str) -> Optional[str]:
        value = self.get(name)
        text = value.strip() if isinstance(value, str) else value

        if name in ("firstName", "lastName", "department", "designation", "employmentType"):
            return "Required" if is_blank(text) else None
        if name == "email":
            return None if text and EMAIL_RE.match(str(text)) else "Valid Email Required"
        if name == "phone":
            return None if text and PHONE_RE.match(str(text)) else "10-digit Phone Required"
        if name == "salary":
            salary = _to_number(value)
            return None if salary is not None and salary > 0 else "Valid Salary Required"
        if name == "panCard":
            return "Invalid PAN Format (ABCDE1234F)" if text and not PAN_RE.match(str(text)) else None
        if name == "aadharCard":
            return "Invalid Aadhaar (12 digits)" if text and not AADHAAR_RE.match(str(text)) else None
        if name == "uan":
            if self.data.get("isPfEligible") and is_blank(text):
                return f"Required for PF Eligible (Salary <= {PF_SALARY_LIMIT})"
            return None
        if name == "esiNumber":
            if self.data.get("isEsiEligible") and is_blank(text):
                return f"Required for ESI Eligible (Salary <= {ESI_SALARY_LIMIT})"
            return None
        return super().validate_field(name)

    def validate_all(self) -> bool:
        """Validate every step; park the wizard on the first step with errors."""
        for step in range(len(self.steps)):
            if not self.validate_step(step):
                self.active_step = step
                return False
        return True

    # ============ Documents ============

    def queue_document(
        self,
        document_type: str,
        filename: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> bool:
        """Queue a file for upload after save. Oversized files are refused."""
        if len(content) > settings.max_upload_bytes:
            self.notifier.error(f"File size exceeds {settings.MAX_UPLOAD_SIZE_MB}MB limit")
            return False
        self.upload_queue.append(QueuedDocument(document_type, filename, content, content_type))
        return True

    def remove_queued(self, index: int) -> None:
        if 0 <= index < len(self.upload_queue):
            self.upload_queue.pop(index)

    # ============ Server round trips ============

    async def load(self) -> Employee:
        """Fill the form from the stored record (edit mode)."""
        response = await self.api.employees.get_by_id(self.employee_id)
        raw = unwrap(response, "data", "employee", default={})
        employee = Employee.model_validate(raw)

        self.data.update({k: v for k, v in raw.items() if k not in ("documents", "_id")})
        self.data["dateOfBirth"] = _format_date(raw.get("dateOfBirth"))
        self.data["joinDate"] = _format_date(raw.get("joinDate"))
        self.data["emergencyContact"] = raw.get("emergencyContact") or {"name": "", "relationship": "", "phone": ""}
        self.documents = employee.documents
        self.errors = {}
        return employee

    def payload(self) -> Dict[str, Any]:
        data = super().payload()
        salary = _to_number(data.get("salary"))
        if salary is not None:
            data["salary"] = salary
        return data

    async def submit(self) -> Optional[EmployeeSubmitResult]:
        """
        Save the employee, then upload queued documents.

        Returns:
            EmployeeSubmitResult, or None when client-side validation failed

        Raises:
            ApiError / NetworkError from the create or update call
        """
        if not self.validate_all():
            self.notifier.error("Please fix errors before proceeding")
            return None

        if self.is_edit_mode:
            await self.api.employees.update(self.employee_id, self.payload())
            result = EmployeeSubmitResult(employee_id=self.employee_id, created=False)
            self.notifier.success("Employee Details Updated")
        else:
            response = await self.api.employees.create(self.payload())
            created = EmployeeCreateResult.model_validate(unwrap(response, "data", default={}))
            result = EmployeeSubmitResult(
                employee_id=created.employee.id,
                created=True,
                employee=created.employee,
                generated_password=created.generated_password,
            )
            self.notifier.success("Employee Created Successfully")
            if result.employee_id:
                # Later saves of this form update the record it just created
                self.employee_id = result.employee_id

        if self.upload_queue:
            await self._upload_queue(result)
        return result

    async def _upload_queue(self, result: EmployeeSubmitResult) -> None:
        queue = list(self.upload_queue)
        outcomes = await asyncio.gather(
            *(
                self.api.employees.upload_document(
                    result.employee_id, item.document_type, item.filename, item.content, item.content_type
                )
                for item in queue
            ),
            return_exceptions=True,
        )

        failed: List[QueuedDocument] = []
        for item, outcome in zip(queue, outcomes):
            if isinstance(outcome, Exception):
                logger.warning(f"Upload of {item.filename} failed: {outcome}")
                failed.append(item)
                result.failed_uploads.append(item.filename)
            else:
                result.uploaded += 1

        self.upload_queue = failed
        if result.failed_uploads:
            self.notifier.error(f"Failed to upload: {', '.join(result.failed_uploads)}")
        else:
            self.notifier.success(f"{result.uploaded} Documents Uploaded")

    async def retry_uploads(self) -> Optional[EmployeeSubmitResult]:
        """
        Re-send documents still queued after a failed upload.

        The employee record is not saved again.

        Returns:
            EmployeeSubmitResult, or None when there is nothing to retry
        """
        if not self.is_edit_mode or not self.upload_queue:
            return None
        result = EmployeeSubmitResult(employee_id=self.employee_id, created=False)
        await self._upload_queue(result)
        return result

    async def verify_document(self, document_id: str, status: str) -> None:
        status = DocumentStatus(status).value
        rejection_reason = "Admin Rejected" if status == DocumentStatus.REJECTED.value else None
        await self.api.employees.verify_document(self.employee_id, document_id, status, rejection_reason)
        self.notifier.success(f"Document {status}")
        await self.load()


class CredentialsDialog:
    """
    One-time display of the login generated for a new employee.

    The password is dropped on close; a closed dialog renders nothing.
    """

    def __init__(self, email: Optional[str], password: Optional[str]):
        self.email = email
        self._password = password
        self._closed = not password

    @classmethod
    def from_result(cls, result: EmployeeSubmitResult) -> "CredentialsDialog":
        email = result.employee.email if result.employee else None
        return cls(email, result.generated_password)

    @property
    def is_open(self) -> bool:
        return not self._closed

    def render(self) -> str:
        if self._closed:
            return ""
        return (
            "Employee login created\n"
            f"  Email:    {self.email}\n"
            f"  Password: {self._password}\n"
            "Share these credentials now; the password will not be shown again."
        )

    def close(self) -> None:
        self._password = None
        self._closed = True
