from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from hrms_portal.schemas.common import HRMSModel, Record, Reference


class DocumentStatus(str, Enum):
    PENDING = "Pending"
    VERIFIED = "Verified"
    REJECTED = "Rejected"


class EmergencyContact(HRMSModel):
    name: Optional[str] = None
    relationship: Optional[str] = None
    phone: Optional[str] = None


class JobInfo(HRMSModel):
    department: Reference = None
    designation: Reference = None
    location: Reference = None
    reporting_manager: Reference = None


class EmploymentDetails(HRMSModel):
    employment_type: Optional[str] = None
    join_date: Optional[datetime] = None
    probation_end_date: Optional[datetime] = None
    confirmation_date: Optional[datetime] = None


class EmployeeDocument(Record):
    document_type: Optional[str] = None
    file_name: Optional[str] = None
    file_url: Optional[str] = None
    status: DocumentStatus = DocumentStatus.PENDING
    rejection_reason: Optional[str] = None
    uploaded_at: Optional[datetime] = None


class Employee(Record):
    """Employee master record; owned and validated by the backend."""
    employee_code: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pin_code: Optional[str] = None
    emergency_contact: Optional[EmergencyContact] = None

    job_info: Optional[JobInfo] = None
    employment_details: Optional[EmploymentDetails] = None

    # Flat job fields kept by older records
    department: Reference = None
    designation: Reference = None
    employment_type: Optional[str] = None
    join_date: Optional[datetime] = None
    salary: Optional[float] = None

    # Statutory
    bank_account: Optional[str] = None
    pan_card: Optional[str] = None
    aadhar_card: Optional[str] = None
    uan: Optional[str] = None
    pf_number: Optional[str] = None
    esi_number: Optional[str] = None
    tax_deduction: float = 0
    is_pf_eligible: bool = True
    is_esi_eligible: bool = True

    status: Optional[str] = None
    profile_completion: Optional[int] = None
    documents: List[EmployeeDocument] = Field(default_factory=list)

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)


class EmployeeCreateResult(HRMSModel):
    """`data` payload of POST /employees."""
    employee: Employee
    generated_password: Optional[str] = None
