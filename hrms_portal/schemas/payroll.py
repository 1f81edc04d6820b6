from enum import Enum
from typing import Optional

from hrms_portal.schemas.common import Record, Reference


class PayrollStatus(str, Enum):
    GENERATED = "generated"
    APPROVED = "approved"
    RELEASED = "released"
    PAID = "paid"


class Payslip(Record):
    """One employee/month/year payroll record. Every amount is computed server-side."""
    employee_id: Reference = None
    month: int
    year: int
    total_days_in_month: Optional[int] = None
    working_days: Optional[float] = None
    present_days: Optional[float] = None
    absent_days: Optional[float] = None
    paid_leaves: Optional[float] = None
    unpaid_leaves: Optional[float] = None
    payable_days: Optional[float] = None
    basic_salary: Optional[float] = None
    hra: Optional[float] = None
    da: Optional[float] = None
    gross_salary: Optional[float] = None
    deductions: Optional[float] = None
    pf_deduction: float = 0
    esi_deduction: float = 0
    professional_tax: float = 0
    income_tax: float = 0
    total_deductions: Optional[float] = None
    net_salary: Optional[float] = None
    status: Optional[str] = None

    @property
    def period(self) -> str:
        return f"{self.month:02d}/{self.year}"
