from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from hrms_portal.schemas.common import Record, Reference


# ============ Goals ============

class Goal(Record):
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    assigned_to: List[Reference] = Field(default_factory=list)
    department_id: Reference = None
    weightage: Optional[float] = None
    target_value: Optional[float] = None
    current_value: Optional[float] = None
    progress: float = 0
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[str] = None


# ============ Review Cycles & Reviews ============

class ReviewCycle(Record):
    name: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[str] = None
    self_review_open: bool = False
    manager_review_open: bool = False
    hr_review_open: bool = False


class PerformanceReview(Record):
    employee_id: Reference = None
    review_cycle_id: Reference = None
    goals: List[Dict[str, Any]] = Field(default_factory=list)
    self_rating: Optional[float] = None
    manager_rating: Optional[float] = None
    hr_rating: Optional[float] = None
    final_rating: Optional[float] = None
    status: Optional[str] = None
    submitted_at: Optional[datetime] = None


# ============ Appraisals ============

class AppraisalCycle(Record):
    name: Optional[str] = None
    linked_review_cycle: Reference = None
    status: Optional[str] = None
    effective_from: Optional[datetime] = None


class AppraisalRecord(Record):
    employee_id: Reference = None
    appraisal_cycle_id: Reference = None
    final_rating: Optional[float] = None
    increment_type: Optional[str] = None
    increment_value: Optional[float] = None
    old_ctc: Optional[float] = Field(default=None, alias="oldCTC")
    new_ctc: Optional[float] = Field(default=None, alias="newCTC")
    previous_designation: Reference = None
    new_designation: Reference = None
    effective_from: Optional[datetime] = None
    status: Optional[str] = None
    remarks: Optional[str] = None
