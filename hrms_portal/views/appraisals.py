import asyncio
from typing import Any, Dict, List, Optional

from hrms_portal.schemas.common import ref_name, unwrap_list
from hrms_portal.schemas.performance import AppraisalCycle, AppraisalRecord
from hrms_portal.views.base import Page
from hrms_portal.views.tables import format_money, render_table

APPRAISAL_COLUMNS = [
    ("employee", "Employee"),
    ("rating", "Rating"),
    ("increment", "Increment"),
    ("oldCtc", "Old CTC"),
    ("newCtc", "New CTC"),
    ("effectiveFrom", "Effective"),
    ("status", "Status"),
]


def _appraisal_row(record: AppraisalRecord) -> Dict[str, Any]:
    increment = record.increment_value
    if increment is not None and record.increment_type and record.increment_type.lower().startswith("percent"):
        increment = f"{increment}%"
    return {
        "employee": ref_name(record.employee_id),
        "rating": record.final_rating,
        "increment": increment,
        "oldCtc": format_money(record.old_ctc),
        "newCtc": format_money(record.new_ctc),
        "effectiveFrom": record.effective_from,
        "status": record.status,
    }


class AppraisalsPage(Page):
    """Appraisal cycles and increment proposals for admin/HR; personal history for everyone else."""

    title = "Appraisals"
    load_error_message = "Failed to fetch appraisals"

    def __init__(self, ctx):
        super().__init__(ctx)
        self.cycles: List[AppraisalCycle] = []
        self.appraisals: List[AppraisalRecord] = []
        self.history: List[AppraisalRecord] = []
        self.eligible: List[Dict[str, Any]] = []
        self.cycle_id: Optional[str] = None

    @property
    def can_manage(self) -> bool:
        return self.session.has_role("admin", "hr")

    async def load(self) -> None:
        if not self.can_manage:
            response = await self.api.appraisals.get_my_history()
            self.history = AppraisalRecord.parse_list(unwrap_list(response))
            return

        cycles, appraisals = await asyncio.gather(
            self.api.appraisals.get_cycles(),
            self.api.appraisals.get_all({"cycleId": self.cycle_id}),
        )
        self.cycles = AppraisalCycle.parse_list(unwrap_list(cycles))
        self.appraisals = AppraisalRecord.parse_list(unwrap_list(appraisals))
        if self.cycle_id:
            eligible = await self.api.appraisals.get_eligible_employees(self.cycle_id)
            self.eligible = unwrap_list(eligible)
        else:
            self.eligible = []

    async def select_cycle(self, cycle_id: Optional[str]) -> None:
        self.cycle_id = cycle_id or None
        await self.refresh()

    async def create_cycle(self, data: Dict[str, Any]) -> bool:
        if not data.get("name"):
            self.notifier.error("Cycle name is required")
            return False
        return await self.mutate(
            self.api.appraisals.create_cycle(data), "Appraisal cycle created", "Failed to create appraisal cycle"
        )

    async def propose(self, data: Dict[str, Any]) -> bool:
        payload = dict(data)
        payload.setdefault("appraisalCycleId", self.cycle_id)
        return await self.mutate(
            self.api.appraisals.propose_increment(payload), "Increment proposed", "Failed to propose increment"
        )

    async def approve(self, appraisal_id: str) -> bool:
        return await self.mutate(
            self.api.appraisals.approve(appraisal_id),
            "Appraisal approved and applied successfully",
            "Failed to approve appraisal",
        )

    async def reject(self, appraisal_id: str, remarks: Optional[str] = None) -> bool:
        return await self.mutate(
            self.api.appraisals.reject(appraisal_id, remarks), "Appraisal rejected", "Failed to reject appraisal"
        )

    def render_content(self) -> str:
        if not self.can_manage:
            return render_table(
                [_appraisal_row(r) for r in self.history], APPRAISAL_COLUMNS[1:], "No appraisal records found."
            )

        cycle_rows = [
            {"name": c.name, "reviewCycle": ref_name(c.linked_review_cycle), "status": c.status,
             "effectiveFrom": c.effective_from}
            for c in self.cycles
        ]
        parts = [
            "Cycles\n" + render_table(
                cycle_rows,
                [("name", "Cycle"), ("reviewCycle", "Review Cycle"), ("status", "Status"),
                 ("effectiveFrom", "Effective")],
                "No appraisal cycles found.",
            ),
            "Appraisals\n" + render_table(
                [_appraisal_row(r) for r in self.appraisals], APPRAISAL_COLUMNS, "No appraisal records found."
            ),
        ]
        if self.cycle_id:
            eligible_rows = [
                {"employee": ref_name(e.get("employee") or e.get("employeeId") or e),
                 "rating": e.get("finalRating")}
                for e in self.eligible
            ]
            parts.append("Eligible Employees\n" + render_table(
                eligible_rows, [("employee", "Employee"), ("rating", "Final Rating")], "No eligible employees"
            ))
        return "\n\n".join(parts)
