"""Goals, performance reviews and review cycles."""

import asyncio
from typing import Any, Dict, List, Optional

from hrms_portal.core.exceptions import NotFoundError
from hrms_portal.forms.simple import GoalForm, ReviewCycleForm
from hrms_portal.schemas.common import ref_name, unwrap, unwrap_list
from hrms_portal.schemas.performance import Goal, PerformanceReview, ReviewCycle
from hrms_portal.views.base import Page
from hrms_portal.views.tables import render_table

GOAL_COLUMNS = [
    ("title", "Goal"),
    ("type", "Type"),
    ("weightage", "Weightage"),
    ("progress", "Progress %"),
    ("endDate", "Due"),
    ("status", "Status"),
]

REVIEW_COLUMNS = [
    ("employee", "Employee"),
    ("cycle", "Cycle"),
    ("selfRating", "Self"),
    ("managerRating", "Manager"),
    ("hrRating", "HR"),
    ("finalRating", "Final"),
    ("status", "Status"),
]


def _review_row(review: PerformanceReview) -> Dict[str, Any]:
    return {
        "employee": ref_name(review.employee_id),
        "cycle": ref_name(review.review_cycle_id),
        "selfRating": review.self_rating,
        "managerRating": review.manager_rating,
        "hrRating": review.hr_rating,
        "finalRating": review.final_rating,
        "status": review.status,
    }


class GoalsPage(Page):
    title = "Goals"
    load_error_message = "Failed to fetch data"

    def __init__(self, ctx):
        super().__init__(ctx)
        self.goals: List[Goal] = []

    @property
    def can_manage(self) -> bool:
        return self.session.has_role("admin", "hr")

    async def load(self) -> None:
        if self.can_manage:
            response = await self.api.goals.get_all()
        else:
            response = await self.api.goals.get_my_goals()
        self.goals = Goal.parse_list(unwrap_list(response, "goals"))

    def goal_form(self, goal: Optional[Goal] = None) -> GoalForm:
        initial = None
        if goal is not None:
            initial = {k: v for k, v in goal.model_dump(by_alias=True, mode="json").items() if k in GoalForm.defaults}
        return GoalForm(initial, notifier=self.notifier)

    async def save(self, form: GoalForm, goal_id: Optional[str] = None) -> bool:
        async def _submit():
            form.require_valid()
            if goal_id:
                await self.api.goals.update(goal_id, form.payload())
            else:
                await self.api.goals.create(form.payload())

        success = "Goal updated successfully" if goal_id else "Goal created successfully"
        return await self.mutate(_submit(), success, "Operation failed", form=form)

    async def update_progress(self, goal_id: str, progress: float, comment: Optional[str] = None) -> bool:
        if not 0 <= progress <= 100:
            self.notifier.error("Progress must be between 0 and 100")
            return False
        return await self.mutate(
            self.api.goals.update_progress(goal_id, progress, comment),
            "Progress updated",
            "Failed to update progress",
        )

    async def delete(self, goal_id: str) -> bool:
        return await self.mutate(self.api.goals.delete(goal_id), "Goal deleted", "Failed to delete goal")

    def render_content(self) -> str:
        rows = [
            {
                "title": g.title,
                "type": g.type,
                "weightage": g.weightage,
                "progress": g.progress,
                "endDate": g.end_date,
                "status": g.status,
            }
            for g in self.goals
        ]
        return render_table(rows, GOAL_COLUMNS, "No goals found")


class PerformancePage(Page):
    """
    Review workflow screen.

    Employees see their own review and, for managers, their team's reviews.
    Admin/HR see every review and manage review cycles. Which stage a review
    may move to is decided by the backend.
    """

    title = "Performance Reviews"
    load_error_message = "Error fetching performance review"

    def __init__(self, ctx):
        super().__init__(ctx)
        self.my_review: Optional[PerformanceReview] = None
        self.team_reviews: List[PerformanceReview] = []
        self.all_reviews: List[PerformanceReview] = []
        self.cycles: List[ReviewCycle] = []
        self.filters: Dict[str, Any] = {}

    @property
    def is_hr(self) -> bool:
        return self.session.has_role("admin", "hr")

    @property
    def is_manager(self) -> bool:
        """Team reviews are served to managers only."""
        return self.session.has_role("manager")

    async def load(self) -> None:
        if self.is_hr:
            reviews, cycles = await asyncio.gather(
                self.api.reviews.get_all_reviews(self.filters),
                self.api.review_cycles.get_all(),
            )
            self.all_reviews = PerformanceReview.parse_list(unwrap_list(reviews, "reviews"))
            self.cycles = ReviewCycle.parse_list(unwrap_list(cycles, "cycles"))
            return

        if not self.is_manager:
            self.team_reviews = []
            await self._load_my_review()
            return

        _, team = await asyncio.gather(
            self._load_my_review(),
            self.api.reviews.get_team_reviews(self.filters),
        )
        self.team_reviews = PerformanceReview.parse_list(unwrap_list(team, "reviews"))

    async def _load_my_review(self) -> None:
        try:
            mine = await self.api.reviews.get_my_review()
        except NotFoundError as e:
            # No active cycle or no review in it; the page still renders
            self.my_review = None
            self.report_error(e, self.load_error_message)
            return
        raw = unwrap(mine, "data")
        self.my_review = PerformanceReview.model_validate(raw) if isinstance(raw, dict) else None

    async def set_filters(self, **filters: Any) -> None:
        self.filters = {k: v for k, v in filters.items() if v}
        await self.refresh()

    # ============ Workflow ============

    async def init_review(self, employee_id: str, cycle_id: str) -> bool:
        return await self.mutate(
            self.api.reviews.init_review({"employeeId": employee_id, "reviewCycleId": cycle_id}),
            "Review initiated",
            "Failed to initiate review",
        )

    async def submit_self_review(self, payload: Dict[str, Any]) -> bool:
        return await self.mutate(
            self.api.reviews.submit_self_review(payload),
            "Self review submitted successfully",
            "Error submitting self review",
        )

    async def submit_manager_review(self, payload: Dict[str, Any]) -> bool:
        return await self.mutate(
            self.api.reviews.submit_manager_review(payload),
            "Manager review submitted successfully",
            "Error submitting manager review",
        )

    async def submit_hr_review(self, payload: Dict[str, Any]) -> bool:
        return await self.mutate(
            self.api.reviews.submit_hr_review(payload),
            "HR review submitted successfully",
            "Error submitting HR review",
        )

    async def finalize_review(self, payload: Dict[str, Any]) -> bool:
        return await self.mutate(
            self.api.reviews.finalize_review(payload),
            "Review finalized successfully",
            "Error finalizing review",
        )

    # ============ Review cycles ============

    def cycle_form(self) -> ReviewCycleForm:
        return ReviewCycleForm(notifier=self.notifier)

    async def save_cycle(self, form: ReviewCycleForm, cycle_id: Optional[str] = None) -> bool:
        async def _submit():
            form.require_valid()
            if cycle_id:
                await self.api.review_cycles.update(cycle_id, form.payload())
            else:
                await self.api.review_cycles.create(form.payload())

        success = "Review cycle updated" if cycle_id else "Review cycle created"
        return await self.mutate(_submit(), success, "Operation failed", form=form)

    async def delete_cycle(self, cycle_id: str) -> bool:
        return await self.mutate(
            self.api.review_cycles.delete(cycle_id), "Review cycle deleted", "Failed to delete review cycle"
        )

    # ============ Rendering ============

    def render_content(self) -> str:
        if self.is_hr:
            cycle_rows = [
                {"name": c.name, "start": c.start_date, "end": c.end_date, "status": c.status} for c in self.cycles
            ]
            return "\n\n".join([
                "Review Cycles\n" + render_table(
                    cycle_rows, [("name", "Cycle"), ("start", "Start"), ("end", "End"), ("status", "Status")],
                    "No review cycles found",
                ),
                "All Reviews\n" + render_table(
                    [_review_row(r) for r in self.all_reviews], REVIEW_COLUMNS, "No reviews found"
                ),
            ])

        if self.my_review is None:
            mine = "No active performance review found. Please check back during the next review cycle."
        else:
            mine = render_table([_review_row(self.my_review)], REVIEW_COLUMNS[1:], "")
        parts = ["My Review\n" + mine]
        if self.team_reviews:
            parts.append("Team Reviews\n" + render_table(
                [_review_row(r) for r in self.team_reviews], REVIEW_COLUMNS, "No team reviews found"
            ))
        return "\n\n".join(parts)
