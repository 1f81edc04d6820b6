"""Departments, designations and locations (admin/HR)."""

import asyncio
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from hrms_portal.api.v1.organization import MetadataAPI
from hrms_portal.forms.base import FormModel
from hrms_portal.forms.simple import DepartmentForm, DesignationForm, LocationForm
from hrms_portal.schemas.common import Record, ref_name, unwrap_list
from hrms_portal.schemas.organization import Department, Designation, Location
from hrms_portal.views.base import Page
from hrms_portal.views.tables import render_table


class MetadataPage(Page):
    """List + create/edit/delete over one metadata collection."""

    noun = ""
    model: Type[Record] = Record
    form_class: Type[FormModel] = FormModel
    columns: Sequence[Tuple[str, str]] = ()

    def __init__(self, ctx):
        super().__init__(ctx)
        self.items: List[Any] = []

    @property
    def endpoint(self) -> MetadataAPI:
        raise NotImplementedError

    @property
    def load_error_message(self) -> str:
        return f"Failed to fetch {self.noun.lower()}s"

    async def load(self) -> None:
        response = await self.endpoint.get_all()
        self.items = self.model.parse_list(unwrap_list(response))

    def form(self, item: Optional[Record] = None) -> FormModel:
        initial = None
        if item is not None:
            initial = {k: v for k, v in item.model_dump(by_alias=True).items() if k in self.form_class.defaults}
        return self.form_class(initial, notifier=self.notifier)

    async def save(self, form: FormModel, item_id: Optional[str] = None) -> bool:
        async def _submit():
            form.require_valid()
            if item_id:
                await self.endpoint.update(item_id, form.payload())
            else:
                await self.endpoint.create(form.payload())

        verb = "updated" if item_id else "created"
        return await self.mutate(
            _submit(),
            f"{self.noun} {verb} successfully",
            f"Failed to save {self.noun.lower()}",
            form=form,
        )

    async def set_active(self, item_id: str, active: bool) -> bool:
        return await self.mutate(
            self.endpoint.update(item_id, {"isActive": active}),
            f"{self.noun} status updated",
            "Failed to update status",
        )

    async def delete(self, item_id: str) -> bool:
        return await self.mutate(
            self.endpoint.delete(item_id),
            f"{self.noun} deleted successfully",
            f"Failed to delete {self.noun.lower()}",
        )

    def row(self, item) -> Dict[str, Any]:
        return item.model_dump()

    def render_content(self) -> str:
        return render_table([self.row(item) for item in self.items], self.columns, f"No {self.noun.lower()}s found")


class DepartmentsPage(MetadataPage):
    title = "Departments"
    noun = "Department"
    model = Department
    form_class = DepartmentForm
    columns = [("code", "Code"), ("name", "Name"), ("description", "Description"), ("is_active", "Active")]

    @property
    def endpoint(self):
        return self.api.departments


class DesignationsPage(MetadataPage):
    title = "Designations"
    noun = "Designation"
    model = Designation
    form_class = DesignationForm
    columns = [("label", "Name"), ("department", "Department"), ("level", "Level"), ("is_active", "Active")]

    def __init__(self, ctx):
        super().__init__(ctx)
        self.department_id: Optional[str] = None
        self.departments: List[Department] = []

    @property
    def endpoint(self):
        return self.api.designations

    async def load(self) -> None:
        designations, departments = await asyncio.gather(
            self.api.designations.get_for_department(self.department_id),
            self.api.departments.get_all(),
        )
        self.items = Designation.parse_list(unwrap_list(designations))
        self.departments = Department.parse_list(unwrap_list(departments))

    async def filter_by_department(self, department_id: Optional[str]) -> None:
        self.department_id = department_id or None
        await self.refresh()

    def row(self, item: Designation) -> Dict[str, Any]:
        return {
            "label": item.label,
            "department": ref_name(item.department),
            "level": item.level,
            "is_active": item.is_active,
        }


class LocationsPage(MetadataPage):
    title = "Locations"
    noun = "Location"
    model = Location
    form_class = LocationForm
    columns = [("name", "Name"), ("city", "City"), ("country", "Country"), ("timezone", "Timezone"),
               ("is_active", "Active")]

    @property
    def endpoint(self):
        return self.api.locations
