from typing import List, Optional

from pydantic import Field

from hrms_portal.schemas.common import Record, Reference


class Department(Record):
    name: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None
    head: Reference = None
    is_active: bool = True


class Designation(Record):
    title: Optional[str] = None
    name: Optional[str] = None
    department: Reference = None
    level: Optional[int] = None
    description: Optional[str] = None
    is_active: bool = True

    @property
    def label(self) -> str:
        return self.title or self.name or ""


class Location(Record):
    name: Optional[str] = None
    code: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    timezone: Optional[str] = None
    is_active: bool = True


class Permission(Record):
    name: str
    description: Optional[str] = None
    module: Optional[str] = None


class Role(Record):
    name: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True
    is_system: bool = False
    permissions: List[Reference] = Field(default_factory=list)
