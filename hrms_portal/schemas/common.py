from typing import Any, Dict, List, Optional, Type, TypeVar, Union

import httpx
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


T = TypeVar("T", bound="HRMSModel")

# Populated references come back as objects, unpopulated ones as id strings
Reference = Union[str, Dict[str, Any], None]


class HRMSModel(BaseModel):
    """Base for backend records: camelCase on the wire, unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @classmethod
    def parse_list(cls: Type[T], items: Optional[List[Dict[str, Any]]]) -> List[T]:
        return [cls.model_validate(item) for item in (items or []) if isinstance(item, dict)]


class Record(HRMSModel):
    """Any backend document with a Mongo-style `_id`."""
    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("_id", "id"))


def ref_id(value: Reference) -> Optional[str]:
    """Id of a reference whether or not the backend populated it."""
    if value is None:
        return None
    if isinstance(value, dict):
        return value.get("_id") or value.get("id")
    return str(value)


def ref_name(value: Reference, *keys: str) -> str:
    """
    Display label for a reference.

    Tries the given keys (default `name`, then first/last name) on populated
    references and falls back to the raw id.
    """
    if value is None:
        return ""
    if not isinstance(value, dict):
        return str(value)
    for key in keys or ("name", "title"):
        if value.get(key):
            return str(value[key])
    first, last = value.get("firstName"), value.get("lastName")
    if first or last:
        return " ".join(p for p in (first, last) if p)
    return str(value.get("_id") or value.get("id") or "")


def unwrap(response: httpx.Response, *path: str, default: Any = None) -> Any:
    """
    Extract a nested value from the `{success, message, data}` envelope.

    Example:
        unwrap(resp, "data", "employees", default=[])
    """
    try:
        value: Any = response.json()
    except ValueError:
        return default
    for key in path:
        if not isinstance(value, dict) or key not in value:
            return default
        value = value[key]
    return default if value is None else value


def unwrap_list(response: httpx.Response, key: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    List payload of a collection endpoint.

    Accepts both `data: [...]` and `data: {<key>: [...]}`.
    """
    data = unwrap(response, "data", default=[])
    if isinstance(data, dict) and key:
        data = data.get(key) or []
    return [item for item in data if isinstance(item, dict)] if isinstance(data, list) else []
