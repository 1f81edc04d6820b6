"""
Form models.

A form holds the values the user is editing (`data`, camelCase keys matching
the request body) and the per-field error messages shown next to each input.
Validation here only guards what the backend would reject anyway; the
backend stays authoritative.
"""

import copy
import logging
from typing import Any, Dict, Optional, Sequence

from hrms_portal.core.exceptions import ApiError, FormValidationError
from hrms_portal.core.notifications import NotificationCenter, notifications

logger = logging.getLogger("hrms_portal.forms")

FIX_ERRORS_MESSAGE = "Please fix errors before proceeding"


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


class FormModel:
    """Single-page form with dotted field names for nested values."""

    defaults: Dict[str, Any] = {}
    required: Sequence[str] = ()
    required_message = "Required"
    invalid_message = FIX_ERRORS_MESSAGE

    def __init__(
        self,
        initial: Optional[Dict[str, Any]] = None,
        notifier: Optional[NotificationCenter] = None,
    ):
        self.data: Dict[str, Any] = copy.deepcopy(self.defaults)
        if initial:
            self.data.update(copy.deepcopy(initial))
        self.errors: Dict[str, str] = {}
        self.notifier = notifier or notifications

    # ============ Field access ============

    def get(self, name: str, default: Any = None) -> Any:
        value: Any = self.data
        for part in name.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def set_field(self, name: str, value: Any) -> None:
        """Set a (possibly nested, e.g. `emergencyContact.phone`) field and clear its error."""
        target = self.data
        *parents, leaf = name.split(".")
        for part in parents:
            child = target.get(part)
            if not isinstance(child, dict):
                child = {}
                target[part] = child
            target = child
        target[leaf] = value
        self.errors.pop(name, None)
        self.on_change(name, value)

    def update(self, **values: Any) -> None:
        for name, value in values.items():
            self.set_field(name, value)

    def on_change(self, name: str, value: Any) -> None:
        """Hook for derived fields."""

    # ============ Validation ============

    def validate_field(self, name: str) -> Optional[str]:
        if name in self.required and is_blank(self.get(name)):
            return self.required_message
        return None

    def fields_to_validate(self) -> Sequence[str]:
        return self.required

    def validate(self) -> bool:
        self.errors = self._collect_errors(self.fields_to_validate())
        return not self.errors

    def _collect_errors(self, names: Sequence[str]) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        for name in names:
            message = self.validate_field(name)
            if message:
                errors[name] = message
        return errors

    def require_valid(self) -> None:
        if not self.validate():
            raise FormValidationError(dict(self.errors), self.invalid_message)

    # ============ Server feedback ============

    def apply_server_errors(self, error: ApiError) -> bool:
        """
        Attach server-side field errors to this form's fields.

        Returns:
            True if at least one error matched a field of this form
        """
        matched = False
        for field, message in error.field_errors.items():
            if field in self.data or self.get(field) is not None or field in self.fields_to_validate():
                self.errors[field] = message
                matched = True
        if matched:
            logger.debug(f"Mapped server field errors: {sorted(self.errors)}")
        return matched

    def payload(self) -> Dict[str, Any]:
        return copy.deepcopy(self.data)


class MultiStepForm(FormModel):
    """Wizard: each step validates its own fields before the user may advance."""

    steps: Sequence[str] = ()
    completion_fields: Sequence[str] = ()

    def __init__(self, initial=None, notifier=None):
        super().__init__(initial, notifier)
        self.active_step = 0

    @property
    def is_last_step(self) -> bool:
        return self.active_step >= len(self.steps) - 1

    @property
    def step_label(self) -> str:
        return self.steps[self.active_step]

    def step_fields(self, step: int) -> Sequence[str]:
        return ()

    def fields_to_validate(self) -> Sequence[str]:
        names = []
        for step in range(len(self.steps)):
            names.extend(self.step_fields(step))
        return names

    def validate_step(self, step: Optional[int] = None) -> bool:
        step = self.active_step if step is None else step
        self.errors = self._collect_errors(self.step_fields(step))
        return not self.errors

    def next(self) -> bool:
        """Advance one step; stays put and notifies when the current step is invalid."""
        if not self.validate_step():
            self.notifier.error(FIX_ERRORS_MESSAGE)
            return False
        if not self.is_last_step:
            self.active_step += 1
        return True

    def back(self) -> None:
        if self.active_step > 0:
            self.active_step -= 1

    def completion(self) -> int:
        """Share of key fields filled in, as a whole percentage."""
        if not self.completion_fields:
            return 100
        filled = sum(1 for name in self.completion_fields if not is_blank(self.get(name)))
        return round(filled / len(self.completion_fields) * 100)
