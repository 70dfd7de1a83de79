"""Mutation dialogs as explicit state machines, plus their client-side validators.

A dialog moves ``CLOSED -> OPEN -> SUBMITTING`` and then either back to
``CLOSED`` (success, values reset) or to ``FAILED`` (error kept, values kept).
``FAILED`` accepts edits and resubmission just like ``OPEN``.
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from friendforce.errors import (
    DialogClosedError,
    FormValidationError,
    SubmissionInProgressError,
)
from friendforce.schemas import ContactCreate, ReminderCreate

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

CONTACT_FORM_DEFAULTS: dict[str, Any] = {
    "name": "",
    "email": "",
    "phone": "",
    "contact_type": "friend",
    "birthday": "",
    "notes": "",
}
REMINDER_FORM_DEFAULTS: dict[str, Any] = {
    "contact": "",
    "title": "",
    "due_date": "",
    "frequency": "none",
}
LOG_MEETUP_DEFAULTS: dict[str, Any] = {"contact_id": ""}
BLAST_DEFAULTS: dict[str, Any] = {"message": ""}


class DialogState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    SUBMITTING = "submitting"
    FAILED = "failed"


class DialogForm:
    """State of one dialog and the values entered into it."""

    def __init__(self, name: str, defaults: dict[str, Any] | None = None):
        self.name = name
        self._defaults = dict(defaults or {})
        self.values: dict[str, Any] = dict(self._defaults)
        self.state = DialogState.CLOSED
        self.error: str | None = None

    def __repr__(self) -> str:
        return f"DialogForm(name={self.name!r}, state={self.state.value!r})"

    @property
    def is_open(self) -> bool:
        return self.state is not DialogState.CLOSED

    @property
    def is_submitting(self) -> bool:
        return self.state is DialogState.SUBMITTING

    @property
    def can_submit(self) -> bool:
        return self.state in (DialogState.OPEN, DialogState.FAILED)

    def open(self) -> None:
        if self.state is DialogState.SUBMITTING:
            raise SubmissionInProgressError(f"{self.name} is still submitting")
        if self.state is DialogState.CLOSED:
            self.state = DialogState.OPEN
            self.error = None

    def close(self) -> None:
        if self.state is DialogState.SUBMITTING:
            raise SubmissionInProgressError(f"{self.name} is still submitting")
        self.state = DialogState.CLOSED
        self.error = None
        self.values = dict(self._defaults)

    def update(self, **values: Any) -> None:
        if self.state is DialogState.CLOSED:
            raise DialogClosedError(f"{self.name} is closed")
        if self.state is DialogState.SUBMITTING:
            raise SubmissionInProgressError(f"{self.name} is still submitting")
        self.values.update(values)

    async def submit(self, action: Callable[[dict[str, Any]], Awaitable[T]]) -> T:
        """Run ``action`` with a copy of the entered values.

        On failure the dialog stays open in ``FAILED`` with the error message and
        the entered values; the exception is re-raised for the caller to surface.
        """

        if self.state is DialogState.SUBMITTING:
            raise SubmissionInProgressError(f"{self.name} is already submitting")
        if self.state is DialogState.CLOSED:
            raise DialogClosedError(f"{self.name} is closed")

        self.state = DialogState.SUBMITTING
        self.error = None
        try:
            result = await action(dict(self.values))
        except Exception as exc:
            self.state = DialogState.FAILED
            self.error = getattr(exc, "message", None) or str(exc)
            raise

        self.state = DialogState.CLOSED
        self.values = dict(self._defaults)
        return result


class DialogHost:
    """The dialogs of one page, of which at most one is open."""

    def __init__(self, *forms: DialogForm):
        self._forms = {form.name: form for form in forms}

    def __getitem__(self, name: str) -> DialogForm:
        return self._forms[name]

    def __iter__(self):
        return iter(self._forms.values())

    @property
    def active(self) -> DialogForm | None:
        for form in self._forms.values():
            if form.is_open:
                return form
        return None

    def open(self, name: str) -> DialogForm:
        target = self._forms[name]
        others = [form for form in self._forms.values() if form is not target]
        for form in others:
            if form.is_submitting:
                raise SubmissionInProgressError(f"{form.name} is still submitting")
        for form in others:
            if form.is_open:
                form.close()
        target.open()
        return target

    def dismiss(self) -> None:
        """Close every open dialog that is not waiting on a submission."""
        for form in self._forms.values():
            if form.is_open and not form.is_submitting:
                form.close()


def parse_contact_form(values: dict[str, Any]) -> ContactCreate:
    if not str(values.get("name") or "").strip():
        raise FormValidationError("Name is required", field="name")
    return _validate(ContactCreate, values)


def parse_reminder_form(values: dict[str, Any]) -> ReminderCreate:
    required = ("contact", "title", "due_date")
    if any(not str(values.get(name) or "").strip() for name in required):
        raise FormValidationError("Please fill in all required fields")
    return _validate(ReminderCreate, values)


def parse_log_meetup_form(values: dict[str, Any]) -> str:
    contact_id = str(values.get("contact_id") or "").strip()
    if not contact_id:
        raise FormValidationError("Please select a contact", field="contact_id")
    return contact_id


def _validate(model: type[M], values: dict[str, Any]) -> M:
    try:
        return model.model_validate(values)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise FormValidationError(f"{field}: {first['msg']}", field=field) from exc
