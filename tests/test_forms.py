from __future__ import annotations

import asyncio
from datetime import date

import pytest

from friendforce.errors import (
    ApiError,
    DialogClosedError,
    FormValidationError,
    SubmissionInProgressError,
)
from friendforce.forms import (
    CONTACT_FORM_DEFAULTS,
    DialogForm,
    DialogHost,
    DialogState,
    parse_contact_form,
    parse_log_meetup_form,
    parse_reminder_form,
)
from friendforce.schemas import ContactCreate, ContactType


def test_dialog_opens_and_closes_with_reset_values():
    form = DialogForm("add_contact", CONTACT_FORM_DEFAULTS)
    form.open()
    form.update(name="Ada")

    form.close()

    assert form.state is DialogState.CLOSED
    assert form.values == CONTACT_FORM_DEFAULTS


def test_closed_dialog_rejects_edits():
    form = DialogForm("add_contact", CONTACT_FORM_DEFAULTS)

    with pytest.raises(DialogClosedError):
        form.update(name="Ada")


@pytest.mark.anyio
async def test_successful_submit_closes_and_resets():
    form = DialogForm("add_contact", CONTACT_FORM_DEFAULTS)
    form.open()
    form.update(name="Ada")
    seen: list[dict] = []

    async def action(values):
        seen.append(values)
        return "created"

    assert await form.submit(action) == "created"
    assert form.state is DialogState.CLOSED
    assert form.values["name"] == ""
    assert seen[0]["name"] == "Ada"


@pytest.mark.anyio
async def test_failed_submit_keeps_values_and_error():
    form = DialogForm("add_contact", CONTACT_FORM_DEFAULTS)
    form.open()
    form.update(name="Ada", email="ada@example.com")

    async def action(values):
        raise ApiError("Request failed: 500", status_code=500)

    with pytest.raises(ApiError):
        await form.submit(action)

    assert form.state is DialogState.FAILED
    assert form.error == "Request failed: 500"
    assert form.values["name"] == "Ada"
    assert form.values["email"] == "ada@example.com"
    assert form.can_submit


@pytest.mark.anyio
async def test_validation_failure_never_calls_network():
    form = DialogForm("add_contact", CONTACT_FORM_DEFAULTS)
    form.open()
    calls: list[str] = []

    async def create(payload: ContactCreate) -> None:
        calls.append(payload.name)

    async def action(values):
        return await create(parse_contact_form(values))

    with pytest.raises(FormValidationError, match="Name is required"):
        await form.submit(action)

    assert calls == []
    assert form.error == "Name is required"


@pytest.mark.anyio
async def test_double_submit_is_rejected_while_in_flight():
    form = DialogForm("log_meetup", {"contact_id": ""})
    form.open()
    form.update(contact_id="7")
    gate = asyncio.Event()
    calls: list[str] = []

    async def action(values):
        calls.append(values["contact_id"])
        await gate.wait()
        return "logged"

    first = asyncio.create_task(form.submit(action))
    await asyncio.sleep(0)
    assert form.is_submitting

    with pytest.raises(SubmissionInProgressError):
        await form.submit(action)
    with pytest.raises(SubmissionInProgressError):
        form.update(contact_id="8")
    with pytest.raises(SubmissionInProgressError):
        form.close()

    gate.set()
    assert await first == "logged"
    assert calls == ["7"]


@pytest.mark.anyio
async def test_closed_dialog_cannot_submit():
    form = DialogForm("compose", {"message": ""})

    async def action(values):
        return None

    with pytest.raises(DialogClosedError):
        await form.submit(action)


def test_host_keeps_a_single_dialog_open():
    host = DialogHost(DialogForm("first"), DialogForm("second"))
    host.open("first")

    host.open("second")

    assert host.active is host["second"]
    assert not host["first"].is_open


@pytest.mark.anyio
async def test_host_refuses_to_switch_while_submitting():
    host = DialogHost(DialogForm("first"), DialogForm("second"))
    form = host.open("first")
    gate = asyncio.Event()

    async def action(values):
        await gate.wait()

    pending = asyncio.create_task(form.submit(action))
    await asyncio.sleep(0)
    with pytest.raises(SubmissionInProgressError):
        host.open("second")

    gate.set()
    await pending
    assert host.open("second").state is DialogState.OPEN


def test_parse_contact_form_drops_blank_optionals():
    payload = parse_contact_form({**CONTACT_FORM_DEFAULTS, "name": "Ada", "contact_type": "mentor"})

    assert payload.contact_type is ContactType.MENTOR
    assert payload.model_dump(mode="json", exclude_none=True) == {
        "name": "Ada",
        "contact_type": "mentor",
    }


def test_parse_contact_form_reports_bad_email():
    with pytest.raises(FormValidationError) as exc_info:
        parse_contact_form({**CONTACT_FORM_DEFAULTS, "name": "Ada", "email": "not-an-email"})

    assert exc_info.value.field == "email"


def test_parse_reminder_form_requires_fields():
    with pytest.raises(FormValidationError, match="Please fill in all required fields"):
        parse_reminder_form({"contact": "1", "title": "", "due_date": "2024-06-01", "frequency": "none"})

    payload = parse_reminder_form(
        {"contact": "1", "title": "Coffee", "due_date": "2024-06-01", "frequency": "yearly"}
    )
    assert payload.due_date == date(2024, 6, 1)


def test_parse_log_meetup_form_requires_contact():
    with pytest.raises(FormValidationError, match="Please select a contact"):
        parse_log_meetup_form({"contact_id": ""})
    assert parse_log_meetup_form({"contact_id": "12"}) == "12"


@pytest.mark.anyio
async def test_dismiss_closes_failed_dialog_but_not_submitting_one():
    failed = DialogForm("failed", {"name": ""})
    busy = DialogForm("busy")
    host = DialogHost(failed, busy)
    host.open("failed")
    failed.update(name="Ada")

    async def reject(values):
        raise FormValidationError("Name is required")

    with pytest.raises(FormValidationError):
        await failed.submit(reject)
    assert failed.state is DialogState.FAILED

    host.dismiss()

    assert failed.state is DialogState.CLOSED
    assert failed.error is None
    assert failed.values == {"name": ""}

    busy.open()
    busy.state = DialogState.SUBMITTING
    host.dismiss()
    assert busy.state is DialogState.SUBMITTING
