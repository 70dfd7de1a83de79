"""Server-rendered pages for the FriendForce client."""
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from friendforce.context import ClientContext
from friendforce.errors import ApiError, FormValidationError, SubmissionInProgressError
from friendforce.forms import (
    DialogForm,
    parse_contact_form,
    parse_log_meetup_form,
    parse_reminder_form,
)
from friendforce.schemas import ContactType, ReminderFrequency
from friendforce.viewmodels.blasts import BlastPreview, blast_recipients, compose_blast, send_blast
from friendforce.viewmodels.contacts import (
    ALL_TYPES,
    count_by_type,
    filter_contacts,
    format_last_contact,
    initials,
)
from friendforce.viewmodels.dashboard import stat_items
from friendforce.viewmodels.reminders import FREQUENCY_LABELS, partition_reminders, reminder_rows

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

router = APIRouter()


@dataclass
class Submission:
    """Outcome of a dialog submission."""

    result: Any = None
    status_code: int | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.status_code is not None


def get_context(request: Request) -> ClientContext:
    return request.app.state.context


@router.get("/health", tags=["health"])
async def health_check(context: ClientContext = Depends(get_context)) -> dict[str, dict[str, str]]:
    """Report the client health information."""
    return {"data": {"status": "ok", "version": context.settings.version}}


@router.get("/", response_class=HTMLResponse, name="web_dashboard")
async def dashboard_page(
    request: Request,
    notice: str | None = Query(None),
    context: ClientContext = Depends(get_context),
) -> HTMLResponse:
    """Render the dashboard."""

    context.dialogs["dashboard"].dismiss()
    return await _render_dashboard(request, context, notice=notice)


@router.post("/log-meetup", name="web_log_meetup")
async def log_meetup(
    request: Request,
    contact_id: str = Form(""),
    context: ClientContext = Depends(get_context),
) -> Response:
    async def action(values: dict[str, Any]) -> Any:
        return await context.contacts.log_interaction(parse_log_meetup_form(values))

    submission = await _submit_dialog(
        context, "dashboard", "log_meetup", {"contact_id": contact_id}, action
    )
    if submission.failed:
        return await _render_dashboard(
            request, context, error=submission.error, status_code=submission.status_code
        )
    return _redirect(request, "web_dashboard", "Meetup logged successfully!")


@router.get("/contacts", response_class=HTMLResponse, name="web_contacts")
async def contacts_page(
    request: Request,
    search: str = Query(""),
    contact_type: str = Query(ALL_TYPES, alias="type"),
    notice: str | None = Query(None),
    context: ClientContext = Depends(get_context),
) -> HTMLResponse:
    """Render the contacts index page."""

    context.dialogs["contacts"].dismiss()
    return await _render_contacts(
        request, context, search=search, contact_type=contact_type, notice=notice
    )


@router.post("/contacts", name="web_create_contact")
async def create_contact(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    contact_type: str = Form(ContactType.FRIEND.value),
    birthday: str = Form(""),
    notes: str = Form(""),
    context: ClientContext = Depends(get_context),
) -> Response:
    values = {
        "name": name,
        "email": email,
        "phone": phone,
        "contact_type": contact_type,
        "birthday": birthday,
        "notes": notes,
    }

    async def action(submitted: dict[str, Any]) -> Any:
        return await context.contacts.create(parse_contact_form(submitted))

    submission = await _submit_dialog(context, "contacts", "add_contact", values, action)
    if submission.failed:
        return await _render_contacts(
            request, context, error=submission.error, status_code=submission.status_code
        )
    return _redirect(request, "web_contacts", "Contact added successfully")


@router.post("/contacts/{contact_id}/delete", name="web_delete_contact")
async def delete_contact(
    request: Request,
    contact_id: str,
    context: ClientContext = Depends(get_context),
) -> Response:
    try:
        await _run_guarded(context, "delete_contact", contact_id, context.contacts.delete)
    except ApiError as exc:
        return await _render_contacts(
            request, context, error=exc.message, status_code=status.HTTP_502_BAD_GATEWAY
        )
    return _redirect(request, "web_contacts", "Contact deleted")


@router.get("/reminders", response_class=HTMLResponse, name="web_reminders")
async def reminders_page(
    request: Request,
    notice: str | None = Query(None),
    context: ClientContext = Depends(get_context),
) -> HTMLResponse:
    """Render pending and completed reminders."""

    context.dialogs["reminders"].dismiss()
    return await _render_reminders(request, context, notice=notice)


@router.post("/reminders", name="web_create_reminder")
async def create_reminder(
    request: Request,
    contact: str = Form(""),
    title: str = Form(""),
    due_date: str = Form(""),
    frequency: str = Form(ReminderFrequency.NONE.value),
    context: ClientContext = Depends(get_context),
) -> Response:
    values = {"contact": contact, "title": title, "due_date": due_date, "frequency": frequency}

    async def action(submitted: dict[str, Any]) -> Any:
        return await context.reminders.create(parse_reminder_form(submitted))

    submission = await _submit_dialog(context, "reminders", "add_reminder", values, action)
    if submission.failed:
        return await _render_reminders(
            request, context, error=submission.error, status_code=submission.status_code
        )
    return _redirect(request, "web_reminders", "Reminder created successfully")


@router.post("/reminders/{reminder_id}/complete", name="web_complete_reminder")
async def complete_reminder(
    request: Request,
    reminder_id: str,
    context: ClientContext = Depends(get_context),
) -> Response:
    try:
        await _run_guarded(context, "complete_reminder", reminder_id, context.reminders.complete)
    except ApiError as exc:
        return await _render_reminders(
            request, context, error=exc.message, status_code=status.HTTP_502_BAD_GATEWAY
        )
    return _redirect(request, "web_reminders", "Reminder marked as complete")


@router.post("/reminders/{reminder_id}/delete", name="web_delete_reminder")
async def delete_reminder(
    request: Request,
    reminder_id: str,
    context: ClientContext = Depends(get_context),
) -> Response:
    try:
        await _run_guarded(context, "delete_reminder", reminder_id, context.reminders.delete)
    except ApiError as exc:
        return await _render_reminders(
            request, context, error=exc.message, status_code=status.HTTP_502_BAD_GATEWAY
        )
    return _redirect(request, "web_reminders", "Reminder deleted")


@router.get("/blasts", response_class=HTMLResponse, name="web_blasts")
async def blasts_page(
    request: Request,
    notice: str | None = Query(None),
    context: ClientContext = Depends(get_context),
) -> HTMLResponse:
    """Render the blast composer."""

    context.dialogs["blasts"].dismiss()
    return await _render_blasts(request, context, notice=notice)


@router.post("/blasts/preview", name="web_preview_blast")
async def preview_blast(
    request: Request,
    message: str = Form(""),
    context: ClientContext = Depends(get_context),
) -> Response:
    async def action(values: dict[str, Any]) -> BlastPreview:
        return compose_blast(values["message"], await context.contacts.list())

    submission = await _submit_dialog(context, "blasts", "compose", {"message": message}, action)
    if submission.failed:
        return await _render_blasts(
            request, context, error=submission.error, status_code=submission.status_code
        )

    # The composer stays filled while the preview is shown.
    form = context.dialogs["blasts"].open("compose")
    form.update(message=message)
    return await _render_blasts(request, context, preview=submission.result)


@router.post("/blasts/send", name="web_send_blast")
async def send_blast_route(
    request: Request,
    message: str = Form(""),
    context: ClientContext = Depends(get_context),
) -> Response:
    async def action(values: dict[str, Any]) -> str:
        preview = compose_blast(values["message"], await context.contacts.list())
        return send_blast(preview)

    submission = await _submit_dialog(context, "blasts", "compose", {"message": message}, action)
    if submission.failed:
        return await _render_blasts(
            request, context, error=submission.error, status_code=submission.status_code
        )
    return _redirect(request, "web_blasts", submission.result)


async def _submit_dialog(
    context: ClientContext,
    page: str,
    name: str,
    values: dict[str, Any],
    action: Callable[[dict[str, Any]], Awaitable[Any]],
) -> Submission:
    """Open the dialog, fill it and submit it.

    A failed submission carries the HTTP status to re-render the page with and
    the error to show on that response only. A submission racing an unfinished
    one is a 409.
    """

    try:
        form = context.dialogs[page].open(name)
        form.update(**values)
        result = await form.submit(action)
    except SubmissionInProgressError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except FormValidationError:
        return Submission(status_code=status.HTTP_400_BAD_REQUEST, error=form.error)
    except ApiError:
        return Submission(status_code=status.HTTP_502_BAD_GATEWAY, error=form.error)
    return Submission(result=result)


async def _run_guarded(
    context: ClientContext,
    action: str,
    item_id: str,
    call: Callable[[str], Awaitable[Any]],
) -> Any:
    try:
        async with context.guard(action, item_id):
            return await call(item_id)
    except SubmissionInProgressError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


def _redirect(request: Request, route_name: str, notice: str) -> RedirectResponse:
    url = f"{request.url_for(route_name).path}?{urlencode({'notice': notice})}"
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


def _form_payload(form: DialogForm) -> dict[str, Any]:
    return {"open": form.is_open, "fields": form.values}


async def _render_dashboard(
    request: Request,
    context: ClientContext,
    *,
    notice: str | None = None,
    error: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    stats, upcoming, stale, recent, contacts = await asyncio.gather(
        context.dashboard.stats(),
        context.reminders.upcoming(),
        context.dashboard.stale(),
        context.dashboard.recent(),
        context.contacts.list(),
    )
    form = context.dialog("dashboard", "log_meetup")
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "notice": notice,
            "error": error,
            "stat_items": stat_items(stats),
            "upcoming": upcoming,
            "stale_contacts": [_contact_card(contact) for contact in stale],
            "recent_contacts": [_contact_card(contact) for contact in recent],
            "contacts": contacts,
            "form": _form_payload(form),
        },
        status_code=status_code,
    )


async def _render_contacts(
    request: Request,
    context: ClientContext,
    *,
    search: str = "",
    contact_type: str = ALL_TYPES,
    notice: str | None = None,
    error: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    contacts = await context.contacts.list()
    filtered = filter_contacts(contacts, search, contact_type)
    form = context.dialog("contacts", "add_contact")
    return templates.TemplateResponse(
        request,
        "contacts.html",
        {
            "notice": notice,
            "error": error,
            "search": search,
            "active_type": contact_type or ALL_TYPES,
            "type_choices": [ALL_TYPES, *(item.value for item in ContactType)],
            "counts": count_by_type(contacts),
            "contacts": [_contact_card(contact) for contact in filtered],
            "form": _form_payload(form),
        },
        status_code=status_code,
    )


async def _render_reminders(
    request: Request,
    context: ClientContext,
    *,
    notice: str | None = None,
    error: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    reminders, contacts = await asyncio.gather(
        context.reminders.list(), context.contacts.list()
    )
    partition = partition_reminders(reminders)
    form = context.dialog("reminders", "add_reminder")
    return templates.TemplateResponse(
        request,
        "reminders.html",
        {
            "notice": notice,
            "error": error,
            "pending": reminder_rows(partition.pending),
            "completed": reminder_rows(partition.completed),
            "contacts": contacts,
            "frequency_labels": {key.value: label for key, label in FREQUENCY_LABELS.items()},
            "form": _form_payload(form),
        },
        status_code=status_code,
    )


async def _render_blasts(
    request: Request,
    context: ClientContext,
    *,
    notice: str | None = None,
    error: str | None = None,
    preview: BlastPreview | None = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    contacts = await context.contacts.list()
    form = context.dialog("blasts", "compose")
    return templates.TemplateResponse(
        request,
        "blasts.html",
        {
            "notice": notice,
            "error": error,
            "recipient_count": len(blast_recipients(contacts)),
            "preview": preview,
            "form": _form_payload(form),
        },
        status_code=status_code,
    )


def _contact_card(contact: Any) -> dict[str, Any]:
    return {
        "contact": contact,
        "initials": initials(contact.name),
        "last_contact": format_last_contact(contact.last_contact),
    }
