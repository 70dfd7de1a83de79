from __future__ import annotations

from datetime import date

import httpx
import pytest

from friendforce.api import ApiTransport, ContactsApi, DashboardApi, RemindersApi
from friendforce.errors import ApiError
from friendforce.schemas import ContactCreate, ContactType, ReminderCreate, ReminderUpdate


@pytest.fixture()
async def transport(settings, fake_api):
    api_transport = ApiTransport(settings, transport=httpx.MockTransport(fake_api.handler))
    yield api_transport
    await api_transport.aclose()


def _calls(fake_api) -> list[tuple[str, str]]:
    return [(request.method, request.url.path) for request in fake_api.requests]


@pytest.mark.anyio
async def test_contact_operations_map_to_endpoints(transport, fake_api):
    api = ContactsApi(transport)

    created = await api.create(ContactCreate(name="Ada", contact_type=ContactType.MENTOR))
    await api.get(created.id)
    await api.list()
    await api.log_interaction(created.id)
    await api.delete(created.id)

    prefix = "/api/friendforce"
    assert _calls(fake_api) == [
        ("POST", f"{prefix}/contacts/"),
        ("GET", f"{prefix}/contacts/{created.id}/"),
        ("GET", f"{prefix}/contacts/"),
        ("POST", f"{prefix}/contacts/{created.id}/log-interaction/"),
        ("DELETE", f"{prefix}/contacts/{created.id}/"),
    ]
    assert created.contact_type is ContactType.MENTOR
    assert created.needs_attention is True


@pytest.mark.anyio
async def test_reminder_operations_map_to_endpoints(transport, fake_api):
    contact = fake_api.add_contact(name="Grace Hopper")
    api = RemindersApi(transport)

    created = await api.create(
        ReminderCreate(contact=contact["id"], title="Coffee", due_date=date(2030, 1, 1))
    )
    updated = await api.update(created.id, ReminderUpdate(title="Lunch"))
    await api.upcoming()
    await api.complete(created.id)
    await api.delete(created.id)

    assert updated.title == "Lunch"
    assert updated.due_date == date(2030, 1, 1)
    assert [path.split("/api/friendforce")[1] for _, path in _calls(fake_api)] == [
        "/reminders/",
        f"/reminders/{created.id}/",
        "/reminders/upcoming/",
        f"/reminders/{created.id}/complete/",
        f"/reminders/{created.id}/",
    ]


@pytest.mark.anyio
async def test_dashboard_operations_map_to_endpoints(transport, fake_api):
    fake_api.add_contact(name="Grace Hopper")
    api = DashboardApi(transport)

    stats = await api.stats()
    stale = await api.stale()
    recent = await api.recent()

    assert stats.total_contacts == 1
    assert stats.needs_attention == 1
    assert [contact.name for contact in stale] == ["Grace Hopper"]
    assert recent == []


@pytest.mark.anyio
async def test_missing_contact_propagates_api_error(transport):
    with pytest.raises(ApiError) as exc_info:
        await ContactsApi(transport).get("404")

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Not found."
