from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from friendforce.errors import FormValidationError
from friendforce.schemas import Contact, DashboardStats, Reminder
from friendforce.viewmodels.blasts import blast_recipients, compose_blast, send_blast
from friendforce.viewmodels.contacts import (
    count_by_type,
    filter_contacts,
    format_last_contact,
    initials,
)
from friendforce.viewmodels.dashboard import stat_items
from friendforce.viewmodels.reminders import (
    days_until,
    days_until_label,
    partition_reminders,
    reminder_rows,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_contact(contact_id: str, name: str, email: str = "", contact_type: str = "friend", **extra) -> Contact:
    return Contact(
        id=contact_id,
        name=name,
        email=email,
        contact_type=contact_type,
        created_at=NOW,
        updated_at=NOW,
        **extra,
    )


def make_reminder(reminder_id: str, completed: bool = False, due: date | None = None, **extra) -> Reminder:
    return Reminder(
        id=reminder_id,
        contact="1",
        contact_name="Grace Hopper",
        title=f"Reminder {reminder_id}",
        due_date=due or date(2024, 6, 1),
        completed=completed,
        created_at=NOW,
        updated_at=NOW,
        **extra,
    )


CONTACTS = [
    make_contact("1", "Grace Hopper", "grace@navy.mil", "mentor"),
    make_contact("2", "Ada Lovelace", "ada@engine.org", "friend"),
    make_contact("3", "Alan Turing", "", "professional"),
    make_contact("4", "Barbara Liskov", "barbara@mit.edu", "professional"),
]


@pytest.mark.parametrize(
    ("search", "contact_type", "expected"),
    [
        ("", "all", ["1", "2", "3", "4"]),
        ("ada", "all", ["2"]),
        ("MIT.EDU", "all", ["4"]),
        ("a", "professional", ["3", "4"]),
        ("turing", "friend", []),
        ("", "mentor", ["1"]),
    ],
)
def test_filter_contacts_matches_name_or_email_and_type(search, contact_type, expected):
    result = filter_contacts(CONTACTS, search, contact_type)

    assert [contact.id for contact in result] == expected
    for contact in result:
        assert contact in CONTACTS
        assert search.lower() in contact.name.lower() or search.lower() in contact.email.lower()
        assert contact_type == "all" or contact.contact_type.value == contact_type


def test_filter_contacts_is_idempotent():
    once = filter_contacts(CONTACTS, "an", "all")
    twice = filter_contacts(once, "an", "all")

    assert once == twice


def test_count_by_type_uses_full_set():
    assert count_by_type(CONTACTS) == {"friend": 1, "professional": 2, "mentor": 1}
    assert count_by_type([]) == {"friend": 0, "professional": 0, "mentor": 0}


def test_partition_is_exhaustive_and_disjoint():
    reminders = [make_reminder("1"), make_reminder("2", completed=True), make_reminder("3")]

    partition = partition_reminders(reminders)

    assert [r.id for r in partition.pending] == ["1", "3"]
    assert [r.id for r in partition.completed] == ["2"]
    pending_ids = {r.id for r in partition.pending}
    completed_ids = {r.id for r in partition.completed}
    assert pending_ids | completed_ids == {r.id for r in reminders}
    assert pending_ids & completed_ids == set()


@pytest.mark.parametrize(
    ("offset", "label"),
    [(0, "Today"), (1, "Tomorrow"), (-3, "3 days overdue"), (5, "in 5 days"), (-1, "1 days overdue")],
)
def test_days_until_labels(offset, label):
    today = date(2024, 6, 1)
    days = days_until(today + timedelta(days=offset), today)

    assert days == offset
    assert days_until_label(days) == label


def test_days_until_accepts_datetimes():
    today = date(2024, 6, 1)
    assert days_until(datetime(2024, 6, 3, 23, 59), today) == 2


def test_reminder_rows_flag_overdue():
    today = date(2024, 6, 10)
    rows = reminder_rows([make_reminder("1", due=date(2024, 6, 8), frequency="weekly")], today)

    assert rows[0].overdue
    assert rows[0].label == "2 days overdue"
    assert rows[0].frequency == "Weekly"
    assert rows[0].initials == "GH"


def test_initials_keep_case_as_typed():
    assert initials("Grace Hopper") == "GH"
    assert initials("ada  lovelace") == "al"
    assert initials("Prince") == "P"


@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (timedelta(seconds=20), "less than a minute ago"),
        (timedelta(minutes=5), "5 minutes ago"),
        (timedelta(minutes=70), "about 1 hour ago"),
        (timedelta(hours=5), "about 5 hours ago"),
        (timedelta(hours=30), "1 day ago"),
        (timedelta(days=3), "3 days ago"),
        (timedelta(days=40), "about 1 month ago"),
        (timedelta(days=150), "5 months ago"),
        (timedelta(days=400), "about 1 year ago"),
    ],
)
def test_format_last_contact(delta, expected):
    assert format_last_contact(NOW - delta, now=NOW) == expected


def test_format_last_contact_never():
    assert format_last_contact(None) == "Never"


def test_blast_requires_message():
    with pytest.raises(FormValidationError, match="Please enter a message"):
        compose_blast("   ", CONTACTS)


def test_blast_requires_email_recipients():
    without_email = [make_contact("9", "No Email")]

    with pytest.raises(FormValidationError, match="No contacts with email addresses"):
        compose_blast("Hello!", without_email)


def test_blast_preview_counts_email_contacts():
    preview = compose_blast("Hello everyone", CONTACTS)

    assert preview.recipient_count == len(blast_recipients(CONTACTS)) == 3
    assert "3" not in [contact.id for contact in preview.recipients]
    assert send_blast(preview) == "Blast ready to send to 3 contacts!"


def test_stat_items_default_to_zero():
    assert [item.value for item in stat_items(None)] == [0, 0, 0, 0]
    items = stat_items(
        DashboardStats(total_contacts=4, upcoming_reminders=2, recent_interactions_count=1, needs_attention=3)
    )
    assert [(item.label, item.value) for item in items] == [
        ("Total Contacts", 4),
        ("Upcoming Reminders", 2),
        ("Recent Interactions", 1),
        ("Needs Attention", 3),
    ]
