"""Contact list derivations."""
from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

from dateutil.relativedelta import relativedelta

from friendforce.schemas import Contact, ContactType

ALL_TYPES = "all"

MINUTES_IN_DAY = 1440
MINUTES_IN_MONTH = 43200


def filter_contacts(
    contacts: Iterable[Contact], search: str = "", contact_type: str = ALL_TYPES
) -> list[Contact]:
    """Return contacts whose name or email contains ``search`` and whose type matches.

    Matching is case-insensitive and the source order is kept.
    """

    needle = search.lower()
    wanted = contact_type or ALL_TYPES
    results = []
    for contact in contacts:
        matches_search = needle in contact.name.lower() or needle in contact.email.lower()
        matches_type = wanted == ALL_TYPES or contact.contact_type.value == wanted
        if matches_search and matches_type:
            results.append(contact)
    return results


def count_by_type(contacts: Iterable[Contact]) -> dict[str, int]:
    """Count the full contact set per type; every type is present."""
    counts = {contact_type.value: 0 for contact_type in ContactType}
    for contact in contacts:
        counts[contact.contact_type.value] += 1
    return counts


def initials(name: str) -> str:
    return "".join(token[0] for token in name.split())


def format_last_contact(value: datetime | None, now: datetime | None = None) -> str:
    """Describe how long ago ``value`` was, e.g. ``"3 days ago"``, or ``"Never"``."""

    if value is None:
        return "Never"
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    if value > now:
        return f"in {distance_in_words(now, value)}"
    return f"{distance_in_words(value, now)} ago"


def distance_in_words(start: datetime, end: datetime) -> str:
    seconds = (end - start).total_seconds()
    minutes = round(seconds / 60)

    if minutes < 1:
        return "less than a minute"
    if minutes < 45:
        return _plural(minutes, "minute")
    if minutes < 90:
        return "about 1 hour"
    if minutes < MINUTES_IN_DAY:
        return f"about {_plural(round(minutes / 60), 'hour')}"
    if minutes < 2520:
        return "1 day"
    if minutes < MINUTES_IN_MONTH:
        return _plural(round(minutes / MINUTES_IN_DAY), "day")
    if minutes < 2 * MINUTES_IN_MONTH:
        return f"about {_plural(round(minutes / MINUTES_IN_MONTH), 'month')}"

    delta = relativedelta(end, start)
    months = delta.years * 12 + delta.months
    if months < 12:
        return _plural(round(minutes / MINUTES_IN_MONTH), "month")

    years, remainder = divmod(months, 12)
    if remainder < 3:
        return f"about {_plural(years, 'year')}"
    if remainder < 9:
        return f"over {_plural(years, 'year')}"
    return f"almost {_plural(years + 1, 'year')}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"
