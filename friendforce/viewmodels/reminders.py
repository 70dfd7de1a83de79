"""Reminder grouping and due-date labels."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime

from friendforce.schemas import Reminder, ReminderFrequency
from friendforce.viewmodels.contacts import initials

FREQUENCY_LABELS: dict[ReminderFrequency, str] = {
    ReminderFrequency.NONE: "One-time",
    ReminderFrequency.WEEKLY: "Weekly",
    ReminderFrequency.MONTHLY: "Monthly",
    ReminderFrequency.QUARTERLY: "Quarterly",
    ReminderFrequency.YEARLY: "Yearly",
}


@dataclass
class ReminderPartition:
    pending: list[Reminder] = field(default_factory=list)
    completed: list[Reminder] = field(default_factory=list)


def partition_reminders(reminders: Iterable[Reminder]) -> ReminderPartition:
    partition = ReminderPartition()
    for reminder in reminders:
        if reminder.completed:
            partition.completed.append(reminder)
        else:
            partition.pending.append(reminder)
    return partition


def days_until(due: date | datetime, today: date | None = None) -> int:
    """Whole days from local midnight today to local midnight of ``due``."""

    if isinstance(due, datetime):
        due = due.astimezone().date() if due.tzinfo else due.date()
    today = today or date.today()
    return (due - today).days


def days_until_label(days: int) -> str:
    if days < 0:
        return f"{abs(days)} days overdue"
    if days == 0:
        return "Today"
    if days == 1:
        return "Tomorrow"
    return f"in {days} days"


def frequency_label(frequency: ReminderFrequency) -> str:
    return FREQUENCY_LABELS[frequency]


@dataclass(frozen=True)
class ReminderRow:
    """A pending or completed reminder prepared for display."""

    reminder: Reminder
    days: int
    label: str
    overdue: bool
    frequency: str
    initials: str


def reminder_rows(reminders: Iterable[Reminder], today: date | None = None) -> list[ReminderRow]:
    rows = []
    for reminder in reminders:
        days = days_until(reminder.due_date, today)
        rows.append(
            ReminderRow(
                reminder=reminder,
                days=days,
                label=days_until_label(days),
                overdue=days < 0,
                frequency=frequency_label(reminder.frequency),
                initials=initials(reminder.contact_name),
            )
        )
    return rows
