"""Blast composition: recipient selection, validation and preview."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from friendforce.errors import FormValidationError
from friendforce.schemas import Contact

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlastPreview:
    message: str
    recipients: tuple[Contact, ...]

    @property
    def recipient_count(self) -> int:
        return len(self.recipients)


def blast_recipients(contacts: Iterable[Contact]) -> list[Contact]:
    return [contact for contact in contacts if contact.email]


def compose_blast(message: str, contacts: Iterable[Contact]) -> BlastPreview:
    """Validate a blast and build its preview.

    Raises :class:`FormValidationError` for a blank message or when no contact
    has an email address.
    """

    if not message.strip():
        raise FormValidationError("Please enter a message", field="message")
    recipients = blast_recipients(contacts)
    if not recipients:
        raise FormValidationError("No contacts with email addresses")
    return BlastPreview(message=message, recipients=tuple(recipients))


def send_blast(preview: BlastPreview) -> str:
    """Queue a previewed blast. Delivery belongs to the backend and is not wired yet."""

    logger.info(
        "Blast queued",
        extra={"recipient_count": preview.recipient_count, "message_length": len(preview.message)},
    )
    return f"Blast ready to send to {preview.recipient_count} contacts!"
