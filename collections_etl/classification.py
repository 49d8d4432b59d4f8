"""Normalisation of raw contact events into channel and contact-type categories."""
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterable, List, Mapping, Optional

from .models import AUTO_DIALER, Channel, ClassifiedEvent, ContactEvent, ContactType

_CHANNELS: Mapping[str, Channel] = {
    "PHONE": Channel.PHONE,
    "AGENT": Channel.EMAIL,
    "EMAIL": Channel.EMAIL,
    "SMS": Channel.SMS,
    "IVR": Channel.IVR,
    "FIELD": Channel.FIELD,
    "MAIL": Channel.MAIL,
    "LETTER": Channel.MAIL,
}

_INDIRECT_TYPES = frozenset({"THIRD_PARTY", "FAMILY", "RELATIVE"})

_DATE_PATTERN = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")


class MalformedDateError(ValueError):
    """Raised when a source date is not a valid DD/MM/YYYY calendar date."""


def classify_channel(raw: Optional[str]) -> Channel:
    """Map a raw channel value onto :class:`Channel`; unknown values are ``NOT_REGISTERED``."""

    if raw is None:
        return Channel.NOT_REGISTERED
    return _CHANNELS.get(raw, Channel.NOT_REGISTERED)


def classify_contact_type(raw: Optional[str], actor: Optional[str], *, dialer_actor: str = AUTO_DIALER) -> ContactType:
    """Map a raw contact type onto :class:`ContactType`.

    Rules are evaluated in order and the first match wins. ``NO_CONTACT``
    attempts made by the automated dialer are split out from ordinary
    no-contact attempts.
    """

    if raw == "PRIMARY":
        return ContactType.DIRECT
    if raw in _INDIRECT_TYPES:
        return ContactType.INDIRECT
    if raw == "NO_CONTACT" and actor == dialer_actor:
        return ContactType.DIALER
    if raw == "NO_CONTACT":
        return ContactType.NO_CONTACT
    if raw == "EMAIL":
        return ContactType.EMAIL
    return ContactType.UNCLASSIFIED


def classify(event: ContactEvent, *, dialer_actor: str = AUTO_DIALER) -> ClassifiedEvent:
    return ClassifiedEvent(
        event=event,
        normalized_channel=classify_channel(event.channel),
        normalized_contact_type=classify_contact_type(event.contact_type, event.actor, dialer_actor=dialer_actor),
    )


def classify_all(events: Iterable[ContactEvent], *, dialer_actor: str = AUTO_DIALER) -> List[ClassifiedEvent]:
    return [classify(event, dialer_actor=dialer_actor) for event in events]


def parse_event_date(value: object) -> date:
    """Convert DD/MM/YYYY text into a :class:`datetime.date`.

    ``date`` and ``datetime`` instances are accepted as-is. Anything else must
    be exactly two-digit day, two-digit month and four-digit year separated by
    slashes and must name a real calendar day.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise MalformedDateError(f"Unsupported date value {value!r}")

    text = value.strip()
    match = _DATE_PATTERN.match(text)
    if not match:
        raise MalformedDateError(f"Date {value!r} is not in DD/MM/YYYY format")

    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise MalformedDateError(f"Date {value!r} is not a valid calendar day") from exc


__all__ = [
    "MalformedDateError",
    "classify",
    "classify_all",
    "classify_channel",
    "classify_contact_type",
    "parse_event_date",
]
