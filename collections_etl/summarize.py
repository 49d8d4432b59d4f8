"""Reduce the classified events of one account into an :class:`AccountSummary`."""
from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional, Sequence, Tuple

from .models import (
    PAYMENT_PROMISE,
    AccountSummary,
    Channel,
    ClassifiedEvent,
    ContactType,
)

RankingKey = Tuple[int, int, int]


def ranking_key(event: ClassifiedEvent) -> RankingKey:
    """Sort key for representative selection: channel, contact type, newest date first."""

    return (
        event.normalized_channel.rank,
        event.normalized_contact_type.rank,
        -event.event_date.toordinal(),
    )


def select_representative(events: Sequence[ClassifiedEvent]) -> Optional[ClassifiedEvent]:
    """Return the best-ranked event, or ``None`` when there are no events.

    Events that tie on every ranking key resolve to the one that appears first
    in ``events`` (ingestion order).
    """

    if not events:
        return None
    return min(events, key=ranking_key)


def summarize(
    account_id: str,
    events: Iterable[ClassifiedEvent],
    *,
    promise_outcome: str = PAYMENT_PROMISE,
) -> AccountSummary:
    """Aggregate counters, flags and the representative contact for one account."""

    events = list(events)
    channels = Counter(event.normalized_channel for event in events)
    types = Counter(event.normalized_contact_type for event in events)

    summary = AccountSummary(
        account_id=account_id,
        representative=select_representative(events),
        total_phone=channels[Channel.PHONE],
        total_field=channels[Channel.FIELD],
        total_sms=channels[Channel.SMS],
        total_email=channels[Channel.EMAIL],
        total_ivr=channels[Channel.IVR],
        total_mail=channels[Channel.MAIL],
        total_direct=types[ContactType.DIRECT],
        total_indirect=types[ContactType.INDIRECT],
        total_no_contact=types[ContactType.NO_CONTACT],
        total_dialer=types[ContactType.DIALER],
        total_promises=sum(1 for event in events if event.outcome == promise_outcome),
    )

    summary.total_activities = sum(summary.channel_counts().values())
    summary.total_attempts = summary.total_direct + summary.total_indirect + summary.total_no_contact
    _apply_contact_flags(summary)
    return summary


def _apply_contact_flags(summary: AccountSummary) -> None:
    # At most one flag is set: the best contact quality reached wins.
    if summary.total_direct > 0:
        summary.direct_contact = True
    elif summary.total_indirect > 0:
        summary.indirect_contact = True
    elif summary.total_no_contact > 0:
        summary.no_contact = True
    elif summary.total_dialer > 0:
        summary.dialer_only = True


__all__ = ["ranking_key", "select_representative", "summarize"]
