"""Unified data models for contact events, account summaries, and the roster."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional


AUTO_DIALER = "AUTO_DIALER"
PAYMENT_PROMISE = "PAYMENT_PROMISE"


# --- Normalized categories ---

class Channel(Enum):
    """Collection channel, declared in ranking order (most significant first)."""

    PHONE = "01.PHONE"
    FIELD = "02.FIELD"
    SMS = "03.SMS"
    EMAIL = "04.EMAIL"
    IVR = "05.IVR"
    MAIL = "06.MAIL"
    NOT_REGISTERED = "NOT_REGISTERED"

    @property
    def rank(self) -> int:
        return _CHANNEL_ORDER.index(self)

    @property
    def label(self) -> str:
        return self.value


class ContactType(Enum):
    """Who was reached, declared in ranking order (best contact first)."""

    DIRECT = "01.DIRECT"
    INDIRECT = "02.INDIRECT"
    NO_CONTACT = "03.NO_CONTACT"
    DIALER = "04.DIALER"
    EMAIL = "EMAIL"
    UNCLASSIFIED = "UNCLASSIFIED"

    @property
    def rank(self) -> int:
        return _CONTACT_TYPE_ORDER.index(self)

    @property
    def label(self) -> str:
        return self.value


_CHANNEL_ORDER = tuple(Channel)
_CONTACT_TYPE_ORDER = tuple(ContactType)

# Channels that count toward ``total_activities``.
COUNTED_CHANNELS = (
    Channel.PHONE,
    Channel.FIELD,
    Channel.SMS,
    Channel.EMAIL,
    Channel.IVR,
    Channel.MAIL,
)


# --- Core Input Models ---

@dataclass(frozen=True, slots=True)
class ContactEvent:
    """One recorded outreach attempt against an account."""

    account_id: str
    event_date: date
    channel: Optional[str] = None
    contact_type: Optional[str] = None
    outcome: Optional[str] = None
    actor: Optional[str] = None
    non_payment_reason: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ClassifiedEvent:
    """A :class:`ContactEvent` annotated with its normalized categories."""

    event: ContactEvent
    normalized_channel: Channel
    normalized_contact_type: ContactType

    @property
    def account_id(self) -> str:
        return self.event.account_id

    @property
    def event_date(self) -> date:
        return self.event.event_date

    @property
    def outcome(self) -> Optional[str]:
        return self.event.outcome

    @property
    def actor(self) -> Optional[str]:
        return self.event.actor

    @property
    def non_payment_reason(self) -> Optional[str]:
        return self.event.non_payment_reason


@dataclass(slots=True)
class Assignment:
    """Account assignment loaded from the portfolio roster."""

    account_id: str
    check_digit: Optional[str] = None
    debtor_name: Optional[str] = None
    total_debt: Optional[int] = None
    total_debt_text: Optional[str] = None
    debt_tier: Optional[str] = None
    assignment_tier: Optional[str] = None
    branch: Optional[str] = None
    agent_name: Optional[str] = None


@dataclass(slots=True)
class RejectedRecord:
    """A source row that could not be turned into a model."""

    row_number: int
    reason: str
    values: Dict[str, Any] = field(default_factory=dict)

    def as_row(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {"row_number": self.row_number, "reason": self.reason}
        row.update({f"source.{key}": value for key, value in self.values.items()})
        return row


# --- Summaries ---

@dataclass(slots=True)
class AccountSummary:
    """Per-account rollup of contact activity.

    Every numeric field is populated by construction; an account without
    events is represented by ``representative is None`` and zeroed counters.
    """

    account_id: str
    representative: Optional[ClassifiedEvent] = None

    total_phone: int = 0
    total_field: int = 0
    total_sms: int = 0
    total_email: int = 0
    total_ivr: int = 0
    total_mail: int = 0

    total_direct: int = 0
    total_indirect: int = 0
    total_no_contact: int = 0
    total_dialer: int = 0

    direct_contact: bool = False
    indirect_contact: bool = False
    no_contact: bool = False
    dialer_only: bool = False

    total_activities: int = 0
    total_attempts: int = 0
    total_promises: int = 0

    @property
    def has_activity(self) -> bool:
        return self.representative is not None

    def channel_counts(self) -> Dict[Channel, int]:
        return {
            Channel.PHONE: self.total_phone,
            Channel.FIELD: self.total_field,
            Channel.SMS: self.total_sms,
            Channel.EMAIL: self.total_email,
            Channel.IVR: self.total_ivr,
            Channel.MAIL: self.total_mail,
        }

    def flags(self) -> Dict[str, bool]:
        return {
            "direct_contact": self.direct_contact,
            "indirect_contact": self.indirect_contact,
            "no_contact": self.no_contact,
            "dialer_only": self.dialer_only,
        }


@dataclass
class SummaryBatch:
    """Output of one orchestrator run."""

    summaries: List[AccountSummary] = field(default_factory=list)
    orphaned_events: List[ContactEvent] = field(default_factory=list)

    @property
    def orphaned_count(self) -> int:
        return len(self.orphaned_events)

    def by_account(self) -> Dict[str, AccountSummary]:
        return {summary.account_id: summary for summary in self.summaries}


@dataclass
class EventLoadResult:
    """Events parsed from a source file together with the rows that were rejected."""

    events: List[ContactEvent] = field(default_factory=list)
    rejected: List[RejectedRecord] = field(default_factory=list)


__all__ = [
    "AUTO_DIALER",
    "PAYMENT_PROMISE",
    "COUNTED_CHANNELS",
    "Channel",
    "ContactType",
    "ContactEvent",
    "ClassifiedEvent",
    "Assignment",
    "RejectedRecord",
    "AccountSummary",
    "SummaryBatch",
    "EventLoadResult",
]
