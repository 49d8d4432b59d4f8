"""Top-level package for the collections contact summary pipeline."""

from . import models  # noqa: F401
from .classification import MalformedDateError, classify, classify_channel, classify_contact_type, parse_event_date
from .models import (
    AUTO_DIALER,
    PAYMENT_PROMISE,
    AccountSummary,
    Assignment,
    Channel,
    ClassifiedEvent,
    ContactEvent,
    ContactType,
    EventLoadResult,
    RejectedRecord,
    SummaryBatch,
)
from .orchestrator import SummaryOrchestrator
from .summarize import ranking_key, select_representative, summarize

__all__ = [
    "AUTO_DIALER",
    "PAYMENT_PROMISE",
    "AccountSummary",
    "Assignment",
    "Channel",
    "ClassifiedEvent",
    "ContactEvent",
    "ContactType",
    "EventLoadResult",
    "MalformedDateError",
    "RejectedRecord",
    "SummaryBatch",
    "SummaryOrchestrator",
    "classify",
    "classify_channel",
    "classify_contact_type",
    "parse_event_date",
    "ranking_key",
    "select_representative",
    "summarize",
    "analytics",
    "ingestion",
    "orchestrator",
]
