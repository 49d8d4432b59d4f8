"""Utilities for importing source spreadsheets and exporting collections reports."""
from __future__ import annotations

from .exporters import (
    NO_CONTACT,
    NO_PHONE_CLASSIFICATION,
    REPORT_COLUMNS,
    build_report,
    export_report,
    rejections_to_dataframe,
    summaries_to_dataframe,
)
from .loaders import (
    MissingColumnError,
    UnsupportedFileTypeError,
    load_assignments,
    load_contact_events,
    parse_amount,
)

__all__ = [
    "NO_CONTACT",
    "NO_PHONE_CLASSIFICATION",
    "REPORT_COLUMNS",
    "MissingColumnError",
    "UnsupportedFileTypeError",
    "build_report",
    "export_report",
    "load_assignments",
    "load_contact_events",
    "parse_amount",
    "rejections_to_dataframe",
    "summaries_to_dataframe",
]
