"""Utilities for loading contact activity and account assignments from spreadsheets."""
from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, MutableMapping, Optional, Sequence, Union

import pandas as pd

from ..classification import MalformedDateError, parse_event_date
from ..models import Assignment, ContactEvent, EventLoadResult, RejectedRecord

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]

_EVENT_SYNONYMS: Mapping[str, Sequence[str]] = {
    "account_id": ("account_id", "account", "account_number"),
    "event_date": ("event_date", "activity_date", "contact_date"),
    "channel": ("channel", "collection_type", "collection_channel"),
    "contact_type": ("contact_type",),
    "outcome": ("outcome", "contact_response", "contact_outcome"),
    "actor": ("actor", "collector_name", "contact_agent", "agent"),
    "non_payment_reason": ("non_payment_reason",),
}

_ASSIGNMENT_SYNONYMS: Mapping[str, Sequence[str]] = {
    "account_id": ("account_id", "account", "account_number"),
    "check_digit": ("check_digit", "account_checkdigit"),
    "debtor_name": ("debtor_name", "customer_name", "name"),
    "total_debt": ("total_debt", "outstanding_balance"),
    "debt_tier": ("debt_tier", "risk_segment"),
    "assignment_tier": ("assignment_tier",),
    "branch": ("branch", "branch_code"),
    "agent_name": ("agent_name", "assigned_agent", "collector_name"),
}

_REQUIRED_EVENT_FIELDS = ("account_id", "event_date")
_REQUIRED_ASSIGNMENT_FIELDS = ("account_id",)

# Spreadsheet line of the first data row (the header occupies line 1).
_FIRST_DATA_LINE = 2

_AMOUNT_NOISE = re.compile(r"[\s.,$]")


class UnsupportedFileTypeError(ValueError):
    """Raised when an unsupported file format is passed to the loader."""


class MissingColumnError(ValueError):
    """Raised when a required column cannot be found in the source file."""


def load_contact_events(
    path: PathLike,
    *,
    column_mapping: Optional[Mapping[str, str]] = None,
    sheet_name: Union[str, int, None] = 0,
    loader_kwargs: Optional[MutableMapping[str, Any]] = None,
) -> EventLoadResult:
    """Load contact events from a spreadsheet.

    Parameters
    ----------
    path:
        Path to the CSV/TSV/XLSX file to be loaded.
    column_mapping:
        Optional mapping of :class:`ContactEvent` field names to column names.
        Fields that are not mapped are resolved through a synonym table.
    sheet_name:
        Sheet selector passed to :func:`pandas.read_excel` when loading an Excel
        file. Ignored for CSV files.
    loader_kwargs:
        Extra keyword arguments forwarded to :func:`pandas.read_csv` or
        :func:`pandas.read_excel`.

    Rows whose account id is blank or whose date is neither a spreadsheet
    date cell nor valid DD/MM/YYYY text are not turned into events; they are
    returned in :attr:`EventLoadResult.rejected` instead.
    """

    dataframe = _read_dataframe(path, sheet_name=sheet_name, loader_kwargs=loader_kwargs)
    columns = _resolve_columns(dataframe.columns, _EVENT_SYNONYMS, column_mapping or {})
    _require_columns(columns, _REQUIRED_EVENT_FIELDS, path)

    result = EventLoadResult()
    for position, (_, row) in enumerate(dataframe.iterrows()):
        if _row_is_empty(row):
            continue
        line = position + _FIRST_DATA_LINE
        values = {name: _extract(row, column) for name, column in columns.items()}

        account_id = values.get("account_id")
        if account_id is None:
            result.rejected.append(_reject(line, "missing account_id", row))
            continue

        try:
            event_date = parse_event_date(_extract_date(row, columns["event_date"]))
        except MalformedDateError as exc:
            result.rejected.append(_reject(line, f"malformed event_date: {exc}", row))
            continue

        result.events.append(
            ContactEvent(
                account_id=account_id,
                event_date=event_date,
                channel=values.get("channel"),
                contact_type=values.get("contact_type"),
                outcome=values.get("outcome"),
                actor=values.get("actor"),
                non_payment_reason=values.get("non_payment_reason"),
            )
        )

    LOGGER.info("Loaded %s contact events from %s (%s rejected)", len(result.events), path, len(result.rejected))
    return result


def load_assignments(
    path: PathLike,
    *,
    column_mapping: Optional[Mapping[str, str]] = None,
    sheet_name: Union[str, int, None] = 0,
    loader_kwargs: Optional[MutableMapping[str, Any]] = None,
) -> List[Assignment]:
    """Load the account roster; duplicate account ids keep their first row."""

    dataframe = _read_dataframe(path, sheet_name=sheet_name, loader_kwargs=loader_kwargs)
    columns = _resolve_columns(dataframe.columns, _ASSIGNMENT_SYNONYMS, column_mapping or {})
    _require_columns(columns, _REQUIRED_ASSIGNMENT_FIELDS, path)

    assignments: List[Assignment] = []
    seen: set[str] = set()
    for position, (_, row) in enumerate(dataframe.iterrows()):
        if _row_is_empty(row):
            continue
        values = {name: _extract(row, column) for name, column in columns.items()}
        account_id = values.get("account_id")
        if account_id is None:
            LOGGER.warning("Skipping assignment on line %s without an account_id", position + _FIRST_DATA_LINE)
            continue
        if account_id in seen:
            LOGGER.warning("Duplicate assignment for account %s detected; keeping the first row", account_id)
            continue
        seen.add(account_id)

        debt_text = values.get("total_debt")
        assignments.append(
            Assignment(
                account_id=account_id,
                check_digit=values.get("check_digit"),
                debtor_name=values.get("debtor_name"),
                total_debt=parse_amount(debt_text),
                total_debt_text=debt_text,
                debt_tier=values.get("debt_tier"),
                assignment_tier=values.get("assignment_tier"),
                branch=values.get("branch"),
                agent_name=values.get("agent_name"),
            )
        )

    LOGGER.info("Loaded %s assignments from %s", len(assignments), path)
    return assignments


def parse_amount(text: Optional[str]) -> Optional[int]:
    """Convert amounts such as ``5.250.000`` into integers; ``None`` when not numeric."""

    if text is None:
        return None
    cleaned = _AMOUNT_NOISE.sub("", text)
    negative = cleaned.startswith("-")
    digits = cleaned[1:] if negative else cleaned
    if not digits.isdigit():
        return None
    return -int(digits) if negative else int(digits)


def _read_dataframe(
    path: PathLike,
    *,
    sheet_name: Union[str, int, None] = 0,
    loader_kwargs: Optional[MutableMapping[str, Any]] = None,
) -> pd.DataFrame:
    loader_kwargs = dict(loader_kwargs or {})
    path_obj = Path(path)
    suffix = path_obj.suffix.lower()

    if suffix in {".csv", ".tsv"}:
        if suffix == ".tsv":
            loader_kwargs.setdefault("sep", "\t")
        loader_kwargs.setdefault("dtype", str)
        # Blank lines stay in the frame so row positions match file lines.
        loader_kwargs.setdefault("skip_blank_lines", False)
        return pd.read_csv(path_obj, **loader_kwargs)

    if suffix in {".xls", ".xlsx", ".xlsm", ".xlsb"}:
        # Cells keep their native type so date cells arrive as datetimes.
        loader_kwargs.setdefault("dtype", object)
        return pd.read_excel(path_obj, sheet_name=sheet_name, engine=loader_kwargs.pop("engine", None) or "openpyxl", **loader_kwargs)

    raise UnsupportedFileTypeError(f"Unsupported file extension: {path_obj.suffix}")


def _normalise_key(value: Any) -> str:
    return str(value).strip().lower().replace(" ", "_")


def _resolve_columns(
    available_columns: Iterable[Any],
    synonyms: Mapping[str, Sequence[str]],
    mapping: Mapping[str, str],
) -> Dict[str, Any]:
    by_key = {}
    for column in available_columns:
        by_key.setdefault(_normalise_key(column), column)

    resolved: Dict[str, Any] = {}
    for field_name, candidates in synonyms.items():
        if field_name in mapping:
            if mapping[field_name] not in by_key.values():
                raise MissingColumnError(
                    f"Column '{mapping[field_name]}' mapped to '{field_name}' is not present in the source file"
                )
            resolved[field_name] = mapping[field_name]
            continue
        for candidate in candidates:
            if candidate in by_key:
                resolved[field_name] = by_key[candidate]
                break
    return resolved


def _require_columns(columns: Mapping[str, Any], required: Sequence[str], path: PathLike) -> None:
    missing = [name for name in required if name not in columns]
    if missing:
        raise MissingColumnError(f"Missing required columns in {Path(path).name}: {', '.join(missing)}")


def _row_is_empty(row: pd.Series) -> bool:
    return all(pd.isna(value) or (isinstance(value, str) and not value.strip()) for value in row.values)


def _extract(row: pd.Series, column: Any) -> Optional[str]:
    if column not in row:
        return None
    return _clean_text(row[column])


def _extract_date(row: pd.Series, column: Any) -> Union[date, str, None]:
    if column not in row:
        return None
    value = row[column]
    if isinstance(value, date) and not pd.isna(value):
        return value
    return _clean_text(value)


def _clean_text(value: Any) -> Optional[str]:
    if pd.isna(value):
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    text = str(value).strip()
    return text or None


def _reject(line: int, reason: str, row: pd.Series) -> RejectedRecord:
    values = {str(column): _clean_text(value) for column, value in row.items()}
    LOGGER.warning("Rejected contact event on line %s: %s", line, reason)
    return RejectedRecord(row_number=line, reason=reason, values=values)


__all__ = [
    "MissingColumnError",
    "UnsupportedFileTypeError",
    "load_assignments",
    "load_contact_events",
    "parse_amount",
]
