"""Export utilities for account summaries and the wide collections report."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, MutableMapping, Optional, Sequence, Union

import pandas as pd

from ..models import AccountSummary, Assignment, RejectedRecord, SummaryBatch

PathLike = Union[str, Path]
SummariesLike = Union[SummaryBatch, Iterable[AccountSummary]]

NO_CONTACT = "no_contact"
NO_PHONE_CLASSIFICATION = "05.NO_PHONE"

REPRESENTATIVE_COLUMNS = [
    "contact_date",
    "collection_channel",
    "contact_type",
    "contact_outcome",
    "non_payment_reason",
    "contact_agent",
]

REPORT_COLUMNS = [
    "account_id",
    "check_digit",
    "debtor_name",
    "total_debt",
    "debt_tier",
    "assignment_tier",
    "branch",
    "assigned_agent",
    *REPRESENTATIVE_COLUMNS,
    "q_sms",
    "q_ivr",
    "q_field_visit",
    "q_letters",
    "q_email",
    "q_phone",
    "q_promises",
    "q_direct_contact",
    "q_indirect_contact",
    "q_no_contact",
    "q_dialer",
    "q_no_phone_activity",
    "contact_classification",
    "total_activities",
    "total_direct_contact",
    "total_indirect_contact",
    "total_no_contact",
    "total_dialer",
    "total_contact_attempts",
]


def summaries_to_dataframe(summaries: SummariesLike) -> pd.DataFrame:
    """Convert account summaries into a :class:`pandas.DataFrame`.

    Representative fields are ``None`` for accounts without activity; flags
    are rendered as 0/1.
    """

    rows = [_summary_to_row(summary) for summary in _iter_summaries(summaries)]
    columns = ["account_id", *REPRESENTATIVE_COLUMNS, *_SUMMARY_COUNTERS, *_SUMMARY_FLAGS]
    return pd.DataFrame(rows, columns=columns)


def build_report(assignments: Sequence[Assignment], summaries: SummariesLike) -> pd.DataFrame:
    """Left join the roster with the summaries, one row per assignment in roster order."""

    by_account = {summary.account_id: summary for summary in _iter_summaries(summaries)}
    rows: List[Dict[str, Any]] = []
    for assignment in assignments:
        summary = by_account.get(assignment.account_id) or AccountSummary(account_id=assignment.account_id)
        rows.append(_report_row(assignment, summary))

    frame = pd.DataFrame(rows, columns=REPORT_COLUMNS)
    frame["total_debt"] = frame["total_debt"].astype("Int64")
    return frame


def rejections_to_dataframe(rejected: Iterable[RejectedRecord]) -> pd.DataFrame:
    records = [record.as_row() for record in rejected]
    if not records:
        return pd.DataFrame(columns=["row_number", "reason"])
    return pd.DataFrame(records)


def export_report(
    dataframe: pd.DataFrame,
    path: PathLike,
    *,
    sheet_name: str = "Report",
    exporter_kwargs: Optional[MutableMapping[str, object]] = None,
) -> Path:
    """Write a report frame to a CSV, TSV or Excel file."""

    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    _write_dataframe(dataframe, output_path, sheet_name=sheet_name, exporter_kwargs=exporter_kwargs)
    return output_path


_SUMMARY_COUNTERS = [
    "total_phone",
    "total_field",
    "total_sms",
    "total_email",
    "total_ivr",
    "total_mail",
    "total_direct",
    "total_indirect",
    "total_no_contact",
    "total_dialer",
    "total_activities",
    "total_attempts",
    "total_promises",
]

_SUMMARY_FLAGS = ["direct_contact", "indirect_contact", "no_contact", "dialer_only"]


def _iter_summaries(summaries: SummariesLike) -> Iterable[AccountSummary]:
    if isinstance(summaries, SummaryBatch):
        return summaries.summaries
    return summaries


def _representative_fields(summary: AccountSummary) -> Dict[str, Optional[str]]:
    event = summary.representative
    if event is None:
        return {column: None for column in REPRESENTATIVE_COLUMNS}
    return {
        "contact_date": event.event_date.isoformat(),
        "collection_channel": event.normalized_channel.label,
        "contact_type": event.normalized_contact_type.label,
        "contact_outcome": event.outcome,
        "non_payment_reason": event.non_payment_reason,
        "contact_agent": event.actor,
    }


def _summary_to_row(summary: AccountSummary) -> MutableMapping[str, object]:
    row: MutableMapping[str, object] = {"account_id": summary.account_id}
    row.update(_representative_fields(summary))
    for column in _SUMMARY_COUNTERS:
        row[column] = getattr(summary, column)
    for column in _SUMMARY_FLAGS:
        row[column] = int(getattr(summary, column))
    return row


def _report_row(assignment: Assignment, summary: AccountSummary) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "account_id": assignment.account_id,
        "check_digit": assignment.check_digit,
        "debtor_name": assignment.debtor_name,
        "total_debt": assignment.total_debt,
        "debt_tier": assignment.debt_tier,
        "assignment_tier": assignment.assignment_tier,
        "branch": assignment.branch,
        "assigned_agent": assignment.agent_name,
    }
    for column, value in _representative_fields(summary).items():
        row[column] = NO_CONTACT if value is None else value

    row.update(
        {
            "q_sms": summary.total_sms,
            "q_ivr": summary.total_ivr,
            "q_field_visit": summary.total_field,
            "q_letters": summary.total_mail,
            "q_email": summary.total_email,
            "q_phone": summary.total_phone,
            "q_promises": summary.total_promises,
            "q_direct_contact": int(summary.direct_contact),
            "q_indirect_contact": int(summary.indirect_contact),
            "q_no_contact": int(summary.no_contact),
            "q_dialer": int(summary.dialer_only),
            "q_no_phone_activity": int(summary.total_phone == 0),
            "contact_classification": (
                summary.representative.normalized_contact_type.label
                if summary.representative is not None
                else NO_PHONE_CLASSIFICATION
            ),
            "total_activities": summary.total_activities,
            "total_direct_contact": summary.total_direct,
            "total_indirect_contact": summary.total_indirect,
            "total_no_contact": summary.total_no_contact,
            "total_dialer": summary.total_dialer,
            "total_contact_attempts": summary.total_attempts,
        }
    )
    return row


def _write_dataframe(
    dataframe: pd.DataFrame,
    path: Path,
    *,
    sheet_name: str,
    exporter_kwargs: Optional[MutableMapping[str, object]],
) -> None:
    exporter_kwargs = dict(exporter_kwargs or {})
    suffix = path.suffix.lower()

    if suffix in {".csv", ".tsv"}:
        if suffix == ".tsv":
            exporter_kwargs.setdefault("sep", "\t")
        dataframe.to_csv(path, index=False, **exporter_kwargs)
        return

    if suffix in {".xls", ".xlsx", ".xlsm", ".xlsb"}:
        engine = exporter_kwargs.pop("engine", None) or "openpyxl"
        dataframe.to_excel(path, index=False, sheet_name=sheet_name, engine=engine, **exporter_kwargs)
        return

    raise ValueError(f"Unsupported export file extension: {suffix}")


__all__ = [
    "NO_CONTACT",
    "NO_PHONE_CLASSIFICATION",
    "REPORT_COLUMNS",
    "build_report",
    "export_report",
    "rejections_to_dataframe",
    "summaries_to_dataframe",
]
