"""Portfolio analytics computed from account summaries and the wide report."""
from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Union

import pandas as pd

from .models import AccountSummary, SummaryBatch

LOGGER = logging.getLogger(__name__)

SummariesLike = Union[SummaryBatch, Iterable[AccountSummary]]

_EFFECTIVENESS_COLUMNS = [
    "collection_channel",
    "accounts_contacted",
    "total_promises_made",
    "avg_promises_per_account",
    "promise_conversion_rate_pct",
]


def accounts_without_promises(report: pd.DataFrame, min_activities: int = 5) -> pd.DataFrame:
    """Accounts worked at least ``min_activities`` times that never produced a promise."""

    mask = (report["total_activities"] >= min_activities) & (report["q_promises"] == 0)
    selected = report.loc[
        mask,
        ["account_id", "debtor_name", "total_debt", "total_activities", "q_promises", "collection_channel", "contact_date"],
    ].rename(
        columns={
            "q_promises": "total_promises",
            "collection_channel": "last_channel",
            "contact_date": "last_contact_date",
        }
    )
    return selected.sort_values("total_activities", ascending=False, kind="stable").reset_index(drop=True)


def channel_effectiveness(summaries: SummariesLike) -> pd.DataFrame:
    """Promise conversion grouped by the channel of each account's representative contact.

    Accounts without any activity have no representative channel and are left out.
    """

    if isinstance(summaries, SummaryBatch):
        summaries = summaries.summaries

    rows = [
        {
            "collection_channel": summary.representative.normalized_channel.label,
            "account_id": summary.account_id,
            "total_promises": summary.total_promises,
        }
        for summary in summaries
        if summary.representative is not None
    ]
    if not rows:
        return pd.DataFrame(columns=_EFFECTIVENESS_COLUMNS)

    frame = pd.DataFrame(rows)
    grouped = frame.groupby("collection_channel").agg(
        accounts_contacted=("account_id", "nunique"),
        total_promises_made=("total_promises", "sum"),
    )
    ratio = grouped["total_promises_made"] / grouped["accounts_contacted"]
    grouped["avg_promises_per_account"] = ratio.round(2)
    grouped["promise_conversion_rate_pct"] = (ratio * 100).round(2)
    grouped = grouped.reset_index()
    return grouped.sort_values(
        ["promise_conversion_rate_pct", "collection_channel"],
        ascending=[False, True],
        kind="stable",
    ).reset_index(drop=True)[_EFFECTIVENESS_COLUMNS]


def accounts_requiring_follow_up(report: pd.DataFrame, as_of: date, min_days: int = 7) -> pd.DataFrame:
    """Accounts holding promises whose last contact is more than ``min_days`` old at ``as_of``."""

    contact_dates = pd.to_datetime(report["contact_date"], format="%Y-%m-%d", errors="coerce")
    days_since = (pd.Timestamp(as_of) - contact_dates).dt.days
    mask = (report["q_promises"] > 0) & (days_since > min_days)

    selected = report.loc[
        mask, ["account_id", "debtor_name", "assigned_agent", "q_promises", "contact_date", "total_debt"]
    ].rename(columns={"q_promises": "total_promises", "contact_date": "last_contact"})
    selected.insert(5, "days_since_contact", days_since[mask].astype(int))
    LOGGER.debug("%s accounts require follow-up as of %s", len(selected), as_of)
    return selected.sort_values(
        ["days_since_contact", "total_debt"],
        ascending=[False, False],
        kind="stable",
        na_position="last",
    ).reset_index(drop=True)


__all__ = ["accounts_requiring_follow_up", "accounts_without_promises", "channel_effectiveness"]
