"""Summary orchestrator that groups events per account and summarizes each one."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from ..classification import classify_all
from ..models import AUTO_DIALER, PAYMENT_PROMISE, AccountSummary, ClassifiedEvent, ContactEvent, SummaryBatch
from ..summarize import summarize

LOGGER = logging.getLogger(__name__)

SummarizeFunction = Callable[..., AccountSummary]


class SummaryOrchestrator:
    """Classifies contact events and builds one summary per roster account."""

    def __init__(
        self,
        *,
        summarize_function: SummarizeFunction = summarize,
        dialer_actor: str = AUTO_DIALER,
        promise_outcome: str = PAYMENT_PROMISE,
        concurrent: bool = False,
        max_workers: Optional[int] = None,
    ) -> None:
        self._summarize_function = summarize_function
        self._dialer_actor = dialer_actor
        self._promise_outcome = promise_outcome
        self._concurrent = concurrent
        self._max_workers = max_workers

    def run(self, events: Iterable[ContactEvent], roster: Optional[Iterable[str]] = None) -> SummaryBatch:
        """Summarize every account in ``roster``.

        When ``roster`` is omitted the accounts referenced by ``events`` are
        used, in the order they first appear. Events for accounts missing from
        an explicit roster are returned as orphans and are not summarized.
        """

        events = list(events)
        account_ids = _unique(roster) if roster is not None else _unique(event.account_id for event in events)
        grouped: Dict[str, List[ClassifiedEvent]] = {account_id: [] for account_id in account_ids}
        orphaned: List[ContactEvent] = []

        for classified in classify_all(events, dialer_actor=self._dialer_actor):
            bucket = grouped.get(classified.account_id)
            if bucket is None:
                orphaned.append(classified.event)
                continue
            bucket.append(classified)

        if orphaned:
            LOGGER.warning(
                "%s contact events reference %s accounts missing from the roster",
                len(orphaned),
                len({event.account_id for event in orphaned}),
            )

        summaries = self._summarize_accounts(account_ids, grouped)
        return SummaryBatch(summaries=summaries, orphaned_events=orphaned)

    def _summarize_accounts(
        self,
        account_ids: Sequence[str],
        grouped: Dict[str, List[ClassifiedEvent]],
    ) -> List[AccountSummary]:
        if not self._concurrent or len(account_ids) <= 1:
            return [self._summarize_account(account_id, grouped[account_id]) for account_id in account_ids]

        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = [
                executor.submit(self._summarize_account, account_id, grouped[account_id])
                for account_id in account_ids
            ]
            return [future.result() for future in futures]

    def _summarize_account(self, account_id: str, events: List[ClassifiedEvent]) -> AccountSummary:
        LOGGER.debug("Summarizing %s events for account %s", len(events), account_id)
        return self._summarize_function(account_id, events, promise_outcome=self._promise_outcome)


def _unique(values: Iterable[str]) -> List[str]:
    seen: Dict[str, None] = {}
    for value in values:
        seen.setdefault(value, None)
    return list(seen)
