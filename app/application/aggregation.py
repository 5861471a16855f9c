"""
Subscription cost aggregation over a window of calendar months.

The engine is a pure fold over candidate subscriptions: each one is clamped
to the requested window and contributes price * active months. Candidates
come from an OverlapSelector, which may return a superset of the truly
overlapping subscriptions; overlap is re-checked here for every candidate.
"""
import logging
import uuid
from datetime import date
from typing import Iterable, Protocol

from app.domain.subscription import Subscription, SubscriptionFilter, AggregationWindow
from app.utils.month_year import month_start, format_month_year

logger = logging.getLogger(__name__)


class OverlapSelector(Protocol):
    def fetch_overlapping(
        self, flt: SubscriptionFilter, window: AggregationWindow,
    ) -> list[Subscription]:
        ...


def months_inclusive(start: date, end: date) -> int:
    """Calendar months from start to end, both ends included. Requires start <= end."""
    return (end.year - start.year) * 12 + (end.month - start.month) + 1


def active_window(
    sub: Subscription, period_start: date, period_end: date,
) -> tuple[date, date] | None:
    """Intersection of the subscription lifetime with the window, None if empty."""
    active_start = max(month_start(sub.start_date), period_start)
    active_end = min(month_start(sub.end_date or period_end), period_end)
    if active_end < active_start:
        return None
    return active_start, active_end


def subscription_cost(sub: Subscription, period_start: date, period_end: date) -> int:
    period_start = month_start(period_start)
    period_end = month_start(period_end)

    active = active_window(sub, period_start, period_end)
    if active is None:
        return 0
    return months_inclusive(*active) * sub.price


def aggregate_total(
    candidates: Iterable[Subscription], period_start: date, period_end: date,
) -> int:
    """
    Total cost of the candidates over [period_start, period_end].

    A window with period_end < period_start has no overlap with anything
    and aggregates to 0.
    """
    total = 0
    for sub in candidates:
        total += subscription_cost(sub, period_start, period_end)
    return total


class SubscriptionTotalService:
    """Fetch candidates from the selector and reduce them to a single total."""

    def __init__(self, selector: OverlapSelector):
        self.selector = selector

    def total(
        self,
        period_start: date,
        period_end: date,
        user_id: uuid.UUID | None = None,
        service_name: str | None = None,
    ) -> int:
        window = AggregationWindow(
            period_start=month_start(period_start),
            period_end=month_start(period_end),
        )
        flt = SubscriptionFilter(user_id=user_id, service_name=service_name)

        candidates = self.selector.fetch_overlapping(flt, window)
        total = aggregate_total(candidates, window.period_start, window.period_end)

        logger.info(
            "Aggregation calculated: total=%d period=%s..%s user_id=%s service=%s candidates=%d",
            total,
            format_month_year(window.period_start),
            format_month_year(window.period_end),
            user_id,
            service_name,
            len(candidates),
        )
        return total
