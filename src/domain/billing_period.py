"""Billing period partitioning, due dates and the duplicate-period guard

Every date here is a datetime.date: a calendar day with no time of day and no
timezone, so period boundaries never shift with the process timezone or DST.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from src.domain.client import BillingTerms

logger = logging.getLogger(__name__)

DUE_DATE_OFFSET_DAYS = 3

CADENCE_MONTHS = {
    BillingTerms.MONTHLY: 1,
    BillingTerms.QUARTERLY: 3,
    BillingTerms.SEMI_ANNUAL: 6,
    BillingTerms.ANNUAL: 12,
}
FALLBACK_CADENCE_MONTHS = 1


@dataclass(frozen=True)
class BillingCadence:
    terms: str
    months: int
    is_fallback: bool = False


@dataclass(frozen=True, order=True)
class BillingPeriod:
    """A billing period, both ends inclusive"""

    start: date
    end: date

    def overlaps(self, other: "BillingPeriod") -> bool:
        return self.start <= other.end and other.start <= self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()} to {self.end.isoformat()}"


def resolve_cadence(terms) -> BillingCadence:
    """
    Map billing terms to a period width in months

    "Other" and unrecognized terms bill monthly. The result carries
    is_fallback=True so callers can tell them apart from a real Monthly client.
    """
    try:
        billing_terms = BillingTerms(terms)
    except ValueError:
        billing_terms = None

    if billing_terms in CADENCE_MONTHS:
        return BillingCadence(terms=billing_terms.value, months=CADENCE_MONTHS[billing_terms])

    label = billing_terms.value if billing_terms else str(terms)
    logger.info(
        f"Billing terms {label!r} have no fixed cadence, "
        f"billing every {FALLBACK_CADENCE_MONTHS} month(s)"
    )
    return BillingCadence(terms=label, months=FALLBACK_CADENCE_MONTHS, is_fallback=True)


def contract_range(start_date: date, end_date: date) -> Tuple[date, date]:
    """Convert inclusive contract bounds into the half-open range [start, end)"""
    return start_date, end_date + timedelta(days=1)


def partition_billing_periods(start: date, end: date, terms) -> List[BillingPeriod]:
    """
    Split [start, end) into contiguous billing periods

    Each period ends one cadence-width after its own start, minus a day, and
    the next period starts the day after. Month arithmetic clamps to the last
    day of the month, so a Jan-31 start gives Jan 31 to Feb 27, then Feb 28 to
    Mar 27. The last period is truncated to end - 1 day. start >= end yields
    no periods.
    """
    cadence = resolve_cadence(terms)
    last_day = end - timedelta(days=1)

    periods: List[BillingPeriod] = []
    cursor = start

    while cursor < end:
        period_end = cursor + relativedelta(months=cadence.months) - timedelta(days=1)
        periods.append(BillingPeriod(start=cursor, end=min(period_end, last_day)))
        cursor = period_end + timedelta(days=1)

    return periods


def calculate_due_date(period_start: date) -> date:
    return period_start - timedelta(days=DUE_DATE_OFFSET_DAYS)


def filter_new_periods(
    candidates: Iterable[BillingPeriod],
    existing: Iterable[BillingPeriod],
    up_to_date: Optional[date] = None,
    include_future: bool = False,
) -> List[BillingPeriod]:
    """
    Drop candidate periods that are already invoiced or beyond the horizon

    A candidate counts as invoiced when any existing period overlaps it, so a
    period billed by hand is never billed again by a differently cut period.

    Args:
        candidates: Periods produced by partition_billing_periods
        existing: Periods of the client's existing invoices
        up_to_date: Horizon; periods starting after it are skipped
        include_future: Ignore the horizon

    Returns:
        Candidates in their original order, minus the excluded ones
    """
    existing = list(existing)

    new_periods = []
    for period in candidates:
        if any(period.overlaps(invoiced) for invoiced in existing):
            continue
        if not include_future and up_to_date is not None and period.start > up_to_date:
            continue
        new_periods.append(period)

    return new_periods
