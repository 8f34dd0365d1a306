"""
Module: procurement_engines.payment_window
Responsibility:
    Resolve the next legal payment date for a purchase order given a fixed
    set of monthly payment windows and a minimum advance notice.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import procurement_kernel.

Invariants enforced:
    - Purity: the open date is always a parameter; no clock access.
    - Candidates are evaluated in chronological order, so increasing
      ``min_days_advance`` never yields an earlier date.
    - Day differences are whole days, floored; a candidate exactly
      ``min_days_advance`` days ahead qualifies (inclusive boundary).
    - Always terminates: when no candidate satisfies the advance, the
      next-month fallback is returned regardless of its margin.

Failure modes:
    - None over the declared input domain.  A ``selected_day`` that is not
      a window of the scope starts the search from the first window; an
      outside-window day the open month lacks (Feb 30) is clamped to the
      month's last day.

Usage:
    from datetime import date
    from procurement_engines.payment_window import get_next_valid_payment_date

    resolution = get_next_valid_payment_date(
        open_date=date(2025, 1, 1),
        selected_day=5,
        min_days_advance=10,
    )
    # resolution.day == 15, resolution.date == date(2025, 1, 15)
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from procurement_engines.tracer import traced_engine
from procurement_kernel.logging_config import get_logger

logger = get_logger("engines.payment_window")

LAST_BUSINESS_DAY = "last_business_day"

# A fixed calendar day of month, or LAST_BUSINESS_DAY
PaymentWindowDay = int | str

DOMESTIC_WINDOWS: tuple[PaymentWindowDay, ...] = (5, 15, 25)
INTERNATIONAL_WINDOWS: tuple[PaymentWindowDay, ...] = (10, 20, LAST_BUSINESS_DAY)

_ONE_DAY = timedelta(days=1)
_SATURDAY = 5


@dataclass(frozen=True)
class PaymentWindowResolution:
    """
    The payment window a request resolved to.

    Contract:
        Frozen dataclass; ``day`` is the window value (not necessarily the
        calendar day when it is LAST_BUSINESS_DAY), ``date`` its calendar date.
    Guarantees:
        - ``days_until`` is the floored whole-day distance from the open date.
        - ``is_next_month`` is True when ``date`` fell past the open month.
    """

    day: PaymentWindowDay
    date: date
    days_until: int
    is_next_month: bool


def windows_for_scope(is_domestic: bool) -> tuple[PaymentWindowDay, ...]:
    """Ordered payment windows for a domestic or international payment."""
    return DOMESTIC_WINDOWS if is_domestic else INTERNATIONAL_WINDOWS


def last_business_day_of_month(year: int, month: int) -> date:
    """Final Monday-Friday of the month.  Weekends only; no holiday calendar."""
    day = date(year, month, calendar.monthrange(year, month)[1])
    while day.weekday() >= _SATURDAY:
        day -= _ONE_DAY
    return day


def resolve_window_date(day: PaymentWindowDay, year: int, month: int) -> date:
    """Calendar date of a window within the given month.

    A fixed day past the end of the month is clamped to its last day
    (day 30 in February 2025 resolves to 2025-02-28).
    """
    if day == LAST_BUSINESS_DAY:
        return last_business_day_of_month(year, month)
    return date(year, month, min(int(day), calendar.monthrange(year, month)[1]))


def diff_in_days(target: date, open_date: date | datetime) -> int:
    """Whole days from ``open_date`` to ``target``, floored.

    A ``datetime`` open date is compared against ``target``'s midnight in the
    same timezone, so a time-of-day on the open date costs a day.
    """
    if isinstance(open_date, datetime):
        target_start = datetime.combine(target, time.min, tzinfo=open_date.tzinfo)
        return (target_start - open_date) // _ONE_DAY
    return (target - open_date).days


def _next_month(year: int, month: int) -> tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


def _resolution(
    day: PaymentWindowDay,
    resolved: date,
    open_date: date | datetime,
) -> PaymentWindowResolution:
    return PaymentWindowResolution(
        day=day,
        date=resolved,
        days_until=diff_in_days(resolved, open_date),
        is_next_month=(resolved.year, resolved.month) != (open_date.year, open_date.month),
    )


@traced_engine(
    "payment_window",
    "1.0",
    fingerprint_fields=(
        "open_date",
        "selected_day",
        "min_days_advance",
        "is_outside_payment_window",
        "is_domestic",
    ),
)
def get_next_valid_payment_date(
    open_date: date | datetime,
    selected_day: PaymentWindowDay,
    min_days_advance: int,
    is_outside_payment_window: bool = False,
    is_domestic: bool = True,
) -> PaymentWindowResolution:
    """
    Next payment date honouring the windows and the minimum advance.

    Candidates are the windows from ``selected_day`` to the end of the list
    in the open month, followed by the first window of the following month.
    The first candidate at least ``min_days_advance`` days ahead wins; when
    none qualifies the next-month candidate is returned.

    Args:
        open_date: Reference date (e.g. when the order was opened/approved).
        selected_day: Requested window (day of month or LAST_BUSINESS_DAY).
        min_days_advance: Minimum notice in whole days (non-negative).
        is_outside_payment_window: When True, no snapping is applied and the
            requested day in the open month is returned as-is.
        is_domestic: Selects the domestic or international window set.

    Returns:
        PaymentWindowResolution for the chosen window.
    """
    year, month = open_date.year, open_date.month

    if is_outside_payment_window:
        return _resolution(
            selected_day,
            resolve_window_date(selected_day, year, month),
            open_date,
        )

    windows = windows_for_scope(is_domestic)
    if selected_day in windows:
        same_month = windows[windows.index(selected_day):]
    else:
        same_month = windows

    candidates: list[tuple[PaymentWindowDay, date]] = [
        (day, resolve_window_date(day, year, month)) for day in same_month
    ]
    next_year, next_month = _next_month(year, month)
    candidates.append(
        (windows[0], resolve_window_date(windows[0], next_year, next_month))
    )

    for day, candidate in candidates:
        if diff_in_days(candidate, open_date) >= min_days_advance:
            return _resolution(day, candidate, open_date)

    day, candidate = candidates[-1]
    logger.info(
        "payment_window_fallback_used",
        extra={
            "open_date": open_date.isoformat(),
            "selected_day": selected_day,
            "min_days_advance": min_days_advance,
            "fallback_date": candidate.isoformat(),
        },
    )
    return _resolution(day, candidate, open_date)
