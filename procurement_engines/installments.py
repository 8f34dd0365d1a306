"""
Module: procurement_engines.installments
Responsibility:
    Split a purchase order's per-payer allocations into evenly sized monthly
    installments and compute the totals needed to detect drift between the
    scheduled amounts and the order's declared total value.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import procurement_kernel.

Invariants enforced:
    - Purity: the reference date is a parameter; no clock access.
    - Decimal-only arithmetic; each installment amount is rounded to the
      currency's minor unit (ROUND_HALF_UP).
    - No remainder redistribution: a payer's installments may sum to a few
      minor units less or more than its allocation.  The drift is surfaced
      through ``has_divergence``, never corrected.
    - Divergence is strict: ``|grand_total - total_value| > tolerance``.

Failure modes:
    - None.  An installment count below 1 is treated as a single payment.

Usage:
    from datetime import date
    from decimal import Decimal
    from procurement_engines.installments import reconcile_installments

    result = reconcile_installments(
        allocations=po.allocations,
        total_value=po.total_value,
        installment_count=3,
        reference_date=date(2025, 1, 10),
    )
    result.totals_by_payer   # {"company-a": Decimal("600.00"), ...}
    result.has_divergence    # False
"""

from __future__ import annotations

import calendar
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from procurement_engines.tracer import traced_engine
from procurement_kernel.domain.currency import DOMESTIC_CURRENCY, CurrencyRegistry
from procurement_kernel.domain.installment import (
    InstallmentAllocation,
    InstallmentStatus,
)
from procurement_kernel.domain.purchase_order import POAllocation
from procurement_kernel.logging_config import get_logger

logger = get_logger("engines.installments")

DEFAULT_DIVERGENCE_TOLERANCE = Decimal("0.01")

# (reference_date, installment_number) -> due date
DueDateRule = Callable[[date, int], date]


def add_months(start: date, months: int) -> date:
    """Same day ``months`` later, clamped to the last day of the target month."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def monthly_due_date(reference_date: date, installment_number: int) -> date:
    """Installment ``n`` falls due ``n`` whole months after the reference date."""
    return add_months(reference_date, installment_number)


def allocation_total(allocations: Iterable[POAllocation]) -> Decimal:
    """Sum of allocation amounts."""
    return sum((a.allocation_amount for a in allocations), Decimal("0"))


@dataclass(frozen=True)
class InstallmentReconciliation:
    """
    Installment schedule for a purchase order plus its reconciliation totals.

    Contract:
        Frozen dataclass; dict fields preserve the first-seen payer order.
    Guarantees:
        - ``grand_total`` equals the sum of ``totals_by_payer``.
        - ``divergence == grand_total - total_value``.
    Non-goals:
        - Does not correct divergence; rendering the warning is the caller's job.
    """

    installment_count: int
    installments_by_payer: dict[str, tuple[InstallmentAllocation, ...]]
    allocated_by_payer: dict[str, Decimal]
    amount_per_installment_by_payer: dict[str, Decimal]
    totals_by_payer: dict[str, Decimal]
    grand_total: Decimal
    total_value: Decimal
    divergence: Decimal
    has_divergence: bool

    @property
    def payer_count(self) -> int:
        return len(self.installments_by_payer)

    def flatten(self) -> tuple[InstallmentAllocation, ...]:
        """All installments ordered by installment number, then payer order."""
        items = [
            installment
            for installments in self.installments_by_payer.values()
            for installment in installments
        ]
        items.sort(key=lambda i: i.installment_number)
        return tuple(items)

    def installments_due(self, installment_number: int) -> tuple[InstallmentAllocation, ...]:
        """Every payer's slice of one installment."""
        return tuple(
            i for i in self.flatten() if i.installment_number == installment_number
        )


@traced_engine(
    "installments",
    "1.0",
    fingerprint_fields=("allocations", "total_value", "installment_count", "reference_date"),
)
def reconcile_installments(
    allocations: Sequence[POAllocation],
    total_value: Decimal,
    installment_count: int | None,
    *,
    reference_date: date,
    currency_code: str = DOMESTIC_CURRENCY,
    tolerance: Decimal = DEFAULT_DIVERGENCE_TOLERANCE,
    due_date_rule: DueDateRule | None = None,
    status: InstallmentStatus = InstallmentStatus.PROVISIONED,
) -> InstallmentReconciliation:
    """
    Distribute allocations into per-payer installments and reconcile totals.

    Args:
        allocations: The purchase order's allocations.
        total_value: The order's declared total value.
        installment_count: Number of installments (None or < 1 => 1).
        reference_date: Date installments are counted from.
        currency_code: Currency whose minor unit installment amounts round to.
        tolerance: Largest absolute difference that is not a divergence.
        due_date_rule: Optional override for installment due dates.
        status: Status given to every generated installment.

    Returns:
        InstallmentReconciliation with the schedule and totals.
    """
    count = installment_count if installment_count and installment_count > 0 else 1
    rule = due_date_rule or monthly_due_date

    allocated_by_payer: dict[str, Decimal] = {}
    for allocation in allocations:
        allocated_by_payer[allocation.payer_company_id] = (
            allocated_by_payer.get(allocation.payer_company_id, Decimal("0"))
            + allocation.allocation_amount
        )

    due_dates = [rule(reference_date, number) for number in range(1, count + 1)]

    installments_by_payer: dict[str, tuple[InstallmentAllocation, ...]] = {}
    amount_per_installment_by_payer: dict[str, Decimal] = {}
    totals_by_payer: dict[str, Decimal] = {}

    for payer_id, allocated in allocated_by_payer.items():
        per_installment = CurrencyRegistry.quantize(allocated / count, currency_code)
        amount_per_installment_by_payer[payer_id] = per_installment
        installments_by_payer[payer_id] = tuple(
            InstallmentAllocation(
                installment_number=number,
                due_date=due_date,
                payer_company_id=payer_id,
                amount=per_installment,
                status=status,
            )
            for number, due_date in enumerate(due_dates, start=1)
        )
        totals_by_payer[payer_id] = per_installment * count

    grand_total = sum(totals_by_payer.values(), Decimal("0"))
    divergence = grand_total - total_value
    has_divergence = abs(divergence) > tolerance

    if has_divergence:
        logger.warning(
            "installment_divergence_detected",
            extra={
                "grand_total": str(grand_total),
                "total_value": str(total_value),
                "divergence": str(divergence),
                "tolerance": str(tolerance),
                "installment_count": count,
            },
        )
    else:
        logger.debug(
            "installments_reconciled",
            extra={
                "payer_count": len(allocated_by_payer),
                "installment_count": count,
                "grand_total": str(grand_total),
            },
        )

    return InstallmentReconciliation(
        installment_count=count,
        installments_by_payer=installments_by_payer,
        allocated_by_payer=allocated_by_payer,
        amount_per_installment_by_payer=amount_per_installment_by_payer,
        totals_by_payer=totals_by_payer,
        grand_total=grand_total,
        total_value=total_value,
        divergence=divergence,
        has_divergence=has_divergence,
    )
