"""
Installment domain types (``procurement_kernel.domain.installment``).

Installments are ephemeral: the reconciler recomputes them from a purchase
order's allocations, its installment count and a due-date rule.  Nothing in
this layer persists them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


class InstallmentStatus(str, Enum):
    """Payment state of a single installment."""

    PROVISIONED = "provisioned"
    SCHEDULED = "scheduled"
    PAID = "paid"


@dataclass(frozen=True)
class InstallmentAllocation:
    """The slice of one payer's allocation due on one installment date."""

    installment_number: int
    due_date: date
    payer_company_id: str
    amount: Decimal
    status: InstallmentStatus = InstallmentStatus.PROVISIONED
