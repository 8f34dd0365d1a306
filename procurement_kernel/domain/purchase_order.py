"""
Purchase-order domain types (``procurement_kernel.domain.purchase_order``).

Responsibility
--------------
The nouns of the purchase-order lifecycle: the order itself, its cost
allocations across payer companies, and its approval steps.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.  May import only
from ``domain/currency``.

Invariants (validated by the lifecycle engine, not on construction)
--------------------------------------------------------------------
* ``step`` belongs to the fixed set of steps allowed for ``status``.
* ``subtype`` belongs to the fixed set of subtypes allowed for ``po_type``.
* Sum of allocation amounts equals ``total_value`` within the divergence
  tolerance (detected by the installment reconciler, never corrected).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

from procurement_kernel.domain.currency import (
    DOMESTIC_CURRENCY,
    PaymentScope,
    payment_scope_for_currency,
)


class POStatus(str, Enum):
    """Purchase-order status (the coarse lifecycle state)."""

    DRAFT = "draft"
    AWAITING_APPROVAL = "awaiting_approval"
    APPROVED = "approved"
    REJECTED = "rejected"
    FINALIZED = "finalized"


class POStep(str, Enum):
    """Purchase-order step (the fine-grained position within a status)."""

    DRAFT = "draft"
    AWAITING_APPROVAL = "awaiting_approval"
    AWAITING_CONTRACT = "awaiting_contract"
    PROCESSING_PAYMENTS = "processing_payments"
    REJECTED = "rejected"
    CLOSED = "closed"


class POType(str, Enum):
    """Purchase-order type."""

    PRODUCTS_SERVICES = "products_services"
    REIMBURSEMENT = "reimbursement"


class POSubtype(str, Enum):
    """Purchase-order subtype; the legal set depends on ``POType``."""

    PRODUCT = "product"
    SERVICE = "service"
    STANDARD = "standard"


class PaymentTerms(str, Enum):
    """How the order's total value is paid out."""

    SINGLE = "single"
    INSTALLMENTS = "installments"
    RECURRING = "recurring"


class ApprovalStepStatus(str, Enum):
    """Decision state of a single approval step."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class POAllocation:
    """A share of the order's value charged to one payer / cost center / GL account."""

    payer_company_id: str
    cost_center_id: str
    gl_account_id: str
    allocation_amount: Decimal
    allocation_percentage: Decimal = Decimal("0")
    id: str | None = None
    purchase_order_id: str | None = None
    available_balance_snapshot: Decimal | None = None
    matrix_id: str | None = None


@dataclass(frozen=True)
class POApprovalStep:
    """One approver's position in the order's approval chain.

    ``order`` is unique per purchase order and defines both display order
    and decision order.
    """

    order: int
    approver_user_id: str
    status: ApprovalStepStatus = ApprovalStepStatus.PENDING
    decided_at: datetime | None = None
    comments: str | None = None
    id: str | None = None
    purchase_order_id: str | None = None
    approver_name: str | None = None
    approver_email: str | None = None
    company_id: str | None = None

    def __post_init__(self):
        # Raw strings from callers become members; ValueError for unknown values
        object.__setattr__(self, "status", ApprovalStepStatus(self.status))

    @property
    def is_decided(self) -> bool:
        """True once the approver has approved or rejected."""
        return self.status is not ApprovalStepStatus.PENDING


@dataclass(frozen=True)
class PurchaseOrder:
    """A purchase order with its allocations and approval chain.

    Construction does not validate the status/step or type/subtype pairs;
    callers run ``procurement_engines.lifecycle.validate_purchase_order``
    before persisting.
    """

    id: str
    status: POStatus
    step: POStep
    po_type: POType
    subtype: POSubtype
    total_value: Decimal
    currency_code: str = DOMESTIC_CURRENCY
    payment_terms: PaymentTerms = PaymentTerms.SINGLE
    installment_count: int | None = None
    payment_window_days: int | None = None
    is_outside_payment_window: bool = False
    outside_payment_justification: str | None = None
    external_id: str | None = None
    supplier_id: str | None = None
    supplier_requires_contract: bool = False
    supplier_contract_document_id: str | None = None
    allocations: tuple[POAllocation, ...] = field(default_factory=tuple)
    approval_steps: tuple[POApprovalStep, ...] = field(default_factory=tuple)
    created_at: datetime | None = None
    notes: str | None = None

    @property
    def payment_scope(self) -> PaymentScope:
        """Scope derived from the order currency."""
        return payment_scope_for_currency(self.currency_code)

    @property
    def is_domestic(self) -> bool:
        """True when the order is paid in the domestic currency."""
        return self.payment_scope is PaymentScope.NATIONAL

    @property
    def effective_installment_count(self) -> int:
        """Installments to schedule; single-payment orders count as one."""
        if self.payment_terms is PaymentTerms.SINGLE or not self.installment_count:
            return 1
        return self.installment_count

    @property
    def form_key(self) -> str:
        """Key of the entry form that edits this order, e.g. ``products_services:product``."""
        return f"{self.po_type.value}:{self.subtype.value}"
