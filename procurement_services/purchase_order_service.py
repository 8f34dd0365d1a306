"""
PurchaseOrderService -- Service wrapper for purchase-order decisions.

Composes the pure lifecycle, approval-step, payment-window, contract
validity and installment engines with clock injection and the active
purchasing configuration.

Architecture: procurement_services -- imperative shell.
    The service receives fully built domain objects and returns new ones
    or engine results.  Loading orders and persisting the outcome is the
    caller's responsibility.

Invariants enforced:
    - Every status/step change passes the lifecycle state machine.
    - "Now" comes from the injected Clock; engines never read the wall
      clock.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import date, datetime

from procurement_config.schema import PurchasingConfig
from procurement_engines.approval_steps import (
    derive_status_from_steps,
    next_pending_step,
)
from procurement_engines.contract_validity import (
    ContractVersion,
    classify_contract_versions,
    current_contract,
    is_expiring_soon,
)
from procurement_engines.installments import (
    InstallmentReconciliation,
    reconcile_installments,
)
from procurement_engines.lifecycle import validate_status_step_or_raise
from procurement_engines.payment_window import (
    PaymentWindowDay,
    PaymentWindowResolution,
    get_next_valid_payment_date,
)
from procurement_kernel.domain.clock import Clock, SystemClock
from procurement_kernel.domain.currency import PaymentScope, payment_scope_for_currency
from procurement_kernel.domain.purchase_order import (
    POApprovalStep,
    POStatus,
    POStep,
    PurchaseOrder,
)
from procurement_kernel.domain.supplier import SupplierDocument
from procurement_kernel.exceptions import InvalidStateError
from procurement_kernel.logging_config import get_logger

logger = get_logger("services.purchase_order")


@dataclass(frozen=True)
class ApprovalOutcome:
    """Where the approval chain leaves an order.

    ``status``/``step`` always form a legal lifecycle pair.
    """

    status: POStatus
    step: POStep
    next_pending: POApprovalStep | None


class PurchaseOrderService:
    """Service that applies purchasing rules to purchase orders.

    Contract:
        - ``validate_transition()`` returns a copy of the order in the new
          state, or raises InvalidStateError.
        - ``resolve_payment_date()`` snaps a requested day to a payment window.
        - ``reconcile()`` builds the installment schedule and divergence check.
        - ``classify_contracts()`` versions and classifies supplier contracts.
        - ``approval_outcome()`` derives the state implied by approval steps.

    Non-goals:
        - Does NOT persist orders (caller decides).
        - Does NOT mutate its inputs (domain objects are frozen).
    """

    def __init__(
        self,
        clock: Clock | None = None,
        config: PurchasingConfig | None = None,
    ) -> None:
        self._clock = clock or SystemClock()
        self._config = config or PurchasingConfig.with_defaults()

    @property
    def config(self) -> PurchasingConfig:
        return self._config

    def is_domestic(self, po: PurchaseOrder) -> bool:
        """Domestic per the configured domestic currency."""
        scope = payment_scope_for_currency(po.currency_code, self._config.domestic_currency)
        return scope is PaymentScope.NATIONAL

    def validate_transition(
        self,
        po: PurchaseOrder,
        status: POStatus | str,
        step: POStep | str,
    ) -> PurchaseOrder:
        """Return ``po`` moved to (status, step).

        Raises:
            InvalidStateError: if the pair is not legal.
        """
        try:
            validate_status_step_or_raise(status, step)
        except InvalidStateError:
            logger.warning(
                "purchase_order_transition_rejected",
                extra={"purchase_order": po},
                exc_info=True,
            )
            raise
        new_status, new_step = POStatus(status), POStep(step)
        logger.info(
            "purchase_order_transition_validated",
            extra={
                "purchase_order": po,
                "to_status": new_status,
                "to_step": new_step,
            },
        )
        return replace(po, status=new_status, step=new_step)

    def resolve_payment_date(
        self,
        po: PurchaseOrder,
        selected_day: PaymentWindowDay,
        open_date: date | datetime | None = None,
    ) -> PaymentWindowResolution:
        """Next valid payment date for ``po``.

        The order's ``payment_window_days`` overrides the configured
        minimum advance whenever it is set, including zero.
        ``open_date`` defaults to today's date on the injected clock.
        """
        min_days_advance = po.payment_window_days
        if min_days_advance is None:
            min_days_advance = self._config.min_days_advance
        return get_next_valid_payment_date(
            open_date if open_date is not None else self._clock.today(),
            selected_day,
            min_days_advance,
            is_outside_payment_window=po.is_outside_payment_window,
            is_domestic=self.is_domestic(po),
        )

    def reconcile(
        self,
        po: PurchaseOrder,
        reference_date: date | None = None,
    ) -> InstallmentReconciliation:
        """Installment schedule and divergence check for ``po``."""
        result = reconcile_installments(
            po.allocations,
            po.total_value,
            po.effective_installment_count,
            reference_date=reference_date or self._clock.today(),
            currency_code=po.currency_code,
            tolerance=self._config.divergence_tolerance,
            status=self._config.installment_status,
        )
        if result.has_divergence:
            logger.warning(
                "purchase_order_allocation_divergence",
                extra={
                    "purchase_order": po,
                    "divergence": result.divergence,
                },
            )
        return result

    def classify_contracts(
        self,
        documents: Sequence[SupplierDocument],
    ) -> tuple[ContractVersion, ...]:
        """Versions and validity of a supplier's contracts as of now."""
        return classify_contract_versions(documents, self._clock.now())

    def current_contract(
        self,
        documents: Sequence[SupplierDocument],
    ) -> ContractVersion | None:
        """Latest contract that may be linked to a purchase order."""
        return current_contract(self.classify_contracts(documents))

    def expiring_contracts(
        self,
        documents: Sequence[SupplierDocument],
    ) -> tuple[SupplierDocument, ...]:
        """Active contracts ending within the configured warning window."""
        now = self._clock.now()
        return tuple(
            d for d in documents
            if d.is_active
            and d.valid_until is not None
            and is_expiring_soon(
                d.valid_until, now, self._config.contract_expiry_warning_days,
            )
        )

    def approval_outcome(self, po: PurchaseOrder) -> ApprovalOutcome:
        """State implied by ``po``'s approval steps.

        An approved order waits for a contract when its supplier requires
        one and none is linked yet; otherwise it moves to payments.
        """
        status = derive_status_from_steps(po.approval_steps)
        if status is POStatus.REJECTED:
            step = POStep.REJECTED
        elif status is POStatus.APPROVED:
            needs_contract = (
                po.supplier_requires_contract
                and po.supplier_contract_document_id is None
            )
            step = POStep.AWAITING_CONTRACT if needs_contract else POStep.PROCESSING_PAYMENTS
        else:
            step = POStep.AWAITING_APPROVAL

        validate_status_step_or_raise(status, step)
        return ApprovalOutcome(
            status=status,
            step=step,
            next_pending=next_pending_step(po.approval_steps),
        )
