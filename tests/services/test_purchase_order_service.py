"""
Tests for PurchaseOrderService.

Tests cover:
- validate_transition: legal pairs applied, illegal pairs rejected
- resolve_payment_date: clock default, per-order advance, scope from config
- reconcile: clock default, configured tolerance and status
- classify_contracts / current_contract / expiring_contracts: clock "now"
- approval_outcome: status and step implied by the approval chain
"""

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from procurement_config.schema import PurchasingConfig
from procurement_kernel.domain.installment import InstallmentStatus
from procurement_kernel.domain.purchase_order import (
    ApprovalStepStatus,
    POApprovalStep,
    POStatus,
    POStep,
)
from procurement_kernel.domain.supplier import SupplierDocument
from procurement_kernel.exceptions import InvalidStateError
from procurement_services import ApprovalOutcome, PurchaseOrderService


def make_document(
    doc_id: str,
    valid_until: datetime | None = None,
    is_active: bool = True,
) -> SupplierDocument:
    return SupplierDocument(
        id=doc_id,
        supplier_id="sup-001",
        file_name=f"{doc_id}.pdf",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        valid_until=valid_until,
        is_active=is_active,
    )


def with_steps(po, *statuses: ApprovalStepStatus):
    steps = tuple(
        POApprovalStep(order=i, approver_user_id=f"user-{i}", status=status)
        for i, status in enumerate(statuses, start=1)
    )
    return replace(po, approval_steps=steps)


@pytest.fixture
def service(deterministic_clock) -> PurchaseOrderService:
    return PurchaseOrderService(clock=deterministic_clock)


# =========================================================================
# 1. Transitions
# =========================================================================


class TestValidateTransition:

    def test_legal_transition_returns_updated_copy(self, service, sample_po):
        moved = service.validate_transition(sample_po, "approved", "awaiting_contract")

        assert moved.status is POStatus.APPROVED
        assert moved.step is POStep.AWAITING_CONTRACT
        assert sample_po.status is POStatus.AWAITING_APPROVAL

    def test_illegal_transition_raises(self, service, sample_po):
        with pytest.raises(InvalidStateError):
            service.validate_transition(sample_po, POStatus.APPROVED, POStep.CLOSED)

    def test_default_clock_and_config(self):
        service = PurchaseOrderService()
        assert service.config == PurchasingConfig()


# =========================================================================
# 2. Payment dates
# =========================================================================


class TestResolvePaymentDate:

    def test_defaults_to_clock_today_and_config_advance(self, service, sample_po):
        result = service.resolve_payment_date(sample_po, 5)
        assert result.date == date(2025, 1, 15)

    def test_order_advance_overrides_config(self, service, sample_po):
        po = replace(sample_po, payment_window_days=20)
        assert service.resolve_payment_date(po, 5).date == date(2025, 1, 25)

    def test_zero_day_advance_is_honoured(self, service, sample_po):
        po = replace(sample_po, payment_window_days=0)
        result = service.resolve_payment_date(po, 5, open_date=date(2025, 1, 1))

        assert result.date == date(2025, 1, 5)
        assert result.days_until == 4

    def test_unset_advance_uses_config(self, service, sample_po):
        assert sample_po.payment_window_days is None
        result = service.resolve_payment_date(sample_po, 5, open_date=date(2025, 1, 1))
        assert result.date == date(2025, 1, 15)

    def test_explicit_open_date(self, service, sample_po):
        result = service.resolve_payment_date(sample_po, 25, open_date=date(2025, 1, 20))
        assert result.date == date(2025, 2, 5)

    def test_foreign_currency_uses_international_windows(self, service, sample_po):
        po = replace(sample_po, currency_code="USD")
        result = service.resolve_payment_date(po, 10)
        assert result.day == 20
        assert result.date == date(2025, 1, 20)

    def test_domestic_currency_from_config(self, deterministic_clock, sample_po):
        service = PurchaseOrderService(
            clock=deterministic_clock,
            config=PurchasingConfig(domestic_currency="USD"),
        )
        assert service.is_domestic(sample_po) is False
        assert service.is_domestic(replace(sample_po, currency_code="USD")) is True

    def test_outside_window_flag_from_order(self, service, sample_po):
        po = replace(sample_po, is_outside_payment_window=True)
        assert service.resolve_payment_date(po, 3).date == date(2025, 1, 3)


# =========================================================================
# 3. Installments
# =========================================================================


class TestReconcile:

    def test_defaults_to_clock_today(self, service, sample_po):
        result = service.reconcile(sample_po)

        assert result.grand_total == Decimal("999.99")
        assert result.has_divergence is False
        due = [i.due_date for i in result.installments_by_payer["company-a"]]
        assert due == [date(2025, 2, 1), date(2025, 3, 1), date(2025, 4, 1)]

    def test_configured_tolerance(self, deterministic_clock, sample_po, captured_logs):
        service = PurchaseOrderService(
            clock=deterministic_clock,
            config=PurchasingConfig(divergence_tolerance=Decimal("0.001")),
        )
        result = service.reconcile(sample_po, reference_date=date(2025, 3, 1))

        assert result.has_divergence is True
        record = next(
            r for r in captured_logs()
            if r["message"] == "purchase_order_allocation_divergence"
        )
        assert record["purchase_order_id"] == "po-001"

    def test_configured_installment_status(self, deterministic_clock, sample_po):
        service = PurchaseOrderService(
            clock=deterministic_clock,
            config=PurchasingConfig(default_installment_status="scheduled"),
        )
        result = service.reconcile(sample_po)
        assert {i.status for i in result.flatten()} == {InstallmentStatus.SCHEDULED}


# =========================================================================
# 4. Contracts
# =========================================================================


class TestContracts:

    def test_classify_uses_clock_now(self, service, deterministic_clock):
        doc = make_document("c1", valid_until=datetime(2025, 1, 10, tzinfo=timezone.utc))

        assert service.classify_contracts([doc])[0].is_within_validity is True
        deterministic_clock.advance_days(30)
        assert service.classify_contracts([doc])[0].is_expired is True

    def test_current_contract(self, service):
        docs = [
            make_document("newest", valid_until=datetime(2024, 12, 1, tzinfo=timezone.utc)),
            make_document("older"),
        ]
        assert service.current_contract(docs).document.id == "older"

    def test_expiring_contracts(self, service, deterministic_clock):
        now = deterministic_clock.now()
        soon = make_document("soon", valid_until=now + timedelta(days=10))
        later = make_document("later", valid_until=now + timedelta(days=90))
        inactive = make_document("inactive", valid_until=now + timedelta(days=5), is_active=False)
        open_ended = make_document("open")

        assert service.expiring_contracts([soon, later, inactive, open_ended]) == (soon,)


# =========================================================================
# 5. Approval outcome
# =========================================================================


class TestApprovalOutcome:

    def test_pending_chain(self, service, sample_po):
        outcome = service.approval_outcome(sample_po)

        assert outcome.status is POStatus.AWAITING_APPROVAL
        assert outcome.step is POStep.AWAITING_APPROVAL
        assert outcome.next_pending.order == 2

    def test_approved_goes_to_payments(self, service, sample_po):
        po = with_steps(sample_po, ApprovalStepStatus.APPROVED, ApprovalStepStatus.APPROVED)

        assert service.approval_outcome(po) == ApprovalOutcome(
            status=POStatus.APPROVED,
            step=POStep.PROCESSING_PAYMENTS,
            next_pending=None,
        )

    def test_approved_waits_for_required_contract(self, service, sample_po):
        po = with_steps(sample_po, ApprovalStepStatus.APPROVED)
        po = replace(po, supplier_requires_contract=True)

        assert service.approval_outcome(po).step is POStep.AWAITING_CONTRACT

    def test_linked_contract_goes_to_payments(self, service, sample_po):
        po = with_steps(sample_po, ApprovalStepStatus.APPROVED)
        po = replace(po, supplier_requires_contract=True, supplier_contract_document_id="c1")

        assert service.approval_outcome(po).step is POStep.PROCESSING_PAYMENTS

    def test_rejection(self, service, sample_po):
        po = with_steps(sample_po, ApprovalStepStatus.APPROVED, ApprovalStepStatus.REJECTED)
        outcome = service.approval_outcome(po)

        assert outcome.status is POStatus.REJECTED
        assert outcome.step is POStep.REJECTED
        assert outcome.next_pending is None
