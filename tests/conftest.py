"""
Pytest fixtures for the procurement test suite.

Provides:
- Structured logging configured for the session, with per-test capture
- A deterministic clock pinned to a known date
- A sample purchase order with two payers and a two-step approval chain
"""

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from io import StringIO

import pytest

from procurement_kernel.domain.clock import DeterministicClock
from procurement_kernel.domain.purchase_order import (
    ApprovalStepStatus,
    POAllocation,
    POApprovalStep,
    POStatus,
    POStep,
    POSubtype,
    POType,
    PaymentTerms,
    PurchaseOrder,
)
from procurement_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture procurement_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            reconcile_installments(...)
            logs = captured_logs()
            assert any(r["message"] == "installments_reconciled" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("procurement_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    """Clock pinned to 2025-01-01 12:00 UTC."""
    return DeterministicClock(datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def sample_po() -> PurchaseOrder:
    """Domestic products order split 600/400 across two payers, paid in 3 installments."""
    return PurchaseOrder(
        id="po-001",
        status=POStatus.AWAITING_APPROVAL,
        step=POStep.AWAITING_APPROVAL,
        po_type=POType.PRODUCTS_SERVICES,
        subtype=POSubtype.PRODUCT,
        total_value=Decimal("1000.00"),
        payment_terms=PaymentTerms.INSTALLMENTS,
        installment_count=3,
        supplier_id="sup-001",
        allocations=(
            POAllocation(
                payer_company_id="company-a",
                cost_center_id="cc-ops",
                gl_account_id="gl-6100",
                allocation_amount=Decimal("600.00"),
                allocation_percentage=Decimal("60"),
            ),
            POAllocation(
                payer_company_id="company-b",
                cost_center_id="cc-it",
                gl_account_id="gl-6200",
                allocation_amount=Decimal("400.00"),
                allocation_percentage=Decimal("40"),
            ),
        ),
        approval_steps=(
            POApprovalStep(order=2, approver_user_id="user-cfo"),
            POApprovalStep(
                order=1,
                approver_user_id="user-manager",
                status=ApprovalStepStatus.APPROVED,
            ),
        ),
    )
