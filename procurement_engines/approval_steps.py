"""
procurement_engines.approval_steps -- Pure predicates over a PO's approval chain.

Responsibility:
    Order approval steps, detect rejection / completion, find the next step
    awaiting a decision, and derive the purchase-order status the chain
    implies.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Steps are evaluated in ascending ``order``.
    - A single rejection dominates: once any step is rejected the chain's
      outcome is REJECTED regardless of other approvals.
    - An empty chain is never "all approved".

Failure modes:
    - None.  Moving the order itself to the derived status is the caller's
      job (through the lifecycle state machine).
"""

from __future__ import annotations

from collections.abc import Iterable

from procurement_kernel.domain.purchase_order import (
    ApprovalStepStatus,
    POApprovalStep,
    POStatus,
)


def ordered_steps(steps: Iterable[POApprovalStep]) -> tuple[POApprovalStep, ...]:
    """Steps sorted by their ``order`` (display and decision order)."""
    return tuple(sorted(steps, key=lambda s: s.order))


def has_rejected_step(steps: Iterable[POApprovalStep]) -> bool:
    """True if any approver rejected."""
    return any(s.status is ApprovalStepStatus.REJECTED for s in steps)


def all_steps_approved(steps: Iterable[POApprovalStep]) -> bool:
    """True if there is at least one step and every step is approved."""
    materialized = tuple(steps)
    if not materialized:
        return False
    return all(s.status is ApprovalStepStatus.APPROVED for s in materialized)


def next_pending_step(steps: Iterable[POApprovalStep]) -> POApprovalStep | None:
    """Lowest-ordered step still awaiting a decision, or None.

    Returns None once the chain is rejected: nothing is left to decide.
    """
    ordered = ordered_steps(steps)
    if has_rejected_step(ordered):
        return None
    for step in ordered:
        if step.status is ApprovalStepStatus.PENDING:
            return step
    return None


def derive_status_from_steps(steps: Iterable[POApprovalStep]) -> POStatus:
    """Purchase-order status implied by the approval chain.

    REJECTED if any step is rejected, APPROVED if all steps are approved,
    otherwise AWAITING_APPROVAL.
    """
    materialized = tuple(steps)
    if has_rejected_step(materialized):
        return POStatus.REJECTED
    if all_steps_approved(materialized):
        return POStatus.APPROVED
    return POStatus.AWAITING_APPROVAL
