"""
procurement_engines.lifecycle -- Purchase-order status/step state machine.

Responsibility:
    Decide which (status, step) and (type, subtype) pairs are legal for a
    purchase order, enumerate them, and raise typed errors for illegal pairs
    before a caller persists a mutation.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import procurement_kernel domain types and exceptions.

Invariants enforced:
    - ``step`` is a member of ``ALLOWED_STEPS_BY_STATUS[status]``.
    - ``subtype`` is a member of ``ALLOWED_SUBTYPES_BY_TYPE[po_type]``.
    - Membership only: states are validated, edges are not.  Any legal pair
      may be entered directly (draft -> finalized in one hop passes).
      Workflow sequencing, when required, is layered by the caller.

Failure modes:
    - InvalidStateError from ``validate_status_step_or_raise``.
    - InvalidSubtypeError from ``validate_type_subtype_or_raise``.
    - The ``is_*`` predicates never raise; unknown values are "not allowed".
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from procurement_kernel.domain.purchase_order import (
    POStatus,
    POStep,
    POSubtype,
    POType,
    PurchaseOrder,
)
from procurement_kernel.exceptions import InvalidStateError, InvalidSubtypeError
from procurement_kernel.logging_config import get_logger

logger = get_logger("engines.lifecycle")


ALLOWED_STEPS_BY_STATUS: dict[POStatus, frozenset[POStep]] = {
    POStatus.DRAFT: frozenset({POStep.DRAFT}),
    POStatus.AWAITING_APPROVAL: frozenset({POStep.AWAITING_APPROVAL}),
    POStatus.APPROVED: frozenset({
        POStep.AWAITING_CONTRACT,
        POStep.PROCESSING_PAYMENTS,
    }),
    POStatus.REJECTED: frozenset({POStep.REJECTED}),
    POStatus.FINALIZED: frozenset({POStep.CLOSED}),
}

ALLOWED_SUBTYPES_BY_TYPE: dict[POType, frozenset[POSubtype]] = {
    POType.PRODUCTS_SERVICES: frozenset({POSubtype.PRODUCT, POSubtype.SERVICE}),
    POType.REIMBURSEMENT: frozenset({POSubtype.STANDARD}),
}


def _coerce(enum_cls: type[Enum], value: Enum | str) -> Any:
    """Return the enum member for ``value`` or None when it is not a member."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _raw(value: Enum | str) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def allowed_steps_for_status(status: POStatus | str) -> frozenset[POStep]:
    """Steps a purchase order may occupy while in ``status`` (empty if unknown)."""
    member = _coerce(POStatus, status)
    if member is None:
        return frozenset()
    return ALLOWED_STEPS_BY_STATUS[member]


def is_step_allowed_for_status(status: POStatus | str, step: POStep | str) -> bool:
    """True iff ``step`` is in the fixed set mapped from ``status``."""
    step_member = _coerce(POStep, step)
    if step_member is None:
        return False
    return step_member in allowed_steps_for_status(status)


def is_subtype_allowed_for_type(po_type: POType | str, subtype: POSubtype | str) -> bool:
    """True iff ``subtype`` is in the fixed set mapped from ``po_type``."""
    type_member = _coerce(POType, po_type)
    subtype_member = _coerce(POSubtype, subtype)
    if type_member is None or subtype_member is None:
        return False
    return subtype_member in ALLOWED_SUBTYPES_BY_TYPE[type_member]


def validate_status_step_or_raise(status: POStatus | str, step: POStep | str) -> None:
    """Raise InvalidStateError unless (status, step) is a legal pair.

    Callers must run this before persisting any status/step mutation.
    """
    if not is_step_allowed_for_status(status, step):
        logger.warning(
            "invalid_status_step_rejected",
            extra={"status": _raw(status), "step": _raw(step)},
        )
        raise InvalidStateError(_raw(status), _raw(step))


def validate_type_subtype_or_raise(po_type: POType | str, subtype: POSubtype | str) -> None:
    """Raise InvalidSubtypeError unless (po_type, subtype) is a legal pair."""
    if not is_subtype_allowed_for_type(po_type, subtype):
        logger.warning(
            "invalid_type_subtype_rejected",
            extra={"po_type": _raw(po_type), "subtype": _raw(subtype)},
        )
        raise InvalidSubtypeError(_raw(po_type), _raw(subtype))


def validate_purchase_order(po: PurchaseOrder) -> None:
    """Validate both the lifecycle pair and the classification pair of ``po``."""
    validate_status_step_or_raise(po.status, po.step)
    validate_type_subtype_or_raise(po.po_type, po.subtype)


def legal_status_step_pairs() -> tuple[tuple[POStatus, POStep], ...]:
    """Every legal (status, step) pair, in enum declaration order."""
    return tuple(
        (status, step)
        for status in POStatus
        for step in POStep
        if step in ALLOWED_STEPS_BY_STATUS[status]
    )
