"""
Module: procurement_engines
Responsibility:
    Package entrypoint that re-exports all public symbols from the pure
    calculation engine sub-modules.  This is the canonical import surface
    for the service layer and for UI / API callers.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import procurement_kernel (and sibling engine modules).
    MUST NOT import procurement_services or procurement_config.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Reference dates and "now" are passed in as explicit parameters.
    - Decimal-only arithmetic: monetary amounts use ``Decimal``.
    - Determinism: identical inputs always produce identical outputs.

Failure modes:
    - InvalidStateError / InvalidSubtypeError from the lifecycle validators.
    - ContractNotSelectableError from ``ensure_selectable``.
    - Payment-window resolution and installment reconciliation never raise.

Usage:
    from procurement_engines import (
        validate_status_step_or_raise,
        get_next_valid_payment_date,
        classify_contract_versions,
        reconcile_installments,
    )
"""

from procurement_kernel.logging_config import get_logger

logger = get_logger("engines")

from procurement_engines.approval_steps import (
    all_steps_approved,
    derive_status_from_steps,
    has_rejected_step,
    next_pending_step,
    ordered_steps,
)
from procurement_engines.contract_validity import (
    ContractVersion,
    classify_contract_versions,
    current_contract,
    days_until_expiry,
    ensure_selectable,
    is_expiring_soon,
)
from procurement_engines.installments import (
    InstallmentReconciliation,
    add_months,
    allocation_total,
    reconcile_installments,
)
from procurement_engines.lifecycle import (
    ALLOWED_STEPS_BY_STATUS,
    ALLOWED_SUBTYPES_BY_TYPE,
    allowed_steps_for_status,
    is_step_allowed_for_status,
    is_subtype_allowed_for_type,
    legal_status_step_pairs,
    validate_purchase_order,
    validate_status_step_or_raise,
    validate_type_subtype_or_raise,
)
from procurement_engines.payment_window import (
    DOMESTIC_WINDOWS,
    INTERNATIONAL_WINDOWS,
    LAST_BUSINESS_DAY,
    PaymentWindowResolution,
    get_next_valid_payment_date,
    last_business_day_of_month,
    windows_for_scope,
)
from procurement_engines.tax_ids import (
    TaxIdKind,
    format_cnpj,
    format_cpf,
    validate_cnpj,
    validate_cpf,
    validate_tax_id,
)

__all__ = [
    # Lifecycle
    "ALLOWED_STEPS_BY_STATUS",
    "ALLOWED_SUBTYPES_BY_TYPE",
    "allowed_steps_for_status",
    "is_step_allowed_for_status",
    "is_subtype_allowed_for_type",
    "legal_status_step_pairs",
    "validate_purchase_order",
    "validate_status_step_or_raise",
    "validate_type_subtype_or_raise",
    # Approval steps
    "all_steps_approved",
    "derive_status_from_steps",
    "has_rejected_step",
    "next_pending_step",
    "ordered_steps",
    # Payment window
    "DOMESTIC_WINDOWS",
    "INTERNATIONAL_WINDOWS",
    "LAST_BUSINESS_DAY",
    "PaymentWindowResolution",
    "get_next_valid_payment_date",
    "last_business_day_of_month",
    "windows_for_scope",
    # Contract validity
    "ContractVersion",
    "classify_contract_versions",
    "current_contract",
    "days_until_expiry",
    "ensure_selectable",
    "is_expiring_soon",
    # Installments
    "InstallmentReconciliation",
    "add_months",
    "allocation_total",
    "reconcile_installments",
    # Tax ids
    "TaxIdKind",
    "format_cnpj",
    "format_cpf",
    "validate_cnpj",
    "validate_cpf",
    "validate_tax_id",
]

logger.debug("engines_package_loaded", extra={
    "module_count": 6,
    "modules": [
        "lifecycle", "approval_steps", "payment_window",
        "contract_validity", "installments", "tax_ids",
    ],
})
