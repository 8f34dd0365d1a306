"""
Pure domain layer.

This module contains the purchase-order entities with NO dependencies on:
- ORM / database
- Time/clock (except the injectable Clock abstraction itself)
- I/O

All domain objects are immutable and deterministic.
"""

from procurement_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from procurement_kernel.domain.currency import (
    DOMESTIC_CURRENCY,
    CurrencyInfo,
    CurrencyRegistry,
    PaymentScope,
    payment_scope_for_currency,
)
from procurement_kernel.domain.installment import (
    InstallmentAllocation,
    InstallmentStatus,
)
from procurement_kernel.domain.purchase_order import (
    ApprovalStepStatus,
    PaymentTerms,
    POAllocation,
    POApprovalStep,
    POStatus,
    POStep,
    POSubtype,
    POType,
    PurchaseOrder,
)
from procurement_kernel.domain.supplier import (
    BankTransferDetails,
    BoletoDetails,
    InternationalTransferDetails,
    PaymentDetails,
    PaymentMethod,
    PaymentMethodCode,
    Supplier,
    SupplierDocument,
    SupplierScope,
    parse_payment_details,
    scope_of,
)

__all__ = [
    # Clock
    "Clock",
    "DeterministicClock",
    "SystemClock",
    # Currency
    "DOMESTIC_CURRENCY",
    "CurrencyInfo",
    "CurrencyRegistry",
    "PaymentScope",
    "payment_scope_for_currency",
    # Purchase order
    "ApprovalStepStatus",
    "PaymentTerms",
    "POAllocation",
    "POApprovalStep",
    "POStatus",
    "POStep",
    "POSubtype",
    "POType",
    "PurchaseOrder",
    # Installments
    "InstallmentAllocation",
    "InstallmentStatus",
    # Suppliers and payment
    "BankTransferDetails",
    "BoletoDetails",
    "InternationalTransferDetails",
    "PaymentDetails",
    "PaymentMethod",
    "PaymentMethodCode",
    "Supplier",
    "SupplierDocument",
    "SupplierScope",
    "parse_payment_details",
    "scope_of",
]
