"""
Supplier domain types (``procurement_kernel.domain.supplier``).

Responsibility
--------------
Suppliers, their contract documents, and the payment methods / payment
details a purchase order can be settled with.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* ``PaymentDetails`` is a tagged variant keyed by ``PaymentMethodCode``;
  ``parse_payment_details`` dispatches exhaustively and rejects unknown codes
  with ``UnknownPaymentMethodError``.
* A payment method code belongs to exactly one ``PaymentScope``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from procurement_kernel.domain.currency import PaymentScope
from procurement_kernel.exceptions import UnknownPaymentMethodError


class SupplierScope(str, Enum):
    """Whether the supplier is registered domestically or abroad."""

    NATIONAL = "national"
    INTERNATIONAL = "international"


@dataclass(frozen=True)
class Supplier:
    """A supplier a purchase order can be raised against."""

    id: str
    tax_id: str
    legal_name: str
    scope: SupplierScope = SupplierScope.NATIONAL
    trade_name: str | None = None
    is_approved: bool = False
    approval_valid_until: datetime | None = None
    requires_contract: bool = False


@dataclass(frozen=True)
class SupplierDocument:
    """A document uploaded for a supplier (contracts, certificates, ...).

    ``has_validity`` may be left as ``None``; the contract validity selector
    then infers it from the presence of either validity date.
    """

    id: str
    supplier_id: str
    file_name: str
    created_at: datetime
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    has_validity: bool | None = None
    category_code: str = "contract"
    is_active: bool = True
    notes: str | None = None


# =========================================================================
# Payment methods and tagged payment details
# =========================================================================


class PaymentMethodCode(str, Enum):
    """Supported payment method codes."""

    # National
    BANK_TRANSFER = "bank_transfer"
    BOLETO = "boleto"
    # International
    TRANSFER_USA = "transfer_usa"
    TRANSFER_NON_USA_SUPPLIER = "transfer_non_usa_supplier"
    TRANSFER_ACCOUNT_AND_ORDER = "transfer_account_and_order"


_SCOPE_BY_METHOD: dict[PaymentMethodCode, PaymentScope] = {
    PaymentMethodCode.BANK_TRANSFER: PaymentScope.NATIONAL,
    PaymentMethodCode.BOLETO: PaymentScope.NATIONAL,
    PaymentMethodCode.TRANSFER_USA: PaymentScope.INTERNATIONAL,
    PaymentMethodCode.TRANSFER_NON_USA_SUPPLIER: PaymentScope.INTERNATIONAL,
    PaymentMethodCode.TRANSFER_ACCOUNT_AND_ORDER: PaymentScope.INTERNATIONAL,
}


def scope_of(code: PaymentMethodCode) -> PaymentScope:
    """Payment scope a method code belongs to."""
    return _SCOPE_BY_METHOD[code]


@dataclass(frozen=True)
class PaymentMethod:
    """A payment method offered for a scope."""

    id: str
    code: PaymentMethodCode
    is_active: bool = True

    @property
    def scope(self) -> PaymentScope:
        return scope_of(self.code)


@dataclass(frozen=True)
class BankTransferDetails:
    """Domestic bank transfer."""

    bank: str
    agency: str
    account_number: str
    method_code: PaymentMethodCode = PaymentMethodCode.BANK_TRANSFER


@dataclass(frozen=True)
class BoletoDetails:
    """Domestic boleto (bank slip) payment."""

    barcode: str
    method_code: PaymentMethodCode = PaymentMethodCode.BOLETO


@dataclass(frozen=True)
class InternationalTransferDetails:
    """Cross-border wire, optionally routed through an intermediary bank."""

    method_code: PaymentMethodCode
    final_beneficiary_name: str
    final_account_number: str
    intermediary_beneficiary_name: str | None = None
    intermediary_account_number: str | None = None
    intermediary_routing_type: str | None = None  # "ABA" or "SWIFT"
    intermediary_routing_code: str | None = None
    notes: str | None = None


PaymentDetails = BankTransferDetails | BoletoDetails | InternationalTransferDetails


def parse_payment_details(data: dict[str, Any]) -> PaymentDetails:
    """Build the payment-details variant selected by ``data["method_code"]``.

    Raises:
        UnknownPaymentMethodError: if the method code is not supported.
        KeyError: if a field required by the variant is missing.
    """
    raw_code = data.get("method_code")
    try:
        code = PaymentMethodCode(raw_code)
    except ValueError:
        raise UnknownPaymentMethodError(str(raw_code)) from None

    match code:
        case PaymentMethodCode.BANK_TRANSFER:
            return BankTransferDetails(
                bank=data["bank"],
                agency=data["agency"],
                account_number=data["account_number"],
            )
        case PaymentMethodCode.BOLETO:
            return BoletoDetails(barcode=data["barcode"])
        case (
            PaymentMethodCode.TRANSFER_USA
            | PaymentMethodCode.TRANSFER_NON_USA_SUPPLIER
            | PaymentMethodCode.TRANSFER_ACCOUNT_AND_ORDER
        ):
            return InternationalTransferDetails(
                method_code=code,
                final_beneficiary_name=data["final_beneficiary_name"],
                final_account_number=data["final_account_number"],
                intermediary_beneficiary_name=data.get("intermediary_beneficiary_name"),
                intermediary_account_number=data.get("intermediary_account_number"),
                intermediary_routing_type=data.get("intermediary_routing_type"),
                intermediary_routing_code=data.get("intermediary_routing_code"),
                notes=data.get("notes"),
            )
        case _:
            raise UnknownPaymentMethodError(code.value)
