"""
Typed Exception Hierarchy for the Procurement Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers (UI handlers, API endpoints) must react to lifecycle violations
without parsing message strings.  Every error therefore has:

  1. A TYPED exception class (catch by type, not message)
  2. A CODE attribute (machine-readable, API-safe)
  3. Structured DATA attributes (not just a message string)

Example - RIGHT way:
    try:
        validate_status_step_or_raise(status, step)
    except InvalidStateError as e:
        api_response(code=e.code, status=e.status, step=e.step)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    ProcurementKernelError (base)
    |
    +-- LifecycleError
    |   +-- InvalidStateError
    |       +-- InvalidSubtypeError
    |
    +-- ContractError
    |   +-- ContractNotSelectableError
    |
    +-- PaymentError
        +-- UnknownPaymentMethodError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Lifecycle       | INVALID_STATE               | (status, step) pair is not legal
                | INVALID_SUBTYPE             | (type, subtype) pair is not legal
----------------|-----------------------------|-----------------------------------------
Contract        | CONTRACT_NOT_SELECTABLE     | Document outside its validity window
----------------|-----------------------------|-----------------------------------------
Payment         | UNKNOWN_PAYMENT_METHOD      | Payment details carry an unknown code

Allocation divergence is NOT an exception: reconciliation surfaces it as a
flag and a warning log record, and execution continues.
"""


class ProcurementKernelError(Exception):
    """
    Base exception for all procurement kernel errors.

    All subclasses must have a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "PROCUREMENT_KERNEL_ERROR"


# Lifecycle exceptions


class LifecycleError(ProcurementKernelError):
    """Base exception for purchase-order lifecycle errors."""

    code: str = "LIFECYCLE_ERROR"


class InvalidStateError(LifecycleError):
    """The (status, step) pair is not a legal purchase-order state."""

    code: str = "INVALID_STATE"

    def __init__(self, status: str, step: str):
        self.status = status
        self.step = step
        super().__init__(
            f"Invalid state combination: status='{status}' step='{step}'"
        )


class InvalidSubtypeError(InvalidStateError):
    """The (type, subtype) pair is not a legal purchase-order classification."""

    code: str = "INVALID_SUBTYPE"

    def __init__(self, po_type: str, subtype: str):
        self.po_type = po_type
        self.subtype = subtype
        LifecycleError.__init__(
            self,
            f"Invalid subtype combination: type='{po_type}' subtype='{subtype}'",
        )


# Contract exceptions


class ContractError(ProcurementKernelError):
    """Base exception for supplier contract errors."""

    code: str = "CONTRACT_ERROR"


class ContractNotSelectableError(ContractError):
    """A contract document outside its validity window was selected."""

    code: str = "CONTRACT_NOT_SELECTABLE"

    def __init__(self, document_id: str, version: int, reason: str):
        self.document_id = document_id
        self.version = version
        self.reason = reason
        super().__init__(
            f"Contract {document_id} (version {version}) cannot be selected: {reason}"
        )


# Payment exceptions


class PaymentError(ProcurementKernelError):
    """Base exception for payment method and payment detail errors."""

    code: str = "PAYMENT_ERROR"


class UnknownPaymentMethodError(PaymentError):
    """Payment details reference a method code that is not supported."""

    code: str = "UNKNOWN_PAYMENT_METHOD"

    def __init__(self, method_code: str):
        self.method_code = method_code
        super().__init__(f"Unknown payment method code: {method_code}")
