"""
procurement_services -- imperative shell over the pure engines.

Services own clock injection and configuration; engines stay pure.
"""

from procurement_services.purchase_order_service import (
    ApprovalOutcome,
    PurchaseOrderService,
)

__all__ = [
    "ApprovalOutcome",
    "PurchaseOrderService",
]
