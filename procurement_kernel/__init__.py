"""
Procurement Kernel

Pure domain layer for purchase-order management:
- Typed purchase-order, allocation, approval and supplier entities
- Typed exception hierarchy with machine-readable codes
- Structured JSON logging
- Injectable clock (no implicit wall-clock reads)
"""

__version__ = "0.1.0"
