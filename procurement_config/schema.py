"""
Purchasing Configuration Schema.

Defines the structure and defaults for purchase-order settings.
Actual values are loaded from YAML at runtime through
``procurement_config.get_active_config()``.
"""

from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any, Self

from procurement_kernel.domain.installment import InstallmentStatus
from procurement_kernel.logging_config import get_logger

logger = get_logger("config.schema")


@dataclass(frozen=True)
class PurchasingConfig:
    """
    Configuration schema for purchase-order scheduling and validation.

    Field defaults match the company's standing treasury policy.
    Override at instantiation with company-specific values:

        config = PurchasingConfig(
            min_days_advance=15,
            divergence_tolerance=Decimal("0.05"),
        )
    """

    # Payments in this currency use the domestic windows
    domestic_currency: str = "BRL"

    # Minimum notice, in days, between opening an order and its payment date
    min_days_advance: int = 10

    # Installment reconciliation
    divergence_tolerance: Decimal = Decimal("0.01")
    default_installment_status: str = InstallmentStatus.PROVISIONED.value

    # Contracts
    contract_expiry_warning_days: int = 30

    def __post_init__(self):
        if self.min_days_advance < 0:
            raise ValueError(
                f"min_days_advance must be non-negative, got {self.min_days_advance}"
            )
        if self.divergence_tolerance < 0:
            raise ValueError(
                f"divergence_tolerance must be non-negative, got {self.divergence_tolerance}"
            )
        # Raises ValueError for an unknown status
        InstallmentStatus(self.default_installment_status)

        logger.info(
            "purchasing_config_initialized",
            extra={
                "domestic_currency": self.domestic_currency,
                "min_days_advance": self.min_days_advance,
                "divergence_tolerance": str(self.divergence_tolerance),
                "contract_expiry_warning_days": self.contract_expiry_warning_days,
                "default_installment_status": self.default_installment_status,
            },
        )

    @property
    def installment_status(self) -> InstallmentStatus:
        return InstallmentStatus(self.default_installment_status)

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with the standing defaults."""
        logger.info("purchasing_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from dictionary (e.g., loaded from a YAML file).

        Raises:
            KeyError: if ``data`` contains a key that is not a config field.
        """
        logger.info(
            "purchasing_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise KeyError(f"Unknown purchasing config keys: {unknown}")

        values = dict(data)
        if "divergence_tolerance" in values:
            # YAML floats would carry binary error into Decimal
            values["divergence_tolerance"] = Decimal(str(values["divergence_tolerance"]))
        if "min_days_advance" in values:
            values["min_days_advance"] = int(values["min_days_advance"])
        if "contract_expiry_warning_days" in values:
            values["contract_expiry_warning_days"] = int(
                values["contract_expiry_warning_days"]
            )
        return cls(**values)
