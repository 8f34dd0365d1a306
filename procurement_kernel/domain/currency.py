"""Currency -- ISO 4217 precision registry and payment-scope derivation."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import ClassVar


class PaymentScope(str, Enum):
    """Whether a payment settles domestically or crosses a border."""

    NATIONAL = "national"
    INTERNATIONAL = "international"


DOMESTIC_CURRENCY = "BRL"


def payment_scope_for_currency(
    currency_code: str,
    domestic_currency: str = DOMESTIC_CURRENCY,
) -> PaymentScope:
    """Domestic currency => NATIONAL; any other currency => INTERNATIONAL."""
    if currency_code.upper().strip() == domestic_currency.upper().strip():
        return PaymentScope.NATIONAL
    return PaymentScope.INTERNATIONAL


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about a single ISO 4217 currency."""

    code: str
    decimal_places: int
    name: str

    @property
    def minor_unit(self) -> Decimal:
        """Smallest representable amount (one cent for 2-decimal currencies)."""
        if self.decimal_places == 0:
            return Decimal("1")
        return Decimal("0." + "0" * (self.decimal_places - 1) + "1")


class CurrencyRegistry:
    """Registry of the ISO 4217 currencies purchase orders are raised in."""

    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        "BRL": CurrencyInfo("BRL", 2, "Brazilian Real"),
        "USD": CurrencyInfo("USD", 2, "US Dollar"),
        "EUR": CurrencyInfo("EUR", 2, "Euro"),
        "GBP": CurrencyInfo("GBP", 2, "Pound Sterling"),
        "CHF": CurrencyInfo("CHF", 2, "Swiss Franc"),
        "CAD": CurrencyInfo("CAD", 2, "Canadian Dollar"),
        "AUD": CurrencyInfo("AUD", 2, "Australian Dollar"),
        "MXN": CurrencyInfo("MXN", 2, "Mexican Peso"),
        "ARS": CurrencyInfo("ARS", 2, "Argentine Peso"),
        "CLP": CurrencyInfo("CLP", 0, "Chilean Peso"),
        "COP": CurrencyInfo("COP", 2, "Colombian Peso"),
        "JPY": CurrencyInfo("JPY", 0, "Japanese Yen"),
        "KRW": CurrencyInfo("KRW", 0, "South Korean Won"),
        "KWD": CurrencyInfo("KWD", 3, "Kuwaiti Dinar"),
    }

    # Unknown currencies are treated as 2-decimal
    DEFAULT_DECIMAL_PLACES: ClassVar[int] = 2

    @classmethod
    def is_valid(cls, code: str) -> bool:
        """Check if a currency code is registered."""
        if not code or not isinstance(code, str):
            return False
        return code.upper().strip() in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        """Get currency information by code."""
        if not code or not isinstance(code, str):
            return None
        return cls._CURRENCIES.get(code.upper().strip())

    @classmethod
    def get_decimal_places(cls, code: str) -> int:
        """Get decimal places for a currency."""
        info = cls.get_info(code)
        return info.decimal_places if info else cls.DEFAULT_DECIMAL_PLACES

    @classmethod
    def quantize(cls, amount: Decimal, code: str) -> Decimal:
        """Round ``amount`` to the currency's minor unit (ROUND_HALF_UP)."""
        places = cls.get_decimal_places(code)
        exponent = Decimal(1).scaleb(-places)
        return amount.quantize(exponent, rounding=ROUND_HALF_UP)

