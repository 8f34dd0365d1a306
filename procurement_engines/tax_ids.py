"""
procurement_engines.tax_ids -- Brazilian taxpayer id (CPF / CNPJ) validation.

Responsibility:
    Validate and format the tax ids national suppliers are registered with.
    Individuals carry an 11-digit CPF, companies a 14-digit CNPJ; both end in
    two mod-11 check digits.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Failure modes:
    - None.  Malformed input validates as False and formats unchanged.
"""

from __future__ import annotations

import re
from enum import Enum

_NON_DIGITS = re.compile(r"\D")

_CNPJ_FIRST_WEIGHTS = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
_CNPJ_SECOND_WEIGHTS = (6,) + _CNPJ_FIRST_WEIGHTS


class TaxIdKind(str, Enum):
    """Kind of Brazilian taxpayer id."""

    CPF = "cpf"
    CNPJ = "cnpj"


def digits_only(value: str) -> str:
    """Strip punctuation and whitespace, keeping digits."""
    return _NON_DIGITS.sub("", value)


def _is_repeated(digits: str) -> bool:
    # 000.000.000-00, 111.111.111-11, ... satisfy the check digits but are invalid
    return len(set(digits)) == 1


def _cpf_check_digit(digits: str) -> int:
    weight = len(digits) + 1
    total = sum(int(d) * (weight - i) for i, d in enumerate(digits))
    remainder = (total * 10) % 11
    return 0 if remainder == 10 else remainder


def _cnpj_check_digit(digits: str, weights: tuple[int, ...]) -> int:
    total = sum(int(d) * w for d, w in zip(digits, weights))
    remainder = total % 11
    return 0 if remainder < 2 else 11 - remainder


def validate_cpf(value: str) -> bool:
    """True if ``value`` is a well-formed CPF (punctuation allowed)."""
    digits = digits_only(value)
    if len(digits) != 11 or _is_repeated(digits):
        return False
    if _cpf_check_digit(digits[:9]) != int(digits[9]):
        return False
    return _cpf_check_digit(digits[:10]) == int(digits[10])


def validate_cnpj(value: str) -> bool:
    """True if ``value`` is a well-formed CNPJ (punctuation allowed)."""
    digits = digits_only(value)
    if len(digits) != 14 or _is_repeated(digits):
        return False
    if _cnpj_check_digit(digits[:12], _CNPJ_FIRST_WEIGHTS) != int(digits[12]):
        return False
    return _cnpj_check_digit(digits[:13], _CNPJ_SECOND_WEIGHTS) == int(digits[13])


def validate_tax_id(value: str, kind: TaxIdKind | str) -> bool:
    """Validate ``value`` as the given kind of tax id."""
    if TaxIdKind(kind) is TaxIdKind.CPF:
        return validate_cpf(value)
    return validate_cnpj(value)


def format_cpf(value: str) -> str:
    """Format as ``000.000.000-00``; input of the wrong length is returned as-is."""
    digits = digits_only(value)
    if len(digits) != 11:
        return value
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def format_cnpj(value: str) -> str:
    """Format as ``00.000.000/0000-00``; input of the wrong length is returned as-is."""
    digits = digits_only(value)
    if len(digits) != 14:
        return value
    return f"{digits[:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:12]}-{digits[12:]}"
