"""
Module: procurement_engines.contract_validity
Responsibility:
    Turn a supplier's contract documents into a version history and classify
    each version's validity relative to an injected "now", so a caller can
    decide which contract may be linked to a purchase order.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import procurement_kernel.

Invariants enforced:
    - Purity: ``now`` is always a parameter (no clock access).
    - Versioning: the first document in input order receives the highest
      version (N), the last receives 1; output is sorted ascending.
    - No validity window means always valid.
    - A document that declares validity but carries neither date is never
      within validity (incomplete data is not selectable).

Failure modes:
    - ContractNotSelectableError from ``ensure_selectable``.
    - TypeError propagates if naive and timezone-aware datetimes are mixed
      (caller precondition).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from procurement_engines.tracer import traced_engine
from procurement_kernel.domain.supplier import SupplierDocument
from procurement_kernel.exceptions import ContractNotSelectableError
from procurement_kernel.logging_config import get_logger

logger = get_logger("engines.contract_validity")

DEFAULT_EXPIRY_WARNING_DAYS = 30

_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class ContractVersion:
    """
    A supplier document annotated with its version and validity state.

    Contract:
        Frozen dataclass produced by ``classify_contract_versions``.
    Guarantees:
        - ``is_within_validity`` is False whenever ``is_expired`` or
          ``is_not_yet_valid`` is True.
    """

    document: SupplierDocument
    version: int
    has_validity: bool
    is_expired: bool
    is_not_yet_valid: bool
    is_within_validity: bool

    @property
    def not_selectable_reason(self) -> str | None:
        """Why the version cannot be selected, or None when it can."""
        if self.is_within_validity:
            return None
        if self.is_expired:
            return "expired"
        if self.is_not_yet_valid:
            return "not_yet_valid"
        return "missing_validity_dates"


def _classify(document: SupplierDocument, version: int, now: datetime) -> ContractVersion:
    valid_from = document.valid_from
    valid_until = document.valid_until
    has_dates = valid_from is not None or valid_until is not None

    if document.has_validity is None:
        has_validity = has_dates
    else:
        has_validity = document.has_validity

    is_expired = has_validity and valid_until is not None and valid_until < now
    is_not_yet_valid = has_validity and valid_from is not None and valid_from > now

    if has_validity:
        is_within_validity = has_dates and not is_expired and not is_not_yet_valid
    else:
        is_within_validity = True

    return ContractVersion(
        document=document,
        version=version,
        has_validity=has_validity,
        is_expired=is_expired,
        is_not_yet_valid=is_not_yet_valid,
        is_within_validity=is_within_validity,
    )


@traced_engine("contract_validity", "1.0", fingerprint_fields=("documents", "now"))
def classify_contract_versions(
    documents: Sequence[SupplierDocument],
    now: datetime,
) -> tuple[ContractVersion, ...]:
    """
    Assign versions and classify validity for a supplier's contracts.

    Args:
        documents: Contract documents in caller-supplied order (typically
            most recent upload first).
        now: Reference instant for validity checks.

    Returns:
        ContractVersion tuple sorted ascending by version (1 = oldest).
    """
    total = len(documents)
    versions = [
        _classify(document, total - index, now)
        for index, document in enumerate(documents)
    ]
    versions.sort(key=lambda v: v.version)

    logger.debug(
        "contract_versions_classified",
        extra={
            "document_count": total,
            "selectable_count": sum(1 for v in versions if v.is_within_validity),
        },
    )
    return tuple(versions)


def current_contract(versions: Sequence[ContractVersion]) -> ContractVersion | None:
    """Highest version that is within validity, or None."""
    selectable = [v for v in versions if v.is_within_validity]
    if not selectable:
        return None
    return max(selectable, key=lambda v: v.version)


def ensure_selectable(version: ContractVersion) -> ContractVersion:
    """Return ``version`` if it may be linked to a purchase order.

    Raises:
        ContractNotSelectableError: if the version is outside its validity.
    """
    reason = version.not_selectable_reason
    if reason is not None:
        logger.warning(
            "contract_selection_rejected",
            extra={
                "document_id": version.document.id,
                "version": version.version,
                "reason": reason,
            },
        )
        raise ContractNotSelectableError(version.document.id, version.version, reason)
    return version


def days_until_expiry(valid_until: datetime, now: datetime) -> int:
    """Full days until ``valid_until`` (negative once past), truncated toward zero."""
    return int((valid_until - now) / _ONE_DAY)


def is_expiring_soon(
    valid_until: datetime,
    now: datetime,
    warning_days: int = DEFAULT_EXPIRY_WARNING_DAYS,
) -> bool:
    """True when the contract expires within ``warning_days`` and has not expired."""
    remaining = days_until_expiry(valid_until, now)
    return 0 <= remaining <= warning_days
