"""
Tests for the contract validity selector.

Tests cover:
- classify_contract_versions: version numbering, ascending output
- Validity flags: expired, not yet valid, within validity, inferred has_validity
- current_contract / ensure_selectable: selection of linkable contracts
- days_until_expiry / is_expiring_soon: expiry warning helpers
"""

from datetime import datetime, timedelta, timezone

import pytest

from procurement_engines.contract_validity import (
    classify_contract_versions,
    current_contract,
    days_until_expiry,
    ensure_selectable,
    is_expiring_soon,
)
from procurement_kernel.domain.supplier import SupplierDocument
from procurement_kernel.exceptions import ContractError, ContractNotSelectableError

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def utc(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


def make_document(
    doc_id: str = "doc-1",
    valid_from: datetime | None = None,
    valid_until: datetime | None = None,
    has_validity: bool | None = None,
) -> SupplierDocument:
    return SupplierDocument(
        id=doc_id,
        supplier_id="sup-1",
        file_name=f"{doc_id}.pdf",
        created_at=utc(2025, 1, 1),
        valid_from=valid_from,
        valid_until=valid_until,
        has_validity=has_validity,
    )


def classify_one(document: SupplierDocument):
    (version,) = classify_contract_versions([document], NOW)
    return version


# =========================================================================
# 1. Versioning
# =========================================================================


class TestVersioning:

    def test_first_listed_gets_highest_version(self):
        docs = [make_document("newest"), make_document("middle"), make_document("oldest")]
        versions = classify_contract_versions(docs, NOW)

        assert [v.version for v in versions] == [1, 2, 3]
        assert [v.document.id for v in versions] == ["oldest", "middle", "newest"]

    def test_empty_input(self):
        assert classify_contract_versions([], NOW) == ()

    def test_emits_engine_trace(self, captured_logs):
        classify_contract_versions([make_document()], NOW)
        traces = [r for r in captured_logs() if r["message"] == "PROCUREMENT_ENGINE_TRACE"]
        assert traces[-1]["engine_name"] == "contract_validity"


# =========================================================================
# 2. Classification
# =========================================================================


class TestClassification:

    def test_within_window(self):
        v = classify_one(make_document(valid_from=utc(2025, 1, 1), valid_until=utc(2025, 12, 31)))

        assert v.has_validity is True
        assert v.is_within_validity is True
        assert v.is_expired is False
        assert v.is_not_yet_valid is False
        assert v.not_selectable_reason is None

    def test_expired(self):
        v = classify_one(make_document(valid_until=utc(2025, 5, 1)))

        assert v.is_expired is True
        assert v.is_within_validity is False
        assert v.not_selectable_reason == "expired"

    def test_not_yet_valid(self):
        v = classify_one(make_document(valid_from=utc(2025, 7, 1)))

        assert v.is_not_yet_valid is True
        assert v.is_within_validity is False
        assert v.not_selectable_reason == "not_yet_valid"

    def test_no_dates_inferred_always_valid(self):
        v = classify_one(make_document())

        assert v.has_validity is False
        assert v.is_within_validity is True

    def test_declared_validity_without_dates_not_selectable(self):
        v = classify_one(make_document(has_validity=True))

        assert v.has_validity is True
        assert v.is_within_validity is False
        assert v.is_expired is False
        assert v.not_selectable_reason == "missing_validity_dates"

    def test_explicit_no_validity_ignores_dates(self):
        v = classify_one(make_document(valid_until=utc(2020, 1, 1), has_validity=False))

        assert v.is_expired is False
        assert v.is_within_validity is True

    def test_open_ended_from_date(self):
        v = classify_one(make_document(valid_from=utc(2024, 1, 1)))
        assert v.is_within_validity is True

    def test_expiry_instant_is_still_valid(self):
        """``valid_until < now`` is strict."""
        v = classify_one(make_document(valid_until=NOW))
        assert v.is_within_validity is True


# =========================================================================
# 3. Selection
# =========================================================================


class TestSelection:

    def test_current_contract_is_highest_selectable(self):
        docs = [
            make_document("expired-newest", valid_until=utc(2025, 5, 1)),
            make_document("valid-middle", valid_until=utc(2026, 1, 1)),
            make_document("valid-oldest"),
        ]
        versions = classify_contract_versions(docs, NOW)

        assert current_contract(versions).document.id == "valid-middle"

    def test_current_contract_none_when_nothing_selectable(self):
        versions = classify_contract_versions(
            [make_document(valid_until=utc(2025, 1, 1))], NOW,
        )
        assert current_contract(versions) is None

    def test_ensure_selectable_returns_version(self):
        v = classify_one(make_document())
        assert ensure_selectable(v) is v

    def test_ensure_selectable_raises_for_expired(self):
        v = classify_one(make_document("old", valid_until=utc(2025, 1, 1)))

        with pytest.raises(ContractNotSelectableError) as exc_info:
            ensure_selectable(v)

        err = exc_info.value
        assert err.document_id == "old"
        assert err.version == 1
        assert err.reason == "expired"
        assert err.code == "CONTRACT_NOT_SELECTABLE"
        assert isinstance(err, ContractError)


# =========================================================================
# 4. Expiry warnings
# =========================================================================


class TestExpiry:

    def test_days_until_expiry_truncates(self):
        assert days_until_expiry(NOW + timedelta(days=10, hours=12), NOW) == 10

    def test_days_until_expiry_negative_when_past(self):
        assert days_until_expiry(NOW - timedelta(days=3), NOW) == -3

    def test_expiring_soon_at_boundary(self):
        assert is_expiring_soon(NOW + timedelta(days=30), NOW) is True

    def test_not_expiring_soon_beyond_window(self):
        assert is_expiring_soon(NOW + timedelta(days=31), NOW) is False

    def test_already_expired_is_not_expiring_soon(self):
        assert is_expiring_soon(NOW - timedelta(days=2), NOW) is False

    def test_custom_warning_window(self):
        assert is_expiring_soon(NOW + timedelta(days=45), NOW, warning_days=60) is True
