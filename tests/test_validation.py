"""Tests for validation helpers."""

from __future__ import annotations

from decimal import Decimal

import pytest

from salesdesk_app.core.validation import (
    ValidationError,
    coerce_decimal,
    coerce_flag,
    find_duplicate_violations,
    validate_email,
    validate_optional_date,
    validate_optional_phone,
    validate_password,
    validate_production_year,
    validate_required_text,
)
from salesdesk_app.models.contract import Contract


def test_duplicate_vin_matches_case_and_whitespace_insensitive() -> None:
    stored = [Contract(id="a", vehicle_vin="X1"), Contract(id="b", vehicle_vin="x1 ")]

    violations = find_duplicate_violations(Contract(id="a", vehicle_vin="X1"), stored)

    assert violations == [ValidationError("a", "vehicle_vin")]
    assert violations[0].message == "Số khung đã tồn tại."


def test_empty_business_keys_never_conflict() -> None:
    stored = [Contract(id="a"), Contract(id="b")]

    assert find_duplicate_violations(Contract(id="c"), stored) == []


def test_each_business_key_is_reported_separately() -> None:
    stored = [
        Contract(id="a", contract_number="HD-01", vehicle_engine_number="E-9"),
    ]
    candidate = Contract(
        id="draft-1",
        contract_number="hd-01",
        vehicle_vin="V-2",
        vehicle_engine_number="E-9",
    )

    fields = {error.field for error in find_duplicate_violations(candidate, stored)}

    assert fields == {"contract_number", "vehicle_engine_number"}


def test_validate_required_text() -> None:
    assert validate_required_text("  HD-01 ", "Số hợp đồng") == "HD-01"
    with pytest.raises(ValueError):
        validate_required_text("   ", "Số hợp đồng")


def test_validate_optional_date() -> None:
    assert validate_optional_date("", "Ngày ký") == ""
    assert validate_optional_date("2024-03-05", "Ngày ký") == "2024-03-05"
    with pytest.raises(ValueError):
        validate_optional_date("05/03/2024", "Ngày ký")


def test_validate_optional_phone() -> None:
    assert validate_optional_phone("") == ""
    assert validate_optional_phone("0912 345 678") == "0912 345 678"
    assert validate_optional_phone("+84912345678") == "+84912345678"
    with pytest.raises(ValueError):
        validate_optional_phone("abc")


def test_validate_account_inputs() -> None:
    assert validate_email(" sale@example.com ") == "sale@example.com"
    with pytest.raises(ValueError):
        validate_email("sale")
    with pytest.raises(ValueError):
        validate_password("12345")


def test_coerce_decimal_defaults_to_zero() -> None:
    assert coerce_decimal("1500000") == Decimal("1500000")
    assert coerce_decimal(2.5) == Decimal("2.5")
    assert coerce_decimal("abc") == Decimal("0")
    assert coerce_decimal("NaN") == Decimal("0")
    assert coerce_decimal(None) == Decimal("0")


def test_validate_production_year() -> None:
    assert validate_production_year(Decimal("0")) == 0
    assert validate_production_year(Decimal("2024")) == 2024

    for value in ("1800", "10000", "-2024", "1e30", "1e999999999"):
        with pytest.raises(ValueError):
            validate_production_year(Decimal(value))


def test_coerce_flag() -> None:
    assert coerce_flag(True) is True
    assert coerce_flag(None) is False
    assert coerce_flag("true") is True
    assert coerce_flag(" On ") is True
    assert coerce_flag("false") is False
    assert coerce_flag("0") is False
    assert coerce_flag("") is False
    assert coerce_flag(1) is True
    assert coerce_flag(0) is False
    with pytest.raises(ValueError):
        coerce_flag("có lẽ")
