"""Input validation rules for contracts and accounts."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

from salesdesk_app.models.contract import BUSINESS_KEY_FIELDS, ZERO, Contract
from salesdesk_app.models.vehicle import Vehicle, find_vehicle

PHONE_PATTERN = re.compile(r"^\+?\d{9,12}$")
PHONE_SEPARATORS = re.compile(r"[\s.\-()]")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6
MIN_PRODUCTION_YEAR = 1900
MAX_PRODUCTION_YEAR = 9999
TRUE_FLAG_VALUES = frozenset({"true", "1", "yes", "on"})
FALSE_FLAG_VALUES = frozenset({"false", "0", "no", "off", ""})

DUPLICATE_MESSAGES = {
    "contract_number": "Số hợp đồng đã tồn tại.",
    "vehicle_vin": "Số khung đã tồn tại.",
    "vehicle_engine_number": "Số máy đã tồn tại.",
}


@dataclass(frozen=True)
class ValidationError:
    """Duplicate business key on one field of one contract."""

    contract_id: str
    field: str

    @property
    def message(self) -> str:
        return DUPLICATE_MESSAGES.get(self.field, "Giá trị bị trùng lặp.")


def normalize_business_key(value: Any) -> str:
    """Normalize a business key for comparison: trimmed and case-folded."""
    if value is None:
        return ""
    return str(value).strip().casefold()


def find_duplicate_violations(
    candidate: Contract,
    contracts: Iterable[Contract],
) -> list[ValidationError]:
    """Return business-key fields of ``candidate`` already used by another contract.

    Contracts sharing the candidate's id are the candidate itself and are
    ignored. Empty keys never conflict.
    """
    others = [contract for contract in contracts if contract.id != candidate.id]
    violations: list[ValidationError] = []
    for field_name in BUSINESS_KEY_FIELDS:
        value = normalize_business_key(getattr(candidate, field_name))
        if not value:
            continue
        if any(normalize_business_key(getattr(other, field_name)) == value for other in others):
            violations.append(ValidationError(candidate.id, field_name))
    return violations


def validate_required_text(value: str, field_name: str) -> str:
    """Validate non-empty text fields."""
    normalized = value.strip()
    if not normalized:
        raise ValueError(f"{field_name} là bắt buộc.")
    return normalized


def validate_optional_date(value: str, field_name: str) -> str:
    """Validate an optional ISO date and return it normalized."""
    normalized = value.strip()
    if not normalized:
        return ""
    try:
        return date.fromisoformat(normalized).isoformat()
    except ValueError as error:
        raise ValueError(f"{field_name} phải có dạng YYYY-MM-DD.") from error


def validate_optional_phone(phone: str) -> str:
    """Validate an optional phone number, keeping the entered spelling."""
    normalized = phone.strip()
    if not normalized:
        return ""
    if not PHONE_PATTERN.match(PHONE_SEPARATORS.sub("", normalized)):
        raise ValueError("Số điện thoại không hợp lệ.")
    return normalized


def validate_non_negative_amount(amount: Decimal, field_name: str) -> Decimal:
    """Reject negative or non-finite money amounts."""
    if not amount.is_finite():
        raise ValueError(f"{field_name} không hợp lệ.")
    if amount < 0:
        raise ValueError(f"{field_name} không được âm.")
    return amount


def validate_vehicle_type(vehicle_type: str) -> Vehicle:
    """Return the catalog vehicle for a model name."""
    vehicle = find_vehicle(vehicle_type)
    if vehicle is None:
        raise ValueError(f"Không có mẫu xe '{vehicle_type}' trong danh mục.")
    return vehicle


def validate_vehicle_color(vehicle: Vehicle, color: str) -> str:
    """Validate that a color is offered for the vehicle."""
    if color not in vehicle.colors:
        raise ValueError(f"Màu '{color}' không có cho mẫu xe {vehicle.name}.")
    return color


def validate_email(email: str) -> str:
    normalized = email.strip()
    if not EMAIL_PATTERN.match(normalized):
        raise ValueError("Email không hợp lệ.")
    return normalized


def validate_password(password: str) -> str:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Mật khẩu phải có ít nhất {MIN_PASSWORD_LENGTH} ký tự.")
    return password


def coerce_decimal(raw: Any) -> Decimal:
    """Parse raw numeric input, falling back to zero on parse failure."""
    if isinstance(raw, Decimal):
        return raw if raw.is_finite() else ZERO
    if isinstance(raw, bool) or raw is None:
        return ZERO
    if isinstance(raw, (int, float)):
        raw = str(raw)
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return ZERO
    return value if value.is_finite() else ZERO


def validate_production_year(value: Decimal) -> int:
    """Return a production year; 0 means not entered."""
    if value == 0:
        return 0
    # Compare before int(); Decimal exponents are unbounded.
    if not MIN_PRODUCTION_YEAR <= value <= MAX_PRODUCTION_YEAR:
        raise ValueError(
            f"Năm sản xuất phải nằm trong khoảng {MIN_PRODUCTION_YEAR}-{MAX_PRODUCTION_YEAR}."
        )
    return int(value)


def coerce_flag(raw: Any) -> bool:
    """Parse a checkbox value; strings such as "false" or "0" are False."""
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return False
    if isinstance(raw, (int, Decimal)):
        return raw != 0
    normalized = str(raw).strip().casefold()
    if normalized in TRUE_FLAG_VALUES:
        return True
    if normalized in FALSE_FLAG_VALUES:
        return False
    raise ValueError(f"Giá trị '{raw}' không hợp lệ.")
