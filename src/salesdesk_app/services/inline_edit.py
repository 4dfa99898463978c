"""Single-field edits of saved contracts."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from salesdesk_app.core.validation import (
    coerce_decimal,
    validate_non_negative_amount,
    validate_optional_date,
    validate_production_year,
    validate_vehicle_color,
)
from salesdesk_app.models.contract import (
    CONTRACT_FIELDS,
    DATE_FIELDS,
    DERIVED_FIELDS,
    FIELD_LABELS,
    MONEY_FIELDS,
    OWNERSHIP_FIELDS,
    PROMOTION_FLAGS,
    Contract,
    Gender,
    PaymentMethod,
)
from salesdesk_app.models.vehicle import find_vehicle
from salesdesk_app.services.pricing import apply_pricing
from salesdesk_app.services.promotions import apply_vehicle_selection

if TYPE_CHECKING:
    from salesdesk_app.models.user import User
    from salesdesk_app.services.contract_service import ContractService

INLINE_EDITABLE_FIELDS = (
    frozenset(CONTRACT_FIELDS) - DERIVED_FIELDS - OWNERSHIP_FIELDS - PROMOTION_FLAGS
)
ENUM_FIELDS: dict[str, type[Enum]] = {
    "customer_gender": Gender,
    "payment_method": PaymentMethod,
}


@dataclass(frozen=True)
class FieldEdit:
    """Outcome of reconciling one field edit.

    ``contract`` is the merged and re-priced record, ``changes`` the partial
    update to persist for it.
    """

    contract: Contract
    changes: dict[str, Any]


def coerce_field_value(field: str, raw_value: Any) -> Any:
    """Convert raw cell input into the field's domain type."""
    if field == "vehicle_production_year":
        return validate_production_year(coerce_decimal(raw_value))
    if field in MONEY_FIELDS:
        return coerce_decimal(raw_value)
    if field in ENUM_FIELDS:
        enum_type = ENUM_FIELDS[field]
        try:
            return enum_type(raw_value)
        except ValueError as error:
            raise ValueError(f"Giá trị '{raw_value}' không hợp lệ.") from error
    return "" if raw_value is None else str(raw_value)


def reconcile_field_edit(contract: Contract, field: str, raw_value: Any) -> FieldEdit:
    """Apply one field change, its side effects, and a price refresh."""
    if field not in INLINE_EDITABLE_FIELDS:
        raise ValueError(f"Không thể sửa trực tiếp trường '{field}'.")

    value = coerce_field_value(field, raw_value)
    if field in MONEY_FIELDS:
        validate_non_negative_amount(value, FIELD_LABELS[field])
    elif field in DATE_FIELDS:
        value = validate_optional_date(value, FIELD_LABELS[field])
    elif field == "vehicle_color":
        vehicle = find_vehicle(contract.vehicle_type)
        if vehicle is not None:
            validate_vehicle_color(vehicle, value)

    if field == "vehicle_type" and value != contract.vehicle_type:
        updated = apply_vehicle_selection(contract, value)
    else:
        updated = replace(contract, **{field: value})
    priced = apply_pricing(updated)

    changes = {
        name: getattr(priced, name)
        for name in CONTRACT_FIELDS
        if name != "id"
        and (name == field or name in DERIVED_FIELDS or getattr(priced, name) != getattr(contract, name))
    }
    return FieldEdit(contract=priced, changes=changes)


class EditState(str, Enum):
    VIEWING = "viewing"
    EDITING = "editing"
    COMMITTING = "committing"
    CANCELLED = "cancelled"


class InlineEditSession:
    """Tracks the one table cell being edited and routes its commit."""

    def __init__(self, contract_service: ContractService, user: User):
        self._service = contract_service
        self._user = user
        self.state = EditState.VIEWING
        self.cell: tuple[str, str] | None = None
        self.last_outcome: EditState | None = None

    def begin(self, contract_id: str, field: str) -> None:
        if self.state == EditState.EDITING and self.cell == (contract_id, field):
            return
        if self.state != EditState.VIEWING:
            raise RuntimeError("Đang sửa một ô khác.")
        if field not in INLINE_EDITABLE_FIELDS:
            raise ValueError(f"Không thể sửa trực tiếp trường '{field}'.")
        if not self._service.can_edit(self._user, contract_id):
            raise PermissionError("Bạn không có quyền sửa hợp đồng này.")
        self.cell = (contract_id, field)
        self.state = EditState.EDITING

    def commit(self, raw_value: Any) -> bool:
        """Persist the edited value (confirm key or focus loss)."""
        if self.state != EditState.EDITING or self.cell is None:
            raise RuntimeError("Không có ô nào đang được sửa.")
        contract_id, field = self.cell
        self.state = EditState.COMMITTING
        try:
            return self._service.update_field(contract_id, field, raw_value, self._user)
        finally:
            self.last_outcome = EditState.COMMITTING
            self.state = EditState.VIEWING
            self.cell = None

    def cancel(self) -> None:
        """Discard the uncommitted value."""
        if self.state != EditState.EDITING:
            return
        self.last_outcome = EditState.CANCELLED
        self.state = EditState.VIEWING
        self.cell = None
