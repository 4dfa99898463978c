"""Form-side editing of a new or existing contract before it is saved."""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any

from salesdesk_app.core.validation import ValidationError, coerce_flag
from salesdesk_app.models.contract import (
    DERIVED_FIELDS,
    OWNERSHIP_FIELDS,
    PROMOTION_FLAGS,
    Contract,
    new_draft_id,
)
from salesdesk_app.models.user import User
from salesdesk_app.models.vehicle import DEFAULT_VEHICLE
from salesdesk_app.services.contract_service import ContractService
from salesdesk_app.services.inline_edit import coerce_field_value
from salesdesk_app.services.pricing import PriceBreakdown, compute_discount
from salesdesk_app.services.promotions import (
    apply_vehicle_selection,
    eligible_promotions,
    toggle_promotion,
)
from salesdesk_app.services.store import ValidationErrorCleared, ValidationErrorsReset


def new_contract_template(today: date | None = None) -> Contract:
    """Blank draft: today's dates, the default vehicle, outright payment."""
    today = today or date.today()
    price = Decimal(DEFAULT_VEHICLE.price)
    return Contract(
        id=new_draft_id(),
        signing_date=today.isoformat(),
        delivery_date=today.isoformat(),
        vehicle_type=DEFAULT_VEHICLE.name,
        vehicle_color=DEFAULT_VEHICLE.colors[0],
        vehicle_production_year=today.year,
        selling_price=price,
        final_price=price,
        payment1_date=today.isoformat(),
    )


class ContractDraftEditor:
    """Holds one contract being filled in and applies form rules to it.

    Opening or cancelling the form discards every pending duplicate error.
    """

    def __init__(self, contract_service: ContractService, contract: Contract | None = None):
        self._service = contract_service
        self.contract = contract or new_contract_template()
        self._service.store.dispatch(ValidationErrorsReset())

    @property
    def form_id(self) -> str:
        return self.contract.id

    def set_field(self, field: str, raw_value: Any) -> Contract:
        """Change one input; a pending duplicate error on that field is dropped."""
        if field in DERIVED_FIELDS or field in OWNERSHIP_FIELDS:
            raise ValueError(f"Không thể sửa trực tiếp trường '{field}'.")
        self._service.store.dispatch(ValidationErrorCleared(self.form_id, field))

        if field in PROMOTION_FLAGS:
            return self.toggle_promotion(field, coerce_flag(raw_value))
        if field == "vehicle_type":
            self.contract = apply_vehicle_selection(self.contract, str(raw_value))
        else:
            self.contract = replace(self.contract, **{field: coerce_field_value(field, raw_value)})
        return self.contract

    def toggle_promotion(self, flag: str, checked: bool) -> Contract:
        self.contract = toggle_promotion(self.contract, flag, checked)
        return self.contract

    def visible_promotions(self) -> frozenset[str]:
        return eligible_promotions(self.contract.vehicle_type)

    def preview(self) -> PriceBreakdown:
        return compute_discount(self.contract)

    def errors(self) -> list[ValidationError]:
        return self._service.store.errors_for(self.form_id)

    def can_submit(self) -> bool:
        return not self.errors()

    def save(self, user: User) -> bool:
        return self._service.save_contract(self.contract, user)

    def cancel(self) -> None:
        self._service.store.dispatch(ValidationErrorsReset())
