"""Promotion eligibility, mutual exclusion, and vehicle selection rules."""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

from salesdesk_app.models.contract import PROMOTION_FLAGS, Contract
from salesdesk_app.models.vehicle import VF3_MODELS, VF5_MODELS, find_vehicle

ALWAYS_OFFERED = frozenset({"promo_4percent", "promo_3percent"})
VF3_ONLY = frozenset({"promo_vf3_social", "promo_vf3_fixed"})
VF5_ONLY = frozenset({"promo_vf5_fixed"})
INSURANCE = "promo_insurance"
FIXED_WITH_INSURANCE_CONFLICT = ("promo_vf3_fixed", "promo_vf5_fixed")


def eligible_promotions(vehicle_type: str) -> frozenset[str]:
    """Return the promotion flags offered for a model."""
    eligible = set(ALWAYS_OFFERED)
    if vehicle_type in VF3_MODELS:
        eligible |= VF3_ONLY
    if vehicle_type in VF5_MODELS:
        eligible |= VF5_ONLY
    if vehicle_type in VF3_MODELS or vehicle_type in VF5_MODELS:
        eligible.add(INSURANCE)
    return frozenset(eligible)


def toggle_promotion(contract: Contract, flag: str, checked: bool) -> Contract:
    """Set one promotion flag, clearing whatever the enabled flag excludes.

    Enabling a fixed VF3/VF5 discount drops the insurance gift and enabling
    the insurance gift drops both fixed discounts. Unchecking never touches
    other flags. A promotion the model is not offered cannot be enabled.
    """
    if flag not in PROMOTION_FLAGS:
        raise ValueError(f"Không có chương trình khuyến mãi '{flag}'.")
    if checked and flag not in eligible_promotions(contract.vehicle_type):
        raise ValueError(
            f"Chương trình khuyến mãi '{flag}' không áp dụng cho mẫu xe "
            f"{contract.vehicle_type or '(chưa chọn)'}."
        )

    updates: dict[str, bool] = {flag: checked}
    if checked and flag in FIXED_WITH_INSURANCE_CONFLICT:
        updates[INSURANCE] = False
    elif checked and flag == INSURANCE:
        for conflicting in FIXED_WITH_INSURANCE_CONFLICT:
            updates[conflicting] = False
    return replace(contract, **updates)


def clear_ineligible_promotions(contract: Contract) -> Contract:
    """Switch off model-gated promotions the current model is not offered."""
    eligible = eligible_promotions(contract.vehicle_type)
    updates = {
        flag: False
        for flag in PROMOTION_FLAGS
        if flag not in eligible and getattr(contract, flag)
    }
    if not updates:
        return contract
    return replace(contract, **updates)


def apply_vehicle_selection(contract: Contract, vehicle_type: str) -> Contract:
    """Select a model: reset price to its base price and keep color/promotions valid."""
    vehicle = find_vehicle(vehicle_type)
    if vehicle is None:
        raise ValueError(f"Không có mẫu xe '{vehicle_type}' trong danh mục.")

    color = contract.vehicle_color
    if color not in vehicle.colors:
        color = vehicle.colors[0]

    selected = replace(
        contract,
        vehicle_type=vehicle.name,
        vehicle_color=color,
        selling_price=Decimal(vehicle.price),
    )
    return clear_ineligible_promotions(selected)
