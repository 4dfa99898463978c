"""Discount and final price calculation."""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal

from salesdesk_app.models.contract import ZERO, Contract
from salesdesk_app.models.vehicle import VF3_MODELS

PERCENT_4 = Decimal("0.04")
PERCENT_3 = Decimal("0.03")
VF3_SOCIAL_AMOUNT = Decimal("3000000")
VF3_FIXED_AMOUNT = Decimal("6500000")
VF5_FIXED_AMOUNT = Decimal("12000000")

PROMOTION_LABELS = {
    "promo_4percent": "Ưu đãi 4% MLTTVN",
    "promo_3percent": "Ưu đãi 3% cho Bộ Đội & Công An",
    "promo_vf3_social": "Ưu đãi Xã dành riêng cho VF3",
    "promo_insurance": "Tặng bảo hiểm 2 năm",
    "promo_vf3_fixed": "Giảm 6.5 triệu cho VF3",
    "promo_vf5_fixed": "Giảm 12 triệu cho VF5",
    "salesperson_discount": "Xin giảm giá vào hoa hồng TVBH",
    "company_discount": "Xin giảm giá từ công ty",
}


@dataclass(frozen=True)
class AppliedPromotion:
    code: str
    label: str
    amount: Decimal


@dataclass(frozen=True)
class PriceBreakdown:
    """Result of pricing one contract."""

    selling_price: Decimal
    total_discount: Decimal
    final_price: Decimal
    applied: tuple[AppliedPromotion, ...]


def _applied(code: str, amount: Decimal) -> AppliedPromotion:
    return AppliedPromotion(code=code, label=PROMOTION_LABELS[code], amount=amount)


def compute_discount(contract: Contract) -> PriceBreakdown:
    """Sum every active promotion and derive the final price.

    Terms are additive and independent; only the VF3 social promotion is
    gated on the model. The final price is not clamped and goes negative
    when discounts exceed the selling price.
    """
    base_price = contract.selling_price
    applied: list[AppliedPromotion] = []

    if contract.promo_4percent:
        applied.append(_applied("promo_4percent", base_price * PERCENT_4))
    if contract.promo_3percent:
        applied.append(_applied("promo_3percent", base_price * PERCENT_3))
    if contract.promo_vf3_social and contract.vehicle_type in VF3_MODELS:
        applied.append(_applied("promo_vf3_social", VF3_SOCIAL_AMOUNT))
    if contract.promo_vf3_fixed:
        applied.append(_applied("promo_vf3_fixed", VF3_FIXED_AMOUNT))
    if contract.promo_vf5_fixed:
        applied.append(_applied("promo_vf5_fixed", VF5_FIXED_AMOUNT))

    total_discount = sum((promo.amount for promo in applied), ZERO)
    # Manual discounts always count; zero entries are left out of the listing.
    for code in ("salesperson_discount", "company_discount"):
        amount = getattr(contract, code) or ZERO
        total_discount += amount
        if amount:
            applied.append(_applied(code, amount))

    return PriceBreakdown(
        selling_price=base_price,
        total_discount=total_discount,
        final_price=base_price - total_discount,
        applied=tuple(applied),
    )


def apply_pricing(contract: Contract) -> Contract:
    """Return a copy of the contract with derived price fields refreshed."""
    breakdown = compute_discount(contract)
    return replace(
        contract,
        total_discount=breakdown.total_discount,
        final_price=breakdown.final_price,
    )
