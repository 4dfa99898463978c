"""Tests for discount and final price calculation."""

from __future__ import annotations

from decimal import Decimal

from salesdesk_app.models.contract import Contract
from salesdesk_app.services.pricing import apply_pricing, compute_discount


def vf3_contract(**overrides) -> Contract:
    values = {
        "vehicle_type": "VF3",
        "vehicle_color": "Trắng",
        "selling_price": Decimal("299000000"),
    }
    values.update(overrides)
    return Contract(**values)


def test_combined_promotions_and_manual_discount() -> None:
    contract = vf3_contract(
        promo_4percent=True,
        promo_vf3_social=True,
        salesperson_discount=Decimal("1000000"),
    )

    breakdown = compute_discount(contract)

    assert breakdown.total_discount == Decimal("15960000")
    assert breakdown.final_price == Decimal("283040000")
    assert [promotion.code for promotion in breakdown.applied] == [
        "promo_4percent",
        "promo_vf3_social",
        "salesperson_discount",
    ]


def test_vf3_social_only_counts_for_vf3_models() -> None:
    vf3 = compute_discount(vf3_contract(vehicle_type="VF3 nâng cao", promo_vf3_social=True))
    vf6 = compute_discount(
        vf3_contract(
            vehicle_type="VF6 ECO",
            selling_price=Decimal("689000000"),
            promo_vf3_social=True,
        )
    )

    assert vf3.total_discount == Decimal("3000000")
    assert vf6.total_discount == Decimal("0")
    assert vf6.final_price == Decimal("689000000")


def test_fixed_discounts_and_percentages_are_additive() -> None:
    contract = vf3_contract(
        promo_4percent=True,
        promo_3percent=True,
        promo_vf3_fixed=True,
        company_discount=Decimal("500000"),
    )

    breakdown = compute_discount(contract)

    expected = Decimal("299000000") * Decimal("0.07") + Decimal("6500000") + Decimal("500000")
    assert breakdown.total_discount == expected
    assert breakdown.final_price == breakdown.selling_price - breakdown.total_discount


def test_insurance_gift_does_not_change_price() -> None:
    breakdown = compute_discount(vf3_contract(promo_insurance=True))

    assert breakdown.total_discount == Decimal("0")
    assert breakdown.applied == ()


def test_final_price_may_go_negative() -> None:
    breakdown = compute_discount(vf3_contract(company_discount=Decimal("300000000")))

    assert breakdown.final_price == Decimal("-1000000")


def test_apply_pricing_overwrites_derived_fields() -> None:
    stale = vf3_contract(
        promo_vf5_fixed=True,
        total_discount=Decimal("1"),
        final_price=Decimal("2"),
    )

    priced = apply_pricing(stale)

    assert priced.total_discount == Decimal("12000000")
    assert priced.final_price == Decimal("287000000")
    assert apply_pricing(priced) == priced
