"""Tests for list filters and payment summaries."""

from __future__ import annotations

from decimal import Decimal

from salesdesk_app.models.contract import Contract, Gender
from salesdesk_app.services.contract_query import (
    ContractFilters,
    filter_contracts,
    payment_summary,
    production_years,
)

CONTRACTS = [
    Contract(
        id="a",
        contract_number="HD-01",
        customer_name="Nguyễn Văn An",
        vehicle_type="VF3",
        vehicle_color="Trắng",
        vehicle_production_year=2024,
        signing_date="2024-03-05",
        delivery_date="2024-04-01",
    ),
    Contract(
        id="b",
        contract_number="HD-02",
        customer_name="Trần Thị Bình",
        customer_gender=Gender.FEMALE,
        vehicle_type="VF6 ECO",
        vehicle_color="Đỏ",
        vehicle_production_year=2025,
        signing_date="2024-06-10",
        delivery_date="",
    ),
]


def test_payment_summary() -> None:
    contract = Contract(
        final_price=Decimal("300000000"),
        payment1=Decimal("100000000"),
        payment2=Decimal("50000000"),
    )

    summary = payment_summary(contract)

    assert summary.total_paid == Decimal("150000000")
    assert summary.paid_ratio == Decimal("50.00")
    assert payment_summary(Contract(payment1=Decimal("5"))).paid_ratio == Decimal("0")


def test_search_is_case_insensitive_across_fields() -> None:
    assert [c.id for c in filter_contracts(CONTRACTS, ContractFilters(search_term="bình"))] == ["b"]
    assert [c.id for c in filter_contracts(CONTRACTS, ContractFilters(search_term="hd-0"))] == [
        "a",
        "b",
    ]


def test_exact_filters() -> None:
    assert [c.id for c in filter_contracts(CONTRACTS, ContractFilters(vehicle_type="VF3"))] == ["a"]
    assert [c.id for c in filter_contracts(CONTRACTS, ContractFilters(customer_gender="Nữ"))] == [
        "b"
    ]
    assert [
        c.id for c in filter_contracts(CONTRACTS, ContractFilters(vehicle_production_year="2025"))
    ] == ["b"]


def test_date_ranges_skip_missing_dates() -> None:
    signed_in_spring = ContractFilters(signing_date_from="2024-03-01", signing_date_to="2024-03-31")
    delivered = ContractFilters(delivery_date_from="2024-01-01")

    assert [c.id for c in filter_contracts(CONTRACTS, signed_in_spring)] == ["a"]
    assert [c.id for c in filter_contracts(CONTRACTS, delivered)] == ["a"]
    assert len(filter_contracts(CONTRACTS, ContractFilters())) == 2


def test_production_years_newest_first() -> None:
    assert production_years(CONTRACTS) == [2025, 2024]
