"""Search, filters, and payment summaries for the contract list."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable

from salesdesk_app.models.contract import ZERO, Contract

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class ContractFilters:
    """List filters; empty values match everything."""

    search_term: str = ""
    vehicle_type: str = ""
    vehicle_color: str = ""
    vehicle_production_year: str = ""
    customer_gender: str = ""
    signing_date_from: str = ""
    signing_date_to: str = ""
    delivery_date_from: str = ""
    delivery_date_to: str = ""


@dataclass(frozen=True)
class PaymentSummary:
    total_paid: Decimal
    paid_ratio: Decimal


def payment_summary(contract: Contract) -> PaymentSummary:
    """Sum the installments and express them as a percentage of the final price."""
    total_paid = contract.payment1 + contract.payment2 + contract.payment3
    if contract.final_price > 0:
        ratio = (total_paid / contract.final_price * HUNDRED).quantize(Decimal("0.01"))
    else:
        ratio = ZERO
    return PaymentSummary(total_paid=total_paid, paid_ratio=ratio)


def production_years(contracts: Iterable[Contract]) -> list[int]:
    return sorted({contract.vehicle_production_year for contract in contracts}, reverse=True)


def _text(value: object) -> str:
    if isinstance(value, Enum):
        value = value.value
    elif isinstance(value, bool):
        value = "true" if value else "false"
    return str(value).casefold()


def _matches_search(contract: Contract, term: str) -> bool:
    if not term:
        return True
    needle = term.casefold()
    return any(needle in _text(value) for value in asdict(contract).values())


def _parse(value: str) -> date | None:
    try:
        return date.fromisoformat(value) if value else None
    except ValueError:
        return None


def _in_range(value: str, start: str, end: str) -> bool:
    if not start and not end:
        return True
    current = _parse(value)
    if current is None:
        return False
    lower = _parse(start)
    upper = _parse(end)
    if lower and current < lower:
        return False
    if upper and current > upper:
        return False
    return True


def filter_contracts(contracts: Iterable[Contract], filters: ContractFilters) -> list[Contract]:
    """Apply free-text search and every non-empty filter."""
    gender = filters.customer_gender
    matched: list[Contract] = []
    for contract in contracts:
        if not _matches_search(contract, filters.search_term.strip()):
            continue
        if filters.vehicle_type and contract.vehicle_type != filters.vehicle_type:
            continue
        if filters.vehicle_color and contract.vehicle_color != filters.vehicle_color:
            continue
        if (
            filters.vehicle_production_year
            and str(contract.vehicle_production_year) != filters.vehicle_production_year
        ):
            continue
        if gender and contract.customer_gender.value != gender:
            continue
        if not _in_range(contract.signing_date, filters.signing_date_from, filters.signing_date_to):
            continue
        if not _in_range(
            contract.delivery_date, filters.delivery_date_from, filters.delivery_date_to
        ):
            continue
        matched.append(contract)
    return matched
