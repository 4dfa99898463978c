"""Command line entry point."""

from __future__ import annotations

import argparse
import getpass
import sys
from dataclasses import replace
from decimal import Decimal
from pathlib import Path

from salesdesk_app.core.container import build_container
from salesdesk_app.core.crypto import mask_id_number
from salesdesk_app.models.contract import PROMOTION_FLAGS, Contract
from salesdesk_app.models.vehicle import DEFAULT_VEHICLE, VEHICLE_DATA
from salesdesk_app.services.contract_query import ContractFilters, filter_contracts, payment_summary
from salesdesk_app.services.pricing import compute_discount
from salesdesk_app.services.promotions import apply_vehicle_selection, toggle_promotion


def _money(value: Decimal) -> str:
    return f"{value:,.0f}"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="salesdesk", description="Vehicle sales contract desk.")
    parser.add_argument("--config", default=None, help="Path to the YAML configuration file.")
    commands = parser.add_subparsers(dest="command", required=True)

    quote = commands.add_parser("quote", help="Print the price breakdown for a model.")
    quote.add_argument(
        "--model",
        default=DEFAULT_VEHICLE.name,
        choices=[vehicle.name for vehicle in VEHICLE_DATA],
    )
    quote.add_argument(
        "--promo",
        action="append",
        default=[],
        choices=sorted(PROMOTION_FLAGS),
        help="Promotion flag to enable; repeatable.",
    )
    quote.add_argument("--salesperson-discount", default="0")
    quote.add_argument("--company-discount", default="0")

    contracts = commands.add_parser("contracts", help="Sign in and list visible contracts.")
    contracts.add_argument("--email", required=True)
    contracts.add_argument("--search", default="", help="Free-text search over all fields.")
    contracts.add_argument("--vehicle-type", default="")
    contracts.add_argument("--year", default="", help="Production year.")
    contracts.add_argument("--signed-from", default="", help="YYYY-MM-DD")
    contracts.add_argument("--signed-to", default="", help="YYYY-MM-DD")
    return parser


def _quote(args: argparse.Namespace) -> int:
    try:
        contract = replace(
            apply_vehicle_selection(Contract(), args.model),
            salesperson_discount=Decimal(args.salesperson_discount),
            company_discount=Decimal(args.company_discount),
        )
        for flag in args.promo:
            contract = toggle_promotion(contract, flag, True)
        breakdown = compute_discount(contract)
    except (ValueError, ArithmeticError) as error:
        print(f"[ERROR] {error}", file=sys.stderr)
        return 2

    print(f"{args.model}: {_money(breakdown.selling_price)}")
    for promotion in breakdown.applied:
        print(f"  - {promotion.label}: {_money(promotion.amount)}")
    print(f"Tổng giảm giá: {_money(breakdown.total_discount)}")
    print(f"Giá cuối cùng: {_money(breakdown.final_price)}")
    return 0


def _contracts(args: argparse.Namespace) -> int:
    container = build_container(config_path=Path(args.config) if args.config else None)
    session = container.session
    session.start()
    try:
        password = getpass.getpass("Mật khẩu: ")
        if not session.login(args.email, password) or session.current_user is None:
            print(f"[ERROR] {session.auth_error or 'Đăng nhập thất bại.'}", file=sys.stderr)
            return 1

        filters = ContractFilters(
            search_term=args.search,
            vehicle_type=args.vehicle_type,
            vehicle_production_year=args.year,
            signing_date_from=args.signed_from,
            signing_date_to=args.signed_to,
        )
        for contract in filter_contracts(container.contract_service.contracts(), filters):
            summary = payment_summary(contract)
            print(
                f"{contract.contract_number}\t{contract.customer_name}\t"
                f"{mask_id_number(contract.customer_id_number)}\t{contract.vehicle_type}\t"
                f"{_money(contract.final_price)}\t{summary.paid_ratio}%"
            )
        return 0
    finally:
        session.shutdown()
        container.pool.close_connection()


def run(argv: list[str] | None = None) -> None:
    """Parse arguments and dispatch the selected command."""
    args = _build_parser().parse_args(argv)
    if args.command == "quote":
        sys.exit(_quote(args))
    sys.exit(_contracts(args))


if __name__ == "__main__":
    run()
