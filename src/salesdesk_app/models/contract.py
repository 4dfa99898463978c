"""Contract domain models."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, fields
from decimal import Decimal
from enum import Enum


class PaymentMethod(str, Enum):
    OUTRIGHT = "Trả thẳng"
    INSTALLMENT = "Trả góp"


class Gender(str, Enum):
    MALE = "Nam"
    FEMALE = "Nữ"
    OTHER = "Khác"


ZERO = Decimal("0")

DRAFT_ID_PREFIX = "draft-"

BUSINESS_KEY_FIELDS = ("contract_number", "vehicle_vin", "vehicle_engine_number")

MONEY_FIELDS = frozenset(
    {
        "selling_price",
        "salesperson_discount",
        "company_discount",
        "total_discount",
        "final_price",
        "payment1",
        "payment2",
        "payment3",
    }
)

DATE_FIELDS = frozenset(
    {
        "signing_date",
        "delivery_date",
        "customer_date_of_birth",
        "customer_id_issue_date",
        "payment1_date",
        "payment2_date",
        "payment3_date",
    }
)

PROMOTION_FLAGS = frozenset(
    {
        "promo_4percent",
        "promo_3percent",
        "promo_vf3_social",
        "promo_insurance",
        "promo_vf3_fixed",
        "promo_vf5_fixed",
    }
)

FIELD_LABELS = {
    "contract_number": "Số hợp đồng",
    "signing_date": "Ngày ký",
    "delivery_date": "Ngày giao xe",
    "customer_name": "Họ và tên/Tên công ty",
    "customer_phone": "Điện thoại",
    "customer_date_of_birth": "Ngày sinh",
    "customer_gender": "Giới tính",
    "customer_id_number": "Số CMND/ĐKKD",
    "customer_id_issue_date": "Ngày cấp",
    "customer_id_issue_place": "Nơi cấp",
    "customer_address": "Địa chỉ",
    "vehicle_type": "Model",
    "vehicle_color": "Màu sắc",
    "vehicle_production_year": "Năm sản xuất",
    "vehicle_vin": "Số khung",
    "vehicle_engine_number": "Số máy",
    "payment_method": "Hình thức mua",
    "selling_price": "Giá niêm yết",
    "salesperson_discount": "Giảm giá vào hoa hồng TVBH",
    "company_discount": "Giảm giá từ công ty",
    "total_discount": "Tổng giảm giá",
    "final_price": "Giá cuối cùng",
    "payment1": "Tiền L1",
    "payment1_date": "Ngày L1",
    "payment2": "Tiền L2",
    "payment2_date": "Ngày L2",
    "payment3": "Tiền L3",
    "payment3_date": "Ngày L3",
}

DERIVED_FIELDS = frozenset({"total_discount", "final_price"})
OWNERSHIP_FIELDS = frozenset({"id", "salesperson_id", "salesperson_name"})


@dataclass(frozen=True)
class Contract:
    """Vehicle purchase contract.

    ``id`` is assigned by storage; unsaved drafts carry a ``draft-`` id.
    Dates are ISO ``YYYY-MM-DD`` strings, empty when unknown.
    """

    id: str = ""
    contract_number: str = ""
    signing_date: str = ""
    delivery_date: str = ""

    salesperson_id: str = ""
    salesperson_name: str = ""

    customer_name: str = ""
    customer_phone: str = ""
    customer_date_of_birth: str = ""
    customer_gender: Gender = Gender.MALE
    customer_id_number: str = ""
    customer_id_issue_date: str = ""
    customer_id_issue_place: str = ""
    customer_address: str = ""

    vehicle_type: str = ""
    vehicle_color: str = ""
    vehicle_production_year: int = 0
    vehicle_vin: str = ""
    vehicle_engine_number: str = ""

    payment_method: PaymentMethod = PaymentMethod.OUTRIGHT
    selling_price: Decimal = ZERO

    promo_4percent: bool = False
    promo_3percent: bool = False
    promo_vf3_social: bool = False
    promo_insurance: bool = False
    promo_vf3_fixed: bool = False
    promo_vf5_fixed: bool = False
    salesperson_discount: Decimal = ZERO
    company_discount: Decimal = ZERO
    total_discount: Decimal = ZERO
    final_price: Decimal = ZERO

    payment1: Decimal = ZERO
    payment1_date: str = ""
    payment2: Decimal = ZERO
    payment2_date: str = ""
    payment3: Decimal = ZERO
    payment3_date: str = ""

    @property
    def is_draft(self) -> bool:
        return not self.id or self.id.startswith(DRAFT_ID_PREFIX)


CONTRACT_FIELDS = tuple(field.name for field in fields(Contract))


def new_draft_id() -> str:
    """Return a temporary id for an unsaved contract."""
    return f"{DRAFT_ID_PREFIX}{uuid.uuid4().hex}"
