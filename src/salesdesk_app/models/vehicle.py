"""Vehicle catalog."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Vehicle:
    """Catalog entry for one sellable model."""

    id: str
    name: str
    price: int
    colors: tuple[str, ...]


ALL_VEHICLE_COLORS: tuple[str, ...] = (
    "Trắng",
    "Đen",
    "Đỏ",
    "Xanh lá nhạt",
    "Xanh dương",
    "Hồng Phấn",
    "Hồng tím",
    "Vàng",
    "Xám mới",
    "Xám cũ",
    "Bạc",
    "Cam",
)

VEHICLE_DATA: tuple[Vehicle, ...] = (
    Vehicle("VF3", "VF3", 299_000_000, ALL_VEHICLE_COLORS),
    Vehicle("VF3_NANGCAO", "VF3 nâng cao", 307_000_000, ALL_VEHICLE_COLORS),
    Vehicle("VF5PLUS", "VF5 PLUS", 529_000_000, ALL_VEHICLE_COLORS),
    Vehicle("VF5PLUS_NANGCAO", "VF5 PLUS Nâng cao", 529_000_000, ALL_VEHICLE_COLORS),
    Vehicle("VF6ECO", "VF6 ECO", 689_000_000, ALL_VEHICLE_COLORS),
    Vehicle("VF6PLUS", "VF6 PLUS", 749_000_000, ALL_VEHICLE_COLORS),
    Vehicle("VF7ECO_1CAU", "VF7 ECO 1 CẦU", 799_000_000, ALL_VEHICLE_COLORS),
    Vehicle("VF7PLUS_TRANTHEP", "VF7 PLUS TRẦN THÉP", 949_000_000, ALL_VEHICLE_COLORS),
    Vehicle("VF7PLUS_TRANKINH", "VF7 PLUS TRẦN KÍNH", 969_000_000, ALL_VEHICLE_COLORS),
    Vehicle("VF8ECO_SLUX", "VF8 ECO (S Lux)", 1_019_000_000, ALL_VEHICLE_COLORS),
    Vehicle("VF8PLUS", "VF8 Plus", 1_199_000_000, ALL_VEHICLE_COLORS),
    Vehicle("VF9ECO_7CHO", "VF9 ECO 7 CHỖ", 1_499_000_000, ALL_VEHICLE_COLORS),
    Vehicle("VF9PLUS_7CHO", "VF9 PLUS 7 CHỖ", 1_699_000_000, ALL_VEHICLE_COLORS),
    Vehicle("VF9PLUS_6CHO", "VF9 PLUS 6 CHỖ", 1_731_000_000, ALL_VEHICLE_COLORS),
    Vehicle("HERIO", "HERIO", 499_000_000, ALL_VEHICLE_COLORS),
    Vehicle("LIMOGREEN", "LIMOGREEN", 749_000_000, ALL_VEHICLE_COLORS),
)

DEFAULT_VEHICLE = VEHICLE_DATA[0]

VF3_MODELS = frozenset({"VF3", "VF3 nâng cao"})
VF5_MODELS = frozenset({"VF5 PLUS", "VF5 PLUS Nâng cao"})


def find_vehicle(name: str) -> Vehicle | None:
    """Look up a catalog entry by its display name."""
    for vehicle in VEHICLE_DATA:
        if vehicle.name == name:
            return vehicle
    return None
