"""Tare arithmetic: product tare × boxes + packaging tare × packages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .parsing import parse_quantity

TareMode = Literal["auto", "manual", "none"]

TARE_MODES: tuple[str, ...] = ("auto", "manual", "none")


@dataclass(frozen=True)
class TareComposition:
    unit_tare_kg: float
    box_quantity: int
    packaging_unit_tare_kg: float
    packaging_quantity: int
    gross_kg: float
    product_tare_kg: float
    packaging_tare_kg: float
    total_tare_kg: float
    net_kg: float  # may be negative when tare exceeds gross


def coerce_quantity(value: int | str | None) -> int:
    """Clamp a quantity to a non-negative integer (blank → 0)."""
    return parse_quantity(value)


def compose(
    unit_tare_kg: float,
    box_quantity: int | str | None,
    packaging_unit_tare_kg: float,
    packaging_quantity: int | str | None,
    gross_kg: float,
    mode: str = "auto",
) -> TareComposition:
    """Combine product and packaging tare and compute the net weight.

    The Tare Mode only matters for "none", which zeroes both unit tares.
    "auto" and "manual" use whatever values are set.

    Raises:
        ValueError: If ``mode`` is not a known Tare Mode.
    """
    if mode not in TARE_MODES:
        raise ValueError(f"Modo de tara desconhecido: {mode!r}")

    if mode == "none":
        unit_tare_kg = 0.0
        packaging_unit_tare_kg = 0.0

    boxes = coerce_quantity(box_quantity)
    packages = coerce_quantity(packaging_quantity)

    product_tare = unit_tare_kg * boxes
    packaging_tare = packaging_unit_tare_kg * packages
    total_tare = product_tare + packaging_tare

    return TareComposition(
        unit_tare_kg=unit_tare_kg,
        box_quantity=boxes,
        packaging_unit_tare_kg=packaging_unit_tare_kg,
        packaging_quantity=packages,
        gross_kg=gross_kg,
        product_tare_kg=product_tare,
        packaging_tare_kg=packaging_tare,
        total_tare_kg=total_tare,
        net_kg=gross_kg - total_tare,
    )
