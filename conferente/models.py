"""Data models for weighing records and tare predictions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WeighingRecord:
    """A completed check-in weighing.

    All weights are in kilograms. ``net_weight_kg`` is the value computed at
    capture time and is never recomputed from gross and tare.
    """

    supplier: str
    product: str
    target_weight_kg: float  # 0 = no invoice weight
    gross_weight_kg: float
    tare_kg: float
    net_weight_kg: float
    box_quantity: int
    timestamp_ms: int
    attachment: str | None = None  # data:image/jpeg;base64,...
    id: str = ""

    @property
    def has_photo(self) -> bool:
        return bool(self.attachment)


@dataclass(frozen=True)
class TarePrediction:
    """A remembered unit tare for a supplier."""

    product: str  # Product name as last typed, "" for supplier-level default
    tare_kg: float
