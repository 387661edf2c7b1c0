"""Totals, variance classification and export rows for a set of weighings."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from .models import WeighingRecord

VARIANCE_TOLERANCE_KG = 0.01

STATUS_SHORT = "Falta"
STATUS_OVER = "Sobra"
STATUS_EXACT = "Exato"

PERIOD_LABELS: dict[str, str] = {
    "day": "Hoje",
    "week": "Esta Semana",
    "month": "Este Mês",
    "year": "Este Ano",
    "all": "Todo o Histórico",
}


@dataclass
class ReportRow:
    date: str  # dd/mm/yyyy, local time
    time: str  # HH:MM:SS
    supplier: str
    product: str
    target_weight_kg: float
    gross_weight_kg: float
    tare_kg: float
    net_weight_kg: float
    box_quantity: int
    diff_kg: float | None  # None when there is no invoice weight
    status: str | None
    has_photo: bool


@dataclass
class Report:
    total_net_kg: float = 0.0
    count: int = 0
    rows: list[ReportRow] = field(default_factory=list)


def classify_variance(
    net_kg: float, target_kg: float
) -> tuple[float | None, str | None]:
    """Compare a net weight with the invoice weight.

    Returns:
        (diff, status). Both are None when no target was given.
    """
    if not target_kg or target_kg <= 0:
        return (None, None)

    diff = net_kg - target_kg
    if diff < -VARIANCE_TOLERANCE_KG:
        return (diff, STATUS_SHORT)
    if diff > VARIANCE_TOLERANCE_KG:
        return (diff, STATUS_OVER)
    return (diff, STATUS_EXACT)


def to_row(record: WeighingRecord) -> ReportRow:
    moment = datetime.fromtimestamp(record.timestamp_ms / 1000)
    diff, status = classify_variance(record.net_weight_kg, record.target_weight_kg)
    return ReportRow(
        date=moment.strftime("%d/%m/%Y"),
        time=moment.strftime("%H:%M:%S"),
        supplier=record.supplier,
        product=record.product,
        target_weight_kg=record.target_weight_kg,
        gross_weight_kg=record.gross_weight_kg,
        tare_kg=record.tare_kg,
        net_weight_kg=record.net_weight_kg,
        box_quantity=record.box_quantity,
        diff_kg=diff,
        status=status,
        has_photo=record.has_photo,
    )


def aggregate(records: Iterable[WeighingRecord]) -> Report:
    """Build the export-ready report for a record set.

    The total uses each record's stored net weight.
    """
    report = Report()
    for record in records:
        report.rows.append(to_row(record))
        report.total_net_kg += record.net_weight_kg
        report.count += 1
    return report
