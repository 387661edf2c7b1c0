"""Excel export of the weighing report using openpyxl."""

from __future__ import annotations

from pathlib import Path

from .report import Report

HEADERS = [
    "Data",
    "Hora",
    "Fornecedor",
    "Produto",
    "Peso Nota (kg)",
    "Peso Bruto (kg)",
    "Tara (kg)",
    "Qtd Cx",
    "Peso Líquido (kg)",
    "Diferença (kg)",
    "Status",
    "Com Foto",
]


def default_export_name(window: str, suffix: str = ".xlsx") -> str:
    return f"Conferente_Relatorio_{window}{suffix}"


def export_xlsx(
    report: Report,
    output_path: str | Path,
    sheet_name: str = "Relatório Conferente",
) -> Path:
    """Write one sheet with a row per weighing and a total line.

    Raises:
        ImportError: If openpyxl is not installed.
    """
    try:
        from openpyxl import Workbook
        from openpyxl.styles import Font
    except ImportError:
        raise ImportError(
            "openpyxl é necessário: pip install openpyxl"
        ) from None

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    ws = wb.active
    # Excel limits sheet titles to 31 characters
    ws.title = sheet_name[:31]

    ws.append(HEADERS)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for row in report.rows:
        ws.append([
            row.date,
            row.time,
            row.supplier,
            row.product,
            row.target_weight_kg,
            row.gross_weight_kg,
            row.tare_kg,
            row.box_quantity,
            row.net_weight_kg,
            round(row.diff_kg, 3) if row.diff_kg is not None else None,
            row.status or "",
            "Sim" if row.has_photo else "Não",
        ])

    ws.append([])
    ws.append(["Total", "", "", "", "", "", "", report.count, round(report.total_net_kg, 3)])
    ws.cell(row=ws.max_row, column=1).font = Font(bold=True)

    wb.save(str(output_path))
    return output_path
