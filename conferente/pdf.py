"""PDF rendering of the history report and the printable ticket using ReportLab."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from xml.sax.saxutils import escape

from .report import Report, ReportRow

# 80 mm thermal roll
TICKET_WIDTH_MM = 80


def _import_reportlab():
    try:
        import reportlab  # noqa: F401
    except ImportError:
        raise ImportError(
            "reportlab é necessário: pip install reportlab"
        ) from None


def _signed(value: float) -> str:
    return f"{'+' if value > 0 else ''}{value:.2f}"


def generate_report_pdf(
    report: Report, period_label: str, output_path: str | Path
) -> Path:
    """Render the history report as an A4 table with totals.

    Returns:
        Path to the generated PDF file.

    Raises:
        ImportError: If reportlab is not installed.
    """
    _import_reportlab()
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4, landscape
    from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
    from reportlab.lib.units import mm
    from reportlab.platypus import (
        Paragraph,
        SimpleDocTemplate,
        Spacer,
        Table,
        TableStyle,
    )

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=landscape(A4),
        leftMargin=12 * mm,
        rightMargin=12 * mm,
        topMargin=12 * mm,
        bottomMargin=12 * mm,
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "Title_Report", parent=styles["Title"], fontSize=18, leading=24
    )
    subtitle_style = ParagraphStyle(
        "Subtitle_Report",
        parent=styles["Normal"],
        fontSize=10,
        leading=14,
        textColor=colors.grey,
    )
    total_style = ParagraphStyle(
        "Total_Report", parent=styles["Heading3"], fontSize=12, leading=16
    )

    elements: list = [
        Paragraph(f"Relatório Conferente ({escape(period_label)})", title_style),
        Paragraph(
            f"Gerado em {datetime.now().strftime('%d/%m/%Y %H:%M')}", subtitle_style
        ),
        Spacer(1, 5 * mm),
    ]

    table_data = [[
        "Data", "Hora", "Fornecedor", "Produto", "Nota", "Bruto",
        "Tara", "Cx", "Líquido", "Dif.", "Status", "Foto",
    ]]
    for row in report.rows:
        table_data.append([
            row.date,
            row.time[:5],
            Paragraph(escape(row.supplier), styles["BodyText"]),
            Paragraph(escape(row.product), styles["BodyText"]),
            f"{row.target_weight_kg:.2f}" if row.target_weight_kg > 0 else "---",
            f"{row.gross_weight_kg:.2f}",
            f"{row.tare_kg:.3f}",
            str(row.box_quantity),
            f"{row.net_weight_kg:.2f}",
            _signed(row.diff_kg) if row.diff_kg is not None else "",
            row.status or "",
            "Sim" if row.has_photo else "Não",
        ])

    table_style = TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2E5E4E")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("ALIGN", (4, 1), (9, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F2F5F3")]),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ])
    for i, row in enumerate(report.rows, 1):
        if row.status == "Falta":
            table_style.add("TEXTCOLOR", (9, i), (10, i), colors.HexColor("#B3261E"))
        elif row.status == "Sobra":
            table_style.add("TEXTCOLOR", (9, i), (10, i), colors.HexColor("#1B7F4B"))

    col_widths = [
        20 * mm, 14 * mm, 50 * mm, 50 * mm, 18 * mm, 18 * mm,
        18 * mm, 10 * mm, 20 * mm, 18 * mm, 16 * mm, 12 * mm,
    ]
    t = Table(table_data, colWidths=col_widths, repeatRows=1)
    t.setStyle(table_style)
    elements.append(t)

    elements.append(Spacer(1, 6 * mm))
    elements.append(Paragraph(f"Registros: {report.count}", total_style))
    elements.append(
        Paragraph(f"Total Líquido: {report.total_net_kg:.2f} kg", total_style)
    )

    doc.build(elements)
    return output_path


def _ticket_item(row: ReportRow, number: int) -> list[tuple[str, str, str]]:
    """(left, right, style) lines for one ticket item."""
    target = f"{row.target_weight_kg:.2f}" if row.target_weight_kg > 0 else "---"
    diff = _signed(row.diff_kg) if row.diff_kg is not None else "---"
    return [
        (f"ITEM #{number:03d}", row.time, "bold"),
        (row.supplier.upper(), "", "inverse"),
        (row.product.upper(), "", "inverse"),
        ("PESO BRUTO", f"{row.gross_weight_kg:.2f} kg", "normal"),
        (f"TARA ({row.box_quantity}cx)", f"{row.tare_kg:.3f} kg", "normal"),
        ("LÍQUIDO", f"{row.net_weight_kg:.2f} kg", "bold"),
        (f"NOTA: {target}", f"DIF: {diff}", "small"),
    ]


def generate_ticket_pdf(report: Report, output_path: str | Path) -> Path:
    """Render the weighing ticket on an 80 mm roll.

    Items are numbered from the oldest (#001) so the newest, printed first,
    carries the highest number.

    Raises:
        ImportError: If reportlab is not installed.
    """
    _import_reportlab()
    from reportlab.lib.units import mm
    from reportlab.pdfgen import canvas

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    width = TICKET_WIDTH_MM * mm
    margin = 4 * mm
    line_h = 4.2 * mm

    lines: list[tuple[str, str, str]] = []
    for index, row in enumerate(report.rows):
        lines.extend(_ticket_item(row, report.count - index))
        lines.append(("", "", "separator"))

    header_h = 26 * mm
    footer_h = 22 * mm
    height = header_h + footer_h + len(lines) * line_h

    c = canvas.Canvas(str(output_path), pagesize=(width, height))
    y = height - margin - 6 * mm

    c.setFont("Courier-Bold", 14)
    c.drawCentredString(width / 2, y, "CONFERENTE")
    y -= 5 * mm
    c.setFont("Courier", 8)
    c.drawCentredString(width / 2, y, "RELATÓRIO DE PESAGEM")
    y -= 4 * mm
    c.drawCentredString(width / 2, y, datetime.now().strftime("%d/%m/%Y %H:%M:%S"))
    y -= 3 * mm
    c.setDash(2, 2)
    c.line(margin, y, width - margin, y)
    c.setDash()
    y -= 6 * mm

    for left, right, style in lines:
        if style == "separator":
            c.setDash(1, 2)
            c.line(margin, y + line_h / 2, width - margin, y + line_h / 2)
            c.setDash()
        elif style == "inverse":
            c.rect(margin, y - 1.2 * mm, width - 2 * margin, line_h, stroke=0, fill=1)
            c.setFillGray(1)
            c.setFont("Courier-Bold", 8)
            c.drawString(margin + 1.5 * mm, y, left[:40])
            c.setFillGray(0)
        else:
            font = "Courier-Bold" if style == "bold" else "Courier"
            size = 7 if style == "small" else 9
            c.setFont(font, size)
            c.drawString(margin, y, left)
            c.drawRightString(width - margin, y, right)
        y -= line_h

    y -= 2 * mm
    c.setLineWidth(1.5)
    c.line(margin, y + line_h, width - margin, y + line_h)
    c.setLineWidth(1)
    c.setFont("Courier-Bold", 9)
    c.drawString(margin, y, "ITENS CONFERIDOS")
    c.drawRightString(width - margin, y, str(report.count))
    y -= line_h + 1 * mm
    c.setFont("Courier-Bold", 11)
    c.drawString(margin, y, "TOTAL LÍQUIDO")
    c.drawRightString(width - margin, y, f"{report.total_net_kg:.2f} kg")
    y -= line_h * 2
    c.setFont("Courier", 7)
    c.drawCentredString(width / 2, y, "*** Fim do Relatório ***")

    c.showPage()
    c.save()
    return output_path
