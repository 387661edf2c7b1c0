"""Plain-text report for sharing over chat (WhatsApp)."""

from __future__ import annotations

from urllib.parse import quote

from .report import Report

WHATSAPP_URL = "https://wa.me/?text="


def _signed(value: float) -> str:
    return f"{'+' if value > 0 else ''}{value:.2f}"


def build_share_text(report: Report, period_label: str) -> str:
    """Render the history report in WhatsApp markdown."""
    lines = [f"*Relatório Conferente ({period_label})*", "------------------"]
    for row in report.rows:
        target = f"{row.target_weight_kg:.2f}kg" if row.target_weight_kg > 0 else "---"
        lines.append(f"📦 *{row.supplier}* - {row.product}")
        lines.append(f"   Líquido: {row.net_weight_kg:.2f}kg | Nota: {target}")
        if row.diff_kg is not None:
            lines.append(f"   Dif: {_signed(row.diff_kg)}kg ({row.status})")
        lines.append("")
    lines.append(f"Itens: {report.count} | Total Líquido: {report.total_net_kg:.2f}kg")
    return "\n".join(lines)


def build_whatsapp_url(report: Report, period_label: str) -> str:
    return WHATSAPP_URL + quote(build_share_text(report, period_label), safe="")


def build_ticket_summary(report: Report) -> str:
    """Short summary sent from the ticket screen."""
    return (
        "Relatório Conferente\n"
        f"Itens: {report.count}\n"
        f"Total Liq: {report.total_net_kg:.2f}kg"
    )
