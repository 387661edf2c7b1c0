"""Tests for the chat-share renderers."""

from urllib.parse import unquote

from conferente.models import WeighingRecord
from conferente.report import aggregate
from conferente.share import (
    WHATSAPP_URL,
    build_share_text,
    build_ticket_summary,
    build_whatsapp_url,
)


def _records():
    base = dict(gross_weight_kg=0.0, tare_kg=0.0, box_quantity=1, timestamp_ms=0)
    return [
        WeighingRecord(supplier="Acme", product="Box-A", target_weight_kg=100.0,
                       net_weight_kg=102.5, **base),
        WeighingRecord(supplier="Beta", product="Saco", target_weight_kg=0.0,
                       net_weight_kg=20.0, **base),
    ]


def test_share_text():
    text = build_share_text(aggregate(_records()), "Hoje")
    lines = text.splitlines()

    assert lines[0] == "*Relatório Conferente (Hoje)*"
    assert "📦 *Acme* - Box-A" in lines
    assert "   Líquido: 102.50kg | Nota: 100.00kg" in lines
    assert "   Dif: +2.50kg (Sobra)" in lines
    assert "   Líquido: 20.00kg | Nota: ---" in lines
    assert lines[-1] == "Itens: 2 | Total Líquido: 122.50kg"


def test_share_text_omits_diff_without_target():
    text = build_share_text(aggregate(_records()[1:]), "Hoje")
    assert "Dif:" not in text


def test_whatsapp_url():
    report = aggregate(_records())
    url = build_whatsapp_url(report, "Esta Semana")
    assert url.startswith(WHATSAPP_URL)
    assert unquote(url[len(WHATSAPP_URL):]) == build_share_text(report, "Esta Semana")


def test_ticket_summary():
    summary = build_ticket_summary(aggregate(_records()))
    assert summary == "Relatório Conferente\nItens: 2\nTotal Liq: 122.50kg"


def test_whatsapp_url_encodes_slashes():
    record = WeighingRecord(
        supplier="Acme/Filial", product="Box-A", target_weight_kg=0.0,
        gross_weight_kg=0.0, tare_kg=0.0, net_weight_kg=1.0, box_quantity=1,
        timestamp_ms=0,
    )
    url = build_whatsapp_url(aggregate([record]), "Hoje")
    encoded = url[len(WHATSAPP_URL):]
    assert "/" not in encoded
    assert "Acme%2FFilial" in encoded
