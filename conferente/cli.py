"""CLI entry point for the check-in weighing tools."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import tempfile
from dataclasses import asdict
from pathlib import Path

from .config import ConferenteConfig, load_config
from .db import WINDOWS, TareMemoryDB, WeighingRecordDB, load_mapping_file
from .report import PERIOD_LABELS, Report, aggregate
from .session import CheckinSession, RegistrationError, clear_history
from .share import build_share_text, build_ticket_summary, build_whatsapp_url
from .tare import TARE_MODES


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="conferente",
        description="Conferente: pesagem de recebimento com memória de taras",
    )
    parser.add_argument(
        "--config", "-c", type=str, default=None, help="Arquivo de configuração (TOML)"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Mostrar mensagens de depuração"
    )

    sub = parser.add_subparsers(dest="command")

    # pesar
    weigh = sub.add_parser("pesar", help="Registrar uma pesagem")
    weigh.add_argument("--fornecedor", required=True)
    weigh.add_argument("--produto", default="", help="Sugerido pela memória se omitido")
    weigh.add_argument("--bruto", required=True, help="Peso bruto (kg)")
    weigh.add_argument("--nota", default="", help="Peso da nota fiscal (kg)")
    weigh.add_argument(
        "--tara-g", default=None,
        help='Tara unitária em gramas; várias leituras são promediadas ("1500 1520")',
    )
    weigh.add_argument("--caixas", default="1", help="Quantidade de caixas")
    weigh.add_argument("--embalagem-g", default=None, help="Tara da embalagem (g)")
    weigh.add_argument("--embalagens", default=None, help="Quantidade de embalagens")
    weigh.add_argument("--modo", choices=TARE_MODES, default="auto")
    weigh.add_argument("--foto", type=str, default=None, help="Imagem de evidência")
    weigh.add_argument("--camera", action="store_true", help="Fotografar com a câmera")

    # prever
    predict = sub.add_parser("prever", help="Consultar a tara memorizada")
    predict.add_argument("--fornecedor", required=True)
    predict.add_argument("--produto", default="")

    # historico
    history = sub.add_parser("historico", help="Listar pesagens do período")
    history.add_argument("--periodo", choices=(*WINDOWS, "all"), default="day")
    history.add_argument("--json", action="store_true", help="Saída em JSON")

    # ticket
    sub.add_parser("ticket", help="Resumo do ticket (todo o histórico)")

    # exportar
    export = sub.add_parser("exportar", help="Exportar relatório")
    export.add_argument("--periodo", choices=(*WINDOWS, "all"), default="day")
    export.add_argument(
        "--xlsx", nargs="?", const="", default=None, metavar="ARQUIVO",
        help="Planilha Excel (sem ARQUIVO: pasta de exportação configurada)",
    )
    export.add_argument("--pdf", type=str, default=None, metavar="ARQUIVO")
    export.add_argument("--ticket-pdf", type=str, default=None, metavar="ARQUIVO")
    export.add_argument("--whatsapp", action="store_true", help="Gerar link do WhatsApp")
    export.add_argument(
        "--imprimir", action="store_true", help="Imprimir o ticket na impressora padrão"
    )
    export.add_argument("--impressora", type=str, default=None)

    # limpar
    clear = sub.add_parser("limpar", help="Apagar todo o histórico")
    clear.add_argument("--sim", action="store_true", help="Não pedir confirmação")

    # importar-taras
    imp = sub.add_parser("importar-taras", help="Importar memória de taras (JSON)")
    imp.add_argument("arquivo", type=str)

    # impressoras
    sub.add_parser("impressoras", help="Listar impressoras disponíveis")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    match args.command:
        case "pesar":
            _cmd_weigh(config, args)
        case "prever":
            _cmd_predict(config, args)
        case "historico":
            _cmd_history(config, args)
        case "ticket":
            _cmd_ticket(config)
        case "exportar":
            _cmd_export(config, args)
        case "limpar":
            _cmd_clear(config, args)
        case "importar-taras":
            _cmd_import(config, args)
        case "impressoras":
            _cmd_printers()


def _load_records(config: ConferenteConfig, window: str) -> list:
    db = WeighingRecordDB(config.storage.db_path)
    try:
        if window == "all":
            return db.query_all()
        return db.query_window(window=window)
    finally:
        db.close()


def _attach_photo(config: ConferenteConfig, args) -> str | None:
    if not (args.foto or args.camera):
        return None

    from .camera import PhotoCapture

    capture = PhotoCapture(
        config.camera.index,
        max_width=config.camera.max_width,
        jpeg_quality=config.camera.jpeg_quality,
        timestamp_overlay=config.camera.timestamp_overlay,
    )
    try:
        if args.foto:
            return capture.encode_file(args.foto)
        return capture.capture()
    except ImportError as e:
        print(f"Foto ignorada: {e}", file=sys.stderr)
        return None


def _cmd_weigh(config: ConferenteConfig, args) -> None:
    memory = TareMemoryDB(config.storage.db_path)
    records = WeighingRecordDB(config.storage.db_path)
    session = CheckinSession(memory, records)

    try:
        session.set_mode(args.modo)
        session.supplier = args.fornecedor
        session.product = args.produto
        session.target_text = args.nota
        session.set_gross_text(args.bruto)
        session.set_box_quantity_text(args.caixas)

        prediction = session.supplier_entered()
        if prediction is not None:
            print(f"🧠 Tara memorizada: {prediction.product or '-'} {prediction.tare_kg * 1000:.1f} g")
        session.product_entered()

        if args.tara_g is not None:
            session.set_unit_tare_text(args.tara_g)
        if args.embalagem_g is not None:
            session.set_packaging_unit_text(args.embalagem_g)
        if args.embalagens is not None:
            session.set_packaging_quantity_text(args.embalagens)

        session.attachment = _attach_photo(config, args)

        comp = session.composition
        print(
            f"Tara total: {comp.total_tare_kg:.3f} kg "
            f"(produto {comp.product_tare_kg:.3f} + embalagem {comp.packaging_tare_kg:.3f})"
        )
        print(f"Líquido:    {comp.net_kg:.2f} kg")

        try:
            outcome = session.register()
        except RegistrationError as e:
            print(str(e), file=sys.stderr)
            sys.exit(1)

        if not outcome.saved:
            print("Erro ao salvar", file=sys.stderr)
            sys.exit(1)
        if not outcome.learned:
            print("Aviso: a tara não foi memorizada.", file=sys.stderr)
        print("✅ Pesagem registrada!")
        row = aggregate([outcome.record]).rows[0]
        if row.status:
            print(f"   Dif: {row.diff_kg:+.2f} kg ({row.status})")
    finally:
        memory.close()
        records.close()


def _cmd_predict(config: ConferenteConfig, args) -> None:
    memory = TareMemoryDB(config.storage.db_path)
    try:
        if args.produto:
            tare = memory.predict(args.fornecedor, args.produto)
            if tare is None:
                print("Nenhuma tara memorizada.")
                return
            print(f"{args.fornecedor} / {args.produto}: {tare * 1000:.1f} g")
            return

        prediction = memory.predict_for_supplier(args.fornecedor)
        if prediction is None:
            print("Nenhuma tara memorizada.")
            return
        print(
            f"{args.fornecedor} / {prediction.product or '-'}: "
            f"{prediction.tare_kg * 1000:.1f} g"
        )
    finally:
        memory.close()


def _print_report(report: Report, label: str) -> None:
    print(f"Histórico ({label}): {report.count} registros")
    for row in report.rows:
        diff = f"{row.diff_kg:+.2f}" if row.diff_kg is not None else "  ---"
        photo = " 📷" if row.has_photo else ""
        print(
            f"  {row.date} {row.time[:5]}  {row.supplier:<16} {row.product:<16} "
            f"líq {row.net_weight_kg:8.2f}  dif {diff} {row.status or ''}{photo}"
        )
    print(f"Total líquido: {report.total_net_kg:.2f} kg")


def _cmd_history(config: ConferenteConfig, args) -> None:
    report = aggregate(_load_records(config, args.periodo))
    label = PERIOD_LABELS[args.periodo]

    if args.json:
        data = {
            "periodo": label,
            "total_liquido_kg": round(report.total_net_kg, 3),
            "registros": report.count,
            "linhas": [asdict(row) for row in report.rows],
        }
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return

    if not report.rows:
        print("Nenhum registro neste período")
        return
    _print_report(report, label)


def _cmd_ticket(config: ConferenteConfig) -> None:
    report = aggregate(_load_records(config, "all"))
    if not report.rows:
        print("Nenhum registro para gerar ticket")
        return
    print(build_ticket_summary(report))


def _cmd_export(config: ConferenteConfig, args) -> None:
    report = aggregate(_load_records(config, args.periodo))
    label = PERIOD_LABELS[args.periodo]
    if not report.rows:
        print("Nenhum registro neste período")
        return

    if args.whatsapp:
        print(build_share_text(report, label))
        print()
        print(build_whatsapp_url(report, label))

    if args.xlsx is not None:
        from .spreadsheet import default_export_name, export_xlsx

        target = args.xlsx or (
            Path(config.export.output_dir).expanduser()
            / default_export_name(args.periodo)
        )
        try:
            path = export_xlsx(report, target, sheet_name=config.export.sheet_name)
            print(f"📊 Planilha salva: {path}")
        except ImportError as e:
            print(f"Erro na planilha: {e}", file=sys.stderr)

    if args.pdf:
        from .pdf import generate_report_pdf

        try:
            path = generate_report_pdf(report, label, args.pdf)
            print(f"📄 PDF salvo: {path}")
        except ImportError as e:
            print(f"Erro no PDF: {e}", file=sys.stderr)

    needs_ticket = args.ticket_pdf or args.imprimir or args.impressora
    if not needs_ticket:
        return

    from .pdf import generate_ticket_pdf

    if args.ticket_pdf:
        ticket_path = Path(args.ticket_pdf)
    else:
        fd, name = tempfile.mkstemp(suffix=".pdf", prefix="ticket_")
        os.close(fd)
        ticket_path = Path(name)

    try:
        try:
            generate_ticket_pdf(report, ticket_path)
        except ImportError as e:
            print(f"Erro no ticket: {e}", file=sys.stderr)
            return
        if args.ticket_pdf:
            print(f"🧾 Ticket salvo: {ticket_path}")

        if args.imprimir or args.impressora:
            from .printer import Printer

            printer_name = args.impressora or config.printer.printer_name or None
            try:
                Printer.print_file(ticket_path, printer_name=printer_name)
                print(f"🖨  Enviado para {printer_name or 'impressora padrão'}")
            except (RuntimeError, FileNotFoundError) as e:
                print(f"Erro de impressão: {e}", file=sys.stderr)
    finally:
        if not args.ticket_pdf and ticket_path.exists():
            ticket_path.unlink()


def _confirm_prompt(message: str) -> bool:
    print(message)
    try:
        answer = input("Digite 'sim' para confirmar: ")
    except EOFError:
        return False
    return answer.strip().lower() in ("sim", "s")


def _cmd_clear(config: ConferenteConfig, args) -> None:
    records = WeighingRecordDB(config.storage.db_path)
    try:
        confirm = (lambda _msg: True) if args.sim else _confirm_prompt
        if clear_history(records, confirm):
            print("Histórico apagado.")
        else:
            print("Nada foi apagado.")
    finally:
        records.close()


def _cmd_import(config: ConferenteConfig, args) -> None:
    mapping = load_mapping_file(args.arquivo)
    memory = TareMemoryDB(config.storage.db_path)
    try:
        count = memory.import_mapping(mapping)
    finally:
        memory.close()
    print(f"{count} taras importadas.")


def _cmd_printers() -> None:
    from .printer import Printer

    try:
        printers = Printer.list_printers()
    except RuntimeError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    if not printers:
        print("Nenhuma impressora encontrada.")
        return
    print(f"Impressoras disponíveis: {len(printers)}")
    for p in printers:
        default_mark = " (padrão)" if p.is_default else ""
        print(f"  {p.name}{default_mark}")
