"""Append-only log of completed weighings."""

from __future__ import annotations

import logging
import sqlite3
import uuid
from dataclasses import replace
from datetime import datetime, timedelta
from pathlib import Path

from ..models import WeighingRecord
from .schema import ensure_schema

logger = logging.getLogger(__name__)

WINDOWS: tuple[str, ...] = ("day", "week", "month", "year")


def window_start(now: datetime, window: str) -> datetime:
    """Start of the period containing ``now``, in local time.

    day: midnight today. week: midnight of the most recent Sunday (today if
    today is Sunday). month: the 1st. year: January 1st.

    Raises:
        ValueError: If ``window`` is not one of WINDOWS.
    """
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    match window:
        case "day":
            return midnight
        case "week":
            # weekday(): Monday=0 ... Sunday=6
            return midnight - timedelta(days=(now.weekday() + 1) % 7)
        case "month":
            return midnight.replace(day=1)
        case "year":
            return midnight.replace(month=1, day=1)
    raise ValueError(f"Período desconhecido: {window!r}")


def _to_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _row_to_record(row: sqlite3.Row) -> WeighingRecord | None:
    try:
        return WeighingRecord(
            id=row["record_id"],
            supplier=row["supplier"] or "",
            product=row["product"] or "",
            target_weight_kg=float(row["target_weight_kg"] or 0.0),
            gross_weight_kg=float(row["gross_weight_kg"]),
            tare_kg=float(row["tare_kg"] or 0.0),
            net_weight_kg=float(row["net_weight_kg"]),
            box_quantity=int(row["box_quantity"] or 0),
            timestamp_ms=int(row["timestamp_ms"]),
            attachment=row["photo_data"] or None,
        )
    except (TypeError, ValueError) as e:
        logger.warning("Registro ilegível ignorado (%s): %s", row["record_id"], e)
        return None


class WeighingRecordDB:
    """Manages the weighing_records table."""

    def __init__(self, db_path: str | Path = "~/.config/conferente/conferente.db") -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def append(self, record: WeighingRecord) -> str | None:
        """Persist a weighing, assigning an id if it has none.

        Returns:
            The record id, or None if the write failed.
        """
        if not record.id:
            record = replace(record, id=uuid.uuid4().hex)

        try:
            conn = self._get_conn()
            conn.execute(
                """INSERT INTO weighing_records
                   (record_id, supplier, product, target_weight_kg,
                    gross_weight_kg, tare_kg, net_weight_kg, box_quantity,
                    timestamp_ms, photo_data)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    record.id,
                    record.supplier,
                    record.product,
                    float(record.target_weight_kg),
                    float(record.gross_weight_kg),
                    float(record.tare_kg),
                    float(record.net_weight_kg),
                    int(record.box_quantity),
                    int(record.timestamp_ms),
                    record.attachment,
                ),
            )
            conn.commit()
        except (sqlite3.Error, OSError) as e:
            logger.warning("Falha ao salvar pesagem %s: %s", record.id, e)
            return None

        logger.info(
            "Pesagem registrada: %s / %s líquido %.2f kg",
            record.supplier,
            record.product,
            record.net_weight_kg,
        )
        return record.id

    def _select(self, where: str = "", params: tuple = ()) -> list[WeighingRecord]:
        try:
            conn = self._get_conn()
            rows = conn.execute(
                f"SELECT * FROM weighing_records {where} ORDER BY seq DESC",
                params,
            ).fetchall()
        except (sqlite3.Error, OSError) as e:
            logger.warning("Histórico de pesagens ilegível: %s", e)
            return []

        records = []
        for row in rows:
            record = _row_to_record(row)
            if record is not None:
                records.append(record)
        return records

    def query_all(self) -> list[WeighingRecord]:
        """Return every record, newest first."""
        return self._select()

    def query_window(
        self, now: datetime | None = None, window: str = "day"
    ) -> list[WeighingRecord]:
        """Return records captured since the start of the given period."""
        start = window_start(now or datetime.now(), window)
        return self._select("WHERE timestamp_ms >= ?", (_to_ms(start),))

    def get(self, record_id: str) -> WeighingRecord | None:
        """Look up a single record by id."""
        found = self._select("WHERE record_id = ?", (record_id,))
        return found[0] if found else None

    def clear_all(self) -> bool:
        """Irreversibly delete every record."""
        try:
            conn = self._get_conn()
            cur = conn.execute("DELETE FROM weighing_records")
            conn.commit()
        except (sqlite3.Error, OSError) as e:
            logger.warning("Falha ao apagar histórico: %s", e)
            return False
        logger.info("Histórico apagado (%d registros)", cur.rowcount)
        return True
