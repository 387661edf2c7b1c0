"""Supplier/product → tare memory learned from past weighings."""

from __future__ import annotations

import json
import logging
import math
import sqlite3
from pathlib import Path

from ..models import TarePrediction
from .schema import ensure_schema

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "|"


def normalize_key(text: str | None) -> str:
    """Fold a supplier or product name into a memory key.

    Trims, collapses whitespace runs and case-folds, so "  ACME  Ltda" and
    "acme ltda" share one entry.
    """
    if not text:
        return ""
    return " ".join(text.split()).casefold()


def load_mapping_file(path: str | Path) -> dict[str, float]:
    """Read an exported ``{"supplier|product": tare_kg}`` JSON file.

    A missing or unreadable file yields an empty mapping.
    """
    p = Path(path).expanduser()
    if not p.exists():
        return {}
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Memória de taras ilegível em %s: %s", p, e)
        return {}
    if not isinstance(raw, dict):
        logger.warning("Memória de taras em %s não é um objeto JSON", p)
        return {}
    return raw


class TareMemoryDB:
    """Manages the tare_memory table.

    The whole mapping is cached in memory on first use. Writes go to memory
    first and then through to SQLite, so a failed write only loses
    persistence, never the prediction for the current session.
    """

    def __init__(self, db_path: str | Path = "~/.config/conferente/conferente.db") -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        # (supplier_key, product_key) -> (supplier, product, tare_kg),
        # ordered from least to most recently learned.
        self._memory: dict[tuple[str, str], tuple[str, str, float]] | None = None
        self._seq = 0

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _load(self) -> dict[tuple[str, str], tuple[str, str, float]]:
        if self._memory is not None:
            return self._memory

        self._memory = {}
        try:
            conn = self._get_conn()
            rows = conn.execute(
                """SELECT supplier_key, product_key, supplier, product,
                          tare_kg, learned_seq
                   FROM tare_memory ORDER BY learned_seq"""
            ).fetchall()
        except (sqlite3.Error, OSError) as e:
            logger.warning("Memória de taras indisponível, iniciando vazia: %s", e)
            return self._memory

        for row in rows:
            try:
                tare = float(row["tare_kg"])
            except (TypeError, ValueError):
                continue
            key = (row["supplier_key"], row["product_key"] or "")
            self._memory[key] = (row["supplier"], row["product"] or "", tare)
            self._seq = max(self._seq, row["learned_seq"] or 0)
        return self._memory

    def learn(self, supplier: str, product: str, tare_kg: float) -> bool:
        """Remember the unit tare for a (supplier, product) pair.

        The previous value for the pair is overwritten, not averaged. A tare
        of 0 is a valid fact ("no tare").

        Returns:
            True if the value was persisted. False if it was rejected, or if
            it only reached the in-memory cache because the write failed.
        """
        supplier_key = normalize_key(supplier)
        product_key = normalize_key(product)
        if not supplier_key:
            return False
        if tare_kg < 0 or not math.isfinite(tare_kg):
            logger.warning("Tara inválida ignorada para %s: %r", supplier, tare_kg)
            return False

        supplier_name = " ".join(supplier.split())
        product_name = " ".join((product or "").split())

        memory = self._load()
        key = (supplier_key, product_key)
        memory.pop(key, None)
        memory[key] = (supplier_name, product_name, float(tare_kg))
        self._seq += 1

        try:
            conn = self._get_conn()
            conn.execute(
                """INSERT INTO tare_memory
                   (supplier_key, product_key, supplier, product, tare_kg, learned_seq)
                   VALUES (?, ?, ?, ?, ?, ?)
                   ON CONFLICT(supplier_key, product_key) DO UPDATE SET
                     supplier=excluded.supplier,
                     product=excluded.product,
                     tare_kg=excluded.tare_kg,
                     learned_seq=excluded.learned_seq,
                     updated_at=datetime('now', 'localtime')""",
                (
                    supplier_key,
                    product_key,
                    supplier_name,
                    product_name,
                    float(tare_kg),
                    self._seq,
                ),
            )
            conn.commit()
        except (sqlite3.Error, OSError) as e:
            logger.warning(
                "Falha ao gravar tara de %s|%s (mantida só nesta sessão): %s",
                supplier_key,
                product_key,
                e,
            )
            return False

        logger.debug("Tara aprendida %s|%s = %.3f kg", supplier_key, product_key, tare_kg)
        return True

    def predict_for_supplier(self, supplier: str) -> TarePrediction | None:
        """Return the most recently learned entry for a supplier, any product."""
        supplier_key = normalize_key(supplier)
        if not supplier_key:
            return None
        for (s_key, _), (_, product, tare) in reversed(self._load().items()):
            if s_key == supplier_key:
                return TarePrediction(product=product, tare_kg=tare)
        return None

    def predict_for_product(self, supplier: str, product: str) -> float | None:
        """Exact lookup on the normalized (supplier, product) pair."""
        entry = self._load().get((normalize_key(supplier), normalize_key(product)))
        return entry[2] if entry else None

    def predict(self, supplier: str, product: str) -> float | None:
        """Product-level tare, falling back to the supplier-level default."""
        tare = self.predict_for_product(supplier, product)
        if tare is None and normalize_key(product):
            tare = self.predict_for_product(supplier, "")
        return tare

    def export_mapping(self) -> dict[str, float]:
        """Return the memory as ``{"supplier|product": tare_kg}``."""
        return {
            f"{s_key}{KEY_SEPARATOR}{p_key}": tare
            for (s_key, p_key), (_, _, tare) in self._load().items()
        }

    def import_mapping(self, mapping: dict) -> int:
        """Learn every valid entry of an exported mapping.

        Keys without a separator, empty suppliers and non-numeric or negative
        values are skipped.

        Returns:
            Number of entries learned.
        """
        count = 0
        for key, value in mapping.items():
            if not isinstance(key, str) or KEY_SEPARATOR not in key:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                continue
            supplier, _, product = key.partition(KEY_SEPARATOR)
            if not normalize_key(supplier):
                continue
            if value < 0 or not math.isfinite(value):
                continue
            self.learn(supplier, product, float(value))
            count += 1
        logger.info("%d taras importadas", count)
        return count

    def reset(self) -> bool:
        """Forget every learned tare."""
        self._memory = {}
        self._seq = 0
        try:
            conn = self._get_conn()
            conn.execute("DELETE FROM tare_memory")
            conn.commit()
        except (sqlite3.Error, OSError) as e:
            logger.warning("Falha ao limpar memória de taras: %s", e)
            return False
        return True
