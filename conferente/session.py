"""Check-in weighing workflow: form state, predictions and registration."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, replace

from .db.records import WeighingRecordDB
from .db.tare_memory import TareMemoryDB
from .models import TarePrediction, WeighingRecord
from .parsing import grams_to_kg, parse_average, parse_number, parse_quantity
from .tare import TARE_MODES, TareComposition, compose

logger = logging.getLogger(__name__)

CLEAR_WARNING = (
    "⚠️ ATENÇÃO: Tem certeza que deseja apagar todo o histórico de pesagem?\n\n"
    "Esta ação também apagará o Ticket atual e não pode ser desfeita."
)


class RegistrationError(ValueError):
    """The form is not in a state that can be registered."""


@dataclass
class RegistrationOutcome:
    record: WeighingRecord
    saved: bool  # False: the log write failed, the form was kept
    learned: bool  # False: the tare only lives in memory for this session


def _now_ms() -> int:
    return int(time.time() * 1000)


class CheckinSession:
    """State of the weighing screen between two registrations.

    Callers forward every field change and read :attr:`composition` to
    redraw tare and net weight.
    """

    def __init__(
        self,
        tare_memory: TareMemoryDB,
        records: WeighingRecordDB,
        *,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._tare_memory = tare_memory
        self._records = records
        self._clock = clock
        self.clear_form()

    # -- form -------------------------------------------------------------

    def clear_form(self) -> None:
        self.supplier = ""
        self.product = ""
        self.target_text = ""
        self.gross_kg = 0.0
        self.attachment: str | None = None
        self.reset_tare()

    def reset_tare(self) -> None:
        self.mode = "auto"
        self.unit_tare_kg = 0.0
        self.box_quantity = 1
        self.packaging_unit_tare_kg = 0.0
        self.packaging_quantity = 0

    def set_mode(self, mode: str) -> None:
        if mode not in TARE_MODES:
            raise ValueError(f"Modo de tara desconhecido: {mode!r}")
        self.mode = mode

    def set_gross_text(self, text: str) -> None:
        self.gross_kg = parse_number(text)

    def set_unit_tare_text(self, grams_text: str) -> None:
        """Unit tare typed in grams, possibly several readings to average."""
        self.unit_tare_kg = grams_to_kg(parse_average(grams_text))
        if self.mode == "auto":
            self.mode = "manual"

    def set_packaging_unit_text(self, grams_text: str) -> None:
        self.packaging_unit_tare_kg = grams_to_kg(parse_average(grams_text))
        if self.packaging_unit_tare_kg > 0 and self.packaging_quantity == 0:
            self.packaging_quantity = 1

    def set_box_quantity_text(self, text: str) -> None:
        self.box_quantity = parse_quantity(text)

    def set_packaging_quantity_text(self, text: str) -> None:
        self.packaging_quantity = parse_quantity(text)

    @property
    def target_weight_kg(self) -> float:
        return parse_number(self.target_text)

    @property
    def composition(self) -> TareComposition:
        return compose(
            self.unit_tare_kg,
            self.box_quantity,
            self.packaging_unit_tare_kg,
            self.packaging_quantity,
            self.gross_kg,
            mode=self.mode,
        )

    # -- predictions ------------------------------------------------------

    def supplier_entered(self) -> TarePrediction | None:
        """Pre-fill from memory once the supplier field is done.

        With a product already typed the exact pair wins; otherwise the
        supplier's most recent product and tare are suggested.
        """
        if self.mode != "auto" or not self.supplier.strip():
            return None

        if self.product.strip():
            tare = self._tare_memory.predict_for_product(self.supplier, self.product)
            if tare is None:
                return None
            self.unit_tare_kg = tare
            return TarePrediction(product=self.product, tare_kg=tare)

        prediction = self._tare_memory.predict_for_supplier(self.supplier)
        if prediction is not None:
            self.product = prediction.product
            self.unit_tare_kg = prediction.tare_kg
        return prediction

    def product_entered(self) -> float | None:
        if self.mode != "auto":
            return None
        tare = self._tare_memory.predict_for_product(self.supplier, self.product)
        if tare is not None:
            self.unit_tare_kg = tare
        return tare

    # -- registration -----------------------------------------------------

    def validate(self) -> None:
        """Raises RegistrationError with the message to show the operator."""
        if not self.supplier.strip() or not self.product.strip():
            raise RegistrationError("Preencha fornecedor e produto")
        if self.gross_kg <= 0:
            raise RegistrationError("Peso deve ser maior que zero")

    def register(self) -> RegistrationOutcome:
        """Learn the unit tare and append the weighing to the log.

        Raises:
            RegistrationError: If the form is incomplete. Nothing is stored.
        """
        self.validate()
        comp = self.composition

        learned = self._tare_memory.learn(self.supplier, self.product, comp.unit_tare_kg)
        record = WeighingRecord(
            supplier=self.supplier.strip(),
            product=self.product.strip(),
            target_weight_kg=self.target_weight_kg,
            gross_weight_kg=comp.gross_kg,
            tare_kg=comp.total_tare_kg,
            net_weight_kg=comp.net_kg,
            box_quantity=comp.box_quantity,
            timestamp_ms=self._clock(),
            attachment=self.attachment,
        )

        record_id = self._records.append(record)
        if record_id is None:
            logger.warning("Pesagem não salva; formulário mantido")
            return RegistrationOutcome(record=record, saved=False, learned=learned)

        record = replace(record, id=record_id)
        self.clear_form()
        return RegistrationOutcome(record=record, saved=True, learned=learned)


def clear_history(
    records: WeighingRecordDB, confirm: Callable[[str], bool]
) -> bool:
    """Delete the whole weighing log after explicit confirmation.

    Returns:
        True if the log was cleared.
    """
    if not confirm(CLEAR_WARNING):
        return False
    return records.clear_all()
