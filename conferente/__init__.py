"""Check-in weighing: tare memory, tare arithmetic and weighing reports."""

from .config import (
    CameraConfig,
    ConferenteConfig,
    ExportConfig,
    PrinterConfig,
    StorageConfig,
    load_config,
)
from .db import TareMemoryDB, WeighingRecordDB, window_start
from .models import TarePrediction, WeighingRecord
from .parsing import grams_to_kg, parse_average, parse_number, parse_quantity
from .report import Report, ReportRow, aggregate, classify_variance
from .session import (
    CheckinSession,
    RegistrationError,
    RegistrationOutcome,
    clear_history,
)
from .tare import TARE_MODES, TareComposition, compose

__all__ = [
    "WeighingRecord",
    "TarePrediction",
    "TareMemoryDB",
    "WeighingRecordDB",
    "window_start",
    "parse_average",
    "parse_number",
    "parse_quantity",
    "grams_to_kg",
    "compose",
    "TareComposition",
    "TARE_MODES",
    "aggregate",
    "classify_variance",
    "Report",
    "ReportRow",
    "CheckinSession",
    "RegistrationError",
    "RegistrationOutcome",
    "clear_history",
    "ConferenteConfig",
    "StorageConfig",
    "CameraConfig",
    "ExportConfig",
    "PrinterConfig",
    "load_config",
]
