"""SQLite storage for the tare memory and the weighing log."""

from .records import WINDOWS, WeighingRecordDB, window_start
from .schema import ensure_schema
from .tare_memory import TareMemoryDB, load_mapping_file, normalize_key

__all__ = [
    "TareMemoryDB",
    "WeighingRecordDB",
    "WINDOWS",
    "ensure_schema",
    "load_mapping_file",
    "normalize_key",
    "window_start",
]
