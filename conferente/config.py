"""TOML configuration loader."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

DEFAULT_DB_PATH = "~/.config/conferente/conferente.db"


@dataclass
class StorageConfig:
    db_path: str = DEFAULT_DB_PATH


@dataclass
class CameraConfig:
    index: int = 0
    max_width: int = 1024
    jpeg_quality: int = 70
    timestamp_overlay: bool = True


@dataclass
class ExportConfig:
    output_dir: str = "~/Conferente"
    sheet_name: str = "Relatório Conferente"


@dataclass
class PrinterConfig:
    enabled: bool = False
    printer_name: str = ""


@dataclass
class ConferenteConfig:
    storage: StorageConfig = field(default_factory=StorageConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    printer: PrinterConfig = field(default_factory=PrinterConfig)


def load_config(path: str | Path | None = None) -> ConferenteConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    CONFERENTE_DB_PATH overrides the database path when the file leaves it
    unset.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    sto = raw.get("storage", {})
    cam = raw.get("camera", {})
    exp = raw.get("export", {})
    prn = raw.get("printer", {})

    db_path = sto.get("db_path", "") or os.environ.get(
        "CONFERENTE_DB_PATH", DEFAULT_DB_PATH
    )

    return ConferenteConfig(
        storage=StorageConfig(db_path=db_path),
        camera=CameraConfig(
            index=cam.get("index", 0),
            max_width=cam.get("max_width", 1024),
            jpeg_quality=cam.get("jpeg_quality", 70),
            timestamp_overlay=cam.get("timestamp_overlay", True),
        ),
        export=ExportConfig(
            output_dir=exp.get("output_dir", "~/Conferente"),
            sheet_name=exp.get("sheet_name", "Relatório Conferente"),
        ),
        printer=PrinterConfig(
            enabled=prn.get("enabled", False),
            printer_name=prn.get("printer_name", ""),
        ),
    )
