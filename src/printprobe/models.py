"""Value records produced by an inspection.

Every record is created fresh per inspection call and never mutated
afterwards.  ``to_dict()`` returns a JSON-serialisable dict with ``None``
values omitted, so sparse records stay sparse on the wire.
"""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass, fields
from typing import Any


class FormatKind(enum.Enum):
    """File format families recognised by the inspector."""

    MESH_SOURCE = "stl"
    MANUFACTURING_CONTAINER = "3mf"
    MACHINE_CODE = "gcode"
    UNKNOWN = "unknown"


def _drop_none(raw: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in raw.items() if v is not None}


@dataclass(frozen=True)
class BuildVolume:
    """Printable volume in millimetres."""

    x: float
    y: float
    z: float

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class PrinterInfo:
    """One candidate printer the artifact was prepared for."""

    name: str
    brand: str = "Generic"
    model: str | None = None
    nozzle_diameter: float | None = None
    build_volume: BuildVolume | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(asdict(self))


@dataclass(frozen=True)
class SlicerInfo:
    """The slicing application that produced the artifact."""

    name: str
    version: str | None = None
    settings: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(asdict(self))


@dataclass(frozen=True)
class PrintSettings:
    """Numeric print parameters recovered from the file.

    Sparse: only the fields actually found are set.
    """

    layer_height: float | None = None
    infill: float | None = None
    print_speed: float | None = None
    temperature: float | None = None
    bed_temperature: float | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self) -> dict[str, float]:
        return _drop_none(asdict(self))


@dataclass(frozen=True)
class AnalysisResult:
    """Minimal inspection result: format, slicing status, printers."""

    file_type: FormatKind
    is_sliced: bool
    printer_info: tuple[PrinterInfo, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "file_type": self.file_type.value,
            "is_sliced": self.is_sliced,
        }
        if self.printer_info is not None:
            data["printer_info"] = [p.to_dict() for p in self.printer_info]
        return data


@dataclass(frozen=True)
class DetailedAnalysisResult(AnalysisResult):
    """:class:`AnalysisResult` plus size, slicer and print settings."""

    file_size: int = 0
    slicer_info: SlicerInfo | None = None
    print_settings: PrintSettings | None = None

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["file_size"] = self.file_size
        if self.slicer_info is not None:
            data["slicer_info"] = self.slicer_info.to_dict()
        if self.print_settings is not None:
            data["print_settings"] = self.print_settings.to_dict()
        return data
