"""printprobe - provenance inspector for 3D printing files.

Classifies STL / 3MF / G-code files, decides whether they have been sliced,
and recovers the target printer, the slicing application and the print
settings where the file records them.
"""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version

from printprobe.engine import InspectionEngine, basic_analysis, detailed_analysis
from printprobe.formats import classify_format
from printprobe.models import (
    AnalysisResult,
    BuildVolume,
    DetailedAnalysisResult,
    FormatKind,
    PrinterInfo,
    PrintSettings,
    SlicerInfo,
)
from printprobe.printers import normalize_printer
from printprobe.settings import extract_settings
from printprobe.slicers import detect_slicer

_logger = logging.getLogger(__name__)


def _resolve_version() -> str:
    """Resolve the installed package version."""
    try:
        return version("printprobe")
    except PackageNotFoundError:
        _logger.debug("printprobe is not installed; version unknown")
        return "unknown"


__version__ = _resolve_version()

__all__ = [
    "AnalysisResult",
    "BuildVolume",
    "DetailedAnalysisResult",
    "FormatKind",
    "InspectionEngine",
    "PrintSettings",
    "PrinterInfo",
    "SlicerInfo",
    "basic_analysis",
    "classify_format",
    "detailed_analysis",
    "detect_slicer",
    "extract_settings",
    "normalize_printer",
]
