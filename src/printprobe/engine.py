"""Inspection pipeline: classify, then dispatch per format.

Usage::

    from printprobe.engine import InspectionEngine
    from printprobe.sources import FileSource

    engine = InspectionEngine()
    result = engine.detailed_analysis(data, "benchy.3mf")
    print(result.to_dict())

    # or, letting the engine fetch the bytes:
    result = asyncio.run(engine.analyze(FileSource("benchy.gcode")))

Every call is independent; one engine may serve many concurrent
inspections.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from printprobe.container import ContainerSlicingInspector, open_container
from printprobe.formats import classify_format
from printprobe.gcode_header import scan_printer
from printprobe.models import (
    AnalysisResult,
    DetailedAnalysisResult,
    FormatKind,
    PrinterInfo,
    PrintSettings,
    SlicerInfo,
)
from printprobe.settings import SETTINGS_SCAN_LINES, extract_settings
from printprobe.slicers import detect_slicer
from printprobe.sources import ByteSource, SourceError

logger = logging.getLogger(__name__)

HEADER_LINES: int = SETTINGS_SCAN_LINES


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _header_text(data: bytes, max_lines: int = HEADER_LINES) -> str:
    """Decode only the leading lines of a possibly very large G-code file."""
    head = data.split(b"\n", max_lines)[:max_lines]
    return _decode(b"\n".join(head))


class InspectionEngine:
    """Produces :class:`AnalysisResult` records from raw file content.

    :param broad_sweep: enable the broad keyword tier when deciding whether
        a 3MF container was sliced.  See
        :class:`~printprobe.container.ContainerSlicingInspector`.
    """

    def __init__(self, *, broad_sweep: bool = False) -> None:
        self.container_inspector = ContainerSlicingInspector(broad_sweep=broad_sweep)

    # ------------------------------------------------------------------
    # Synchronous pipeline
    # ------------------------------------------------------------------

    def basic_analysis(self, data: bytes, name: str) -> AnalysisResult:
        file_type = classify_format(name)

        if file_type is FormatKind.MANUFACTURING_CONTAINER:
            is_sliced, printers, _, _ = self._inspect_container(data, detailed=False)
            return AnalysisResult(file_type, is_sliced, printers)

        if file_type is FormatKind.MACHINE_CODE:
            return AnalysisResult(file_type, True, scan_printer(_header_text(data)))

        return AnalysisResult(file_type, False)

    def detailed_analysis(self, data: bytes, name: str) -> DetailedAnalysisResult:
        file_type = classify_format(name)
        slicer: SlicerInfo | None = None
        settings: PrintSettings | None = None

        if file_type is FormatKind.MANUFACTURING_CONTAINER:
            is_sliced, printers, slicer, settings = self._inspect_container(data, detailed=True)
        elif file_type is FormatKind.MACHINE_CODE:
            header = _header_text(data)
            is_sliced = True
            printers = scan_printer(header)
            slicer = detect_slicer(header)
            settings = extract_settings(header)
        else:
            is_sliced, printers = False, None

        return DetailedAnalysisResult(
            file_type=file_type,
            is_sliced=is_sliced,
            printer_info=printers,
            file_size=len(data),
            slicer_info=slicer,
            print_settings=settings,
        )

    def _inspect_container(
        self, data: bytes, *, detailed: bool
    ) -> tuple[bool, tuple[PrinterInfo, ...] | None, SlicerInfo | None, PrintSettings | None]:
        container = open_container(data)
        if container is None:
            return False, None, None, None
        with container:
            inspector = self.container_inspector
            if not inspector.is_sliced(container):
                return False, None, None, None
            printers = inspector.compatible_printers(container)
            if not detailed:
                return True, printers, None, None
            slicer = detect_slicer(inspector.slicer_content(container))
            return True, printers, slicer, PrintSettings()

    # ------------------------------------------------------------------
    # Async boundary
    # ------------------------------------------------------------------

    async def analyze(
        self,
        source: ByteSource,
        *,
        detailed: bool = True,
    ) -> AnalysisResult:
        """Read *source* in a worker thread and inspect its content.

        :raises SourceError: if the content cannot be obtained.
        """
        data = await asyncio.to_thread(source.read)
        if detailed:
            return self.detailed_analysis(data, source.name)
        return self.basic_analysis(data, source.name)

    async def analyze_many(
        self,
        sources: Iterable[ByteSource],
        *,
        detailed: bool = True,
    ) -> list[AnalysisResult | SourceError]:
        """Inspect *sources* concurrently.

        Results come back in input order.  A source that cannot be read
        yields its :class:`SourceError` in place of a result.
        """
        results = await asyncio.gather(
            *(self.analyze(s, detailed=detailed) for s in sources),
            return_exceptions=True,
        )
        out: list[AnalysisResult | SourceError] = []
        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, SourceError):
                raise result
            out.append(result)
        return out


_default_engine = InspectionEngine()


def basic_analysis(data: bytes, name: str) -> AnalysisResult:
    """Inspect *data* with the default engine."""
    return _default_engine.basic_analysis(data, name)


def detailed_analysis(data: bytes, name: str) -> DetailedAnalysisResult:
    """Inspect *data* with the default engine, including size, slicer and settings."""
    return _default_engine.detailed_analysis(data, name)
