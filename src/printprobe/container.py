"""3MF container inspection: slicing status and compatible printers.

3MF files follow the Open Packaging Convention: a ZIP archive whose core
model lives in ``3D/3dmodel.model`` and whose slicer-specific settings live
under ``Metadata/``.  BambuStudio and OrcaSlicer write
``Metadata/model_settings.config`` (per-plate XML which references the
embedded G-code once a plate has been sliced) and
``Metadata/project_settings.config`` (JSON with the full print profile).

Everything here degrades instead of raising: a missing entry, an entry that
cannot be read and a value that cannot be parsed all mean "no evidence".
"""

from __future__ import annotations

import json
import logging
import re
import zipfile
import zlib
from io import BytesIO
from typing import Protocol

from printprobe.formats import MACHINE_CODE_SUFFIXES
from printprobe.models import PrinterInfo
from printprobe.printers import normalize_printer

logger = logging.getLogger(__name__)

MODEL_SETTINGS_PATH = "Metadata/model_settings.config"
PROJECT_SETTINGS_PATH = "Metadata/project_settings.config"
CORE_MODEL_PATH = "3D/3dmodel.model"
CONTENT_TYPES_PATH = "[Content_Types].xml"

GCODE_REFERENCE_MARKER = "gcode_file"
COMPATIBLE_PRINTERS_KEY = "print_compatible_printers"

# Markers for the opt-in broad sweep.  Tool names and XML namespace
# prefixes only; boilerplate words like "print" or "layer" are too noisy.
BROAD_SWEEP_MARKERS: tuple[str, ...] = (
    "bambustudio",
    "orcaslicer",
    "prusaslicer",
    "superslicer",
    "slic3r",
    "cura",
    "slic3rpe:",
    "bambustudio:",
)

_RE_COMPATIBLE_PRINTERS = re.compile(
    rf"\"{COMPATIBLE_PRINTERS_KEY}\"\s*:\s*\[(.*?)\]",
    re.DOTALL,
)
_RE_QUOTED = re.compile(r"\"([^\"]+)\"")


class Container(Protocol):
    """The capability the inspector needs from an archive reader."""

    def names(self) -> list[str]: ...

    def read_text(self, name: str) -> str | None: ...


class ZipContainer:
    """:class:`Container` over an in-memory ZIP archive."""

    def __init__(self, archive: zipfile.ZipFile) -> None:
        self._zf = archive

    @classmethod
    def from_bytes(cls, data: bytes) -> ZipContainer:
        """Open *data* as a ZIP archive.

        :raises zipfile.BadZipFile: if *data* is not a readable archive.
        """
        return cls(zipfile.ZipFile(BytesIO(data), "r"))

    def close(self) -> None:
        self._zf.close()

    def __enter__(self) -> ZipContainer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def names(self) -> list[str]:
        return self._zf.namelist()

    def read_text(self, name: str) -> str | None:
        """Return entry *name* decoded as UTF-8, or ``None`` if unreadable."""
        try:
            with self._zf.open(name) as fh:
                return fh.read().decode("utf-8", errors="replace")
        except KeyError:
            return None
        except (
            zipfile.BadZipFile,
            zlib.error,
            EOFError,
            ValueError,
            RuntimeError,
            OSError,
            NotImplementedError,
        ) as exc:
            logger.warning("Could not read 3MF entry %s: %s", name, exc)
            return None


def open_container(data: bytes) -> ZipContainer | None:
    """Open *data* as a 3MF container, or ``None`` for a malformed archive."""
    try:
        return ZipContainer.from_bytes(data)
    except (zipfile.BadZipFile, OSError, ValueError) as exc:
        logger.warning("Could not open 3MF container: %s", exc)
        return None


def parse_compatible_printers(text: str) -> list[str]:
    """Extract the ``print_compatible_printers`` names from a settings document.

    Project settings are JSON; when a tool wrote something that is not valid
    JSON the array is still recovered with a tolerant pattern.  Returns an
    empty list when the key is missing or holds no names.
    """
    try:
        doc = json.loads(text)
    except ValueError:
        doc = None

    if isinstance(doc, dict):
        value = doc.get(COMPATIBLE_PRINTERS_KEY)
        if isinstance(value, list):
            return [v.strip() for v in value if isinstance(v, str) and v.strip()]
        if isinstance(value, str) and value.strip():
            return [value.strip()]
        return []

    m = _RE_COMPATIBLE_PRINTERS.search(text)
    if m is None:
        return []
    return [name.strip() for name in _RE_QUOTED.findall(m.group(1)) if name.strip()]


class ContainerSlicingInspector:
    """Decides whether a container was sliced and for which printers.

    :param broad_sweep: also report a container as sliced when any
        ``Metadata/`` entry mentions a known slicer.  Favours recall over
        precision and only runs after the precise signals fail.
    """

    def __init__(self, *, broad_sweep: bool = False) -> None:
        self.broad_sweep = broad_sweep

    def is_sliced(self, container: Container) -> bool:
        if self._references_gcode(container):
            return True
        if self._has_gcode_entry(container):
            return True
        if self.broad_sweep and self._mentions_slicer(container):
            return True
        return False

    def compatible_printers(self, container: Container) -> tuple[PrinterInfo, ...] | None:
        text = container.read_text(PROJECT_SETTINGS_PATH)
        if text is None:
            return None
        printers = tuple(normalize_printer(name) for name in parse_compatible_printers(text))
        return printers or None

    def slicer_content(self, container: Container) -> str:
        """Concatenate the entries that may name the slicing application."""
        names = container.names()
        wanted = [CORE_MODEL_PATH, CONTENT_TYPES_PATH]
        wanted.extend(
            n for n in names
            if n.startswith("Metadata/") or "auxiliary" in n or "config" in n
        )
        chunks: list[str] = []
        for name in wanted:
            if name not in names:
                continue
            text = container.read_text(name)
            if text is not None:
                chunks.append(text)
        return " ".join(chunks)

    # ------------------------------------------------------------------
    # Evidence tiers
    # ------------------------------------------------------------------

    @staticmethod
    def _references_gcode(container: Container) -> bool:
        text = container.read_text(MODEL_SETTINGS_PATH)
        return text is not None and GCODE_REFERENCE_MARKER in text

    @staticmethod
    def _has_gcode_entry(container: Container) -> bool:
        return any(n.lower().endswith(MACHINE_CODE_SUFFIXES) for n in container.names())

    @staticmethod
    def _mentions_slicer(container: Container) -> bool:
        for name in container.names():
            if not name.startswith("Metadata/"):
                continue
            text = container.read_text(name)
            if text is None:
                continue
            lowered = text.lower()
            if any(marker in lowered for marker in BROAD_SWEEP_MARKERS):
                logger.debug("Broad sweep found slicer marker in %s", name)
                return True
        return False
