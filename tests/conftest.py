"""Shared fixtures for the printprobe test suite.

3MF archives are built in memory with :mod:`zipfile` so that every test
controls exactly which entries the container holds.
"""

from __future__ import annotations

import io
import json
import zipfile
from typing import Callable, Dict

import pytest


# ---------------------------------------------------------------------------
# Archive builders
# ---------------------------------------------------------------------------


def build_3mf(entries: Dict[str, str | bytes]) -> bytes:
    """Return the bytes of a ZIP archive holding *entries*."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return buf.getvalue()


CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="model" ContentType="application/vnd.ms-package.3dmanufacturing-3dmodel+xml"/>'
    "</Types>"
)

BAMBU_MODEL = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<model unit="millimeter" xmlns="http://schemas.microsoft.com/3dmanufacturing/core/2015/02" '
    'xmlns:BambuStudio="http://schemas.bambulab.com/package/2021">\n'
    ' <metadata name="Application">BambuStudio-01.08.04.51</metadata>\n'
    ' <metadata name="BambuStudio:3mfVersion">1</metadata>\n'
    " <resources/>\n"
    "</model>"
)

PLAIN_MODEL = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<model unit="millimeter" xmlns="http://schemas.microsoft.com/3dmanufacturing/core/2015/02">\n'
    " <resources/>\n"
    "</model>"
)

SLICED_MODEL_SETTINGS = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    "<config>\n"
    "  <plate>\n"
    '    <metadata key="plater_id" value="1"/>\n'
    '    <metadata key="gcode_file" value="Metadata/plate_1.gcode"/>\n'
    "  </plate>\n"
    "</config>"
)

UNSLICED_MODEL_SETTINGS = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    "<config>\n"
    "  <plate>\n"
    '    <metadata key="plater_id" value="1"/>\n'
    "  </plate>\n"
    "</config>"
)


def project_settings(printers: list[str]) -> str:
    return json.dumps(
        {
            "layer_height": "0.2",
            "print_compatible_printers": printers,
            "printer_model": "Bambu Lab X1 Carbon",
        },
        indent=4,
    )


PRUSA_GCODE = "\n".join(
    [
        "; generated by PrusaSlicer 2.7.0+win64 on 2024-01-15 at 10:22:31 UTC",
        ";",
        "; external perimeters extrusion width = 0.45mm",
        "; printer: Original Prusa MK4 0.4 nozzle",
        "; layer_height = 0.2",
        "; fill_density = 15%",
        "; first_layer_temperature = 215",
        "; temperature = 210",
        "; bed_temperature = 60",
        "M73 P0 R120",
        "G28 ; home all axes",
        "G1 X10 Y10 Z0.2 F3000",
    ]
)

CURA_GCODE = "\n".join(
    [
        ";FLAVOR:Marlin",
        ";TIME:6150",
        ";Generated with Cura_SteamEngine 5.4.0",
        "M140 S60",
        "M105",
        "G28 ;Home",
    ]
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_3mf() -> Callable[[Dict[str, str | bytes]], bytes]:
    """Factory building 3MF bytes from an entry mapping."""
    return build_3mf


@pytest.fixture()
def sliced_bambu_3mf() -> bytes:
    """A BambuStudio project sliced for two printers."""
    return build_3mf(
        {
            "[Content_Types].xml": CONTENT_TYPES,
            "3D/3dmodel.model": BAMBU_MODEL,
            "Metadata/model_settings.config": SLICED_MODEL_SETTINGS,
            "Metadata/project_settings.config": project_settings(
                ["Bambu Lab X1 Carbon 0.4 nozzle", "Bambu Lab P1S 0.4 nozzle"]
            ),
            "Metadata/plate_1.gcode": "; BambuStudio\nG28\n",
        }
    )


@pytest.fixture()
def unsliced_3mf() -> bytes:
    """A plain 3MF with geometry only."""
    return build_3mf(
        {
            "[Content_Types].xml": CONTENT_TYPES,
            "3D/3dmodel.model": PLAIN_MODEL,
        }
    )


@pytest.fixture()
def prusa_gcode() -> bytes:
    return PRUSA_GCODE.encode("utf-8")


@pytest.fixture()
def cura_gcode() -> bytes:
    return CURA_GCODE.encode("utf-8")
