"""Filename-extension classification of printing artifacts."""

from __future__ import annotations

from printprobe.models import FormatKind

_EXTENSIONS: dict[str, FormatKind] = {
    "stl": FormatKind.MESH_SOURCE,
    "3mf": FormatKind.MANUFACTURING_CONTAINER,
    "gcode": FormatKind.MACHINE_CODE,
    "g": FormatKind.MACHINE_CODE,
}

MACHINE_CODE_SUFFIXES: tuple[str, ...] = tuple(
    f".{ext}" for ext, kind in _EXTENSIONS.items() if kind is FormatKind.MACHINE_CODE
)


def classify_format(filename: str) -> FormatKind:
    """Map *filename* to a :class:`FormatKind` by its final extension.

    Only the text after the last ``.`` counts, compared case-insensitively.
    A name without any ``.`` is :attr:`FormatKind.UNKNOWN`.
    """
    name = (filename or "").lower()
    if "." not in name:
        return FormatKind.UNKNOWN
    ext = name.rsplit(".", 1)[1]
    return _EXTENSIONS.get(ext, FormatKind.UNKNOWN)
