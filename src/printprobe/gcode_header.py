"""Printer identity from G-code header comments.

Slicers prefix their output with ``;`` comments describing the job.  The
printer usually shows up as ``; printer: <profile name>`` (or similar) near
the top; when it does not, the ``; generated by <tool>`` line still hints at
the printer family.
"""

from __future__ import annotations

import re

from printprobe.models import PrinterInfo
from printprobe.printers import GENERIC_BRAND, normalize_printer

COMMENT_MARKER = ";"
PRINTER_SCAN_LINES: int = 50

_RE_PRINTER = re.compile(r"printer[:\s]+([^\n\r;]+)", re.IGNORECASE)
_RE_GENERATED_BY = re.compile(r"generated\s+(?:by|with)\s+([^,\n\r;]+)", re.IGNORECASE)

_PRUSA_FALLBACK = PrinterInfo(name="Prusa Printer", brand="Prusa Research")
_CURA_FALLBACK = PrinterInfo(name="Generic Printer", brand=GENERIC_BRAND)


def leading_lines(text: str, max_lines: int) -> list[str]:
    """Return at most the first *max_lines* lines of *text*."""
    return text.split("\n", max_lines)[:max_lines]


def _comment_lines(text: str, max_lines: int) -> list[str]:
    stripped = (line.strip() for line in leading_lines(text, max_lines))
    return [line for line in stripped if line.startswith(COMMENT_MARKER)]


def scan_printer(
    text: str,
    *,
    max_lines: int = PRINTER_SCAN_LINES,
) -> tuple[PrinterInfo, ...] | None:
    """Recover the target printer from the header of G-code *text*.

    The first comment mentioning ``printer`` wins.  Without one, a
    ``generated by`` comment naming PrusaSlicer or Cura yields a generic
    record for that family.  Returns ``None`` when neither is found.
    """
    comments = _comment_lines(text, max_lines)

    for line in comments:
        if "printer" not in line.lower():
            continue
        m = _RE_PRINTER.search(line)
        if m:
            name = m.group(1).strip()
            if name:
                return (normalize_printer(name),)

    for line in comments:
        m = _RE_GENERATED_BY.search(line)
        if m is None:
            continue
        tool = m.group(1).strip()
        if "prusa" in tool.lower():
            return (_PRUSA_FALLBACK,)
        if "cura" in tool.lower():
            return (_CURA_FALLBACK,)
        return None

    return None
