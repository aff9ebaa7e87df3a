"""Output formatting for the printprobe CLI.

Every command can answer either as a JSON envelope
(``{"status", "data", "error"}``) for scripts, or as Rich-rendered text for
people.
"""

from __future__ import annotations

import json
import math
from io import StringIO
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from printprobe.models import AnalysisResult, DetailedAnalysisResult, PrinterInfo, SlicerInfo


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def format_bytes(size_bytes: int | float | None) -> str:
    """Convert a byte count to a human-readable string (e.g. '1.2 MB')."""
    if size_bytes is None or size_bytes < 0:
        return "N/A"
    if size_bytes == 0:
        return "0 B"
    units = ("B", "KB", "MB", "GB", "TB")
    exponent = min(int(math.log(size_bytes, 1024)), len(units) - 1)
    value = size_bytes / (1024**exponent)
    if exponent == 0:
        return f"{int(value)} B"
    return f"{value:.1f} {units[exponent]}"


def format_printer(printer: PrinterInfo) -> str:
    """``"Bambu Lab X1 Carbon"``-style one-liner."""
    if printer.name.lower().startswith(printer.brand.lower()):
        return printer.name
    return f"{printer.brand} {printer.name}"


def format_slicer(slicer: SlicerInfo) -> str:
    if slicer.version:
        return f"{slicer.name} {slicer.version}"
    return slicer.name


def _render_to_string(renderable: Any) -> str:
    """Render a Rich object to a plain string (with ANSI codes)."""
    buf = StringIO()
    console = Console(file=buf, force_terminal=True, width=100)
    console.print(renderable)
    return buf.getvalue().rstrip("\n")


# ---------------------------------------------------------------------------
# format_response
# ---------------------------------------------------------------------------


def format_response(
    status: str,
    data: dict[str, Any] | None = None,
    error: dict[str, Any] | None = None,
    json_mode: bool = False,
) -> str:
    """Build a generic response envelope.

    Parameters
    ----------
    status:
        ``"success"`` or ``"error"``.
    data:
        Arbitrary payload dict.
    error:
        Error detail dict with keys ``code`` and ``message``.
    json_mode:
        When *True* return a JSON string; otherwise a Rich-formatted string.
    """
    if json_mode:
        envelope: dict[str, Any] = {
            "status": status,
            "data": data,
            "error": error,
        }
        return json.dumps(envelope, indent=2, sort_keys=False)

    if status == "error" and error:
        code = error.get("code", "UNKNOWN")
        message = error.get("message", "An unknown error occurred.")
        text = Text()
        text.append("Error", style="bold red")
        text.append(f" [{code}]: ", style="red")
        text.append(message)
        return _render_to_string(Panel(text, title="Error", border_style="red"))

    if data:
        lines = [f"[bold]{escape(str(key))}:[/bold] {escape(str(value))}" for key, value in data.items()]
        return _render_to_string(Panel("\n".join(lines), title="Result", border_style="green"))

    return f"Status: {status}"


# ---------------------------------------------------------------------------
# format_analysis
# ---------------------------------------------------------------------------


def format_analysis(
    location: str,
    result: AnalysisResult,
    json_mode: bool = False,
) -> str:
    """Format a single inspection result."""
    if json_mode:
        return format_response("success", data={"file": location, **result.to_dict()}, json_mode=True)

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Type", result.file_type.value)
    table.add_row("Sliced", "yes" if result.is_sliced else "no")

    if result.printer_info:
        table.add_row("Printers", "\n".join(escape(format_printer(p)) for p in result.printer_info))
    else:
        table.add_row("Printers", "[dim]unknown[/dim]")

    if isinstance(result, DetailedAnalysisResult):
        table.add_row("Size", format_bytes(result.file_size))
        if result.slicer_info is not None:
            table.add_row("Slicer", escape(format_slicer(result.slicer_info)))
        settings = result.print_settings
        if settings is not None and not settings.is_empty():
            for key, value in settings.to_dict().items():
                table.add_row(key.replace("_", " ").capitalize(), f"{value:g}")

    border = "green" if result.is_sliced else "blue"
    return _render_to_string(Panel(table, title=escape(location), border_style=border))


def format_analysis_list(
    entries: list[tuple[str, AnalysisResult | None, dict[str, str] | None]],
    json_mode: bool = False,
) -> str:
    """Format results for several files.

    Each entry is ``(location, result, error)``; exactly one of *result* and
    *error* is set.
    """
    if json_mode:
        items: list[dict[str, Any]] = []
        for location, result, error in entries:
            if result is not None:
                items.append({"file": location, **result.to_dict()})
            else:
                items.append({"file": location, "error": error})
        failed = any(result is None for _, result, _ in entries)
        return format_response(
            "error" if failed else "success",
            data={"files": items},
            error={"code": "PARTIAL_FAILURE", "message": "Some files could not be read."} if failed else None,
            json_mode=True,
        )

    blocks: list[str] = []
    for location, result, error in entries:
        if result is not None:
            blocks.append(format_analysis(location, result))
        else:
            blocks.append(format_response("error", error=error or {}))
    return "\n".join(blocks)
