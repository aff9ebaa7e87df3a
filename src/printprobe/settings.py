"""Print-parameter extraction from G-code header text."""

from __future__ import annotations

import contextlib
import re

from printprobe.gcode_header import leading_lines
from printprobe.models import PrintSettings

SETTINGS_SCAN_LINES: int = 100

# Source key -> PrintSettings field.  Keys match as whole tokens so that
# ``temperature`` does not pick up ``bed_temperature`` or
# ``first_layer_temperature``.
SETTING_KEYS: dict[str, str] = {
    "layer_height": "layer_height",
    "fill_density": "infill",
    "temperature": "temperature",
    "bed_temperature": "bed_temperature",
    "print_speed": "print_speed",
}

_PATTERNS: dict[str, re.Pattern[str]] = {
    key: re.compile(rf"(?<![\w]){key}\s*[:=]\s*([\d.]+)", re.IGNORECASE)
    for key in SETTING_KEYS
}


def extract_settings(
    text: str,
    *,
    max_lines: int = SETTINGS_SCAN_LINES,
) -> PrintSettings | None:
    """Recover print parameters from the first *max_lines* lines of *text*.

    A key seen more than once takes its last parseable value.  Returns
    ``None`` when no key was found at all.
    """
    found: dict[str, float] = {}

    for line in leading_lines(text, max_lines):
        lowered = line.lower()
        for key, field_name in SETTING_KEYS.items():
            if key not in lowered:
                continue
            m = _PATTERNS[key].search(line)
            if m:
                with contextlib.suppress(ValueError):
                    found[field_name] = float(m.group(1))

    if not found:
        return None
    return PrintSettings(**found)
