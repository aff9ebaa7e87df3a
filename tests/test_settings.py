"""Tests for printprobe.settings -- print parameters from G-code headers."""

from __future__ import annotations

from printprobe.models import PrintSettings
from printprobe.settings import SETTINGS_SCAN_LINES, extract_settings

from conftest import PRUSA_GCODE


class TestExtractSettings:
    def test_layer_height_and_infill(self) -> None:
        text = "; layer_height = 0.2\n;fill_density: 15\nG28\n"
        settings = extract_settings(text)
        assert settings == PrintSettings(layer_height=0.2, infill=15.0)
        assert settings.print_speed is None
        assert settings.temperature is None
        assert settings.bed_temperature is None

    def test_prusa_header(self) -> None:
        assert extract_settings(PRUSA_GCODE) == PrintSettings(
            layer_height=0.2,
            infill=15.0,
            temperature=210.0,
            bed_temperature=60.0,
        )

    def test_temperature_not_taken_from_bed_temperature(self) -> None:
        settings = extract_settings("; bed_temperature = 60\n")
        assert settings == PrintSettings(bed_temperature=60.0)

    def test_first_layer_variants_ignored(self) -> None:
        text = "; first_layer_height = 0.3\n; first_layer_temperature = 215\n"
        assert extract_settings(text) is None

    def test_last_occurrence_wins(self) -> None:
        text = "; layer_height = 0.2\n; layer_height = 0.3\n"
        assert extract_settings(text) == PrintSettings(layer_height=0.3)

    def test_later_unparsable_value_keeps_earlier(self) -> None:
        text = "; layer_height = 0.2\n; layer_height = 0.2.1\n"
        assert extract_settings(text) == PrintSettings(layer_height=0.2)

    def test_duplicates_beyond_window_ignored(self) -> None:
        lines = ["; temperature = 210"] + ["G1 X0"] * SETTINGS_SCAN_LINES + ["; temperature = 250"]
        assert extract_settings("\n".join(lines)) == PrintSettings(temperature=210.0)

    def test_unparsable_value_skipped(self) -> None:
        text = "; layer_height = 0.2.1\n; layer_height = 0.28\n"
        assert extract_settings(text) == PrintSettings(layer_height=0.28)

    def test_print_speed(self) -> None:
        assert extract_settings("; print_speed = 60") == PrintSettings(print_speed=60.0)

    def test_case_insensitive(self) -> None:
        assert extract_settings(";LAYER_HEIGHT:0.12") == PrintSettings(layer_height=0.12)

    def test_not_limited_to_comments(self) -> None:
        assert extract_settings("layer_height=0.1") == PrintSettings(layer_height=0.1)

    def test_nothing_found(self) -> None:
        assert extract_settings("G28\nG1 X10\n") is None

    def test_empty(self) -> None:
        assert extract_settings("") is None

    def test_scan_window(self) -> None:
        text = "\n".join(["G1 X0"] * SETTINGS_SCAN_LINES + ["; layer_height = 0.2"])
        assert extract_settings(text) is None
