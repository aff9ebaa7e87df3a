"""Tests for printprobe.gcode_header -- printer identity from G-code comments."""

from __future__ import annotations

from printprobe.gcode_header import PRINTER_SCAN_LINES, leading_lines, scan_printer
from printprobe.models import PrinterInfo

from conftest import CURA_GCODE, PRUSA_GCODE


class TestPrinterComment:
    def test_prusa_header(self) -> None:
        assert scan_printer(PRUSA_GCODE) == (PrinterInfo(name="MK4", brand="Prusa Research"),)

    def test_colon_and_space_separators(self) -> None:
        assert scan_printer("; printer: Bambu Lab X1C") == (PrinterInfo(name="X1 Carbon", brand="Bambu Lab"),)
        assert scan_printer(";printer Creality Ender-3") == (
            PrinterInfo(name="Creality Ender-3", brand="Creality"),
        )

    def test_capitalised_token(self) -> None:
        assert scan_printer("; Printer: Voron 2.4") == (PrinterInfo(name="Voron 2.4", brand="Generic"),)

    def test_first_printer_line_wins(self) -> None:
        text = "; printer: Prusa MK4\n; printer: Bambu Lab P1S\n"
        assert scan_printer(text) == (PrinterInfo(name="MK4", brand="Prusa Research"),)

    def test_value_stops_at_next_semicolon(self) -> None:
        assert scan_printer("; printer: Prusa MINI; extra") == (PrinterInfo(name="MINI+", brand="Prusa Research"),)

    def test_non_comment_lines_ignored(self) -> None:
        assert scan_printer("M117 printer: Prusa MK4\nG28") is None

    def test_printer_key_without_separator_is_skipped(self) -> None:
        text = "; printer_model = MK4\n; printer: Bambu Lab A1\n"
        assert scan_printer(text) == (PrinterInfo(name="A1", brand="Bambu Lab"),)

    def test_beyond_scan_window(self) -> None:
        text = "\n".join(["G1 X0"] * PRINTER_SCAN_LINES + ["; printer: Prusa MK4"])
        assert scan_printer(text) is None

    def test_last_line_of_window(self) -> None:
        text = "\n".join(["G1 X0"] * (PRINTER_SCAN_LINES - 1) + ["; printer: Prusa MK4"])
        assert scan_printer(text) == (PrinterInfo(name="MK4", brand="Prusa Research"),)


class TestGeneratedByFallback:
    def test_prusaslicer(self) -> None:
        text = "; generated by PrusaSlicer 2.7.0 on 2024-01-15\nG28\n"
        assert scan_printer(text) == (PrinterInfo(name="Prusa Printer", brand="Prusa Research"),)

    def test_cura(self) -> None:
        assert scan_printer(CURA_GCODE) == (PrinterInfo(name="Generic Printer", brand="Generic"),)

    def test_unknown_tool(self) -> None:
        assert scan_printer("; Generated by Simplify3D(R) Version 4.1.2\n") is None

    def test_printer_line_preferred_even_when_later(self) -> None:
        text = "; generated by PrusaSlicer 2.7.0\n; printer: Bambu Lab P1S\n"
        assert scan_printer(text) == (PrinterInfo(name="P1S", brand="Bambu Lab"),)

    def test_first_generated_by_line_decides(self) -> None:
        text = "; generated by Simplify3D\n; generated by PrusaSlicer\n"
        assert scan_printer(text) is None


class TestNoEvidence:
    def test_empty(self) -> None:
        assert scan_printer("") is None

    def test_plain_gcode(self) -> None:
        assert scan_printer("G28\nG1 X10 Y10\nM104 S200\n") is None


class TestLeadingLines:
    def test_limits(self) -> None:
        assert leading_lines("a\nb\nc\nd", 2) == ["a", "b"]

    def test_shorter_text(self) -> None:
        assert leading_lines("a\nb", 10) == ["a", "b"]
