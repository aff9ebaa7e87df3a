"""printprobe - find out which printer and slicer produced a print file.

Usage:
    printprobe inspect <location>... [--basic] [--broad] [--json]
    printprobe printer <raw_name> [--json]
    printprobe slicer <location> [--json]
    printprobe init
"""

from __future__ import annotations

import asyncio
import sys

import click

from printprobe.config import init_config, load_config, validate_config
from printprobe.engine import InspectionEngine
from printprobe.exit_codes import (
    CONFIG_ERROR,
    SOURCE_ERROR,
    SUCCESS,
    exit_code_for,
)
from printprobe.log_config import configure_logging
from printprobe.models import AnalysisResult
from printprobe.output import (
    format_analysis,
    format_analysis_list,
    format_printer,
    format_response,
    format_slicer,
)
from printprobe.printers import normalize_printer
from printprobe.sources import SourceError, SourceUnavailableError, source_for

# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _emit(output: str, exit_code: int = SUCCESS) -> None:
    """Print output and exit with the given code."""
    click.echo(output)
    sys.exit(exit_code)


def _emit_error(
    code: str,
    message: str,
    json_mode: bool,
    exit_code: int | None = None,
) -> None:
    """Emit a structured error and exit."""
    if exit_code is None:
        exit_code = exit_code_for(code)
    output = format_response(
        "error",
        error={"code": code, "message": message},
        json_mode=json_mode,
    )
    _emit(output, exit_code)


def _resolve_config(ctx: click.Context, json_mode: bool, broad: bool | None = None) -> dict:
    try:
        config = load_config(broad_sweep=broad, config_path=ctx.obj.get("config_path"))
    except ValueError as exc:
        _emit_error("VALIDATION_ERROR", f"Configuration error: {exc}", json_mode, CONFIG_ERROR)
    valid, err = validate_config(config)
    if not valid:
        _emit_error("VALIDATION_ERROR", f"Configuration error: {err}", json_mode, CONFIG_ERROR)
    if ctx.obj.get("log_dir"):
        configure_logging(ctx.obj["log_dir"], level=config["log_level"])
    return config


def _error_dict(exc: SourceError) -> dict[str, str]:
    if isinstance(exc, SourceUnavailableError):
        return {"code": exc.code, "message": exc.message}
    return {"code": "READ_ERROR", "message": str(exc)}


# ------------------------------------------------------------------
# CLI group
# ------------------------------------------------------------------


@click.group()
@click.option(
    "--config",
    "config_path",
    envvar="PRINTPROBE_CONFIG",
    default=None,
    type=click.Path(dir_okay=False),
    help="Path to config.yaml.",
)
@click.option(
    "--log-dir",
    envvar="PRINTPROBE_LOG_DIR",
    default=None,
    type=click.Path(file_okay=False),
    help="Write a rotating log file to this directory.",
)
@click.version_option(package_name="printprobe")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, log_dir: str | None) -> None:
    """Inspect 3D printing files for printer, slicer and print settings."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["log_dir"] = log_dir


# ------------------------------------------------------------------
# inspect
# ------------------------------------------------------------------


@cli.command()
@click.argument("locations", nargs=-1, required=True)
@click.option("--basic", is_flag=True, default=False, help="Skip size, slicer and settings.")
@click.option("--broad", is_flag=True, default=False, help="Use the broad keyword sweep for 3MF files.")
@click.option("--json", "json_mode", is_flag=True, default=False, help="Output as JSON.")
@click.pass_context
def inspect(
    ctx: click.Context,
    locations: tuple[str, ...],
    basic: bool,
    broad: bool,
    json_mode: bool,
) -> None:
    """Inspect one or more files (paths or http(s) URLs)."""
    config = _resolve_config(ctx, json_mode, broad or None)
    engine = InspectionEngine(broad_sweep=config["broad_sweep"])
    sources = [
        source_for(loc, timeout=config["timeout"], max_bytes=config["max_bytes"])
        for loc in locations
    ]

    results = asyncio.run(engine.analyze_many(sources, detailed=not basic))

    if len(locations) == 1:
        result = results[0]
        if isinstance(result, SourceError):
            err = _error_dict(result)
            _emit_error(err["code"], err["message"], json_mode)
        _emit(format_analysis(locations[0], result, json_mode=json_mode), SUCCESS)

    entries: list[tuple[str, AnalysisResult | None, dict[str, str] | None]] = []
    for loc, result in zip(locations, results):
        if isinstance(result, SourceError):
            entries.append((loc, None, _error_dict(result)))
        else:
            entries.append((loc, result, None))
    failed = any(result is None for _, result, _ in entries)
    _emit(format_analysis_list(entries, json_mode=json_mode), SOURCE_ERROR if failed else SUCCESS)


# ------------------------------------------------------------------
# printer
# ------------------------------------------------------------------


@cli.command()
@click.argument("raw_name")
@click.option("--json", "json_mode", is_flag=True, default=False, help="Output as JSON.")
def printer(raw_name: str, json_mode: bool) -> None:
    """Show how a raw printer identifier is canonicalised."""
    info = normalize_printer(raw_name)
    if json_mode:
        _emit(format_response("success", data=info.to_dict(), json_mode=True))
    _emit(format_response("success", data={"printer": format_printer(info), **info.to_dict()}))


# ------------------------------------------------------------------
# slicer
# ------------------------------------------------------------------


@cli.command()
@click.argument("location")
@click.option("--json", "json_mode", is_flag=True, default=False, help="Output as JSON.")
@click.pass_context
def slicer(ctx: click.Context, location: str, json_mode: bool) -> None:
    """Identify the slicer that produced a file."""
    config = _resolve_config(ctx, json_mode)
    engine = InspectionEngine(broad_sweep=config["broad_sweep"])
    source = source_for(location, timeout=config["timeout"], max_bytes=config["max_bytes"])
    try:
        result = asyncio.run(engine.analyze(source, detailed=True))
    except SourceError as exc:
        err = _error_dict(exc)
        _emit_error(err["code"], err["message"], json_mode)

    info = getattr(result, "slicer_info", None)
    if info is None:
        _emit(format_response("success", data={"file": location, "slicer": None}, json_mode=json_mode))
    if json_mode:
        _emit(format_response("success", data={"file": location, **info.to_dict()}, json_mode=True))
    _emit(format_response("success", data={"file": location, "slicer": format_slicer(info)}))


# ------------------------------------------------------------------
# init
# ------------------------------------------------------------------


@cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Write a config file with the default settings."""
    path = init_config(ctx.obj.get("config_path"))
    _emit(f"Config written to {path}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
