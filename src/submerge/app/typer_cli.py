from __future__ import annotations

import json
import logging
from pathlib import Path

import typer

from submerge.core.attributes import ATTRIBUTE_USAGE
from submerge.core.errors import SubmergeError
from submerge.core.merge import merge_subtitles
from submerge.core.subtitle import cues_to_payload, format_cues, parse_cues
from submerge.infra.config import AppConfig, build_app_config, infer_output_format
from submerge.infra.log import configure_logging
from submerge.infra.storage import read_text, write_text
from submerge.schemas.subtitle import SubtitleFormat

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="submerge",
    add_completion=False,
    help="Merge two SRT/VTT subtitle tracks into one.",
)


def _build_config(
    output_format: str | None, encoding: str | None, log_level: str | None
) -> AppConfig:
    try:
        config = build_app_config(
            output_format=output_format, encoding=encoding, log_level=log_level
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    configure_logging(config.log_level)
    return config


def _read_input(path: Path, config: AppConfig) -> str:
    if not path.exists() or not path.is_file():
        raise typer.BadParameter(f"Input not found: {path}")
    logger.info("Reading %s", path)
    try:
        return read_text(path, encoding=config.encoding)
    except UnicodeDecodeError as exc:
        raise typer.BadParameter(f"Cannot decode {path} as {config.encoding}") from exc


def _resolve_format(
    output_format: str | None, output_path: Path | None, config: AppConfig
) -> SubtitleFormat:
    if output_format:
        return config.output_format
    return infer_output_format(output_path, fallback=config.output_format)


def _confirm_overwrite(output_path: Path, force: bool) -> bool:
    if force or not output_path.exists():
        return True
    return typer.confirm(
        f"File '{output_path}' already exists, overwrite?", default=False
    )


def _emit(result: str, output_path: Path | None, force: bool, config: AppConfig) -> None:
    if output_path is None:
        typer.echo(result, nl=False)
        return
    if not _confirm_overwrite(output_path, force):
        typer.echo("Abort.")
        return
    write_text(output_path, result, encoding=config.encoding)
    logger.info("Wrote %s", output_path)
    typer.echo("Successfully written.")


@app.command("merge")
def merge_command(
    primary: Path = typer.Argument(..., help="Primary subtitle file (SRT/VTT)."),
    secondary: Path | None = typer.Argument(
        None,
        help="Secondary subtitle file. If omitted, PRIMARY is used as the secondary track.",
    ),
    attributes: list[str] = typer.Option(
        [],
        "--attr",
        "-a",
        help="Merge attribute applied to the secondary track (repeatable). See `submerge attributes`.",
    ),
    output_path: Path | None = typer.Option(
        None, "--output", "-o", help="Merged subtitle output path (default: stdout)."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite the output file without asking."
    ),
    output_format: str | None = typer.Option(
        None, "--format", help="srt|vtt (default: from output suffix, else srt)."
    ),
    raw: bool = typer.Option(
        False, "--raw", help="Emit the merged cues as JSON instead of subtitle text."
    ),
    encoding: str | None = typer.Option(
        None, "--encoding", help="Text encoding of inputs and output (default: utf-8)."
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="DEBUG|INFO|WARNING|ERROR"
    ),
) -> None:
    """Transform SECONDARY by the given attributes and merge it into PRIMARY."""
    config = _build_config(output_format, encoding, log_level)
    if secondary is None:
        primary_text = ""
        secondary_text = _read_input(primary, config)
    else:
        primary_text = _read_input(primary, config)
        secondary_text = _read_input(secondary, config)
    fmt = _resolve_format(output_format, output_path, config)

    try:
        merged = merge_subtitles(
            primary_text, secondary_text, attributes, raw=raw, output_format=fmt
        )
    except SubmergeError as exc:
        typer.echo(f"[failed] Subtitle merge failed: {exc}")
        raise typer.Exit(code=2) from exc

    if raw:
        merged = json.dumps(cues_to_payload(merged), ensure_ascii=False, indent=2) + "\n"
    _emit(merged, output_path, force, config)


@app.command("convert")
def convert_command(
    input_path: Path = typer.Argument(..., help="Input subtitle file (SRT/VTT)."),
    output_path: Path | None = typer.Option(
        None, "--output", "-o", help="Converted subtitle output path (default: stdout)."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite the output file without asking."
    ),
    output_format: str | None = typer.Option(
        None, "--format", help="srt|vtt (default: from output suffix, else srt)."
    ),
    encoding: str | None = typer.Option(
        None, "--encoding", help="Text encoding of input and output (default: utf-8)."
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="DEBUG|INFO|WARNING|ERROR"
    ),
) -> None:
    """Re-serialize a subtitle file, e.g. SRT to WebVTT."""
    config = _build_config(output_format, encoding, log_level)
    content = _read_input(input_path, config)
    fmt = _resolve_format(output_format, output_path, config)
    try:
        cues = parse_cues(content)
    except SubmergeError as exc:
        typer.echo(f"[failed] Subtitle parse failed: {exc}")
        raise typer.Exit(code=2) from exc
    _emit(format_cues(cues, fmt), output_path, force, config)


@app.command("attributes")
def attributes_command() -> None:
    """List the merge attributes accepted by `merge --attr`."""
    lines = ["Attributes are applied in this order, whatever order they are given in:"]
    for index, (token, description) in enumerate(ATTRIBUTE_USAGE, start=1):
        lines.append(f"  {index}. {token}\n     {description}")
    typer.echo("\n".join(lines))


def run() -> None:
    """Console-script entrypoint."""
    app()
