from __future__ import annotations

import codecs
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from submerge.schemas.subtitle import SubtitleFormat

DEFAULT_OUTPUT_FORMAT = SubtitleFormat.SRT
DEFAULT_ENCODING = "utf-8"
DEFAULT_LOG_LEVEL = "WARNING"
SUPPORTED_OUTPUT_FORMATS = {fmt.value for fmt in SubtitleFormat}
SUPPORTED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


@dataclass(frozen=True)
class AppConfig:
    output_format: SubtitleFormat
    encoding: str
    log_level: int


def normalize_output_format(value: str | SubtitleFormat) -> SubtitleFormat:
    fmt = str(getattr(value, "value", value)).strip().lower().lstrip(".")
    if fmt not in SUPPORTED_OUTPUT_FORMATS:
        raise ValueError(
            f"Unsupported output format '{value}'. Allowed: {sorted(SUPPORTED_OUTPUT_FORMATS)}"
        )
    return SubtitleFormat(fmt)


def normalize_encoding(value: str) -> str:
    try:
        return codecs.lookup(value.strip()).name
    except LookupError as exc:
        raise ValueError(f"Unknown text encoding '{value}'.") from exc


def normalize_log_level(value: str) -> int:
    level = value.strip().upper()
    if level not in SUPPORTED_LOG_LEVELS:
        raise ValueError(
            f"Unsupported log level '{value}'. Allowed: {', '.join(sorted(SUPPORTED_LOG_LEVELS))}"
        )
    return logging.getLevelNamesMapping()[level]


def infer_output_format(
    path: Path | None, fallback: SubtitleFormat = DEFAULT_OUTPUT_FORMAT
) -> SubtitleFormat:
    if path is None:
        return fallback
    suffix = path.suffix.lower().lstrip(".")
    if suffix in SUPPORTED_OUTPUT_FORMATS:
        return SubtitleFormat(suffix)
    return fallback


def build_app_config(
    *,
    output_format: str | None = None,
    encoding: str | None = None,
    log_level: str | None = None,
) -> AppConfig:
    return AppConfig(
        output_format=normalize_output_format(
            output_format
            or os.getenv("SUBMERGE_OUTPUT_FORMAT")
            or DEFAULT_OUTPUT_FORMAT
        ),
        encoding=normalize_encoding(
            encoding or os.getenv("SUBMERGE_ENCODING") or DEFAULT_ENCODING
        ),
        log_level=normalize_log_level(
            log_level or os.getenv("SUBMERGE_LOG_LEVEL") or DEFAULT_LOG_LEVEL
        ),
    )
