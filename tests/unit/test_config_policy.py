from __future__ import annotations

import logging
from pathlib import Path

import pytest

from submerge.infra.config import build_app_config, infer_output_format
from submerge.schemas.subtitle import SubtitleFormat


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SUBMERGE_OUTPUT_FORMAT", "SUBMERGE_ENCODING", "SUBMERGE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_build_app_config_defaults() -> None:
    config = build_app_config()
    assert config.output_format is SubtitleFormat.SRT
    assert config.encoding == "utf-8"
    assert config.log_level == logging.WARNING


def test_build_app_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUBMERGE_OUTPUT_FORMAT", "VTT")
    monkeypatch.setenv("SUBMERGE_LOG_LEVEL", "debug")
    config = build_app_config()
    assert config.output_format is SubtitleFormat.VTT
    assert config.log_level == logging.DEBUG


def test_explicit_option_overrides_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUBMERGE_OUTPUT_FORMAT", "vtt")
    assert build_app_config(output_format="srt").output_format is SubtitleFormat.SRT


@pytest.mark.parametrize(
    ("options", "message"),
    [
        ({"output_format": "ass"}, "Unsupported output format"),
        ({"encoding": "no-such-codec"}, "Unknown text encoding"),
        ({"log_level": "loud"}, "Unsupported log level"),
    ],
)
def test_build_app_config_rejects_invalid_values(
    options: dict[str, str], message: str
) -> None:
    with pytest.raises(ValueError, match=message):
        build_app_config(**options)


def test_infer_output_format_from_suffix() -> None:
    assert infer_output_format(Path("out.VTT")) is SubtitleFormat.VTT
    assert infer_output_format(Path("out.srt"), SubtitleFormat.VTT) is SubtitleFormat.SRT
    assert infer_output_format(Path("out.txt"), SubtitleFormat.VTT) is SubtitleFormat.VTT
    assert infer_output_format(None) is SubtitleFormat.SRT


def test_build_app_config_accepts_every_supported_log_level() -> None:
    assert build_app_config(log_level="error").log_level == logging.ERROR
    assert build_app_config(log_level=" Info ").log_level == logging.INFO
