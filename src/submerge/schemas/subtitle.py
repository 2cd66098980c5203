from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SubtitleFormat(str, Enum):
    SRT = "srt"
    VTT = "vtt"

    @property
    def millisecond_separator(self) -> str:
        return "." if self is SubtitleFormat.VTT else ","

    @property
    def header(self) -> str:
        return "WEBVTT\n\n" if self is SubtitleFormat.VTT else ""

    @property
    def supports_settings(self) -> bool:
        return self is SubtitleFormat.VTT


@dataclass(frozen=True)
class SubtitleCue:
    start: int
    end: int
    text: str
    settings: str | None = None
