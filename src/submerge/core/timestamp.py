from __future__ import annotations

import re

from submerge.core.errors import TimestampFormatError
from submerge.schemas.subtitle import SubtitleFormat

TIMESTAMP_PATTERN = r"(?:\d+:)?\d{2}:\d{2}[,.]\d{3}"
_TIMESTAMP_PARTS_PATTERN = re.compile(
    r"(?:(\d+):)?(\d{2}):(\d{2})[,.](\d{3})", flags=re.ASCII
)


def decode_timestamp(value: str) -> int:
    """Parse `[H:]MM:SS,mmm` (or `.mmm`) into milliseconds."""
    match = _TIMESTAMP_PARTS_PATTERN.fullmatch(value)
    if not match:
        raise TimestampFormatError(value)
    hours, minutes, seconds, millis = match.groups()
    return (
        int(hours or 0) * 3_600_000
        + int(minutes) * 60_000
        + int(seconds) * 1_000
        + int(millis)
    )


def encode_timestamp(millis: int, fmt: SubtitleFormat = SubtitleFormat.SRT) -> str:
    """Format milliseconds as `HH:MM:SS,mmm` (SRT) or `HH:MM:SS.mmm` (VTT).

    Negative offsets, which a backwards `move-D` can produce, render as zero.
    """
    millis = max(0, int(millis))
    hours = millis // 3_600_000
    minutes = (millis % 3_600_000) // 60_000
    secs = (millis % 60_000) // 1_000
    ms = millis % 1_000
    return f"{hours:02d}:{minutes:02d}:{secs:02d}{fmt.millisecond_separator}{ms:03d}"
