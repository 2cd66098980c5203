from __future__ import annotations

from enum import Enum
import logging
from pathlib import Path
import re
from typing import Any, Sequence

from submerge.core.errors import CueParseError
from submerge.core.timestamp import TIMESTAMP_PATTERN, decode_timestamp, encode_timestamp
from submerge.infra.storage import read_text, write_text
from submerge.schemas.subtitle import SubtitleCue, SubtitleFormat

logger = logging.getLogger(__name__)

_INDEX_LINE_PATTERN = re.compile(r"^\d+$", flags=re.ASCII)
_TIMESTAMP_LINE_PATTERN = re.compile(
    rf"^({TIMESTAMP_PATTERN}) --> ({TIMESTAMP_PATTERN})(?: (.*))?\Z", flags=re.ASCII
)
_BLANK_RUN_PATTERN = re.compile(r"\n{3,}")
_VTT_HEADER_PATTERN = re.compile(r"^WEBVTT.*\n(?:.*: .*\n)*\n")


class ParserState(Enum):
    EXPECT_INDEX = "index"
    EXPECT_TIMESTAMP = "timestamp"
    EXPECT_TEXT = "text"


def _normalize_lines(content: str) -> list[str]:
    text = content.lstrip("\ufeff").strip() + "\n"
    text = text.replace("\r\n", "\n")
    text = _BLANK_RUN_PATTERN.sub("\n\n", text)
    text = _VTT_HEADER_PATTERN.sub("", text, count=1)
    return text.split("\n")


def _is_index_line(row: str | None) -> bool:
    return row is not None and bool(_INDEX_LINE_PATTERN.match(row.strip()))


def _is_timestamp_line(row: str | None) -> bool:
    return row is not None and bool(_TIMESTAMP_LINE_PATTERN.match(row))


def _row_at(rows: list[str], index: int) -> str | None:
    return rows[index] if index < len(rows) else None


def parse_cues(content: str) -> list[SubtitleCue]:
    """Parse SRT or WebVTT text into cues, in source order.

    Index lines are optional. A cue ends at the blank line that precedes
    the next timestamp line (or index + timestamp pair), or at end of input.
    """
    if not content.lstrip("\ufeff").strip():
        return []
    rows = _normalize_lines(content)
    cues: list[SubtitleCue] = []
    state = ParserState.EXPECT_INDEX
    start = end = 0
    settings: str | None = None
    text = ""

    for index, row in enumerate(rows):
        if state is ParserState.EXPECT_INDEX:
            state = ParserState.EXPECT_TIMESTAMP
            if _is_index_line(row):
                continue

        if state is ParserState.EXPECT_TIMESTAMP:
            match = _TIMESTAMP_LINE_PATTERN.match(row)
            if not match:
                raise CueParseError("timestamp", index + 1, row)
            start = decode_timestamp(match.group(1))
            end = decode_timestamp(match.group(2))
            settings = match.group(3) or None
            text = ""
            state = ParserState.EXPECT_TEXT
            continue

        next_row = _row_at(rows, index + 1)
        if _is_timestamp_line(next_row):
            cues.append(SubtitleCue(start=start, end=end, text=text, settings=settings))
            state = ParserState.EXPECT_TIMESTAMP
            continue
        is_last_row = index == len(rows) - 1
        starts_next_block = _is_index_line(next_row) and _is_timestamp_line(
            _row_at(rows, index + 2)
        )
        if is_last_row or starts_next_block:
            cues.append(SubtitleCue(start=start, end=end, text=text, settings=settings))
            state = ParserState.EXPECT_INDEX
        else:
            text = f"{text}\n{row}" if text else row

    logger.debug("Parsed %d cues from %d rows", len(cues), len(rows))
    return cues


def format_cues(
    cues: Sequence[SubtitleCue], fmt: SubtitleFormat = SubtitleFormat.SRT
) -> str:
    """Render cues as SRT or WebVTT text, numbered from 1."""
    blocks: list[str] = []
    for index, cue in enumerate(cues, start=1):
        timing = f"{encode_timestamp(cue.start, fmt)} --> {encode_timestamp(cue.end, fmt)}"
        if fmt.supports_settings and cue.settings:
            timing = f"{timing} {cue.settings}"
        blocks.append(f"{index}\n{timing}\n{cue.text}")
    return fmt.header + "\n\n".join(blocks) + "\n"


def cues_to_payload(cues: Sequence[SubtitleCue]) -> list[dict[str, Any]]:
    return [
        {
            "start": cue.start,
            "end": cue.end,
            "text": cue.text,
            "settings": cue.settings,
        }
        for cue in cues
    ]


def read_subtitle(input_path: Path, encoding: str = "utf-8") -> list[SubtitleCue]:
    return parse_cues(read_text(input_path, encoding=encoding))


def write_subtitle(
    cues: Sequence[SubtitleCue],
    output_path: Path,
    fmt: SubtitleFormat = SubtitleFormat.SRT,
    encoding: str = "utf-8",
) -> None:
    """Write subtitle cues to an SRT or WebVTT file."""
    write_text(output_path, format_cues(cues, fmt), encoding=encoding)
