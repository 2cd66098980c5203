from __future__ import annotations

from bisect import bisect_right
from dataclasses import replace
import logging
import re
from typing import Sequence

from submerge.core.attributes import resolve_attributes
from submerge.core.errors import InputTypeError
from submerge.core.subtitle import format_cues, parse_cues
from submerge.schemas.attribute import (
    MergeAttribute,
    MoveCues,
    NearestCue,
    Passthrough,
    TopBottom,
)
from submerge.schemas.subtitle import SubtitleCue, SubtitleFormat

logger = logging.getLogger(__name__)

TOP_ALIGNMENT_TAG = r"{\an8}"
_ALIGNMENT_TAG_PATTERN = re.compile(r"\{\\an?[0-9]\}")
_POSITION_TAG_PATTERN = re.compile(r"\{\\pos\([0-9]+,[0-9]+\)\}")

SubtitleInput = str | Sequence[SubtitleCue]


def _coerce_cues(value: object, label: str) -> list[SubtitleCue]:
    if isinstance(value, str):
        return parse_cues(value) if value else []
    if isinstance(value, (list, tuple)):
        return list(value)
    raise InputTypeError(
        f"{label} must be subtitle text or a list of cues, got {type(value).__name__}"
    )


def find_floor_index(values: Sequence[int], target: int) -> int:
    """Return the rightmost index whose value is <= target, or -1 if none is."""
    return bisect_right(values, target) - 1


def clear_positions(cues: Sequence[SubtitleCue]) -> list[SubtitleCue]:
    cleared: list[SubtitleCue] = []
    for cue in cues:
        text = _ALIGNMENT_TAG_PATTERN.sub("", cue.text)
        text = _POSITION_TAG_PATTERN.sub("", text)
        cleared.append(replace(cue, text=text))
    return cleared


def shift_cues(cues: Sequence[SubtitleCue], delay_ms: int) -> list[SubtitleCue]:
    return [
        replace(cue, start=cue.start + delay_ms, end=cue.end + delay_ms)
        for cue in cues
    ]


def _find_nearest_index(
    primary: Sequence[SubtitleCue],
    starts: Sequence[int],
    cue: SubtitleCue,
    threshold_ms: int,
) -> int | None:
    index = find_floor_index(starts, cue.start)
    if index == -1:
        if primary[0].start - cue.start <= threshold_ms:
            return 0
        return None
    if cue.start - primary[index].start <= threshold_ms:
        return index
    if index == len(primary) - 1:
        return None
    if primary[index + 1].start - cue.start <= threshold_ms:
        return index + 1
    return None


def align_nearest(
    primary: Sequence[SubtitleCue],
    secondary: Sequence[SubtitleCue],
    threshold_ms: int,
    append: bool = True,
) -> tuple[list[SubtitleCue], list[SubtitleCue]]:
    """Match each secondary cue to a primary cue starting within the threshold.

    In append mode a matched secondary cue is folded into the primary cue's
    text and dropped. Otherwise it is kept and re-timed to the primary cue;
    its end only snaps when both ends are within the threshold.
    """
    aligned_primary = sorted(primary, key=lambda cue: cue.start)
    if not aligned_primary:
        return aligned_primary, list(secondary)
    starts = [cue.start for cue in aligned_primary]
    aligned_secondary: list[SubtitleCue] = []
    matched = 0
    for cue in secondary:
        index = _find_nearest_index(aligned_primary, starts, cue, threshold_ms)
        if index is None:
            aligned_secondary.append(cue)
            continue
        matched += 1
        target = aligned_primary[index]
        if append:
            aligned_primary[index] = replace(target, text=f"{target.text}\n{cue.text}")
            continue
        end = target.end if abs(cue.end - target.end) <= threshold_ms else cue.end
        aligned_secondary.append(replace(cue, start=target.start, end=end))
    logger.debug(
        "nearest-cue matched %d of %d secondary cues (threshold=%dms, append=%s)",
        matched,
        len(secondary),
        threshold_ms,
        append,
    )
    return aligned_primary, aligned_secondary


def apply_attribute(
    attribute: MergeAttribute,
    primary: list[SubtitleCue],
    secondary: list[SubtitleCue],
) -> tuple[list[SubtitleCue], list[SubtitleCue]]:
    if isinstance(attribute, TopBottom):
        cleared = clear_positions(secondary)
        return clear_positions(primary), [
            replace(cue, text=TOP_ALIGNMENT_TAG + cue.text) for cue in cleared
        ]
    if isinstance(attribute, MoveCues):
        return primary, shift_cues(secondary, attribute.delay_ms)
    if isinstance(attribute, NearestCue):
        return align_nearest(
            primary, secondary, attribute.threshold_ms, append=attribute.append
        )
    if isinstance(attribute, Passthrough):
        return primary, secondary
    raise TypeError(f"Unsupported merge attribute: {attribute!r}")


def combine_cues(
    primary: Sequence[SubtitleCue], secondary: Sequence[SubtitleCue]
) -> list[SubtitleCue]:
    """Concatenate primary then secondary and stable-sort by start time."""
    return sorted([*primary, *secondary], key=lambda cue: cue.start)


def merge_subtitles(
    primary: SubtitleInput,
    secondary: SubtitleInput,
    attributes: str | Sequence[str] | None = None,
    *,
    raw: bool = False,
    output_format: SubtitleFormat = SubtitleFormat.SRT,
) -> str | list[SubtitleCue]:
    """Transform the secondary track by the given attributes and merge it into the primary."""
    primary_cues = _coerce_cues(primary, "primary")
    secondary_cues = _coerce_cues(secondary, "secondary")
    resolved = resolve_attributes(attributes)
    for attribute in resolved:
        primary_cues, secondary_cues = apply_attribute(
            attribute, primary_cues, secondary_cues
        )
    merged = combine_cues(primary_cues, secondary_cues)
    logger.debug(
        "Merged %d primary and %d secondary cues into %d",
        len(primary_cues),
        len(secondary_cues),
        len(merged),
    )
    if raw:
        return merged
    return format_cues(merged, output_format)
