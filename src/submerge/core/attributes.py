from __future__ import annotations

import logging
import re
from typing import Sequence

from submerge.core.errors import InvalidAttributeError
from submerge.schemas.attribute import (
    MergeAttribute,
    MoveCues,
    NearestCue,
    Passthrough,
    TopBottom,
)

logger = logging.getLogger(__name__)

_NEAREST_CUE_PATTERN = re.compile(r"^nearest-cue-(\d+)(-no-append)?$", flags=re.ASCII)
_MOVE_PATTERN = re.compile(r"^move-(-?\d+)$", flags=re.ASCII)
_PASSTHROUGH_TOKENS = frozenset({"", "simple"})

ATTRIBUTE_USAGE: tuple[tuple[str, str], ...] = (
    ("top-bottom", "Show the secondary track at the top and the primary at the bottom."),
    ("move-<ms>", "Shift the secondary track by <ms>, positive or negative."),
    (
        "nearest-cue-<ms>[-no-append]",
        "Fold secondary lines into primary cues starting within <ms>; "
        "with -no-append, re-time them instead.",
    ),
    ("simple", "Combine both tracks without any transform."),
)


def parse_attribute(token: str) -> MergeAttribute:
    value = token.strip()
    if value == "top-bottom":
        return TopBottom()
    if value in _PASSTHROUGH_TOKENS:
        return Passthrough()
    match = _NEAREST_CUE_PATTERN.match(value)
    if match:
        return NearestCue(
            threshold_ms=int(match.group(1)),
            append=match.group(2) is None,
        )
    match = _MOVE_PATTERN.match(value)
    if match:
        return MoveCues(delay_ms=int(match.group(1)))
    raise InvalidAttributeError(token)


def resolve_attributes(
    attributes: str | Sequence[str] | None,
) -> list[MergeAttribute]:
    """Parse tokens and order them by priority class, keeping caller order within a class.

    Caller order across classes is ignored: positions are cleared first,
    then delays, then nearest-cue matching.
    """
    if attributes is None:
        return []
    if isinstance(attributes, str):
        attributes = [attributes]
    parsed = [parse_attribute(token) for token in attributes]
    ordered = sorted(parsed, key=lambda attribute: attribute.priority)
    logger.debug("Resolved attributes %s -> %s", list(attributes), ordered)
    return ordered
