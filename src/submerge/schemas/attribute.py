from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar


class AttributePriority(IntEnum):
    """Application order of merge attributes, lowest first."""

    POSITION = 0
    TIMING = 1
    NEAREST = 2
    NOOP = 3


@dataclass(frozen=True)
class TopBottom:
    priority: ClassVar[AttributePriority] = AttributePriority.POSITION


@dataclass(frozen=True)
class MoveCues:
    delay_ms: int
    priority: ClassVar[AttributePriority] = AttributePriority.TIMING


@dataclass(frozen=True)
class NearestCue:
    threshold_ms: int
    append: bool = True
    priority: ClassVar[AttributePriority] = AttributePriority.NEAREST


@dataclass(frozen=True)
class Passthrough:
    priority: ClassVar[AttributePriority] = AttributePriority.NOOP


MergeAttribute = TopBottom | MoveCues | NearestCue | Passthrough
