from __future__ import annotations

import pytest

from submerge.core.errors import TimestampFormatError
from submerge.core.timestamp import decode_timestamp, encode_timestamp
from submerge.schemas.subtitle import SubtitleFormat


def test_decode_timestamp_accepts_both_separators() -> None:
    assert decode_timestamp("00:01:02,345") == 62_345
    assert decode_timestamp("00:01:02.345") == 62_345


def test_decode_timestamp_hours_are_optional_and_unbounded() -> None:
    assert decode_timestamp("01:02.003") == 62_003
    assert decode_timestamp("123:00:00.000") == 123 * 3_600_000


@pytest.mark.parametrize(
    "value",
    ["1:02:03,45", "00:1:02,345", "00:01:02:345", " 00:01:02,345", "00:01:02,345\n", ""],
)
def test_decode_timestamp_rejects_malformed_text(value: str) -> None:
    with pytest.raises(TimestampFormatError) as excinfo:
        decode_timestamp(value)
    assert excinfo.value.text == value


def test_encode_timestamp_uses_format_separator() -> None:
    assert encode_timestamp(62_345) == "00:01:02,345"
    assert encode_timestamp(62_345, SubtitleFormat.VTT) == "00:01:02.345"


def test_encode_timestamp_does_not_truncate_hours() -> None:
    assert encode_timestamp(100 * 3_600_000 + 5) == "100:00:00,005"


def test_encode_timestamp_clamps_negative_offsets() -> None:
    assert encode_timestamp(-250) == "00:00:00,000"


@pytest.mark.parametrize("millis", [0, 999, 59_999, 3_599_999, 86_400_001])
def test_decode_inverts_encode(millis: int) -> None:
    for fmt in SubtitleFormat:
        assert decode_timestamp(encode_timestamp(millis, fmt)) == millis
