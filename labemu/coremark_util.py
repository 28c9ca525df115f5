"""CoreMark support routines: CRC helpers, seed values and argument parsing."""

from __future__ import annotations

import enum
from functools import reduce

ITERATIONS = 1
TOTAL_DATA_SIZE = 2

ID_LIST = 1 << 0
ID_MATRIX = 1 << 1
ID_STATE = 1 << 2
ALL_ALGORITHMS_MASK = ID_LIST | ID_MATRIX | ID_STATE
NUM_ALGORITHMS = 3

_CRC_FEEDBACK = 0x4002
_HEX_DIGITS = "0123456789abcdef"
_DEC_DIGITS = "0123456789"
_QUALIFIERS = {"K": 1024, "M": 1024 * 1024}


class RunKind(enum.Enum):
    """Which set of seeds a benchmark run uses."""

    PROFILE = "profile"
    PERFORMANCE = "performance"
    VALIDATION = "validation"


_SEEDS: dict[RunKind, tuple[int, int, int]] = {
    RunKind.VALIDATION: (0x3415, 0x3415, 0x66),
    RunKind.PERFORMANCE: (0x0, 0x0, 0x66),
    RunKind.PROFILE: (0x8, 0x8, 0x8),
}


def _to_s32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def crcu8(data: int, crc: int) -> int:
    """Fold one byte into a 16-bit CRC."""
    data &= 0xFF
    crc &= 0xFFFF
    for _ in range(8):
        feedback = (data & 1) ^ (crc & 1)
        data >>= 1
        if feedback:
            crc ^= _CRC_FEEDBACK
        crc >>= 1
        if feedback:
            crc |= 0x8000
        else:
            crc &= 0x7FFF
    return crc


def crcu16(newval: int, crc: int) -> int:
    """Fold a 16-bit value into the CRC, low byte first."""
    newval &= 0xFFFF
    return reduce(lambda acc, byte: crcu8(byte, acc), (newval & 0xFF, newval >> 8), crc)


def crc16(newval: int, crc: int) -> int:
    """Fold a signed 16-bit value into the CRC."""
    return crcu16(newval & 0xFFFF, crc)


def crcu32(newval: int, crc: int) -> int:
    """Fold a 32-bit value into the CRC, low half first."""
    newval &= 0xFFFFFFFF
    return crc16(newval >> 16, crc16(newval & 0xFFFF, crc))


def parseval(text: str) -> int:
    """Parse a decimal or ``0x`` hex number with an optional K or M suffix.

    Parsing stops at the first character that is not a digit; an empty
    number reads as zero. The result wraps to a signed 32-bit value.
    """
    negative = text.startswith("-")
    if negative:
        text = text[1:]
    if text.startswith("0x"):
        text = text[2:]
        digits, base = _HEX_DIGITS, 16
    else:
        digits, base = _DEC_DIGITS, 10
    count = len(text) - len(text.lstrip(digits))
    value = int(text[:count], base) if count else 0
    value *= _QUALIFIERS.get(text[count : count + 1], 1)
    if negative:
        value = -value
    return _to_s32(value)


def run_kind_for(total_data_size: int) -> RunKind:
    """The run kind implied by the total data size."""
    if total_data_size == 1200:
        return RunKind.PROFILE
    if total_data_size == 2000:
        return RunKind.PERFORMANCE
    return RunKind.VALIDATION


def get_seed(index: int, run: RunKind = run_kind_for(TOTAL_DATA_SIZE)) -> int:
    """Seed ``index`` (1 to 5) for the given run kind; other indices give 0."""
    if 1 <= index <= 3:
        return _SEEDS[run][index - 1]
    if index == 4:
        return ITERATIONS
    return 0