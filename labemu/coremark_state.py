"""CoreMark state-machine kernel: builds number-like input and scans it."""

from __future__ import annotations

import enum
from collections.abc import MutableSequence

from labemu.coremark_util import crcu32

NUM_CORE_STATES = 8
_COMMA = ord(",")


class CoreState(enum.IntEnum):
    """States of the number-recognising state machine."""

    START = 0
    INVALID = 1
    S1 = 2
    S2 = 3
    INT = 4
    FLOAT = 5
    EXPONENT = 6
    SCIENTIFIC = 7


_INT_PATTERNS = (b"5012", b"1234", b"-874", b"+122")
_FLOAT_PATTERNS = (b"35.54400", b".1234500", b"-110.700", b"+0.64400")
_SCI_PATTERNS = (b"5.500e+3", b"-.123e-2", b"-87e+832", b"+0.6e-12")
_ERR_PATTERNS = (b"T0.3e-1F", b"-T.T++Tq", b"1T3.4e4z", b"34.0e-T^")


def _to_s16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def _isdigit(symbol: int) -> bool:
    return 0x30 <= symbol <= 0x39


def _is_sign(symbol: int) -> bool:
    return symbol in (ord("+"), ord("-"))


def state_transition(
    data: bytes | bytearray, pos: int, counts: MutableSequence[int]
) -> tuple[CoreState, int]:
    """Scan one comma-separated token of ``data`` starting at ``pos``.

    Transition counters in ``counts`` (indexed by :class:`CoreState`) are
    incremented as the machine moves. Scanning stops at a comma (which is
    consumed), at a zero byte, at the end of ``data`` or once the input is
    known to be invalid. Returns the final state and the position after it.
    """
    state = CoreState.START
    end = len(data)
    while pos < end and data[pos] != 0 and state is not CoreState.INVALID:
        symbol = data[pos]
        pos += 1
        if symbol == _COMMA:
            break
        if state is CoreState.START:
            if _isdigit(symbol):
                state = CoreState.INT
            elif _is_sign(symbol):
                state = CoreState.S1
            elif symbol == ord("."):
                state = CoreState.FLOAT
            else:
                state = CoreState.INVALID
                counts[CoreState.INVALID] += 1
            counts[CoreState.START] += 1
        elif state is CoreState.S1:
            if _isdigit(symbol):
                state = CoreState.INT
            elif symbol == ord("."):
                state = CoreState.FLOAT
            else:
                state = CoreState.INVALID
            counts[CoreState.S1] += 1
        elif state is CoreState.INT:
            if symbol == ord("."):
                state = CoreState.FLOAT
                counts[CoreState.INT] += 1
            elif not _isdigit(symbol):
                state = CoreState.INVALID
                counts[CoreState.INT] += 1
        elif state is CoreState.FLOAT:
            if symbol in (ord("E"), ord("e")):
                state = CoreState.S2
                counts[CoreState.FLOAT] += 1
            elif not _isdigit(symbol):
                state = CoreState.INVALID
                counts[CoreState.FLOAT] += 1
        elif state is CoreState.S2:
            state = CoreState.EXPONENT if _is_sign(symbol) else CoreState.INVALID
            counts[CoreState.S2] += 1
        elif state is CoreState.EXPONENT:
            state = CoreState.SCIENTIFIC if _isdigit(symbol) else CoreState.INVALID
            counts[CoreState.EXPONENT] += 1
        elif state is CoreState.SCIENTIFIC:
            if not _isdigit(symbol):
                state = CoreState.INVALID
                counts[CoreState.INVALID] += 1
    return state, pos


def _pattern_for(seed: int) -> bytes:
    group = (seed >> 3) & 0x3
    kind = seed & 0x7
    if kind <= 2:
        return _INT_PATTERNS[group]
    if kind <= 4:
        return _FLOAT_PATTERNS[group]
    if kind <= 6:
        return _SCI_PATTERNS[group]
    return _ERR_PATTERNS[group]


def init_state(size: int, seed: int) -> bytearray:
    """Build a ``size``-byte block of comma-separated patterns chosen by ``seed``.

    The block is zero-padded and always ends with at least one zero byte.
    """
    if size < 1:
        raise ValueError("state input needs at least one byte")
    block = bytearray(size)
    limit = size - 1
    seed = _to_s16(seed)
    total = 0
    pattern = b""
    while total + len(pattern) + 1 < limit:
        if pattern:
            block[total : total + len(pattern)] = pattern
            block[total + len(pattern)] = _COMMA
            total += len(pattern) + 1
        seed = _to_s16(seed + 1)
        pattern = _pattern_for(seed)
    return block


def _scan(block: bytearray, final: list[int], track: list[int]) -> None:
    pos = 0
    end = len(block)
    while pos < end and block[pos] != 0:
        state, pos = state_transition(block, pos, track)
        final[state] += 1


def _corrupt(block: bytearray, seed: int, step: int) -> None:
    key = seed & 0xFF
    for pos in range(0, len(block), step):
        if block[pos] != _COMMA:
            block[pos] ^= key


def bench_state(block: bytearray, seed1: int, seed2: int, step: int, crc: int) -> int:
    """Scan ``block``, corrupt it with ``seed1``, scan again, undo with ``seed2``.

    ``block`` is changed in place; it is restored when ``seed1 == seed2``.
    Returns ``crc`` extended with the final-state and transition counts.
    """
    if step <= 0:
        raise ValueError("step must be positive")
    final = [0] * NUM_CORE_STATES
    track = [0] * NUM_CORE_STATES
    _scan(block, final, track)
    _corrupt(block, seed1, step)
    _scan(block, final, track)
    _corrupt(block, seed2, step)
    for final_count, track_count in zip(final, track):
        crc = crcu32(final_count, crc)
        crc = crcu32(track_count, crc)
    return crc