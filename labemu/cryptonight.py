"""Access-order profile of a CryptoNight-style scratchpad walk."""

from __future__ import annotations

import argparse
import sys
from array import array
from collections.abc import Iterator, Sequence

LEN = 0x100000
INIT_WORDS = 0x80000
ADDR_MASK = 0x7FFFF
SEED_A = 0xDEADBEEF
SEED_B = 0xFACEB00C
REPORT_STEP = 100

_U32 = 0xFFFFFFFF


def _zeros(length: int) -> array:
    return array("q", bytes(8 * length))


class AccessStats:
    """A word scratchpad that records read/write counts and first-access order."""

    def __init__(self, length: int = LEN) -> None:
        if length < 0:
            raise ValueError("length must not be negative")
        self.length = length
        self.pad = _zeros(length)
        self.reads = _zeros(length)
        self.writes = _zeros(length)
        self.read_order = _zeros(length)
        self.write_order = _zeros(length)
        self.read_total = 0
        self.write_total = 0

    def load(self, addr: int) -> int:
        """Read word ``addr``, noting the order of its first read."""
        if self.reads[addr] == 0:
            self.read_order[addr] = self.read_total
            self.read_total += 1
        self.reads[addr] += 1
        return self.pad[addr]

    def store(self, addr: int, data: int) -> None:
        """Write ``data`` to word ``addr``, noting the order of its first write."""
        if self.writes[addr] == 0:
            self.write_order[addr] = self.write_total
            self.write_total += 1
        self.writes[addr] += 1
        self.pad[addr] = data & _U32


def crn(a: int = SEED_A, b: int = SEED_B, n: int = LEN, length: int = LEN) -> AccessStats:
    """Run ``n`` rounds of the scratchpad walk and return the access statistics."""
    if length < INIT_WORDS:
        raise ValueError(f"length must be at least {INIT_WORDS:#x}")
    stats = AccessStats(length)
    for k in range(INIT_WORDS):
        stats.store(k, k)
    a &= _U32
    b &= _U32
    for _ in range(n):
        addr1 = a & ADDR_MASK
        t = ((a >> 1) ^ (stats.load(addr1) << 1)) & _U32
        stats.store(addr1, t ^ b)
        addr2 = t & ADDR_MASK
        b = t
        t = stats.load(addr2)
        a = (a + b * t) & _U32
        stats.store(addr2, a)
        a ^= t
    return stats


def order_report(stats: AccessStats, step: int = REPORT_STEP) -> Iterator[str]:
    """Lines of ``start: rorder,worder ...`` for each full block of ``step`` words."""
    if step <= 0:
        raise ValueError("step must be positive")
    start = 0
    while start + step < stats.length:
        pairs = "".join(
            f"{stats.read_order[i]},{stats.write_order[i]} "
            for i in range(start, start + step)
        )
        yield f"{start}: {pairs}"
        start += step


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Print the first read and write order of each scratchpad word."
    )
    parser.add_argument("--rounds", type=int, default=LEN, help="rounds of the walk")
    parser.add_argument("--step", type=int, default=REPORT_STEP, help="words per line")
    args = parser.parse_args(argv)
    stats = crn(SEED_A, SEED_B, args.rounds, LEN)
    for line in order_report(stats, args.step):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())