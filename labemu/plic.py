"""Platform-level interrupt controller."""

from __future__ import annotations

import enum

from labemu.bus import BusError, MmioDevice

PRIORITY_END = 0x1000
PENDING_END = 0x1080
ENABLE_BASE = 0x2000
ENABLE_STRIDE = 0x80
CONTEXT_BASE = 0x200000
CONTEXT_STRIDE = 0x1000


class _Reg(enum.Enum):
    PRIORITY = enum.auto()
    PENDING = enum.auto()
    ENABLE = enum.auto()
    THRESHOLD = enum.auto()
    CLAIM = enum.auto()


def _bit(words: list[int], index: int) -> int:
    return (words[index // 32] >> (index % 32)) & 1


class Plic(MmioDevice):
    """Interrupt controller with ``nr_source`` sources and ``nr_context`` targets.

    Source 0 is reserved. Each access must be a 32-bit word.
    """

    def __init__(self, nr_source: int = 1, nr_context: int = 2) -> None:
        self.nr_source = nr_source
        self.nr_context = nr_context
        words = (nr_source + 1 + 31) // 32
        self.priority = [0] * (nr_source + 1)
        self.pending = [0] * words
        self.claimed = [0] * words
        self.enable = [[0] * words for _ in range(nr_context)]
        self.threshold = [0] * nr_context
        self.claim = [0] * nr_context

    def update_ext(self, source_id: int, fired: bool) -> None:
        """Mark ``source_id`` pending when its line has fired."""
        if fired:
            self.pending[source_id // 32] |= 1 << (source_id % 32)

    def get_int(self, context_id: int) -> bool:
        """Pick the highest-priority deliverable source for ``context_id``."""
        best_priority = 0
        best_source = 0
        for source in range(1, self.nr_source + 1):
            priority = self.priority[source]
            if (
                priority >= self.threshold[context_id]
                and _bit(self.pending, source)
                and _bit(self.enable[context_id], source)
                and not _bit(self.claimed, source)
                and priority > best_priority
            ):
                best_priority = priority
                best_source = source
        self.claim[context_id] = best_source
        return best_source != 0

    def _decode(self, addr: int, size: int) -> tuple[_Reg, int, int]:
        end = addr + size
        if end <= PRIORITY_END:
            if addr == 0 or addr > 4 * self.nr_source or end > 4 * (self.nr_source + 1):
                raise BusError(f"plic: no priority register at {addr:x}")
            return _Reg.PRIORITY, addr // 4, 0
        if end <= PENDING_END:
            return _Reg.PENDING, (addr - PRIORITY_END) // 4, 0
        if end <= ENABLE_BASE:
            raise BusError(f"plic: reserved address {addr:x}")
        if end <= CONTEXT_BASE:
            context = (addr - ENABLE_BASE) // ENABLE_STRIDE
            pos = addr % ENABLE_STRIDE
            if context >= self.nr_context or pos > self.nr_source or pos >= len(self.pending):
                raise BusError(f"plic: no enable register at {addr:x}")
            return _Reg.ENABLE, pos, context
        context = (addr - CONTEXT_BASE) // CONTEXT_STRIDE
        if context >= self.nr_context:
            raise BusError(f"plic: no context at {addr:x}")
        offset = addr % CONTEXT_STRIDE
        if offset == 0:
            return _Reg.THRESHOLD, 0, context
        if offset == 4:
            return _Reg.CLAIM, 0, context
        raise BusError(f"plic: no context register at {addr:x}")

    def read(self, addr: int, size: int) -> bytes:
        if size != 4:
            raise BusError("plic: only 4-byte accesses are supported")
        reg, index, context = self._decode(addr, size)
        if reg is _Reg.PRIORITY:
            value = self.priority[index]
        elif reg is _Reg.PENDING:
            if index > self.nr_source or index >= len(self.pending):
                raise BusError(f"plic: no pending register at {addr:x}")
            value = self.pending[index]
        elif reg is _Reg.ENABLE:
            value = self.enable[context][index]
        elif reg is _Reg.THRESHOLD:
            value = self.threshold[context]
        else:
            value = self.claim[context]
            self.claimed[value // 32] |= 1 << (value % 32)
        return value.to_bytes(4, "little")

    def write(self, addr: int, data: bytes) -> None:
        if len(data) != 4:
            raise BusError("plic: only 4-byte accesses are supported")
        value = int.from_bytes(data, "little")
        reg, index, context = self._decode(addr, len(data))
        if reg is _Reg.PRIORITY:
            self.priority[index] = value
        elif reg is _Reg.PENDING:
            return
        elif reg is _Reg.ENABLE:
            self.enable[context][index] = value
        elif reg is _Reg.THRESHOLD:
            self.threshold[context] = value
        else:
            word = value // 32
            if word >= len(self.pending):
                raise BusError(f"plic: completion of unknown source {value}")
            mask = ~(1 << (value % 32))
            self.claimed[word] &= mask
            self.pending[word] &= mask