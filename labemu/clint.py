"""Core-local interruptor: machine timer and software interrupt registers."""

from __future__ import annotations

from labemu.bus import BusError, MmioDevice

MSIP_BASE = 0x0
MTIMECMP_BASE = 0x4000
MTIME_BASE = 0xBFF8
MTIME_END = 0xC000

_MTIME = "mtime"
_MTIMECMP = "mtimecmp"
_MSIP = "msip"


class Clint(MmioDevice):
    """Holds ``mtime``, one ``mtimecmp`` and one ``msip`` per hart."""

    def __init__(self, nr_hart: int = 1) -> None:
        if nr_hart < 1:
            raise ValueError("a clint needs at least one hart")
        self.nr_hart = nr_hart
        self.mtime = 0
        self.mtimecmp = [0] * nr_hart
        self.msip = [0] * nr_hart

    def _locate(self, addr: int, size: int) -> tuple[str, int]:
        if addr >= MTIMECMP_BASE:
            if addr >= MTIME_BASE and addr + size <= MTIME_END:
                return _MTIME, addr - MTIME_BASE
            if addr + size <= MTIMECMP_BASE + 8 * self.nr_hart:
                return _MTIMECMP, addr - MTIMECMP_BASE
        elif addr + size <= 4 * self.nr_hart:
            return _MSIP, addr - MSIP_BASE
        raise BusError(f"clint: access {addr:x}(+{size}) hits no register")

    def _pack(self, block: str) -> bytearray:
        if block == _MTIME:
            return bytearray(self.mtime.to_bytes(8, "little"))
        if block == _MTIMECMP:
            return bytearray(b"".join(v.to_bytes(8, "little") for v in self.mtimecmp))
        return bytearray(b"".join(v.to_bytes(4, "little") for v in self.msip))

    def _unpack(self, block: str, raw: bytearray) -> None:
        if block == _MTIME:
            self.mtime = int.from_bytes(raw, "little")
        elif block == _MTIMECMP:
            self.mtimecmp = [
                int.from_bytes(raw[i : i + 8], "little") for i in range(0, len(raw), 8)
            ]
        else:
            self.msip = [
                int.from_bytes(raw[i : i + 4], "little") & 1 for i in range(0, len(raw), 4)
            ]

    def read(self, addr: int, size: int) -> bytes:
        block, offset = self._locate(addr, size)
        return bytes(self._pack(block)[offset : offset + size])

    def write(self, addr: int, data: bytes) -> None:
        block, offset = self._locate(addr, len(data))
        raw = self._pack(block)
        raw[offset : offset + len(data)] = data
        self._unpack(block, raw)

    def tick(self) -> None:
        """Advance ``mtime`` by one."""
        self.mtime = (self.mtime + 1) & 0xFFFF_FFFF_FFFF_FFFF

    def _check_hart(self, hart_id: int) -> None:
        if not 0 <= hart_id < self.nr_hart:
            raise ValueError(f"hart {hart_id} does not exist")

    def software_irq(self, hart_id: int) -> bool:
        """Whether the machine software interrupt of ``hart_id`` is pending."""
        self._check_hart(hart_id)
        return bool(self.msip[hart_id] & 1)

    def timer_irq(self, hart_id: int) -> bool:
        """Whether the machine timer interrupt of ``hart_id`` is pending."""
        self._check_hart(hart_id)
        return self.mtime > self.mtimecmp[hart_id]

    def set_cmp(self, value: int) -> None:
        """Set the timer compare value of every hart."""
        self.mtimecmp = [value & 0xFFFF_FFFF_FFFF_FFFF] * self.nr_hart


class _ClintView(MmioDevice):
    def __init__(self, clint: Clint) -> None:
        self.clint = clint


class MtimeView(_ClintView):
    """The ``mtime`` register of a :class:`Clint` mapped on its own."""

    def read(self, addr: int, size: int) -> bytes:
        return self.clint.read(addr + MTIME_BASE, size)

    def write(self, addr: int, data: bytes) -> None:
        self.clint.write(addr + MTIME_BASE, data)


class MtimecmpView(_ClintView):
    """The ``mtimecmp`` registers of a :class:`Clint` mapped on their own."""

    def read(self, addr: int, size: int) -> bytes:
        return self.clint.read(addr + MTIMECMP_BASE, size)

    def write(self, addr: int, data: bytes) -> None:
        self.clint.write(addr + MTIMECMP_BASE, data)


class MswiView(_ClintView):
    """The ``msip`` registers of a :class:`Clint` mapped on their own."""

    def read(self, addr: int, size: int) -> bytes:
        return self.clint.read(addr + MSIP_BASE, size)

    def write(self, addr: int, data: bytes) -> None:
        self.clint.write(addr + MSIP_BASE, data)