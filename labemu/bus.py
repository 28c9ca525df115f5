"""Memory-mapped device bus with RAM and a finish-flag device."""

from __future__ import annotations

import bisect
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass

_log = logging.getLogger(__name__)


class BusError(Exception):
    """Raised when an access cannot be served by a device or the bus."""


class MmioDevice(ABC):
    """A device reachable through memory-mapped reads and writes."""

    @abstractmethod
    def read(self, addr: int, size: int) -> bytes:
        """Return ``size`` bytes starting at ``addr``."""

    @abstractmethod
    def write(self, addr: int, data: bytes) -> None:
        """Store ``data`` starting at ``addr``."""


@dataclass(frozen=True)
class DeviceConfig:
    """How a device is attached to a :class:`MemoryBus`."""

    device: MmioDevice
    raw_addr: bool = False
    trace_mem: bool = False


class MemoryBus(MmioDevice):
    """Routes accesses to the device whose address range contains them."""

    def __init__(self) -> None:
        self._ranges: list[tuple[int, int]] = []
        self._configs: dict[tuple[int, int], DeviceConfig] = {}

    def add_device(
        self,
        start: int,
        length: int,
        device: MmioDevice,
        raw_addr: bool = False,
        trace_mem: bool = False,
    ) -> None:
        """Map ``device`` at ``[start, start + length)``.

        The start address must be a multiple of the length and the range
        must not overlap any range already mapped.
        """
        if length <= 0 or start % length:
            raise BusError(f"range [{start:x},+{length:x}) is not aligned to its length")
        new_range = (start, start + length)
        idx = bisect.bisect_left(self._ranges, new_range)
        neighbours = self._ranges[max(idx - 1, 0) : idx + 1]
        for lo, hi in neighbours:
            if max(lo, new_range[0]) < min(hi, new_range[1]):
                raise BusError(
                    f"range [{start:x},{start + length:x}) overlaps [{lo:x},{hi:x})"
                )
        self._ranges.insert(idx, new_range)
        self._configs[new_range] = DeviceConfig(device, raw_addr, trace_mem)

    def _route(self, addr: int, size: int) -> tuple[DeviceConfig, int]:
        idx = bisect.bisect_right(self._ranges, (addr, float("inf"))) - 1
        if idx < 0:
            raise BusError(f"no device at {addr:x}")
        lo, hi = self._ranges[idx]
        if not (lo <= addr and addr + size <= hi):
            raise BusError(f"access {addr:x}(+{size}) is not inside a device")
        cfg = self._configs[(lo, hi)]
        local = addr if cfg.raw_addr else addr % (hi - lo)
        return cfg, local

    def read(self, addr: int, size: int) -> bytes:
        cfg, local = self._route(addr, size)
        return cfg.device.read(local, size)

    def write(self, addr: int, data: bytes) -> None:
        cfg, local = self._route(addr, len(data))
        cfg.device.write(local, data)


class Ram(MmioDevice):
    """Zero-initialised byte-addressed memory."""

    def __init__(
        self,
        size: int,
        data: bytes | None = None,
        path: str | os.PathLike[str] | None = None,
    ) -> None:
        self._size = size
        self._mem = bytearray(size)
        self.allow_wrap = False
        if data is not None:
            self.load_mem(data)
        if path is not None:
            self.load_binary(0, path)

    @property
    def size(self) -> int:
        return self._size

    def load_mem(self, data: bytes) -> None:
        """Copy ``data`` to the start of memory."""
        if len(data) > self._size:
            raise ValueError("initial image is larger than the memory")
        self._mem[: len(data)] = data

    def load_binary(self, start: int, path: str | os.PathLike[str]) -> None:
        """Copy a binary file into memory at ``start``, truncating if needed."""
        with open(path, "rb") as fh:
            content = fh.read()
        room = max(self._size - start, 0)
        if len(content) > room:
            _log.warning("ram size is not big enough for init file.")
            content = content[:room]
        self._mem[start : start + len(content)] = content

    def load_text(self, start: int, path: str | os.PathLike[str]) -> None:
        """Load one hexadecimal byte per line into memory at ``start``."""
        addr = start
        with open(path, encoding="ascii") as fh:
            for line in fh:
                text = line.strip()
                if not text:
                    continue
                if addr >= self._size:
                    _log.warning("ram size is not big enough for init file.")
                    break
                self._mem[addr] = int(text, 16) & 0xFF
                addr += 1

    def set_allow_wrap(self, value: bool) -> None:
        """Let out-of-range accesses wrap around the memory size."""
        self.allow_wrap = bool(value)

    def _locate(self, addr: int, size: int) -> int:
        if addr + size <= self._size:
            return addr
        if self.allow_wrap:
            addr %= self._size
            if addr + size <= self._size:
                return addr
        raise BusError(f"ram access {addr:x}(+{size}) out of range")

    def read(self, addr: int, size: int) -> bytes:
        addr = self._locate(addr, size)
        return bytes(self._mem[addr : addr + size])

    def write(self, addr: int, data: bytes) -> None:
        addr = self._locate(addr, len(data))
        self._mem[addr : addr + len(data)] = data


class Mia(MmioDevice):
    """Finish-flag register that always reads as not finished."""

    def read(self, addr: int, size: int) -> bytes:
        if size != 4:
            raise BusError("mia supports only 4-byte reads")
        return bytes(4)

    def write(self, addr: int, data: bytes) -> None:
        raise BusError("mia is read-only")