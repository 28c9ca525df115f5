"""Word-oriented device model: a bus, a RAM and a loader UART."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod


class AbsMmioError(Exception):
    """Raised for unmapped, overlapping or unsupported accesses."""


class UartProgram(enum.Enum):
    """Which test program the UART input stream is set up for."""

    NONE = "none"
    LAB2 = "lab2"
    LOADER = "loader"


class Device(ABC):
    """A named device covering ``[start_addr, start_addr + size)``."""

    def __init__(self, name: str, start_addr: int, size: int, width: int = 4) -> None:
        self.name = name
        self.start_addr = start_addr
        self.end_addr = start_addr + size
        self.width = width

    def addr_size(self) -> int:
        return self.end_addr - self.start_addr

    def addr_in(self, addr: int) -> bool:
        return self.start_addr <= addr < self.end_addr

    def offset_in(self, offset: int) -> bool:
        return 0 <= offset < self.addr_size()

    def _aligned_offset(self, addr: int) -> int:
        return (addr - self.start_addr) & ~(self.width - 1)

    @abstractmethod
    def read(self, addr: int, size: int) -> int:
        """Read the word containing ``addr``."""

    @abstractmethod
    def write(self, addr: int, mask: int, wdata: int) -> None:
        """Write the bytes of ``wdata`` selected by ``mask``."""

    @abstractmethod
    def write_buffer(self, addr: int, data: bytes) -> None:
        """Copy ``data`` into the device at ``addr``."""

    @abstractmethod
    def read_buffer(self, addr: int, size: int) -> bytes:
        """Copy ``size`` bytes out of the device at ``addr``."""


class Bus(Device):
    """Dispatches each access to the device whose range holds its address."""

    def __init__(self, name: str, start_addr: int, size: int, width: int = 4) -> None:
        super().__init__(name, start_addr, size, width)
        self._devices: list[Device] = []

    def add_device(self, device: Device) -> None:
        for dev in self._devices:
            if _overlap(device, dev):
                raise AbsMmioError(
                    f"absmmio_bus: device {dev.name} [{dev.start_addr:x},{dev.end_addr:x}) "
                    f"and {device.name} [{device.start_addr:x},{device.end_addr:x}) "
                    "address overlap"
                )
        self._devices.append(device)

    def _find(self, addr: int) -> Device | None:
        return next((dev for dev in self._devices if dev.addr_in(addr)), None)

    def read(self, addr: int, size: int) -> int:
        dev = self._find(addr)
        if dev is None:
            raise AbsMmioError(
                f"absmmio_bus: read address [{addr:x},{addr + size:x}] do not match any"
            )
        return dev.read(addr, size)

    def write(self, addr: int, mask: int, wdata: int) -> None:
        dev = self._find(addr)
        if dev is None:
            raise AbsMmioError(
                f"absmmio_bus: write address {addr:x}({mask:x}) do not match any"
            )
        dev.write(addr, mask, wdata)

    def write_buffer(self, addr: int, data: bytes) -> None:
        dev = self._find(addr)
        if dev is None:
            raise AbsMmioError(f"absmmio_bus: write buff address {addr:x} do not match any")
        dev.write_buffer(addr, data)

    def read_buffer(self, addr: int, size: int) -> bytes:
        dev = self._find(addr)
        if dev is None:
            raise AbsMmioError(f"absmmio_bus: read buff address {addr:x} do not match any")
        return dev.read_buffer(addr, size)


def _overlap(a: Device, b: Device) -> bool:
    return (a.start_addr <= b.start_addr < a.end_addr) or (
        b.start_addr <= a.start_addr < b.end_addr
    )


class RamDevice(Device):
    """Zero-initialised little-endian memory accessed in aligned words."""

    def __init__(self, name: str, start_addr: int, size: int, width: int = 4) -> None:
        super().__init__(name, start_addr, size, width)
        self._mem = bytearray(size)

    def _word_offset(self, addr: int) -> int:
        offset = self._aligned_offset(addr)
        if not self.offset_in(offset) or offset + self.width > self.addr_size():
            raise AbsMmioError(f"dev_ram: address {addr:x} out of range")
        return offset

    def read(self, addr: int, size: int) -> int:
        offset = self._word_offset(addr)
        return int.from_bytes(self._mem[offset : offset + self.width], "little")

    def write(self, addr: int, mask: int, wdata: int) -> None:
        offset = self._word_offset(addr)
        for i in range(self.width):
            if mask & (1 << i):
                self._mem[offset + i] = (wdata >> (8 * i)) & 0xFF

    def write_buffer(self, addr: int, data: bytes) -> None:
        offset = addr - self.start_addr
        if offset + len(data) > self.addr_size():
            raise AbsMmioError("dev_ram: write buff too large")
        self._mem[offset : offset + len(data)] = data

    def read_buffer(self, addr: int, size: int) -> bytes:
        offset = addr - self.start_addr
        if offset + size > self.addr_size():
            raise AbsMmioError("dev_ram: read buff too large")
        return bytes(self._mem[offset : offset + size])


UART_STATUS = 0x3FC
UART_DATA = 0x3F8

# 'G' followed by the little-endian bytes of the load address 0x80100000.
_LOADER_INPUT = (ord("G"), 0x00, 0x00, 0x10, 0x80)


class UartDevice(Device):
    """Scripted serial port feeding the input a test program expects."""

    def __init__(
        self,
        name: str,
        start_addr: int,
        size: int,
        width: int = 4,
        program: UartProgram = UartProgram.NONE,
    ) -> None:
        super().__init__(name, start_addr, size, width)
        self.program = program
        self._count = 0

    def read(self, addr: int, size: int) -> int:
        offset = self._aligned_offset(addr)
        if offset == UART_STATUS:
            return 3
        if offset == UART_DATA:
            if self.program is UartProgram.LAB2:
                return ord("T")
            if self.program is UartProgram.LOADER:
                count = self._count
                self._count += 1
                return _LOADER_INPUT[count] if count < len(_LOADER_INPUT) else 0
            return 0
        raise AbsMmioError(f"dev_uart: read of unknown register {offset:x}")

    def write(self, addr: int, mask: int, wdata: int) -> None:
        """Writes are accepted and discarded."""

    def write_buffer(self, addr: int, data: bytes) -> None:
        raise AbsMmioError("dev_uart: buffer writes are not supported")

    def read_buffer(self, addr: int, size: int) -> bytes:
        raise AbsMmioError("dev_uart: buffer reads are not supported")