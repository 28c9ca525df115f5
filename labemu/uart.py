"""Serial ports: an AXI UART Lite model and a simple scripted console."""

from __future__ import annotations

import struct
import threading
from collections import deque
from typing import TextIO

from labemu.absmmio import UART_DATA, AbsMmioError, UartDevice, UartProgram
from labemu.bus import BusError, MmioDevice

SR_TX_FIFO_FULL = 1 << 3
SR_TX_FIFO_EMPTY = 1 << 2
SR_RX_FIFO_VALID_DATA = 1 << 0
SR_RX_FIFO_FULL = 1 << 1

ULITE_CONTROL_RST_TX = 0x01
ULITE_CONTROL_RST_RX = 0x02

RX_FIFO = 0x0
TX_FIFO = 0x4
STATUS = 0x8
CONTROL = 0xC
_REGS_SIZE = 16


def _byte_of(char: str | int) -> int:
    if isinstance(char, str):
        if len(char) != 1:
            raise ValueError("expected a single character")
        return ord(char) & 0xFF
    return char & 0xFF


class UartLite(MmioDevice):
    """Four 32-bit registers with receive and transmit queues."""

    def __init__(self) -> None:
        self._regs = bytearray(_REGS_SIZE)
        self._set(STATUS, SR_TX_FIFO_EMPTY)
        self._rx: deque[int] = deque()
        self._tx: deque[int] = deque()
        self._rx_lock = threading.Lock()
        self._tx_lock = threading.Lock()
        self._wait_ack = False

    def _get(self, offset: int) -> int:
        return struct.unpack_from("<I", self._regs, offset)[0]

    def _set(self, offset: int, value: int) -> None:
        struct.pack_into("<I", self._regs, offset, value & 0xFFFFFFFF)

    def read(self, addr: int, size: int) -> bytes:
        with self._rx_lock:
            if addr + size > _REGS_SIZE:
                raise BusError(f"uartlite: read {addr:x}(+{size}) out of range")
            status = self._get(STATUS)
            if self._rx:
                self._set(STATUS, status | SR_RX_FIFO_VALID_DATA)
                self._set(RX_FIFO, self._rx[0])
            else:
                self._set(STATUS, status & ~SR_RX_FIFO_VALID_DATA)
            data = bytes(self._regs[addr : addr + size])
            self._wait_ack = False
            if addr <= RX_FIFO <= addr + size and self._rx:
                self._rx.popleft()
            return data

    def write(self, addr: int, data: bytes) -> None:
        with self._tx_lock, self._rx_lock:
            end = addr + len(data)
            if end > _REGS_SIZE:
                raise BusError(f"uartlite: write {addr:x}(+{len(data)}) out of range")
            self._regs[addr:end] = data
            if addr <= TX_FIFO <= end:
                self._tx.append(self._get(TX_FIFO) & 0xFF)
            if addr <= CONTROL <= end:
                control = self._get(CONTROL)
                if control & ULITE_CONTROL_RST_TX:
                    self._tx.clear()
                if control & ULITE_CONTROL_RST_RX:
                    self._rx.clear()

    def putc(self, char: str | int) -> None:
        """Queue a received character."""
        with self._rx_lock:
            self._rx.append(_byte_of(char))

    def getc(self) -> str | None:
        """Take the next transmitted character, or None if there is none."""
        with self._tx_lock:
            if not self._tx:
                return None
            value = self._tx.popleft()
            if not self._tx:
                self._wait_ack = True
            return chr(value)

    def exist_tx(self) -> bool:
        with self._tx_lock:
            return bool(self._tx)

    def irq(self) -> bool:
        with self._rx_lock:
            return bool(self._rx) or self._wait_ack


UART_BASE = 0xBFD00000
UART_SPAN = 0x1000


class SimpleUart(MmioDevice):
    """Byte-wide console: scripted input, transmitted bytes are printed."""

    def __init__(
        self, program: UartProgram = UartProgram.NONE, out: TextIO | None = None
    ) -> None:
        self._uart = UartDevice("uart", UART_BASE, UART_SPAN, width=1, program=program)
        self._out = out
        self._char_out = 0

    def read(self, addr: int, size: int) -> bytes:
        try:
            value = self._uart.read(addr + UART_BASE, size)
        except AbsMmioError as exc:
            raise BusError(str(exc)) from exc
        return bytes([value & 0xFF]) + bytes(max(size - 1, 0))

    def write(self, addr: int, data: bytes) -> None:
        if addr != UART_DATA or not data:
            raise BusError(f"uart: write to unknown register {addr:x}")
        self._char_out = data[0]
        print(f"UART: {chr(data[0])}({data[0]:x})", file=self._out)

    def get_output(self) -> int:
        """Return the last transmitted byte and clear it (0 when none)."""
        result = self._char_out
        self._char_out = 0
        return result