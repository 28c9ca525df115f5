"""Execution trace records and the abstract interface of a simulated core."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class Image:
    """A program image to be placed in memory at ``offset``."""

    data: bytes
    offset: int = 0

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class TraceRecord:
    """One observable effect: a PC change, a register write or a memory access.

    ``mem_size`` is zero for register and PC records; ``addr`` then holds the
    register index, or a value of at least ``gpr_num`` for the PC.
    """

    addr: int
    mem_size: int
    val: int
    is_write: bool
    gpr_num: int = field(default=32, compare=False)

    def is_pc(self) -> bool:
        return self.addr >= self.gpr_num and self.mem_size == 0

    def __str__(self) -> str:
        arrow = "<=" if self.is_write else "=>"
        if self.mem_size == 0:
            if self.addr >= self.gpr_num:
                return f"PC {self.addr:x}"
            return f"GPR x{self.addr} {arrow} {self.val:x}"
        return f"MEM {self.addr:x}({self.mem_size}) {arrow} {self.val:x}"


class Core(ABC):
    """A simulated processor that can be stepped and compared by trace."""

    gpr_num = 32

    def __init__(self) -> None:
        self._cycles_total = 0
        self._cycles_wave = 0

    @abstractmethod
    def init(self) -> None:
        """Reset the core to its initial state."""

    @abstractmethod
    def write_mem(self, addr: int, data: bytes) -> None:
        """Copy ``data`` into the core's memory."""

    @abstractmethod
    def read_mem(self, addr: int, size: int) -> bytes:
        """Return ``size`` bytes of the core's memory."""

    @abstractmethod
    def step(self, steps: int) -> bool:
        """Advance ``steps`` steps; return False once the core has finished."""

    @abstractmethod
    def get_pc(self) -> int:
        """Return the current program counter."""

    @abstractmethod
    def get_gpr(self, index: int) -> int:
        """Return general-purpose register ``index``."""

    @abstractmethod
    def next_trace(self) -> TraceRecord | None:
        """Return the next pending trace record, or None if there is none."""

    @abstractmethod
    def perf(self) -> str:
        """Return a human-readable performance summary."""

    def cycles_total(self) -> int:
        return self._cycles_total