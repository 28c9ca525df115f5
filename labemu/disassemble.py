"""Disassembly of raw instruction bytes through an external objdump."""

from __future__ import annotations

import enum
import os
import subprocess
import tempfile
from pathlib import Path

HEADER_LINES = 7


class Target(enum.Enum):
    """Instruction sets that can be disassembled, with their objdump and machine."""

    LA32R = ("loongarch32r-linux-gnusf-objdump", "loongarch")

    def __init__(self, objdump: str, machine: str) -> None:
        self.objdump = objdump
        self.machine = machine


def build_command(target: Target, path: str | os.PathLike[str], addr: int) -> list[str]:
    """The objdump command line that disassembles ``path`` loaded at ``addr``."""
    return [
        target.objdump,
        "-D",
        "-b",
        "binary",
        f"--adjust-vma=0x{addr:x}",
        "-m",
        target.machine,
        str(path),
    ]


def parse_output(text: str) -> list[str]:
    """Drop objdump's header and return the remaining lines."""
    return text.splitlines()[HEADER_LINES:]


def disassemble(target: Target, code: bytes, addr: int) -> list[str]:
    """Disassemble ``code`` as if it were placed at ``addr``."""
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "disassemble.tmp"
        path.write_bytes(code)
        result = subprocess.run(
            build_command(target, path, addr),
            capture_output=True,
            text=True,
            check=False,
        )
    return parse_output(result.stdout)