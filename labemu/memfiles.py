"""Memory initialisation files (COE, MIF, Verilog hex) from raw program images."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterator, Sequence
from pathlib import Path

COE_HEADER = (
    "memory_initialization_radix = 16;",
    "memory_initialization_vector =",
)
ROM_BASE = 0x1C000000

INST_IMAGE = "main.bin"
DATA_IMAGE = "main.data"


def _chunks(data: bytes, width: int) -> Iterator[bytes]:
    """Yield ``width``-byte chunks the way a fixed read buffer fills.

    Every full chunk is yielded. A trailing chunk is always yielded as
    well: a short final chunk laid over the previous chunk's bytes, or,
    when the data ends on a chunk boundary, the last chunk once more.
    The buffer starts out zeroed.
    """
    buffer = bytearray(width)
    full = len(data) - len(data) % width
    for offset in range(0, full, width):
        buffer[:] = data[offset : offset + width]
        yield bytes(buffer)
    tail = data[full:]
    buffer[: len(tail)] = tail
    yield bytes(buffer)


def _word_value(word: bytes) -> int:
    return int.from_bytes(word, "little")


def coe_lines(data: bytes) -> list[str]:
    """Lines of a hexadecimal COE file holding ``data`` as little-endian words."""
    return [*COE_HEADER, *(f"{_word_value(w):08x}" for w in _chunks(data, 4))]


def mif_lines(data: bytes) -> list[str]:
    """Lines of a binary MIF file: each little-endian word as 32 bits, MSB first."""
    return [f"{_word_value(w):032b}" for w in _chunks(data, 4)]


def vlog_lines(data: bytes, base: int = ROM_BASE) -> list[str]:
    """Lines of a Verilog ``$readmemh`` file: an address line, then one byte per line."""
    return [f"@{base:08x}", *(f"{b[0]:02x}" for b in _chunks(data, 1))]


def _write(path: Path, lines: Sequence[str]) -> None:
    path.write_text("".join(f"{line}\n" for line in lines), encoding="ascii")


def convert(directory: str | os.PathLike[str] = ".") -> list[Path]:
    """Turn ``main.bin`` and ``main.data`` in ``directory`` into memory files.

    Writes ``inst_ram.coe``, ``data_ram.coe``, ``data_ram.mif``,
    ``inst_ram.mif`` and ``rom.vlog`` there and returns their paths.
    """
    root = Path(directory)
    inst = (root / INST_IMAGE).read_bytes()
    data = (root / DATA_IMAGE).read_bytes()
    outputs = [
        (root / "inst_ram.coe", coe_lines(inst)),
        (root / "data_ram.coe", coe_lines(data)),
        (root / "data_ram.mif", mif_lines(data)),
        (root / "inst_ram.mif", mif_lines(inst)),
        (root / "rom.vlog", vlog_lines(inst)),
    ]
    for path, lines in outputs:
        _write(path, lines)
    return [path for path, _ in outputs]


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Build COE, MIF and Verilog memory files from main.bin and main.data."
    )
    parser.add_argument(
        "directory", nargs="?", default=".", help="directory holding the images"
    )
    args = parser.parse_args(argv)
    try:
        convert(args.directory)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())