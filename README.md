# labemu

Building blocks for writing and checking instruction-set emulators in Python.

## What is inside

- `labemu.bus`: a byte-addressed `MemoryBus` that maps aligned, non-overlapping address ranges to `MmioDevice`s, a zero-initialised `Ram` (loadable from bytes, a binary file or a text file of hex bytes, with optional address wrap-around) and a `Mia` finish-flag device that always reads as zero. Failed accesses raise `BusError`.
- `labemu.absmmio`: a word-oriented `Bus` with `RamDevice` and `UartDevice`, where writes carry a byte mask. `UartDevice` feeds scripted input selected by `UartProgram`. Failed accesses raise `AbsMmioError`.
- `labemu.trace`: `TraceRecord`, the register, PC and memory events compared between a reference model and a design under test, `Image`, and the abstract `Core` interface.
- `labemu.clint`: a RISC-V `Clint` (mtime, mtimecmp, msip) and the `MtimeView`, `MtimecmpView` and `MswiView` devices that map parts of it on their own.
- `labemu.plic`: a RISC-V `Plic` with priority, pending, enable, threshold and claim/complete registers.
- `labemu.uart`: a thread-safe `UartLite` model with receive and transmit queues, and a `SimpleUart` console that prints transmitted bytes.
- `labemu.rv_common`: RISC-V opcodes, CSR addresses, exception and interrupt codes, register field layouts, `get_field`/`set_field`, `rv_ext` and `RvInstr` immediate decoding.
- `labemu.coremark_util`: CoreMark CRC helpers (`crcu8`, `crcu16`, `crc16`, `crcu32`), `parseval`, `RunKind` and `get_seed`.
- `labemu.coremark_state`: the CoreMark state-machine benchmark (`init_state`, `state_transition`, `bench_state`).
- `labemu.timer`: an accumulating stopwatch, `Timer`.
- `labemu.disassemble`: `disassemble` runs an external objdump for a `Target` (currently `Target.LA32R`, which needs `loongarch32r-linux-gnusf-objdump` on the `PATH`) and returns its output lines without the header.
- `labemu.memfiles`: COE, MIF and Verilog hex files from raw program images.
- `labemu.cryptonight`: a CryptoNight-style scratchpad walk that records first-read and first-write order.

## Installation

    pip install .

## Example

    from labemu.bus import MemoryBus, Ram

    bus = MemoryBus()
    ram = Ram(0x1000)
    bus.add_device(0x80000000, 0x1000, ram, False, False)
    bus.write(0x80000010, b"\x78\x56\x34\x12")
    assert bus.read(0x80000010, 4) == b"\x78\x56\x34\x12"

## Commands

Turn `main.bin` and `main.data` in a directory (default: the current one) into `inst_ram.coe`, `data_ram.coe`, `data_ram.mif`, `inst_ram.mif` and `rom.vlog`:

    labemu-memfiles [DIRECTORY]

Run the CryptoNight access-pattern walk and print the first-read and first-write order of each scratchpad word, `--step` words per line:

    labemu-cryptonight [--rounds N] [--step N]

## What it does not do

The package has no processor implementation: `Core` is an abstract interface, and no instruction decoder or executor that steps a program is provided. There is no logging helper of its own; `labemu.bus` reports through the standard `logging` module.

## Tests

    pip install .[test]
    pytest