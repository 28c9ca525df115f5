import pytest

from labemu.absmmio import AbsMmioError, Bus, RamDevice, UartDevice, UartProgram


def test_device_ranges():
    ram = RamDevice("ram", 0x100, 0x40)
    assert ram.addr_size() == 0x40
    assert ram.end_addr == 0x140
    assert ram.addr_in(0x100) and ram.addr_in(0x13F)
    assert not ram.addr_in(0x140) and not ram.addr_in(0xFF)
    assert ram.offset_in(0) and not ram.offset_in(0x40)


def test_ram_word_round_trip():
    ram = RamDevice("ram", 0x1000, 0x100)
    ram.write(0x1010, 0xF, 0xDEADBEEF)
    assert ram.read(0x1010, 4) == 0xDEADBEEF
    assert ram.read(0x1013, 1) == 0xDEADBEEF


def test_ram_partial_mask():
    ram = RamDevice("ram", 0, 0x10)
    ram.write(0, 0b0101, 0x11223344)
    assert ram.read(0, 4) == 0x00220044
    ram.write(0, 0, 0xFFFFFFFF)
    assert ram.read(0, 4) == 0x00220044


def test_ram_little_endian_buffer_view():
    ram = RamDevice("ram", 0, 0x10)
    ram.write_buffer(4, b"\x01\x02\x03\x04")
    assert ram.read(4, 4) == int.from_bytes(b"\x01\x02\x03\x04", "little")
    assert ram.read_buffer(4, 4) == b"\x01\x02\x03\x04"


def test_ram_buffer_too_large():
    ram = RamDevice("ram", 0x100, 0x10)
    with pytest.raises(AbsMmioError, match="write buff too large"):
        ram.write_buffer(0x108, bytes(9))
    with pytest.raises(AbsMmioError, match="read buff too large"):
        ram.read_buffer(0x100, 0x11)


def test_ram_byte_width():
    ram = RamDevice("ram", 0, 8, width=1)
    ram.write(3, 1, 0x5A)
    assert ram.read(3, 1) == 0x5A
    assert ram.read(2, 1) == 0


def test_bus_dispatch():
    bus = Bus("bus", 0, 0x10000)
    low = RamDevice("low", 0x0, 0x100)
    high = RamDevice("high", 0x100, 0x100)
    bus.add_device(low)
    bus.add_device(high)
    bus.write(0x104, 0xF, 0x12345678)
    assert high.read(0x104, 4) == 0x12345678
    assert bus.read(0x104, 4) == 0x12345678
    assert low.read(0x4, 4) == 0
    bus.write_buffer(0x10, b"abc")
    assert bus.read_buffer(0x10, 3) == b"abc"


def test_bus_overlap():
    bus = Bus("bus", 0, 0x10000)
    bus.add_device(RamDevice("a", 0x100, 0x100))
    with pytest.raises(AbsMmioError, match="address overlap"):
        bus.add_device(RamDevice("b", 0x180, 0x100))
    with pytest.raises(AbsMmioError, match="address overlap"):
        bus.add_device(RamDevice("c", 0x80, 0x100))


def test_bus_unmapped():
    bus = Bus("bus", 0, 0x10000)
    bus.add_device(RamDevice("a", 0x100, 0x100))
    with pytest.raises(AbsMmioError, match="do not match any"):
        bus.read(0x300, 4)
    with pytest.raises(AbsMmioError, match="do not match any"):
        bus.write(0x300, 0xF, 1)
    with pytest.raises(AbsMmioError, match="do not match any"):
        bus.write_buffer(0x300, b"x")
    with pytest.raises(AbsMmioError, match="do not match any"):
        bus.read_buffer(0x300, 1)


def test_uart_status_and_lab2():
    uart = UartDevice("uart", 0xBFD00000, 0x1000, program=UartProgram.LAB2)
    assert uart.read(0xBFD003FC, 4) == 3
    assert uart.read(0xBFD003F8, 4) == ord("T")
    assert uart.read(0xBFD003F8, 4) == ord("T")


def test_uart_loader_sequence():
    uart = UartDevice("uart", 0xBFD00000, 0x1000, width=1, program=UartProgram.LOADER)
    got = [uart.read(0xBFD003F8, 1) for _ in range(6)]
    assert got[:5] == [ord("G"), 0x00, 0x00, 0x10, 0x80]
    assert bytes(got[1:5]) == (0x80100000).to_bytes(4, "little")
    assert got[5] == 0


def test_uart_none_program_reads_zero():
    uart = UartDevice("uart", 0, 0x1000)
    assert uart.read(0x3F8, 4) == 0


def test_uart_errors():
    uart = UartDevice("uart", 0, 0x1000)
    with pytest.raises(AbsMmioError):
        uart.read(0x10, 4)
    with pytest.raises(AbsMmioError):
        uart.write_buffer(0, b"a")
    with pytest.raises(AbsMmioError):
        uart.read_buffer(0, 1)
    uart.write(0x3F8, 1, ord("a"))
    assert uart.read(0x3FC, 4) == 3