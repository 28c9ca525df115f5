import pytest

from labemu.bus import BusError, DeviceConfig, MemoryBus, Mia, MmioDevice, Ram


class Recorder(MmioDevice):
    def __init__(self):
        self.reads = []
        self.writes = []

    def read(self, addr, size):
        self.reads.append((addr, size))
        return bytes(size)

    def write(self, addr, data):
        self.writes.append((addr, bytes(data)))


def test_ram_round_trip():
    ram = Ram(64)
    ram.write(8, b"\x01\x02\x03\x04")
    assert ram.read(8, 4) == b"\x01\x02\x03\x04"
    assert ram.read(0, 4) == bytes(4)


def test_ram_out_of_range():
    ram = Ram(16)
    with pytest.raises(BusError):
        ram.read(14, 4)
    with pytest.raises(BusError):
        ram.write(16, b"\x00")


def test_ram_wrap():
    ram = Ram(16)
    ram.set_allow_wrap(True)
    ram.write(16 + 4, b"\xaa\xbb")
    assert ram.read(4, 2) == b"\xaa\xbb"
    assert ram.read(16 + 4, 2) == b"\xaa\xbb"


def test_ram_init_data_and_too_large():
    ram = Ram(8, data=b"\x05\x06")
    assert ram.read(0, 2) == b"\x05\x06"
    with pytest.raises(ValueError):
        Ram(2, data=b"\x00\x00\x00")


def test_ram_load_binary(tmp_path):
    path = tmp_path / "img.bin"
    payload = bytes(range(10))
    path.write_bytes(payload)
    ram = Ram(32)
    ram.load_binary(4, path)
    assert ram.read(4, 10) == payload
    assert Ram(16, path=path).read(0, 10) == payload


def test_ram_load_binary_truncates(tmp_path):
    path = tmp_path / "big.bin"
    path.write_bytes(bytes(range(1, 21)))
    ram = Ram(8)
    ram.load_binary(0, path)
    assert ram.read(0, 8) == bytes(range(1, 9))


def test_ram_load_text(tmp_path):
    path = tmp_path / "img.txt"
    path.write_text("12\nab\n7f\n")
    ram = Ram(8)
    ram.load_text(2, path)
    assert ram.read(2, 3) == bytes([0x12, 0xAB, 0x7F])


def test_bus_offset_routing():
    bus = MemoryBus()
    dev = Recorder()
    bus.add_device(0x1000, 0x100, dev)
    bus.read(0x1010, 4)
    bus.write(0x1020, b"\x09")
    assert dev.reads == [(0x10, 4)]
    assert dev.writes == [(0x20, b"\x09")]


def test_bus_raw_routing():
    bus = MemoryBus()
    dev = Recorder()
    bus.add_device(0x2000, 0x1000, dev, raw_addr=True)
    bus.read(0x2004, 2)
    assert dev.reads == [(0x2004, 2)]


def test_bus_with_ram_round_trip():
    bus = MemoryBus()
    ram = Ram(0x100)
    bus.add_device(0x8000, 0x100, ram)
    bus.write(0x8010, b"xyz")
    assert bus.read(0x8010, 3) == b"xyz"
    assert ram.read(0x10, 3) == b"xyz"


def test_bus_rejects_overlap_and_misalignment():
    bus = MemoryBus()
    bus.add_device(0x1000, 0x1000, Recorder())
    with pytest.raises(BusError):
        bus.add_device(0x1000, 0x1000, Recorder())
    with pytest.raises(BusError):
        bus.add_device(0x1800, 0x800, Recorder())
    with pytest.raises(BusError):
        bus.add_device(0x3100, 0x1000, Recorder())


def test_bus_adjacent_devices_allowed():
    bus = MemoryBus()
    low, high = Recorder(), Recorder()
    bus.add_device(0x0, 0x100, low)
    bus.add_device(0x100, 0x100, high)
    bus.read(0x100, 1)
    assert high.reads == [(0, 1)]
    assert low.reads == []


def test_bus_unmapped_and_crossing():
    bus = MemoryBus()
    bus.add_device(0x1000, 0x100, Recorder())
    with pytest.raises(BusError):
        bus.read(0x10, 4)
    with pytest.raises(BusError):
        bus.read(0x10FE, 4)
    with pytest.raises(BusError):
        bus.write(0x2000, b"\x00")


def test_device_config_defaults():
    dev = Recorder()
    cfg = DeviceConfig(dev)
    assert cfg.device is dev
    assert (cfg.raw_addr, cfg.trace_mem) == (False, False)


def test_mia():
    mia = Mia()
    assert mia.read(0, 4) == bytes(4)
    with pytest.raises(BusError):
        mia.read(0, 2)
    with pytest.raises(BusError):
        mia.write(0, b"\x01\x00\x00\x00")