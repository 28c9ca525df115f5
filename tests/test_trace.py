import pytest

from labemu.trace import Core, Image, TraceRecord


class CountingCore(Core):
    def __init__(self):
        super().__init__()
        self.mem = bytearray(16)
        self.pc = 0
        self.pending = []

    def init(self):
        self.pc = 0
        self._cycles_total = 0

    def write_mem(self, addr, data):
        self.mem[addr : addr + len(data)] = data

    def read_mem(self, addr, size):
        return bytes(self.mem[addr : addr + size])

    def step(self, steps):
        for _ in range(steps):
            self.pending.append(TraceRecord(self.gpr_num + self.pc, 0, 0, True))
            self.pc += 4
            self._cycles_total += 1
        return True

    def get_pc(self):
        return self.pc

    def get_gpr(self, index):
        return 0

    def next_trace(self):
        return self.pending.pop(0) if self.pending else None

    def perf(self):
        return f"cycles={self._cycles_total}"


def test_image_size():
    img = Image(b"\x00\x01\x02", offset=0x1C000000)
    assert img.size == 3
    assert img.offset == 0x1C000000


def test_record_equality_uses_all_fields():
    a = TraceRecord(5, 0, 0x10, True)
    assert a == TraceRecord(5, 0, 0x10, True)
    assert a != TraceRecord(5, 0, 0x11, True)
    assert a != TraceRecord(5, 0, 0x10, False)
    assert a != TraceRecord(5, 4, 0x10, True)


def test_is_pc():
    assert TraceRecord(0x80000000, 0, 0, True).is_pc()
    assert not TraceRecord(3, 0, 0, True).is_pc()
    assert not TraceRecord(0x80000000, 4, 0, True).is_pc()
    assert TraceRecord(16, 0, 0, True, gpr_num=16).is_pc()


def test_str_formats():
    assert str(TraceRecord(0x80000000, 0, 0, True)) == "PC 80000000"
    assert str(TraceRecord(4, 0, 0xFF, True)) == "GPR x4 <= ff"
    assert str(TraceRecord(0x1000, 4, 0xAB, False)) == "MEM 1000(4) => ab"


def test_core_is_abstract():
    with pytest.raises(TypeError):
        Core()


def test_core_subclass_behaviour():
    core = CountingCore()
    core.init()
    assert Core.cycles_total(core) == 0
    assert core.step(3) is True
    assert Core.cycles_total(core) == 3
    assert core.get_pc() == 12
    first = core.next_trace()
    assert first == TraceRecord(core.gpr_num, 0, 0, True)
    assert first.is_pc()
    assert str(first) == f"PC {core.gpr_num:x}"
    core.write_mem(2, b"hi")
    assert core.read_mem(2, 2) == b"hi"
    assert core.perf() == "cycles=3"