import pytest

from labemu.cryptonight import INIT_WORDS, AccessStats, crn, order_report


def test_load_returns_stored_value():
    stats = AccessStats(8)
    stats.store(3, 0x1_0000_0005)
    assert stats.load(3) == 5


def test_first_access_order_is_recorded_once():
    stats = AccessStats(8)
    stats.store(5, 1)
    stats.store(2, 1)
    stats.store(5, 2)
    assert stats.write_order[5] == 0
    assert stats.write_order[2] == 1
    assert stats.writes[5] == 2
    assert stats.write_total == 2
    stats.load(2)
    stats.load(2)
    stats.load(7)
    assert stats.read_order[2] == 0
    assert stats.read_order[7] == 1
    assert stats.reads[2] == 2
    assert stats.read_total == 2


def test_crn_rejects_short_pad():
    with pytest.raises(ValueError):
        crn(1, 2, 0, INIT_WORDS - 1)


def test_crn_without_rounds_only_initialises():
    stats = crn(0xDEADBEEF, 0xFACEB00C, 0, INIT_WORDS)
    assert stats.write_total == INIT_WORDS
    assert stats.read_total == 0
    assert all(stats.pad[k] == k for k in (0, 1, 1000, INIT_WORDS - 1))
    assert all(stats.write_order[k] == k for k in (0, 77, INIT_WORDS - 1))


def test_crn_is_deterministic_and_orders_are_consistent():
    first = crn(0xDEADBEEF, 0xFACEB00C, 200, INIT_WORDS)
    second = crn(0xDEADBEEF, 0xFACEB00C, 200, INIT_WORDS)
    assert first.pad == second.pad
    assert first.read_order == second.read_order
    read_addrs = [i for i in range(first.length) if first.reads[i]]
    assert sorted(first.read_order[i] for i in read_addrs) == list(range(first.read_total))
    assert sum(first.reads) == 400
    assert sum(first.writes) == INIT_WORDS + 400
    assert all(v <= 0xFFFFFFFF for v in first.pad)


def test_order_report_format():
    stats = AccessStats(5)
    stats.store(3, 9)
    stats.store(2, 9)
    stats.load(1)
    lines = list(order_report(stats, 2))
    assert lines == ["0: 0,0 0,0 ", "2: 0,1 0,0 "]


def test_order_report_rejects_bad_step():
    with pytest.raises(ValueError):
        list(order_report(AccessStats(4), 0))