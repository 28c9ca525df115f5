from labemu.timer import Timer


class _FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_running_timer_reports_elapsed():
    clock = _FakeClock()
    timer = Timer(clock)
    clock.now = 2.0
    assert timer.ms() == 2000.0


def test_stop_freezes_time():
    clock = _FakeClock()
    timer = Timer(clock)
    clock.now = 1.0
    assert timer.stop() is timer
    clock.now = 6.0
    assert timer.ms() == 1000.0


def test_restart_accumulates():
    clock = _FakeClock()
    timer = Timer(clock)
    clock.now = 1.0
    first = timer.stop().ms()
    clock.now = 4.0
    timer.start()
    clock.now = 5.0
    assert timer.ms() == 2 * first


def test_running_timer_keeps_counting_after_read():
    clock = _FakeClock()
    timer = Timer(clock)
    clock.now = 1.0
    first = timer.ms()
    clock.now = 2.0
    assert timer.ms() == 2 * first


def test_clear_resets_and_stops():
    clock = _FakeClock()
    timer = Timer(clock)
    clock.now = 3.0
    timer.clear()
    clock.now = 9.0
    assert timer.ms() == 0.0


def test_result_is_whole_milliseconds():
    clock = _FakeClock()
    timer = Timer(clock)
    clock.now = 0.0017
    result = timer.ms()
    assert result.is_integer()
    assert result < 2