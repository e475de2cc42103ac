import time

import pytest

from conftest import wait_for
from core.errors import DegenerateCalibrationRange, DeviceDisconnected
from core.notifier import State, start_notifications

FAST = 0.005


def test_callback_gets_scaled_new_snapshot(make_session):
    session, device = make_session([{"x": 0.0}, {"x": 0.5}])
    got = []
    handle = start_notifications(session, got.append, target_range={"min_x": 220, "max_x": 440}, interval=FAST)
    try:
        assert wait_for(lambda: device.polls >= 5)
    finally:
        handle.stop()
    assert len(got) == 1
    assert got[0].x == pytest.approx(385.0)


def test_baseline_is_last_reported_snapshot(make_session):
    # each step is below tolerance but the total drift is not
    session, device = make_session([{"x": 0.0}, {"x": 0.006}, {"x": 0.012}])
    got = []
    handle = start_notifications(session, got.append, tolerance=0.01, interval=FAST)
    try:
        assert wait_for(lambda: device.polls >= 8)
    finally:
        handle.stop()
    assert [s.x for s in got] == [pytest.approx(0.012)]
    assert handle.delivered == 1


def test_no_change_no_callback(make_session):
    session, device = make_session([{"x": 0.3, "left": 1}])
    got = []
    handle = start_notifications(session, got.append, interval=FAST)
    try:
        assert wait_for(lambda: device.polls >= 5)
    finally:
        handle.stop()
    assert got == []


def test_button_press_is_reported(make_session):
    session, device = make_session([{}, {}, {"right": 1}])
    got = []
    handle = start_notifications(session, got.append, tolerance=1.0, interval=FAST)
    try:
        assert wait_for(lambda: len(got) == 1)
    finally:
        handle.stop()
    assert got[0].right is True


def test_stop_ends_polling(make_session):
    session, device = make_session()
    handle = start_notifications(session, lambda s: None, interval=FAST)
    assert handle.is_running
    assert wait_for(lambda: device.polls >= 3)
    handle.stop()
    assert not handle.is_running
    assert handle.state is State.STOPPED
    polls = device.polls
    time.sleep(0.05)
    assert device.polls == polls


def test_failing_callback_does_not_kill_loop(make_session):
    session, device = make_session([{"x": 0.0}, {"x": 0.5}, {"x": -0.5}])
    calls = []

    def callback(s):
        calls.append(s)
        raise RuntimeError("consumer bug")

    handle = start_notifications(session, callback, interval=FAST)
    try:
        assert wait_for(lambda: len(calls) == 2)
        assert handle.is_running
    finally:
        handle.stop()
    assert handle.delivered == 0


def test_disconnect_is_terminal_and_keeps_last_snapshot(make_session):
    session, device = make_session([{"x": 0.0}, {"x": 0.4}, {"x": 0.7}], fail_after=3)
    errors = []
    handle = start_notifications(session, lambda s: None, interval=FAST, on_disconnect=errors.append)
    handle.join(timeout=2.0)

    assert handle.state is State.DISCONNECTED
    assert not handle.is_running
    assert isinstance(handle.error, DeviceDisconnected)
    assert errors == [handle.error]
    assert handle.error.last_snapshot.x == pytest.approx(0.7)
    assert handle.last_snapshot.x == pytest.approx(0.7)
    handle.stop()
    assert handle.state is State.DISCONNECTED


def test_bad_calibration_fails_before_reading(make_session):
    session, device = make_session()
    with pytest.raises(DegenerateCalibrationRange):
        start_notifications(session, lambda s: None, calibrated_range={"min_rz": 0.2, "max_rz": 0.2})
    assert device.polls == 0


def test_negative_tolerance_rejected(make_session):
    session, _ = make_session()
    with pytest.raises(ValueError):
        start_notifications(session, lambda s: None, tolerance=-1)


def test_seed_read_happens_before_start(make_session):
    session, device = make_session([{"x": 0.25}])
    handle = start_notifications(session, lambda s: None, interval=10.0)
    try:
        assert device.polls == 1
        assert handle.last_snapshot.x == pytest.approx(0.25)
    finally:
        handle.stop()


def test_zero_or_negative_interval_rejected(make_session):
    session, device = make_session()
    for interval in (0, -0.05):
        with pytest.raises(ValueError):
            start_notifications(session, lambda s: None, interval=interval)
    assert device.polls == 0


def test_handle_cannot_be_started_twice(make_session):
    session, _ = make_session()
    handle = start_notifications(session, lambda s: None, interval=FAST)
    try:
        with pytest.raises(RuntimeError):
            handle.start()
        assert handle.is_running
    finally:
        handle.stop()


def alternating(n=200):
    return [{"x": 0.5 if i % 2 else 0.0} for i in range(n)]


def test_fixed_rate_does_not_drift_with_slow_callback(make_session):
    # callback eats most of the interval; ticks should still land every `interval`
    interval, work = 0.05, 0.03
    session, _ = make_session(alternating())
    stamps = []

    def callback(s):
        stamps.append(time.monotonic())
        time.sleep(work)

    handle = start_notifications(session, callback, interval=interval)
    try:
        assert wait_for(lambda: len(stamps) >= 9, timeout=5.0)
    finally:
        handle.stop()
    gaps = [b - a for a, b in zip(stamps, stamps[1:9])]
    assert sum(gaps) / len(gaps) == pytest.approx(interval, abs=0.012)


def test_overrun_does_not_burst(make_session):
    interval, overrun = 0.05, 0.17
    session, _ = make_session(alternating())
    stamps = []

    def callback(s):
        stamps.append(time.monotonic())
        if len(stamps) == 1:
            time.sleep(overrun)

    handle = start_notifications(session, callback, interval=interval)
    try:
        assert wait_for(lambda: len(stamps) >= 6, timeout=5.0)
    finally:
        handle.stop()
    gaps = [b - a for a, b in zip(stamps, stamps[1:6])]
    # next tick follows the overrun immediately rather than waiting a full interval
    assert overrun - 0.01 <= gaps[0] < overrun + interval
    # then the old cadence resumes, with no back-to-back catch-up reads
    assert min(gaps[1:]) > interval * 0.6
