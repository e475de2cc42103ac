"""Polling loop that turns a device session into a change-filtered callback stream

One background thread per session. Every tick it waits a fixed interval, reads a
fresh snapshot and, if the snapshot differs from the last *reported* one by more
than the tolerance, hands the scaled snapshot to the callback.
"""
import enum
import logging
import threading
import time

from core.change import DEFAULT_TOLERANCE, is_different
from core.errors import DeviceDisconnected
from core.scaler import build_scaler
from core.session import read_snapshot

LOG = logging.getLogger("spacenav.notifier")

REFRESH_INTERVAL = 0.05  # 50ms between ticks


class State(enum.Enum):
    RUNNING = "running"
    STOPPED = "stopped"
    DISCONNECTED = "disconnected"


class NotificationHandle:
    """Owns the polling thread for one session.

    The baseline snapshot, scaler and tolerance are only touched by the polling
    thread; callers observe them through the read-only properties.
    """

    def __init__(self, session, callback, scaler, baseline, tolerance=DEFAULT_TOLERANCE,
                 interval=REFRESH_INTERVAL, on_disconnect=None):
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        self.session = session
        self.tolerance = tolerance
        self.interval = interval
        self._callback = callback
        self._scaler = scaler
        self._baseline = baseline
        self._last_snapshot = baseline
        self._on_disconnect = on_disconnect
        self._state = State.RUNNING
        self._error = None
        self._delivered = 0
        self._t = None
        self._stop = threading.Event()

    @property
    def state(self) -> State:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._t is not None and self._t.is_alive() and self._state is State.RUNNING

    @property
    def last_snapshot(self):
        return self._last_snapshot

    @property
    def error(self):
        return self._error

    @property
    def delivered(self) -> int:
        return self._delivered

    def start(self):
        if self._t is not None:
            raise RuntimeError(f"notifications for {self.session.name} already started")
        self._stop.clear()
        self._t = threading.Thread(target=self._loop, name=f"SpaceNav[{self.session.name}]", daemon=True)
        self._t.start()
        LOG.info("notifications started for %s (tolerance=%s, interval=%.3fs)",
                 self.session.name, self.tolerance, self.interval)
        return self

    def stop(self, timeout=1.0):
        self._stop.set()
        if self._t and self._t is not threading.current_thread():
            self._t.join(timeout=timeout)
        if self._state is State.RUNNING:
            self._state = State.STOPPED
            LOG.info("notifications stopped for %s", self.session.name)

    def join(self, timeout=None):
        if self._t:
            self._t.join(timeout=timeout)

    def _emit(self, scaled):
        LOG.debug("%s scaled -> %s", self.session.name, scaled)
        try:
            self._callback(scaled)
            self._delivered += 1
        except Exception:
            LOG.exception("notification callback failed")

    def _tick(self):
        new = read_snapshot(self.session)
        self._last_snapshot = new
        if is_different(self._baseline, new, self.tolerance):
            self._emit(self._scaler(new))
            self._baseline = new

    def _disconnected(self, err):
        if err.last_snapshot is None:
            err.last_snapshot = self._last_snapshot
        self._error = err
        self._state = State.DISCONNECTED
        LOG.warning("%s; polling stopped (last snapshot %s)", err, err.last_snapshot)
        if self._on_disconnect is not None:
            try:
                self._on_disconnect(err)
            except Exception:
                LOG.exception("disconnect callback failed")

    def _loop(self):
        deadline = time.monotonic() + self.interval
        while not self._stop.wait(max(0.0, deadline - time.monotonic())):
            deadline += self.interval
            try:
                self._tick()
            except DeviceDisconnected as e:
                self._disconnected(e)
                return
            now = time.monotonic()
            if deadline < now:
                # tick overran; don't try to catch up with a burst of reads
                deadline = now


def start_notifications(session, callback, target_range=None, calibrated_range=None,
                        tolerance=DEFAULT_TOLERANCE, interval=REFRESH_INTERVAL,
                        on_disconnect=None) -> NotificationHandle:
    """Start calling `callback(scaled_snapshot)` whenever the device reading changes.

    Ranges default to [-1, 1] on every axis. Performs one blocking read to seed
    the baseline before the polling thread is started. Call `stop()` on the
    returned handle to tear the session down.
    """
    if tolerance < 0:
        raise ValueError(f"tolerance must be >= 0, got {tolerance}")
    if interval <= 0:
        raise ValueError(f"interval must be > 0, got {interval}")
    scaler = build_scaler(target_range, calibrated_range)
    baseline = read_snapshot(session)
    handle = NotificationHandle(session, callback, scaler, baseline, tolerance=tolerance,
                                interval=interval, on_disconnect=on_disconnect)
    return handle.start()


start = start_notifications
