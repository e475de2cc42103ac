import threading
import time

import pytest

from core.errors import DeviceDisconnected
from core.reader import DeviceBackend, RawDevice
from core.session import REQUIRED_COMPONENTS, create_session

# snapshot field -> component name
FIELD_TO_COMPONENT = {"x": "x", "y": "y", "z": "z", "rx": "rx", "ry": "ry", "rz": "rz", "left": "0", "right": "1"}


class ScriptedDevice(RawDevice):
    """Plays back a list of frames, one per poll, then holds the last one."""

    def __init__(self, name, frames=None, components=REQUIRED_COMPONENTS, fail_after=None):
        self._name = name
        self._frames = [self._to_components(f) for f in (frames or [{}])]
        self._components = tuple(components)
        self.fail_after = fail_after
        self.polls = 0
        self.reads = 0
        self.closed = False
        self._lock = threading.Lock()

    @staticmethod
    def _to_components(frame):
        values = dict.fromkeys(REQUIRED_COMPONENTS, 0.0)
        for key, value in frame.items():
            values[FIELD_TO_COMPONENT[key]] = float(value)
        return values

    @property
    def name(self):
        return self._name

    def components(self):
        return {c: c for c in self._components}

    def poll(self):
        with self._lock:
            if self.fail_after is not None and self.polls >= self.fail_after:
                raise DeviceDisconnected(self._name)
            self.polls += 1

    def read(self, component):
        self.reads += 1
        idx = min(self.polls, len(self._frames)) - 1
        return self._frames[max(idx, 0)][component]

    def close(self):
        self.closed = True


class FakeBackend(DeviceBackend):
    def __init__(self, *devices):
        self._devices = list(devices)

    def devices(self):
        return list(self._devices)


def wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


@pytest.fixture
def make_session():
    def _make(frames=None, name="3Dconnexion SpaceNavigator", **kwargs):
        device = ScriptedDevice(name, frames, **kwargs)
        session = create_session("SpaceNavigator", backend=FakeBackend(device))
        return session, device
    return _make
