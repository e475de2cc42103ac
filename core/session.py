"""Device sessions: pick a controller by name and take consistent snapshots"""
import logging
import re
from dataclasses import dataclass
from typing import Any, Tuple

from core.errors import CapabilityMismatch, DeviceDisconnected, DeviceNotFound
from core.reader import DeviceBackend, RawDevice
from core.state import AxisSnapshot

LOG = logging.getLogger("spacenav.session")

DEFAULT_DEVICE_PATTERN = "SpaceNavigator"

# component names in snapshot order: six axes then the two buttons
REQUIRED_COMPONENTS = ("x", "y", "z", "rx", "ry", "rz", "0", "1")


@dataclass(frozen=True)
class DeviceSession:
    name: str
    device: RawDevice
    handles: Tuple[Any, ...]

    def close(self):
        self.device.close()


def _find_device(backend: DeviceBackend, pattern):
    matcher = re.compile(pattern) if isinstance(pattern, str) else pattern
    for device in backend.devices():
        if matcher.search(device.name or ""):
            return device
    return None


def create_session(device_name_pattern=DEFAULT_DEVICE_PATTERN, backend: DeviceBackend = None) -> DeviceSession:
    """Open a session on the first attached controller whose name matches the pattern.

    Raises DeviceNotFound if no controller matches, and CapabilityMismatch if
    the match lacks any of the six axes or the two buttons.
    """
    if backend is None:
        from devices.pygame_joystick import PygameBackend
        backend = PygameBackend()

    pattern = getattr(device_name_pattern, "pattern", device_name_pattern)
    try:
        device = _find_device(backend, device_name_pattern)
    except DeviceNotFound as e:
        raise DeviceNotFound(pattern, reason=e.reason) from e
    if device is None:
        raise DeviceNotFound(pattern)

    components = device.components()
    if any(name not in components for name in REQUIRED_COMPONENTS):
        raise CapabilityMismatch(device.name, REQUIRED_COMPONENTS, components.keys())

    handles = tuple(components[name] for name in REQUIRED_COMPONENTS)
    LOG.info("Found controller: %s (components=%s)", device.name, sorted(components))
    return DeviceSession(name=device.name, device=device, handles=handles)


def read_snapshot(session: DeviceSession) -> AxisSnapshot:
    """Poll once, then read all eight components from the refreshed cache."""
    device = session.device
    try:
        device.poll()
        values = [device.read(h) for h in session.handles]
    except OSError as e:
        raise DeviceDisconnected(session.name, cause=e) from e
    x, y, z, rx, ry, rz, left, right = values
    return AxisSnapshot(
        x=float(x), y=float(y), z=float(z),
        rx=float(rx), ry=float(ry), rz=float(rz),
        left=bool(left), right=bool(right),
    )
