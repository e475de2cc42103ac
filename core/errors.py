"""Error types raised by session setup, scaling and polling"""


class SpaceNavError(Exception):
    pass


class DeviceNotFound(SpaceNavError):
    def __init__(self, pattern, reason=None):
        self.pattern = pattern
        self.reason = reason
        if pattern is None:
            msg = "No HID controllers available"
        else:
            msg = f"Could not find HID controller matching {pattern!r}. Is the device connected?"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class CapabilityMismatch(SpaceNavError):
    def __init__(self, device_name, expected, found):
        self.device_name = device_name
        self.expected = list(expected)
        self.found = list(found)
        missing = [c for c in self.expected if c not in self.found]
        super().__init__(
            f"Controller {device_name!r} didn't have the required components. "
            f"Expected {self.expected}, found: {self.found} (missing {missing})"
        )


class DegenerateCalibrationRange(SpaceNavError):
    def __init__(self, axis, minimum, maximum):
        self.axis = axis
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"calibrated range for axis {axis!r} must have max > min, got [{minimum}, {maximum}]"
        )


class DeviceDisconnected(SpaceNavError):
    """Raw reads failed mid-session. Carries the last snapshot read, if any."""

    def __init__(self, device_name, last_snapshot=None, cause=None):
        self.device_name = device_name
        self.last_snapshot = last_snapshot
        self.cause = cause
        msg = f"device {device_name!r} disconnected"
        if cause is not None:
            msg = f"{msg}: {cause}"
        super().__init__(msg)


class ProfileError(SpaceNavError):
    pass
