"""State models and lightweight DTOs"""
from dataclasses import dataclass, fields
from typing import Dict, Mapping, Optional, Tuple

AXES = ("x", "y", "z", "rx", "ry", "rz")
BUTTONS = ("left", "right")

DEFAULT_MIN = -1.0
DEFAULT_MAX = 1.0


@dataclass(frozen=True)
class AxisSnapshot:
    """One consistent reading of all eight components taken in a single poll."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    rx: float = 0.0
    ry: float = 0.0
    rz: float = 0.0
    left: bool = False
    right: bool = False

    def axes(self) -> Tuple[float, ...]:
        return tuple(getattr(self, a) for a in AXES)

    def buttons(self) -> Tuple[bool, bool]:
        return (self.left, self.right)

    def as_dict(self) -> Dict[str, object]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class RangeConfig:
    """Per-axis (min, max) bounds.

    Unset bounds fall back to [-1, 1]. The same type describes both the target
    output range and the calibrated input range of a device.
    """
    min_x: Optional[float] = None
    max_x: Optional[float] = None
    min_y: Optional[float] = None
    max_y: Optional[float] = None
    min_z: Optional[float] = None
    max_z: Optional[float] = None
    min_rx: Optional[float] = None
    max_rx: Optional[float] = None
    min_ry: Optional[float] = None
    max_ry: Optional[float] = None
    min_rz: Optional[float] = None
    max_rz: Optional[float] = None

    def bounds(self, axis: str) -> Tuple[float, float]:
        if axis not in AXES:
            raise KeyError(f"unknown axis {axis!r}")
        lo = getattr(self, f"min_{axis}")
        hi = getattr(self, f"max_{axis}")
        return (
            DEFAULT_MIN if lo is None else float(lo),
            DEFAULT_MAX if hi is None else float(hi),
        )

    @classmethod
    def from_mapping(cls, data: Optional[Mapping]) -> "RangeConfig":
        """Build from a mapping such as {"min_x": 220, "max-x": 440}."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = str(key).replace("-", "_")
            if name not in known:
                raise ValueError(f"unknown range key {key!r}; expected one of {sorted(known)}")
            kwargs[name] = None if value is None else float(value)
        return cls(**kwargs)

    @classmethod
    def coerce(cls, value) -> "RangeConfig":
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls.from_mapping(value)

    def to_dict(self) -> Dict[str, float]:
        """Only the bounds that were set explicitly."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}
