"""Linear calibration and scaling of raw axis values"""
from collections import namedtuple
from dataclasses import dataclass
from typing import Tuple

from core.errors import DegenerateCalibrationRange
from core.state import AXES, AxisSnapshot, RangeConfig

# scaled = target_min + ((raw - calibrated_min) / calibrated_width) * target_width
AxisTransform = namedtuple("AxisTransform", "calibrated_min calibrated_width target_min target_width")


@dataclass(frozen=True)
class Scaler:
    """Immutable per-axis affine remap from a calibrated range to a target range.

    Values are not clamped: raw input outside the calibrated range maps outside
    the target range. Button states are copied verbatim.
    """
    transforms: Tuple[AxisTransform, ...]

    def transform(self, axis) -> AxisTransform:
        return self.transforms[AXES.index(axis)]

    def scale_axis(self, axis, raw: float) -> float:
        t = self.transform(axis)
        return t.target_min + ((raw - t.calibrated_min) / t.calibrated_width) * t.target_width

    def apply(self, snapshot: AxisSnapshot) -> AxisSnapshot:
        return AxisSnapshot(
            x=self.scale_axis("x", snapshot.x),
            y=self.scale_axis("y", snapshot.y),
            z=self.scale_axis("z", snapshot.z),
            rx=self.scale_axis("rx", snapshot.rx),
            ry=self.scale_axis("ry", snapshot.ry),
            rz=self.scale_axis("rz", snapshot.rz),
            left=snapshot.left,
            right=snapshot.right,
        )

    __call__ = apply


def build_scaler(target_range=None, calibrated_range=None) -> Scaler:
    """Build a Scaler mapping `calibrated_range` onto `target_range`.

    Both arguments take a RangeConfig or a mapping such as
    ``{"min_x": 220, "max_x": 440}``; unset bounds default to [-1, 1]. For
    example a target of ``{"min_x": 220, "max_x": 440}`` yields x values
    between 220 and 440 with the centre position at 330.

    Raises DegenerateCalibrationRange if a calibrated axis has max <= min.
    """
    target = RangeConfig.coerce(target_range)
    calibrated = RangeConfig.coerce(calibrated_range)

    transforms = []
    for axis in AXES:
        tmin, tmax = target.bounds(axis)
        cmin, cmax = calibrated.bounds(axis)
        if not cmax > cmin:
            raise DegenerateCalibrationRange(axis, cmin, cmax)
        transforms.append(AxisTransform(cmin, cmax - cmin, tmin, tmax - tmin))
    return Scaler(tuple(transforms))
