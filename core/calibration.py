"""Calibration probe: find the raw extents a device actually reaches"""
import logging
import time

from core.session import read_snapshot
from core.state import AXES, RangeConfig

LOG = logging.getLogger("spacenav.calibration")

SAMPLE_INTERVAL = 0.01  # 100 Hz

# Extents measured on one SpaceNavigator; min_rz was never recorded and falls back to -1.
SAMPLE_RANGES = RangeConfig(
    min_x=-0.8482, max_x=0.9,
    min_y=-0.944, max_y=0.92999995,
    min_z=-0.884, max_z=0.98,
    min_rx=-0.856, max_rx=0.88,
    min_ry=-0.854, max_ry=0.87,
    max_rz=0.75,
)


def probe_calibration(session, duration_seconds, interval=SAMPLE_INTERVAL) -> RangeConfig:
    """Repeatedly read the device for `duration_seconds` and return the min/max seen per axis.

    Each bound is seeded at 0, so the result always contains zero (the device is
    assumed to rest near zero). Move every axis to its extremes while this runs;
    axes that never leave zero are left unset and keep the default [-1, 1].
    The result is meant as the `calibrated_range` of `build_scaler`.
    """
    if duration_seconds < 0:
        raise ValueError(f"duration_seconds must be >= 0, got {duration_seconds}")
    iterations = max(1, int(round(duration_seconds / interval)))
    lows = dict.fromkeys(AXES, 0.0)
    highs = dict.fromkeys(AXES, 0.0)

    LOG.info("probing %s for %.2fs (%d samples)", session.name, duration_seconds, iterations)
    for _ in range(iterations):
        snapshot = read_snapshot(session)
        for axis in AXES:
            value = getattr(snapshot, axis)
            if value < lows[axis]:
                lows[axis] = value
            if value > highs[axis]:
                highs[axis] = value
        time.sleep(interval)

    kwargs = {}
    for axis in AXES:
        if highs[axis] <= lows[axis]:
            # never moved; leave unset so the [-1, 1] default applies
            LOG.warning("axis %s did not move during calibration of %s", axis, session.name)
            continue
        kwargs[f"min_{axis}"] = lows[axis]
        kwargs[f"max_{axis}"] = highs[axis]
    ranges = RangeConfig(**kwargs)
    LOG.info("calibration for %s -> %s", session.name, ranges.to_dict())
    return ranges


probe = probe_calibration
