"""Profile loading: YAML file -> device selection, ranges and polling settings"""
import logging
from dataclasses import dataclass, field

import yaml

from core.calibration import SAMPLE_RANGES
from core.change import DEFAULT_TOLERANCE
from core.errors import ProfileError
from core.notifier import REFRESH_INTERVAL
from core.session import DEFAULT_DEVICE_PATTERN
from core.state import RangeConfig

LOG = logging.getLogger("spacenav.profiles")

BACKENDS = ("pygame", "hid")


@dataclass
class Profile:
    device: str = DEFAULT_DEVICE_PATTERN
    backend: str = "pygame"
    tolerance: float = DEFAULT_TOLERANCE
    interval: float = REFRESH_INTERVAL
    ranges: RangeConfig = field(default_factory=RangeConfig)
    calibrated_ranges: RangeConfig = field(default_factory=RangeConfig)

    @staticmethod
    def _ranges(data, key):
        value = data.get(key)
        if value == "sample":
            return SAMPLE_RANGES
        if value is not None and not isinstance(value, dict):
            raise ProfileError(f"{key} must be a mapping of axis bounds or 'sample', got {value!r}")
        try:
            return RangeConfig.from_mapping(value)
        except (TypeError, ValueError) as e:
            raise ProfileError(f"invalid {key}: {e}") from e

    @classmethod
    def from_dict(cls, data: dict):
        data = data or {}
        if not isinstance(data, dict):
            raise ProfileError(f"profile must be a mapping, got {type(data).__name__}")
        backend = data.get("backend", "pygame")
        if backend not in BACKENDS:
            raise ProfileError(f"unknown backend {backend!r}; expected one of {BACKENDS}")
        try:
            tolerance = float(data.get("tolerance", DEFAULT_TOLERANCE))
            interval = float(data.get("interval_ms", REFRESH_INTERVAL * 1000.0)) / 1000.0
        except (TypeError, ValueError) as e:
            raise ProfileError(f"invalid number in profile: {e}") from e
        if tolerance < 0:
            raise ProfileError(f"tolerance must be >= 0, got {tolerance}")
        if interval <= 0:
            raise ProfileError(f"interval_ms must be > 0, got {interval * 1000.0}")
        return cls(
            device=str(data.get("device", DEFAULT_DEVICE_PATTERN)),
            backend=backend,
            tolerance=tolerance,
            interval=interval,
            ranges=cls._ranges(data, "ranges"),
            calibrated_ranges=cls._ranges(data, "calibrated_ranges"),
        )

    @classmethod
    def load(cls, path: str):
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ProfileError(f"could not parse {path}: {e}") from e
        profile = cls.from_dict(data)
        LOG.debug("loaded profile %s -> %s", path, profile)
        return profile


def dump_ranges(ranges: RangeConfig) -> str:
    """Render ranges as a YAML snippet suitable for a profile's calibrated_ranges."""
    return yaml.safe_dump({"calibrated_ranges": ranges.to_dict()}, sort_keys=False)
