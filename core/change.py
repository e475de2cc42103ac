"""Change significance between two snapshots"""
from core.state import AxisSnapshot

DEFAULT_TOLERANCE = 0.01


def is_different(a: AxisSnapshot, b: AxisSnapshot, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    """True if any axis moved by strictly more than `tolerance` or any button changed."""
    if tolerance < 0:
        raise ValueError(f"tolerance must be >= 0, got {tolerance}")
    if a.buttons() != b.buttons():
        return True
    return any(abs(va - vb) > tolerance for va, vb in zip(a.axes(), b.axes()))
