"""Coordinate transformation utilities."""
import math
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np


def rotate_point(x: float, y: float, angle_deg: float) -> tuple[float, float]:
    """
    Rotate a point around the origin by the given angle.

    Args:
        x: X coordinate
        y: Y coordinate
        angle_deg: Rotation angle in degrees (counterclockwise positive)

    Returns:
        Tuple of (rotated_x, rotated_y)
    """
    if angle_deg == 0:
        return x, y

    angle_rad = math.radians(angle_deg)
    cos_a = math.cos(angle_rad)
    sin_a = math.sin(angle_rad)

    return x * cos_a - y * sin_a, x * sin_a + y * cos_a


def rotate_about(
    px: float, py: float, cx: float, cy: float, angle_deg: float
) -> tuple[float, float]:
    """Rotate point (px, py) around pivot (cx, cy) by angle in degrees."""
    rx, ry = rotate_point(px - cx, py - cy, angle_deg)
    return cx + rx, cy + ry


def normalize_angle(angle_deg: float) -> float:
    """Fold an angle into [0, 360)."""
    angle = math.fmod(angle_deg, 360.0)
    if angle < 0:
        angle += 360.0
    # fmod of a tiny negative can land exactly on 360 after the add
    if angle >= 360.0 or abs(angle) < 1e-12:
        return 0.0
    return angle


def compose_rotation(*angles_deg: float) -> float:
    """Compose successive rotations into one angle in [0, 360)."""
    return normalize_angle(sum(angles_deg))


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_points(cls, points: Iterable[tuple[float, float]]) -> Optional["BoundingBox"]:
        """Box around a point cloud, or None for an empty one."""
        array = np.asarray(list(points), dtype=float)
        if array.size == 0:
            return None
        mins = array.min(axis=0)
        maxs = array.max(axis=0)
        return cls(float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))

    def union(self, other: Optional["BoundingBox"]) -> "BoundingBox":
        if other is None:
            return self
        return BoundingBox(
            min(self.min_x, other.min_x), min(self.min_y, other.min_y),
            max(self.max_x, other.max_x), max(self.max_y, other.max_y),
        )

    def expand(self, margin: float) -> "BoundingBox":
        return BoundingBox(
            self.min_x - margin, self.min_y - margin,
            self.max_x + margin, self.max_y + margin,
        )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> tuple[float, float]:
        return (self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2
