from .transform import BoundingBox, compose_rotation, normalize_angle, rotate_about, rotate_point
from .arc import (
    ArcCenter, ArcEndpoints, arc_center, arc_midpoint, arc_point,
    decompose_arc, ellipse_points, interpolate_arc, parse_arc_path,
)
from .path import flatten_path, path_points
from .bounds import bounding_box, shape_points

__all__ = [
    "BoundingBox", "compose_rotation", "normalize_angle", "rotate_about",
    "rotate_point", "ArcCenter", "ArcEndpoints", "arc_center", "arc_midpoint",
    "arc_point", "decompose_arc", "ellipse_points", "interpolate_arc",
    "parse_arc_path", "flatten_path", "path_points", "bounding_box",
    "shape_points",
]
