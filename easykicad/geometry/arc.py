"""SVG elliptical arc decomposition.

Converts the endpoint form used on the wire (``M x1 y1 A rx ry rot large
sweep x2 y2``) to the center form, following the W3C SVG implementation
notes (section B.2.4). Angles are in degrees and measured in the path's own
coordinate system, so with a Y-down page a positive sweep is clockwise on
screen.
"""
import math
import re
from dataclasses import dataclass
from typing import Optional

import numpy as np

from easykicad.config import ARC_SEGMENTS_PER_QUADRANT
from easykicad.errors import GeometryError

_TOKEN_RE = re.compile(r"[MmAa]|-?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


@dataclass(frozen=True)
class ArcEndpoints:
    """Endpoint parameterization of an SVG arc."""
    x1: float
    y1: float
    rx: float
    ry: float
    x_rotation: float
    large_arc: bool
    sweep: bool
    x2: float
    y2: float


@dataclass(frozen=True)
class ArcCenter:
    """Center parameterization of an SVG arc."""
    cx: float
    cy: float
    rx: float  # Radii after out-of-range correction
    ry: float
    x_rotation: float
    start_angle: float
    sweep_angle: float  # Signed; positive follows the sweep flag = 1 direction

    @property
    def end_angle(self) -> float:
        return self.start_angle + self.sweep_angle

    @property
    def radius(self) -> float:
        """Mean radius, exact for circular arcs."""
        return (self.rx + self.ry) / 2


def parse_arc_path(path: str) -> Optional[ArcEndpoints]:
    """Parse ``M x1 y1 A rx ry rot large sweep x2 y2`` (``a`` relative too)."""
    tokens = _TOKEN_RE.findall(path or "")
    if len(tokens) != 11 or tokens[0] not in "Mm" or tokens[3] not in "Aa":
        return None
    try:
        x1, y1 = float(tokens[1]), float(tokens[2])
        rx, ry, rot, large, sweep, x2, y2 = (float(t) for t in tokens[4:])
    except ValueError:
        return None
    if tokens[3] == "a":
        x2, y2 = x1 + x2, y1 + y2
    if not all(map(math.isfinite, (x1, y1, rx, ry, rot, x2, y2))):
        return None
    return ArcEndpoints(x1, y1, rx, ry, rot, large != 0, sweep != 0, x2, y2)


def _vector_angle(ux: float, uy: float, vx: float, vy: float) -> float:
    """Signed angle in degrees from vector u to vector v."""
    return math.degrees(math.atan2(ux * vy - uy * vx, ux * vx + uy * vy))


def arc_center(arc: ArcEndpoints) -> ArcCenter:
    """
    Convert an endpoint-form arc to center form.

    Args:
        arc: Arc endpoints, radii and flags

    Returns:
        ArcCenter with signed sweep angle

    Raises:
        GeometryError: Zero or non-finite radius, non-finite or coincident endpoints
    """
    values = (arc.x1, arc.y1, arc.rx, arc.ry, arc.x_rotation, arc.x2, arc.y2)
    if not all(map(math.isfinite, values)):
        raise GeometryError("arc has a non-finite coordinate or radius")
    rx, ry = abs(arc.rx), abs(arc.ry)
    if rx == 0 or ry == 0:
        raise GeometryError("arc has a zero radius")
    if math.isclose(arc.x1, arc.x2, abs_tol=1e-9) and math.isclose(arc.y1, arc.y2, abs_tol=1e-9):
        raise GeometryError("arc endpoints coincide")
    try:
        return _center_form(arc, rx, ry)
    except (OverflowError, ZeroDivisionError) as e:
        raise GeometryError(f"arc cannot be decomposed: {e}") from e


def _center_form(arc: ArcEndpoints, rx: float, ry: float) -> ArcCenter:
    phi = math.radians(arc.x_rotation)
    cos_phi, sin_phi = math.cos(phi), math.sin(phi)

    # Step 1: midpoint difference in the ellipse frame
    dx2 = (arc.x1 - arc.x2) / 2
    dy2 = (arc.y1 - arc.y2) / 2
    x1p = cos_phi * dx2 + sin_phi * dy2
    y1p = -sin_phi * dx2 + cos_phi * dy2

    # Scale radii up when no ellipse of this size can reach both endpoints
    lam = (x1p ** 2) / (rx ** 2) + (y1p ** 2) / (ry ** 2)
    if lam > 1:
        scale = math.sqrt(lam)
        rx, ry = rx * scale, ry * scale

    # Step 2: center in the ellipse frame
    numerator = rx ** 2 * ry ** 2 - rx ** 2 * y1p ** 2 - ry ** 2 * x1p ** 2
    denominator = rx ** 2 * y1p ** 2 + ry ** 2 * x1p ** 2
    coef = math.sqrt(max(0.0, numerator / denominator))
    if arc.large_arc == arc.sweep:
        coef = -coef
    cxp = coef * rx * y1p / ry
    cyp = -coef * ry * x1p / rx

    # Step 3: back to page coordinates
    cx = cos_phi * cxp - sin_phi * cyp + (arc.x1 + arc.x2) / 2
    cy = sin_phi * cxp + cos_phi * cyp + (arc.y1 + arc.y2) / 2

    # Step 4: start angle and sweep
    ux, uy = (x1p - cxp) / rx, (y1p - cyp) / ry
    vx, vy = (-x1p - cxp) / rx, (-y1p - cyp) / ry
    start = _vector_angle(1.0, 0.0, ux, uy)
    sweep = _vector_angle(ux, uy, vx, vy)
    if not arc.sweep and sweep > 0:
        sweep -= 360.0
    elif arc.sweep and sweep < 0:
        sweep += 360.0

    # Radii large enough to overflow leave NaN behind
    if not all(map(math.isfinite, (cx, cy, rx, ry, start, sweep))):
        raise GeometryError("arc is too large to decompose")

    return ArcCenter(cx, cy, rx, ry, arc.x_rotation, start, sweep)


def decompose_arc(path: str) -> ArcCenter:
    """Parse and convert an arc path in one step.

    Raises:
        GeometryError: The path is not a two-point arc or is degenerate
    """
    endpoints = parse_arc_path(path)
    if endpoints is None:
        raise GeometryError(f"unparsable arc path: {path!r}")
    return arc_center(endpoints)


def arc_point(arc: ArcCenter, angle_deg: float) -> tuple[float, float]:
    """Point on the arc's ellipse at parametric angle ``angle_deg``."""
    phi = math.radians(arc.x_rotation)
    t = math.radians(angle_deg)
    x = arc.cx + arc.rx * math.cos(phi) * math.cos(t) - arc.ry * math.sin(phi) * math.sin(t)
    y = arc.cy + arc.rx * math.sin(phi) * math.cos(t) + arc.ry * math.cos(phi) * math.sin(t)
    return x, y


def arc_midpoint(arc: ArcCenter) -> tuple[float, float]:
    return arc_point(arc, arc.start_angle + arc.sweep_angle / 2)


def interpolate_arc(arc: ArcCenter, segments: int | None = None) -> list[tuple[float, float]]:
    """Sample the arc from start to end, endpoints included.

    Raises:
        GeometryError: The arc has a non-finite sweep
    """
    if not math.isfinite(arc.sweep_angle):
        raise GeometryError("arc has a non-finite sweep")
    if segments is None:
        quadrants = abs(arc.sweep_angle) / 90.0
        segments = max(2, math.ceil(quadrants * ARC_SEGMENTS_PER_QUADRANT))

    t = np.radians(np.linspace(arc.start_angle, arc.end_angle, segments + 1))
    phi = math.radians(arc.x_rotation)
    cos_t, sin_t = np.cos(t), np.sin(t)
    xs = arc.cx + arc.rx * math.cos(phi) * cos_t - arc.ry * math.sin(phi) * sin_t
    ys = arc.cy + arc.rx * math.sin(phi) * cos_t + arc.ry * math.cos(phi) * sin_t
    return [(float(x), float(y)) for x, y in zip(xs, ys)]


def ellipse_points(
    cx: float, cy: float, rx: float, ry: float, segments: int
) -> list[tuple[float, float]]:
    """Closed polygon approximation of an axis-aligned ellipse."""
    t = np.linspace(0.0, 2 * math.pi, segments + 1)
    xs = cx + rx * np.cos(t)
    ys = cy + ry * np.sin(t)
    return [(float(x), float(y)) for x, y in zip(xs, ys)]
