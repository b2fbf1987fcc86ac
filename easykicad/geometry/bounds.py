"""Bounding boxes over parsed shape collections."""
import logging
import math
from typing import Iterable, Optional, Protocol

from easykicad.easyeda import models as m

from .path import path_points
from .transform import BoundingBox, rotate_point

logger = logging.getLogger(__name__)

Point = tuple[float, float]


class PointMapper(Protocol):
    """Anything that maps raw path coordinates to local ones (a Frame)."""

    def points(self, points: Iterable[Point]) -> tuple[Point, ...]: ...


def _square(cx: float, cy: float, half: float) -> list[Point]:
    return [(cx - half, cy - half), (cx + half, cy + half)]


def _pin_points(pin: m.Pin) -> list[Point]:
    # The body end sits opposite the pin's outward direction
    dx, dy = rotate_point(pin.pin_length, 0.0, pin.rotation)
    return [(pin.x, pin.y), (pin.x - dx, pin.y - dy)]


def _pad_points(pad: m.Pad) -> list[Point]:
    if pad.polygon_points:
        return list(pad.polygon_points)
    w2, h2 = pad.width / 2, pad.height / 2
    corners = [(-w2, -h2), (w2, -h2), (w2, h2), (-w2, h2)]
    rotated = (rotate_point(x, y, pad.rotation) for x, y in corners)
    return [(pad.x + x, pad.y + y) for x, y in rotated]


def _track_points(track: m.Track) -> list[Point]:
    half = track.width / 2
    points: list[Point] = []
    for x, y in track.points:
        points.extend(_square(x, y, half))
    return points


def shape_points(shape, frame: Optional[PointMapper] = None) -> list[Point]:
    """Extreme points of one normalized shape.

    Path-based shapes contribute only when ``frame`` is given, since their
    path data is still in raw page units.
    """
    if isinstance(shape, m.Pin):
        return _pin_points(shape)
    if isinstance(shape, m.SymbolRect):
        return [(shape.x, shape.y), (shape.x + shape.width, shape.y + shape.height)]
    if isinstance(shape, m.SymbolCircle):
        return _square(shape.cx, shape.cy, shape.radius)
    if isinstance(shape, m.SymbolEllipse):
        return [(shape.cx - shape.rx, shape.cy - shape.ry), (shape.cx + shape.rx, shape.cy + shape.ry)]
    if isinstance(shape, (m.SymbolPolyline, m.SymbolPolygon)):
        return list(shape.points)
    if isinstance(shape, (m.SymbolText, m.FootprintText)):
        return [(shape.x, shape.y)]
    if isinstance(shape, m.Pad):
        return _pad_points(shape)
    if isinstance(shape, m.Track):
        return _track_points(shape)
    if isinstance(shape, m.Hole):
        return _square(shape.x, shape.y, shape.radius)
    if isinstance(shape, m.FootprintCircle):
        return _square(shape.cx, shape.cy, shape.radius + shape.width / 2)
    if isinstance(shape, m.FootprintRect):
        return [(shape.x, shape.y), (shape.x + shape.width, shape.y + shape.height)]
    if isinstance(shape, m.Via):
        return _square(shape.x, shape.y, shape.diameter / 2)
    if isinstance(shape, (m.SymbolArc, m.SymbolPath, m.FootprintArc, m.SolidRegion)):
        if frame is None:
            return []
        return list(frame.points(path_points(shape.path)))
    return []


def bounding_box(shapes: Iterable, frame: Optional[PointMapper] = None) -> Optional[BoundingBox]:
    """
    Axis-aligned bounding box over an arbitrary shape collection.

    Args:
        shapes: Normalized symbol or footprint shapes
        frame: Frame used to map raw arc/path coordinates; paths are ignored without it

    Returns:
        BoundingBox or None if no shape has extent
    """
    points: list[Point] = []
    for shape in shapes:
        points.extend(p for p in shape_points(shape, frame) if all(map(math.isfinite, p)))
    return BoundingBox.from_points(points)
