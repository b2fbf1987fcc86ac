"""Unit and origin normalization.

Coordinates become ``(raw - origin) * scale``; lengths are only scaled.
Rotations stay in degrees, folded into [0, 360). SVG path strings are left
untouched and are mapped through :class:`Frame` after decomposition.
"""
from dataclasses import dataclass, replace
from typing import Callable, Iterable

from easykicad.config import EE_TO_MM
from easykicad.geometry.transform import normalize_angle

from .models import (
    FootprintArc, FootprintCircle, FootprintRect, FootprintShape,
    FootprintText, Hole, Model3D, Pad, Pin, Point, SolidRegion, Style,
    SymbolArc, SymbolCircle, SymbolEllipse, SymbolPath, SymbolPolygon,
    SymbolPolyline, SymbolRect, SymbolShape, SymbolText, Track, Via,
)


@dataclass(frozen=True)
class Frame:
    """Mapping from raw page coordinates to local millimetres."""
    origin_x: float
    origin_y: float
    scale: float = EE_TO_MM

    def point(self, x: float, y: float) -> Point:
        return (x - self.origin_x) * self.scale, (y - self.origin_y) * self.scale

    def points(self, points: Iterable[Point]) -> tuple[Point, ...]:
        return tuple(self.point(x, y) for x, y in points)

    def length(self, value: float) -> float:
        return value * self.scale

    def to_raw(self, x: float, y: float) -> Point:
        """Inverse of :meth:`point`."""
        return x / self.scale + self.origin_x, y / self.scale + self.origin_y


def _style(style: Style, frame: Frame) -> Style:
    return replace(style, stroke_width=frame.length(style.stroke_width))


def _pin(pin: Pin, frame: Frame) -> Pin:
    x, y = frame.point(pin.x, pin.y)
    return replace(
        pin, x=x, y=y,
        rotation=normalize_angle(pin.rotation),
        pin_length=frame.length(pin.pin_length),
    )


def _symbol_rect(rect: SymbolRect, frame: Frame) -> SymbolRect:
    x, y = frame.point(rect.x, rect.y)
    return replace(
        rect, x=x, y=y,
        rx=frame.length(rect.rx), ry=frame.length(rect.ry),
        width=frame.length(rect.width), height=frame.length(rect.height),
        style=_style(rect.style, frame),
    )


def _symbol_circle(circle: SymbolCircle, frame: Frame) -> SymbolCircle:
    cx, cy = frame.point(circle.cx, circle.cy)
    return replace(
        circle, cx=cx, cy=cy, radius=frame.length(circle.radius),
        style=_style(circle.style, frame),
    )


def _symbol_ellipse(ellipse: SymbolEllipse, frame: Frame) -> SymbolEllipse:
    cx, cy = frame.point(ellipse.cx, ellipse.cy)
    return replace(
        ellipse, cx=cx, cy=cy,
        rx=frame.length(ellipse.rx), ry=frame.length(ellipse.ry),
        style=_style(ellipse.style, frame),
    )


def _styled_path(shape: SymbolArc | SymbolPath, frame: Frame):
    return replace(shape, style=_style(shape.style, frame))


def _styled_points(shape: SymbolPolyline | SymbolPolygon, frame: Frame):
    return replace(shape, points=frame.points(shape.points), style=_style(shape.style, frame))


def _symbol_text(text: SymbolText, frame: Frame) -> SymbolText:
    x, y = frame.point(text.x, text.y)
    return replace(text, x=x, y=y, rotation=normalize_angle(text.rotation))


def _pad(pad: Pad, frame: Frame) -> Pad:
    x, y = frame.point(pad.x, pad.y)
    return replace(
        pad, x=x, y=y,
        width=frame.length(pad.width),
        height=frame.length(pad.height),
        hole_radius=frame.length(pad.hole_radius),
        hole_length=frame.length(pad.hole_length),
        polygon_points=frame.points(pad.polygon_points),
        rotation=normalize_angle(pad.rotation),
        hole_orientation=normalize_angle(pad.hole_orientation),
    )


def _track(track: Track, frame: Frame) -> Track:
    return replace(track, width=frame.length(track.width), points=frame.points(track.points))


def _hole(hole: Hole, frame: Frame) -> Hole:
    x, y = frame.point(hole.x, hole.y)
    return replace(hole, x=x, y=y, radius=frame.length(hole.radius))


def _circle(circle: FootprintCircle, frame: Frame) -> FootprintCircle:
    cx, cy = frame.point(circle.cx, circle.cy)
    return replace(
        circle, cx=cx, cy=cy,
        radius=frame.length(circle.radius), width=frame.length(circle.width),
    )


def _arc(arc: FootprintArc, frame: Frame) -> FootprintArc:
    return replace(arc, width=frame.length(arc.width))


def _rect(rect: FootprintRect, frame: Frame) -> FootprintRect:
    x, y = frame.point(rect.x, rect.y)
    return replace(
        rect, x=x, y=y,
        width=frame.length(rect.width), height=frame.length(rect.height),
        stroke_width=frame.length(rect.stroke_width),
    )


def _via(via: Via, frame: Frame) -> Via:
    x, y = frame.point(via.x, via.y)
    return replace(
        via, x=x, y=y,
        diameter=frame.length(via.diameter),
        drill_radius=frame.length(via.drill_radius),
    )


def _text(text: FootprintText, frame: Frame) -> FootprintText:
    x, y = frame.point(text.x, text.y)
    return replace(
        text, x=x, y=y,
        stroke_width=frame.length(text.stroke_width),
        font_size=frame.length(text.font_size),
        rotation=normalize_angle(text.rotation),
    )


def _unchanged(shape, frame: Frame):
    return shape


_NORMALIZERS: dict[type, Callable] = {
    Pin: _pin,
    SymbolRect: _symbol_rect,
    SymbolCircle: _symbol_circle,
    SymbolEllipse: _symbol_ellipse,
    SymbolArc: _styled_path,
    SymbolPath: _styled_path,
    SymbolPolyline: _styled_points,
    SymbolPolygon: _styled_points,
    SymbolText: _symbol_text,
    Pad: _pad,
    Track: _track,
    Hole: _hole,
    FootprintCircle: _circle,
    FootprintArc: _arc,
    FootprintRect: _rect,
    Via: _via,
    FootprintText: _text,
    SolidRegion: _unchanged,
    Model3D: _unchanged,
}


def normalize_shape(shape, frame: Frame):
    """Normalize a single shape of any kind."""
    return _NORMALIZERS[type(shape)](shape, frame)


def normalize_symbol(shapes: Iterable[SymbolShape], frame: Frame) -> tuple[SymbolShape, ...]:
    """Normalize symbol shapes into local millimetres, preserving order."""
    return tuple(normalize_shape(shape, frame) for shape in shapes)


def normalize_footprint(shapes: Iterable[FootprintShape], frame: Frame) -> tuple[FootprintShape, ...]:
    """Normalize footprint shapes into local millimetres, preserving order."""
    return tuple(normalize_shape(shape, frame) for shape in shapes)
