"""EasyEDA shape grammar parser.

One wire record is a ``~``-delimited string whose first token is a type tag.
Symbol pins are the exception: they are ``^^``-separated segments, the first
of which is an ordinary ``~`` record.
"""
import json
import logging
import math
import re
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Optional

from easykicad.config import DEFAULT_PIN_LENGTH

from .fields import field, parse_bool, parse_points, safe_float, safe_int
from .models import (
    FootprintArc, FootprintCircle, FootprintRect, FootprintText, Hole,
    Model3D, Pad, Pin, Shape, SkippedRecord, SolidRegion, Style, SymbolArc,
    SymbolCircle, SymbolEllipse, SymbolPath, SymbolPolygon, SymbolPolyline,
    SymbolRect, SymbolText, Track, Unrecognized, Via,
)

logger = logging.getLogger(__name__)

_STUB_LENGTH_RE = re.compile(r"[hv]\s*(-?[\d.]+)", re.IGNORECASE)
_STUB_LINE_RE = re.compile(
    r"M\s*(-?[\d.]+)[\s,]+(-?[\d.]+)\s*L\s*(-?[\d.]+)[\s,]+(-?[\d.]+)", re.IGNORECASE
)

# Minimum number of "~" fields (tag included) for a record to be usable
MIN_FIELDS = {
    "P": 7,
    "R": 7,
    "C": 4,
    "E": 5,
    "A": 2,
    "PL": 2,
    "PG": 2,
    "PT": 2,
    "T": 13,
    "PAD": 9,
    "TRACK": 5,
    "HOLE": 4,
    "CIRCLE": 6,
    "ARC": 5,
    "RECT": 8,
    "VIA": 4,
    "TEXT": 11,
    "SOLIDREGION": 4,
    "SVGNODE": 2,
}


@dataclass(frozen=True)
class ParseResult:
    """Shapes in wire order plus the records that were dropped."""
    shapes: tuple[Shape, ...]
    skipped: tuple[SkippedRecord, ...]


def _style(f: list[str], start: int) -> Style:
    """Read the four style fields beginning at ``start``."""
    return Style(
        stroke_color=field(f, start) or "#000000",
        stroke_width=safe_float(field(f, start + 1), 1.0),
        stroke_style=field(f, start + 2) or "0",
        fill_color=field(f, start + 3) or "none",
    )


def _pin_length(stub_path: str) -> float:
    """Pin length from the pin's graphical stub path."""
    match = _STUB_LENGTH_RE.search(stub_path)
    if match:
        return abs(safe_float(match.group(1), DEFAULT_PIN_LENGTH))
    match = _STUB_LINE_RE.search(stub_path)
    if match:
        x1, y1, x2, y2 = (safe_float(g) for g in match.groups())
        return math.hypot(x2 - x1, y2 - y1)
    return DEFAULT_PIN_LENGTH


# Symbol extractors

def _pin(raw: str, f: list[str]) -> Pin:
    segments = raw.split("^^")

    def segment(i: int) -> list[str]:
        return segments[i].split("~") if i < len(segments) else []

    return Pin(
        number=field(f, 3),
        name=field(segment(3), 4),
        electrical_type=field(f, 2) or "0",
        x=safe_float(field(f, 4)),
        y=safe_float(field(f, 5)),
        rotation=safe_float(field(f, 6)),
        has_inverted_bubble=field(segment(5), 0) == "1",
        has_clock_triangle=field(segment(6), 0) == "1",
        pin_length=_pin_length(segments[2] if len(segments) > 2 else ""),
    )


def _symbol_rect(raw: str, f: list[str]) -> SymbolRect:
    return SymbolRect(
        x=safe_float(field(f, 1)),
        y=safe_float(field(f, 2)),
        rx=safe_float(field(f, 3)),
        ry=safe_float(field(f, 4)),
        width=safe_float(field(f, 5)),
        height=safe_float(field(f, 6)),
        style=_style(f, 7),
    )


def _symbol_circle(raw: str, f: list[str]) -> SymbolCircle:
    return SymbolCircle(
        cx=safe_float(field(f, 1)),
        cy=safe_float(field(f, 2)),
        radius=safe_float(field(f, 3)),
        style=_style(f, 4),
    )


def _symbol_ellipse(raw: str, f: list[str]) -> SymbolEllipse:
    return SymbolEllipse(
        cx=safe_float(field(f, 1)),
        cy=safe_float(field(f, 2)),
        rx=safe_float(field(f, 3)),
        ry=safe_float(field(f, 4)),
        style=_style(f, 5),
    )


def _symbol_arc(raw: str, f: list[str]) -> Optional[SymbolArc]:
    if not field(f, 1):
        return None
    return SymbolArc(path=field(f, 1), style=_style(f, 2))


def _symbol_polyline(raw: str, f: list[str]) -> Optional[SymbolPolyline]:
    points = parse_points(field(f, 1))
    if len(points) < 2:
        return None
    return SymbolPolyline(points=points, style=_style(f, 2))


def _symbol_polygon(raw: str, f: list[str]) -> Optional[SymbolPolygon]:
    points = parse_points(field(f, 1))
    if len(points) < 3:
        return None
    return SymbolPolygon(points=points, style=_style(f, 2))


def _symbol_path(raw: str, f: list[str]) -> Optional[SymbolPath]:
    if not field(f, 1):
        return None
    return SymbolPath(path=field(f, 1), style=_style(f, 2))


def _symbol_text(raw: str, f: list[str]) -> Optional[SymbolText]:
    text = field(f, 12)
    if not text:
        return None
    visible = field(f, 13)
    return SymbolText(
        x=safe_float(field(f, 2)),
        y=safe_float(field(f, 3)),
        rotation=safe_float(field(f, 4)),
        font_size=safe_float(field(f, 7), 7.0),
        text=text,
        is_pin_related=field(f, 11).lower().startswith("pin"),
        mark=field(f, 1) or "L",
        visible=True if visible == "" else parse_bool(visible),
    )


# Footprint extractors

def _hole_orientation(hole_point: str, rotation: float) -> float:
    """Slot axis angle from the ``holePoint`` endpoints, else the pad rotation."""
    points = parse_points(hole_point)
    if len(points) >= 2:
        (x1, y1), (x2, y2) = points[0], points[1]
        if (x1, y1) != (x2, y2):
            return math.degrees(math.atan2(y2 - y1, x2 - x1))
    return rotation


def _pad(raw: str, f: list[str]) -> Pad:
    rotation = safe_float(field(f, 11))
    return Pad(
        shape=(field(f, 1) or "RECT").upper(),
        x=safe_float(field(f, 2)),
        y=safe_float(field(f, 3)),
        width=safe_float(field(f, 4)),
        height=safe_float(field(f, 5)),
        layer=safe_int(field(f, 6), 1),
        net=field(f, 7),
        number=field(f, 8),
        hole_radius=safe_float(field(f, 9)),
        polygon_points=parse_points(field(f, 10)),
        rotation=rotation,
        hole_length=safe_float(field(f, 13)),
        hole_orientation=_hole_orientation(field(f, 14), rotation),
        is_plated=parse_bool(field(f, 15)),
    )


def _track(raw: str, f: list[str]) -> Optional[Track]:
    points = parse_points(field(f, 4))
    if len(points) < 2:
        return None
    return Track(
        width=safe_float(field(f, 1)),
        layer=safe_int(field(f, 2), 1),
        net=field(f, 3),
        points=points,
    )


def _hole(raw: str, f: list[str]) -> Hole:
    return Hole(
        x=safe_float(field(f, 1)),
        y=safe_float(field(f, 2)),
        radius=safe_float(field(f, 3)),
    )


def _circle(raw: str, f: list[str]) -> FootprintCircle:
    return FootprintCircle(
        cx=safe_float(field(f, 1)),
        cy=safe_float(field(f, 2)),
        radius=safe_float(field(f, 3)),
        width=safe_float(field(f, 4)),
        layer=safe_int(field(f, 5), 1),
    )


def _arc(raw: str, f: list[str]) -> Optional[FootprintArc]:
    if not field(f, 4):
        return None
    return FootprintArc(
        width=safe_float(field(f, 1)),
        layer=safe_int(field(f, 2), 1),
        path=field(f, 4),
    )


def _rect(raw: str, f: list[str]) -> FootprintRect:
    return FootprintRect(
        x=safe_float(field(f, 1)),
        y=safe_float(field(f, 2)),
        width=safe_float(field(f, 3)),
        height=safe_float(field(f, 4)),
        stroke_width=safe_float(field(f, 5)),
        layer=safe_int(field(f, 7), 1),
    )


def _via(raw: str, f: list[str]) -> Via:
    diameter = safe_float(field(f, 3))
    drill_radius = safe_float(field(f, 5))
    if drill_radius <= 0:
        drill_radius = diameter / 2
    return Via(
        x=safe_float(field(f, 1)),
        y=safe_float(field(f, 2)),
        diameter=diameter,
        drill_radius=drill_radius,
        net=field(f, 4),
    )


def _text(raw: str, f: list[str]) -> Optional[FootprintText]:
    displayed = field(f, 12)
    return FootprintText(
        kind=field(f, 1),
        x=safe_float(field(f, 2)),
        y=safe_float(field(f, 3)),
        stroke_width=safe_float(field(f, 4)),
        rotation=safe_float(field(f, 5)),
        mirror=parse_bool(field(f, 6)),
        layer=safe_int(field(f, 7), 1),
        font_size=safe_float(field(f, 9)),
        text=field(f, 10),
        displayed=True if displayed == "" else parse_bool(displayed),
    )


def _solid_region(raw: str, f: list[str]) -> Optional[SolidRegion]:
    path = field(f, 3)
    if len(path.strip()) < 3:
        return None
    return SolidRegion(
        layer=safe_int(field(f, 1), 1),
        path=path,
        fill_kind=field(f, 4) or "solid",
    )


def _svg_node(raw: str, f: list[str]) -> Optional[Model3D]:
    # The JSON payload may itself contain "~", so rejoin everything after the tag
    payload = raw.split("~", 1)[1]
    try:
        node = json.loads(payload)
    except ValueError:
        return None
    attrs = node.get("attrs") if isinstance(node, dict) else None
    if not isinstance(attrs, dict) or not attrs.get("uuid"):
        return None
    return Model3D(uuid=str(attrs["uuid"]), title=str(attrs.get("title", "")))


Extractor = Callable[[str, list[str]], Optional[Shape]]

EXTRACTORS: dict[str, Extractor] = {
    "P": _pin,
    "R": _symbol_rect,
    "C": _symbol_circle,
    "E": _symbol_ellipse,
    "A": _symbol_arc,
    "PL": _symbol_polyline,
    "PG": _symbol_polygon,
    "PT": _symbol_path,
    "T": _symbol_text,
    "PAD": _pad,
    "TRACK": _track,
    "HOLE": _hole,
    "CIRCLE": _circle,
    "ARC": _arc,
    "RECT": _rect,
    "VIA": _via,
    "TEXT": _text,
    "SOLIDREGION": _solid_region,
    "SVGNODE": _svg_node,
}


def decode(raw: str) -> Shape | Unrecognized | None:
    """Decode one record.

    Returns the typed shape, an :class:`Unrecognized` marker for unknown tags,
    or None when a known tag is too short or missing essential fields.
    """
    first = raw.split("^^", 1)[0]
    fields = first.split("~")
    tag = fields[0].strip()
    extractor = EXTRACTORS.get(tag)
    if extractor is None:
        return Unrecognized(tag=tag, raw=raw)
    if len(fields) < MIN_FIELDS[tag]:
        return None
    return extractor(raw, fields)


def parse(raw: str) -> Shape | None:
    """Parse one wire record into a shape, or None if it is unusable."""
    if not isinstance(raw, str) or not raw.strip():
        return None
    shape = decode(raw)
    if isinstance(shape, Unrecognized):
        return None
    return shape


def parse_shapes(records: Iterable[str]) -> ParseResult:
    """
    Parse a document's record list, keeping wire order.

    Args:
        records: Raw shape strings as delivered by the API

    Returns:
        ParseResult with the usable shapes and one SkippedRecord per drop
    """
    shapes: list[Shape] = []
    skipped: list[SkippedRecord] = []

    for index, raw in enumerate(records):
        if not isinstance(raw, str) or not raw.strip():
            skipped.append(SkippedRecord(index, "", "empty record"))
            continue
        shape = decode(raw)
        tag = raw.split("~", 1)[0]
        if isinstance(shape, Unrecognized):
            skipped.append(SkippedRecord(index, tag, "unrecognized tag"))
        elif shape is None:
            skipped.append(SkippedRecord(index, tag, "malformed record"))
        else:
            shapes.append(replace(shape, index=index))
            continue
        logger.debug("Skipping record %d (%s): %s", index, tag, skipped[-1].reason)

    return ParseResult(shapes=tuple(shapes), skipped=tuple(skipped))
