"""Data models for parsed EasyEDA shapes.

All values are immutable. Straight out of the parser every coordinate is in
raw page units; after :mod:`easykicad.easyeda.normalize` they are millimetres
relative to the component origin.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Union

Point = tuple[float, float]


@dataclass(frozen=True)
class Style:
    """Stroke and fill styling shared by symbol graphics."""
    stroke_color: str = "#000000"
    stroke_width: float = 1.0  # Source units until normalized
    stroke_style: str = "0"  # 0 solid, 1 dashed, 2 dotted
    fill_color: str = "none"


@dataclass(frozen=True)
class Record:
    """Base of every parsed shape: where it sat in the wire record list."""
    index: int = field(default=-1, kw_only=True, compare=False)


# Symbol shapes

@dataclass(frozen=True)
class Pin(Record):
    """A symbol pin. ``x``/``y`` is the wire connection point."""
    number: str
    name: str
    electrical_type: str  # Source vocabulary ("0".."9")
    x: float
    y: float
    rotation: float  # Degrees, direction the pin points away from the body
    has_inverted_bubble: bool
    has_clock_triangle: bool
    pin_length: float


@dataclass(frozen=True)
class SymbolRect(Record):
    x: float  # Top-left corner
    y: float
    rx: float  # Corner radii
    ry: float
    width: float
    height: float
    style: Style = Style()


@dataclass(frozen=True)
class SymbolCircle(Record):
    cx: float
    cy: float
    radius: float
    style: Style = Style()


@dataclass(frozen=True)
class SymbolEllipse(Record):
    cx: float
    cy: float
    rx: float
    ry: float
    style: Style = Style()


@dataclass(frozen=True)
class SymbolArc(Record):
    path: str  # Raw SVG "M x1 y1 A rx ry rot large sweep x2 y2"
    style: Style = Style()


@dataclass(frozen=True)
class SymbolPolyline(Record):
    points: tuple[Point, ...]
    style: Style = Style()


@dataclass(frozen=True)
class SymbolPolygon(Record):
    points: tuple[Point, ...]
    style: Style = Style()


@dataclass(frozen=True)
class SymbolPath(Record):
    path: str  # Raw SVG path data
    style: Style = Style()


@dataclass(frozen=True)
class SymbolText(Record):
    x: float
    y: float
    rotation: float
    font_size: float  # Points, as drawn by the source editor
    text: str
    is_pin_related: bool
    mark: str = "L"  # L label, N name, P prefix
    visible: bool = True


# Footprint shapes

@dataclass(frozen=True)
class Pad(Record):
    """A footprint pad. ``hole_radius`` is always a radius."""
    shape: str  # RECT, ELLIPSE, OVAL, POLYGON
    x: float  # Center
    y: float
    width: float
    height: float
    layer: int
    number: str
    hole_radius: float
    polygon_points: tuple[Point, ...]
    rotation: float
    hole_length: float
    hole_orientation: float  # Slot axis angle in degrees
    is_plated: bool
    net: str = ""

    @property
    def is_smd(self) -> bool:
        return self.hole_radius <= 0


@dataclass(frozen=True)
class Track(Record):
    width: float
    layer: int
    points: tuple[Point, ...]
    net: str = ""


@dataclass(frozen=True)
class Hole(Record):
    """A standalone mechanical hole (never plated)."""
    x: float
    y: float
    radius: float


@dataclass(frozen=True)
class FootprintCircle(Record):
    cx: float
    cy: float
    radius: float
    width: float
    layer: int


@dataclass(frozen=True)
class FootprintArc(Record):
    width: float
    layer: int
    path: str  # Raw SVG arc path


@dataclass(frozen=True)
class FootprintRect(Record):
    x: float  # Top-left corner
    y: float
    width: float
    height: float
    stroke_width: float
    layer: int


@dataclass(frozen=True)
class Via(Record):
    x: float
    y: float
    diameter: float
    drill_radius: float
    net: str = ""


@dataclass(frozen=True)
class FootprintText(Record):
    kind: str  # N name, P prefix, L label
    x: float
    y: float
    stroke_width: float
    rotation: float
    mirror: bool
    layer: int
    font_size: float
    text: str
    displayed: bool


@dataclass(frozen=True)
class SolidRegion(Record):
    layer: int
    path: str  # Raw SVG path
    fill_kind: str  # solid, npth, cutout


@dataclass(frozen=True)
class Model3D(Record):
    """3D model reference carried by an SVGNODE record."""
    uuid: str
    title: str = ""


@dataclass(frozen=True)
class Unrecognized:
    """A record whose tag this parser does not know. Dropped downstream."""
    tag: str
    raw: str


SymbolShape = Union[
    Pin, SymbolRect, SymbolCircle, SymbolEllipse, SymbolArc,
    SymbolPolyline, SymbolPolygon, SymbolPath, SymbolText,
]

FootprintShape = Union[
    Pad, Track, Hole, FootprintCircle, FootprintArc, FootprintRect,
    Via, FootprintText, SolidRegion, Model3D,
]

Shape = Union[SymbolShape, FootprintShape]


@dataclass(frozen=True)
class SkippedRecord:
    """A record the parser or a converter could not use."""
    index: int  # Position in the wire list, -1 when not applicable
    tag: str
    reason: str


@dataclass(frozen=True)
class ComponentMetadata:
    """Free-form component metadata from a document header."""
    name: str = ""
    prefix: str = ""
    package: str = ""
    manufacturer: str = ""
    manufacturer_part: str = ""
    lcsc_id: str = ""
    datasheet: str = ""
    description: str = ""
    category: str = ""
    attributes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class Header:
    """Document header: page origin and metadata."""
    origin: Optional[Point]
    metadata: ComponentMetadata = ComponentMetadata()
