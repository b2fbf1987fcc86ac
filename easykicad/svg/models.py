"""Render-side primitives read back from generated KiCad text (mm, Y down)."""
from dataclasses import dataclass, field
from typing import Optional, Union

from easykicad.geometry import BoundingBox


@dataclass
class PadGraphic:
    """A footprint pad."""
    number: str  # Empty for vias and mechanical holes
    x: float
    y: float
    width: float
    height: float
    shape: str  # circle, rect, roundrect, oval, custom
    angle: float  # KiCad rotation (degrees, counterclockwise on screen)
    layers: list[str]
    roundrect_ratio: float = 0.0
    drill: Optional[float] = None  # Drill diameter for through-hole pads
    polygon: list[tuple[float, float]] = field(default_factory=list)  # Absolute outline of custom pads


@dataclass
class GraphicLine:
    start_x: float
    start_y: float
    end_x: float
    end_y: float
    width: float
    layer: str


@dataclass
class GraphicArc:
    """An arc through three points."""
    start_x: float
    start_y: float
    mid_x: float
    mid_y: float
    end_x: float
    end_y: float
    width: float
    layer: str


@dataclass
class GraphicRect:
    start_x: float
    start_y: float
    end_x: float
    end_y: float
    width: float  # Stroke width
    layer: str
    fill: bool = False


@dataclass
class GraphicCircle:
    center_x: float
    center_y: float
    radius: float
    width: float
    layer: str
    fill: bool = False


@dataclass
class GraphicPoly:
    points: list[tuple[float, float]]
    width: float
    layer: str
    fill: bool = False
    closed: bool = True


@dataclass
class GraphicText:
    x: float
    y: float
    text: str
    size: float
    layer: str


@dataclass
class PinGraphic:
    """A symbol pin as a line from its connection point to the body."""
    number: str
    name: str
    x: float
    y: float
    end_x: float
    end_y: float


GraphicItem = Union[GraphicLine, GraphicArc, GraphicRect, GraphicCircle, GraphicPoly, GraphicText]


@dataclass
class Drawing:
    """Everything needed to render one footprint or symbol."""
    graphics: list[GraphicItem] = field(default_factory=list)
    pads: list[PadGraphic] = field(default_factory=list)
    pins: list[PinGraphic] = field(default_factory=list)

    def bounds(self) -> BoundingBox:
        points: list[tuple[float, float]] = []
        for item in self.graphics:
            if isinstance(item, (GraphicLine, GraphicRect)):
                points += [(item.start_x, item.start_y), (item.end_x, item.end_y)]
            elif isinstance(item, GraphicArc):
                points += [(item.start_x, item.start_y), (item.mid_x, item.mid_y), (item.end_x, item.end_y)]
            elif isinstance(item, GraphicCircle):
                r = item.radius
                points += [(item.center_x - r, item.center_y - r), (item.center_x + r, item.center_y + r)]
            elif isinstance(item, GraphicPoly):
                points += item.points
            elif isinstance(item, GraphicText):
                points.append((item.x, item.y))
        for pad in self.pads:
            half = max(pad.width, pad.height) / 2
            points += [(pad.x - half, pad.y - half), (pad.x + half, pad.y + half)]
            points += pad.polygon
        for pin in self.pins:
            points += [(pin.x, pin.y), (pin.end_x, pin.end_y)]
        return BoundingBox.from_points(points) or BoundingBox(-1.0, -1.0, 1.0, 1.0)
