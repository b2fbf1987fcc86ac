"""SVG element factories for rendered footprints and symbols."""
import math
from xml.etree.ElementTree import Element

from easykicad.geometry import rotate_about

from .models import (
    GraphicArc, GraphicCircle, GraphicItem, GraphicLine, GraphicPoly,
    GraphicRect, GraphicText, PadGraphic, PinGraphic,
)
from .styles import (
    DEFAULT_STROKE_WIDTH, EDGE_CUTS_STROKE_WIDTH, GRAPHICS_OPACITY,
    LAYER_COLORS, PAD_LABEL_COLOR, PAD_OPACITY, PIN_COLOR, PIN_TEXT_COLOR,
    THT_PAD_COLOR,
)


def _circle_from_three_points(
    x1: float, y1: float,
    x2: float, y2: float,
    x3: float, y3: float
) -> tuple[float, float, float] | None:
    """
    Calculate circle center and radius from three points.

    Returns (center_x, center_y, radius) or None if points are collinear.
    """
    d = 2 * (x1 * (y2 - y3) + x2 * (y3 - y1) + x3 * (y1 - y2))
    if abs(d) < 1e-10:
        return None

    s1, s2, s3 = x1 * x1 + y1 * y1, x2 * x2 + y2 * y2, x3 * x3 + y3 * y3
    ux = (s1 * (y2 - y3) + s2 * (y3 - y1) + s3 * (y1 - y2)) / d
    uy = (s1 * (x3 - x2) + s2 * (x1 - x3) + s3 * (x2 - x1)) / d
    return ux, uy, math.hypot(x1 - ux, y1 - uy)


def _arc_flags(arc: GraphicArc, cx: float, cy: float) -> tuple[int, int]:
    """
    SVG (large-arc, sweep) flags for an arc through start, mid and end.

    With Y down, a positive cross product means the points turn clockwise
    on screen, which is SVG's sweep = 1 direction.
    """
    cross = (
        (arc.mid_x - arc.start_x) * (arc.end_y - arc.mid_y)
        - (arc.mid_y - arc.start_y) * (arc.end_x - arc.mid_x)
    )
    sweep = 1 if cross > 0 else 0

    # The arc exceeds 180 degrees when the center lies on the midpoint's side of the chord
    def side(px: float, py: float) -> float:
        return (arc.end_x - arc.start_x) * (py - arc.start_y) - (arc.end_y - arc.start_y) * (px - arc.start_x)

    large = 1 if side(cx, cy) * side(arc.mid_x, arc.mid_y) > 0 else 0
    return large, sweep


def _points_attr(points) -> str:
    return " ".join(f"{x:.4f},{y:.4f}" for x, y in points)


def _rotated(pad: PadGraphic, points: list[tuple[float, float]]) -> list[tuple[float, float]]:
    # KiCad angles turn counterclockwise on screen, i.e. negative with Y down
    if not pad.angle:
        return points
    return [rotate_about(px, py, pad.x, pad.y, -pad.angle) for px, py in points]


def _roundrect_outline(pad: PadGraphic, radius: float, per_corner: int = 4) -> list[tuple[float, float]]:
    w2, h2 = pad.width / 2, pad.height / 2
    r = min(radius, w2, h2)
    corners = [
        (pad.x + w2 - r, pad.y - h2 + r, -math.pi / 2),
        (pad.x + w2 - r, pad.y + h2 - r, 0.0),
        (pad.x - w2 + r, pad.y + h2 - r, math.pi / 2),
        (pad.x - w2 + r, pad.y - h2 + r, math.pi),
    ]
    points = []
    for cx, cy, start in corners:
        for i in range(per_corner + 1):
            t = start + (math.pi / 2) * i / per_corner
            points.append((cx + r * math.cos(t), cy + r * math.sin(t)))
    return points


def _pad_color(pad: PadGraphic) -> str:
    if "*.Cu" in pad.layers:
        return THT_PAD_COLOR
    for layer in pad.layers:
        if layer in LAYER_COLORS and layer.endswith(".Cu"):
            return LAYER_COLORS[layer]
    return "#888888"


def create_pad_element(pad: PadGraphic) -> Element:
    """
    Create an SVG element for a pad.

    Rotated rectangles, rounded rectangles and ovals become polygons so the
    rendering needs no transform attributes.
    """
    attrs = {
        "fill": _pad_color(pad),
        "fill-opacity": str(PAD_OPACITY),
        "class": "pad",
        "data-pad": pad.number,
    }

    if pad.shape == "custom" and pad.polygon:
        return Element("polygon", {**attrs, "points": _points_attr(pad.polygon)})

    if pad.shape == "circle":
        return Element("circle", {
            **attrs,
            "cx": f"{pad.x:.4f}",
            "cy": f"{pad.y:.4f}",
            "r": f"{min(pad.width, pad.height) / 2:.4f}",
        })

    if pad.shape == "oval":
        if not pad.angle:
            return Element("ellipse", {
                **attrs,
                "cx": f"{pad.x:.4f}",
                "cy": f"{pad.y:.4f}",
                "rx": f"{pad.width / 2:.4f}",
                "ry": f"{pad.height / 2:.4f}",
            })
        rx, ry = pad.width / 2, pad.height / 2
        outline = [
            (pad.x + rx * math.cos(2 * math.pi * i / 16), pad.y + ry * math.sin(2 * math.pi * i / 16))
            for i in range(16)
        ]
        return Element("polygon", {**attrs, "points": _points_attr(_rotated(pad, outline))})

    if pad.shape == "roundrect":
        radius = pad.roundrect_ratio * min(pad.width, pad.height)
        return Element("polygon", {
            **attrs, "points": _points_attr(_rotated(pad, _roundrect_outline(pad, radius))),
        })

    w2, h2 = pad.width / 2, pad.height / 2
    corners = [
        (pad.x - w2, pad.y - h2),
        (pad.x + w2, pad.y - h2),
        (pad.x + w2, pad.y + h2),
        (pad.x - w2, pad.y + h2),
    ]
    return Element("polygon", {**attrs, "points": _points_attr(_rotated(pad, corners))})


def create_drill_hole(pad: PadGraphic, background: str) -> Element | None:
    """Create an SVG element for a drill hole, painted in the background color."""
    if not pad.drill:
        return None
    return Element("circle", {
        "cx": f"{pad.x:.4f}",
        "cy": f"{pad.y:.4f}",
        "r": f"{pad.drill / 2:.4f}",
        "fill": background,
        "class": "drill-hole",
    })


def create_pad_label(pad: PadGraphic) -> Element:
    size = max(0.3, min(pad.width, pad.height) * 0.5)
    label = Element("text", {
        "x": f"{pad.x:.4f}",
        "y": f"{pad.y:.4f}",
        "font-size": f"{size:.4f}",
        "font-family": "sans-serif",
        "text-anchor": "middle",
        "dominant-baseline": "central",
        "fill": PAD_LABEL_COLOR,
    })
    label.text = pad.number
    return label


def create_graphic_element(item: GraphicItem, color: str | None = None) -> Element:
    """Create an SVG element for a graphic item, colored by layer unless given."""
    layer = item.layer
    color = color or LAYER_COLORS.get(layer, "#888888")
    stroke_width = item.width if getattr(item, "width", 0) > 0 else DEFAULT_STROKE_WIDTH
    if layer == "Edge.Cuts":
        stroke_width = max(stroke_width, EDGE_CUTS_STROKE_WIDTH)

    stroke = {
        "stroke": color,
        "stroke-width": f"{stroke_width:.4f}",
        "stroke-opacity": str(GRAPHICS_OPACITY),
    }

    def fill(filled: bool) -> dict[str, str]:
        return {"fill": color if filled else "none", "fill-opacity": str(GRAPHICS_OPACITY) if filled else "0"}

    if isinstance(item, GraphicLine):
        return Element("line", {
            "x1": f"{item.start_x:.4f}",
            "y1": f"{item.start_y:.4f}",
            "x2": f"{item.end_x:.4f}",
            "y2": f"{item.end_y:.4f}",
            "stroke-linecap": "round",
            **stroke,
        })

    if isinstance(item, GraphicArc):
        circle = _circle_from_three_points(
            item.start_x, item.start_y, item.mid_x, item.mid_y, item.end_x, item.end_y
        )
        if circle:
            cx, cy, radius = circle
            large, sweep = _arc_flags(item, cx, cy)
            d = (
                f"M {item.start_x:.4f} {item.start_y:.4f} "
                f"A {radius:.4f} {radius:.4f} 0 {large} {sweep} {item.end_x:.4f} {item.end_y:.4f}"
            )
        else:
            d = f"M {item.start_x:.4f} {item.start_y:.4f} L {item.end_x:.4f} {item.end_y:.4f}"
        return Element("path", {"d": d, "stroke-linecap": "round", "fill": "none", **stroke})

    if isinstance(item, GraphicRect):
        return Element("rect", {
            "x": f"{min(item.start_x, item.end_x):.4f}",
            "y": f"{min(item.start_y, item.end_y):.4f}",
            "width": f"{abs(item.end_x - item.start_x):.4f}",
            "height": f"{abs(item.end_y - item.start_y):.4f}",
            **stroke,
            **fill(item.fill),
        })

    if isinstance(item, GraphicCircle):
        return Element("circle", {
            "cx": f"{item.center_x:.4f}",
            "cy": f"{item.center_y:.4f}",
            "r": f"{item.radius:.4f}",
            **stroke,
            **fill(item.fill),
        })

    if isinstance(item, GraphicPoly):
        if not item.points:
            return Element("g")
        tag = "polygon" if item.closed else "polyline"
        return Element(tag, {
            "points": _points_attr(item.points),
            "stroke-linejoin": "round",
            **stroke,
            **fill(item.fill and item.closed),
        })

    if isinstance(item, GraphicText):
        text = Element("text", {
            "x": f"{item.x:.4f}",
            "y": f"{item.y:.4f}",
            "font-size": f"{item.size:.4f}",
            "font-family": "sans-serif",
            "text-anchor": "middle",
            "dominant-baseline": "central",
            "fill": color,
        })
        text.text = item.text
        return text

    return Element("g")


def create_pin_elements(pin: PinGraphic, text_size: float) -> list[Element]:
    """Pin line, connection dot and number label."""
    line = Element("line", {
        "x1": f"{pin.x:.4f}",
        "y1": f"{pin.y:.4f}",
        "x2": f"{pin.end_x:.4f}",
        "y2": f"{pin.end_y:.4f}",
        "stroke": PIN_COLOR,
        "stroke-width": "0.1524",
        "class": "pin",
        "data-pin": pin.number,
    })
    dot = Element("circle", {
        "cx": f"{pin.x:.4f}",
        "cy": f"{pin.y:.4f}",
        "r": "0.2",
        "fill": "none",
        "stroke": PIN_COLOR,
        "stroke-width": "0.05",
    })
    label = Element("text", {
        "x": f"{(pin.x + pin.end_x) / 2:.4f}",
        "y": f"{(pin.y + pin.end_y) / 2 - 0.2:.4f}",
        "font-size": f"{text_size:.4f}",
        "font-family": "sans-serif",
        "text-anchor": "middle",
        "fill": PIN_TEXT_COLOR,
    })
    label.text = pin.number
    return [line, dot, label]
