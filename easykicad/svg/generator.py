"""SVG documents rendered from generated KiCad footprint and symbol text."""
import math
from xml.etree.ElementTree import Element, SubElement, tostring

from easykicad.validation.generated import GeneratedFootprint, GeneratedSymbol

from .elements import (
    create_drill_hole, create_graphic_element, create_pad_element,
    create_pad_label, create_pin_elements,
)
from .models import (
    Drawing, GraphicArc, GraphicCircle, GraphicLine, GraphicPoly, GraphicRect,
    GraphicText, PadGraphic, PinGraphic,
)
from .styles import (
    BACKGROUND_COLOR, DEFAULT_STROKE_WIDTH, LAYER_ORDER, SYMBOL_BACKGROUND,
    SYMBOL_BODY_COLOR,
)


def _stroke_width(item) -> float:
    stroke = getattr(item, "stroke", None)
    if stroke is not None and stroke.width:
        return stroke.width
    return getattr(item, "width", None) or DEFAULT_STROKE_WIDTH


def _filled(item) -> bool:
    fill = getattr(item, "fill", None)
    if fill is None:
        return False
    # Footprint items carry a string or bool, symbol items a Fill object
    fill_type = getattr(fill, "type", fill)
    return fill_type in ("solid", "outline", "background", "yes", True)


def _svg_root(bounds, margin: float, background: str) -> Element:
    min_x, min_y = bounds.min_x - margin, bounds.min_y - margin
    width, height = bounds.width + 2 * margin, bounds.height + 2 * margin
    svg = Element("svg", {
        "xmlns": "http://www.w3.org/2000/svg",
        "viewBox": f"{min_x:.4f} {min_y:.4f} {width:.4f} {height:.4f}",
        "width": f"{width:.4f}mm",
        "height": f"{height:.4f}mm",
        "preserveAspectRatio": "xMidYMid meet",
    })
    SubElement(svg, "rect", {
        "class": "background",
        "x": f"{min_x:.4f}",
        "y": f"{min_y:.4f}",
        "width": f"{width:.4f}",
        "height": f"{height:.4f}",
        "fill": background,
    })
    return svg


class FootprintSVG:
    """Generate an SVG rendering of a generated footprint."""

    def __init__(self, source: str | GeneratedFootprint):
        """Initialize from footprint text or an already parsed footprint."""
        self.generated = source if isinstance(source, GeneratedFootprint) else GeneratedFootprint(source)
        self.drawing = self._read()

    def _read(self) -> Drawing:
        drawing = Drawing()
        for item in self.generated.graphic_items:
            layer = getattr(item, "layer", None)
            if not layer:
                continue
            width = _stroke_width(item)
            kind = type(item).__name__
            if kind == "FpLine":
                drawing.graphics.append(GraphicLine(
                    item.start.X, item.start.Y, item.end.X, item.end.Y, width, layer,
                ))
            elif kind == "FpRect":
                drawing.graphics.append(GraphicRect(
                    item.start.X, item.start.Y, item.end.X, item.end.Y, width, layer, _filled(item),
                ))
            elif kind == "FpCircle":
                radius = math.hypot(item.end.X - item.center.X, item.end.Y - item.center.Y)
                drawing.graphics.append(GraphicCircle(
                    item.center.X, item.center.Y, radius, width, layer, _filled(item),
                ))
            elif kind == "FpArc":
                drawing.graphics.append(GraphicArc(
                    item.start.X, item.start.Y, item.mid.X, item.mid.Y,
                    item.end.X, item.end.Y, width, layer,
                ))
            elif kind == "FpPoly":
                points = [(p.X, p.Y) for p in item.coordinates]
                drawing.graphics.append(GraphicPoly(points, width, layer, _filled(item)))
            elif kind == "FpText" and item.type == "user" and not item.text.startswith("${"):
                size = item.effects.font.height if item.effects and item.effects.font.height else 1.0
                drawing.graphics.append(GraphicText(
                    item.position.X, item.position.Y, item.text, size, layer,
                ))

        for pad in self.generated.pads:
            x, y = pad.position.X, pad.position.Y
            polygon = []
            for primitive in getattr(pad, "customPadPrimitives", None) or []:
                polygon.extend((x + p.X, y + p.Y) for p in getattr(primitive, "coordinates", None) or [])
            drill = pad.drill.diameter if pad.drill and pad.drill.diameter else None
            drawing.pads.append(PadGraphic(
                number=pad.number or "",
                x=x,
                y=y,
                width=pad.size.X,
                height=pad.size.Y,
                shape=pad.shape or "rect",
                angle=pad.position.angle or 0.0,
                layers=list(pad.layers or []),
                roundrect_ratio=getattr(pad, "roundrectRatio", None) or 0.0,
                drill=drill,
                polygon=polygon,
            ))
        return drawing

    def generate(self, margin: float = 1.0) -> str:
        """
        Generate the SVG document.

        Args:
            margin: Margin around the footprint (mm)

        Returns:
            SVG document as string
        """
        svg = _svg_root(self.drawing.bounds(), margin, BACKGROUND_COLOR)

        for layer in LAYER_ORDER:
            items = [g for g in self.drawing.graphics if g.layer == layer]
            if not items:
                continue
            group = SubElement(svg, "g", {"id": f"layer-{layer.replace('.', '-')}", "data-layer": layer})
            for item in items:
                group.append(create_graphic_element(item))

        pads = SubElement(svg, "g", {"id": "pads"})
        for pad in self.drawing.pads:
            pads.append(create_pad_element(pad))

        drills = SubElement(svg, "g", {"id": "drill-holes"})
        for pad in self.drawing.pads:
            hole = create_drill_hole(pad, BACKGROUND_COLOR)
            if hole is not None:
                drills.append(hole)

        labels = SubElement(svg, "g", {"id": "pad-labels"})
        for pad in self.drawing.pads:
            if pad.number:
                labels.append(create_pad_label(pad))

        return tostring(svg, encoding="unicode")


class SymbolSVG:
    """Generate an SVG rendering of a generated symbol. KiCad's Y-up axis is flipped."""

    def __init__(self, source: str | GeneratedSymbol):
        self.generated = source if isinstance(source, GeneratedSymbol) else GeneratedSymbol(source)
        self.drawing = self._read()

    def _read(self) -> Drawing:
        drawing = Drawing()
        layer = "Symbol"
        for unit in self.generated.units():
            for item in unit.graphicItems:
                width = _stroke_width(item)
                kind = type(item).__name__
                if kind == "SyRect":
                    drawing.graphics.append(GraphicRect(
                        item.start.X, -item.start.Y, item.end.X, -item.end.Y, width, layer, _filled(item),
                    ))
                elif kind == "SyCircle":
                    drawing.graphics.append(GraphicCircle(
                        item.center.X, -item.center.Y, item.radius, width, layer, _filled(item),
                    ))
                elif kind == "SyArc":
                    drawing.graphics.append(GraphicArc(
                        item.start.X, -item.start.Y, item.mid.X, -item.mid.Y,
                        item.end.X, -item.end.Y, width, layer,
                    ))
                elif kind == "SyPolyLine":
                    points = [(p.X, -p.Y) for p in item.points]
                    closed = len(points) > 2 and points[0] == points[-1]
                    drawing.graphics.append(GraphicPoly(points, width, layer, _filled(item), closed))
                elif kind == "SyText":
                    size = item.effects.font.height if item.effects and item.effects.font.height else 1.27
                    drawing.graphics.append(GraphicText(
                        item.position.X, -item.position.Y, item.text, size, layer,
                    ))

        for pin in self.generated.pins():
            angle = math.radians(pin.position.angle or 0.0)
            x, y = pin.position.X, pin.position.Y
            end_x = x + pin.length * math.cos(angle)
            end_y = y + pin.length * math.sin(angle)
            drawing.pins.append(PinGraphic(
                number=pin.number, name=pin.name, x=x, y=-y, end_x=end_x, end_y=-end_y,
            ))
        return drawing

    def generate(self, margin: float = 2.54) -> str:
        """Generate the SVG document with body graphics, pins and pin numbers."""
        svg = _svg_root(self.drawing.bounds(), margin, SYMBOL_BACKGROUND)

        body = SubElement(svg, "g", {"id": "body"})
        for item in self.drawing.graphics:
            body.append(create_graphic_element(item, color=SYMBOL_BODY_COLOR))

        pins = SubElement(svg, "g", {"id": "pins"})
        for pin in self.drawing.pins:
            for element in create_pin_elements(pin, text_size=1.0):
                pins.append(element)

        return tostring(svg, encoding="unicode")
