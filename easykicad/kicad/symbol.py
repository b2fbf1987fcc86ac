"""EasyEDA symbol to KiCad symbol library conversion."""
import copy
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from easykicad.config import (
    DEFAULT_LIBRARY_NAME, ELLIPSE_SEGMENTS, KICAD_FORMAT_VERSION,
    KICAD_GENERATOR, KICAD_GENERATOR_VERSION, PIN_NAME_OFFSET,
    PIN_TEXT_SIZE, PROPERTY_OFFSET, SYMBOL_TEXT_SIZE,
)
from easykicad.easyeda.document import SymbolDocument
from easykicad.easyeda.models import (
    Pin, SkippedRecord, SymbolArc, SymbolCircle, SymbolEllipse, SymbolPath,
    SymbolPolygon, SymbolPolyline, SymbolRect, SymbolText,
)
from easykicad.easyeda.normalize import Frame
from easykicad.errors import GeometryError, MissingOriginError, NoPinsError
from easykicad.geometry import (
    arc_midpoint, arc_point, bounding_box, decompose_arc, ellipse_points,
    flatten_path, interpolate_arc, normalize_angle,
)

from .layers import LayerMap
from .mapper import passive_class
from .sexpr import SExpr, Sym, dumps, yes_no
from .styles import StyleMap, SymbolStyle
from .templates import SymbolTemplate, find_symbol_template
from .values import display_value

logger = logging.getLogger(__name__)

# Text marks rendered by the Reference / Value properties instead
_PROPERTY_MARKS = frozenset({"N", "P"})

_INVALID_NAME_CHARS = re.compile(r"[^\w\-.+]")


def sanitize_name(name: str, fallback: str = "UNNAMED") -> str:
    """Make a string safe as a KiCad symbol or footprint name."""
    cleaned = _INVALID_NAME_CHARS.sub("_", name.strip())
    return cleaned or fallback


@dataclass(frozen=True)
class SymbolOptions:
    library: str = DEFAULT_LIBRARY_NAME
    footprint_ref: str = ""  # Value of the Footprint property
    styles: StyleMap = field(default_factory=StyleMap)
    layers: LayerMap = field(default_factory=LayerMap)
    use_templates: bool = False  # Redraw two-pin R/C/L parts from a fixed layout


@dataclass(frozen=True)
class SymbolOutput:
    text: str  # Complete kicad_symbol_lib document
    name: str
    reference: str  # "Library:Name"
    node: SExpr = field(repr=False, compare=False)  # The symbol node alone
    skipped: tuple[SkippedRecord, ...] = ()


def _xy(point: tuple[float, float]) -> tuple[float, float]:
    """Local (Y down) to KiCad symbol space (Y up)."""
    return point[0], -point[1]


def _font(size: float) -> SExpr:
    return ["font", ["size", size, size]]


def _effects(size: float, hide: bool = False, justify: str | None = None) -> SExpr:
    node: SExpr = ["effects", _font(size)]
    if justify:
        node.append(["justify", Sym(justify)])
    if hide:
        node.append(["hide", Sym("yes")])
    return node


def _stroke(style: SymbolStyle) -> SExpr:
    node: SExpr = ["stroke", ["width", round(style.width, 4)], ["type", Sym(style.stroke_type)]]
    if style.color is not None:
        node.append(["color", *style.color])
    return node


def _fill(style: SymbolStyle) -> SExpr:
    return ["fill", ["type", Sym(style.fill)]]


def _pts(points: Iterable[tuple[float, float]]) -> SExpr:
    return ["pts", *(["xy", x, y] for x, y in points)]


def _pin_order(pin: Pin) -> tuple[int, int, str]:
    number = pin.number.strip()
    return (0, int(number), "") if number.isdigit() else (1, 0, number)


class SymbolConverter:
    """Convert a normalized :class:`SymbolDocument` to KiCad symbol text."""

    def __init__(self, options: SymbolOptions | None = None):
        self.options = options or SymbolOptions()

    def convert(self, document: SymbolDocument) -> str:
        """Convert and return only the symbol library text."""
        return self.render(document).text

    def render(self, document: SymbolDocument) -> SymbolOutput:
        """
        Convert a symbol document.

        Args:
            document: Normalized symbol document

        Returns:
            SymbolOutput with the library text and per-shape skip records

        Raises:
            MissingOriginError: The header has no origin
            NoPinsError: The symbol has no pins
        """
        if document.header.origin is None:
            raise MissingOriginError(f"symbol {document.name!r} has no header origin")
        pins = document.pins
        if not pins:
            raise NoPinsError(f"symbol {document.name!r} has no pins")

        name = sanitize_name(document.name)
        meta = document.header.metadata
        cls = passive_class(meta)
        template = None
        if self.options.use_templates and len(pins) == 2:
            template = find_symbol_template(cls)

        skipped: list[SkippedRecord] = []
        graphics: list[SExpr] = []
        if template is not None:
            logger.debug("Drawing %r from the %s template", name, template.template_id)
            graphics = copy.deepcopy(list(template.body))
            pin_nodes = self._template_pins(pins, template)
        else:
            for shape in document.shapes:
                if isinstance(shape, Pin):
                    continue
                try:
                    graphics.extend(self._graphic(shape, document.frame))
                except GeometryError as e:
                    logger.debug("Dropping %s from %r: %s", type(shape).__name__, name, e)
                    skipped.append(SkippedRecord(shape.index, type(shape).__name__, str(e)))
            pin_nodes = [self._pin(pin) for pin in pins]

        node: SExpr = [
            "symbol", name,
            ["pin_names", ["offset", PIN_NAME_OFFSET]],
            ["exclude_from_sim", yes_no(False)],
            ["in_bom", yes_no(True)],
            ["on_board", yes_no(True)],
            *self._properties(document, name, cls, template),
            ["symbol", f"{name}_0_1", *graphics],
            ["symbol", f"{name}_1_1", *pin_nodes],
            ["embedded_fonts", yes_no(False)],
        ]

        logger.info(
            "Converted symbol %r: %d pins, %d graphics, %d skipped",
            name, len(pins), len(graphics), len(skipped),
        )
        return SymbolOutput(
            text=dumps(library_node([node])) + "\n",
            name=name,
            reference=f"{self.options.library}:{name}",
            node=node,
            skipped=tuple(skipped),
        )

    def _properties(
        self, document: SymbolDocument, name: str,
        cls: Optional[str] = None, template: Optional[SymbolTemplate] = None,
    ) -> list[SExpr]:
        meta = document.header.metadata

        def prop(
            key: str, value: str, x: float = 0.0, y: float = 0.0, angle: float = 0, hide: bool = True,
        ) -> SExpr:
            return [
                "property", key, value, ["at", round(x, 4), round(y, 4), angle],
                _effects(SYMBOL_TEXT_SIZE, hide),
            ]

        value = display_value(meta, cls) or name
        if template is not None:
            props = [
                prop("Reference", meta.prefix or "U", *template.reference_at, hide=False),
                prop("Value", value, *template.value_at, hide=False),
            ]
        else:
            box = bounding_box(document.shapes, document.frame)
            if box is None:
                center_x, top, bottom = 0.0, 0.0, 0.0
            else:
                center_x = box.center[0]
                # Y flips: the smallest local y is the top in KiCad space
                top, bottom = -box.min_y, -box.max_y
            props = [
                prop("Reference", meta.prefix or "U", center_x, top + PROPERTY_OFFSET, hide=False),
                prop("Value", value, center_x, bottom - PROPERTY_OFFSET, hide=False),
            ]
        props += [
            prop("Footprint", self.options.footprint_ref),
            prop("Datasheet", meta.datasheet),
            prop("Description", meta.description),
        ]
        if meta.lcsc_id:
            props.append(prop("LCSC", meta.lcsc_id))
        if meta.manufacturer:
            props.append(prop("Manufacturer", meta.manufacturer))
        if meta.manufacturer_part:
            props.append(prop("MPN", meta.manufacturer_part))
        for key, value in meta.attributes.items():
            props.append(prop(key, value))
        return props

    def _template_pins(self, pins: Iterable[Pin], template: SymbolTemplate) -> list[SExpr]:
        """Pin 1 above the body pointing down, pin 2 below pointing up."""
        half = template.pin_spacing / 2
        first, second = sorted(pins, key=_pin_order)
        return [
            [
                "pin", Sym("passive"), Sym("line"),
                ["at", 0, round(y, 4), angle],
                ["length", template.pin_length],
                ["name", pin.name or "~", _effects(PIN_TEXT_SIZE)],
                ["number", pin.number, _effects(PIN_TEXT_SIZE)],
            ]
            for pin, y, angle in ((first, half, 270), (second, -half, 90))
        ]

    def _pin(self, pin: Pin) -> SExpr:
        if pin.has_inverted_bubble and pin.has_clock_triangle:
            decoration = "inverted_clock"
        elif pin.has_inverted_bubble:
            decoration = "inverted"
        elif pin.has_clock_triangle:
            decoration = "clock"
        else:
            decoration = "line"

        # Source rotation points outward in Y-down space; KiCad points inward in Y-up
        angle = normalize_angle(180.0 - pin.rotation)
        x, y = _xy((pin.x, pin.y))
        return [
            "pin", Sym(self.options.layers.pin_type(pin.electrical_type)), Sym(decoration),
            ["at", round(x, 4), round(y, 4), round(angle, 4)],
            ["length", round(pin.pin_length, 4)],
            ["name", pin.name or "~", _effects(PIN_TEXT_SIZE)],
            ["number", pin.number, _effects(PIN_TEXT_SIZE)],
        ]

    def _graphic(self, shape, frame: Frame) -> list[SExpr]:
        styles = self.options.styles

        if isinstance(shape, SymbolRect):
            style = styles.resolve(shape.style)
            x1, y1 = _xy((shape.x, shape.y))
            x2, y2 = _xy((shape.x + shape.width, shape.y + shape.height))
            return [["rectangle", ["start", x1, y1], ["end", x2, y2], _stroke(style), _fill(style)]]

        if isinstance(shape, SymbolCircle):
            style = styles.resolve(shape.style)
            cx, cy = _xy((shape.cx, shape.cy))
            return [["circle", ["center", cx, cy], ["radius", shape.radius], _stroke(style), _fill(style)]]

        if isinstance(shape, SymbolEllipse):
            style = styles.resolve(shape.style)
            if math.isclose(shape.rx, shape.ry, rel_tol=1e-3):
                cx, cy = _xy((shape.cx, shape.cy))
                return [["circle", ["center", cx, cy], ["radius", shape.rx], _stroke(style), _fill(style)]]
            points = ellipse_points(shape.cx, shape.cy, shape.rx, shape.ry, ELLIPSE_SEGMENTS)
            return [["polyline", _pts(_xy(p) for p in points), _stroke(style), _fill(style)]]

        if isinstance(shape, SymbolArc):
            style = styles.resolve(shape.style, closed=False)
            arc = decompose_arc(shape.path)
            if not math.isclose(arc.rx, arc.ry, rel_tol=1e-3):
                points = frame.points(interpolate_arc(arc))
                return [["polyline", _pts(_xy(p) for p in points), _stroke(style), _fill(style)]]
            start = _xy(frame.point(*arc_point(arc, arc.start_angle)))
            mid = _xy(frame.point(*arc_midpoint(arc)))
            end = _xy(frame.point(*arc_point(arc, arc.end_angle)))
            return [[
                "arc", ["start", *start], ["mid", *mid], ["end", *end],
                _stroke(style), _fill(style),
            ]]

        if isinstance(shape, SymbolPolyline):
            style = styles.resolve(shape.style, closed=False)
            return [["polyline", _pts(_xy(p) for p in shape.points), _stroke(style), _fill(style)]]

        if isinstance(shape, SymbolPolygon):
            style = styles.resolve(shape.style)
            points = list(shape.points)
            if points[0] != points[-1]:
                points.append(points[0])
            return [["polyline", _pts(_xy(p) for p in points), _stroke(style), _fill(style)]]

        if isinstance(shape, SymbolPath):
            items = []
            for subpath in flatten_path(shape.path):
                closed = len(subpath) > 2 and subpath[0] == subpath[-1]
                style = styles.resolve(shape.style, closed=closed)
                points = frame.points(subpath)
                items.append(["polyline", _pts(_xy(p) for p in points), _stroke(style), _fill(style)])
            return items

        if isinstance(shape, SymbolText):
            if not shape.visible or shape.is_pin_related or shape.mark in _PROPERTY_MARKS:
                return []
            x, y = _xy((shape.x, shape.y))
            size = round(max(0.5, SYMBOL_TEXT_SIZE * shape.font_size / 7.0), 3)
            # Symbol text angles are written in tenths of a degree
            return [["text", shape.text, ["at", x, y, round(shape.rotation * 10)], _effects(size)]]

        return []


def library_node(symbols: Iterable[SExpr]) -> SExpr:
    return [
        "kicad_symbol_lib",
        ["version", KICAD_FORMAT_VERSION],
        ["generator", KICAD_GENERATOR],
        ["generator_version", KICAD_GENERATOR_VERSION],
        *symbols,
    ]


def render_library(outputs: Iterable[SymbolOutput]) -> str:
    """Combine several converted symbols into one library document."""
    return dumps(library_node(out.node for out in outputs)) + "\n"


def _top_level_symbol_spans(text: str) -> list[tuple[str, int, int]]:
    """(name, start, end) of every depth-1 ``(symbol "...")`` block."""
    spans = []
    depth = 0
    in_string = False
    escaped = False
    start = -1
    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "(":
            depth += 1
            if depth == 2:
                start = i
        elif ch == ")":
            if depth == 2 and start >= 0:
                block = text[start:i + 1]
                match = re.match(r'\(symbol\s+"((?:[^"\\]|\\.)*)"', block)
                if match:
                    spans.append((match.group(1), start, i + 1))
                start = -1
            depth -= 1
    return spans


def merge_into_library(library_text: Optional[str], output: SymbolOutput) -> str:
    """
    Add a symbol to existing library text, replacing one with the same name.

    Args:
        library_text: Existing ``kicad_symbol_lib`` text, or None/empty for a new library
        output: Converted symbol

    Returns:
        Updated library text
    """
    if not library_text or not library_text.strip():
        return render_library([output])

    block = dumps(output.node, indent=1)
    for name, start, end in _top_level_symbol_spans(library_text):
        if name == output.name:
            return library_text[:start] + block + library_text[end:]

    closing = library_text.rstrip().rfind(")")
    if closing < 0:
        raise ValueError("library text is not an s-expression")
    head = library_text[:closing].rstrip()
    return f"{head}\n\t{block}\n)\n"
