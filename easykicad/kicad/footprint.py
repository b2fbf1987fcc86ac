"""EasyEDA footprint to KiCad footprint conversion."""
import logging
import math
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from easykicad.config import (
    COURTYARD_MARGIN, COURTYARD_STROKE_WIDTH, DEFAULT_LIBRARY_NAME,
    FAB_STROKE_WIDTH, FOOTPRINT_TEXT_SIZE, FOOTPRINT_TEXT_THICKNESS,
    KICAD_FORMAT_VERSION, KICAD_GENERATOR, KICAD_GENERATOR_VERSION,
    POLYGON_DRILL_RATIO, SILK_STROKE_WIDTH, SMD_ROUNDRECT_RATIO,
)
from easykicad.easyeda.document import FootprintDocument
from easykicad.easyeda.models import (
    ComponentMetadata, FootprintArc, FootprintCircle, FootprintRect,
    FootprintText, Hole, Pad, SkippedRecord, SolidRegion, Track, Via,
)
from easykicad.easyeda.normalize import Frame
from easykicad.errors import GeometryError, NoPadsError
from easykicad.geometry import (
    BoundingBox, arc_midpoint, arc_point, bounding_box, decompose_arc,
    flatten_path, interpolate_arc, normalize_angle,
)

from .layers import MULTI_LAYER_ID, LayerMap
from .mapper import MapperDecision, decide
from .sexpr import SExpr, Sym, dumps, yes_no
from .symbol import sanitize_name
from .templates import TwoPadGeometry

logger = logging.getLogger(__name__)

# Text kinds rendered by the Reference / Value properties instead
_PROPERTY_TEXT_KINDS = frozenset({"N", "P"})

# Solid-region fill kinds that cut the board instead of adding copper/ink
_CUTOUT_FILLS = frozenset({"npth", "cutout"})


@dataclass(frozen=True)
class FootprintOptions:
    library: str = DEFAULT_LIBRARY_NAME
    use_templates: bool = True
    # 3D model path template; "{uuid}" and "{name}" are substituted
    model_path: Optional[str] = None
    layers: LayerMap = field(default_factory=LayerMap)


@dataclass(frozen=True)
class FootprintOutput:
    text: str
    name: str
    reference: str  # "Library:Name"
    template_id: Optional[str] = None
    model_uuid: Optional[str] = None
    skipped: tuple[SkippedRecord, ...] = ()


def _stroke(width: float) -> SExpr:
    return ["stroke", ["width", round(width, 4)], ["type", Sym("solid")]]


def _effects(size: float = FOOTPRINT_TEXT_SIZE, thickness: float = FOOTPRINT_TEXT_THICKNESS,
             hide: bool = False, mirror: bool = False) -> SExpr:
    node: SExpr = ["effects", ["font", ["size", size, size], ["thickness", thickness]]]
    if mirror:
        node.append(["justify", Sym("mirror")])
    if hide:
        node.append(["hide", Sym("yes")])
    return node


def _at(x: float, y: float, angle: float = 0.0) -> SExpr:
    node: SExpr = ["at", round(x, 4), round(y, 4)]
    if angle:
        node.append(round(angle, 4))
    return node


def _line(start: tuple[float, float], end: tuple[float, float], width: float, layer: str) -> SExpr:
    return ["fp_line", ["start", *start], ["end", *end], _stroke(width), ["layer", layer]]


def _rect(box: BoundingBox, width: float, layer: str) -> SExpr:
    return [
        "fp_rect", ["start", box.min_x, box.min_y], ["end", box.max_x, box.max_y],
        _stroke(width), ["fill", Sym("none")], ["layer", layer],
    ]


def _pts(points: Iterable[tuple[float, float]]) -> SExpr:
    return ["pts", *(["xy", round(x, 4), round(y, 4)] for x, y in points)]


def infer_polygon_drill(pad: Pad) -> Pad:
    """Give a plated multi-layer polygon pad that carries no drill one sized from its outline.

    The source editor leaves ``hole_radius`` at 0 on such pads although they are
    drilled. The drill diameter is a fixed fraction of the outline's smaller side.
    """
    if (
        pad.shape.upper() != "POLYGON" or pad.hole_radius > 0 or not pad.is_plated
        or pad.layer != MULTI_LAYER_ID or len(pad.polygon_points) < 3
    ):
        return pad
    xs = [x for x, _ in pad.polygon_points]
    ys = [y for _, y in pad.polygon_points]
    smaller = min(max(xs) - min(xs), max(ys) - min(ys))
    if smaller <= 0:
        return pad
    return replace(pad, hole_radius=smaller * POLYGON_DRILL_RATIO / 2)


class FootprintConverter:
    """Convert a normalized :class:`FootprintDocument` to KiCad footprint text."""

    def __init__(self, options: FootprintOptions | None = None):
        self.options = options or FootprintOptions()

    @property
    def layers(self) -> LayerMap:
        return self.options.layers

    def convert(self, document: FootprintDocument) -> str:
        """Convert and return only the footprint text."""
        return self.render(document).text

    def render(
        self, document: FootprintDocument, metadata: ComponentMetadata | None = None
    ) -> FootprintOutput:
        """
        Convert a footprint document, substituting a template when the mapper allows.

        Args:
            document: Normalized footprint document
            metadata: Component metadata for the template decision, defaulting to the header's

        Returns:
            FootprintOutput with the ``.kicad_mod`` text and metadata

        Raises:
            NoPadsError: The footprint has no pads and no template applies
        """
        name = sanitize_name(document.name)
        document = replace(document, shapes=tuple(
            infer_polygon_drill(s) if isinstance(s, Pad) else s for s in document.shapes
        ))
        if self.options.use_templates:
            decision = decide(document, metadata)
        else:
            decision = MapperDecision(False, reason="templates disabled")

        skipped: list[SkippedRecord] = []
        if decision.use_template:
            node = self._template_footprint(document, name, decision.geometry, decision.template_id)
        else:
            if not document.pads:
                raise NoPadsError(f"footprint {document.name!r} has no pads")
            node = self._footprint(document, name, skipped)

        model_uuid = document.model.uuid if document.model else None
        if model_uuid and self.options.model_path:
            node.append(self._model(model_uuid, name))

        logger.info(
            "Converted footprint %r (%s): %d skipped",
            name, decision.template_id or "verbatim", len(skipped),
        )
        return FootprintOutput(
            text=dumps(node) + "\n",
            name=name,
            reference=f"{self.options.library}:{name}",
            template_id=decision.template_id,
            model_uuid=model_uuid,
            skipped=tuple(skipped),
        )

    # Document skeleton

    def _header(self, name: str, meta: ComponentMetadata, box: BoundingBox,
                smd: bool, descr: str) -> list:
        ref_y = box.min_y - 1.5 * FOOTPRINT_TEXT_SIZE
        value_y = box.max_y + 1.5 * FOOTPRINT_TEXT_SIZE
        center_x = box.center[0]

        def hidden(key: str, value: str) -> SExpr:
            return ["property", key, value, ["at", 0, 0, 0], ["layer", "F.Fab"], _effects(hide=True)]

        header: list = [
            "footprint", name,
            ["version", KICAD_FORMAT_VERSION],
            ["generator", KICAD_GENERATOR],
            ["generator_version", KICAD_GENERATOR_VERSION],
            ["layer", "F.Cu"],
            ["descr", descr],
            ["tags", " ".join(t for t in (meta.package, meta.lcsc_id) if t)],
            ["property", "Reference", "REF**", _at(center_x, ref_y), ["layer", "F.SilkS"], _effects()],
            ["property", "Value", meta.name or name, _at(center_x, value_y), ["layer", "F.Fab"], _effects()],
            hidden("Datasheet", meta.datasheet),
            hidden("Description", meta.description),
        ]
        if meta.lcsc_id:
            header.append(hidden("LCSC", meta.lcsc_id))
        if meta.manufacturer:
            header.append(hidden("Manufacturer", meta.manufacturer))
        header.append(["attr", Sym("smd" if smd else "through_hole")])
        return header

    def _footer(self, box: BoundingBox) -> list[SExpr]:
        cx, cy = box.center
        return [
            _rect(box.expand(COURTYARD_MARGIN), COURTYARD_STROKE_WIDTH, "F.CrtYd"),
            ["fp_text", Sym("user"), "${REFERENCE}", _at(cx, cy), ["layer", "F.Fab"], _effects()],
            ["embedded_fonts", yes_no(False)],
        ]

    def _model(self, uuid: str, name: str) -> SExpr:
        path = self.options.model_path.format(uuid=uuid, name=name)
        return [
            "model", path,
            ["offset", ["xyz", 0, 0, 0]],
            ["scale", ["xyz", 1, 1, 1]],
            ["rotate", ["xyz", 0, 0, 0]],
        ]

    # Verbatim emission

    def _footprint(self, document: FootprintDocument, name: str, skipped: list[SkippedRecord]) -> SExpr:
        meta = document.header.metadata
        visible = [
            s for s in document.shapes
            if not isinstance(s, FootprintText)
            and not self.layers.is_hidden(getattr(s, "layer", 0))
        ]
        box = bounding_box(visible, document.frame) or BoundingBox(0, 0, 0, 0)
        smd = all(pad.is_smd for pad in document.pads)

        node = self._header(name, meta, box, smd, meta.description or meta.name or name)
        graphics: list[SExpr] = []
        pads: list[SExpr] = []
        for shape in document.shapes:
            try:
                if isinstance(shape, Pad):
                    pads.append(self._pad(shape))
                elif isinstance(shape, Hole):
                    pads.append(self._hole(shape))
                elif isinstance(shape, Via):
                    pads.append(self._via(shape))
                else:
                    graphics.extend(self._graphic(shape, document.frame))
            except GeometryError as e:
                logger.debug("Dropping %s from %r: %s", type(shape).__name__, name, e)
                skipped.append(SkippedRecord(shape.index, type(shape).__name__, str(e)))

        node.extend(graphics)
        node.extend(pads)
        node.extend(self._footer(box))
        return node

    def _pad(self, pad: Pad) -> SExpr:
        smd = pad.is_smd
        shape = self.layers.pad_shape(pad.shape)
        if smd:
            kind = "smd"
        elif pad.is_plated:
            kind = "thru_hole"
        else:
            kind = "np_thru_hole"
        if shape == "rect" and smd:
            shape = "roundrect"
        if shape == "custom" and len(pad.polygon_points) < 3:
            shape = "rect"

        hole = 2 * pad.hole_radius
        if shape == "custom":
            # Polygon points are already rotated, so the pad itself is not
            anchor = max(hole, 0.1) if not smd else 0.1
            node: SExpr = ["pad", pad.number, Sym(kind), Sym(shape), _at(pad.x, pad.y), ["size", anchor, anchor]]
        else:
            node = [
                "pad", pad.number, Sym(kind), Sym(shape),
                _at(pad.x, pad.y, pad.rotation), ["size", round(pad.width, 4), round(pad.height, 4)],
            ]

        if not smd:
            node.append(self._drill(pad))
        node.append(["layers", *self.layers.pad_layers(pad.layer, smd)])
        if shape == "roundrect":
            node.append(["roundrect_rratio", SMD_ROUNDRECT_RATIO])
        if shape == "custom":
            relative = [(x - pad.x, y - pad.y) for x, y in pad.polygon_points]
            node.append(["options", ["clearance", Sym("outline")], ["anchor", Sym("circle" if not smd else "rect")]])
            node.append(["primitives", ["gr_poly", _pts(relative), ["width", 0], ["fill", yes_no(True)]]])
        return node

    @staticmethod
    def _drill(pad: Pad) -> SExpr:
        diameter = round(2 * pad.hole_radius, 4)
        if pad.hole_length <= diameter:
            return ["drill", diameter]
        length = round(pad.hole_length, 4)
        # KiCad oval drills are sized in the pad frame; pick the axis the slot runs along
        relative = normalize_angle(pad.hole_orientation - pad.rotation) % 180.0
        if relative < 45.0 or relative > 135.0:
            return ["drill", Sym("oval"), length, diameter]
        return ["drill", Sym("oval"), diameter, length]

    def _hole(self, hole: Hole) -> SExpr:
        diameter = round(2 * hole.radius, 4)
        return [
            "pad", "", Sym("np_thru_hole"), Sym("circle"), _at(hole.x, hole.y),
            ["size", diameter, diameter], ["drill", diameter],
            ["layers", *self.layers.tht_pad_layers],
        ]

    def _via(self, via: Via) -> SExpr:
        diameter = round(via.diameter, 4)
        return [
            "pad", "", Sym("thru_hole"), Sym("circle"), _at(via.x, via.y),
            ["size", diameter, diameter], ["drill", round(2 * via.drill_radius, 4)],
            ["layers", *self.layers.tht_pad_layers],
        ]

    def _graphic(self, shape, frame: Frame) -> list[SExpr]:
        layer_id = getattr(shape, "layer", None)
        if layer_id is not None and self.layers.is_hidden(layer_id):
            return []

        if isinstance(shape, Track):
            layer = self.layers.graphic_layer(shape.layer)
            return [
                _line(a, b, shape.width, layer)
                for a, b in zip(shape.points, shape.points[1:])
            ]

        if isinstance(shape, FootprintCircle):
            layer = self.layers.graphic_layer(shape.layer)
            return [[
                "fp_circle", ["center", shape.cx, shape.cy], ["end", shape.cx + shape.radius, shape.cy],
                _stroke(shape.width), ["fill", Sym("none")], ["layer", layer],
            ]]

        if isinstance(shape, FootprintArc):
            layer = self.layers.graphic_layer(shape.layer)
            arc = decompose_arc(shape.path)
            if not math.isclose(arc.rx, arc.ry, rel_tol=1e-3):
                points = frame.points(interpolate_arc(arc))
                return [_line(a, b, shape.width, layer) for a, b in zip(points, points[1:])]
            return [[
                "fp_arc",
                ["start", *frame.point(*arc_point(arc, arc.start_angle))],
                ["mid", *frame.point(*arc_midpoint(arc))],
                ["end", *frame.point(*arc_point(arc, arc.end_angle))],
                _stroke(shape.width), ["layer", layer],
            ]]

        if isinstance(shape, FootprintRect):
            layer = self.layers.graphic_layer(shape.layer)
            box = BoundingBox(shape.x, shape.y, shape.x + shape.width, shape.y + shape.height)
            return [_rect(box, shape.stroke_width, layer)]

        if isinstance(shape, FootprintText):
            if not shape.displayed or not shape.text or shape.kind in _PROPERTY_TEXT_KINDS:
                return []
            layer = self.layers.graphic_layer(shape.layer)
            size = round(max(shape.font_size, 0.5), 4)
            thickness = round(shape.stroke_width or FOOTPRINT_TEXT_THICKNESS, 4)
            return [[
                "fp_text", Sym("user"), shape.text, _at(shape.x, shape.y, shape.rotation),
                ["layer", layer], _effects(size, thickness, mirror=shape.mirror),
            ]]

        if isinstance(shape, SolidRegion):
            cutout = shape.fill_kind.lower() in _CUTOUT_FILLS
            layer = "Edge.Cuts" if cutout else self.layers.graphic_layer(shape.layer)
            items = []
            for subpath in flatten_path(shape.path):
                if len(subpath) < 3:
                    continue
                items.append([
                    "fp_poly", _pts(frame.points(subpath)), _stroke(0 if not cutout else FAB_STROKE_WIDTH),
                    ["fill", Sym("none" if cutout else "solid")], ["layer", layer],
                ])
            return items

        return []

    # Template emission

    def _template_footprint(self, document: FootprintDocument, name: str,
                            geometry: TwoPadGeometry, template_id: str) -> SExpr:
        meta = document.header.metadata
        half_pad_x = geometry.pad_offset + geometry.pad_width / 2
        half_y = max(geometry.pad_height, geometry.body_width) / 2
        box = BoundingBox(-half_pad_x, -half_y, half_pad_x, half_y)
        body = BoundingBox(
            -geometry.body_length / 2, -geometry.body_width / 2,
            geometry.body_length / 2, geometry.body_width / 2,
        )

        node = self._header(name, meta, box, True, f"{meta.name or name} ({template_id})")
        node.append(_rect(body, FAB_STROKE_WIDTH, "F.Fab"))

        # Silkscreen between the pads, omitted when the gap is too small
        silk_x = geometry.pad_offset - geometry.pad_width / 2 - 2 * SILK_STROKE_WIDTH
        if silk_x > 0.1:
            silk_y = geometry.body_width / 2 + SILK_STROKE_WIDTH
            for y in (-silk_y, silk_y):
                node.append(_line((-silk_x, y), (silk_x, y), SILK_STROKE_WIDTH, "F.SilkS"))

        for number, x in (("1", -geometry.pad_offset), ("2", geometry.pad_offset)):
            node.append([
                "pad", number, Sym("smd"), Sym("roundrect"), _at(x, 0),
                ["size", geometry.pad_width, geometry.pad_height],
                ["layers", *self.layers.pad_layers(1, True)],
                ["roundrect_rratio", SMD_ROUNDRECT_RATIO],
            ])
        node.extend(self._footer(box))
        return node
