"""Fact extraction from reference SVG renderings.

The source service renders each footprint pad, via and hole, and each symbol
pin, as an SVG ``<g>`` group tagged with a ``c_partid`` attribute and a
``c_origin="x,y"`` anchor in source units.
"""
import logging
import re
from typing import Iterator, Optional
from xml.etree import ElementTree as ET

from easykicad.config import EE_TO_MM
from easykicad.errors import ReferenceParseError

from .models import FootprintFacts, HoleFact, PadFact, PinFact, SymbolFacts, ViaFact

logger = logging.getLogger(__name__)

_ROTATE_RE = re.compile(r"rotate\(\s*(-?[\d.]+)")
_NUMBER_RE = re.compile(r"-?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_WHITE_FILLS = ("white", "#fff", "#ffffff")

# Reference electrical type vocabulary -> KiCad pin type
_ELECTRICAL_TYPES = {
    "input": "input",
    "output": "output",
    "bi": "bidirectional",
    "bidirectional": "bidirectional",
    "tristate": "tri_state",
    "passive": "passive",
    "power": "power_in",
    "power_in": "power_in",
    "power_out": "power_out",
    "open_collector": "open_collector",
    "open_emitter": "open_emitter",
    "unconnected": "no_connect",
    "nc": "no_connect",
}


def _local(tag: str) -> str:
    """Tag name without its XML namespace."""
    return tag.rsplit("}", 1)[-1]


def _parse(svg: str) -> ET.Element:
    if not svg or not svg.strip():
        raise ReferenceParseError("reference SVG is empty")
    try:
        return ET.fromstring(svg)
    except ET.ParseError as e:
        raise ReferenceParseError(f"reference SVG is not well-formed: {e}") from e


def _groups(root: ET.Element, part_id: str) -> Iterator[ET.Element]:
    for element in root.iter():
        if _local(element.tag) == "g" and element.get("c_partid") == part_id:
            yield element


def _children(group: ET.Element, tag: str) -> Iterator[ET.Element]:
    for element in group.iter():
        if element is not group and _local(element.tag) == tag:
            yield element


def _origin(group: ET.Element) -> Optional[tuple[float, float]]:
    raw = group.get("c_origin")
    if not raw:
        return None
    parts = raw.split(",")
    if len(parts) != 2:
        return None
    try:
        return float(parts[0]), float(parts[1])
    except ValueError:
        return None


def _float(element: ET.Element, name: str) -> float:
    try:
        return float(element.get(name, "0"))
    except ValueError:
        return 0.0


def _is_hole_circle(circle: ET.Element, pinhole: bool) -> bool:
    if "hole" in circle.get("class", "").lower() or circle.get("c_etype") == "pinhole":
        return True
    return pinhole and circle.get("fill", "").lower() in _WHITE_FILLS


def _pad(group: ET.Element) -> Optional[PadFact]:
    origin = _origin(group)
    if origin is None:
        logger.debug("Reference pad group without usable c_origin skipped")
        return None

    shape = "rect"
    width = height = 0.0
    hole_radius = 0.0
    rotation = 0.0
    pinhole = any(e.get("c_etype") == "pinhole" for e in group.iter())

    rect = next(_children(group, "rect"), None)
    if rect is not None:
        width, height = _float(rect, "width"), _float(rect, "height")
        shape = "roundrect" if rect.get("rx") else "rect"

    for circle in _children(group, "circle"):
        r = _float(circle, "r")
        if _is_hole_circle(circle, pinhole):
            hole_radius = r
        elif rect is None:
            width = height = 2 * r
            shape = "circle"

    ellipse = next(_children(group, "ellipse"), None)
    if ellipse is not None:
        width, height = 2 * _float(ellipse, "rx"), 2 * _float(ellipse, "ry")
        shape = "oval"

    polygon = next(_children(group, "polygon"), None)
    if polygon is not None:
        values = [float(v) for v in _NUMBER_RE.findall(polygon.get("points", ""))]
        xs, ys = values[0::2], values[1::2]
        if xs and ys:
            width, height = max(xs) - min(xs), max(ys) - min(ys)
        shape = "polygon"

    for element in group.iter():
        match = _ROTATE_RE.search(element.get("transform", ""))
        if match:
            rotation = float(match.group(1))
            break

    return PadFact(
        number=group.get("number", ""),
        x=origin[0] * EE_TO_MM,
        y=origin[1] * EE_TO_MM,
        width=width * EE_TO_MM,
        height=height * EE_TO_MM,
        shape=shape,
        rotation=rotation,
        hole_radius=hole_radius * EE_TO_MM,
    )


def _via(group: ET.Element) -> Optional[ViaFact]:
    origin = _origin(group)
    radii = [_float(c, "r") for c in _children(group, "circle")]
    if origin is None or not radii:
        return None
    return ViaFact(
        x=origin[0] * EE_TO_MM,
        y=origin[1] * EE_TO_MM,
        diameter=2 * max(radii) * EE_TO_MM,
        drill_diameter=2 * min(radii) * EE_TO_MM,
    )


def _hole(group: ET.Element) -> Optional[HoleFact]:
    origin = _origin(group)
    circle = next(_children(group, "circle"), None)
    if origin is None or circle is None:
        return None
    return HoleFact(
        x=origin[0] * EE_TO_MM,
        y=origin[1] * EE_TO_MM,
        diameter=2 * _float(circle, "r") * EE_TO_MM,
        plated=group.get("layerid") == "11" or group.get("c_etype") == "plated",
    )


def extract_reference_footprint(svg: str) -> FootprintFacts:
    """
    Extract pads, vias and holes from a reference footprint SVG.

    Args:
        svg: SVG markup of the footprint preview

    Returns:
        FootprintFacts in millimetres, recentered on the numbered pads

    Raises:
        ReferenceParseError: The markup is empty or not well-formed XML
    """
    root = _parse(svg)
    facts = FootprintFacts(
        pads=[p for p in map(_pad, _groups(root, "part_pad")) if p is not None],
        vias=[v for v in map(_via, _groups(root, "part_via")) if v is not None],
        holes=[h for h in map(_hole, _groups(root, "part_hole")) if h is not None],
    )
    logger.debug(
        "Reference footprint: %d pads, %d vias, %d holes",
        len(facts.pads), len(facts.vias), len(facts.holes),
    )
    return facts.recentered()


def _pin(group: ET.Element) -> Optional[PinFact]:
    origin = _origin(group)
    if origin is None:
        return None
    number = group.get("c_spicepin") or group.get("number", "")
    name = ""
    for text in _children(group, "text"):
        content = "".join(text.itertext()).strip()
        if content:
            name = content
            break
    etype = group.get("c_etype", "").strip().lower()
    return PinFact(
        number=number,
        name=name or number,
        x=origin[0] * EE_TO_MM,
        y=-origin[1] * EE_TO_MM,
        electrical_type=_ELECTRICAL_TYPES.get(etype),
    )


def extract_reference_symbol(svg: str) -> SymbolFacts:
    """Extract pins from a reference symbol SVG, Y flipped to point up.

    Raises:
        ReferenceParseError: The markup is empty or not well-formed XML
    """
    root = _parse(svg)
    facts = SymbolFacts(pins=[p for p in map(_pin, _groups(root, "part_pin")) if p is not None])
    logger.debug("Reference symbol: %d pins", len(facts.pins))
    return facts.recentered()
