"""Fact extraction from generated KiCad text using kiutils."""
import logging

from kiutils.footprint import Footprint
from kiutils.symbol import SymbolLib
from kiutils.utils.sexpr import parse_sexp

from easykicad.errors import GeneratedParseError

from .models import FootprintFacts, HoleFact, PadFact, PinFact, SymbolFacts, ViaFact

logger = logging.getLogger(__name__)


def _parse(text: str, kind: str, loader):
    if not text or not text.strip():
        raise GeneratedParseError(f"generated {kind} text is empty")
    try:
        return loader(parse_sexp(text))
    except Exception as e:
        raise GeneratedParseError(f"generated {kind} text could not be parsed: {e}") from e


def _drill_radius(pad) -> float:
    drill = pad.drill
    if drill is None or not drill.diameter:
        return 0.0
    sizes = [s for s in (drill.diameter, drill.width) if s]
    return min(sizes) / 2


def _primitive_extent(pad) -> tuple[float, float] | None:
    """Width and height of a custom pad's polygon primitives."""
    xs, ys = [], []
    for primitive in getattr(pad, "customPadPrimitives", None) or []:
        for point in getattr(primitive, "coordinates", None) or []:
            xs.append(point.X)
            ys.append(point.Y)
    if not xs:
        return None
    return max(xs) - min(xs), max(ys) - min(ys)


class GeneratedFootprint:
    """A generated ``.kicad_mod`` document re-read through kiutils."""

    def __init__(self, text: str):
        """
        Parse footprint text.

        Raises:
            GeneratedParseError: The text is not a KiCad footprint
        """
        self.text = text
        self.footprint = _parse(text, "footprint", Footprint.from_sexpr)

    @property
    def pads(self) -> list:
        return list(self.footprint.pads)

    @property
    def graphic_items(self) -> list:
        return list(self.footprint.graphicItems)

    def facts(self) -> FootprintFacts:
        """Pads, vias and holes, recentered on the numbered pads."""
        pads, vias, holes = [], [], []
        for pad in self.footprint.pads:
            x, y = pad.position.X, pad.position.Y
            number = pad.number or ""
            if not number and pad.type == "np_thru_hole":
                holes.append(HoleFact(x=x, y=y, diameter=2 * _drill_radius(pad)))
                continue
            if not number and pad.type == "thru_hole":
                vias.append(ViaFact(
                    x=x, y=y, diameter=pad.size.X, drill_diameter=2 * _drill_radius(pad),
                ))
                continue

            width, height = pad.size.X, pad.size.Y
            shape = pad.shape or "rect"
            if shape == "custom":
                extent = _primitive_extent(pad)
                if extent is not None:
                    width, height = extent
            pads.append(PadFact(
                number=number,
                x=x,
                y=y,
                width=width,
                height=height,
                shape=shape,
                rotation=pad.position.angle or 0.0,
                hole_radius=_drill_radius(pad) if pad.type != "smd" else 0.0,
            ))

        logger.debug("Generated footprint: %d pads, %d vias, %d holes", len(pads), len(vias), len(holes))
        return FootprintFacts(pads=pads, vias=vias, holes=holes).recentered()


class GeneratedSymbol:
    """A generated ``.kicad_sym`` document re-read through kiutils."""

    def __init__(self, text: str):
        self.text = text
        self.library = _parse(text, "symbol", SymbolLib.from_sexpr)
        if not self.library.symbols:
            raise GeneratedParseError("generated symbol library contains no symbols")

    @property
    def symbol(self):
        """The first symbol in the library."""
        return self.library.symbols[0]

    def units(self) -> list:
        return [self.symbol, *self.symbol.units]

    def pins(self) -> list:
        return [pin for unit in self.units() for pin in unit.pins]

    def facts(self) -> SymbolFacts:
        """Pin connection points (Y up), recentered on the pins."""
        pins = [
            PinFact(
                number=pin.number,
                name="" if pin.name == "~" else pin.name,
                x=pin.position.X,
                y=pin.position.Y,
                electrical_type=pin.electricalType,
            )
            for pin in self.pins()
        ]
        logger.debug("Generated symbol: %d pins", len(pins))
        return SymbolFacts(pins=pins).recentered()


def extract_generated_footprint(text: str) -> FootprintFacts:
    return GeneratedFootprint(text).facts()


def extract_generated_symbol(text: str) -> SymbolFacts:
    return GeneratedSymbol(text).facts()
