"""Immutable symbol and footprint documents built from one API payload."""
import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from easykicad.config import EE_TO_MM
from easykicad.errors import MissingOriginError

from .header import parse_header
from .models import (
    FootprintArc, FootprintCircle, FootprintRect, FootprintShape,
    FootprintText, Header, Hole, Model3D, Pad, Pin, SkippedRecord,
    SolidRegion, SymbolArc, SymbolCircle, SymbolEllipse, SymbolPath,
    SymbolPolygon, SymbolPolyline, SymbolRect, SymbolShape, SymbolText,
    Track, Via,
)
from .normalize import Frame, normalize_footprint, normalize_symbol
from .parser import parse_shapes

logger = logging.getLogger(__name__)

SYMBOL_SHAPES = (
    Pin, SymbolRect, SymbolCircle, SymbolEllipse, SymbolArc,
    SymbolPolyline, SymbolPolygon, SymbolPath, SymbolText,
)

FOOTPRINT_SHAPES = (
    Pad, Track, Hole, FootprintCircle, FootprintArc, FootprintRect,
    Via, FootprintText, SolidRegion,
)


@dataclass(frozen=True)
class SymbolDocument:
    """A normalized symbol sub-document."""
    header: Header
    shapes: tuple[SymbolShape, ...]
    frame: Frame
    skipped: tuple[SkippedRecord, ...] = ()

    @property
    def pins(self) -> list[Pin]:
        return [s for s in self.shapes if isinstance(s, Pin)]

    @property
    def name(self) -> str:
        return self.header.metadata.name


@dataclass(frozen=True)
class FootprintDocument:
    """A normalized footprint sub-document."""
    header: Header
    shapes: tuple[FootprintShape, ...]
    frame: Frame
    skipped: tuple[SkippedRecord, ...] = ()
    model: Optional[Model3D] = None

    @property
    def pads(self) -> list[Pad]:
        return [s for s in self.shapes if isinstance(s, Pad)]

    @property
    def name(self) -> str:
        return self.header.metadata.package or self.header.metadata.name


def _frame(header: Header, kind: str, scale: float) -> Frame:
    if header.origin is None:
        raise MissingOriginError(
            f"{kind} header for {header.metadata.name!r} has no usable origin"
        )
    return Frame(header.origin[0], header.origin[1], scale)


def _split(parsed, accepted: tuple[type, ...], kind: str):
    """Separate shapes of the expected sub-document kind from strays."""
    kept = []
    strays = []
    for shape in parsed.shapes:
        if isinstance(shape, accepted):
            kept.append(shape)
        elif not isinstance(shape, Model3D):
            strays.append(SkippedRecord(shape.index, type(shape).__name__, f"not a {kind} shape"))
    return kept, strays


def load_symbol(
    head: Mapping | None,
    records: Iterable[str],
    header: Header | None = None,
    scale: float = EE_TO_MM,
) -> SymbolDocument:
    """
    Parse and normalize a symbol sub-document.

    Args:
        head: Raw ``head`` object (ignored when ``header`` is given)
        records: Raw shape strings in wire order
        header: Pre-parsed header, e.g. with externally supplied metadata
        scale: Source unit to millimetre factor

    Raises:
        MissingOriginError: The header origin is missing or unparsable
    """
    header = header or parse_header(head)
    frame = _frame(header, "symbol", scale)
    parsed = parse_shapes(records)
    shapes, strays = _split(parsed, SYMBOL_SHAPES, "symbol")
    document = SymbolDocument(
        header=header,
        shapes=normalize_symbol(shapes, frame),
        frame=frame,
        skipped=parsed.skipped + tuple(strays),
    )
    logger.debug(
        "Loaded symbol %r: %d shapes, %d skipped",
        document.name, len(document.shapes), len(document.skipped),
    )
    return document


def load_footprint(
    head: Mapping | None,
    records: Iterable[str],
    header: Header | None = None,
    scale: float = EE_TO_MM,
) -> FootprintDocument:
    """Parse and normalize a footprint sub-document. See :func:`load_symbol`."""
    header = header or parse_header(head)
    frame = _frame(header, "footprint", scale)
    parsed = parse_shapes(records)
    shapes, strays = _split(parsed, FOOTPRINT_SHAPES, "footprint")
    model = next((s for s in parsed.shapes if isinstance(s, Model3D)), None)
    document = FootprintDocument(
        header=header,
        shapes=normalize_footprint(shapes, frame),
        frame=frame,
        skipped=parsed.skipped + tuple(strays),
        model=model,
    )
    logger.debug(
        "Loaded footprint %r: %d shapes, %d skipped",
        document.name, len(document.shapes), len(document.skipped),
    )
    return document
