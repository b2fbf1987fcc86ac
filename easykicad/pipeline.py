"""Whole-component conversion: one footprint and the symbol that points at it."""
import logging
from dataclasses import dataclass, replace
from typing import Iterable, Mapping, Optional

from easykicad.config import DEFAULT_LIBRARY_NAME
from easykicad.easyeda.document import load_footprint, load_symbol
from easykicad.easyeda.header import parse_header
from easykicad.easyeda.models import SkippedRecord
from easykicad.kicad.footprint import FootprintConverter, FootprintOptions, FootprintOutput
from easykicad.kicad.symbol import SymbolConverter, SymbolOptions, SymbolOutput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComponentConversion:
    symbol: SymbolOutput
    footprint: FootprintOutput
    symbol_ref: str  # "Library:Name"
    footprint_ref: str
    model_uuid: Optional[str]
    skipped: tuple[SkippedRecord, ...]  # Parser and converter skips, symbol first


def convert_component(
    symbol_head: Mapping,
    symbol_shapes: Iterable[str],
    footprint_head: Mapping,
    footprint_shapes: Iterable[str],
    *,
    library: str = DEFAULT_LIBRARY_NAME,
    lcsc_id: Optional[str] = None,
    symbol_options: Optional[SymbolOptions] = None,
    footprint_options: Optional[FootprintOptions] = None,
) -> ComponentConversion:
    """
    Convert the symbol and footprint sub-documents of one component.

    The footprint is converted first so the symbol's Footprint property can
    reference it.

    Args:
        symbol_head: ``head`` object of the symbol sub-document
        symbol_shapes: Raw symbol shape records
        footprint_head: ``head`` object of the footprint sub-document
        footprint_shapes: Raw footprint shape records
        library: Library nickname used in the emitted references
        lcsc_id: Supplier part number, overriding the header's
        symbol_options: Symbol converter options (library and footprint_ref are filled in)
        footprint_options: Footprint converter options (library is filled in)

    Returns:
        ComponentConversion

    Raises:
        ConversionError: Either sub-document lacks an origin, pins or pads
    """
    extra = {"lcsc_id": lcsc_id} if lcsc_id else {}
    symbol_doc = load_symbol(None, symbol_shapes, header=parse_header(symbol_head, **extra))
    footprint_doc = load_footprint(None, footprint_shapes, header=parse_header(footprint_head, **extra))

    # The symbol header carries the designator prefix the template decision relies on
    symbol_meta = symbol_doc.header.metadata
    decision_meta = replace(
        symbol_meta, package=footprint_doc.header.metadata.package or symbol_meta.package,
    )

    footprint_options = replace(footprint_options or FootprintOptions(), library=library)
    footprint = FootprintConverter(footprint_options).render(footprint_doc, decision_meta)

    symbol_options = replace(
        symbol_options or SymbolOptions(), library=library, footprint_ref=footprint.reference,
    )
    symbol = SymbolConverter(symbol_options).render(symbol_doc)

    logger.info("Converted component %r -> %s, %s", symbol.name, symbol.reference, footprint.reference)
    return ComponentConversion(
        symbol=symbol,
        footprint=footprint,
        symbol_ref=symbol.reference,
        footprint_ref=footprint.reference,
        model_uuid=footprint.model_uuid,
        skipped=symbol_doc.skipped + symbol.skipped + footprint_doc.skipped + footprint.skipped,
    )
