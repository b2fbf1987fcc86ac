from .document import FootprintDocument, SymbolDocument, load_footprint, load_symbol
from .header import parse_header
from .models import (
    ComponentMetadata, Header, Model3D, Pad, Pin, SkippedRecord, Style, Via,
)
from .normalize import Frame, normalize_footprint, normalize_symbol
from .parser import ParseResult, parse, parse_shapes

__all__ = [
    "FootprintDocument", "SymbolDocument", "load_footprint", "load_symbol",
    "parse_header", "ComponentMetadata", "Header", "Model3D", "Pad", "Pin",
    "SkippedRecord", "Style", "Via", "Frame", "normalize_footprint",
    "normalize_symbol", "ParseResult", "parse", "parse_shapes",
]
