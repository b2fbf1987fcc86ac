from .sexpr import Sym, dumps, fmt_num
from .layers import LayerMap
from .styles import StyleMap
from .templates import (
    CHIP_GEOMETRY, SYMBOL_TEMPLATES, FootprintTemplate, SymbolTemplate,
    TwoPadGeometry, find_symbol_template, find_template,
)
from .mapper import MapperDecision, decide, passive_class
from .values import display_value, normalize_value
from .symbol import (
    SymbolConverter, SymbolOptions, SymbolOutput, merge_into_library,
    render_library, sanitize_name,
)
from .footprint import FootprintConverter, FootprintOptions, FootprintOutput, infer_polygon_drill

__all__ = [
    "Sym", "dumps", "fmt_num", "LayerMap", "StyleMap", "CHIP_GEOMETRY",
    "SYMBOL_TEMPLATES", "FootprintTemplate", "SymbolTemplate", "TwoPadGeometry",
    "find_symbol_template", "find_template", "MapperDecision", "decide",
    "passive_class", "display_value", "normalize_value",
    "SymbolConverter", "SymbolOptions", "SymbolOutput",
    "merge_into_library", "render_library", "sanitize_name",
    "FootprintConverter", "FootprintOptions", "FootprintOutput", "infer_polygon_drill",
]
