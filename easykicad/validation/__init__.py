from .models import (
    ComparisonOptions, ComparisonResult, Diff, FootprintFacts, HoleFact,
    PadFact, PinFact, SymbolFacts, ValidationReport, ViaFact,
)
from .reference import extract_reference_footprint, extract_reference_symbol
from .generated import (
    GeneratedFootprint, GeneratedSymbol, extract_generated_footprint,
    extract_generated_symbol,
)
from .comparator import compare, shapes_equivalent
from .engine import validate_footprint, validate_symbol
from .report import format_text, render_batch_html, render_html, to_json
from .batch import run_batch

__all__ = [
    "ComparisonOptions", "ComparisonResult", "Diff", "FootprintFacts",
    "HoleFact", "PadFact", "PinFact", "SymbolFacts", "ValidationReport",
    "ViaFact", "extract_reference_footprint", "extract_reference_symbol",
    "GeneratedFootprint", "GeneratedSymbol", "extract_generated_footprint",
    "extract_generated_symbol", "compare", "shapes_equivalent",
    "validate_footprint", "validate_symbol", "format_text",
    "render_batch_html", "render_html", "to_json", "run_batch",
]
