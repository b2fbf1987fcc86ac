"""Curated layouts for two-terminal passives.

Footprint pad geometry follows the KiCad standard library (IPC-7351 nominal density),
so a substituted footprint matches ``Resistor_SMD:R_0603_1608Metric`` and
friends pad for pad. Symbol layouts draw the usual vertical resistor,
capacitor and inductor bodies with pin 1 on top.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

from .sexpr import SExpr, Sym


@dataclass(frozen=True)
class TwoPadGeometry:
    """Land pattern of a two-terminal chip package (mm)."""
    size_code: str  # Imperial, e.g. "0603"
    metric_code: str  # e.g. "1608"
    pad_offset: float  # Pad centers at (+-pad_offset, 0)
    pad_width: float
    pad_height: float
    body_length: float
    body_width: float


# Imperial size code -> geometry
CHIP_GEOMETRY = MappingProxyType({
    "0201": TwoPadGeometry("0201", "0603", 0.32, 0.46, 0.40, 0.6, 0.3),
    "0402": TwoPadGeometry("0402", "1005", 0.51, 0.54, 0.64, 1.0, 0.5),
    "0603": TwoPadGeometry("0603", "1608", 0.825, 0.8, 0.95, 1.6, 0.8),
    "0805": TwoPadGeometry("0805", "2012", 0.9125, 1.025, 1.4, 2.0, 1.25),
    "1206": TwoPadGeometry("1206", "3216", 1.4625, 1.125, 1.75, 3.2, 1.6),
    "1210": TwoPadGeometry("1210", "3225", 1.4625, 1.125, 2.65, 3.2, 2.5),
    "1812": TwoPadGeometry("1812", "4532", 2.1375, 1.275, 3.35, 4.5, 3.2),
    "2010": TwoPadGeometry("2010", "5025", 2.4625, 1.125, 2.65, 5.0, 2.5),
    "2512": TwoPadGeometry("2512", "6332", 2.9625, 1.125, 3.35, 6.3, 3.2),
})

# Passive class -> (KiCad library, footprint name prefix)
PASSIVE_LIBRARIES = MappingProxyType({
    "R": ("Resistor_SMD", "R"),
    "C": ("Capacitor_SMD", "C"),
    "L": ("Inductor_SMD", "L"),
})


@dataclass(frozen=True)
class FootprintTemplate:
    template_id: str  # KiCad library reference
    geometry: TwoPadGeometry


def find_template(passive_class: str, size_code: str) -> Optional[FootprintTemplate]:
    """Template for a passive class ("R", "C", "L") and imperial size code."""
    geometry = CHIP_GEOMETRY.get(size_code)
    library = PASSIVE_LIBRARIES.get(passive_class)
    if geometry is None or library is None:
        return None
    lib_name, prefix = library
    footprint = f"{prefix}_{geometry.size_code}_{geometry.metric_code}Metric"
    return FootprintTemplate(f"{lib_name}:{footprint}", geometry)


def _stroke() -> SExpr:
    return ["stroke", ["width", 0.254], ["type", Sym("default")]]


def _fill(kind: str = "none") -> SExpr:
    return ["fill", ["type", Sym(kind)]]


def _plate(y: float) -> SExpr:
    return ["polyline", ["pts", ["xy", -1.27, y], ["xy", 1.27, y]], _stroke(), _fill()]


def _coil_turn(top: float) -> SExpr:
    return [
        "arc", ["start", 0, top], ["mid", 0.635, round(top - 0.635, 4)], ["end", 0, round(top - 1.27, 4)],
        _stroke(), _fill(),
    ]


@dataclass(frozen=True)
class SymbolTemplate:
    """Fixed vertical layout of a two-pin passive symbol (mm, Y up)."""
    template_id: str
    pin_length: float
    pin_spacing: float  # Distance between the two pin ends
    body: tuple[SExpr, ...]
    reference_at: tuple[float, float, float]  # x, y, angle
    value_at: tuple[float, float, float]


# Passive class -> symbol layout
SYMBOL_TEMPLATES = MappingProxyType({
    "R": SymbolTemplate(
        "resistor", 2.54, 7.62,
        (["rectangle", ["start", -1.016, 2.54], ["end", 1.016, -2.54], _stroke(), _fill("background")],),
        (2.54, 0.0, 90.0), (-1.778, 0.0, 90.0),
    ),
    "C": SymbolTemplate(
        "capacitor", 2.54, 5.08,
        (_plate(0.635), _plate(-0.635)),
        (2.54, 0.0, 0.0), (-2.54, 0.0, 0.0),
    ),
    "L": SymbolTemplate(
        "inductor", 2.54, 7.62,
        tuple(_coil_turn(top) for top in (2.54, 1.27, 0.0, -1.27)),
        (2.54, 0.0, 90.0), (-1.778, 0.0, 90.0),
    ),
})


def find_symbol_template(passive_class: Optional[str]) -> Optional[SymbolTemplate]:
    """Symbol layout for a passive class, or None for anything else."""
    return SYMBOL_TEMPLATES.get(passive_class or "")
