"""Stroke and fill styling tables for symbol graphics.

KiCad symbols know only a handful of stroke types and three fill modes, so
source styling is folded onto that closed set.
"""
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from easykicad.config import MIN_STROKE_WIDTH

logger = logging.getLogger(__name__)

# EasyEDA stroke style id -> KiCad stroke type
STROKE_TYPES = MappingProxyType({
    "0": "default",
    "1": "dash",
    "2": "dot",
})

# Colours drawn with the theme default (no explicit colour emitted)
THEME_COLORS = frozenset({"#880000", "#000000", "#8D2323", "#A52A2A"})

# Explicit colours KiCad can represent as (r, g, b, a)
STROKE_COLORS = MappingProxyType({
    "#0000FF": (0, 0, 255, 1),
    "#FF0000": (255, 0, 0, 1),
    "#008000": (0, 128, 0, 1),
    "#00FF00": (0, 255, 0, 1),
})

# Fill colours that mean "body background" in the source editor
BACKGROUND_FILLS = frozenset({"#FFFFFF", "#FFFFCC", "#FFFFE0", "#F5F5F5"})

NO_FILLS = frozenset({"", "NONE", "TRANSPARENT"})


@dataclass(frozen=True)
class SymbolStyle:
    """Resolved KiCad styling for one graphic item."""
    width: float
    stroke_type: str
    color: Optional[tuple[int, int, int, int]]
    fill: str  # none, outline, background


@dataclass(frozen=True)
class StyleMap:
    """Style tables handed to the symbol converter."""
    stroke_types: Mapping[str, str] = field(default_factory=lambda: STROKE_TYPES)
    theme_colors: frozenset = THEME_COLORS
    stroke_colors: Mapping[str, tuple[int, int, int, int]] = field(
        default_factory=lambda: STROKE_COLORS
    )
    background_fills: frozenset = BACKGROUND_FILLS
    min_stroke_width: float = MIN_STROKE_WIDTH

    def stroke_type(self, style_id: str) -> str:
        return self.stroke_types.get(style_id.strip(), "default")

    def color(self, color: str) -> Optional[tuple[int, int, int, int]]:
        color = color.strip().upper()
        if color in self.theme_colors:
            return None
        rgba = self.stroke_colors.get(color)
        if rgba is None:
            logger.debug("Unmapped stroke colour %r, using theme default", color)
        return rgba

    def fill(self, fill_color: str, stroke_color: str, closed: bool = True) -> str:
        """KiCad fill mode. Open shapes never fill."""
        fill_color = fill_color.strip().upper()
        if not closed or fill_color in NO_FILLS:
            return "none"
        if fill_color in self.background_fills:
            return "background"
        if fill_color == stroke_color.strip().upper() or fill_color in self.theme_colors:
            return "outline"
        return "background"

    def resolve(self, style, closed: bool = True) -> SymbolStyle:
        """Resolve a normalized :class:`~easykicad.easyeda.models.Style`."""
        return SymbolStyle(
            width=max(style.stroke_width, self.min_stroke_width),
            stroke_type=self.stroke_type(style.stroke_style),
            color=self.color(style.stroke_color),
            fill=self.fill(style.fill_color, style.stroke_color, closed),
        )
