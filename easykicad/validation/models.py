"""Pydantic models for extracted geometric facts and comparison results."""
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from easykicad.config import HOLE_TOLERANCE, POSITION_TOLERANCE, SIZE_TOLERANCE


class PadFact(BaseModel):
    """A pad recovered from either rendering, in millimetres (Y down)."""
    number: str
    x: float
    y: float
    width: float
    height: float
    shape: str = "rect"
    rotation: float = 0.0
    hole_radius: float = 0.0  # 0 for surface-mount pads

    @property
    def has_hole(self) -> bool:
        return self.hole_radius > 0


class ViaFact(BaseModel):
    x: float
    y: float
    diameter: float
    drill_diameter: float


class HoleFact(BaseModel):
    x: float
    y: float
    diameter: float
    plated: bool = False


class PinFact(BaseModel):
    """A symbol pin connection point in millimetres (Y up)."""
    number: str
    name: str = ""
    x: float
    y: float
    electrical_type: Optional[str] = None  # None when the source does not say


def _shift(items: list, dx: float, dy: float) -> list:
    return [i.model_copy(update={"x": round(i.x - dx, 4), "y": round(i.y - dy, 4)}) for i in items]


class FootprintFacts(BaseModel):
    kind: Literal["footprint"] = "footprint"
    pads: list[PadFact] = Field(default_factory=list)
    vias: list[ViaFact] = Field(default_factory=list)
    holes: list[HoleFact] = Field(default_factory=list)

    def center(self) -> tuple[float, float]:
        """Center of the bounding box of the numbered pads, extents included."""
        pads = [p for p in self.pads if p.number] or self.pads
        if not pads:
            return 0.0, 0.0
        min_x = min(p.x - p.width / 2 for p in pads)
        max_x = max(p.x + p.width / 2 for p in pads)
        min_y = min(p.y - p.height / 2 for p in pads)
        max_y = max(p.y + p.height / 2 for p in pads)
        return (min_x + max_x) / 2, (min_y + max_y) / 2

    def recentered(self) -> "FootprintFacts":
        dx, dy = self.center()
        return FootprintFacts(
            pads=_shift(self.pads, dx, dy),
            vias=_shift(self.vias, dx, dy),
            holes=_shift(self.holes, dx, dy),
        )


class SymbolFacts(BaseModel):
    kind: Literal["symbol"] = "symbol"
    pins: list[PinFact] = Field(default_factory=list)

    def center(self) -> tuple[float, float]:
        """Center of the bounding box of the pin connection points."""
        if not self.pins:
            return 0.0, 0.0
        xs = [p.x for p in self.pins]
        ys = [p.y for p in self.pins]
        return (min(xs) + max(xs)) / 2, (min(ys) + max(ys)) / 2

    def recentered(self) -> "SymbolFacts":
        dx, dy = self.center()
        return SymbolFacts(pins=_shift(self.pins, dx, dy))


Facts = Union[FootprintFacts, SymbolFacts]


class ComparisonOptions(BaseModel):
    """Tolerances for a comparison run (mm)."""
    model_config = ConfigDict(frozen=True)

    position_tolerance: float = POSITION_TOLERANCE
    size_tolerance: float = SIZE_TOLERANCE
    hole_tolerance: float = HOLE_TOLERANCE
    size_warnings_only: bool = False


Severity = Literal["error", "warning"]


class Diff(BaseModel):
    """One itemized discrepancy between reference and generated geometry."""
    designator: str
    field: Literal["missing", "extra", "position", "size", "hole", "shape", "name", "electrical", "count"]
    severity: Severity
    message: str
    expected: Optional[str] = None
    actual: Optional[str] = None


class ComparisonResult(BaseModel):
    kind: Literal["footprint", "symbol"]
    passed: bool
    reference_count: int
    generated_count: int
    matched_count: int
    diffs: list[Diff] = Field(default_factory=list)

    @property
    def errors(self) -> list[Diff]:
        return [d for d in self.diffs if d.severity == "error"]

    @property
    def warnings(self) -> list[Diff]:
        return [d for d in self.diffs if d.severity == "warning"]


class ValidationReport(BaseModel):
    """Outcome of validating one component; ``error`` is set on engine faults only."""
    kind: Literal["footprint", "symbol"]
    name: str
    result: Optional[ComparisonResult] = None
    error: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.error is None and self.result is not None and self.result.passed
