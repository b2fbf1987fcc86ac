"""Tolerance-based comparison of reference and generated facts."""
import logging
import math
from typing import Optional

from .models import (
    ComparisonOptions, ComparisonResult, Diff, Facts, FootprintFacts,
    PadFact, PinFact,
)

logger = logging.getLogger(__name__)

# Shape classes considered interchangeable
_RECTANGULAR = frozenset({"rect", "roundrect", "polygon", "custom", "trapezoid"})
_ROUND = frozenset({"circle", "oval"})


def shapes_equivalent(a: str, b: str) -> bool:
    if a == b:
        return True
    return (a in _RECTANGULAR and b in _RECTANGULAR) or (a in _ROUND and b in _ROUND)


def _xy(item) -> str:
    return f"({item.x:.3f}, {item.y:.3f})"


def _match(reference: list, generated: list) -> tuple[list[tuple], list, list]:
    """
    Pair items by number; duplicate numbers pair greedily by nearest position.

    Returns:
        (pairs, unmatched reference items, unmatched generated items)
    """
    remaining = list(generated)
    pairs = []
    unmatched = []
    for ref in reference:
        candidates = [g for g in remaining if g.number == ref.number]
        if not candidates:
            unmatched.append(ref)
            continue
        best = min(candidates, key=lambda g: math.hypot(g.x - ref.x, g.y - ref.y))
        remaining.remove(best)
        pairs.append((ref, best))
    return pairs, unmatched, remaining


def _position_diff(ref, gen, options: ComparisonOptions, label: str) -> Optional[Diff]:
    if abs(ref.x - gen.x) <= options.position_tolerance and abs(ref.y - gen.y) <= options.position_tolerance:
        return None
    return Diff(
        designator=ref.number, field="position", severity="error",
        message=f"{label} {ref.number} position differs: expected {_xy(ref)}, got {_xy(gen)}",
        expected=_xy(ref), actual=_xy(gen),
    )


def _size_severity(options: ComparisonOptions) -> str:
    return "warning" if options.size_warnings_only else "error"


def _pad_diffs(ref: PadFact, gen: PadFact, options: ComparisonOptions) -> list[Diff]:
    diffs = []
    position = _position_diff(ref, gen, options, "Pad")
    if position:
        diffs.append(position)

    tol = options.size_tolerance
    straight = abs(ref.width - gen.width) <= tol and abs(ref.height - gen.height) <= tol
    # A pad rotated by 90 degrees on one side only swaps its dimensions
    swapped = abs(ref.width - gen.height) <= tol and abs(ref.height - gen.width) <= tol
    if not (straight or swapped):
        expected = f"{ref.width:.3f}x{ref.height:.3f}"
        actual = f"{gen.width:.3f}x{gen.height:.3f}"
        diffs.append(Diff(
            designator=ref.number, field="size", severity=_size_severity(options),
            message=f"Pad {ref.number} at {_xy(ref)} size differs: expected {expected}mm, got {actual}mm",
            expected=expected, actual=actual,
        ))

    if not shapes_equivalent(ref.shape, gen.shape):
        diffs.append(Diff(
            designator=ref.number, field="shape", severity="warning",
            message=f"Pad {ref.number} shape differs: expected {ref.shape}, got {gen.shape}",
            expected=ref.shape, actual=gen.shape,
        ))

    if ref.has_hole != gen.has_hole:
        def kind(pad: PadFact) -> str:
            return "THT" if pad.has_hole else "SMD"
        diffs.append(Diff(
            designator=ref.number, field="hole", severity=_size_severity(options),
            message=f"Pad {ref.number} hole mismatch: expected {kind(ref)}, got {kind(gen)}",
            expected=kind(ref), actual=kind(gen),
        ))
    elif ref.has_hole and abs(ref.hole_radius - gen.hole_radius) > options.hole_tolerance:
        expected = f"{2 * ref.hole_radius:.3f}"
        actual = f"{2 * gen.hole_radius:.3f}"
        diffs.append(Diff(
            designator=ref.number, field="hole", severity=_size_severity(options),
            message=f"Pad {ref.number} drill differs: expected {expected}mm, got {actual}mm",
            expected=expected, actual=actual,
        ))
    return diffs


def _pin_diffs(ref: PinFact, gen: PinFact, options: ComparisonOptions) -> list[Diff]:
    diffs = []
    position = _position_diff(ref, gen, options, "Pin")
    if position:
        diffs.append(position)
    if ref.name and gen.name and ref.name.lower() != gen.name.lower():
        diffs.append(Diff(
            designator=ref.number, field="name", severity="warning",
            message=f'Pin {ref.number} name differs: expected "{ref.name}", got "{gen.name}"',
            expected=ref.name, actual=gen.name,
        ))
    if ref.electrical_type and gen.electrical_type and ref.electrical_type != gen.electrical_type:
        diffs.append(Diff(
            designator=ref.number, field="electrical", severity="warning",
            message=(
                f"Pin {ref.number} electrical type differs: "
                f"expected {ref.electrical_type}, got {gen.electrical_type}"
            ),
            expected=ref.electrical_type, actual=gen.electrical_type,
        ))
    return diffs


def _unmatched(items: list, field: str, label: str, where: str) -> list[Diff]:
    return [
        Diff(
            designator=item.number, field=field, severity="error",
            message=f"{label} {item.number or '(unnumbered)'} at {_xy(item)} {where}",
        )
        for item in items
    ]


def _count_diff(name: str, expected: int, actual: int) -> list[Diff]:
    if expected == actual:
        return []
    return [Diff(
        designator="", field="count", severity="warning",
        message=f"{name} count differs: expected {expected}, got {actual}",
        expected=str(expected), actual=str(actual),
    )]


def compare(
    reference: Facts, generated: Facts, options: ComparisonOptions | None = None
) -> ComparisonResult:
    """
    Compare reference and generated facts of the same kind.

    Args:
        reference: Facts extracted from the reference rendering
        generated: Facts extracted from the generated KiCad text
        options: Tolerances; defaults from :mod:`easykicad.config`

    Returns:
        ComparisonResult; ``passed`` is false iff any diff is an error
    """
    options = options or ComparisonOptions()
    if reference.kind != generated.kind:
        raise ValueError(f"cannot compare {reference.kind} facts with {generated.kind} facts")

    diffs: list[Diff] = []
    if isinstance(reference, FootprintFacts):
        ref_items, gen_items, label = reference.pads, generated.pads, "Pad"
        pairs, missing, extra = _match(ref_items, gen_items)
        for ref, gen in pairs:
            diffs.extend(_pad_diffs(ref, gen, options))
        diffs.extend(_count_diff("Via", len(reference.vias), len(generated.vias)))
        diffs.extend(_count_diff("Hole", len(reference.holes), len(generated.holes)))
    else:
        ref_items, gen_items, label = reference.pins, generated.pins, "Pin"
        pairs, missing, extra = _match(ref_items, gen_items)
        for ref, gen in pairs:
            diffs.extend(_pin_diffs(ref, gen, options))

    diffs.extend(_unmatched(missing, "missing", label, "missing in generated output"))
    diffs.extend(_unmatched(extra, "extra", label, "not present in reference"))

    result = ComparisonResult(
        kind=reference.kind,
        passed=not any(d.severity == "error" for d in diffs),
        reference_count=len(ref_items),
        generated_count=len(gen_items),
        matched_count=len(pairs),
        diffs=diffs,
    )
    logger.info(
        "%s comparison %s: %d/%d matched, %d errors, %d warnings",
        reference.kind, "passed" if result.passed else "failed",
        result.matched_count, result.reference_count,
        len(result.errors), len(result.warnings),
    )
    return result
