"""One-call validation: extract both sides, compare, wrap engine faults."""
import logging
from typing import Callable

from easykicad.errors import ValidationEngineError

from .comparator import compare
from .generated import extract_generated_footprint, extract_generated_symbol
from .models import ComparisonOptions, Facts, ValidationReport
from .reference import extract_reference_footprint, extract_reference_symbol

logger = logging.getLogger(__name__)


def _validate(
    kind: str,
    name: str,
    reference: Callable[[], Facts],
    generated: Callable[[], Facts],
    options: ComparisonOptions | None,
) -> ValidationReport:
    try:
        result = compare(reference(), generated(), options)
    except ValidationEngineError as e:
        logger.warning("Validation of %s %r could not run: %s", kind, name, e)
        return ValidationReport(kind=kind, name=name, error=str(e))
    return ValidationReport(kind=kind, name=name, result=result)


def validate_footprint(
    reference_svg: str,
    generated_text: str,
    options: ComparisonOptions | None = None,
    name: str = "",
) -> ValidationReport:
    """
    Validate generated footprint text against the reference rendering.

    Mismatches are reported in ``result``; an unparsable input on either
    side is reported in ``error`` instead of raising.
    """
    return _validate(
        "footprint", name,
        lambda: extract_reference_footprint(reference_svg),
        lambda: extract_generated_footprint(generated_text),
        options,
    )


def validate_symbol(
    reference_svg: str,
    generated_text: str,
    options: ComparisonOptions | None = None,
    name: str = "",
) -> ValidationReport:
    """Validate generated symbol text. See :func:`validate_footprint`."""
    return _validate(
        "symbol", name,
        lambda: extract_reference_symbol(reference_svg),
        lambda: extract_generated_symbol(generated_text),
        options,
    )
