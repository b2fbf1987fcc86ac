"""Sequential batch validation with ordered progress reporting."""
import logging
from typing import Callable, Iterable, Optional, TypeVar

from .models import ValidationReport

logger = logging.getLogger(__name__)

Case = TypeVar("Case")

ProgressCallback = Callable[[int, int, ValidationReport], None]


def run_batch(
    cases: Iterable[Case],
    validate: Callable[[Case], ValidationReport],
    on_progress: Optional[ProgressCallback] = None,
) -> list[ValidationReport]:
    """
    Validate cases one at a time, in input order.

    Args:
        cases: Anything ``validate`` accepts, e.g. (name, reference, generated) tuples
        validate: Produces one report per case
        on_progress: Called after each case with (1-based index, total, report)

    Returns:
        Reports in the same order as ``cases``
    """
    cases = list(cases)
    total = len(cases)
    reports = []
    for index, case in enumerate(cases, start=1):
        report = validate(case)
        reports.append(report)
        if on_progress is not None:
            on_progress(index, total, report)

    passed = sum(1 for r in reports if r.passed)
    logger.info("Batch validation finished: %d/%d passed", passed, total)
    return reports
