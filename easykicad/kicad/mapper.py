"""Footprint template substitution policy.

Only two-pad SMD passives are ever substituted. With two pads the pad order
is unambiguous whatever the source geometry says; with more pads a template
can silently swap pin assignments, so everything else is emitted verbatim.
"""
import logging
import re
from dataclasses import dataclass
from typing import Optional

from easykicad.easyeda.document import FootprintDocument
from easykicad.easyeda.models import ComponentMetadata

from .templates import CHIP_GEOMETRY, TwoPadGeometry, find_template

logger = logging.getLogger(__name__)

_SIZE_CODE_RE = re.compile(
    r"(?<!\d)(" + "|".join(sorted(CHIP_GEOMETRY)) + r")(?!\d)"
)

# Reference designator prefix -> passive class
PASSIVE_PREFIXES = {"R": "R", "C": "C", "L": "L", "FB": "L"}

# Keywords in category / description / name -> passive class
PASSIVE_KEYWORDS = (
    ("resistor", "R"),
    ("capacitor", "C"),
    ("inductor", "L"),
    ("ferrite", "L"),
)


@dataclass(frozen=True)
class MapperDecision:
    use_template: bool
    template_id: Optional[str] = None
    reason: str = ""
    geometry: Optional[TwoPadGeometry] = None


def size_code(package: str) -> Optional[str]:
    """Imperial chip size code embedded in a package name (e.g. "R0603" -> "0603")."""
    match = _SIZE_CODE_RE.search(package or "")
    return match.group(1) if match else None


def passive_class(metadata: ComponentMetadata) -> Optional[str]:
    """Classify a component as resistor, capacitor or inductor, if it is one."""
    prefix = re.sub(r"[^A-Za-z]", "", metadata.prefix).upper()
    if prefix in PASSIVE_PREFIXES:
        return PASSIVE_PREFIXES[prefix]

    # Package names like "R0603" or "C0402_C" carry the class as a leading letter
    package = (metadata.package or "").upper()
    match = re.match(r"([RCL])_?\d{4}", package)
    if match:
        return match.group(1)

    text = " ".join((metadata.category, metadata.description, metadata.name)).lower()
    for keyword, cls in PASSIVE_KEYWORDS:
        if keyword in text:
            return cls
    return None


def decide(
    document: FootprintDocument, metadata: ComponentMetadata | None = None
) -> MapperDecision:
    """
    Decide whether to substitute a curated template for a footprint.

    Args:
        document: Normalized footprint
        metadata: Component metadata, defaulting to the footprint header's

    Returns:
        MapperDecision; ``use_template`` is never true unless there are exactly two pads
    """
    metadata = metadata or document.header.metadata
    pads = document.pads

    if len(pads) != 2:
        decision = MapperDecision(False, reason=f"{len(pads)} pads")
    elif not all(pad.is_smd for pad in pads):
        decision = MapperDecision(False, reason="through-hole pads")
    else:
        code = size_code(metadata.package)
        cls = passive_class(metadata)
        template = find_template(cls, code) if code and cls else None
        if code is None:
            decision = MapperDecision(False, reason=f"no chip size code in {metadata.package!r}")
        elif template is None:
            decision = MapperDecision(False, reason="not a recognized passive")
        else:
            decision = MapperDecision(True, template.template_id, f"{cls} {code} chip", template.geometry)

    logger.debug("Mapper decision for %r: %s", document.name, decision)
    return decision
