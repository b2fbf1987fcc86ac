"""Short display values for passive components.

Distributor descriptions bury the value among ratings a schematic does not
need: ``"16k Ohm ±1% 0.1W"`` shows as ``16k``, ``"100nF 50V X7R"`` as
``100n/50V`` and ``"10uH 2A"`` as ``10uH/2A``.
"""
import re
from typing import Optional

from easykicad.easyeda.models import ComponentMetadata

from .mapper import passive_class

_NUMBER = r"(?<![\d.])(\d+(?:\.\d+)?)"
_END = r"(?![A-Za-z])"

# "4R7", "0R1", "4k7": the multiplier stands in for the decimal point
_RKM_RE = re.compile(r"(?<![\d.])(\d+)([rRkKmMG])(\d+)" + _END)
_RESISTOR_RE = re.compile(
    _NUMBER + r"\s*"
    r"(?:([kKmMG])(?![A-Za-z])|([kKmMG]?)\s*(?:[Oo][Hh][Mm][Ss]?|Ω|R)(?![A-Za-z]))"
)
_CAPACITOR_RE = re.compile(_NUMBER + r"\s*([pnuμµmM]?)[Ff]" + _END)
_INDUCTOR_RE = re.compile(_NUMBER + r"\s*([pnuμµmM]?)[Hh]" + _END)
_VOLTAGE_RE = re.compile(_NUMBER + r"\s*[Vv]" + _END)
_CURRENT_RE = re.compile(_NUMBER + r"\s*(m?)[Aa]" + _END)

_MULTIPLIERS = {"r": "", "R": "", "K": "k", "μ": "u", "µ": "u"}


def _multiplier(symbol: str) -> str:
    return _MULTIPLIERS.get(symbol, symbol)


def _resistor(text: str) -> Optional[str]:
    match = _RKM_RE.search(text)
    if match:
        whole, symbol, fraction = match.groups()
        return f"{whole}.{fraction}{_multiplier(symbol)}"
    match = _RESISTOR_RE.search(text)
    if match:
        return match.group(1) + _multiplier(match.group(2) or match.group(3) or "")
    return None


def _capacitor(text: str) -> Optional[str]:
    match = _CAPACITOR_RE.search(text)
    if not match:
        return None
    value = match.group(1) + (_multiplier(match.group(2)) or "F")
    voltage = _VOLTAGE_RE.search(text, match.end())
    return f"{value}/{voltage.group(1)}V" if voltage else value


def _inductor(text: str) -> Optional[str]:
    match = _INDUCTOR_RE.search(text)
    if not match:
        return None
    value = f"{match.group(1)}{_multiplier(match.group(2))}H"
    current = _CURRENT_RE.search(text, match.end())
    return f"{value}/{current.group(1)}{current.group(2)}A" if current else value


_NORMALIZERS = {"R": _resistor, "C": _capacitor, "L": _inductor}


def normalize_value(text: str, cls: Optional[str]) -> Optional[str]:
    """
    Pull the display value of a passive out of free text.

    Args:
        text: Component name or description
        cls: Passive class, "R", "C" or "L"

    Returns:
        The short value, or None when the text holds no value of that class
    """
    normalizer = _NORMALIZERS.get(cls or "")
    if normalizer is None or not text:
        return None
    return normalizer(text.strip())


def display_value(metadata: ComponentMetadata, cls: Optional[str] = None) -> str:
    """Value property text: the normalized passive value, else the component name."""
    cls = cls or passive_class(metadata)
    if cls is not None:
        for text in (metadata.description, metadata.name):
            value = normalize_value(text, cls)
            if value:
                return value
    return metadata.name
