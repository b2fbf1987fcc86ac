"""Field coercion helpers for the EasyEDA wire grammar.

Every helper here is total: malformed input degrades to a default instead of
raising, so one bad field never costs the whole record.
"""
import math
import re

_NUMBER_RE = re.compile(r"-?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def field(fields: list[str], index: int) -> str:
    """Return ``fields[index]`` or an empty string when the record is short."""
    if index < len(fields):
        return fields[index]
    return ""


def parse_bool(value: str | None) -> bool:
    """Empty, ``"0"`` and ``"N"`` are false, anything else is true."""
    if value is None:
        return False
    value = value.strip()
    return value not in ("", "0", "N", "n")


def safe_float(value: str | None, default: float = 0.0) -> float:
    """Parse a float, falling back to ``default`` on empty or bad input."""
    if value is None:
        return default
    value = value.strip()
    if not value:
        return default
    try:
        result = float(value)
    except ValueError:
        # Tolerate unit suffixes such as "7pt"
        match = _NUMBER_RE.match(value)
        if not match:
            return default
        result = float(match.group(0))
    if math.isnan(result) or math.isinf(result):
        return default
    return result


def safe_int(value: str | None, default: int = 0) -> int:
    """Parse an int, accepting float syntax ("1.0"), with a default."""
    result = safe_float(value, float("nan"))
    if math.isnan(result):
        return default
    return int(result)


def parse_points(value: str | None) -> tuple[tuple[float, float], ...]:
    """Parse a space/comma separated ``"x1 y1 x2 y2 ..."`` list into pairs.

    A trailing odd coordinate and pairs that overflow to infinity are ignored.
    """
    if not value:
        return ()
    numbers = [float(n) for n in _NUMBER_RE.findall(value)]
    pairs = ((numbers[i], numbers[i + 1]) for i in range(0, len(numbers) - 1, 2))
    return tuple(p for p in pairs if math.isfinite(p[0]) and math.isfinite(p[1]))
