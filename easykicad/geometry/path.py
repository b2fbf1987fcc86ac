"""SVG path flattening into polylines."""
import logging
import math
import re

import numpy as np

from easykicad.config import BEZIER_SEGMENTS
from easykicad.errors import GeometryError

from .arc import ArcEndpoints, arc_center, interpolate_arc

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"[MmLlHhVvCcSsQqTtAaZz]|-?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

# Number of parameters consumed per repetition of each command
_ARITY = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "S": 4, "Q": 4, "T": 2, "A": 7, "Z": 0}

Point = tuple[float, float]


def _bezier(control: list[Point], segments: int) -> list[Point]:
    """Sample a quadratic or cubic Bezier, excluding its start point."""
    t = np.linspace(0.0, 1.0, segments + 1)[1:, None]
    p = np.asarray(control, dtype=float)
    if len(control) == 3:
        curve = (1 - t) ** 2 * p[0] + 2 * (1 - t) * t * p[1] + t ** 2 * p[2]
    else:
        curve = (
            (1 - t) ** 3 * p[0] + 3 * (1 - t) ** 2 * t * p[1]
            + 3 * (1 - t) * t ** 2 * p[2] + t ** 3 * p[3]
        )
    return [(float(x), float(y)) for x, y in curve]


def _tokenize(d: str) -> list[tuple[str, list[float]]]:
    """Split path data into (command, params) groups, one per repetition."""
    tokens = _TOKEN_RE.findall(d or "")
    if not tokens:
        raise GeometryError("empty path")
    groups: list[tuple[str, list[float]]] = []
    i = 0
    while i < len(tokens):
        command = tokens[i]
        if not command.isalpha():
            raise GeometryError(f"expected a command at token {i} in {d!r}")
        i += 1
        arity = _ARITY[command.upper()]
        if arity == 0:
            groups.append((command, []))
            continue
        first = True
        while first or (i < len(tokens) and not tokens[i].isalpha()):
            params = tokens[i:i + arity]
            if len(params) < arity or any(p.isalpha() for p in params):
                raise GeometryError(f"truncated {command} command in {d!r}")
            values = [float(p) for p in params]
            if not all(map(math.isfinite, values)):
                raise GeometryError(f"non-finite {command} parameter in {d!r}")
            groups.append((command, values))
            i += arity
            first = False
            # Extra coordinate pairs after a moveto are implicit linetos
            if command in "Mm":
                command = "L" if command == "M" else "l"
    return groups


def flatten_path(d: str) -> list[list[Point]]:
    """
    Flatten SVG path data to polylines.

    Args:
        d: SVG path data (absolute or relative commands)

    Returns:
        One point list per subpath. Closed subpaths repeat their first point.

    Raises:
        GeometryError: The path data cannot be parsed
    """
    subpaths: list[list[Point]] = []
    current: list[Point] = []
    x = y = 0.0
    start = (0.0, 0.0)
    last_control: Point | None = None
    last_command = ""

    for command, params in _tokenize(d):
        upper = command.upper()
        relative = command.islower()
        ox, oy = (x, y) if relative else (0.0, 0.0)

        if upper == "M":
            if len(current) > 1:
                subpaths.append(current)
            x, y = ox + params[0], oy + params[1]
            start = (x, y)
            current = [start]
        elif upper == "Z":
            if current and current[-1] != start:
                current.append(start)
            if len(current) > 1:
                subpaths.append(current)
            current = [start]
            x, y = start
        elif upper == "L":
            x, y = ox + params[0], oy + params[1]
            current.append((x, y))
        elif upper == "H":
            x = ox + params[0]
            current.append((x, y))
        elif upper == "V":
            y = oy + params[0]
            current.append((x, y))
        elif upper in ("C", "S"):
            if upper == "C":
                c1 = (ox + params[0], oy + params[1])
                rest = params[2:]
            else:
                c1 = (x, y)
                if last_control is not None and last_command in ("C", "S"):
                    c1 = (2 * x - last_control[0], 2 * y - last_control[1])
                rest = params
            c2 = (ox + rest[0], oy + rest[1])
            end = (ox + rest[2], oy + rest[3])
            current.extend(_bezier([(x, y), c1, c2, end], BEZIER_SEGMENTS))
            last_control = c2
            x, y = end
        elif upper in ("Q", "T"):
            if upper == "Q":
                c1 = (ox + params[0], oy + params[1])
                end = (ox + params[2], oy + params[3])
            else:
                c1 = (x, y)
                if last_control is not None and last_command in ("Q", "T"):
                    c1 = (2 * x - last_control[0], 2 * y - last_control[1])
                end = (ox + params[0], oy + params[1])
            current.extend(_bezier([(x, y), c1, end], BEZIER_SEGMENTS))
            last_control = c1
            x, y = end
        elif upper == "A":
            end = (ox + params[5], oy + params[6])
            endpoints = ArcEndpoints(
                x, y, params[0], params[1], params[2],
                params[3] != 0, params[4] != 0, end[0], end[1],
            )
            try:
                current.extend(interpolate_arc(arc_center(endpoints))[1:])
            except GeometryError:
                # Degenerate arcs collapse to a straight segment per the SVG rules
                if end != (x, y):
                    current.append(end)
            x, y = end

        if upper not in ("C", "S", "Q", "T"):
            last_control = None
        last_command = upper

    if len(current) > 1:
        subpaths.append(current)
    for subpath in subpaths:
        if not all(math.isfinite(x) and math.isfinite(y) for x, y in subpath):
            raise GeometryError(f"path overflows: {d!r}")
    return subpaths


def path_points(d: str) -> list[Point]:
    """All flattened points of a path, or an empty list if unparsable."""
    try:
        return [p for subpath in flatten_path(d) for p in subpath]
    except GeometryError as e:
        logger.debug("Ignoring path for bounds: %s", e)
        return []
