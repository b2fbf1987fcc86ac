"""S-expression building and serialization for KiCad text formats.

Documents are built as nested lists: the first element of each list is the
bare keyword, ``str`` values are quoted, :class:`Sym` values are emitted bare
and numbers are formatted with at most four decimals.
"""
from typing import Any, Union

SExpr = list


class Sym(str):
    """A bare (unquoted) atom such as ``smd``, ``yes`` or ``F.Cu``."""


def fmt_num(value: float) -> str:
    """Format a number the way KiCad writes it: no trailing zeros, no ``-0``."""
    if isinstance(value, bool):
        raise TypeError("booleans are not s-expression numbers; use Sym('yes')")
    if isinstance(value, int):
        return str(value)
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def quote(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
    )
    return f'"{escaped}"'


def _atom(value: Any) -> str:
    if isinstance(value, Sym):
        return str(value)
    if isinstance(value, str):
        return quote(value)
    if isinstance(value, (int, float)):
        return fmt_num(value)
    raise TypeError(f"unsupported s-expression atom: {value!r}")


def _is_flat(node: SExpr) -> bool:
    return not any(isinstance(child, list) for child in node)


def dumps(node: Union[SExpr, Any], indent: int = 0) -> str:
    """
    Serialize a nested list to KiCad-style text.

    Lists without nested lists print on a single line; otherwise the leading
    atoms stay on the opening line and each nested list gets its own line,
    indented with one tab per level.

    Args:
        node: Nested list whose first element is the keyword
        indent: Starting indentation level

    Returns:
        Serialized text without a trailing newline
    """
    if not isinstance(node, list):
        return _atom(node)
    if not node:
        raise ValueError("empty s-expression list")

    head = [str(node[0])]
    children = node[1:]
    if _is_flat(children):
        return "(" + " ".join(head + [_atom(c) for c in children]) + ")"

    pad = "\t" * indent
    lines = []
    opening = head[:]
    rest_start = 0
    for i, child in enumerate(children):
        if isinstance(child, list):
            rest_start = i
            break
        opening.append(_atom(child))
    lines.append("(" + " ".join(opening))
    for child in children[rest_start:]:
        lines.append(pad + "\t" + dumps(child, indent + 1))
    lines.append(pad + ")")
    return "\n".join(lines)


def yes_no(flag: bool) -> Sym:
    return Sym("yes" if flag else "no")
