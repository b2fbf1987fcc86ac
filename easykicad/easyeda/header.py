"""Document header parsing: page origin and component metadata."""
import logging
from types import MappingProxyType
from typing import Any, Mapping

from .fields import safe_float
from .models import ComponentMetadata, Header

logger = logging.getLogger(__name__)

# Manufacturer attributes in c_para carry this marker prefix
BOM_MARKER = "BOM_"


def _para_map(c_para: Any) -> dict[str, str]:
    """Normalize ``c_para`` into a dict.

    The API delivers it either as a JSON object or as the editor's
    backtick-delimited ``key`value`key`value`` string.
    """
    if isinstance(c_para, Mapping):
        return {str(k): "" if v is None else str(v) for k, v in c_para.items()}
    if isinstance(c_para, str) and c_para:
        parts = c_para.split("`")
        return {parts[i]: parts[i + 1] for i in range(0, len(parts) - 1, 2)}
    return {}


def _origin(head: Mapping) -> tuple[float, float] | None:
    x, y = head.get("x"), head.get("y")
    if x is None or y is None:
        return None
    nan = float("nan")
    ox, oy = safe_float(str(x), nan), safe_float(str(y), nan)
    if ox != ox or oy != oy:
        return None
    return ox, oy


def parse_header(head: Mapping | None, **extra: str) -> Header:
    """
    Parse a document header.

    Args:
        head: The ``head`` object of a symbol or footprint sub-document
        **extra: Metadata known from outside the document (lcsc_id,
            description, category, datasheet) overriding header values

    Returns:
        Header whose origin is None when missing or unparsable
    """
    head = head or {}
    para = _para_map(head.get("c_para"))

    attributes: dict[str, str] = {}
    for key, value in para.items():
        if key.startswith(BOM_MARKER) and value:
            attributes[key[len(BOM_MARKER):]] = value

    manufacturer = attributes.pop("Manufacturer", "")
    manufacturer_part = attributes.pop("Manufacturer Part", "")
    lcsc_id = attributes.pop("Supplier Part", "")

    metadata = ComponentMetadata(
        name=para.get("name", ""),
        prefix=para.get("pre", "").rstrip("?"),
        package=para.get("package", ""),
        manufacturer=manufacturer,
        manufacturer_part=manufacturer_part,
        lcsc_id=extra.get("lcsc_id") or lcsc_id,
        datasheet=extra.get("datasheet") or para.get("link", ""),
        description=extra.get("description", ""),
        category=extra.get("category", ""),
        attributes=MappingProxyType(attributes),
    )

    origin = _origin(head)
    if origin is None:
        logger.debug("Header for %r has no usable origin", metadata.name)
    return Header(origin=origin, metadata=metadata)
