"""EasyEDA component geometry to KiCad symbol and footprint conversion."""
from .errors import (
    ConversionError, EasyKiCadError, GeometryError, MissingOriginError,
    NoPadsError, NoPinsError, ValidationEngineError,
)
from .pipeline import ComponentConversion, convert_component

__version__ = "0.1.0"

__all__ = [
    "ConversionError", "EasyKiCadError", "GeometryError", "MissingOriginError",
    "NoPadsError", "NoPinsError", "ValidationEngineError",
    "ComponentConversion", "convert_component",
]
