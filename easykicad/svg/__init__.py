# PNG rendering lives in .render and needs the cairo system library
from .generator import FootprintSVG, SymbolSVG

__all__ = ["FootprintSVG", "SymbolSVG"]
