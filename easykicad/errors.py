"""Exception hierarchy for easykicad."""


class EasyKiCadError(Exception):
    """Base class for all easykicad errors."""


class ConversionError(EasyKiCadError):
    """A document is missing structural data and cannot be converted."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class MissingOriginError(ConversionError):
    """The document header has no usable page origin."""


class NoPinsError(ConversionError):
    """A symbol has no pins."""


class NoPadsError(ConversionError):
    """A footprint that is not template-substituted has no pads."""


class GeometryError(EasyKiCadError):
    """An arc or path cannot be decomposed (degenerate radii, bad syntax)."""


class ValidationEngineError(EasyKiCadError):
    """The validation engine itself failed, as opposed to a geometry mismatch."""


class ReferenceParseError(ValidationEngineError):
    """The reference rendering could not be parsed."""


class GeneratedParseError(ValidationEngineError):
    """The generated KiCad text could not be parsed."""
