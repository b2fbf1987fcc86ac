"""Immutable lookup tables from EasyEDA ids to KiCad names.

Tables are read-only mappings bundled into :class:`LayerMap`, which the
converters receive through their options.
"""
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

logger = logging.getLogger(__name__)

# EasyEDA numeric layer id -> KiCad layer for graphics
GRAPHIC_LAYERS = MappingProxyType({
    1: "F.Cu",
    2: "B.Cu",
    3: "F.SilkS",
    4: "B.SilkS",
    5: "F.Paste",
    6: "B.Paste",
    7: "F.Mask",
    8: "B.Mask",
    10: "Edge.Cuts",
    12: "Cmts.User",
    13: "F.Fab",
    14: "B.Fab",
    15: "Dwgs.User",
    101: "F.Fab",  # Component polarity marking
})

# Editor helper layers (component shape, lead shape) with no KiCad counterpart
HIDDEN_LAYERS = frozenset({99, 100})

# Layer used for graphics on unknown layer ids
NEUTRAL_LAYER = "F.Fab"

# Layer id of pads that span every copper layer
MULTI_LAYER_ID = 11

# Copper layer id -> KiCad layers of a surface-mount pad
SMD_PAD_LAYERS = MappingProxyType({
    1: ("F.Cu", "F.Paste", "F.Mask"),
    2: ("B.Cu", "B.Paste", "B.Mask"),
    11: ("*.Cu", "*.Paste", "*.Mask"),
})

THT_PAD_LAYERS = ("*.Cu", "*.Mask")

# EasyEDA pad shape -> KiCad pad shape
PAD_SHAPES = MappingProxyType({
    "ELLIPSE": "circle",
    "RECT": "rect",
    "OVAL": "oval",
    "POLYGON": "custom",
})

# EasyEDA electrical type -> KiCad pin type
PIN_TYPES = MappingProxyType({
    "0": "unspecified",
    "1": "input",
    "2": "output",
    "3": "bidirectional",
    "4": "power_in",
    "5": "power_out",
    "6": "open_collector",
    "7": "open_emitter",
    "8": "passive",
    "9": "no_connect",
    "input": "input",
    "output": "output",
    "bi": "bidirectional",
    "bidirectional": "bidirectional",
    "tristate": "tri_state",
    "passive": "passive",
    "power": "power_in",
    "open_collector": "open_collector",
    "open_emitter": "open_emitter",
    "nc": "no_connect",
})

DEFAULT_PIN_TYPE = "unspecified"


@dataclass(frozen=True)
class LayerMap:
    """Layer and pin-type tables handed to the converters."""
    graphic_layers: Mapping[int, str] = field(default_factory=lambda: GRAPHIC_LAYERS)
    hidden_layers: frozenset = HIDDEN_LAYERS
    neutral_layer: str = NEUTRAL_LAYER
    smd_pad_layers: Mapping[int, tuple[str, ...]] = field(default_factory=lambda: SMD_PAD_LAYERS)
    tht_pad_layers: tuple[str, ...] = THT_PAD_LAYERS
    pad_shapes: Mapping[str, str] = field(default_factory=lambda: PAD_SHAPES)
    pin_types: Mapping[str, str] = field(default_factory=lambda: PIN_TYPES)

    def is_hidden(self, layer_id: int) -> bool:
        return layer_id in self.hidden_layers

    def graphic_layer(self, layer_id: int) -> str:
        """KiCad layer for a graphic, falling back to the neutral layer."""
        layer = self.graphic_layers.get(layer_id)
        if layer is None:
            logger.warning("Unknown layer id %s, using %s", layer_id, self.neutral_layer)
            return self.neutral_layer
        return layer

    def pad_layers(self, layer_id: int, smd: bool) -> tuple[str, ...]:
        if not smd:
            return self.tht_pad_layers
        return self.smd_pad_layers.get(layer_id, self.smd_pad_layers[1])

    def pad_shape(self, shape: str) -> str:
        kicad = self.pad_shapes.get(shape.upper())
        if kicad is None:
            logger.warning("Unknown pad shape %r, using rect", shape)
            return "rect"
        return kicad

    def pin_type(self, electrical_type: str) -> str:
        kicad = self.pin_types.get(electrical_type.strip().lower())
        if kicad is None:
            logger.warning("Unknown pin type %r, using %s", electrical_type, DEFAULT_PIN_TYPE)
            return DEFAULT_PIN_TYPE
        return kicad
