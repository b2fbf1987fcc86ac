"""SVG styling constants for rendered footprints and symbols."""

# Layer colors (KiCad default style)
LAYER_COLORS = {
    "F.Cu": "#C83232",
    "B.Cu": "#3232C8",
    "Edge.Cuts": "#C8C832",
    "F.SilkS": "#F0F0F0",
    "B.SilkS": "#F0F0F0",
    "F.Fab": "#AFAFAF",
    "B.Fab": "#AFAFAF",
    "F.CrtYd": "#FF26E2",
    "B.CrtYd": "#FF26E2",
    "F.Paste": "#B4A0A0",
    "F.Mask": "#D864FF",
    "Cmts.User": "#5994DC",
    "Dwgs.User": "#C2C2C2",
}

BACKGROUND_COLOR = "#1a1a1a"

# Pads spanning all copper layers
THT_PAD_COLOR = "#C8A832"

# Footprint layer render order (back to front)
LAYER_ORDER = [
    "B.CrtYd", "B.Fab", "B.SilkS", "B.Cu",
    "Edge.Cuts", "Dwgs.User", "Cmts.User",
    "F.Cu", "F.SilkS", "F.Fab", "F.CrtYd",
]

# Symbol colors (KiCad schematic default style)
SYMBOL_BACKGROUND = "#F5F4EF"
SYMBOL_BODY_COLOR = "#840000"
PIN_COLOR = "#840000"
PIN_TEXT_COLOR = "#006464"

PAD_OPACITY = 0.9
GRAPHICS_OPACITY = 0.8

EDGE_CUTS_STROKE_WIDTH = 0.15
DEFAULT_STROKE_WIDTH = 0.12
PAD_LABEL_COLOR = "#FFFFFF"
