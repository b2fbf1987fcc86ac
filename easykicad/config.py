"""Configuration constants for easykicad."""

# One EasyEDA canvas unit is 10 mil
EE_TO_MM = 0.254

# KiCad file format
KICAD_FORMAT_VERSION = 20241209
KICAD_GENERATOR = "easykicad"
KICAD_GENERATOR_VERSION = "9.0"

# Library nickname used for generated lookup references (e.g. "EasyKiCad:R_0603")
DEFAULT_LIBRARY_NAME = "EasyKiCad"

# Source pin length when the pin carries no stub path (100 mil)
DEFAULT_PIN_LENGTH = 10.0

# Validation tolerances (mm)
POSITION_TOLERANCE = 0.05
SIZE_TOLERANCE = 0.02
HOLE_TOLERANCE = 0.02

# Footprint layout (mm)
COURTYARD_MARGIN = 0.25
COURTYARD_STROKE_WIDTH = 0.05
FAB_STROKE_WIDTH = 0.1
SILK_STROKE_WIDTH = 0.12
SMD_ROUNDRECT_RATIO = 0.25
# Plated polygon pads without a drill get one this fraction of their smaller side
POLYGON_DRILL_RATIO = 0.6
FOOTPRINT_TEXT_SIZE = 1.0
FOOTPRINT_TEXT_THICKNESS = 0.15

# Symbol layout (mm)
SYMBOL_TEXT_SIZE = 1.27
PIN_TEXT_SIZE = 1.0
PIN_NAME_OFFSET = 0.508
MIN_STROKE_WIDTH = 0.1
PROPERTY_OFFSET = 2.54

# Sampling density for curves that KiCad cannot express natively
ELLIPSE_SEGMENTS = 32
ARC_SEGMENTS_PER_QUADRANT = 4
BEZIER_SEGMENTS = 8
