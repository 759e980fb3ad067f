"""Shared spatial constants for simplification and projection.

Source coordinates are WGS84 degrees; page coordinates are millimetres on an
embossing sheet. The conversion between them assumes a small, locally planar
area around a single reference latitude.
"""

# Montreal latitude ~45.5°: 1 degree of longitude ≈ 78,710 m.
# Only valid near that latitude and for extents of a few kilometres.
METRES_PER_DEGREE = 78710.0

# Default Douglas-Peucker tolerance in metres.
DEFAULT_TOLERANCE_M = 2.0

# A closed triangle: 3 distinct vertices + the closing repeat.
MIN_RING_POINTS = 4

# Substitute range (degrees) for a zero-width or zero-height bounding box.
DEGENERATE_RANGE = 0.001

# Page coordinates are rounded to 1 µm for stable, diff-friendly output.
COORD_PRECISION = 3

# A4 landscape, mm.
DEFAULT_PAGE_WIDTH = 297.0
DEFAULT_PAGE_HEIGHT = 210.0
DEFAULT_MARGIN = 10.0

# Distance kept between a margin label and the ends of its strip.
DEFAULT_LABEL_INSET = 2.0
