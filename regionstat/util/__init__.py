"""
Miscellaneous utilities.
"""

from regionstat.util.spatial import (
    coord_reference,
    is_divisor,
    spatial_reference,
    transform,
)
