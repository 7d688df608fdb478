"""
Prepare data for aggregation.

Functions to bring vector and raster data into the same coordinate
reference system and onto the same grid: :func:`regionstat.prepare.rasterize`
to burn polygons into a grid, :func:`regionstat.prepare.reproject_regions`
and :func:`regionstat.prepare.reproject_grid` to change coordinate systems,
and the vector overlay functions to compute areas and intersections.
"""

from regionstat.prepare.overlay import area, intersection, intersection_summary
from regionstat.prepare.rasterize import rasterize
from regionstat.prepare.reproject import reproject_grid, reproject_regions
