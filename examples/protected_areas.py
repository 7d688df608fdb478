"""
Protected area share per region
===============================

This example computes, for every region, which share of its area is
protected. It is done twice: once by counting the cells of a rasterized
protected area map, once from exact polygon intersections. The two are then
compared.

The data are synthetic, so the example runs without downloads.
"""

# %%
# We'll start with the usual imports
import geopandas as gpd
import pandas as pd
import shapely.geometry as sg

import regionstat
from regionstat.logging import LoggerType, LogLevel

regionstat.logging.configure(LoggerType.PYTHON, log_level=LogLevel.INFO)

# %%
# Regions and their attributes usually come from a vector file, read with
# :func:`regionstat.read_regions`. Here we build three provinces of 10 by 10
# kilometers, in UTM zone 31N.

crs = "EPSG:32631"
provinces = gpd.GeoDataFrame(
    {
        "region_id": [1, 2, 3],
        "name": ["Westland", "Midland", "Eastland"],
        "code": ["WL", "ML", "EL"],
    },
    geometry=[
        sg.box(500_000.0, 0.0, 510_000.0, 10_000.0),
        sg.box(510_000.0, 0.0, 520_000.0, 10_000.0),
        sg.box(520_000.0, 0.0, 530_000.0, 10_000.0),
    ],
    crs=crs,
)
regions = regionstat.RegionSet.from_geodataframe(provinces)
regions.describe()

# %%
# Tabular data is joined into the regions by region id. Regions without a
# match keep their place, with None for the joined columns.

surface = pd.DataFrame({"region_id": [1, 2], "surface_water_pct": [4.2, 11.0]})
regions = regions.join(surface)
regions.table

# %%
# Protected areas carry a category. Where they overlap, the lowest (most
# strictly protected) category applies.

protected = gpd.GeoDataFrame(
    {"category": [4, 1]},
    geometry=[
        sg.box(505_000.0, 2_000.0, 518_000.0, 8_000.0),
        sg.box(507_000.0, 0.0, 509_000.0, 10_000.0),
    ],
    crs=crs,
)

# %%
# Rasterize the protected areas on a 250 meter grid covering the regions.

extent = regionstat.round_extent(tuple(provinces.total_bounds), 250.0)
like = regionstat.empty_grid(extent, 250.0, crs)
protected_grid = regionstat.rasterize(
    protected, like, column="category", tie_break="min"
)

# %%
# Count the protected cells per region. The region names and codes are
# attached to the summary, and further tables can be joined as metadata.

population = pd.DataFrame(
    {"region_id": [1, 2, 3], "population": [12_000, 54_000, 8_500]}
)
raster_summary = regionstat.zonal_summary(
    protected_grid, regions, metadata=population
)
raster_summary

# %%
# The same share, computed from polygon areas:

polygon_summary = regionstat.intersection_summary(regions, protected)
polygon_summary

# %%
# Both tables side by side. Differences are caused by the raster resolution.

regionstat.compare(polygon_summary, raster_summary)

# %%
# Regions in a geographic coordinate system must be reprojected before
# combining them with the grid; mixing systems raises an error.

geographic = regionstat.reproject_regions(regions, "EPSG:4326")
try:
    regionstat.zonal_summary(protected_grid, geographic)
except regionstat.CrsMismatchError as e:
    print(e)
