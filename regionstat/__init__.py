# exports
from regionstat import logging, prepare, util
from regionstat.aggregate import (
    aggregate,
    compare,
    count_cells,
    percent,
    zonal_summary,
)
from regionstat.crs import check_crs, get_crs
from regionstat.errors import (
    AlignmentError,
    CrsMismatchError,
    DivideByZeroWarning,
    EmptyGeometryError,
    InvalidGeometryError,
    LayerNotFoundError,
    RegionStatError,
    SourceNotFoundError,
)
from regionstat.extract import extract
from regionstat.grid import empty_grid, grid_from_array, round_extent
from regionstat.io import open_raster, read_polygons, read_regions, write_raster
from regionstat.prepare import (
    intersection_summary,
    rasterize,
    reproject_grid,
    reproject_regions,
)
from regionstat.regions import Region, RegionSet

__version__ = "0.1.0"
