"""
Reprojection of regions and raster grids to another coordinate reference
system.

Reprojecting polygons may produce invalid geometries, e.g. self-intersecting
rings near the edge of a projection's domain. These are reported, or
repaired on request, but never passed on silently.
"""

from typing import Any, Optional

import numpy as np
import rasterio.crs
import rasterio.transform
import rasterio.warp
import shapely
import xarray as xr
from rasterio.enums import Resampling

from regionstat.crs import get_crs, to_crs
from regionstat.errors import CrsMismatchError, InvalidGeometryError
from regionstat.grid import grid_from_array
from regionstat.logging import logger
from regionstat.regions import RegionSet
from regionstat.util.spatial import transform


def reproject_regions(
    regions: RegionSet, crs: Any, make_valid: bool = False
) -> RegionSet:
    """
    Transform the geometries of all regions to ``crs``.

    Parameters
    ----------
    regions: RegionSet
    crs: anything accepted by ``pyproj.CRS.from_user_input``
    make_valid: bool, optional
        Repair geometries that are invalid after transformation with
        ``shapely.make_valid``, instead of raising. Default is False.

    Returns
    -------
    reprojected: RegionSet

    Raises
    ------
    CrsMismatchError
        If the regions have no CRS to transform from.
    InvalidGeometryError
        If geometries are invalid after transformation, and ``make_valid`` is
        False.
    """
    src_crs = regions.crs
    if src_crs is None:
        raise CrsMismatchError("Cannot reproject regions without a CRS")
    dst_crs = to_crs(crs)

    transformed = regions.geometries.to_crs(dst_crs)
    geometries = transformed.to_numpy()
    invalid = ~shapely.is_valid(geometries)
    if invalid.any():
        invalid_ids = list(transformed.index[invalid])
        if not make_valid:
            raise InvalidGeometryError(
                f"Geometries of regions {invalid_ids} are invalid after "
                f"reprojection to {dst_crs.to_string()}"
            )
        logger.warning(f"Repairing invalid geometries of regions {invalid_ids}")
        geometries = geometries.copy()
        geometries[invalid] = shapely.make_valid(geometries[invalid])

    logger.info(
        f"Reprojected {len(regions)} regions from {src_crs.to_string()} to "
        f"{dst_crs.to_string()}"
    )
    return regions.with_geometries(geometries, dst_crs)


RESAMPLING_METHODS = {
    "nearest": Resampling.nearest,
    "bilinear": Resampling.bilinear,
    "cubic": Resampling.cubic,
    "average": Resampling.average,
    "mode": Resampling.mode,
    "min": Resampling.min,
    "max": Resampling.max,
}


def reproject_grid(
    grid: xr.DataArray,
    crs: Any,
    cellsize: Optional[float] = None,
    resampling: str = "nearest",
) -> xr.DataArray:
    """
    Warp a raster grid to ``crs``.

    Parameters
    ----------
    grid: xr.DataArray
    crs: anything accepted by ``pyproj.CRS.from_user_input``
    cellsize: float, optional
        Cell size of the result. Estimated by GDAL if not given.
    resampling: str, optional
        One of "nearest", "bilinear", "cubic", "average", "mode", "min" or
        "max". Use "nearest" or "mode" for classified rasters.
        Default is "nearest".

    Returns
    -------
    reprojected: xr.DataArray
    """
    try:
        method = RESAMPLING_METHODS[resampling]
    except KeyError:
        raise ValueError(
            f'resampling must be one of {", ".join(RESAMPLING_METHODS)}, '
            f'received: "{resampling}"'
        )
    src_crs = get_crs(grid)
    if src_crs is None:
        raise CrsMismatchError("Cannot reproject a grid without a CRS")
    dst_crs = to_crs(crs)

    src_rio_crs = rasterio.crs.CRS.from_wkt(src_crs.to_wkt())
    dst_rio_crs = rasterio.crs.CRS.from_wkt(dst_crs.to_wkt())

    nrow, ncol = grid.shape
    src_transform = transform(grid)
    xmin, ymin, xmax, ymax = rasterio.transform.array_bounds(nrow, ncol, src_transform)
    kwargs = {}
    if cellsize is not None:
        kwargs["resolution"] = (cellsize, cellsize)
    dst_transform, dst_ncol, dst_nrow = rasterio.warp.calculate_default_transform(
        src_rio_crs, dst_rio_crs, ncol, nrow, xmin, ymin, xmax, ymax, **kwargs
    )

    nodata = grid.attrs.get("nodata")
    source = grid.values
    if nodata is None:
        nodata = np.nan if np.issubdtype(source.dtype, np.floating) else 0
    destination = np.full((dst_nrow, dst_ncol), nodata, dtype=source.dtype)
    rasterio.warp.reproject(
        source=source,
        destination=destination,
        src_transform=src_transform,
        src_crs=src_rio_crs,
        src_nodata=nodata,
        dst_transform=dst_transform,
        dst_crs=dst_rio_crs,
        dst_nodata=nodata,
        resampling=method,
    )

    dst_xmin = dst_transform.c
    dst_ymax = dst_transform.f
    extent = (
        dst_xmin,
        dst_ymax - dst_nrow * abs(dst_transform.e),
        dst_xmin + dst_ncol * dst_transform.a,
        dst_ymax,
    )
    reprojected = grid_from_array(destination, extent, dst_crs, nodata=nodata)
    reprojected.name = grid.name
    logger.info(
        f"Reprojected grid of shape {grid.shape} to shape {reprojected.shape} "
        f"in {dst_crs.to_string()}"
    )
    return reprojected
