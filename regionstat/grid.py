"""
Raster grids.

A raster grid is an ``xarray.DataArray`` with dimensions ``("y", "x")``,
midpoint coordinates, scalar ``dx`` and ``dy`` coordinates, and two
attributes:

* ``crs``: the coordinate reference system, a ``pyproj.CRS``.
* ``nodata``: the value marking missing cells. Floating point grids always
  use NaN as well.
"""

from typing import Any, Optional, Tuple

import numpy as np
import xarray as xr

from regionstat.crs import to_crs
from regionstat.util.spatial import _xycoords, is_divisor, spatial_reference

Extent = Tuple[float, float, float, float]


def round_extent(extent: Extent, cellsize: float) -> Extent:
    """Increases the extent until all sides lie on a coordinate
    divisible by cellsize."""
    xmin, ymin, xmax, ymax = extent
    xmin = np.floor(xmin / cellsize) * cellsize
    ymin = np.floor(ymin / cellsize) * cellsize
    xmax = np.ceil(xmax / cellsize) * cellsize
    ymax = np.ceil(ymax / cellsize) * cellsize
    return xmin, ymin, xmax, ymax


def _check_extent(extent: Extent, cellsize: float) -> None:
    if not cellsize > 0.0:
        raise ValueError(f"cellsize must be positive, received: {cellsize}")
    xmin, ymin, xmax, ymax = extent
    if not (xmax > xmin and ymax > ymin):
        raise ValueError(
            f"extent must be (xmin, ymin, xmax, ymax) with xmax > xmin and "
            f"ymax > ymin, received: {extent}"
        )
    if not (is_divisor(xmax - xmin, cellsize) and is_divisor(ymax - ymin, cellsize)):
        raise ValueError(
            f"extent {extent} is not an integer number of cells of size {cellsize}. "
            "Use round_extent first."
        )


def _coords(extent: Extent, cellsize: float):
    xmin, ymin, xmax, ymax = extent
    return _xycoords((xmin, xmax, ymin, ymax), (cellsize, -cellsize))


def empty_grid(
    extent: Extent,
    cellsize: float,
    crs: Any,
    fill: Any = np.nan,
    dtype: Any = np.float64,
    nodata: Any = None,
) -> xr.DataArray:
    """
    Create a raster grid covering ``extent``.

    Parameters
    ----------
    extent: tuple of floats
        (xmin, ymin, xmax, ymax)
    cellsize: float
        Size of the square cells.
    crs: anything accepted by ``pyproj.CRS.from_user_input``
    fill: scalar, optional
        Initial value of all cells. NaN by default.
    dtype: numpy dtype, optional
    nodata: scalar, optional
        Value marking missing cells. Defaults to NaN for floating point
        grids, and to ``fill`` for integer grids.

    Returns
    -------
    grid: xr.DataArray
    """
    _check_extent(extent, cellsize)
    coords = _coords(extent, cellsize)
    nrow = coords["y"].size
    ncol = coords["x"].size
    if nodata is None:
        nodata = np.nan if np.issubdtype(np.dtype(dtype), np.floating) else fill
    return xr.DataArray(
        data=np.full((nrow, ncol), fill, dtype=dtype),
        coords=coords,
        dims=("y", "x"),
        attrs={"crs": to_crs(crs), "nodata": nodata},
    )


def grid_from_array(
    values: Any, extent: Extent, crs: Any, nodata: Any = None
) -> xr.DataArray:
    """
    Wrap a 2D array, whose first row is the northernmost, into a raster grid
    covering ``extent``.
    """
    values = np.asarray(values)
    if values.ndim != 2:
        raise ValueError(f"values must be 2D, received {values.ndim} dimensions")
    nrow, ncol = values.shape
    xmin, ymin, xmax, ymax = extent
    dx = (xmax - xmin) / ncol
    dy = (ymax - ymin) / nrow
    if not np.isclose(dx, dy):
        raise ValueError(
            f"Cells must be square: extent {extent} and shape {values.shape} "
            f"give dx={dx}, dy={dy}"
        )
    _check_extent(extent, dx)
    if nodata is None and np.issubdtype(values.dtype, np.floating):
        nodata = np.nan
    return xr.DataArray(
        data=values,
        coords=_coords(extent, dx),
        dims=("y", "x"),
        attrs={"crs": to_crs(crs), "nodata": nodata},
    )


def extent(grid: xr.DataArray) -> Extent:
    """(xmin, ymin, xmax, ymax) of a raster grid."""
    _, xmin, xmax, _, ymin, ymax = spatial_reference(grid)
    return xmin, ymin, xmax, ymax


def cellsize(grid: xr.DataArray) -> float:
    dx, _, _, dy, _, _ = spatial_reference(grid)
    if not np.isclose(abs(dx), abs(dy)):
        raise ValueError(f"Cells are not square: dx={dx}, dy={dy}")
    return abs(dx)


def ncell(grid: xr.DataArray) -> int:
    return int(grid.size)


def missing(grid: xr.DataArray, nodata: Optional[Any] = None) -> np.ndarray:
    """
    Boolean array marking no-data cells: NaN, or equal to the ``nodata``
    attribute of the grid.
    """
    if nodata is None:
        nodata = grid.attrs.get("nodata")
    values = grid.values
    if np.issubdtype(values.dtype, np.floating):
        is_missing = np.isnan(values)
    else:
        is_missing = np.zeros(values.shape, dtype=bool)
    if nodata is not None and not _is_nan(nodata):
        is_missing |= values == nodata
    return is_missing


def _is_nan(value: Any) -> bool:
    try:
        return bool(np.isnan(value))
    except TypeError:
        return False
