from typing import Any, Optional, Union

import geopandas as gpd
import numpy as np
import rasterio.features
import xarray as xr

import regionstat
from regionstat.crs import check_crs
from regionstat.logging import logger
from regionstat.regions import RegionSet

TIE_BREAK_OPTIONS = ("first", "last", "min", "max")


def _burn_order(values: np.ndarray, tie_break: str) -> np.ndarray:
    """
    Order in which shapes are burned. Every shape overwrites the shapes
    burned before it, so the winner of a tie goes last. For "min" and "max",
    shapes without a value are burned first.
    """
    n = values.size
    missing = np.isnan(values)
    match tie_break:
        case "last":
            return np.arange(n)
        case "first":
            return np.arange(n)[::-1]
        case "min":
            return np.argsort(-np.where(missing, np.inf, values), kind="stable")
        case "max":
            return np.argsort(np.where(missing, -np.inf, values), kind="stable")
        case _:
            _check_tie_break(tie_break)


def _check_tie_break(tie_break: str) -> None:
    if tie_break not in TIE_BREAK_OPTIONS:
        raise ValueError(
            f'tie_break must be one of {", ".join(TIE_BREAK_OPTIONS)}, '
            f'received: "{tie_break}"'
        )


def rasterize(
    regions: Union[RegionSet, gpd.GeoDataFrame],
    like: xr.DataArray,
    column: Optional[str] = None,
    fill: Any = np.nan,
    tie_break: str = "last",
    all_touched: bool = False,
    dtype: Any = np.float64,
) -> xr.DataArray:
    """
    Rasterize polygons onto the grid of ``like``.

    Parameters
    ----------
    regions: RegionSet or geopandas.GeoDataFrame
    like: xarray.DataArray
        Example grid. The rasterized result will match the shape, coordinates
        and CRS of this DataArray.
    column: str, optional
        Column (or region attribute) to burn into the raster. If not given,
        1 is burned wherever a polygon is present.
    fill: scalar, optional
        Value of cells not covered by any polygon. NaN by default.
    tie_break: {"last", "first", "min", "max"}, optional
        Which value a cell receives when polygons overlap: that of the last
        or first polygon, or the minimum or maximum value.
    all_touched: bool, optional
        If True, every cell touched by a polygon is burned, not only the cells
        whose center lies within the polygon. Default value is False.
    dtype: numpy dtype, optional
        Default is float64.

    Returns
    -------
    rasterized : xarray.DataArray
        Matches shape and coordinates of ``like``, with ``nodata`` equal to
        ``fill``.
    """
    _check_tie_break(tie_break)
    crs = check_crs(regions, like)

    if isinstance(regions, RegionSet):
        gdf = regions.to_geodataframe()
    else:
        gdf = regions

    if column is None:
        values = np.ones(len(gdf))
    else:
        values = gdf[column].to_numpy()

    order = _burn_order(values.astype(np.float64), tie_break)
    geometries = gdf.geometry.to_numpy()
    shapes = [(geometries[i], values[i]) for i in order if not geometries[i].is_empty]

    if len(shapes) == 0:
        logger.warning("No geometries to rasterize, returning an empty grid")
        raster = np.full(like.shape, fill, dtype=dtype)
    else:
        raster = rasterio.features.rasterize(
            shapes,
            out_shape=like.shape,
            fill=fill,
            transform=regionstat.util.transform(like),
            all_touched=all_touched,
            dtype=dtype,
        )

    return xr.DataArray(
        raster,
        like.coords,
        like.dims,
        name=column,
        attrs={"crs": crs, "nodata": fill},
    )
