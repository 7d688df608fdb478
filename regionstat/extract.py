"""
Extraction of raster cell values per region.

A cell belongs to a region when its center lies within the region's polygon,
or, with ``all_touched=True``, when the polygon touches the cell at all.
Regions may overlap; a cell shared by several regions is listed for every
one of them.
"""

from typing import Dict

import affine
import dask
import numpy as np
import rasterio.features
import shapely
import xarray as xr
from shapely.geometry.base import BaseGeometry

from regionstat.crs import check_crs
from regionstat.errors import EmptyGeometryError
from regionstat.grid import missing
from regionstat.logging import logger
from regionstat.regions import RegionSet
from regionstat.util.spatial import transform

ExtractionResult = Dict[int, np.ndarray]


def _check_geometries(regions: RegionSet) -> None:
    geometries = regions.geometries.to_numpy()
    degenerate = shapely.is_empty(geometries) | (shapely.area(geometries) == 0.0)
    if degenerate.any():
        region_ids = np.asarray(regions.region_ids)[degenerate].tolist()
        raise EmptyGeometryError(
            f"Regions {region_ids} have an empty polygon, or a polygon of zero area"
        )


def _cell_values(
    geometry: BaseGeometry,
    values: np.ndarray,
    affine_transform: affine.Affine,
    all_touched: bool,
) -> np.ndarray:
    """
    Values of the cells within ``geometry``, in row-major order.
    """
    inside = rasterio.features.geometry_mask(
        [geometry],
        out_shape=values.shape,
        transform=affine_transform,
        all_touched=all_touched,
        invert=True,
    )
    return values[inside]


def extract(
    grid: xr.DataArray,
    regions: RegionSet,
    all_touched: bool = False,
    parallel: bool = False,
) -> ExtractionResult:
    """
    Extract the raster cell values within every region.

    Parameters
    ----------
    grid: xarray.DataArray with dims ("y", "x")
        Raster grid, with ``crs`` (and optionally ``nodata``) attributes.
    regions: RegionSet
        Must be in the same CRS as ``grid``.
    all_touched: bool, optional
        If True, include every cell touched by a polygon, rather than only
        the cells whose center lies within it. Default value is False.
    parallel: bool, optional
        Compute the regions in parallel with dask. Default value is False.

    Returns
    -------
    extraction: dict of int to numpy.ndarray
        For every region, in region order, the float values of the cells
        within it. No-data cells are NaN. Regions outside the grid get an
        empty array.

    Raises
    ------
    CrsMismatchError
    EmptyGeometryError
    """
    check_crs(regions, grid)
    if grid.dims != ("y", "x"):
        raise ValueError(f'Dimensions must be ("y", "x"), received: {grid.dims}')
    _check_geometries(regions)

    values = grid.values.astype(np.float64)
    values[missing(grid)] = np.nan
    affine_transform = transform(grid)

    if parallel:
        # One graph node for the raster, shared by all regions
        delayed_values = dask.delayed(values)
        collection = [
            dask.delayed(_cell_values)(
                region.geometry, delayed_values, affine_transform, all_touched
            )
            for region in regions
        ]
        arrays = dask.compute(collection)[0]
    else:
        arrays = [
            _cell_values(region.geometry, values, affine_transform, all_touched)
            for region in regions
        ]

    extraction = dict(zip(regions.region_ids, arrays))
    ncells = sum(array.size for array in arrays)
    logger.info(f"Extracted {ncells} cell values for {len(regions)} regions")
    return extraction
