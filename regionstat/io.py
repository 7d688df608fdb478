"""
Reading vector and raster data.

Vector data is read with geopandas, raster data with `rasterio
<https://rasterio.readthedocs.io/en/stable/>`_. Missing files and layers are
reported with :class:`regionstat.errors.SourceNotFoundError` and
:class:`regionstat.errors.LayerNotFoundError`; other errors of the
underlying libraries (e.g. a corrupt file) propagate unchanged.
"""

import pathlib
from typing import Optional, Union

import geopandas as gpd
import numpy as np
import rasterio
import xarray as xr

from regionstat.crs import to_crs
from regionstat.errors import LayerNotFoundError, SourceNotFoundError
from regionstat.grid import grid_from_array
from regionstat.logging import logger
from regionstat.regions import RegionSet
from regionstat.util.spatial import transform

PathLike = Union[str, pathlib.Path]

EXTENSION_GDAL_DRIVER_CODE_MAP = {
    "asc": "AAIGrid",
    "gpkg": "GPKG",
    "img": "HFA",
    "nc": "netCDF",
    "tif": "GTiff",
    "tiff": "GTiff",
    "vrt": "VRT",
}


def _check_source(path: PathLike) -> pathlib.Path:
    path = pathlib.Path(path)
    if not path.exists():
        raise SourceNotFoundError(f"No such data source: {path}")
    return path


def _get_driver(path: pathlib.Path) -> str:
    ext = path.suffix.lower()[1:]  # skip the period
    try:
        return EXTENSION_GDAL_DRIVER_CODE_MAP[ext]
    except KeyError:
        raise ValueError(
            f'Unknown extension "{ext}", available extensions: '
            f'{", ".join(EXTENSION_GDAL_DRIVER_CODE_MAP.keys())}'
        )


def read_polygons(path: PathLike, layer: Optional[str] = None) -> gpd.GeoDataFrame:
    """
    Read a layer of a vector data source into a GeoDataFrame.

    Parameters
    ----------
    path: str or pathlib.Path
        Any OGR supported vector source, e.g. a shapefile or geopackage.
    layer: str, optional
        Layer name. The first layer is read if not given.

    Raises
    ------
    SourceNotFoundError
    LayerNotFoundError
    """
    path = _check_source(path)
    if layer is not None:
        available = list(gpd.list_layers(path)["name"])
        if layer not in available:
            raise LayerNotFoundError(
                f'Layer "{layer}" not found in {path}, available layers: '
                f'{", ".join(available)}'
            )
    gdf = gpd.read_file(path, layer=layer)
    logger.info(f"Read {len(gdf)} features from {path}")
    return gdf


def read_regions(
    path: PathLike,
    layer: Optional[str] = None,
    id_column: str = "region_id",
    name_column: Optional[str] = None,
    code_column: Optional[str] = None,
) -> RegionSet:
    """
    Read regions from a vector data source.

    Each feature becomes a Region, with its geometry and attributes bound
    together. See :meth:`regionstat.RegionSet.from_geodataframe` for the
    column arguments.

    Raises
    ------
    SourceNotFoundError
    LayerNotFoundError
    """
    gdf = read_polygons(path, layer)
    if gdf.crs is None:
        logger.warning(f"{path} does not define a coordinate reference system")
    return RegionSet.from_geodataframe(gdf, id_column, name_column, code_column)


def _limitations(riods, path):
    if not riods.transform.is_rectilinear:
        raise NotImplementedError(f"Cannot open non-rectilinear grid: {path}")
    if not np.isclose(abs(riods.transform.a), abs(riods.transform.e)):
        raise NotImplementedError(f"Cannot open grid with non-square cells: {path}")


def open_raster(path: PathLike, band: int = 1) -> xr.DataArray:
    """
    Read a single band of a GDAL supported raster file into a raster grid.

    For floating point rasters, nodata values are replaced by NaN.

    Parameters
    ----------
    path: str or pathlib.Path
    band: int, optional
        One-based band number. Defaults to 1.

    Returns
    -------
    grid: xr.DataArray
    """
    path = _check_source(path)
    with rasterio.open(path, "r") as riods:
        _limitations(riods, path)
        values = riods.read(band)
        nodata = riods.nodata
        crs = to_crs(riods.crs)
        xmin, ymin, xmax, ymax = riods.bounds

    if np.issubdtype(values.dtype, np.floating):
        if nodata is not None and not np.isnan(nodata):
            values = np.where(values == nodata, np.nan, values)
        nodata = np.nan

    grid = grid_from_array(values, (xmin, ymin, xmax, ymax), crs, nodata=nodata)
    grid.name = path.stem
    logger.info(f"Read raster of shape {values.shape} from {path}")
    return grid


def write_raster(path: PathLike, grid: xr.DataArray, driver: Optional[str] = None):
    """
    Write a raster grid to a GDAL supported raster file.

    Parameters
    ----------
    path: str or pathlib.Path
    grid: xr.DataArray
    driver: str, optional
        GDAL driver name. Inferred from the file extension if not given.
    """
    path = pathlib.Path(path)
    if driver is None:
        driver = _get_driver(path)
    if grid.dims != ("y", "x"):
        raise ValueError(f'Dimensions must be ("y", "x"), received: {grid.dims}')

    nodata = grid.attrs.get("nodata")
    crs = grid.attrs.get("crs")
    nrow, ncol = grid.shape
    profile = {
        "driver": driver,
        "height": nrow,
        "width": ncol,
        "count": 1,
        "dtype": str(grid.dtype),
        "crs": crs.to_wkt() if crs is not None else None,
        "transform": transform(grid),
        "nodata": nodata,
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    with rasterio.Env():
        with rasterio.open(path, "w", **profile) as ds:
            ds.write(grid.values, 1)
    logger.info(f"Wrote raster of shape {grid.shape} to {path}")
