"""
Explicit handling of coordinate reference systems.

Every region set and raster grid carries its CRS: a RegionSet and a
GeoDataFrame in their ``crs`` attribute, a raster grid in
``grid.attrs["crs"]``. Operations combining two of them call
:func:`check_crs` first.
"""

from typing import Any, Optional

import pyproj
import xarray as xr

from regionstat.errors import CrsMismatchError


def to_crs(crs: Any) -> Optional[pyproj.CRS]:
    """
    Convert anything that pyproj understands (EPSG code, WKT, PROJ string,
    rasterio CRS) into a ``pyproj.CRS``. None stays None.
    """
    if crs is None:
        return None
    if isinstance(crs, pyproj.CRS):
        return crs
    # rasterio.crs.CRS
    if hasattr(crs, "to_wkt"):
        return pyproj.CRS.from_wkt(crs.to_wkt())
    return pyproj.CRS.from_user_input(crs)


def get_crs(obj: Any) -> Optional[pyproj.CRS]:
    """
    Return the CRS of a RegionSet, GeoDataFrame, GeoSeries or raster grid.
    """
    if isinstance(obj, xr.DataArray):
        return to_crs(obj.attrs.get("crs"))
    if hasattr(obj, "crs"):
        return to_crs(obj.crs)
    raise TypeError(f"Cannot determine the CRS of an object of type {type(obj)}")


def check_crs(a: Any, b: Any) -> pyproj.CRS:
    """
    Check whether ``a`` and ``b`` share a coordinate reference system.

    Raises
    ------
    CrsMismatchError
        If either CRS is undefined, or if they differ.

    Returns
    -------
    crs: pyproj.CRS
        The shared CRS.
    """
    crs_a = get_crs(a)
    crs_b = get_crs(b)
    if crs_a is None or crs_b is None:
        raise CrsMismatchError(
            "Coordinate reference system is undefined for "
            f"{type(a).__name__ if crs_a is None else type(b).__name__}; "
            "assign one before combining data."
        )
    if crs_a != crs_b:
        raise CrsMismatchError(
            f"Coordinate reference systems differ: {crs_a.to_string()} "
            f"versus {crs_b.to_string()}. Reproject one of the inputs first."
        )
    return crs_a
