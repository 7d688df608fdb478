"""
Vector geoprocessing: region areas and intersections with other polygons.

:func:`intersection_summary` computes the share of every region covered by
another polygon layer (e.g. protected areas) from exact polygon areas. It
produces the same kind of table as :func:`regionstat.zonal_summary`, with
areas instead of cell counts, so the two methods can be compared with
:func:`regionstat.compare`.
"""

import geopandas as gpd
import pandas as pd
import shapely

from regionstat.aggregate import percent
from regionstat.crs import check_crs
from regionstat.logging import logger
from regionstat.regions import RegionSet


def _check_projected(regions: RegionSet) -> None:
    if regions.crs is None or regions.crs.is_geographic:
        raise ValueError(
            "Areas require a projected coordinate reference system, "
            "reproject the regions first"
        )


def area(regions: RegionSet) -> pd.Series:
    """
    Area of every region, indexed by region id, in units of the CRS.
    """
    _check_projected(regions)
    geometries = regions.geometries
    return pd.Series(
        shapely.area(geometries.to_numpy()), index=geometries.index, name="area"
    )


def intersection(
    regions: RegionSet, polygons: gpd.GeoDataFrame, dissolve: bool = True
) -> gpd.GeoDataFrame:
    """
    Intersect the regions with another polygon layer.

    Parameters
    ----------
    regions: RegionSet
    polygons: geopandas.GeoDataFrame
        Must be in the same CRS as the regions.
    dissolve: bool, optional
        Merge all ``polygons`` into one geometry first, so that overlapping
        polygons do not contribute twice to a region. Default is True.

    Returns
    -------
    pieces: geopandas.GeoDataFrame
        The intersections, with a "region_id" column. A region may have
        several pieces.
    """
    crs = check_crs(regions, polygons)
    left = gpd.GeoDataFrame(
        {"region_id": regions.region_ids},
        geometry=regions.geometries.to_numpy(),
        crs=crs,
    )
    right = gpd.GeoDataFrame(geometry=polygons.geometry.to_numpy(), crs=crs)
    if len(right) == 0:
        return left.iloc[:0]
    if dissolve:
        right = right.dissolve()
    return gpd.overlay(left, right, how="intersection", keep_geom_type=True)


def intersection_summary(
    regions: RegionSet, polygons: gpd.GeoDataFrame, dissolve: bool = True
) -> pd.DataFrame:
    """
    Share of every region covered by ``polygons``, from polygon areas.

    Returns
    -------
    summary: pandas.DataFrame
        Sorted by region id, with columns "region_id", "area_classified",
        "area_total" and "percent_classified". The percentage is NaN for
        regions of zero area.
    """
    pieces = intersection(regions, polygons, dissolve=dissolve)
    total = area(regions)
    covered = (
        pd.Series(shapely.area(pieces.geometry.to_numpy()), index=pieces["region_id"])
        .groupby(level=0)
        .sum()
    )
    records = [
        {
            "region_id": region_id,
            "area_classified": float(covered.get(region_id, 0.0)),
            "area_total": float(region_area),
            "percent_classified": percent(covered.get(region_id, 0.0), region_area),
        }
        for region_id, region_area in total.items()
    ]
    logger.info(f"Intersected {len(regions)} regions with {len(polygons)} polygons")
    return (
        pd.DataFrame.from_records(
            records,
            columns=["region_id", "area_classified", "area_total", "percent_classified"],
        )
        .sort_values("region_id", kind="stable")
        .reset_index(drop=True)
    )
