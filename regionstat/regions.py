"""
Regions: the unit of aggregation.

A :class:`Region` owns both its polygon and its attributes, and a
:class:`RegionSet` is an ordered collection of regions with an explicit
coordinate reference system. Because geometry and attributes travel
together, an attribute table cannot drift out of step with the geometries
once the regions are bound.

Binding happens once, either from a single GeoDataFrame
(:meth:`RegionSet.from_geodataframe`), or from a separate attribute table
and polygon collection (:meth:`RegionSet.from_parts`), which are checked to
correspond index-for-index.
"""

import dataclasses
import types
from typing import Any, Iterator, List, Mapping, Optional, Sequence

import geopandas as gpd
import numpy as np
import pandas as pd
import pyproj
import shapely
from shapely.geometry.base import BaseGeometry

from regionstat.crs import to_crs
from regionstat.errors import AlignmentError

RESERVED_COLUMNS = ("region_id", "name", "code")


@dataclasses.dataclass(frozen=True)
class Region:
    region_id: int
    name: Optional[str]
    code: Optional[str]
    geometry: BaseGeometry
    attributes: Mapping[str, Any] = dataclasses.field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "region_id", int(self.region_id))
        object.__setattr__(
            self, "attributes", types.MappingProxyType(dict(self.attributes))
        )


def _ids_of(polygons, id_column: str) -> pd.Index:
    if isinstance(polygons, gpd.GeoDataFrame) and id_column in polygons.columns:
        return pd.Index(polygons[id_column])
    return polygons.index


def _resolve_column(gdf, column: Optional[str], default: str) -> Optional[str]:
    if column is None:
        return default if default in gdf.columns else None
    if column not in gdf.columns:
        raise ValueError(f'Column "{column}" not found in GeoDataFrame')
    return column


def _check_alignment(table_ids: Sequence, polygon_ids: Sequence) -> None:
    table_ids = np.asarray(table_ids)
    polygon_ids = np.asarray(polygon_ids)
    if table_ids.size != polygon_ids.size:
        raise AlignmentError(
            f"Region table has {table_ids.size} rows, but there are "
            f"{polygon_ids.size} polygons"
        )
    mismatch = np.flatnonzero(table_ids != polygon_ids)
    if mismatch.size > 0:
        i = mismatch[0]
        raise AlignmentError(
            f"Region table and polygons are not in the same order: {mismatch.size} "
            f"positions differ, first at position {i}: region_id {table_ids[i]} in "
            f"the table versus {polygon_ids[i]} for the polygon"
        )


class RegionSet:
    """
    Ordered, immutable collection of regions sharing a coordinate reference
    system.

    Parameters
    ----------
    regions: iterable of Region
        Region ids must be unique.
    crs: anything accepted by ``pyproj.CRS.from_user_input``, optional
    """

    def __init__(self, regions, crs=None):
        self._regions = tuple(regions)
        self._crs = to_crs(crs)
        ids = pd.Index(self.region_ids)
        if ids.has_duplicates:
            duplicated = sorted(set(ids[ids.duplicated()]))
            raise ValueError(f"region_id must be unique, duplicates: {duplicated}")

    @classmethod
    def from_geodataframe(
        cls,
        gdf: gpd.GeoDataFrame,
        id_column: str = "region_id",
        name_column: Optional[str] = None,
        code_column: Optional[str] = None,
    ) -> "RegionSet":
        """
        Bind every row of a GeoDataFrame into a Region.

        The region id is read from ``id_column``, or from the index if the
        index carries that name. Name and code are read from ``name_column``
        and ``code_column``, or from columns called "name" and "code" when
        not given. The remaining columns become region attributes; columns
        called "region_id", "name" and "code" are reserved.
        """
        if id_column in gdf.columns:
            ids = gdf[id_column].to_numpy()
        elif gdf.index.name == id_column:
            ids = gdf.index.to_numpy()
        else:
            raise ValueError(
                f'Column "{id_column}" not found in columns or index of GeoDataFrame'
            )

        name_column = _resolve_column(gdf, name_column, "name")
        code_column = _resolve_column(gdf, code_column, "code")

        skip = {id_column, name_column, code_column, gdf.geometry.name}
        skip.update(RESERVED_COLUMNS)
        attribute_columns = [c for c in gdf.columns if c not in skip]
        attributes = gdf[attribute_columns].to_dict("records")
        names = gdf[name_column] if name_column else [None] * len(gdf)
        codes = gdf[code_column] if code_column else [None] * len(gdf)

        regions = [
            Region(region_id, name, code, geometry, attrs)
            for region_id, name, code, geometry, attrs in zip(
                ids, names, codes, gdf.geometry, attributes
            )
        ]
        return cls(regions, gdf.crs)

    @classmethod
    def from_parts(
        cls,
        table: pd.DataFrame,
        polygons,
        id_column: str = "region_id",
        name_column: Optional[str] = None,
        code_column: Optional[str] = None,
        crs=None,
    ) -> "RegionSet":
        """
        Bind a separate region table and polygon collection.

        The polygons must carry the region id, either in ``id_column`` (for a
        GeoDataFrame) or in their index. The region ids of both must be
        identical, position by position.

        Parameters
        ----------
        table: pandas.DataFrame
            Region table with at least ``id_column``.
        polygons: geopandas.GeoSeries or geopandas.GeoDataFrame
        id_column: str
        name_column: str, optional
        code_column: str, optional
        crs: optional
            Defaults to the CRS of ``polygons``.

        Raises
        ------
        AlignmentError
            If the number of rows differs, or the region ids are in a
            different order.
        """
        if id_column not in table.columns:
            raise ValueError(f'Column "{id_column}" not found in region table')
        _check_alignment(table[id_column].to_numpy(), _ids_of(polygons, id_column))

        if crs is None:
            crs = polygons.crs
        gdf = gpd.GeoDataFrame(
            table.reset_index(drop=True),
            geometry=polygons.geometry.values,
            crs=crs,
        )
        return cls.from_geodataframe(gdf, id_column, name_column, code_column)

    @property
    def crs(self) -> Optional[pyproj.CRS]:
        return self._crs

    @property
    def region_ids(self) -> List[int]:
        return [region.region_id for region in self._regions]

    @property
    def geometries(self) -> gpd.GeoSeries:
        return gpd.GeoSeries(
            [region.geometry for region in self._regions],
            index=pd.Index(self.region_ids, name="region_id"),
            crs=self._crs,
        )

    @property
    def table(self) -> pd.DataFrame:
        """Region table: region_id, name, code, and attributes, in region order."""
        records = [
            {
                "region_id": region.region_id,
                "name": region.name,
                "code": region.code,
                **region.attributes,
            }
            for region in self._regions
        ]
        return pd.DataFrame.from_records(records, columns=self._columns())

    def _columns(self) -> List[str]:
        columns = list(RESERVED_COLUMNS)
        for region in self._regions:
            for key in region.attributes:
                if key not in columns:
                    columns.append(key)
        return columns

    def to_geodataframe(self) -> gpd.GeoDataFrame:
        return gpd.GeoDataFrame(
            self.table,
            geometry=[region.geometry for region in self._regions],
            crs=self._crs,
        )

    def join(self, table: pd.DataFrame, on: str = "region_id") -> "RegionSet":
        """
        Left-join tabular data into the regions.

        Region order and count are preserved; regions without a match get
        None for the joined columns.

        Raises
        ------
        AlignmentError
            If ``table`` holds the same key more than once, since a join would
            then duplicate regions.
        """
        if on not in table.columns:
            raise ValueError(f'Column "{on}" not found in table')
        keys = table[on]
        if keys.duplicated().any():
            duplicated = sorted(set(keys[keys.duplicated()]))
            raise AlignmentError(
                f'Cannot join: table holds duplicate values for "{on}": {duplicated}'
            )
        new_columns = [c for c in table.columns if c != on]
        clashes = set(new_columns).intersection(self._columns())
        if clashes:
            raise ValueError(f"Joined columns already present: {sorted(clashes)}")

        lookup = table.set_index(on)[new_columns].to_dict("index")
        unmatched = dict.fromkeys(new_columns)
        joined = [
            dataclasses.replace(
                region,
                attributes={
                    **region.attributes,
                    **lookup.get(self._key(region, on), unmatched),
                },
            )
            for region in self._regions
        ]
        return RegionSet(joined, self._crs)

    @staticmethod
    def _key(region: Region, on: str):
        if on in RESERVED_COLUMNS:
            return getattr(region, on)
        return region.attributes.get(on)

    def with_geometries(self, geometries, crs=None) -> "RegionSet":
        """
        Return a RegionSet with the geometries replaced, position by
        position.
        """
        geometries = list(geometries)
        if len(geometries) != len(self._regions):
            raise AlignmentError(
                f"Expected {len(self._regions)} geometries, received {len(geometries)}"
            )
        if crs is None:
            crs = self._crs
        return RegionSet(
            [
                dataclasses.replace(region, geometry=geometry)
                for region, geometry in zip(self._regions, geometries)
            ],
            crs,
        )

    def describe(self) -> pd.DataFrame:
        """
        Inspection table of the geometries, one row per region.
        """
        geometries = np.array(
            [region.geometry for region in self._regions], dtype=object
        )
        return pd.DataFrame(
            {
                "region_id": self.region_ids,
                "name": [region.name for region in self._regions],
                "geom_type": [geometry.geom_type for geometry in geometries],
                "is_valid": shapely.is_valid(geometries),
                "is_empty": shapely.is_empty(geometries),
                "area": shapely.area(geometries),
                "n_vertices": shapely.get_num_coordinates(geometries),
            }
        )

    def __len__(self) -> int:
        return len(self._regions)

    def __iter__(self) -> Iterator[Region]:
        return iter(self._regions)

    def __getitem__(self, index: int) -> Region:
        return self._regions[index]

    def __repr__(self) -> str:
        crs = self._crs.to_string() if self._crs is not None else None
        return f"RegionSet(n={len(self)}, crs={crs})"
