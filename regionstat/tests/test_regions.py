import geopandas as gpd
import numpy as np
import pandas as pd
import pytest
import shapely.geometry as sg

import regionstat
from regionstat import AlignmentError, Region, RegionSet


def test_from_geodataframe(region_gdf):
    regions = RegionSet.from_geodataframe(region_gdf)
    assert len(regions) == 2
    assert regions.region_ids == [1, 2]
    assert regions.crs == region_gdf.crs

    west = regions[0]
    assert isinstance(west, Region)
    assert west.name == "West"
    assert west.code == "W"
    assert dict(west.attributes) == {"population": 100}
    assert west.geometry.equals(sg.box(0.0, 0.0, 10.0, 10.0))


def test_from_geodataframe_index_and_named_columns(region_gdf):
    gdf = region_gdf.rename(columns={"name": "NAME_1", "code": "ISO"})
    gdf = gdf.set_index("region_id")
    regions = RegionSet.from_geodataframe(
        gdf, name_column="NAME_1", code_column="ISO"
    )
    assert regions.region_ids == [1, 2]
    assert [region.name for region in regions] == ["West", "East"]
    assert [region.code for region in regions] == ["W", "E"]


def test_from_geodataframe_missing_columns(region_gdf):
    with pytest.raises(ValueError, match="not found"):
        RegionSet.from_geodataframe(region_gdf, id_column="id")
    with pytest.raises(ValueError, match="not found"):
        RegionSet.from_geodataframe(region_gdf, name_column="NAME_1")


def test_duplicate_region_id(region_gdf):
    region_gdf["region_id"] = [1, 1]
    with pytest.raises(ValueError, match="unique"):
        RegionSet.from_geodataframe(region_gdf)


def test_region_is_immutable(regions):
    with pytest.raises(AttributeError):
        regions[0].name = "North"
    with pytest.raises(TypeError):
        regions[0].attributes["population"] = 0


def test_table_and_geometries_stay_aligned(regions):
    table = regions.table
    geometries = regions.geometries
    assert list(table.columns) == ["region_id", "name", "code", "population"]
    assert table["region_id"].tolist() == list(geometries.index)
    assert geometries.crs == regions.crs

    gdf = regions.to_geodataframe()
    assert gdf["name"].tolist() == ["West", "East"]
    assert gdf.geometry.iloc[1].equals(sg.box(10.0, 0.0, 20.0, 10.0))


def test_from_parts(region_table, region_polygons):
    regions = RegionSet.from_parts(region_table, region_polygons)
    assert regions.region_ids == [1, 2, 3]
    assert [region.name for region in regions] == ["North", "Middle", "South"]
    assert regions[2].geometry.equals(region_polygons.loc[3])
    assert regions.crs == region_polygons.crs


def test_from_parts_id_column_in_geodataframe(region_table, region_polygons):
    gdf = gpd.GeoDataFrame(
        {"region_id": [1, 2, 3]},
        geometry=region_polygons.to_numpy(),
        crs=region_polygons.crs,
    )
    regions = RegionSet.from_parts(region_table, gdf)
    assert regions.region_ids == [1, 2, 3]


def test_from_parts_permuted_table(region_table, region_polygons):
    permuted = region_table.iloc[[1, 0, 2]]
    with pytest.raises(AlignmentError, match="same order"):
        RegionSet.from_parts(permuted, region_polygons)


def test_from_parts_permuted_in_lockstep(region_table, region_polygons):
    order = [2, 0, 1]
    regions = RegionSet.from_parts(
        region_table.iloc[order], region_polygons.iloc[order]
    )
    assert regions.region_ids == [3, 1, 2]
    assert regions[0].name == "South"
    assert regions[0].geometry.equals(region_polygons.loc[3])


def test_from_parts_different_length(region_table, region_polygons):
    with pytest.raises(AlignmentError, match="rows"):
        RegionSet.from_parts(region_table.iloc[:2], region_polygons)


def test_join(regions):
    tonnage = pd.DataFrame({"region_id": [2, 1], "tonnage": [7.5, 3.0]})
    joined = regions.join(tonnage)
    assert joined.region_ids == [1, 2]
    assert joined.table["tonnage"].tolist() == [3.0, 7.5]
    # Original is untouched
    assert "tonnage" not in regions.table.columns


def test_join_unmatched_region(regions):
    tonnage = pd.DataFrame({"region_id": [2], "tonnage": [7.5]})
    joined = regions.join(tonnage)
    assert len(joined) == 2
    assert joined[0].attributes["tonnage"] is None
    assert joined[1].attributes["tonnage"] == 7.5


def test_join_duplicate_keys(regions):
    tonnage = pd.DataFrame({"region_id": [1, 1], "tonnage": [1.0, 2.0]})
    with pytest.raises(AlignmentError, match="duplicate"):
        regions.join(tonnage)


def test_join_on_attribute(regions):
    table = pd.DataFrame({"population": [250], "density": [2.5]})
    joined = regions.join(table, on="population")
    assert joined.table["density"].tolist()[1] == 2.5


def test_join_clashing_columns(regions):
    table = pd.DataFrame({"region_id": [1], "population": [0]})
    with pytest.raises(ValueError, match="already present"):
        regions.join(table)


def test_with_geometries(regions):
    shifted = regions.with_geometries(
        [sg.box(0.0, 0.0, 1.0, 1.0), sg.box(1.0, 0.0, 2.0, 1.0)]
    )
    assert shifted.region_ids == regions.region_ids
    assert shifted[0].name == "West"
    assert shifted[1].geometry.area == 1.0

    with pytest.raises(AlignmentError):
        regions.with_geometries([sg.box(0.0, 0.0, 1.0, 1.0)])


def test_describe(regions):
    described = regions.describe()
    assert described["region_id"].tolist() == [1, 2]
    assert described["geom_type"].tolist() == ["Polygon", "Polygon"]
    assert described["is_valid"].all()
    assert np.allclose(described["area"], 100.0)
    assert described["n_vertices"].tolist() == [5, 5]


def test_repr(regions):
    assert repr(regions) == "RegionSet(n=2, crs=EPSG:32631)"


def test_get_crs(regions, region_gdf, like):
    assert regionstat.get_crs(regions) == region_gdf.crs
    assert regionstat.get_crs(like) == region_gdf.crs
    with pytest.raises(TypeError):
        regionstat.get_crs(1.0)
