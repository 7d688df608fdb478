from unittest.mock import patch

import dask
import numpy as np
import pyproj
import pytest
import shapely.geometry as sg

import regionstat
from regionstat import CrsMismatchError, EmptyGeometryError, Region, RegionSet

CRS = "EPSG:32631"


def region_set(*geometries):
    return RegionSet(
        [Region(i + 1, None, None, geometry) for i, geometry in enumerate(geometries)],
        crs=CRS,
    )


def test_extract(four_cell_grid):
    regions = region_set(sg.box(0.0, 0.0, 2.0, 2.0), sg.box(0.0, 0.0, 1.0, 2.0))
    extraction = regionstat.extract(four_cell_grid, regions)
    assert list(extraction.keys()) == [1, 2]
    np.testing.assert_array_equal(extraction[1], [5.0, np.nan, 5.0, np.nan])
    np.testing.assert_array_equal(extraction[2], [5.0, 5.0])


def test_extract_region_order(four_cell_grid):
    regions = RegionSet(
        [
            Region(9, None, None, sg.box(0.0, 0.0, 2.0, 2.0)),
            Region(3, None, None, sg.box(1.0, 0.0, 2.0, 2.0)),
        ],
        crs=CRS,
    )
    extraction = regionstat.extract(four_cell_grid, regions)
    assert list(extraction.keys()) == [9, 3]
    assert np.isnan(extraction[3]).all()


def test_extract_parallel(like, regions):
    grid = like.copy()
    grid.values[:, :7] = 1.0
    serial = regionstat.extract(grid, regions)
    parallel = regionstat.extract(grid, regions, parallel=True)
    assert list(serial.keys()) == list(parallel.keys()) == regions.region_ids
    for region_id in serial:
        np.testing.assert_array_equal(serial[region_id], parallel[region_id])


def test_extract_parallel_shares_raster(like, regions):
    with patch("regionstat.extract.dask.delayed", wraps=dask.delayed) as delayed:
        regionstat.extract(like, regions, parallel=True)
    wrapped_arrays = [
        c for c in delayed.call_args_list if isinstance(c.args[0], np.ndarray)
    ]
    assert len(wrapped_arrays) == 1


def test_extract_nodata_is_nan():
    values = np.array([[1, -1], [2, -1]], dtype=np.int32)
    grid = regionstat.grid_from_array(values, (0.0, 0.0, 2.0, 2.0), CRS, nodata=-1)
    extraction = regionstat.extract(grid, region_set(sg.box(0.0, 0.0, 2.0, 2.0)))
    assert extraction[1].dtype == np.float64
    np.testing.assert_array_equal(extraction[1], [1.0, np.nan, 2.0, np.nan])


def test_extract_outside_grid(four_cell_grid):
    regions = region_set(sg.box(100.0, 100.0, 101.0, 101.0))
    extraction = regionstat.extract(four_cell_grid, regions)
    assert extraction[1].size == 0


def test_extract_all_touched(four_cell_grid):
    regions = region_set(sg.box(0.1, 0.1, 0.4, 1.9))
    assert regionstat.extract(four_cell_grid, regions)[1].size == 0
    touched = regionstat.extract(four_cell_grid, regions, all_touched=True)
    np.testing.assert_array_equal(touched[1], [5.0, 5.0])


def test_extract_overlapping_regions_count_twice():
    grid = regionstat.grid_from_array(np.array([[5.0]]), (0.0, 0.0, 1.0, 1.0), CRS)
    regions = region_set(sg.box(-0.5, -0.5, 1.0, 1.0), sg.box(0.0, 0.0, 1.5, 1.5))
    extraction = regionstat.extract(grid, regions)
    np.testing.assert_array_equal(extraction[1], [5.0])
    np.testing.assert_array_equal(extraction[2], [5.0])


def test_extract_crs_mismatch(four_cell_grid, regions):
    four_cell_grid.attrs["crs"] = pyproj.CRS.from_epsg(28992)
    with pytest.raises(CrsMismatchError):
        regionstat.extract(four_cell_grid, regions)


@pytest.mark.parametrize(
    "geometry",
    [
        sg.Polygon(),
        sg.Polygon([(0.0, 0.0), (1.0, 1.0), (2.0, 2.0)]),
    ],
)
def test_extract_empty_geometry(four_cell_grid, geometry):
    regions = region_set(sg.box(0.0, 0.0, 1.0, 1.0), geometry)
    with pytest.raises(EmptyGeometryError, match=r"\[2\]"):
        regionstat.extract(four_cell_grid, regions)


def test_extract_dims(four_cell_grid, regions):
    with pytest.raises(ValueError, match="Dimensions"):
        regionstat.extract(four_cell_grid.transpose(), regions)
