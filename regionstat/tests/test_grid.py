import affine
import numpy as np
import pyproj
import pytest

import regionstat
from regionstat import grid, util


def test_round_extent():
    extent = (0.5, 0.5, 2.5, 2.5)
    assert grid.round_extent(extent, 1.0) == (0.0, 0.0, 3.0, 3.0)
    extent = (-1.5, 2.0, 9.0, 9.5)
    assert grid.round_extent(extent, 5.0) == (-5.0, 0.0, 10.0, 10.0)


def test_empty_grid():
    da = regionstat.empty_grid((0.0, 0.0, 4.0, 2.0), 1.0, "EPSG:32631")
    assert da.dims == ("y", "x")
    assert da.shape == (2, 4)
    assert np.allclose(da["x"], [0.5, 1.5, 2.5, 3.5])
    assert np.allclose(da["y"], [1.5, 0.5])
    assert float(da["dx"]) == 1.0
    assert float(da["dy"]) == -1.0
    assert da.attrs["crs"] == pyproj.CRS.from_epsg(32631)
    assert np.isnan(da.attrs["nodata"])
    assert da.isnull().all()


def test_empty_grid_integer():
    da = regionstat.empty_grid(
        (0.0, 0.0, 2.0, 2.0), 1.0, "EPSG:32631", fill=-1, dtype=np.int32
    )
    assert da.dtype == np.int32
    assert da.attrs["nodata"] == -1
    assert grid.missing(da).all()


@pytest.mark.parametrize(
    ("extent", "cellsize"),
    [
        ((0.0, 0.0, 2.0, 2.0), 0.0),
        ((0.0, 0.0, 2.0, 2.0), -1.0),
        ((2.0, 0.0, 2.0, 2.0), 1.0),
        ((0.0, 3.0, 2.0, 2.0), 1.0),
        ((0.0, 0.0, 2.5, 2.0), 1.0),
    ],
)
def test_empty_grid_invalid(extent, cellsize):
    with pytest.raises(ValueError):
        regionstat.empty_grid(extent, cellsize, "EPSG:32631")


def test_grid_from_array():
    values = np.arange(6.0).reshape((2, 3))
    da = regionstat.grid_from_array(values, (0.0, 0.0, 30.0, 20.0), "EPSG:32631")
    assert grid.extent(da) == (0.0, 0.0, 30.0, 20.0)
    assert grid.cellsize(da) == 10.0
    assert grid.ncell(da) == 6
    # First row is the northernmost
    assert float(da.sel(x=5.0, y=15.0)) == 0.0
    assert float(da.sel(x=25.0, y=5.0)) == 5.0


def test_grid_from_array_invalid():
    with pytest.raises(ValueError, match="2D"):
        regionstat.grid_from_array(np.zeros(3), (0.0, 0.0, 3.0, 1.0), None)
    with pytest.raises(ValueError, match="square"):
        regionstat.grid_from_array(np.zeros((2, 2)), (0.0, 0.0, 4.0, 2.0), None)


def test_missing_integer_nodata():
    values = np.array([[1, 0], [0, 3]], dtype=np.int16)
    da = regionstat.grid_from_array(
        values, (0.0, 0.0, 2.0, 2.0), "EPSG:32631", nodata=0
    )
    expected = np.array([[False, True], [True, False]])
    assert np.array_equal(grid.missing(da), expected)


def test_missing_float_nodata():
    values = np.array([[1.0, -9999.0], [np.nan, 3.0]])
    da = regionstat.grid_from_array(values, (0.0, 0.0, 2.0, 2.0), "EPSG:32631")
    expected = np.array([[False, False], [True, False]])
    assert np.array_equal(grid.missing(da), expected)
    expected = np.array([[False, True], [True, False]])
    assert np.array_equal(grid.missing(da, nodata=-9999.0), expected)


def test_transform():
    da = regionstat.empty_grid((10.0, 20.0, 14.0, 22.0), 2.0, "EPSG:32631")
    assert util.transform(da) == affine.Affine(2.0, 0.0, 10.0, 0.0, -2.0, 22.0)
    assert util.spatial_reference(da) == (2.0, 10.0, 14.0, -2.0, 20.0, 22.0)


def test_transform_flipped():
    da = regionstat.empty_grid((0.0, 0.0, 2.0, 2.0), 1.0, "EPSG:32631")
    with pytest.raises(ValueError, match="dy must be negative"):
        util.transform(da.isel(y=slice(None, None, -1)).assign_coords(dy=1.0))


def test_coord_reference_size_one():
    da = regionstat.empty_grid((0.0, 0.0, 1.0, 1.0), 1.0, "EPSG:32631")
    da = da.drop_vars("dx")
    with pytest.raises(ValueError, match="size 1"):
        util.coord_reference(da["x"])
