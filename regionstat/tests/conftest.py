import pytest

from .fixtures.regions_fixture import (
    four_cell_grid,
    like,
    protected_gdf,
    region_gdf,
    region_polygons,
    region_table,
    regions,
)


@pytest.fixture(autouse=True)
def reset_logger():
    import regionstat.logging
    from regionstat.logging.nulllogger import NullLogger

    yield
    regionstat.logging.logger.instance = NullLogger()
