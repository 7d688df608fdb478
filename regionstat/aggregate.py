"""
Aggregation of extracted cell values into a summary table per region.

For every region, the classified cells (those with a value) are counted
against all cells of the region:

* ``cells_classified``: number of cells with a value.
* ``cells_total``: number of cells, including no-data cells.
* ``percent_classified``: ``round(cells_classified / cells_total, 3) * 100``,
  or NaN if the region has no cells at all.

Cells shared by overlapping regions count for each of those regions.
"""

import warnings
from typing import Iterable, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
import xarray as xr

from regionstat.errors import AlignmentError, DivideByZeroWarning
from regionstat.extract import ExtractionResult, extract
from regionstat.logging import logger, standard_log_decorator
from regionstat.regions import RegionSet

SUMMARY_COLUMNS = ["region_id", "cells_classified", "cells_total", "percent_classified"]


def count_cells(values: Sequence) -> Tuple[int, int]:
    """
    Count classified (non-missing) and total cells.

    Parameters
    ----------
    values: sequence of optional numbers
        None and NaN mark missing values.

    Returns
    -------
    (cells_classified, cells_total)
    """
    values = np.asarray(values, dtype=np.float64)
    return int(np.count_nonzero(~np.isnan(values))), int(values.size)


def percent(classified: float, total: float) -> float:
    """
    Percentage rounded to one decimal: ``round(classified / total, 3) * 100``.

    Returns NaN, with a :class:`regionstat.errors.DivideByZeroWarning`, when
    ``total`` is zero.
    """
    if total == 0:
        warnings.warn(
            "Percentage of a total of zero, result is NaN",
            DivideByZeroWarning,
            stacklevel=2,
        )
        return np.nan
    return round(classified / total, 3) * 100


def _summary_row(region_id: int, values: Sequence) -> dict:
    classified, total = count_cells(values)
    if total == 0:
        logger.warning(f"Region {region_id} contains no raster cells")
    return {
        "region_id": region_id,
        "cells_classified": classified,
        "cells_total": total,
        "percent_classified": percent(classified, total),
    }


def _left_join(summary: pd.DataFrame, table: pd.DataFrame, on: str) -> pd.DataFrame:
    if on not in table.columns:
        raise ValueError(f'Column "{on}" not found in table to join')
    clashes = set(summary.columns).intersection(table.columns) - {on}
    if clashes:
        raise ValueError(f"Joined columns already present: {sorted(clashes)}")
    try:
        return summary.merge(table, on=on, how="left", validate="many_to_one")
    except pd.errors.MergeError as e:
        raise AlignmentError(
            f'Cannot join table: it holds duplicate values for "{on}"'
        ) from e


def _as_tables(metadata) -> Iterable[pd.DataFrame]:
    if metadata is None:
        return []
    if isinstance(metadata, pd.DataFrame):
        return [metadata]
    return list(metadata)


def aggregate(
    extraction: ExtractionResult,
    regions: Optional[Union[RegionSet, pd.DataFrame]] = None,
    metadata: Optional[Union[pd.DataFrame, Sequence[pd.DataFrame]]] = None,
    on: str = "region_id",
) -> pd.DataFrame:
    """
    Summarize extracted cell values per region.

    Parameters
    ----------
    extraction: dict of int to sequence
        Cell values per region id, as returned by
        :func:`regionstat.extract`. None and NaN are missing values.
    regions: RegionSet or pandas.DataFrame, optional
        Region table to join descriptive columns (name, code, attributes)
        from.
    metadata: pandas.DataFrame or list of pandas.DataFrame, optional
        Supplementary tables, joined one after another.
    on: str, optional
        Key column to join the tables on. A RegionSet is always joined on
        its region ids first, after which ``on`` may also name one of its
        columns, e.g. "code". Otherwise ``on`` is the name of the region id
        column in the tables, and the summary's "region_id" column is
        renamed to match. Default is "region_id".

    Returns
    -------
    summary: pandas.DataFrame
        One row per region of ``extraction``, sorted by region id, with
        columns "region_id", "cells_classified", "cells_total",
        "percent_classified", followed by the joined columns. Regions absent
        from a joined table get null values for its columns.

    Raises
    ------
    AlignmentError
        If a joined table holds the same key more than once.
    ValueError
        If a joined table lacks ``on``, or repeats a column already present.
    """
    records = [_summary_row(region_id, values) for region_id, values in extraction.items()]
    summary = (
        pd.DataFrame.from_records(records, columns=SUMMARY_COLUMNS)
        .astype(
            {
                "region_id": np.int64,
                "cells_classified": np.int64,
                "cells_total": np.int64,
                "percent_classified": np.float64,
            }
        )
        .sort_values("region_id", kind="stable")
        .reset_index(drop=True)
    )
    if isinstance(regions, RegionSet):
        summary = _left_join(summary, regions.table, "region_id")
        regions = None
    if on not in summary.columns:
        summary = summary.rename(columns={"region_id": on})

    if regions is not None:
        summary = _left_join(summary, regions, on)
    for table in _as_tables(metadata):
        summary = _left_join(summary, table, on)
    return summary


@standard_log_decorator()
def zonal_summary(
    grid: xr.DataArray,
    regions: RegionSet,
    metadata: Optional[Union[pd.DataFrame, Sequence[pd.DataFrame]]] = None,
    all_touched: bool = False,
    parallel: bool = False,
) -> pd.DataFrame:
    """
    Count the classified cells of ``grid`` within every region.

    Combines :func:`regionstat.extract` and :func:`regionstat.aggregate`;
    see those for the parameters.

    Examples
    --------
    Share of protected cells per region, with the region names attached:

    >>> summary = regionstat.zonal_summary(protected, regions)
    >>> summary[["name", "percent_classified"]]
    """
    extraction = extract(grid, regions, all_touched=all_touched, parallel=parallel)
    return aggregate(extraction, regions, metadata)


def compare(
    left: pd.DataFrame,
    right: pd.DataFrame,
    suffixes: Tuple[str, str] = ("_polygon", "_raster"),
    on: str = "region_id",
) -> pd.DataFrame:
    """
    Place two summary tables side by side, e.g. those of
    :func:`regionstat.intersection_summary` and :func:`regionstat.zonal_summary`.

    Both are joined on ``on``; regions present in only one of them get null
    values for the columns of the other. The ``percent_difference`` column
    holds left minus right. Differences are expected: polygon areas are
    exact, while cell counts depend on the raster resolution.
    """
    try:
        compared = left.merge(
            right, on=on, how="outer", suffixes=suffixes, validate="one_to_one"
        )
    except pd.errors.MergeError as e:
        raise AlignmentError(
            f'Cannot compare tables: one holds duplicate values for "{on}"'
        ) from e
    left_percent = f"percent_classified{suffixes[0]}"
    right_percent = f"percent_classified{suffixes[1]}"
    if left_percent in compared.columns and right_percent in compared.columns:
        compared["percent_difference"] = compared[left_percent] - compared[right_percent]
    return compared.sort_values(on, kind="stable").reset_index(drop=True)
