"""
Exceptions and warnings raised by regionstat.

Errors concerning the coordinate reference system and the alignment of
region attributes with region geometries are fatal: they are raised before
any output is produced, since a misaligned table is silently wrong.
"""


class RegionStatError(Exception):
    pass


class CrsMismatchError(RegionStatError):
    """Inputs are not in the same (or in an undefined) coordinate system."""


class SourceNotFoundError(RegionStatError, FileNotFoundError):
    """A data source does not exist."""


class LayerNotFoundError(RegionStatError):
    """A data source exists, but does not contain the requested layer."""


class EmptyGeometryError(RegionStatError):
    """A region polygon is empty or has zero area."""


class InvalidGeometryError(RegionStatError):
    """Geometries are invalid, e.g. after reprojection."""


class AlignmentError(RegionStatError):
    """
    Region attributes and region geometries no longer correspond
    index-for-index.
    """


class DivideByZeroWarning(RuntimeWarning):
    """A percentage was requested of a total of zero."""
