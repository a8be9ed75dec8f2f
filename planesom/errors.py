"""
Exceptions raised by planesom.

All of them derive from :class:`SOMError` and from the builtin exception a
caller would naturally expect (``ValueError`` or ``IndexError``).
"""


class SOMError(Exception):
    """Base class for every error raised by this package."""


class EmptyGridError(SOMError, ValueError):
    """A grid with zero rows or zero columns was built or searched."""


class DimensionMismatchError(SOMError, ValueError):
    """A point or weight vector lacks the expected number of components."""


class GridIndexError(SOMError, IndexError):
    """A (row, col) position lies outside the grid."""


class PointFormatError(SOMError, ValueError):
    """A point file is empty or contains a malformed line."""
