"""
GeoIndex Errors
===============

Exception hierarchy for the location index.

Read-path faults (CorruptIndexEntry, CellReadFailure, SearchDriverFailure)
are contained by the query adapter and the search orchestrator: they are
logged and reduce result completeness. WriteFailure is always raised to the
caller.
"""

from typing import Optional


class GeoIndexError(Exception):
    """Base exception for GeoIndex errors."""

    pass


class InvalidCoordinateError(GeoIndexError, ValueError):
    """Raised when latitude or longitude are out of range."""

    pass


class InvalidVersionError(GeoIndexError, ValueError):
    """Raised when a version id is not a time UUID."""

    pass


class ConfigurationError(GeoIndexError):
    """Raised when configuration is invalid."""

    pass


class CorruptIndexEntry(GeoIndexError):
    """A stored index column cannot be decoded."""

    def __init__(self, message: str, column_name: Optional[bytes] = None):
        super().__init__(message)
        self.column_name = column_name


class CellReadFailure(GeoIndexError):
    """A range read against one geocell row failed."""

    def __init__(self, cell: str, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Read failed for cell {cell!r}{detail}")
        self.cell = cell
        self.cause = cause


class SearchDriverFailure(GeoIndexError):
    """The expanding proximity search raised an internal fault."""

    pass


class WriteFailure(GeoIndexError):
    """A batch write exhausted its retry budget."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts
