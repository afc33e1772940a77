"""Exception hierarchy for track storage access."""


class TrackError(Exception):
    """Base class for all pytracks errors."""


class TrackNotFoundError(TrackError, KeyError):
    """A platform, genome, track name or public id is not known."""

    def __str__(self):
        # KeyError repr-quotes its message
        return str(self.args[0]) if self.args else ""


class TrackOpenError(TrackError, OSError):
    """A storage unit is missing or cannot be opened."""


class TrackSchemaError(TrackError, ValueError):
    """A storage unit does not have the expected table or row shape."""


class SegmentOrderError(TrackSchemaError):
    """Run-length rows are out of order, overlapping or outside the window."""


class CatalogBuildError(TrackError, RuntimeError):
    """The track directory hierarchy could not be scanned."""

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path


class DatabaseNotInitializedError(TrackError, RuntimeError):
    """A session function was called before ``db_init``."""
