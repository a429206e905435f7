"""Exceptions raised across the harvester and search service."""


class GeonamesError(Exception):
    """Base class for all errors raised by this package."""


class StartupError(GeonamesError):
    """Fatal configuration problem detected before any processing starts."""


class DocumentBuildError(GeonamesError):
    """A single record could not be turned into an indexable document."""

    def __init__(self, message: str, record=None):
        super().__init__(message)
        self.record = record


class IndexWriteError(GeonamesError):
    """The index rejected an add, commit or optimize call."""


class QueryError(GeonamesError):
    """The index failed to execute a query."""
