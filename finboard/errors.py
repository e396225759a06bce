class DashboardError(Exception):
    """Base class for every failure the dashboard pipeline reports."""


class FetchFailure(DashboardError):
    """The store returned nothing (or raised) for a required value."""


class DecryptionFailure(DashboardError):
    """A stored record is not readable under the owner's key, or is malformed."""

    def __init__(self, message: str, record_id: str | None = None):
        super().__init__(message)
        self.record_id = record_id


DecryptionError = DecryptionFailure


class ConfigurationFailure(DashboardError):
    """A stored preference has a value the dashboard cannot represent."""
