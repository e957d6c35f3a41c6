"""Typed exceptions raised by sync collaborators."""


class WeatherSyncError(Exception):
    """Base class for errors raised inside a sync run."""


class NetworkError(WeatherSyncError):
    """Raised when the forecast provider cannot be reached or answers non-2xx."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class StorageError(WeatherSyncError):
    """Raised when the local forecast store rejects an operation."""
