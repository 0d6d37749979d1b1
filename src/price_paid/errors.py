"""Exceptions raised when a backing service cannot answer a query.

Malformed postcodes and postcodes missing from the geocoding store are not
errors; only failures of the remote backends are raised to callers.
"""


class BackendError(Exception):
    """A remote backend failed, timed out, or returned an unusable payload."""

    backend: str = "backend"

    def __init__(
        self, message: str, *, status_code: int | None = None, timed_out: bool = False
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.timed_out = timed_out

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.backend}: {self.message} (status {self.status_code})"
        return f"{self.backend}: {self.message}"


class GeocodeBackendError(BackendError):
    """The postcode geocoding store could not be read."""

    backend = "geocoding"


class SearchBackendError(BackendError):
    """The property search index could not be queried."""

    backend = "search"
