"""
Custom application exceptions.
"""

class ReadstashAppException(Exception):
    """Base exception for the export worker."""
    pass


class IntegrationNotFoundError(ReadstashAppException):
    """Raised when an integration is not found for the user."""
    pass


class UnsupportedIntegrationError(ReadstashAppException):
    """Raised when no export client is registered for an integration name.

    This signals a configuration inconsistency (an integration row whose name
    the worker does not know), not a transient failure, so it is never
    swallowed by the per-integration error boundary.
    """

    def __init__(self, name: str, supported: list[str]):
        super().__init__(
            f"Integration '{name}' is not supported. "
            f"Supported integrations: {supported}"
        )
        self.name = name
        self.supported = supported


class IntegrationExportError(ReadstashAppException):
    """Raised by export clients when the remote API returns an unusable response."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
