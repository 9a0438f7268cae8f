class KubesnapError(Exception):
    """Base exception for kubesnap."""

    pass


class ConfigurationError(KubesnapError):
    """Raised when a configuration value is invalid."""

    pass


class SourceUnavailableError(KubesnapError):
    """
    Raised when the metrics source cannot produce a pod metrics listing.

    The underlying exception (API error, connectivity, authorization,
    malformed response) is kept in ``cause`` and chained as ``__cause__``.
    """

    def __init__(self, message: str, cause: Exception = None):
        super().__init__(message)
        self.cause = cause
