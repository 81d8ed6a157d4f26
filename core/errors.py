"""Custom exceptions and error handling."""


class TennTrendError(Exception):
    """Base exception for all application errors."""
    pass


class ConfigurationError(TennTrendError):
    """Missing or invalid configuration."""
    pass


class UpstreamError(TennTrendError):
    """Error fetching from an external data source."""
    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"{source}: {message}")


class QuotaExceededError(UpstreamError):
    """Provider quota used up (HTTP 402/429 or local tracker)."""
    pass


class UpstreamAuthError(UpstreamError):
    """Provider rejected the credentials."""
    pass


class UpstreamUnavailableError(UpstreamError):
    """Network failure, timeout or server error after retries."""
    pass


class OracleError(TennTrendError):
    """Base class for prediction oracle failures."""
    pass


class OracleUnavailableError(OracleError):
    """Oracle could not be reached or refused the request."""
    pass


class OracleParseError(OracleError):
    """Oracle answered with something that is not a prediction array."""
    pass


class InvalidMatchRecordError(TennTrendError):
    """A single record violates the data model invariants."""
    pass


class PersistenceError(TennTrendError):
    """A persisted document could not be read or written."""
    pass
