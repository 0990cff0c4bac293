"""
KLADR API Exceptions

This module contains exception classes raised by the KLADR client.
Every error is raised to the caller of `queryString`/`queryField`, nothing is retried.
"""

from typing import Optional


class KladrError(Exception):
    """Base exception class for all KLADR client errors, dood!

    Attributes:
        message: Human-readable error message
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigurationError(KladrError):
    """Raised when the client is misconfigured.

    This occurs when no usable HTTP client is available at first use
    or the resolved API URL is empty.
    """


class ValidationError(KladrError):
    """Raised when search options fail validation.

    Attributes:
        key: Name of the offending option
    """

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


class TransportError(KladrError):
    """Raised when the HTTP request itself failed (connection, DNS, timeout, etc.)."""


class HttpError(KladrError):
    """Raised when the API answered with an error HTTP status.

    Attributes:
        statusCode: HTTP status code
        reasonPhrase: HTTP reason phrase
    """

    def __init__(self, message: str, statusCode: int, reasonPhrase: str = "") -> None:
        super().__init__(message)
        self.statusCode = statusCode
        self.reasonPhrase = reasonPhrase


class ClientError(HttpError):
    """Raised on 4xx HTTP status."""


class ServerError(HttpError):
    """Raised on 5xx HTTP status."""


class DecodeError(KladrError):
    """Raised when the response body is not valid JSON."""
