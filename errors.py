"""
Typed errors raised by the analysis pipeline.
Each carries a stable `code` and a user-facing message for the service boundary.
"""
from __future__ import annotations

from typing import Optional

from config import REQUEST_TIMEOUT


class AnalysisError(Exception):
    """Base class for every error `AnalysisEngine.analyze` may raise."""

    code = "analysis_error"
    user_message = "Error while analyzing the site"

    def __init__(self, message: str = "", *, url: Optional[str] = None) -> None:
        super().__init__(message or self.user_message)
        self.url = url


class InvalidUrlError(AnalysisError):
    code = "invalid_url"
    user_message = "invalid URL"


class InvalidRequestError(AnalysisError):
    """Request body or options of the wrong shape."""

    code = "invalid_request"
    user_message = "invalid request"


class FetchError(AnalysisError):
    """Transport-level failure while retrieving the page."""


class DnsError(FetchError):
    code = "dns_error"
    user_message = "Website not found (DNS)"


class ConnectionRefusedFetchError(FetchError):
    code = "connection_refused"
    user_message = "Connection refused by the server"


class FetchTimeoutError(FetchError):
    code = "timeout"
    user_message = f"Request timed out ({REQUEST_TIMEOUT}s)"


class CertificateExpiredError(FetchError):
    code = "certificate_expired"
    user_message = "SSL certificate expired"


class CertificateUntrustedError(FetchError):
    code = "certificate_untrusted"
    user_message = "SSL certificate not trusted"


class GenericFetchError(FetchError):
    code = "fetch_error"
    user_message = "Error while analyzing the site"

    def __init__(self, message: str = "", *, url: Optional[str] = None, status: Optional[int] = None) -> None:
        super().__init__(message, url=url)
        self.status = status


class ParseError(AnalysisError):
    code = "parse_error"
    user_message = "Page content could not be parsed"


def error_payload(exc: AnalysisError) -> dict[str, str]:
    """Translate an AnalysisError into the response body returned to callers."""
    return {
        "error": exc.user_message,
        "details": str(exc),
        "code": exc.code,
    }
