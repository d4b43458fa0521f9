"""Exceptions raised while fetching postings from an ATS.

``BaseAdapter.scrape`` catches all of these; they only escape when
``fetch_jobs`` is called directly.
"""


class AdapterError(Exception):
    """Base exception for all adapter errors."""

    pass


class AdapterHTTPError(AdapterError):
    """The ATS answered with an error status, or the connection failed.

    ``status_code`` is 0 when no response was received.
    """

    def __init__(self, message: str, status_code: int, url: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url

    @property
    def is_transient(self) -> bool:
        return self.status_code == 0 or self.status_code >= 500


class AdapterTimeoutError(AdapterError):
    """The request did not complete within ``http_request_timeout``."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class AdapterResponseError(AdapterError):
    """The response arrived but could not be parsed into postings."""

    pass


class AdapterConfigurationError(AdapterError):
    """The adapter was built with invalid settings (timeout, user agent, identifier)."""

    pass
