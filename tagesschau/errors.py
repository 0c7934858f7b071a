class TagesschauError(Exception):
    """Base class for every error raised by this library."""


class InvalidDate(TagesschauError, ValueError):
    """A (year, month, day) triple that is not a real calendar date."""


class UrlConstructionError(TagesschauError):
    """The base endpoint could not be parsed into a request URL."""


class RequestFailed(TagesschauError):
    """The HTTP request could not be completed by the transport."""


class BodyReadError(TagesschauError):
    """A successful response's body could not be read."""


class InvalidResponse(TagesschauError):
    """The endpoint answered with a non-200 status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Invalid response: HTTP response code {status_code}")
        self.status_code = status_code


class DeserializationError(TagesschauError):
    """The response body did not match the expected JSON shape."""


class ConversionError(TagesschauError):
    """Tried to extract the wrong content variant."""


class ClockError(TagesschauError):
    """The current date could not be determined for the configured zone."""
