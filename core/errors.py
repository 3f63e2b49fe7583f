# =============================================================================
# core/errors.py  -  Exception hierarchy for the API clients
# =============================================================================
#
# The pure functions (projection, time resolution, decoding) never raise for
# valid input.  Only the HTTP clients raise, and always a TravelApiError
# subclass, so the tool layer can turn any of them into an error dict.
# =============================================================================


class TravelApiError(Exception):
    """Base class for every error raised by the API clients."""


class ConfigError(TravelApiError):
    """The client configuration cannot be used (e.g. live mode, no key)."""


class ApiTransportError(TravelApiError):
    """The request failed before a usable envelope came back."""


class ApiResponseError(TravelApiError):
    """The envelope header reported a non-success result code."""

    def __init__(self, service: str, result_code: str, result_msg: str):
        self.service = service
        self.result_code = result_code
        self.result_msg = result_msg
        super().__init__(f"{service} API error {result_code}: {result_msg}")


class ApiFormatError(ApiTransportError):
    """A response arrived but its bytes, JSON or rows have the wrong shape."""
