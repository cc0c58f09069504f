class ListenError(Exception):
    """Base class for webhook listen errors."""


class ConfigurationError(ListenError):
    """Raised when the operator supplied configuration cannot be used."""


class ForwardURLError(ConfigurationError):
    """Raised when a forwarding base URL cannot be parsed."""

    def __init__(self, url: str):
        super().__init__(f"Provided forward url cannot be parsed: {url}")
        self.url = url


class InvalidEndpointURLError(ListenError):
    def __init__(self, url: str, reason: str):
        super().__init__(f"Invalid endpoint url {url!r}: {reason}")
        self.url = url
        self.reason = reason


class EndpointListError(ListenError):
    """Raised when webhook endpoints cannot be fetched from the API."""
