"""Forwarding URL helpers.

Operators describe where events go with partial locations such as ``3000``,
``/webhooks`` or ``localhost:3000/webhooks``. These helpers turn such a
location into a full URL and graft the path of a registered endpoint onto it.
"""

import re
from typing import Union
from urllib.parse import SplitResult, urlsplit

from webhook_listen.common.errors import ForwardURLError, InvalidEndpointURLError

_PORT_PATTERN = re.compile(r"[0-9]+")


def normalize_forward_url(spec: str) -> str:
    """Return a full URL for a potentially incomplete forwarding location."""
    url = spec

    if _PORT_PATTERN.fullmatch(url):
        # Just a number, assume it's a port
        url = "localhost:" + url

    if url.startswith("/"):
        # Just a path, assume it's on localhost
        url = "localhost" + url

    if not url.startswith(("http://", "https://")):
        url = "http://" + url

    return url


def split_absolute_url(url: str) -> SplitResult:
    """Split ``url``, raising ``ValueError`` unless it is an absolute URL."""
    if not url or any(char.isspace() for char in url):
        raise ValueError("url is empty or contains whitespace")

    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        raise ValueError("url has no scheme or host")

    # Accessing the port validates it
    parts.port
    return parts


def parse_endpoint_url(url: str) -> SplitResult:
    try:
        parts = split_absolute_url(url)
    except ValueError as e:
        raise InvalidEndpointURLError(url, str(e)) from e

    if parts.scheme not in ("http", "https"):
        raise InvalidEndpointURLError(url, f"unsupported scheme {parts.scheme!r}")
    return parts


def build_forward_url(forward_url: str, destination: Union[str, SplitResult]) -> str:
    """Append the path of ``destination`` to the forwarding base URL.

    Only the scheme, host and path of ``forward_url`` are kept. An unusable
    ``forward_url`` raises ``ForwardURLError``.
    """
    try:
        base = split_absolute_url(forward_url)
    except ValueError:
        raise ForwardURLError(forward_url) from None

    if isinstance(destination, str):
        destination = urlsplit(destination)

    host = base.netloc.rpartition("@")[2]
    # Strip the trailing slash to avoid a doubled "//"
    return f"{base.scheme}://{host}{base.path.rstrip('/')}{destination.path}"
