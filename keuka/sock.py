"""URL parsing and TCP connection setup."""

from __future__ import annotations

import re
import socket
import sys
from dataclasses import dataclass
from typing import TextIO

DEFAULT_PORT = "443"
_HOSTNAME_LIMIT = 256
_PORT_LIMIT = 6
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class ResolveError(OSError):
    """The hostname could not be resolved."""


class ConnectError(OSError):
    """A TCP connection to the host could not be made."""


@dataclass(frozen=True)
class Endpoint:
    """The scheme, host and port taken from a URL."""

    scheme: str
    host: str
    port: int


def _to_port(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_url(url: str) -> Endpoint:
    """Split ``scheme://host[:port][/]`` into an Endpoint.

    The port defaults to 443; a non-numeric port reads as 0.
    """
    if url.endswith("/"):
        url = url[:-1]
    if ":" not in url or "://" not in url:
        raise ValueError(f"malformed URL: {url!r}")
    scheme = url[: url.index(":")]
    host = url[url.index("://") + 3 :][:_HOSTNAME_LIMIT]
    port_text = DEFAULT_PORT
    host, colon, rest = host.partition(":")
    if colon:
        port_text = rest[:_PORT_LIMIT]
    return Endpoint(scheme=scheme, host=host, port=_to_port(port_text))


def make_socket(url: str, out: TextIO | None = None) -> socket.socket:
    """Open an IPv4 TCP connection to the host named in ``url``.

    Raises ResolveError if the name does not resolve and ConnectError,
    after writing a message to ``out``, if the connection fails.
    """
    stream = sys.stdout if out is None else out
    endpoint = parse_url(url)
    try:
        address = socket.gethostbyname(endpoint.host)
    except (socket.gaierror, socket.herror, UnicodeError) as exc:
        raise ResolveError(f"unable to resolve hostname {endpoint.host}") from exc

    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.connect((address, endpoint.port))
    except OSError as exc:
        sock.close()
        stream.write(
            f"Error: Cannot connect to host {endpoint.host} [{address}] "
            f"on port {endpoint.port}.\n"
        )
        raise ConnectError(
            f"cannot connect to {endpoint.host} [{address}] on port {endpoint.port}"
        ) from exc
    return sock