import io
import socket
from unittest import mock

import pytest

from keuka.sock import ConnectError, Endpoint, ResolveError, make_socket, parse_url


def test_parse_url_default_port():
    assert parse_url("https://example.com") == Endpoint("https", "example.com", 443)


def test_parse_url_explicit_port_and_trailing_slash():
    assert parse_url("https://example.com:8443/") == Endpoint("https", "example.com", 8443)


def test_parse_url_non_numeric_port_reads_zero():
    assert parse_url("https://example.com:abc").port == 0


def test_parse_url_truncates_long_hostname():
    host = "a" * 300
    assert parse_url("https://" + host).host == host[:256]


def test_parse_url_malformed():
    with pytest.raises(ValueError):
        parse_url("example.com")


@pytest.fixture
def listener():
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(1)
    yield server
    server.close()


def test_make_socket_connects(listener):
    port = listener.getsockname()[1]
    sock = make_socket(f"https://127.0.0.1:{port}", io.StringIO())
    try:
        assert sock.getpeername() == ("127.0.0.1", port)
    finally:
        sock.close()


def test_make_socket_refused_writes_message():
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    out = io.StringIO()
    with pytest.raises(ConnectError):
        make_socket(f"https://127.0.0.1:{port}", out)
    assert out.getvalue() == (
        f"Error: Cannot connect to host 127.0.0.1 [127.0.0.1] on port {port}.\n"
    )


def test_make_socket_unresolvable():
    out = io.StringIO()
    with mock.patch("socket.gethostbyname", side_effect=socket.gaierror("no such host")):
        with pytest.raises(ResolveError):
            make_socket("https://unknown.example.com", out)
    assert out.getvalue() == ""