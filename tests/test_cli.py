import socket
import ssl
import threading
from datetime import datetime, timezone
from unittest import mock

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from keuka.cli import Settings, UsageError, fetch_certificates, main, parse_args
from keuka.sock import ResolveError


def _self_signed():
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "localhost")])
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(0x1234)
        .not_valid_before(datetime(2024, 1, 1, tzinfo=timezone.utc))
        .not_valid_after(datetime(2100, 1, 1, tzinfo=timezone.utc))
        .sign(key, hashes.SHA256())
    )
    return key, cert


@pytest.fixture
def tls_server(tmp_path):
    key, cert = _self_signed()
    cert_path = tmp_path / "cert.pem"
    key_path = tmp_path / "key.pem"
    cert_path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
    key_path.write_bytes(
        key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(cert_path, key_path)
    listener = socket.create_server(("127.0.0.1", 0))
    listener.settimeout(10)

    def serve():
        try:
            conn, _ = listener.accept()
        except OSError:
            return
        conn.settimeout(10)
        try:
            with context.wrap_socket(conn, server_side=True) as tls:
                tls.recv(1)
        except OSError:
            pass

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    yield listener.getsockname()[1], cert
    listener.close()
    thread.join(timeout=10)


def test_parse_short_flags():
    settings = parse_args(["-bcCSA", "example.com"])
    assert settings.hostname == "example.com"
    assert (settings.bits, settings.chain, settings.cipher) == (True, True, True)
    assert settings.serial and settings.signature_algorithm
    assert not settings.subject and not settings.quiet


def test_parse_long_flags():
    settings = parse_args(["--issuer", "--no-sni", "--validity", "--", "example.com"])
    assert settings.issuer and settings.no_sni and settings.validity
    assert settings.hostname == "example.com"
    assert settings.report_options.issuer is True


def test_pad_rules():
    assert parse_args(["-b", "example.com"]).pad is True
    assert parse_args(["--", "example.com"]).pad is False
    assert parse_args(["-q", "-b", "example.com"]).pad is False
    assert parse_args(["example.com"]).pad is False


def test_help_and_version_short_circuit():
    assert parse_args(["-h", "example.com"]) == Settings(show_help=True)
    assert parse_args(["--version"]) == Settings(show_version=True)


def test_missing_hostname():
    with pytest.raises(UsageError, match="Hostname not specified") as info:
        parse_args([])
    assert info.value.show_usage is False


def test_hostname_too_long():
    with pytest.raises(UsageError, match="256"):
        parse_args(["a" * 257])
    assert parse_args(["a" * 256]).hostname == "a" * 256


def test_unknown_option():
    with pytest.raises(UsageError) as info:
        parse_args(["-x", "example.com"])
    assert info.value.show_usage is True


def test_main_version(capsys):
    assert main(["-v"]) == 0
    assert capsys.readouterr().out == "1.0.6\n"


def test_main_help(capsys):
    assert main(["--help"]) == 0
    assert capsys.readouterr().out.startswith("Usage: keuka [OPTIONS] [--] hostname")


def test_main_invalid_option_prints_usage(capsys):
    assert main(["-x", "example.com"]) == 1
    assert capsys.readouterr().out.startswith("Usage: keuka")


def test_main_no_arguments(capsys):
    assert main([]) == 1
    assert capsys.readouterr().err == "Error: Hostname not specified.\n"


def test_main_unresolvable_quiet(capsys):
    with mock.patch("socket.gethostbyname", side_effect=socket.gaierror("no host")):
        assert main(["-q", "example.invalid"]) == 1
    out = capsys.readouterr().out
    assert out == "Error: Unable to resolve hostname example.invalid.\n"


def test_main_unresolvable_progress(capsys):
    with mock.patch("socket.gethostbyname", side_effect=socket.gaierror("no host")):
        assert main(["example.invalid"]) == 1
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("--- [")
    assert lines[0].endswith("Establishing SSL context.")
    assert lines[-1].startswith("<-- [")
    assert lines[-1].endswith("Error: Unable to resolve hostname example.invalid.")


def test_fetch_unresolvable():
    with mock.patch("socket.gethostbyname", side_effect=socket.gaierror("no host")):
        with pytest.raises(ResolveError):
            fetch_certificates("example.invalid", True)


def test_fetch_certificates(tls_server):
    port, cert = tls_server
    handshake = fetch_certificates(f"127.0.0.1:{port}", True)
    assert handshake.peer == cert
    assert handshake.chain[0] == cert
    assert handshake.method.startswith("TLS")


def test_main_reports_subject(tls_server, capsys):
    port, _cert = tls_server
    assert main(["-q", "-s", "-C", "-m", f"127.0.0.1:{port}"]) == 0
    out = capsys.readouterr().out
    assert "--- Subject: CN=localhost\n" in out
    assert "--- Cipher: " in out
    assert "--- Method: TLS" in out


def test_main_chain_raw(tls_server, capsys):
    port, cert = tls_server
    assert main(["-c", "-r", "-S", f"127.0.0.1:{port}"]) == 0
    out = capsys.readouterr().out
    assert "Connection established." in out
    assert "--- Certificate Chain:\n    0: --- Serial: 1234\n" in out
    pem = cert.public_bytes(serialization.Encoding.PEM).decode("ascii")
    assert pem in out