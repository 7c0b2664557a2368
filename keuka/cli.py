"""Command-line entry point: connect, handshake and report on certificates."""

from __future__ import annotations

import getopt
import socket
import ssl
import sys
import time
from dataclasses import dataclass
from typing import TextIO

from cryptography import x509

from keuka.clock import get_elapsed_ticks
from keuka.options import MAX_HOSTNAME_LENGTH, OPT_LSEP, usage
from keuka.report import (
    INBOUND_INDICATOR,
    NEUTRAL_INDICATOR,
    OUTBOUND_INDICATOR,
    ReportOptions,
    format_certificate,
    format_chain,
    format_raw,
)
from keuka.sock import make_socket, parse_url

VERSION = "1.0.6"
PROTOCOL = "https"

_OPTION_FIELDS = (
    ("b", "bits", "bits"),
    ("c", "chain", "chain"),
    ("C", "cipher", "cipher"),
    ("i", "issuer", "issuer"),
    ("m", "method", "method"),
    ("N", "no-sni", "no_sni"),
    ("q", "quiet", "quiet"),
    ("r", "raw", "raw"),
    ("S", "serial", "serial"),
    ("A", "signature-algorithm", "signature_algorithm"),
    ("s", "subject", "subject"),
    ("V", "validity", "validity"),
    ("h", "help", "show_help"),
    ("v", "version", "show_version"),
)
_SHORT_OPTIONS = "".join(short for short, _, _ in _OPTION_FIELDS)
_LONG_OPTIONS = [long for _, long, _ in _OPTION_FIELDS]
_FIELD_BY_OPTION = {
    flag: field
    for short, long, field in _OPTION_FIELDS
    for flag in (f"-{short}", f"--{long}")
}


class UsageError(Exception):
    """The command line could not be used."""

    def __init__(self, message: str, show_usage: bool = False) -> None:
        super().__init__(message)
        self.show_usage = show_usage


@dataclass(frozen=True)
class Settings:
    """What the command line asked for."""

    hostname: str | None = None
    bits: bool = False
    chain: bool = False
    cipher: bool = False
    issuer: bool = False
    method: bool = False
    no_sni: bool = False
    quiet: bool = False
    raw: bool = False
    serial: bool = False
    signature_algorithm: bool = False
    subject: bool = False
    validity: bool = False
    pad: bool = False
    show_help: bool = False
    show_version: bool = False

    @property
    def report_options(self) -> ReportOptions:
        return ReportOptions(
            bits=self.bits,
            issuer=self.issuer,
            serial=self.serial,
            signature_algorithm=self.signature_algorithm,
            subject=self.subject,
            validity=self.validity,
        )


@dataclass(frozen=True)
class _Handshake:
    cipher: str
    cipher_version: str
    method: str
    peer: x509.Certificate | None
    chain: tuple[x509.Certificate, ...]


def parse_args(argv: list[str]) -> Settings:
    """Parse command-line arguments (without the program name).

    The hostname is the last argument. Raises UsageError.
    """
    args = list(argv)
    try:
        opts, _operands = getopt.gnu_getopt(args, _SHORT_OPTIONS, _LONG_OPTIONS)
    except getopt.GetoptError as exc:
        raise UsageError(str(exc), show_usage=True) from exc

    flags: dict[str, bool] = {}
    for opt, _value in opts:
        field = _FIELD_BY_OPTION[opt]
        if field in ("show_help", "show_version"):
            return Settings(**{field: True})
        flags[field] = True

    if not args:
        raise UsageError("Hostname not specified.")
    hostname = args[-1]
    if len(hostname) > MAX_HOSTNAME_LENGTH:
        raise UsageError(
            f"Hostname exceeds maximum length of {MAX_HOSTNAME_LENGTH} characters."
        )
    pad = len(args) > 1 and args[-2] != OPT_LSEP and not flags.get("quiet", False)
    return Settings(hostname=hostname, pad=pad, **flags)


def _create_context() -> ssl.SSLContext:
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    context.minimum_version = ssl.TLSVersion.MINIMUM_SUPPORTED
    return context


def _server_name(hostname: str, sni: bool) -> str | None:
    if not sni:
        return None
    return parse_url(f"{PROTOCOL}://{hostname}").host or None


def _attach(
    context: ssl.SSLContext, sock: socket.socket, server_name: str | None
) -> ssl.SSLSocket:
    return context.wrap_socket(
        sock, server_hostname=server_name, do_handshake_on_connect=False
    )


def _complete(tls: ssl.SSLSocket) -> _Handshake:
    tls.do_handshake()
    cipher_name, cipher_version, _bits = tls.cipher()
    peer_der = tls.getpeercert(binary_form=True)
    peer = x509.load_der_x509_certificate(peer_der) if peer_der else None
    chain = tuple(
        x509.load_der_x509_certificate(der) for der in tls.get_unverified_chain()
    )
    return _Handshake(
        cipher=cipher_name,
        cipher_version=cipher_version,
        method=tls.version() or "",
        peer=peer,
        chain=chain,
    )


def fetch_certificates(hostname: str, sni: bool = True) -> _Handshake:
    """Connect to ``hostname`` (optionally ``host:port``) and complete a handshake.

    Raises ResolveError, ConnectError or ssl.SSLError.
    """
    context = _create_context()
    with make_socket(f"{PROTOCOL}://{hostname}", sys.stderr) as sock:
        with _attach(context, sock, _server_name(hostname, sni)) as tls:
            return _complete(tls)


class _Progress:
    def __init__(self, out: TextIO, quiet: bool) -> None:
        self._out = out
        self._quiet = quiet
        self._start = time.process_time()

    def _prefix(self, indicator: str) -> str:
        return f"{indicator} [{get_elapsed_ticks(self._start):f}s] "

    def step(self, indicator: str, text: str) -> None:
        if not self._quiet:
            self._out.write(f"{self._prefix(indicator)}{text}\n")

    def fail(self, indicator: str, text: str) -> None:
        prefix = "" if self._quiet else self._prefix(indicator)
        self._out.write(f"{prefix}Error: {text}\n")


def _report(settings: Settings, handshake: _Handshake, url: str, out: TextIO) -> int:
    if settings.cipher:
        out.write(f"--- Cipher: {handshake.cipher}\n")
    if settings.method:
        out.write(f"--- Method: {handshake.method}\n")

    if settings.chain:
        if not handshake.chain:
            out.write(f"Error: Could not get certificate chain from {url}.\n")
            return 1
        out.write(format_chain(list(handshake.chain), settings.report_options))
        if settings.raw:
            out.write(format_raw(list(handshake.chain)))
        return 0

    if handshake.peer is None:
        out.write(f"Error: Could not get certificate from {url}.\n")
        return 1
    out.write(format_certificate(handshake.peer, settings.report_options))
    if settings.raw:
        out.write(format_raw([handshake.peer]))
    return 0


def _run(settings: Settings, out: TextIO) -> int:
    hostname = settings.hostname
    url = f"{PROTOCOL}://{hostname}"
    progress = _Progress(out, settings.quiet)

    progress.step(NEUTRAL_INDICATOR, "Establishing SSL context.")
    try:
        context = _create_context()
    except (ssl.SSLError, ValueError) as exc:
        progress.fail(NEUTRAL_INDICATOR, "Unable to establish SSL context.")
        out.write(f"{exc}\n")
        return 1
    progress.step(NEUTRAL_INDICATOR, "SSL context established.")

    try:
        sock = make_socket(url, out)
    except (OSError, ValueError):
        sock = None
    progress.step(OUTBOUND_INDICATOR, f"Establishing connection to {hostname}.")
    if sock is None:
        progress.fail(INBOUND_INDICATOR, f"Unable to resolve hostname {hostname}.")
        return 1

    with sock:
        progress.step(INBOUND_INDICATOR, "Connection established.")
        progress.step(NEUTRAL_INDICATOR, "Attaching SSL session to socket.")
        try:
            tls = _attach(context, sock, _server_name(hostname, not settings.no_sni))
        except (OSError, ValueError) as exc:
            progress.fail(NEUTRAL_INDICATOR, "Unable to attach SSL session to socket.")
            out.write(f"{exc}\n")
            return 1

        with tls:
            progress.step(
                OUTBOUND_INDICATOR, "SSL session attached, handshake initiated."
            )
            try:
                handshake = _complete(tls)
            except OSError as exc:
                progress.fail(
                    NEUTRAL_INDICATOR,
                    f"Could not build SSL session with {url}. Handshake aborted.",
                )
                out.write(f"{exc}\n")
                return 1

    progress.step(
        INBOUND_INDICATOR, f"{handshake.cipher_version} negotiated, handshake complete."
    )
    if settings.pad:
        out.write("\n")
    return _report(settings, handshake, url, out)


def main(argv: list[str] | None = None) -> int:
    """Run the command and return its exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        settings = parse_args(args)
    except UsageError as exc:
        if exc.show_usage:
            sys.stderr.write(f"keuka: {exc}\n")
            usage(sys.stdout)
        else:
            sys.stderr.write(f"Error: {exc}\n")
        return 1

    if settings.show_help:
        usage(sys.stdout)
        return 0
    if settings.show_version:
        sys.stdout.write(f"{VERSION}\n")
        return 0
    return _run(settings, sys.stdout)


if __name__ == "__main__":
    sys.exit(main())