"""Protocol method table, command-line option table and usage text."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TextIO

OPT_SSLV2 = 1
OPT_SSLV3 = 2
OPT_TLSV1 = 4
OPT_TLSV1_1 = 8
OPT_TLSV1_2 = 16
OPT_TLSV1_3 = 32

MAX_HOSTNAME_LENGTH = 256
OPT_LSEP = "--"


@dataclass(frozen=True)
class Method:
    """A protocol method name and its bitmask."""

    key: str
    value: int


@dataclass(frozen=True)
class Option:
    """A command-line option with its short alias and description."""

    value: str
    alias: str
    desc: str


METHODS: tuple[Method, ...] = (
    Method("SSLv2", OPT_SSLV2),
    Method("SSLv3", OPT_SSLV3),
    Method("TLSv1", OPT_TLSV1),
    Method("TLSv1_1", OPT_TLSV1_1),
    Method("TLSv1_2", OPT_TLSV1_2),
    Method("TLSv1_3", OPT_TLSV1_3),
)

OPTIONS: tuple[Option, ...] = (
    Option("--bits", "-b", "Show public key length, in bits."),
    Option("--chain", "-c", "Show peer certificate chain."),
    Option("--cipher", "-C", "Show cipher negotiated during handshake."),
    Option("--issuer", "-i", "Show certificate issuer."),
    Option("--method", "-m", "Show method negotiated during handshake."),
    Option("--no-sni", "-N", "Disable SNI support."),
    Option("--quiet", "-q", "Suppress timing and progress output."),
    Option("--raw", "-r", "Show raw certificate contents."),
    Option("--serial", "-S", "Show certificate serial number."),
    Option("--signature-algorithm", "-A", "Show certificate signature algorithm."),
    Option("--subject", "-s", "Show certificate subject."),
    Option(
        "--validity",
        "-V",
        "Show certificate Not Before/Not After validity range.",
    ),
    Option("--help", "-h", "Show help information."),
    Option("--version", "-v", "Show version number."),
)


def get_bitmask_from_key(key: str) -> int:
    """Return the bitmask of the protocol method named ``key``.

    Raises KeyError for an unknown method name.
    """
    for method in METHODS:
        if method.key == key:
            return method.value
    raise KeyError(key)


def usage(out: TextIO | None = None) -> None:
    """Write usage information to ``out`` (standard output by default)."""
    stream = sys.stdout if out is None else out
    stream.write("Usage: keuka [OPTIONS] [--] hostname\n\nOPTIONS:\n")
    for option in OPTIONS:
        stream.write(f"{'':4}{option.alias}, {option.value:<22}{'':4}{option.desc:<24}\n")