"""Text rendering of peer certificates and certificate chains."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed448, ed25519, x448, x25519

OUTBOUND_INDICATOR = "-->"
INBOUND_INDICATOR = "<--"
NEUTRAL_INDICATOR = "---"

_SERIAL_BYTES_PER_LINE = 35
_CHAIN_INDENT = " " * 7
_CHAIN_VALIDITY_INDENT = " " * 11
_SINGLE_VALIDITY_INDENT = " " * 4

_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_ATTRIBUTE_NAMES = {
    "2.5.4.3": "CN",
    "2.5.4.4": "SN",
    "2.5.4.5": "serialNumber",
    "2.5.4.6": "C",
    "2.5.4.7": "L",
    "2.5.4.8": "ST",
    "2.5.4.9": "street",
    "2.5.4.10": "O",
    "2.5.4.11": "OU",
    "2.5.4.12": "title",
    "2.5.4.15": "businessCategory",
    "2.5.4.17": "postalCode",
    "2.5.4.42": "GN",
    "2.5.4.43": "initials",
    "2.5.4.44": "generationQualifier",
    "2.5.4.45": "x500UniqueIdentifier",
    "2.5.4.46": "dnQualifier",
    "2.5.4.65": "pseudonym",
    "2.5.4.97": "organizationIdentifier",
    "0.9.2342.19200300.100.1.1": "UID",
    "0.9.2342.19200300.100.1.25": "DC",
    "1.2.840.113549.1.9.1": "emailAddress",
    "1.3.6.1.4.1.311.60.2.1.1": "jurisdictionL",
    "1.3.6.1.4.1.311.60.2.1.2": "jurisdictionST",
    "1.3.6.1.4.1.311.60.2.1.3": "jurisdictionC",
}

_SIGNATURE_NAMES = {
    "1.2.840.113549.1.1.4": "md5WithRSAEncryption",
    "1.2.840.113549.1.1.5": "sha1WithRSAEncryption",
    "1.2.840.113549.1.1.10": "rsassaPss",
    "1.2.840.113549.1.1.11": "sha256WithRSAEncryption",
    "1.2.840.113549.1.1.12": "sha384WithRSAEncryption",
    "1.2.840.113549.1.1.13": "sha512WithRSAEncryption",
    "1.2.840.113549.1.1.14": "sha224WithRSAEncryption",
    "1.2.840.10045.4.1": "ecdsa-with-SHA1",
    "1.2.840.10045.4.3.1": "ecdsa-with-SHA224",
    "1.2.840.10045.4.3.2": "ecdsa-with-SHA256",
    "1.2.840.10045.4.3.3": "ecdsa-with-SHA384",
    "1.2.840.10045.4.3.4": "ecdsa-with-SHA512",
    "1.2.840.10040.4.3": "dsaWithSHA1",
    "2.16.840.1.101.3.4.3.1": "dsa_with_SHA224",
    "2.16.840.1.101.3.4.3.2": "dsa_with_SHA256",
    "1.3.101.112": "ED25519",
    "1.3.101.113": "ED448",
}


class NameSeparator(NamedTuple):
    """Separators between RDNs and between attributes of one RDN."""

    between: str
    within: str


SEP_COMMA_PLUS = NameSeparator(",", "+")
SEP_CPLUS_SPC = NameSeparator(", ", " + ")


@dataclass(frozen=True)
class ReportOptions:
    """Which certificate fields to show."""

    bits: bool = False
    issuer: bool = False
    serial: bool = False
    signature_algorithm: bool = False
    subject: bool = False
    validity: bool = False


def _attribute_text(attribute: x509.NameAttribute) -> str:
    oid = attribute.oid.dotted_string
    label = _ATTRIBUTE_NAMES.get(oid, oid)
    value = attribute.value
    text = value if isinstance(value, str) else bytes(value).hex()
    return f"{label}={text}"


def format_name(name: x509.Name, separator: NameSeparator = SEP_CPLUS_SPC) -> str:
    """Render a distinguished name in certificate order."""
    return separator.between.join(
        separator.within.join(_attribute_text(attribute) for attribute in rdn)
        for rdn in name.rdns
    )


def _format_serial(number: int) -> str:
    sign = "-" if number < 0 else ""
    magnitude = abs(number)
    data = magnitude.to_bytes((magnitude.bit_length() + 7) // 8, "big")
    if not data:
        return "00"
    lines = (
        bytes(chunk).hex().upper()
        for chunk in itertools.batched(data, _SERIAL_BYTES_PER_LINE)
    )
    return sign + "\\\n".join(lines)


def _key_bits(cert: x509.Certificate) -> int:
    key = cert.public_key()
    if isinstance(key, (ed25519.Ed25519PublicKey, x25519.X25519PublicKey)):
        return 253
    if isinstance(key, ed448.Ed448PublicKey):
        return 456
    if isinstance(key, x448.X448PublicKey):
        return 448
    return getattr(key, "key_size", 0) or 0


def _signature_name(cert: x509.Certificate) -> str:
    oid = cert.signature_algorithm_oid.dotted_string
    return _SIGNATURE_NAMES.get(oid, oid)


def _format_time(moment: datetime) -> str:
    return (
        f"{_MONTHS[moment.month - 1]} {moment.day:2d} "
        f"{moment:%H:%M:%S} {moment.year} GMT"
    )


def _validity(cert: x509.Certificate, indent: str) -> str:
    return (
        f"--- Validity:\n"
        f"{indent}--- Not Before: {_format_time(cert.not_valid_before_utc)}\n"
        f"{indent}--- Not After: {_format_time(cert.not_valid_after_utc)}"
    )


def _fields(
    cert: x509.Certificate,
    options: ReportOptions,
    subject_separator: NameSeparator,
    validity_indent: str,
) -> list[str]:
    fields = []
    if options.subject:
        fields.append(f"--- Subject: {format_name(cert.subject, subject_separator)}")
    if options.issuer:
        fields.append(f"--- Issuer: {format_name(cert.issuer, SEP_CPLUS_SPC)}")
    if options.bits:
        fields.append(f"--- Bits: {_key_bits(cert)}")
    if options.serial:
        fields.append(f"--- Serial: {_format_serial(cert.serial_number)}")
    if options.signature_algorithm:
        fields.append(f"--- Signature Algorithm: {_signature_name(cert)}")
    if options.validity:
        fields.append(_validity(cert, validity_indent))
    return fields


def format_certificate(cert: x509.Certificate, options: ReportOptions) -> str:
    """Render the selected fields of a single certificate, one per line."""
    fields = _fields(cert, options, SEP_COMMA_PLUS, _SINGLE_VALIDITY_INDENT)
    return "".join(f"{field}\n" for field in fields)


def format_chain(certs: list[x509.Certificate], options: ReportOptions) -> str:
    """Render a certificate chain, one numbered entry per certificate."""
    entries = ["--- Certificate Chain:\n"]
    for index, cert in enumerate(certs):
        fields = _fields(cert, options, SEP_CPLUS_SPC, _CHAIN_VALIDITY_INDENT)
        body = f"\n{_CHAIN_INDENT}".join(fields) if fields else "[redacted]"
        entries.append(f"{index:5d}: {body}\n")
    return "".join(entries)


def format_raw(certs: list[x509.Certificate]) -> str:
    """Render the last certificate's public key and every certificate as PEM."""
    key_pem = ""
    if certs:
        key_pem = (
            certs[-1]
            .public_key()
            .public_bytes(
                serialization.Encoding.PEM,
                serialization.PublicFormat.SubjectPublicKeyInfo,
            )
            .decode("ascii")
        )
    cert_pems = "".join(
        cert.public_bytes(serialization.Encoding.PEM).decode("ascii") + "\n"
        for cert in certs
    )
    return f"\n{key_pem}\n{cert_pems}"