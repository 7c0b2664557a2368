"""Inspect the TLS handshake and peer certificates of a remote host."""

__version__ = "1.0.6"

__all__ = ["__version__"]