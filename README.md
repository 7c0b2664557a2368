# keuka

A small command-line tool that connects to a host over TLS and reports what
the handshake produced: the negotiated protocol version and cipher, and details
of the peer certificate or of the whole certificate chain the peer sent.

## Installation

```
pip install .
```

This installs the `keuka` command.

## Usage

```
keuka [OPTIONS] [--] hostname
```

The last argument is the host to inspect. It is reached over IPv4 on port 443
unless a port is given as `hostname:port`. Hostnames longer than 256
characters are refused.

| Option | Alias | Meaning |
| --- | --- | --- |
| `--bits` | `-b` | Show public key length, in bits. |
| `--chain` | `-c` | Show peer certificate chain. |
| `--cipher` | `-C` | Show cipher negotiated during handshake. |
| `--issuer` | `-i` | Show certificate issuer. |
| `--method` | `-m` | Show method negotiated during handshake. |
| `--no-sni` | `-N` | Disable SNI support. |
| `--quiet` | `-q` | Suppress timing and progress output. |
| `--raw` | `-r` | Show raw certificate contents. |
| `--serial` | `-S` | Show certificate serial number. |
| `--signature-algorithm` | `-A` | Show certificate signature algorithm. |
| `--subject` | `-s` | Show certificate subject. |
| `--validity` | `-V` | Show certificate Not Before/Not After validity range. |
| `--help` | `-h` | Show help information. |
| `--version` | `-v` | Show version number. |

Short options may be combined. With `--chain`, each certificate is listed
under its position in the chain; a certificate for which no field was asked
is shown as `[redacted]`. With `--raw`, the public key and the certificates
are printed in PEM form.

### Examples

```
keuka --chain --cipher --raw --serial example.com
keuka --issuer --method --signature-algorithm -- example.com
keuka -ACim example.com
keuka -qCA www.example.com
```

Unless `--quiet` is given, each step of the connection is printed with the
elapsed processor time, marked `-->` for outbound steps, `<--` for replies and
`---` for local work. The command exits with status 0 on success and 1 on any
error.

## Using it from Python

The building blocks can be used directly:

```python
from keuka.cli import fetch_certificates
from keuka.report import ReportOptions, format_certificate, format_chain

handshake = fetch_certificates("example.com", sni=True)
print(handshake.method, handshake.cipher)
print(format_chain(list(handshake.chain), ReportOptions(subject=True, issuer=True)))
if handshake.peer is not None:
    print(format_certificate(handshake.peer, ReportOptions(validity=True)))
```

- `keuka.cli.parse_args` turns a list of arguments into a `Settings` object,
  raising `UsageError` for a bad command line; `keuka.cli.main` runs the whole
  command and returns its exit status.
- `keuka.sock.parse_url` splits a `scheme://host[:port]` URL into an
  `Endpoint`; `keuka.sock.make_socket` opens a TCP connection to it, raising
  `ResolveError` or `ConnectError`.
- `keuka.report` renders certificates with `format_certificate`,
  `format_chain`, `format_raw` and `format_name`.
- `keuka.options.usage` writes the help text to any text stream, and
  `keuka.options.get_bitmask_from_key` maps a protocol method name such as
  `TLSv1_2` to its bitmask.
- `keuka.utils` holds small path and sequence helpers.

## What it does not do

keuka does not verify certificates: the handshake is made without checking
the chain or the hostname, and the report shows what the peer sent. It only
connects over IPv4.

## Running the tests

```
pip install .[test]
pytest
```