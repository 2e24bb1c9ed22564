"""Address parsing, listener setup and daytime formatting shared by the demos."""

from __future__ import annotations

import socket
import time
from datetime import datetime
from typing import Any

DAYTIME_PORT = 13
MAXLINE = 1024
LISTENQ = 2

_SUPPORTED_FAMILIES = (socket.AF_INET, socket.AF_INET6)
_WILDCARD = {socket.AF_INET: "0.0.0.0", socket.AF_INET6: "::"}


def _check_family(family: int) -> None:
    if family not in _SUPPORTED_FAMILIES:
        raise ValueError(f"unsupported address family: {family!r}")


def parse_address(text: str, family: int = socket.AF_INET6) -> str:
    """Validate a numeric address for ``family`` and return its canonical text.

    Raises ValueError when the text is not a valid address of that family.
    """
    _check_family(family)
    try:
        packed = socket.inet_pton(family, text)
    except (OSError, ValueError) as exc:
        raise ValueError(f"invalid address {text!r} for this address family") from exc
    return socket.inet_ntop(family, packed)


def daytime_line(when: float | datetime | None = None) -> str:
    """Return the daytime reply: a 24-character ctime string followed by CRLF.

    ``when`` is a POSIX timestamp (shown in local time), a datetime, or None
    for the current time.
    """
    if when is None:
        stamp = time.ctime()
    elif isinstance(when, datetime):
        stamp = when.ctime()
    else:
        stamp = time.ctime(when)
    return f"{stamp[:24]}\r\n"


def create_listener(
    host: str | None = None,
    port: int = DAYTIME_PORT,
    family: int = socket.AF_INET6,
    backlog: int = LISTENQ,
) -> socket.socket:
    """Create a TCP socket bound to ``host``:``port`` and listening.

    ``host`` of None binds the wildcard address. An invalid host raises
    ValueError; bind and listen failures raise OSError.
    """
    _check_family(family)
    address = _WILDCARD[family] if host is None else parse_address(host, family)
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.bind((address, port))
        sock.listen(backlog)
    except OSError:
        sock.close()
        raise
    return sock


def format_peer(address: Any) -> str:
    """Return the numeric host part of a peer address as returned by accept()."""
    host = address[0] if isinstance(address, tuple) else address
    if isinstance(host, bytes):
        host = host.decode("utf-8", "replace")
    return str(host).split("%", 1)[0]