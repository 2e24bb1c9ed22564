"""TCP daytime service: a server that sends the time and a client that prints it."""

from __future__ import annotations

import argparse
import codecs
import socket
import sys
import time
from collections.abc import Callable, Iterator, Sequence
from datetime import datetime
from typing import TextIO

from sockdemos.common import (
    DAYTIME_PORT,
    LISTENQ,
    MAXLINE,
    create_listener,
    daytime_line,
    format_peer,
    parse_address,
)

Clock = Callable[[], "float | datetime"]


def _reason(exc: OSError) -> str:
    return exc.strerror or str(exc)


def _network_parser(description: str, ipv4: bool = True) -> argparse.ArgumentParser:
    """Build a parser with the port option and, if asked, the IPv4 switch."""
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--port", type=int, default=DAYTIME_PORT)
    if ipv4:
        parser.add_argument("-4", "--ipv4", action="store_true", help="use IPv4")
    return parser


def _family(args: argparse.Namespace) -> int:
    return socket.AF_INET if args.ipv4 else socket.AF_INET6


def _accept_clients(
    listener: socket.socket,
    max_clients: int | None,
    out: TextIO | None = None,
) -> Iterator[socket.socket]:
    """Yield accepted connections, announcing each peer on ``out``.

    Stops after ``max_clients`` connections, or never when it is None.
    Accept errors go to stderr unless the listener itself was closed.
    """
    served = 0
    while max_clients is None or served < max_clients:
        try:
            conn, peer = listener.accept()
        except OSError as exc:
            if listener.fileno() == -1:
                raise
            print(f"accept error : {_reason(exc)}", file=sys.stderr)
            continue
        target = sys.stdout if out is None else out
        print(f"Connection from {format_peer(peer)}", file=target, flush=True)
        yield conn
        served += 1


def _run_server(
    host: str | None,
    port: int,
    family: int,
    backlog: int,
    serve: Callable[[socket.socket], object],
    address_error_out: TextIO | None = None,
    banner: str | None = None,
) -> int:
    """Open a listener and serve on it until interrupted; return an exit code."""
    try:
        listener = create_listener(host, port, family, backlog)
    except ValueError:
        target = sys.stderr if address_error_out is None else address_error_out
        print("ERROR: Address format error", file=target)
        return 1
    except OSError as exc:
        print(f"bind error : {_reason(exc)}", file=sys.stderr)
        return 1

    if banner is not None:
        print(banner, file=sys.stderr)
    with listener:
        try:
            serve(listener)
        except KeyboardInterrupt:
            pass
    return 0


def _connect(
    host: str, port: int, family: int, timeout: float | None
) -> socket.socket:
    address = parse_address(host, family)
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.settimeout(timeout)
        sock.connect((address, port))
    except OSError:
        sock.close()
        raise
    return sock


def _connect_or_report(host: str, port: int, family: int) -> socket.socket | None:
    """Connect, or report the failure on stderr and return None."""
    try:
        return _connect(host, port, family, None)
    except ValueError:
        print("ERROR: Invalid address family ", file=sys.stderr)
    except OSError as exc:
        print(f"connect error : {_reason(exc)} ", file=sys.stderr)
    return None


def _receive(sock: socket.socket) -> Iterator[str]:
    decoder = codecs.getincrementaldecoder("utf-8")("replace")
    while chunk := sock.recv(MAXLINE):
        text = decoder.decode(chunk)
        if text:
            yield text
    tail = decoder.decode(b"", final=True)
    if tail:
        yield tail


def _copy_to_stdout(sock: socket.socket) -> None:
    for text in _receive(sock):
        sys.stdout.write(text)


def serve_client(conn: socket.socket, now: Clock = time.time) -> str:
    """Send the daytime line to ``conn``, close it and return the line sent.

    Raises OSError when the write fails; the connection is closed either way.
    """
    try:
        line = daytime_line(now())
        conn.sendall(line.encode("ascii"))
    finally:
        conn.close()
    return line


def serve_forever(
    listener: socket.socket,
    now: Clock = time.time,
    max_clients: int | None = None,
) -> int:
    """Accept clients and send each the time; return how many were served.

    Runs without end when ``max_clients`` is None. Accept and write errors
    are reported on stderr and the loop goes on.
    """
    served = 0
    for conn in _accept_clients(listener, max_clients):
        try:
            serve_client(conn, now)
        except OSError as exc:
            print(f"write error : {_reason(exc)}", file=sys.stderr)
        served += 1
    return served


def fetch(
    host: str,
    port: int = DAYTIME_PORT,
    family: int = socket.AF_INET6,
    timeout: float | None = None,
) -> str:
    """Connect to a daytime server and return everything it sends.

    Raises ValueError for an invalid address and OSError for network errors.
    """
    with _connect(host, port, family, timeout) as sock:
        return "".join(_receive(sock))


def server_main(argv: Sequence[str] | None = None) -> int:
    """Run the daytime server until interrupted."""
    parser = _network_parser("TCP daytime server")
    parser.add_argument("--host", default=None, help="numeric address to bind")
    args = parser.parse_args(argv)
    return _run_server(
        args.host,
        args.port,
        _family(args),
        LISTENQ,
        lambda listener: serve_forever(listener, time.time, None),
    )


def client_main(argv: Sequence[str] | None = None) -> int:
    """Print the time reported by the daytime server at the given address."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print("usage: daytime-client <IPaddress> ", file=sys.stderr)
        return 1

    sock = _connect_or_report(args[0], DAYTIME_PORT, socket.AF_INET6)
    if sock is None:
        return 1

    with sock:
        try:
            _copy_to_stdout(sock)
        except OSError as exc:
            print(f"read error : {_reason(exc)}", file=sys.stderr)

    print("OK", file=sys.stderr)
    sys.stdout.flush()
    sys.stdin.read(1)
    return 0