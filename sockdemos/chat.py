"""Line chat over TCP: clients send typed messages, the server prints them."""

from __future__ import annotations

import socket
import sys
from collections.abc import Iterable, Iterator, Sequence
from typing import TextIO

from sockdemos.common import LISTENQ
from sockdemos.daytime import (
    _accept_clients,
    _connect_or_report,
    _network_parser,
    _reason,
    _receive,
    _run_server,
)

PROMPT = "Enter message: "


def receive_messages(conn: socket.socket) -> Iterator[str]:
    """Yield the text of each chunk read from ``conn`` until the peer closes.

    The connection is left open; read failures raise OSError.
    """
    return _receive(conn)


def serve_forever(
    listener: socket.socket,
    out: TextIO | None = None,
    max_clients: int | None = None,
) -> int:
    """Accept clients one at a time and print what each sends.

    Returns the number of clients handled; runs without end when
    ``max_clients`` is None. Accept and read errors go to stderr.
    """
    served = 0
    for conn in _accept_clients(listener, max_clients, out):
        target = sys.stdout if out is None else out
        with conn:
            try:
                for message in receive_messages(conn):
                    print(f"Received: {message}", file=target, flush=True)
            except OSError as exc:
                print(f"read error: {_reason(exc)}", file=sys.stderr)
        served += 1
    return served


def send_messages(
    sock: socket.socket,
    lines: Iterable[str],
    prompt_out: TextIO | None = None,
) -> int:
    """Prompt before each line taken from ``lines`` and send it on ``sock``.

    The prompt is written before every read, including the one that finds
    the input exhausted. Returns the number of lines sent; write failures
    raise OSError.
    """
    target = sys.stdout if prompt_out is None else prompt_out
    source = iter(lines)
    sent = 0
    while True:
        target.write(PROMPT)
        target.flush()
        try:
            line = next(source)
        except StopIteration:
            return sent
        sock.sendall(line.encode("utf-8"))
        sent += 1


def server_main(argv: Sequence[str] | None = None) -> int:
    """Run the chat server until interrupted."""
    parser = _network_parser("TCP chat server", ipv4=False)
    parser.add_argument("--host", default=None, help="numeric IPv4 address to bind")
    args = parser.parse_args(argv)
    return _run_server(
        args.host,
        args.port,
        socket.AF_INET,
        LISTENQ,
        lambda listener: serve_forever(listener, None, None),
    )


def client_main(argv: Sequence[str] | None = None) -> int:
    """Send lines typed on stdin to the chat server at the given address."""
    parser = _network_parser("TCP chat client", ipv4=False)
    parser.add_argument("address", help="numeric IPv4 address of the server")
    args = parser.parse_args(argv)

    sock = _connect_or_report(args.address, args.port, socket.AF_INET)
    if sock is None:
        return 1

    with sock:
        try:
            send_messages(sock, iter(sys.stdin.readline, ""), sys.stdout)
        except OSError as exc:
            print(f"write error: {_reason(exc)}", file=sys.stderr)
            return 1
        except KeyboardInterrupt:
            pass
    return 0