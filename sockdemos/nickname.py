"""Daytime service that first asks the client for a nickname."""

from __future__ import annotations

import socket
import sys
import time
from collections.abc import Sequence
from typing import TextIO

from sockdemos.common import MAXLINE, daytime_line
from sockdemos.daytime import (
    Clock,
    _accept_clients,
    _connect,
    _copy_to_stdout,
    _family,
    _network_parser,
    _reason,
    _receive,
    _run_server,
)

LISTENQ = 4
PROMPT = "Enter your nickname: "


def read_nickname(conn: socket.socket) -> str | None:
    """Read one chunk from ``conn`` and return it up to the first newline.

    Returns None when the peer closed without sending anything; read
    failures raise OSError.
    """
    data = conn.recv(MAXLINE)
    if not data:
        return None
    text = data.decode("utf-8", "replace").split("\0", 1)[0]
    return text.partition("\n")[0]


def serve_client(
    conn: socket.socket,
    now: Clock = time.time,
    out: TextIO | None = None,
) -> tuple[str | None, str]:
    """Read a nickname, send the daytime line and close ``conn``.

    Returns the nickname (None if none was read) and the line sent. Write
    failures raise OSError; the connection is closed either way.
    """
    target = sys.stdout if out is None else out
    try:
        try:
            nickname = read_nickname(conn)
        except OSError as exc:
            nickname = None
            print(f"read error: {_reason(exc)}", file=sys.stderr)
        else:
            if nickname is None:
                print("read error: connection closed", file=sys.stderr)
            else:
                print(f"Received nickname: {nickname}", file=target, flush=True)
        line = daytime_line(now())
        conn.sendall(line.encode("ascii"))
    finally:
        conn.close()
    return nickname, line


def serve_forever(
    listener: socket.socket,
    now: Clock = time.time,
    out: TextIO | None = None,
    max_clients: int | None = None,
) -> int:
    """Accept clients, greet each with the time, and return how many were served.

    Runs without end when ``max_clients`` is None. Accept and write errors
    are reported on stderr and the loop goes on.
    """
    served = 0
    for conn in _accept_clients(listener, max_clients, out):
        try:
            serve_client(conn, now, out)
        except OSError as exc:
            print(f"write error : {_reason(exc)}", file=sys.stderr)
        served += 1
    return served


def exchange(
    host: str,
    port: int,
    nickname: str,
    family: int = socket.AF_INET6,
) -> str:
    """Send ``nickname`` to the server and return everything it replies.

    Raises ValueError for an invalid address and OSError for network errors.
    """
    with _connect(host, port, family, None) as sock:
        sock.sendall(nickname.encode("utf-8"))
        return "".join(_receive(sock))


def server_main(argv: Sequence[str] | None = None) -> int:
    """Run the nickname server until interrupted."""
    parser = _network_parser("nickname daytime server")
    parser.add_argument("address", nargs="?", default=None,
                        help="numeric address to bind")
    args = parser.parse_args(argv)
    return _run_server(
        args.address,
        args.port,
        _family(args),
        LISTENQ,
        lambda listener: serve_forever(listener, time.time, None, None),
        address_error_out=sys.stdout,
        banner="Waiting for clients ... ",
    )


def client_main(argv: Sequence[str] | None = None) -> int:
    """Ask for a nickname, send it to the server and print the reply."""
    parser = _network_parser("nickname daytime client")
    parser.add_argument("address", help="numeric address of the server")
    args = parser.parse_args(argv)

    try:
        sock = _connect(args.address, args.port, _family(args), None)
    except ValueError:
        print(f"inet_pton error for {args.address}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"connect error: {_reason(exc)}", file=sys.stderr)
        return 1

    with sock:
        sys.stdout.write(PROMPT)
        sys.stdout.flush()
        nickname = sys.stdin.readline()
        try:
            sock.sendall(nickname.encode("utf-8"))
        except OSError as exc:
            print(f"write error: {_reason(exc)}", file=sys.stderr)
            return 1
        try:
            _copy_to_stdout(sock)
        except OSError:
            print("read error", file=sys.stderr)
            return 1
    sys.stdout.flush()
    return 0