import io
import socket
import threading
from contextlib import contextmanager
from datetime import datetime

import pytest

from sockdemos import nickname
from sockdemos.common import create_listener, daytime_line

FIXED = datetime(2021, 3, 4, 5, 6, 7)


def _now():
    return FIXED


@contextmanager
def _serving(out, max_clients):
    listener = create_listener("127.0.0.1", 0, socket.AF_INET, 4)
    with listener:
        thread = threading.Thread(
            target=nickname.serve_forever,
            args=(listener, _now, out, max_clients),
            daemon=True,
        )
        thread.start()
        yield listener.getsockname()[1]
        thread.join(5)
    assert not thread.is_alive()


@pytest.mark.parametrize(
    "payload, expected",
    [(b"alice\n", "alice"), (b"bob", "bob"), (None, None)],
)
def test_read_nickname(payload, expected):
    left, right = socket.socketpair()
    with left, right:
        if payload is None:
            left.shutdown(socket.SHUT_WR)
        else:
            left.sendall(payload)
        assert nickname.read_nickname(right) == expected


@pytest.mark.parametrize(
    "payload, expected_name, expected_out",
    [
        (b"alice\n", "alice", "Received nickname: alice\n"),
        (None, None, ""),
    ],
)
def test_serve_client_replies_with_time_and_closes(
    payload, expected_name, expected_out, capsys
):
    left, right = socket.socketpair()
    out = io.StringIO()
    with left:
        if payload is None:
            left.shutdown(socket.SHUT_WR)
        else:
            left.sendall(payload)
        name, line = nickname.serve_client(right, _now, out)
        reply = left.recv(1024).decode("ascii")
        assert left.recv(1024) == b""
    assert name == expected_name
    assert line == daytime_line(FIXED)
    assert reply == line
    assert reply.endswith("\r\n")
    assert right.fileno() == -1
    assert out.getvalue() == expected_out
    assert ("read error" in capsys.readouterr().err) == (payload is None)


@pytest.mark.parametrize("names", [["carol"], ["one", "two"]])
def test_exchange_round_trip(names):
    out = io.StringIO()
    with _serving(out, len(names)) as port:
        replies = [
            nickname.exchange("127.0.0.1", port, f"{name}\n", socket.AF_INET)
            for name in names
        ]
    assert replies == [daytime_line(FIXED)] * len(names)
    text = out.getvalue()
    assert text.startswith("Connection from 127.0.0.1\n")
    assert text.count("Connection from") == len(names)
    for name in names:
        assert f"Received nickname: {name}\n" in text


def test_exchange_rejects_invalid_address():
    with pytest.raises(ValueError):
        nickname.exchange("not-an-address", 13, "x\n", socket.AF_INET6)


def test_client_main_prints_prompt_and_time(monkeypatch, capsys):
    out = io.StringIO()
    monkeypatch.setattr("sys.stdin", io.StringIO("dave\n"))
    with _serving(out, 1) as port:
        code = nickname.client_main(["127.0.0.1", "--port", str(port), "-4"])
    assert code == 0
    printed = capsys.readouterr().out
    assert printed.startswith(nickname.PROMPT)
    assert daytime_line(FIXED)[:24] in printed
    assert "Received nickname: dave\n" in out.getvalue()


@pytest.mark.parametrize(
    "main, stream, message",
    [
        (nickname.client_main, "err", "inet_pton error for bogus"),
        (nickname.server_main, "out", "ERROR: Address format error"),
    ],
)
def test_mains_reject_bad_address(main, stream, message, capsys):
    assert main(["bogus"]) == 1
    assert message in getattr(capsys.readouterr(), stream)