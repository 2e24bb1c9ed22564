# sockdemos

Three small TCP client/server pairs. By default all of them use port 13, the daytime port.

- **daytime**: the server sends the current local time to each client that connects, in
  the classic `ctime` form (for example `Thu Jan  1 00:00:00 1970`) followed by `\r\n`,
  and then closes the connection. The client prints whatever it receives.
- **chat**: the client prompts with `Enter message: `, reads lines from standard input
  and sends each to the server. The server prints every message it receives, prefixed
  with `Received: `.
- **nickname**: the client asks for a nickname and sends it to the server. The server
  prints the nickname, replies with the time and closes the connection. The client
  prints the reply.

Each server prints `Connection from <address>` for every client it accepts.

## Installation

```
pip install .
```

## Commands

Port 13 is a privileged port on most systems, so the servers usually need extra rights
to bind to it.

```
daytime-server [--host ADDRESS] [--port PORT] [-4]
daytime-client ADDRESS

chat-server [--host ADDRESS] [--port PORT]
chat-client [--port PORT] ADDRESS

nickname-server [--port PORT] [-4] [ADDRESS]
nickname-client [--port PORT] [-4] ADDRESS
```

- Servers bind the wildcard address unless an address is given. The daytime and
  nickname programs use IPv6, or IPv4 with `-4`/`--ipv4`; the chat programs use IPv4.
- `daytime-client` always connects over IPv6 to port 13. After printing the reply it
  writes `OK` to standard error and waits for one character on standard input before
  exiting.
- A server given a malformed address prints `ERROR: Address format error` and exits
  with status 1; it also exits with status 1 when it cannot bind.
- A client exits with status 1 when the address is malformed or cannot be reached.
  `daytime-client` also exits with status 1 when the address is missing; the other
  clients report a missing address as a usage error.

## Library use

The pieces the commands use are importable as well:

```python
from sockdemos.common import daytime_line, parse_address
from sockdemos.daytime import fetch
from sockdemos.nickname import exchange

print(daytime_line())                    # e.g. 'Thu Jan  1 00:00:00 1970\r\n'
print(parse_address("::0001"))           # '::1'
print(fetch("::1", 13))                  # text sent by a daytime server
print(exchange("::1", 13, "alice\n"))    # reply from a nickname server
```

- `sockdemos.common`: `parse_address`, `daytime_line`, `create_listener` (opens a
  listening socket) and `format_peer`.
- `sockdemos.daytime`: `serve_client`, `serve_forever`, `fetch`.
- `sockdemos.chat`: `receive_messages`, `serve_forever`, `send_messages`.
- `sockdemos.nickname`: `read_nickname`, `serve_client`, `serve_forever`, `exchange`.

Each `serve_forever(..., max_clients=...)` can be stopped after a set number of clients,
and the daytime and nickname servers take a `now` callable for the clock. This is handy
in tests.

## Limitations

The servers handle one client at a time; a chat client holds the server until it
disconnects. There is no encryption, authentication or message history, and the chat
server does not relay messages between clients.

## Running the tests

```
pip install .[test]
pytest
```