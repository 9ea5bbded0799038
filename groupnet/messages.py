"""A one-shot exchange of text messages between a receiver and a sender."""

from __future__ import annotations

import argparse
import socket
import sys
from collections.abc import Sequence
from typing import TextIO

DEFAULT_PORT = 8080
BUFFER_SIZE = 1024
DEFAULT_REPLY = "Message from receiver"
DEFAULT_MESSAGE = "Message from the client\n"


def _text(data: bytes) -> str:
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def receive_once(
    host: str = "",
    port: int = DEFAULT_PORT,
    reply: str = DEFAULT_REPLY,
    out: TextIO | None = None,
) -> str:
    """Accept one connection, read its message, answer with ``reply`` and return the message."""
    out = sys.stdout if out is None else out
    with socket.create_server((host, port), backlog=3) as server:
        print("Server active", file=out, flush=True)
        conn, _ = server.accept()
        with conn:
            message = _text(conn.recv(BUFFER_SIZE))
            print(f"Message read is {message}", file=out, flush=True)
            conn.sendall(reply.encode("utf-8"))
    return message


def send_message(host: str, port: int, message: str = DEFAULT_MESSAGE) -> str:
    """Send ``message`` to the receiver and return its answer."""
    with socket.create_connection((host, port)) as sock:
        sock.sendall(message.encode("utf-8"))
        return _text(sock.recv(BUFFER_SIZE))


def receiver_main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Receive one message and answer it.")
    parser.add_argument("--host", default="", help="address to bind (default: all)")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    parser.add_argument("--reply", default=DEFAULT_REPLY, help="answer to send back")
    args = parser.parse_args(argv)
    try:
        receive_once(args.host, args.port, args.reply)
    except OSError as exc:
        print(f"receiver: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


def sender_main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Send one message to the receiver.")
    parser.add_argument("--host", default="127.0.0.1", help="receiver address")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="receiver port")
    parser.add_argument("--message", default=DEFAULT_MESSAGE, help="message to send")
    args = parser.parse_args(argv)
    try:
        answer = send_message(args.host, args.port, args.message)
    except OSError as exc:
        print(f"sender: {exc}", file=sys.stderr)
        return 1
    print(f"Message received by client is {answer}", flush=True)
    return 0


if __name__ == "__main__":
    sys.exit(receiver_main())