"""Two-number adder over TCP: a client sends two integers, the server returns their sum."""

from __future__ import annotations

import argparse
import enum
import socket
import struct
import sys
import threading
from collections.abc import Sequence
from typing import TextIO

DEFAULT_PORT = 8080
ACK_SIZE = 1024
ACK_MESSAGE = "Sum is received\n"

_PAIR = struct.Struct("<ii")
_SINGLE = struct.Struct("<i")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


class ServeMode(enum.Enum):
    """How the adder server treats incoming connections."""

    ONCE = "once"
    SEQUENTIAL = "sequential"
    CONCURRENT = "concurrent"


def _check_int(value: int) -> int:
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"{value} does not fit in a 32-bit signed integer")
    return value


def _wrap(value: int) -> int:
    """Reduce ``value`` to a 32-bit signed integer, as the wire format holds."""
    return (value - _INT_MIN) % 2**32 + _INT_MIN


def pack_numbers(a: int, b: int) -> bytes:
    """Encode two 32-bit signed integers as they are sent to the server."""
    return _PAIR.pack(_check_int(a), _check_int(b))


def unpack_numbers(data: bytes) -> tuple[int, int]:
    """Decode the two integers of a request."""
    if len(data) != _PAIR.size:
        raise ValueError(f"expected {_PAIR.size} bytes, got {len(data)}")
    a, b = _PAIR.unpack(data)
    return a, b


def pack_sum(value: int) -> bytes:
    """Encode a sum as the server sends it back."""
    return _SINGLE.pack(_check_int(value))


def unpack_sum(data: bytes) -> int:
    """Decode the sum sent back by the server."""
    if len(data) != _SINGLE.size:
        raise ValueError(f"expected {_SINGLE.size} bytes, got {len(data)}")
    (value,) = _SINGLE.unpack(data)
    return value


def _recv_exact(conn: socket.socket, size: int) -> bytes:
    chunks: list[bytes] = []
    remaining = size
    while remaining:
        chunk = conn.recv(remaining)
        if not chunk:
            raise ConnectionError("connection closed before the full message arrived")
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _text(data: bytes) -> str:
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def handle_connection(conn: socket.socket, out: TextIO | None = None) -> int:
    """Serve one adder request on ``conn`` and return the sum that was sent."""
    out = sys.stdout if out is None else out
    a, b = unpack_numbers(_recv_exact(conn, _PAIR.size))
    print(f"Numbers received are {a} {b}", file=out, flush=True)
    total = _wrap(a + b)
    conn.sendall(pack_sum(total))
    ack = _text(conn.recv(ACK_SIZE))
    print(f"Ack received is {ack}", file=out, flush=True)
    return total


def _serve_connection(conn: socket.socket, out: TextIO) -> None:
    with conn:
        try:
            handle_connection(conn, out)
        except (OSError, ValueError) as exc:
            print(f"Client failed: {exc}", file=out, flush=True)


def serve(
    host: str = "",
    port: int = DEFAULT_PORT,
    mode: ServeMode = ServeMode.ONCE,
    out: TextIO | None = None,
) -> None:
    """Listen on ``host``:``port`` and answer adder requests in the given mode.

    ``ONCE`` serves a single client and returns; ``SEQUENTIAL`` serves clients
    one after another and ``CONCURRENT`` serves each in its own thread, both
    until interrupted.
    """
    out = sys.stdout if out is None else out
    mode = ServeMode(mode)
    backlog = 3 if mode is ServeMode.ONCE else 5
    with socket.create_server((host, port), backlog=backlog) as server:
        print("Server is listening...", file=out, flush=True)
        if mode is ServeMode.ONCE:
            conn, _ = server.accept()
            with conn:
                handle_connection(conn, out)
            return
        while True:
            conn, _ = server.accept()
            if mode is ServeMode.SEQUENTIAL:
                print("Client connected..", file=out, flush=True)
                _serve_connection(conn, out)
            else:
                threading.Thread(
                    target=_serve_connection, args=(conn, out), daemon=True
                ).start()


def request_sum(host: str, port: int, a: int, b: int) -> int:
    """Ask the adder server at ``host``:``port`` for ``a + b``."""
    request = pack_numbers(a, b)
    with socket.create_connection((host, port)) as sock:
        sock.sendall(request)
        total = unpack_sum(_recv_exact(sock, _SINGLE.size))
        sock.sendall(ACK_MESSAGE.encode("utf-8"))
    return total


def _read_two_numbers(stream: TextIO) -> tuple[int, int]:
    words: list[str] = []
    while len(words) < 2:
        line = stream.readline()
        if not line:
            raise ValueError("expected two numbers")
        words.extend(line.split())
    return int(words[0]), int(words[1])


def server_main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the adder server.")
    parser.add_argument("--host", default="", help="address to bind (default: all)")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in ServeMode],
        default=ServeMode.ONCE.value,
        help="serve one client, clients in turn, or clients concurrently",
    )
    args = parser.parse_args(argv)
    try:
        serve(args.host, args.port, ServeMode(args.mode))
    except (OSError, ValueError) as exc:
        print(f"adder server: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


def client_main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Ask the adder server for a sum.")
    parser.add_argument("--host", default="127.0.0.1", help="server address")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="server port")
    args = parser.parse_args(argv)
    print("Enter two numbers to add", flush=True)
    try:
        a, b = _read_two_numbers(sys.stdin)
        total = request_sum(args.host, args.port, a, b)
    except (OSError, ValueError) as exc:
        print(f"adder client: {exc}", file=sys.stderr)
        return 1
    print(f"Sum received is {total}", flush=True)
    return 0


if __name__ == "__main__":
    sys.exit(server_main())