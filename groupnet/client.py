"""Interactive line client for the group command server."""

from __future__ import annotations

import argparse
import socket
import sys
from collections.abc import Sequence
from typing import TextIO

from .server import BUFFER_SIZE, DEFAULT_PORT

GREETING = "Connected to server...Type commands (e.g., 'create_user alice secret')\n"
PROMPT = "> "


def run_client(
    host: str = "127.0.0.1",
    port: int = DEFAULT_PORT,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Send each input line as a command and print the server's reply until ``exit``."""
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    with socket.create_connection((host, port)) as sock:
        stdout.write(GREETING)
        while True:
            stdout.write(PROMPT)
            stdout.flush()
            line = stdin.readline()
            if not line:
                break
            command = line.rstrip("\r\n")
            if command == "exit":
                break
            if not command:
                continue
            sock.sendall(command.encode("utf-8"))
            reply = sock.recv(BUFFER_SIZE)
            if not reply:
                stdout.write("Server closed the connection\n")
                break
            text = reply.split(b"\0", 1)[0].decode("utf-8", errors="replace")
            stdout.write(f"Message from server is {text}\n")
        stdout.flush()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Talk to the group command server.")
    parser.add_argument("--host", default="127.0.0.1", help="server address")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="server port")
    args = parser.parse_args(argv)
    try:
        return run_client(args.host, args.port)
    except OSError as exc:
        print(f"connection failed: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())