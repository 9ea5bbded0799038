"""Threaded TCP server that answers group tracker commands."""

from __future__ import annotations

import argparse
import socketserver
import sys
from collections.abc import Sequence

from .commands import GroupRegistry, Session

DEFAULT_PORT = 8081
BUFFER_SIZE = 1024


def _decode(data: bytes) -> str:
    """Turn a received chunk into text, stopping at the first NUL byte."""
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


class _CommandHandler(socketserver.BaseRequestHandler):
    """Serves one connection: each received chunk is one command."""

    server: CommandServer

    def handle(self) -> None:
        registry = self.server.registry
        session = Session()
        try:
            while True:
                data = self.request.recv(BUFFER_SIZE)
                if not data:
                    break
                reply = registry.handle_line(_decode(data), session)
                self.request.sendall(reply.encode("utf-8"))
        except OSError:
            pass
        finally:
            registry.end_session(session)
        if self.server.verbose:
            print("Client handled successfully..", flush=True)


class CommandServer(socketserver.ThreadingTCPServer):
    """A TCP server that runs every connection in its own thread against ``registry``."""

    daemon_threads = True
    verbose = True

    def __init__(self, address: tuple[str, int], registry: GroupRegistry) -> None:
        self.registry = registry
        super().__init__(address, _CommandHandler)

    def process_request(self, request, client_address) -> None:
        if self.verbose:
            print("New client connected...", flush=True)
        super().process_request(request, client_address)


def serve(host: str = "", port: int = DEFAULT_PORT, registry: GroupRegistry | None = None) -> None:
    """Listen on ``host``:``port`` and serve clients until interrupted."""
    if registry is None:
        registry = GroupRegistry()
    with CommandServer((host, port), registry) as server:
        print("Server is listening", flush=True)
        server.serve_forever()


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the group command server.")
    parser.add_argument("--host", default="", help="address to bind (default: all)")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    args = parser.parse_args(argv)
    try:
        serve(args.host, args.port)
    except OSError as exc:
        print(f"bind failed: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())