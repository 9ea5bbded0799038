"""A pair of trackers that answer group commands and replicate changes to each other."""

from __future__ import annotations

import socket
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .commands import GroupRegistry
from .server import CommandServer

USAGE = "Usage: tracker tracker_info.txt tracker_no"


@dataclass(frozen=True)
class TrackerConfig:
    """Where this tracker listens and where its peer tracker is."""

    number: int
    host: str
    port: int
    peer_host: str
    peer_port: int


def read_tracker_info(path: str | Path) -> list[tuple[str, int]]:
    """Read ``host port`` pairs from a tracker info file, stopping at the first bad entry."""
    words = Path(path).read_text().split()
    entries: list[tuple[str, int]] = []
    for host, port_text in zip(words[::2], words[1::2]):
        try:
            port = int(port_text)
        except ValueError:
            break
        entries.append((host, port))
    return entries


def load_config(path: str | Path, tracker_no: int) -> TrackerConfig:
    """Build the configuration of tracker ``tracker_no`` (1 or 2) from the info file."""
    entries = read_tracker_info(path)
    if not 1 <= tracker_no <= len(entries):
        raise ValueError(f"tracker {tracker_no} is not listed in {path}")
    peer_no = 2 if tracker_no == 1 else 1
    if peer_no > len(entries):
        raise ValueError(f"peer tracker {peer_no} is not listed in {path}")
    host, port = entries[tracker_no - 1]
    peer_host, peer_port = entries[peer_no - 1]
    return TrackerConfig(tracker_no, host, port, peer_host, peer_port)


def send_to_peer(host: str, port: int, message: str) -> bool:
    """Deliver ``message`` to the peer tracker; return whether it could be sent."""
    try:
        with socket.create_connection((host, port), timeout=5) as sock:
            sock.sendall(message.encode("utf-8"))
    except OSError:
        return False
    return True


def build_registry(config: TrackerConfig) -> GroupRegistry:
    """Create a registry whose changes are forwarded to the configured peer."""

    def forward(message: str) -> None:
        send_to_peer(config.peer_host, config.peer_port, message)

    return GroupRegistry(on_change=forward)


class _TrackerServer(CommandServer):
    verbose = False


def run_tracker(config: TrackerConfig) -> None:
    """Listen on the configured port on all addresses and serve until interrupted."""
    with _TrackerServer(("", config.port), build_registry(config)) as server:
        print(f"[Tracker {config.number}] listening on {config.port}", flush=True)
        server.serve_forever()


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        print(USAGE, file=sys.stderr)
        return 1
    info_path, number_text = args
    try:
        config = load_config(info_path, int(number_text))
    except (OSError, ValueError) as exc:
        print(f"tracker: {exc}", file=sys.stderr)
        return 1
    try:
        run_tracker(config)
    except OSError as exc:
        print(f"tracker: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())