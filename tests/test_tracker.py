import socket
import threading
import time

import pytest

from groupnet.commands import GroupRegistry, Session
from groupnet.server import CommandServer
from groupnet.tracker import (
    TrackerConfig,
    build_registry,
    load_config,
    main,
    read_tracker_info,
    send_to_peer,
)


@pytest.fixture
def info_file(tmp_path):
    path = tmp_path / "tracker_info.txt"
    path.write_text("127.0.0.1 5000\n127.0.0.1 5001\n")
    return path


def _read_all(conn):
    chunks = []
    while True:
        data = conn.recv(1024)
        if not data:
            return b"".join(chunks).decode()
        chunks.append(data)


def test_read_tracker_info(info_file):
    assert read_tracker_info(info_file) == [("127.0.0.1", 5000), ("127.0.0.1", 5001)]


def test_read_tracker_info_stops_at_bad_port(tmp_path):
    path = tmp_path / "info.txt"
    path.write_text("127.0.0.1 5000\nhost nope\n127.0.0.1 5001\n")
    assert read_tracker_info(path) == [("127.0.0.1", 5000)]


def test_load_config_picks_other_tracker_as_peer(info_file):
    first = load_config(info_file, 1)
    second = load_config(info_file, 2)
    assert (first.port, first.peer_port) == (5000, 5001)
    assert (second.port, second.peer_port) == (5001, 5000)
    assert second.number == 2


def test_load_config_rejects_unknown_tracker(info_file):
    with pytest.raises(ValueError):
        load_config(info_file, 3)


def test_send_to_peer_refused():
    with socket.create_server(("127.0.0.1", 0)) as probe:
        port = probe.getsockname()[1]
    assert send_to_peer("127.0.0.1", port, "SYNC x") is False


def test_send_to_peer_delivers():
    with socket.create_server(("127.0.0.1", 0)) as listener:
        port = listener.getsockname()[1]
        assert send_to_peer("127.0.0.1", port, "SYNC create_user a b") is True
        conn, _ = listener.accept()
        with conn:
            assert _read_all(conn) == "SYNC create_user a b"


def test_build_registry_forwards_changes():
    with socket.create_server(("127.0.0.1", 0)) as listener:
        port = listener.getsockname()[1]
        registry = build_registry(TrackerConfig(1, "127.0.0.1", 0, "127.0.0.1", port))
        reply = registry.handle_line("create_user bob secret", Session())
        assert reply == "User bob created successfully\n"
        conn, _ = listener.accept()
        with conn:
            assert _read_all(conn) == "SYNC create_user bob secret"


def _start(server):
    threading.Thread(target=server.serve_forever, daemon=True).start()


def _exchange(sock, text):
    sock.sendall(text.encode())
    return sock.recv(1024).decode()


def test_two_trackers_replicate_users():
    a = CommandServer(("127.0.0.1", 0), GroupRegistry())
    b = CommandServer(("127.0.0.1", 0), GroupRegistry())
    pa, pb = a.server_address[1], b.server_address[1]
    a.registry = build_registry(TrackerConfig(1, "127.0.0.1", pa, "127.0.0.1", pb))
    b.registry = build_registry(TrackerConfig(2, "127.0.0.1", pb, "127.0.0.1", pa))
    _start(a)
    _start(b)
    try:
        with socket.create_connection(("127.0.0.1", pa), timeout=5) as sa, \
                socket.create_connection(("127.0.0.1", pb), timeout=5) as sb:
            assert _exchange(sa, "create_user alice secret") == "User alice created successfully\n"
            deadline = time.monotonic() + 5
            reply = _exchange(sb, "login alice secret")
            while reply == "Error: user does not exist\n" and time.monotonic() < deadline:
                time.sleep(0.02)
                reply = _exchange(sb, "login alice secret")
            assert reply == "User alice logged in successfully\n"
            assert _exchange(sb, "create_user alice secret") == "Error: user already exists\n"
            assert _exchange(sb, "login alice secret") == "Error: already logged in\n"
    finally:
        for srv in (a, b):
            srv.shutdown()
            srv.server_close()


def test_main_usage(capsys):
    assert main([]) == 1
    assert "Usage" in capsys.readouterr().err


def test_main_unknown_tracker(info_file, capsys):
    assert main([str(info_file), "5"]) == 1
    assert "tracker 5" in capsys.readouterr().err