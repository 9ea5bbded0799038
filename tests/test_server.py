import socket
import threading

import pytest

from groupnet.commands import GroupRegistry, Session
from groupnet.server import CommandServer, main


@pytest.fixture
def server():
    srv = CommandServer(("127.0.0.1", 0), GroupRegistry())
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    yield srv
    srv.shutdown()
    srv.server_close()


def _connect(srv):
    return socket.create_connection(srv.server_address[:2], timeout=5)


def _exchange(sock, text):
    sock.sendall(text.encode())
    return sock.recv(1024).decode()


def test_create_login_and_group(server):
    with _connect(server) as sock:
        assert _exchange(sock, "create_user alice secret") == "User alice created successfully\n"
        assert _exchange(sock, "login alice secret") == "User alice logged in successfully\n"
        assert _exchange(sock, "create_group g1") == "Group g1 created successfully\n"
        assert _exchange(sock, "list_groups") == "Groups:\ng1\n"


def test_whitespace_only_is_invalid(server):
    with _connect(server) as sock:
        assert _exchange(sock, "   ") == "Invalid\n"
        assert _exchange(sock, "bogus") == "Unknown or invalid command\n"


def test_login_stays_after_connection_closes(server):
    with _connect(server) as sock:
        _exchange(sock, "create_user alice secret")
        assert _exchange(sock, "login alice secret") == "User alice logged in successfully\n"
    with _connect(server) as sock:
        assert _exchange(sock, "login alice secret") == "Error: user already logged in\n"


def test_sessions_are_per_connection(server):
    with _connect(server) as first, _connect(server) as second:
        _exchange(first, "create_user alice secret")
        _exchange(first, "login alice secret")
        assert _exchange(second, "create_group g1") == "Error: please login first\n"
        assert _exchange(first, "create_group g1") == "Group g1 created successfully\n"


def test_server_shares_registry(server):
    with _connect(server) as sock:
        _exchange(sock, "create_user bob secret")
    reply = server.registry.handle_line("create_user bob secret", Session())
    assert reply == "Error: user already exists\n"


def test_main_reports_bind_failure(capsys):
    with socket.create_server(("127.0.0.1", 0)) as taken:
        port = taken.getsockname()[1]
        assert main(["--host", "127.0.0.1", "--port", str(port)]) == 1
    assert "bind failed" in capsys.readouterr().err