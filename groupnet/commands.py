"""Command handling for the group tracker: users, logins, groups and join requests."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

SYNC_PREFIX = "SYNC"


def tokenize(text: str) -> list[str]:
    """Split a command line into whitespace-separated words."""
    return text.split()


@dataclass
class Session:
    """Per-connection state: the user logged in on this connection, if any."""

    user: str | None = None

    @property
    def logged_in(self) -> bool:
        return bool(self.user)


class GroupRegistry:
    """Shared state of users and groups, and the command language acting on it.

    When ``on_change`` is given, every successful change made by a client is
    passed to it as a ``SYNC ...`` message for a peer tracker, and incoming
    ``SYNC`` commands are applied without being passed on again.
    """

    def __init__(self, on_change: Callable[[str], None] | None = None) -> None:
        self._on_change = on_change
        self._lock = threading.Lock()
        self._users: dict[str, str] = {}
        self._logged_in: dict[str, None] = {}
        self._owners: dict[str, str] = {}
        self._members: dict[str, dict[str, None]] = {}
        self._requests: dict[str, dict[str, None]] = {}

    @property
    def replicating(self) -> bool:
        return self._on_change is not None

    def _publish(self, replicated: bool, *words: str) -> None:
        if self._on_change is not None and not replicated:
            self._on_change(" ".join((SYNC_PREFIX, *words)))

    def handle_line(self, line: str, session: Session) -> str:
        """Run one raw command line for ``session`` and return the reply."""
        return self.handle(tokenize(line), session)

    def end_session(self, session: Session) -> str | None:
        """Detach ``session`` from its connection once the connection closes.

        The user stays marked as logged in, as the tracker keeps no record of
        which connection a login came from. Returns the user that was attached.
        """
        user = session.user
        session.user = None
        return user

    def handle(
        self, tokens: Sequence[str], session: Session, replicated: bool = False
    ) -> str:
        """Run an already tokenized command for ``session`` and return the reply."""
        cmd = list(tokens)
        if not cmd:
            return "Invalid\n"
        name, args = cmd[0], cmd[1:]
        handler = self._HANDLERS.get((name, len(args)))
        if handler is not None:
            return handler(self, args, session, replicated)
        if name == SYNC_PREFIX and self.replicating:
            return self.handle(args, Session(), replicated=True)
        return "Unknown or invalid command\n"

    def _create_user(self, args: list[str], session: Session, replicated: bool) -> str:
        uname, secret = args
        with self._lock:
            if uname in self._users:
                return "Error: user already exists\n"
            self._users[uname] = secret
        self._publish(replicated, "create_user", uname, secret)
        return f"User {uname} created successfully\n"

    def _login(self, args: list[str], session: Session, replicated: bool) -> str:
        uname, secret = args
        with self._lock:
            if uname not in self._users:
                return "Error: user does not exist\n"
            if self._users[uname] != secret:
                return "Error: incorrect password\n"
            if uname in self._logged_in:
                if self.replicating:
                    return "Error: already logged in\n"
                return "Error: user already logged in\n"
            self._logged_in[uname] = None
            session.user = uname
        return f"User {uname} logged in successfully\n"

    def _create_group(self, args: list[str], session: Session, replicated: bool) -> str:
        if not session.logged_in:
            return "Error: please login first\n"
        (gid,) = args
        user = session.user
        assert user is not None
        with self._lock:
            if gid in self._owners:
                return "Error: group already exists\n"
            self._owners[gid] = user
            self._members.setdefault(gid, {})[user] = None
        self._publish(replicated, "create_group", gid, user)
        return f"Group {gid} created successfully\n"

    def _join_group(self, args: list[str], session: Session, replicated: bool) -> str:
        if not session.logged_in:
            return "Error: please login first\n"
        (gid,) = args
        user = session.user
        assert user is not None
        with self._lock:
            if gid not in self._owners:
                return "Error: group does not exist\n"
            if user in self._members.setdefault(gid, {}):
                return "Error: already a member\n"
            self._requests.setdefault(gid, {})[user] = None
        self._publish(replicated, "join_group", gid, user)
        return f"Join request sent for group {gid}\n"

    def _leave_group(self, args: list[str], session: Session, replicated: bool) -> str:
        if not session.logged_in:
            return "Error: please login first\n"
        (gid,) = args
        user = session.user
        assert user is not None
        with self._lock:
            if gid not in self._owners:
                return "Error: group does not exist\n"
            members = self._members.setdefault(gid, {})
            if user not in members:
                return "Error: not a member\n"
            if self._owners[gid] == user:
                return "Error: owner cannot leave the group\n"
            del members[user]
        self._publish(replicated, "leave_group", gid, user)
        return f"User {user} left group {gid}\n"

    def _list_groups(self, args: list[str], session: Session, replicated: bool) -> str:
        with self._lock:
            if not self._owners:
                return "No groups available\n"
            return "Groups:\n" + _lines(self._owners)

    def _list_requests(self, args: list[str], session: Session, replicated: bool) -> str:
        if not session.logged_in:
            return "Error: please login first\n"
        (gid,) = args
        with self._lock:
            if gid not in self._owners:
                return "Error: group does not exist\n"
            if self._owners[gid] != session.user:
                return "Error: only owner can view requests\n"
            pending = self._requests.setdefault(gid, {})
            if not pending:
                return "No pending requests\n"
            return f"Pending requests for group {gid}:\n" + _lines(pending)

    def _accept_request(self, args: list[str], session: Session, replicated: bool) -> str:
        if not session.logged_in:
            return "Error: please login first\n"
        gid, uname = args
        with self._lock:
            if gid not in self._owners:
                return "Error: group does not exist\n"
            if self._owners[gid] != session.user:
                return "Error: only owner can accept requests\n"
            pending = self._requests.setdefault(gid, {})
            if uname not in pending:
                return "Error: no such request\n"
            del pending[uname]
            self._members.setdefault(gid, {})[uname] = None
        self._publish(replicated, "accept_request", gid, uname)
        return f"User {uname} added to group {gid}\n"

    def _logout(self, args: list[str], session: Session, replicated: bool) -> str:
        if not session.logged_in:
            return "Error: no user logged in\n"
        with self._lock:
            uname = session.user
            assert uname is not None
            self._logged_in.pop(uname, None)
            session.user = None
        return f"User {uname} logged out successfully\n"

    _HANDLERS: dict[tuple[str, int], Callable[..., str]] = {
        ("create_user", 2): _create_user,
        ("login", 2): _login,
        ("create_group", 1): _create_group,
        ("join_group", 1): _join_group,
        ("leave_group", 1): _leave_group,
        ("list_groups", 0): _list_groups,
        ("list_requests", 1): _list_requests,
        ("accept_request", 2): _accept_request,
        ("logout", 0): _logout,
    }


def _lines(names: Iterable[str]) -> str:
    return "".join(f"{name}\n" for name in names)